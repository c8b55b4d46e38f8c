# barekit

barekit is a host-side model of a small bare-metal RISC-V SDK. It uses only
the standard library. It contains these modules:

- `barekit.errors`: the `Errno` numbers, which use the Linux/POSIX values, and
  `SdkError`, which carries one of them. `error_for(code)` also accepts
  negated codes.
- `barekit.targets`: the constants of the `qemu`, `qemu-aplic`, `qemu-aia`
  and `riser` boards, held as `TargetConfig`.
- `barekit.timer`: conversion between counter ticks and nanoseconds with
  fixed-point multiplier/shift pairs. It provides `compute_timer_spec`,
  `Timer`, `Timespec` and `timespec_sub`.
- `barekit.rng`: `EntropyPool`, which folds counter readings and an optional
  Zkr-style seed register into a shared state through `avalanche_mix`.
- `barekit.uart`: `Uart16550`, a driver for an 8250/16550A-compatible UART
  that runs over a `RegisterFile`.
- `barekit.printf_spec`, `barekit.printf_output`, `barekit.printf_numbers`
  and `barekit.printf`: a printf family with `%b`/`%B`, `%wN`/`%wfN` length
  modifiers, shortest round-trip doubles and hexadecimal floats (`%a`).
- `barekit.menu`: the interactive test-suite menu.

## Installation

```
pip install .
pip install ".[test]"   # to run the tests
```

## Formatting

```python
from barekit.printf import sprintf, snprintf, printf

sprintf("%08.3f|%-6x|%#o", 3.14159, 255, 8)   # '0003.142|ff    |010'
sprintf("%b", 10)                              # '1010'
text, count = snprintf(4, "%d", 123456)        # text == '123', count == 6
printf("%s\n", "hello")                        # writes to stdout, returns 6
```

`snprintf(size, ...)` keeps at most `size - 1` characters. It still reports
the full length the output needs. `%s` with `None` prints `(null)`. Long
doubles (`%Lf`) print `(n/a)`.

A malformed conversion raises `barekit.printf_spec.FormatError`, which is an
`SdkError`. Its `errno` is `EINVAL` for errors such as a doubled `.`, and
`ENOTSUP` for `%n`, `%m`, `$` and `%lc`/`%ls`.

## Targets and timers

```python
from barekit.targets import get_target, list_targets
from barekit.timer import Timer, TimerId

cfg = get_target("qemu")
cfg.uart_divisor()            # 2
cfg.interrupt_controller()    # InterruptController.PLIC
cfg.ram_base()                # last 2 MiB of system RAM
list_targets()                # ['qemu', 'qemu-aia', 'qemu-aplic', 'riser']

class Counter:
    def __init__(self):
        self.value = 0
    def read(self):
        return self.value
    def reset(self):
        self.value = 0
    def enable(self):
        pass

timer = Timer(cfg.hart_freq, cfg.mtimer_freq, Counter(), Counter())
timer.resolution(TimerId.CYCLES)     # Timespec(tv_sec=0, tv_nsec=1)
timer.nsecs_to_cycles(TimerId.MTIMER, 1_000_000)
```

Counters must provide `read()` and `reset()`, and the cycle counter must also
provide `enable()`. If there is no platform timer counter, or its frequency is
zero, `TimerId.RTC` and `TimerId.MTIMER` use the cycle counter instead.
`nanosleep` busy-waits on the counter.

## UART

```python
from barekit.uart import RegisterFile, Uart16550

uart = Uart16550(RegisterFile(), clock_hz=3686400, baud_rate=115200)
uart.init()
```

`RegisterFile` takes `load(address, width)` and `store(address, value, width)`
callables for bus access. Without them, it keeps the registers in memory.
`RegisterFile.for_target(cfg)` lays the registers out as the target
describes. `getc()` returns `None` when no byte has arrived. It raises
`UartError` (`EIO`) when the line status reports an error. `putc` sends
`"\r"` after every `"\n"`.

## Test-suite menu

```
barekit-testsuite
```

This command runs the menu on standard input and output. Choose `1` for
library tests or `2` for platform tests, then choose a test by its number.
Enter `0` to go back to the category menu. The menu ends when input runs out.
The command exits with status 0 if no test failed and 1 otherwise.

## What it does not do

barekit does not touch real hardware. The counters, registers and the seed
register are whatever callables you pass in. The `barekit-testsuite` command
starts with an empty `TestRegistry`, so its menus list no tests. To have
tests to run, register them with `TestRegistry.register(category,
description, fn)` and drive `TestMenu` from your own code.