"""Host-side model of a bare-metal RISC-V SDK: targets, timers, entropy, UART, printf and a test menu."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "targets",
    "timer",
    "rng",
    "uart",
    "printf_spec",
    "printf_output",
    "printf_numbers",
    "printf",
    "menu",
]