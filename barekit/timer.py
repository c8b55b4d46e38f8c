"""Nanosecond timekeeping built on free-running hardware counters.

Two kinds of timer exist: the platform timer (mtimer), shared by all harts,
and the per-hart cycle counter. Conversions between counter ticks and
nanoseconds avoid division by using precomputed multiplier/shift pairs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

NSECS_IN_SEC = 1_000_000_000
CLOCKS_PER_SEC = 1_000_000_000

_MAXDELAY_SECS = 10
_U32 = 0xFFFFFFFF
_U64 = (1 << 64) - 1


class _Counter(Protocol):
    def read(self) -> int: ...

    def reset(self) -> None: ...


@dataclass(frozen=True)
class Timespec:
    """A time value split into whole seconds and nanoseconds."""

    tv_sec: int = 0
    tv_nsec: int = 0

    @classmethod
    def from_nsecs(cls, nsecs: int) -> Timespec:
        """Split a nanosecond count into seconds and nanoseconds."""
        sec, nsec = divmod(nsecs, NSECS_IN_SEC)
        return cls(sec, nsec)

    def to_nsecs(self) -> int:
        """Total number of nanoseconds."""
        return self.tv_sec * NSECS_IN_SEC + self.tv_nsec


class TimerId(enum.IntEnum):
    """Timers that can be sampled."""

    RTC = 0
    MTIMER = 1
    CYCLES = 2


@dataclass(frozen=True)
class TimerSpec:
    """Resolution and conversion factors for a clock of a given frequency."""

    res: Timespec
    clock_freq: int
    mult_c2ns: int
    shift_c2ns: int
    mult_ns2c: int
    shift_ns2c: int
    mult_c2c: int
    shift_c2c: int

    def cycles_to_nsecs(self, cycles: int) -> int:
        """Convert counter ticks to nanoseconds."""
        return ((cycles * self.mult_c2ns) & _U64) >> self.shift_c2ns

    def nsecs_to_cycles(self, nsecs: int) -> int:
        """Convert nanoseconds to counter ticks."""
        return ((nsecs * self.mult_ns2c) & _U64) >> self.shift_ns2c

    def nsecs_to_clock(self, nsecs: int) -> int:
        """Convert nanoseconds to clock() ticks."""
        return ((nsecs * self.mult_c2c) & _U64) >> self.shift_c2c


def _shift_accumulator(rate: int) -> int:
    return 32 - ((_MAXDELAY_SECS * rate) >> 32).bit_length()


def _mult_shift(numer: int, denom: int, accumulator: int) -> tuple[int, int]:
    mult = 0
    for shift in range(32, 0, -1):
        mult = ((numer << shift) + (denom >> 1)) // denom
        if (mult >> accumulator) == 0:
            return mult & _U32, shift
    return mult & _U32, 0


def _resolution(clock_freq: int) -> Timespec:
    divisor = NSECS_IN_SEC
    while divisor >= 100:
        if clock_freq >= divisor:
            return Timespec(0, NSECS_IN_SEC // divisor)
        divisor //= 10
    return Timespec(1, 0)


def compute_timer_spec(clock_freq: int) -> TimerSpec:
    """Compute the resolution and multiplier/shift pairs for a clock.

    Intervals of up to ten seconds convert without overflow.
    """
    if not 0 < clock_freq <= _U32:
        raise ValueError(f"clock frequency out of range: {clock_freq}")

    acc = _shift_accumulator(clock_freq)
    mult_c2ns, shift_c2ns = _mult_shift(NSECS_IN_SEC, clock_freq, acc)

    acc = _shift_accumulator(NSECS_IN_SEC)
    mult_ns2c, shift_ns2c = _mult_shift(clock_freq, NSECS_IN_SEC, acc)
    mult_c2c, shift_c2c = _mult_shift(CLOCKS_PER_SEC, NSECS_IN_SEC, acc)

    return TimerSpec(
        res=_resolution(clock_freq),
        clock_freq=clock_freq,
        mult_c2ns=mult_c2ns,
        shift_c2ns=shift_c2ns,
        mult_ns2c=mult_ns2c,
        shift_ns2c=shift_ns2c,
        mult_c2c=mult_c2c,
        shift_c2c=shift_c2c,
    )


def timespec_sub(a: Timespec, b: Timespec) -> Timespec:
    """Return a - b, borrowing a second when the nanoseconds underflow."""
    sec = a.tv_sec - b.tv_sec
    nsec = a.tv_nsec - b.tv_nsec
    if nsec < 0:
        sec -= 1
        nsec += NSECS_IN_SEC
    if nsec >= NSECS_IN_SEC:
        sec += nsec // NSECS_IN_SEC
        nsec %= NSECS_IN_SEC
    elif nsec < 0 < sec:
        sec -= 1
        nsec += NSECS_IN_SEC
    return Timespec(sec, nsec)


class Timer:
    """Samples a cycle counter and an optional platform timer as nanoseconds.

    Counters provide ``read()`` and ``reset()``; the cycle counter also
    provides ``enable()``. Without a platform timer (no counter, or a zero
    frequency) the RTC and MTIMER ids fall back to the cycle counter.
    """

    def __init__(self, hart_freq, mtimer_freq, cycle_counter, mtimer_counter) -> None:
        self._hart_freq = hart_freq
        self._mtimer_freq = mtimer_freq
        self._cycles = cycle_counter
        self._mtimer = mtimer_counter if mtimer_freq and mtimer_counter is not None else None
        self._specs: dict[bool, TimerSpec] = {}
        self._last_platform_tval = 0
        self._last_cyclecount_tval = 0

    @property
    def has_mtimer(self) -> bool:
        """Whether a platform timer is available."""
        return self._mtimer is not None

    def _uses_mtimer(self, timer_id) -> bool:
        timer_id = TimerId(timer_id)
        return timer_id in (TimerId.RTC, TimerId.MTIMER) and self._mtimer is not None

    def spec(self, timer_id) -> TimerSpec:
        """Conversion parameters of the timer, computed on first use."""
        platform = self._uses_mtimer(timer_id)
        spec = self._specs.get(platform)
        if spec is None:
            freq = self._mtimer_freq if platform else self._hart_freq
            spec = self._specs[platform] = compute_timer_spec(freq)
        return spec

    def resolution(self, timer_id) -> Timespec:
        """Resolution of the timer."""
        return self.spec(timer_id).res

    def _sample(self, timer_id) -> tuple[int, TimerSpec]:
        spec = self.spec(timer_id)
        if self._uses_mtimer(timer_id):
            if self._last_platform_tval == 0:
                self._mtimer.reset()
            cycles = self._mtimer.read()
            self._mtimer.reset()
            tval = (spec.cycles_to_nsecs(cycles) + self._last_platform_tval) & _U64
            self._last_platform_tval = tval
        else:
            if self._last_cyclecount_tval == 0:
                self._cycles.reset()
                self._cycles.enable()
            cycles = self._cycles.read()
            self._cycles.reset()
            tval = (spec.cycles_to_nsecs(cycles) + self._last_cyclecount_tval) & _U64
            self._last_cyclecount_tval = tval
        return tval, spec

    def nsecs(self, timer_id) -> int:
        """Nanoseconds accumulated on the timer since it was first sampled."""
        return self._sample(timer_id)[0]

    def num_ticks(self, timer_id) -> int:
        """Elapsed time on the timer in clock() ticks."""
        nsecs, spec = self._sample(timer_id)
        return spec.nsecs_to_clock(nsecs)

    def nsecs_to_cycles(self, timer_id, nsecs: int) -> int:
        """Number of timer ticks in the given nanoseconds."""
        if nsecs < 0:
            raise ValueError("nanoseconds must not be negative")
        return self.spec(timer_id).nsecs_to_cycles(nsecs)

    def nanosleep(self, timer_id, nsecs: int) -> None:
        """Busy-wait until the timer's counter has advanced by ``nsecs``."""
        cycles_to_wait = self.nsecs_to_cycles(timer_id, nsecs)
        counter = self._mtimer if self._uses_mtimer(timer_id) else self._cycles
        current = counter.read()
        target = current + cycles_to_wait
        while target > current:
            current = counter.read()