"""Seed generation from hardware counters and an optional entropy source."""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable, Iterable

_U32 = 0xFFFFFFFF
_U64 = (1 << 64) - 1


class SeedStatus(enum.IntEnum):
    """Status in bits 31:30 of the entropy source register."""

    BIST = 0
    WAIT = 1
    ES16 = 2
    DEAD = 3


def avalanche_mix(h: int) -> int:
    """Spread the bits of a 64-bit value (the SplitMix64 finaliser)."""
    h &= _U64
    h ^= h >> 30
    h = (h * 0xBF58476D1CE4E5B9) & _U64
    h ^= h >> 27
    h = (h * 0x94D049BB133111EB) & _U64
    h ^= h >> 31
    return h


class EntropyPool:
    """Accumulates mixed counter readings into a shared state.

    ``counters`` are callables returning counter values (cycle, retired
    instruction and platform timer counts). ``seed_csr`` optionally returns
    the 32-bit entropy source register; its low 16 bits are used only when
    the status reads ES16.
    """

    def __init__(
        self,
        counters: Iterable[Callable[[], int]],
        seed_csr: Callable[[], int] | None = None,
    ) -> None:
        self._counters = tuple(counters)
        self._seed_csr = seed_csr
        self._lock = threading.Lock()
        self._state = 0

    @property
    def state(self) -> int:
        """The current 64-bit accumulator."""
        return self._state

    def get_seed(self) -> int:
        """Gather entropy, fold it into the state and return 32 bits of it."""
        seed = 0
        for counter in self._counters:
            seed ^= counter() & _U64
        if self._seed_csr is not None:
            seed_val = self._seed_csr() & _U32
            if SeedStatus(seed_val >> 30) is SeedStatus.ES16:
                seed ^= seed_val & 0xFFFF
        with self._lock:
            self._state ^= avalanche_mix(seed)
            return self._state & _U32