"""Seeded pseudo-random sequence generator (Mulberry32).

The generator is the sole source of entropy for the engine.  Given the same
seed and the same sequence of calls it yields identical values on every
platform, because all arithmetic is explicitly truncated to 32 bits.

Example::

    rng = SeededRNG(42)
    rng.pick(["a", "b", "c"])
    rng.pick_weighted([("postgres", 40), ("sqlite", 25)])
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

from procgen.engine.errors import InvalidSeed

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_32 = 4294967296.0

DEFAULT_CHARSET = "abcdefghijklmnopqrstuvwxyz0123456789"


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


class SeededRNG:
    """Deterministic generator keyed by a non-negative integer seed."""

    def __init__(self, seed: int) -> None:
        if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
            raise InvalidSeed(seed)
        self.seed = seed
        self._initial = seed & _MASK
        self._state = self._initial

    # -- Core draw -----------------------------------------------------------

    def next_uint32(self) -> int:
        """Advance the cursor and return the next raw 32-bit value."""
        self._state = (self._state + _INCREMENT) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return (t ^ (t >> 14)) & _MASK

    def float(self) -> float:
        """Return a float in ``[0, 1)``."""
        return self.next_uint32() / _TWO_32

    def int(self, low: int, high: int) -> int:
        """Return an integer in the inclusive range ``[low, high]``."""
        if low > high:
            raise ValueError(f"Empty range: {low} > {high}")
        return math.floor(self.float() * (high - low + 1)) + low

    def bool(self, probability: float = 0.5) -> bool:
        """Return ``True`` with the given probability."""
        return self.float() < probability

    # -- Selection -------------------------------------------------------------

    def pick(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self.int(0, len(items) - 1)]

    def pick_weighted(self, items: Sequence[tuple[T, float]]) -> T:
        """Pick one value from ``(value, weight)`` pairs.

        The walk follows the order of *items*, so callers must pass a
        deterministic ordering (never a set or an unordered mapping view).
        """
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        if any(weight < 0 for _, weight in items):
            raise ValueError("Weights must be non-negative")
        total = sum(weight for _, weight in items)
        if total <= 0:
            raise ValueError("Total weight must be positive")

        threshold = self.float() * total
        for value, weight in items:
            threshold -= weight
            if threshold <= 0:
                return value
        return items[-1][0]

    def pick_multiple(self, items: Sequence[T], count: int) -> list[T]:
        """Pick *count* distinct elements (order is part of the draw)."""
        return self.shuffle(items)[: max(0, count)]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy of *items*."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.int(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def string(self, length: int, charset: str = DEFAULT_CHARSET) -> str:
        """Return a random string drawn from *charset*."""
        return "".join(charset[self.int(0, len(charset) - 1)] for _ in range(length))

    # -- Derivation ------------------------------------------------------------

    def fork(self) -> "SeededRNG":
        """Return an independent generator seeded from the next draw."""
        return SeededRNG(self.next_uint32())

    def reset(self) -> None:
        """Rewind to the initial state."""
        self._state = self._initial

    def __repr__(self) -> str:
        return f"SeededRNG(seed={self.seed})"
