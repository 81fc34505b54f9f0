"""
Seeded pseudo-random stream.

The same seed string always yields the same sequence, on every platform:
the state is derived from a SHA-256 digest and advanced with an integer
linear congruential recurrence (Python ints keep it exact).
"""

import hashlib
import math
from typing import Sequence, TypeVar

T = TypeVar('T')

MODULUS = 2 ** 32
MULTIPLIER = 1664525
INCREMENT = 1013904223
SEED_HEX_DIGITS = 15


def seed_state(seed: str) -> int:
    digest = hashlib.sha256(seed.encode('utf-8')).hexdigest()
    return int(digest[:SEED_HEX_DIGITS], 16)


class SeededRandom:
    __slots__ = ('seed', '_state', 'draws')

    def __init__(self, seed: str):
        if not isinstance(seed, str):
            raise TypeError(f"seed must be a string, got {type(seed).__name__}")
        self.seed = seed
        self._state = seed_state(seed)
        self.draws = 0

    def next(self) -> float:
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        self.draws += 1
        return self._state / MODULUS

    def next_float(self, lo: float, hi: float) -> float:
        return lo + self.next() * (hi - lo)

    def next_int(self, lo: int, hi: int) -> int:
        """Integer in ``[lo, hi)``."""
        return math.floor(self.next_float(lo, hi))

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self.next_int(0, len(items))]

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed!r}, draws={self.draws})"
