"""Deterministic random numbers from an integer seed.

Implements mulberry32 with 32-bit wraparound arithmetic so that a given seed
produces the same draws as the browser previewer, call for call.
"""

import math

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a * b (Math.imul, unsigned view)."""
    return (a * b) & _MASK


class SeededRandom:
    def __init__(self, seed: int):
        self._state = seed & _MASK

    def next(self) -> float:
        """Return a float in [0, 1)."""
        self._state = (self._state + _INCREMENT) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK) ^ t
        return (t ^ (t >> 14)) / _TWO_POW_32

    def range(self, min_value: float, max_value: float) -> float:
        """Uniform float in [min_value, max_value)."""
        return min_value + self.next() * (max_value - min_value)

    def int_range(self, min_value: int, max_value: int) -> int:
        """Uniform integer in [min_value, max_value], both ends inclusive."""
        return math.floor(min_value + self.next() * (max_value - min_value + 1))

    def pick(self, items):
        """Uniform choice from a sequence. Returns None for an empty one."""
        if not items:
            return None
        return items[math.floor(self.next() * len(items))]


def create_random(seed: int) -> SeededRandom:
    return SeededRandom(seed)
