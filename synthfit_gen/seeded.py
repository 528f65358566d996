"""Deterministic random streams for fixture generation.

Every "random" value in a dataset comes from a :class:`RandomStream` keyed by a
string (usually a date or activity id plus a purpose suffix), so the same seed string
always yields the same sequence regardless of call site or process.
"""
from __future__ import annotations
import numpy as np

MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5
_TWO_32 = 4294967296.0

MONDAY = 0
TUESDAY = 1
THURSDAY = 3
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


def hash_string(seed: str) -> int:
    """31-multiplier polynomial hash over UTF-16 code units, as a non-negative int32."""
    h = 0
    units = seed.encode("utf-16-le")
    for i in range(0, len(units), 2):
        code = units[i] | (units[i + 1] << 8)
        h = (h * 31 + code) & MASK32
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


class RandomStream:
    """mulberry32 generator with 32-bit state; ``next()`` returns a float in [0, 1)."""

    __slots__ = ("seed", "_state")

    def __init__(self, seed: str | int):
        self.seed = seed
        self._state = (hash_string(seed) if isinstance(seed, str) else int(seed)) & MASK32

    def next(self) -> float:
        self._state = (self._state + _GOLDEN) & MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / _TWO_32

    __call__ = next

    def uniform(self, n: int) -> np.ndarray:
        """Next ``n`` draws, in draw order."""
        return np.fromiter((self.next() for _ in range(max(0, n))), dtype=float, count=max(0, n))

    def centered(self, n: int, width: float) -> np.ndarray:
        # (r - 0.5) * width, vectorised
        return (self.uniform(n) - 0.5) * width

    def index(self, n: int) -> int:
        """Uniform index in [0, n)."""
        return min(int(self.next() * n), n - 1) if n > 0 else 0


def is_rest_day(date_str: str, weekday: int, monday_prob: float = 0.8, thursday_prob: float = 0.5) -> bool:
    value = RandomStream(date_str + "-rest").next()
    if weekday == MONDAY:
        return value < monday_prob
    if weekday == THURSDAY:
        return value < thursday_prob
    return False


def time_of_day(date_str: str) -> tuple[int, int]:
    """Start (hour, minute): 07:00-09:59."""
    rs = RandomStream(date_str + "-time")
    hours = 7 + int(rs.next() * 3)
    minutes = int(rs.next() * 60)
    return hours, minutes


def activity_id(date_str: str, day_index: int) -> str:
    return f"demo-{date_str}-{day_index}"
