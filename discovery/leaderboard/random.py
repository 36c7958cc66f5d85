"""
Deterministic hashing and pseudo-random numbers for leaderboard generation
All arithmetic is 32-bit unsigned so results are stable across processes
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit integer product"""
    return ((a & MASK_32) * (b & MASK_32)) & MASK_32


def hash_string(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of text"""
    h = FNV_OFFSET_BASIS
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, FNV_PRIME)
    return h


class Mulberry32:
    """Mulberry32 generator; each instance owns its state"""

    def __init__(self, seed: int):
        self.state = seed & MASK_32

    def random(self) -> float:
        """Next float in [0, 1)"""
        self.state = (self.state + 0x6D2B79F5) & MASK_32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / 4294967296

    def randint_below(self, n: int) -> int:
        return math.floor(self.random() * n)

    @classmethod
    def from_key(cls, key: str) -> "Mulberry32":
        return cls(hash_string(key))


def pick(rng: Mulberry32, seq: Sequence[T]) -> T:
    return seq[rng.randint_below(len(seq))]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
