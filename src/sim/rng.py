# src/sim/rng.py
"""
Random sources.

SeededRNG drives everything that decides gameplay (obstacle geometry) and must
produce the same stream on every platform for a given seed, so the daily
challenge is fair. CosmeticRNG is for visuals only (stars, particles) and is
never seeded. They are separate types so one cannot be passed where the other
is expected without it showing up in review (and the obstacle generator checks).
"""
from __future__ import annotations
import math
import random

MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a*b (unsigned view)."""
    return (a * b) & MASK32


class SeededRNG:
    """
    mulberry32: 32-bit additive step followed by xor-shift/multiply mixing.
    The bit-level algorithm is part of the seed-sharing contract; do not change it.
    """

    def __init__(self, seed: int):
        self.state = int(seed) & MASK32

    def next(self) -> int:
        self.state = (self.state + _INCREMENT) & MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return (t ^ (t >> 14)) & MASK32

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next() / _TWO_POW_32

    def next_int(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi)."""
        return math.floor(self.next_float() * (hi - lo) + lo)


class CosmeticRNG:
    """Non-deterministic source for decoration. Never feeds simulation state."""

    def __init__(self):
        self._rng = random.Random()

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, lo: float, hi: float) -> float:
        return self._rng.uniform(lo, hi)
