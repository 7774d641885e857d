"""Deterministic random streams for procedural generation."""

from __future__ import annotations

import math
import random


class SeededRandom:
    """A reproducible stream of floats in [0, 1) drawn from an integer seed.

    Each generator owns its own stream. Use ``derive`` to get an independent
    stream for a sub-task instead of sharing one between generators.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._rng = random.Random(self.seed)

    def next(self) -> float:
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self._rng.random()

    def index(self, count: int) -> int:
        """Uniform integer in [0, count)."""
        if count <= 0:
            return 0
        return min(int(self._rng.random() * count), count - 1)

    def direction(self) -> tuple[float, float, float]:
        """Isotropic unit vector (theta drawn before phi)."""
        theta = self._rng.random() * math.tau
        phi = math.acos(2.0 * self._rng.random() - 1.0)
        return (
            math.sin(phi) * math.cos(theta),
            math.sin(phi) * math.sin(theta),
            math.cos(phi),
        )

    def derive(self, offset: int) -> SeededRandom:
        """Independent stream for a sub-task, seeded at ``seed + offset``."""
        return SeededRandom(self.seed + offset)


def checksum(text: str) -> int:
    """Sum of character codes, used to seed display-only streams."""
    return sum(ord(ch) for ch in text)


def polynomial_hash(text: str) -> int:
    """31-polynomial string hash folded to 32 bits."""
    acc = 0
    for ch in text:
        acc = (acc * 31 + ord(ch)) & 0xFFFFFFFF
    return acc
