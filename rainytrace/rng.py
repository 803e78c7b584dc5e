"""Seeded pseudo-random number generator."""

from __future__ import annotations

import random

from rainytrace.geometry import Point2

DOUBLE_ONE_MINUS_EPSILON = 0.99999999999999989
FLOAT_ONE_MINUS_EPSILON = 0.99999994
ONE_MINUS_EPSILON = DOUBLE_ONE_MINUS_EPSILON

_INT_MAX = 2**31 - 1


class RNG:
    """Deterministic generator of integers and uniform floats."""

    def __init__(self, seed: int = 1234) -> None:
        self._rng = random.Random(seed)

    def get_int(self) -> int:
        """Uniform integer in ``[0, 2^31 - 1]``."""
        return self._rng.randint(0, _INT_MAX)

    def get_uint(self) -> int:
        """Uniform unsigned 32-bit integer."""
        return self._rng.getrandbits(32)

    def get_1d(self) -> float:
        """Uniform float in ``[0, 1)``."""
        return self._rng.random()

    def get_2d(self) -> Point2:
        """Point with both coordinates uniform in ``[0, 1)``."""
        x = self.get_1d()
        y = self.get_1d()
        return Point2(x, y)