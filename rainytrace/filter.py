"""Pixel reconstruction filters."""

from __future__ import annotations

import abc
import math

from rainytrace.geometry import Point2
from rainytrace.mathutil import PI


class Filter(abc.ABC):
    """A reconstruction filter with a rectangular support of half-size ``radius``."""

    def __init__(self, radius: Point2) -> None:
        self.radius = radius
        self.inv_radius = Point2(1.0 / radius.x, 1.0 / radius.y)

    @abc.abstractmethod
    def evaluate(self, p: Point2) -> float:
        """Filter weight at offset ``p`` from the filter's centre."""


class BoxFilter(Filter):
    """Constant weight over the whole support."""

    def __init__(self, radius: Point2 = Point2(0.5, 0.5)) -> None:
        super().__init__(radius)

    def evaluate(self, p: Point2) -> float:
        return 1.0


class GaussianFilter(Filter):
    """Gaussian shifted down so that it reaches zero at the support's edge."""

    def __init__(self, radius: Point2 = Point2(1.0, 1.0), alpha: float = 1.0) -> None:
        super().__init__(radius)
        self.alpha = alpha
        self._exp_x = math.exp(-alpha * radius.x * radius.x)
        self._exp_y = math.exp(-alpha * radius.y * radius.y)

    def _gaussian(self, d: float, expv: float) -> float:
        return max(0.0, math.exp(-self.alpha * d * d) - expv)

    def evaluate(self, p: Point2) -> float:
        return self._gaussian(p.x, self._exp_x) * self._gaussian(p.y, self._exp_y)


class LanczosSincFilter(Filter):
    """Sinc filter windowed by a wider sinc of width ``tau``."""

    def __init__(self, radius: Point2 = Point2(2.0, 2.0), tau: float = 1.5) -> None:
        super().__init__(radius)
        self.tau = tau

    @staticmethod
    def _sinc(x: float) -> float:
        x = abs(x)
        if x < 1e-5:
            return 1.0
        return math.sin(PI * x) / (PI * x)

    def _windowed_sinc(self, x: float, radius: float) -> float:
        x = abs(x)
        if x > radius:
            return 0.0
        return self._sinc(x) * self._sinc(x / self.tau)

    def evaluate(self, p: Point2) -> float:
        return self._windowed_sinc(p.x, self.radius.x) * self._windowed_sinc(
            p.y, self.radius.y
        )