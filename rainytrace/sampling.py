"""Sample warping functions, MIS heuristics and piecewise-constant distributions."""

from __future__ import annotations

import math
from itertools import accumulate
from typing import Iterable, List, NamedTuple

from rainytrace.geometry import Point2, Vector3
from rainytrace.mathutil import (
    INV_2PI,
    INV_4PI,
    INV_PI,
    PI,
    PI_OVER_2,
    PI_OVER_4,
    find_interval,
)


def uniform_sample_sphere(u: Point2) -> Vector3:
    """Map a point of ``[0,1)^2`` uniformly onto the unit sphere."""
    z = 1 - 2 * u[0]
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2 * PI * u[1]
    return Vector3(r * math.cos(phi), r * math.sin(phi), z)


def uniform_sample_hemisphere(u: Point2) -> Vector3:
    """Map a point of ``[0,1)^2`` uniformly onto the hemisphere ``z >= 0``."""
    z = u[0]
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2 * PI * u[1]
    return Vector3(r * math.cos(phi), r * math.sin(phi), z)


def uniform_sphere_pdf() -> float:
    """Solid-angle density of uniform sphere sampling."""
    return INV_4PI


def uniform_hemisphere_pdf() -> float:
    """Solid-angle density of uniform hemisphere sampling."""
    return INV_2PI


def uniform_cone_pdf(theta_max: float) -> float:
    """Density of uniform cone sampling; ``theta_max`` is the cosine bound."""
    return 1 / (2 * PI * (1 - theta_max))


def concentric_sample_disk(u: Point2) -> Point2:
    """Map a point of ``[0,1)^2`` onto the unit disk with low distortion."""
    ox = 2.0 * u.x - 1.0
    oy = 2.0 * u.y - 1.0
    if ox == 0 and oy == 0:
        return Point2(0.0, 0.0)
    if abs(ox) > abs(oy):
        r = ox
        theta = PI_OVER_4 * (oy / ox)
    else:
        r = oy
        theta = PI_OVER_2 - PI_OVER_4 * (ox / oy)
    return Point2(r * math.cos(theta), r * math.sin(theta))


def cosine_sample_hemisphere(u: Point2) -> Vector3:
    """Cosine-weighted direction on the hemisphere ``z >= 0``."""
    d = concentric_sample_disk(u)
    z = math.sqrt(max(0.0, 1 - d.x * d.x - d.y * d.y))
    return Vector3(d.x, d.y, z)


def cosine_hemisphere_pdf(cos_theta: float) -> float:
    """Solid-angle density of cosine-weighted hemisphere sampling."""
    return cos_theta * INV_PI


def balance_heuristic(nf: int, f_pdf: float, ng: int, g_pdf: float) -> float:
    """Balance-heuristic weight for multiple importance sampling."""
    return (nf * f_pdf) / (nf * f_pdf + ng * g_pdf)


def power_heuristic(nf: int, f_pdf: float, ng: int, g_pdf: float) -> float:
    """Power-heuristic weight (exponent two) for multiple importance sampling."""
    f = nf * f_pdf
    g = ng * g_pdf
    return (f * f) / (f * f + g * g)


class ContinuousSample(NamedTuple):
    """Result of sampling a distribution as a continuous variable."""

    value: float
    pdf: float
    offset: int


class DiscreteSample(NamedTuple):
    """Result of sampling a distribution as a discrete index."""

    index: int
    pdf: float
    u_remapped: float


class Distribution1D:
    """Piecewise-constant 1D distribution sampled by CDF inversion."""

    def __init__(self, func: Iterable[float]) -> None:
        self.func: List[float] = [float(v) for v in func]
        n = len(self.func)
        if n == 0:
            raise ValueError("a distribution needs at least one value")
        self.cdf: List[float] = list(accumulate((v / n for v in self.func), initial=0.0))
        self.func_int: float = self.cdf[n]
        if self.func_int == 0:
            self.cdf = [i / n for i in range(n + 1)]
        else:
            self.cdf = [0.0] + [c / self.func_int for c in self.cdf[1:]]

    def count(self) -> int:
        """Number of pieces in the distribution."""
        return len(self.func)

    def _offset(self, u: float) -> int:
        cdf = self.cdf
        return find_interval(len(cdf), lambda index: cdf[index] <= u)

    def sample_continuous(self, u: float) -> ContinuousSample:
        """Sample a value in ``[0, 1)`` with density proportional to the function."""
        offset = self._offset(u)
        du = u - self.cdf[offset]
        width = self.cdf[offset + 1] - self.cdf[offset]
        if width > 0:
            du /= width
        pdf = self.func[offset] / self.func_int if self.func_int > 0 else 0.0
        return ContinuousSample((offset + du) / self.count(), pdf, offset)

    def sample_discrete(self, u: float) -> DiscreteSample:
        """Pick a piece with probability proportional to its function value.

        ``u_remapped`` is ``u`` rescaled to ``[0, 1]`` within the chosen piece.
        """
        offset = self._offset(u)
        n = self.count()
        pdf = self.func[offset] / (self.func_int * n) if self.func_int > 0 else 0.0
        width = self.cdf[offset + 1] - self.cdf[offset]
        u_remapped = (u - self.cdf[offset]) / width if width > 0 else 0.0
        if not 0.0 <= u_remapped <= 1.0:
            raise ValueError(f"sample {u!r} lies outside the distribution's range")
        return DiscreteSample(offset, pdf, u_remapped)

    def discrete_pdf(self, index: int) -> float:
        """Probability of picking piece ``index``."""
        if not 0 <= index < self.count():
            raise IndexError(f"distribution index out of range: {index}")
        return self.func[index] / (self.func_int * self.count())