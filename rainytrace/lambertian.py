"""Ideal diffuse reflection and transmission lobes."""

from __future__ import annotations

from typing import Sequence

from rainytrace.bsdf import BxDF, BxDFSample, BxDFType, abs_cos_theta, same_hemisphere
from rainytrace.geometry import Point2, Vector3
from rainytrace.mathutil import INV_PI
from rainytrace.sampling import cosine_sample_hemisphere
from rainytrace.spectrum import Spectrum


class LambertianReflection(BxDF):
    """Scatters incident light equally in all directions of the same hemisphere."""

    def __init__(self, r: Spectrum) -> None:
        super().__init__(BxDFType.REFLECTION | BxDFType.DIFFUSE)
        self.r = r

    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        return self.r * INV_PI

    def rho_hd(self, wo: Vector3, samples: Sequence[Point2]) -> Spectrum:
        """The reflectance is known in closed form: it is ``r``."""
        return self.r

    def rho_hh(
        self, samples1: Sequence[Point2], samples2: Sequence[Point2]
    ) -> Spectrum:
        """The reflectance is known in closed form: it is ``r``."""
        return self.r


class LambertianTransmission(BxDF):
    """Scatters transmitted light equally in all directions of the other hemisphere."""

    def __init__(self, t: Spectrum) -> None:
        super().__init__(BxDFType.TRANSMISSION | BxDFType.DIFFUSE)
        self.t = t

    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        return self.t * INV_PI

    def rho_hd(self, wo: Vector3, samples: Sequence[Point2]) -> Spectrum:
        """The transmittance is known in closed form: it is ``t``."""
        return self.t

    def rho_hh(
        self, samples1: Sequence[Point2], samples2: Sequence[Point2]
    ) -> Spectrum:
        """The transmittance is known in closed form: it is ``t``."""
        return self.t

    def sample_f(self, wo: Vector3, u: Point2) -> BxDFSample:
        """Cosine-sample a direction in the hemisphere opposite to ``wo``."""
        wi = cosine_sample_hemisphere(u)
        if wo.z > 0:
            wi = Vector3(wi.x, wi.y, -wi.z)
        return BxDFSample(self.f(wo, wi), wi, self.pdf(wo, wi), self.type)

    def pdf(self, wo: Vector3, wi: Vector3) -> float:
        return 0.0 if same_hemisphere(wo, wi) else abs_cos_theta(wi) * INV_PI