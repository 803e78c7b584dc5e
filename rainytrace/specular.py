"""Perfectly specular reflection and transmission lobes."""

from __future__ import annotations

from rainytrace.bsdf import BxDF, BxDFSample, BxDFType, abs_cos_theta, cos_theta
from rainytrace.fresnel import Fresnel, FresnelDielectric, fr_dielectric
from rainytrace.geometry import Point2, Vector3, faceforward, refract
from rainytrace.mathutil import TransportMode
from rainytrace.spectrum import Spectrum


def _no_sample() -> BxDFSample:
    return BxDFSample(Spectrum(0.0), Vector3(), 0.0, BxDFType(0))


def _refracted(
    wo: Vector3, eta_a: float, eta_b: float
) -> "tuple[Vector3, float, float] | None":
    """Transmitted direction and the incident/transmitted indices, or None on TIR."""
    entering = cos_theta(wo) > 0
    eta_i = eta_a if entering else eta_b
    eta_t = eta_b if entering else eta_a
    wi = refract(wo, faceforward(Vector3(0.0, 0.0, 1.0), wo), eta_i / eta_t)
    if wi is None:
        return None
    return wi, eta_i, eta_t


class SpecularReflection(BxDF):
    """Mirror reflection scaled by a Fresnel term; a delta distribution."""

    def __init__(self, r: Spectrum, fresnel: Fresnel) -> None:
        super().__init__(BxDFType.REFLECTION | BxDFType.SPECULAR)
        self.r = r
        self.fresnel = fresnel

    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        return Spectrum(0.0)

    def sample_f(self, wo: Vector3, u: Point2) -> BxDFSample:
        """The mirror direction of ``wo`` about the shading normal."""
        wi = Vector3(-wo.x, -wo.y, wo.z)
        f = self.fresnel.evaluate(cos_theta(wi)) * self.r / abs_cos_theta(wi)
        return BxDFSample(f, wi, 1.0, self.type)

    def pdf(self, wo: Vector3, wi: Vector3) -> float:
        return 0.0


class SpecularTransmission(BxDF):
    """Refraction through a dielectric boundary; a delta distribution."""

    def __init__(
        self, t: Spectrum, eta_a: float, eta_b: float, mode: TransportMode
    ) -> None:
        super().__init__(BxDFType.TRANSMISSION | BxDFType.SPECULAR)
        self.t = t
        self.eta_a = eta_a
        self.eta_b = eta_b
        self.fresnel = FresnelDielectric(eta_a, eta_b)
        self.mode = mode

    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        return Spectrum(0.0)

    def sample_f(self, wo: Vector3, u: Point2) -> BxDFSample:
        """The refracted direction; zero with pdf 0 on total internal reflection."""
        refracted = _refracted(wo, self.eta_a, self.eta_b)
        if refracted is None:
            return _no_sample()
        wi, eta_i, eta_t = refracted
        ft = self.t * (Spectrum(1.0) - self.fresnel.evaluate(cos_theta(wi)))
        if self.mode is TransportMode.RADIANCE:
            ft = ft * ((eta_i * eta_i) / (eta_t * eta_t))
        return BxDFSample(ft / abs_cos_theta(wi), wi, 1.0, self.type)

    def pdf(self, wo: Vector3, wi: Vector3) -> float:
        return 0.0


class FresnelSpecular(BxDF):
    """Dielectric boundary that reflects or refracts, chosen by the Fresnel term."""

    def __init__(
        self,
        r: Spectrum,
        t: Spectrum,
        eta_a: float,
        eta_b: float,
        mode: TransportMode,
    ) -> None:
        super().__init__(
            BxDFType.REFLECTION | BxDFType.TRANSMISSION | BxDFType.SPECULAR
        )
        self.r = r
        self.t = t
        self.eta_a = eta_a
        self.eta_b = eta_b
        self.mode = mode

    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        return Spectrum(0.0)

    def sample_f(self, wo: Vector3, u: Point2) -> BxDFSample:
        """Reflect when ``u[0]`` falls below the reflectance, otherwise refract."""
        fr = fr_dielectric(cos_theta(wo), self.eta_a, self.eta_b)
        if u[0] < fr:
            wi = Vector3(-wo.x, -wo.y, wo.z)
            f = self.r * fr / abs_cos_theta(wi)
            return BxDFSample(
                f, wi, fr, BxDFType.SPECULAR | BxDFType.REFLECTION
            )

        refracted = _refracted(wo, self.eta_a, self.eta_b)
        if refracted is None:
            return _no_sample()
        wi, eta_i, eta_t = refracted
        ft = self.t * (1.0 - fr)
        if self.mode is TransportMode.RADIANCE:
            ft = ft * ((eta_i * eta_i) / (eta_t * eta_t))
        return BxDFSample(
            ft / abs_cos_theta(wi),
            wi,
            1.0 - fr,
            BxDFType.SPECULAR | BxDFType.TRANSMISSION,
        )

    def pdf(self, wo: Vector3, wi: Vector3) -> float:
        return 0.0