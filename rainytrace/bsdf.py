"""Scattering functions: the BxDF interface and the BSDF that combines them."""

from __future__ import annotations

import abc
import enum
import math
from typing import List, NamedTuple, Sequence

from rainytrace.geometry import Point2, Vector3
from rainytrace.mathutil import INV_PI, PI
from rainytrace.rng import ONE_MINUS_EPSILON
from rainytrace.sampling import (
    cosine_sample_hemisphere,
    uniform_hemisphere_pdf,
    uniform_sample_hemisphere,
)
from rainytrace.spectrum import Spectrum

MAX_BXDFS = 8


def cos_theta(w: Vector3) -> float:
    """Cosine of the angle to the shading normal, in the local frame."""
    return w.z


def abs_cos_theta(w: Vector3) -> float:
    """Absolute cosine of the angle to the shading normal."""
    return abs(w.z)


def cos2_theta(w: Vector3) -> float:
    """Squared cosine of the angle to the shading normal."""
    return w.z * w.z


def same_hemisphere(w: Vector3, wp: Vector3) -> bool:
    """True when both local-frame directions lie on the same side of the surface."""
    return w.z * wp.z > 0


class BxDFType(enum.IntFlag):
    """Kinds of scattering a BxDF performs."""

    REFLECTION = 1 << 0
    TRANSMISSION = 1 << 1
    DIFFUSE = 1 << 2
    GLOSSY = 1 << 3
    SPECULAR = 1 << 4
    NON_SPECULAR = REFLECTION | TRANSMISSION | DIFFUSE | GLOSSY
    ALL = REFLECTION | TRANSMISSION | DIFFUSE | GLOSSY | SPECULAR


def has_specular(t: BxDFType) -> bool:
    """True when ``t`` includes specular scattering."""
    return bool(t & BxDFType.SPECULAR)


def has_reflection(t: BxDFType) -> bool:
    """True when ``t`` includes reflection."""
    return bool(t & BxDFType.REFLECTION)


def has_transmission(t: BxDFType) -> bool:
    """True when ``t`` includes transmission."""
    return bool(t & BxDFType.TRANSMISSION)


class BxDFSample(NamedTuple):
    """Result of sampling an incident direction from a scattering function."""

    f: Spectrum
    wi: Vector3
    pdf: float
    sampled_type: BxDFType


def _black_sample() -> BxDFSample:
    return BxDFSample(Spectrum(0.0), Vector3(), 0.0, BxDFType(0))


class BxDF(abc.ABC):
    """A single reflection or transmission lobe, working in the local shading frame."""

    def __init__(self, type: BxDFType) -> None:
        self.type = BxDFType(type)

    def matches(self, t: BxDFType) -> bool:
        """True when every flag of this lobe is among the flags ``t``."""
        return (t & self.type) == self.type

    @abc.abstractmethod
    def f(self, wo: Vector3, wi: Vector3) -> Spectrum:
        """Value of the distribution function for the pair of directions."""

    def sample_f(self, wo: Vector3, u: Point2) -> BxDFSample:
        """Cosine-sample an incident direction on the side of ``wo``."""
        wi = cosine_sample_hemisphere(u)
        if wo.z < 0:
            wi = Vector3(wi.x, wi.y, -wi.z)
        return BxDFSample(self.f(wo, wi), wi, self.pdf(wo, wi), self.type)

    def rho_hd(self, wo: Vector3, samples: Sequence[Point2]) -> Spectrum:
        """Monte Carlo estimate of the hemispherical-directional reflectance."""
        n = len(samples)
        if n == 0:
            raise ValueError("reflectance estimate needs at least one sample")
        r = Spectrum(0.0)
        for u in samples:
            s = self.sample_f(wo, u)
            if s.pdf > 0:
                r = r + s.f * abs_cos_theta(s.wi) / s.pdf
        return r / n

    def rho_hh(
        self, samples1: Sequence[Point2], samples2: Sequence[Point2]
    ) -> Spectrum:
        """Monte Carlo estimate of the hemispherical-hemispherical reflectance."""
        n = min(len(samples1), len(samples2))
        if n == 0:
            raise ValueError("reflectance estimate needs at least one sample")
        r = Spectrum(0.0)
        pdf_o = uniform_hemisphere_pdf()
        for u1, u2 in zip(samples1, samples2):
            wo = uniform_sample_hemisphere(u1)
            s = self.sample_f(wo, u2)
            if s.pdf > 0:
                r = r + s.f * abs_cos_theta(s.wi) * abs_cos_theta(wo) / (pdf_o * s.pdf)
        return r / (PI * n)

    def pdf(self, wo: Vector3, wi: Vector3) -> float:
        """Density of ``sample_f`` choosing ``wi``: cosine-weighted on the same side."""
        return abs_cos_theta(wi) * INV_PI if same_hemisphere(wo, wi) else 0.0


class BSDF:
    """A collection of BxDFs at a surface point, with its shading frame."""

    def __init__(
        self, ns: Vector3, ng: Vector3, dpdu: Vector3, eta: float = 1.0
    ) -> None:
        self.eta = eta
        self.ns = ns
        self.ng = ng
        self.ss = dpdu.normalized()
        self.ts = ns.cross(self.ss)
        self._bxdfs: List[BxDF] = []

    @property
    def bxdfs(self) -> tuple:
        """The lobes added so far."""
        return tuple(self._bxdfs)

    def add(self, bxdf: BxDF) -> None:
        """Attach a lobe; at most eight are allowed."""
        if len(self._bxdfs) >= MAX_BXDFS:
            raise ValueError(f"a BSDF holds at most {MAX_BXDFS} components")
        self._bxdfs.append(bxdf)

    def _matching(self, flags: BxDFType) -> List[BxDF]:
        return [b for b in self._bxdfs if b.matches(flags)]

    def num_components(self, flags: BxDFType = BxDFType.ALL) -> int:
        """Number of lobes matching ``flags``."""
        return len(self._matching(flags))

    def world_to_local(self, v: Vector3) -> Vector3:
        """Express a world direction in the shading frame."""
        return Vector3(v.dot(self.ss), v.dot(self.ts), v.dot(self.ns))

    def local_to_world(self, v: Vector3) -> Vector3:
        """Express a shading-frame direction in world space."""
        ss, ts, ns = self.ss, self.ts, self.ns
        return Vector3(
            ss.x * v.x + ts.x * v.y + ns.x * v.z,
            ss.y * v.x + ts.y * v.y + ns.y * v.z,
            ss.z * v.x + ts.z * v.y + ns.z * v.z,
        )

    def _sum_f(
        self, wo: Vector3, wi: Vector3, wo_world: Vector3, wi_world: Vector3,
        flags: BxDFType,
    ) -> Spectrum:
        reflect = wi_world.dot(self.ng) * wo_world.dot(self.ng) > 0
        total = Spectrum(0.0)
        for b in self._matching(flags):
            if (reflect and has_reflection(b.type)) or (
                not reflect and has_transmission(b.type)
            ):
                total = total + b.f(wo, wi)
        return total

    def f(
        self, wo_world: Vector3, wi_world: Vector3, flags: BxDFType = BxDFType.ALL
    ) -> Spectrum:
        """Sum of matching lobes for the world-space directions."""
        wi = self.world_to_local(wi_world)
        wo = self.world_to_local(wo_world)
        if wo.z == 0:
            return Spectrum(0.0)
        return self._sum_f(wo, wi, wo_world, wi_world, flags)

    def sample_f(
        self, wo_world: Vector3, u: Point2, flags: BxDFType = BxDFType.ALL
    ) -> BxDFSample:
        """Pick a matching lobe with ``u[0]``, sample it, and combine the result.

        The returned ``wi`` is in world space.
        """
        matching = self._matching(flags)
        n = len(matching)
        if n == 0:
            return _black_sample()
        chosen = min(math.floor(u[0] * n), n - 1)
        bxdf = matching[chosen]
        u_remapped = Point2(min(u[0] * n - chosen, ONE_MINUS_EPSILON), u[1])

        wo = self.world_to_local(wo_world)
        if wo.z == 0:
            return _black_sample()

        s = bxdf.sample_f(wo, u_remapped)
        if s.pdf == 0:
            return _black_sample()
        wi = s.wi
        wi_world = self.local_to_world(wi)
        pdf = s.pdf
        f = s.f

        combine = not has_specular(bxdf.type) and n > 1
        if combine:
            pdf += sum(b.pdf(wo, wi) for b in matching if b is not bxdf)
        if n > 1:
            pdf /= n
        if combine:
            f = self._sum_f(wo, wi, wo_world, wi_world, flags)
        return BxDFSample(f, wi_world, pdf, s.sampled_type)

    def rho_hh(
        self,
        samples1: Sequence[Point2],
        samples2: Sequence[Point2],
        flags: BxDFType = BxDFType.ALL,
    ) -> Spectrum:
        """Sum of the matching lobes' hemispherical-hemispherical reflectances."""
        total = Spectrum(0.0)
        for b in self._matching(flags):
            total = total + b.rho_hh(samples1, samples2)
        return total

    def rho_hd(
        self, wo: Vector3, samples: Sequence[Point2], flags: BxDFType = BxDFType.ALL
    ) -> Spectrum:
        """Sum of the matching lobes' hemispherical-directional reflectances."""
        total = Spectrum(0.0)
        for b in self._matching(flags):
            total = total + b.rho_hd(wo, samples)
        return total

    def pdf(
        self, wo_world: Vector3, wi_world: Vector3, flags: BxDFType = BxDFType.ALL
    ) -> float:
        """Average density of the matching lobes for the pair of directions."""
        if not self._bxdfs:
            return 0.0
        wo = self.world_to_local(wo_world)
        wi = self.world_to_local(wi_world)
        if wo.z == 0:
            return 0.0
        matching = self._matching(flags)
        if not matching:
            return 0.0
        return sum(b.pdf(wo, wi) for b in matching) / len(matching)