"""Fresnel reflectance for dielectrics and conductors."""

from __future__ import annotations

import abc
import math

from rainytrace.mathutil import clamp
from rainytrace.spectrum import Spectrum


def fr_dielectric(cos_theta_i: float, eta_i: float, eta_t: float) -> float:
    """Unpolarised Fresnel reflectance at a boundary between two dielectrics.

    A negative ``cos_theta_i`` means the ray arrives from the ``eta_t`` side.
    """
    cos_theta_i = clamp(cos_theta_i, -1.0, 1.0)
    if cos_theta_i <= 0:
        eta_i, eta_t = eta_t, eta_i
        cos_theta_i = abs(cos_theta_i)

    sin_theta_i = math.sqrt(max(0.0, 1 - cos_theta_i * cos_theta_i))
    sin_theta_t = eta_i / eta_t * sin_theta_i
    if sin_theta_t >= 1:
        return 1.0
    cos_theta_t = math.sqrt(max(0.0, 1 - sin_theta_t * sin_theta_t))

    r_parl = (eta_t * cos_theta_i - eta_i * cos_theta_t) / (
        eta_t * cos_theta_i + eta_i * cos_theta_t
    )
    r_perp = (eta_i * cos_theta_i - eta_t * cos_theta_t) / (
        eta_i * cos_theta_i + eta_t * cos_theta_t
    )
    return (r_parl * r_parl + r_perp * r_perp) / 2


def fr_conductor(
    cos_theta_i: float, eta_i: Spectrum, eta_t: Spectrum, k: Spectrum
) -> Spectrum:
    """Fresnel reflectance of a conductor with absorption coefficient ``k``."""
    cos_theta_i = clamp(cos_theta_i, -1.0, 1.0)
    eta = eta_t / eta_i
    etak = k / eta_i

    cos2 = cos_theta_i * cos_theta_i
    sin2 = 1.0 - cos2
    eta2 = eta * eta
    etak2 = etak * etak

    t0 = eta2 - etak2 - sin2
    a2plusb2 = (t0 * t0 + 4 * eta2 * etak2).sqrt()
    t1 = a2plusb2 + cos2
    a = (0.5 * (a2plusb2 + t0)).sqrt()
    t2 = 2.0 * cos_theta_i * a
    rs = (t1 - t2) / (t1 + t2)

    t3 = cos2 * a2plusb2 + sin2 * sin2
    t4 = t2 * sin2
    rp = rs * (t3 - t4) / (t3 + t4)

    return 0.5 * (rp + rs)


class Fresnel(abc.ABC):
    """Gives the fraction of light reflected at a surface."""

    @abc.abstractmethod
    def evaluate(self, cos_i: float) -> Spectrum:
        """Reflectance for an incident direction with cosine ``cos_i``."""


class FresnelConductor(Fresnel):
    """Reflectance of a conductor; incidence from either side is treated alike."""

    def __init__(self, eta_i: Spectrum, eta_t: Spectrum, k: Spectrum) -> None:
        self.eta_i = eta_i
        self.eta_t = eta_t
        self.k = k

    def evaluate(self, cos_i: float) -> Spectrum:
        return fr_conductor(abs(cos_i), self.eta_i, self.eta_t, self.k)


class FresnelDielectric(Fresnel):
    """Reflectance of a boundary between two dielectrics."""

    def __init__(self, eta_i: float, eta_t: float) -> None:
        self.eta_i = eta_i
        self.eta_t = eta_t

    def evaluate(self, cos_i: float) -> Spectrum:
        return Spectrum(fr_dielectric(cos_i, self.eta_i, self.eta_t))


class FresnelNoOp(Fresnel):
    """Reflects all light, as a perfect mirror does."""

    def evaluate(self, cos_i: float) -> Spectrum:
        return Spectrum(1.0)