import math

import pytest

from rainytrace.bsdf import BxDFType
from rainytrace.fresnel import FresnelDielectric, FresnelNoOp, fr_dielectric
from rainytrace.geometry import Point2, Vector3
from rainytrace.mathutil import TransportMode
from rainytrace.spectrum import Spectrum
from rainytrace.specular import FresnelSpecular, SpecularReflection, SpecularTransmission

COLOUR = Spectrum(0.2, 0.4, 0.6)
U = Point2(0.5, 0.5)


def _values(s):
    return tuple(s)


def _unit(x, y, z):
    return Vector3(x, y, z).normalized()


def _sin(w):
    return math.sqrt(max(0.0, 1 - w.z * w.z))


def test_reflection_mirrors_direction():
    lobe = SpecularReflection(COLOUR, FresnelNoOp())
    wo = _unit(0.3, -0.4, 0.8)
    s = lobe.sample_f(wo, U)
    assert (s.wi.x, s.wi.y, s.wi.z) == pytest.approx((-wo.x, -wo.y, wo.z))
    assert s.pdf == 1.0
    assert _values(s.f * abs(s.wi.z)) == pytest.approx(_values(COLOUR))
    assert s.sampled_type == BxDFType.REFLECTION | BxDFType.SPECULAR


def test_reflection_scaled_by_fresnel():
    fresnel = FresnelDielectric(1.0, 1.5)
    lobe = SpecularReflection(COLOUR, fresnel)
    wo = _unit(0.5, 0.0, 0.7)
    s = lobe.sample_f(wo, U)
    expected = _values(fresnel.evaluate(wo.z) * COLOUR)
    assert _values(s.f * abs(s.wi.z)) == pytest.approx(expected)


def test_reflection_is_delta():
    lobe = SpecularReflection(COLOUR, FresnelNoOp())
    assert lobe.pdf(Vector3(0, 0, 1), Vector3(0, 0, 1)) == 0.0
    assert lobe.f(Vector3(0, 0, 1), Vector3(0, 0, 1)).is_black()


def test_transmission_matched_indices_passes_straight_through():
    lobe = SpecularTransmission(COLOUR, 1.0, 1.0, TransportMode.RADIANCE)
    wo = _unit(0.3, 0.2, 0.9)
    s = lobe.sample_f(wo, U)
    assert (s.wi.x, s.wi.y, s.wi.z) == pytest.approx((-wo.x, -wo.y, -wo.z))
    assert s.pdf == 1.0
    assert _values(s.f * abs(s.wi.z)) == pytest.approx(_values(COLOUR))


def test_transmission_obeys_snell_law():
    lobe = SpecularTransmission(COLOUR, 1.0, 1.5, TransportMode.IMPORTANCE)
    wo = _unit(0.6, 0.0, 0.8)
    s = lobe.sample_f(wo, U)
    assert s.wi.z < 0
    assert s.wi.length() == pytest.approx(1.0)
    assert 1.0 * _sin(wo) == pytest.approx(1.5 * _sin(s.wi))


def test_transmission_total_internal_reflection():
    lobe = SpecularTransmission(COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    wo = _unit(0.9, 0.0, -0.3)
    s = lobe.sample_f(wo, U)
    assert s.pdf == 0.0
    assert s.f.is_black()


def test_transmission_radiance_scaling():
    wo = _unit(0.4, 0.1, 0.9)
    radiance = SpecularTransmission(COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    importance = SpecularTransmission(COLOUR, 1.0, 1.5, TransportMode.IMPORTANCE)
    f_rad = radiance.sample_f(wo, U).f
    f_imp = importance.sample_f(wo, U).f
    assert _values(f_rad * (1.5 * 1.5)) == pytest.approx(_values(f_imp * (1.0 * 1.0)))


def test_transmission_is_delta():
    lobe = SpecularTransmission(COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    assert lobe.pdf(Vector3(0, 0, 1), Vector3(0, 0, -1)) == 0.0
    assert lobe.f(Vector3(0, 0, 1), Vector3(0, 0, -1)).is_black()
    assert lobe.type == BxDFType.TRANSMISSION | BxDFType.SPECULAR


def test_fresnel_specular_reflects_for_small_u():
    lobe = FresnelSpecular(COLOUR, COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    wo = _unit(0.5, 0.0, 0.6)
    fr = fr_dielectric(wo.z, 1.0, 1.5)
    s = lobe.sample_f(wo, Point2(0.0, 0.5))
    assert s.sampled_type == BxDFType.SPECULAR | BxDFType.REFLECTION
    assert s.pdf == pytest.approx(fr)
    assert (s.wi.x, s.wi.y, s.wi.z) == pytest.approx((-wo.x, -wo.y, wo.z))
    assert _values(s.f * abs(s.wi.z) / s.pdf) == pytest.approx(_values(COLOUR))


def test_fresnel_specular_refracts_for_large_u():
    t = Spectrum(0.7, 0.5, 0.3)
    lobe = FresnelSpecular(COLOUR, t, 1.0, 1.5, TransportMode.IMPORTANCE)
    wo = _unit(0.5, 0.0, 0.6)
    fr = fr_dielectric(wo.z, 1.0, 1.5)
    s = lobe.sample_f(wo, Point2(0.99, 0.5))
    assert s.sampled_type == BxDFType.SPECULAR | BxDFType.TRANSMISSION
    assert s.pdf == pytest.approx(1 - fr)
    assert s.wi.z < 0
    assert _values(s.f * abs(s.wi.z) / s.pdf) == pytest.approx(_values(t))


def test_fresnel_specular_total_internal_reflection_always_reflects():
    lobe = FresnelSpecular(COLOUR, COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    wo = _unit(0.9, 0.0, -0.3)
    s = lobe.sample_f(wo, Point2(0.999, 0.5))
    assert s.pdf == pytest.approx(1.0)
    assert s.sampled_type == BxDFType.SPECULAR | BxDFType.REFLECTION
    assert s.wi.z < 0


def test_fresnel_specular_is_delta():
    lobe = FresnelSpecular(COLOUR, COLOUR, 1.0, 1.5, TransportMode.RADIANCE)
    assert lobe.pdf(Vector3(0, 0, 1), Vector3(0, 0, 1)) == 0.0
    assert lobe.f(Vector3(0, 0, 1), Vector3(0, 0, 1)).is_black()
    assert lobe.matches(BxDFType.ALL)
    assert not lobe.matches(BxDFType.REFLECTION | BxDFType.SPECULAR)