import pytest

from rainytrace.bsdf import BxDFType, same_hemisphere
from rainytrace.geometry import Point2, Vector3
from rainytrace.lambertian import LambertianReflection, LambertianTransmission
from rainytrace.mathutil import INV_PI
from rainytrace.spectrum import Spectrum


def _values(s):
    return tuple(s)


COLOUR = Spectrum(0.2, 0.4, 0.6)
SAMPLES = [Point2(0.1, 0.7), Point2(0.5, 0.5), Point2(0.9, 0.2), Point2(0.3, 0.95)]


def test_reflection_f_is_constant_over_pi():
    lobe = LambertianReflection(COLOUR)
    expected = _values(COLOUR * INV_PI)
    a = lobe.f(Vector3(0, 0, 1), Vector3(0.6, 0, 0.8))
    b = lobe.f(Vector3(0.3, 0.4, 0.866), Vector3(-0.6, 0, 0.8))
    assert _values(a) == pytest.approx(expected)
    assert _values(b) == pytest.approx(expected)


def test_reflection_rho_is_closed_form():
    lobe = LambertianReflection(COLOUR)
    assert _values(lobe.rho_hd(Vector3(0, 0, 1), SAMPLES)) == pytest.approx(
        _values(COLOUR)
    )
    assert _values(lobe.rho_hh(SAMPLES, SAMPLES)) == pytest.approx(_values(COLOUR))


def test_reflection_type_flags():
    lobe = LambertianReflection(COLOUR)
    assert lobe.type == BxDFType.REFLECTION | BxDFType.DIFFUSE
    assert lobe.matches(BxDFType.ALL)
    assert not lobe.matches(BxDFType.TRANSMISSION | BxDFType.DIFFUSE)


def test_reflection_sample_stays_on_same_side():
    lobe = LambertianReflection(COLOUR)
    wo = Vector3(0.0, 0.6, 0.8)
    for u in SAMPLES:
        s = lobe.sample_f(wo, u)
        assert same_hemisphere(wo, s.wi)
        assert s.pdf == pytest.approx(abs(s.wi.z) * INV_PI)


def test_transmission_type_flags():
    lobe = LambertianTransmission(COLOUR)
    assert lobe.type == BxDFType.TRANSMISSION | BxDFType.DIFFUSE
    assert not lobe.matches(BxDFType.REFLECTION | BxDFType.DIFFUSE)


@pytest.mark.parametrize("wo", [Vector3(0.0, 0.6, 0.8), Vector3(0.0, 0.6, -0.8)])
def test_transmission_sample_goes_to_other_side(wo):
    lobe = LambertianTransmission(COLOUR)
    for u in SAMPLES:
        s = lobe.sample_f(wo, u)
        assert s.wi.z * wo.z < 0
        assert s.wi.length() == pytest.approx(1.0)
        assert s.pdf == pytest.approx(lobe.pdf(wo, s.wi))
        assert s.pdf > 0
        assert _values(s.f) == pytest.approx(_values(COLOUR * INV_PI))


def test_transmission_pdf_zero_on_same_side():
    lobe = LambertianTransmission(COLOUR)
    assert lobe.pdf(Vector3(0, 0, 1), Vector3(0.6, 0, 0.8)) == 0.0
    assert lobe.pdf(Vector3(0, 0, 1), Vector3(0.6, 0, -0.8)) == pytest.approx(
        0.8 * INV_PI
    )


def test_transmission_rho_is_closed_form():
    lobe = LambertianTransmission(COLOUR)
    assert _values(lobe.rho_hd(Vector3(0, 0, 1), SAMPLES)) == pytest.approx(
        _values(COLOUR)
    )
    assert _values(lobe.rho_hh(SAMPLES, SAMPLES)) == pytest.approx(_values(COLOUR))