import math

import pytest

from rainytrace.bsdf import (
    BSDF,
    BxDF,
    BxDFType,
    abs_cos_theta,
    cos2_theta,
    cos_theta,
    has_reflection,
    has_specular,
    has_transmission,
    same_hemisphere,
)
from rainytrace.geometry import Point2, Vector3
from rainytrace.mathutil import INV_PI
from rainytrace.spectrum import Spectrum


class _Diffuse(BxDF):
    def __init__(self, r):
        super().__init__(BxDFType.REFLECTION | BxDFType.DIFFUSE)
        self.r = r

    def f(self, wo, wi):
        return self.r * INV_PI


def _flat_bsdf():
    return BSDF(Vector3(0, 0, 1), Vector3(0, 0, 1), Vector3(1, 0, 0))


def test_local_frame_helpers():
    w = Vector3(0.0, 0.6, -0.8)
    assert cos_theta(w) == -0.8
    assert abs_cos_theta(w) == 0.8
    assert cos2_theta(w) == pytest.approx(0.64)
    assert same_hemisphere(w, Vector3(0, 0, -1))
    assert not same_hemisphere(w, Vector3(0, 0, 1))


def test_type_flags():
    t = BxDFType.REFLECTION | BxDFType.SPECULAR
    assert has_specular(t)
    assert has_reflection(t)
    assert not has_transmission(t)
    assert BxDFType.ALL == BxDFType.NON_SPECULAR | BxDFType.SPECULAR


def test_matches():
    b = _Diffuse(Spectrum(0.5))
    assert b.matches(BxDFType.ALL)
    assert b.matches(BxDFType.NON_SPECULAR)
    assert not b.matches(BxDFType.TRANSMISSION | BxDFType.DIFFUSE)


def test_bxdf_is_abstract():
    with pytest.raises(TypeError):
        BxDF(BxDFType.REFLECTION)


@pytest.mark.parametrize("wo_z", [0.7, -0.7])
def test_sample_f_same_side_as_wo(wo_z):
    b = _Diffuse(Spectrum(0.5))
    wo = Vector3(0.0, math.sqrt(1 - wo_z * wo_z), wo_z)
    s = b.sample_f(wo, Point2(0.3, 0.8))
    assert same_hemisphere(wo, s.wi)
    assert s.pdf == pytest.approx(b.pdf(wo, s.wi))
    assert s.sampled_type == b.type
    assert s.f == Spectrum(0.5) * INV_PI


def test_pdf_zero_on_opposite_side():
    b = _Diffuse(Spectrum(1.0))
    assert b.pdf(Vector3(0, 0, 1), Vector3(0, 0, -1)) == 0.0


def test_rho_hd_of_diffuse_equals_albedo():
    b = _Diffuse(Spectrum(0.25, 0.5, 0.75))
    samples = [Point2((i + 0.5) / 7, (i * 3 % 7 + 0.5) / 7) for i in range(7)]
    rho = b.rho_hd(Vector3(0, 0, 1), samples)
    assert tuple(rho) == pytest.approx((0.25, 0.5, 0.75), abs=1e-9)


def test_rho_needs_samples():
    b = _Diffuse(Spectrum(1.0))
    with pytest.raises(ValueError):
        b.rho_hd(Vector3(0, 0, 1), [])
    with pytest.raises(ValueError):
        b.rho_hh([], [])


def test_rho_hh_positive_for_diffuse():
    b = _Diffuse(Spectrum(1.0))
    samples = [Point2(0.2, 0.3), Point2(0.6, 0.9), Point2(0.8, 0.1)]
    rho = b.rho_hh(samples, samples)
    assert rho.r > 0
    assert rho.r == rho.g == rho.b


def test_frame_round_trip():
    ns = Vector3(0, 1, 1).normalized()
    bsdf = BSDF(ns, ns, Vector3(1, 0, 0))
    v = Vector3(0.3, -0.4, 0.5)
    back = bsdf.local_to_world(bsdf.world_to_local(v))
    assert tuple(back) == pytest.approx((0.3, -0.4, 0.5), abs=1e-9)
    assert tuple(bsdf.world_to_local(ns)) == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)


def test_add_limit():
    bsdf = _flat_bsdf()
    for _ in range(8):
        bsdf.add(_Diffuse(Spectrum(0.1)))
    assert bsdf.num_components() == 8
    with pytest.raises(ValueError):
        bsdf.add(_Diffuse(Spectrum(0.1)))


def test_num_components_by_flags():
    bsdf = _flat_bsdf()
    bsdf.add(_Diffuse(Spectrum(0.1)))
    assert bsdf.num_components(BxDFType.ALL) == 1
    assert bsdf.num_components(BxDFType.TRANSMISSION) == 0


def test_sample_f_without_matching_components():
    bsdf = _flat_bsdf()
    bsdf.add(_Diffuse(Spectrum(0.6)))
    s = bsdf.sample_f(Vector3(0, 0, 1), Point2(0.5, 0.5), BxDFType.TRANSMISSION)
    assert s.pdf == 0
    assert s.f.is_black()
    assert s.sampled_type == BxDFType(0)


def test_sample_f_combines_components():
    bsdf = _flat_bsdf()
    a, b = Spectrum(0.2), Spectrum(0.4)
    bsdf.add(_Diffuse(a))
    bsdf.add(_Diffuse(b))
    wo = Vector3(0, 0.6, 0.8)
    s = bsdf.sample_f(wo, Point2(0.7, 0.3))
    assert s.wi.z > 0
    assert s.pdf == pytest.approx(bsdf.pdf(wo, s.wi))
    assert tuple(s.f) == pytest.approx(tuple(bsdf.f(wo, s.wi)), abs=1e-9)
    expected = 0.6 * INV_PI
    assert tuple(s.f) == pytest.approx((expected, expected, expected), abs=1e-9)


def test_pdf_empty_and_average():
    bsdf = _flat_bsdf()
    wo, wi = Vector3(0, 0, 1), Vector3(0, 0.6, 0.8)
    assert bsdf.pdf(wo, wi) == 0.0
    bsdf.add(_Diffuse(Spectrum(1.0)))
    single = bsdf.pdf(wo, wi)
    bsdf.add(_Diffuse(Spectrum(1.0)))
    assert bsdf.pdf(wo, wi) == pytest.approx(single)
    assert single == pytest.approx(0.8 * INV_PI)


def test_bsdf_rho_sums_components():
    bsdf = _flat_bsdf()
    bsdf.add(_Diffuse(Spectrum(0.2)))
    bsdf.add(_Diffuse(Spectrum(0.3)))
    samples = [Point2(0.25, 0.25), Point2(0.75, 0.75)]
    rho = bsdf.rho_hd(Vector3(0, 0, 1), samples)
    assert tuple(rho) == pytest.approx((0.5, 0.5, 0.5), abs=1e-9)
    assert bsdf.rho_hd(Vector3(0, 0, 1), samples, BxDFType.TRANSMISSION).is_black()