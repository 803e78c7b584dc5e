import pytest

from rainytrace.filter import BoxFilter, Filter, GaussianFilter, LanczosSincFilter
from rainytrace.geometry import Point2


def test_filter_is_abstract():
    with pytest.raises(TypeError):
        Filter(Point2(1.0, 1.0))


def test_box_filter_default_radius_and_weight():
    f = BoxFilter()
    assert f.radius == Point2(0.5, 0.5)
    assert f.inv_radius == Point2(2.0, 2.0)
    assert f.evaluate(Point2(0.0, 0.0)) == 1.0
    assert f.evaluate(Point2(0.4, -0.3)) == 1.0


def test_gaussian_zero_at_edge_and_peak_at_centre():
    f = GaussianFilter()
    assert f.radius == Point2(1.0, 1.0)
    assert f.evaluate(Point2(1.0, 0.0)) == 0.0
    assert f.evaluate(Point2(2.0, 2.0)) == 0.0
    centre = f.evaluate(Point2(0.0, 0.0))
    assert centre > f.evaluate(Point2(0.5, 0.0)) > 0.0


def test_gaussian_is_symmetric():
    f = GaussianFilter(Point2(2.0, 1.5), alpha=0.7)
    assert f.evaluate(Point2(0.3, 0.4)) == pytest.approx(f.evaluate(Point2(-0.3, -0.4)))


def test_lanczos_centre_and_outside_support():
    f = LanczosSincFilter()
    assert f.radius == Point2(2.0, 2.0)
    assert f.evaluate(Point2(0.0, 0.0)) == 1.0
    assert f.evaluate(Point2(2.5, 0.0)) == 0.0
    assert f.evaluate(Point2(0.0, -3.0)) == 0.0


def test_lanczos_zero_crossing_at_integer_offset():
    f = LanczosSincFilter()
    assert f.evaluate(Point2(1.0, 0.0)) == pytest.approx(0.0, abs=1e-12)
    assert f.evaluate(Point2(0.5, 0.5)) == pytest.approx(f.evaluate(Point2(-0.5, 0.5)))