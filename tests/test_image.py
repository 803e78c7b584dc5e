import pytest

from rainytrace.image import format_ppm, save_ppm
from rainytrace.spectrum import Spectrum


def test_header_and_row_layout():
    text = format_ppm([Spectrum(0.0), Spectrum(1.0), Spectrum(0.0), Spectrum(1.0)], 2, 2)
    lines = text.split("\n")
    assert lines[:3] == ["P3", "2 2", "255"]
    assert lines[3] == "0 0 0 255 255 255 "
    assert lines[4] == "0 0 0 255 255 255 "
    assert text.endswith("\n")


def test_channels_truncate():
    text = format_ppm([Spectrum(1.0, 0.0, 0.5)], 1, 1)
    assert text == "P3\n1 1\n255\n255 0 127 \n"


def test_clamped_mode():
    text = format_ppm([(2.0, -1.0, 1.0)], 1, 1)
    assert text.splitlines()[3] == "255 0 255 "


def test_red_mode_highlights_out_of_range():
    text = format_ppm([(-1.0, 2.0, 3.0)], 1, 1, red=True)
    assert text.splitlines()[3] == "255 0 0 "
    in_range = format_ppm([(0.0, 1.0, 1.0)], 1, 1, red=True)
    assert in_range.splitlines()[3] == "0 255 255 "


def test_nan_is_clamped_to_zero():
    text = format_ppm([(float("nan"), float("inf"), 0.0)], 1, 1)
    assert text.splitlines()[3] == "0 255 0 "


def test_too_few_pixels():
    with pytest.raises(ValueError):
        format_ppm([Spectrum(0.0)], 2, 1)


def test_save_matches_format(tmp_path):
    pixels = [Spectrum(0.2, 0.4, 0.6), Spectrum(1.0, 1.0, 1.0)]
    path = tmp_path / "img.ppm"
    save_ppm(path, pixels, 2, 1)
    assert path.read_text() == format_ppm(pixels, 2, 1)