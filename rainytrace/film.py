"""The film: accumulates filtered radiance samples into pixels."""

from __future__ import annotations

import logging
import math
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from rainytrace.filter import BoxFilter, Filter
from rainytrace.geometry import Point2
from rainytrace.image import save_ppm
from rainytrace.spectrum import Spectrum

_log = logging.getLogger(__name__)

Bounds = Tuple[Tuple[int, int], Tuple[int, int]]

KERNEL_WIDTH = 16


@dataclass
class FilmPixel:
    """Running sums for one pixel."""

    color: Spectrum = field(default_factory=Spectrum)
    filter_weight_sum: float = 0.0
    splat: Spectrum = field(default_factory=Spectrum)


class Film:
    """Image plane of ``width`` by ``height`` pixels, with (0, 0) at top left."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        filter: Optional[Filter] = None,
        filename: str = "render",
        save_type: bool = False,
    ) -> None:
        if filter is None:
            filter = BoxFilter()
        self.width = width
        self.height = height
        self.bounds: Bounds = ((0, 0), (width, height))
        self.filter = filter
        self.filename = filename
        self.save_type = save_type
        self._pixels: List[FilmPixel] = [FilmPixel() for _ in range(width * height)]
        radius = filter.radius
        self._inv_radius = Point2(1.0 / radius.x, 1.0 / radius.y)
        self._kernel: List[float] = [
            filter.evaluate(
                Point2(
                    (x + 0.5) * radius.x / KERNEL_WIDTH,
                    (y + 0.5) * radius.y / KERNEL_WIDTH,
                )
            )
            for y in range(KERNEL_WIDTH)
            for x in range(KERNEL_WIDTH)
        ]

    def __getitem__(self, key: Tuple[int, int]) -> FilmPixel:
        y, x = key
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) lies outside the film")
        return self._pixels[y * self.width + x]

    def scale(self, factor: float) -> None:
        """Multiply every pixel's accumulated colour by ``factor``."""
        for pixel in self._pixels:
            pixel.color = pixel.color * factor

    def sample_bounds(self) -> Bounds:
        """Integer range of film positions whose samples can reach a pixel."""
        (x0, y0), (x1, y1) = self.bounds
        r = self.filter.radius
        ax = math.floor(x0 + 0.5 - r.x)
        ay = math.floor(y0 + 0.5 - r.y)
        bx = math.ceil(x1 - 0.5 + r.x)
        by = math.ceil(y1 - 0.5 + r.y)
        return ((min(ax, bx), min(ay, by)), (max(ax, bx), max(ay, by)))

    def _kernel_offsets(self, lo: int, hi: int, centre: float, inv_r: float) -> List[int]:
        return [
            min(math.floor(abs((v - centre) * inv_r * KERNEL_WIDTH)), KERNEL_WIDTH - 1)
            for v in range(lo, hi)
        ]

    def add(self, p_film: Point2, radiance: Spectrum, sample_weight: float = 1.0) -> None:
        """Splat a radiance sample at ``p_film`` onto the pixels its filter covers."""
        dx, dy = p_film.x - 0.5, p_film.y - 0.5
        r = self.filter.radius
        (bx0, by0), (bx1, by1) = self.bounds
        x0 = max(math.ceil(dx - r.x), bx0)
        y0 = max(math.ceil(dy - r.y), by0)
        x1 = min(math.floor(dx + r.x) + 1, bx1)
        y1 = min(math.floor(dy + r.y) + 1, by1)
        if not (x0 < x1 and y0 < y1):
            return

        ifx = self._kernel_offsets(x0, x1, dx, self._inv_radius.x)
        ify = self._kernel_offsets(y0, y1, dy, self._inv_radius.y)
        weighted = radiance * sample_weight
        for y, ky in zip(range(y0, y1), ify):
            for x, kx in zip(range(x0, x1), ifx):
                weight = self._kernel[ky * KERNEL_WIDTH + kx]
                pixel = self._pixels[y * self.width + x]
                pixel.color = pixel.color + weighted * weight
                pixel.filter_weight_sum += weight

    def add_splat(self, p: Point2, radiance: Spectrum) -> None:
        """Set the unfiltered splat value of the pixel containing ``p``.

        Samples with NaN, negative or infinite luminance are ignored.
        """
        lum = radiance.luminance()
        if radiance.has_nan() or lum < 0 or math.isinf(lum):
            _log.error("Ignoring splatted spectrum values at %s %s", p.x, p.y)
            return
        x, y = int(p.x), int(p.y)
        (bx0, by0), (bx1, by1) = self.bounds
        if not (bx0 <= x < bx1 and by0 <= y < by1):
            return
        self._pixels[y * self.width + x].splat = radiance

    def set_image(self, image: Sequence[Spectrum]) -> None:
        """Replace the film's contents with a finished image."""
        n = self.width * self.height
        if len(image) < n:
            raise ValueError(f"{len(image)} pixels given for a film of {n}")
        for pixel, colour in zip(self._pixels, image):
            pixel.color = colour
            pixel.filter_weight_sum = 1.0
            pixel.splat = Spectrum(0.0)

    def resolve(self) -> List[Spectrum]:
        """Final pixel colours: filtered sum divided by weight, plus splat."""
        colours = []
        for pixel in self._pixels:
            if pixel.filter_weight_sum != 0:
                c = pixel.color / pixel.filter_weight_sum
            else:
                c = Spectrum()
            colours.append(c + pixel.splat)
        return colours

    def flush(self) -> str:
        """Write the image as PPM and return the path written.

        The processor time in milliseconds and ``.ppm`` are appended to the
        film's file name.
        """
        ticks = int(time.process_time() * 1000)
        stamp = str(ticks) if ticks else ""
        path = os.fspath(self.filename) + stamp + ".ppm"
        save_ppm(path, self.resolve(), self.width, self.height)
        return path