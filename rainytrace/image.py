"""Writing images in the plain-text PPM format."""

from __future__ import annotations

import math
import os
from typing import Iterable, Sequence, Union

PathLike = Union[str, "os.PathLike[str]"]


def _channel(v: float) -> int:
    """Scale a channel to 0-255 units, truncating toward zero.

    NaN and negative infinity map below the range, positive infinity above it.
    """
    if math.isnan(v) or v == -math.inf:
        return -1
    if v == math.inf:
        return 256
    return int(v * 255)


def _pixel_text(pixel: Iterable[float], red: bool) -> str:
    r, g, b = (_channel(c) for c in pixel)
    if red:
        # Out-of-range values are highlighted in red.
        if not 0 <= r <= 255:
            r = 255
        if not 0 <= g <= 255:
            g = 0
        if not 0 <= b <= 255:
            b = 0
    else:
        r, g, b = (min(255, max(0, c)) for c in (r, g, b))
    return f"{r} {g} {b} "


def format_ppm(
    pixels: Sequence[Iterable[float]], width: int, height: int, red: bool = False
) -> str:
    """ASCII (P3) PPM text for ``width * height`` RGB pixels in row order.

    Each pixel is anything that unpacks to three channels in ``[0, 1]``.
    With ``red`` set, out-of-range values are shown in red instead of clamped.
    """
    if len(pixels) < width * height:
        raise ValueError(
            f"{len(pixels)} pixels given for a {width}x{height} image"
        )
    lines = [f"P3\n{width} {height}\n255\n"]
    for y in range(height):
        row = pixels[y * width:(y + 1) * width]
        lines.append("".join(_pixel_text(p, red) for p in row) + "\n")
    return "".join(lines)


def save_ppm(
    filename: PathLike,
    pixels: Sequence[Iterable[float]],
    width: int,
    height: int,
    red: bool = False,
) -> None:
    """Write the pixels to ``filename`` as an ASCII PPM image."""
    text = format_ppm(pixels, width, height, red)
    with open(filename, "w", encoding="ascii", newline="\n") as out:
        out.write(text)