"""RGB(A) colour values used as radiance spectra."""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterator, Optional

from rainytrace.mathutil import INFINITY, clamp as _clamp


def _div(x: float, y: float) -> float:
    """Divide with IEEE-754 results for a zero divisor."""
    try:
        return x / y
    except ZeroDivisionError:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)


def _sqrt(x: float) -> float:
    return math.sqrt(x) if x >= 0 else math.nan


class Spectrum:
    """An RGB colour with an alpha channel.

    ``Spectrum(v)`` sets all three colour channels to ``v``.  Plain numbers
    combine with a spectrum as if they were ``Spectrum(number)``, except for
    multiplication and division, which scale every channel including alpha.
    """

    __slots__ = ("r", "g", "b", "a")

    def __init__(
        self,
        r: float = 0.0,
        g: Optional[float] = None,
        b: Optional[float] = None,
        a: float = 1.0,
    ) -> None:
        if g is None and b is None:
            g = b = r
        elif g is None or b is None:
            raise TypeError("Spectrum takes either one value or r, g and b")
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)
        self.a = float(a)

    @staticmethod
    def _coerce(other) -> Optional["Spectrum"]:
        if isinstance(other, Spectrum):
            return other
        if isinstance(other, Real):
            return Spectrum(float(other))
        return None

    def __add__(self, other):
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Spectrum(self.r + o.r, self.g + o.g, self.b + o.b, self.a + o.a)

    def __radd__(self, other):
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o + self

    def __sub__(self, other):
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return Spectrum(self.r - o.r, self.g - o.g, self.b - o.b, self.a - o.a)

    def __rsub__(self, other):
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o - self

    def __mul__(self, other):
        if isinstance(other, Spectrum):
            return Spectrum(
                self.r * other.r, self.g * other.g, self.b * other.b, self.a * other.a
            )
        if isinstance(other, Real):
            f = float(other)
            return Spectrum(self.r * f, self.g * f, self.b * f, self.a * f)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, Real):
            return self * other
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Spectrum):
            return Spectrum(
                _div(self.r, other.r),
                _div(self.g, other.g),
                _div(self.b, other.b),
                _div(self.a, other.a),
            )
        if isinstance(other, Real):
            return self * _div(1.0, float(other))
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, Real):
            return Spectrum(float(other)) / self
        return NotImplemented

    def __eq__(self, other) -> bool:
        if not isinstance(other, Spectrum):
            return NotImplemented
        return (self.r, self.g, self.b, self.a) == (other.r, other.g, other.b, other.a)

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, i: int) -> float:
        if i == 0:
            return self.r
        if i == 1:
            return self.g
        if i == 2:
            return self.b
        raise IndexError(f"spectrum channel index out of range: {i}")

    def __iter__(self) -> Iterator[float]:
        yield self.r
        yield self.g
        yield self.b

    def __repr__(self) -> str:
        return f"Spectrum({self.r!r}, {self.g!r}, {self.b!r}, {self.a!r})"

    def __str__(self) -> str:
        return f"[ {self.r:.4g}, {self.g:.4g}, {self.b:.4g} ]"

    def has_nan(self) -> bool:
        """True when any channel, alpha included, is NaN."""
        return any(math.isnan(c) for c in (self.r, self.g, self.b, self.a))

    def is_black(self) -> bool:
        """True when all colour channels are zero."""
        return self.r == 0 and self.g == 0 and self.b == 0

    def max_value(self) -> float:
        """Largest of the three colour channels."""
        return max(self.r, self.g, self.b)

    def luminance(self) -> float:
        """Perceived brightness of the colour."""
        return self.r * 0.212671 + self.g * 0.715160 + self.b * 0.072169

    def normalize(self) -> "Spectrum":
        """Colour scaled to unit length; alpha is kept, black stays black."""
        length = math.sqrt(self.r * self.r + self.g * self.g + self.b * self.b)
        factor = 1.0 / length if length > 0 else 0.0
        return Spectrum(self.r * factor, self.g * factor, self.b * factor, self.a)

    def clamp(self, low: float = 0.0, high: float = INFINITY) -> "Spectrum":
        """Colour channels limited to ``[low, high]``; alpha is reset to one."""
        return Spectrum(
            _clamp(self.r, low, high), _clamp(self.g, low, high), _clamp(self.b, low, high)
        )

    def sqrt(self) -> "Spectrum":
        """Channel-wise square root, alpha included; negatives give NaN."""
        return Spectrum(_sqrt(self.r), _sqrt(self.g), _sqrt(self.b), _sqrt(self.a))