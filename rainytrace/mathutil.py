"""Numeric helpers and global constants shared by the renderer."""

from __future__ import annotations

import enum
import math
import struct
import sys
from typing import Callable, Optional, Tuple

MAX_FLOAT = sys.float_info.max
INFINITY = math.inf
MACHINE_EPSILON = sys.float_info.epsilon * 0.5
SHADOW_EPSILON = 0.0001
PI = 3.14159265358979323846
INV_PI = 0.31830988618379067154
INV_2PI = 0.15915494309189533577
INV_4PI = 0.07957747154594766788
PI_OVER_2 = 1.57079632679489661923
PI_OVER_4 = 0.78539816339744830961
SQRT2 = 1.41421356237309504880

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class TransportMode(enum.Enum):
    """Whether a light path starts at the camera or at a light source."""

    RADIANCE = enum.auto()
    IMPORTANCE = enum.auto()


def float_to_bits(f: float) -> int:
    """Return the IEEE-754 double bit pattern of ``f`` as an unsigned integer."""
    return struct.unpack("<Q", struct.pack("<d", f))[0]


def bits_to_float(bits: int) -> float:
    """Return the double whose IEEE-754 bit pattern is ``bits``."""
    return struct.unpack("<d", struct.pack("<Q", bits & _U64_MASK))[0]


def next_float_up(v: float, delta: int = 1) -> float:
    """Step ``delta`` representable doubles towards positive infinity."""
    if math.isinf(v) and v > 0:
        return v
    if v == 0:
        v = 0.0
    bits = float_to_bits(v)
    bits = bits + delta if v >= 0 else bits - delta
    return bits_to_float(bits)


def next_float_down(v: float, delta: int = 1) -> float:
    """Step ``delta`` representable doubles towards negative infinity."""
    if math.isinf(v) and v < 0:
        return v
    if v == 0:
        v = -0.0
    bits = float_to_bits(v)
    bits = bits - delta if v > 0 else bits + delta
    return bits_to_float(bits)


def gamma(n: int) -> float:
    """Conservative bound on the relative error of ``n`` float operations."""
    return (n * MACHINE_EPSILON) / (1 - n * MACHINE_EPSILON)


def gamma_correct(value: float) -> float:
    """Apply the sRGB transfer curve to a linear value."""
    if value <= 0.0031308:
        return 12.92 * value
    return 1.055 * math.pow(value, 1.0 / 2.4) - 0.055


def inverse_gamma_correct(value: float) -> float:
    """Undo the sRGB transfer curve, giving a linear value."""
    if value <= 0.04045:
        return value * 1.0 / 12.92
    return math.pow((value + 0.055) * 1.0 / 1.055, 2.4)


def clamp(val, low, high):
    """Limit ``val`` to the closed range ``[low, high]``."""
    if val < low:
        return low
    if val > high:
        return high
    return val


def mod(a, b):
    """Remainder that is non-negative for integers; ``fmod`` for floats."""
    if isinstance(a, float) or isinstance(b, float):
        return math.fmod(a, b)
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    result = a - quotient * b
    return result + b if result < 0 else result


def radians(deg: float) -> float:
    """Convert degrees to radians."""
    return (PI / 180) * deg


def degrees(rad: float) -> float:
    """Convert radians to degrees."""
    return (180 / PI) * rad


def log2(x: float) -> float:
    """Base-2 logarithm with C semantics at zero and for negatives."""
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return math.log2(x)


def log2_int(v: int) -> int:
    """Index of the highest set bit of a positive integer."""
    if v <= 0:
        raise ValueError("log2_int requires a positive integer")
    return v.bit_length() - 1


def is_power_of_2(v: int) -> bool:
    """True when ``v`` is a positive power of two."""
    return bool(v) and not (v & (v - 1))


def round_up_pow2(v: int) -> int:
    """Smallest power of two that is not less than ``v``."""
    v -= 1
    for shift in (1, 2, 4, 8, 16, 32):
        v |= v >> shift
    return v + 1


def count_trailing_zeros(v: int) -> int:
    """Number of trailing zero bits in a 32-bit value; 32 for zero."""
    v &= 0xFFFF_FFFF
    if v == 0:
        return 32
    return (v & -v).bit_length() - 1


def find_interval(size: int, pred: Callable[[int], bool]) -> int:
    """Bisect for the last index where ``pred`` holds, clamped to ``[0, size-2]``."""
    first, length = 0, size
    while length > 0:
        half = length >> 1
        middle = first + half
        if pred(middle):
            first = middle + 1
            length -= half + 1
        else:
            length = half
    return clamp(first - 1, 0, size - 2)


def lerp(t: float, v1: float, v2: float) -> float:
    """Linear interpolation between ``v1`` and ``v2``."""
    return (1 - t) * v1 + t * v2


def quadratic(a: float, b: float, c: float) -> Optional[Tuple[float, float]]:
    """Solve ``a t^2 + b t + c = 0``; return the ordered roots or ``None``."""
    discrim = b * b - 4 * a * c
    if discrim < 0:
        return None
    root_discrim = math.sqrt(discrim)
    if b < 0:
        q = -0.5 * (b - root_discrim)
    else:
        q = -0.5 * (b + root_discrim)
    t0 = q / a
    t1 = c / q
    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def erf_inv(x: float) -> float:
    """Polynomial approximation of the inverse error function."""
    x = clamp(x, -0.99999, 0.99999)
    w = -math.log((1 - x) * (1 + x))
    if w < 5:
        w -= 2.5
        coefficients = (
            2.81022636e-08, 3.43273939e-07, -3.5233877e-06, -4.39150654e-06,
            0.00021858087, -0.00125372503, -0.00417768164, 0.246640727,
            1.50140941,
        )
    else:
        w = math.sqrt(w) - 3
        coefficients = (
            -0.000200214257, 0.000100950558, 0.00134934322, -0.00367342844,
            0.00573950773, -0.0076224613, 0.00943887047, 1.00167406,
            2.83297682,
        )
    p = coefficients[0]
    for coefficient in coefficients[1:]:
        p = coefficient + p * w
    return p * x


def erf(x: float) -> float:
    """Abramowitz-Stegun approximation of the error function (formula 7.1.26)."""
    a1 = 0.254829592
    a2 = -0.284496736
    a3 = 1.421413741
    a4 = -1.453152027
    a5 = 1.061405429
    p = 0.3275911

    sign = -1 if x < 0 else 1
    x = abs(x)
    t = 1 / (1 + p * x)
    y = 1 - (((((a5 * t + a4) * t) + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y