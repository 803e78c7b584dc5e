"""Small vector types and the reflection and refraction helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True, slots=True)
class Vector3:
    """A three-component vector, also used for points and normals."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, s: float) -> "Vector3":
        return Vector3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> "Vector3":
        inv = 1.0 / s
        return Vector3(self.x * inv, self.y * inv, self.z * inv)

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z)[i]

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other: "Vector3") -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def abs_dot(self, other: "Vector3") -> float:
        """Absolute value of the scalar product."""
        return abs(self.dot(other))

    def cross(self, other: "Vector3") -> "Vector3":
        """Vector product."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.length_squared())

    def normalized(self) -> "Vector3":
        """The vector scaled to unit length."""
        return self / self.length()


@dataclass(frozen=True, slots=True)
class Point2:
    """A two-component point, used for sample and film positions."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point2") -> "Point2":
        return Point2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2") -> "Point2":
        return Point2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Point2":
        return Point2(-self.x, -self.y)

    def __mul__(self, s: float) -> "Point2":
        return Point2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> "Point2":
        inv = 1.0 / s
        return Point2(self.x * inv, self.y * inv)

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y)[i]

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


def faceforward(n: Vector3, v: Vector3) -> Vector3:
    """Flip ``n`` so that it lies in the same hemisphere as ``v``."""
    return -n if n.dot(v) < 0 else n


def reflect(wo: Vector3, n: Vector3) -> Vector3:
    """Mirror direction of ``wo`` about the normal ``n``."""
    return -wo + 2 * wo.dot(n) * n


def refract(wi: Vector3, n: Vector3, eta: float) -> Optional[Vector3]:
    """Refracted direction of ``wi`` through a surface with normal ``n``.

    ``eta`` is the ratio of the incident to the transmitted index of
    refraction.  Returns ``None`` on total internal reflection.
    """
    cos_theta_i = n.dot(wi)
    sin2_theta_i = max(0.0, 1 - cos_theta_i * cos_theta_i)
    sin2_theta_t = eta * eta * sin2_theta_i
    if sin2_theta_t >= 1:
        return None
    cos_theta_t = math.sqrt(1 - sin2_theta_t)
    return eta * -wi + (eta * cos_theta_i - cos_theta_t) * n