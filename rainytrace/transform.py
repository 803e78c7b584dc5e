"""4x4 matrices, affine and projective transforms, and interval arithmetic."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from rainytrace.geometry import Vector3
from rainytrace.mathutil import PI, radians

Rows = Tuple[Tuple[float, float, float, float], ...]

_IDENTITY_ROWS: Rows = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


def solve_linear_system_2x2(
    a: Sequence[Sequence[float]], b: Sequence[float]
) -> Optional[Tuple[float, float]]:
    """Solve ``a @ x = b`` for a 2x2 system; ``None`` if it is (nearly) singular."""
    det = a[0][0] * a[1][1] - a[0][1] * a[1][0]
    if abs(det) < 1e-10:
        return None
    x0 = (a[1][1] * b[0] - a[0][1] * b[1]) / det
    x1 = (a[0][0] * b[1] - a[1][0] * b[0]) / det
    if math.isnan(x0) or math.isnan(x1):
        return None
    return x0, x1


@dataclass(frozen=True)
class Matrix4x4:
    """An immutable row-major 4x4 matrix."""

    rows: Rows = field(default=_IDENTITY_ROWS)

    def __post_init__(self) -> None:
        rows = tuple(tuple(float(v) for v in row) for row in self.rows)
        if len(rows) != 4 or any(len(row) != 4 for row in rows):
            raise ValueError("a 4x4 matrix needs four rows of four values")
        object.__setattr__(self, "rows", rows)

    @classmethod
    def identity(cls) -> "Matrix4x4":
        """The identity matrix."""
        return cls(_IDENTITY_ROWS)

    def __getitem__(self, i: int) -> Tuple[float, float, float, float]:
        return self.rows[i]

    def __iter__(self) -> Iterator[Tuple[float, float, float, float]]:
        return iter(self.rows)

    def __str__(self) -> str:
        return "[ " + " ".join(
            "[ " + " ".join(f"{v:f}" for v in row) + " ]" for row in self.rows
        ) + " ]"

    def transpose(self) -> "Matrix4x4":
        """The transposed matrix."""
        return Matrix4x4(tuple(zip(*self.rows)))

    def __matmul__(self, other: "Matrix4x4") -> "Matrix4x4":
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        columns = list(zip(*other.rows))
        return Matrix4x4(
            tuple(
                tuple(sum(a * b for a, b in zip(row, col)) for col in columns)
                for row in self.rows
            )
        )

    def inverse(self) -> "Matrix4x4":
        """Inverse by Gauss-Jordan elimination with full pivoting.

        Raises ``ValueError`` for a singular matrix.
        """
        minv: List[List[float]] = [list(row) for row in self.rows]
        ipiv = [0, 0, 0, 0]
        indxr = [0, 0, 0, 0]
        indxc = [0, 0, 0, 0]
        for i in range(4):
            irow = icol = 0
            big = 0.0
            for j in range(4):
                if ipiv[j] == 1:
                    continue
                for k in range(4):
                    if ipiv[k] == 0:
                        if abs(minv[j][k]) >= big:
                            big = abs(minv[j][k])
                            irow, icol = j, k
                    elif ipiv[k] > 1:
                        raise ValueError("singular matrix in matrix inversion")
            ipiv[icol] += 1
            if irow != icol:
                minv[irow], minv[icol] = minv[icol], minv[irow]
            indxr[i] = irow
            indxc[i] = icol
            if minv[icol][icol] == 0:
                raise ValueError("singular matrix in matrix inversion")

            pivinv = 1.0 / minv[icol][icol]
            minv[icol][icol] = 1.0
            minv[icol] = [v * pivinv for v in minv[icol]]

            pivot_row = minv[icol]
            for j in range(4):
                if j == icol:
                    continue
                save = minv[j][icol]
                minv[j][icol] = 0.0
                minv[j] = [a - p * save for a, p in zip(minv[j], pivot_row)]

        for r, c in reversed(list(zip(indxr, indxc))):
            if r != c:
                for row in minv:
                    row[r], row[c] = row[c], row[r]
        return Matrix4x4(tuple(tuple(row) for row in minv))


class Transform:
    """A transformation together with its inverse matrix."""

    __slots__ = ("m", "m_inv")

    def __init__(
        self, m: Optional[Matrix4x4] = None, m_inv: Optional[Matrix4x4] = None
    ) -> None:
        if m is None:
            m = Matrix4x4.identity()
        elif not isinstance(m, Matrix4x4):
            m = Matrix4x4(m)
        if m_inv is None:
            m_inv = m.inverse()
        elif not isinstance(m_inv, Matrix4x4):
            m_inv = Matrix4x4(m_inv)
        self.m = m
        self.m_inv = m_inv

    def __eq__(self, other) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.m == other.m and self.m_inv == other.m_inv

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Transform({self.m})"

    def __mul__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self.m @ other.m, other.m_inv @ self.m_inv)

    def inverse(self) -> "Transform":
        """The inverse transformation."""
        return Transform(self.m_inv, self.m)

    def swaps_handedness(self) -> bool:
        """True when the linear part has a negative determinant."""
        m = self.m.rows
        det = (
            m[0][0] * (m[1][1] * m[2][2] - m[1][2] * m[2][1])
            - m[0][1] * (m[1][0] * m[2][2] - m[1][2] * m[2][0])
            + m[0][2] * (m[1][0] * m[2][1] - m[1][1] * m[2][0])
        )
        return det < 0

    def apply_point(self, p: Vector3) -> Vector3:
        """Transform a point, dividing by the homogeneous weight."""
        m = self.m.rows
        x, y, z = p.x, p.y, p.z
        xp = m[0][0] * x + m[0][1] * y + m[0][2] * z + m[0][3]
        yp = m[1][0] * x + m[1][1] * y + m[1][2] * z + m[1][3]
        zp = m[2][0] * x + m[2][1] * y + m[2][2] * z + m[2][3]
        wp = m[3][0] * x + m[3][1] * y + m[3][2] * z + m[3][3]
        if wp == 1:
            return Vector3(xp, yp, zp)
        return Vector3(xp / wp, yp / wp, zp / wp)

    def apply_vector(self, v: Vector3) -> Vector3:
        """Transform a direction; translation does not apply."""
        m = self.m.rows
        x, y, z = v.x, v.y, v.z
        return Vector3(
            m[0][0] * x + m[0][1] * y + m[0][2] * z,
            m[1][0] * x + m[1][1] * y + m[1][2] * z,
            m[2][0] * x + m[2][1] * y + m[2][2] * z,
        )

    def apply_normal(self, n: Vector3) -> Vector3:
        """Transform a surface normal by the inverse transpose."""
        mi = self.m_inv.rows
        x, y, z = n.x, n.y, n.z
        return Vector3(
            mi[0][0] * x + mi[1][0] * y + mi[2][0] * z,
            mi[0][1] * x + mi[1][1] * y + mi[2][1] * z,
            mi[0][2] * x + mi[1][2] * y + mi[2][2] * z,
        )


def translate(delta: Vector3) -> Transform:
    """Translation by ``delta``."""
    m = Matrix4x4(
        ((1, 0, 0, delta.x), (0, 1, 0, delta.y), (0, 0, 1, delta.z), (0, 0, 0, 1))
    )
    minv = Matrix4x4(
        ((1, 0, 0, -delta.x), (0, 1, 0, -delta.y), (0, 0, 1, -delta.z), (0, 0, 0, 1))
    )
    return Transform(m, minv)


def scale(x: float, y: float, z: float) -> Transform:
    """Non-uniform scale along the coordinate axes."""
    m = Matrix4x4(((x, 0, 0, 0), (0, y, 0, 0), (0, 0, z, 0), (0, 0, 0, 1)))
    minv = Matrix4x4(
        ((1 / x, 0, 0, 0), (0, 1 / y, 0, 0), (0, 0, 1 / z, 0), (0, 0, 0, 1))
    )
    return Transform(m, minv)


def _rotation(m: Matrix4x4) -> Transform:
    return Transform(m, m.transpose())


def rotate_x(theta: float) -> Transform:
    """Rotation by ``theta`` degrees about the x axis."""
    s, c = math.sin(radians(theta)), math.cos(radians(theta))
    return _rotation(Matrix4x4(((1, 0, 0, 0), (0, c, -s, 0), (0, s, c, 0), (0, 0, 0, 1))))


def rotate_y(theta: float) -> Transform:
    """Rotation by ``theta`` degrees about the y axis."""
    s, c = math.sin(radians(theta)), math.cos(radians(theta))
    return _rotation(Matrix4x4(((c, 0, s, 0), (0, 1, 0, 0), (-s, 0, c, 0), (0, 0, 0, 1))))


def rotate_z(theta: float) -> Transform:
    """Rotation by ``theta`` degrees about the z axis."""
    s, c = math.sin(radians(theta)), math.cos(radians(theta))
    return _rotation(Matrix4x4(((c, -s, 0, 0), (s, c, 0, 0), (0, 0, 1, 0), (0, 0, 0, 1))))


def rotate(theta: float, axis: Vector3) -> Transform:
    """Rotation by ``theta`` degrees about an arbitrary axis."""
    a = axis.normalized()
    s, c = math.sin(radians(theta)), math.cos(radians(theta))
    m = Matrix4x4(
        (
            (
                a.x * a.x + (1 - a.x * a.x) * c,
                a.x * a.y * (1 - c) - a.z * s,
                a.x * a.z * (1 - c) + a.y * s,
                0,
            ),
            (
                a.x * a.y * (1 - c) + a.z * s,
                a.y * a.y + (1 - a.y * a.y) * c,
                a.y * a.z * (1 - c) - a.x * s,
                0,
            ),
            (
                a.x * a.z * (1 - c) - a.y * s,
                a.y * a.z * (1 - c) + a.x * s,
                a.z * a.z + (1 - a.z * a.z) * c,
                0,
            ),
            (0, 0, 0, 1),
        )
    )
    return _rotation(m)


def look_at(pos: Vector3, look: Vector3, up: Vector3) -> Transform:
    """World-to-camera transform for a camera at ``pos`` looking at ``look``.

    Raises ``ValueError`` when ``up`` is parallel to the viewing direction.
    """
    direction = (look - pos).normalized()
    up_n = up.normalized()
    if up_n.cross(direction).length() == 0:
        raise ValueError(
            "up vector and viewing direction passed to look_at point the same way"
        )
    left = up_n.cross(direction).normalized()
    new_up = direction.cross(left)
    camera_to_world = Matrix4x4(
        (
            (left.x, new_up.x, direction.x, pos.x),
            (left.y, new_up.y, direction.y, pos.y),
            (left.z, new_up.z, direction.z, pos.z),
            (0, 0, 0, 1),
        )
    )
    return Transform(camera_to_world.inverse(), camera_to_world)


def orthographic(z_near: float, z_far: float) -> Transform:
    """Orthographic projection mapping ``[z_near, z_far]`` to ``[0, 1]`` in z."""
    return scale(1, 1, 1 / (z_far - z_near)) * translate(Vector3(0, 0, -z_near))


def perspective(fov: float, n: float, f: float) -> Transform:
    """Perspective projection with field of view ``fov`` degrees.

    Depth ``n`` maps to z = 0 and depth ``f`` to z = 1.
    """
    persp = Matrix4x4(
        (
            (1, 0, 0, 0),
            (0, 1, 0, 0),
            (0, 0, f / (f - n), -f * n / (f - n)),
            (0, 0, 1, 0),
        )
    )
    inv_tan_ang = 1 / math.tan(radians(fov) / 2)
    return scale(inv_tan_ang, inv_tan_ang, 1) * Transform(persp)


class Interval:
    """A closed range of reals for conservative interval arithmetic."""

    __slots__ = ("low", "high")

    def __init__(self, v0: float, v1: Optional[float] = None) -> None:
        if v1 is None:
            v1 = v0
        self.low = min(v0, v1)
        self.high = max(v0, v1)

    def __repr__(self) -> str:
        return f"Interval({self.low!r}, {self.high!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return (self.low, self.high) == (other.low, other.high)

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: "Interval") -> "Interval":
        return Interval(self.low + other.low, self.high + other.high)

    def __sub__(self, other: "Interval") -> "Interval":
        return Interval(self.low - other.high, self.high - other.low)

    def __mul__(self, other: "Interval") -> "Interval":
        products = (
            self.low * other.low,
            self.high * other.low,
            self.low * other.high,
            self.high * other.high,
        )
        return Interval(min(products), max(products))

    def _check_range(self) -> None:
        if self.low < 0 or self.high > 2.0001 * PI:
            raise ValueError("interval must lie within [0, 2*pi]")

    def sin(self) -> "Interval":
        """Bounds of ``sin`` over the interval, which must lie in ``[0, 2*pi]``."""
        self._check_range()
        sin_low, sin_high = sorted((math.sin(self.low), math.sin(self.high)))
        if self.low < PI / 2 < self.high:
            sin_high = 1.0
        if self.low < 1.5 * PI < self.high:
            sin_low = -1.0
        return Interval(sin_low, sin_high)

    def cos(self) -> "Interval":
        """Bounds of ``cos`` over the interval, which must lie in ``[0, 2*pi]``."""
        self._check_range()
        cos_low, cos_high = sorted((math.cos(self.low), math.cos(self.high)))
        if self.low < PI < self.high:
            cos_low = -1.0
        return Interval(cos_low, cos_high)


def interval_find_zeros(
    c1: float,
    c2: float,
    c3: float,
    c4: float,
    c5: float,
    theta: float,
    t_interval: Interval,
    depth: int = 8,
) -> List[float]:
    """Zeros in ``t_interval`` of ``c1 + (c2 + c3 t) cos(2 theta t) + (c4 + c5 t) sin(2 theta t)``."""
    zeros: List[float] = []
    _find_zeros(c1, c2, c3, c4, c5, theta, t_interval, depth, zeros)
    return zeros


def _find_zeros(c1, c2, c3, c4, c5, theta, t_interval, depth, zeros) -> None:
    angle = Interval(2 * theta) * t_interval
    rng = (
        Interval(c1)
        + (Interval(c2) + Interval(c3) * t_interval) * angle.cos()
        + (Interval(c4) + Interval(c5) * t_interval) * angle.sin()
    )
    if rng.low > 0 or rng.high < 0 or rng.low == rng.high:
        return
    if depth > 0:
        mid = (t_interval.low + t_interval.high) * 0.5
        _find_zeros(c1, c2, c3, c4, c5, theta,
                    Interval(t_interval.low, mid), depth - 1, zeros)
        _find_zeros(c1, c2, c3, c4, c5, theta,
                    Interval(mid, t_interval.high), depth - 1, zeros)
        return

    t = (t_interval.low + t_interval.high) * 0.5
    for _ in range(4):
        f = c1 + (c2 + c3 * t) * math.cos(2 * theta * t) + (c4 + c5 * t) * math.sin(
            2 * theta * t
        )
        f_prime = (c3 + 2 * (c4 + c5 * t) * theta) * math.cos(2 * t * theta) + (
            c5 - 2 * (c2 + c3 * t) * theta
        ) * math.sin(2 * t * theta)
        if f == 0 or f_prime == 0:
            break
        t = t - f / f_prime
    if t_interval.low - 1e-3 <= t < t_interval.high + 1e-3:
        zeros.append(t)