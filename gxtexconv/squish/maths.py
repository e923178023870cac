"""Small vector maths and the principal-axis solver used by the colour fitters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

FLT_EPSILON = 1.1920928955078125e-07

Sym3x3 = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector."""

    x: float
    y: float
    z: float

    @classmethod
    def splat(cls, value: float) -> "Vec3":
        """Return a vector with every component set to ``value``."""
        return cls(value, value, value)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def __add__(self, other: "Vec3") -> "Vec3":
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other: Union["Vec3", float]) -> "Vec3":
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        if isinstance(other, (int, float)):
            return Vec3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, other: float) -> "Vec3":
        if isinstance(other, (int, float)):
            return Vec3(self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __truediv__(self, other: Union["Vec3", float]) -> "Vec3":
        if isinstance(other, Vec3):
            return Vec3(self.x / other.x, self.y / other.y, self.z / other.z)
        if isinstance(other, (int, float)):
            scale = 1.0 / other
            return Vec3(self.x * scale, self.y * scale, self.z * scale)
        return NotImplemented


def dot(left: Vec3, right: Vec3) -> float:
    """Dot product of two vectors."""
    return left.x * right.x + left.y * right.y + left.z * right.z


def vmin(left: Vec3, right: Vec3) -> Vec3:
    """Component-wise minimum."""
    return Vec3(min(left.x, right.x), min(left.y, right.y), min(left.z, right.z))


def vmax(left: Vec3, right: Vec3) -> Vec3:
    """Component-wise maximum."""
    return Vec3(max(left.x, right.x), max(left.y, right.y), max(left.z, right.z))


def truncate(v: Vec3) -> Vec3:
    """Round every component towards zero."""
    return Vec3(float(math.trunc(v.x)), float(math.trunc(v.y)), float(math.trunc(v.z)))


def length_squared(v: Vec3) -> float:
    """Squared Euclidean length."""
    return dot(v, v)


def compute_weighted_covariance(points: Sequence[Vec3], weights: Sequence[float]) -> Sym3x3:
    """Return the weighted covariance of ``points`` as the six upper-triangle entries."""
    total = sum(weights)
    centroid = Vec3.splat(0.0)
    for point, weight in zip(points, weights):
        centroid = centroid + weight * point
    centroid = centroid / total

    cov = [0.0] * 6
    for point, weight in zip(points, weights):
        a = point - centroid
        b = weight * a
        cov[0] += a.x * b.x
        cov[1] += a.x * b.y
        cov[2] += a.x * b.z
        cov[3] += a.y * b.y
        cov[4] += a.y * b.z
        cov[5] += a.z * b.z
    return tuple(cov)  # type: ignore[return-value]


def _shifted(matrix: Sym3x3, evalue: float) -> list:
    return [
        matrix[0] - evalue,
        matrix[1],
        matrix[2],
        matrix[3] - evalue,
        matrix[4],
        matrix[5] - evalue,
    ]


def _largest_index(values: Sequence[float]) -> int:
    best, best_index = abs(values[0]), 0
    for index, value in enumerate(values[1:], start=1):
        if abs(value) > best:
            best, best_index = abs(value), index
    return best_index


def _multiplicity1_evector(matrix: Sym3x3, evalue: float) -> Vec3:
    m = _shifted(matrix, evalue)
    u = [
        m[3] * m[5] - m[4] * m[4],
        m[2] * m[4] - m[1] * m[5],
        m[1] * m[4] - m[2] * m[3],
        m[0] * m[5] - m[2] * m[2],
        m[1] * m[2] - m[4] * m[0],
        m[0] * m[3] - m[1] * m[1],
    ]
    mi = _largest_index(u)
    if mi == 0:
        return Vec3(u[0], u[1], u[2])
    if mi in (1, 3):
        return Vec3(u[1], u[3], u[4])
    return Vec3(u[2], u[4], u[5])


def _multiplicity2_evector(matrix: Sym3x3, evalue: float) -> Vec3:
    m = _shifted(matrix, evalue)
    mi = _largest_index(m)
    if mi in (0, 1):
        return Vec3(-m[1], m[0], 0.0)
    if mi == 2:
        return Vec3(m[2], 0.0, -m[0])
    if mi in (3, 4):
        return Vec3(0.0, -m[4], m[3])
    return Vec3(0.0, -m[5], m[4])


def compute_principle_component(matrix: Sym3x3) -> Vec3:
    """Return the eigenvector of the largest-magnitude eigenvalue of a symmetric matrix."""
    c0 = (
        matrix[0] * matrix[3] * matrix[5]
        + 2.0 * matrix[1] * matrix[2] * matrix[4]
        - matrix[0] * matrix[4] * matrix[4]
        - matrix[3] * matrix[2] * matrix[2]
        - matrix[5] * matrix[1] * matrix[1]
    )
    c1 = (
        matrix[0] * matrix[3]
        + matrix[0] * matrix[5]
        + matrix[3] * matrix[5]
        - matrix[1] * matrix[1]
        - matrix[2] * matrix[2]
        - matrix[4] * matrix[4]
    )
    c2 = matrix[0] + matrix[3] + matrix[5]

    a = c1 - (1.0 / 3.0) * c2 * c2
    b = (-2.0 / 27.0) * c2 * c2 * c2 + (1.0 / 3.0) * c1 * c2 - c0
    q = 0.25 * b * b + (1.0 / 27.0) * a * a * a

    if FLT_EPSILON < q:
        # A single root: the matrix is a multiple of the identity.
        return Vec3.splat(1.0)

    if q < -FLT_EPSILON:
        theta = math.atan2(math.sqrt(-q), -0.5 * b)
        rho = math.sqrt(0.25 * b * b - q)
        rt = math.pow(rho, 1.0 / 3.0)
        ct = math.cos(theta / 3.0)
        st = math.sin(theta / 3.0)
        root3 = math.sqrt(3.0)

        l1 = (1.0 / 3.0) * c2 + 2.0 * rt * ct
        l2 = (1.0 / 3.0) * c2 - rt * (ct + root3 * st)
        l3 = (1.0 / 3.0) * c2 - rt * (ct - root3 * st)
        if abs(l2) > abs(l1):
            l1 = l2
        if abs(l3) > abs(l1):
            l1 = l3
        return _multiplicity1_evector(matrix, l1)

    if b < 0.0:
        rt = -math.pow(-0.5 * b, 1.0 / 3.0)
    else:
        rt = math.pow(0.5 * b, 1.0 / 3.0)
    l1 = (1.0 / 3.0) * c2 + rt
    l2 = (1.0 / 3.0) * c2 - 2.0 * rt
    if abs(l1) > abs(l2):
        return _multiplicity2_evector(matrix, l1)
    return _multiplicity1_evector(matrix, l2)