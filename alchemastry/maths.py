"""Small vector and matrix types used for world and UI geometry.

Matrices are row-major: ``a[0]`` is row 0 column 0, ``a[1]`` row 0 column 1.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Vec2:
    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        return self.scaled(factor)

    __rmul__ = __mul__

    def scaled(self, factor: float) -> Vec2:
        """Return the vector multiplied by a scalar."""
        return Vec2(self.x * factor, self.y * factor)

    def reciprocal(self) -> Vec2:
        """Return the component-wise reciprocal."""
        return Vec2(1.0 / self.x, 1.0 / self.y)

    def normalised(self) -> Vec2:
        """Return the unit vector in the same direction; the zero vector stays zero."""
        if self.x == 0.0 and self.y == 0.0:
            return self
        return self.scaled(1.0 / math.sqrt(self.x * self.x + self.y * self.y))

    def length(self) -> float:
        return math.sqrt(self.length_sqr())

    def length_sqr(self) -> float:
        return self.x * self.x + self.y * self.y

    def to_ivec2(self) -> IVec2:
        """Convert to integers, truncating towards zero."""
        return IVec2(int(self.x), int(self.y))


@dataclass(frozen=True)
class IVec2:
    x: int
    y: int

    def to_vec2(self) -> Vec2:
        return Vec2(float(self.x), float(self.y))


@dataclass(frozen=True)
class Vec4:
    x: float
    y: float
    z: float
    w: float

    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    @property
    def a(self) -> float:
        return self.w


@dataclass(frozen=True)
class Mat2:
    a00: float
    a01: float
    a10: float
    a11: float

    def apply(self, vec: Vec2) -> Vec2:
        """Multiply this matrix by a column vector."""
        return Vec2(
            self.a00 * vec.x + self.a01 * vec.y,
            self.a10 * vec.x + self.a11 * vec.y,
        )


@dataclass(frozen=True)
class Mat4:
    a: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.a) != 16:
            raise ValueError(f"a 4x4 matrix needs 16 values, got {len(self.a)}")
        object.__setattr__(self, "a", tuple(float(v) for v in self.a))

    def __getitem__(self, index: int) -> float:
        return self.a[index]

    def at(self, row: int, col: int) -> float:
        return self.a[row * 4 + col]


class Origin(Enum):
    CENTRE = 0
    BOTTOM_LEFT = 1


@dataclass(frozen=True)
class Quad:
    position: Vec2
    size: Vec2
    angle: float = 0.0
    origin: Origin = Origin.CENTRE


@dataclass(frozen=True)
class QuadVertices:
    bottom_left: Vec2
    bottom_right: Vec2
    top_left: Vec2
    top_right: Vec2


def deg_to_rad(deg: float) -> float:
    return deg * 0.017453


def rotation_ccw(angle: float) -> Mat2:
    c, s = math.cos(angle), math.sin(angle)
    return Mat2(c, -s, s, c)


def rotation_cw(angle: float) -> Mat2:
    c, s = math.cos(angle), math.sin(angle)
    return Mat2(c, s, -s, c)


def mat4_identity() -> Mat4:
    return Mat4(
        (
            1.0, 0.0, 0.0, 0.0,
            0.0, 1.0, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0,
        )
    )


def world_to_ndc_projection(screen_width_tiles: float) -> Mat4:
    """Scale world tiles to normalised device coordinates at a 16:9 aspect."""
    screen_height_tiles = 9.0 / 16.0 * screen_width_tiles
    sx = 1.0 / screen_width_tiles
    sy = 1.0 / screen_height_tiles
    return Mat4(
        (
            sx, 0.0, 0.0, 0.0,
            0.0, sy, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0,
        )
    )


def ui_projection(virtual_size: Vec2) -> Mat4:
    """Map a virtual UI area with its origin at the bottom left onto [-1, 1]."""
    sf = virtual_size.scaled(0.5).reciprocal()
    return Mat4(
        (
            sf.x, 0.0, 0.0, -1.0,
            0.0, sf.y, 0.0, -1.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0,
        )
    )


def quad_vertices(quad: Quad) -> QuadVertices:
    """Return the four corners of a rotated quad."""
    rotation = rotation_ccw(quad.angle)

    if quad.origin is Origin.CENTRE:
        half = quad.size.scaled(0.5)
        top = rotation.apply(Vec2(0.0, half.y))
        right = rotation.apply(Vec2(half.x, 0.0))
        p = quad.position
        return QuadVertices(
            bottom_left=p - (top + right),
            bottom_right=p + (right - top),
            top_left=p + (top - right),
            top_right=p + (top + right),
        )

    if quad.origin is Origin.BOTTOM_LEFT:
        top = rotation.apply(Vec2(0.0, quad.size.y))
        right = rotation.apply(Vec2(quad.size.x, 0.0))
        p = quad.position
        return QuadVertices(
            bottom_left=p,
            bottom_right=p + right,
            top_left=p + top,
            top_right=p + (top + right),
        )

    raise ValueError(f"cannot get vertices of quad with origin {quad.origin!r}")