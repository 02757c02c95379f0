"""Immutable 2D point with the vector operations the curve code needs"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

PointLike = Union["Point", Sequence[float]]


@dataclass(frozen=True)
class Point:
    """
    A 2D point / vector.

    Besides the usual vector operations a Point can be multiplied by another
    Point like a complex number, which makes ``p * Point(0, 1)`` a rotation by
    90 degrees. ``rotate90()`` is the explicit form of that operation.

    Attributes:
        x (float): x-coordinate
        y (float): y-coordinate
    """

    x: float
    y: float

    @classmethod
    def of(cls, value: PointLike) -> Point:
        """Coerce a Point, a (x, y) tuple/list or a numpy row into a Point."""
        if isinstance(value, Point):
            return value
        if len(value) < 2:
            raise ValueError(f"Point needs two coordinates, got {value!r}")
        return cls(float(value[0]), float(value[1]))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def __mul__(self, other: Union[Point, float]) -> Point:
        if isinstance(other, Point):
            # complex-style product
            return Point(
                self.x * other.x - self.y * other.y,
                self.x * other.y + self.y * other.x,
            )
        return Point(self.x * other, self.y * other)

    def __rmul__(self, other: float) -> Point:
        return Point(self.x * other, self.y * other)

    def __truediv__(self, other: float) -> Point:
        return Point(self.x / other, self.y / other)

    def __abs__(self) -> float:
        return self.magnitude()

    def rotate90(self) -> Point:
        """Rotate counter-clockwise by 90 degrees (same as multiplying by i)."""
        return Point(-self.y, self.x)

    def dot(self, other: Point) -> float:
        """Dot product with another point."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point) -> float:
        """z-component of the cross product, zero for parallel vectors."""
        return self.x * other.y - self.y * other.x

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def midpoint(self, other: Point) -> Point:
        """Point halfway between self and other."""
        return Point((self.x + other.x) * 0.5, (self.y + other.y) * 0.5)

    def to_tuple(self) -> Tuple[float, float]:
        """Return as plain (x, y) tuple."""
        return (self.x, self.y)


ORIGIN = Point(0.0, 0.0)
