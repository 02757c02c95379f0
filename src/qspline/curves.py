"""Cubic and quadratic Bezier curve value types"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from qspline.consts import POINT_TYPE_CUBIC, POINT_TYPE_ON_CURVE, TWO_THIRDS
from qspline.point import Point, PointLike


###############################################################################
# CubicCurve
###############################################################################
@dataclass(frozen=True)
class CubicCurve:
    """
    Cubic Bezier curve
        B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3,  t in [0, 1]

    Attributes:
        p0 (Point): start point
        p1 (Point): first handle
        p2 (Point): second handle
        p3 (Point): end point
    """

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    @classmethod
    def from_points(cls, points: Union[CubicCurve, Sequence[PointLike], NDArray[np.float64]]) -> CubicCurve:
        """Create a CubicCurve from four (x, y) points.

        Args:
            points: a CubicCurve, a sequence of four point-likes or a (4, 2+) array

        Raises:
            ValueError: if not exactly four points are given
        """
        if isinstance(points, CubicCurve):
            return points
        if len(points) != 4:
            raise ValueError(f"Cubic curve needs exactly 4 points, got {len(points)}")
        return cls(*(Point.of(pt) for pt in points))

    @property
    def points(self) -> Tuple[Point, Point, Point, Point]:
        """The control points as tuple (p0, p1, p2, p3)."""
        return (self.p0, self.p1, self.p2, self.p3)

    def __iter__(self):
        return iter(self.points)

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at parameter t."""
        omt = 1.0 - t
        return (
            self.p0 * (omt * omt * omt)
            + self.p1 * (3.0 * omt * omt * t)
            + self.p2 * (3.0 * omt * t * t)
            + self.p3 * (t * t * t)
        )

    def evaluate(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate the curve at all parameters of t, returns shape (len(t), 2)."""
        t = np.asarray(t, dtype=np.float64)
        omt = 1 - t
        omt2 = omt**2
        omt3 = omt2 * omt
        t2 = t**2
        t3 = t2 * t
        pts = self.to_array()
        x = omt3 * pts[0, 0] + 3 * omt2 * t * pts[1, 0] + 3 * omt * t2 * pts[2, 0] + t3 * pts[3, 0]
        y = omt3 * pts[0, 1] + 3 * omt2 * t * pts[1, 1] + 3 * omt * t2 * pts[2, 1] + t3 * pts[3, 1]
        return np.column_stack([x, y])

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Polygonize the curve into line segments.

        Args:
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 3) containing the points (x, y, type),
            type 0.0 for the end points and 3.0 in between
        """
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")
        xy = self.evaluate(np.linspace(0, 1, steps + 1, dtype=np.float64))
        types = np.full(steps + 1, POINT_TYPE_CUBIC, dtype=np.float64)
        types[0] = types[-1] = POINT_TYPE_ON_CURVE
        return np.column_stack([xy, types])

    def to_array(self) -> NDArray[np.float64]:
        """Control points as array of shape (4, 2)."""
        return np.array([pt.to_tuple() for pt in self.points], dtype=np.float64)


###############################################################################
# QuadraticCurve
###############################################################################
@dataclass(frozen=True)
class QuadraticCurve:
    """
    Quadratic Bezier curve
        B(t) = (1-t)^2*P0 + 2*(1-t)*t*P1 + t^2*P2,  t in [0, 1]
    """

    p0: Point
    p1: Point
    p2: Point

    @classmethod
    def from_points(cls, points: Union[Sequence[PointLike], NDArray[np.float64]]) -> QuadraticCurve:
        """Create a QuadraticCurve from three (x, y) points."""
        if len(points) != 3:
            raise ValueError(f"Quadratic curve needs exactly 3 points, got {len(points)}")
        return cls(*(Point.of(pt) for pt in points))

    @property
    def points(self) -> Tuple[Point, Point, Point]:
        """The control points as tuple (p0, p1, p2)."""
        return (self.p0, self.p1, self.p2)

    def __iter__(self):
        return iter(self.points)

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at parameter t."""
        omt = 1.0 - t
        return self.p0 * (omt * omt) + self.p1 * (2.0 * omt * t) + self.p2 * (t * t)

    def evaluate(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate the curve at all parameters of t, returns shape (len(t), 2)."""
        t = np.asarray(t, dtype=np.float64)
        omt = 1 - t
        pts = self.to_array()
        x = omt**2 * pts[0, 0] + 2 * omt * t * pts[1, 0] + t**2 * pts[2, 0]
        y = omt**2 * pts[0, 1] + 2 * omt * t * pts[1, 1] + t**2 * pts[2, 1]
        return np.column_stack([x, y])

    def to_array(self) -> NDArray[np.float64]:
        """Control points as array of shape (3, 2)."""
        return np.array([pt.to_tuple() for pt in self.points], dtype=np.float64)

    def elevate(self) -> CubicCurve:
        """Exact cubic representation of this quadratic (degree elevation)."""
        c1 = self.p0 + (self.p1 - self.p0) * TWO_THIRDS
        c2 = self.p2 + (self.p1 - self.p2) * TWO_THIRDS
        return CubicCurve(self.p0, c1, c2, self.p2)
