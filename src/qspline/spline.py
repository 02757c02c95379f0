"""Quadratic splines with implied on-curve points"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union, overload

import numpy as np
from numpy.typing import NDArray

from qspline.consts import POINT_TYPE_ON_CURVE, POINT_TYPE_QUADRATIC, QuadCmds
from qspline.curves import CubicCurve, QuadraticCurve
from qspline.point import Point, PointLike


@dataclass(frozen=True)
class QuadraticSpline(Sequence[Point]):
    """
    A chain of n quadratic Bezier curves stored as n+2 points
        [start, q_0, q_1, ..., q_{n-1}, end]

    Only the off-curve handles q_i and the two true end points are stored.
    The on-curve point between segment i and i+1 is implied at the midpoint
    of q_i and q_{i+1} (TrueType contour convention).
    """

    points: Tuple[Point, ...]

    def __post_init__(self):
        if len(self.points) < 3:
            raise ValueError(f"A quadratic spline needs at least 3 points, got {len(self.points)}")

    @classmethod
    def from_points(cls, points: Sequence[PointLike]) -> QuadraticSpline:
        """Create a spline from (x, y) point-likes."""
        return cls(tuple(Point.of(pt) for pt in points))

    @overload
    def __getitem__(self, index: int) -> Point: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Point]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Point, Sequence[Point]]:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    @property
    def start(self) -> Point:
        """First on-curve point."""
        return self.points[0]

    @property
    def end(self) -> Point:
        """Last on-curve point."""
        return self.points[-1]

    @property
    def segment_count(self) -> int:
        """Number of quadratic segments n."""
        return len(self.points) - 2

    def segments(self) -> List[QuadraticCurve]:
        """Expand the implied on-curve points into explicit quadratic segments."""
        handles = self.points[1:-1]
        result: List[QuadraticCurve] = []
        on_curve = self.points[0]
        for i, handle in enumerate(handles):
            if i + 1 < len(handles):
                next_on_curve = handle.midpoint(handles[i + 1])
            else:
                next_on_curve = self.points[-1]
            result.append(QuadraticCurve(on_curve, handle, next_on_curve))
            on_curve = next_on_curve
        return result

    def point_at(self, t: float) -> Point:
        """
        Evaluate the spline at global parameter t in [0, 1].
        Segment i covers [i/n, (i+1)/n], matching the parameter ranges the
        cubic was split into.
        """
        n = self.segment_count
        index = min(int(math.floor(t * n)), n - 1)
        index = max(index, 0)
        return self.segments()[index].point_at(t * n - index)

    def evaluate(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate the spline at all global parameters of t, returns shape (len(t), 2)."""
        t = np.asarray(t, dtype=np.float64)
        n = self.segment_count
        indices = np.clip(np.floor(t * n).astype(np.int64), 0, n - 1)
        local_t = t * n - indices
        result = np.empty((len(t), 2), dtype=np.float64)
        for i, segment in enumerate(self.segments()):
            mask = indices == i
            if np.any(mask):
                result[mask] = segment.evaluate(local_t[mask])
        return result

    def max_deviation(self, cubic: CubicCurve, samples: int = 100) -> float:
        """
        Maximum distance between the cubic and this spline, sampled at
        samples+1 evenly spaced parameters. Cubic and spline are compared at
        the same global parameter.
        """
        t = np.linspace(0, 1, samples + 1, dtype=np.float64)
        deltas = cubic.evaluate(t) - self.evaluate(t)
        return float(np.max(np.hypot(deltas[:, 0], deltas[:, 1])))

    def to_array(self) -> NDArray[np.float64]:
        """Stored points as array of shape (n+2, 2)."""
        return np.array([pt.to_tuple() for pt in self.points], dtype=np.float64)

    def to_tuples(self) -> List[Tuple[float, float]]:
        """Stored points as list of (x, y) tuples."""
        return [pt.to_tuple() for pt in self.points]

    def commands(self) -> Tuple[List[QuadCmds], NDArray[np.float64]]:
        """
        Explicit path commands of the spline.

        Returns:
            Tuple[List[QuadCmds], NDArray[np.float64]]: command letters ("M" followed by
            one "Q" per segment) and the matching points of shape (2n+1, 3) = (x, y, type)
            with type 0.0 for on-curve and 2.0 for quadratic control points.
        """
        segments = self.segments()
        commands: List[QuadCmds] = ["M"]
        rows = [[self.start.x, self.start.y, POINT_TYPE_ON_CURVE]]
        for segment in segments:
            commands.append("Q")
            rows.append([segment.p1.x, segment.p1.y, POINT_TYPE_QUADRATIC])
            rows.append([segment.p2.x, segment.p2.y, POINT_TYPE_ON_CURVE])
        return commands, np.array(rows, dtype=np.float64)

    def svg_path_d(self) -> str:
        """SVG path data of the spline, e.g. "M 0 0 Q 5 10 10 0"."""
        parts = [f"M {self.start.x:g} {self.start.y:g}"]
        for segment in self.segments():
            parts.append(f"Q {segment.p1.x:g} {segment.p1.y:g} {segment.p2.x:g} {segment.p2.y:g}")
        return " ".join(parts)
