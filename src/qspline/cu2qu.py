"""Conversion of cubic Bezier curves into quadratic Bezier splines.

A cubic is approximated by n quadratics, trying n = 1, 2, 3, ... until the
spline stays within the permitted deviation everywhere on the curve.
Each candidate is verified exactly (up to the bisection depth limit), not by
sampling: the difference between the degree-elevated quadratic and the cubic
is itself a cubic Bezier, and the farthest-fits-inside check bounds it by its
control polygon.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from qspline.consts import MAX_FIT_DEPTH, MAX_N, TWO_THIRDS
from qspline.curves import CubicCurve, QuadraticCurve
from qspline.point import ORIGIN, Point, PointLike
from qspline.spline import QuadraticSpline
from qspline.subdivision import CubicSubdivision

logger = logging.getLogger(__name__)

CubicLike = Union[CubicCurve, Sequence[PointLike], NDArray[np.float64]]


class ApproxNotFoundError(Exception):
    """Raised by outline consumers when a cubic cannot be approximated."""

    def __init__(self, curve: CubicCurve, tolerance: float):
        self.curve = curve
        self.tolerance = tolerance
        super().__init__(f"No quadratic approximation found for {curve} within tolerance {tolerance}")


def _check_tolerance(tolerance: float) -> float:
    tolerance = float(tolerance)
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ValueError(f"Tolerance must be a finite number >= 0, got {tolerance}")
    return tolerance


class CubicToQuadratic:
    """
    Class to provide the static methods of the cubic to quadratic conversion.

    The building blocks are public for testing and for callers that want to
    run a single step, e.g. fit a spline with a fixed number of segments.
    """

    @staticmethod
    def calc_intersect(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
        """
        Calculate the intersection of the line through a, b and the line through c, d.

        Args:
            a (Point): Start point of first line.
            b (Point): End point of first line.
            c (Point): Start point of second line.
            d (Point): End point of second line.

        Returns:
            Optional[Point]: Location of the intersection, None if the lines are parallel.
        """
        ab = b - a
        cd = d - c
        p = ab.rotate90()
        denominator = p.dot(cd)
        if denominator == 0:
            # Three or four equal points still intersect in one of the off-curves
            if b == c and (a == b or c == d):
                return b
            return None
        return c + cd * (p.dot(a - c) / denominator)

    @staticmethod
    def approximate_control(t: float, curve: CubicCurve) -> Point:
        """
        Approximate a quadratic control point by extrapolating the cubic handles.

        Args:
            t (float): Position of the control point between the extrapolated handles.
            curve (CubicCurve): The (sub-)curve.

        Returns:
            Point: Location of the candidate control point.
        """
        p0, p1, p2, p3 = curve.points
        new_p1 = p0 + (p1 - p0) * 1.5
        new_p2 = p3 + (p2 - p3) * 1.5
        return new_p1 + (new_p2 - new_p1) * t

    @staticmethod
    def fits_inside(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        p0: Point,
        p1: Point,
        p2: Point,
        p3: Point,
        tolerance: float,
        max_depth: int = MAX_FIT_DEPTH,
    ) -> bool:
        """
        Check if a cubic Bezier lies within a given distance of the origin.

        "Origin" means *the* origin (0,0), not the start of the curve. The curve
        is usually the difference of two curves, so this bounds their deviation.
        No checks are made on p0 and p3, only the inside of the curve is checked.

        The curve is bisected until its handles lie within the distance or its
        midpoint lies outside. Bisection stops after max_depth levels, a curve
        still undecided by then is rejected.

        Returns:
            bool: True if the cubic entirely lies within tolerance of the origin.
        """
        # First check p2 then p1, as p2 has higher error early on.
        if abs(p2) <= tolerance and abs(p1) <= tolerance:
            return True

        mid = (p0 + (p1 + p2) * 3 + p3) * 0.125
        if abs(mid) > tolerance:
            return False
        if max_depth <= 0:
            return False

        deriv3 = (p3 + p2 - p1 - p0) * 0.125
        return CubicToQuadratic.fits_inside(
            p0, (p0 + p1) * 0.5, mid - deriv3, mid, tolerance, max_depth - 1
        ) and CubicToQuadratic.fits_inside(mid, mid + deriv3, (p2 + p3) * 0.5, p3, tolerance, max_depth - 1)

    @staticmethod
    def _chord_control(curve: CubicCurve) -> Optional[Point]:
        """Control point candidate for a cubic whose control points all lie on its chord."""
        p0, p1, p2, p3 = curve.points
        chord = p3 - p0
        if chord.dot(chord) == 0:
            return None
        if chord.cross(p1 - p0) != 0 or chord.cross(p2 - p0) != 0:
            return None
        return p0.midpoint(p3)

    @staticmethod
    def approximate_quadratic(
        curve: CubicCurve, tolerance: float, max_depth: int = MAX_FIT_DEPTH
    ) -> Optional[QuadraticCurve]:
        """
        Approximate a cubic Bezier with a single quadratic within a given tolerance.

        The quadratic control point is the intersection of the start and end
        tangents of the cubic.

        Args:
            curve (CubicCurve): The cubic curve.
            tolerance (float): Permitted deviation from the original curve.
            max_depth (int, optional): Bisection depth limit of the deviation check.

        Returns:
            Optional[QuadraticCurve]: The quadratic if it fits within tolerance, otherwise None.
        """
        p0, p1, p2, p3 = curve.points
        q1 = CubicToQuadratic.calc_intersect(p0, p1, p2, p3)
        if q1 is None:
            # Parallel tangents: only a straight line has a one-segment solution.
            # The chord quadratic moves evenly along the chord, the cubic need not.
            q1 = CubicToQuadratic._chord_control(curve)
            if q1 is None:
                return None

        c1 = p0 + (q1 - p0) * TWO_THIRDS
        c2 = p3 + (q1 - p3) * TWO_THIRDS
        if not CubicToQuadratic.fits_inside(ORIGIN, c1 - p1, c2 - p2, ORIGIN, tolerance, max_depth):
            return None
        return QuadraticCurve(p0, q1, p3)

    @staticmethod
    def approximate_spline(
        curve: CubicCurve, n: int, tolerance: float, max_depth: int = MAX_FIT_DEPTH
    ) -> Optional[QuadraticSpline]:
        """
        Approximate a cubic Bezier curve with a spline of n quadratics.

        Args:
            curve (CubicCurve): The cubic curve.
            n (int): Number of quadratic Bezier curves in the spline.
            tolerance (float): Permitted deviation from the original curve.
            max_depth (int, optional): Bisection depth limit of the deviation check.

        Returns:
            Optional[QuadraticSpline]: n+2 points of the spline if it fits within
            tolerance, otherwise None.
        """
        if n == 1:
            quadratic = CubicToQuadratic.approximate_quadratic(curve, tolerance, max_depth)
            if quadratic is None:
                return None
            return QuadraticSpline(quadratic.points)

        cubics = CubicSubdivision.split(curve, n)

        # calculate the spline of quadratics and check errors at the same time.
        next_cubic = cubics[0]
        next_q1 = CubicToQuadratic.approximate_control(0.0, next_cubic)
        q2 = curve.p0
        d1 = ORIGIN
        spline = [curve.p0, next_q1]
        for i in range(1, n + 1):
            # Current cubic to convert
            _, c1, c2, c3 = next_cubic.points

            # Current quadratic approximation of current cubic
            q0 = q2
            q1 = next_q1
            if i < n:
                next_cubic = cubics[i]
                next_q1 = CubicToQuadratic.approximate_control(i / (n - 1), next_cubic)
                spline.append(next_q1)
                q2 = (q1 + next_q1) * 0.5
            else:
                q2 = c3

            # End-point deltas
            d0 = d1
            d1 = q2 - c3

            if abs(d1) > tolerance or not CubicToQuadratic.fits_inside(
                d0,
                q0 + (q1 - q0) * TWO_THIRDS - c1,
                q2 + (q1 - q2) * TWO_THIRDS - c2,
                d1,
                tolerance,
                max_depth,
            ):
                return None

        spline.append(curve.p3)
        return QuadraticSpline(tuple(spline))


def curve_to_quadratic(
    curve: CubicLike,
    tolerance: float,
    max_n: int = MAX_N,
    max_depth: int = MAX_FIT_DEPTH,
) -> Optional[QuadraticSpline]:
    """
    Approximate a cubic Bezier curve with a spline of quadratics.

    Args:
        curve: CubicCurve or four (x, y) points of the cubic Bezier curve.
        tolerance (float): Permitted deviation from the original curve.
        max_n (int, optional): Maximum number of quadratic segments. Defaults to MAX_N.
        max_depth (int, optional): Bisection depth limit of the deviation check.

    Returns:
        Optional[QuadraticSpline]: The spline with the fewest segments that fits
        within tolerance, or None if no spline of up to max_n segments fits.

    Example::
        >>> curve_to_quadratic([(50, 50), (100, 100), (150, 100), (200, 50)], 1.0).to_tuples()
        [(50.0, 50.0), (125.0, 125.0), (200.0, 50.0)]
    """
    cubic = CubicCurve.from_points(curve)
    tolerance = _check_tolerance(tolerance)

    for n in range(1, max_n + 1):
        spline = CubicToQuadratic.approximate_spline(cubic, n, tolerance, max_depth)
        if spline is not None:
            logger.debug("Approximated %s with %d quadratic(s)", cubic, n)
            return spline

    logger.debug("No approximation for %s with up to %d quadratics (tolerance %s)", cubic, max_n, tolerance)
    return None


def curves_to_quadratic(
    curves: Sequence[CubicLike],
    tolerances: Sequence[float],
    max_n: int = MAX_N,
    max_depth: int = MAX_FIT_DEPTH,
) -> Optional[List[QuadraticSpline]]:
    """
    Approximate several cubic Bezier curves with quadratic splines of the same segment count.

    Used for interpolation compatible outlines, e.g. the same segment in all
    masters of a variable font.

    Args:
        curves: A sequence of n curves, each a CubicCurve or four (x, y) points.
        tolerances: A sequence of n floats, the permitted deviation for each curve.
        max_n (int, optional): Maximum number of quadratic segments. Defaults to MAX_N.
        max_depth (int, optional): Bisection depth limit of the deviation check.

    Returns:
        Optional[List[QuadraticSpline]]: One spline per curve, all with the same
        number of segments, or None if no common segment count up to max_n fits.

    Raises:
        ValueError: if the number of tolerances does not match the number of curves

    Example::
        >>> splines = curves_to_quadratic(
        ...     [[(50, 50), (100, 100), (150, 100), (200, 50)], [(75, 50), (120, 100), (150, 75), (200, 60)]],
        ...     [1, 1],
        ... )
        >>> [s.to_tuples() for s in splines][0]
        [(50.0, 50.0), (75.0, 75.0), (125.0, 91.66666666666666), (175.0, 75.0), (200.0, 50.0)]
    """
    cubics = [CubicCurve.from_points(curve) for curve in curves]
    if len(tolerances) != len(cubics):
        raise ValueError(f"Got {len(tolerances)} tolerances for {len(cubics)} curves")
    tols = [_check_tolerance(tolerance) for tolerance in tolerances]
    if not cubics:
        return []

    count = len(cubics)
    splines: List[Optional[QuadraticSpline]] = [None] * count
    last_i = i = 0
    n = 1
    while True:
        spline = CubicToQuadratic.approximate_spline(cubics[i], n, tols[i], max_depth)
        if spline is None:
            if n >= max_n:
                break
            n += 1
            last_i = i
            continue
        splines[i] = spline
        i = (i + 1) % count
        if i == last_i:
            # every curve fits with the current n
            logger.debug("Approximated %d curves with %d quadratic(s) each", count, n)
            return [spline for spline in splines if spline is not None]

    logger.debug("No compatible approximation for %d curves with up to %d quadratics", count, max_n)
    return None


def main():
    """Convert a sample cubic and print the resulting splines."""
    cubic = CubicCurve.from_points([(50, 50), (100, 100), (150, 100), (200, 50)])
    for tolerance in (1.0, 0.1, 0.01):
        spline = curve_to_quadratic(cubic, tolerance)
        print(f"tolerance={tolerance}: {spline.to_tuples() if spline else None}")

    print()
    skewed = CubicCurve.from_points([(0, 0), (10, 90), (90, 100), (100, 0)])
    for tolerance in (5.0, 1.0, 0.1, 0.01):
        spline = curve_to_quadratic(skewed, tolerance)
        if spline is None:
            print(f"tolerance={tolerance}: no approximation")
            continue
        print(
            f"tolerance={tolerance}: {spline.segment_count} segment(s), "
            f"sampled deviation {spline.max_deviation(skewed):.6f}"
        )


if __name__ == "__main__":
    main()
