"""Splitting cubic Bezier curves into parts of equal parameter range"""

from __future__ import annotations

from typing import Iterator, Tuple

from qspline.consts import ONE_TWENTYSEVENTH
from qspline.curves import CubicCurve
from qspline.point import Point


class CubicSubdivision:
    """
    Class to provide static methods to split a cubic Bezier curve into n parts.

    Part i covers the parameter range [i/n, (i+1)/n] of the original curve.
    The counts 2, 3, 4 and 6 use closed forms, all others are computed by
    reparameterizing the power basis of the curve.
    """

    @staticmethod
    def split(curve: CubicCurve, n: int) -> Tuple[CubicCurve, ...]:
        """
        Split a cubic Bezier into n equal parts by curve time
        (t=0..1/n, t=1/n..2/n, ...).

        Args:
            curve (CubicCurve): The curve to split.
            n (int): Number of parts, at least 1.

        Returns:
            Tuple[CubicCurve, ...]: n sub-curves in parameter order.

        Raises:
            ValueError: if n is smaller than 1
        """
        if n < 1:
            raise ValueError(f"Number of parts must be at least 1, got {n}")
        if n == 1:
            return (curve,)

        # Hand-coded special cases
        if n == 2:
            return CubicSubdivision.split_into_two(curve)
        if n == 3:
            return CubicSubdivision.split_into_three(curve)
        if n == 4:
            first, second = CubicSubdivision.split_into_two(curve)
            return CubicSubdivision.split_into_two(first) + CubicSubdivision.split_into_two(second)
        if n == 6:
            first, second = CubicSubdivision.split_into_two(curve)
            return CubicSubdivision.split_into_three(first) + CubicSubdivision.split_into_three(second)

        return tuple(CubicSubdivision.iter_split_into_n(curve, n))

    @staticmethod
    def split_into_two(curve: CubicCurve) -> Tuple[CubicCurve, CubicCurve]:
        """Split at t=0.5 (de Casteljau)."""
        p0, p1, p2, p3 = curve.points
        mid = (p0 + (p1 + p2) * 3 + p3) * 0.125
        deriv3 = (p3 + p2 - p1 - p0) * 0.125
        return (
            CubicCurve(p0, (p0 + p1) * 0.5, mid - deriv3, mid),
            CubicCurve(mid, mid + deriv3, (p2 + p3) * 0.5, p3),
        )

    @staticmethod
    def split_into_three(curve: CubicCurve) -> Tuple[CubicCurve, CubicCurve, CubicCurve]:
        """Split at t=1/3 and t=2/3."""
        p0, p1, p2, p3 = curve.points
        mid1 = (p0 * 8 + p1 * 12 + p2 * 6 + p3) * ONE_TWENTYSEVENTH
        deriv1 = (p3 + p2 * 3 - p0 * 4) * ONE_TWENTYSEVENTH
        mid2 = (p0 + p1 * 6 + p2 * 12 + p3 * 8) * ONE_TWENTYSEVENTH
        deriv2 = (p3 * 4 - p1 * 3 - p0) * ONE_TWENTYSEVENTH
        return (
            CubicCurve(p0, (p0 * 2 + p1) / 3.0, mid1 - deriv1, mid1),
            CubicCurve(mid1, mid1 + deriv1, mid2 - deriv2, mid2),
            CubicCurve(mid2, mid2 + deriv2, (p2 + p3 * 2) / 3.0, p3),
        )

    @staticmethod
    def power_coefficients(curve: CubicCurve) -> Tuple[Point, Point, Point, Point]:
        """
        Power basis coefficients (a, b, c, d) of the curve:
            B(t) = a*t^3 + b*t^2 + c*t + d
        """
        p0, p1, p2, p3 = curve.points
        c = (p1 - p0) * 3.0
        b = (p2 - p1) * 3.0 - c
        d = p0
        a = p3 - d - c - b
        return a, b, c, d

    @staticmethod
    def from_power_coefficients(a: Point, b: Point, c: Point, d: Point) -> CubicCurve:
        """Convert power basis coefficients back into Bezier control points."""
        p1 = c / 3.0 + d
        p2 = (b + c) / 3.0 + p1
        p3 = a + d + c + b
        return CubicCurve(d, p1, p2, p3)

    @staticmethod
    def iter_split_into_n(curve: CubicCurve, n: int) -> Iterator[CubicCurve]:
        """Generic split into n parts, yields the sub-curves one by one."""
        a, b, c, d = CubicSubdivision.power_coefficients(curve)
        dt = 1.0 / n
        delta_2 = dt * dt
        delta_3 = dt * delta_2
        for i in range(n):
            t1 = i * dt
            t1_2 = t1 * t1
            # Taylor shift of the polynomial to t1, scaled by dt
            a1 = a * delta_3
            b1 = (a * (3 * t1) + b) * delta_2
            c1 = (b * (2 * t1) + c + a * (3 * t1_2)) * dt
            d1 = a * (t1 * t1_2) + b * t1_2 + c * t1 + d
            yield CubicSubdivision.from_power_coefficients(a1, b1, c1, d1)
