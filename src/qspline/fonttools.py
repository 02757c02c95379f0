"""Classes related to the FontTools library."""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np
from fontTools.pens.basePen import BasePen
from fontTools.ttLib import TTFont
from numpy.typing import NDArray

from qspline.consts import (
    DEFAULT_TOLERANCE,
    MAX_N,
    POINT_TYPE_ON_CURVE,
    POINT_TYPE_QUADRATIC,
    QuadCmds,
)
from qspline.cu2qu import ApproxNotFoundError, curve_to_quadratic
from qspline.curves import CubicCurve
from qspline.spline import QuadraticSpline

logger = logging.getLogger(__name__)


class FontHelper:
    """
    Class to provide various static methods related to font handling.
    """

    @staticmethod
    def draw_glyph(ttfont: TTFont, glyph_name: str, pen: BasePen) -> BasePen:
        """
        Draw the outline of a glyph of the given font into a pen.

        Args:
            ttfont (TTFont): The font.
            glyph_name (str): Name of the glyph, e.g. "A" or "uni00C4".
            pen (BasePen): The pen to draw into.

        Returns:
            BasePen: the given pen

        Raises:
            KeyError: if the font has no glyph of that name
        """
        glyph_set = ttfont.getGlyphSet()
        if glyph_name not in glyph_set:
            raise KeyError(f"Font has no glyph named '{glyph_name}'")
        glyph_set[glyph_name].draw(pen)
        return pen

    @staticmethod
    def convert_glyph(
        ttfont: TTFont, glyph_name: str, tolerance: float = DEFAULT_TOLERANCE
    ) -> QuadraticOutlinePen:
        """
        Convert the outline of a glyph into quadratic curves.

        Args:
            ttfont (TTFont): The font.
            glyph_name (str): Name of the glyph.
            tolerance (float, optional): Permitted deviation in font units. Defaults to DEFAULT_TOLERANCE.

        Returns:
            QuadraticOutlinePen: pen holding the recorded commands and points
        """
        pen = QuadraticOutlinePen(ttfont.getGlyphSet(), tolerance=tolerance)
        FontHelper.draw_glyph(ttfont, glyph_name, pen)
        return pen


###############################################################################
# Pens
###############################################################################
class _QuadraticConversionPen(BasePen):
    """Base pen converting every cubic segment into quadratic segments."""

    def __init__(self, glyphSet=None, tolerance: float = DEFAULT_TOLERANCE, max_n: int = MAX_N):
        super().__init__(glyphSet)
        self._tolerance = tolerance
        self._max_n = max_n

    @property
    def tolerance(self) -> float:
        """Permitted deviation used for cubic segments."""
        return self._tolerance

    def _getCurrentPoint(self) -> Tuple[float, float]:
        pt = super()._getCurrentPoint()
        # if the point is a tuple of two floats (or ints), return it
        if isinstance(pt, tuple) and len(pt) == 2 and all(isinstance(x, (int, float, np.floating)) for x in pt):
            return pt
        raise ValueError(f"Invalid point {pt} in _getCurrentPoint")

    def _convert_cubic(
        self, pt1: Tuple[float, float], pt2: Tuple[float, float], pt3: Tuple[float, float]
    ) -> QuadraticSpline:
        curve = CubicCurve.from_points([self._getCurrentPoint(), pt1, pt2, pt3])
        spline = curve_to_quadratic(curve, self._tolerance, max_n=self._max_n)
        if spline is None:
            logger.warning("Cannot approximate cubic %s within tolerance %s", curve, self._tolerance)
            raise ApproxNotFoundError(curve, self._tolerance)
        return spline

    def _curveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float], pt3: Tuple[float, float]):
        spline = self._convert_cubic(pt1, pt2, pt3)
        for segment in spline.segments():
            self._qCurveToOne(segment.p1.to_tuple(), segment.p2.to_tuple())


class QuadraticOutlinePen(_QuadraticConversionPen):
    """
    Records glyph drawing commands with all cubic curves converted to quadratic curves.

    Supports the commands: M, L, Q, Z (all absolute). Only closed contours end with Z.
    Points ".points" dimension is 3: (x, y, type).
    Type is 0.0 for start/end point, 2.0 for quadratic control point.

    Access the results via `.points` and `.commands` after drawing a glyph with this pen.
    """

    def __init__(self, glyphSet=None, tolerance: float = DEFAULT_TOLERANCE, max_n: int = MAX_N):
        """
        Initialize the QuadraticOutlinePen.

        Parameters:
            glyphSet (GlyphSet, optional): The glyph set to use for components.
            tolerance (float, optional): Permitted deviation of converted cubics in font units.
            max_n (int, optional): Maximum number of quadratics per cubic.
        """
        super().__init__(glyphSet, tolerance=tolerance, max_n=max_n)
        self._rows: List[List[float]] = []
        self._commands: List[QuadCmds] = []
        self._converted_curves = 0

    # BasePen callback methods -------------------------------------------------
    def _moveTo(self, pt: Tuple[float, float]):
        self._commands.append("M")
        self._rows.append([float(pt[0]), float(pt[1]), POINT_TYPE_ON_CURVE])

    def _lineTo(self, pt: Tuple[float, float]):
        self._commands.append("L")
        self._rows.append([float(pt[0]), float(pt[1]), POINT_TYPE_ON_CURVE])

    def _qCurveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float]):
        self._commands.append("Q")
        self._rows.append([float(pt1[0]), float(pt1[1]), POINT_TYPE_QUADRATIC])
        self._rows.append([float(pt2[0]), float(pt2[1]), POINT_TYPE_ON_CURVE])

    def _curveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float], pt3: Tuple[float, float]):
        super()._curveToOne(pt1, pt2, pt3)
        self._converted_curves += 1

    def _closePath(self):
        self._commands.append("Z")

    def _endPath(self):
        # open contour: no "Z", the next "M" starts a new contour
        pass

    @property
    def commands(self) -> List[QuadCmds]:
        """Return the recorded commands as a list (uppercase commands)."""
        return self._commands

    @property
    def points(self) -> NDArray[np.float64]:
        """Return recorded points as an (n_points, 3) ndarray of float64."""
        if not self._rows:
            return np.empty((0, 3), dtype=np.float64)
        return np.array(self._rows, dtype=np.float64)

    @property
    def converted_curves(self) -> int:
        """Number of cubic segments converted so far."""
        return self._converted_curves

    def reset(self) -> None:
        """Clear recorded commands and points."""
        self._rows = []
        self._commands = []
        self._converted_curves = 0


class TrianglePen(_QuadraticConversionPen):
    """
    Turns glyph outlines into a triangle list for quadratic curve rendering.

    Every contour becomes a triangle fan around its start point. Each segment
    after the first one adds a solid triangle (start, previous point, new point)
    and each quadratic segment adds a curve triangle (start, control, end).
    The winding of overlapping fan triangles encodes the fill, so the list is
    meant for even-odd / stencil rendering.

    Vertices are rows of (x, y, s, t): solid triangles use (s, t) = (0, 1),
    curve triangles (0, 0), (0.5, 0), (1, 1), so a fragment is inside the
    curve where s*s - t < 0.
    """

    SOLID_COORDS: Tuple[Tuple[float, float], ...] = ((0.0, 1.0), (0.0, 1.0), (0.0, 1.0))
    CURVE_COORDS: Tuple[Tuple[float, float], ...] = ((0.0, 0.0), (0.5, 0.0), (1.0, 1.0))

    def __init__(self, glyphSet=None, tolerance: float = DEFAULT_TOLERANCE, max_n: int = MAX_N):
        super().__init__(glyphSet, tolerance=tolerance, max_n=max_n)
        self._rows: List[Tuple[float, float, float, float]] = []
        self._contour_start: Tuple[float, float] = (0.0, 0.0)
        self._last: Tuple[float, float] = (0.0, 0.0)
        self._segment_count = 0

    def _append_triangle(
        self,
        triangle: Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]],
        coords: Tuple[Tuple[float, float], ...],
    ):
        for (x, y), (s, t) in zip(triangle, coords):
            self._rows.append((float(x), float(y), s, t))

    def _fan_to(self, pt: Tuple[float, float]):
        self._segment_count += 1
        if self._segment_count >= 2:
            self._append_triangle((self._contour_start, self._last, pt), self.SOLID_COORDS)

    # BasePen callback methods -------------------------------------------------
    def _moveTo(self, pt: Tuple[float, float]):
        self._contour_start = self._last = pt
        self._segment_count = 0

    def _lineTo(self, pt: Tuple[float, float]):
        self._fan_to(pt)
        self._last = pt

    def _qCurveToOne(self, pt1: Tuple[float, float], pt2: Tuple[float, float]):
        self._fan_to(pt2)
        self._append_triangle((self._last, pt1, pt2), self.CURVE_COORDS)
        self._last = pt2

    def _closePath(self):
        self._segment_count = 0

    def _endPath(self):
        self._segment_count = 0

    @property
    def vertices(self) -> NDArray[np.float64]:
        """Return the vertices as an (n_vertices, 4) ndarray of (x, y, s, t)."""
        if not self._rows:
            return np.empty((0, 4), dtype=np.float64)
        return np.array(self._rows, dtype=np.float64)

    @property
    def triangle_count(self) -> int:
        """Number of triangles recorded."""
        return len(self._rows) // 3

    def reset(self) -> None:
        """Clear recorded vertices."""
        self._rows = []
        self._contour_start = self._last = (0.0, 0.0)
        self._segment_count = 0
