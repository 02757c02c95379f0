"""Test module for the pens and helpers in qspline.fonttools

The tests are run using pytest.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.ttLib import TTFont

from qspline.cu2qu import ApproxNotFoundError, curve_to_quadratic
from qspline.fonttools import FontHelper, QuadraticOutlinePen, TrianglePen

CUBIC_SEGMENT = [(0.0, 100.0), (0.0, 150.0), (50.0, 200.0), (100.0, 200.0)]


def _draw_box(pen):
    pen.moveTo((50, 0))
    pen.lineTo((450, 0))
    pen.lineTo((450, 700))
    pen.lineTo((50, 700))
    pen.closePath()


def _draw_ring(pen):
    pen.moveTo((300, 0))
    pen.curveTo((465, 0), (600, 135), (600, 300))
    pen.curveTo((600, 465), (465, 600), (300, 600))
    pen.curveTo((135, 600), (0, 465), (0, 300))
    pen.curveTo((0, 135), (135, 0), (300, 0))
    pen.closePath()


@pytest.fixture(scope="module")
def cff_font() -> TTFont:
    """In-memory CFF font with a box glyph and a ring glyph drawn from cubic curves."""
    builder = FontBuilder(1000, isTTF=False)
    builder.setupGlyphOrder([".notdef", "O"])
    builder.setupCharacterMap({ord("O"): "O"})

    char_strings = {}
    for glyph_name, draw in ((".notdef", _draw_box), ("O", _draw_ring)):
        pen = T2CharStringPen(600, None)
        draw(pen)
        char_strings[glyph_name] = pen.getCharString()

    builder.setupCFF("QsplineTest-Regular", {"FullName": "QsplineTest-Regular"}, char_strings, {})
    builder.setupHorizontalMetrics({".notdef": (500, 50), "O": (600, 0)})
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable({"familyName": "QsplineTest", "styleName": "Regular"})
    builder.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    builder.setupPost()
    return builder.font


###############################################################################
# QuadraticOutlinePen
###############################################################################


class TestQuadraticOutlinePen:
    """Test recording outlines with cubic curves converted to quadratics."""

    def test_lines_only(self):
        """Lines are recorded unchanged."""
        pen = QuadraticOutlinePen()
        _draw_box(pen)
        assert pen.commands == ["M", "L", "L", "L", "Z"]
        assert pen.points.shape == (4, 3)
        assert np.allclose(pen.points[:, 2], 0.0)
        assert pen.converted_curves == 0

    def test_cubic_converted(self):
        """A cubic becomes as many Q commands as the spline has segments."""
        pen = QuadraticOutlinePen(tolerance=1.0)
        pen.moveTo((0, 0))
        pen.lineTo(CUBIC_SEGMENT[0])
        pen.curveTo(*CUBIC_SEGMENT[1:])
        pen.closePath()

        spline = curve_to_quadratic(CUBIC_SEGMENT, 1.0)
        assert spline is not None
        assert spline.segment_count > 1
        assert pen.commands == ["M", "L"] + ["Q"] * spline.segment_count + ["Z"]
        assert pen.converted_curves == 1

        _, spline_points = spline.commands()
        assert np.allclose(pen.points[2:], spline_points[1:])
        assert np.allclose(pen.points[-1], (100.0, 200.0, 0.0))

    def test_quadratic_recorded(self):
        """Quadratic segments with implied on-curve points are recorded as single Qs."""
        pen = QuadraticOutlinePen()
        pen.moveTo((0, 0))
        pen.qCurveTo((10, 10), (20, 20), (30, 0))
        pen.closePath()
        assert pen.commands == ["M", "Q", "Q", "Z"]
        assert np.allclose(pen.points[2], (15.0, 15.0, 0.0))
        assert list(pen.points[:, 2]) == [0.0, 2.0, 0.0, 2.0, 0.0]

    def test_open_contour(self):
        """Open contours are not closed, the next contour starts with its own M."""
        pen = QuadraticOutlinePen()
        pen.moveTo((0, 0))
        pen.lineTo((10, 0))
        pen.endPath()
        pen.moveTo((0, 20))
        pen.lineTo((10, 20))
        pen.closePath()
        assert pen.commands == ["M", "L", "M", "L", "Z"]
        assert pen.points.shape == (4, 3)

    def test_not_found_raises(self, caplog):
        """A cubic without approximation raises ApproxNotFoundError and logs a warning."""
        pen = QuadraticOutlinePen(tolerance=1e-9, max_n=1)
        pen.moveTo(CUBIC_SEGMENT[0])
        with caplog.at_level(logging.WARNING, logger="qspline.fonttools"):
            with pytest.raises(ApproxNotFoundError) as excinfo:
                pen.curveTo(*CUBIC_SEGMENT[1:])
        assert excinfo.value.tolerance == 1e-9
        assert excinfo.value.curve.p3.to_tuple() == CUBIC_SEGMENT[3]
        assert "Cannot approximate" in caplog.text

    def test_reset(self):
        """reset() clears recorded data."""
        pen = QuadraticOutlinePen()
        _draw_ring(pen)
        assert pen.commands
        pen.reset()
        assert pen.commands == []
        assert pen.points.shape == (0, 3)
        assert pen.converted_curves == 0


###############################################################################
# TrianglePen
###############################################################################


class TestTrianglePen:
    """Test the triangle fan construction."""

    def test_square(self):
        """A square contour becomes two solid triangles."""
        pen = TrianglePen()
        pen.moveTo((0, 0))
        pen.lineTo((100, 0))
        pen.lineTo((100, 100))
        pen.lineTo((0, 100))
        pen.closePath()

        vertices = pen.vertices
        assert pen.triangle_count == 2
        assert vertices.shape == (6, 4)
        assert np.allclose(vertices[:3, :2], [(0, 0), (100, 0), (100, 100)])
        assert np.allclose(vertices[3:, :2], [(0, 0), (100, 100), (0, 100)])
        assert np.allclose(vertices[:, 2:], [(0.0, 1.0)] * 6)

    def test_quadratic_segment(self):
        """A single quadratic adds one curve triangle with Loop-Blinn coordinates."""
        pen = TrianglePen()
        pen.moveTo((0, 0))
        pen.qCurveTo((50, 100), (100, 0))
        pen.closePath()
        assert pen.triangle_count == 1
        assert np.allclose(pen.vertices, [(0, 0, 0.0, 0.0), (50, 100, 0.5, 0.0), (100, 0, 1.0, 1.0)])

    def test_cubic_segment_converted(self):
        """A cubic that is an elevated quadratic becomes one curve triangle."""
        pen = TrianglePen(tolerance=1.0)
        pen.moveTo((50, 50))
        pen.curveTo((100, 100), (150, 100), (200, 50))
        pen.closePath()
        assert pen.triangle_count == 1
        assert np.allclose(pen.vertices[:, :2], [(50, 50), (125, 125), (200, 50)])

    def test_curve_after_line_adds_fan_triangle(self):
        """Every segment after the first adds a solid fan triangle."""
        pen = TrianglePen()
        pen.moveTo((0, 0))
        pen.lineTo((100, 0))
        pen.qCurveTo((150, 50), (100, 100))
        pen.closePath()
        # solid (start, (100,0), (100,100)) + curve ((100,0), (150,50), (100,100))
        assert pen.triangle_count == 2
        assert np.allclose(pen.vertices[:3, :2], [(0, 0), (100, 0), (100, 100)])
        assert np.allclose(pen.vertices[3:, :2], [(100, 0), (150, 50), (100, 100)])

    def test_contours_are_independent(self):
        """A new contour starts a new fan."""
        pen = TrianglePen()
        for offset in (0, 200):
            pen.moveTo((offset, 0))
            pen.lineTo((offset + 100, 0))
            pen.lineTo((offset + 100, 100))
            pen.closePath()
        assert pen.triangle_count == 2
        assert np.allclose(pen.vertices[3, :2], (200, 0))

    def test_reset(self):
        """reset() clears the vertices."""
        pen = TrianglePen()
        _draw_ring(pen)
        assert pen.triangle_count > 0
        pen.reset()
        assert pen.vertices.shape == (0, 4)


###############################################################################
# FontHelper
###############################################################################


class TestFontHelper:
    """Test drawing glyphs of a font through the pens."""

    def test_convert_glyph(self, cff_font):
        """All cubic segments of a CFF glyph are converted."""
        pen = FontHelper.convert_glyph(cff_font, "O", tolerance=1.0)
        assert pen.converted_curves == 4
        assert pen.commands[0] == "M"
        assert pen.commands[-1] == "Z"
        assert set(pen.commands[1:-1]) <= {"Q", "L"}
        assert pen.commands.count("Q") >= 4
        assert np.allclose(pen.points[0], (300.0, 0.0, 0.0))

    def test_convert_glyph_tolerance(self, cff_font):
        """A tighter tolerance gives more quadratic segments."""
        coarse = FontHelper.convert_glyph(cff_font, "O", tolerance=5.0)
        fine = FontHelper.convert_glyph(cff_font, "O", tolerance=0.01)
        assert fine.commands.count("Q") > coarse.commands.count("Q")

    def test_draw_glyph_into_triangle_pen(self, cff_font):
        """Any pen can be used with draw_glyph."""
        pen = TrianglePen(cff_font.getGlyphSet(), tolerance=1.0)
        assert FontHelper.draw_glyph(cff_font, "O", pen) is pen
        assert pen.triangle_count > 0

    def test_lines_are_kept(self, cff_font):
        """A glyph without curves has no Q commands."""
        pen = FontHelper.convert_glyph(cff_font, ".notdef")
        assert "L" in pen.commands
        assert "Q" not in pen.commands
        assert pen.converted_curves == 0

    def test_unknown_glyph(self, cff_font):
        """Unknown glyph names raise KeyError."""
        with pytest.raises(KeyError):
            FontHelper.convert_glyph(cff_font, "does-not-exist")
