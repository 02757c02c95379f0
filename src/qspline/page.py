"""SVG page to inspect cubic curves next to their quadratic approximation."""

from __future__ import annotations

import copy
import gzip
import io
from dataclasses import dataclass

import svgwrite
import svgwrite.container
from svgwrite.extensions import Inkscape

from qspline.curves import CubicCurve
from qspline.spline import QuadraticSpline


@dataclass
class SplineSvgPage:
    """A page (canvas) described by SVG with a viewbox to draw inside.

    The viewbox has its own coordinate-system left-to-right and bottom-to-top,
    like font units.
    Contains groups/layers:
        - root       -- (group) just contains the y-flip and translation to bottom left
            - main   -- quadratic splines
            - debug  -- original cubics, control polygons and spline handles (hidden)
    """

    _inkscape: Inkscape  # extension to support layers

    drawing: svgwrite.Drawing
    root_group: svgwrite.container.Group
    main_layer: svgwrite.container.Group
    debug_layer: svgwrite.container.Group
    stroke_width: float

    def __init__(
        self,
        viewbox_width: float,
        viewbox_height: float,
        viewbox_x: float = 0.0,
        viewbox_y: float = 0.0,
        stroke_width: float = 1.0,
    ):
        """
        Initialize the SVG page with the given viewbox in curve coordinates.

        Args:
            viewbox_width (float): The width of the viewbox.
            viewbox_height (float): The height of the viewbox.
            viewbox_x (float, optional): The x-coordinate of the bottom-left corner. Defaults to 0.0.
            viewbox_y (float, optional): The y-coordinate of the bottom-left corner. Defaults to 0.0.
            stroke_width (float, optional): Stroke width of drawn curves. Defaults to 1.0.
        """
        if viewbox_width <= 0 or viewbox_height <= 0:
            raise ValueError(f"Viewbox must have a positive size, got {viewbox_width} x {viewbox_height}")
        self.stroke_width = stroke_width

        # profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{viewbox_width}", f"{viewbox_height}"),
            viewBox=f"{viewbox_x} {-viewbox_y - viewbox_height} {viewbox_width} {viewbox_height}",
            profile="full",
        )

        # Define root group with transformation to flip y-axis
        self.root_group = self.drawing.g(id="root", transform="scale(1,-1)")

        # Initialize Inkscape extension for layer support
        self._inkscape = Inkscape(self.drawing)

        # Define layers
        self.main_layer = self._inkscape.layer(label="main", locked=False)
        self.debug_layer = self._inkscape.layer(label="debug", locked=False, display="none")

    def add_cubic(self, curve: CubicCurve, color: str = "gray", steps: int = 64) -> None:
        """Draw a cubic curve, polygonized into steps lines, and its control polygon into the debug layer."""
        polygon = curve.polygonize(steps)
        self.debug_layer.add(
            self.drawing.polyline(
                points=[(x, y) for x, y, _ in polygon.tolist()],
                stroke=color,
                stroke_width=self.stroke_width,
                fill="none",
            )
        )
        self.debug_layer.add(
            self.drawing.polyline(
                points=[pt.to_tuple() for pt in curve.points],
                stroke=color,
                stroke_width=self.stroke_width * 0.5,
                stroke_dasharray="2,2",
                fill="none",
            )
        )

    def add_spline(self, spline: QuadraticSpline, color: str = "black", show_handles: bool = True) -> None:
        """Draw a quadratic spline into the main layer and its handles into the debug layer.

        Stored handles are red, implied on-curve points blue.
        """
        self.main_layer.add(
            self.drawing.path(d=spline.svg_path_d(), stroke=color, stroke_width=self.stroke_width, fill="none")
        )
        if not show_handles:
            return
        radius = self.stroke_width * 1.5
        for handle in spline[1:-1]:
            self.debug_layer.add(self.drawing.circle(center=handle.to_tuple(), r=radius, fill="red"))
        for segment in spline.segments()[:-1]:
            self.debug_layer.add(self.drawing.circle(center=segment.p2.to_tuple(), r=radius, fill="blue"))

    def tostring(self, include_debug_layer: bool = False) -> str:
        """Return the SVG document as string."""
        return self._assembled_copy(include_debug_layer).tostring()

    def save_as(
        self,
        filename: str,
        include_debug_layer: bool = False,
        pretty: bool = False,
        indent: int = 2,
        compressed: bool = False,
    ):
        """Write the SVG document to a file, gzip compressed (svgz) if requested."""
        buffer = io.StringIO()
        self._assembled_copy(include_debug_layer).write(buffer, pretty=pretty, indent=indent)
        opener = gzip.open if compressed else open
        with opener(filename, "wb") as svg_file:
            svg_file.write(buffer.getvalue().encode("utf-8"))

    def _assembled_copy(self, include_debug_layer: bool) -> svgwrite.Drawing:
        # the page itself stays unassembled so output can be produced repeatedly
        drawing = copy.deepcopy(self.drawing)
        root_group = copy.deepcopy(self.root_group)
        if include_debug_layer:
            root_group.add(copy.deepcopy(self.debug_layer))
        root_group.add(copy.deepcopy(self.main_layer))
        drawing.add(root_group)
        return drawing

    @classmethod
    def for_curve(cls, curve: CubicCurve, margin: float = 10.0, stroke_width: float = 1.0) -> SplineSvgPage:
        """Create a page whose viewbox encloses the control points of the curve plus margin."""
        xs = [pt.x for pt in curve.points]
        ys = [pt.y for pt in curve.points]
        width = max(xs) - min(xs) + 2 * margin
        height = max(ys) - min(ys) + 2 * margin
        return cls(width, height, min(xs) - margin, min(ys) - margin, stroke_width=stroke_width)
