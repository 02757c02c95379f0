"""Main application"""

import sys

from qspline.cu2qu import curve_to_quadratic
from qspline.curves import CubicCurve
from qspline.page import SplineSvgPage


def main(filename: str = "main_app.svg"):
    """Main"""
    cubic = CubicCurve.from_points([(0, 0), (10, 90), (90, 100), (100, 0)])
    page = SplineSvgPage.for_curve(cubic, margin=10, stroke_width=0.5)
    page.add_cubic(cubic)
    for tolerance, color in ((5.0, "orange"), (0.5, "green"), (0.05, "black")):
        spline = curve_to_quadratic(cubic, tolerance)
        if spline is not None:
            page.add_spline(spline, color=color)

    page.save_as(filename, include_debug_layer=True, pretty=True)

    print("file saved.")


if __name__ == "__main__":
    main(*sys.argv[1:2])
