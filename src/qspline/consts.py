"""Central module containing constants for the cubic to quadratic conversion"""

from __future__ import annotations

from typing import Literal

###############################################################################
# Types
###############################################################################


QuadCmds = Literal[  # Type-Definition for path commands recorded by the pens
    # MoveTo (1) - start a new contour at (x,y)
    "M",
    # LineTo (1) - straight line from the current point to (x,y)
    "L",
    # Quadratic Bezier To (2) - one control point and an end point (x,y)
    "Q",
    # ClosePath (0) - close the contour
    "Z",
]


###############################################################################
# Consts
###############################################################################

# Maximum number of quadratic segments tried per cubic
MAX_N: int = 100

# Maximum bisection depth of the farthest-fits-inside check.
# Each level halves the parameter range, 16 levels resolve 1/65536 of the curve.
MAX_FIT_DEPTH: int = 16

# Permitted deviation in font units if nothing else is given
DEFAULT_TOLERANCE: float = 1.0

TWO_THIRDS: float = 2.0 / 3.0
ONE_TWENTYSEVENTH: float = 1.0 / 27.0

# Point type markers used in (x, y, type) point arrays
POINT_TYPE_ON_CURVE: float = 0.0
POINT_TYPE_QUADRATIC: float = 2.0
POINT_TYPE_CUBIC: float = 3.0
