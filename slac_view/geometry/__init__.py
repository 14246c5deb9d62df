"""
Geometry Layer
==============

Bounded Context: Coordinate systems and viewport extents.

Responsibilities:
- Domain (meters) to surface coordinate transform
- Padding-margin bounds checks
- Fit-to-buffer and monotonic growth of the extents
- NO drawing, NO surface access

Design Philosophy:
- Pure functions of (x, y, x_max, y_max, factor)
- Single mutable state object, mutated only by fit() and grow()
"""

from slac_view.geometry.viewport import (
    ViewportState,
    ViewportTransform,
    resolution_factor,
)

__all__ = [
    "ViewportState",
    "ViewportTransform",
    "resolution_factor",
]
