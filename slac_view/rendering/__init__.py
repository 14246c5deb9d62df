"""
Rendering Layer
===============

Bounded Context: Particle filter visualization.

Responsibilities:
- Own the drawing surface transform (resolution correction, fit, growth)
- Redraw traces, init swarms and landmarks every filter update
- Latch viewport growth for the next frame

Non-responsibilities:
- Coordinate math (handled by geometry)
- Estimation (handled by the estimator producing snapshots)
- Scheduling (the caller invokes render() once per update)

Design:
- Surface injected at construction (RasterSurface, RecordingSurface)
- Explicit per-draw styles
"""

from slac_view.rendering.styles import (
    LabelStyle,
    MarkerStyle,
    RenderStyles,
    TraceStyle,
)
from slac_view.rendering.surface import (
    DrawingSurface,
    RasterSurface,
    RecordingSurface,
    SurfaceCall,
    SurfaceUnavailableError,
)
from slac_view.rendering.renderer import SurfaceRenderer

__all__ = [
    "LabelStyle",
    "MarkerStyle",
    "RenderStyles",
    "TraceStyle",
    "DrawingSurface",
    "RasterSurface",
    "RecordingSurface",
    "SurfaceCall",
    "SurfaceUnavailableError",
    "SurfaceRenderer",
]
