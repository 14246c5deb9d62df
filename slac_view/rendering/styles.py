"""
Render Styles
=============

Per-draw style values. Every drawing primitive receives its style
explicitly, so no fill/stroke state leaks from one call into the next.

Units: line widths, marker sizes and font sizes are in domain units and
scale with the drawing context.
"""

from dataclasses import dataclass, field

import supervision as sv


@dataclass(frozen=True)
class TraceStyle:
    """Stroke style for a user trace polyline."""

    color: sv.Color
    line_width: float = 0.1
    opacity: float = 1.0

    def __post_init__(self):
        if self.line_width <= 0:
            raise ValueError(f"line_width must be > 0, got {self.line_width}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be in [0.0, 1.0], got {self.opacity}")


@dataclass(frozen=True)
class MarkerStyle:
    """Fill style for a square landmark marker."""

    color: sv.Color
    size: float = 0.35

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"Marker size must be > 0, got {self.size}")


@dataclass(frozen=True)
class LabelStyle:
    """Text style for landmark names."""

    color: sv.Color = field(default_factory=lambda: sv.Color(r=0, g=0, b=0))
    font_size: float = 1.0


@dataclass(frozen=True)
class RenderStyles:
    """
    Complete palette for one renderer.

    Defaults:
        trace: faint gray, thin, translucent (non-best particles)
        best_trace: dark green, heavier
        init_candidate: light green squares (unconverged swarms)
        landmark: red squares (converged landmarks)
        label: black text
    """

    trace: TraceStyle = field(default_factory=lambda: TraceStyle(
        color=sv.Color.from_hex("#A8A8A8"), line_width=0.05, opacity=0.5
    ))
    best_trace: TraceStyle = field(default_factory=lambda: TraceStyle(
        color=sv.Color.from_hex("#24780D"), line_width=0.1
    ))
    init_candidate: MarkerStyle = field(default_factory=lambda: MarkerStyle(
        color=sv.Color.from_hex("#5FE653")
    ))
    landmark: MarkerStyle = field(default_factory=lambda: MarkerStyle(
        color=sv.Color.from_hex("#B52B2B")
    ))
    label: LabelStyle = field(default_factory=LabelStyle)
