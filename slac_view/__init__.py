"""
SLAC View v1.0
==============

Bounded Context: Real-time visualization of a particle filter that tracks
a walking user and a set of landmarks.

Design Philosophy:
- Separation of Concerns: Snapshot, Geometry, Rendering separated
- One-way data flow: estimator -> snapshot -> renderer -> pixels
- Surface injected, never looked up: tests run on a RecordingSurface
- Pragmatismo > Purismo: supervision/OpenCV draw, we only map coordinates

Architecture:

    slac_view/
    ├── snapshot/          # Estimator state as read by the renderer
    │   └── particles.py   # Pose, Trace, Particle, ParticleSet, ...
    │
    ├── geometry/          # Pure coordinate math
    │   └── viewport.py    # ViewportState, ViewportTransform
    │
    ├── rendering/         # Drawing
    │   ├── styles.py      # TraceStyle, MarkerStyle, LabelStyle
    │   ├── surface.py     # RasterSurface, RecordingSurface
    │   └── renderer.py    # SurfaceRenderer
    │
    ├── logging/           # Structured JSON logs
    └── config.py          # RendererConfig (YAML)

Usage:

    from slac_view import RasterSurface, SurfaceRenderer, RendererConfig

    config = RendererConfig.from_yaml("config/renderer.yaml")
    surface = RasterSurface(config.surface_size_wh, config.device_pixel_ratio)
    renderer = SurfaceRenderer.from_config(surface, config)

    # Once per filter update, from the estimator loop
    renderer.render(particle_set)
    sink.write_frame(surface.frame)
"""

# Snapshot Layer
from slac_view.snapshot import (
    Pose,
    Trace,
    User,
    LandmarkEstimate,
    Particle,
    LandmarkInitSet,
    ParticleSet,
)

# Geometry Layer
from slac_view.geometry import ViewportState, ViewportTransform

# Rendering Layer
from slac_view.rendering import (
    RasterSurface,
    RecordingSurface,
    RenderStyles,
    SurfaceRenderer,
    SurfaceUnavailableError,
)

# Configuration
from slac_view.config import RendererConfig, StyleConfig

__all__ = [
    # Snapshot
    "Pose",
    "Trace",
    "User",
    "LandmarkEstimate",
    "Particle",
    "LandmarkInitSet",
    "ParticleSet",
    # Geometry
    "ViewportState",
    "ViewportTransform",
    # Rendering
    "RasterSurface",
    "RecordingSurface",
    "RenderStyles",
    "SurfaceRenderer",
    "SurfaceUnavailableError",
    # Configuration
    "RendererConfig",
    "StyleConfig",
]

__version__ = "1.0.0"
