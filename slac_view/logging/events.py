"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the renderer's structured logs.

Event Naming Convention:
    <component>.<action>

    component: renderer, viewport, frame, error

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, metadata.x_max
    | filter event = "viewport.grown"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - renderer.*: Renderer lifecycle
    - viewport.*: Viewport setup and growth
    - frame.*: Per-frame rendering
    - error.*: Error conditions
    """

    # ========== Renderer Events ==========
    RENDERER_INITIALIZED = "renderer.initialized"
    """Renderer attached to a surface and viewport fitted."""

    # ========== Viewport Events ==========
    VIEWPORT_RESOLUTION_CORRECTED = "viewport.resolution_corrected"
    """Backing buffer resized for a high-density display."""

    VIEWPORT_FITTED = "viewport.fitted"
    """Domain extent fitted into the pixel buffer."""

    VIEWPORT_GROWTH_SCHEDULED = "viewport.growth_scheduled"
    """A trace point reached the padding margin; growth deferred to next frame."""

    VIEWPORT_GROWN = "viewport.grown"
    """Deferred viewport growth applied at the start of a frame."""

    # ========== Frame Events ==========
    FRAME_RENDERED = "frame.rendered"
    """A particle set snapshot was fully redrawn."""

    # ========== Error Events ==========
    SURFACE_UNAVAILABLE = "error.surface_unavailable"
    """No drawing surface was bound at construction."""


VIEWPORT_EVENTS = {
    LogEvent.VIEWPORT_RESOLUTION_CORRECTED,
    LogEvent.VIEWPORT_FITTED,
    LogEvent.VIEWPORT_GROWTH_SCHEDULED,
    LogEvent.VIEWPORT_GROWN,
}

ERROR_EVENTS = {
    LogEvent.SURFACE_UNAVAILABLE,
}
