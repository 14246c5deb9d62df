"""
Particle Renderer Module
========================

Redraws a particle filter snapshot onto a DrawingSurface, once per
filter update.

Frame phases (never interleaved):
    1. commit: apply growth latched by the previous frame
    2. clear: wipe the whole buffer under an identity transform
    3. draw: non-best traces, init swarms, best trace, landmarks
    4. evaluate: any trace point inside the padding margin latches
       growth for the next frame

A frame is therefore always drawn at one scale.

Dependencies:
- slac_view.geometry (ViewportTransform)
- slac_view.rendering.surface (DrawingSurface)
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from slac_view.geometry.viewport import (
    DEFAULT_SHRINK_FACTOR,
    ViewportState,
    ViewportTransform,
    resolution_factor,
)
from slac_view.logging import LogEvent, StructuredLogger, create_logger
from slac_view.rendering.styles import MarkerStyle, RenderStyles, TraceStyle
from slac_view.rendering.surface import DrawingSurface, SurfaceUnavailableError

if TYPE_CHECKING:
    from slac_view.config import RendererConfig

# Markers are anchored this fraction of their size up-left of the estimate
MARKER_ANCHOR_RATIO = 0.35


class SurfaceRenderer:
    """
    Renders particle set snapshots onto an injected surface.

    The renderer owns the surface's transform and the viewport state.
    Calls to render() must be serialized by the caller.

    Usage:
        surface = RasterSurface(logical_size_wh=(800, 600))
        renderer = SurfaceRenderer(surface, padding=5, factor=1)

        # Once per filter update
        renderer.render(particle_set)
        frame = surface.frame
    """

    def __init__(
        self,
        surface: Optional[DrawingSurface],
        padding: float = 5,
        factor: float = 1,
        x_max_init: float = 20,
        y_max_init: float = 20,
        styles: Optional[RenderStyles] = None,
        growth_shrink_factor: float = DEFAULT_SHRINK_FACTOR,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Attach to a surface and fit the initial viewport.

        Args:
            surface: Drawing surface to own (required)
            padding: Margin at each edge that triggers growth (context units)
            factor: Domain-to-display zoom
            x_max_init: Initial horizontal extent (meters)
            y_max_init: Initial vertical extent (meters)
            styles: Palette (default: RenderStyles())
            growth_shrink_factor: Context scale applied per growth step
            logger: Structured logger (default: create_logger("renderer"))

        Raises:
            SurfaceUnavailableError: If surface is None
            ValueError: If growth_shrink_factor is outside (0, 1), padding
                is negative, or factor or an initial extent is not positive
        """
        self.logger = logger or create_logger("renderer")

        if not 0.0 < growth_shrink_factor < 1.0:
            raise ValueError(
                f"growth_shrink_factor must be in (0, 1), got {growth_shrink_factor}"
            )

        if surface is None:
            error = SurfaceUnavailableError("No drawing surface bound to the renderer")
            self.logger.error(
                event=LogEvent.SURFACE_UNAVAILABLE,
                message="Renderer constructed without a drawing surface",
                exc_info=error,
            )
            raise error

        self.surface = surface
        self.styles = styles or RenderStyles()
        self.growth_shrink_factor = growth_shrink_factor
        self._transform = ViewportTransform.create(
            padding=padding,
            factor=factor,
            x_max_init=x_max_init,
            y_max_init=y_max_init,
        )

        self._correct_resolution()
        self._fit_viewport()

        self.logger.info(
            event=LogEvent.RENDERER_INITIALIZED,
            message="Renderer attached to surface",
            metadata={
                'buffer_wh': [self.surface.width, self.surface.height],
                'x_max': self.viewport.x_max,
                'y_max': self.viewport.y_max,
            },
        )

    @classmethod
    def from_config(
        cls,
        surface: Optional[DrawingSurface],
        config: "RendererConfig",
        logger: Optional[StructuredLogger] = None,
    ) -> "SurfaceRenderer":
        """Build a renderer from a validated RendererConfig."""
        return cls(
            surface,
            padding=config.padding,
            factor=config.factor,
            x_max_init=config.x_max_init,
            y_max_init=config.y_max_init,
            styles=config.styles.to_render_styles(),
            growth_shrink_factor=config.growth_shrink_factor,
            logger=logger,
        )

    @property
    def viewport(self) -> ViewportState:
        return self._transform.state

    @property
    def transform(self) -> ViewportTransform:
        return self._transform

    def _correct_resolution(self) -> None:
        # Larger backing buffer on high-density displays; logical size untouched
        buffer_scale = resolution_factor(self.surface.device_pixel_ratio)
        width, height = self.surface.logical_size_wh
        self.surface.resize_buffer(width * buffer_scale, height * buffer_scale)

        if buffer_scale != 1.0:
            self.logger.info(
                event=LogEvent.VIEWPORT_RESOLUTION_CORRECTED,
                message="Backing buffer enlarged for high-density display",
                metadata={
                    'device_pixel_ratio': self.surface.device_pixel_ratio,
                    'logical_wh': list(self.surface.logical_size_wh),
                    'buffer_wh': [self.surface.width, self.surface.height],
                },
            )

    def _fit_viewport(self) -> None:
        scale = self._transform.fit(self.surface.width, self.surface.height)
        self.surface.scale(scale, scale)

        self.logger.info(
            event=LogEvent.VIEWPORT_FITTED,
            message="Viewport fitted to buffer",
            metadata={
                'scale': scale,
                'x_max': self.viewport.x_max,
                'y_max': self.viewport.y_max,
            },
        )

    def render(self, particle_set: Any) -> "SurfaceRenderer":
        """
        Fully redraw a particle set snapshot.

        Args:
            particle_set: Object exposing best_particle(), particles() and
                landmark_init_set.particle_set_map

        Returns:
            self, for chaining
        """
        if self.viewport.resize_on_next_render:
            self._increase_viewport()
            self.viewport.resize_on_next_render = False

        self.clear()

        best = particle_set.best_particle()
        out_of_bounds = False
        particle_count = 0

        for particle in particle_set.particles():
            particle_count += 1
            if particle is best:
                continue
            if self._plot_user_trace(particle.user, self.styles.trace):
                out_of_bounds = True

        for candidates in particle_set.landmark_init_set.particle_set_map.values():
            for candidate in candidates:
                self._plot_object(candidate, self.styles.init_candidate)

        # Best particle last so no faint trace covers it
        if best is not None:
            if self._plot_user_trace(best.user, self.styles.best_trace):
                out_of_bounds = True
            for landmark in best.landmarks:
                self._plot_object(landmark, self.styles.landmark)

        if out_of_bounds:
            self.viewport.resize_on_next_render = True
            self.logger.info(
                event=LogEvent.VIEWPORT_GROWTH_SCHEDULED,
                message="Trace reached the padding margin, growing on next frame",
                metadata={'x_max': self.viewport.x_max, 'y_max': self.viewport.y_max},
            )

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                event=LogEvent.FRAME_RENDERED,
                message="Particle set rendered",
                metadata={
                    'particles': particle_count,
                    'init_landmarks': len(particle_set.landmark_init_set.particle_set_map),
                    'resize_on_next_render': self.viewport.resize_on_next_render,
                },
            )

        return self

    def clear(self) -> "SurfaceRenderer":
        """
        Clear the whole buffer, whatever the accumulated scaling.

        Returns:
            self, for chaining
        """
        with self.surface.transformed():
            self.surface.reset_transform()
            self.surface.clear_rect(0, 0, self.surface.width, self.surface.height)

        return self

    def _plot_user_trace(self, user: Any, style: TraceStyle) -> bool:
        """
        Stroke a user's trace, oldest pose first.

        Args:
            user: Object exposing trace.values() of poses with x, y
            style: Stroke style

        Returns:
            True if any pose lies inside the padding margin
        """
        points = []
        out_of_bounds = False

        # Whole trace every frame: particles that died out still share
        # older poses with survivors, so no incremental path is kept
        for pose in user.trace.values():
            points.append(self._transform.to_pixel(pose.x, pose.y))
            if self._transform.is_out_of_bounds(pose.x, pose.y):
                out_of_bounds = True

        if points:
            self.surface.stroke_polyline(points, style)

        return out_of_bounds

    def _plot_object(self, estimate: Any, style: MarkerStyle) -> None:
        """Fill a square marker and draw its name, if any."""
        offset = MARKER_ANCHOR_RATIO * style.size
        x = self._transform.to_pixel_x(estimate.x) - offset
        y = self._transform.to_pixel_y(estimate.y) - offset

        self.surface.fill_rect(x, y, style.size, style.size, style.color)

        name = getattr(estimate, "name", None)
        if name is not None:
            self.surface.fill_text(str(name), x, y, self.styles.label)

    def _increase_viewport(self) -> None:
        scale = self._transform.grow(self.growth_shrink_factor)
        self.surface.scale(scale, scale)

        self.logger.info(
            event=LogEvent.VIEWPORT_GROWN,
            message="Viewport grown",
            metadata={
                'x_max': self.viewport.x_max,
                'y_max': self.viewport.y_max,
                'context_scale': self.surface.current_scale,
            },
        )
