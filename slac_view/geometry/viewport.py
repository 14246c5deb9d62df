"""
Viewport Module
===============

Pure domain-to-pixel coordinate math.

Design:
- ViewportState: mutable extents, owned by one renderer
- ViewportTransform: stateless math over a ViewportState
- Extents only grow (fit() and grow() never shrink them)
- Out-of-bounds is judged in pixel space, so padding is a constant
  visual margin whatever the zoom
"""

from dataclasses import dataclass
from typing import Tuple

# Device pixel ratio reported by high-density ("retina") displays
HIGH_DENSITY_PIXEL_RATIO = 2

# Backing buffer multiplier on high-density displays; 2.0 shows seams at
# the buffer edges
HIGH_DENSITY_BUFFER_SCALE = 1.99

DEFAULT_SHRINK_FACTOR = 0.8


def resolution_factor(device_pixel_ratio: float) -> float:
    """
    Backing buffer multiplier for a device.

    Only a ratio of exactly 2 is corrected; every other ratio keeps a
    1:1 buffer.

    Args:
        device_pixel_ratio: Device pixels per logical pixel

    Returns:
        1.99 for high-density displays, 1.0 otherwise
    """
    if device_pixel_ratio == HIGH_DENSITY_PIXEL_RATIO:
        return HIGH_DENSITY_BUFFER_SCALE
    return 1.0


@dataclass
class ViewportState:
    """
    Mutable viewport state.

    Attributes:
        x_max: Horizontal extent of the drawing area (context units)
        y_max: Vertical extent of the drawing area (context units)
        factor: Domain-to-display scale
        padding: Margin reserved at each edge (context units)
        resize_on_next_render: Deferred growth latch
    """

    x_max: float
    y_max: float
    factor: float = 1.0
    padding: float = 5.0
    resize_on_next_render: bool = False


class ViewportTransform:
    """
    Maps filter-space meters to surface coordinates.

    Usage:
        transform = ViewportTransform.create(padding=5, factor=1,
                                             x_max_init=20, y_max_init=20)
        scale = transform.fit(buffer_width=800, buffer_height=600)
        px, py = transform.to_pixel(1.5, -2.0)
    """

    def __init__(self, state: ViewportState):
        self.state = state

    @classmethod
    def create(
        cls,
        padding: float = 5,
        factor: float = 1,
        x_max_init: float = 20,
        y_max_init: float = 20,
    ) -> "ViewportTransform":
        """
        Build a transform whose extents are the initial extents zoomed by factor.

        Raises:
            ValueError: If padding is negative, or factor or an initial
                extent is not positive
        """
        if padding < 0:
            raise ValueError(f"padding must be >= 0, got {padding}")

        if factor <= 0:
            raise ValueError(f"factor must be > 0, got {factor}")

        if x_max_init <= 0 or y_max_init <= 0:
            raise ValueError(
                f"Initial extents must be > 0, got ({x_max_init}, {y_max_init})"
            )

        state = ViewportState(
            x_max=x_max_init * factor,
            y_max=y_max_init * factor,
            factor=factor,
            padding=padding,
        )
        return cls(state)

    def to_pixel_x(self, x: float) -> float:
        return x * self.state.factor + self.state.x_max / 2

    def to_pixel_y(self, y: float) -> float:
        # Pixel rows grow downward, domain y grows upward
        return self.state.y_max - (y * self.state.factor + self.state.y_max / 2)

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        return self.to_pixel_x(x), self.to_pixel_y(y)

    def is_out_of_bounds(self, x: float, y: float) -> bool:
        """
        Check whether a domain point lands inside the padding margin.

        Args:
            x: Domain x (meters)
            y: Domain y (meters)

        Returns:
            True if the transformed point is within padding of any edge
            or beyond it
        """
        t_x, t_y = self.to_pixel(x, y)
        padding = self.state.padding

        return (
            t_x < padding
            or t_y < padding
            or t_x > self.state.x_max - padding
            or t_y > self.state.y_max - padding
        )

    def fit(self, buffer_width: float, buffer_height: float) -> float:
        """
        Fit the current extents into a pixel buffer.

        Picks the largest uniform scale that shows the whole extent on both
        axes, then widens the looser axis so the extents match the buffer's
        aspect ratio.

        Args:
            buffer_width: Backing buffer width (device pixels)
            buffer_height: Backing buffer height (device pixels)

        Returns:
            Uniform scale to apply to the drawing context

        Raises:
            ValueError: If the buffer has no area
        """
        if buffer_width <= 0 or buffer_height <= 0:
            raise ValueError(
                f"Buffer must have positive dimensions, got {(buffer_width, buffer_height)}"
            )

        scale_x_max = buffer_width / self.state.x_max
        scale_y_max = buffer_height / self.state.y_max
        scale = min(scale_x_max, scale_y_max)

        self.state.x_max = self.state.x_max * (scale_x_max / scale)
        self.state.y_max = self.state.y_max * (scale_y_max / scale)

        return scale

    def grow(self, shrink_factor: float = DEFAULT_SHRINK_FACTOR) -> float:
        """
        Enlarge both extents by 1 / shrink_factor.

        Args:
            shrink_factor: Context scale to apply, in (0, 1)

        Returns:
            The context scale matching the new extents (shrink_factor)

        Raises:
            ValueError: If shrink_factor would not grow the viewport
        """
        if not 0.0 < shrink_factor < 1.0:
            raise ValueError(f"shrink_factor must be in (0, 1), got {shrink_factor}")

        self.state.x_max = self.state.x_max * (1 / shrink_factor)
        self.state.y_max = self.state.y_max * (1 / shrink_factor)

        return shrink_factor
