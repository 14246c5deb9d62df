"""
Drawing Surface Module
======================

2D drawing surfaces with a canvas-like transform stack.

Design:
- DrawingSurface (abstract): buffer sizing + affine transform stack
- RasterSurface: numpy BGR frame, drawn with supervision / OpenCV
- RecordingSurface: records every call, draws nothing (tests, dry runs)
- Styles are passed per call; the surface keeps no stroke/fill state

Coordinates given to primitives are in context units; the current
transform maps them to device pixels of the backing buffer.

Dependencies:
- supervision (draw utils, Color, Point, Rect)
- numpy (frame buffer, transform matrix)
- opencv (polylines, text metrics)
"""

import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple

import cv2
import numpy as np
import supervision as sv

from slac_view.rendering.styles import LabelStyle, TraceStyle

# Glyph height of FONT_HERSHEY_SIMPLEX at text_scale=1.0, in pixels
_HERSHEY_HEIGHT_PX = 22.0
_MIN_TEXT_SCALE = 0.3

# Keeps device coordinates within OpenCV's fixed-point range
_DEVICE_COORD_LIMIT = 1e6


class SurfaceUnavailableError(RuntimeError):
    """Raised when no usable drawing surface is bound."""
    pass


class DrawingSurface(ABC):
    """
    Abstract drawing surface.

    Attributes:
        logical_size_wh: Displayed size (logical pixels), never changed by
            buffer resizes
        device_pixel_ratio: Device pixels per logical pixel
        width: Backing buffer width (device pixels)
        height: Backing buffer height (device pixels)

    Transform stack:
        save() / restore() push and pop the current 3x3 affine matrix,
        scale() post-multiplies it, reset_transform() sets identity.
        Resizing the buffer resets the transform and empties the stack.
    """

    def __init__(
        self,
        logical_size_wh: Tuple[int, int],
        device_pixel_ratio: float = 1.0,
    ):
        width, height = logical_size_wh
        if width <= 0 or height <= 0:
            raise SurfaceUnavailableError(
                f"Surface must have a positive logical size, got {logical_size_wh}"
            )
        if device_pixel_ratio <= 0:
            raise ValueError(f"device_pixel_ratio must be > 0, got {device_pixel_ratio}")

        self.logical_size_wh = (int(width), int(height))
        self.device_pixel_ratio = device_pixel_ratio
        self.width = int(width)
        self.height = int(height)

        self._matrix = np.eye(3)
        self._stack: List[np.ndarray] = []
        self._allocate(self.width, self.height)

    # ------------------------------------------------------------------
    # Buffer

    def resize_buffer(self, width: float, height: float) -> None:
        """
        Reallocate the backing buffer, keeping the logical size.

        Args:
            width: New buffer width (truncated to whole pixels)
            height: New buffer height (truncated to whole pixels)
        """
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise SurfaceUnavailableError(
                f"Buffer must have positive dimensions, got {(width, height)}"
            )

        self.width = width
        self.height = height
        self._matrix = np.eye(3)
        self._stack.clear()
        self._allocate(width, height)

    @abstractmethod
    def _allocate(self, width: int, height: int) -> None:
        """Create an empty backing buffer."""
        pass

    # ------------------------------------------------------------------
    # Transform stack

    @property
    def transform(self) -> np.ndarray:
        """Copy of the current affine matrix (context -> device)."""
        return self._matrix.copy()

    @property
    def current_scale(self) -> float:
        """Uniform scale of the current transform."""
        return math.sqrt(abs(np.linalg.det(self._matrix[:2, :2])))

    def save(self) -> None:
        self._stack.append(self._matrix.copy())

    def restore(self) -> None:
        # Unbalanced restore is a no-op, as on an HTML canvas
        if self._stack:
            self._matrix = self._stack.pop()

    def reset_transform(self) -> None:
        self._matrix = np.eye(3)

    def scale(self, sx: float, sy: Optional[float] = None) -> None:
        sy = sx if sy is None else sy
        self._matrix = self._matrix @ np.diag([sx, sy, 1.0])

    @contextmanager
    def transformed(self) -> Iterator["DrawingSurface"]:
        """Scoped transform changes, restored on exit even on error."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    def to_device(self, points: np.ndarray) -> np.ndarray:
        """
        Map Nx2 context coordinates to device pixels.

        Args:
            points: Nx2 array of (x, y)

        Returns:
            Nx2 float array of device coordinates
        """
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return points @ self._matrix[:2, :2].T + self._matrix[:2, 2]

    # ------------------------------------------------------------------
    # Primitives

    @abstractmethod
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Reset a rectangle to the background."""
        pass

    @abstractmethod
    def stroke_polyline(self, points: Sequence[Tuple[float, float]], style: TraceStyle) -> None:
        """Stroke an open polyline through points, in order."""
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, color: sv.Color) -> None:
        """Fill an axis-aligned rectangle whose top-left corner is (x, y)."""
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float, style: LabelStyle) -> None:
        """Draw text with its baseline-left corner at (x, y)."""
        pass


class RasterSurface(DrawingSurface):
    """
    Surface backed by a numpy BGR frame.

    Non-finite coordinates are dropped, the way an HTML canvas ignores
    them: polyline vertices with NaN/inf are skipped, rectangles and text
    at non-finite positions are not drawn. Nothing is raised.

    Usage:
        surface = RasterSurface(logical_size_wh=(800, 600), device_pixel_ratio=2)
        renderer = SurfaceRenderer(surface)
        renderer.render(particle_set)
        sink.write_frame(surface.frame)
    """

    def __init__(
        self,
        logical_size_wh: Tuple[int, int],
        device_pixel_ratio: float = 1.0,
        background: sv.Color = sv.Color(r=255, g=255, b=255),
    ):
        self.background = background
        super().__init__(logical_size_wh, device_pixel_ratio)

    def _allocate(self, width: int, height: int) -> None:
        self._frame = np.full((height, width, 3), self.background.as_bgr(), dtype=np.uint8)

    @property
    def frame(self) -> np.ndarray:
        """Copy of the current buffer (HxWx3 BGR)."""
        return self._frame.copy()

    def _device_points(self, points: np.ndarray) -> np.ndarray:
        device = self.to_device(points)
        return np.clip(device, -_DEVICE_COORD_LIMIT, _DEVICE_COORD_LIMIT)

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        corners = self.to_device(np.array([[x, y], [x + width, y + height]]))
        if not np.isfinite(corners).all():
            return

        x0, y0 = np.floor(corners.min(axis=0)).astype(int)
        x1, y1 = np.ceil(corners.max(axis=0)).astype(int)
        x0, x1 = max(x0, 0), min(x1, self.width)
        y0, y1 = max(y0, 0), min(y1, self.height)
        if x0 >= x1 or y0 >= y1:
            return

        self._frame[y0:y1, x0:x1] = self.background.as_bgr()

    def stroke_polyline(self, points: Sequence[Tuple[float, float]], style: TraceStyle) -> None:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        points = points[np.isfinite(points).all(axis=1)]

        # A path needs at least one segment to leave ink
        if len(points) < 2:
            return

        device = self._device_points(points)
        cv2_polyline = np.round(device).astype(np.int32).reshape((-1, 1, 2))
        thickness = max(1, int(round(style.line_width * self.current_scale)))

        if style.opacity >= 1.0:
            cv2.polylines(
                self._frame,
                [cv2_polyline],
                isClosed=False,
                color=style.color.as_bgr(),
                thickness=thickness,
                lineType=cv2.LINE_AA,
            )
            return

        # Blend only the stroke's bounding box, padded for thickness and AA
        x, y, w, h = cv2.boundingRect(cv2_polyline)
        pad = thickness + 1
        x0, y0 = max(x - pad, 0), max(y - pad, 0)
        x1, y1 = min(x + w + pad, self.width), min(y + h + pad, self.height)
        if x0 >= x1 or y0 >= y1:
            return

        roi = self._frame[y0:y1, x0:x1]
        stroke = roi.copy()
        cv2.polylines(
            stroke,
            [cv2_polyline - np.array([x0, y0], dtype=np.int32)],
            isClosed=False,
            color=style.color.as_bgr(),
            thickness=thickness,
            lineType=cv2.LINE_AA,
        )
        self._frame[y0:y1, x0:x1] = cv2.addWeighted(
            stroke, style.opacity, roi, 1.0 - style.opacity, 0
        )

    def fill_rect(self, x: float, y: float, width: float, height: float, color: sv.Color) -> None:
        corners = self.to_device(np.array([[x, y], [x + width, y + height]]))
        if not np.isfinite(corners).all():
            return

        corners = np.clip(corners, -_DEVICE_COORD_LIMIT, _DEVICE_COORD_LIMIT)
        x0, y0 = corners.min(axis=0)
        x1, y1 = corners.max(axis=0)

        rect = sv.Rect(
            x=int(round(x0)),
            y=int(round(y0)),
            width=max(int(round(x1 - x0)), 1),
            height=max(int(round(y1 - y0)), 1),
        )
        self._frame = sv.draw_filled_rectangle(scene=self._frame, rect=rect, color=color)

    def fill_text(self, text: str, x: float, y: float, style: LabelStyle) -> None:
        anchor = self.to_device(np.array([[x, y]]))[0]
        if not np.isfinite(anchor).all():
            return

        text_scale = max(style.font_size * self.current_scale / _HERSHEY_HEIGHT_PX, _MIN_TEXT_SCALE)
        (text_w, text_h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, text_scale, 1)

        # sv.draw_text centers on its anchor; shift so (x, y) is the baseline-left corner
        center = np.clip(
            anchor + np.array([text_w / 2, -text_h / 2]),
            -_DEVICE_COORD_LIMIT,
            _DEVICE_COORD_LIMIT,
        )
        self._frame = sv.draw_text(
            scene=self._frame,
            text=text,
            text_anchor=sv.Point(x=int(round(center[0])), y=int(round(center[1]))),
            text_color=style.color,
            text_scale=text_scale,
            text_thickness=1,
            text_padding=0,
        )


@dataclass(frozen=True)
class SurfaceCall:
    """
    One recorded drawing call.

    Attributes:
        op: Primitive name ("clear_rect", "stroke_polyline", ...)
        args: Positional arguments in context units, as received
        style: Style or color passed with the call (None for clears)
        transform: Affine matrix in effect at call time
    """

    op: str
    args: Tuple[Any, ...]
    style: Any
    transform: np.ndarray

    @property
    def scale(self) -> float:
        return math.sqrt(abs(np.linalg.det(self.transform[:2, :2])))


class RecordingSurface(DrawingSurface):
    """
    Surface that records calls instead of drawing.

    Values are recorded untouched (NaN stays NaN), which makes it the
    reference backend for tests and dry runs.

    Usage:
        surface = RecordingSurface(logical_size_wh=(400, 400))
        SurfaceRenderer(surface).render(particle_set)
        strokes = surface.calls_for("stroke_polyline")
    """

    def __init__(
        self,
        logical_size_wh: Tuple[int, int] = (400, 400),
        device_pixel_ratio: float = 1.0,
    ):
        self.calls: List[SurfaceCall] = []
        self.allocations: List[Tuple[int, int]] = []
        super().__init__(logical_size_wh, device_pixel_ratio)

    def _allocate(self, width: int, height: int) -> None:
        self.allocations.append((width, height))

    def _record(self, op: str, args: Tuple[Any, ...], style: Any = None) -> None:
        self.calls.append(SurfaceCall(op=op, args=args, style=style, transform=self.transform))

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("clear_rect", (x, y, width, height))

    def stroke_polyline(self, points: Sequence[Tuple[float, float]], style: TraceStyle) -> None:
        self._record("stroke_polyline", (tuple(tuple(p) for p in points),), style)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: sv.Color) -> None:
        self._record("fill_rect", (x, y, width, height), color)

    def fill_text(self, text: str, x: float, y: float, style: LabelStyle) -> None:
        self._record("fill_text", (text, x, y), style)

    def calls_for(self, op: str) -> List[SurfaceCall]:
        """Recorded calls of one primitive, in call order."""
        return [call for call in self.calls if call.op == op]

    def reset_calls(self) -> None:
        self.calls.clear()

    def __repr__(self) -> str:
        return f"RecordingSurface(buffer={self.width}x{self.height}, calls={len(self.calls)})"
