"""
Configuration schema for the particle renderer.

Defines surface geometry, viewport defaults and the color palette.
Loaded from YAML and validated at construction (fail fast).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple
import yaml
import supervision as sv

from slac_view.rendering.styles import (
    LabelStyle,
    MarkerStyle,
    RenderStyles,
    TraceStyle,
)


def _parse_hex(name: str, value: str) -> sv.Color:
    try:
        return sv.Color.from_hex(value)
    except ValueError as e:
        raise ValueError(f"Invalid color for {name}: {value!r} ({e})") from e


@dataclass(frozen=True)
class StyleConfig:
    """Palette as plain values (hex colors, domain-unit sizes)."""

    trace_color: str = "#A8A8A8"
    trace_line_width: float = 0.05
    trace_opacity: float = 0.5

    best_trace_color: str = "#24780D"
    best_trace_line_width: float = 0.1

    init_candidate_color: str = "#5FE653"
    landmark_color: str = "#B52B2B"
    marker_size: float = 0.35

    label_color: str = "#000000"
    label_font_size: float = 1.0

    def __post_init__(self):
        """Validate style configuration."""
        for name in ("trace_color", "best_trace_color", "init_candidate_color",
                     "landmark_color", "label_color"):
            _parse_hex(name, getattr(self, name))

        if self.trace_line_width <= 0 or self.best_trace_line_width <= 0:
            raise ValueError(
                f"Line widths must be > 0, got {self.trace_line_width} "
                f"and {self.best_trace_line_width}"
            )

        if not 0.0 <= self.trace_opacity <= 1.0:
            raise ValueError(
                f"trace_opacity must be in [0.0, 1.0], got {self.trace_opacity}"
            )

        if self.marker_size <= 0:
            raise ValueError(f"marker_size must be > 0, got {self.marker_size}")

        if self.label_font_size <= 0:
            raise ValueError(f"label_font_size must be > 0, got {self.label_font_size}")

    def to_render_styles(self) -> RenderStyles:
        """Build the palette objects the renderer draws with."""
        return RenderStyles(
            trace=TraceStyle(
                color=sv.Color.from_hex(self.trace_color),
                line_width=self.trace_line_width,
                opacity=self.trace_opacity,
            ),
            best_trace=TraceStyle(
                color=sv.Color.from_hex(self.best_trace_color),
                line_width=self.best_trace_line_width,
            ),
            init_candidate=MarkerStyle(
                color=sv.Color.from_hex(self.init_candidate_color),
                size=self.marker_size,
            ),
            landmark=MarkerStyle(
                color=sv.Color.from_hex(self.landmark_color),
                size=self.marker_size,
            ),
            label=LabelStyle(
                color=sv.Color.from_hex(self.label_color),
                font_size=self.label_font_size,
            ),
        )


@dataclass(frozen=True)
class RendererConfig:
    """
    Main configuration for the particle renderer.

    Immutable after construction (frozen dataclass).
    """

    # Viewport
    padding: float = 5
    factor: float = 1
    x_max_init: float = 20
    y_max_init: float = 20
    growth_shrink_factor: float = 0.8

    # Surface
    surface_size_wh: Tuple[int, int] = (800, 600)  # logical (width, height)
    device_pixel_ratio: float = 1.0

    # Palette
    styles: StyleConfig = field(default_factory=StyleConfig)

    def __post_init__(self):
        """Validate renderer configuration."""
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")

        if self.factor <= 0:
            raise ValueError(f"factor must be > 0, got {self.factor}")

        if self.x_max_init <= 0 or self.y_max_init <= 0:
            raise ValueError(
                f"Initial extents must be > 0, got ({self.x_max_init}, {self.y_max_init})"
            )

        if not 0.0 < self.growth_shrink_factor < 1.0:
            raise ValueError(
                f"growth_shrink_factor must be in (0, 1), got {self.growth_shrink_factor}"
            )

        if len(self.surface_size_wh) != 2:
            raise ValueError(
                f"surface_size_wh must be [width, height], got {self.surface_size_wh}"
            )
        width, height = self.surface_size_wh
        if width <= 0 or height <= 0:
            raise ValueError(
                f"surface_size_wh must have positive dimensions, got {self.surface_size_wh}"
            )

        if self.device_pixel_ratio <= 0:
            raise ValueError(
                f"device_pixel_ratio must be > 0, got {self.device_pixel_ratio}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RendererConfig":
        """Build from a parsed mapping; missing keys take their defaults."""
        data = dict(data or {})
        kwargs: Dict[str, Any] = {}

        for key in ("padding", "factor", "x_max_init", "y_max_init",
                    "growth_shrink_factor", "device_pixel_ratio"):
            if key in data:
                kwargs[key] = float(data[key])

        if "surface_size_wh" in data:
            kwargs["surface_size_wh"] = tuple(int(v) for v in data["surface_size_wh"])

        kwargs["styles"] = StyleConfig(**(data.get("styles") or {}))

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "RendererConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            padding: 5
            factor: 1
            x_max_init: 20
            y_max_init: 20
            growth_shrink_factor: 0.8

            surface_size_wh: [800, 600]  # [width, height]
            device_pixel_ratio: 2

            styles:
              trace_color: "#A8A8A8"
              best_trace_color: "#24780D"
              landmark_color: "#B52B2B"
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        return cls.from_dict(data or {})
