"""
Drawing Surface Tests
=====================

Transform stack behaviour and RasterSurface pixel output.

Usage:
    pytest test_surface.py
"""

import numpy as np
import pytest
import supervision as sv

from slac_view import (
    LandmarkEstimate,
    Particle,
    ParticleSet,
    Pose,
    RasterSurface,
    RecordingSurface,
    SurfaceRenderer,
    SurfaceUnavailableError,
    Trace,
    User,
)
from slac_view.logging import create_logger
from slac_view.rendering import LabelStyle, TraceStyle

WHITE = [255, 255, 255]


def best_particle(points, landmarks=()):
    trace = Trace(Pose(x, y) for x, y in points)
    return Particle(user=User(trace=trace), landmarks=landmarks)


def test_surface_requires_positive_size():
    with pytest.raises(SurfaceUnavailableError):
        RasterSurface(logical_size_wh=(0, 100))
    with pytest.raises(SurfaceUnavailableError):
        RecordingSurface(logical_size_wh=(100, -1))


def test_save_restore_transform_stack():
    surface = RecordingSurface(logical_size_wh=(100, 100))
    surface.scale(4)
    surface.save()
    surface.scale(0.5)
    assert surface.current_scale == pytest.approx(2.0)

    surface.restore()
    assert surface.current_scale == pytest.approx(4.0)

    # Unbalanced restore leaves the transform alone
    surface.restore()
    assert surface.current_scale == pytest.approx(4.0)


def test_transformed_restores_on_error():
    surface = RecordingSurface(logical_size_wh=(100, 100))
    surface.scale(3)

    with pytest.raises(RuntimeError):
        with surface.transformed():
            surface.reset_transform()
            raise RuntimeError("boom")

    assert surface.current_scale == pytest.approx(3.0)


def test_resize_buffer_resets_transform_keeps_logical_size():
    surface = RecordingSurface(logical_size_wh=(100, 50))
    surface.scale(2)
    surface.save()

    surface.resize_buffer(199.9, 99.5)

    assert (surface.width, surface.height) == (199, 99)
    assert surface.logical_size_wh == (100, 50)
    assert surface.current_scale == pytest.approx(1.0)
    np.testing.assert_array_equal(surface.transform, np.eye(3))


def test_to_device_applies_scale():
    surface = RecordingSurface(logical_size_wh=(100, 100))
    surface.scale(2.5)
    np.testing.assert_allclose(surface.to_device(np.array([[1.0, 2.0], [4.0, 0.0]])), [[2.5, 5.0], [10.0, 0.0]])


def test_raster_frame_is_a_copy():
    surface = RasterSurface(logical_size_wh=(20, 10))
    frame = surface.frame
    assert frame.shape == (10, 20, 3)
    frame[:] = 0
    assert (surface.frame == 255).all()


def test_raster_stroke_and_clear():
    surface = RasterSurface(logical_size_wh=(50, 50))
    style = TraceStyle(color=sv.Color(r=255, g=0, b=0), line_width=1.0)

    surface.stroke_polyline([(5, 25), (45, 25)], style)
    assert not np.array_equal(surface.frame[25, 25], WHITE)

    surface.clear_rect(0, 0, surface.width, surface.height)
    assert (surface.frame == 255).all()


def test_raster_single_point_leaves_no_ink():
    surface = RasterSurface(logical_size_wh=(50, 50))
    surface.stroke_polyline([(25, 25)], TraceStyle(color=sv.Color(r=0, g=0, b=0)))
    assert (surface.frame == 255).all()


def test_raster_translucent_stroke_blends():
    surface = RasterSurface(logical_size_wh=(50, 50))
    style = TraceStyle(color=sv.Color(r=0, g=0, b=0), line_width=3.0, opacity=0.5)

    surface.stroke_polyline([(5, 25), (45, 25)], style)

    pixel = surface.frame[25, 25]
    assert (pixel < 255).all()
    assert (pixel > 0).all()


def test_raster_translucent_stroke_blends_only_its_footprint():
    surface = RasterSurface(logical_size_wh=(60, 60))
    surface.fill_rect(50, 50, 5, 5, sv.Color(r=0, g=0, b=255))
    before = surface.frame
    style = TraceStyle(color=sv.Color(r=0, g=0, b=0), line_width=2.0, opacity=0.5)

    surface.stroke_polyline([(5, 10), (30, 10)], style)

    after = surface.frame
    assert not np.array_equal(after[10, 15], before[10, 15])
    # Rows well below the stroke and the filled square are untouched
    np.testing.assert_array_equal(after[20:], before[20:])


def test_raster_overlapping_translucent_strokes_stack():
    surface = RasterSurface(logical_size_wh=(50, 50))
    style = TraceStyle(color=sv.Color(r=0, g=0, b=0), line_width=3.0, opacity=0.5)

    surface.stroke_polyline([(5, 25), (45, 25)], style)
    once = surface.frame[25, 25].copy()
    surface.stroke_polyline([(25, 5), (25, 45)], style)
    twice = surface.frame[25, 25]

    assert (twice < once).all()


def test_raster_translucent_stroke_off_buffer_is_ignored():
    surface = RasterSurface(logical_size_wh=(50, 50))
    style = TraceStyle(color=sv.Color(r=0, g=0, b=0), line_width=1.0, opacity=0.5)

    surface.stroke_polyline([(200, 200), (300, 250)], style)

    assert (surface.frame == 255).all()


def test_raster_skips_non_finite_input():
    surface = RasterSurface(logical_size_wh=(50, 50))
    nan = float("nan")

    surface.stroke_polyline([(5, 5), (nan, 10), (45, 5)], TraceStyle(color=sv.Color(r=0, g=0, b=0)))
    surface.fill_rect(nan, 3, 2, 2, sv.Color(r=0, g=0, b=0))
    surface.fill_text("x", float("inf"), 3, LabelStyle())

    # Only the finite segment was drawn
    assert not np.array_equal(surface.frame[5, 25], WHITE)
    assert (surface.frame[20:, :] == 255).all()


def test_renderer_draws_best_trace_and_landmark_pixels():
    surface = RasterSurface(logical_size_wh=(100, 100))
    renderer = SurfaceRenderer(surface, logger=create_logger("test_surface"))
    landmark = LandmarkEstimate(4, 4)

    renderer.render(ParticleSet([best_particle([(-5, 0), (5, 0)], landmarks=(landmark,))]))

    frame = surface.frame
    # Trace passes through the domain origin, the center of the buffer
    assert not np.array_equal(frame[50, 50], WHITE)
    # Landmark marker near device pixel (70, 30) in the landmark color
    np.testing.assert_array_equal(frame[30, 70], renderer.styles.landmark.color.as_bgr())


def test_renderer_empty_set_clears_raster():
    surface = RasterSurface(logical_size_wh=(100, 100))
    renderer = SurfaceRenderer(surface, logger=create_logger("test_surface"))

    renderer.render(ParticleSet([best_particle([(-5, 0), (5, 0)])]))
    assert not (surface.frame == 255).all()

    renderer.render(ParticleSet([]))
    assert (surface.frame == 255).all()


def test_renderer_labels_render_on_raster():
    frames = []
    for name in ("beacon_a", None):
        surface = RasterSurface(logical_size_wh=(200, 200))
        renderer = SurfaceRenderer(surface, logger=create_logger("test_surface"))
        renderer.render(ParticleSet([
            best_particle([(0, 0)], landmarks=(LandmarkEstimate(2, 2, name=name),)),
        ]))
        frames.append(surface.frame)

    labelled, unlabelled = frames
    assert not np.array_equal(labelled, unlabelled)


def test_high_density_raster_buffer():
    surface = RasterSurface(logical_size_wh=(100, 60), device_pixel_ratio=2)
    SurfaceRenderer(surface, logger=create_logger("test_surface"))

    assert surface.frame.shape == (119, 199, 3)
    assert surface.logical_size_wh == (100, 60)
