"""
Viewport Geometry Tests
=======================

Coordinate transform, padding bounds, fit-to-buffer and growth.

Usage:
    pytest test_viewport.py
"""

import pytest

from slac_view.geometry import ViewportState, ViewportTransform, resolution_factor


def make_transform(x_max=20.0, y_max=20.0, factor=1.0, padding=5.0) -> ViewportTransform:
    return ViewportTransform(ViewportState(x_max=x_max, y_max=y_max, factor=factor, padding=padding))


def test_origin_maps_to_center():
    """Domain origin lands in the middle of the extents."""
    transform = make_transform(x_max=20, y_max=10)
    assert transform.to_pixel(0, 0) == (10.0, 5.0)


def test_y_axis_is_flipped():
    """Domain up is pixel up: larger y gives a smaller row."""
    transform = make_transform()
    assert transform.to_pixel_y(3) == pytest.approx(7.0)
    assert transform.to_pixel_y(-3) == pytest.approx(13.0)
    assert transform.to_pixel_y(3) < transform.to_pixel_y(0)


def test_factor_zooms_domain_coordinates():
    transform = make_transform(x_max=40, y_max=40, factor=2)
    assert transform.to_pixel_x(5) == pytest.approx(5 * 2 + 20)
    assert transform.to_pixel_y(5) == pytest.approx(40 - (5 * 2 + 20))


def test_transform_is_deterministic():
    """Same inputs and state always give the same pixels."""
    transform = make_transform(x_max=31.7, y_max=12.3, factor=1.3)
    first = [transform.to_pixel(x, y) for x, y in [(0.1, -2.5), (7, 7), (-19.9, 3.3)]]
    second = [transform.to_pixel(x, y) for x, y in [(0.1, -2.5), (7, 7), (-19.9, 3.3)]]
    assert first == second

    other = make_transform(x_max=31.7, y_max=12.3, factor=1.3)
    assert other.to_pixel(0.1, -2.5) == first[0]


def test_out_of_bounds_inside_padding_margin():
    transform = make_transform()

    assert not transform.is_out_of_bounds(0, 0)
    assert not transform.is_out_of_bounds(4.9, -4.9)

    # Pixel 15.1 > x_max - padding
    assert transform.is_out_of_bounds(5.1, 0)
    assert transform.is_out_of_bounds(-5.1, 0)
    assert transform.is_out_of_bounds(0, 5.1)
    assert transform.is_out_of_bounds(0, -5.1)
    assert transform.is_out_of_bounds(19.9, 0)


def test_out_of_bounds_uses_pixel_space_padding():
    """The same margin applies whatever the zoom factor."""
    zoomed = make_transform(x_max=40, y_max=40, factor=2)
    # pixel x = 2 * 7 + 20 = 34 > 40 - 5
    assert zoomed.is_out_of_bounds(7, 0)
    # pixel x = 2 * 7 + 20 = 34 < 100 - 5
    assert not make_transform(x_max=100, y_max=100, factor=2).is_out_of_bounds(7, 0)


def test_non_finite_point_is_not_out_of_bounds():
    transform = make_transform()
    assert not transform.is_out_of_bounds(float("nan"), 0)


def test_create_applies_factor_to_initial_extents():
    transform = ViewportTransform.create(padding=3, factor=2, x_max_init=20, y_max_init=10)
    assert transform.state.x_max == 40
    assert transform.state.y_max == 20
    assert transform.state.padding == 3
    assert transform.state.resize_on_next_render is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"padding": -1},
        {"factor": 0},
        {"factor": -1},
        {"x_max_init": 0},
        {"y_max_init": -5},
    ],
)
def test_create_rejects_invalid_setup(kwargs):
    with pytest.raises(ValueError):
        ViewportTransform.create(**kwargs)


def test_create_accepts_zero_padding():
    transform = ViewportTransform.create(padding=0)
    assert transform.state.padding == 0


def test_fit_square_buffer():
    transform = make_transform()
    scale = transform.fit(400, 400)
    assert scale == pytest.approx(20.0)
    assert transform.state.x_max == pytest.approx(20.0)
    assert transform.state.y_max == pytest.approx(20.0)


def test_fit_wide_buffer_widens_x_extent():
    """Non-square buffers keep the tight axis and widen the loose one."""
    transform = make_transform()
    scale = transform.fit(800, 400)
    assert scale == pytest.approx(20.0)
    assert transform.state.x_max == pytest.approx(40.0)
    assert transform.state.y_max == pytest.approx(20.0)


def test_fit_tall_buffer_widens_y_extent():
    transform = make_transform()
    scale = transform.fit(300, 600)
    assert scale == pytest.approx(15.0)
    assert transform.state.x_max == pytest.approx(20.0)
    assert transform.state.y_max == pytest.approx(40.0)


def test_fit_rejects_empty_buffer():
    with pytest.raises(ValueError):
        make_transform().fit(0, 100)


def test_grow_is_geometric():
    transform = make_transform()
    scale = transform.grow(0.8)
    assert scale == 0.8
    assert transform.state.x_max == pytest.approx(25.0)
    assert transform.state.y_max == pytest.approx(25.0)

    transform.grow(0.8)
    assert transform.state.x_max == pytest.approx(31.25)


@pytest.mark.parametrize("shrink_factor", [0.0, 1.0, 1.25, -0.5])
def test_grow_rejects_non_growing_factor(shrink_factor):
    transform = make_transform()
    with pytest.raises(ValueError):
        transform.grow(shrink_factor)
    assert transform.state.x_max == 20.0


def test_resolution_factor_only_for_ratio_two():
    assert resolution_factor(2) == 1.99
    assert resolution_factor(2.0) == 1.99
    assert resolution_factor(1) == 1.0
    assert resolution_factor(1.5) == 1.0
    assert resolution_factor(3) == 1.0
