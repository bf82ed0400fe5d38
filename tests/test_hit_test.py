from __future__ import annotations

import pytest

from mpr.types import HitTarget, Orientation
from mpr.plane import Framing
from mpr.hit_test import Circle, Line, Rect, compute_layout, hit_test, hover_feedback


@pytest.fixture
def layout(cube5, state5):
    return compute_layout(Orientation.AXIAL, state5, cube5, Framing.fit(100, 100, 1.0, 1.0))


def test_crosshair_centre_follows_positions(cube5, state5) -> None:
    framing = Framing.fit(100, 100, 1.0, 1.0)
    state5.set_position(Orientation.SAGITTAL, 4)
    state5.set_position(Orientation.CORONAL, 0)
    layout = compute_layout(Orientation.AXIAL, state5, cube5, framing)

    assert layout.center == pytest.approx((0.5, 0.5))
    assert layout.gap == pytest.approx(0.05)


@pytest.mark.parametrize(
    "point, expected",
    [
        ((0.0, 0.0), HitTarget.CENTER),
        ((0.3, 0.0), HitTarget.CROSSHAIR_HORIZONTAL),
        ((-0.3, 0.0), HitTarget.CROSSHAIR_HORIZONTAL),
        ((0.0, 0.3), HitTarget.CROSSHAIR_VERTICAL),
        ((0.48, 0.0), HitTarget.ROTATION_HANDLE_HORIZONTAL),
        ((0.0, -0.48), HitTarget.ROTATION_HANDLE_VERTICAL),
        ((0.2, 0.0), HitTarget.SLAB_HANDLE_HORIZONTAL),
        ((0.0, 0.2), HitTarget.SLAB_HANDLE_VERTICAL),
        ((0.3, 0.3), HitTarget.NONE),
    ],
)
def test_hit_classification(layout, point, expected) -> None:
    assert hit_test(layout, point, 0.01) is expected


def test_line_tolerance(layout) -> None:
    assert hit_test(layout, (0.3, 0.008), 0.01) is HitTarget.CROSSHAIR_HORIZONTAL
    assert hit_test(layout, (0.3, 0.008), 0.001) is HitTarget.NONE


def test_slab_offsets_from_thickness(cube5, state5) -> None:
    state5.set_thickness(Orientation.SAGITTAL, 2.0)
    layout = compute_layout(Orientation.AXIAL, state5, cube5, Framing.fit(100, 100, 1.0, 1.0))

    assert layout.has_slab
    assert layout.vertical_offset == pytest.approx(0.2)
    assert layout.horizontal_offset == 0.0
    # Vertical slab handles sit on the slab boundaries
    assert hit_test(layout, (0.2, 0.2), 0.0) is HitTarget.SLAB_HANDLE_VERTICAL


def test_shapes() -> None:
    line = Line((0.0, 0.0), (1.0, 0.0))
    assert line.distance((2.0, 0.0)) == pytest.approx(1.0)
    assert line.contains((0.5, 0.05), 0.1)
    assert Circle((0.0, 0.0), 0.1).contains((0.05, 0.05))
    assert not Rect((0.0, 0.0), 0.1, 0.1).contains((0.06, 0.0))


def test_hover_feedback() -> None:
    feedback = hover_feedback(HitTarget.CROSSHAIR_HORIZONTAL)
    assert feedback.show_slab_horizontal and feedback.show_rotation
    assert not feedback.show_slab_vertical
    assert feedback.cursor == "row-resize"

    assert hover_feedback(HitTarget.ROTATION_HANDLE_VERTICAL).cursor == "grab"
    assert hover_feedback(HitTarget.CENTER).cursor == "all-scroll"
    assert hover_feedback(HitTarget.NONE).show_rotation is False


def test_slab_boundaries_are_hover_regions(cube5, state5) -> None:
    framing = Framing.fit(100, 100, 1.0, 1.0)
    thin = compute_layout(Orientation.AXIAL, state5, cube5, framing)
    assert hit_test(thin, (0.2, 0.3), 0.01) is HitTarget.NONE

    state5.set_thickness(Orientation.SAGITTAL, 2.0)
    layout = compute_layout(Orientation.AXIAL, state5, cube5, framing)

    assert hit_test(layout, (0.2, 0.3), 0.01) is HitTarget.SLAB_LINE_VERTICAL
    assert hit_test(layout, (-0.2, -0.3), 0.01) is HitTarget.SLAB_LINE_VERTICAL
    assert hit_test(layout, (0.3, -0.2), 0.01) is HitTarget.NONE
    # Handles on the boundary keep priority over the boundary itself
    assert hit_test(layout, (0.2, 0.2), 0.01) is HitTarget.SLAB_HANDLE_VERTICAL

    state5.set_thickness(Orientation.CORONAL, 2.0)
    layout = compute_layout(Orientation.AXIAL, state5, cube5, framing)
    assert hit_test(layout, (0.3, -0.2), 0.01) is HitTarget.SLAB_LINE_HORIZONTAL


def test_slab_boundary_hover_reveals_handles() -> None:
    horizontal = hover_feedback(HitTarget.SLAB_LINE_HORIZONTAL)
    assert horizontal.show_slab_horizontal and not horizontal.show_slab_vertical
    assert not horizontal.show_rotation
    assert horizontal.cursor == "default"

    vertical = hover_feedback(HitTarget.SLAB_LINE_VERTICAL)
    assert vertical.show_slab_vertical and not vertical.show_slab_horizontal
    assert HitTarget.SLAB_LINE_VERTICAL.is_hover_only
    assert not HitTarget.SLAB_HANDLE_VERTICAL.is_hover_only
