from __future__ import annotations

import numpy as np
import pytest

from mpr.types import Orientation, SlabMode
from mpr.volume import VolumeGrid
from mpr.view_state import ViewState
from mpr.plane import solve
from mpr.sampler import sample, sample_plane


def _column(values):
    """1x1xN volume with the given values along z."""
    return VolumeGrid.from_array(np.array(values, dtype=np.float32).reshape(-1, 1, 1))


def _axial_plane(grid, position):
    state = ViewState.for_volume(grid, 0.0, 1.0)
    state.set_position(Orientation.AXIAL, position)
    return solve(Orientation.AXIAL, state, grid)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (SlabMode.MAX_IP, 9.0),
        (SlabMode.MIN_IP, 1.0),
        (SlabMode.AVG_IP, 4.0),
    ],
)
def test_slab_reduction(mode, expected) -> None:
    grid = _column([1, 5, 3, 9, 2])
    plane = _axial_plane(grid, 2)

    assert sample(plane, grid, 5.0, mode, 0.0, 0.0) == pytest.approx(expected, abs=1e-4)


def test_thin_slab_is_single_sample() -> None:
    grid = _column([1, 5, 3, 9, 2])
    plane = _axial_plane(grid, 2)

    assert sample(plane, grid, 0.0, SlabMode.MAX_IP, 0.0, 0.0) == pytest.approx(3.0)
    assert sample(plane, grid, 0.5, SlabMode.MIN_IP, 0.0, 0.0) == pytest.approx(3.0)


def test_slab_samples_outside_volume_are_skipped() -> None:
    grid = _column([1, 5, 3, 9, 2])
    plane = _axial_plane(grid, 0)

    # Offsets -2 and -1 leave the volume; 1, 5 and 3 remain
    assert sample(plane, grid, 5.0, SlabMode.MAX_IP, 0.0, 0.0) == pytest.approx(5.0, abs=1e-4)
    assert sample(plane, grid, 5.0, SlabMode.MIN_IP, 0.0, 0.0) == pytest.approx(1.0, abs=1e-4)
    assert sample(plane, grid, 5.0, SlabMode.AVG_IP, 0.0, 0.0) == pytest.approx(3.0, abs=1e-4)


def test_outside_sample_is_nan() -> None:
    grid = _column([1, 5, 3, 9, 2])
    plane = _axial_plane(grid, 2)

    assert np.isnan(sample(plane, grid, 0.0, SlabMode.MAX_IP, 10.0, 0.0))
    assert np.isnan(sample(plane, grid, 3.0, SlabMode.AVG_IP, 10.0, 0.0))


def test_sample_plane_is_vectorized(cube4) -> None:
    state = ViewState.for_volume(cube4, 0.0, 1.0)
    plane = solve(Orientation.AXIAL, state, cube4)
    u = np.linspace(-0.4, 0.4, 6).reshape(2, 3)
    v = np.zeros((2, 3))

    values = sample_plane(plane, cube4, 0.0, SlabMode.MAX_IP, u, v)

    assert values.shape == (2, 3)
    assert values.dtype == np.float32
    # Data grows with x, so values grow along u
    assert np.all(np.diff(values.reshape(-1)) > 0)


def test_trilinear_interpolates_between_voxels() -> None:
    grid = VolumeGrid.from_array(np.array([[[0.0, 10.0]]], dtype=np.float32))
    state = ViewState.for_volume(grid, 0.0, 1.0)
    plane = solve(Orientation.AXIAL, state, grid)

    # Halfway between the two voxel centres
    assert sample(plane, grid, 0.0, SlabMode.MAX_IP, 0.0, 0.0) == pytest.approx(5.0)


def test_unknown_slab_mode_fails_fast() -> None:
    grid = _column([1, 5, 3, 9, 2])
    plane = _axial_plane(grid, 2)

    with pytest.raises(AssertionError):
        sample_plane(plane, grid, 3.0, "maxip", np.zeros(1), np.zeros(1))
    with pytest.raises(AssertionError):
        sample(plane, grid, 0.0, 0, 0.0, 0.0)
