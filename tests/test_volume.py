from __future__ import annotations

import numpy as np
import pytest

from mpr.types import Orientation
from mpr.volume import VolumeGrid


def test_from_array_keeps_zyx_layout() -> None:
    array = np.arange(2 * 3 * 4, dtype=np.float32).reshape(2, 3, 4)
    grid = VolumeGrid.from_array(array)

    assert (grid.width, grid.height, grid.depth) == (4, 3, 2)
    assert grid.shape == (2, 3, 4)
    assert grid.voxel(3, 2, 1) == array[1, 2, 3]
    assert np.array_equal(grid.array, array)


def test_data_is_read_only_copy() -> None:
    array = np.zeros((2, 2, 2), dtype=np.float32)
    grid = VolumeGrid.from_array(array)
    array[0, 0, 0] = 5.0

    assert grid.voxel(0, 0, 0) == 0.0
    assert grid.data.flags.writeable is False


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0, height=2, depth=2, data=np.zeros(0)),
        dict(width=2, height=2, depth=2, data=np.zeros(7)),
        dict(width=1, height=1, depth=1, data=np.zeros(1), voxel_spacing=(1.0, 0.0, 1.0)),
        dict(width=1, height=1, depth=1, data=np.zeros(1), slice_thickness=0.0),
    ],
)
def test_malformed_volume_raises(kwargs) -> None:
    with pytest.raises(ValueError):
        VolumeGrid(**kwargs)


def test_from_array_rejects_2d() -> None:
    with pytest.raises(ValueError):
        VolumeGrid.from_array(np.zeros((3, 3)))


def test_normalized_extents_follow_physical_size() -> None:
    grid = VolumeGrid.from_array(np.zeros((1, 2, 4), dtype=np.float32))

    assert grid.physical_extents == (4.0, 2.0, 1.0)
    assert grid.normalized_extents == pytest.approx((1.0, 0.5, 0.25))


def test_anisotropic_spacing() -> None:
    grid = VolumeGrid.from_array(
        np.zeros((3, 4, 4), dtype=np.float32),
        voxel_spacing=(0.5, 0.5, 2.0),
        slice_thickness=2.0,
        slice_spacing=2.0,
    )
    # 4 * 0.5 in-plane, 2 * 2 + 2 through-plane
    assert grid.physical_extents == pytest.approx((2.0, 2.0, 6.0))
    assert max(grid.normalized_extents) == pytest.approx(1.0)


def test_dimension_per_orientation() -> None:
    grid = VolumeGrid.from_array(np.zeros((2, 3, 4), dtype=np.float32))

    assert grid.dimension(Orientation.AXIAL) == 2
    assert grid.dimension(Orientation.CORONAL) == 3
    assert grid.dimension(Orientation.SAGITTAL) == 4
