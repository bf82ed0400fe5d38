"""
Sampler

Samples the scalar field along a cutting plane with trilinear
interpolation, optionally integrating a slab along the plane normal.
"""

import numpy as np
from scipy import ndimage

from .types import SlabMode
from .volume import VolumeGrid
from .plane import Plane


# Raw value for points outside the volume; always displayed as black.
OUTSIDE = float("nan")


def _inside(points: np.ndarray) -> np.ndarray:
    """Mask of points whose every coordinate lies in [0, 1]."""
    return np.all((points >= 0.0) & (points <= 1.0), axis=-1)


def trilinear(grid: VolumeGrid, points: np.ndarray) -> np.ndarray:
    """
    Trilinear interpolation at normalized (x, y, z) coordinates.
    
    Coordinate c along an axis with N voxels maps to voxel space c*N - 0.5,
    so voxel centres sit at (i + 0.5) / N. Edge voxels clamp rather than wrap.
    
    Args:
        grid: Volume to sample
        points: (..., 3) array of normalized coordinates
        
    Returns:
        Interpolated raw values with shape points.shape[:-1]
    """
    points = np.asarray(points, dtype=np.float64)
    voxel = points * grid.dimensions - 0.5
    # map_coordinates indexes the (Z, Y, X) array
    coords = np.stack([voxel[..., 2], voxel[..., 1], voxel[..., 0]])
    return ndimage.map_coordinates(grid.array, coords, order=1, mode="nearest")


def sample_plane(
    plane: Plane,
    grid: VolumeGrid,
    slab_thickness: float,
    slab_mode: SlabMode,
    u: np.ndarray,
    v: np.ndarray
) -> np.ndarray:
    """
    Vectorized plane sampling.
    
    Args:
        plane: Cutting plane in normalized volume space
        grid: Volume to sample
        slab_thickness: Slab thickness in voxels; below 1 means a single sample
        slab_mode: Reduction across slab samples
        u, v: Plane coordinates in [-0.5, 0.5], any (broadcastable) shape
        
    Returns:
        float32 raw values, OUTSIDE where nothing valid was sampled
    """
    assert isinstance(slab_mode, SlabMode), f"Unsupported slab mode: {slab_mode!r}"
    
    u, v = np.broadcast_arrays(np.asarray(u, dtype=np.float64),
                               np.asarray(v, dtype=np.float64))
    centers = plane.point(u, v)
    
    if slab_thickness < 1.0:
        result = np.full(u.shape, OUTSIDE, dtype=np.float32)
        valid = _inside(centers)
        if np.any(valid):
            result[valid] = trilinear(grid, centers[valid])
        return result
    
    half = int(slab_thickness) // 2
    step = plane.normal / grid.dimensions
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    # (n_offsets, ..., 3)
    samples = centers[np.newaxis] + offsets.reshape((-1,) + (1,) * u.ndim + (1,)) * step
    valid = _inside(samples)
    
    values = np.zeros(valid.shape, dtype=np.float32)
    if np.any(valid):
        values[valid] = trilinear(grid, samples[valid])
    count = valid.sum(axis=0)
    
    if slab_mode is SlabMode.MAX_IP:
        reduced = np.where(valid, values, -np.inf).max(axis=0)
    elif slab_mode is SlabMode.MIN_IP:
        reduced = np.where(valid, values, np.inf).min(axis=0)
    elif slab_mode is SlabMode.AVG_IP:
        with np.errstate(invalid="ignore", divide="ignore"):
            reduced = np.where(valid, values, 0.0).sum(axis=0) / count
    else:
        raise AssertionError(f"Unsupported slab mode: {slab_mode!r}")
    
    return np.where(count > 0, reduced, OUTSIDE).astype(np.float32)


def sample(
    plane: Plane,
    grid: VolumeGrid,
    slab_thickness: float,
    slab_mode: SlabMode,
    u: float,
    v: float
) -> float:
    """Raw value at a single plane position (u, v) in [-0.5, 0.5]^2."""
    return float(sample_plane(plane, grid, slab_thickness, slab_mode, u, v))
