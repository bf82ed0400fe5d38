"""
Volume Grid

Dense scalar voxel grid with the geometric metadata needed for MPR.
"""

from dataclasses import dataclass, field
from typing import Tuple
import numpy as np

from .types import Orientation


@dataclass(frozen=True, eq=False)
class VolumeGrid:
    """
    Immutable scalar volume.
    
    Attributes:
        width, height, depth: Voxel counts along x, y and z
        data: Flat scalar buffer, index = x + y*width + z*width*height
        voxel_spacing: (row, column, slice) physical spacing in mm
        slice_thickness: Nominal slice thickness in mm
        slice_spacing: Distance between slice centres in mm
        rescale_slope, rescale_intercept: Stored value -> physical units
    """
    width: int
    height: int
    depth: int
    data: np.ndarray = field(repr=False)
    voxel_spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    slice_thickness: float = 1.0
    slice_spacing: float = 1.0
    rescale_slope: float = 1.0
    rescale_intercept: float = 0.0
    
    def __post_init__(self):
        if self.width <= 0 or self.height <= 0 or self.depth <= 0:
            raise ValueError(
                f"Volume dimensions must be positive, got "
                f"{self.width}x{self.height}x{self.depth}"
            )
        
        flat = np.asarray(self.data, dtype=np.float32).reshape(-1)
        expected = self.width * self.height * self.depth
        if flat.size != expected:
            raise ValueError(
                f"Voxel data length {flat.size} does not match "
                f"dimensions {self.width}x{self.height}x{self.depth} ({expected})"
            )
        
        spacing = tuple(float(s) for s in self.voxel_spacing)
        if len(spacing) != 3 or min(spacing) <= 0:
            raise ValueError(f"Voxel spacing must be three positive values, got {self.voxel_spacing}")
        if self.slice_thickness <= 0 or self.slice_spacing <= 0:
            raise ValueError("slice_thickness and slice_spacing must be positive")
        
        flat = flat.copy()
        flat.flags.writeable = False
        # Frozen dataclass: normalized fields go through object.__setattr__
        object.__setattr__(self, "data", flat)
        object.__setattr__(self, "voxel_spacing", spacing)
    
    @classmethod
    def from_array(cls, array: np.ndarray, **metadata) -> "VolumeGrid":
        """Build a grid from a (depth, height, width) array."""
        array = np.asarray(array)
        if array.ndim != 3:
            raise ValueError(f"Expected a 3D array (Z, Y, X), got shape {array.shape}")
        depth, height, width = array.shape
        return cls(width=width, height=height, depth=depth,
                   data=array.reshape(-1), **metadata)
    
    @property
    def array(self) -> np.ndarray:
        """Read-only (depth, height, width) view of the voxel data."""
        return self.data.reshape(self.depth, self.height, self.width)
    
    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.depth, self.height, self.width)
    
    @property
    def dimensions(self) -> np.ndarray:
        """Voxel counts in (x, y, z) order."""
        return np.array([self.width, self.height, self.depth], dtype=np.float64)
    
    def dimension(self, orientation: Orientation) -> int:
        """Number of slices available along the axis an orientation cuts through."""
        if orientation is Orientation.AXIAL:
            return self.depth
        if orientation is Orientation.CORONAL:
            return self.height
        if orientation is Orientation.SAGITTAL:
            return self.width
        raise AssertionError(f"Unknown orientation: {orientation!r}")
    
    def voxel(self, x: int, y: int, z: int) -> float:
        """Raw stored value at integer voxel indices."""
        return float(self.data[x + y * self.width + z * self.width * self.height])
    
    @property
    def physical_extents(self) -> Tuple[float, float, float]:
        """Physical size in mm along (x, y, z)."""
        row_spacing, column_spacing, _ = self.voxel_spacing
        physical_width = self.width * column_spacing
        physical_height = self.height * row_spacing
        physical_depth = self.slice_spacing * (self.depth - 1) + self.slice_thickness
        return physical_width, physical_height, physical_depth
    
    @property
    def normalized_extents(self) -> Tuple[float, float, float]:
        """Physical extents divided by the largest one."""
        extents = self.physical_extents
        max_dim = max(extents)
        return tuple(e / max_dim for e in extents)
    
    @property
    def value_range(self) -> Tuple[float, float]:
        """(min, max) of the stored values."""
        return float(self.data.min()), float(self.data.max())
