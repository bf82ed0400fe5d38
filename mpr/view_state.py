"""
View State

Single shared, mutable view model read by all three MPR views.
"""

from dataclasses import dataclass, field, replace
import math
from typing import Optional
import numpy as np
from scipy.spatial.transform import Rotation

from .types import Orientation, SlabMode
from .volume import VolumeGrid


MIN_WINDOW_WIDTH = 1.0


@dataclass
class ViewState:
    """
    Window/level, slice positions, slab thicknesses and per-view rotations.
    
    Positions are slice indices; thicknesses are in voxels along the axis
    they belong to. The clamping setters need the grid dimensions, which
    are captured when the state is created for a volume.
    """
    window_center: float = 0.0
    window_width: float = 1.0
    axial_position: int = 0
    coronal_position: int = 0
    sagittal_position: int = 0
    axial_thickness: float = 0.0
    coronal_thickness: float = 0.0
    sagittal_thickness: float = 0.0
    axial_rotation: Rotation = field(default_factory=Rotation.identity)
    coronal_rotation: Rotation = field(default_factory=Rotation.identity)
    sagittal_rotation: Rotation = field(default_factory=Rotation.identity)
    slab_mode: SlabMode = SlabMode.MAX_IP
    # (width, height, depth) of the volume this state belongs to
    dimensions: Optional[tuple] = None
    
    @classmethod
    def for_volume(
        cls,
        grid: VolumeGrid,
        window_center: float,
        window_width: float
    ) -> "ViewState":
        """Fresh state for a newly loaded volume, centred in every axis."""
        state = cls(dimensions=(grid.width, grid.height, grid.depth))
        state.set_window(window_center, window_width)
        state.axial_position = grid.depth // 2
        state.coronal_position = grid.height // 2
        state.sagittal_position = grid.width // 2
        return state
    
    # ---------- accessors keyed by orientation ----------
    
    def position(self, orientation: Orientation) -> int:
        return getattr(self, f"{orientation.value}_position")
    
    def thickness(self, orientation: Orientation) -> float:
        return getattr(self, f"{orientation.value}_thickness")
    
    def rotation(self, orientation: Orientation) -> Rotation:
        return getattr(self, f"{orientation.value}_rotation")
    
    def max_position(self, orientation: Orientation) -> Optional[int]:
        """Highest valid slice index along an orientation's axis."""
        if self.dimensions is None:
            return None
        width, height, depth = self.dimensions
        if orientation is Orientation.AXIAL:
            return depth - 1
        if orientation is Orientation.CORONAL:
            return height - 1
        if orientation is Orientation.SAGITTAL:
            return width - 1
        raise AssertionError(f"Unknown orientation: {orientation!r}")
    
    # ---------- clamped setters ----------
    
    def set_window(self, center: float, width: float) -> None:
        self.window_center = float(center)
        self.window_width = max(MIN_WINDOW_WIDTH, float(width))
    
    def set_position(self, orientation: Orientation, value: float) -> int:
        """Round and clamp a slice position; returns the stored value."""
        position = math.floor(float(value) + 0.5)
        upper = self.max_position(orientation)
        if upper is not None:
            position = int(np.clip(position, 0, upper))
        else:
            position = max(0, position)
        setattr(self, f"{orientation.value}_position", position)
        return position
    
    def set_thickness(self, orientation: Orientation, value: float) -> float:
        thickness = max(0.0, float(value))
        setattr(self, f"{orientation.value}_thickness", thickness)
        return thickness
    
    def set_rotation(self, orientation: Orientation, rotation: Rotation) -> None:
        setattr(self, f"{orientation.value}_rotation", rotation)
    
    def reset_rotations(self) -> None:
        for orientation in Orientation:
            self.set_rotation(orientation, Rotation.identity())
    
    def snapshot(self) -> "ViewState":
        """Shallow copy; rotations are immutable so sharing them is safe."""
        return replace(self)
