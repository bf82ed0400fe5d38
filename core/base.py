"""
Core Base Classes

Provides the data structures and abstract interfaces shared by the
loaders, the MPR views and their display surfaces.
"""

from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple
import numpy as np

from mpr.volume import VolumeGrid
from mpr.window import window_from_range


@dataclass
class LoadedVolume:
    """
    Result of loading a volume.
    
    Attributes:
        grid: Validated scalar field
        window_center: Initial window center in physical units
        window_width: Initial window width in physical units
        metadata: Descriptive information (patient, series, source path)
    """
    grid: VolumeGrid
    window_center: float
    window_width: float
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def with_default_window(cls, grid: VolumeGrid, **metadata) -> "LoadedVolume":
        """Wrap a grid whose window spans its calibrated value range."""
        low, high = grid.value_range
        low = low * grid.rescale_slope + grid.rescale_intercept
        high = high * grid.rescale_slope + grid.rescale_intercept
        center, width = window_from_range(min(low, high), max(low, high))
        return cls(grid=grid, window_center=center, window_width=width, metadata=metadata)
    
    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.grid.shape


class BaseVolumeLoader(ABC):
    """Abstract base class for volume data providers."""
    
    # Optional callback(progress: 0.0-1.0)
    progress_callback: Optional[Callable[[float], None]] = None
    
    @abstractmethod
    def load(self, source: str) -> LoadedVolume:
        """
        Load a volume from a source.
        
        Args:
            source: Path or URI to the data source
            
        Returns:
            LoadedVolume containing the grid and its initial window
        """
        pass
    
    def can_load(self, source: str) -> bool:
        """
        Check if this loader can handle the given source.
        
        Args:
            source: Path or URI to check
            
        Returns:
            True if this loader can handle the source
        """
        return True


class DisplaySurface(ABC):
    """Output surface an MPR view draws into."""
    
    @abstractmethod
    def set_size(self, width: int, height: int) -> None:
        """Resize the backing image to width x height pixels."""
        pass
    
    @property
    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """Current (width, height) in pixels."""
        pass
    
    @abstractmethod
    def present(self, image: Optional[np.ndarray], overlay: Any) -> None:
        """
        Show a frame.
        
        Args:
            image: (height, width) uint8 grayscale image, or None to clear
            overlay: Crosshair overlay description, or None
        """
        pass
