"""
Data Manager

Centralized state for the viewer session: the loaded volume and the
single ViewState shared by all three MPR views.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from core.base import LoadedVolume
from mpr.types import Orientation, SlabMode
from mpr.volume import VolumeGrid
from mpr.view_state import ViewState
from mpr.window import WINDOW_PRESETS
from mpr.interaction import StateUpdate, apply_update, scroll_slices


class DataManager(QObject):
    """
    Manages application data state.
    
    Provides a centralized location for:
    - The loaded volume and its initial window
    - The shared view state (window, positions, thicknesses, rotations)
    - State change notifications via signals
    
    Every mutation happens on the GUI thread and is followed by
    view_state_changed so all views redraw from the same state.
    """
    
    # Signals
    volume_changed = Signal(object)  # Emits LoadedVolume or None
    view_state_changed = Signal(object)  # Emits ViewState
    
    def __init__(self, parent=None):
        super().__init__(parent)
        
        self._volume: Optional[LoadedVolume] = None
        self._view_state = ViewState()
    
    @property
    def volume(self) -> Optional[LoadedVolume]:
        """Currently loaded volume."""
        return self._volume
    
    @property
    def grid(self) -> Optional[VolumeGrid]:
        """Grid of the loaded volume."""
        return self._volume.grid if self._volume is not None else None
    
    @property
    def view_state(self) -> ViewState:
        """The shared view state."""
        return self._view_state
    
    @property
    def has_volume(self) -> bool:
        """Whether a volume is loaded."""
        return self._volume is not None
    
    def set_volume(self, volume: Optional[LoadedVolume]) -> None:
        """
        Replace the current volume and start from a fresh view state.
        
        Args:
            volume: LoadedVolume instance or None to clear
        """
        self._volume = volume
        if volume is not None:
            self._view_state = ViewState.for_volume(
                volume.grid, volume.window_center, volume.window_width
            )
            logging.info(f"Volume set: {volume.grid.shape}")
        else:
            self._view_state = ViewState()
        self.volume_changed.emit(volume)
        self.view_state_changed.emit(self._view_state)
    
    def handle_state_update(self, update: StateUpdate) -> None:
        """Apply a pointer-driven update from one of the views."""
        if self._volume is None:
            return
        apply_update(self._view_state, update)
        self.view_state_changed.emit(self._view_state)
    
    def set_window(self, center: float, width: float) -> None:
        self._view_state.set_window(center, width)
        self.view_state_changed.emit(self._view_state)
    
    def apply_preset(self, name: str) -> None:
        """Set the window from a named preset."""
        if name not in WINDOW_PRESETS:
            raise ValueError(f"Unknown window preset: {name}")
        preset = WINDOW_PRESETS[name]
        self.set_window(preset["center"], preset["width"])
    
    def scroll(self, orientation: Orientation, slices: int) -> int:
        """
        Move one view's slice.
        
        Returns:
            The clamped new position
        """
        if self._volume is None:
            return self._view_state.position(orientation)
        position = scroll_slices(self._view_state, orientation, slices)
        self.view_state_changed.emit(self._view_state)
        return position
    
    def set_thickness(self, orientation: Orientation, value: float) -> float:
        thickness = self._view_state.set_thickness(orientation, value)
        self.view_state_changed.emit(self._view_state)
        return thickness
    
    def set_slab_mode(self, mode: SlabMode) -> None:
        assert isinstance(mode, SlabMode), f"Unsupported slab mode: {mode!r}"
        self._view_state.slab_mode = mode
        self.view_state_changed.emit(self._view_state)
        logging.info(f"Slab mode: {mode.name}")
    
    def reset_view(self) -> None:
        """Back to centred slices, zero thickness, no rotation and the initial window."""
        if self._volume is None:
            return
        slab_mode = self._view_state.slab_mode
        self._view_state = ViewState.for_volume(
            self._volume.grid, self._volume.window_center, self._volume.window_width
        )
        self._view_state.slab_mode = slab_mode
        self.view_state_changed.emit(self._view_state)
        logging.info("View reset")
    
    def reset_rotation(self) -> None:
        """Undo all plane rotations; positions, slabs and window stay."""
        if self._volume is None:
            return
        self._view_state.reset_rotations()
        self.view_state_changed.emit(self._view_state)
        logging.info("Rotations reset")
    
    def clear(self) -> None:
        """Clear all data."""
        self.set_volume(None)
        logging.info("Data cleared")
