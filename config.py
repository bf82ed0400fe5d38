"""
MPR Viewer Configuration

Contains constants and default settings for the viewer.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from mpr.types import Orientation


# Crosshair line colour for each orientation, shown in the other two views
ORIENTATION_COLORS: Dict[Orientation, str] = {
    Orientation.AXIAL: "#00FFFF",
    Orientation.CORONAL: "#FF00FF",
    Orientation.SAGITTAL: "#FFAE00",
}


@dataclass
class RenderConfig:
    """Configuration for redraw scheduling."""
    fps: float = 30.0  # Target frame rate, 0 disables throttling
    resize_quiet_ms: float = 100.0  # Resizing ends after this long without resize events


@dataclass
class InteractionConfig:
    """Configuration for pointer interaction."""
    scroll_threshold: float = 3.0  # Pixels of motion per slice in scroll mode
    window_drag_gain: float = 1.0  # Window units per pixel in window/level mode
    hit_tolerance_px: float = 5.0  # Half line width for crosshair hit testing


@dataclass
class LoaderConfig:
    """Configuration for DICOM series loading."""
    force_read: bool = False  # Read files lacking the DICOM preamble


@dataclass
class GUIConfig:
    """Configuration for GUI appearance."""
    window_title: str = "MPR Viewer"
    window_size: Tuple[int, int] = (1400, 900)
    min_size: Tuple[int, int] = (1000, 700)
    
    background_color: str = "#000000"
    text_color: str = "#333333"
    accent_color: str = "#2962FF"
    handle_color: str = "#FFFFFF"
    
    orientation_colors: Dict[Orientation, str] = field(
        default_factory=lambda: dict(ORIENTATION_COLORS)
    )


# Default configurations
DEFAULT_RENDER = RenderConfig()
DEFAULT_INTERACTION = InteractionConfig()
DEFAULT_LOADER = LoaderConfig()
DEFAULT_GUI = GUIConfig()
