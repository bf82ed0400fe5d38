"""
GUI Panels Package

Contains all panel widgets for the application.
"""

from .controls_panel import ControlsPanel
from .log_panel import LogPanel, QLogHandler
from .mpr_view_widget import MPRViewWidget, ImageSurface

__all__ = [
    'ControlsPanel',
    'LogPanel',
    'QLogHandler',
    'MPRViewWidget',
    'ImageSurface',
]
