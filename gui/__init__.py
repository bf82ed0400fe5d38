"""GUI package for the MPR viewer."""

from .panels import ControlsPanel, LogPanel, MPRViewWidget
from .main_window import MainWindow
from .style import ViewerStyle
from .workers import LoaderWorker

__all__ = [
    "MainWindow",
    "ViewerStyle",
    "ControlsPanel",
    "LogPanel",
    "MPRViewWidget",
    "LoaderWorker",
]
