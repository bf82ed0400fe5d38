"""
Core Package

Contains base data structures, abstract interfaces and the session state.
"""

from .base import (
    LoadedVolume,
    BaseVolumeLoader,
    DisplaySurface,
)
from .data_manager import DataManager

__all__ = [
    'LoadedVolume',
    'BaseVolumeLoader',
    'DisplaySurface',
    'DataManager',
]
