"""
Visualization Package

Contains the MPR view and its redraw scheduling.
"""

from .render_loop import RenderLoop, RenderState
from .mpr_view import MPRView, Overlay

__all__ = [
    'RenderLoop',
    'RenderState',
    'MPRView',
    'Overlay',
]
