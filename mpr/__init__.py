"""
MPR Engine Package

Framework-independent multi-planar reformatting: volume grid, shared view
state, plane solving, slab sampling, windowing and interaction logic.
"""

from .types import (
    Orientation,
    SlabMode,
    AxisKind,
    HitTarget,
    DeltaKind,
    InteractionTool,
)
from .volume import VolumeGrid
from .view_state import ViewState
from .plane import Plane, Framing, AspectTracker, solve
from .sampler import OUTSIDE, sample, sample_plane
from .window import WINDOW_PRESETS, to_display
from .rotation import apply_rotation
from .hit_test import CrosshairLayout, compute_layout, hit_test
from .interaction import (
    Resolution,
    StateChange,
    StateUpdate,
    DragSession,
    ScrollAccumulator,
    resolve_hit,
    apply_delta,
    apply_update,
)

__all__ = [
    'Orientation',
    'SlabMode',
    'AxisKind',
    'HitTarget',
    'DeltaKind',
    'InteractionTool',
    'VolumeGrid',
    'ViewState',
    'Plane',
    'Framing',
    'AspectTracker',
    'solve',
    'OUTSIDE',
    'sample',
    'sample_plane',
    'WINDOW_PRESETS',
    'to_display',
    'apply_rotation',
    'CrosshairLayout',
    'compute_layout',
    'hit_test',
    'Resolution',
    'StateChange',
    'StateUpdate',
    'DragSession',
    'ScrollAccumulator',
    'resolve_hit',
    'apply_delta',
    'apply_update',
]
