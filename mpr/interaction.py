"""
Interaction Resolver

Maps hit targets to the view-state fields they edit, turns pointer drags
into semantic deltas, and applies those deltas with clamping.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging
import math

from .types import AxisKind, DeltaKind, HitTarget, Orientation
from .volume import VolumeGrid
from .view_state import ViewState
from .hit_test import CrosshairLayout
from . import rotation as rotation_coupler


DEGENERATE_LENGTH = 1e-6

# Which slice position each crosshair line of a view controls
POSITION_TARGETS: Dict[Orientation, Dict[AxisKind, Orientation]] = {
    Orientation.AXIAL: {
        AxisKind.HORIZONTAL: Orientation.CORONAL,
        AxisKind.VERTICAL: Orientation.SAGITTAL,
    },
    Orientation.CORONAL: {
        AxisKind.HORIZONTAL: Orientation.AXIAL,
        AxisKind.VERTICAL: Orientation.SAGITTAL,
    },
    Orientation.SAGITTAL: {
        AxisKind.HORIZONTAL: Orientation.AXIAL,
        AxisKind.VERTICAL: Orientation.CORONAL,
    },
}


@dataclass(frozen=True)
class Resolution:
    """One field a hit target edits."""
    axis: Orientation
    delta_kind: DeltaKind
    screen_axis: AxisKind


@dataclass
class StateChange:
    """A delta to apply to the shared view state."""
    axis: Orientation
    delta_kind: DeltaKind
    delta: float
    screen_axis: AxisKind = AxisKind.HORIZONTAL


@dataclass
class StateUpdate:
    """Everything one pointer move produced in one view."""
    source: Orientation
    changes: List[StateChange] = field(default_factory=list)
    # (center, width) change from the window/level tool
    window_delta: Optional[Tuple[float, float]] = None
    
    @property
    def is_rotation(self) -> bool:
        return any(c.delta_kind is DeltaKind.ROTATION for c in self.changes)


def resolve_hit(orientation: Orientation, hit_target: HitTarget) -> List[Resolution]:
    """
    Fields edited by dragging `hit_target` inside the `orientation` view.
    
    Crosshair lines and slab handles edit the other two views' positions
    and thicknesses; rotation handles rotate around this view's normal.
    The centre box edits both positions at once.
    """
    assert orientation in POSITION_TARGETS, f"Unknown orientation: {orientation!r}"
    targets = POSITION_TARGETS[orientation]
    horizontal = targets[AxisKind.HORIZONTAL]
    vertical = targets[AxisKind.VERTICAL]
    
    if hit_target is HitTarget.CROSSHAIR_HORIZONTAL:
        return [Resolution(horizontal, DeltaKind.POSITION, AxisKind.HORIZONTAL)]
    if hit_target is HitTarget.CROSSHAIR_VERTICAL:
        return [Resolution(vertical, DeltaKind.POSITION, AxisKind.VERTICAL)]
    if hit_target is HitTarget.CENTER:
        return [
            Resolution(horizontal, DeltaKind.POSITION, AxisKind.HORIZONTAL),
            Resolution(vertical, DeltaKind.POSITION, AxisKind.VERTICAL),
        ]
    if hit_target is HitTarget.SLAB_HANDLE_HORIZONTAL:
        return [Resolution(horizontal, DeltaKind.THICKNESS, AxisKind.HORIZONTAL)]
    if hit_target is HitTarget.SLAB_HANDLE_VERTICAL:
        return [Resolution(vertical, DeltaKind.THICKNESS, AxisKind.VERTICAL)]
    if hit_target is HitTarget.ROTATION_HANDLE_HORIZONTAL:
        return [Resolution(orientation, DeltaKind.ROTATION, AxisKind.HORIZONTAL)]
    if hit_target is HitTarget.ROTATION_HANDLE_VERTICAL:
        return [Resolution(orientation, DeltaKind.ROTATION, AxisKind.VERTICAL)]
    return []


def apply_delta(
    view_state: ViewState,
    axis: Orientation,
    delta_kind: DeltaKind,
    raw_delta: float,
    screen_axis: AxisKind = AxisKind.HORIZONTAL
) -> None:
    """Apply one delta in place; positions and thicknesses are clamped."""
    if delta_kind is DeltaKind.POSITION:
        view_state.set_position(axis, view_state.position(axis) + raw_delta)
    elif delta_kind is DeltaKind.THICKNESS:
        view_state.set_thickness(axis, view_state.thickness(axis) + raw_delta)
    elif delta_kind is DeltaKind.ROTATION:
        rotation_coupler.apply_rotation(view_state, axis, screen_axis, raw_delta)
    else:
        raise AssertionError(f"Unknown delta kind: {delta_kind!r}")


def apply_update(view_state: ViewState, update: StateUpdate) -> None:
    for change in update.changes:
        apply_delta(view_state, change.axis, change.delta_kind, change.delta, change.screen_axis)
    if update.window_delta is not None:
        drag_window(view_state, *update.window_delta)


class DragSession:
    """
    State of one pointer drag inside a view.
    
    Positions are computed from the drag start (start value plus total
    pointer travel), so rounding never accumulates; the emitted delta is
    the difference to the current state.
    """
    
    def __init__(
        self,
        orientation: Orientation,
        hit_target: HitTarget,
        start_point: Tuple[float, float],
        start_state: ViewState,
        layout: CrosshairLayout,
        grid: VolumeGrid
    ):
        self.orientation = orientation
        self.hit_target = hit_target
        self.start_point = start_point
        self.start_state = start_state.snapshot()
        self.grid = grid
        self.resolutions = resolve_hit(orientation, hit_target)
        self._last_angle = self._angle(start_point, layout)
    
    @staticmethod
    def _angle(point: Tuple[float, float], layout: CrosshairLayout) -> float:
        return math.atan2(point[1] - layout.y_pos, point[0] - layout.x_pos)
    
    def update(
        self,
        current_state: ViewState,
        layout: CrosshairLayout,
        point: Tuple[float, float]
    ) -> Optional[StateUpdate]:
        """Deltas for the pointer now being at `point`, or None if nothing changes."""
        changes = []
        for resolution in self.resolutions:
            change = self._change_for(resolution, current_state, layout, point)
            if change is not None:
                changes.append(change)
        if not changes:
            return None
        return StateUpdate(source=self.orientation, changes=changes)
    
    def _change_for(
        self,
        resolution: Resolution,
        current_state: ViewState,
        layout: CrosshairLayout,
        point: Tuple[float, float]
    ) -> Optional[StateChange]:
        if resolution.delta_kind is DeltaKind.ROTATION:
            angle = self._angle(point, layout)
            delta = angle - self._last_angle
            delta = math.atan2(math.sin(delta), math.cos(delta))
            self._last_angle = angle
            return StateChange(resolution.axis, DeltaKind.ROTATION, delta, resolution.screen_axis)
        
        horizontal = resolution.screen_axis is AxisKind.HORIZONTAL
        framing = layout.framing
        axis_length = framing.content_height if horizontal else framing.content_width
        if axis_length <= DEGENERATE_LENGTH:
            logging.debug(f"Skipping {resolution.delta_kind.value} drag on degenerate plane axis")
            return None
        slice_count = self.grid.dimension(resolution.axis)
        
        if resolution.delta_kind is DeltaKind.POSITION:
            if horizontal:
                # Display y runs opposite to slice index order
                travel = -(point[1] - self.start_point[1])
            else:
                travel = point[0] - self.start_point[0]
            new_position = (self.start_state.position(resolution.axis)
                            + travel / axis_length * (slice_count - 1))
            delta = new_position - current_state.position(resolution.axis)
        else:
            if horizontal:
                distance = abs(point[1] - layout.y_pos)
            else:
                distance = abs(point[0] - layout.x_pos)
            new_thickness = distance / axis_length * (slice_count - 1) * 2
            delta = new_thickness - current_state.thickness(resolution.axis)
        
        return StateChange(resolution.axis, resolution.delta_kind, delta, resolution.screen_axis)


class ScrollAccumulator:
    """
    Pages slices from vertical pointer motion.
    
    Every `threshold` pixels of upward motion move one slice towards index 0.
    """
    
    def __init__(self, threshold: float = 3):
        self.threshold = threshold
        self._accumulated = 0.0
    
    def reset(self) -> None:
        self._accumulated = 0.0
    
    def feed(self, delta_y: float) -> int:
        """Pointer moved by `delta_y` pixels; returns the slice index change."""
        self._accumulated -= delta_y
        if abs(self._accumulated) < self.threshold:
            return 0
        steps = int(self._accumulated / self.threshold)
        self._accumulated = math.fmod(self._accumulated, self.threshold)
        return -steps


def scroll_slices(view_state: ViewState, orientation: Orientation, slice_change: int) -> int:
    """Move one view's slice; returns the clamped position."""
    return view_state.set_position(orientation, view_state.position(orientation) + slice_change)


def drag_window(view_state: ViewState, delta_x: float, delta_y: float, gain: float = 1.0) -> None:
    """Window/level tool: x moves the center, y the width (never below 1)."""
    view_state.set_window(
        view_state.window_center + delta_x * gain,
        view_state.window_width + delta_y * gain,
    )
