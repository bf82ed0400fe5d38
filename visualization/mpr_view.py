"""
MPR View

One oblique reformat view: owns its cutting plane, framing, crosshair
layout and render loop, samples the volume into a grayscale image and
turns pointer input into view-state updates.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import logging
import time
import numpy as np

from core.base import DisplaySurface
from mpr.types import AxisKind, DeltaKind, HitTarget, InteractionTool, Orientation
from mpr.volume import VolumeGrid
from mpr.view_state import ViewState
from mpr import plane as plane_solver
from mpr.plane import AspectTracker, Framing, Plane
from mpr.sampler import OUTSIDE, sample_plane
from mpr.window import to_display, to_uint8
from mpr.hit_test import CrosshairLayout, HoverFeedback, compute_layout, hit_test, hover_feedback
from mpr.interaction import (
    POSITION_TARGETS,
    DragSession,
    ScrollAccumulator,
    StateChange,
    StateUpdate,
)
from .render_loop import RenderLoop


@dataclass
class Overlay:
    """What the surface draws on top of the image."""
    orientation: Orientation
    layout: CrosshairLayout
    hover: HoverFeedback
    # Orientation whose slice each crosshair line shows
    horizontal_axis: Orientation
    vertical_axis: Orientation


class MPRView:
    """
    A single MPR view.
    
    Args:
        orientation: Fixed orientation of this view
        surface: Display surface to draw into
        schedule: schedule(delay_ms, callback) primitive for the render loop
        clock: Monotonic clock in seconds
        on_state_change: Receives every StateUpdate produced by pointer input
        fps: Target frame rate
        resize_quiet_ms: Resize settle interval
        scroll_threshold: Pixels per slice in scroll mode
        window_drag_gain: Window units per pixel in window/level mode
        hit_tolerance_px: Crosshair line hit tolerance in pixels
    """
    
    def __init__(
        self,
        orientation: Orientation,
        surface: DisplaySurface,
        schedule: Callable[[int, Callable[[], None]], None],
        clock: Callable[[], float] = time.perf_counter,
        on_state_change: Optional[Callable[[StateUpdate], None]] = None,
        fps: float = 30,
        resize_quiet_ms: float = 100,
        scroll_threshold: float = 3,
        window_drag_gain: float = 1.0,
        hit_tolerance_px: float = 5.0
    ):
        assert isinstance(orientation, Orientation), f"Unknown orientation: {orientation!r}"
        self.orientation = orientation
        self.surface = surface
        self.on_state_change = on_state_change
        self.window_drag_gain = window_drag_gain
        self.hit_tolerance_px = hit_tolerance_px
        self.tool = InteractionTool.CROSSHAIR
        
        self.loop = RenderLoop(self.draw, schedule, clock, fps=fps, resize_quiet_ms=resize_quiet_ms)
        self._scroll = ScrollAccumulator(scroll_threshold)
        self._aspect = AspectTracker()
        
        self._grid: Optional[VolumeGrid] = None
        self._state: Optional[ViewState] = None
        self._plane: Optional[Plane] = None
        self._framing: Optional[Framing] = None
        self._layout: Optional[CrosshairLayout] = None
        
        self._drag: Optional[DragSession] = None
        self._pointer_down = False
        self._last_ndc: Optional[Tuple[float, float]] = None
        self._hover = HitTarget.NONE
    
    # ---------- properties ----------
    
    @property
    def grid(self) -> Optional[VolumeGrid]:
        return self._grid
    
    @property
    def plane(self) -> Optional[Plane]:
        return self._plane
    
    @property
    def framing(self) -> Optional[Framing]:
        return self._framing
    
    @property
    def layout(self) -> Optional[CrosshairLayout]:
        return self._layout
    
    @property
    def hover_target(self) -> HitTarget:
        return self._hover
    
    @property
    def is_dragging(self) -> bool:
        return self._pointer_down
    
    @property
    def overlay(self) -> Optional[Overlay]:
        if self._layout is None:
            return None
        targets = POSITION_TARGETS[self.orientation]
        return Overlay(
            orientation=self.orientation,
            layout=self._layout,
            hover=hover_feedback(self._hover),
            horizontal_axis=targets[AxisKind.HORIZONTAL],
            vertical_axis=targets[AxisKind.VERTICAL],
        )
    
    # ---------- lifecycle ----------
    
    def set_volume(self, grid: Optional[VolumeGrid]) -> None:
        """Attach a new volume; the next render() rebuilds everything."""
        self._grid = grid
        self._state = None
        self._plane = None
        self._framing = None
        self._layout = None
        self._drag = None
        self._pointer_down = False
        self._aspect.reset()
        self.loop.invalidate()
    
    def set_tool(self, tool: InteractionTool) -> None:
        assert isinstance(tool, InteractionTool), f"Unknown tool: {tool!r}"
        self.tool = tool
        self._drag = None
        self._scroll.reset()
    
    def set_fps(self, fps: float) -> None:
        self.loop.set_fps(fps)
    
    def render(self, state: ViewState) -> None:
        """Recompute plane and crosshair for the current state and schedule a redraw."""
        self._state = state
        if self._grid is None:
            return
        self._plane = plane_solver.solve(self.orientation, state, self._grid)
        if self._aspect.update(self._plane) or self._framing is None:
            self._refit()
        self._update_layout()
        self.loop.invalidate()
    
    def resize(self, width: int, height: int) -> None:
        self.surface.set_size(width, height)
        self._refit()
        self._update_layout()
        self.loop.notify_resize()
    
    def dispose(self) -> None:
        self.loop.dispose()
        self._grid = None
        self._state = None
        self._drag = None
    
    def _refit(self) -> None:
        if self._plane is None or self._plane.aspect is None or self._plane.width <= 0.0:
            return
        width, height = self.surface.size
        self._framing = Framing.fit(width, height, self._plane.width, self._plane.height)
    
    def _update_layout(self) -> None:
        if self._grid is None or self._state is None or self._framing is None:
            self._layout = None
            return
        self._layout = compute_layout(self.orientation, self._state, self._grid, self._framing)
    
    # ---------- drawing ----------
    
    def draw(self) -> None:
        """Sample, window and present one frame."""
        if self._grid is None or self._state is None or self._framing is None:
            self.surface.present(None, None)
            return
        
        grid = self._grid
        state = self._state
        u, v = self._framing.pixel_uv_grid()
        # Pillarbox/letterbox bars stay black
        inside = (np.abs(u) <= 0.5) & (np.abs(v) <= 0.5)
        raw = np.full(u.shape, OUTSIDE, dtype=np.float32)
        if np.any(inside):
            raw[inside] = sample_plane(
                self._plane, grid, state.thickness(self.orientation), state.slab_mode,
                u[inside], v[inside]
            )
        intensity = to_display(
            raw, grid.rescale_slope, grid.rescale_intercept,
            state.window_center, state.window_width
        )
        self.surface.present(to_uint8(intensity), self.overlay)
    
    # ---------- pointer input ----------
    
    def pointer_down(self, ndc: Tuple[float, float], primary: bool = True) -> HitTarget:
        """
        Start an interaction.
        
        Returns:
            The hit target under the pointer (NONE outside crosshair mode)
        """
        if not primary or self._layout is None or self._state is None:
            return HitTarget.NONE
        
        self._pointer_down = True
        self._last_ndc = ndc
        self._scroll.reset()
        
        if self.tool is not InteractionTool.CROSSHAIR:
            return HitTarget.NONE
        
        world = self._framing.ndc_to_world(*ndc)
        target = self._hit(world)
        if target is not HitTarget.NONE and not target.is_hover_only:
            self._drag = DragSession(
                self.orientation, target, world, self._state, self._layout, self._grid
            )
            logging.debug(f"{self.orientation.value} drag started on {target.value}")
        return target
    
    def pointer_move(self, ndc: Tuple[float, float], primary: bool = True) -> Optional[StateUpdate]:
        """Continue an interaction, or update hover feedback when no button is down."""
        if self._layout is None or self._state is None:
            return None
        
        if not self._pointer_down:
            target = self._hit(self._framing.ndc_to_world(*ndc))
            if target is not self._hover:
                self._hover = target
                self.loop.invalidate()
            return None
        
        update = None
        if self.tool is InteractionTool.CROSSHAIR:
            if self._drag is not None:
                world = self._framing.ndc_to_world(*ndc)
                update = self._drag.update(self._state, self._layout, world)
        elif self.tool is InteractionTool.SCROLL:
            slice_change = self._scroll.feed(self._pixel_delta(ndc)[1])
            if slice_change:
                update = StateUpdate(
                    source=self.orientation,
                    changes=[StateChange(self.orientation, DeltaKind.POSITION, slice_change)],
                )
        elif self.tool is InteractionTool.WINDOW:
            dx, dy = self._pixel_delta(ndc)
            if dx or dy:
                update = StateUpdate(
                    source=self.orientation,
                    window_delta=(dx * self.window_drag_gain, dy * self.window_drag_gain),
                )
        
        self._last_ndc = ndc
        if update is not None and self.on_state_change is not None:
            self.on_state_change(update)
        return update
    
    def pointer_up(self, ndc: Tuple[float, float], primary: bool = True) -> None:
        self._pointer_down = False
        self._drag = None
        self._last_ndc = None
        self._scroll.reset()
    
    def _hit(self, world: Tuple[float, float]) -> HitTarget:
        tolerance = self.hit_tolerance_px * self._framing.world_per_pixel
        return hit_test(self._layout, world, tolerance)
    
    def _pixel_delta(self, ndc: Tuple[float, float]) -> Tuple[float, float]:
        """Pointer travel since the last event in screen pixels (y down)."""
        if self._last_ndc is None:
            return 0.0, 0.0
        dx = (ndc[0] - self._last_ndc[0]) * self._framing.viewport_width / 2.0
        dy = -(ndc[1] - self._last_ndc[1]) * self._framing.viewport_height / 2.0
        return dx, dy
