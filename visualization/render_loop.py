"""
Render Loop

On-demand redraw scheduling for one view: coalesces invalidations,
throttles draws to a target frame rate and keeps drawing every frame
while the surface is being resized.
"""

from enum import Enum
from typing import Callable, Optional
import logging
import math
import time


# Re-schedule period while resizing with throttling disabled
ANIMATION_FRAME_MS = 16


def _whole_ms(ms: float) -> int:
    """Round a delay up to whole milliseconds, ignoring float noise."""
    return max(1, math.ceil(ms - 1e-6))


class RenderState(Enum):
    """Redraw state of a view."""
    CLEAN = "clean"
    DIRTY = "dirty"
    RENDERING = "rendering"


class RenderLoop:
    """
    Draw scheduler.
    
    Args:
        draw: Callable producing one frame
        schedule: schedule(delay_ms, callback) runs callback once later
            (QTimer.singleShot in the application)
        clock: Monotonic clock in seconds
        fps: Target frame rate; 0 disables throttling
        resize_quiet_ms: Time without resize events after which
            resizing mode ends
    """
    
    def __init__(
        self,
        draw: Callable[[], None],
        schedule: Callable[[int, Callable[[], None]], None],
        clock: Callable[[], float] = time.perf_counter,
        fps: float = 30,
        resize_quiet_ms: float = 100
    ):
        self._draw = draw
        self._schedule = schedule
        self._clock = clock
        self._resize_quiet = resize_quiet_ms / 1000.0
        self._interval = 0.0
        self.set_fps(fps)
        
        self._dirty = False
        self._rendering = False
        self._pending = False
        self._disposed = False
        self._last_draw: Optional[float] = None
        self._resize_deadline: Optional[float] = None
        self.frame_count = 0
    
    @property
    def state(self) -> RenderState:
        if self._rendering:
            return RenderState.RENDERING
        if self._dirty:
            return RenderState.DIRTY
        return RenderState.CLEAN
    
    @property
    def is_resizing(self) -> bool:
        return self._resize_deadline is not None
    
    @property
    def has_pending(self) -> bool:
        return self._pending
    
    @property
    def last_draw_time(self) -> Optional[float]:
        """Phase-aligned timestamp of the last throttled draw."""
        return self._last_draw
    
    @property
    def fps(self) -> float:
        return 0.0 if self._interval == 0.0 else 1.0 / self._interval
    
    def set_fps(self, fps: float) -> None:
        """Change the target frame rate; 0 draws as soon as possible."""
        if fps < 0:
            raise ValueError(f"FPS must be non-negative, got {fps}")
        self._interval = 0.0 if fps == 0 else 1.0 / fps
    
    def invalidate(self) -> None:
        """Mark the view as needing a redraw."""
        if self._disposed:
            return
        self._dirty = True
        self._request(0)
    
    def notify_resize(self) -> None:
        """Enter (or extend) resizing mode."""
        if self._disposed:
            return
        self._resize_deadline = self._clock() + self._resize_quiet
        self._dirty = True
        self._request(0)
    
    def dispose(self) -> None:
        self._disposed = True
        self._dirty = False
    
    def _request(self, delay_ms: int) -> None:
        # At most one callback in flight
        if self._pending or self._disposed:
            return
        self._pending = True
        self._schedule(delay_ms, self._on_frame)
    
    def _render(self) -> None:
        self._dirty = False
        self._rendering = True
        try:
            self._draw()
        finally:
            self._rendering = False
        self.frame_count += 1
    
    def _on_frame(self) -> None:
        self._pending = False
        if self._disposed:
            return
        now = self._clock()
        
        if self._resize_deadline is not None:
            if now < self._resize_deadline:
                self._render()
                self._last_draw = now
                self._request(self._frame_delay_ms())
                return
            logging.debug("Resize settled")
            self._resize_deadline = None
            self._dirty = True
        
        if not self._dirty:
            return
        
        if self._interval == 0.0 or self._last_draw is None:
            self._render()
            self._last_draw = now
        else:
            elapsed = now - self._last_draw
            if elapsed >= self._interval:
                self._render()
                # Keep frames phase-aligned to the interval
                self._last_draw = now - math.fmod(elapsed, self._interval)
            else:
                remaining_ms = (self._interval - elapsed) * 1000.0
                self._request(_whole_ms(remaining_ms))
                return
        
        if self._dirty:
            self._request(self._frame_delay_ms())
    
    def _frame_delay_ms(self) -> int:
        if self._interval == 0.0:
            return ANIMATION_FRAME_MS if self._resize_deadline is not None else 0
        return _whole_ms(self._interval * 1000.0)
