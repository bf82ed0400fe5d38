from __future__ import annotations

import pytest

from visualization.render_loop import RenderLoop, RenderState


def _loop(scheduler, clock, fps=10.0, draw=None):
    frames = []

    def record():
        frames.append(clock.now)
        if draw is not None:
            draw()

    return RenderLoop(record, scheduler, clock, fps=fps, resize_quiet_ms=100), frames


def test_invalidations_coalesce(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock)

    loop.invalidate()
    loop.invalidate()
    loop.invalidate()

    assert scheduler.pending == 1
    assert loop.state is RenderState.DIRTY

    scheduler.run_next()
    assert frames == [0.0]
    assert loop.state is RenderState.CLEAN
    assert scheduler.pending == 0


def test_draws_are_throttled(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock, fps=10.0)
    loop.invalidate()
    scheduler.run_next()

    clock.now = 0.03
    loop.invalidate()
    delay = scheduler.run_next()
    assert delay == 0
    assert frames == [0.0]
    assert loop.state is RenderState.DIRTY
    # Re-scheduled for the remaining 70 ms
    assert scheduler.calls[0][0] == 70

    clock.now = 0.1
    scheduler.run_next()
    assert frames == [0.0, 0.1]
    assert loop.state is RenderState.CLEAN


def test_last_draw_is_phase_aligned(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock, fps=10.0)
    loop.invalidate()
    scheduler.run_next()

    clock.now = 0.25
    loop.invalidate()
    scheduler.run_next()

    assert len(frames) == 2
    assert loop.last_draw_time == pytest.approx(0.2)


def test_resize_draws_every_frame(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock, fps=10.0)

    loop.notify_resize()
    assert loop.is_resizing
    scheduler.run_next()

    clock.now = 0.01
    scheduler.run_next()
    assert frames == [0.0, 0.01]

    # A new resize pushes the quiet deadline out
    clock.now = 0.05
    loop.notify_resize()
    clock.now = 0.12
    scheduler.run_next()
    assert loop.is_resizing
    assert len(frames) == 3

    clock.now = 0.3
    scheduler.run_next()
    assert not loop.is_resizing
    # Final draw once resizing settles
    assert len(frames) == 4
    assert loop.state is RenderState.CLEAN


def test_unthrottled_mode(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock, fps=30.0)
    loop.set_fps(0)
    assert loop.fps == 0.0

    for _ in range(3):
        loop.invalidate()
        scheduler.run_next()

    assert frames == [0.0, 0.0, 0.0]


def test_invalidate_during_draw_schedules_again(scheduler, clock) -> None:
    loop = None
    states = []

    def draw():
        states.append(loop.state)
        if len(states) == 1:
            loop.invalidate()

    loop, frames = _loop(scheduler, clock, fps=0, draw=draw)
    loop.invalidate()
    scheduler.run_next()

    assert states == [RenderState.RENDERING]
    assert loop.state is RenderState.DIRTY
    assert scheduler.pending == 1

    scheduler.run_next()
    assert len(frames) == 2
    assert loop.state is RenderState.CLEAN


def test_negative_fps_rejected(scheduler, clock) -> None:
    loop, _ = _loop(scheduler, clock)
    with pytest.raises(ValueError):
        loop.set_fps(-1)


def test_dispose_stops_drawing(scheduler, clock) -> None:
    loop, frames = _loop(scheduler, clock)
    loop.invalidate()
    loop.dispose()
    scheduler.run_all()
    loop.invalidate()

    assert frames == []
    assert scheduler.pending == 0
