from typing import Callable, List, Tuple

import numpy as np
import pytest

from core.base import DisplaySurface
from mpr.volume import VolumeGrid
from mpr.view_state import ViewState


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeScheduler:
    """Collects scheduled callbacks; tests run them explicitly."""

    def __init__(self):
        self.calls: List[Tuple[int, Callable[[], None]]] = []

    def __call__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.calls.append((delay_ms, callback))

    @property
    def pending(self) -> int:
        return len(self.calls)

    def run_next(self) -> int:
        delay, callback = self.calls.pop(0)
        callback()
        return delay

    def run_all(self, limit: int = 20) -> int:
        ran = 0
        while self.calls and ran < limit:
            self.run_next()
            ran += 1
        return ran


class FakeSurface(DisplaySurface):
    def __init__(self):
        self._size = (1, 1)
        self.frames = []

    @property
    def size(self):
        return self._size

    def set_size(self, width, height):
        self._size = (width, height)

    def present(self, image, overlay):
        self.frames.append((image, overlay))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def cube4():
    """4x4x4 isotropic volume whose value is its flat index."""
    return VolumeGrid.from_array(np.arange(64, dtype=np.float32).reshape(4, 4, 4))


@pytest.fixture
def cube5():
    return VolumeGrid.from_array(np.zeros((5, 5, 5), dtype=np.float32))


@pytest.fixture
def state5(cube5):
    return ViewState.for_volume(cube5, 40.0, 400.0)


@pytest.fixture
def qt_core_app():
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app
