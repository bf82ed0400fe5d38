from __future__ import annotations

import numpy as np
import pytest

from mpr.sampler import OUTSIDE
from mpr.window import WINDOW_PRESETS, to_display, to_uint8, window_from_range


def test_window_is_monotonic() -> None:
    raw = np.linspace(-2000.0, 3000.0, 101)
    display = to_display(raw, 1.0, 0.0, 40.0, 400.0)

    assert np.all(np.diff(display) >= 0.0)
    assert display[0] == 0.0
    assert display[-1] == 1.0


def test_window_center_maps_to_half() -> None:
    assert to_display(40.0, 1.0, 0.0, 40.0, 400.0) == pytest.approx(0.5)


def test_rescale_is_applied_before_windowing() -> None:
    # 100 * 2 - 1024 = -824
    assert to_display(100.0, 2.0, -1024.0, -824.0, 100.0) == pytest.approx(0.5)


def test_zero_width_is_clamped_to_one() -> None:
    assert to_display(10.0, 1.0, 0.0, 10.0, 0.0) == pytest.approx(0.5)
    assert to_display(11.0, 1.0, 0.0, 10.0, -5.0) == pytest.approx(1.0)


def test_outside_is_black() -> None:
    assert to_display(OUTSIDE, 1.0, 0.0, 0.0, 1.0) == 0.0
    values = to_display(np.array([OUTSIDE, 5000.0]), 1.0, 0.0, 0.0, 100.0)
    assert values.tolist() == [0.0, 1.0]


def test_to_uint8_range() -> None:
    assert to_uint8(np.array([0.0, 0.5, 1.0])).tolist() == [0, 127, 255]


def test_window_from_range() -> None:
    assert window_from_range(-1000.0, 1000.0) == (0.0, 2000.0)
    # Flat volumes still get a usable width
    assert window_from_range(5.0, 5.0) == (5.0, 1.0)


def test_presets_have_positive_width() -> None:
    assert all(p["width"] > 0 for p in WINDOW_PRESETS.values())


def test_value_range_window_is_identity_ramp() -> None:
    raw = np.array([-1000.0, -250.0, 0.0, 400.0, 3000.0])
    low, high = float(raw.min()), float(raw.max())
    width = high - low

    display = to_display(raw, 1.0, 0.0, (low + high) / 2, width)

    np.testing.assert_allclose(display, (raw - low) / width, rtol=1e-6)
    assert display[0] == 0.0
    assert display[-1] == pytest.approx(1.0)
