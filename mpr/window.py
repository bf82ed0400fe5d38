"""
Window Transform

Converts raw stored values to display intensity using the rescale
calibration and a window center/width.
"""

from typing import Union
import numpy as np


# Window presets for CT viewing
WINDOW_PRESETS = {
    "Bone": {"center": 500, "width": 2000},
    "Soft Tissue": {"center": 40, "width": 400},
    "Lung": {"center": -600, "width": 1500},
    "Brain": {"center": 40, "width": 80},
    "Liver": {"center": 60, "width": 160},
    "Custom": {"center": 0, "width": 1000},
}


def to_display(
    raw: Union[float, np.ndarray],
    rescale_slope: float,
    rescale_intercept: float,
    window_center: float,
    window_width: float
) -> Union[float, np.ndarray]:
    """
    Map raw values to [0, 1] display intensity.
    
    Args:
        raw: Raw sample(s); NaN marks points outside the volume
        rescale_slope, rescale_intercept: Stored value -> physical units
        window_center: Window center in physical units
        window_width: Window width in physical units (at least 1)
        
    Returns:
        Intensity in [0, 1]; outside points are always 0 (black)
    """
    window_width = max(1.0, float(window_width))
    hu = np.asarray(raw, dtype=np.float64) * rescale_slope + rescale_intercept
    lower = window_center - window_width / 2
    
    with np.errstate(invalid="ignore"):
        value = np.clip((hu - lower) / window_width, 0.0, 1.0)
    value = np.where(np.isnan(hu), 0.0, value).astype(np.float32)
    
    if np.ndim(raw) == 0:
        return float(value)
    return value


def to_uint8(intensity: np.ndarray) -> np.ndarray:
    """[0, 1] intensity to an 8-bit grayscale image."""
    return (np.clip(intensity, 0.0, 1.0) * 255).astype(np.uint8)


def window_from_range(min_value: float, max_value: float) -> tuple:
    """(center, width) spanning a value range, used when no window is stored."""
    width = max(1.0, max_value - min_value)
    return (min_value + max_value) / 2, width
