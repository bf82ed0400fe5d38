"""
Rotation Coupler

Propagates a rotation-handle drag in one view to the other two views'
rotations so all three stay orthogonal observers of one rotated frame.
"""

from typing import Dict, List, Tuple
import logging
import numpy as np
from scipy.spatial.transform import Rotation

from .types import AxisKind, Orientation
from .view_state import ViewState


X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])


def axis_angle(axis: np.ndarray, angle: float) -> Rotation:
    """Rotation of `angle` radians about a unit axis."""
    return Rotation.from_rotvec(np.asarray(axis, dtype=np.float64) * angle)


def rotate(q: Rotation, axis: np.ndarray, angle: float) -> Rotation:
    """Premultiply q by a rotation about `axis`; q itself is untouched."""
    return axis_angle(axis, angle) * q


# Both screen axes of a view turn the frame about that view's own normal,
# so horizontal and vertical handles share one coupling.
_COUPLING_BY_SOURCE: Dict[Orientation, List[Tuple[Orientation, np.ndarray, float]]] = {
    Orientation.AXIAL: [
        (Orientation.CORONAL, Z_AXIS, 1.0),
        (Orientation.SAGITTAL, Z_AXIS, -1.0),
    ],
    Orientation.CORONAL: [
        (Orientation.AXIAL, Y_AXIS, 1.0),
        (Orientation.SAGITTAL, Y_AXIS, -1.0),
    ],
    Orientation.SAGITTAL: [
        (Orientation.AXIAL, X_AXIS, 1.0),
        (Orientation.CORONAL, X_AXIS, -1.0),
    ],
}

COUPLING_TABLE: Dict[Tuple[Orientation, AxisKind], List[Tuple[Orientation, np.ndarray, float]]] = {
    (source, axis_kind): targets
    for source, targets in _COUPLING_BY_SOURCE.items()
    for axis_kind in AxisKind
}


def apply_rotation(
    view_state: ViewState,
    source: Orientation,
    axis_kind: AxisKind,
    delta_angle: float
) -> None:
    """
    Apply a rotation-handle drag from `source` to the shared state.
    
    Args:
        view_state: State mutated in place
        source: Orientation of the view being dragged
        axis_kind: Which of its handles is dragged
        delta_angle: Angle change in radians since the last update
    """
    key = (source, axis_kind)
    assert key in COUPLING_TABLE, f"No rotation coupling for {key!r}"
    
    for target, axis, sign in COUPLING_TABLE[key]:
        updated = rotate(view_state.rotation(target), axis, sign * delta_angle)
        view_state.set_rotation(target, updated)
    
    logging.debug(f"Rotated from {source.value} ({axis_kind.value}) by {delta_angle:.4f} rad")
