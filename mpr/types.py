"""
MPR Types

Closed enums shared by the plane solver, sampler and interaction code.
"""

from enum import Enum


class Orientation(Enum):
    """Fixed orientation of an MPR view."""
    AXIAL = "axial"
    CORONAL = "coronal"
    SAGITTAL = "sagittal"


class SlabMode(Enum):
    """Reduction applied across the samples of a thick slab."""
    MAX_IP = 0
    MIN_IP = 1
    AVG_IP = 2


class AxisKind(Enum):
    """Screen axis of a crosshair element, relative to the view showing it."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class HitTarget(Enum):
    """Interactive region under the pointer."""
    NONE = "none"
    CROSSHAIR_HORIZONTAL = "crosshairs_horizontal_line"
    CROSSHAIR_VERTICAL = "crosshairs_vertical_line"
    CENTER = "center"
    SLAB_HANDLE_HORIZONTAL = "slab_horizontal_handle"
    SLAB_HANDLE_VERTICAL = "slab_vertical_handle"
    ROTATION_HANDLE_HORIZONTAL = "rotation_horizontal_handle"
    ROTATION_HANDLE_VERTICAL = "rotation_vertical_handle"
    # Slab boundaries only reveal their handles on hover
    SLAB_LINE_HORIZONTAL = "slab_horizontal_line"
    SLAB_LINE_VERTICAL = "slab_vertical_line"

    @property
    def is_rotation(self) -> bool:
        return self in (HitTarget.ROTATION_HANDLE_HORIZONTAL,
                        HitTarget.ROTATION_HANDLE_VERTICAL)

    @property
    def is_hover_only(self) -> bool:
        return self in (HitTarget.SLAB_LINE_HORIZONTAL,
                        HitTarget.SLAB_LINE_VERTICAL)


class DeltaKind(Enum):
    """What a drag changes in the shared view state."""
    POSITION = "position"
    THICKNESS = "thickness"
    ROTATION = "rotation"


class InteractionTool(Enum):
    """What a primary-button drag does inside a view."""
    CROSSHAIR = "crosshair"
    SCROLL = "scroll"
    WINDOW = "window"
