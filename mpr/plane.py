"""
Plane Solver

Turns an orientation plus the shared view state into a cutting plane in
normalized volume space ([0, 1]^3, x/y/z = width/height/depth axes), and
fits that plane into an output surface without cropping.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import numpy as np

from .types import Orientation
from .volume import VolumeGrid
from .view_state import ViewState


ASPECT_EPSILON = 1e-6


@dataclass
class Plane:
    """
    Cutting plane in normalized volume space.
    
    Attributes:
        origin: Plane centre
        x_axis: Extent vector for u in [-0.5, 0.5]
        y_axis: Extent vector for v in [-0.5, 0.5] (display-up)
        normal: Unit slab integration direction
    """
    origin: np.ndarray
    x_axis: np.ndarray
    y_axis: np.ndarray
    normal: np.ndarray
    
    @property
    def width(self) -> float:
        return float(np.linalg.norm(self.x_axis))
    
    @property
    def height(self) -> float:
        return float(np.linalg.norm(self.y_axis))
    
    @property
    def aspect(self) -> Optional[float]:
        """x/y extent ratio, or None when the y axis is degenerate."""
        height = self.height
        if height <= ASPECT_EPSILON:
            return None
        return self.width / height
    
    def point(self, u, v) -> np.ndarray:
        """Point(s) on the plane for normalized (u, v)."""
        u = np.asarray(u, dtype=np.float64)[..., np.newaxis]
        v = np.asarray(v, dtype=np.float64)[..., np.newaxis]
        return self.origin + u * self.x_axis + v * self.y_axis


def solve(orientation: Orientation, view_state: ViewState, grid: VolumeGrid) -> Plane:
    """
    Compute the cutting plane for one view.
    
    The fixed axis sits at the centre of the current slice, the two free
    axes are centred and scaled to physical proportions. The view's own
    rotation is applied to both extents and the normal, then y is negated
    because display y runs opposite to texture y.
    """
    tex_width, tex_height, tex_depth = grid.normalized_extents
    
    if orientation is Orientation.AXIAL:
        origin = (0.5, 0.5, (view_state.axial_position + 0.5) / grid.depth)
        x_axis = (tex_width, 0.0, 0.0)
        y_axis = (0.0, tex_height, 0.0)
        normal = (0.0, 0.0, 1.0)
    elif orientation is Orientation.CORONAL:
        origin = (0.5, (view_state.coronal_position + 0.5) / grid.height, 0.5)
        x_axis = (tex_width, 0.0, 0.0)
        y_axis = (0.0, 0.0, tex_depth)
        normal = (0.0, 1.0, 0.0)
    elif orientation is Orientation.SAGITTAL:
        origin = ((view_state.sagittal_position + 0.5) / grid.width, 0.5, 0.5)
        x_axis = (0.0, tex_height, 0.0)
        y_axis = (0.0, 0.0, tex_depth)
        normal = (1.0, 0.0, 0.0)
    else:
        raise AssertionError(f"Unknown orientation: {orientation!r}")
    
    rotation = view_state.rotation(orientation)
    rotated = rotation.apply(np.array([x_axis, y_axis, normal], dtype=np.float64))
    
    return Plane(
        origin=np.array(origin, dtype=np.float64),
        x_axis=rotated[0],
        y_axis=-rotated[1],
        normal=rotated[2],
    )


class AspectTracker:
    """Remembers the last plane aspect ratio to detect framing changes."""
    
    def __init__(self):
        self._aspect: Optional[float] = None
    
    @property
    def aspect(self) -> Optional[float]:
        return self._aspect
    
    def reset(self) -> None:
        self._aspect = None
    
    def update(self, plane: Plane) -> bool:
        """
        Record the plane's aspect ratio.
        
        Returns:
            True if it differs from the previous frame by more than a
            negligible epsilon, meaning the framing must be recomputed.
        """
        new_aspect = plane.aspect
        if new_aspect is None:
            logging.debug("Degenerate plane y axis, keeping previous framing")
            return False
        if self._aspect is not None and abs(new_aspect - self._aspect) <= ASPECT_EPSILON:
            return False
        self._aspect = new_aspect
        return True


@dataclass
class Framing:
    """
    Orthographic framing of a plane inside an output surface.
    
    World coordinates are centred on the plane, x to the right and y up;
    the plane covers [-content_width/2, content_width/2] x
    [-content_height/2, content_height/2]. Extra room becomes black bars.
    """
    left: float
    right: float
    top: float
    bottom: float
    viewport_width: int
    viewport_height: int
    content_width: float
    content_height: float
    
    @classmethod
    def fit(
        cls,
        viewport_width: int,
        viewport_height: int,
        content_width: float,
        content_height: float
    ) -> "Framing":
        """Letterbox or pillarbox the content so it stays fully visible."""
        viewport_width = max(int(viewport_width), 1)
        viewport_height = max(int(viewport_height), 1)
        viewport_aspect = viewport_width / viewport_height
        content_aspect = content_width / content_height
        
        if viewport_aspect > content_aspect:
            # Wider than the content: pillarbox
            frame_height = content_height
            frame_width = frame_height * viewport_aspect
        else:
            # Taller than the content: letterbox
            frame_width = content_width
            frame_height = frame_width / viewport_aspect
        
        return cls(
            left=-frame_width / 2,
            right=frame_width / 2,
            top=frame_height / 2,
            bottom=-frame_height / 2,
            viewport_width=viewport_width,
            viewport_height=viewport_height,
            content_width=content_width,
            content_height=content_height,
        )
    
    @property
    def frame_width(self) -> float:
        return self.right - self.left
    
    @property
    def frame_height(self) -> float:
        return self.top - self.bottom
    
    @property
    def world_per_pixel(self) -> float:
        return self.frame_width / self.viewport_width
    
    def ndc_to_world(self, ndc_x: float, ndc_y: float) -> Tuple[float, float]:
        """Normalized device coordinates ([-1, 1], y up) to world."""
        x = self.left + (ndc_x + 1.0) / 2.0 * self.frame_width
        y = self.bottom + (ndc_y + 1.0) / 2.0 * self.frame_height
        return x, y
    
    def world_to_ndc(self, x: float, y: float) -> Tuple[float, float]:
        ndc_x = (x - self.left) / self.frame_width * 2.0 - 1.0
        ndc_y = (y - self.bottom) / self.frame_height * 2.0 - 1.0
        return ndc_x, ndc_y
    
    def world_to_uv(self, x, y):
        """World coordinates to normalized plane coordinates."""
        return np.asarray(x) / self.content_width, np.asarray(y) / self.content_height
    
    def pixel_uv_grid(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Plane (u, v) at every pixel centre, shaped (rows, cols).
        
        Row 0 is the top of the surface.
        """
        cols = self.left + (np.arange(self.viewport_width) + 0.5) * self.world_per_pixel
        rows = self.top - (np.arange(self.viewport_height) + 0.5) * (
            self.frame_height / self.viewport_height
        )
        world_x, world_y = np.meshgrid(cols, rows)
        return self.world_to_uv(world_x, world_y)
