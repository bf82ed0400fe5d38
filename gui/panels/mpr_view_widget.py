"""
MPR View Widget

Qt widget hosting one MPRView: forwards pointer and resize events and
paints the sampled image with the crosshair overlay.
"""

from typing import Any, Callable, Optional, Tuple
import numpy as np

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QPointF, QRectF, QTimer, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPen

from config import DEFAULT_GUI, DEFAULT_INTERACTION, DEFAULT_RENDER, GUIConfig
from core.base import DisplaySurface
from mpr.types import HitTarget, Orientation
from mpr.hit_test import Circle, Rect
from visualization.mpr_view import MPRView, Overlay


CURSORS = {
    "default": Qt.ArrowCursor,
    "row-resize": Qt.SizeVerCursor,
    "col-resize": Qt.SizeHorCursor,
    "all-scroll": Qt.SizeAllCursor,
    "grab": Qt.OpenHandCursor,
}


def qt_schedule(delay_ms: int, callback: Callable[[], None]) -> None:
    """Scheduling primitive for the render loop on the Qt event loop."""
    QTimer.singleShot(int(delay_ms), callback)


class ImageSurface(DisplaySurface):
    """Keeps the last presented frame and asks the widget to repaint."""
    
    def __init__(self, widget: QWidget):
        self._widget = widget
        self._size = (1, 1)
        self.image: Optional[QImage] = None
        self.overlay: Optional[Overlay] = None
    
    @property
    def size(self) -> Tuple[int, int]:
        return self._size
    
    def set_size(self, width: int, height: int) -> None:
        self._size = (max(int(width), 1), max(int(height), 1))
    
    def present(self, image: Optional[np.ndarray], overlay: Any) -> None:
        if image is None:
            self.image = None
        else:
            height, width = image.shape
            buffer = np.ascontiguousarray(image)
            # QImage does not own the buffer, so copy before it goes away
            self.image = QImage(buffer.data, width, height, width, QImage.Format_Grayscale8).copy()
        self.overlay = overlay
        self._widget.update()


class MPRViewWidget(QWidget):
    """Widget for a single MPR orientation."""
    
    slices_scrolled = Signal(object, int)  # Orientation, slice steps
    
    def __init__(
        self,
        orientation: Orientation,
        on_state_change: Optional[Callable] = None,
        gui_config: GUIConfig = DEFAULT_GUI,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self._gui_config = gui_config
        self.surface = ImageSurface(self)
        self.view = MPRView(
            orientation,
            self.surface,
            qt_schedule,
            on_state_change=on_state_change,
            fps=DEFAULT_RENDER.fps,
            resize_quiet_ms=DEFAULT_RENDER.resize_quiet_ms,
            scroll_threshold=DEFAULT_INTERACTION.scroll_threshold,
            window_drag_gain=DEFAULT_INTERACTION.window_drag_gain,
            hit_tolerance_px=DEFAULT_INTERACTION.hit_tolerance_px,
        )
        
        self.setMouseTracking(True)
        self.setMinimumSize(200, 200)
        self.setAttribute(Qt.WA_OpaquePaintEvent)
    
    @property
    def orientation(self) -> Orientation:
        return self.view.orientation
    
    # ---------- events ----------
    
    def _ndc(self, event) -> Tuple[float, float]:
        pos = event.position()
        width, height = max(self.width(), 1), max(self.height(), 1)
        return (pos.x() / width * 2.0 - 1.0, 1.0 - pos.y() / height * 2.0)
    
    def mousePressEvent(self, event) -> None:
        target = self.view.pointer_down(self._ndc(event), event.button() == Qt.LeftButton)
        if target.is_rotation:
            self.setCursor(Qt.ClosedHandCursor)
    
    def mouseMoveEvent(self, event) -> None:
        primary = bool(event.buttons() & Qt.LeftButton)
        self.view.pointer_move(self._ndc(event), primary)
        if not self.view.is_dragging:
            overlay = self.view.overlay
            cursor = overlay.hover.cursor if overlay is not None else "default"
            self.setCursor(CURSORS.get(cursor, Qt.ArrowCursor))
    
    def mouseReleaseEvent(self, event) -> None:
        self.view.pointer_up(self._ndc(event), event.button() == Qt.LeftButton)
        self.unsetCursor()
    
    def wheelEvent(self, event) -> None:
        """Wheel pages this view's own slice by one per event."""
        delta = event.angleDelta().y()
        if delta == 0:
            return
        self.slices_scrolled.emit(self.orientation, 1 if delta > 0 else -1)
        event.accept()
    
    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.view.resize(self.width(), self.height())
    
    def closeEvent(self, event) -> None:
        self.view.dispose()
        super().closeEvent(event)
    
    # ---------- painting ----------
    
    def _to_pixel(self, overlay: Overlay, point: Tuple[float, float]) -> QPointF:
        ndc_x, ndc_y = overlay.layout.framing.world_to_ndc(*point)
        return QPointF((ndc_x + 1.0) / 2.0 * self.width(), (1.0 - ndc_y) / 2.0 * self.height())
    
    def _pixel_length(self, overlay: Overlay, length: float) -> float:
        return length / overlay.layout.framing.world_per_pixel
    
    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(self._gui_config.background_color))
        
        if self.surface.image is not None:
            painter.drawImage(QRectF(self.rect()), self.surface.image)
        
        overlay = self.surface.overlay
        if overlay is not None:
            painter.setRenderHint(QPainter.Antialiasing)
            self._paint_overlay(painter, overlay)
        
        painter.setPen(QColor(self._gui_config.orientation_colors[self.orientation]))
        painter.drawText(8, 18, self.orientation.value.capitalize())
        painter.end()
    
    def _paint_overlay(self, painter: QPainter, overlay: Overlay) -> None:
        colors = self._gui_config.orientation_colors
        layout = overlay.layout
        hover = overlay.hover
        
        horizontal_color = QColor(colors[overlay.horizontal_axis])
        vertical_color = QColor(colors[overlay.vertical_axis])
        
        for color, segments in ((horizontal_color, layout.horizontal_segments()),
                                (vertical_color, layout.vertical_segments())):
            painter.setPen(QPen(color, 1.5))
            for line in segments:
                painter.drawLine(self._to_pixel(overlay, line.start), self._to_pixel(overlay, line.end))
        
        # Slab boundaries
        for target, line in layout.slab_guides():
            horizontal = target is HitTarget.SLAB_LINE_HORIZONTAL
            offset = layout.horizontal_offset if horizontal else layout.vertical_offset
            if offset <= 0.0:
                continue
            pen = QPen(horizontal_color if horizontal else vertical_color, 1.0, Qt.DashLine)
            painter.setPen(pen)
            painter.drawLine(self._to_pixel(overlay, line.start), self._to_pixel(overlay, line.end))
        
        handle_pen = QPen(QColor(self._gui_config.handle_color), 1.0)
        painter.setPen(handle_pen)
        
        if hover.show_rotation:
            for region in layout.rotation_handles():
                circle: Circle = region.shape
                radius = self._pixel_length(overlay, circle.radius)
                painter.setBrush(QColor(self._gui_config.handle_color))
                painter.drawEllipse(self._to_pixel(overlay, circle.center), radius, radius)
        
        for region in layout.slab_handles():
            if region.target is HitTarget.SLAB_HANDLE_HORIZONTAL and not hover.show_slab_horizontal:
                continue
            if region.target is HitTarget.SLAB_HANDLE_VERTICAL and not hover.show_slab_vertical:
                continue
            rect: Rect = region.shape
            center = self._to_pixel(overlay, rect.center)
            width = self._pixel_length(overlay, rect.width)
            height = self._pixel_length(overlay, rect.height)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(QRectF(center.x() - width / 2, center.y() - height / 2, width, height))
