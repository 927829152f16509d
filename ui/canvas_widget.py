from __future__ import annotations
from typing import Optional, Callable, Tuple

from PySide6.QtCore import Qt, QPoint, QRectF, QSize
from PySide6.QtGui import QPainter, QImage, QPixmap, QColor, QPen
from PySide6.QtWidgets import QWidget

from core.state import VIEW_CUSTOM_ZOOM, VIEW_FIT_TO_IMAGE, VIEW_FIT_TO_WINDOW


class CanvasWidget(QWidget):
    """
    Shows the processed frame (QImage) over a checkerboard.
    Supports:
      - view modes: fit image to window, 1:1 (window fits image), custom zoom
      - wheel: zoom (switches to custom zoom via on_zoom_changed)
      - middle-drag: pan view
      - eyedropper mode: click to sample a pixel via on_pick_at_image_pos(x, y)
    """
    def __init__(
        self,
        on_pick_at_image_pos: Callable[[int, int], None],
        on_zoom_changed: Optional[Callable[[float], None]] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(200, 200)

        self._pixmap: Optional[QPixmap] = None
        self._image_size: Tuple[int, int] = (0, 0)

        self._view_mode = VIEW_FIT_TO_WINDOW
        self._zoom = 1.0
        self._view_pan_x = 0.0
        self._view_pan_y = 0.0

        self._dragging_mid = False
        self._last_pos = QPoint()

        self.eyedropper_enabled = False

        self._on_pick_at_image_pos = on_pick_at_image_pos
        self._on_zoom_changed = on_zoom_changed

    def set_preview(self, qimg: Optional[QImage]) -> None:
        self._pixmap = None if qimg is None else QPixmap.fromImage(qimg)
        self._image_size = (0, 0) if qimg is None else (qimg.width(), qimg.height())
        self.updateGeometry()
        self.update()

    def set_view(self, mode: str, zoom: float) -> None:
        self._view_mode = mode
        self._zoom = max(0.05, min(20.0, float(zoom)))
        if mode != VIEW_CUSTOM_ZOOM:
            self._view_pan_x = 0.0
            self._view_pan_y = 0.0
        self.updateGeometry()
        self.update()

    def reset_view(self) -> None:
        self._view_pan_x = 0.0
        self._view_pan_y = 0.0
        self.update()

    def sizeHint(self) -> QSize:
        w, h = self._image_size
        if self._view_mode == VIEW_FIT_TO_IMAGE and w > 0 and h > 0:
            return QSize(w, h)
        return QSize(800, 600)

    def effective_zoom(self) -> float:
        w, h = self._image_size
        if w <= 0 or h <= 0:
            return 1.0
        if self._view_mode == VIEW_FIT_TO_WINDOW:
            return max(0.01, min(self.width() / float(w), self.height() / float(h)))
        if self._view_mode == VIEW_FIT_TO_IMAGE:
            return 1.0
        return self._zoom

    def _image_rect(self) -> QRectF:
        w, h = self._image_size
        zoom = self.effective_zoom()
        draw_w = w * zoom
        draw_h = h * zoom
        cx = self.width() * 0.5 + self._view_pan_x
        cy = self.height() * 0.5 + self._view_pan_y
        return QRectF(cx - draw_w * 0.5, cy - draw_h * 0.5, draw_w, draw_h)

    def paintEvent(self, _) -> None:
        p = QPainter(self)
        p.fillRect(self.rect(), QColor(30, 30, 30))

        if self._pixmap is None:
            p.setPen(QPen(QColor(220, 220, 220)))
            p.drawText(self.rect(), Qt.AlignCenter, "Drop image(s) here or File → Open Images…")
            return

        r = self._image_rect()
        # Checkerboard underlay (to visualize transparency)
        self._draw_checkerboard(p, r, 12)
        p.setRenderHint(QPainter.SmoothPixmapTransform, self.effective_zoom() < 1.0)
        p.drawPixmap(r.toRect(), self._pixmap)

        p.setPen(QPen(QColor(240, 240, 240), 1))
        p.drawRect(r)

        if self.eyedropper_enabled:
            p.setPen(QPen(QColor(220, 220, 220)))
            p.drawText(10, self.height() - 10, "Eyedropper ON: click image to sample color")

    def _draw_checkerboard(self, p: QPainter, r: QRectF, cell: int) -> None:
        c1 = QColor(60, 60, 60)
        c2 = QColor(90, 90, 90)

        x0 = int(r.left())
        y0 = int(r.top())
        x1 = int(r.right())
        y1 = int(r.bottom())

        p.save()
        p.setClipRect(r)
        for y in range(y0, y1, cell):
            for x in range(x0, x1, cell):
                use_c1 = (((x - x0) // cell) + ((y - y0) // cell)) % 2 == 0
                p.fillRect(x, y, cell, cell, c1 if use_c1 else c2)
        p.restore()

    def _widget_to_image_xy(self, pos: QPoint) -> Optional[Tuple[int, int]]:
        """
        Convert widget coords to image pixel coords.
        Returns None if outside the image.
        """
        w, h = self._image_size
        if w <= 0 or h <= 0:
            return None
        r = self._image_rect()
        x = pos.x()
        y = pos.y()
        if x < r.left() or y < r.top() or x >= r.right() or y >= r.bottom():
            return None
        u = (x - r.left()) / r.width()
        v = (y - r.top()) / r.height()
        ix = max(0, min(w - 1, int(u * w)))
        iy = max(0, min(h - 1, int(v * h)))
        return (ix, iy)

    def wheelEvent(self, e) -> None:
        delta = e.angleDelta().y()
        if delta == 0 or self._pixmap is None:
            return
        factor = 1.1 if delta > 0 else (1.0 / 1.1)
        zoom = max(0.05, min(20.0, self.effective_zoom() * factor))
        self.set_view(VIEW_CUSTOM_ZOOM, zoom)
        if self._on_zoom_changed is not None:
            self._on_zoom_changed(zoom)
        e.accept()

    def mousePressEvent(self, e) -> None:
        self._last_pos = e.position().toPoint()

        if e.button() == Qt.LeftButton and self.eyedropper_enabled:
            image_xy = self._widget_to_image_xy(self._last_pos)
            if image_xy is not None:
                self._on_pick_at_image_pos(image_xy[0], image_xy[1])
        elif e.button() == Qt.MiddleButton:
            self._dragging_mid = True

    def mouseMoveEvent(self, e) -> None:
        pos = e.position().toPoint()
        dx = pos.x() - self._last_pos.x()
        dy = pos.y() - self._last_pos.y()
        self._last_pos = pos

        if self._dragging_mid:
            self._view_pan_x += dx
            self._view_pan_y += dy
            self.update()

    def mouseReleaseEvent(self, e) -> None:
        if e.button() == Qt.MiddleButton:
            self._dragging_mid = False
