"""
Page widget showing the rasterised page with annotation outlines and the
hover highlight layer.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from PyQt5.QtCore import QPointF, Qt, pyqtSignal
from PyQt5.QtGui import (
    QBrush,
    QColor,
    QCursor,
    QImage,
    QMouseEvent,
    QPainter,
    QPen,
    QPixmap,
    QPolygonF,
)
from PyQt5.QtWidgets import QLabel

from ...config import ViewerSettings
from ...core.geometry import screen_to_raster

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class PageCanvas(QLabel):
    """
    Displays one page and reports pointer activity in raster coordinates.

    The page pixmap is rendered at device resolution and shown at its
    logical size, so raster pixels and widget pixels differ by the device
    pixel ratio (and by any further scaling of the widget).
    """

    # Signals
    pointer_moved = pyqtSignal(float, float)  # raster x, y
    pointer_left = pyqtSignal()
    pointer_clicked = pyqtSignal(float, float)  # raster x, y

    def __init__(self, settings: Optional[ViewerSettings] = None, parent=None):
        super().__init__(parent)

        self.settings = settings or ViewerSettings()

        self._highlight: Optional[QImage] = None
        self._outlines: List[QPolygonF] = []

        # Setup
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.NoFocus)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)

    # ===== Page =====

    def set_page_pixmap(self, pixmap: QPixmap, device_pixel_ratio: float = 1.0) -> None:
        """Show a rendered page and reset the highlight layer to its size."""
        pixmap.setDevicePixelRatio(device_pixel_ratio)
        self.setPixmap(pixmap)
        self.setFixedSize(
            int(round(pixmap.width() / device_pixel_ratio)),
            int(round(pixmap.height() / device_pixel_ratio)),
        )

        self._highlight = QImage(pixmap.width(), pixmap.height(),
                                 QImage.Format_ARGB32_Premultiplied)
        self._highlight.fill(Qt.transparent)
        self._outlines = []
        self.update()

    def clear_page(self) -> None:
        self.clear()
        self._highlight = None
        self._outlines = []
        self.set_hover_cursor(False)
        self.update()

    def intrinsic_size(self) -> Point:
        """Raster size of the page in device pixels."""
        pixmap = self.pixmap()
        if pixmap is None or pixmap.isNull():
            return 0.0, 0.0
        return float(pixmap.width()), float(pixmap.height())

    def display_size(self) -> Point:
        """Size the page occupies on screen in logical pixels."""
        return float(self.width()), float(self.height())

    # ===== Highlight layer =====

    def highlight_layer(self) -> Optional[QImage]:
        return self._highlight

    def clear_highlight(self) -> None:
        if self._highlight is not None:
            self._highlight.fill(Qt.transparent)
        self.update()

    def draw_highlight(self, polygon: Sequence[Point]) -> None:
        """Fill and stroke a region on the highlight layer."""
        if self._highlight is None or not polygon:
            return

        painter = QPainter(self._highlight)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            painter.setPen(QPen(QColor(*self.settings.highlight_stroke), 2))
            painter.setBrush(QBrush(QColor(*self.settings.highlight_fill)))
            painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in polygon]))
        finally:
            painter.end()

    def refresh(self) -> None:
        self.update()

    def set_outlines(self, polygons: Sequence[Sequence[Point]]) -> None:
        """Set the resting outlines drawn around every region of the page."""
        self._outlines = [
            QPolygonF([QPointF(x, y) for x, y in polygon]) for polygon in polygons
        ]
        self.update()

    def set_hover_cursor(self, hovering: bool) -> None:
        self.setCursor(Qt.PointingHandCursor if hovering else Qt.ArrowCursor)

    # ===== Coordinates =====

    def _to_raster(self, pos) -> Optional[Point]:
        return screen_to_raster(pos.x(), pos.y(), self.intrinsic_size(), self.display_size())

    # ===== Mouse events =====

    def mouseMoveEvent(self, event: QMouseEvent):
        point = self._to_raster(event.pos())
        if point is not None:
            self.pointer_moved.emit(*point)
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)

        point = self._to_raster(event.pos())
        if point is not None:
            self.pointer_clicked.emit(*point)

    def leaveEvent(self, event):
        # Entering a child overlay is not leaving the page
        if not self.rect().contains(self.mapFromGlobal(QCursor.pos())):
            self.pointer_left.emit()
        super().leaveEvent(event)

    # ===== Painting =====

    def paintEvent(self, event):
        try:
            super().paintEvent(event)
            if self._highlight is None:
                return

            intrinsic_w, intrinsic_h = self.intrinsic_size()
            if not intrinsic_w or not intrinsic_h:
                return

            painter = QPainter(self)
            painter.setRenderHint(QPainter.Antialiasing)

            painter.save()
            painter.scale(self.width() / intrinsic_w, self.height() / intrinsic_h)
            self._paint_outlines(painter)
            painter.restore()

            painter.drawImage(self.rect(), self._highlight)
            painter.end()
        except Exception as e:
            logger.exception("Paint error: %s", e)

    def _paint_outlines(self, painter: QPainter):
        if not self._outlines:
            return

        pen = QPen(QColor(*self.settings.outline_color), 1)
        pen.setCosmetic(True)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        for polygon in self._outlines:
            painter.drawPolygon(polygon)
