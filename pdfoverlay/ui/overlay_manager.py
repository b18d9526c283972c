"""
Floating HTML overlays positioned over annotation regions.
"""
import logging
from typing import Dict, Optional

from PyQt5 import sip
from PyQt5.QtCore import QPoint, Qt, pyqtSignal
from PyQt5.QtGui import QMouseEvent
from PyQt5.QtWidgets import QLabel, QWidget

from ..core.geometry import BoundingBox, CoordinateTransformer

logger = logging.getLogger(__name__)


class OverlayLabel(QLabel):
    """Rich-text label showing a provider's overlay HTML."""

    clicked = pyqtSignal(str, QPoint)  # annotation key, position in the parent

    def __init__(self, key: str, html: str, parent: QWidget = None):
        super().__init__(parent)
        self.key = key

        self.setObjectName(key)
        self.setTextFormat(Qt.RichText)
        self.setText(html)
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setCursor(Qt.PointingHandCursor)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.key, self.mapToParent(event.pos()))
            event.accept()
            return
        super().mousePressEvent(event)


class OverlayLifecycleManager:
    """
    Creates and destroys overlay labels, at most one per annotation.

    Overlays are children of ``container`` (the page canvas), so their
    positions are in the canvas's logical coordinates.
    """

    def __init__(self, container: QWidget, transformer: CoordinateTransformer,
                 on_click=None):
        self.container = container
        self.transformer = transformer
        self.on_click = on_click

        self._overlays: Dict[str, OverlayLabel] = {}

    def create(self, key: str, html: str, bbox: BoundingBox) -> Optional[OverlayLabel]:
        """
        Show an overlay centred on the region's centroid.

        Does nothing if an overlay for ``key`` already exists or the region
        cannot be placed on screen.

        Returns:
            The new overlay, or None
        """
        if key in self._overlays:
            return None

        center = self.transformer.centroid_to_screen(bbox)
        if center is None:
            logger.debug("Cannot place overlay %s: no display surface", key)
            return None

        label = OverlayLabel(key, html, self.container)
        if self.on_click is not None:
            label.clicked.connect(self.on_click)

        # Measure at natural size while hidden, then centre
        label.adjustSize()
        width, height = label.width(), label.height()
        label.move(int(round(center[0] - width / 2)), int(round(center[1] - height / 2)))
        label.show()
        label.raise_()

        self._overlays[key] = label
        return label

    def remove(self, key: str) -> bool:
        label = self._overlays.pop(key, None)
        if label is None:
            return False
        self._dispose(label)
        return True

    def clear(self) -> None:
        """Remove every overlay."""
        for label in list(self._overlays.values()):
            self._dispose(label)
        self._overlays.clear()

    def get(self, key: str) -> Optional[OverlayLabel]:
        return self._overlays.get(key)

    def keys(self):
        return list(self._overlays)

    def __contains__(self, key: str) -> bool:
        return key in self._overlays

    def __len__(self) -> int:
        return len(self._overlays)

    def _dispose(self, label: OverlayLabel) -> None:
        """Disconnect signals and delete an overlay label."""
        if sip.isdeleted(label):
            return

        try:
            label.clicked.disconnect()
        except (TypeError, RuntimeError):
            pass

        label.hide()
        label.setParent(None)
        label.deleteLater()
