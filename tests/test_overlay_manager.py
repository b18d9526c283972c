import pytest
from PyQt5.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt5.QtGui import QMouseEvent
from PyQt5.QtWidgets import QWidget

from pdfoverlay.core.geometry import BoundingBox, CoordinateTransformer
from pdfoverlay.ui import OverlayLifecycleManager


class Container(QWidget):
    """Widget shown at half its raster size, as at a device pixel ratio of 2."""

    def intrinsic_size(self):
        return 400.0, 400.0

    def display_size(self):
        return 200.0, 200.0


@pytest.fixture
def manager(qapp):
    container = Container()
    container.resize(200, 200)
    clicks = []
    manager = OverlayLifecycleManager(
        container, CoordinateTransformer(container),
        lambda key, pos: clicks.append((key, pos)),
    )
    manager.clicks = clicks
    yield manager
    manager.clear()
    container.deleteLater()


def test_overlay_is_centred_on_centroid(manager):
    label = manager.create("annotation-1-1", "<b>Hello</b>", BoundingBox(40, 120, 40, 80))

    assert label.parent() is manager.container
    assert label.width() > 0 and label.height() > 0
    # Raster centroid (80, 60) is (40, 30) on screen
    assert abs(label.x() + label.width() / 2 - 40) <= 1
    assert abs(label.y() + label.height() / 2 - 30) <= 1


def test_one_overlay_per_identity(manager):
    bbox = BoundingBox(0, 10, 0, 10)
    first = manager.create("annotation-1-1", "first", bbox)

    assert manager.create("annotation-1-1", "second", bbox) is None
    assert len(manager) == 1
    assert manager.get("annotation-1-1") is first
    assert first.text() == "first"


def test_remove_and_clear(manager):
    bbox = BoundingBox(0, 10, 0, 10)
    label = manager.create("annotation-1-1", "a", bbox)
    manager.create("annotation-1-2", "b", bbox)

    assert manager.remove("annotation-1-1") is True
    assert label.parent() is None
    assert "annotation-1-1" not in manager
    assert manager.remove("annotation-1-1") is False

    manager.clear()
    assert len(manager) == 0


def test_label_click_reports_key_and_position(manager):
    label = manager.create("annotation-3-4", "x", BoundingBox(0, 10, 0, 10))
    event = QMouseEvent(QEvent.MouseButtonPress, QPointF(3, 4),
                        Qt.LeftButton, Qt.LeftButton, Qt.NoModifier)
    label.mousePressEvent(event)

    assert event.isAccepted()
    assert manager.clicks == [("annotation-3-4", label.pos() + QPoint(3, 4))]


def test_right_click_is_not_reported(manager):
    label = manager.create("annotation-3-4", "x", BoundingBox(0, 10, 0, 10))
    event = QMouseEvent(QEvent.MouseButtonPress, QPointF(3, 4),
                        Qt.RightButton, Qt.RightButton, Qt.NoModifier)
    label.mousePressEvent(event)
    assert manager.clicks == []


def test_no_surface_means_no_overlay(qapp):
    container = QWidget()
    manager = OverlayLifecycleManager(container, CoordinateTransformer())
    assert manager.create("annotation-1-1", "x", BoundingBox(0, 10, 0, 10)) is None
    assert len(manager) == 0
