import json

import pytest
from PyQt5.QtCore import QEvent, QPoint, Qt
from PyQt5.QtGui import QKeyEvent

from pdfoverlay.config import ViewerSettings
from pdfoverlay.controllers import HoverState
from pdfoverlay.core.providers import AnnotationProvider, ProviderRegistry
from pdfoverlay.ui import AnnotationViewer

# One inch squares, one inch from the top-left corner, in PDF points
PAGE_ONE = [72, 72, 144, 72, 144, 144, 72, 144]


@pytest.fixture
def overlay_path(tmp_path):
    path = tmp_path / "overlay.json"
    path.write_text(json.dumps({"overlay": [
        {"page": 1, "line": 1, "content": "First heading", "rect": PAGE_ONE},
        {"page": 2, "line": 1, "content": "Second page", "rect": PAGE_ONE},
    ]}), encoding="utf-8")
    return str(path)


@pytest.fixture
def viewer(qapp, pdf_path, overlay_path):
    viewer = AnnotationViewer(html_annotation=lambda ctx: f"<b>{ctx.annotation.content}</b>")
    assert viewer.load(pdf_path, overlay_path)
    yield viewer
    viewer.cleanup()
    viewer.deleteLater()


def test_load_displays_first_page(viewer):
    # 612 x 792 points at 96/72 pixels per point
    assert viewer.canvas.intrinsic_size() == pytest.approx((816, 1056), abs=1)
    assert viewer.canvas.display_size() == pytest.approx((816, 1056), abs=1)
    assert [e.annotation.content for e in viewer.index.entries] == ["First heading"]
    assert viewer.index.get("annotation-1-1").polygon[0] == pytest.approx((96, 96))


def test_load_failure(qapp, tmp_path):
    viewer = AnnotationViewer()
    assert viewer.load(str(tmp_path / "missing.pdf")) is False


def test_failed_reload_tears_down_previous_document(viewer, tmp_path):
    viewer.interaction.handle_click(150, 150)
    assert viewer.selected_content == "First heading"

    assert viewer.load(str(tmp_path / "missing.pdf")) is False

    assert viewer.index.hit_test(150, 150) is None
    assert viewer.canvas.intrinsic_size() == (0, 0)
    assert viewer.view_controller.total_pages == 0
    assert viewer.selected_annotation is None
    assert len(viewer.overlays) == 0


def test_click_selects_annotation(viewer, monkeypatch):
    copied = []
    monkeypatch.setattr("pyperclip.copy", copied.append)
    clicks = []
    viewer.overlay_clicked.connect(lambda annotation, context: clicks.append(annotation))

    viewer.interaction.handle_click(150, 150)

    assert clicks[0].content == "First heading"
    assert viewer.selected_content == "First heading"
    assert viewer.copy_selected_content() is True
    assert copied == ["First heading"]
    assert viewer.close_selection() is True
    assert viewer.selected_annotation is None
    assert viewer.copy_selected_content() is False


def test_canvas_click(viewer):
    contexts = []
    viewer.canvas_clicked.connect(contexts.append)
    viewer.interaction.handle_click(10, 10)
    assert contexts[0].page_number == 1
    assert viewer.selected_annotation is None


def test_zoom_rebuilds_index(viewer):
    viewer.view_controller.zoom_in()

    assert viewer.canvas.intrinsic_size()[0] == pytest.approx(816 * 1.2, abs=1)
    assert viewer.index.get("annotation-1-1").polygon[0] == pytest.approx((96 * 1.2, 96 * 1.2))


def test_page_change_switches_annotations(viewer):
    assert viewer.go_to_page(1) is True
    assert viewer.interaction.page_number == 2
    assert [e.annotation.content for e in viewer.index.entries] == ["Second page"]


def test_annotations_for_page(viewer):
    assert [a.content for a in viewer.annotations_for_page(1)] == ["Second page"]


def test_metadata(viewer):
    assert viewer.get_metadata().author == "Jane Roe"


@pytest.mark.asyncio
async def test_hover_highlights_and_shows_overlay(viewer):
    await viewer.interaction.pointer_moved(150, 150)

    assert viewer.interaction.state is HoverState.HOVERING
    assert viewer.canvas.highlight_layer().pixelColor(100, 100).alpha() > 0
    label = viewer.overlays.get("annotation-1-1")
    assert label is not None and "First heading" in label.text()

    await viewer.interaction.pointer_moved(500, 500)
    assert len(viewer.overlays) == 0
    assert viewer.canvas.highlight_layer().pixelColor(100, 100).alpha() == 0


@pytest.mark.asyncio
async def test_overlay_label_click_reports_pointer_position(viewer):
    await viewer.interaction.pointer_moved(150, 150)
    routed, clicks = [], []
    viewer.interaction.overlay_clicked.connect(lambda annotation, context: routed.append(context))
    viewer.overlay_clicked.connect(lambda annotation, context: clicks.append((annotation, context)))

    label = viewer.overlays.get("annotation-1-1")
    label.clicked.emit(label.key, QPoint(100, 120))

    assert viewer.selected_content == "First heading"
    annotation, context = clicks[0]
    assert annotation.key == "annotation-1-1"
    assert (context.x, context.y, context.page_number) == (100, 120, 1)
    assert routed == [context]


@pytest.mark.asyncio
async def test_overlay_label_click_outside_region_still_selects(viewer):
    await viewer.interaction.pointer_moved(150, 150)
    clicks, canvas_clicks = [], []
    viewer.overlay_clicked.connect(lambda annotation, context: clicks.append((annotation, context)))
    viewer.canvas_clicked.connect(canvas_clicks.append)

    label = viewer.overlays.get("annotation-1-1")
    label.clicked.emit(label.key, QPoint(50, 50))

    annotation, context = clicks[0]
    assert annotation.key == "annotation-1-1"
    assert (context.x, context.y) == (50, 50)
    assert canvas_clicks == []


@pytest.mark.asyncio
async def test_scheduled_pointer_move(viewer):
    task = viewer._schedule(viewer.interaction.pointer_moved(150, 150))
    await task
    assert viewer.interaction.hovered_annotation.content == "First heading"


def test_schedule_without_loop_drops_event(viewer):
    assert viewer._schedule(viewer.interaction.pointer_moved(150, 150)) is None


def test_keyboard(viewer):
    viewer.interaction.handle_click(150, 150)

    viewer.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_Escape, Qt.NoModifier))
    assert viewer.selected_annotation is None

    viewer.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_PageDown, Qt.NoModifier))
    assert viewer.view_controller.current_page == 1

    viewer.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_Plus, Qt.NoModifier))
    assert viewer.view_controller.zoom_level == pytest.approx(1.2)


def test_cleanup_resets_registry(viewer):
    viewer.registry.register(AnnotationProvider(id="extra", name="Extra",
                                                can_handle=lambda a: True, render=lambda c: None))
    viewer.cleanup()

    assert len(viewer.registry) == 1
    assert not viewer.reader.is_loaded()
    assert viewer.annotations == ()


def test_registry_shared_only_when_passed(qapp):
    shared = ProviderRegistry()
    first = AnnotationViewer(registry=shared)
    second = AnnotationViewer(registry=shared)
    third = AnnotationViewer()

    assert first.registry is second.registry
    assert third.registry is not shared


def test_device_pixel_ratio(qapp, pdf_path):
    viewer = AnnotationViewer(ViewerSettings(device_pixel_ratio=2.0))
    viewer.load(pdf_path)
    assert viewer.canvas.intrinsic_size() == pytest.approx((1632, 2112), abs=1)
    assert viewer.canvas.display_size() == pytest.approx((816, 1056), abs=1)
    viewer.cleanup()
