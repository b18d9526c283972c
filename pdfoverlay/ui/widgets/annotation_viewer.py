"""
Annotation viewer widget - a page canvas with interactive overlay regions.
"""
import asyncio
import logging
from typing import Callable, List, Optional

import pyperclip
from PyQt5.QtCore import QPoint, Qt, pyqtSignal
from PyQt5.QtWidgets import QScrollArea, QVBoxLayout, QWidget

from ...config import ViewerSettings
from ...controllers import InteractionStateMachine, PointerContext, ViewController
from ...controllers.input_handler import UserInputHandler
from ...core.annotations import AnnotationIndex, AnnotationSource, OverlayAnnotation
from ...core.document import DocumentMetadata, PDFDocumentReader
from ...core.geometry import CoordinateTransformer
from ...core.providers import (
    DefaultProvider,
    DispatcherConfig,
    ProviderRegistry,
    RenderContext,
    RenderDispatcher,
)
from ..overlay_manager import OverlayLifecycleManager
from .page_canvas import PageCanvas

logger = logging.getLogger(__name__)


class AnnotationViewer(QWidget):
    """
    Shows one PDF page at a time with its overlay annotations.

    Hovering a region highlights it and lets the resolved provider draw;
    clicking a region selects it and emits ``overlay_clicked``.
    """

    # Signals
    overlay_clicked = pyqtSignal(object, object)  # OverlayAnnotation, PointerContext
    canvas_clicked = pyqtSignal(object)  # PointerContext
    document_loaded = pyqtSignal(int)  # page count
    selection_changed = pyqtSignal(object)  # OverlayAnnotation or None

    def __init__(
        self,
        settings: Optional[ViewerSettings] = None,
        registry: Optional[ProviderRegistry] = None,
        html_annotation: Optional[Callable[[RenderContext], Optional[str]]] = None,
        overlay_dir: Optional[str] = None,
        parent=None,
    ):
        super().__init__(parent)

        self.settings = settings or ViewerSettings()

        # Document and annotation sources
        self.reader = PDFDocumentReader()
        self.source = AnnotationSource(overlay_dir)

        # Providers; a registry passed in may be shared with other viewers
        if registry is None:
            default = DefaultProvider(self.settings.text_style, html_annotation)
            registry = ProviderRegistry(default.as_provider())
        self.registry = registry
        self.dispatcher = RenderDispatcher(
            self.registry, DispatcherConfig(fallback_enabled=self.settings.fallback_enabled)
        )

        # View state
        self.view_controller = ViewController(self.settings, self)
        self.view_controller.page_changed.connect(self.display_page)
        self.view_controller.zoom_changed.connect(self._on_zoom_changed)

        self.selected_annotation: Optional[OverlayAnnotation] = None

        self._setup_ui()

        # Interaction
        self.transformer = CoordinateTransformer(self.canvas)
        self.overlays = OverlayLifecycleManager(
            self.canvas, self.transformer, on_click=self._on_overlay_label_clicked
        )
        self.index = AnnotationIndex()
        self.interaction = InteractionStateMachine(
            self.index, self.dispatcher, self.canvas, self.overlays, self
        )
        self.input_handler = UserInputHandler(self)

        self._connect_signals()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.canvas = PageCanvas(self.settings)

        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidget(self.canvas)
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.scroll_area.setFocusPolicy(Qt.NoFocus)
        layout.addWidget(self.scroll_area)

        self.setFocusPolicy(Qt.StrongFocus)

    def _connect_signals(self):
        self.canvas.pointer_moved.connect(self._on_pointer_moved)
        self.canvas.pointer_left.connect(self._on_pointer_left)
        self.canvas.pointer_clicked.connect(self._on_pointer_clicked)

        self.interaction.overlay_clicked.connect(self._on_overlay_clicked)
        self.interaction.canvas_clicked.connect(self.canvas_clicked)
        self.interaction.hover_changed.connect(self._on_hover_changed)

    # ===== Loading =====

    def load(self, pdf_path: str, overlay_id: Optional[str] = None) -> bool:
        """
        Open a PDF and optionally its overlay annotations.

        Args:
            pdf_path: PDF file to display
            overlay_id: Overlay file identifier (path or file:// URL)

        Returns:
            True if the PDF was opened
        """
        success, page_count = self.reader.load_pdf(pdf_path)
        if not success:
            # The reader has already closed the previous document
            self.interaction.reset()
            self.close_selection()
            self.index.set_annotations([])
            self.canvas.clear_page()
            self.view_controller.set_document_info(0)
            return False

        annotations = self.source.load(overlay_id) if overlay_id else []
        self.set_annotations(annotations, redisplay=False)

        self.view_controller.set_document_info(page_count)
        self.display_page(0)
        self.document_loaded.emit(page_count)
        return True

    def load_annotations(self, overlay_id: str) -> int:
        """
        Replace the annotation set from an overlay file.

        Returns:
            Number of annotations loaded
        """
        annotations = self.source.load(overlay_id)
        self.set_annotations(annotations)
        return len(annotations)

    def set_annotations(self, annotations: List[OverlayAnnotation], redisplay: bool = True) -> None:
        """Replace the whole annotation set at once."""
        self.close_selection()
        self.index.set_annotations(annotations)
        if redisplay and self.reader.is_loaded():
            self.display_page(self.view_controller.current_page)

    @property
    def annotations(self) -> tuple:
        return self.index.annotations

    def annotations_for_page(self, page_index: int) -> List[OverlayAnnotation]:
        return self.index.annotations_for_page(page_index)

    def get_metadata(self) -> DocumentMetadata:
        return self.reader.get_metadata()

    # ===== Display =====

    def display_page(self, page_index: int) -> bool:
        """
        Render a page and rebuild its hit-test regions.

        Returns:
            True if the page was rendered
        """
        pixmap = self.reader.render_page(page_index, self.view_controller.render_scale)
        if pixmap is None:
            self.interaction.reset()
            self.canvas.clear_page()
            return False

        self.canvas.set_page_pixmap(pixmap, self.settings.device_pixel_ratio)
        self.interaction.set_view(page_index + 1, self.view_controller.effective_dpi)
        self.canvas.set_outlines([entry.polygon for entry in self.index.entries])
        return True

    def go_to_page(self, page_index: int) -> bool:
        return self.view_controller.go_to_page(page_index)

    def _on_zoom_changed(self, zoom: float):
        if self.reader.is_loaded():
            self.display_page(self.view_controller.current_page)

    # ===== Pointer events =====

    def _schedule(self, coro) -> Optional[asyncio.Task]:
        """Run a coroutine on the event loop, logging any failure."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning("No running event loop; pointer event dropped")
            return None

        task = loop.create_task(coro)
        task.add_done_callback(self._log_task_error)
        return task

    @staticmethod
    def _log_task_error(task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Pointer handling failed: %r", error, exc_info=error)

    def _on_pointer_moved(self, x: float, y: float):
        self._schedule(self.interaction.pointer_moved(x, y))

    def _on_pointer_left(self):
        self._schedule(self.interaction.pointer_left())

    def _on_pointer_clicked(self, x: float, y: float):
        self.setFocus()
        self.interaction.handle_click(x, y)

    def _on_hover_changed(self, annotation: Optional[OverlayAnnotation]):
        self.canvas.set_hover_cursor(annotation is not None)

    def _on_overlay_label_clicked(self, key: str, pos: QPoint):
        """Handle a click on an overlay label at canvas position ``pos``."""
        self.setFocus()
        entry = self.index.get(key)
        if entry is None:
            return

        point = self.transformer.to_raster(pos.x(), pos.y())
        if point is None:
            return
        x, y = point

        # Labels can extend past their region; a click there still selects it
        if entry.contains_point(x, y):
            self.interaction.handle_click(x, y)
        else:
            context = PointerContext(x=x, y=y, page_number=self.interaction.page_number)
            self._on_overlay_clicked(entry.annotation, context)

    def _on_overlay_clicked(self, annotation: OverlayAnnotation, context: PointerContext):
        self.selected_annotation = annotation
        self.selection_changed.emit(annotation)
        self.overlay_clicked.emit(annotation, context)

    # ===== Selection =====

    @property
    def selected_content(self) -> str:
        return self.selected_annotation.content if self.selected_annotation else ""

    def close_selection(self) -> bool:
        """
        Clear the selected annotation.

        Returns:
            True if an annotation was selected
        """
        if self.selected_annotation is None:
            return False
        self.selected_annotation = None
        self.selection_changed.emit(None)
        return True

    def copy_selected_content(self) -> bool:
        """Copy the selected annotation's content to the clipboard."""
        content = self.selected_content
        if not content:
            return False

        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            logger.error("Could not copy to clipboard: %s", e)
            return False
        return True

    # ===== Keyboard =====

    def keyPressEvent(self, event):
        if not self.input_handler.handle_key_press(event):
            super().keyPressEvent(event)

    # ===== Teardown =====

    def cleanup(self) -> None:
        """Close the document and drop annotations, overlays and extra providers."""
        self.interaction.reset()
        self.close_selection()
        self.index.set_annotations([])
        self.reader.close_document()
        self.canvas.clear_page()
        self.registry.reset()
        self.view_controller.set_document_info(0)
