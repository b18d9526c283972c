"""
Controller for page navigation and zoom state.
"""
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from ..config import ViewerSettings


class ViewController(QObject):
    """Tracks the displayed page and zoom level of the viewer."""

    # Signals
    page_changed = pyqtSignal(int)  # Emitted when current page changes (0-based)
    zoom_changed = pyqtSignal(float)  # Emitted when zoom level changes

    def __init__(self, settings: Optional[ViewerSettings] = None, parent: QObject = None):
        super().__init__(parent)

        self.settings = settings or ViewerSettings()

        # View state
        self.current_page: int = 0
        self.total_pages: int = 0
        self.zoom_level: float = self.settings.clamp_zoom(self.settings.zoom)

    def set_document_info(self, total_pages: int) -> None:
        """
        Reset navigation for a newly loaded document.

        Args:
            total_pages: Total number of pages in the document
        """
        self.total_pages = total_pages
        self.current_page = 0

    # ===== Navigation =====

    def go_to_page(self, page_index: int) -> bool:
        """
        Move to a page.

        Args:
            page_index: 0-based page index

        Returns:
            True if the page changed
        """
        if not (0 <= page_index < self.total_pages):
            return False
        if page_index == self.current_page:
            return False

        self.current_page = page_index
        self.page_changed.emit(page_index)
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def prev_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    @property
    def can_go_next(self) -> bool:
        return self.current_page < self.total_pages - 1

    @property
    def can_go_prev(self) -> bool:
        return self.current_page > 0

    @property
    def page_number(self) -> int:
        """Current page as a 1-based number."""
        return self.current_page + 1

    # ===== Zoom =====

    def set_zoom(self, zoom: float) -> float:
        """
        Set the zoom factor, clamped to the configured range.

        Returns:
            The zoom actually applied
        """
        zoom = self.settings.clamp_zoom(zoom)
        if zoom != self.zoom_level:
            self.zoom_level = zoom
            self.zoom_changed.emit(zoom)
        return self.zoom_level

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom_level * self.settings.zoom_step)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom_level / self.settings.zoom_step)

    @property
    def zoom_percentage(self) -> int:
        return int(round(self.zoom_level * 100))

    @property
    def effective_dpi(self) -> float:
        """Document units to raster pixels at the current zoom."""
        return self.settings.effective_dpi(self.zoom_level)

    @property
    def render_scale(self) -> float:
        """PDF points to raster pixels at the current zoom."""
        return self.settings.render_scale(self.zoom_level)
