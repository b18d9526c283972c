"""
Hover and click handling for annotations on the displayed page.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from ..core.annotations import AnnotationIndex, HitTestEntry, OverlayAnnotation
from ..core.providers import RenderContext, RenderDispatcher

logger = logging.getLogger(__name__)


class HoverState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"


@dataclass(frozen=True)
class PointerContext:
    """Where a pointer event happened, in raster pixels."""

    x: float
    y: float
    page_number: int  # 1-based


class InteractionStateMachine(QObject):
    """
    Tracks which annotation is hovered and drives redraws.

    States are Idle and Hovering(annotation). Moving within the hovered
    annotation does nothing; moving to another annotation tears the old
    hover down and sets the new one up; missing every annotation returns
    to Idle.

    Pointer moves are processed one at a time in arrival order. Each hover
    setup is tagged with a generation; work finishing after a later
    transition (or a reset) is discarded.

    Collaborators:
        canvas: provides ``highlight_layer()``, ``clear_highlight()``,
            ``draw_highlight(polygon)`` and ``refresh()``
        overlays: provides ``create(key, html, bbox)``, ``remove(key)``
            and ``clear()``
    """

    # Signals
    overlay_clicked = pyqtSignal(object, object)  # OverlayAnnotation, PointerContext
    canvas_clicked = pyqtSignal(object)  # PointerContext
    hover_changed = pyqtSignal(object)  # OverlayAnnotation or None

    def __init__(self, index: AnnotationIndex, dispatcher: RenderDispatcher,
                 canvas, overlays, parent: QObject = None):
        super().__init__(parent)

        self.index = index
        self.dispatcher = dispatcher
        self.canvas = canvas
        self.overlays = overlays

        self.page_number: int = 1
        self.effective_dpi: float = 0.0

        self._hovered: Optional[HitTestEntry] = None
        self._generation = 0
        self._lock = asyncio.Lock()

    # ===== State =====

    @property
    def state(self) -> HoverState:
        return HoverState.HOVERING if self._hovered else HoverState.IDLE

    @property
    def hovered_annotation(self) -> Optional[OverlayAnnotation]:
        return self._hovered.annotation if self._hovered else None

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ===== View changes =====

    def set_view(self, page_number: int, effective_dpi: float) -> None:
        """
        Apply a page or zoom change.

        Forces Idle, tears down overlays and invalidates the hit-test index
        so it is rebuilt for the new page and DPI before the next query.
        """
        self.page_number = page_number
        self.effective_dpi = effective_dpi

        self.index.set_page(page_number - 1)
        self.index.set_effective_dpi(effective_dpi)
        self.index.invalidate()
        self.reset()

    def reset(self) -> None:
        """Return to Idle, dropping highlight and overlays."""
        self._generation += 1
        self._hovered = None
        self.overlays.clear()
        self.canvas.clear_highlight()

    # ===== Pointer events =====

    async def pointer_moved(self, x: float, y: float) -> bool:
        """
        Handle a pointer move at raster coordinates.

        Returns:
            True if the hover state changed
        """
        async with self._lock:
            entry = self.index.entry_at(x, y)

            current_key = self._hovered.annotation.key if self._hovered else None
            new_key = entry.annotation.key if entry else None
            if new_key == current_key:
                return False

            if self._hovered:
                self._leave()
            if entry:
                await self._enter(entry)

            self.hover_changed.emit(self.hovered_annotation)
            return True

    async def pointer_left(self) -> bool:
        """
        Handle the pointer leaving the canvas.

        Returns:
            True if an annotation was hovered
        """
        async with self._lock:
            if self._hovered is None:
                return False
            self._leave()
            self.hover_changed.emit(None)
            return True

    def handle_click(self, x: float, y: float) -> Optional[OverlayAnnotation]:
        """
        Emit a click event for a raster position.

        Does not change the hover state.

        Returns:
            The clicked annotation, or None for a plain canvas click
        """
        context = PointerContext(x=x, y=y, page_number=self.page_number)
        annotation = self.index.hit_test(x, y)

        if annotation:
            self.overlay_clicked.emit(annotation, context)
        else:
            self.canvas_clicked.emit(context)
        return annotation

    # ===== Transitions =====

    def _leave(self) -> None:
        self._generation += 1
        self.overlays.remove(self._hovered.annotation.key)
        self.canvas.clear_highlight()
        self._hovered = None

    async def _enter(self, entry: HitTestEntry) -> None:
        self._generation += 1
        generation = self._generation
        self._hovered = entry
        annotation = entry.annotation

        self.overlays.clear()
        self.canvas.clear_highlight()
        self.canvas.draw_highlight(entry.polygon)

        context = RenderContext(
            surface=self.canvas.highlight_layer(),
            annotation=annotation,
            effective_dpi=self.effective_dpi,
            page_number=self.page_number,
            bbox=entry.bbox,
            polygon=list(entry.polygon),
            generation=generation,
            is_current=lambda: self.is_current(generation),
        )

        result = await self.dispatcher.render_annotation(annotation, context)
        if not self.is_current(generation):
            logger.debug("Discarding stale render of %s", annotation.key)
            return
        self.canvas.refresh()

        if result.failed:
            return

        html = await self.dispatcher.request_overlay(result.provider, context)
        if html and self.is_current(generation):
            self.overlays.create(annotation.key, html, entry.bbox)
