"""
The built-in provider that draws every annotation nothing else claims.
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QFont, QFontMetricsF, QPainter, QPen

from ..geometry import BoundingBox
from .models import DEFAULT_PROVIDER_ID, AnnotationProvider, RenderContext

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]  # RGBA, 0-255

# Regions smaller than this get the highlight but no text
MIN_TEXT_WIDTH = 8
MIN_TEXT_HEIGHT = 6

# Tall regions need at least this much room for one character per line
MIN_VERTICAL_WIDTH = 12
MIN_VERTICAL_HEIGHT = 16


@dataclass(frozen=True)
class TextStyle:
    """Styling of the text box the default provider draws on hover."""

    font_family: str = "Arial"
    font_size: float = 12.0  # Pixels
    text_color: Color = (0, 0, 0, 230)
    background_color: Color = (255, 255, 255, 250)
    border_color: Color = (0, 0, 0, 102)
    padding: float = 6.0
    min_width: float = 20.0
    min_height: float = 10.0
    max_width: float = 200.0  # Wrap width
    line_height: float = 1.2  # Multiplier of font size

    def updated(self, **changes) -> "TextStyle":
        return replace(self, **changes)


def is_vertical(width: float, height: float) -> bool:
    """A region is vertical when it is noticeably taller than wide."""
    return height > width * 1.2


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """
    Greedy word wrap.

    Args:
        text: Text to wrap on spaces
        max_width: Width a line should not exceed
        measure: Returns the rendered width of a string

    Returns:
        Wrapped lines; a single word wider than max_width gets its own line
    """
    lines = []
    current = ""

    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if measure(candidate) > max_width and current:
            lines.append(current)
            current = word
        else:
            current = candidate

    if current:
        lines.append(current)
    return lines


class DefaultProvider:
    """
    Labels the hovered region with the annotation content.

    When an ``html_builder`` is given, the provider also asks for an
    overlay widget holding the HTML it returns.
    """

    def __init__(self, text_style: Optional[TextStyle] = None,
                 html_builder: Optional[Callable[[RenderContext], Optional[str]]] = None):
        self.text_style = text_style or TextStyle()
        self.html_builder = html_builder

    def as_provider(self) -> AnnotationProvider:
        return AnnotationProvider(
            id=DEFAULT_PROVIDER_ID,
            name="Default",
            description="Annotation text in a box over the region",
            priority=0,
            can_handle=lambda annotation: True,
            render=self.render,
            create_overlay=self.create_overlay if self.html_builder else None,
        )

    # ===== Style =====

    def update_text_style(self, **changes) -> None:
        self.text_style = self.text_style.updated(**changes)

    def reset_text_style(self) -> None:
        self.text_style = TextStyle()

    # ===== Provider hooks =====

    def create_overlay(self, context: RenderContext) -> Optional[str]:
        if self.html_builder is None:
            return None
        return self.html_builder(context)

    def render(self, context: RenderContext) -> None:
        surface = context.surface
        if surface is None or surface.isNull():
            logger.debug("No surface for %s; nothing drawn", context.annotation.key)
            return

        painter = QPainter(surface)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            self.draw_text(painter, context.annotation.content, context.bbox)
        finally:
            painter.end()

    # ===== Text box =====

    def draw_text(self, painter: QPainter, content: str, bbox: BoundingBox) -> bool:
        """
        Draw content in a padded box centred on the region.

        Returns:
            True if text was drawn
        """
        if not content or not content.strip():
            return False

        width, height = bbox.width, bbox.height
        if width < MIN_TEXT_WIDTH or height < MIN_TEXT_HEIGHT:
            logger.debug("Region %.1fx%.1f too small for text", width, height)
            return False

        style = self.text_style
        font_size = style.font_size
        if width < 20 or height < 12:
            font_size = max(8.0, style.font_size * 0.8)

        font = QFont(style.font_family)
        font.setPixelSize(max(1, int(round(font_size))))
        metrics = QFontMetricsF(font)

        padding = style.padding
        line_height = font_size * style.line_height

        if is_vertical(width, height) and width >= MIN_VERTICAL_WIDTH and height >= MIN_VERTICAL_HEIGHT:
            lines = [ch for ch in content if ch.strip()]
            text_width = font_size
        else:
            max_text_width = min(width - padding * 2, style.max_width)
            lines = wrap_text(content, max_text_width, metrics.horizontalAdvance)
            text_width = max(metrics.horizontalAdvance(line) for line in lines)

        text_height = len(lines) * line_height

        # The box may extend past the region, but is centred when it fits
        bg_width = max(text_width + padding * 2, min(width, style.max_width))
        bg_height = text_height + padding * 2
        bg_x = bbox.min_x + max(0.0, (width - bg_width) / 2)
        bg_y = bbox.min_y + max(0.0, (height - bg_height) / 2)
        background = QRectF(bg_x, bg_y, bg_width, bg_height)

        painter.save()
        try:
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(QColor(*style.background_color)))
            painter.drawRect(background)

            painter.setBrush(Qt.NoBrush)
            painter.setPen(QPen(QColor(*style.border_color), 1.5))
            painter.drawRect(background)

            painter.setFont(font)
            painter.setPen(QColor(*style.text_color))
            start_y = bg_y + (bg_height - text_height) / 2
            for i, line in enumerate(lines):
                line_rect = QRectF(bg_x, start_y + i * line_height, bg_width, line_height)
                painter.drawText(line_rect, Qt.AlignCenter, line)
        finally:
            painter.restore()

        return True
