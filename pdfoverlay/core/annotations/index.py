"""
Per-page hit-test index of annotation polygons.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from PyQt5.QtCore import QPointF
from PyQt5.QtGui import QPainterPath, QPolygonF

from ..errors import InvalidGeometryError
from ..geometry import BoundingBox, document_to_raster
from ..geometry.transform import Point
from .models import OverlayAnnotation

logger = logging.getLogger(__name__)


@dataclass
class HitTestEntry:
    """A closed raster-space path bound to its annotation."""

    path: QPainterPath
    polygon: List[Point]
    bbox: BoundingBox
    annotation: OverlayAnnotation

    def contains_point(self, x: float, y: float) -> bool:
        return self.path.contains(QPointF(x, y))


def is_collinear(polygon: Sequence[Point]) -> bool:
    """True when every point lies on one line, leaving no area to hit."""
    x0, y0 = polygon[0]
    x1, y1 = next(p for p in polygon if p != polygon[0])
    return all(
        abs((x1 - x0) * (y - y0) - (y1 - y0) * (x - x0)) < 1e-9 for x, y in polygon
    )


def build_polygon(annotation: OverlayAnnotation, dpi: float) -> List[Point]:
    """
    Transform an annotation's polygon to raster pixels and validate it.

    Raises:
        InvalidGeometryError: if the polygon cannot describe an area
    """
    rect = annotation.rect
    if len(rect) % 2:
        raise InvalidGeometryError(annotation.key, f"odd coordinate count ({len(rect)})")
    if not all(math.isfinite(v) for v in rect):
        raise InvalidGeometryError(annotation.key, "non-finite coordinate")

    polygon = document_to_raster(rect, dpi)
    if len(set(polygon)) < 3:
        raise InvalidGeometryError(annotation.key, "fewer than 3 distinct points")

    if is_collinear(polygon):
        raise InvalidGeometryError(annotation.key, "zero-area polygon")

    return polygon


def polygon_path(polygon: Sequence[Point]) -> QPainterPath:
    """Build a closed painter path through the given points."""
    path = QPainterPath()
    path.addPolygon(QPolygonF([QPointF(x, y) for x, y in polygon]))
    path.closeSubpath()
    return path


class AnnotationIndex:
    """
    Hit-test polygons for the annotations of the active page.

    The index is tied to one (page, effective DPI) pair. Changing either,
    or replacing the annotation set, invalidates it; the next query rebuilds
    before answering so stale polygons are never returned.
    """

    def __init__(self):
        self._annotations: tuple = ()
        self._page_index: Optional[int] = None
        self._dpi: Optional[float] = None

        self._entries: Dict[str, HitTestEntry] = {}
        self._stale = True

    # ===== Configuration =====

    def set_annotations(self, annotations: Iterable[OverlayAnnotation]) -> None:
        """Replace the full annotation set."""
        self._annotations = tuple(annotations)
        self.invalidate()

    def set_page(self, page_index: int) -> None:
        if page_index != self._page_index:
            self._page_index = page_index
            self.invalidate()

    def set_effective_dpi(self, dpi: float) -> None:
        if dpi != self._dpi:
            self._dpi = dpi
            self.invalidate()

    def invalidate(self) -> None:
        """Drop all cached paths; they are rebuilt on the next query."""
        self._entries.clear()
        self._stale = True

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def annotations(self) -> tuple:
        return self._annotations

    @property
    def page_index(self) -> Optional[int]:
        return self._page_index

    @property
    def effective_dpi(self) -> Optional[float]:
        return self._dpi

    # ===== Building =====

    def annotations_for_page(self, page_index: int) -> List[OverlayAnnotation]:
        """Get annotations whose 1-based page matches a 0-based index."""
        page = str(page_index + 1)
        return [ann for ann in self._annotations if ann.page == page]

    def rebuild(self) -> int:
        """
        Build paths for the active page.

        Returns:
            Number of annotations indexed
        """
        self._entries.clear()
        self._stale = False

        if self._page_index is None or not self._dpi or self._dpi <= 0:
            return 0

        for annotation in self.annotations_for_page(self._page_index):
            try:
                polygon = build_polygon(annotation, self._dpi)
            except InvalidGeometryError as e:
                logger.info("Skipping annotation: %s", e)
                continue

            if annotation.key in self._entries:
                logger.warning("Duplicate annotation identity %s; keeping first", annotation.key)
                continue

            self._entries[annotation.key] = HitTestEntry(
                path=polygon_path(polygon),
                polygon=polygon,
                bbox=BoundingBox.from_points(polygon),
                annotation=annotation,
            )

        logger.debug(
            "Indexed %d annotations for page %d at %.2f dpi",
            len(self._entries), self._page_index + 1, self._dpi,
        )
        return len(self._entries)

    def _ensure_built(self) -> None:
        if self._stale:
            self.rebuild()

    # ===== Queries =====

    @property
    def entries(self) -> List[HitTestEntry]:
        self._ensure_built()
        return list(self._entries.values())

    def get(self, key: str) -> Optional[HitTestEntry]:
        self._ensure_built()
        return self._entries.get(key)

    def entry_at(self, x: float, y: float) -> Optional[HitTestEntry]:
        """Find the first entry whose path contains a raster point."""
        self._ensure_built()
        for entry in self._entries.values():
            if entry.contains_point(x, y):
                return entry
        return None

    def hit_test(self, x: float, y: float) -> Optional[OverlayAnnotation]:
        entry = self.entry_at(x, y)
        return entry.annotation if entry else None

    def __len__(self) -> int:
        self._ensure_built()
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)
