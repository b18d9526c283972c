"""
Coordinate conversion between document, raster and screen space.

Two scale-only transforms are composed:

1. document -> raster pixels, multiplying by the effective DPI
2. raster pixels -> screen (widget) pixels, correcting for the canvas being
   displayed at a size different from its intrinsic pixmap size

Stage 1 is shared by drawing and hit testing so the two never diverge.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

REFERENCE_DPI = 96.0  # Reference display DPI
POINTS_PER_INCH = 72.0  # PDF user-space units per inch

Point = Tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds of a polygon."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def centroid(self) -> Point:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @staticmethod
    def from_points(points: Iterable[Point]) -> Optional["BoundingBox"]:
        points = list(points)
        if not points:
            return None
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return BoundingBox(min(xs), max(xs), min(ys), max(ys))


@dataclass(frozen=True)
class ScreenRect:
    """A rectangle in canvas widget coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return self.x + self.width / 2, self.y + self.height / 2


def effective_dpi(device_pixel_ratio: float, zoom: float,
                  reference_dpi: float = REFERENCE_DPI,
                  points_per_inch: float = POINTS_PER_INCH,
                  unit_points: float = 1.0) -> float:
    """
    Compute the document -> raster scale factor.

    Args:
        device_pixel_ratio: Physical pixels per logical pixel
        zoom: User zoom factor (1.0 = 100%)
        reference_dpi: Display DPI the geometry is laid out for
        points_per_inch: PDF points per inch
        unit_points: PDF points per document unit (72 for inch-based overlays)

    Returns:
        Pixels per document unit
    """
    return device_pixel_ratio * reference_dpi * zoom / points_per_inch * unit_points


def scale_points(points: Iterable[Point], factor: float) -> List[Point]:
    """Scale every coordinate pair uniformly, with no rotation or skew."""
    return [(x * factor, y * factor) for x, y in points]


def scale_rect(rect: Sequence[float], factor: float) -> Tuple[float, ...]:
    """Scale a flat coordinate list, keeping its flat layout."""
    return tuple(v * factor for v in rect)


def document_to_raster(rect: Sequence[float], dpi: float) -> List[Point]:
    """
    Convert a flat document-space coordinate list to raster pixel points.

    Args:
        rect: Flat x0, y0, x1, y1, ... list
        dpi: Effective DPI

    Returns:
        List of (x, y) tuples in raster pixels
    """
    pairs = [(rect[i], rect[i + 1]) for i in range(0, len(rect) - 1, 2)]
    return scale_points(pairs, dpi)


def raster_to_screen(bbox: BoundingBox,
                     intrinsic_size: Tuple[float, float],
                     displayed_size: Tuple[float, float]) -> Optional[ScreenRect]:
    """
    Map a raster-space box onto the displayed canvas.

    Returns:
        The box in widget coordinates, or None if the intrinsic size is empty
    """
    scale = _axis_scale(intrinsic_size, displayed_size)
    if scale is None:
        return None
    sx, sy = scale
    return ScreenRect(bbox.min_x * sx, bbox.min_y * sy, bbox.width * sx, bbox.height * sy)


def screen_to_raster(x: float, y: float,
                     intrinsic_size: Tuple[float, float],
                     displayed_size: Tuple[float, float]) -> Optional[Point]:
    """Map a widget-space point back to raster pixels."""
    scale = _axis_scale(intrinsic_size, displayed_size)
    if scale is None or scale[0] == 0 or scale[1] == 0:
        return None
    return x / scale[0], y / scale[1]


def _axis_scale(intrinsic_size, displayed_size) -> Optional[Point]:
    iw, ih = intrinsic_size
    dw, dh = displayed_size
    if iw <= 0 or ih <= 0:
        return None
    return dw / iw, dh / ih


class CoordinateTransformer:
    """
    Converts between raster and screen space for a displayed canvas.

    The surface is a read-only handle owned by the host. It must provide
    ``intrinsic_size()`` and ``display_size()`` returning (width, height)
    tuples. Every conversion returns None when no surface is attached or it
    has no raster yet; callers treat None as "do nothing".
    """

    def __init__(self, surface=None):
        self._surface = surface

    def attach(self, surface) -> None:
        self._surface = surface

    def detach(self) -> None:
        self._surface = None

    def _sizes(self) -> Optional[Tuple[Point, Point]]:
        if self._surface is None:
            logger.warning("No canvas attached for coordinate conversion")
            return None
        intrinsic = self._surface.intrinsic_size()
        if intrinsic[0] <= 0 or intrinsic[1] <= 0:
            logger.debug("Canvas has no raster; skipping conversion")
            return None
        return intrinsic, self._surface.display_size()

    def to_screen(self, bbox: BoundingBox) -> Optional[ScreenRect]:
        """Convert a raster bounding box to widget coordinates."""
        sizes = self._sizes()
        if sizes is None:
            return None
        return raster_to_screen(bbox, *sizes)

    def centroid_to_screen(self, bbox: BoundingBox) -> Optional[Point]:
        rect = self.to_screen(bbox)
        return rect.center if rect is not None else None

    def to_raster(self, x: float, y: float) -> Optional[Point]:
        """Convert a widget-space pointer position to raster pixels."""
        sizes = self._sizes()
        if sizes is None:
            return None
        return screen_to_raster(x, y, *sizes)
