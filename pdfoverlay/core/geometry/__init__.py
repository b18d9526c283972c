"""
Coordinate transforms between document, raster and screen space.
"""
from .transform import (
    POINTS_PER_INCH,
    REFERENCE_DPI,
    BoundingBox,
    CoordinateTransformer,
    ScreenRect,
    document_to_raster,
    effective_dpi,
    raster_to_screen,
    scale_points,
    scale_rect,
    screen_to_raster,
)

__all__ = [
    "REFERENCE_DPI",
    "POINTS_PER_INCH",
    "BoundingBox",
    "ScreenRect",
    "CoordinateTransformer",
    "effective_dpi",
    "scale_points",
    "scale_rect",
    "document_to_raster",
    "raster_to_screen",
    "screen_to_raster",
]
