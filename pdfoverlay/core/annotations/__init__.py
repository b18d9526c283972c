"""
Overlay annotations: records, loading and hit testing.
"""
from .index import AnnotationIndex, HitTestEntry, build_polygon, polygon_path
from .loader import AnnotationSource
from .models import OverlayAnnotation

__all__ = [
    'OverlayAnnotation',
    'AnnotationSource',
    'AnnotationIndex',
    'HitTestEntry',
    'build_polygon',
    'polygon_path'
]
