"""
UI widgets.
"""
from .annotation_viewer import AnnotationViewer
from .page_canvas import PageCanvas

__all__ = [
    'AnnotationViewer',
    'PageCanvas'
]
