"""
UI package for the annotation overlay viewer.
"""
from .overlay_manager import OverlayLabel, OverlayLifecycleManager
from .widgets import AnnotationViewer, PageCanvas

__all__ = [
    'AnnotationViewer',
    'PageCanvas',
    'OverlayLifecycleManager',
    'OverlayLabel'
]
