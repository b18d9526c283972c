"""
pdfoverlay - interactive annotation overlays for rendered PDF pages.
"""
from .config import ViewerSettings
from .core import (
    AnnotationProvider,
    OverlayAnnotation,
    ProviderRegistry,
    RenderContext,
)

__version__ = "0.1.0"

__all__ = [
    'ViewerSettings',
    'OverlayAnnotation',
    'AnnotationProvider',
    'ProviderRegistry',
    'RenderContext'
]
