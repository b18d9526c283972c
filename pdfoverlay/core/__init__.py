"""
Core overlay logic: geometry, annotations, providers and documents.
"""
from .annotations import AnnotationIndex, AnnotationSource, HitTestEntry, OverlayAnnotation
from .errors import (
    AnnotationLoadError,
    InvalidGeometryError,
    OverlayError,
    ProviderNotFoundError,
    ProviderRenderError,
)
from .geometry import BoundingBox, CoordinateTransformer, ScreenRect, effective_dpi
from .providers import (
    DEFAULT_PROVIDER_ID,
    AnnotationProvider,
    DefaultProvider,
    DispatcherConfig,
    ProviderRegistry,
    RenderContext,
    RenderDispatcher,
    RenderResult,
)

__all__ = [
    "OverlayAnnotation",
    "AnnotationSource",
    "AnnotationIndex",
    "HitTestEntry",
    "BoundingBox",
    "ScreenRect",
    "CoordinateTransformer",
    "effective_dpi",
    "DEFAULT_PROVIDER_ID",
    "AnnotationProvider",
    "RenderContext",
    "DefaultProvider",
    "ProviderRegistry",
    "RenderDispatcher",
    "DispatcherConfig",
    "RenderResult",
    "OverlayError",
    "AnnotationLoadError",
    "InvalidGeometryError",
    "ProviderNotFoundError",
    "ProviderRenderError",
]
