"""
Pluggable annotation renderers and their dispatch.
"""
from .default import DefaultProvider, TextStyle, wrap_text
from .dispatcher import DispatcherConfig, RenderDispatcher, RenderResult
from .models import DEFAULT_PROVIDER_ID, AnnotationProvider, RenderContext
from .registry import ProviderRegistry

__all__ = [
    "DEFAULT_PROVIDER_ID",
    "AnnotationProvider",
    "RenderContext",
    "DefaultProvider",
    "TextStyle",
    "wrap_text",
    "ProviderRegistry",
    "RenderDispatcher",
    "DispatcherConfig",
    "RenderResult",
]
