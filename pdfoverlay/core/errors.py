"""
Exception types raised by the overlay engine.
"""
from typing import Optional


class OverlayError(Exception):
    """Base class for all overlay engine errors."""


class AnnotationLoadError(OverlayError):
    """Annotation records could not be read or parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load annotations from {source}: {reason}")


class InvalidGeometryError(OverlayError):
    """An annotation polygon cannot describe a drawable region."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid geometry for {key}: {reason}")


class ProviderNotFoundError(OverlayError):
    """No provider is registered under the requested id."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"No provider registered with id '{provider_id}'")


class ProviderRenderError(OverlayError):
    """A provider raised while rendering an annotation."""

    def __init__(self, provider_id: str, key: str,
                 cause: Optional[BaseException] = None):
        self.provider_id = provider_id
        self.key = key
        self.cause = cause
        super().__init__(f"Provider '{provider_id}' failed to render {key}: {cause}")
