"""
Runs providers for annotations with a single fallback to ``default``.
"""
import inspect
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..annotations.models import OverlayAnnotation
from ..errors import ProviderRenderError
from .models import AnnotationProvider, RenderContext
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass
class DispatcherConfig:
    """Behaviour switches for the render dispatcher."""

    fallback_enabled: bool = True


@dataclass
class RenderResult:
    """Outcome of one render dispatch."""

    annotation: OverlayAnnotation
    provider: AnnotationProvider  # Provider that drew, or the last one tried
    attempted: List[str] = field(default_factory=list)
    error: Optional[ProviderRenderError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def used_fallback(self) -> bool:
        return len(self.attempted) > 1


async def _call(fn, *args):
    """Call a provider hook, awaiting the result if it is awaitable."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class RenderDispatcher:
    """
    Resolves and invokes the provider for each annotation.

    A failing provider is retried once with ``default`` unless fallback is
    disabled or the failing provider already was ``default``. Failures are
    logged and reported in the returned RenderResult; they never propagate.
    """

    def __init__(self, registry: ProviderRegistry, config: Optional[DispatcherConfig] = None):
        self.registry = registry
        self.config = config or DispatcherConfig()

    async def render_annotation(self, annotation: OverlayAnnotation,
                                context: RenderContext) -> RenderResult:
        provider = self.registry.resolve(annotation)
        result = RenderResult(annotation=annotation, provider=provider)

        error = await self._attempt(provider, context, result)
        if error is None:
            return result

        if provider.is_default or not self.config.fallback_enabled:
            result.error = error
            return result

        logger.info("Falling back to '%s' for %s", self.registry.default.id, annotation.key)
        fallback = self.registry.default
        result.provider = fallback

        result.error = await self._attempt(fallback, context, result)
        if result.error is not None:
            logger.error("Default provider failed for %s; giving up", annotation.key)
        return result

    async def _attempt(self, provider: AnnotationProvider, context: RenderContext,
                       result: RenderResult) -> Optional[ProviderRenderError]:
        result.attempted.append(provider.id)
        try:
            await _call(provider.render, context)
        except Exception as e:
            error = ProviderRenderError(provider.id, context.annotation.key, e)
            logger.error("%s", error, exc_info=True)
            return error
        return None

    async def request_overlay(self, provider: AnnotationProvider,
                              context: RenderContext) -> Optional[str]:
        """
        Ask a provider for overlay HTML.

        Returns:
            The HTML, or None if the provider has no overlay or failed
        """
        if not provider.wants_overlay:
            return None
        try:
            html = await _call(provider.create_overlay, context)
        except Exception as e:
            logger.error(
                "Provider '%s' failed to build overlay for %s: %r",
                provider.id, context.annotation.key, e,
            )
            return None
        return html or None
