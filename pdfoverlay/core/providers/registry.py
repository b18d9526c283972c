"""
Ordered registry of annotation providers.
"""
import logging
from typing import Dict, List, Optional

from ..annotations.models import OverlayAnnotation
from ..errors import ProviderNotFoundError
from .default import DefaultProvider
from .models import DEFAULT_PROVIDER_ID, AnnotationProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Holds the providers available to a viewer.

    Registration and activation are separate: an inactive provider stays
    registered but is skipped during resolution. The ``default`` provider is
    always present, always active, and is the resolution of last resort.

    Resolution order is explicit priority (highest first), ties broken by
    registration order.
    """

    def __init__(self, default: Optional[AnnotationProvider] = None):
        self._default = default or DefaultProvider().as_provider()
        if self._default.id != DEFAULT_PROVIDER_ID:
            raise ValueError(
                f"Default provider must use id '{DEFAULT_PROVIDER_ID}', got '{self._default.id}'"
            )

        self._providers: Dict[str, AnnotationProvider] = {}
        self._active: Dict[str, bool] = {}
        self._sequence: Dict[str, int] = {}
        self._next_sequence = 0

        self._add(self._default, active=True)

    def _add(self, provider: AnnotationProvider, active: bool) -> None:
        if provider.id not in self._sequence:
            self._sequence[provider.id] = self._next_sequence
            self._next_sequence += 1
        self._providers[provider.id] = provider
        self._active[provider.id] = active

    # ===== Mutation =====

    def register(self, provider: AnnotationProvider, active: bool = True) -> bool:
        """
        Register a provider.

        Re-registering an existing id replaces the provider but keeps its
        place in registration order.

        Args:
            provider: Provider to add
            active: Initial activation state

        Returns:
            True if the provider was registered
        """
        if provider.id == DEFAULT_PROVIDER_ID:
            logger.warning("Refusing to replace the '%s' provider", DEFAULT_PROVIDER_ID)
            return False

        if provider.id in self._providers:
            logger.info("Replacing provider '%s'", provider.id)

        self._add(provider, active)
        logger.debug("Registered provider %r (active=%s)", provider, active)
        return True

    def unregister(self, provider_id: str) -> bool:
        """
        Remove a provider.

        Returns:
            True if a provider was removed; False for ``default`` or an
            unknown id, in which case nothing changes
        """
        if provider_id == DEFAULT_PROVIDER_ID:
            logger.warning("The '%s' provider cannot be unregistered", DEFAULT_PROVIDER_ID)
            return False

        if provider_id not in self._providers:
            logger.warning("%s", ProviderNotFoundError(provider_id))
            return False

        del self._providers[provider_id]
        del self._active[provider_id]
        del self._sequence[provider_id]
        return True

    def set_active(self, provider_id: str, active: bool) -> bool:
        """
        Set a provider's activation flag.

        Returns:
            True if the flag was applied
        """
        if provider_id not in self._providers:
            logger.warning("%s", ProviderNotFoundError(provider_id))
            return False

        if provider_id == DEFAULT_PROVIDER_ID and not active:
            logger.warning("The '%s' provider cannot be deactivated", DEFAULT_PROVIDER_ID)
            return False

        self._active[provider_id] = active
        return True

    def toggle(self, provider_id: str) -> Optional[bool]:
        """
        Flip a provider's activation flag.

        Returns:
            The new state, or None if the flag could not be changed
        """
        if provider_id not in self._providers:
            logger.warning("%s", ProviderNotFoundError(provider_id))
            return None

        new_state = not self._active[provider_id]
        if not self.set_active(provider_id, new_state):
            return None
        return new_state

    def reset(self) -> None:
        """Drop every provider except ``default``."""
        self._providers.clear()
        self._active.clear()
        self._sequence.clear()
        self._next_sequence = 0
        self._add(self._default, active=True)

    # ===== Introspection =====

    @property
    def default(self) -> AnnotationProvider:
        return self._default

    def get(self, provider_id: str) -> Optional[AnnotationProvider]:
        return self._providers.get(provider_id)

    def get_or_raise(self, provider_id: str) -> AnnotationProvider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider

    def is_active(self, provider_id: str) -> bool:
        return self._active.get(provider_id, False)

    def list_registered(self) -> List[AnnotationProvider]:
        """All providers in registration order."""
        return sorted(self._providers.values(), key=lambda p: self._sequence[p.id])

    def list_active(self) -> List[AnnotationProvider]:
        """Active providers in resolution order, ``default`` last."""
        return self._candidates() + [self._default]

    def _candidates(self) -> List[AnnotationProvider]:
        active = [
            p for p in self._providers.values()
            if self._active[p.id] and not p.is_default
        ]
        return sorted(active, key=lambda p: (-p.priority, self._sequence[p.id]))

    # ===== Resolution =====

    def resolve(self, annotation: OverlayAnnotation) -> AnnotationProvider:
        """
        Pick the provider for an annotation.

        The first active, non-default provider in resolution order whose
        ``can_handle`` returns True wins; otherwise ``default``.
        """
        for provider in self._candidates():
            try:
                if provider.can_handle(annotation):
                    return provider
            except Exception as e:
                logger.warning(
                    "Provider '%s' can_handle failed for %s: %r",
                    provider.id, annotation.key, e,
                )
        return self._default

    def __contains__(self, provider_id: str) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)
