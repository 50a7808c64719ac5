import logging
from collections.abc import Mapping
from typing import Any

from typing_extensions import Self

from alchemy_provider.cache.backends import Cache
from alchemy_provider.cache.providers import CacheProvider

logger = logging.getLogger("alchemy-provider")


class CacheManager:
    """Select a cache backend by provider name.

    Args:
        config: The ``orm.cache`` section; each provider reads the sub-section named after it.
    """

    def __init__(self, config: Mapping[str, Any] | None = None):
        self.config = dict(config or {})
        self._providers: list[CacheProvider] = []

    @property
    def providers(self) -> list[CacheProvider]:
        return list(self._providers)

    def add(self, provider: CacheProvider) -> Self:
        self._providers.append(provider)
        return self

    def get_cache(self, provider: str | None) -> Cache | None:
        """Build the cache of the first provider accepting ``provider``, or None if none does."""
        for candidate in self._providers:
            if candidate.is_appropriate(provider):
                logger.debug(f"Using cache provider '{candidate.name}'")
                return candidate.make(self.config.get(provider) if provider else None)
        logger.warning(f"Cache provider '{provider}' is not registered, falling back to the default cache")
        return None
