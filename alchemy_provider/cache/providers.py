"""Build cache backends from the ``orm.cache.<provider>`` config sections."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from alchemy_provider.cache.backends import ArrayCache, Cache, MemcacheCache, RedisCache


class CacheProvider(ABC):
    name: str

    def is_appropriate(self, provider: str | None) -> bool:
        return provider == self.name

    @abstractmethod
    def make(self, config: Mapping[str, Any] | None = None) -> Cache | None: ...


class ArrayProvider(CacheProvider):
    name = "array"

    def make(self, config: Mapping[str, Any] | None = None) -> Cache:
        config = config or {}
        return ArrayCache(maxsize=int(config.get("maxsize", 1024)))


class RedisProvider(CacheProvider):
    name = "redis"

    def make(self, config: Mapping[str, Any] | None = None) -> Cache:
        import redis

        config = config or {}
        client = redis.Redis(
            host=config.get("host", "127.0.0.1"),
            port=int(config.get("port", 6379)),
            db=int(config.get("database", 0)),
            password=config.get("password"),
        )
        return RedisCache(client, namespace=config.get("namespace", "alchemy:"))


class MemcacheProvider(CacheProvider):
    name = "memcache"

    def make(self, config: Mapping[str, Any] | None = None) -> Cache:
        from pymemcache.client.base import Client
        from pymemcache.serde import pickle_serde

        config = config or {}
        client = Client((config.get("host", "127.0.0.1"), int(config.get("port", 11211))), serde=pickle_serde)
        return MemcacheCache(client)


class NullProvider(CacheProvider):
    """No dedicated backend; the ORM falls back to its in-process cache."""

    name = "null"

    def is_appropriate(self, provider: str | None) -> bool:
        return provider is None or provider == self.name

    def make(self, config: Mapping[str, Any] | None = None) -> None:
        return None
