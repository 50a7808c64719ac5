from alchemy_provider.cache.backends import ArrayCache, Cache, MemcacheCache, RedisCache
from alchemy_provider.cache.manager import CacheManager
from alchemy_provider.cache.providers import (
    ArrayProvider,
    CacheProvider,
    MemcacheProvider,
    NullProvider,
    RedisProvider,
)

__all__ = [
    "ArrayCache",
    "ArrayProvider",
    "Cache",
    "CacheManager",
    "CacheProvider",
    "MemcacheCache",
    "MemcacheProvider",
    "NullProvider",
    "RedisCache",
    "RedisProvider",
]
