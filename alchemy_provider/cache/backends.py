"""Result cache backends."""

import pickle
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

_MISSING = object()


class Cache(ABC):
    """Key/value store with optional per-entry time-to-live in seconds."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any: ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int | None = None) -> None: ...

    @abstractmethod
    def contains(self, key: str) -> bool: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    def remember(self, key: str, ttl: int | None, callback: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        value = self.get(key, _MISSING)
        if value is _MISSING:
            value = callback()
            self.set(key, value, ttl)
        return value


def _expires_at(key: str, entry: tuple[Any, int | None], now: float) -> float:
    ttl = entry[1]
    return now + ttl if ttl else float("inf")


class ArrayCache(Cache):
    """In-process cache, lost when the process exits.

    Args:
        maxsize: Entries kept before the least recently used ones are evicted.
        timer: Clock used for expiry.
    """

    def __init__(self, maxsize: int = 1024, timer: Callable[[], float] = time.monotonic):
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._cache.get(key)
        return default if entry is None else entry[0]

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        with self._lock:
            self._cache[key] = (value, ttl)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class RedisCache(Cache):
    """Redis-backed cache. Keys live under ``namespace`` so ``clear`` leaves other keys alone."""

    def __init__(self, client: Any, namespace: str = "alchemy:"):
        self.client = client
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.client.get(self._key(key))
        return default if raw is None else pickle.loads(raw)  # noqa: S301

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self.client.set(self._key(key), pickle.dumps(value), ex=ttl or None)

    def contains(self, key: str) -> bool:
        return bool(self.client.exists(self._key(key)))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))

    def clear(self) -> None:
        keys = list(self.client.scan_iter(match=f"{self.namespace}*"))
        if keys:
            self.client.delete(*keys)


class MemcacheCache(Cache):
    """Memcached-backed cache."""

    def __init__(self, client: Any):
        self.client = client

    def get(self, key: str, default: Any = None) -> Any:
        value = self.client.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self.client.set(key, value, expire=ttl or 0)

    def contains(self, key: str) -> bool:
        return self.client.get(key) is not None

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def clear(self) -> None:
        self.client.flush_all()
