"""Key-value cache used to persist engine collections.

The engine treats cached values as opaque JSON-compatible collections.
Two backends are provided:

- RedisCache: JSON strings stored in Redis with an optional TTL
- InMemoryCache: JSON strings held in a process-local dict (tests, CLI demos)

Both backends serialize on write, so a value read back is always a fresh
copy and never aliases the caller's objects.
"""

from abc import ABC, abstractmethod
import json
import logging
import threading
import time
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from medsafety.core.config import settings
from medsafety.core.errors import CacheError
from medsafety.core.redis import get_redis

logger = logging.getLogger(__name__)


class CacheBackend(ABC):
    """Abstract key-value store consumed by the engine."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or None if absent."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store ``value`` under ``key``, expiring after ``ttl`` seconds if given."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise CacheError(f"Value for cache key '{key}' is not JSON serializable: {e}") from e


def _decode(key: str, raw: str | bytes) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CacheError(f"Corrupt cache entry for key '{key}': {e}") from e


class RedisCache(CacheBackend):
    """Cache backend storing JSON payloads in Redis."""

    def __init__(self, client: Redis, prefix: str = "") -> None:
        self._client = client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(self._key(key))
        except RedisError as e:
            raise CacheError(f"Redis GET failed for '{key}': {e}") from e
        if raw is None:
            return None
        return _decode(key, raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        payload = _encode(key, value)
        try:
            await self._client.set(self._key(key), payload, ex=ttl)
        except RedisError as e:
            raise CacheError(f"Redis SET failed for '{key}': {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except RedisError as e:
            raise CacheError(f"Redis DELETE failed for '{key}': {e}") from e


class InMemoryCache(CacheBackend):
    """Process-local cache backend with monotonic-clock TTL expiry."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float | None]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return _decode(key, payload)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._entries[key] = (_encode(key, value), expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently held (expired entries included until read)."""
        return list(self._entries)


# Singleton instance and lock
_cache: CacheBackend | None = None
_cache_lock = threading.Lock()


def create_cache(backend: str | None = None) -> CacheBackend:
    """Build a cache backend from settings.

    Args:
        backend: "redis" or "memory". Defaults to ``settings.cache_backend``.

    Returns:
        A new CacheBackend instance.
    """
    backend = backend or settings.cache_backend
    if backend == "memory":
        return InMemoryCache()
    if backend == "redis":
        return RedisCache(get_redis(), prefix=settings.cache_key_prefix)
    raise ValueError(f"Unknown cache backend: {backend}")


def get_cache() -> CacheBackend:
    """Get the singleton cache backend."""
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = create_cache()
                logger.info(f"Using {type(_cache).__name__} cache backend")
    return _cache


def set_cache(cache: CacheBackend) -> None:
    """Install a specific cache backend as the singleton."""
    global _cache
    with _cache_lock:
        _cache = cache


def reset_cache() -> None:
    """Reset the singleton instance (for testing)."""
    global _cache
    with _cache_lock:
        _cache = None
