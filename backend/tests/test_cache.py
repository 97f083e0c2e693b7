"""Tests for the cache backends."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from medsafety.core import cache as cache_module
from medsafety.core.cache import (
    InMemoryCache,
    RedisCache,
    create_cache,
    get_cache,
    reset_cache,
    set_cache,
)
from medsafety.core.errors import CacheError


class TestInMemoryCache:
    """Test the process-local backend."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self) -> None:
        cache = InMemoryCache()
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self) -> None:
        cache = InMemoryCache()
        await cache.set("meds", [{"name": "Aspirin"}])
        assert await cache.get("meds") == [{"name": "Aspirin"}]

    @pytest.mark.asyncio
    async def test_get_returns_copy(self) -> None:
        """Test that mutating a stored value does not change the cache."""
        cache = InMemoryCache()
        value = [{"name": "Aspirin"}]
        await cache.set("meds", value)
        value.append({"name": "Warfarin"})

        loaded = await cache.get("meds")
        loaded.append({"name": "Metformin"})

        assert await cache.get("meds") == [{"name": "Aspirin"}]

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        cache = InMemoryCache()
        await cache.set("meds", [])
        await cache.delete("meds")
        await cache.delete("meds")
        assert await cache.get("meds") is None
        assert cache.keys() == []

    @pytest.mark.asyncio
    async def test_ttl_expiry(self) -> None:
        """Test entries disappear once their TTL has passed."""
        cache = InMemoryCache()
        with patch("medsafety.core.cache.time.monotonic", return_value=1000.0):
            await cache.set("meds", [1], ttl=60)
        with patch("medsafety.core.cache.time.monotonic", return_value=1059.0):
            assert await cache.get("meds") == [1]
        with patch("medsafety.core.cache.time.monotonic", return_value=1060.0):
            assert await cache.get("meds") is None
        assert "meds" not in cache.keys()

    @pytest.mark.asyncio
    async def test_unserializable_value(self) -> None:
        cache = InMemoryCache()
        with pytest.raises(CacheError):
            await cache.set("bad", {"value": object()})


class TestRedisCache:
    """Test the Redis backend against a mocked client."""

    def _client(self) -> MagicMock:
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock()
        client.delete = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_set_prefixes_key_and_ttl(self) -> None:
        client = self._client()
        cache = RedisCache(client, prefix="medsafety:")

        await cache.set("medications", [{"id": "1"}], ttl=300)

        client.set.assert_awaited_once_with("medsafety:medications", json.dumps([{"id": "1"}]), ex=300)

    @pytest.mark.asyncio
    async def test_get_decodes_json(self) -> None:
        client = self._client()
        client.get.return_value = '[{"id": "1"}]'
        cache = RedisCache(client, prefix="p:")

        assert await cache.get("medications") == [{"id": "1"}]
        client.get.assert_awaited_once_with("p:medications")

    @pytest.mark.asyncio
    async def test_get_missing_key(self) -> None:
        cache = RedisCache(self._client())
        assert await cache.get("medications") is None

    @pytest.mark.asyncio
    async def test_corrupt_entry(self) -> None:
        client = self._client()
        client.get.return_value = "{not json"
        cache = RedisCache(client)

        with pytest.raises(CacheError):
            await cache.get("medications")

    @pytest.mark.asyncio
    async def test_redis_errors_become_cache_errors(self) -> None:
        client = self._client()
        client.get.side_effect = RedisConnectionError("down")
        client.set.side_effect = RedisConnectionError("down")
        client.delete.side_effect = RedisConnectionError("down")
        cache = RedisCache(client)

        with pytest.raises(CacheError):
            await cache.get("k")
        with pytest.raises(CacheError):
            await cache.set("k", [])
        with pytest.raises(CacheError):
            await cache.delete("k")


class TestCacheFactory:
    """Test backend selection and the singleton accessor."""

    def test_create_memory(self) -> None:
        assert isinstance(create_cache("memory"), InMemoryCache)

    @patch("medsafety.core.cache.get_redis")
    def test_create_redis(self, mock_get_redis: MagicMock) -> None:
        cache = create_cache("redis")
        assert isinstance(cache, RedisCache)
        mock_get_redis.assert_called_once()

    def test_create_unknown(self) -> None:
        with pytest.raises(ValueError):
            create_cache("memcached")

    def test_set_cache_installs_singleton(self) -> None:
        cache = InMemoryCache()
        set_cache(cache)
        assert get_cache() is cache

    @patch("medsafety.core.cache.create_cache")
    def test_get_cache_singleton(self, mock_create: MagicMock) -> None:
        mock_create.return_value = InMemoryCache()
        first = get_cache()
        second = get_cache()
        assert first is second
        mock_create.assert_called_once()

    def test_reset_cache(self) -> None:
        set_cache(InMemoryCache())
        reset_cache()
        assert cache_module._cache is None
