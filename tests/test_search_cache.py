# tests/test_search_cache.py
"""
Unit tests for the Redis-based search cache.
"""
import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from services.search_cache import SearchCache

REDIS_URL = "redis://localhost:6379"


@pytest.fixture
def mock_redis_client():
    mock_client = AsyncMock()
    mock_client.ping = AsyncMock(return_value=True)
    mock_client.get = AsyncMock(return_value=None)
    mock_client.setex = AsyncMock(return_value=True)
    mock_client.close = AsyncMock()
    return mock_client


@pytest.fixture
def patched_redis(mock_redis_client):
    with patch("services.search_cache.redis") as mock_redis:
        mock_redis.from_url = MagicMock(return_value=mock_redis_client)
        yield mock_redis


@pytest.mark.asyncio
async def test_disabled_without_redis_url():
    with patch.dict("os.environ", {}, clear=True):
        cache = SearchCache()

    assert not cache.enabled
    assert await cache.get("search:uploads:vision:abc") is None
    assert await cache.set("search:uploads:vision:abc", {"items": []}) is False


def test_keys_are_deterministic():
    key = SearchCache.make_key("uploads", "vision", "Dry Eye ", None)
    assert key == SearchCache.make_key("uploads", "vision", "dry eye", "")
    assert key.startswith("search:uploads:vision:")
    assert len(key.rsplit(":", 1)[1]) == 16

    assert key != SearchCache.make_key("uploads", "vision", "dry eye", "PAGE2")
    assert key != SearchCache.make_key("search", "vision", "dry eye", None)
    assert key != SearchCache.make_key("uploads", "other", "dry eye", None)


@pytest.mark.asyncio
async def test_miss(mock_redis_client, patched_redis):
    cache = SearchCache(redis_url=REDIS_URL)
    assert await cache.get("k") is None
    mock_redis_client.get.assert_called_once_with("k")


@pytest.mark.asyncio
async def test_hit(mock_redis_client, patched_redis):
    page = {"items": [{"id": "v1"}], "nextPageToken": "P2"}
    mock_redis_client.get.return_value = json.dumps(page)

    cache = SearchCache(redis_url=REDIS_URL)
    assert await cache.get("k") == page


@pytest.mark.asyncio
async def test_set_uses_ttl(mock_redis_client, patched_redis):
    cache = SearchCache(redis_url=REDIS_URL, ttl_seconds=120)
    assert await cache.set("k", {"items": []}) is True
    mock_redis_client.setex.assert_called_once_with("k", timedelta(seconds=120), json.dumps({"items": []}))


@pytest.mark.asyncio
async def test_connection_failure_disables_cache(mock_redis_client, patched_redis):
    mock_redis_client.ping.side_effect = ConnectionError("refused")

    cache = SearchCache(redis_url=REDIS_URL)
    assert await cache.get("k") is None
    assert not cache.enabled
    assert await cache.set("k", {}) is False
    patched_redis.from_url.assert_called_once()


@pytest.mark.asyncio
async def test_redis_errors_degrade_gracefully(mock_redis_client, patched_redis):
    mock_redis_client.get.side_effect = Exception("timeout")
    mock_redis_client.setex.side_effect = Exception("timeout")

    cache = SearchCache(redis_url=REDIS_URL)
    assert await cache.get("k") is None
    assert await cache.set("k", {}) is False


@pytest.mark.asyncio
async def test_close(mock_redis_client, patched_redis):
    cache = SearchCache(redis_url=REDIS_URL)
    await cache.get("k")
    await cache.close()
    mock_redis_client.close.assert_called_once()
    assert cache._redis_client is None
