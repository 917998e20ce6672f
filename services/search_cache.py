# services/search_cache.py
"""
Redis-based caching layer for upstream video search pages.
Gracefully degrades when Redis is unavailable.
"""
import hashlib
import json
import logging
import os
from datetime import timedelta
from typing import Any, Dict, Optional

import redis.asyncio as redis

logger = logging.getLogger("wellness-api.cache")

DEFAULT_TTL_SECONDS = 600


class SearchCache:
    """
    Async Redis cache for upstream search pages with graceful degradation.
    """

    def __init__(self, redis_url: Optional[str] = None, ttl_seconds: Optional[int] = None):
        """Initialize cache configuration (lazy - connects on first use)."""
        self._redis_client: Optional[redis.Redis] = None
        self._redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL")
        self._ttl_seconds = ttl_seconds or int(os.getenv("SEARCH_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS))
        self._enabled = bool(self._redis_url)

        if not self._enabled:
            logger.info("Search caching disabled (REDIS_URL not configured)")
            return
        logger.info(f"Search caching enabled with URL: {self._redis_url[:20]}...")

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _get_client(self) -> Optional[redis.Redis]:
        """
        Get or create the Redis client connection.
        Returns None if connection fails; caching stays off afterwards.
        """
        if not self._enabled:
            return None

        if self._redis_client is None:
            try:
                self._redis_client = redis.from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                await self._redis_client.ping()
                logger.info("Redis connection established successfully")
            except Exception as e:
                logger.warning(f"Failed to connect to Redis: {e}")
                self._enabled = False
                self._redis_client = None
                return None

        return self._redis_client

    @staticmethod
    def make_key(endpoint: str, topic: str, query: str, page_token: Optional[str]) -> str:
        """Deterministic key for one upstream page."""
        key_data = f"{endpoint}:{topic}:{query.strip().lower()}:{page_token or ''}"
        key_hash = hashlib.sha256(key_data.encode()).hexdigest()[:16]
        return f"search:{endpoint}:{topic}:{key_hash}"

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a cached upstream page.

        Returns:
            Cached payload or None if not found/error
        """
        client = await self._get_client()
        if client is None:
            return None

        try:
            cached_data = await client.get(key)
            if cached_data:
                logger.debug(f"Cache HIT for key: {key}")
                return json.loads(cached_data)
            logger.debug(f"Cache MISS for key: {key}")
            return None
        except Exception as e:
            logger.warning(f"Cache GET error: {e}")
            return None

    async def set(self, key: str, data: Dict[str, Any]) -> bool:
        """
        Store an upstream page.

        Returns:
            True if cached successfully, False otherwise
        """
        client = await self._get_client()
        if client is None:
            return False

        try:
            await client.setex(key, timedelta(seconds=self._ttl_seconds), json.dumps(data))
            logger.debug(f"Cache SET for key: {key} (TTL: {self._ttl_seconds}s)")
            return True
        except Exception as e:
            logger.warning(f"Cache SET error: {e}")
            return False

    async def close(self):
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.close()
            self._redis_client = None
            logger.info("Redis connection closed")


_cache_instance: Optional[SearchCache] = None


def get_search_cache() -> SearchCache:
    """
    Get the global search cache instance.

    Returns:
        SearchCache singleton
    """
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = SearchCache()
    return _cache_instance
