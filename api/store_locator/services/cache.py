from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Optional

from redis import asyncio as aioredis

from store_locator.core.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()


class CacheClient:
    """A thin Redis cache client. Connections are opened lazily by the pool."""

    def __init__(self) -> None:
        self._redis = aioredis.from_url(str(_settings.redis_url), decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        """Gets a value from the cache."""
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Sets a value in the cache with a TTL in seconds."""
        await self._redis.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def ping(self) -> bool:
        """Pings the Redis server to check connectivity."""
        return await self._redis.ping()


_cache = CacheClient()


async def get_redis_client() -> CacheClient:
    """Returns the shared Redis cache client for health checks and other uses."""
    return _cache


async def cached_json(key: str, ttl: Optional[int], producer: Callable[[], Awaitable[Any]]) -> Any:
    """
    Return the JSON value cached under ``key``, or call ``producer`` and cache its result.

    A TTL of 0 or None bypasses the cache entirely. Redis errors are logged and
    never fail the caller.
    """
    if ttl:
        try:
            cached = await _cache.get(key)
            if cached:
                return json.loads(cached)
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)

    result = await producer()

    if ttl:
        try:
            # The producer is responsible for returning a JSON-serializable structure.
            await _cache.set(key, json.dumps(result), ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    return result


async def invalidate(key: str) -> None:
    """Drop a cached value. Redis errors are logged; the entry then expires by TTL."""
    try:
        await _cache.delete(key)
    except Exception as exc:
        logger.warning("Cache invalidation failed for %s: %s", key, exc)


__all__ = ["CacheClient", "cached_json", "get_redis_client", "invalidate"]
