"""
Redis client - cache store for schema column listings.
Challenge: Connection pooling, fail gracefully when Redis is down.
Design: Single client instance; a cache outage only costs an extra schema query.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from admin_panel.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis connection."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def cache_get(key: str) -> Any | None:
    """Get JSON value from cache. Returns None on miss or error (graceful degradation)."""
    try:
        client = await get_redis()
        raw = await client.get(key)
    except Exception as e:
        logger.warning("cache_get failed: key=%r error=%s", key, e)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("cache_get undecodable value: key=%r error=%s", key, e)
        return None


async def cache_set(key: str, value: Any, ttl_seconds: int = 300) -> bool:
    """Set value in cache with TTL. Value is JSON-serialized."""
    try:
        client = await get_redis()
        await client.setex(key, ttl_seconds, json.dumps(value))
        return True
    except Exception as e:
        logger.warning("cache_set failed: key=%r error=%s", key, e)
        return False


async def cache_delete(key: str) -> bool:
    """Invalidate cache key (e.g. after a migration changed a table)."""
    try:
        client = await get_redis()
        await client.delete(key)
        return True
    except Exception as e:
        logger.warning("cache_delete failed: key=%r error=%s", key, e)
        return False
