"""
Redis caching for event listings.

CACHING STRATEGY
================

What we cache:
  - Serialized event listing responses, one key per filter combination
  - Key pattern: "events:list:date={date}&mode={mode}"

Invalidation:
  - Creating an event deletes every "events:list:*" key (SCAN + DELETE)
  - TTL expiry (REDIS_CACHE_TTL) as a safety net

Bookings do not touch the listing, so they never invalidate it.

Redis is optional. When it is disabled or unreachable every function here
degrades to a no-op and reads go straight to the database.
"""

import json
from typing import Optional

import redis.asyncio as redis

from devevent.core.config import get_settings
from devevent.core.logging import get_logger
from devevent.core.metrics import record_cache_operation

logger = get_logger(__name__)

_redis_client: Optional[redis.Redis] = None

LIST_PREFIX = "events:list:"


async def get_redis() -> Optional[redis.Redis]:
    """Get or create the Redis connection. Returns None if Redis is disabled."""
    global _redis_client
    settings = get_settings()

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_event_list_key(date: Optional[str] = None, mode: Optional[str] = None) -> str:
    return f"{LIST_PREFIX}date={date or '*'}&mode={mode or '*'}"


async def get_cached_events(date: Optional[str] = None, mode: Optional[str] = None) -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

    key = make_event_list_key(date, mode)
    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data is None:
        logger.debug("cache_miss", key=key)
        return None
    logger.debug("cache_hit", key=key)
    return json.loads(data)


async def set_cached_events(
    events: list,
    date: Optional[str] = None,
    mode: Optional[str] = None,
) -> None:
    client = await get_redis()
    if not client:
        return

    settings = get_settings()
    key = make_event_list_key(date, mode)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(events, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """Delete every cached event listing."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
