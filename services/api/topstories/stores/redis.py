"""Redis store for stories, stats and the top-stories pointer.

Key layout (string keys, JSON values):
- current-top-stories: [ids, timestamp], no expiry
- story:<id>: Story record, 7 days
- item-stats:<id>: {ts, stats}, 7 days

The store is last-write-wins per key with no cross-key transactions, so
writers persist story records before the pointer that names them.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError
import redis.asyncio as redis

from topstories.errors import HTTPError
from topstories.schemas import CachedStats, Story, TopStoriesPointer
from topstories.settings import get_settings

# TTL constants (in seconds)
TTL_STORY = 604800  # 7 days
TTL_ITEM_STATS = 604800  # 7 days, safety bound only (freshness is decided by ts)

# Keys
KEY_CURRENT_TOP_STORIES = "current-top-stories"
PREFIX_STORY = "story:"
PREFIX_ITEM_STATS = "item-stats:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found (or expired).
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


async def cache_put(key: str, value: str) -> None:
    """Set value without expiry, replacing whatever was there."""
    await _get_redis().set(key, value)


async def cache_set_json(key: str, value: Any, ttl: int | None) -> None:
    """Set JSON value in cache; ``ttl=None`` stores it without expiry."""
    payload = json.dumps(value)
    if ttl is None:
        await cache_put(key, payload)
    else:
        await cache_set(key, payload, ttl)


# ============================================================
# Top-stories pointer
# ============================================================


async def get_current_top_stories() -> TopStoriesPointer:
    """Load the current top-stories pointer.

    Raises:
        HTTPError 503: If no pointer was ever written.
        HTTPError 500: If the stored pointer cannot be decoded.
    """
    raw = await cache_get(KEY_CURRENT_TOP_STORIES)
    if not raw:
        raise HTTPError.service_unavailable("no current top stories")
    try:
        return TopStoriesPointer.model_validate_json(raw)
    except ValidationError:
        raise HTTPError.server_error("corrupt top stories data")


async def set_current_top_stories(story_ids: list[int], refreshed_at: int) -> None:
    """Replace the pointer in a single write."""
    pointer = TopStoriesPointer(story_ids=story_ids, refreshed_at=refreshed_at)
    await cache_put(KEY_CURRENT_TOP_STORIES, pointer.model_dump_json())


# ============================================================
# Stories
# ============================================================


async def get_story(story_id: int) -> Story:
    """Load immutable story metadata.

    Raises:
        HTTPError 500: If the record is missing (pointer/story invariant
            violated) or corrupt.
    """
    raw = await cache_get(f"{PREFIX_STORY}{story_id}")
    if not raw:
        raise HTTPError.server_error("story unavailable")
    try:
        return Story.model_validate_json(raw)
    except ValidationError:
        raise HTTPError.server_error("corrupt story data")


async def set_story(story: Story) -> None:
    """Persist story metadata (TTL 7 days)."""
    await cache_set(f"{PREFIX_STORY}{story.id}", story.model_dump_json(), TTL_STORY)


# ============================================================
# Item stats cache
# ============================================================


async def get_item_stats_cache(item_id: int) -> CachedStats | None:
    """Get cached stats for an item; undecodable entries read as a miss."""
    raw = await cache_get(f"{PREFIX_ITEM_STATS}{item_id}")
    if not raw:
        return None
    try:
        return CachedStats.model_validate_json(raw)
    except ValidationError:
        logger.warning(f"Discarding undecodable stats cache entry for item {item_id}")
        return None


async def set_item_stats_cache(item_id: int, cached: CachedStats) -> None:
    """Cache stats for an item (TTL 7 days)."""
    await cache_set_json(f"{PREFIX_ITEM_STATS}{item_id}", cached.model_dump(), TTL_ITEM_STATS)
