"""Semi-fresh story stats (score, comment count).

Flow for get_stats(item_id):
1. Read {ts, stats} from Redis
2. Younger than STALE_THRESHOLD -> return it, nothing to persist
3. Stale or missing -> fetch the item from the HN API
   - success: return fresh stats plus a task that writes them back
   - failure: return stale stats if there were any, else re-raise

The write-back task is handed to the caller, which must schedule it
outside the response path. At most one HN call per item per threshold
window under steady traffic.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging

from pydantic import ValidationError

from topstories.schemas import CachedStats, StoryStats
from topstories.services.clock import current_time
from topstories.services.hn_client import HackerNewsClient, HNError, get_hn_client
from topstories.stores.redis import get_item_stats_cache, set_item_stats_cache

logger = logging.getLogger("uvicorn.error")

STALE_THRESHOLD = 600  # 10 minutes

RefreshTask = Callable[[], Awaitable[None]]


async def _noop() -> None:
    return None


def _persist_task(item_id: int, cached: CachedStats) -> RefreshTask:
    async def persist() -> None:
        # Single attempt; the next stale read retries naturally.
        try:
            await set_item_stats_cache(item_id, cached)
        except Exception:
            logger.exception(f"semi_fresh_stats:persist_failed item_id={item_id}")

    return persist


async def get_stats(
    item_id: int,
    *,
    client: HackerNewsClient | None = None,
    now: int | None = None,
) -> tuple[StoryStats, RefreshTask]:
    """Get stats for an item, tolerating bounded staleness.

    Args:
        item_id: HN item id.
        client: HN client (defaults to the process-wide one).
        now: Current epoch seconds (defaults to wall clock).

    Returns:
        (stats, refresh_task). Awaiting refresh_task persists freshly fetched
        stats; it is a no-op when nothing needs writing.

    Raises:
        HNError: If the HN fetch failed and no cached stats exist.
        ValidationError: If upstream counts are out of range and no cached
            stats exist.
    """
    now = current_time() if now is None else now
    cached = await get_item_stats_cache(item_id)

    fallback: StoryStats | None = None
    if cached is not None:
        age = now - cached.ts
        if age < STALE_THRESHOLD:
            logger.info(f"semi_fresh_stats:hit item_id={item_id}")
            return cached.stats, _noop
        logger.info(f"semi_fresh_stats:stale item_id={item_id} age={age}")
        fallback = cached.stats
    else:
        logger.info(f"semi_fresh_stats:miss item_id={item_id}")

    hn = client or get_hn_client()
    try:
        item = await hn.item(item_id)
        stats = StoryStats(score=item.score or 0, descendants=item.descendants or 0)
    except (HNError, ValidationError):
        if fallback is not None:
            logger.warning(f"semi_fresh_stats:fallback item_id={item_id}", exc_info=True)
            return fallback, _noop
        raise

    return stats, _persist_task(item_id, CachedStats(ts=now, stats=stats))
