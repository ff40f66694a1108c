"""Top-stories refresh job.

Walks the HN best-stories ranking, keeps the first DESIRED_NUM_STORIES
items that pass the editorial filters, persists each accepted story as
soon as it is chosen, and finally replaces the top-stories pointer.

Any upstream failure aborts before the pointer write, so the previous
pointer stays authoritative. Story records are always written before
the pointer that names them.
"""

from __future__ import annotations

import logging

from redis.exceptions import RedisError

from topstories.errors import HTTPError
from topstories.schemas import HNItem, Story
from topstories.services.clock import current_time
from topstories.services.hn_client import HackerNewsClient, get_hn_client
from topstories.stores.redis import get_current_top_stories, set_current_top_stories, set_story

logger = logging.getLogger("uvicorn.error")

DESIRED_NUM_STORIES = 3
MAX_STORY_AGE = 172800  # 2 days
MIN_UPDATE_INTERVAL = 600  # 10 minutes, manual trigger only


def skip_reason(item: HNItem, now: int) -> str | None:
    """Return why an item should be skipped, or None to accept it.

    Filters run in order and stop at the first match.
    """
    if item.type != "story":
        return "not story"
    if item.dead or item.deleted:
        return "dead or deleted"
    if item.title.lower().startswith("ask hn:"):
        return "ask hn"
    if now - item.time > MAX_STORY_AGE:
        return "too old"
    return None


async def refresh_top_stories(
    *,
    client: HackerNewsClient | None = None,
    now: int | None = None,
) -> list[int]:
    """Recompute and replace the current top stories.

    Used directly by the scheduled trigger (no rate limit).

    Returns:
        Accepted story ids in rank order (possibly fewer than desired).

    Raises:
        HNError: If the ranking or any inspected item could not be fetched
            or validated. Nothing is replaced in that case.
    """
    now = current_time() if now is None else now
    hn = client or get_hn_client()

    accepted: list[int] = []
    for item_id in await hn.best_stories():
        item = await hn.item(item_id)
        reason = skip_reason(item, now)
        if reason is not None:
            logger.info(f"[refresh] skipping item id={item.id} reason={reason} title={item.title!r}")
            continue

        logger.info(f"[refresh] accepting item id={item.id} title={item.title!r}")
        await set_story(Story(id=item.id, title=item.title, by=item.by, time=item.time))
        accepted.append(item.id)
        if len(accepted) >= DESIRED_NUM_STORIES:
            break

    await set_current_top_stories(accepted, now)
    logger.info(f"[refresh] done stories={accepted} refreshed_at={now}")
    return accepted


async def refresh_if_stale(
    *,
    client: HackerNewsClient | None = None,
    now: int | None = None,
) -> list[int]:
    """Manual refresh, refused if the pointer is younger than MIN_UPDATE_INTERVAL.

    A missing or unreadable pointer, or a failed read of it, counts as
    "never refreshed".

    Raises:
        HTTPError 429: If the last refresh was too recent.
    """
    now = current_time() if now is None else now
    last_refreshed = 0
    try:
        last_refreshed = (await get_current_top_stories()).refreshed_at
    except (HTTPError, RedisError):
        # probably never refreshed
        logger.info("[update] no readable previous pointer, refreshing", exc_info=True)

    if now - last_refreshed <= MIN_UPDATE_INTERVAL:
        raise HTTPError.too_many_requests("last updated quite recently, refusing to update")

    return await refresh_top_stories(client=client, now=now)
