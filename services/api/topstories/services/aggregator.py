"""Read view for GET /top-stories.json.

Loads the pointer, then per story concurrently loads the stored metadata
and semi-fresh stats. Cache write-backs are returned to the caller
instead of awaited so the response never waits on them.
"""

from __future__ import annotations

import asyncio

from topstories.schemas import StoryView, TopStoriesResponse
from topstories.services.hn_client import HackerNewsClient
from topstories.services.stats_cache import RefreshTask, get_stats
from topstories.stores.redis import get_current_top_stories, get_story


async def _story_view(
    story_id: int,
    client: HackerNewsClient | None,
) -> tuple[StoryView, RefreshTask]:
    story, (stats, refresh) = await asyncio.gather(
        get_story(story_id),
        get_stats(story_id, client=client),
    )
    view = StoryView(
        **story.model_dump(),
        score=stats.score,
        descendants=stats.descendants,
    )
    return view, refresh


async def get_top_stories_view(
    *,
    client: HackerNewsClient | None = None,
) -> tuple[TopStoriesResponse, list[RefreshTask]]:
    """Build the combined top-stories view.

    Returns:
        (response, refresh_tasks). Stories keep the pointer's rank order;
        refresh_tasks must be run after the response is sent.

    Raises:
        HTTPError 503: If no refresh has ever completed.
        HTTPError 500: If a referenced story record is missing or corrupt.
        HNError: If stats for a story could not be fetched and none are cached.
    """
    pointer = await get_current_top_stories()
    results = await asyncio.gather(
        *(_story_view(story_id, client) for story_id in pointer.story_ids)
    )
    response = TopStoriesResponse(
        stories=[view for view, _ in results],
        when_refreshed=pointer.refreshed_at,
    )
    return response, [refresh for _, refresh in results]
