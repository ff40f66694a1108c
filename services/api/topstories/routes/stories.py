"""Public story endpoints.

GET /top-stories.json - current top stories with semi-fresh stats
GET /update - manual, rate-limited refresh

Routers are thin: call services for business logic.
"""

import logging

from fastapi import APIRouter, BackgroundTasks

from topstories.errors import HTTPError
from topstories.schemas import ErrorResponse, TopStoriesResponse, UpdateResponse
from topstories.services.aggregator import get_top_stories_view
from topstories.services.refresh import refresh_if_stale

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get(
    "/top-stories.json",
    response_model=TopStoriesResponse,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def top_stories(background_tasks: BackgroundTasks) -> TopStoriesResponse:
    """Get the current top stories joined with their score and comment count.

    Stats cache write-backs run after the response has been sent.
    """
    try:
        view, refresh_tasks = await get_top_stories_view()
    except HTTPError:
        raise
    except Exception:
        logger.exception("[top-stories] failed")
        raise HTTPError.server_error("could not load top stories")

    for task in refresh_tasks:
        background_tasks.add_task(task)
    return view


@router.get(
    "/update",
    response_model=UpdateResponse,
    responses={429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update() -> UpdateResponse:
    """Trigger a refresh unless the last one was under 10 minutes ago."""
    try:
        await refresh_if_stale()
    except HTTPError:
        raise
    except Exception:
        logger.exception("[update] refresh failed")
        raise HTTPError.server_error("refresh failed")
    return UpdateResponse(ok=True)
