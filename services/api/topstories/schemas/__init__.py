"""Pydantic schemas for API request/response validation."""

from topstories.schemas.common import ErrorResponse, UpdateResponse
from topstories.schemas.stories import (
    CachedStats,
    HNItem,
    Story,
    StoryStats,
    StoryView,
    TopStoriesPointer,
    TopStoriesResponse,
)

__all__ = [
    "ErrorResponse",
    "UpdateResponse",
    "CachedStats",
    "HNItem",
    "Story",
    "StoryStats",
    "StoryView",
    "TopStoriesPointer",
    "TopStoriesResponse",
]
