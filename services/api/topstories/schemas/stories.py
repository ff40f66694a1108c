"""Schemas for stories, their cached stats and the top-stories pointer."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


class Story(BaseModel):
    """Immutable story metadata, written once by the refresh job."""

    id: int
    title: str
    by: str
    time: int


class StoryStats(BaseModel):
    """Volatile per-story numbers, served semi-fresh."""

    score: int = Field(default=0, ge=0)
    descendants: int = Field(default=0, ge=0)


class CachedStats(BaseModel):
    """Stats as stored under ``item-stats:<id>``, stamped with capture time."""

    ts: int
    stats: StoryStats


class TopStoriesPointer(BaseModel):
    """Ranked story ids plus when they were computed.

    Stored as a single JSON value ``[ids, timestamp]`` so that readers see
    either the previous pointer or the new one, never a mix.
    """

    story_ids: list[int] = Field(default_factory=list)
    refreshed_at: int

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError("expected [ids, timestamp]")
            return {"story_ids": data[0], "refreshed_at": data[1]}
        return data

    @model_serializer
    def _to_pair(self) -> list[Any]:
        return [list(self.story_ids), self.refreshed_at]


class StoryView(Story):
    """A story joined with its semi-fresh stats."""

    score: int
    descendants: int


class TopStoriesResponse(BaseModel):
    """Response payload for GET /top-stories.json."""

    stories: list[StoryView]
    when_refreshed: int


class HNItem(BaseModel):
    """Item record as returned by the Hacker News API."""

    model_config = ConfigDict(extra="ignore")

    by: str
    descendants: int | None = None
    id: int
    kids: list[int] | None = None
    score: int
    time: int
    title: str
    type: str
    text: str | None = None
    url: str | None = None
    deleted: bool | None = None
    dead: bool | None = None
    parent: int | None = None
