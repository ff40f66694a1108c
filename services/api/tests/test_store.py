import pytest

from topstories.errors import HTTPError
from topstories.schemas import Story, TopStoriesPointer
from topstories.stores.redis import (
    get_current_top_stories,
    get_story,
    set_current_top_stories,
    set_story,
)


def test_pointer_serializes_as_ids_and_timestamp_pair():
    pointer = TopStoriesPointer(story_ids=[3, 1], refreshed_at=99)
    assert pointer.model_dump() == [[3, 1], 99]
    assert TopStoriesPointer.model_validate_json("[[3,1],99]") == pointer


def test_pointer_rejects_wrong_arity():
    with pytest.raises(ValueError):
        TopStoriesPointer.model_validate([[1], 2, 3])


@pytest.mark.asyncio
async def test_missing_pointer_is_service_unavailable(fake_redis):
    with pytest.raises(HTTPError) as exc_info:
        await get_current_top_stories()
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_pointer_is_stored_without_expiry(fake_redis):
    await set_current_top_stories([5], 10)
    assert fake_redis.ttls["current-top-stories"] is None
    assert (await get_current_top_stories()).story_ids == [5]


@pytest.mark.asyncio
async def test_missing_story_is_server_error(fake_redis):
    with pytest.raises(HTTPError) as exc_info:
        await get_story(1)
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "story unavailable"


@pytest.mark.asyncio
async def test_corrupt_story_is_server_error(fake_redis):
    fake_redis.data["story:1"] = "{oops"
    with pytest.raises(HTTPError) as exc_info:
        await get_story(1)
    assert exc_info.value.message == "corrupt story data"


@pytest.mark.asyncio
async def test_story_round_trip(fake_redis):
    story = Story(id=1, title="t", by="b", time=3)
    await set_story(story)
    assert await get_story(1) == story


@pytest.mark.asyncio
async def test_uninitialized_redis_raises_runtime_error():
    with pytest.raises(RuntimeError):
        await get_story(1)
