"""Shared fixtures: in-memory Redis and a mock HN API."""

import asyncio
from collections.abc import Callable
import json
from typing import Any

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from topstories.services import hn_client as hn_client_module
from topstories.services.hn_client import HackerNewsClient
from topstories.stores import redis as redis_store

NOW = 1_700_000_000


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the store module."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail_writes = False
        self.fail_reads = False
        # keys in write order, to check story records land before the pointer
        self.writes: list[str] = []
        # when set, reads of matching keys wait here until all of them are in flight
        self.read_barrier: asyncio.Barrier | None = None
        self.barrier_prefixes: tuple[str, ...] = ()

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise RedisConnectionError("redis read timed out")
        if self.read_barrier is not None and key.startswith(self.barrier_prefixes):
            await asyncio.wait_for(self.read_barrier.wait(), timeout=1.0)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise ConnectionError("redis unavailable")
        self.data[key] = value
        self.ttls[key] = None
        self.writes.append(key)
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        if self.fail_writes:
            raise ConnectionError("redis unavailable")
        self.data[key] = value
        self.ttls[key] = ttl
        self.writes.append(key)
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_store, "_redis", fake)
    return fake


class FakeHN:
    """Mock Hacker News API: serves configured items and counts requests."""

    def __init__(self) -> None:
        self.best: Any = []
        self.items: dict[int, Any] = {}
        self.failing: set[int] = set()
        self.best_status = 200
        self.calls: list[str] = []

    def story(self, item_id: int, **overrides: Any) -> dict[str, Any]:
        item = {
            "by": f"user{item_id}",
            "descendants": 10,
            "id": item_id,
            "kids": [],
            "score": 100,
            "time": NOW - 100,
            "title": f"Story {item_id}",
            "type": "story",
            "url": f"https://example.com/{item_id}",
        }
        item.update(overrides)
        self.items[item_id] = item
        return item

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        if path == "/v0/beststories.json":
            return httpx.Response(self.best_status, json=self.best)
        if path.startswith("/v0/item/"):
            item_id = int(path.removeprefix("/v0/item/").removesuffix(".json"))
            if item_id in self.failing:
                return httpx.Response(500, text="boom")
            return httpx.Response(200, content=json.dumps(self.items.get(item_id)))
        return httpx.Response(404)

    def item_calls(self, item_id: int) -> int:
        return self.calls.count(f"/v0/item/{item_id}.json")


@pytest.fixture
def fake_hn() -> FakeHN:
    return FakeHN()


@pytest.fixture
async def hn_client(fake_hn: FakeHN, monkeypatch: pytest.MonkeyPatch):
    """HN client backed by FakeHN, also installed as the process-wide client."""
    client = HackerNewsClient(
        base_url="https://hn.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_hn.handler)),
    )
    monkeypatch.setattr(hn_client_module, "_client", client)
    yield client
    await client.close()


@pytest.fixture
def frozen_time(monkeypatch: pytest.MonkeyPatch) -> Callable[[int], None]:
    """Pin current_time() in every service that reads the clock."""
    from topstories.services import refresh, stats_cache

    def set_now(value: int) -> None:
        monkeypatch.setattr(refresh, "current_time", lambda: value)
        monkeypatch.setattr(stats_cache, "current_time", lambda: value)

    set_now(NOW)
    return set_now
