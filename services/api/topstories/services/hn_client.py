"""Hacker News API client.

Read-only access to the ranked best-stories list and individual item
records. Payloads are validated before they leave this module: callers
get typed records or an ``HNError``, never half-parsed data.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from topstories.schemas import HNItem
from topstories.settings import get_settings

logger = logging.getLogger("uvicorn.error")

_STORY_IDS = TypeAdapter(list[int])


class HNError(RuntimeError):
    """Upstream request failed (transport error or non-200 response)."""


class HNShapeError(HNError):
    """Upstream payload did not have the expected shape."""


def parse_item(data: Any) -> HNItem:
    """Validate a raw item payload into an ``HNItem``.

    Raises:
        HNShapeError: If required fields are missing or mistyped. The API
            answers unknown ids with ``null``, which lands here too.
    """
    try:
        return HNItem.model_validate(data)
    except ValidationError as e:
        raise HNShapeError(f"unknown data shape returned from hn api for item: {e}") from e


def parse_story_ids(data: Any) -> list[int]:
    """Validate the ranked id list; it must be a non-empty list of ints."""
    try:
        ids = _STORY_IDS.validate_python(data, strict=True)
    except ValidationError as e:
        raise HNShapeError(f"unknown data shape returned from hn api: {e}") from e
    if not ids:
        raise HNShapeError("unknown data shape returned from hn api: empty story list")
    return ids


class HackerNewsClient:
    """Client for the Hacker News Firebase API."""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.hn_api_base_url).rstrip("/")
        self._timeout = settings.hn_timeout_seconds
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_json(self, path: str) -> Any:
        client = await self._get_client()
        try:
            resp = await client.get(f"{self.base_url}{path}")
        except httpx.HTTPError as e:
            raise HNError(f"hn api request failed: {e}") from e
        if resp.status_code != 200:
            logger.error(f"HN API error: {resp.status_code} - {resp.text[:200]}")
            raise HNError(f"non-ok response from hn api: {resp.status_code} {resp.reason_phrase}")
        try:
            return resp.json()
        except ValueError as e:
            raise HNShapeError(f"hn api returned invalid json for {path}") from e

    async def best_stories(self) -> list[int]:
        """Fetch the ranked best-story ids, highest rank first."""
        return parse_story_ids(await self._get_json("/v0/beststories.json"))

    async def item(self, item_id: int) -> HNItem:
        """Fetch and validate a single item record."""
        return parse_item(await self._get_json(f"/v0/item/{item_id}.json"))


_client: HackerNewsClient | None = None


def get_hn_client() -> HackerNewsClient:
    """Get the process-wide client, creating it on first use."""
    global _client
    if _client is None:
        _client = HackerNewsClient()
    return _client


async def close_hn_client() -> None:
    """Close the process-wide client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
