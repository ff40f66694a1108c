"""healthchecks.io reporting for the scheduled refresh.

Pings /<id>/start before the job, then /<id> on success or /<id>/fail
(with the error message as logs) on failure. Each ping is retried a
bounded number of times with a per-attempt timeout.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import json
import logging
from typing import TypeVar

import httpx

from topstories.settings import get_settings

logger = logging.getLogger("uvicorn.error")

MAX_ATTEMPTS = 5
ATTEMPT_TIMEOUT = 2.5  # seconds

T = TypeVar("T")


class HealthcheckError(RuntimeError):
    pass


async def reliable_ping(
    url: str,
    body: str | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> bool:
    """Ping a URL, retrying up to MAX_ATTEMPTS times.

    Returns:
        True on the first 2xx response, False if every attempt failed.
    """
    client = http_client or httpx.AsyncClient(timeout=ATTEMPT_TIMEOUT)
    try:
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                if body is None:
                    resp = await client.get(url, timeout=ATTEMPT_TIMEOUT)
                else:
                    resp = await client.post(url, content=body, timeout=ATTEMPT_TIMEOUT)
            except httpx.TimeoutException:
                logger.warning(f"healthcheck ping timeout attempt={attempt} url={url}")
                continue
            except httpx.HTTPError as e:
                logger.warning(f"healthcheck ping failure attempt={attempt} url={url}: {e}")
                continue
            if not resp.is_success:
                logger.warning(f"healthcheck ping non-ok response attempt={attempt} status={resp.status_code}")
                continue
            return True
        return False
    finally:
        if http_client is None:
            await client.aclose()


class HealthcheckReporter:
    """Reports start/finish/failure of a job to healthchecks.io."""

    def __init__(
        self,
        check_id: str,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.check_id = check_id
        self.base_url = (base_url or get_settings().healthcheck_base_url).rstrip("/")
        self._http_client = http_client

    async def _ping(self, suffix: str, body: str | None = None) -> None:
        url = f"{self.base_url}/{self.check_id}{suffix}"
        ok = await reliable_ping(url, body, http_client=self._http_client)
        if not ok:
            raise HealthcheckError(f"healthchecks.io: ping {suffix or '/'} failed")

    async def report_start(self) -> None:
        await self._ping("/start")

    async def report_finish(self) -> None:
        await self._ping("")

    async def report_failure(self, logs: str | None = None) -> None:
        body = json.dumps({"logs": logs}) if logs else None
        await self._ping("/fail", body)

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` between start and finish/fail pings.

        The job's own exception is re-raised; a failed finish/fail ping is
        logged so it never masks the job's outcome.
        """
        await self.report_start()
        try:
            result = await fn()
        except Exception as e:
            try:
                await self.report_failure(str(e) or repr(e))
            except HealthcheckError:
                logger.exception("healthchecks.io: failure report lost")
            raise
        try:
            await self.report_finish()
        except HealthcheckError:
            logger.exception("healthchecks.io: finish report lost")
        return result
