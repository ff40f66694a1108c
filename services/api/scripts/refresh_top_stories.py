#!/usr/bin/env python3
"""Scheduled top-stories refresh for cron.

Schedule:
- Run every few minutes (e.g. */10) from the platform's cron jobs.

Behavior:
- Recompute the top stories without the manual endpoint's rate limit
- If HEALTHCHECK_IO_ID is set, report start/finish/fail to healthchecks.io
- On failure the previous pointer stays in place; the next run retries

Run (local / cron):
  cd services/api
  python -m scripts.refresh_top_stories
"""

import asyncio
import os
import sys

from dotenv import load_dotenv

# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from topstories.services.healthcheck import HealthcheckReporter  # noqa: E402
from topstories.services.hn_client import close_hn_client  # noqa: E402
from topstories.services.refresh import refresh_top_stories  # noqa: E402
from topstories.settings import get_settings  # noqa: E402
from topstories.stores.redis import close_redis, init_redis  # noqa: E402


async def main() -> None:
    load_dotenv()
    settings = get_settings()
    # Unlike the API, the job cannot do anything useful without Redis.
    await init_redis()

    try:
        if settings.healthcheck_io_id:
            reporter = HealthcheckReporter(settings.healthcheck_io_id)
            story_ids = await reporter.run(refresh_top_stories)
        else:
            story_ids = await refresh_top_stories()

        print({"ok": True, "stories": story_ids})
    finally:
        await close_hn_client()
        await close_redis()


if __name__ == "__main__":
    asyncio.run(main())
