from __future__ import annotations

import datetime as dt
from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

REFRESH_JOB_ID = "refresh_feed_cache"

def make_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler(timezone=dt.timezone.utc)

def _logged(job: Callable[[], Awaitable[None]]) -> Callable[[], Awaitable[None]]:
    async def run() -> None:
        logger.info("Scheduled cache refresh started")
        try:
            await job()
        except Exception:
            # Keep the schedule alive; the next run or a cache miss recomputes
            logger.exception("Scheduled cache refresh failed")
            return
        logger.info("Scheduled cache refresh finished")
    return run

def start_scheduler(scheduler: AsyncIOScheduler, refresh: Callable[[], Awaitable[None]], interval_minutes: int) -> None:
    scheduler.add_job(
        _logged(refresh),
        IntervalTrigger(minutes=interval_minutes),
        id=REFRESH_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.start()

def shutdown_scheduler(scheduler: AsyncIOScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
