"""Recurring job scheduler."""

import asyncio
import logging

from datetime import timedelta

from arq.connections import ArqRedis

from forum_moderation_api.config.moderation import TrendingSettings
from forum_moderation_api.config.settings import get_trending_settings
from forum_moderation_api.workers.redis_connection import get_redis_pool
from forum_moderation_api.workers.trending_worker import TRENDING_QUEUE

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Enqueues the trending refresh on a fixed interval."""

    def __init__(self, settings: TrendingSettings | None = None):
        self.settings = settings or get_trending_settings()
        self.redis_pool: ArqRedis | None = None

    @property
    def interval(self) -> timedelta:
        return timedelta(minutes=self.settings.refresh_interval_minutes)

    async def initialize(self) -> None:
        self.redis_pool = await get_redis_pool()
        logger.info("Scheduler connected to Redis")

    async def schedule_trending_refresh(self, immediate: bool = False) -> bool:
        """Enqueue one refresh, now or one interval from now."""
        if self.redis_pool is None:
            logger.error("Redis pool not initialized")
            return False

        try:
            await self.redis_pool.enqueue_job(
                "refresh_trending_scores",
                _defer=None if immediate else self.interval,
                _queue_name=TRENDING_QUEUE,
            )
        except Exception:
            logger.exception("Failed to schedule trending refresh")
            return False

        when = "now" if immediate else f"in {self.interval}"
        logger.info(f"Scheduled trending refresh {when}")
        return True


async def start_scheduler(scheduler: TaskScheduler | None = None) -> None:
    """Run the scheduler until cancelled."""
    scheduler = scheduler or TaskScheduler()
    await scheduler.initialize()
    await scheduler.schedule_trending_refresh(immediate=True)

    while True:
        await scheduler.schedule_trending_refresh()
        await asyncio.sleep(scheduler.interval.total_seconds())
