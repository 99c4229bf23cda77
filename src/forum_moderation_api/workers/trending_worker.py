"""Background refresh of trending scores and the trending cache."""

import logging

from typing import Any

from forum_moderation_api.services.trending_service import TrendingService
from forum_moderation_api.workers.base import BaseWorker
from forum_moderation_api.workers.base import create_worker_class

logger = logging.getLogger(__name__)

TRENDING_QUEUE = "trending"


class TrendingRefreshWorker(BaseWorker):
    """Recomputes topic scores and rewrites both cached rankings."""

    def __init__(self, trending_service: TrendingService | None = None):
        super().__init__()
        self.trending_service = trending_service or TrendingService()

    async def refresh_trending_scores(self, ctx: dict[str, Any]) -> bool:
        try:
            topics = await self.trending_service.get_trending_topics(
                force_refresh=True
            )
            posts = await self.trending_service.get_trending_posts(force_refresh=True)
        except Exception:
            logger.exception("Error refreshing trending scores")
            return False

        logger.info(
            f"Trending cache refreshed: {len(topics.topics)} topics, "
            f"{len(posts.posts)} posts"
        )
        return True


async def refresh_trending_scores(ctx: dict[str, Any]) -> bool:
    """Worker function for the scheduled trending refresh."""
    try:
        worker = TrendingRefreshWorker()
        return await worker.refresh_trending_scores(ctx)
    except Exception:
        logger.exception("Error in trending refresh worker")
        return False


TrendingWorker = create_worker_class(
    functions=[refresh_trending_scores],
    queue_name=TRENDING_QUEUE,
    max_jobs=1,  # refreshes rewrite the same keys
    job_timeout=120,
)
