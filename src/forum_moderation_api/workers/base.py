"""Base worker classes for the arq background queue."""

import logging

from collections.abc import Callable
from typing import Any

from forum_moderation_api.database.connection import close_database
from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.connection import init_database
from forum_moderation_api.workers.redis_connection import close_redis_connections
from forum_moderation_api.workers.redis_connection import redis_connection

logger = logging.getLogger(__name__)


class BaseWorker:
    """Base class for all workers.

    Subclasses produced by ``create_worker_class`` double as arq worker
    settings: arq reads ``functions``, ``queue_name``, ``redis_settings`` and
    the startup/shutdown hooks straight off the class.
    """

    def __init__(self):
        self.redis_settings = redis_connection.arq_settings()

    async def startup(self, ctx: dict[str, Any]) -> None:
        """Worker startup hook."""
        logger.info(f"Starting {self.__class__.__name__}")
        await init_database()
        ctx["get_db_connection"] = get_db_connection

    async def shutdown(self, ctx: dict[str, Any]) -> None:
        """Worker shutdown hook."""
        logger.info(f"Shutting down {self.__class__.__name__}")
        await close_database()
        await close_redis_connections()


def create_worker_class(
    functions: list[Callable],
    queue_name: str,
    max_jobs: int = 10,
    job_timeout: int = 300,
) -> type[BaseWorker]:
    """Create a worker settings class for the given job functions."""

    class DynamicWorker(BaseWorker):
        pass

    hooks = DynamicWorker()
    DynamicWorker.functions = list(functions)  # type: ignore[attr-defined]
    DynamicWorker.queue_name = queue_name  # type: ignore[attr-defined]
    DynamicWorker.max_jobs = max_jobs  # type: ignore[attr-defined]
    DynamicWorker.job_timeout = job_timeout  # type: ignore[attr-defined]
    DynamicWorker.redis_settings = hooks.redis_settings  # type: ignore[misc]
    DynamicWorker.on_startup = hooks.startup  # type: ignore[attr-defined]
    DynamicWorker.on_shutdown = hooks.shutdown  # type: ignore[attr-defined]

    return DynamicWorker
