#!/usr/bin/env python3
"""
Worker startup script for the forum moderation API.

Runs the arq trending worker and the scheduler that enqueues the periodic
trending refresh.
"""

import asyncio
import logging
import signal
import sys

from arq.worker import Worker

from forum_moderation_api.config.redis import get_redis_settings
from forum_moderation_api.workers.redis_connection import close_redis_connections
from forum_moderation_api.workers.redis_connection import get_redis_pool
from forum_moderation_api.workers.scheduler import start_scheduler
from forum_moderation_api.workers.trending_worker import TrendingWorker

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class WorkerManager:
    """Runs the arq workers and the scheduler side by side."""

    def __init__(self):
        self.workers: list[Worker] = []
        self.tasks: list[asyncio.Task] = []
        self.shutdown_event = asyncio.Event()

    async def start(self):
        """Start all workers."""
        try:
            redis_pool = await get_redis_pool()
            keep_result = get_redis_settings().job_result_ttl_seconds
            logger.info("Connected to Redis")

            for worker_class in [TrendingWorker]:
                worker = Worker(
                    functions=worker_class.functions,  # type: ignore[attr-defined]
                    queue_name=worker_class.queue_name,  # type: ignore[attr-defined]
                    redis_pool=redis_pool,
                    max_jobs=worker_class.max_jobs,  # type: ignore[attr-defined]
                    job_timeout=worker_class.job_timeout,  # type: ignore[attr-defined]
                    on_startup=worker_class.on_startup,  # type: ignore[attr-defined]
                    on_shutdown=worker_class.on_shutdown,  # type: ignore[attr-defined]
                    keep_result=keep_result,
                    handle_signals=False,
                )
                name = worker_class.queue_name  # type: ignore[attr-defined]
                self.workers.append(worker)
                task = asyncio.create_task(self._run(worker.async_run(), name))
                self.tasks.append(task)
                logger.info(f"Started {name} worker")

            scheduler = asyncio.create_task(self._run(start_scheduler(), "scheduler"))
            self.tasks.append(scheduler)
            logger.info(f"All {len(self.workers)} workers started successfully")

            await self.shutdown_event.wait()

        except Exception as e:
            logger.exception(f"Failed to start workers: {e}")
            raise
        finally:
            await self.cleanup()

    async def _run(self, coro, name: str):
        """Run a worker coroutine; any failure stops the whole manager."""
        try:
            await coro
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"{name} failed: {e}")
            self.shutdown_event.set()

    async def cleanup(self):
        """Clean up resources."""
        logger.info("Shutting down workers...")

        for task in self.tasks:
            task.cancel()

        for worker in self.workers:
            try:
                await worker.close()
            except Exception as e:
                logger.error(f"Error closing worker: {e}")

        await close_redis_connections()
        logger.info("Cleanup complete")

    def handle_shutdown(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.shutdown_event.set()


async def main():
    """Main entry point."""
    manager = WorkerManager()

    signal.signal(signal.SIGINT, manager.handle_shutdown)
    signal.signal(signal.SIGTERM, manager.handle_shutdown)

    try:
        await manager.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.exception(f"Worker manager failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
