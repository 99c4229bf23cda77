"""asyncpg pool ownership and connection helpers.

Repositories borrow connections through ``use_connection``; the moderation
executor opens ``get_db_transaction`` so that the state change and its mod
log entry commit or roll back together.
"""

import logging

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from asyncpg import Connection
from asyncpg import Pool

from forum_moderation_api.config.database import DatabaseSettings
from forum_moderation_api.config.database import get_database_settings
from forum_moderation_api.config.database import get_database_url

logger = logging.getLogger(__name__)


class Database:
    """Owns the process-wide asyncpg pool."""

    def __init__(self, settings: DatabaseSettings | None = None):
        self._pool: Pool | None = None
        self._settings = settings or get_database_settings()

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    def _require_pool(self) -> Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool

    async def connect(self) -> None:
        """Create the pool; a second call is a logged no-op."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        try:
            self._pool = await asyncpg.create_pool(
                get_database_url(self._settings),
                min_size=self._settings.min_pool_size,
                max_size=self._settings.max_pool_size,
                timeout=self._settings.pool_timeout,
                command_timeout=self._settings.command_timeout,
                server_settings={
                    "application_name": self._settings.application_name,
                    "timezone": "UTC",
                },
            )
        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise
        logger.info(
            f"Database pool ready ({self._settings.min_pool_size}-"
            f"{self._settings.max_pool_size} connections)"
        )

    async def disconnect(self) -> None:
        if self._pool is None:
            logger.warning("Database pool not initialized")
            return

        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("Database pool closed")

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[Connection]:
        """Borrow a pooled connection for the duration of the block."""
        async with self._require_pool().acquire() as connection:
            yield connection

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[Connection]:
        """Borrow a connection inside a transaction; an exception rolls back."""
        async with self.get_connection() as connection:
            async with connection.transaction():
                yield connection

    async def health_check(self) -> bool:
        """True when a trivial query succeeds."""
        if not self.is_connected:
            return False
        try:
            async with self.get_connection() as connection:
                await connection.fetchval("SELECT 1")
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    async def get_pool_stats(self) -> dict[str, Any]:
        if self._pool is None:
            return {"status": "not_initialized"}

        return {
            "status": "initialized",
            "size": self._pool.get_size(),
            "idle_size": self._pool.get_idle_size(),
            "min_size": self._pool.get_min_size(),
            "max_size": self._pool.get_max_size(),
        }


# Global database instance
db = Database()


async def init_database() -> None:
    await db.connect()


async def close_database() -> None:
    await db.disconnect()


@asynccontextmanager
async def get_db_connection() -> AsyncGenerator[Connection]:
    """Get a database connection from the global pool."""
    async with db.get_connection() as connection:
        yield connection


@asynccontextmanager
async def get_db_transaction() -> AsyncGenerator[Connection]:
    """Get a database transaction from the global pool."""
    async with db.get_transaction() as connection:
        yield connection


@asynccontextmanager
async def use_connection(
    connection: Connection | None = None,
) -> AsyncGenerator[Connection]:
    """Reuse a caller's connection (e.g. an open transaction) or borrow one."""
    if connection is not None:
        yield connection
        return

    async with get_db_connection() as borrowed:
        yield borrowed
