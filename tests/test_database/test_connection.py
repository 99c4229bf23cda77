"""Tests for database pool management."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest

from forum_moderation_api.config.database import DatabaseSettings
from forum_moderation_api.database.connection import Database
from forum_moderation_api.database.connection import use_connection


@pytest.fixture
def settings():
    return DatabaseSettings(
        database_url="postgresql://test@localhost/forum_test",
        min_pool_size=1,
        max_pool_size=2,
        application_name="forum-tests",
    )


@pytest.fixture
def mock_pool(mock_connection):
    pool = MagicMock()
    pool.close = AsyncMock()

    @asynccontextmanager
    async def acquire():
        yield mock_connection

    pool.acquire = acquire
    pool.get_size.return_value = 2
    pool.get_idle_size.return_value = 1
    pool.get_min_size.return_value = 1
    pool.get_max_size.return_value = 2
    return pool


class TestDatabase:
    """Test cases for the Database pool owner."""

    @pytest.mark.asyncio
    async def test_connect_uses_settings(self, settings, mock_pool):
        database = Database(settings)

        with patch(
            "forum_moderation_api.database.connection.asyncpg.create_pool",
            new_callable=AsyncMock,
            return_value=mock_pool,
        ) as mock_create_pool:
            await database.connect()
            await database.connect()

        mock_create_pool.assert_awaited_once()
        args, kwargs = mock_create_pool.call_args
        assert args[0] == "postgresql://test@localhost/forum_test"
        assert kwargs["max_size"] == 2
        assert kwargs["server_settings"]["application_name"] == "forum-tests"
        assert database.is_connected

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self, settings):
        database = Database(settings)

        with patch(
            "forum_moderation_api.database.connection.asyncpg.create_pool",
            new_callable=AsyncMock,
            side_effect=OSError("connection refused"),
        ):
            with pytest.raises(OSError):
                await database.connect()

        assert not database.is_connected

    @pytest.mark.asyncio
    async def test_connection_requires_pool(self, settings):
        database = Database(settings)

        with pytest.raises(RuntimeError, match="not initialized"):
            async with database.get_connection():
                pass

    @pytest.mark.asyncio
    async def test_health_check(self, settings, mock_pool, mock_connection):
        database = Database(settings)
        assert await database.health_check() is False

        database._pool = mock_pool
        mock_connection.fetchval.return_value = 1
        assert await database.health_check() is True

        mock_connection.fetchval.side_effect = Exception("gone")
        assert await database.health_check() is False

    @pytest.mark.asyncio
    async def test_pool_stats_and_disconnect(self, settings, mock_pool):
        database = Database(settings)
        assert await database.get_pool_stats() == {"status": "not_initialized"}

        database._pool = mock_pool
        stats = await database.get_pool_stats()
        assert stats["size"] == 2
        assert stats["idle_size"] == 1

        await database.disconnect()
        mock_pool.close.assert_awaited_once()
        assert not database.is_connected


class TestUseConnection:
    """Test connection reuse."""

    @pytest.mark.asyncio
    async def test_reuses_given_connection(self, mock_connection):
        async with use_connection(mock_connection) as conn:
            assert conn is mock_connection
