"""Redis connection management for arq workers and the trending cache."""

import redis.asyncio as redis

from arq import create_pool
from arq.connections import ArqRedis
from arq.connections import RedisSettings as ArqRedisSettings

from forum_moderation_api.config.redis import get_redis_settings


class RedisConnection:
    """Holds the arq pool and the plain redis client."""

    def __init__(self):
        self._pool: ArqRedis | None = None
        self._redis_client: redis.Redis | None = None
        self.settings = get_redis_settings()

    def arq_settings(self) -> ArqRedisSettings:
        return ArqRedisSettings(
            host=self.settings.host,
            port=self.settings.port,
            database=self.settings.database,
            password=self.settings.password,
            max_connections=self.settings.max_connections,
        )

    async def get_pool(self) -> ArqRedis:
        """Get or create the arq pool used to enqueue jobs."""
        if self._pool is None:
            self._pool = await create_pool(self.arq_settings())
        return self._pool

    async def get_redis_client(self) -> redis.Redis:
        """Get or create the redis client used for caching."""
        if self._redis_client is None:
            self._redis_client = redis.from_url(
                self.settings.redis_url,
                max_connections=self.settings.max_connections,
                retry_on_timeout=self.settings.retry_on_timeout,
                socket_timeout=self.settings.socket_timeout,
                socket_connect_timeout=self.settings.socket_connect_timeout,
                decode_responses=True,
            )
        return self._redis_client

    async def close(self) -> None:
        """Close Redis connections."""
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None

        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None


# Global connection instance
redis_connection = RedisConnection()


async def get_redis_pool() -> ArqRedis:
    """Get Redis pool for arq jobs."""
    return await redis_connection.get_pool()


async def get_redis_client() -> redis.Redis:
    """Get Redis client for direct operations."""
    return await redis_connection.get_redis_client()


async def close_redis_connections() -> None:
    """Close all Redis connections."""
    await redis_connection.close()
