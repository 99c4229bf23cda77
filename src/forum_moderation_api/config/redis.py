"""Redis configuration for the trending cache and the arq job queue."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis configuration settings.

    One Redis serves two roles: the cached trending rankings (plain client,
    ``redis_url``) and the arq queue that drives the periodic refresh
    (``host``/``port``/``database``).
    """

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="URL of the Redis used by the trending cache",
    )
    host: str = Field(default="localhost", description="arq Redis host")
    port: int = Field(default=6379, description="arq Redis port")
    database: int = Field(default=0, description="arq Redis database number")
    password: str | None = Field(default=None, description="Redis password")

    max_connections: int = Field(default=20, description="Connection pool size")
    retry_on_timeout: bool = Field(default=True, description="Retry on timeout")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(
        default=5.0, description="Socket connect timeout in seconds"
    )

    cache_key_prefix: str = Field(
        default="trending", description="Namespace of the trending cache keys"
    )
    job_result_ttl_seconds: int = Field(
        default=3600, description="How long arq keeps finished job results"
    )

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False)


def get_redis_settings() -> RedisSettings:
    """Get Redis settings from environment variables."""
    return RedisSettings()
