"""PostgreSQL configuration for the forum moderation API."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

URL_ENV_VARS = ("DATABASE_URL", "POSTGRES_URL")


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    database_url: str = Field(
        default="", description="Full PostgreSQL URL; wins over the parts below"
    )
    username: str = Field(default="postgres", description="Database username")
    password: str = Field(default="password", description="Database password")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="forum", description="Database name")
    ssl_mode: str = Field(default="prefer", description="SSL mode")

    # asyncpg pool
    min_pool_size: int = Field(default=5, description="Minimum pool size")
    max_pool_size: int = Field(default=20, description="Maximum pool size")
    pool_timeout: float = Field(
        default=30.0, description="Seconds to wait for a new connection"
    )
    command_timeout: float = Field(
        default=60.0, description="Default statement timeout in seconds"
    )
    application_name: str = Field(
        default="forum-moderation-api",
        description="Reported to PostgreSQL as application_name",
    )

    model_config = SettingsConfigDict(env_prefix="DATABASE_", case_sensitive=False)

    def assembled_url(self) -> str:
        """URL built from host, port, credentials and database name."""
        return (
            f"postgresql://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}?sslmode={self.ssl_mode}"
        )


def get_database_settings() -> DatabaseSettings:
    """Get database settings from environment variables."""
    return DatabaseSettings()


def get_database_url(settings: DatabaseSettings | None = None) -> str:
    """Resolve the connection URL.

    Order: ``DATABASE_DATABASE_URL``, then the conventional ``DATABASE_URL`` and
    ``POSTGRES_URL`` variables, then the URL assembled from the parts.
    """
    settings = settings or get_database_settings()
    if settings.database_url:
        return settings.database_url

    for name in URL_ENV_VARS:
        url = os.getenv(name)
        if url:
            return url
    return settings.assembled_url()
