"""Application settings for the forum moderation API."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from forum_moderation_api.config.auth import AuthSettings
from forum_moderation_api.config.database import DatabaseSettings
from forum_moderation_api.config.moderation import ModerationSettings
from forum_moderation_api.config.moderation import TrendingSettings
from forum_moderation_api.config.redis import RedisSettings


class AppSettings(BaseSettings):
    """Main application settings."""

    # App info
    app_name: str = Field(
        default="Forum Moderation API", description="Application name"
    )
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")  # nosec B104
    port: int = Field(default=8000, description="Server port")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins",
    )

    # Component settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    moderation: ModerationSettings = Field(default_factory=ModerationSettings)
    trending: TrendingSettings = Field(default_factory=TrendingSettings)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )


# Global settings instance
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get application settings (singleton pattern)."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = AppSettings()
    return _settings


def get_moderation_settings() -> ModerationSettings:
    """Get moderation settings."""
    return get_settings().moderation


def get_trending_settings() -> TrendingSettings:
    """Get trending settings."""
    return get_settings().trending
