"""Moderation pipeline and trending configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class ModerationSettings(BaseSettings):
    """Automod and mention settings."""

    max_mentions_per_content: int = Field(
        default=5, description="Distinct users that one post or comment may mention"
    )
    mention_handle_max_length: int = Field(
        default=50, description="Longest @handle considered; matches users.username"
    )

    model_config = SettingsConfigDict(env_prefix="MODERATION_", case_sensitive=False)


class TrendingSettings(BaseSettings):
    """Trending score engine settings."""

    # Base weight per activity event
    post_weight: float = Field(default=10.0, description="Weight of a new post")
    comment_weight: float = Field(default=5.0, description="Weight of a new comment")
    member_join_weight: float = Field(
        default=2.0, description="Weight of a new topic member"
    )
    vote_weight: float = Field(
        default=2.0, description="Weight per unit of settled vote value"
    )

    # Decay
    topic_half_life_hours: float = Field(
        default=24.0, description="Half-life of topic activity in hours"
    )
    post_half_life_hours: float = Field(
        default=12.0, description="Half-life of post activity in hours"
    )
    topic_window_hours: float = Field(
        default=168.0, description="Rolling window for topic scores (7 days)"
    )
    post_window_hours: float = Field(
        default=72.0, description="Rolling window for post scores (3 days)"
    )

    # Listing
    cache_ttl_seconds: int = Field(
        default=300, description="Trending cache TTL (5 minutes)"
    )
    default_topic_limit: int = Field(default=10, description="Default topic count")
    default_post_limit: int = Field(default=20, description="Default post count")
    max_limit: int = Field(default=100, description="Upper bound for any limit")

    # Background refresh
    refresh_interval_minutes: int = Field(
        default=5, description="Interval between scheduled score refreshes"
    )

    model_config = SettingsConfigDict(env_prefix="TRENDING_", case_sensitive=False)
