"""Trending score models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.base import ActivityKind


class ActivityEvent(BaseModel):
    """One weighted activity event contributing to a trending score."""

    pk: UUID
    topic_pk: UUID
    post_pk: UUID | None = None
    kind: ActivityKind
    weight: float
    occurred_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class TrendingTopic(BaseModel):
    """Ranked topic entry."""

    pk: UUID
    name: str
    display_name: str
    score: float
    last_activity_at: datetime
    created_at: datetime


class TrendingPost(BaseModel):
    """Ranked post entry."""

    pk: UUID
    topic_pk: UUID
    title: str
    author_pk: UUID
    score: float
    last_activity_at: datetime
    created_at: datetime


class TrendingTopicList(BaseModel):
    topics: list[TrendingTopic]
    computed_at: datetime
    cached: bool = False


class TrendingPostList(BaseModel):
    posts: list[TrendingPost]
    computed_at: datetime
    cached: bool = False


class TrendingCacheStatus(BaseModel):
    """Presence and remaining lifetime of the cached rankings."""

    ttl_seconds: int
    topics_cached: bool
    topics_expires_in: int | None = None
    posts_cached: bool
    posts_expires_in: int | None = None
