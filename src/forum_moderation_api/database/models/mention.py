"""Mention models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.base import BaseDBModel


class Mention(BaseDBModel):
    """A user referenced from a post or comment via @handle."""

    mentioner_pk: UUID
    mentioned_pk: UUID
    post_pk: UUID | None = None
    comment_pk: UUID | None = None


class MentionDetail(BaseModel):
    """Mention joined with usernames and content context for listings."""

    pk: UUID
    mentioner_pk: UUID
    mentioner_username: str
    mentioned_pk: UUID
    mentioned_username: str
    post_pk: UUID | None = None
    post_title: str | None = None
    comment_pk: UUID | None = None
    topic_pk: UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MentionUserCount(BaseModel):
    """A user together with how many mentions they are part of."""

    user_pk: UUID
    username: str
    mention_count: int

    model_config = ConfigDict(from_attributes=True)
