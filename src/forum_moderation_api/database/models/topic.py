"""Topic and membership models for the forum moderation API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import MemberRole
from forum_moderation_api.database.models.base import TopicRole


class Topic(BaseDBModel):
    """Topic database model."""

    name: str
    display_name: str
    description: str = ""
    owner_pk: UUID
    trending_score: float = 0.0
    last_activity_at: datetime


class TopicMembership(BaseModel):
    """Membership of a user in a topic."""

    pk: UUID
    topic_pk: UUID
    user_pk: UUID
    role: MemberRole = MemberRole.MEMBER
    is_banned: bool = False
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class TopicAccess(BaseModel):
    """Result of an authorization gate lookup for (user, topic)."""

    topic: Topic
    role: TopicRole = TopicRole.NONE
    is_banned: bool = False
    is_superuser: bool = False

    model_config = ConfigDict(use_enum_values=True)

    @property
    def can_moderate(self) -> bool:
        """Moderators, owners and superusers may moderate the topic."""
        return self.is_superuser or self.role in (
            TopicRole.MODERATOR,
            TopicRole.OWNER,
        )

    @property
    def can_submit(self) -> bool:
        """Non-banned members, owners and superusers may submit content."""
        if self.is_banned:
            return False
        return self.is_superuser or self.role != TopicRole.NONE
