"""Base models and types for the forum moderation database."""

from datetime import datetime
from enum import Enum
from math import ceil
from typing import Generic
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

T = TypeVar("T")


class MemberRole(str, Enum):
    """Role stored on a topic membership row."""

    MEMBER = "MEMBER"
    MODERATOR = "MODERATOR"


class TopicRole(str, Enum):
    """Effective role of a user within a topic."""

    NONE = "NONE"
    MEMBER = "MEMBER"
    MODERATOR = "MODERATOR"
    OWNER = "OWNER"


class ContentKind(str, Enum):
    """Kinds of content that pass through the moderation pipeline."""

    POST = "POST"
    COMMENT = "COMMENT"


class ModerationState(str, Enum):
    """Visibility state of a post or comment."""

    ACTIVE = "ACTIVE"
    FILTERED = "FILTERED"
    REMOVED = "REMOVED"


class AutomodAction(str, Enum):
    """Enforcement actions available to rules and moderators."""

    REMOVE = "REMOVE"
    FILTER = "FILTER"
    REPORT = "REPORT"
    LOCK = "LOCK"
    MESSAGE = "MESSAGE"
    APPROVE = "APPROVE"


class ModLogAction(str, Enum):
    """Actions recorded in the moderation log."""

    REMOVE = "REMOVE"
    FILTER = "FILTER"
    REPORT = "REPORT"
    LOCK = "LOCK"
    MESSAGE = "MESSAGE"
    APPROVE = "APPROVE"
    CREATE_RULE = "CREATE_RULE"
    UPDATE_RULE = "UPDATE_RULE"
    TOGGLE_RULE = "TOGGLE_RULE"
    DELETE_RULE = "DELETE_RULE"


class ModTargetType(str, Enum):
    """What a moderation log entry points at."""

    POST = "POST"
    COMMENT = "COMMENT"
    USER = "USER"
    AUTOMOD_RULE = "AUTOMOD_RULE"


class NotificationType(str, Enum):
    """Notification type enumeration."""

    USER_MENTIONED = "USER_MENTIONED"
    POST_IN_OWNED_TOPIC = "POST_IN_OWNED_TOPIC"
    COMMENT_ON_POST = "COMMENT_ON_POST"
    MODERATOR_ADDED = "MODERATOR_ADDED"
    MODERATOR_REMOVED = "MODERATOR_REMOVED"
    BANNED_FROM_TOPIC = "BANNED_FROM_TOPIC"
    AUTOMOD_MESSAGE = "AUTOMOD_MESSAGE"


class NotificationStatus(str, Enum):
    """Notification status enumeration."""

    UNREAD = "UNREAD"
    READ = "READ"
    DELETED = "DELETED"


class ReportStatus(str, Enum):
    """Report status enumeration."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ActivityKind(str, Enum):
    """Activity events that feed the trending score."""

    POST_CREATED = "POST_CREATED"
    COMMENT_CREATED = "COMMENT_CREATED"
    MEMBER_JOINED = "MEMBER_JOINED"
    VOTE_SETTLED = "VOTE_SETTLED"


class BaseDBModel(BaseModel):
    """Base model for database entities."""

    pk: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class PaginationInfo(BaseModel):
    """Page metadata returned alongside listings."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        """Derive page metadata from page, limit and total row count."""
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=ceil(total / limit) if limit else 0,
            has_next_page=page * limit < total,
            has_prev_page=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of results."""

    data: list[T]
    pagination: PaginationInfo


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (max(page, 1) - 1) * limit
