"""Notification models."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import NotificationStatus
from forum_moderation_api.database.models.base import NotificationType
from forum_moderation_api.database.models.base import PaginationInfo


class Notification(BaseDBModel):
    """Notification database model."""

    user_pk: UUID
    type: NotificationType
    related_pk: UUID | None = None
    message: str
    status: NotificationStatus = NotificationStatus.UNREAD


class NotificationCreate(BaseModel):
    """Notification to be stored for a recipient."""

    user_pk: UUID
    type: NotificationType
    related_pk: UUID | None = None
    message: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(use_enum_values=True)


class NotificationList(BaseModel):
    """A page of notifications plus the recipient's unread count."""

    data: list[Notification]
    pagination: PaginationInfo
    unread_count: int


class UnreadCount(BaseModel):
    """Number of unread notifications."""

    unread_count: int
