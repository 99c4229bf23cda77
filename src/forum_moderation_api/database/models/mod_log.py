"""Moderation log models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import ModLogAction
from forum_moderation_api.database.models.base import ModTargetType


class ModLogEntry(BaseDBModel):
    """Append-only moderation audit entry."""

    topic_pk: UUID
    moderator_pk: UUID
    action: ModLogAction
    target_type: ModTargetType
    target_pk: UUID
    reason: str | None = None
    details: dict[str, Any] | None = None

    @property
    def is_automated(self) -> bool:
        return bool(self.details and self.details.get("automated"))


class ModLogEntryCreate(BaseModel):
    """Entry to append to the moderation log."""

    topic_pk: UUID
    moderator_pk: UUID
    action: ModLogAction
    target_type: ModTargetType
    target_pk: UUID
    reason: str | None = None
    details: dict[str, Any] | None = None

    model_config = ConfigDict(use_enum_values=True)


class ModLogFilters(BaseModel):
    """Optional filters for mod log listings."""

    topic_pk: UUID | None = None
    moderator_pk: UUID | None = None
    action: ModLogAction | None = None
    target_pk: UUID | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    model_config = ConfigDict(use_enum_values=True)


class ModLogStats(BaseModel):
    """Action counts for a topic or a moderator."""

    total_actions: int
    action_breakdown: dict[str, int]
