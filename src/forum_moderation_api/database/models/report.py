"""Report models produced by the REPORT moderation action."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.database.models.base import ReportStatus


class Report(BaseDBModel):
    """A piece of content queued for moderator review."""

    reporter_pk: UUID
    topic_pk: UUID
    post_pk: UUID | None = None
    comment_pk: UUID | None = None
    reason: str
    status: ReportStatus = ReportStatus.PENDING


class ReportCreate(BaseModel):
    reporter_pk: UUID
    topic_pk: UUID
    post_pk: UUID | None = None
    comment_pk: UUID | None = None
    reason: str

    model_config = ConfigDict(use_enum_values=True)
