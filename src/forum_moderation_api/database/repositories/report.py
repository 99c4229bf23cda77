"""Report repository for the forum moderation API."""

from asyncpg import Connection
from asyncpg import Record

from forum_moderation_api.database.models.report import Report
from forum_moderation_api.database.models.report import ReportCreate
from forum_moderation_api.database.repositories.base import BaseRepository


class ReportRepository(BaseRepository[Report]):
    """Repository for content reports."""

    def __init__(self):
        super().__init__("reports")

    def _record_to_model(self, record: Record) -> Report:
        """Convert database record to Report model."""
        return Report.model_validate(dict(record))

    async def create_report(
        self, data: ReportCreate, connection: Connection | None = None
    ) -> Report:
        """Queue content for moderator review."""
        return await self.create_from_dict(data.model_dump(), connection)
