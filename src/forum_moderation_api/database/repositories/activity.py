"""Activity event repository backing the trending score engine."""

from datetime import datetime
from uuid import UUID

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.base import ActivityKind
from forum_moderation_api.database.models.trending import ActivityEvent
from forum_moderation_api.database.repositories.base import BaseRepository


class ActivityEventRepository(BaseRepository[ActivityEvent]):
    """Repository for weighted activity events."""

    def __init__(self):
        super().__init__("activity_events")

    def _record_to_model(self, record: Record) -> ActivityEvent:
        """Convert database record to ActivityEvent model."""
        return ActivityEvent.model_validate(dict(record))

    async def record_event(
        self,
        topic_pk: UUID,
        kind: ActivityKind,
        weight: float,
        occurred_at: datetime,
        post_pk: UUID | None = None,
    ) -> ActivityEvent:
        """Append an activity event."""
        query = """
            INSERT INTO activity_events (topic_pk, post_pk, kind, weight, occurred_at)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING *
        """

        async with get_db_connection() as connection:
            record = await connection.fetchrow(
                query, topic_pk, post_pk, ActivityKind(kind).value, weight, occurred_at
            )
            if record is None:
                raise ValueError("Failed to record activity event")
            return self._record_to_model(record)

    async def get_events_since(
        self,
        since: datetime,
        topic_pk: UUID | None = None,
        posts_only: bool = False,
    ) -> list[ActivityEvent]:
        """Events that occurred at or after ``since``, oldest first."""
        query = """
            SELECT * FROM activity_events
            WHERE occurred_at >= $1
              AND ($2::uuid IS NULL OR topic_pk = $2)
              AND ($3::boolean IS FALSE OR post_pk IS NOT NULL)
            ORDER BY occurred_at ASC, pk ASC
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(query, since, topic_pk, posts_only)
            return [self._record_to_model(record) for record in records]
