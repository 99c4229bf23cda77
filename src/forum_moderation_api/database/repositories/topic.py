"""Topic and membership repositories for the forum moderation API."""

from datetime import datetime
from uuid import UUID

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.topic import Topic
from forum_moderation_api.database.models.topic import TopicMembership
from forum_moderation_api.database.repositories.base import BaseRepository


class TopicRepository(BaseRepository[Topic]):
    """Repository for topic operations used by the moderation pipeline."""

    def __init__(self):
        super().__init__("topics")

    def _record_to_model(self, record: Record) -> Topic:
        """Convert database record to Topic model."""
        return Topic.model_validate(dict(record))

    async def get_all_topics(self) -> list[Topic]:
        """Every topic, for score recomputation."""
        query = "SELECT * FROM topics ORDER BY created_at ASC, pk ASC"

        async with get_db_connection() as connection:
            records = await connection.fetch(query)
            return [self._record_to_model(record) for record in records]

    async def touch_last_activity(self, topic_pk: UUID, occurred_at: datetime) -> None:
        """Advance last_activity_at; never moves it backwards."""
        query = """
            UPDATE topics
            SET last_activity_at = GREATEST(last_activity_at, $2)
            WHERE pk = $1
        """

        async with get_db_connection() as connection:
            await connection.execute(query, topic_pk, occurred_at)

    async def update_trending_scores(self, scores: dict[UUID, float]) -> None:
        """Persist recomputed trending scores in one batch."""
        if not scores:
            return

        query = "UPDATE topics SET trending_score = $2 WHERE pk = $1"

        async with get_db_connection() as connection:
            await connection.executemany(query, list(scores.items()))


class TopicMemberRepository(BaseRepository[TopicMembership]):
    """Repository for topic membership rows."""

    def __init__(self):
        super().__init__("topic_members")

    def _record_to_model(self, record: Record) -> TopicMembership:
        """Convert database record to TopicMembership model."""
        return TopicMembership.model_validate(dict(record))

    async def get_membership(
        self, topic_pk: UUID, user_pk: UUID
    ) -> TopicMembership | None:
        """Get the membership row for (topic, user), if any."""
        query = """
            SELECT * FROM topic_members
            WHERE topic_pk = $1 AND user_pk = $2
        """

        async with get_db_connection() as connection:
            record = await connection.fetchrow(query, topic_pk, user_pk)
            return self._record_to_model(record) if record else None
