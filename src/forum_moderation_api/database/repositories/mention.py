"""Mention repository for the forum moderation API."""

from uuid import UUID

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.mention import Mention
from forum_moderation_api.database.models.mention import MentionDetail
from forum_moderation_api.database.models.mention import MentionUserCount
from forum_moderation_api.database.repositories.base import BaseRepository

_DETAIL_SELECT = """
    SELECT
        m.pk, m.mentioner_pk, mentioner.username AS mentioner_username,
        m.mentioned_pk, mentioned.username AS mentioned_username,
        COALESCE(m.post_pk, c.post_pk) AS post_pk, p.title AS post_title,
        m.comment_pk, p.topic_pk, m.created_at
    FROM user_mentions m
    JOIN users mentioner ON mentioner.pk = m.mentioner_pk
    JOIN users mentioned ON mentioned.pk = m.mentioned_pk
    LEFT JOIN comments c ON c.pk = m.comment_pk
    LEFT JOIN posts p ON p.pk = COALESCE(m.post_pk, c.post_pk)
"""


class MentionRepository(BaseRepository[Mention]):
    """Repository for user mentions."""

    def __init__(self):
        super().__init__("user_mentions")

    def _record_to_model(self, record: Record) -> Mention:
        """Convert database record to Mention model."""
        return Mention.model_validate(dict(record))

    async def create_mentions(
        self,
        mentioner_pk: UUID,
        mentioned_pks: list[UUID],
        post_pk: UUID | None = None,
        comment_pk: UUID | None = None,
    ) -> list[Mention]:
        """Insert mention rows, skipping any (content, user) pair already stored."""
        if not mentioned_pks:
            return []

        query = """
            INSERT INTO user_mentions (mentioner_pk, mentioned_pk, post_pk, comment_pk)
            SELECT $1, mentioned_pk, $3, $4
            FROM UNNEST($2::uuid[]) AS mentioned_pk
            WHERE mentioned_pk <> $1
            ON CONFLICT DO NOTHING
            RETURNING *
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(
                query, mentioner_pk, mentioned_pks, post_pk, comment_pk
            )
            return [self._record_to_model(record) for record in records]

    async def get_user_mentions(
        self, user_pk: UUID, limit: int, offset: int
    ) -> tuple[list[MentionDetail], int]:
        """Mentions of a user, newest first, with the total count."""
        query = f"""
            {_DETAIL_SELECT}
            WHERE m.mentioned_pk = $1
            ORDER BY m.created_at DESC, m.pk DESC
            LIMIT $2 OFFSET $3
        """  # nosec B608
        count_query = "SELECT COUNT(*) FROM user_mentions WHERE mentioned_pk = $1"

        async with get_db_connection() as connection:
            records = await connection.fetch(query, user_pk, limit, offset)
            total = await connection.fetchval(count_query, user_pk)
            return [MentionDetail.model_validate(dict(r)) for r in records], total or 0

    async def get_post_mentions(self, post_pk: UUID) -> list[MentionDetail]:
        """Mentions made in the body of a post."""
        query = f"""
            {_DETAIL_SELECT}
            WHERE m.post_pk = $1 AND m.comment_pk IS NULL
            ORDER BY m.created_at DESC, m.pk DESC
        """  # nosec B608

        async with get_db_connection() as connection:
            records = await connection.fetch(query, post_pk)
            return [MentionDetail.model_validate(dict(r)) for r in records]

    async def get_comment_mentions(self, comment_pk: UUID) -> list[MentionDetail]:
        """Mentions made in a comment."""
        query = f"""
            {_DETAIL_SELECT}
            WHERE m.comment_pk = $1
            ORDER BY m.created_at DESC, m.pk DESC
        """  # nosec B608

        async with get_db_connection() as connection:
            records = await connection.fetch(query, comment_pk)
            return [MentionDetail.model_validate(dict(r)) for r in records]

    async def get_top_mentioners(
        self, user_pk: UUID, limit: int
    ) -> list[MentionUserCount]:
        """Users who mention ``user_pk`` most often."""
        query = """
            SELECT u.pk AS user_pk, u.username, COUNT(*) AS mention_count
            FROM user_mentions m
            JOIN users u ON u.pk = m.mentioner_pk
            WHERE m.mentioned_pk = $1
            GROUP BY u.pk, u.username
            ORDER BY mention_count DESC, u.username ASC
            LIMIT $2
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(query, user_pk, limit)
            return [MentionUserCount.model_validate(dict(r)) for r in records]

    async def get_top_mentioned(
        self, user_pk: UUID, limit: int
    ) -> list[MentionUserCount]:
        """Users ``user_pk`` mentions most often."""
        query = """
            SELECT u.pk AS user_pk, u.username, COUNT(*) AS mention_count
            FROM user_mentions m
            JOIN users u ON u.pk = m.mentioned_pk
            WHERE m.mentioner_pk = $1
            GROUP BY u.pk, u.username
            ORDER BY mention_count DESC, u.username ASC
            LIMIT $2
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(query, user_pk, limit)
            return [MentionUserCount.model_validate(dict(r)) for r in records]
