"""Post repository for the forum moderation API."""

from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.repositories.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    """Repository for post operations."""

    def __init__(self):
        super().__init__("posts")

    def _record_to_model(self, record: Record) -> Post:
        """Convert database record to Post model."""
        return Post.model_validate(dict(record))

    async def create_post(
        self, topic_pk: UUID, author_pk: UUID, title: str, content: str
    ) -> Post:
        """Persist a new active post."""
        return await self.create_from_dict(
            {
                "topic_pk": topic_pk,
                "author_pk": author_pk,
                "title": title,
                "content": content,
                "moderation_state": ModerationState.ACTIVE.value,
            }
        )

    async def set_moderation_state(
        self,
        pk: UUID,
        state: ModerationState,
        is_locked: bool,
        connection: Connection | None = None,
    ) -> Post | None:
        """Write the moderation state and lock flag."""
        return await self.update_from_dict(
            pk,
            {"moderation_state": ModerationState(state).value, "is_locked": is_locked},
            connection,
        )

    async def get_visible_by_pks(self, post_pks: list[UUID]) -> dict[UUID, Post]:
        """Active posts among the given pks, keyed by pk."""
        if not post_pks:
            return {}

        query = """
            SELECT * FROM posts
            WHERE pk = ANY($1::uuid[]) AND moderation_state = $2
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(
                query, post_pks, ModerationState.ACTIVE.value
            )
            return {record["pk"]: self._record_to_model(record) for record in records}
