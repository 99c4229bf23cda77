"""Comment repository for the forum moderation API."""

from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for comment operations."""

    def __init__(self):
        super().__init__("comments")

    def _record_to_model(self, record: Record) -> Comment:
        """Convert database record to Comment model."""
        return Comment.model_validate(dict(record))

    async def create_comment(
        self,
        post_pk: UUID,
        topic_pk: UUID,
        author_pk: UUID,
        content: str,
        parent_comment_pk: UUID | None = None,
    ) -> Comment:
        """Persist a new active comment."""
        return await self.create_from_dict(
            {
                "post_pk": post_pk,
                "topic_pk": topic_pk,
                "author_pk": author_pk,
                "parent_comment_pk": parent_comment_pk,
                "content": content,
                "moderation_state": ModerationState.ACTIVE.value,
            }
        )

    async def set_moderation_state(
        self,
        pk: UUID,
        state: ModerationState,
        connection: Connection | None = None,
    ) -> Comment | None:
        """Write the moderation state."""
        return await self.update_from_dict(
            pk, {"moderation_state": ModerationState(state).value}, connection
        )
