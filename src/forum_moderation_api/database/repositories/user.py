"""User repository for the forum moderation API."""

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user lookups."""

    def __init__(self):
        super().__init__("users")

    def _record_to_model(self, record: Record) -> User:
        """Convert database record to User model."""
        return User.model_validate(dict(record))

    async def get_by_usernames(self, usernames: list[str]) -> dict[str, User]:
        """Resolve usernames case-insensitively.

        Returns a mapping keyed by the lower-cased username.
        """
        if not usernames:
            return {}

        query = "SELECT * FROM users WHERE LOWER(username) = ANY($1::text[])"
        lowered = [username.lower() for username in usernames]

        async with get_db_connection() as connection:
            records = await connection.fetch(query, lowered)
            users = [self._record_to_model(record) for record in records]
            return {user.username.lower(): user for user in users}
