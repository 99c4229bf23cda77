"""Notification repository for the forum moderation API."""

from uuid import UUID

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.base import NotificationStatus
from forum_moderation_api.database.models.notification import Notification
from forum_moderation_api.database.models.notification import NotificationCreate
from forum_moderation_api.database.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for user notifications."""

    def __init__(self):
        super().__init__("notifications")

    def _record_to_model(self, record: Record) -> Notification:
        """Convert database record to Notification model."""
        return Notification.model_validate(dict(record))

    async def create_notification(self, data: NotificationCreate) -> Notification:
        """Store one notification."""
        return await self.create_from_dict(data.model_dump())

    async def create_many(self, items: list[NotificationCreate]) -> list[Notification]:
        """Store several notifications in one statement."""
        if not items:
            return []

        query = """
            INSERT INTO notifications (user_pk, type, related_pk, message)
            SELECT * FROM UNNEST($1::uuid[], $2::text[], $3::uuid[], $4::text[])
            RETURNING *
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(
                query,
                [item.user_pk for item in items],
                [item.type for item in items],
                [item.related_pk for item in items],
                [item.message for item in items],
            )
            return [self._record_to_model(record) for record in records]

    async def get_user_notifications(
        self,
        user_pk: UUID,
        limit: int,
        offset: int,
        status: NotificationStatus | None = None,
    ) -> tuple[list[Notification], int]:
        """A page of a user's notifications, excluding deleted ones by default."""
        where = (
            "user_pk = $1 AND "
            "(($2::text IS NULL AND status <> 'DELETED') OR status = $2)"
        )
        query = f"""
            SELECT * FROM notifications
            WHERE {where}
            ORDER BY created_at DESC, pk DESC
            LIMIT $3 OFFSET $4
        """  # nosec B608
        status_value = NotificationStatus(status).value if status else None

        async with get_db_connection() as connection:
            records = await connection.fetch(
                query, user_pk, status_value, limit, offset
            )
            total = await connection.fetchval(
                f"SELECT COUNT(*) FROM notifications WHERE {where}",  # nosec B608
                user_pk,
                status_value,
            )
            return [self._record_to_model(record) for record in records], total or 0

    async def get_unread_count(self, user_pk: UUID) -> int:
        """Number of unread notifications for a user."""
        return await self.count(
            "user_pk = $1 AND status = $2",
            [user_pk, NotificationStatus.UNREAD.value],
        )

    async def set_status(
        self, notification_pk: UUID, status: NotificationStatus
    ) -> Notification | None:
        """Change the status of one notification."""
        return await self.update_from_dict(
            notification_pk, {"status": NotificationStatus(status).value}
        )

    async def mark_all_as_read(self, user_pk: UUID) -> int:
        """Mark every unread notification of a user as read."""
        query = """
            UPDATE notifications
            SET status = 'READ', updated_at = NOW()
            WHERE user_pk = $1 AND status = 'UNREAD'
        """

        async with get_db_connection() as connection:
            result = await connection.execute(query, user_pk)
            return int(result.split()[-1])

    async def delete_all_read(self, user_pk: UUID) -> int:
        """Soft-delete every read notification of a user."""
        query = """
            UPDATE notifications
            SET status = 'DELETED', updated_at = NOW()
            WHERE user_pk = $1 AND status = 'READ'
        """

        async with get_db_connection() as connection:
            result = await connection.execute(query, user_pk)
            return int(result.split()[-1])
