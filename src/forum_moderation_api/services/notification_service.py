"""Notification fanout and inbox operations."""

import logging

from collections.abc import Iterable
from uuid import UUID

from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import NotificationStatus
from forum_moderation_api.database.models.base import NotificationType
from forum_moderation_api.database.models.base import PaginationInfo
from forum_moderation_api.database.models.base import page_offset
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.models.notification import Notification
from forum_moderation_api.database.models.notification import NotificationCreate
from forum_moderation_api.database.models.notification import NotificationList
from forum_moderation_api.database.models.topic import Topic
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.notification import (
    NotificationRepository,
)
from forum_moderation_api.errors import AuthorizationError
from forum_moderation_api.errors import NotFoundError

logger = logging.getLogger(__name__)


class NotificationService:
    """Turns pipeline events into per-user notification records.

    A user never receives a notification about their own action. Callers pass
    ``already_notified`` so one logical event yields at most one notification
    per recipient.
    """

    def __init__(self, notification_repo: NotificationRepository | None = None):
        self.notification_repo = notification_repo or NotificationRepository()

    async def _notify(
        self,
        recipient_pk: UUID,
        actor_pk: UUID | None,
        notification_type: NotificationType,
        message: str,
        related_pk: UUID | None,
        already_notified: Iterable[UUID] = (),
    ) -> Notification | None:
        if recipient_pk == actor_pk or recipient_pk in set(already_notified):
            return None

        return await self.notification_repo.create_notification(
            NotificationCreate(
                user_pk=recipient_pk,
                type=notification_type,
                related_pk=related_pk,
                message=message,
            )
        )

    async def notify_mention(
        self,
        mentioner: User,
        mentioned_pks: list[UUID],
        related_pk: UUID,
        content_kind: ContentKind,
    ) -> list[Notification]:
        """One USER_MENTIONED notification per mentioned user."""
        place = "a post" if content_kind == ContentKind.POST else "a comment"
        items = [
            NotificationCreate(
                user_pk=user_pk,
                type=NotificationType.USER_MENTIONED,
                related_pk=related_pk,
                message=f"{mentioner.username} mentioned you in {place}",
            )
            for user_pk in dict.fromkeys(mentioned_pks)
            if user_pk != mentioner.pk
        ]
        return await self.notification_repo.create_many(items)

    async def notify_post_in_topic(
        self,
        topic: Topic,
        post: Post,
        author: User,
        already_notified: Iterable[UUID] = (),
    ) -> Notification | None:
        """Tell the topic owner about a new post."""
        return await self._notify(
            topic.owner_pk,
            author.pk,
            NotificationType.POST_IN_OWNED_TOPIC,
            f"{author.username} posted in {topic.display_name}",
            post.pk,
            already_notified,
        )

    async def notify_post_comment(
        self,
        post: Post,
        comment: Comment,
        author: User,
        already_notified: Iterable[UUID] = (),
    ) -> Notification | None:
        """Tell the post author about a new comment."""
        return await self._notify(
            post.author_pk,
            author.pk,
            NotificationType.COMMENT_ON_POST,
            f"{author.username} commented on your post",
            comment.pk,
            already_notified,
        )

    async def notify_moderator_appointment(
        self, topic: Topic, user_pk: UUID, actor_pk: UUID
    ) -> Notification | None:
        return await self._notify(
            user_pk,
            actor_pk,
            NotificationType.MODERATOR_ADDED,
            f"You have been appointed as a moderator of {topic.display_name}",
            topic.pk,
        )

    async def notify_moderator_removal(
        self, topic: Topic, user_pk: UUID, actor_pk: UUID
    ) -> Notification | None:
        return await self._notify(
            user_pk,
            actor_pk,
            NotificationType.MODERATOR_REMOVED,
            f"You have been removed as a moderator of {topic.display_name}",
            topic.pk,
        )

    async def notify_topic_ban(
        self,
        topic: Topic,
        user_pk: UUID,
        actor_pk: UUID,
        reason: str | None = None,
    ) -> Notification | None:
        message = f"You have been banned from {topic.display_name}"
        if reason:
            message = f"{message}. Reason: {reason}"
        return await self._notify(
            user_pk, actor_pk, NotificationType.BANNED_FROM_TOPIC, message, topic.pk
        )

    async def notify_automod_message(
        self, recipient_pk: UUID, related_pk: UUID, message: str
    ) -> Notification | None:
        """Deliver an automod MESSAGE action to the content author."""
        return await self._notify(
            recipient_pk,
            None,
            NotificationType.AUTOMOD_MESSAGE,
            message,
            related_pk,
        )

    async def get_notifications(
        self,
        user_pk: UUID,
        page: int = 1,
        limit: int = 20,
        status: NotificationStatus | None = None,
    ) -> NotificationList:
        """A page of the user's notifications with their unread count."""
        notifications, total = await self.notification_repo.get_user_notifications(
            user_pk, limit, page_offset(page, limit), status
        )
        unread_count = await self.notification_repo.get_unread_count(user_pk)
        return NotificationList(
            data=notifications,
            pagination=PaginationInfo.build(page, limit, total),
            unread_count=unread_count,
        )

    async def get_unread_count(self, user_pk: UUID) -> int:
        return await self.notification_repo.get_unread_count(user_pk)

    async def _get_owned(self, notification_pk: UUID, user_pk: UUID) -> Notification:
        notification = await self.notification_repo.get_by_pk(notification_pk)
        if notification is None or notification.status == NotificationStatus.DELETED:
            raise NotFoundError("Notification not found")
        if notification.user_pk != user_pk:
            raise AuthorizationError("Cannot access another user's notification")
        return notification

    async def mark_as_read(self, notification_pk: UUID, user_pk: UUID) -> Notification:
        """Mark one of the user's notifications as read."""
        notification = await self._get_owned(notification_pk, user_pk)
        if notification.status == NotificationStatus.READ:
            return notification

        updated = await self.notification_repo.set_status(
            notification_pk, NotificationStatus.READ
        )
        if updated is None:
            raise NotFoundError("Notification not found")
        return updated

    async def mark_all_as_read(self, user_pk: UUID) -> int:
        count = await self.notification_repo.mark_all_as_read(user_pk)
        logger.debug(f"Marked {count} notifications read for user {user_pk}")
        return count

    async def delete_notification(self, notification_pk: UUID, user_pk: UUID) -> None:
        """Soft-delete one of the user's notifications."""
        await self._get_owned(notification_pk, user_pk)
        await self.notification_repo.set_status(
            notification_pk, NotificationStatus.DELETED
        )

    async def delete_all_read(self, user_pk: UUID) -> int:
        return await self.notification_repo.delete_all_read(user_pk)


async def get_notification_service() -> NotificationService:
    """Get a notification service instance."""
    return NotificationService()
