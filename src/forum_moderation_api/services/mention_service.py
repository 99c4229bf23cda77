"""Mention processing and mention queries."""

import logging

from uuid import UUID

from forum_moderation_api.config.settings import get_moderation_settings
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import PaginatedResponse
from forum_moderation_api.database.models.base import PaginationInfo
from forum_moderation_api.database.models.base import page_offset
from forum_moderation_api.database.models.content import ContentSnapshot
from forum_moderation_api.database.models.mention import MentionDetail
from forum_moderation_api.database.models.mention import MentionUserCount
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.mention import MentionRepository
from forum_moderation_api.database.repositories.user import UserRepository
from forum_moderation_api.services.mention_extractor import extract_mention_handles
from forum_moderation_api.services.mention_extractor import select_mention_targets
from forum_moderation_api.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class MentionService:
    """Stores mentions for new content and notifies the mentioned users."""

    def __init__(
        self,
        mention_repo: MentionRepository | None = None,
        user_repo: UserRepository | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.mention_repo = mention_repo or MentionRepository()
        self.user_repo = user_repo or UserRepository()
        self.notification_service = notification_service or NotificationService()
        self.settings = get_moderation_settings()

    async def resolve_mentions(self, text: str, author_pk: UUID) -> list[UUID]:
        """Users mentioned in ``text``, in first-occurrence order, capped."""
        handles = extract_mention_handles(
            text, max_length=self.settings.mention_handle_max_length
        )
        if not handles:
            return []

        users = await self.user_repo.get_by_usernames(handles)
        resolved = {handle: user.pk for handle, user in users.items()}
        return select_mention_targets(
            handles,
            resolved,
            author_pk,
            self.settings.max_mentions_per_content,
        )

    async def process_mentions(
        self, content: ContentSnapshot, author: User
    ) -> list[UUID]:
        """Store mention rows and fan out USER_MENTIONED notifications.

        Returns the users that were newly mentioned by this content.
        """
        mentioned_pks = await self.resolve_mentions(content.body, author.pk)
        if not mentioned_pks:
            return []

        is_post = content.kind == ContentKind.POST
        mentions = await self.mention_repo.create_mentions(
            author.pk,
            mentioned_pks,
            post_pk=content.pk if is_post else None,
            comment_pk=None if is_post else content.pk,
        )
        stored = {mention.mentioned_pk for mention in mentions}
        new_pks = [user_pk for user_pk in mentioned_pks if user_pk in stored]

        await self.notification_service.notify_mention(
            author, new_pks, content.pk, ContentKind(content.kind)
        )
        logger.info(
            f"Recorded {len(new_pks)} mentions for {content.kind} {content.pk}"
        )
        return new_pks

    async def get_user_mentions(
        self, user_pk: UUID, page: int = 1, limit: int = 20
    ) -> PaginatedResponse[MentionDetail]:
        """Mentions of a user, newest first."""
        mentions, total = await self.mention_repo.get_user_mentions(
            user_pk, limit, page_offset(page, limit)
        )
        return PaginatedResponse[MentionDetail](
            data=mentions, pagination=PaginationInfo.build(page, limit, total)
        )

    async def get_post_mentions(self, post_pk: UUID) -> list[MentionDetail]:
        return await self.mention_repo.get_post_mentions(post_pk)

    async def get_comment_mentions(self, comment_pk: UUID) -> list[MentionDetail]:
        return await self.mention_repo.get_comment_mentions(comment_pk)

    async def get_mention_count(self, user_pk: UUID) -> int:
        return await self.mention_repo.count("mentioned_pk = $1", [user_pk])

    async def get_top_mentioners(
        self, user_pk: UUID, limit: int = 10
    ) -> list[MentionUserCount]:
        return await self.mention_repo.get_top_mentioners(user_pk, limit)

    async def get_top_mentioned(
        self, user_pk: UUID, limit: int = 10
    ) -> list[MentionUserCount]:
        return await self.mention_repo.get_top_mentioned(user_pk, limit)


async def get_mention_service() -> MentionService:
    """Get a mention service instance."""
    return MentionService()
