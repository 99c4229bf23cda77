"""Moderation log service: append-only writes and filtered reads."""

from uuid import UUID

from asyncpg import Connection

from forum_moderation_api.database.models.base import PaginatedResponse
from forum_moderation_api.database.models.base import PaginationInfo
from forum_moderation_api.database.models.base import page_offset
from forum_moderation_api.database.models.mod_log import ModLogEntry
from forum_moderation_api.database.models.mod_log import ModLogEntryCreate
from forum_moderation_api.database.models.mod_log import ModLogFilters
from forum_moderation_api.database.models.mod_log import ModLogStats
from forum_moderation_api.database.repositories.mod_log import ModLogRepository
from forum_moderation_api.database.repositories.topic import TopicRepository
from forum_moderation_api.errors import NotFoundError


class ModLogService:
    """Service for the moderation audit trail."""

    def __init__(
        self,
        mod_log_repo: ModLogRepository | None = None,
        topic_repo: TopicRepository | None = None,
    ):
        self.mod_log_repo = mod_log_repo or ModLogRepository()
        self.topic_repo = topic_repo or TopicRepository()

    async def record(
        self, entry: ModLogEntryCreate, connection: Connection | None = None
    ) -> ModLogEntry:
        """Append an entry; pass ``connection`` to join an open transaction."""
        return await self.mod_log_repo.append(entry, connection)

    async def _page(
        self, filters: ModLogFilters, page: int, limit: int
    ) -> PaginatedResponse[ModLogEntry]:
        entries, total = await self.mod_log_repo.list_entries(
            filters, limit, page_offset(page, limit)
        )
        return PaginatedResponse[ModLogEntry](
            data=entries, pagination=PaginationInfo.build(page, limit, total)
        )

    async def _require_topic(self, topic_pk: UUID) -> None:
        if not await self.topic_repo.exists(topic_pk):
            raise NotFoundError("Topic not found")

    async def get_topic_logs(
        self,
        topic_pk: UUID,
        page: int = 1,
        limit: int = 50,
        filters: ModLogFilters | None = None,
    ) -> PaginatedResponse[ModLogEntry]:
        """Entries for one topic, newest first."""
        await self._require_topic(topic_pk)
        scoped = (filters or ModLogFilters()).model_copy(update={"topic_pk": topic_pk})
        return await self._page(scoped, page, limit)

    async def get_moderator_logs(
        self, moderator_pk: UUID, page: int = 1, limit: int = 50
    ) -> PaginatedResponse[ModLogEntry]:
        """Entries attributed to one moderator across all topics."""
        return await self._page(ModLogFilters(moderator_pk=moderator_pk), page, limit)

    async def get_target_logs(
        self, target_pk: UUID, page: int = 1, limit: int = 50
    ) -> PaginatedResponse[ModLogEntry]:
        """Entries about one post, comment, user or rule."""
        return await self._page(ModLogFilters(target_pk=target_pk), page, limit)

    async def get_all_logs(
        self,
        page: int = 1,
        limit: int = 50,
        filters: ModLogFilters | None = None,
    ) -> PaginatedResponse[ModLogEntry]:
        """Every entry across topics; callers restrict this to superusers."""
        return await self._page(filters or ModLogFilters(), page, limit)

    async def get_topic_stats(self, topic_pk: UUID) -> ModLogStats:
        await self._require_topic(topic_pk)
        return await self._stats(ModLogFilters(topic_pk=topic_pk))

    async def get_moderator_stats(self, moderator_pk: UUID) -> ModLogStats:
        return await self._stats(ModLogFilters(moderator_pk=moderator_pk))

    async def _stats(self, filters: ModLogFilters) -> ModLogStats:
        breakdown = await self.mod_log_repo.count_by_action(filters)
        return ModLogStats(
            total_actions=sum(breakdown.values()), action_breakdown=breakdown
        )


async def get_mod_log_service() -> ModLogService:
    """Get a mod log service instance."""
    return ModLogService()
