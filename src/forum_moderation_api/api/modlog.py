"""Moderation log endpoints.

Per-topic logs are a public audit trail; the cross-topic view is for
superusers only.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.auth.dependencies import require_superuser
from forum_moderation_api.database.models.base import ModLogAction
from forum_moderation_api.database.models.base import PaginatedResponse
from forum_moderation_api.database.models.mod_log import ModLogEntry
from forum_moderation_api.database.models.mod_log import ModLogFilters
from forum_moderation_api.database.models.mod_log import ModLogStats
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.mod_log_service import ModLogService
from forum_moderation_api.services.mod_log_service import get_mod_log_service

router = APIRouter(prefix="/modlog", tags=["modlog"])


@router.get("/topic/{topic_id}")
async def get_topic_logs(
    topic_id: UUID,
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 50,
    action: Annotated[ModLogAction | None, Query()] = None,
    moderator_id: Annotated[UUID | None, Query(alias="moderatorId")] = None,
    target_id: Annotated[UUID | None, Query(alias="targetId")] = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
) -> PaginatedResponse[ModLogEntry]:
    """Mod log of a topic, newest first."""
    filters = ModLogFilters(
        action=action,
        moderator_pk=moderator_id,
        target_pk=target_id,
        start_date=start_date,
        end_date=end_date,
    )
    return await mod_log_service.get_topic_logs(topic_id, page, limit, filters)


@router.get("")
async def get_all_logs(
    _: Annotated[User, Depends(require_superuser)],
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 50,
    topic_id: Annotated[UUID | None, Query(alias="topicId")] = None,
    action: Annotated[ModLogAction | None, Query()] = None,
    moderator_id: Annotated[UUID | None, Query(alias="moderatorId")] = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
) -> PaginatedResponse[ModLogEntry]:
    """Every mod log entry across topics (superusers only)."""
    filters = ModLogFilters(
        topic_pk=topic_id,
        action=action,
        moderator_pk=moderator_id,
        start_date=start_date,
        end_date=end_date,
    )
    return await mod_log_service.get_all_logs(page, limit, filters)


@router.get("/moderator/{moderator_id}")
async def get_moderator_logs(
    moderator_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 50,
) -> PaginatedResponse[ModLogEntry]:
    return await mod_log_service.get_moderator_logs(moderator_id, page, limit)


@router.get("/target/{target_id}")
async def get_target_logs(
    target_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 50,
) -> PaginatedResponse[ModLogEntry]:
    return await mod_log_service.get_target_logs(target_id, page, limit)


@router.get("/stats/topic/{topic_id}")
async def get_topic_stats(
    topic_id: UUID,
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
) -> ModLogStats:
    return await mod_log_service.get_topic_stats(topic_id)


@router.get("/stats/moderator/{moderator_id}")
async def get_moderator_stats(
    moderator_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    mod_log_service: Annotated[ModLogService, Depends(get_mod_log_service)],
) -> ModLogStats:
    return await mod_log_service.get_moderator_stats(moderator_id)
