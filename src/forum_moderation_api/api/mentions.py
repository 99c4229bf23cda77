"""Mention endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.database.models.base import PaginatedResponse
from forum_moderation_api.database.models.mention import MentionDetail
from forum_moderation_api.database.models.mention import MentionUserCount
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.mention_service import MentionService
from forum_moderation_api.services.mention_service import get_mention_service

router = APIRouter(prefix="/mentions", tags=["mentions"])


@router.get("")
async def get_my_mentions(
    current_user: Annotated[User, Depends(get_current_user)],
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 20,
) -> PaginatedResponse[MentionDetail]:
    """Mentions of the current user, newest first."""
    return await mention_service.get_user_mentions(current_user.pk, page, limit)


@router.get("/count")
async def get_mention_count(
    current_user: Annotated[User, Depends(get_current_user)],
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
) -> dict[str, int]:
    count = await mention_service.get_mention_count(current_user.pk)
    return {"count": count}


@router.get("/top-mentioners")
async def get_top_mentioners(
    current_user: Annotated[User, Depends(get_current_user)],
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
    limit: Annotated[int, Query(le=100, ge=1)] = 10,
) -> list[MentionUserCount]:
    """Users who mention the current user most."""
    return await mention_service.get_top_mentioners(current_user.pk, limit)


@router.get("/top-mentioned")
async def get_top_mentioned(
    current_user: Annotated[User, Depends(get_current_user)],
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
    limit: Annotated[int, Query(le=100, ge=1)] = 10,
) -> list[MentionUserCount]:
    """Users the current user mentions most."""
    return await mention_service.get_top_mentioned(current_user.pk, limit)


@router.get("/post/{post_id}")
async def get_post_mentions(
    post_id: UUID,
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
) -> list[MentionDetail]:
    return await mention_service.get_post_mentions(post_id)


@router.get("/comment/{comment_id}")
async def get_comment_mentions(
    comment_id: UUID,
    mention_service: Annotated[MentionService, Depends(get_mention_service)],
) -> list[MentionDetail]:
    return await mention_service.get_comment_mentions(comment_id)
