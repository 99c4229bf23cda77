"""Trending topic and post endpoints.

``limit`` is accepted as free text: invalid or non-positive values fall back
to the default and large values are clamped, never rejected.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from forum_moderation_api.auth.dependencies import require_superuser
from forum_moderation_api.database.models.trending import TrendingCacheStatus
from forum_moderation_api.database.models.trending import TrendingPostList
from forum_moderation_api.database.models.trending import TrendingTopicList
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.trending_service import TrendingService
from forum_moderation_api.services.trending_service import get_trending_service

router = APIRouter(prefix="/trending", tags=["trending"])

TrendingServiceDep = Annotated[TrendingService, Depends(get_trending_service)]


@router.get("/topics")
async def get_trending_topics(
    trending_service: TrendingServiceDep,
    limit: Annotated[str | None, Query()] = None,
    refresh: Annotated[bool, Query()] = False,
) -> TrendingTopicList:
    return await trending_service.get_trending_topics(limit, force_refresh=refresh)


@router.get("/posts")
async def get_trending_posts(
    trending_service: TrendingServiceDep,
    limit: Annotated[str | None, Query()] = None,
    refresh: Annotated[bool, Query()] = False,
) -> TrendingPostList:
    return await trending_service.get_trending_posts(limit, force_refresh=refresh)


@router.get("/posts/topic/{topic_id}")
async def get_topic_trending_posts(
    topic_id: UUID,
    trending_service: TrendingServiceDep,
    limit: Annotated[str | None, Query()] = None,
) -> TrendingPostList:
    return await trending_service.get_trending_posts_for_topic(topic_id, limit)


@router.get("/cache/status")
async def get_cache_status(
    trending_service: TrendingServiceDep,
) -> TrendingCacheStatus:
    return await trending_service.get_cache_status()


@router.post("/cache/clear")
async def clear_cache(
    _: Annotated[User, Depends(require_superuser)],
    trending_service: TrendingServiceDep,
) -> dict[str, str]:
    await trending_service.clear_cache()
    return {"message": "Trending cache cleared"}
