"""Tests for trending endpoints."""

from datetime import UTC
from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from fastapi import status

from forum_moderation_api.api.trending import router as trending_router
from forum_moderation_api.database.models.trending import TrendingCacheStatus
from forum_moderation_api.database.models.trending import TrendingPostList
from forum_moderation_api.database.models.trending import TrendingTopicList
from forum_moderation_api.services.trending_service import TrendingService
from forum_moderation_api.services.trending_service import get_trending_service


@pytest.fixture
def mock_trending_service():
    service = AsyncMock(spec=TrendingService)
    now = datetime.now(UTC)
    service.get_trending_topics.return_value = TrendingTopicList(
        topics=[], computed_at=now
    )
    service.get_trending_posts.return_value = TrendingPostList(
        posts=[], computed_at=now
    )
    service.get_trending_posts_for_topic.return_value = TrendingPostList(
        posts=[], computed_at=now
    )
    return service


@pytest.fixture
def client(build_client, mock_trending_service):
    return build_client(
        trending_router,
        overrides={get_trending_service: mock_trending_service},
        authenticated=False,
    )


class TestTrendingEndpoints:
    """Test the trending router."""

    def test_invalid_limit_is_passed_through_not_rejected(
        self, client, mock_trending_service
    ):
        response = client.get("/api/v1/trending/topics", params={"limit": "lots"})

        assert response.status_code == status.HTTP_200_OK
        mock_trending_service.get_trending_topics.assert_awaited_once_with(
            "lots", force_refresh=False
        )

    def test_refresh_flag(self, client, mock_trending_service):
        response = client.get(
            "/api/v1/trending/posts", params={"limit": "5", "refresh": "true"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_trending_service.get_trending_posts.assert_awaited_once_with(
            "5", force_refresh=True
        )

    def test_topic_posts(self, client, mock_trending_service):
        topic_pk = uuid4()

        response = client.get(f"/api/v1/trending/posts/topic/{topic_pk}")

        assert response.status_code == status.HTTP_200_OK
        mock_trending_service.get_trending_posts_for_topic.assert_awaited_once_with(
            topic_pk, None
        )

    def test_cache_status(self, client, mock_trending_service):
        mock_trending_service.get_cache_status.return_value = TrendingCacheStatus(
            ttl_seconds=300,
            topics_cached=True,
            topics_expires_in=42,
            posts_cached=False,
        )

        response = client.get("/api/v1/trending/cache/status")

        assert response.json()["topics_expires_in"] == 42

    def test_clear_cache_requires_superuser(
        self, build_client, mock_trending_service, current_user
    ):
        client = build_client(
            trending_router, overrides={get_trending_service: mock_trending_service}
        )

        response = client.post("/api/v1/trending/cache/clear")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_trending_service.clear_cache.assert_not_awaited()

        current_user.is_superuser = True
        response = client.post("/api/v1/trending/cache/clear")

        assert response.status_code == status.HTTP_200_OK
        mock_trending_service.clear_cache.assert_awaited_once()
