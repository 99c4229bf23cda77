"""Test configuration and fixtures for the forum moderation API tests."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import parse_conditions
from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import MemberRole
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.models.topic import Topic
from forum_moderation_api.database.models.topic import TopicMembership
from forum_moderation_api.database.models.user import User


@pytest.fixture
def mock_connection():
    """Mock database connection for testing."""
    connection = AsyncMock()
    connection.fetchval = AsyncMock()
    connection.fetchrow = AsyncMock()
    connection.fetch = AsyncMock()
    connection.execute = AsyncMock()
    return connection


@pytest.fixture
def make_user():
    """Factory for User models."""

    def _make_user(**overrides) -> User:
        data = {
            "pk": uuid4(),
            "email": f"user{uuid4().hex[:8]}@example.com",
            "username": f"user{uuid4().hex[:8]}",
            "post_cred": 10,
            "comment_cred": 5,
            "is_superuser": False,
            "created_at": datetime.now(UTC) - timedelta(days=365),
        }
        data.update(overrides)
        return User(**data)

    return _make_user


@pytest.fixture
def make_topic():
    """Factory for Topic models."""

    def _make_topic(**overrides) -> Topic:
        now = datetime.now(UTC)
        data = {
            "pk": uuid4(),
            "name": "python",
            "display_name": "Python",
            "owner_pk": uuid4(),
            "last_activity_at": now,
            "created_at": now - timedelta(days=30),
        }
        data.update(overrides)
        return Topic(**data)

    return _make_topic


@pytest.fixture
def make_membership():
    """Factory for TopicMembership models."""

    def _make_membership(topic_pk, user_pk, **overrides) -> TopicMembership:
        data = {
            "pk": uuid4(),
            "topic_pk": topic_pk,
            "user_pk": user_pk,
            "role": MemberRole.MEMBER,
            "is_banned": False,
            "joined_at": datetime.now(UTC),
        }
        data.update(overrides)
        return TopicMembership(**data)

    return _make_membership


@pytest.fixture
def make_post():
    """Factory for Post models."""

    def _make_post(**overrides) -> Post:
        data = {
            "pk": uuid4(),
            "topic_pk": uuid4(),
            "author_pk": uuid4(),
            "title": "A question about asyncio",
            "content": "How do task groups cancel siblings?",
            "moderation_state": ModerationState.ACTIVE,
            "is_locked": False,
            "created_at": datetime.now(UTC),
        }
        data.update(overrides)
        return Post(**data)

    return _make_post


@pytest.fixture
def make_comment():
    """Factory for Comment models."""

    def _make_comment(**overrides) -> Comment:
        data = {
            "pk": uuid4(),
            "post_pk": uuid4(),
            "topic_pk": uuid4(),
            "author_pk": uuid4(),
            "content": "They cancel on the first failure.",
            "moderation_state": ModerationState.ACTIVE,
            "created_at": datetime.now(UTC),
        }
        data.update(overrides)
        return Comment(**data)

    return _make_comment


@pytest.fixture
def make_rule():
    """Factory for AutomodRule models; ``conditions`` accepts raw payloads."""

    def _make_rule(**overrides) -> AutomodRule:
        conditions = overrides.pop(
            "conditions", [{"type": "content_contains", "keywords": ["spam"]}]
        )
        data = {
            "pk": uuid4(),
            "topic_pk": uuid4(),
            "name": "No spam",
            "enabled": True,
            "priority": 0,
            "conditions": parse_conditions(conditions) if conditions else [],
            "action": AutomodAction.REMOVE,
            "created_by_pk": uuid4(),
            "created_at": datetime.now(UTC),
        }
        data.update(overrides)
        return AutomodRule(**data)

    return _make_rule
