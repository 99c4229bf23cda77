"""Tests for topic role resolution."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from forum_moderation_api.database.models.base import MemberRole
from forum_moderation_api.database.models.base import TopicRole
from forum_moderation_api.errors import AuthorizationError
from forum_moderation_api.errors import NotFoundError
from forum_moderation_api.services.authorization_gate import AuthorizationGate


@pytest.fixture
def topic(make_topic):
    return make_topic()


@pytest.fixture
def mock_topic_repo(topic):
    repo = AsyncMock()
    repo.get_by_pk.return_value = topic
    return repo


@pytest.fixture
def mock_member_repo():
    repo = AsyncMock()
    repo.get_membership.return_value = None
    return repo


@pytest.fixture
def gate(mock_topic_repo, mock_member_repo):
    return AuthorizationGate(topic_repo=mock_topic_repo, member_repo=mock_member_repo)


class TestGetTopicAccess:
    """Test role lookup."""

    @pytest.mark.asyncio
    async def test_unknown_topic(self, gate, mock_topic_repo, make_user):
        mock_topic_repo.get_by_pk.return_value = None

        with pytest.raises(NotFoundError):
            await gate.get_topic_access(make_user(), uuid4())

    @pytest.mark.asyncio
    async def test_owner_without_membership(self, gate, topic, make_user):
        access = await gate.get_topic_access(make_user(pk=topic.owner_pk), topic.pk)

        assert access.role == TopicRole.OWNER

    @pytest.mark.asyncio
    async def test_moderator_membership(
        self, gate, topic, make_user, make_membership, mock_member_repo
    ):
        user = make_user()
        mock_member_repo.get_membership.return_value = make_membership(
            topic.pk, user.pk, role=MemberRole.MODERATOR
        )

        access = await gate.get_topic_access(user, topic.pk)

        assert access.role == TopicRole.MODERATOR
        assert access.can_moderate is True

    @pytest.mark.asyncio
    async def test_anonymous(self, gate, topic, mock_member_repo):
        access = await gate.get_topic_access(None, topic.pk)

        assert access.role == TopicRole.NONE
        mock_member_repo.get_membership.assert_not_awaited()


class TestRequireSubmissionAccess:
    """Test the submission gate."""

    @pytest.mark.asyncio
    async def test_member_allowed(
        self, gate, topic, make_user, make_membership, mock_member_repo
    ):
        user = make_user()
        mock_member_repo.get_membership.return_value = make_membership(
            topic.pk, user.pk
        )

        access = await gate.require_submission_access(user, topic.pk)

        assert access.role == TopicRole.MEMBER

    @pytest.mark.asyncio
    async def test_banned_member_rejected(
        self, gate, topic, make_user, make_membership, mock_member_repo
    ):
        user = make_user()
        mock_member_repo.get_membership.return_value = make_membership(
            topic.pk, user.pk, is_banned=True
        )

        with pytest.raises(AuthorizationError, match="banned"):
            await gate.require_submission_access(user, topic.pk)

    @pytest.mark.asyncio
    async def test_non_member_rejected(self, gate, topic, make_user):
        with pytest.raises(AuthorizationError, match="member"):
            await gate.require_submission_access(make_user(), topic.pk)

    @pytest.mark.asyncio
    async def test_superuser_allowed_without_membership(self, gate, topic, make_user):
        access = await gate.require_submission_access(
            make_user(is_superuser=True), topic.pk
        )

        assert access.is_superuser is True


class TestRequireModerator:
    """Test the moderator gate."""

    @pytest.mark.asyncio
    async def test_plain_member_rejected(
        self, gate, topic, make_user, make_membership, mock_member_repo
    ):
        user = make_user()
        mock_member_repo.get_membership.return_value = make_membership(
            topic.pk, user.pk
        )

        with pytest.raises(AuthorizationError):
            await gate.require_moderator(user, topic.pk)

    @pytest.mark.asyncio
    async def test_owner_allowed(self, gate, topic, make_user):
        access = await gate.require_moderator(make_user(pk=topic.owner_pk), topic.pk)

        assert access.can_moderate is True
