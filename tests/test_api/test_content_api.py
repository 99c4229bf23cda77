"""Tests for post and comment submission and moderation endpoints."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from fastapi import status

from forum_moderation_api.api.comments import router as comments_router
from forum_moderation_api.api.posts import router as posts_router
from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.content import CommentSubmissionResult
from forum_moderation_api.database.models.content import PostSubmissionResult
from forum_moderation_api.errors import AuthorizationError
from forum_moderation_api.errors import ConflictError
from forum_moderation_api.services.moderation_executor import ActionResult
from forum_moderation_api.services.moderation_service import ModerationService
from forum_moderation_api.services.moderation_service import get_moderation_service
from forum_moderation_api.services.submission_service import SubmissionService
from forum_moderation_api.services.submission_service import get_submission_service


@pytest.fixture
def mock_submission_service():
    return AsyncMock(spec=SubmissionService)


@pytest.fixture
def mock_moderation_service():
    return AsyncMock(spec=ModerationService)


@pytest.fixture
def client(build_client, mock_submission_service, mock_moderation_service):
    return build_client(
        posts_router,
        comments_router,
        overrides={
            get_submission_service: mock_submission_service,
            get_moderation_service: mock_moderation_service,
        },
    )


class TestSubmissionEndpoints:
    """Test post and comment submission."""

    def test_create_post(
        self, client, mock_submission_service, make_post, current_user
    ):
        post = make_post(author_pk=current_user.pk)
        mock_submission_service.submit_post.return_value = PostSubmissionResult(
            post=post, matched_rule_pks=[uuid4()]
        )

        response = client.post(
            "/api/v1/posts",
            json={
                "topic_pk": str(post.topic_pk),
                "title": post.title,
                "content": post.content,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["post"]["pk"] == str(post.pk)
        assert len(body["matched_rule_pks"]) == 1
        author, payload = mock_submission_service.submit_post.call_args.args
        assert author is current_user
        assert payload.topic_pk == post.topic_pk

    def test_create_post_rejects_empty_title(self, client, mock_submission_service):
        response = client.post(
            "/api/v1/posts",
            json={"topic_pk": str(uuid4()), "title": "", "content": "body"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_submission_service.submit_post.assert_not_awaited()

    def test_create_post_banned_member(self, client, mock_submission_service):
        mock_submission_service.submit_post.side_effect = AuthorizationError(
            "You are banned from this topic"
        )

        response = client.post(
            "/api/v1/posts",
            json={"topic_pk": str(uuid4()), "title": "Hi", "content": "body"},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["code"] == "FORBIDDEN"

    def test_create_comment_on_locked_post(self, client, mock_submission_service):
        mock_submission_service.submit_comment.side_effect = ConflictError(
            "Post is locked"
        )

        response = client.post(
            "/api/v1/comments",
            json={"post_pk": str(uuid4()), "content": "late reply"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Post is locked"

    def test_create_comment(
        self, client, mock_submission_service, make_comment
    ):
        comment = make_comment()
        mock_submission_service.submit_comment.return_value = (
            CommentSubmissionResult(comment=comment)
        )

        response = client.post(
            "/api/v1/comments",
            json={"post_pk": str(comment.post_pk), "content": comment.content},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["comment"]["pk"] == str(comment.pk)


class TestModerationEndpoints:
    """Test manual moderation."""

    def test_moderate_post_returns_applied_action(
        self, client, mock_moderation_service, current_user
    ):
        post_pk = uuid4()
        mock_moderation_service.moderate.return_value = ActionResult(
            action=AutomodAction.LOCK,
            content_kind=ContentKind.POST,
            content_pk=post_pk,
            previous_state=ModerationState.ACTIVE,
            new_state=ModerationState.ACTIVE,
            is_locked=True,
            changed=True,
        )

        response = client.post(
            f"/api/v1/posts/{post_pk}/moderation",
            json={"action": "LOCK", "reason": "Heated thread"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["action"] == "LOCK"
        assert body["changed"] is True
        assert body["rule_pk"] is None
        actor, kind, target, request = mock_moderation_service.moderate.call_args.args
        assert actor is current_user
        assert kind == ContentKind.POST
        assert target == post_pk
        assert request.reason == "Heated thread"

    def test_moderate_comment_requires_moderator(
        self, client, mock_moderation_service
    ):
        mock_moderation_service.moderate.side_effect = AuthorizationError(
            "Moderator access required"
        )

        response = client.post(
            f"/api/v1/comments/{uuid4()}/moderation", json={"action": "REMOVE"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert (
            mock_moderation_service.moderate.call_args.args[1] == ContentKind.COMMENT
        )

    def test_unknown_action_is_rejected(self, client, mock_moderation_service):
        response = client.post(
            f"/api/v1/posts/{uuid4()}/moderation", json={"action": "SHADOWBAN"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_moderation_service.moderate.assert_not_awaited()
