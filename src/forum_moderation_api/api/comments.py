"""Comment submission and comment moderation endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.content import AppliedAction
from forum_moderation_api.database.models.content import CommentCreate
from forum_moderation_api.database.models.content import CommentSubmissionResult
from forum_moderation_api.database.models.content import ModerationRequest
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.moderation_service import ModerationService
from forum_moderation_api.services.moderation_service import get_moderation_service
from forum_moderation_api.services.submission_service import SubmissionService
from forum_moderation_api.services.submission_service import get_submission_service

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    submission_service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> CommentSubmissionResult:
    """Submit a comment on an unlocked, visible post."""
    return await submission_service.submit_comment(current_user, comment_data)


@router.post("/{comment_id}/moderation")
async def moderate_comment(
    comment_id: UUID,
    request: ModerationRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    moderation_service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> AppliedAction:
    """Apply a moderator action to a comment."""
    result = await moderation_service.moderate(
        current_user, ContentKind.COMMENT, comment_id, request
    )
    return result.summary()
