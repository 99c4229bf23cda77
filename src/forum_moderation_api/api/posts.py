"""Post submission and post moderation endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.content import AppliedAction
from forum_moderation_api.database.models.content import ModerationRequest
from forum_moderation_api.database.models.content import PostCreate
from forum_moderation_api.database.models.content import PostSubmissionResult
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.moderation_service import ModerationService
from forum_moderation_api.services.moderation_service import get_moderation_service
from forum_moderation_api.services.submission_service import SubmissionService
from forum_moderation_api.services.submission_service import get_submission_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    submission_service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> PostSubmissionResult:
    """Submit a post; members only, banned members are rejected."""
    return await submission_service.submit_post(current_user, post_data)


@router.post("/{post_id}/moderation")
async def moderate_post(
    post_id: UUID,
    request: ModerationRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    moderation_service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> AppliedAction:
    """Apply a moderator action to a post."""
    result = await moderation_service.moderate(
        current_user, ContentKind.POST, post_id, request
    )
    return result.summary()
