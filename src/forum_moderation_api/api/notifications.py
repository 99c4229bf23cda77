"""Notification inbox endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import status

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.database.models.base import NotificationStatus
from forum_moderation_api.database.models.notification import Notification
from forum_moderation_api.database.models.notification import NotificationList
from forum_moderation_api.database.models.notification import UnreadCount
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.notification_service import NotificationService
from forum_moderation_api.services.notification_service import (
    get_notification_service,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])

NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]


@router.get("")
async def get_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(le=100, ge=1)] = 20,
    status_filter: Annotated[NotificationStatus | None, Query(alias="status")] = None,
) -> NotificationList:
    return await notification_service.get_notifications(
        current_user.pk, page, limit, status_filter
    )


@router.get("/unread-count")
async def get_unread_count(
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
) -> UnreadCount:
    count = await notification_service.get_unread_count(current_user.pk)
    return UnreadCount(unread_count=count)


@router.patch("/read-all")
async def mark_all_as_read(
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
) -> dict[str, int]:
    updated = await notification_service.mark_all_as_read(current_user.pk)
    return {"updated": updated}


@router.patch("/{notification_id}/read")
async def mark_as_read(
    notification_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
) -> Notification:
    return await notification_service.mark_as_read(notification_id, current_user.pk)


@router.delete("/read")
async def delete_all_read(
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
) -> dict[str, int]:
    deleted = await notification_service.delete_all_read(current_user.pk)
    return {"deleted": deleted}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    notification_service: NotificationServiceDep,
) -> None:
    await notification_service.delete_notification(notification_id, current_user.pk)
