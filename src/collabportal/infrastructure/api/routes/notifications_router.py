"""Notification API routes."""

from fastapi import APIRouter, Query

from collabportal.infrastructure.api.dependencies import AuthenticatedUser, NotificationServiceDep
from collabportal.infrastructure.api.schemas import NotificationResponse

router = APIRouter()


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: AuthenticatedUser,
    service: NotificationServiceDep,
    unread_only: bool = Query(False, description="Only unread notifications"),
) -> list[NotificationResponse]:
    """List the current user's notifications, newest first."""
    notifications = await service.list_for(current_user.user_id, unread_only=unread_only)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str, current_user: AuthenticatedUser, service: NotificationServiceDep
) -> dict:
    """Mark one of the current user's notifications as read."""
    await service.mark_read(notification_id, current_user.user_id)
    return {"success": True}
