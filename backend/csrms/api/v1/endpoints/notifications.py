"""
Notification inbox endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from csrms.api.deps import get_notification_service
from csrms.schemas.service_requests import NotificationRead
from csrms.utils.notifications import NotificationService

router = APIRouter()


@router.get("/user/{user_id}/notifications")
async def list_unread_notifications(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    """Unread notifications for a user, newest first."""
    notifications = await service.get_unread_notifications(user_id)
    return {
        "success": True,
        "count": len(notifications),
        "data": [NotificationRead.model_validate(n).to_json() for n in notifications],
    }


@router.patch("/notifications/{notification_id}/read")
async def acknowledge_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    """Mark a notification as read."""
    if not await service.mark_as_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "notificationId": notification_id}
