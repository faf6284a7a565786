"""
Notification API endpoints.

Routes:
- GET /notifications - Caller's notifications, newest first
- DELETE /notifications/{id} - Dismiss a notification

Dependencies: counselhub.application.services.notification_service, counselhub.models
System role: Notification HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from counselhub.api.deps import get_current_user, get_notification_service
from counselhub.api.routers.router_utils import handle_service_errors
from counselhub.application.services.notification_service import NotificationService
from counselhub.boundary.db.models import UserModel
from counselhub.models.common import OkResponse
from counselhub.models.notification import NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
@handle_service_errors
async def list_notifications(
    limit: int = Query(default=50, ge=1, le=500),
    user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> list[NotificationResponse]:
    notifications = await notification_service.list_for(user, limit=limit)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.delete("/{notification_id}", response_model=OkResponse)
@handle_service_errors
async def delete_notification(
    notification_id: UUID,
    user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OkResponse:
    """
    Dismiss one of the caller's notifications.

    Raises:
        HTTPException(404): Unknown id or someone else's notification
    """
    await notification_service.delete(user, notification_id)
    return OkResponse(message="Notification deleted")
