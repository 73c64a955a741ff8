"""
Notification endpoints for the signed-in user.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from complaint_portal.api.results import unwrap_result
from complaint_portal.dependencies import CurrentUser, get_notification_service
from complaint_portal.schemas.notification import CountResponse, NotificationResponse
from complaint_portal.services.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    user: CurrentUser,
    unread_only: bool = Query(False),
    notification_service: NotificationService = Depends(get_notification_service),
) -> List[NotificationResponse]:
    """Newest first."""
    return unwrap_result(notification_service.list_for_user(user, unread_only=unread_only))


@router.get("/unread-count", response_model=CountResponse)
def unread_count(
    user: CurrentUser,
    notification_service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    return CountResponse(count=unwrap_result(notification_service.unread_count(user)))


@router.post("/read-all", response_model=CountResponse)
def mark_all_read(
    user: CurrentUser,
    notification_service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    return CountResponse(count=unwrap_result(notification_service.mark_all_read(user)))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    user: CurrentUser,
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    return unwrap_result(notification_service.mark_read(user, notification_id))


@router.delete("", response_model=CountResponse)
def clear_all(
    user: CurrentUser,
    notification_service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    """Delete every notification of the caller."""
    return CountResponse(count=unwrap_result(notification_service.clear_all(user)))
