"""
Notification schemas.
"""

from typing import Optional

from complaint_portal.schemas.common.base import BaseResponseSchema, BaseSchema


class NotificationResponse(BaseResponseSchema):
    user_id: str
    message: str
    complaint_id: Optional[str] = None
    complaint_title: Optional[str] = None
    category: Optional[str] = None
    read: bool
    updated_by: Optional[str] = None


class CountResponse(BaseSchema):
    count: int
