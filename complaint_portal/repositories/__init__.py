"""Data access layer."""

from complaint_portal.repositories.complaint import (
    ComplaintFilters,
    ComplaintRepository,
    ComplaintScope,
)
from complaint_portal.repositories.notification import NotificationRepository
from complaint_portal.repositories.user import UserRepository

__all__ = [
    "ComplaintFilters",
    "ComplaintRepository",
    "ComplaintScope",
    "NotificationRepository",
    "UserRepository",
]
