"""
Base models package.

Provides the declarative base, mixins and enums for all database models.
"""

from complaint_portal.models.base.base_model import Base, BaseModel
from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    SupervisorCategory,
    UserRole,
)
from complaint_portal.models.base.mixins import TimestampMixin

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "UserRole",
    "ComplaintStatus",
    "ComplaintCategory",
    "SupervisorCategory",
]
