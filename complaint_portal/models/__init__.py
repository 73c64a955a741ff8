"""
ORM models. Importing this package registers every table on ``Base.metadata``.
"""

from complaint_portal.models.base import Base, BaseModel
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.notification import Notification
from complaint_portal.models.user import User

__all__ = ["Base", "BaseModel", "User", "Complaint", "Notification"]
