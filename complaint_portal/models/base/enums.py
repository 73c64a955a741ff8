"""
Database enums shared by models and schemas.
"""

import enum
from typing import Optional


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "student"
    STAFF = "staff"
    SUPERVISOR = "supervisor"
    MAINTENANCE = "maintenance"
    ADMIN = "admin"

    @property
    def dashboard_path(self) -> str:
        return f"/{self.value}-dashboard"

    @property
    def is_submitter(self) -> bool:
        return self in (UserRole.STUDENT, UserRole.STAFF)

    @property
    def is_handler(self) -> bool:
        return self in (UserRole.SUPERVISOR, UserRole.MAINTENANCE, UserRole.ADMIN)


SELF_REGISTERABLE_ROLES = (
    UserRole.STUDENT,
    UserRole.STAFF,
    UserRole.SUPERVISOR,
    UserRole.MAINTENANCE,
)

# Required email suffix per role at signup; roles not listed accept any domain
ROLE_EMAIL_DOMAINS = {
    UserRole.STUDENT: "@gmail.com",
    UserRole.STAFF: "@staff.com",
    UserRole.SUPERVISOR: "@sup.com",
}


class ComplaintStatus(str, enum.Enum):
    """Complaint lifecycle status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REOPENED = "reopened"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def normalize(cls, value) -> "ComplaintStatus":
        """
        Map any casing or spacing of a status onto the enum.

        "In Progress", "in-progress" and "IN_PROGRESS" are the same state;
        "resolved" is accepted for completed.

        Raises:
            ValueError: if the value names no known status
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Status is required")
        key = "_".join(str(value).strip().lower().replace("-", " ").split())
        key = _STATUS_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Invalid status: {value}") from None


_STATUS_LABELS = {
    ComplaintStatus.PENDING: "Pending",
    ComplaintStatus.IN_PROGRESS: "In Progress",
    ComplaintStatus.COMPLETED: "Completed",
    ComplaintStatus.REOPENED: "Reopened",
}

_STATUS_ALIASES = {
    "resolved": "completed",
    "inprogress": "in_progress",
}


class ComplaintCategory(str, enum.Enum):
    """Categories a complaint can be filed under."""
    ELECTRICAL = "Electrical"
    PLUMBING = "Plumbing"
    CLEANING = "Cleaning"
    INTERNET = "Internet"
    SECURITY = "Security"
    OTHER = "Other"


class SupervisorCategory(str, enum.Enum):
    """Work area a supervisor is responsible for."""
    CLEANING = "Cleaning"
    ELECTRICAL = "Electrical"
    PLUMBING = "Plumbing"
    MAINTENANCE = "Maintenance"
    LAB_SERVER = "Lab/Server"
    OTHER = "Other"


def match_enum_value(enum_cls, value: Optional[str]):
    """Case-insensitive lookup of an enum member by value; None when absent."""
    if value is None:
        return None
    wanted = str(value).strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None


def submitter_type_for_email(email: Optional[str]) -> str:
    """User type shown in admin tables, derived from the email domain."""
    email = (email or "").lower()
    if email.endswith("@gmail.com"):
        return "Student"
    if email.endswith("@staff.com"):
        return "Staff"
    return "Unknown"


def submitted_by_for_email(email: str) -> str:
    """Value stored on a new complaint: any address mentioning staff counts as staff."""
    return "staff" if "staff" in (email or "").lower() else "student"
