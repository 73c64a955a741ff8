"""
Portal user account.

One table for every role. Supervisors carry the work category whose
complaints they handle; students may record a department.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaint_portal.models.base.base_model import BaseModel
from complaint_portal.models.base.enums import SupervisorCategory, UserRole
from complaint_portal.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from complaint_portal.models.complaint.complaint import Complaint
    from complaint_portal.models.notification.notification import Notification

__all__ = ["User"]


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(BaseModel, TimestampMixin):
    """
    Account record.

    Attributes:
        email: Login email, stored lowercased and trimmed
        role: Portal role controlling dashboard and permissions
        name: Display name
        dob: Date of birth as entered at signup, used by the reset helpers
        department: Department (not recorded for staff, supervisor, maintenance)
        category: Supervisor work category
        profile_image_url: URL of the uploaded profile picture
        password: bcrypt hash, or a legacy plaintext value on old records
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Login email (lowercase)",
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=_enum_values, native_enum=False, length=20),
        nullable=False,
        index=True,
        comment="Portal role",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="Display name")
    dob: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, comment="Date of birth")
    department: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    category: Mapped[Optional[SupervisorCategory]] = mapped_column(
        Enum(SupervisorCategory, values_callable=_enum_values, native_enum=False, length=32),
        nullable=True,
        index=True,
        comment="Supervisor work category",
    )
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    password: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt hash or legacy plaintext",
    )

    complaints: Mapped[List["Complaint"]] = relationship(
        "Complaint",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    notifications: Mapped[List["Notification"]] = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
