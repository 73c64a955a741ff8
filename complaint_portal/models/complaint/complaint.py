"""
Complaint model: a facility issue raised by a student or staff member and
worked on by supervisors, maintenance and admins.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaint_portal.models.base.base_model import BaseModel
from complaint_portal.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_portal.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from complaint_portal.models.user.user import User

__all__ = ["Complaint"]


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Complaint(BaseModel, TimestampMixin):
    """
    Facility complaint.

    Attributes:
        title: Brief summary
        description: Detailed description
        building: Building or hostel name from the room catalog
        room: Room label within the building
        category: Complaint category, also used to route to supervisors
        status: Current lifecycle status
        user_id: Submitter
        user_email: Submitter email at submission time
        submitted_by: "student" or "staff"
        image_url: Optional photo
        preferred_date: Preferred visit date as entered
        preferred_time: Preferred visit time as entered
        last_updated_by: Name or role label of the last handler
        last_updated_by_role: Role of the last handler
        supervisor_name: Supervisor who last handled the complaint
        status_message: Note left with the last status change
        reopen_reason: Why the complaint was reopened
        reopened_at: When it was last reopened
    """

    __tablename__ = "complaints"
    __table_args__ = (
        Index("ix_complaints_category_status", "category", "status"),
        Index("ix_complaints_user_created", "user_id", "created_at"),
        {"comment": "Facility complaints"},
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, comment="Brief summary")
    description: Mapped[str] = mapped_column(Text, nullable=False)
    building: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    room: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[ComplaintCategory] = mapped_column(
        Enum(ComplaintCategory, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        index=True,
    )
    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(ComplaintStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        default=ComplaintStatus.PENDING,
        index=True,
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Submitting user",
    )
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    submitted_by: Mapped[str] = mapped_column(String(20), nullable=False, default="student")

    image_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    preferred_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    preferred_time: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    last_updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_updated_by_role: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    supervisor_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reopen_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reopened_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="complaints")

    def __repr__(self) -> str:
        return f"<Complaint(id={self.id}, title={self.title!r}, status={self.status})>"
