"""
In-app notification delivered to a single user.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaint_portal.models.base.base_model import BaseModel
from complaint_portal.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from complaint_portal.models.user.user import User

__all__ = ["Notification"]


class Notification(BaseModel, TimestampMixin):
    """
    Notification row.

    ``complaint_id`` is a plain reference: notifications outlive the
    complaint they mention.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
        {"comment": "Per-user notifications"},
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Recipient",
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    complaint_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    complaint_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="notifications")
