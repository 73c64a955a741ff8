"""
SQLAlchemy model mixins for reusable functionality.
"""

from sqlalchemy import Column, DateTime

from complaint_portal.utils.datetime_utils import DateTimeHelper


class TimestampMixin:
    """
    Mixin for automatic timestamp tracking.

    Timestamps are set application side in UTC so SQLite and PostgreSQL
    behave the same.
    """

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=DateTimeHelper.now,
        index=True,
        comment="Record creation timestamp (UTC)"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=DateTimeHelper.now,
        onupdate=DateTimeHelper.now,
        comment="Record last update timestamp (UTC)"
    )
