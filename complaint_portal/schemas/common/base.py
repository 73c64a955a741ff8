"""
Base schema classes with common configuration.

Field names are snake_case in Python and camelCase on the wire, which is
what the web client sends and reads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from complaint_portal.utils.datetime_utils import DateTimeHelper

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseResponseSchema",
    "MessageResponse",
    "UTCDateTime",
]

# Datetimes read back from SQLite are naive UTC; always emit an offset
UTCDateTime = Annotated[datetime, AfterValidator(DateTimeHelper.as_utc)]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create operations."""
    pass


class BaseResponseSchema(BaseSchema):
    """Base schema for entity responses."""

    id: str
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class MessageResponse(BaseSchema):
    success: bool = True
    message: str
