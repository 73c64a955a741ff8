"""
Profile schemas.
"""

from typing import Optional

from pydantic import Field

from complaint_portal.schemas.common.base import BaseSchema


class ProfileUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    dob: Optional[str] = Field(default=None, min_length=1, max_length=32)
