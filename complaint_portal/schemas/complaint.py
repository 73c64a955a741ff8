"""
Complaint schemas.
"""

from typing import Dict, List, Optional

from pydantic import Field, computed_field, field_validator

from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    match_enum_value,
    submitter_type_for_email,
)
from complaint_portal.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema, UTCDateTime


class ComplaintCreate(BaseCreateSchema):
    title: str = Field(..., min_length=1, max_length=255)
    building: str = Field(..., min_length=1, max_length=255)
    room: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: ComplaintCategory
    preferred_date: Optional[str] = Field(default=None, max_length=32)
    preferred_time: Optional[str] = Field(default=None, max_length=32)

    @field_validator("category", mode="before")
    @classmethod
    def match_category(cls, value):
        if isinstance(value, str):
            return match_enum_value(ComplaintCategory, value) or value
        return value


class ComplaintResponse(BaseResponseSchema):
    title: str
    description: str
    building: str
    room: str
    category: ComplaintCategory
    status: ComplaintStatus
    user_id: str
    user_email: str
    submitted_by: str
    image_url: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    last_updated_by: Optional[str] = None
    last_updated_by_role: Optional[str] = None
    supervisor_name: Optional[str] = None
    status_message: Optional[str] = None
    reopen_reason: Optional[str] = None
    reopened_at: Optional[UTCDateTime] = None

    @computed_field(alias="statusLabel")
    @property
    def status_label(self) -> str:
        return self.status.label

    @computed_field(alias="userType")
    @property
    def user_type(self) -> str:
        return submitter_type_for_email(self.user_email)


class ComplaintListResponse(BaseSchema):
    items: List[ComplaintResponse]
    total: int
    status_counts: Dict[str, int]


class ComplaintFilterOptions(BaseSchema):
    buildings: List[str]
    rooms: List[str]


class StatusUpdateRequest(BaseSchema):
    status: ComplaintStatus
    message: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return ComplaintStatus.normalize(value)


class LegacyStatusUpdateRequest(BaseSchema):
    complaint_id: Optional[str] = None
    new_status: Optional[str] = None
    message: Optional[str] = None


class ReopenRequest(BaseSchema):
    reason: Optional[str] = Field(default=None, max_length=2000)


class SupervisorUpdateItem(BaseSchema):
    id: str
    title: str
    category: ComplaintCategory
    status: ComplaintStatus
    supervisor_name: str
    status_message: Optional[str] = None
    updated_at: Optional[UTCDateTime] = None

    @field_validator("supervisor_name", mode="before")
    @classmethod
    def default_supervisor_name(cls, value):
        return value or "Unknown Supervisor"
