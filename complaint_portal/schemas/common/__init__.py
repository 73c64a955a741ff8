from complaint_portal.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    MessageResponse,
    UTCDateTime,
)

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseResponseSchema",
    "MessageResponse",
    "UTCDateTime",
]
