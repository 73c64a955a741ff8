from complaint_portal.services.base.base_service import BaseService
from complaint_portal.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",
]
