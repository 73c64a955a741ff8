from complaint_portal.services.complaint.complaint_service import (
    ComplaintService,
    complaint_scope_for,
    handler_label,
)

__all__ = ["ComplaintService", "complaint_scope_for", "handler_label"]
