from complaint_portal.repositories.complaint.complaint_repository import (
    ComplaintFilters,
    ComplaintRepository,
    ComplaintScope,
)

__all__ = ["ComplaintFilters", "ComplaintRepository", "ComplaintScope"]
