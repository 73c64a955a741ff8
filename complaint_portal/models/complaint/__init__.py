from complaint_portal.models.complaint.complaint import Complaint

__all__ = ["Complaint"]
