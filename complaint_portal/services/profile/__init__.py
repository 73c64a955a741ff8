from complaint_portal.services.profile.profile_service import ProfileService

__all__ = ["ProfileService"]
