from complaint_portal.api.legacy.handlers import router

__all__ = ["router"]
