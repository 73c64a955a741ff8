from complaint_portal.services.auth.auth_service import AuthService
from complaint_portal.services.auth.password_service import PasswordService

__all__ = ["AuthService", "PasswordService"]
