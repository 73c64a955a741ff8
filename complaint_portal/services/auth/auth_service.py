"""
Authentication service: credential checks, self-registration, and the
captcha-gated role login.

Tokens are stateless JWTs, so logout happens on the client by discarding
the token.
"""

from typing import Optional

from sqlalchemy.orm import Session

from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import AuthenticationError
from complaint_portal.core.logging import get_security_logger
from complaint_portal.core.security import (
    CaptchaManager,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from complaint_portal.models.base.enums import (
    ROLE_EMAIL_DOMAINS,
    SELF_REGISTERABLE_ROLES,
    UserRole,
)
from complaint_portal.models.user import User
from complaint_portal.repositories.user import UserRepository
from complaint_portal.repositories.user.user_repository import normalize_email
from complaint_portal.schemas.auth import (
    CaptchaResponse,
    CredentialsRequest,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserPublic,
)
from complaint_portal.services.base import BaseService, ServiceResult

# Signup wording for a wrong email domain, per role
_DOMAIN_MESSAGES = {
    UserRole.STUDENT: "Please signup with your official Student Gmail ending with @gmail.com",
    UserRole.STAFF: "Please signup with your official Staff ID ending with @staff.com",
    UserRole.SUPERVISOR: "Please signup with your official Supervisor ID ending with @sup.com",
}

# Roles that keep the department entered at signup
_DEPARTMENT_ROLES = (UserRole.STUDENT, UserRole.ADMIN)


class AuthService(BaseService[User, UserRepository]):
    """
    Account authentication.

    - ``login``: legacy email/password check returning the profile
    - ``role_login``: captcha and maintenance-key gated login
    - ``signup``: self-registration with per-role email rules
    - ``current_user``: resolve a bearer token to its user
    """

    def __init__(self, user_repository: UserRepository, db_session: Session):
        super().__init__(user_repository, db_session)
        self._audit = get_security_logger()

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    def authenticate(self, email: Optional[str], password: Optional[str]) -> ServiceResult[User]:
        """
        Check an email/password pair.

        Stored bcrypt hashes are verified as hashes; older records that hold
        the password itself are compared directly.
        """
        if not email or not password:
            return ServiceResult.bad_request("Email and password are required")

        normalized = normalize_email(email)
        try:
            user = self.repository.find_by_email(normalized)
            if user is None:
                self._audit.warning("login_failed", email=normalized, reason="unknown_email")
                return ServiceResult.unauthorized("Email not found")

            if not user.password:
                self._audit.warning("login_failed", email=normalized, reason="no_password")
                return ServiceResult.unauthorized("Invalid credentials")

            if not verify_password(password.strip(), user.password):
                self._audit.warning("login_failed", email=normalized, reason="wrong_password")
                return ServiceResult.unauthorized("Incorrect password")

            return ServiceResult.success(user)
        except Exception as e:
            return self._handle_exception(e, "log in", normalized)

    def login(self, request: CredentialsRequest) -> ServiceResult[LoginResponse]:
        result = self.authenticate(request.email, request.password)
        if not result:
            return result
        return ServiceResult.success(self._login_response(result.data), message="Login successful")

    def role_login(self, request: LoginRequest) -> ServiceResult[LoginResponse]:
        """
        Login from the sign-in page: captcha first, then credentials, then
        the maintenance key for maintenance accounts.
        """
        if not CaptchaManager.verify(request.captcha, request.captcha_token):
            return ServiceResult.bad_request("Captcha incorrect!", field="captcha")

        result = self.authenticate(request.email, request.password)
        if not result:
            return result
        user = result.data

        if user.role == UserRole.MAINTENANCE and request.maintenance_key != settings.MAINTENANCE_KEY:
            self._audit.warning("maintenance_key_rejected", user_id=user.id)
            return ServiceResult.forbidden(message="Invalid Maintenance Key!")

        return ServiceResult.success(self._login_response(user), message="Login successful")

    def _login_response(self, user: User) -> LoginResponse:
        token = create_access_token({
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
        })
        self._audit.info("login_succeeded", user_id=user.id, role=user.role.value)
        return LoginResponse(
            user_data=UserPublic.model_validate(user),
            access_token=token,
            redirect=user.role.dashboard_path,
        )

    @staticmethod
    def issue_captcha() -> CaptchaResponse:
        issued = CaptchaManager.issue()
        return CaptchaResponse(captcha=issued["captcha"], captcha_token=issued["captchaToken"])

    # -------------------------------------------------------------------------
    # Signup
    # -------------------------------------------------------------------------

    def signup(self, request: SignupRequest) -> ServiceResult[UserPublic]:
        email = normalize_email(request.email)
        role = request.role

        if role not in SELF_REGISTERABLE_ROLES:
            return ServiceResult.forbidden(message="Admin accounts cannot be self-registered")

        domain = ROLE_EMAIL_DOMAINS.get(role)
        if domain and not email.endswith(domain):
            return ServiceResult.validation_failure(_DOMAIN_MESSAGES[role], field="email")

        if role == UserRole.SUPERVISOR and request.category is None:
            return ServiceResult.validation_failure(
                "Please select a category for supervisor role.", field="category"
            )

        if len(request.password) < settings.PASSWORD_MIN_LENGTH:
            return ServiceResult.validation_failure(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
                field="password",
            )

        try:
            if self.repository.email_exists(email):
                return ServiceResult.conflict("Email already registered.")

            user = User(
                email=email,
                role=role,
                name=request.name.strip(),
                dob=request.dob.strip(),
                department=((request.department or "").strip() or None) if role in _DEPARTMENT_ROLES else None,
                category=request.category if role == UserRole.SUPERVISOR else None,
                password=hash_password(request.password),
            )
            self.repository.create(user)
            self._audit.info("user_registered", user_id=user.id, role=role.value)
            return ServiceResult.success(UserPublic.model_validate(user), message="Signup successful")
        except Exception as e:
            self.db.rollback()
            return self._handle_exception(e, "sign up", email)

    # -------------------------------------------------------------------------
    # Token resolution
    # -------------------------------------------------------------------------

    def current_user(self, token: str) -> ServiceResult[User]:
        try:
            payload = decode_access_token(token)
            user_id = payload.get("sub")
            if not user_id:
                raise AuthenticationError("Invalid token")
            user = self.repository.find_by_id(user_id)
            if user is None:
                raise AuthenticationError("User no longer exists")
            return ServiceResult.success(user)
        except Exception as e:
            return self._handle_exception(e, "authenticate")
