"""
Security and Authentication Module

Password hashing (bcrypt via passlib, with the legacy plaintext rule),
JWT token management and the login captcha.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
)
from complaint_portal.core.logging import get_logger

logger = get_logger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_BCRYPT_ROUNDS,
)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

CAPTCHA_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CAPTCHA_LENGTH = 6


class TokenType(str, Enum):
    """Token type enumeration"""
    ACCESS = "access"
    CAPTCHA = "captcha"


class PasswordManager:
    """Password hashing and verification"""

    @staticmethod
    def is_hashed(stored_password: Optional[str]) -> bool:
        return bool(stored_password) and stored_password.startswith(BCRYPT_PREFIXES)

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        try:
            return pwd_context.hash(password)
        except ValueError as e:
            logger.error(f"Password hashing failed: {e}")
            raise AuthenticationError("Password hashing failed") from e

    @staticmethod
    def verify_password(plain_password: str, stored_password: str) -> bool:
        """
        Verify a password against the stored value.

        Stored values with a bcrypt prefix are verified as hashes; anything
        else is a legacy record holding the password itself.
        """
        if not stored_password:
            return False
        if PasswordManager.is_hashed(stored_password):
            try:
                return pwd_context.verify(plain_password, stored_password)
            except ValueError as e:
                logger.warning(f"Password verification failed: {e}")
                return False
        return hmac.compare_digest(plain_password.encode("utf-8"), stored_password.encode("utf-8"))

    @staticmethod
    def generate_temporary_password() -> str:
        """16 hex characters, the format handed out by the forgot-password flow"""
        return secrets.token_hex(8)


class TokenManager:
    """JWT token management utilities"""

    @staticmethod
    def create_token(
        data: Dict[str, Any],
        token_type: TokenType = TokenType.ACCESS,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT token with specified data and expiration.

        Args:
            data: Data to encode in token
            token_type: Type of token to create
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        if expires_delta is None:
            if token_type == TokenType.CAPTCHA:
                expires_delta = timedelta(minutes=settings.CAPTCHA_EXPIRE_MINUTES)
            else:
                expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode = data.copy()
        to_encode.update({
            "exp": now + expires_delta,
            "iat": now,
            "type": token_type.value,
            "jti": secrets.token_urlsafe(16),
        })
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(token: str, expected_type: Optional[TokenType] = None) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token has expired
        """
        try:
            payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token verification failed: {e}")
            raise InvalidTokenError("Invalid token") from e

        if expected_type and payload.get("type") != expected_type.value:
            raise InvalidTokenError("Invalid token type")
        return payload


class CaptchaManager:
    """Issues and checks the login captcha without server-side state"""

    @staticmethod
    def _digest(text: str) -> str:
        return hashlib.sha256(text.strip().upper().encode("utf-8")).hexdigest()

    @staticmethod
    def generate_text(length: int = CAPTCHA_LENGTH) -> str:
        return "".join(secrets.choice(CAPTCHA_ALPHABET) for _ in range(length))

    @staticmethod
    def issue() -> Dict[str, str]:
        text = CaptchaManager.generate_text()
        token = TokenManager.create_token(
            {"answer": CaptchaManager._digest(text)}, TokenType.CAPTCHA
        )
        return {"captcha": text, "captchaToken": token}

    @staticmethod
    def verify(answer: Optional[str], token: Optional[str]) -> bool:
        """Case-insensitive comparison against the answer sealed in the token."""
        if not answer or not token:
            return False
        try:
            payload = TokenManager.verify_token(token, TokenType.CAPTCHA)
        except AuthenticationError:
            return False
        return hmac.compare_digest(payload.get("answer", ""), CaptchaManager._digest(answer))


def hash_password(password: str) -> str:
    """Convenience function for password hashing"""
    return PasswordManager.hash_password(password)


def verify_password(plain_password: str, stored_password: str) -> bool:
    """Convenience function for password verification"""
    return PasswordManager.verify_password(plain_password, stored_password)


def create_access_token(data: Dict[str, Any]) -> str:
    """Convenience function for creating access token"""
    return TokenManager.create_token(data, TokenType.ACCESS)


def decode_access_token(token: str) -> Dict[str, Any]:
    return TokenManager.verify_token(token, TokenType.ACCESS)
