"""
Environment configuration for the complaint portal.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Set

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    @staticmethod
    def get_secret_key_default() -> str:
        """Generate a default secret key if not provided"""
        import secrets
        import string
        alphabet = string.ascii_letters + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(32))

    # Application configuration
    APP_NAME: str = "Facility Complaint Portal"
    API_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    LEGACY_API_PREFIX: str = "/api"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "*"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./complaint_portal.db"
    DATABASE_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 10

    # Security configuration
    JWT_SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    CAPTCHA_EXPIRE_MINUTES: int = 10
    PASSWORD_BCRYPT_ROUNDS: int = 10
    PASSWORD_MIN_LENGTH: int = 6
    MAINTENANCE_KEY: str = "change-me-maintenance-key"

    # File storage
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10485760
    ALLOWED_EXTENSIONS: str = "jpg,jpeg,png,gif,webp"

    # Room catalog
    ROOM_CATALOG_PATH: Optional[str] = None

    # External password reset function
    PASSWORD_RESET_FUNCTION_URL: Optional[str] = None
    PASSWORD_RESET_TIMEOUT: float = 10.0

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None
    ENABLE_STRUCTURED_LOGGING: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    # Validators
    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and validate the log level name"""
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @field_validator('LOG_FORMAT', mode='before')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = str(v).lower()
        if fmt not in {"json", "text"}:
            raise ValueError(f"Invalid LOG_FORMAT: {v}")
        return fmt

    @field_validator('ENVIRONMENT', mode='before')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        env = str(v).lower()
        if env not in {"development", "testing", "staging", "production"}:
            raise ValueError(f"Invalid ENVIRONMENT: {v}")
        return env

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from a JSON list or comma separated string"""
        value = self.CORS_ORIGINS.strip()
        if value.startswith('[') and value.endswith(']'):
            try:
                return [str(origin) for origin in json.loads(value)]
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @property
    def allowed_extensions(self) -> Set[str]:
        """Parse ALLOWED_EXTENSIONS into a set of lowercase extensions without dots"""
        return {
            ext.strip().lstrip('.').lower()
            for ext in self.ALLOWED_EXTENSIONS.split(",")
            if ext.strip()
        }

    @property
    def room_catalog_path(self) -> Path:
        if self.ROOM_CATALOG_PATH:
            return Path(self.ROOM_CATALOG_PATH)
        return PACKAGE_ROOT / "data" / "rooms.json"

    def get_database_url(self) -> str:
        """Get the SQLAlchemy database URL"""
        return self.DATABASE_URL

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
