"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Union
import os

from attendance.core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES as DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    DEFAULT_STORAGE_KEY,
    LOCKOUT_REDIRECT_SECONDS as DEFAULT_LOCKOUT_REDIRECT_SECONDS,
    MAX_VERIFICATION_ATTEMPTS as DEFAULT_MAX_VERIFICATION_ATTEMPTS,
    OTP_VALIDITY_SECONDS as DEFAULT_OTP_VALIDITY_SECONDS,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Database
    DATABASE_URL: str = "sqlite:///./attendance.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Persisted state blob
    STORAGE_KEY: str = DEFAULT_STORAGE_KEY

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    # Teacher account (placeholder directory with a single instructor)
    TEACHER_ID: str = "1"
    TEACHER_NAME: str = "Professor Smith"
    TEACHER_EMAIL: str = "prof@example.com"
    TEACHER_PASSWORD: str = "password123"

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["*"]  # In production, specify your domain

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Join links are built against this origin
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    @field_validator('PUBLIC_BASE_URL')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Attendance protocol
    OTP_VALIDITY_SECONDS: int = DEFAULT_OTP_VALIDITY_SECONDS
    MAX_VERIFICATION_ATTEMPTS: int = DEFAULT_MAX_VERIFICATION_ATTEMPTS
    LOCKOUT_REDIRECT_SECONDS: int = DEFAULT_LOCKOUT_REDIRECT_SECONDS

    # Export timestamps are rendered in this timezone
    TIMEZONE: str = "UTC"

    # Application
    APP_TITLE: str = "Classroom Attendance"
    APP_DESCRIPTION: str = "Session-bound attendance with verbally announced one-time codes"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Server-Sent Events: the OTP countdown is re-read once per second
    SSE_COUNTDOWN_INTERVAL: int = 1

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []
            warnings = []

            if self.SECRET_KEY == "your-secret-key-change-in-production":
                issues.append("SECRET_KEY must be changed from default value")

            if self.TEACHER_PASSWORD == "password123":
                issues.append("TEACHER_PASSWORD must be changed from default value")

            if not self.TEACHER_PASSWORD.startswith("$argon2"):
                warnings.append(
                    "TEACHER_PASSWORD is not hashed. For better security, use:\n"
                    "    python hash_password.py 'your-password'"
                )

            if self.CORS_ORIGINS == ["*"]:
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if self.PUBLIC_BASE_URL.startswith("http://localhost"):
                warnings.append("PUBLIC_BASE_URL points at localhost; join links will not work for students")

            if warnings:
                print("⚠️  Production configuration warnings:")
                for warning in warnings:
                    print(f"  - {warning}")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
