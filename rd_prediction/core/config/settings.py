"""
Application settings module.

This module provides configuration settings for the application, including
security settings, database connection, model artifacts and the generative-AI
enrichment service.
"""

# Standard Library Imports
import logging
import secrets
from typing import Self

# Third-Party Imports
from pydantic import ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings using Pydantic for validation and environment variable loading."""

    # API Information
    API_TITLE: str = "RD Prediction API"
    API_DESCRIPTION: str = "Medical image classification and prediction history API"
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Environment
    TESTING: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production, test
    DEBUG: bool = False

    # Server Settings
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 5000
    UVICORN_WORKERS: int = 1

    # Security Settings
    JWT_SECRET_KEY: SecretStr = Field(default_factory=lambda: SecretStr(secrets.token_urlsafe(64)))
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60  # 7 days
    JWT_ISSUER: str | None = None
    JWT_AUDIENCE: str | None = None
    PASSWORD_HASHING_SCHEMES: list[str] = ["bcrypt"]

    # CORS Settings
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Security Headers
    SECURITY_HEADERS: dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "X-XSS-Protection": "1; mode=block",
        "X-Frame-Options": "DENY",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    # Database Settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./rd_prediction.db"
    ASYNC_DATABASE_URL: str | None = None  # Derived from DATABASE_URL if None
    DB_ECHO_LOG: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Monitoring and Error Tracking (Sentry)
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.2

    # Model artifacts and inference
    MODEL_DIR: str = "models"
    DEMO_MODE: bool = False
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_UPLOAD_CONTENT_TYPES: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/tiff",
        "application/dicom",
        "application/octet-stream",
    ]

    # Generative-AI enrichment (Gemini)
    GEMINI_API_KEY: SecretStr | None = None
    GEMINI_MODEL_NAME: str = "gemini-1.5-flash"
    GEMINI_TIMEOUT_SECONDS: float = 30.0
    ENRICHMENT_ENABLED: bool = True

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the valid levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def ensure_async_database_url(self) -> Self:
        """Ensure ASYNC_DATABASE_URL is set properly from DATABASE_URL."""
        if not self.ASYNC_DATABASE_URL and self.DATABASE_URL:
            db_url = self.DATABASE_URL
            # If it's a SQLite URL without async driver, convert it
            if db_url.startswith("sqlite:///"):
                self.ASYNC_DATABASE_URL = db_url.replace("sqlite:///", "sqlite+aiosqlite:///")
            else:
                self.ASYNC_DATABASE_URL = db_url
            logger.debug(f"Set ASYNC_DATABASE_URL to {self.ASYNC_DATABASE_URL} based on DATABASE_URL")

        if not self.ASYNC_DATABASE_URL:
            self.ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
            logger.warning("ASYNC_DATABASE_URL was None, set to default in-memory SQLite")

        # Ensure DEBUG is off for production and test runs
        if self.ENVIRONMENT in ("production", "test"):
            self.DEBUG = False
        if self.ENVIRONMENT == "test":
            self.TESTING = True

        return self

    @property
    def enrichment_configured(self) -> bool:
        """Whether the Gemini enrichment service has what it needs to run."""
        return bool(self.ENRICHMENT_ENABLED and self.GEMINI_API_KEY and self.GEMINI_API_KEY.get_secret_value())


# Create a global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Factory function to get the application settings.

    Returns:
        The process-wide settings instance
    """
    return settings
