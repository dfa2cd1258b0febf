"""
Configuration management for the claims service
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Claims service configuration loaded from environment variables"""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./claims.db"

    # Token signing (no default: the secret must come from the environment)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Mail delivery
    MAIL_BACKEND: str = "console"
    MAIL_FROM_EMAIL: Optional[str] = None
    MAIL_FROM_NAME: str = "InsurAi"
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT_SECONDS: int = 10

    # Notification routing
    AGENT_INBOX_EMAIL: Optional[str] = None

    # Staff actions (claim status updates, query responses)
    STAFF_API_KEY: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def _secret_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return value

    @field_validator("MAIL_BACKEND")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        backend = value.strip().lower()
        if backend not in ("smtp", "console"):
            raise ValueError("MAIL_BACKEND must be 'smtp' or 'console'")
        return backend


# Global settings instance
settings = Settings()
