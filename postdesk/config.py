"""
Application configuration using environment variables.
"""
import os
import secrets
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List, Optional

_GENERATED_SECRET = secrets.token_urlsafe(32)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "PostDesk API"
    debug: bool = False
    environment: str = "development"

    # Security (tokens are issued by the external auth service)
    secret_key: str = os.getenv("SECRET_KEY", _GENERATED_SECRET)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60  # 1 hour

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./postdesk.db")

    # CORS
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Rate limiting
    default_rate_limit: str = "100/minute"
    schedule_rate_limit: str = "30/minute"
    apply_rate_limit: str = "5/minute"

    # Scheduling and reminders
    default_timezone: str = "UTC"
    reminder_sweep_enabled: bool = True
    reminder_sweep_interval_seconds: int = 60
    reminder_max_attempts: Optional[int] = None  # None = retry every sweep forever
    notification_webhook_url: Optional[str] = None
    notification_webhook_secret: Optional[str] = None

    # LinkedIn publishing
    linkedin_api_base: str = "https://api.linkedin.com/rest"
    linkedin_api_version: str = "202401"
    linkedin_access_token: Optional[str] = None
    linkedin_organization_id: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Validate secret key on startup
settings = get_settings()
if settings.environment == "production" and settings.secret_key == _GENERATED_SECRET:
    raise ValueError(
        "SECRET_KEY must be set in production! "
        "Use the same key the auth service signs tokens with."
    )
