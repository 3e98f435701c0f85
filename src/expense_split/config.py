"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    login_username: str = "admin"
    login_password: str = "password"
    session_secret: str = "dev-secret-change"
    log_level: str = "INFO"
    default_session_duration_hours: float = 24
    max_session_duration_hours: float = 168
    cleanup_interval_hours: float = 1
    cleanup_enabled: bool = True
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
