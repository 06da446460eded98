"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    auth_url: str | None = None
    business_timezone: str = "UTC"
    worker_role: str = "worker"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def resolved_auth_url(self) -> str:
        """Return the auth REST base URL, defaulting to the Supabase project."""
        if self.auth_url:
            return self.auth_url.rstrip("/")
        return f"{self.supabase_url.rstrip('/')}/auth/v1"
