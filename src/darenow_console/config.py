"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Console settings loaded from environment variables."""

    api_base_url: str = "http://3.111.88.208:3000/api"
    request_timeout_seconds: float = 10.0
    storage_path: str | None = None
    restaurant_admin_token_fallback: bool = True
    page_size: int = 10
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
