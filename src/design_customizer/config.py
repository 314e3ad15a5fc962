"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    processing_api_base: str
    storefront_base_url: str
    variant_id: str | None = None
    settings_url: str | None = None
    base_price: float = 0.0
    auto_process_default: bool = True
    processing_timeout_seconds: float = 60.0
    cart_timeout_seconds: float = 15.0
    settings_cache_ttl_seconds: int = 300
    session_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
