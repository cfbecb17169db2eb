"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the content-feed aggregator.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., API_BASE_URL).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Content backend (catalog + ranking queries)
    api_base_url: str = "http://localhost:4000"
    catalog_page_limit: int = Field(default=100, ge=1, le=100)
    ranking_limit: int = Field(default=12, ge=1, le=50)

    # YouTube Data API v3
    youtube_api_key: str | None = None
    youtube_channel_id: str | None = None
    youtube_max_results: int = Field(default=12, ge=1, le=50)

    # Timeouts (seconds)
    adapter_timeout_seconds: float = Field(default=10.0, gt=0)
    http_timeout_seconds: float = Field(default=15.0, gt=0)

    # Observability
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def youtube_configured(self) -> bool:
        """Check if the YouTube channel feed is configured."""
        return bool(self.youtube_api_key) and bool(self.youtube_channel_id)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
