"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for uptime-sentinel.

    All settings can be overridden via environment variables
    (e.g. ``ALERTING_ENABLED=false``, ``LOG_LEVEL=DEBUG``).
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
    debug: bool = False

    # Alerting
    alerting_enabled: bool = Field(
        default=True,
        description="Evaluate alerts at all (false makes every evaluation a no-op)",
    )
    alerting_debug: bool = Field(
        default=False,
        description="Log alerts skipped because no notification is due",
    )

    # Observability
    metrics_port: int = Field(default=8000, ge=1, le=65535)
    service_name: str = "uptime-sentinel"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
