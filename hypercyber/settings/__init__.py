"""Centralized configuration for the HyperCyber console.

All configuration values are sourced from environment variables (.env file)
and have safe defaults pointing at a local backend.

Usage:
    from hypercyber.settings import settings

    settings.api.base_url
    settings.paths.credentials_file
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hypercyber.settings.api import APISettings, RGPDRouteStyle
from hypercyber.settings.base import LoggingSettings, PathsSettings

__all__ = [
    "Settings",
    "settings",
    "APISettings",
    "RGPDRouteStyle",
    "PathsSettings",
    "LoggingSettings",
    "get_masked_settings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    Access via the singleton: `from hypercyber.settings import settings`
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    paths: PathsSettings = Field(default_factory=PathsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

settings = Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings() -> dict[str, Any]:
    """Return settings dict safe for display.

    The API URL may embed basic-auth credentials; they are masked.

    Returns:
        Configuration dictionary safe for logging.
    """
    config = settings.model_dump(mode="json")
    base_url: str = config["api"]["base_url"]
    if "@" in base_url:
        scheme, _, rest = base_url.partition("://")
        config["api"]["base_url"] = f"{scheme}://***MASKED***@{rest.split('@', 1)[1]}"
    return config
