"""Remote API configuration settings.

Base URL, HTTP behaviour and RGPD route style of the backend.
"""

from enum import StrEnum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RGPDRouteStyle(StrEnum):
    """How entity-scoped RGPD collections are addressed.

    ENTITY_SCOPED: ``/entities/{entity_id}/rgpd/<kind>``.
    QUERY: legacy ``/rgpd/<kind>?entity_id=<id>``.
    """

    ENTITY_SCOPED = "entity_scoped"
    QUERY = "query"


class APISettings(BaseSettings):
    """Backend API configuration.

    Attributes:
        base_url: API root including the ``/api`` prefix.
        timeout: Per-request timeout in seconds.
        user_agent: HTTP User-Agent header.
        rgpd_routes: RGPD collection route style.
    """

    base_url: str = Field(default="http://localhost:8080/api", alias="HYPERCYBER_API_URL")
    timeout: float = Field(default=30.0, gt=0, alias="HYPERCYBER_API_TIMEOUT")
    user_agent: str = Field(default="HyperCyber-Console/1.0", alias="HYPERCYBER_USER_AGENT")
    rgpd_routes: RGPDRouteStyle = Field(
        default=RGPDRouteStyle.ENTITY_SCOPED,
        alias="HYPERCYBER_RGPD_ROUTES",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so paths can be appended with a leading slash."""
        return v.rstrip("/")
