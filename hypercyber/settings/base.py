"""Base configuration settings.

Contains foundational settings for local paths and logging.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# PATH SETTINGS
# =============================================================================


class PathsSettings(BaseSettings):
    """Local paths used by the console.

    Attributes:
        home: Root directory for console state (credentials, logs).
    """

    home: Path = Field(
        default_factory=lambda: Path.home() / ".hypercyber",
        alias="HYPERCYBER_HOME",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def data_dir(self) -> Path:
        """Durable client-side state."""
        return self.home / "data"

    @property
    def logs_dir(self) -> Path:
        """Application logs."""
        return self.home / "logs"

    @property
    def credentials_file(self) -> Path:
        """Stored token pair."""
        return self.data_dir / "credentials.json"

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in (self.data_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)


# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: Structured event format (json or text).
        to_file: Also write logs to a daily file under the logs directory.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    format: str = Field(default="text", alias="LOG_FORMAT")
    to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL. Valid: {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is json or text."""
        v_lower = v.lower()
        if v_lower not in {"json", "text"}:
            raise ValueError("Invalid LOG_FORMAT. Valid: {'json', 'text'}")
        return v_lower
