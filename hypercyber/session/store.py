"""Durable credential storage.

Holds exactly two string values, ``token`` and ``refreshToken``, in a JSON
file readable only by the current user.
"""

import json
import os
from pathlib import Path
from typing import Any

from hypercyber.settings import settings
from hypercyber.utils.logger import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refreshToken"


class CredentialStore:
    """JSON-file backed token pair.

    Values are cached in memory after the first read; every write goes
    straight to disk.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Credentials file. Defaults to settings.paths.credentials_file.
        """
        self._path = path or settings.paths.credentials_file
        self._values: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def token(self) -> str | None:
        return self._load().get(TOKEN_KEY)

    @property
    def refresh_token(self) -> str | None:
        return self._load().get(REFRESH_TOKEN_KEY)

    def has_token(self) -> bool:
        return bool(self.token)

    def save(self, token: str, refresh_token: str) -> None:
        """Persist a complete token pair."""
        self._write({TOKEN_KEY: token, REFRESH_TOKEN_KEY: refresh_token})

    def update_token(self, token: str) -> None:
        """Replace the access token, keeping the refresh token."""
        values = dict(self._load())
        values[TOKEN_KEY] = token
        self._write(values)

    def clear(self) -> None:
        """Remove both values. Safe to call when nothing is stored."""
        self._values = {}
        if self._path.exists():
            self._path.unlink()
            logger.debug("credentials_cleared", path=str(self._path))

    def reload(self) -> None:
        """Drop the in-memory copy so the next read hits the disk."""
        self._values = None

    # -------------------------------------------------------------------------
    # File I/O
    # -------------------------------------------------------------------------

    def _load(self) -> dict[str, str]:
        if self._values is None:
            self._values = self._read_json(self._path)
        return self._values

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(values, f)
        self._values = values

    @staticmethod
    def _read_json(path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        try:
            raw: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("credentials_unreadable", path=str(path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            return {}
        return {
            k: v for k, v in raw.items() if k in (TOKEN_KEY, REFRESH_TOKEN_KEY) and isinstance(v, str) and v
        }
