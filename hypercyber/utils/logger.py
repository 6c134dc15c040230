"""Logging configuration with console and file handlers.

Stdlib handlers do the actual output; structlog is configured on top of
them so modules can emit key/value events::

    from hypercyber.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("request_completed", method="GET", status=200)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

import structlog

from hypercyber.settings import settings
from hypercyber.settings.base import LoggingSettings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_ROOT_LOGGER = "hypercyber"

_LOGGING_CONFIGURED = False


def setup_logging(level: str | None = None, log_dir: Path | None = None) -> None:
    """Configure stdlib handlers and structlog (called once per process).

    Args:
        level: Log level name, case-insensitive. Defaults to settings.
        log_dir: Directory for log files. Defaults to settings.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if _LOGGING_CONFIGURED:
        return

    level_name = level or ("DEBUG" if settings.debug else settings.logging.level)
    level_name = LoggingSettings.validate_log_level(level_name)
    numeric_level = logging.getLevelName(level_name)

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)
    logger.addHandler(_create_console_handler(formatter, numeric_level))

    if settings.logging.to_file:
        file_handler = _create_file_handler(formatter, numeric_level, log_dir)
        if file_handler:
            logger.addHandler(file_handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.logging.format == "json"
        else structlog.processors.KeyValueRenderer(key_order=["event"])
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``.

    Args:
        name: Dotted module name (e.g. 'hypercyber.client.http').

    Returns:
        Lazy structlog logger.
    """
    return structlog.get_logger(name)


def _create_console_handler(
    formatter: logging.Formatter,
    level: int,
) -> logging.StreamHandler:
    """Create console stream handler.

    Args:
        formatter: Log formatter.
        level: Logging level.

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(
    formatter: logging.Formatter,
    level: int,
    log_dir: Path | None,
) -> logging.FileHandler | None:
    """Create file handler writing to a dated log file.

    Args:
        formatter: Log formatter.
        level: Logging level.
        log_dir: Directory for log files.

    Returns:
        Configured FileHandler or None on failure.
    """
    try:
        log_path = _get_log_file_path(log_dir)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler
    except OSError as e:
        print(f"Warning: Could not create log file: {e}", file=sys.stderr)
        return None


def _get_log_file_path(log_dir: Path | None) -> Path:
    """Build log file path with date suffix.

    Args:
        log_dir: Base directory for logs.

    Returns:
        Full path to log file.
    """
    if log_dir is None:
        log_dir = settings.paths.logs_dir

    log_dir.mkdir(parents=True, exist_ok=True)

    date_suffix = datetime.now().strftime("%Y%m%d")
    return log_dir / f"hypercyber_{date_suffix}.log"
