"""Central logging configuration for the race plan builder."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from app.config import get_settings

_configured = False

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "httpx")


def _build_config(log_dir: Path, level: str) -> dict:
    log_path = log_dir / "race_plans.log"
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": fmt,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_path),
                "encoding": "utf-8",
                "formatter": "standard",
                "level": level,
            },
        },
        "loggers": {
            name: {"level": "WARNING", "propagate": True} for name in _QUIET_LOGGERS
        },
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Configure application logging once per process.

    Args:
        level: Optional override for the configured LOG_LEVEL (used by scripts
            exposing a ``--verbose`` flag).
    """

    global _configured
    if _configured:
        if level:
            logging.getLogger().setLevel(level.upper())
        return

    try:
        settings = get_settings()
        log_dir = settings.log_dir
        configured_level = settings.log_level
    except ValidationError:
        # A malformed .env should not prevent scripts from reporting errors.
        log_dir = Path("logs")
        configured_level = "INFO"
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(_build_config(log_dir, (level or configured_level).upper()))
    _configured = True
