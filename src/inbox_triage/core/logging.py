"""Logging configuration helpers."""

from __future__ import annotations

import logging.config
from typing import Any

from .config import LoggingSettings

ENGINE_LOGGER = "inbox_triage"


def _formatter(structured: bool) -> dict[str, Any]:
    """Return a dictConfig formatter fragment."""
    if structured:
        return {
            "format": "ts={asctime} level={levelname} logger={name} msg={message!r}",
            "style": "{",
        }
    return {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"}


def configure_logging(settings: LoggingSettings) -> None:
    """Configure console logging for the engine according to ``settings``."""
    level = settings.level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": _formatter(settings.structured)},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level,
                },
            },
            "loggers": {
                ENGINE_LOGGER: {"level": level, "propagate": True},
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )


__all__ = ["ENGINE_LOGGER", "configure_logging"]
