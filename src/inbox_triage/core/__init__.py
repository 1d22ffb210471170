"""Core utilities for configuration, logging, and domain models."""

from .config import AppSettings, LoggingSettings, TriageSettings, load_app_settings
from .interfaces import PayloadError, SuggestionSink, ThreadSource
from .logging import configure_logging

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "PayloadError",
    "SuggestionSink",
    "ThreadSource",
    "TriageSettings",
    "configure_logging",
    "load_app_settings",
]
