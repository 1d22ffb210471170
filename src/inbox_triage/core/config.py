"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator

from .models import PRIORITY_TIERS


def _default_response_windows() -> dict[str, float]:
    return {"urgent": 2, "high": 8, "medium": 24, "low": 72}


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class TriageSettings(BaseModel):
    """Tunables for response-time suggestion, re-ranking, and summaries."""

    response_windows: dict[str, float] = Field(
        default_factory=_default_response_windows,
        description="Hours to respond within, keyed by priority tier",
    )
    deadline_lead_hours: float = Field(
        default=2,
        ge=0,
        description="Hours before a known deadline to suggest replying",
    )
    decay_horizon_hours: float = Field(
        default=72,
        gt=0,
        description="Hours over which an unprocessed thread gains the full boost",
    )
    max_decay_boost: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Largest urgency boost applied when re-ranking aged threads",
    )
    top_items: int = Field(
        default=5, ge=0, description="Threads listed in an inbox summary"
    )

    @field_validator("response_windows")
    @classmethod
    def _fill_missing_tiers(cls, value: dict[str, float]) -> dict[str, float]:
        windows = _default_response_windows()
        windows.update(
            {tier: hours for tier, hours in value.items() if tier in PRIORITY_TIERS}
        )
        return windows


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    triage: TriageSettings = Field(default_factory=TriageSettings)


ENV_PREFIX = "INBOX_TRIAGE_"


def _setting_path(variable: str) -> list[str]:
    """Map ``INBOX_TRIAGE_TRIAGE__TOP_ITEMS`` to ``["triage", "top_items"]``."""
    return [part.lower() for part in variable[len(ENV_PREFIX) :].split("__") if part]


def _coerce(raw: str | None) -> Any:
    if raw is None or raw == "":
        return None
    flag = raw.lower()
    if flag in ("true", "false"):
        return flag == "true"
    return raw


def _prefixed(values: Mapping[str, str | None]) -> dict[str, str | None]:
    return {name: raw for name, raw in values.items() if name.startswith(ENV_PREFIX)}


def _assign(tree: dict[str, Any], path: list[str], value: Any) -> None:
    node = tree
    for part in path[:-1]:
        node = cast(dict[str, Any], node.setdefault(part, {}))
    node[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool
) -> dict[str, Any]:
    """Build a nested settings tree; process variables win over the env file."""
    raw: dict[str, str | None] = {}
    if env_file and Path(env_file).is_file():
        raw.update(_prefixed(dotenv_values(env_file)))
    if include_environment:
        raw.update(_prefixed(os.environ))

    tree: dict[str, Any] = {}
    for name, value in raw.items():
        path = _setting_path(name)
        if path:
            _assign(tree, path, _coerce(value))
    return tree


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load settings from ``INBOX_TRIAGE_`` variables, then apply ``overrides``.

    Nested fields use ``__`` separators, e.g. ``INBOX_TRIAGE_LOGGING__LEVEL``.
    """
    collected = _collect_env_values(env_file, include_environment=include_environment)
    collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "ENV_PREFIX",
    "LoggingSettings",
    "TriageSettings",
    "load_app_settings",
]
