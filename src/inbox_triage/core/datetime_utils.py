"""Datetime helpers shared across the engine."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

__all__ = [
    "add_hours",
    "ensure_utc",
    "hours_between",
    "parse_datetime",
    "serialize_datetime",
    "utc_now",
]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive values as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def hours_between(later: datetime, earlier: datetime) -> float:
    """Return the signed number of hours from ``earlier`` to ``later``."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.total_seconds() / 3600


def add_hours(value: datetime, hours: float) -> datetime:
    return value + timedelta(hours=hours)


def serialize_datetime(value: datetime | None) -> str | None:
    """Serialise ``value`` to ISO 8601 in UTC."""
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string into an aware UTC ``datetime``.

    A trailing ``Z`` is accepted as UTC. Raises ``ValueError`` on malformed input.
    """
    if value is None:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    return ensure_utc(datetime.fromisoformat(text))
