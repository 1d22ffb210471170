"""Protocol interfaces for the collaborators surrounding the engine."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .models import (
    CalendarAvailability,
    TeamMember,
    ThreadForPriority,
    TriageRule,
    TriageSuggestion,
    UserActionPatterns,
)


class PayloadError(ValueError):
    """Raised when an inbound payload cannot be turned into engine inputs."""


class ThreadSource(Protocol):
    """Supplies threads and optional context resolved from storage."""

    def load_threads(self) -> Sequence[ThreadForPriority]:
        """Return the threads to triage."""
        raise NotImplementedError

    def load_team_members(self) -> Sequence[TeamMember]:
        """Return the team directory, possibly empty."""
        raise NotImplementedError

    def load_calendar(self) -> CalendarAvailability | None:
        """Return the user's calendar availability if known."""
        raise NotImplementedError

    def load_user_patterns(self) -> UserActionPatterns | None:
        """Return historical user action patterns if known."""
        raise NotImplementedError

    def load_rules(self) -> Sequence[TriageRule]:
        """Return user-defined triage rules, possibly empty."""
        raise NotImplementedError


class SuggestionSink(Protocol):
    """Receives triage outcomes for persistence or display."""

    def persist_suggestion(self, suggestion: TriageSuggestion) -> None:
        """Store or render a single triage suggestion."""
        raise NotImplementedError


__all__ = ["PayloadError", "SuggestionSink", "ThreadSource"]
