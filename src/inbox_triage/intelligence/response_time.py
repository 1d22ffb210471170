"""Suggest when to reply to a thread."""

from __future__ import annotations

from collections.abc import Mapping

from inbox_triage.core.datetime_utils import add_hours, ensure_utc, utc_now
from inbox_triage.core.models import ActionContext, ResponseTimeSuggestion

RESPONSE_WINDOW_HOURS: dict[str, float] = {
    "urgent": 2,
    "high": 8,
    "medium": 24,
    "low": 72,
}
DEFAULT_WINDOW_HOURS = 24
DEADLINE_LEAD_HOURS = 2


def suggest_response_time(
    context: ActionContext,
    *,
    windows: Mapping[str, float] = RESPONSE_WINDOW_HOURS,
    deadline_lead_hours: float = DEADLINE_LEAD_HOURS,
) -> ResponseTimeSuggestion:
    """Return a suggested reply time and any known deadline.

    The user's historical response time for the tier replaces the window
    table. A deadline falling before the suggestion always pulls it to
    ``deadline_lead_hours`` ahead of the deadline.
    """
    now = context.now or utc_now()
    tier = context.priority.tier
    hours = windows.get(tier, DEFAULT_WINDOW_HOURS)
    patterns = context.user_patterns
    if patterns is not None and patterns.response_time_by_priority.get(tier):
        hours = patterns.response_time_by_priority[tier]
    suggested = add_hours(now, hours)

    deadline = context.priority.factors.urgency.deadline_date
    if deadline is not None and ensure_utc(deadline) < ensure_utc(suggested):
        return ResponseTimeSuggestion(
            suggested=add_hours(deadline, -deadline_lead_hours), deadline=deadline
        )
    return ResponseTimeSuggestion(suggested=suggested, deadline=deadline)


__all__ = ["RESPONSE_WINDOW_HOURS", "suggest_response_time"]
