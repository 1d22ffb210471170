"""Urgency assessment: how time-sensitive is a thread?"""

from __future__ import annotations

from datetime import datetime

from inbox_triage.core.datetime_utils import ensure_utc, hours_between, utc_now
from inbox_triage.core.models import (
    ThreadForPriority,
    UrgencyAssessment,
    UrgencyFactors,
)

from . import signals

URGENCY_WEIGHTS = {
    "explicit_deadline": 0.35,
    "urgent_language": 0.25,
    "vip_sender": 0.15,
    "reply_expected": 0.10,
    "thread_age": 0.10,
    "today_mention": 0.05,
}
IMMINENT_DEADLINE_HOURS = 24
IMMINENT_DEADLINE_MULTIPLIER = 1.5
KEYWORD_SATURATION = 2


def _nearest_due_date(thread: ThreadForPriority) -> datetime | None:
    due_dates = [claim.due_date for claim in thread.claims if claim.due_date]
    return min(due_dates, key=ensure_utc, default=None)


def assess_urgency(
    thread: ThreadForPriority, *, now: datetime | None = None
) -> UrgencyAssessment:
    """Return an urgency score in ``[0, 1]`` with the factors that fired.

    Each contribution is added unclamped; only the total is capped at 1.
    """
    now = now or utc_now()
    weights = URGENCY_WEIGHTS
    factors = UrgencyFactors()
    score = 0.0
    text = signals.thread_text(thread)

    if signals.has_deadline_language(text):
        factors.has_explicit_deadline = True
        score += weights["explicit_deadline"]

    nearest_due = _nearest_due_date(thread)
    if nearest_due is not None:
        factors.has_explicit_deadline = True
        factors.deadline_date = nearest_due
        if hours_between(nearest_due, now) < IMMINENT_DEADLINE_HOURS:
            score += weights["explicit_deadline"] * IMMINENT_DEADLINE_MULTIPLIER
        else:
            score += weights["explicit_deadline"]

    keywords = signals.find_urgent_keywords(text)
    if keywords:
        factors.has_urgent_language = True
        factors.urgent_keywords = keywords
        score += weights["urgent_language"] * min(
            len(keywords) / KEYWORD_SATURATION, 1
        )

    factors.mentions_asap = signals.mentions_asap(text)
    factors.mentions_today = signals.mentions_today(text)
    if factors.mentions_asap:
        score += weights["today_mention"]
    if factors.mentions_today:
        score += weights["today_mention"]

    if any(participant.is_vip for participant in thread.participants):
        factors.sender_is_vip = True
        score += weights["vip_sender"]

    if signals.expects_reply(text):
        factors.is_reply_expected = True
        score += weights["reply_expected"]

    # Older threads without a reply grow more urgent.
    hours_old = hours_between(now, thread.last_message_at)
    factors.thread_age = hours_old
    if hours_old > 48:
        score += weights["thread_age"]
    elif hours_old > 24:
        score += weights["thread_age"] * 0.5

    return UrgencyAssessment(score=min(score, 1.0), factors=factors)


__all__ = ["URGENCY_WEIGHTS", "assess_urgency"]
