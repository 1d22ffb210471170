"""Render priority factors into a human-readable explanation."""

from __future__ import annotations

import math
from datetime import datetime

from inbox_triage.core.datetime_utils import hours_between, utc_now
from inbox_triage.core.models import ImportanceFactors, PriorityTier, UrgencyFactors

TIER_LABELS: dict[PriorityTier, str] = {
    "urgent": "Urgent - requires immediate attention",
    "high": "High priority - address soon",
    "medium": "Medium priority - handle when possible",
    "low": "Low priority - can wait or archive",
}
CLAIM_TYPE_LABELS = {
    "decision": "Contains a decision",
    "commitment": "Contains a commitment",
    "question": "Contains a question needing answer",
}
LARGE_AMOUNT_THRESHOLD = 10_000
AGED_THREAD_HOURS = 48


def _deadline_clause(factors: UrgencyFactors, now: datetime) -> str | None:
    if not factors.has_explicit_deadline:
        return None
    if factors.deadline_date is None:
        return "Has explicit deadline mentioned"
    days_until = math.ceil(hours_between(factors.deadline_date, now) / 24)
    if days_until <= 0:
        return "Deadline is today or overdue"
    if days_until == 1:
        return "Deadline is tomorrow"
    return f"Deadline in {days_until} days"


def _urgency_clauses(factors: UrgencyFactors, now: datetime) -> list[str]:
    clauses: list[str] = []
    deadline = _deadline_clause(factors, now)
    if deadline:
        clauses.append(deadline)
    if factors.has_urgent_language and factors.urgent_keywords:
        quoted = '", "'.join(factors.urgent_keywords[:2])
        clauses.append(f'Contains urgent language: "{quoted}"')
    if factors.sender_is_vip:
        clauses.append("From VIP sender")
    if factors.is_reply_expected:
        clauses.append("Reply expected")
    if factors.thread_age is not None and factors.thread_age > AGED_THREAD_HOURS:
        clauses.append(f"Waiting {round(factors.thread_age / 24)} days for response")
    return clauses


def _importance_clauses(factors: ImportanceFactors) -> list[str]:
    clauses: list[str] = []
    if factors.sender_is_vip:
        clauses.append("From important contact")
    if factors.has_claim and factors.claim_type in CLAIM_TYPE_LABELS:
        clauses.append(CLAIM_TYPE_LABELS[factors.claim_type])
    if factors.has_financial_mention:
        amount = factors.financial_amount
        if amount is not None and amount >= LARGE_AMOUNT_THRESHOLD:
            clauses.append(f"Involves ${amount:,}")
        else:
            clauses.append("Involves financial matters")
    if factors.has_legal_mention:
        clauses.append("Involves legal matters")
    if factors.is_direct_message:
        clauses.append("Direct message (not broadcast)")
    return clauses


def generate_priority_reasoning(
    tier: PriorityTier,
    urgency_factors: UrgencyFactors,
    importance_factors: ImportanceFactors,
    *,
    now: datetime | None = None,
) -> str:
    """Return the tier label followed by the clauses of every factor that fired.

    Clauses always appear in the same order: deadline, urgent wording, VIP
    sender, reply expected, thread age, then the importance signals.
    """
    now = now or utc_now()
    reasons = _urgency_clauses(urgency_factors, now)
    reasons.extend(_importance_clauses(importance_factors))
    label = TIER_LABELS[tier]
    if not reasons:
        return label
    return f"{label}. {'. '.join(reasons)}."


__all__ = ["TIER_LABELS", "generate_priority_reasoning"]
