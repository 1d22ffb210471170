"""Priority matrix combining urgency and importance.

                   High importance    Low importance
    High urgency      urgent              high
    Low urgency       high                medium / low
"""

from __future__ import annotations

from inbox_triage.core.models import PriorityTier

URGENCY_THRESHOLD = 0.5
IMPORTANCE_THRESHOLD = 0.5
MEDIUM_THRESHOLD = 0.3
URGENCY_BLEND = 0.6
IMPORTANCE_BLEND = 0.4


def calculate_priority_tier(
    urgency_score: float, importance_score: float
) -> PriorityTier:
    """Map a pair of scores onto one of the four ordered tiers."""
    is_urgent = urgency_score >= URGENCY_THRESHOLD
    is_important = importance_score >= IMPORTANCE_THRESHOLD
    if is_urgent and is_important:
        return "urgent"
    if is_urgent or is_important:
        return "high"
    if urgency_score >= MEDIUM_THRESHOLD or importance_score >= MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def combined_score(urgency_score: float, importance_score: float) -> float:
    """Blend both scores into the single value used for ranking."""
    return urgency_score * URGENCY_BLEND + importance_score * IMPORTANCE_BLEND


__all__ = ["calculate_priority_tier", "combined_score"]
