"""Priority calculation, dynamic re-ranking, and batch scoring."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from inbox_triage.core.datetime_utils import utc_now
from inbox_triage.core.models import (
    PriorityFactors,
    PriorityResult,
    ScoredThread,
    ThreadForPriority,
)

from .importance import assess_importance
from .matrix import calculate_priority_tier, combined_score
from .reasoning import generate_priority_reasoning
from .urgency import assess_urgency

LOGGER = logging.getLogger(__name__)

DECAY_HORIZON_HOURS = 72.0
MAX_DECAY_BOOST = 0.2


def _build_result(
    urgency_score: float,
    importance_score: float,
    factors: PriorityFactors,
    now: datetime,
) -> PriorityResult:
    tier = calculate_priority_tier(urgency_score, importance_score)
    return PriorityResult(
        tier=tier,
        urgency_score=urgency_score,
        importance_score=importance_score,
        combined_score=combined_score(urgency_score, importance_score),
        factors=factors,
        reasoning=generate_priority_reasoning(
            tier, factors.urgency, factors.importance, now=now
        ),
    )


def calculate_priority(
    thread: ThreadForPriority, *, now: datetime | None = None
) -> PriorityResult:
    """Score a thread and place it in the priority matrix."""
    now = now or utc_now()
    urgency = assess_urgency(thread, now=now)
    importance = assess_importance(thread)
    factors = PriorityFactors(urgency=urgency.factors, importance=importance.factors)
    return _build_result(urgency.score, importance.score, factors, now)


def recalculate_priority(
    thread: ThreadForPriority,
    *,
    hours_since_last_calculation: float = 0.0,
    now: datetime | None = None,
    decay_horizon_hours: float = DECAY_HORIZON_HOURS,
    max_decay_boost: float = MAX_DECAY_BOOST,
) -> PriorityResult:
    """Re-score a thread from scratch, boosting urgency for time left unprocessed.

    The boost is ``min(hours / horizon, max_boost)``; tier, combined score, and
    reasoning are derived from the boosted urgency.
    """
    now = now or utc_now()
    fresh = calculate_priority(thread, now=now)
    if hours_since_last_calculation <= 0:
        return fresh
    boost = min(hours_since_last_calculation / decay_horizon_hours, max_decay_boost)
    urgency_score = min(fresh.urgency_score + boost, 1.0)
    LOGGER.debug(
        "Applied urgency boost %.3f to thread %s after %.1fh",
        boost,
        thread.id,
        hours_since_last_calculation,
    )
    return _build_result(urgency_score, fresh.importance_score, fresh.factors, now)


def batch_calculate_priority(
    threads: Iterable[ThreadForPriority], *, now: datetime | None = None
) -> list[ScoredThread]:
    """Score threads independently and rank them by combined score.

    Threads with equal scores keep their input order.
    """
    now = now or utc_now()
    scored = [
        ScoredThread(thread=thread, priority=calculate_priority(thread, now=now))
        for thread in threads
    ]
    LOGGER.debug("Scored %d thread(s)", len(scored))
    return sorted(scored, key=lambda item: item.priority.combined_score, reverse=True)


__all__ = [
    "batch_calculate_priority",
    "calculate_priority",
    "recalculate_priority",
]
