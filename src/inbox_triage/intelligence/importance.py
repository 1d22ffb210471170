"""Importance assessment: how significant is a thread for the user's work?"""

from __future__ import annotations

from inbox_triage.core.models import (
    ImportanceAssessment,
    ImportanceFactors,
    ThreadForPriority,
)

from . import signals

IMPORTANCE_WEIGHTS = {
    "sender_importance": 0.25,
    "has_claim": 0.20,
    "financial": 0.15,
    "legal": 0.15,
    "direct_message": 0.10,
    "topic_importance": 0.10,
    "broadcast_penalty": 0.05,
}
# Highest-ranked claim type present wins.
CLAIM_TYPE_SCALES: tuple[tuple[str, float], ...] = (
    ("decision", 1.0),
    ("commitment", 0.9),
    ("question", 0.7),
)
INTERNAL_SENDER_SCALE = 0.7
EXTERNAL_SENDER_SCALE = 0.3
LARGE_AMOUNT_BONUS = 0.5
TOPIC_IMPORTANCE = 0.8
DIRECT_MESSAGE_MAX_PARTICIPANTS = 2
BROADCAST_MIN_PARTICIPANTS = 11


def assess_importance(thread: ThreadForPriority) -> ImportanceAssessment:
    """Return an importance score in ``[0, 1]`` with the factors that fired."""
    weights = IMPORTANCE_WEIGHTS
    factors = ImportanceFactors()
    score = 0.0
    text = signals.thread_text(thread)
    participants = thread.participants

    if any(participant.is_vip for participant in participants):
        factors.sender_is_vip = True
        factors.sender_importance = 1.0
        score += weights["sender_importance"]
    elif any(participant.is_internal for participant in participants):
        factors.sender_is_internal = True
        factors.sender_importance = INTERNAL_SENDER_SCALE
        score += weights["sender_importance"] * INTERNAL_SENDER_SCALE
    else:
        factors.sender_importance = EXTERNAL_SENDER_SCALE
        score += weights["sender_importance"] * EXTERNAL_SENDER_SCALE

    if thread.claims:
        factors.has_claim = True
        claim_types = {claim.type for claim in thread.claims}
        for claim_type, scale in CLAIM_TYPE_SCALES:
            if claim_type in claim_types:
                factors.claim_type = claim_type
                score += weights["has_claim"] * scale
                break

    if signals.has_financial_mention(text):
        factors.has_financial_mention = True
        score += weights["financial"]
        token = signals.find_amount_token(text)
        if token is not None:
            amount = signals.parse_amount_token(token)
            if amount is not None:
                factors.financial_amount = amount
            if "million" in token:
                score += weights["financial"] * LARGE_AMOUNT_BONUS

    if signals.has_legal_mention(text):
        factors.has_legal_mention = True
        score += weights["legal"]

    factors.recipient_count = len(participants)
    if len(participants) <= DIRECT_MESSAGE_MAX_PARTICIPANTS:
        factors.is_direct_message = True
        score += weights["direct_message"]
    elif len(participants) >= BROADCAST_MIN_PARTICIPANTS:
        score -= weights["broadcast_penalty"]

    if signals.is_important_classification(thread.classification):
        factors.topic_importance = TOPIC_IMPORTANCE
        score += weights["topic_importance"] * TOPIC_IMPORTANCE

    return ImportanceAssessment(score=min(max(score, 0.0), 1.0), factors=factors)


__all__ = ["IMPORTANCE_WEIGHTS", "assess_importance"]
