"""Deterministic triage and priority inference engine."""

from .actions import (
    CLASSIFICATION_RULES,
    ClassificationRule,
    batch_classify_actions,
    classify_action,
)
from .expertise import find_expertise_needed
from .importance import assess_importance
from .matrix import calculate_priority_tier, combined_score
from .priority import (
    batch_calculate_priority,
    calculate_priority,
    recalculate_priority,
)
from .reasoning import generate_priority_reasoning
from .response_time import suggest_response_time
from .triage import TriageService, matches_rule, summarize_inbox
from .urgency import assess_urgency

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "TriageService",
    "assess_importance",
    "assess_urgency",
    "batch_calculate_priority",
    "batch_classify_actions",
    "calculate_priority",
    "calculate_priority_tier",
    "classify_action",
    "combined_score",
    "find_expertise_needed",
    "generate_priority_reasoning",
    "matches_rule",
    "recalculate_priority",
    "suggest_response_time",
    "summarize_inbox",
]
