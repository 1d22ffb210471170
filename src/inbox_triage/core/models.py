"""Core domain models used across the triage engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, TypeAlias

PriorityTier = Literal["urgent", "high", "medium", "low"]
ActionType = Literal[
    "respond", "archive", "delegate", "schedule", "wait", "escalate", "review"
]
Availability = Literal["available", "busy", "away"]

PRIORITY_TIERS: tuple[PriorityTier, ...] = ("urgent", "high", "medium", "low")
ACTION_TYPES: tuple[ActionType, ...] = (
    "respond",
    "archive",
    "delegate",
    "schedule",
    "wait",
    "escalate",
    "review",
)


@dataclass(frozen=True, slots=True)
class Participant:
    """Address taking part in a thread, annotated by contact management."""

    address: str
    name: str | None = None
    is_vip: bool = False
    is_internal: bool = False


@dataclass(frozen=True, slots=True)
class Claim:
    """Structured statement extracted from thread text upstream."""

    type: str
    content: str
    due_date: datetime | None = None


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True, slots=True)
class ThreadForPriority:
    """Read-only snapshot of a conversation thread ready for scoring."""

    id: str
    subject: str
    last_message_at: datetime
    message_count: int = 1
    participants: tuple[Participant, ...] = ()
    claims: tuple[Claim, ...] = ()
    snippet: str | None = None
    body_text: str | None = None
    classification: str | None = None


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class UrgencyFactors:
    """Evidence collected while assessing urgency; ``None`` means not observed."""

    has_explicit_deadline: bool | None = None
    deadline_date: datetime | None = None
    has_urgent_language: bool | None = None
    urgent_keywords: tuple[str, ...] | None = None
    sender_is_vip: bool | None = None
    is_reply_expected: bool | None = None
    thread_age: float | None = None
    mentions_today: bool | None = None
    mentions_asap: bool | None = None


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class ImportanceFactors:
    """Evidence collected while assessing importance; ``None`` means not observed."""

    sender_importance: float | None = None
    sender_is_vip: bool | None = None
    sender_is_internal: bool | None = None
    has_claim: bool | None = None
    claim_type: str | None = None
    has_financial_mention: bool | None = None
    financial_amount: int | None = None
    has_legal_mention: bool | None = None
    recipient_count: int | None = None
    is_direct_message: bool | None = None
    topic_importance: float | None = None


@dataclass(slots=True)
class UrgencyAssessment:
    """Urgency score in ``[0, 1]`` paired with the factors that produced it."""

    score: float
    factors: UrgencyFactors


@dataclass(slots=True)
class ImportanceAssessment:
    """Importance score in ``[0, 1]`` paired with the factors that produced it."""

    score: float
    factors: ImportanceFactors


@dataclass(slots=True)
class PriorityFactors:
    """Urgency and importance evidence for a priority result."""

    urgency: UrgencyFactors
    importance: ImportanceFactors


@dataclass(slots=True)
class PriorityResult:
    """Tier, scores, and explanation computed for a thread."""

    tier: PriorityTier
    urgency_score: float
    importance_score: float
    combined_score: float
    factors: PriorityFactors
    reasoning: str


@dataclass(frozen=True, slots=True)
class ScoredThread:
    """Thread paired with its priority, as returned by batch scoring."""

    thread: ThreadForPriority
    priority: PriorityResult


@dataclass(frozen=True, slots=True)
class TeamMember:
    """Colleague who can receive delegated threads."""

    id: str
    name: str
    email: str
    expertise: tuple[str, ...] = ()
    availability: Availability | None = None


@dataclass(frozen=True, slots=True)
class TimeSlot:
    """Half-open calendar interval ``[start, end)``."""

    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class CalendarAvailability:
    """Snapshot of the user's calendar."""

    busy_slots: tuple[TimeSlot, ...] = ()
    next_free_slot: datetime | None = None
    focus_time: tuple[TimeSlot, ...] = ()


@dataclass(frozen=True, slots=True)
class DelegatePattern:
    """Text pattern the user habitually forwards to a colleague."""

    pattern: str
    delegate_to: str


@dataclass(frozen=True, slots=True)
class UserActionPatterns:
    """Historical habits of the user, derived outside the engine."""

    archive_patterns: tuple[str, ...] = ()
    delegate_patterns: tuple[DelegatePattern, ...] = ()
    response_time_by_priority: Mapping[str, float] = field(default_factory=dict)
    focus_hours: tuple[int, int] | None = None


@dataclass(frozen=True, slots=True)
class ActionContext:
    """Inputs for one action classification call.

    ``now`` pins the reference time; when omitted the current UTC time is used.
    """

    thread: ThreadForPriority
    priority: PriorityResult
    user_patterns: UserActionPatterns | None = None
    team_members: tuple[TeamMember, ...] = ()
    user_calendar: CalendarAvailability | None = None
    now: datetime | None = None


@dataclass(frozen=True, slots=True)
class DelegateDetails:
    """Who should take over a thread and why."""

    delegate_to: str
    reason: str


@dataclass(frozen=True, slots=True)
class ScheduleDetails:
    """When to block time for a thread."""

    schedule_for: datetime
    duration_minutes: int


@dataclass(frozen=True, slots=True)
class WaitDetails:
    """How long to hold off on a thread."""

    wait_until: datetime
    reason: str


@dataclass(frozen=True, slots=True)
class EscalateDetails:
    """Why a thread needs someone with more authority."""

    reason: str
    escalate_to: str | None = None


ActionDetails: TypeAlias = (
    DelegateDetails | ScheduleDetails | WaitDetails | EscalateDetails
)


@dataclass(frozen=True, slots=True)
class ActionSuggestion:
    """Recommended next step for a thread."""

    action: ActionType
    confidence: float
    reasoning: str
    details: ActionDetails | None = None


@dataclass(frozen=True, slots=True)
class ResponseTimeSuggestion:
    """Recommended reply time and, when known, the hard deadline."""

    suggested: datetime
    deadline: datetime | None = None


RuleTriggerType = Literal["sender", "subject", "content", "label"]
RuleCondition = Literal["contains", "equals", "matches"]
RuleAction = Literal["archive", "label", "forward", "priority"]


@dataclass(frozen=True, slots=True)
class RuleTrigger:
    """Field and comparison a user-defined rule checks."""

    type: RuleTriggerType
    condition: RuleCondition
    value: str


@dataclass(frozen=True, slots=True)
class TriageRule:
    """User-authored rule that short-circuits action classification."""

    id: str
    name: str
    trigger: RuleTrigger
    action: RuleAction
    description: str = ""
    action_value: str | None = None
    enabled: bool = True


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True, slots=True)
class TriageSuggestion:
    """Full triage outcome for a thread."""

    thread_id: str
    action: ActionType
    confidence: float
    reasoning: str
    priority: PriorityResult
    details: ActionDetails | None = None
    response_time: ResponseTimeSuggestion | None = None
    matched_rule: str | None = None


@dataclass(frozen=True, slots=True)
class InboxStats:
    """Counts over a set of triage suggestions."""

    total: int
    urgent: int
    high: int
    medium: int
    low: int
    needs_response: int
    can_archive: int


@dataclass(frozen=True, slots=True)
class InboxItem:
    """Top-ranked thread listed in an inbox summary."""

    thread_id: str
    action: ActionType
    reason: str


@dataclass(frozen=True, slots=True)
class InboxSummary:
    """Deterministic overview of a triaged inbox."""

    summary: str
    focus_recommendation: str
    stats: InboxStats
    top_items: tuple[InboxItem, ...] = ()


__all__ = [
    "ACTION_TYPES",
    "PRIORITY_TIERS",
    "ActionContext",
    "ActionDetails",
    "ActionSuggestion",
    "ActionType",
    "Availability",
    "CalendarAvailability",
    "Claim",
    "DelegateDetails",
    "DelegatePattern",
    "EscalateDetails",
    "ImportanceAssessment",
    "ImportanceFactors",
    "InboxItem",
    "InboxStats",
    "InboxSummary",
    "Participant",
    "PriorityFactors",
    "PriorityResult",
    "PriorityTier",
    "ResponseTimeSuggestion",
    "RuleTrigger",
    "ScheduleDetails",
    "ScoredThread",
    "TeamMember",
    "ThreadForPriority",
    "TimeSlot",
    "TriageRule",
    "TriageSuggestion",
    "UrgencyAssessment",
    "UrgencyFactors",
    "UserActionPatterns",
    "WaitDetails",
]
