"""Conversion between JSON payloads and engine models.

Inbound documents are validated with pydantic; any shape or type problem is
reported as :class:`PayloadError`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError

from .datetime_utils import ensure_utc, serialize_datetime
from .interfaces import PayloadError
from .models import (
    ActionDetails,
    Availability,
    CalendarAvailability,
    Claim,
    DelegateDetails,
    DelegatePattern,
    EscalateDetails,
    InboxSummary,
    Participant,
    PriorityResult,
    RuleAction,
    RuleCondition,
    RuleTrigger,
    RuleTriggerType,
    ScheduleDetails,
    TeamMember,
    ThreadForPriority,
    TimeSlot,
    TriageRule,
    TriageSuggestion,
    UserActionPatterns,
    WaitDetails,
)

PayloadModel = TypeVar("PayloadModel", bound=BaseModel)


class ParticipantPayload(BaseModel):
    address: str = Field(min_length=1)
    name: str | None = None
    is_vip: bool = Field(default=False, alias="isVIP")
    is_internal: bool = Field(default=False, alias="isInternal")

    def to_model(self) -> Participant:
        return Participant(
            address=self.address,
            name=self.name,
            is_vip=self.is_vip,
            is_internal=self.is_internal,
        )


class ClaimPayload(BaseModel):
    type: str = Field(min_length=1)
    content: str = ""
    due_date: datetime | None = Field(default=None, alias="dueDate")

    def to_model(self) -> Claim:
        due = ensure_utc(self.due_date) if self.due_date else None
        return Claim(type=self.type, content=self.content, due_date=due)


class ThreadPayload(BaseModel):
    """Thread as stored by the surrounding application, camelCase keys."""

    id: str = Field(min_length=1)
    subject: str | None = None
    last_message_at: datetime = Field(alias="lastMessageAt")
    message_count: int = Field(default=1, ge=0, alias="messageCount")
    participants: list[ParticipantPayload] = Field(default_factory=list)
    claims: list[ClaimPayload] = Field(default_factory=list)
    snippet: str | None = None
    body_text: str | None = Field(default=None, alias="bodyText")
    classification: str | None = None

    def to_model(self) -> ThreadForPriority:
        return ThreadForPriority(
            id=self.id,
            subject=self.subject or "",
            last_message_at=ensure_utc(self.last_message_at),
            message_count=self.message_count,
            participants=tuple(item.to_model() for item in self.participants),
            claims=tuple(item.to_model() for item in self.claims),
            snippet=self.snippet,
            body_text=self.body_text,
            classification=self.classification,
        )


class TeamMemberPayload(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    email: str = Field(min_length=1)
    expertise: list[str] = Field(default_factory=list)
    availability: Availability | None = None

    def to_model(self) -> TeamMember:
        return TeamMember(
            id=self.id,
            name=self.name,
            email=self.email,
            expertise=tuple(self.expertise),
            availability=self.availability,
        )


class TimeSlotPayload(BaseModel):
    start: datetime
    end: datetime

    def to_model(self) -> TimeSlot:
        return TimeSlot(start=ensure_utc(self.start), end=ensure_utc(self.end))


class CalendarPayload(BaseModel):
    busy_slots: list[TimeSlotPayload] = Field(default_factory=list, alias="busySlots")
    next_free_slot: datetime | None = Field(default=None, alias="nextFreeSlot")
    focus_time: list[TimeSlotPayload] = Field(default_factory=list, alias="focusTime")

    def to_model(self) -> CalendarAvailability:
        return CalendarAvailability(
            busy_slots=tuple(slot.to_model() for slot in self.busy_slots),
            next_free_slot=(
                ensure_utc(self.next_free_slot) if self.next_free_slot else None
            ),
            focus_time=tuple(slot.to_model() for slot in self.focus_time),
        )


class DelegatePatternPayload(BaseModel):
    pattern: str = Field(min_length=1)
    delegate_to: str = Field(min_length=1, alias="delegateTo")


class FocusHoursPayload(BaseModel):
    start: int = Field(ge=0, le=23)
    end: int = Field(ge=0, le=24)


class UserPatternsPayload(BaseModel):
    archive_patterns: list[str] = Field(default_factory=list, alias="archivePatterns")
    delegate_patterns: list[DelegatePatternPayload] = Field(
        default_factory=list, alias="delegatePatterns"
    )
    response_time_by_priority: dict[str, float] = Field(
        default_factory=dict, alias="responseTimeByPriority"
    )
    focus_hours: FocusHoursPayload | None = Field(default=None, alias="focusHours")

    def to_model(self) -> UserActionPatterns:
        focus = self.focus_hours
        return UserActionPatterns(
            archive_patterns=tuple(self.archive_patterns),
            delegate_patterns=tuple(
                DelegatePattern(pattern=item.pattern, delegate_to=item.delegate_to)
                for item in self.delegate_patterns
            ),
            response_time_by_priority=dict(self.response_time_by_priority),
            focus_hours=(focus.start, focus.end) if focus else None,
        )


class RuleTriggerPayload(BaseModel):
    type: RuleTriggerType
    condition: RuleCondition
    value: str = Field(min_length=1)


class RulePayload(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    trigger: RuleTriggerPayload
    action: RuleAction
    description: str = ""
    action_value: str | None = Field(default=None, alias="actionValue")
    enabled: bool = True

    def to_model(self) -> TriageRule:
        trigger = self.trigger
        return TriageRule(
            id=self.id,
            name=self.name,
            trigger=RuleTrigger(
                type=trigger.type, condition=trigger.condition, value=trigger.value
            ),
            action=self.action,
            description=self.description,
            action_value=self.action_value,
            enabled=self.enabled,
        )


class DocumentPayload(BaseModel):
    """Threads plus the optional context a ``rank`` or ``summary`` run uses."""

    threads: list[ThreadPayload] = Field(default_factory=list)
    team_members: list[TeamMemberPayload] = Field(
        default_factory=list, alias="teamMembers"
    )
    calendar: CalendarPayload | None = None
    user_patterns: UserPatternsPayload | None = Field(
        default=None, alias="userPatterns"
    )
    rules: list[RulePayload] = Field(default_factory=list)


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def _validate(model: type[PayloadModel], payload: Any, kind: str) -> PayloadModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise PayloadError(f"Invalid {kind} payload: {_describe(exc)}") from exc


def participant_from_payload(payload: Mapping[str, Any]) -> Participant:
    return _validate(ParticipantPayload, payload, "participant").to_model()


def claim_from_payload(payload: Mapping[str, Any]) -> Claim:
    return _validate(ClaimPayload, payload, "claim").to_model()


def thread_from_payload(payload: Mapping[str, Any]) -> ThreadForPriority:
    """Build a thread from its camelCase JSON representation."""
    return _validate(ThreadPayload, payload, "thread").to_model()


def team_member_from_payload(payload: Mapping[str, Any]) -> TeamMember:
    return _validate(TeamMemberPayload, payload, "team member").to_model()


def calendar_from_payload(payload: Mapping[str, Any]) -> CalendarAvailability:
    return _validate(CalendarPayload, payload, "calendar").to_model()


def patterns_from_payload(payload: Mapping[str, Any]) -> UserActionPatterns:
    return _validate(UserPatternsPayload, payload, "user patterns").to_model()


def rule_from_payload(payload: Mapping[str, Any]) -> TriageRule:
    return _validate(RulePayload, payload, "rule").to_model()


def details_to_payload(details: ActionDetails | None) -> dict[str, Any] | None:
    if details is None:
        return None
    if isinstance(details, DelegateDetails):
        return {"delegateTo": details.delegate_to, "delegateReason": details.reason}
    if isinstance(details, ScheduleDetails):
        return {
            "scheduleFor": serialize_datetime(details.schedule_for),
            "scheduleDuration": details.duration_minutes,
        }
    if isinstance(details, WaitDetails):
        return {
            "waitUntil": serialize_datetime(details.wait_until),
            "waitReason": details.reason,
        }
    if isinstance(details, EscalateDetails):
        return {"escalateTo": details.escalate_to, "escalateReason": details.reason}
    return None


def priority_to_payload(priority: PriorityResult) -> dict[str, Any]:
    return {
        "tier": priority.tier,
        "urgencyScore": priority.urgency_score,
        "importanceScore": priority.importance_score,
        "combinedScore": priority.combined_score,
        "reasoning": priority.reasoning,
    }


def suggestion_to_payload(suggestion: TriageSuggestion) -> dict[str, Any]:
    """Render a triage suggestion as a JSON-friendly dictionary."""
    response_time = suggestion.response_time
    return {
        "threadId": suggestion.thread_id,
        "action": suggestion.action,
        "confidence": suggestion.confidence,
        "reasoning": suggestion.reasoning,
        "priority": priority_to_payload(suggestion.priority),
        "details": details_to_payload(suggestion.details),
        "responseTime": (
            {
                "suggested": serialize_datetime(response_time.suggested),
                "deadline": serialize_datetime(response_time.deadline),
            }
            if response_time
            else None
        ),
        "matchedRule": suggestion.matched_rule,
    }


def summary_to_payload(summary: InboxSummary) -> dict[str, Any]:
    stats = summary.stats
    return {
        "summary": summary.summary,
        "focusRecommendation": summary.focus_recommendation,
        "stats": {
            "total": stats.total,
            "urgent": stats.urgent,
            "high": stats.high,
            "medium": stats.medium,
            "low": stats.low,
            "needsResponse": stats.needs_response,
            "canArchive": stats.can_archive,
        },
        "topItems": [
            {"threadId": item.thread_id, "action": item.action, "reason": item.reason}
            for item in summary.top_items
        ],
    }


class JsonThreadSource:
    """Thread source backed by a JSON document.

    The document is either a list of threads or an object with ``threads`` and
    optional ``teamMembers``, ``calendar``, ``userPatterns`` and ``rules`` keys.
    The whole document is validated up front.
    """

    def __init__(self, document: Mapping[str, Any] | Sequence[Any]) -> None:
        if isinstance(document, Sequence) and not isinstance(document, str):
            document = {"threads": list(document)}
        elif not isinstance(document, Mapping):
            raise PayloadError("Expected a list of threads or an object")
        self._document = _validate(DocumentPayload, document, "document")

    @classmethod
    def from_path(cls, path: Path | str) -> JsonThreadSource:
        """Read a document from disk; raises ``OSError`` or ``PayloadError``."""
        text = Path(path).read_text(encoding="utf-8")
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PayloadError(f"Invalid JSON in {path}: {exc.msg}") from exc
        return cls(document)

    def load_threads(self) -> list[ThreadForPriority]:
        return [item.to_model() for item in self._document.threads]

    def load_team_members(self) -> list[TeamMember]:
        return [item.to_model() for item in self._document.team_members]

    def load_calendar(self) -> CalendarAvailability | None:
        calendar = self._document.calendar
        return calendar.to_model() if calendar else None

    def load_user_patterns(self) -> UserActionPatterns | None:
        patterns = self._document.user_patterns
        return patterns.to_model() if patterns else None

    def load_rules(self) -> list[TriageRule]:
        return [item.to_model() for item in self._document.rules]


__all__ = [
    "DocumentPayload",
    "JsonThreadSource",
    "ThreadPayload",
    "calendar_from_payload",
    "claim_from_payload",
    "details_to_payload",
    "participant_from_payload",
    "patterns_from_payload",
    "priority_to_payload",
    "rule_from_payload",
    "suggestion_to_payload",
    "summary_to_payload",
    "team_member_from_payload",
    "thread_from_payload",
]
