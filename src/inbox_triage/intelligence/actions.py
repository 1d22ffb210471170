"""Rule-based classification of the next action for a thread."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from inbox_triage.core.datetime_utils import (
    add_hours,
    ensure_utc,
    hours_between,
    utc_now,
)
from inbox_triage.core.models import (
    ActionContext,
    ActionDetails,
    ActionSuggestion,
    ActionType,
    DelegateDetails,
    EscalateDetails,
    ScheduleDetails,
    WaitDetails,
)

from .expertise import find_expertise_needed, find_team_member
from .signals import thread_text

LOGGER = logging.getLogger(__name__)

RulePredicate = Callable[[ActionContext], bool]
RuleDetails = Callable[[ActionContext], ActionDetails | None]

URGENT_RESPOND_BOOST = 0.1
FALLBACK_CONFIDENCE = 0.5
FALLBACK_REASONING = "Could not determine a specific action. Review manually."

ACTION_DESCRIPTIONS: dict[ActionType, str] = {
    "respond": "This email needs a response",
    "archive": "This email can be archived",
    "delegate": "This email should be delegated",
    "schedule": "Schedule time to address this",
    "wait": "Wait before taking action",
    "escalate": "This should be escalated",
    "review": "Review this email manually",
}


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the rule table; ``reason`` explains a match to the user."""

    name: str
    action: ActionType
    weight: float
    reason: str
    predicate: RulePredicate
    details: RuleDetails | None = None


def _now(ctx: ActionContext) -> datetime:
    return ctx.now or utc_now()


def _text(ctx: ActionContext) -> str:
    return thread_text(ctx.thread, include_body=False)


def _age_hours(ctx: ActionContext) -> float:
    return hours_between(_now(ctx), ctx.thread.last_message_at)


def _matches(*patterns: str) -> RulePredicate:
    compiled = tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)

    def predicate(ctx: ActionContext) -> bool:
        text = _text(ctx)
        return any(pattern.search(text) for pattern in compiled)

    return predicate


def _classification_contains(ctx: ActionContext, *labels: str) -> bool:
    classification = (ctx.thread.classification or "").lower()
    return any(label in classification for label in labels)


def _pattern_text(ctx: ActionContext) -> str:
    addresses = " ".join(p.address for p in ctx.thread.participants)
    return f"{_text(ctx)} {addresses.lower()}"


# Escalation


def _escalation(reason: str) -> RuleDetails:
    return lambda _ctx: EscalateDetails(reason=reason)


# Archiving


def _is_newsletter(ctx: ActionContext) -> bool:
    text = _text(ctx)
    return (
        "unsubscribe" in text
        or "newsletter" in text
        or _classification_contains(ctx, "marketing", "newsletter")
    )


def _is_auto_notification(ctx: ActionContext) -> bool:
    automated = any(
        "noreply" in p.address.lower() or "no-reply" in p.address.lower()
        for p in ctx.thread.participants
    )
    return automated or _classification_contains(ctx, "notification")


def _is_low_priority_aged(ctx: ActionContext) -> bool:
    return ctx.priority.tier == "low" and _age_hours(ctx) > 72


def _learned_archive_pattern(ctx: ActionContext) -> str | None:
    if ctx.user_patterns is None:
        return None
    text = _pattern_text(ctx)
    for pattern in ctx.user_patterns.archive_patterns:
        if pattern and pattern.lower() in text:
            return pattern
    return None


# Delegation


def _wrong_recipient_details(ctx: ActionContext) -> ActionDetails | None:
    expertise = find_expertise_needed(ctx.thread)
    member = find_team_member(
        ctx.team_members, expertise, accept=(None, "available", "busy")
    )
    if member is None:
        return None
    return DelegateDetails(
        delegate_to=member.email,
        reason=(
            f"Better suited for {member.name}'s expertise in {', '.join(expertise)}"
        ),
    )


def _has_expertise_match(ctx: ActionContext) -> bool:
    if not ctx.team_members:
        return False
    expertise = find_expertise_needed(ctx.thread)
    if not expertise:
        return False
    member = find_team_member(ctx.team_members, expertise, accept=("available",))
    return member is not None


def _expertise_match_details(ctx: ActionContext) -> ActionDetails | None:
    member = find_team_member(
        ctx.team_members, find_expertise_needed(ctx.thread), accept=("available",)
    )
    if member is None:
        return None
    return DelegateDetails(
        delegate_to=member.email, reason=f"Matches {member.name}'s expertise"
    )


def _learned_delegate_details(ctx: ActionContext) -> ActionDetails | None:
    if ctx.user_patterns is None:
        return None
    text = _pattern_text(ctx)
    for entry in ctx.user_patterns.delegate_patterns:
        if entry.pattern and entry.pattern.lower() in text:
            return DelegateDetails(
                delegate_to=entry.delegate_to,
                reason=(
                    f'You usually forward "{entry.pattern}" threads '
                    f"to {entry.delegate_to}"
                ),
            )
    return None


# Scheduling


_COMPLEX_TASK = re.compile(
    r"analysis|review|proposal|report|document", re.IGNORECASE
)


def _is_complex_task(ctx: ActionContext) -> bool:
    if ctx.priority.tier == "urgent":
        return False
    return _COMPLEX_TASK.search(_text(ctx)) is not None


def _is_busy_now(ctx: ActionContext) -> bool:
    calendar = ctx.user_calendar
    if ctx.priority.tier != "high" or calendar is None:
        return False
    now = ensure_utc(_now(ctx))
    return any(
        ensure_utc(slot.start) <= now < ensure_utc(slot.end)
        for slot in calendar.busy_slots
    )


def _schedule(fallback_hours: float, duration_minutes: int) -> RuleDetails:
    def details(ctx: ActionContext) -> ActionDetails:
        calendar = ctx.user_calendar
        slot = calendar.next_free_slot if calendar else None
        return ScheduleDetails(
            schedule_for=slot or add_hours(_now(ctx), fallback_hours),
            duration_minutes=duration_minutes,
        )

    return details


# Waiting


def _is_thread_in_progress(ctx: ActionContext) -> bool:
    return len(ctx.thread.participants) > 3 and _age_hours(ctx) < 4


def _wait(hours: float, reason: str) -> RuleDetails:
    return lambda ctx: WaitDetails(
        wait_until=add_hours(_now(ctx), hours), reason=reason
    )


# Escalation is declared first so it wins weight ties against other families.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="above-authority",
        action="escalate",
        weight=0.9,
        reason="Requires higher authority approval",
        predicate=_matches(
            r"approval (from|by) (manager|director|vp)",
            r"executive decision",
            r"budget approval",
        ),
        details=_escalation("Requires higher authority approval"),
    ),
    ClassificationRule(
        name="sensitive-legal",
        action="escalate",
        weight=0.85,
        reason="Sensitive matter requiring management attention",
        predicate=_matches(
            r"legal (issue|matter|concern)",
            r"lawsuit|litigation",
            r"hr (complaint|issue)",
        ),
        details=_escalation("Sensitive matter requiring management attention"),
    ),
    ClassificationRule(
        name="direct-question",
        action="respond",
        weight=0.9,
        reason="Contains a direct question requiring your input",
        predicate=_matches(
            r"\?\Z", r"what do you think", r"can you (please|kindly)", r"let me know"
        ),
    ),
    ClassificationRule(
        name="explicit-request",
        action="respond",
        weight=0.85,
        reason="Explicitly requests your response or action",
        predicate=_matches(
            r"please (respond|reply|confirm|review)",
            r"need your (input|feedback|approval)",
        ),
    ),
    ClassificationRule(
        name="commitment-request",
        action="respond",
        weight=0.8,
        reason="Contains a commitment that needs your attention",
        predicate=lambda ctx: any(c.type == "commitment" for c in ctx.thread.claims),
    ),
    ClassificationRule(
        name="fyi-only",
        action="archive",
        weight=0.85,
        reason="Marked as FYI only, no action needed",
        predicate=_matches(
            r"^(fyi|for your information|no action needed)",
            r"no (response|reply|action) (needed|required)",
        ),
    ),
    ClassificationRule(
        name="newsletter-marketing",
        action="archive",
        weight=0.9,
        reason="Appears to be a newsletter or marketing email",
        predicate=_is_newsletter,
    ),
    ClassificationRule(
        name="auto-notification",
        action="archive",
        weight=0.88,
        reason="Automated notification that doesn't need response",
        predicate=_is_auto_notification,
    ),
    ClassificationRule(
        name="learned-archive",
        action="archive",
        weight=0.8,
        reason="Matches a pattern you usually archive",
        predicate=lambda ctx: _learned_archive_pattern(ctx) is not None,
    ),
    ClassificationRule(
        name="low-priority-aged",
        action="archive",
        weight=0.7,
        reason="Low priority email that has been waiting over 3 days",
        predicate=_is_low_priority_aged,
    ),
    ClassificationRule(
        name="wrong-recipient",
        action="delegate",
        weight=0.85,
        reason="May be better handled by someone else",
        predicate=_matches(r"not (my|the right) (area|department|team)"),
        details=_wrong_recipient_details,
    ),
    ClassificationRule(
        name="learned-delegate",
        action="delegate",
        weight=0.8,
        reason="Matches a pattern you usually delegate",
        predicate=lambda ctx: _learned_delegate_details(ctx) is not None,
        details=_learned_delegate_details,
    ),
    ClassificationRule(
        name="expertise-match",
        action="delegate",
        weight=0.75,
        reason="Matches another team member's expertise area",
        predicate=_has_expertise_match,
        details=_expertise_match_details,
    ),
    ClassificationRule(
        name="complex-task",
        action="schedule",
        weight=0.8,
        reason="Requires focused time for a complex task",
        predicate=_is_complex_task,
        details=_schedule(24, 30),
    ),
    ClassificationRule(
        name="high-priority-busy",
        action="schedule",
        weight=0.75,
        reason="High priority but you're currently busy",
        predicate=_is_busy_now,
        details=_schedule(2, 15),
    ),
    ClassificationRule(
        name="waiting-on-others",
        action="wait",
        weight=0.85,
        reason="Waiting on external response",
        predicate=_matches(
            r"waiting (for|on)",
            r"will (get back|follow up)",
            r"pending (approval|review)",
        ),
        details=_wait(48, "Waiting for external response"),
    ),
    ClassificationRule(
        name="thread-in-progress",
        action="wait",
        weight=0.7,
        reason="Active discussion - wait for it to settle",
        predicate=_is_thread_in_progress,
        details=_wait(24, "Active thread - wait for discussion to settle"),
    ),
    ClassificationRule(
        name="needs-review",
        action="review",
        weight=FALLBACK_CONFIDENCE,
        reason="Requires manual review to determine appropriate action",
        predicate=lambda _ctx: True,
    ),
)


def _build_reasoning(rule: ClassificationRule) -> str:
    description = ACTION_DESCRIPTIONS[rule.action]
    return f"{description}. {rule.reason}." if rule.reason else description


def classify_action(
    context: ActionContext,
    rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES,
) -> ActionSuggestion:
    """Pick the highest-weight matching rule; ties go to the earliest declared.

    ``review`` rules only win when nothing else matches.
    """
    if context.now is None:
        context = replace(context, now=utc_now())

    matched = [rule for rule in rules if rule.predicate(context)]
    LOGGER.debug(
        "Thread %s matched rules: %s",
        context.thread.id,
        ", ".join(rule.name for rule in matched) or "none",
    )
    specific = [rule for rule in matched if rule.action != "review"]
    if specific:
        best = max(specific, key=lambda rule: rule.weight)
    else:
        best = next((rule for rule in matched if rule.action == "review"), None)

    if best is None:
        return ActionSuggestion(
            action="review",
            confidence=FALLBACK_CONFIDENCE,
            reasoning=FALLBACK_REASONING,
        )

    confidence = best.weight
    if context.priority.tier == "urgent" and best.action == "respond":
        confidence = min(confidence + URGENT_RESPOND_BOOST, 1.0)

    return ActionSuggestion(
        action=best.action,
        confidence=confidence,
        reasoning=_build_reasoning(best),
        details=best.details(context) if best.details else None,
    )


def batch_classify_actions(
    contexts: Iterable[ActionContext],
) -> list[tuple[ActionContext, ActionSuggestion]]:
    """Classify each context independently, preserving input order."""
    return [(context, classify_action(context)) for context in contexts]


__all__ = [
    "ACTION_DESCRIPTIONS",
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "batch_classify_actions",
    "classify_action",
]
