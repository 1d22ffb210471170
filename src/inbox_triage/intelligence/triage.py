"""Triage service combining priority scoring, user rules, and action classification."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from datetime import datetime

from inbox_triage.core.config import TriageSettings
from inbox_triage.core.datetime_utils import utc_now
from inbox_triage.core.models import (
    ActionContext,
    ActionType,
    CalendarAvailability,
    InboxItem,
    InboxStats,
    InboxSummary,
    PriorityResult,
    ResponseTimeSuggestion,
    RuleAction,
    ScoredThread,
    TeamMember,
    ThreadForPriority,
    TriageRule,
    TriageSuggestion,
    UserActionPatterns,
)

from .actions import classify_action
from .priority import recalculate_priority
from .response_time import suggest_response_time
from .signals import thread_text

LOGGER = logging.getLogger(__name__)

RULE_MATCH_CONFIDENCE = 0.95
_RULE_ACTIONS: dict[RuleAction, ActionType] = {
    "archive": "archive",
    "label": "review",
    "forward": "delegate",
    "priority": "respond",
}


def _rule_target(thread: ThreadForPriority, rule: TriageRule) -> str | None:
    trigger_type = rule.trigger.type
    if trigger_type == "sender":
        sender = thread.participants[0].address if thread.participants else ""
        return sender.lower()
    if trigger_type == "subject":
        return thread.subject.lower()
    if trigger_type == "content":
        return thread_text(thread)
    if trigger_type == "label":
        return (thread.classification or "").lower()
    return None


def matches_rule(thread: ThreadForPriority, rule: TriageRule) -> bool:
    """Return ``True`` when a user-defined rule's trigger matches the thread.

    Comparisons are case-insensitive; an invalid ``matches`` pattern never matches.
    """
    target = _rule_target(thread, rule)
    if target is None:
        return False
    value = rule.trigger.value.lower()
    condition = rule.trigger.condition
    if condition == "equals":
        return target == value
    if condition == "contains":
        return value in target
    if condition == "matches":
        try:
            return re.search(value, target) is not None
        except re.error as exc:
            LOGGER.warning("Ignoring rule %s with invalid pattern: %s", rule.id, exc)
            return False
    return False


def summarize_inbox(
    suggestions: Sequence[TriageSuggestion], *, top_items: int = 5
) -> InboxSummary:
    """Build a deterministic overview of triaged threads."""
    tiers = [suggestion.priority.tier for suggestion in suggestions]
    actions = [suggestion.action for suggestion in suggestions]
    stats = InboxStats(
        total=len(suggestions),
        urgent=tiers.count("urgent"),
        high=tiers.count("high"),
        medium=tiers.count("medium"),
        low=tiers.count("low"),
        needs_response=actions.count("respond"),
        can_archive=actions.count("archive"),
    )
    ranked = sorted(
        suggestions, key=lambda item: item.priority.combined_score, reverse=True
    )
    items = tuple(
        InboxItem(
            thread_id=suggestion.thread_id,
            action=suggestion.action,
            reason=suggestion.reasoning.split(".")[0],
        )
        for suggestion in ranked[:top_items]
    )
    focus = (
        "Start with the urgent items first."
        if stats.urgent > 0
        else "Work through high priority items."
    )
    return InboxSummary(
        summary=(
            f"You have {stats.total} emails to process. {stats.urgent} are urgent "
            f"and {stats.needs_response} need a response."
        ),
        focus_recommendation=focus,
        stats=stats,
        top_items=items,
    )


class TriageService:
    """Produce triage suggestions for threads using deterministic heuristics."""

    def __init__(
        self,
        settings: TriageSettings | None = None,
        *,
        rules: Sequence[TriageRule] = (),
    ) -> None:
        self._settings = settings or TriageSettings()
        self._rules = tuple(rules)

    def triage_thread(
        self,
        thread: ThreadForPriority,
        *,
        user_patterns: UserActionPatterns | None = None,
        team_members: Sequence[TeamMember] = (),
        calendar: CalendarAvailability | None = None,
        hours_since_last_calculation: float = 0.0,
        now: datetime | None = None,
    ) -> TriageSuggestion:
        """Score a thread and decide what the user should do with it.

        A positive ``hours_since_last_calculation`` applies the time-decay urgency
        boost before the action is chosen.
        """
        now = now or utc_now()
        priority = self._score(thread, hours_since_last_calculation, now)
        return self._suggest(
            thread,
            priority,
            ActionContext(
                thread=thread,
                priority=priority,
                user_patterns=user_patterns,
                team_members=tuple(team_members),
                user_calendar=calendar,
                now=now,
            ),
        )

    def batch_triage(
        self,
        threads: Iterable[ThreadForPriority],
        *,
        user_patterns: UserActionPatterns | None = None,
        team_members: Sequence[TeamMember] = (),
        calendar: CalendarAvailability | None = None,
        hours_since_last_calculation: float = 0.0,
        now: datetime | None = None,
    ) -> list[TriageSuggestion]:
        """Triage every thread and rank the results by combined score."""
        now = now or utc_now()
        results = [
            self.triage_thread(
                thread,
                user_patterns=user_patterns,
                team_members=team_members,
                calendar=calendar,
                hours_since_last_calculation=hours_since_last_calculation,
                now=now,
            )
            for thread in threads
        ]
        LOGGER.debug("Triaged %d thread(s)", len(results))
        return sorted(
            results, key=lambda item: item.priority.combined_score, reverse=True
        )

    def rerank(
        self,
        threads: Iterable[ThreadForPriority],
        *,
        hours_since_last_calculation: float,
        now: datetime | None = None,
    ) -> list[ScoredThread]:
        """Re-score unprocessed threads with time decay and rank them."""
        now = now or utc_now()
        scored = [
            ScoredThread(
                thread=thread,
                priority=self._score(thread, hours_since_last_calculation, now),
            )
            for thread in threads
        ]
        return sorted(
            scored, key=lambda item: item.priority.combined_score, reverse=True
        )

    def summarize(self, suggestions: Sequence[TriageSuggestion]) -> InboxSummary:
        return summarize_inbox(suggestions, top_items=self._settings.top_items)

    def _score(
        self, thread: ThreadForPriority, hours_since_last: float, now: datetime
    ) -> PriorityResult:
        return recalculate_priority(
            thread,
            hours_since_last_calculation=hours_since_last,
            now=now,
            decay_horizon_hours=self._settings.decay_horizon_hours,
            max_decay_boost=self._settings.max_decay_boost,
        )

    def _suggest(
        self,
        thread: ThreadForPriority,
        priority: PriorityResult,
        context: ActionContext,
    ) -> TriageSuggestion:
        rule = next(
            (r for r in self._rules if r.enabled and matches_rule(thread, r)), None
        )
        if rule is not None:
            action = _RULE_ACTIONS.get(rule.action, "review")
            LOGGER.debug("Thread %s matched user rule %s", thread.id, rule.id)
            return TriageSuggestion(
                thread_id=thread.id,
                action=action,
                confidence=RULE_MATCH_CONFIDENCE,
                reasoning=f"Matched rule: {rule.name}. {rule.description}".strip(),
                priority=priority,
                response_time=self._response_time(context, action),
                matched_rule=rule.name,
            )

        suggestion = classify_action(context)
        return TriageSuggestion(
            thread_id=thread.id,
            action=suggestion.action,
            confidence=suggestion.confidence,
            reasoning=suggestion.reasoning,
            priority=priority,
            details=suggestion.details,
            response_time=self._response_time(context, suggestion.action),
        )

    def _response_time(
        self, context: ActionContext, action: ActionType
    ) -> ResponseTimeSuggestion | None:
        if action != "respond":
            return None
        return suggest_response_time(
            context,
            windows=self._settings.response_windows,
            deadline_lead_hours=self._settings.deadline_lead_hours,
        )


__all__ = ["TriageService", "matches_rule", "summarize_inbox"]
