"""Tests for priority calculation, re-ranking, and batch scoring."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from inbox_triage.core.models import Claim, Participant, ThreadForPriority
from inbox_triage.intelligence import (
    batch_calculate_priority,
    calculate_priority,
    recalculate_priority,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def _thread(**fields: object) -> ThreadForPriority:
    base: dict[str, object] = {
        "id": "t-1",
        "subject": "Hello",
        "last_message_at": NOW,
        "participants": (Participant("alex@example.com"),),
    }
    base.update(fields)
    return ThreadForPriority(**base)  # type: ignore[arg-type]


def _budget_thread() -> ThreadForPriority:
    return _thread(
        id="budget",
        subject="Please confirm budget approval by Friday",
        participants=(Participant("ceo@example.com", name="CEO", is_vip=True),),
        claims=(
            Claim("commitment", "Approve Q3 budget", NOW + timedelta(hours=18)),
        ),
    )


def test_vip_deadline_commitment_thread_is_urgent() -> None:
    result = calculate_priority(_budget_thread(), now=NOW)

    assert result.urgency_score > 0.5
    assert result.importance_score > 0.5
    assert result.tier == "urgent"
    assert result.importance_score == pytest.approx(0.25 + 0.18 + 0.15 + 0.10)
    assert result.combined_score == pytest.approx(
        result.urgency_score * 0.6 + result.importance_score * 0.4
    )
    assert result.reasoning.startswith("Urgent - requires immediate attention.")
    assert "Deadline is tomorrow" in result.reasoning


def test_newsletter_thread_is_low() -> None:
    thread = _thread(
        subject="Unsubscribe from our newsletter",
        participants=tuple(Participant(f"list{i}@news.example") for i in range(3)),
    )

    result = calculate_priority(thread, now=NOW)

    assert result.urgency_score == 0.0
    assert result.importance_score == pytest.approx(0.075)
    assert result.tier == "low"
    assert result.reasoning == "Low priority - can wait or archive"


def test_scores_stay_in_range_for_adversarial_threads() -> None:
    thread = _thread(
        subject="urgent asap critical emergency deadline: by Monday " * 5,
        snippet="Contract lawsuit invoice 9 million?",
        participants=tuple(
            Participant(f"user{i}@example.com", is_vip=i % 2 == 0) for i in range(30)
        ),
        claims=tuple(Claim("decision", "x", NOW - timedelta(days=i)) for i in range(5)),
        last_message_at=NOW - timedelta(days=10),
    )

    result = calculate_priority(thread, now=NOW)

    assert 0.0 <= result.urgency_score <= 1.0
    assert 0.0 <= result.importance_score <= 1.0
    assert 0.0 <= result.combined_score <= 1.0


def test_batch_sorts_descending_and_keeps_ties_in_input_order() -> None:
    first_plain = _thread(id="plain-1")
    urgent = _budget_thread()
    second_plain = _thread(id="plain-2")

    ranked = batch_calculate_priority([first_plain, urgent, second_plain], now=NOW)

    assert [item.thread.id for item in ranked] == ["budget", "plain-1", "plain-2"]
    scores = [item.priority.combined_score for item in ranked]
    assert scores == sorted(scores, reverse=True)


def test_batch_of_nothing_is_empty() -> None:
    assert batch_calculate_priority([], now=NOW) == []


def test_recalculate_without_elapsed_time_matches_fresh_calculation() -> None:
    thread = _budget_thread()

    assert recalculate_priority(
        thread, hours_since_last_calculation=0, now=NOW
    ) == calculate_priority(thread, now=NOW)


@pytest.mark.parametrize(("hours", "boost"), [(7.2, 0.1), (36, 0.2), (500, 0.2)])
def test_recalculate_boosts_urgency_with_cap(hours: float, boost: float) -> None:
    result = recalculate_priority(
        _thread(), hours_since_last_calculation=hours, now=NOW
    )

    assert result.urgency_score == pytest.approx(boost)
    assert result.combined_score == pytest.approx(boost * 0.6 + 0.175 * 0.4)


def test_recalculate_can_promote_tier() -> None:
    thread = _thread(subject="Slides by Friday")
    before = calculate_priority(thread, now=NOW)

    after = recalculate_priority(thread, hours_since_last_calculation=72, now=NOW)

    assert before.tier == "medium"
    assert after.tier == "high"
    assert after.reasoning.startswith("High priority - address soon.")


def test_recalculate_never_exceeds_one() -> None:
    result = recalculate_priority(
        _budget_thread(), hours_since_last_calculation=100, now=NOW
    )

    assert result.urgency_score == 1.0
