"""Tests for urgency assessment."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from inbox_triage.core.models import Claim, Participant, ThreadForPriority
from inbox_triage.intelligence import assess_urgency
from inbox_triage.intelligence.signals import URGENT_KEYWORDS

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


def test_quiet_thread_scores_zero() -> None:
    result = assess_urgency(_thread(), now=NOW)

    assert result.score == 0.0
    assert result.factors.thread_age == 0.0
    assert result.factors.has_explicit_deadline is None
    assert result.factors.mentions_asap is False


def test_deadline_language_contributes_once() -> None:
    result = assess_urgency(
        _thread(subject="Slides by Friday", snippet="Due by Friday, deadline: Friday"),
        now=NOW,
    )

    assert result.factors.has_explicit_deadline is True
    assert result.factors.deadline_date is None
    # "deadline" is also an urgent keyword.
    assert result.score == pytest.approx(0.35 + 0.125)


def test_imminent_claim_deadline_is_boosted() -> None:
    due = NOW + timedelta(hours=10)
    later = NOW + timedelta(days=5)
    thread = _thread(
        claims=(
            Claim("commitment", "Send contract", due_date=later),
            Claim("commitment", "Share draft", due_date=due),
        )
    )

    result = assess_urgency(thread, now=NOW)

    assert result.factors.deadline_date == due
    assert result.score == pytest.approx(0.35 * 1.5)


def test_distant_claim_deadline_uses_base_weight() -> None:
    thread = _thread(
        claims=(Claim("commitment", "Send contract", NOW + timedelta(days=3)),)
    )

    assert assess_urgency(thread, now=NOW).score == pytest.approx(0.35)


def test_keyword_weight_saturates_at_two_matches() -> None:
    one = assess_urgency(_thread(subject="Critical outage"), now=NOW)
    three = assess_urgency(_thread(subject="Critical emergency, urgent"), now=NOW)

    assert one.score == pytest.approx(0.125)
    assert three.score == pytest.approx(0.25)
    assert three.factors.urgent_keywords == ("urgent", "critical", "emergency")


def test_asap_and_today_mentions_add_independently() -> None:
    result = assess_urgency(_thread(subject="Call me today, asap"), now=NOW)

    assert result.factors.mentions_asap is True
    assert result.factors.mentions_today is True
    # "asap" is also an urgent keyword.
    assert result.score == pytest.approx(0.125 + 0.05 + 0.05)


def test_vip_participant_adds_weight() -> None:
    thread = _thread(participants=(Participant("ceo@example.com", is_vip=True),))

    result = assess_urgency(thread, now=NOW)

    assert result.factors.sender_is_vip is True
    assert result.score == pytest.approx(0.15)


def test_reply_expected_counts_first_match_only() -> None:
    result = assess_urgency(
        _thread(subject="What do you think? Can you please reply?"), now=NOW
    )

    assert result.factors.is_reply_expected is True
    assert result.score == pytest.approx(0.10)


@pytest.mark.parametrize(
    ("hours_old", "expected"),
    [(10, 0.0), (24, 0.0), (30, 0.05), (48, 0.05), (50, 0.10)],
)
def test_thread_age_increases_urgency(hours_old: int, expected: float) -> None:
    thread = _thread(last_message_at=NOW - timedelta(hours=hours_old))

    result = assess_urgency(thread, now=NOW)

    assert result.factors.thread_age == pytest.approx(hours_old)
    assert result.score == pytest.approx(expected)


def test_total_is_clamped_to_one() -> None:
    thread = _thread(
        subject="URGENT deadline: by Friday, asap today. Please reply?",
        participants=(Participant("ceo@example.com", is_vip=True),),
        claims=(Claim("commitment", "Sign", NOW + timedelta(hours=2)),),
        last_message_at=NOW - timedelta(hours=60),
    )

    assert assess_urgency(thread, now=NOW).score == 1.0


def test_adversarial_keyword_flood_stays_in_range() -> None:
    thread = _thread(
        subject=" ".join(URGENT_KEYWORDS * 3),
        participants=tuple(
            Participant(f"user{i}@example.com", is_vip=True) for i in range(25)
        ),
    )

    score = assess_urgency(thread, now=NOW).score

    assert 0.0 <= score <= 1.0
