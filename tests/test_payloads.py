from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from inbox_triage.core import PayloadError
from inbox_triage.core.models import (
    DelegateDetails,
    EscalateDetails,
    ScheduleDetails,
    WaitDetails,
)
from inbox_triage.core.payloads import (
    JsonThreadSource,
    details_to_payload,
    rule_from_payload,
    suggestion_to_payload,
    thread_from_payload,
)
from inbox_triage.intelligence import TriageService

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

THREAD = {
    "id": "t-1",
    "subject": "Contract review",
    "lastMessageAt": "2026-03-10T09:00:00Z",
    "messageCount": 3,
    "participants": [
        {"address": "ceo@example.com", "name": "Pat", "isVIP": True},
        {"address": "you@example.com", "isInternal": True},
    ],
    "claims": [
        {"type": "commitment", "content": "Sign", "dueDate": "2026-03-11T12:00:00Z"}
    ],
    "snippet": "Need your feedback",
    "classification": "actionable",
}


def test_thread_from_payload_reads_camel_case_fields() -> None:
    thread = thread_from_payload(THREAD)

    assert thread.last_message_at == datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    assert thread.message_count == 3
    assert thread.participants[0].is_vip
    assert thread.participants[1].is_internal
    assert thread.claims[0].due_date == NOW + timedelta(hours=24)
    assert thread.body_text is None


@pytest.mark.parametrize(
    "payload",
    [
        {"subject": "x", "lastMessageAt": "2026-03-10T09:00:00Z"},
        {"id": "t", "subject": "x"},
        {"id": "t", "lastMessageAt": "yesterday"},
        {"id": "t", "lastMessageAt": "2026-03-10T09:00:00Z", "participants": [{}]},
        {"id": "t", "lastMessageAt": "2026-03-10T09:00:00Z", "messageCount": "many"},
        {"id": "t", "lastMessageAt": "2026-03-10T09:00:00Z", "participants": ["x"]},
        {
            "id": "t",
            "lastMessageAt": "2026-03-10T09:00:00Z",
            "participants": [{"address": "a@example.com", "isVIP": "maybe"}],
        },
        "oops",
    ],
)
def test_invalid_thread_payload_raises(payload: object) -> None:
    with pytest.raises(PayloadError):
        thread_from_payload(payload)  # type: ignore[arg-type]


def test_rule_from_payload() -> None:
    rule = rule_from_payload(
        {
            "id": "r1",
            "name": "Receipts",
            "trigger": {"type": "sender", "condition": "contains", "value": "shop"},
            "action": "archive",
            "enabled": False,
        }
    )

    assert rule.trigger.value == "shop"
    assert rule.enabled is False
    assert rule.description == ""


def test_details_payloads() -> None:
    assert details_to_payload(None) is None
    assert details_to_payload(DelegateDetails("a@example.com", "why")) == {
        "delegateTo": "a@example.com",
        "delegateReason": "why",
    }
    assert details_to_payload(ScheduleDetails(NOW, 30)) == {
        "scheduleFor": "2026-03-10T12:00:00+00:00",
        "scheduleDuration": 30,
    }
    assert details_to_payload(WaitDetails(NOW, "later"))["waitReason"] == "later"
    assert details_to_payload(EscalateDetails("boss")) == {
        "escalateTo": None,
        "escalateReason": "boss",
    }


def test_source_accepts_bare_thread_list() -> None:
    source = JsonThreadSource([THREAD])

    assert [thread.id for thread in source.load_threads()] == ["t-1"]
    assert source.load_team_members() == []
    assert source.load_calendar() is None
    assert source.load_user_patterns() is None
    assert source.load_rules() == []


def test_source_reads_context_from_file(tmp_path: Path) -> None:
    path = tmp_path / "inbox.json"
    path.write_text(
        json.dumps(
            {
                "threads": [THREAD],
                "teamMembers": [
                    {
                        "id": "m1",
                        "name": "Sam",
                        "email": "sam@example.com",
                        "expertise": ["legal"],
                        "availability": "available",
                    }
                ],
                "calendar": {
                    "busySlots": [
                        {
                            "start": "2026-03-10T11:00:00Z",
                            "end": "2026-03-10T13:00:00Z",
                        }
                    ],
                    "nextFreeSlot": "2026-03-10T14:00:00Z",
                },
                "userPatterns": {
                    "archivePatterns": ["digest"],
                    "delegatePatterns": [
                        {"pattern": "invoice", "delegateTo": "ap@example.com"}
                    ],
                    "responseTimeByPriority": {"high": 6},
                    "focusHours": {"start": 9, "end": 11},
                },
            }
        ),
        encoding="utf-8",
    )

    source = JsonThreadSource.from_path(path)

    assert source.load_team_members()[0].expertise == ("legal",)
    calendar = source.load_calendar()
    assert calendar is not None
    assert calendar.next_free_slot == datetime(2026, 3, 10, 14, 0, tzinfo=UTC)
    patterns = source.load_user_patterns()
    assert patterns is not None
    assert patterns.delegate_patterns[0].delegate_to == "ap@example.com"
    assert patterns.response_time_by_priority == {"high": 6.0}
    assert patterns.focus_hours == (9, 11)


def test_invalid_json_raises_payload_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PayloadError):
        JsonThreadSource.from_path(path)


def test_scalar_document_is_rejected() -> None:
    with pytest.raises(PayloadError):
        JsonThreadSource("threads")  # type: ignore[arg-type]


def test_suggestion_payload_is_json_serializable() -> None:
    suggestion = TriageService().triage_thread(thread_from_payload(THREAD), now=NOW)

    payload = suggestion_to_payload(suggestion)

    assert payload["threadId"] == "t-1"
    assert payload["priority"]["tier"] == suggestion.priority.tier
    assert payload["matchedRule"] is None
    json.dumps(payload)


def test_string_flags_are_read_as_booleans() -> None:
    payload = {
        **THREAD,
        "participants": [
            {"address": "a@example.com", "isVIP": "false", "isInternal": "true"}
        ],
    }

    participant = thread_from_payload(payload).participants[0]

    assert participant.is_vip is False
    assert participant.is_internal is True


@pytest.mark.parametrize(
    "document",
    [
        {"threads": ["oops"]},
        {"threads": 7},
        {"threads": [THREAD], "userPatterns": {"responseTimeByPriority": [1, 2]}},
        {"threads": [THREAD], "userPatterns": {"focusHours": "mornings"}},
        {"threads": [THREAD], "teamMembers": [{"id": "m1"}]},
        {"threads": [THREAD], "calendar": {"busySlots": [{"start": "soon"}]}},
        {"threads": [THREAD], "rules": [{"id": "r1", "action": "delete"}]},
    ],
)
def test_malformed_document_raises_payload_error(document: dict[str, object]) -> None:
    with pytest.raises(PayloadError):
        JsonThreadSource(document)


def test_naive_timestamps_are_read_as_utc() -> None:
    thread = thread_from_payload({**THREAD, "lastMessageAt": "2026-03-10T09:00:00"})

    assert thread.last_message_at == datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
