"""Lexical signal extractors shared by the urgency and importance assessors.

All matchers operate on lower-cased text and are pure functions.
"""

from __future__ import annotations

import re

from inbox_triage.core.models import ThreadForPriority

URGENT_KEYWORDS: tuple[str, ...] = (
    "urgent",
    "asap",
    "immediately",
    "critical",
    "emergency",
    "deadline",
    "by today",
    "by eod",
    "end of day",
    "time-sensitive",
    "time sensitive",
    "high priority",
    "action required",
    "response needed",
    "needs immediate",
    "as soon as possible",
)

FINANCIAL_KEYWORDS: tuple[str, ...] = (
    "invoice",
    "payment",
    "budget",
    "contract",
    "proposal",
    "quote",
    "pricing",
    "cost",
    "expense",
    "revenue",
    "deal",
    "negotiation",
)

LEGAL_KEYWORDS: tuple[str, ...] = (
    "legal",
    "contract",
    "agreement",
    "terms",
    "compliance",
    "liability",
    "lawsuit",
    "attorney",
    "lawyer",
    "nda",
    "confidential",
)

IMPORTANT_CLASSIFICATIONS: tuple[str, ...] = (
    "actionable",
    "decision-required",
    "needs-response",
)

_DEADLINE_PATTERNS = (
    re.compile(
        r"by\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)",
        re.IGNORECASE,
    ),
    re.compile(r"by\s+(\d{1,2}/\d{1,2})", re.IGNORECASE),
    re.compile(r"due\s+(date|by)", re.IGNORECASE),
    re.compile(r"deadline[:\s]", re.IGNORECASE),
    re.compile(r"before\s+(end of|eod|cob)", re.IGNORECASE),
)

_REPLY_PATTERNS = (
    re.compile(r"please\s+(reply|respond|let me know)", re.IGNORECASE),
    re.compile(r"waiting\s+(for|on)\s+(your|a)\s+(response|reply)", re.IGNORECASE),
    re.compile(r"\?\Z"),
    re.compile(r"what\s+do\s+you\s+think", re.IGNORECASE),
    re.compile(r"can\s+you\s+(please|kindly)", re.IGNORECASE),
)

_ASAP_PATTERN = re.compile(r"asap|a\.s\.a\.p", re.IGNORECASE)
_TODAY_PATTERN = re.compile(
    r"today|tonight|this morning|this afternoon", re.IGNORECASE
)
_AMOUNT_PATTERN = re.compile(
    r"\$[\d,]+(?:\.\d{2})?|\d+k|\d+\s*million", re.IGNORECASE
)
_LEADING_DIGITS = re.compile(r"\d+")


def thread_text(thread: ThreadForPriority, *, include_body: bool = True) -> str:
    """Return the lower-cased searchable text of a thread.

    Absent fields are skipped so a trailing ``?`` on the last present field is
    the end of the text.
    """
    parts = [thread.subject, thread.snippet]
    if include_body:
        parts.append(thread.body_text)
    return " ".join(part.strip() for part in parts if part and part.strip()).lower()


def has_deadline_language(text: str) -> bool:
    return any(pattern.search(text) for pattern in _DEADLINE_PATTERNS)


def find_urgent_keywords(text: str) -> tuple[str, ...]:
    """Return urgent keywords present in ``text`` in table order."""
    return tuple(keyword for keyword in URGENT_KEYWORDS if keyword in text)


def mentions_asap(text: str) -> bool:
    return _ASAP_PATTERN.search(text) is not None


def mentions_today(text: str) -> bool:
    return _TODAY_PATTERN.search(text) is not None


def expects_reply(text: str) -> bool:
    """Return ``True`` when phrasing asks the reader for an answer."""
    return any(pattern.search(text) for pattern in _REPLY_PATTERNS)


def has_financial_mention(text: str) -> bool:
    return any(keyword in text for keyword in FINANCIAL_KEYWORDS)


def has_legal_mention(text: str) -> bool:
    return any(keyword in text for keyword in LEGAL_KEYWORDS)


def find_amount_token(text: str) -> str | None:
    """Return the first dollar, ``k`` or ``million`` amount token in ``text``."""
    match = _AMOUNT_PATTERN.search(text)
    return match.group(0).lower() if match else None


def parse_amount_token(token: str) -> int | None:
    """Best-effort magnitude of an amount token.

    ``million`` tokens map to a flat 1,000,000 and ``k`` tokens to their
    leading integer times 1000. Plain dollar figures are not interpreted.
    """
    if "million" in token:
        return 1_000_000
    if "k" in token:
        digits = _LEADING_DIGITS.match(token)
        if digits is None:
            return None
        return int(digits.group(0)) * 1000
    return None


def is_important_classification(classification: str | None) -> bool:
    if not classification:
        return False
    lowered = classification.lower()
    return any(label in lowered for label in IMPORTANT_CLASSIFICATIONS)


__all__ = [
    "FINANCIAL_KEYWORDS",
    "IMPORTANT_CLASSIFICATIONS",
    "LEGAL_KEYWORDS",
    "URGENT_KEYWORDS",
    "expects_reply",
    "find_amount_token",
    "find_urgent_keywords",
    "has_deadline_language",
    "has_financial_mention",
    "has_legal_mention",
    "is_important_classification",
    "mentions_asap",
    "mentions_today",
    "parse_amount_token",
    "thread_text",
]
