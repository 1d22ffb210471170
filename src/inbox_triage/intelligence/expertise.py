"""Match thread content against team expertise areas."""

from __future__ import annotations

from collections.abc import Container, Iterable

from inbox_triage.core.models import TeamMember, ThreadForPriority

from .signals import thread_text

EXPERTISE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "technical": ("code", "bug", "api", "deploy", "server", "database"),
    "design": ("design", "ui", "ux", "mockup", "wireframe"),
    "sales": ("deal", "prospect", "customer", "quote", "proposal"),
    "finance": ("invoice", "budget", "expense", "payment"),
    "legal": ("contract", "agreement", "terms", "compliance"),
    "hr": ("hiring", "candidate", "interview", "onboarding"),
    "marketing": ("campaign", "content", "social", "seo"),
}


def find_expertise_needed(thread: ThreadForPriority) -> tuple[str, ...]:
    """Return every expertise area whose keywords appear in the thread."""
    text = thread_text(thread)
    return tuple(
        area
        for area, keywords in EXPERTISE_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    )


def find_team_member(
    members: Iterable[TeamMember],
    expertise: Container[str],
    *,
    accept: Container[str | None],
) -> TeamMember | None:
    """Return the first member with overlapping expertise and accepted availability."""
    for member in members:
        if member.availability not in accept:
            continue
        if any(area in expertise for area in member.expertise):
            return member
    return None


__all__ = ["EXPERTISE_KEYWORDS", "find_expertise_needed", "find_team_member"]
