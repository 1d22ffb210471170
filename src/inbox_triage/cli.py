"""Command-line entry point for Inbox Triage."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from inbox_triage.core import (
    AppSettings,
    PayloadError,
    ThreadSource,
    configure_logging,
    load_app_settings,
)
from inbox_triage.core.datetime_utils import parse_datetime
from inbox_triage.core.models import TriageSuggestion
from inbox_triage.core.payloads import (
    JsonThreadSource,
    suggestion_to_payload,
    summary_to_payload,
)
from inbox_triage.intelligence import TriageService


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Inbox Triage priority engine")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="info",
        choices=["info", "rank", "summary"],
        help="Operation to execute.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="JSON file with threads and optional context (rank, summary).",
    )
    parser.add_argument(
        "--now",
        type=parse_datetime,
        default=None,
        help="ISO 8601 reference time used instead of the current time.",
    )
    parser.add_argument(
        "--hours-since-last",
        dest="hours_since_last",
        type=float,
        default=0.0,
        help="Hours since threads were last scored; boosts urgency when re-ranking.",
    )
    return parser


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return the exit status."""
    command = args.command
    if command == "info":
        print("Inbox Triage is ready. Pass a JSON file to 'rank' or 'summary'.")
        print(f"Response windows (hours): {settings.triage.response_windows}")
        print(f"Decay horizon: {settings.triage.decay_horizon_hours}h")
        return 0

    if args.input is None:
        print(f"The '{command}' command requires an input file.", file=sys.stderr)
        return 1
    try:
        source = JsonThreadSource.from_path(args.input)
        suggestions = _triage(
            source,
            settings,
            hours_since_last=args.hours_since_last,
            now=args.now,
        )
    except (OSError, PayloadError) as exc:
        print(f"Could not read {args.input}: {exc}", file=sys.stderr)
        return 1

    if command == "rank":
        payload: object = [suggestion_to_payload(item) for item in suggestions]
    else:
        service = TriageService(settings.triage)
        payload = summary_to_payload(service.summarize(suggestions))
    print(json.dumps(payload, indent=2))
    return 0


def _triage(
    source: ThreadSource,
    settings: AppSettings,
    *,
    hours_since_last: float,
    now: datetime | None,
) -> list[TriageSuggestion]:
    service = TriageService(settings.triage, rules=source.load_rules())
    return service.batch_triage(
        source.load_threads(),
        user_patterns=source.load_user_patterns(),
        team_members=source.load_team_members(),
        calendar=source.load_calendar(),
        hours_since_last_calculation=hours_since_last,
        now=now,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    return execute(args, settings)


if __name__ == "__main__":
    sys.exit(main())
