#!/usr/bin/env python3
"""Create a Picado match from the command line."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from picado.db.session import get_session
from picado.errors import RosterError
from picado.logging_config import setup_logging
from picado.matches import create_match


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a pickup match")
    parser.add_argument("--group", required=True, help="Group label, e.g. 'Thursday futsal'")
    parser.add_argument(
        "--when",
        required=True,
        help="Kick-off as ISO date-time, e.g. 2026-10-22T20:00",
    )
    parser.add_argument("--location", required=True, help="Location label")
    parser.add_argument("--limit", type=int, required=True, help="Active roster capacity")
    args = parser.parse_args()

    setup_logging()

    try:
        scheduled_at = datetime.fromisoformat(args.when)
    except ValueError:
        print(f"Invalid --when value: {args.when!r}", file=sys.stderr)
        return 1

    try:
        with get_session() as session:
            match = create_match(
                session,
                group_name=args.group,
                scheduled_at=scheduled_at,
                location_name=args.location,
                player_limit=args.limit,
            )
            print(f"Match ready: id={match.id}, group={match.group_name}, limit={match.player_limit}")
    except RosterError as exc:
        print(f"Could not create match: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
