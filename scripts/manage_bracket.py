#!/usr/bin/env python3
"""
Start tournaments, record results and inspect progress from the shell.

Start a single-elimination tournament (generates and stores the bracket):
    python scripts/manage_bracket.py start <tournament-id>

Preview the bracket without writing anything:
    python scripts/manage_bracket.py start <tournament-id> --dry-run

Record a result (round 1, match 2, winner scored 3-1):
    python scripts/manage_bracket.py result <tournament-id> 1 2 <winner-id> 3 1

Show progress and the matches ready to be played:
    python scripts/manage_bracket.py status <tournament-id>
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bolobey.bracket import BracketError, get_available_matches, get_tournament_stats
from bolobey.db import get_session
from bolobey.logging_setup import configure_logging
from bolobey.services import (
    TournamentStateError,
    get_bracket_summary,
    preview_bracket,
    record_match_result,
    start_tournament,
)

logger = logging.getLogger("manage_bracket")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage tournament brackets.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    start = subparsers.add_parser("start", help="Generate and store the bracket.")
    start.add_argument("tournament_id")
    start.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated bracket without writing to the database.",
    )

    result = subparsers.add_parser("result", help="Record a match result.")
    result.add_argument("tournament_id")
    result.add_argument("round", type=int)
    result.add_argument("match", type=int)
    result.add_argument("winner_id")
    result.add_argument("player1_score", type=int)
    result.add_argument("player2_score", type=int)

    status = subparsers.add_parser("status", help="Show progress and playable matches.")
    status.add_argument("tournament_id")

    return parser


def _print_bracket(bracket) -> None:
    for bracket_round in bracket.rounds:
        print(f"{bracket_round.name}:")
        for match in bracket_round.matches:
            player1_id, player2_id = match.player_ids()
            line = f"  M{match.match_number}: {player1_id or '-'} vs {player2_id or '-'} [{match.status}]"
            if match.is_bye:
                line += " (bye)"
            print(line)


def _cmd_start(args: argparse.Namespace) -> int:
    with get_session() as session:
        if args.dry_run:
            generated = preview_bracket(session, args.tournament_id)
        else:
            generated = start_tournament(session, args.tournament_id)

    _print_bracket(generated.bracket)
    print(get_tournament_stats(generated.bracket).summary())
    if args.dry_run:
        print(json.dumps([record.to_dict() for record in generated.matches], indent=2))
    return 0


def _cmd_result(args: argparse.Namespace) -> int:
    with get_session() as session:
        bracket = record_match_result(
            session,
            args.tournament_id,
            args.round,
            args.match,
            args.winner_id,
            args.player1_score,
            args.player2_score,
        )

    if bracket.champion is not None:
        print(f"Champion: {bracket.champion.user_id}")
    else:
        print(f"{len(get_available_matches(bracket))} matches ready to play")
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    with get_session() as session:
        summary = get_bracket_summary(session, args.tournament_id)

    _print_bracket(summary.bracket)
    print(summary.stats.summary())
    for match in summary.available_matches:
        player1_id, player2_id = match.player_ids()
        print(f"Ready: R{match.round} M{match.match_number} {player1_id} vs {player2_id}")
    if summary.champion_id:
        print(f"Champion: {summary.champion_id}")
    return 0


COMMANDS = {
    "start": _cmd_start,
    "result": _cmd_result,
    "status": _cmd_status,
}


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        return COMMANDS[args.command](args)
    except (BracketError, TournamentStateError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
