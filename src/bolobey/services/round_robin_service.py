"""
Round-robin service: stores the full schedule up front and keeps standings.

Every pairing from the circle-method schedule becomes a Match row when the
tournament starts. Match numbers run from 1 within each round. Standings
are computed on demand from completed rows; when the last match completes
the table leader is stored as the tournament winner.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from bolobey.bracket.errors import InvalidInputError, InvalidWinnerError, NotFoundError
from bolobey.config import settings
from bolobey.db.models import Match
from bolobey.round_robin import (
    ParticipantRecord,
    RoundRobinPairing,
    Standing,
    calculate_round_robin_standings,
    generate_round_robin_matches,
)
from bolobey.services.tournament_state import (
    TournamentStateError,
    get_tournament,
    load_matches,
    load_participants,
    require_format,
    require_in_progress,
    require_not_started,
)

logger = logging.getLogger(__name__)

FORMAT = "round_robin"


def start_round_robin(session: Session, tournament_id: str) -> list[RoundRobinPairing]:
    """
    Schedule every participant against every other and store the matches.

    Raises:
        TournamentStateError: Unknown tournament, wrong format, or already started
        InvalidInputError: Fewer than settings.min_participants entrants
    """
    tournament = get_tournament(session, tournament_id)
    require_format(tournament, FORMAT)
    require_not_started(session, tournament)

    participants = load_participants(session, tournament_id)
    if len(participants) < settings.min_participants:
        raise InvalidInputError(f"need at least {settings.min_participants} participants")

    pairings = generate_round_robin_matches(
        [p.user_id for p in participants], tournament_id
    )

    match_numbers: dict[int, int] = {}
    for pairing in pairings:
        match_numbers[pairing.round] = match_numbers.get(pairing.round, 0) + 1
        session.add(
            Match(
                tournament_id=tournament_id,
                round=pairing.round,
                match_number=match_numbers[pairing.round],
                player1_id=pairing.player1_id,
                player2_id=pairing.player2_id,
            )
        )

    tournament.status = "in_progress"
    session.flush()
    logger.info(
        "Started round robin %s: %d participants, %d rounds, %d matches",
        tournament_id, len(participants), len(match_numbers), len(pairings),
    )
    return pairings


def get_round_robin_standings(session: Session, tournament_id: str) -> list[Standing]:
    """Current table: match points scored, matches played and won per entrant."""
    participants = load_participants(session, tournament_id)
    totals = {
        p.user_id: {"total_points": 0, "matches_played": 0, "matches_won": 0}
        for p in participants
    }

    for row in load_matches(session, tournament_id).values():
        if not row.is_completed:
            continue
        for user_id, score in ((row.player1_id, row.player1_score), (row.player2_id, row.player2_score)):
            entry = totals.get(user_id)
            if entry is None:
                continue
            entry["total_points"] += score
            entry["matches_played"] += 1
            if row.winner_id == user_id:
                entry["matches_won"] += 1

    return calculate_round_robin_standings(
        ParticipantRecord(
            user_id=p.user_id,
            display_name=p.display_name or p.user_id,
            **totals[p.user_id],
        )
        for p in participants
    )


def record_round_robin_result(
    session: Session,
    tournament_id: str,
    round_number: int,
    match_number: int,
    winner_id: str,
    player1_score: int,
    player2_score: int,
) -> Match:
    """
    Store a round-robin result.

    Raises:
        TournamentStateError: Tournament not in progress or match already completed
        NotFoundError: No such round or match
        InvalidWinnerError: winner_id is neither player of the match
    """
    tournament = get_tournament(session, tournament_id)
    require_format(tournament, FORMAT)
    require_in_progress(tournament)

    rows = load_matches(session, tournament_id)
    if not any(r == round_number for r, _ in rows):
        raise NotFoundError(round_number)
    row = rows.get((round_number, match_number))
    if row is None:
        raise NotFoundError(round_number, match_number)
    if row.is_completed:
        raise TournamentStateError(
            f"Round {round_number} match {match_number} is already completed"
        )
    if winner_id not in (row.player1_id, row.player2_id):
        raise InvalidWinnerError(winner_id, round_number, match_number)

    row.winner_id = winner_id
    row.player1_score = player1_score
    row.player2_score = player2_score
    row.status = "completed"
    row.completed_at = datetime.utcnow()
    session.flush()

    if all(r.is_completed for r in rows.values()):
        leader = get_round_robin_standings(session, tournament_id)[0]
        tournament.winner_id = leader.user_id
        tournament.status = "completed"
        session.flush()
        logger.info("Round robin %s complete, winner %s", tournament_id, leader.user_id)

    return row
