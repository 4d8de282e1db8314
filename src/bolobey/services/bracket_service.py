"""
Bracket service: persists single-elimination brackets and their results.

This is the only code path that writes single-elimination matches. Every
bracket goes through the bracket engine, so seeding, bye resolution and
winner propagation behave the same whether a bracket is rendered in memory
or stored in the database.

Lifecycle:

1. **Start** (start_tournament): Generates the bracket from registered
   participants and inserts one Match row per emitted record. First-round
   byes are stored already completed. The tournament moves to 'in_progress'.

2. **Record** (record_match_result / record_battles / update_live_score):
   Rebuilds the bracket from the stored rows, applies the result with the
   engine, then writes back every match the engine changed. Later-round rows
   are created the first time a winner advances into them. Completing the
   final stores the champion and moves the tournament to 'completed'.

3. **Read** (load_bracket / get_bracket_summary): Rebuilds the in-memory
   bracket for rendering and progress queries.

Usage:
    from bolobey.db import get_session
    from bolobey.services import start_tournament, record_match_result

    with get_session() as session:
        start_tournament(session, tournament_id)

    with get_session() as session:
        record_match_result(session, tournament_id, 1, 1, winner_id, 3, 1)
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from bolobey.bracket import (
    BracketError,
    BracketMatch,
    BracketParticipant,
    BracketRound,
    GeneratedBracket,
    InvalidInputError,
    TournamentBracket,
    TournamentStats,
    find_match,
    generate_single_elimination_bracket,
    get_available_matches,
    get_tournament_stats,
    iter_matches,
    update_match_result,
)
from bolobey.bracket.rounds import (
    get_matches_in_round,
    get_round_count,
    get_round_name,
    get_total_slots,
)
from bolobey.config import settings
from bolobey.db.models import Match, Tournament
from bolobey.scoring import BattleResult, determine_match_winner, first_to_winner
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

FORMAT = "single_elimination"


@dataclass
class BracketSummary:
    """Snapshot of a stored bracket for dashboards and the CLI."""
    bracket: TournamentBracket
    stats: TournamentStats
    available_matches: list[BracketMatch] = field(default_factory=list)
    champion_id: Optional[str] = None


# =============================================================================
# Start
# =============================================================================

def _load_startable(
    session: Session,
    tournament_id: str,
    min_participants: Optional[int],
) -> tuple[Tournament, list[BracketParticipant]]:
    """Run every pre-start check and return the tournament and its field."""
    tournament = get_tournament(session, tournament_id)
    require_format(tournament, FORMAT)
    require_not_started(session, tournament)

    participants = load_participants(session, tournament_id)
    minimum = min_participants if min_participants is not None else settings.min_participants
    if len(participants) < minimum:
        logger.warning(
            "Cannot start tournament %s: %d participants, need %d",
            tournament_id, len(participants), minimum,
        )
        raise InvalidInputError(f"need at least {minimum} participants")
    return tournament, participants


def preview_bracket(
    session: Session,
    tournament_id: str,
    *,
    min_participants: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedBracket:
    """
    Generate the bracket start_tournament would store, without writing it.

    Applies the same checks as start_tournament, so a preview only succeeds
    when a real start would.
    """
    _, participants = _load_startable(session, tournament_id, min_participants)
    return generate_single_elimination_bracket(participants, tournament_id, rng=rng)


def start_tournament(
    session: Session,
    tournament_id: str,
    *,
    min_participants: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedBracket:
    """
    Generate and store the bracket for a tournament.

    Args:
        session: SQLAlchemy database session
        tournament_id: Tournament to start
        min_participants: Override for settings.min_participants
        rng: Random source for ordering unseeded participants

    Returns:
        The GeneratedBracket that was persisted

    Raises:
        TournamentStateError: Unknown tournament, wrong format, or already started
        InvalidInputError: Not enough participants
    """
    tournament, participants = _load_startable(session, tournament_id, min_participants)
    result = generate_single_elimination_bracket(participants, tournament_id, rng=rng)

    now = datetime.utcnow()
    session.add_all(
        Match(
            **record.to_dict(),
            completed_at=now if record.status == "completed" else None,
        )
        for record in result.matches
    )

    tournament.status = "in_progress"
    if result.bracket.champion is not None:
        tournament.winner_id = result.bracket.champion.user_id
        tournament.status = "completed"

    session.flush()

    byes = sum(1 for record in result.matches if record.is_bye)
    logger.info(
        "Started tournament %s: %d participants, %d rounds, %d matches created (%d byes)",
        tournament_id,
        len(participants),
        result.bracket.total_rounds,
        len(result.matches),
        byes,
    )
    return result


# =============================================================================
# Read
# =============================================================================

def _match_from_row(
    round_number: int,
    match_number: int,
    row: Optional[Match],
    participants: dict[str, BracketParticipant],
) -> BracketMatch:
    if row is None:
        return BracketMatch(round=round_number, match_number=match_number)

    def lookup(user_id: Optional[str]) -> Optional[BracketParticipant]:
        if user_id is None:
            return None
        return participants.get(user_id) or BracketParticipant(user_id=user_id)

    return BracketMatch(
        round=round_number,
        match_number=match_number,
        player1=lookup(row.player1_id),
        player2=lookup(row.player2_id),
        winner=lookup(row.winner_id),
        player1_score=row.player1_score,
        player2_score=row.player2_score,
        status=row.status,
        is_bye=row.is_bye,
    )


def load_bracket(session: Session, tournament_id: str) -> TournamentBracket:
    """
    Rebuild the in-memory bracket from stored participants and matches.

    The round structure comes from the participant count; matches with no
    stored row yet (later rounds nobody has advanced into) are empty and
    pending.

    Raises:
        TournamentStateError: Unknown tournament, wrong format, or not started
    """
    tournament = get_tournament(session, tournament_id)
    require_format(tournament, FORMAT)

    rows = load_matches(session, tournament_id)
    participant_list = load_participants(session, tournament_id)
    if not rows or len(participant_list) < 2:
        raise TournamentStateError(f"Tournament {tournament_id} has no bracket yet")

    participants = {p.user_id: p for p in participant_list}
    num_rounds = get_round_count(len(participant_list))
    total_slots = get_total_slots(len(participant_list))

    bracket = TournamentBracket()
    for round_number in range(1, num_rounds + 1):
        bracket_round = BracketRound(
            round_number=round_number,
            name=get_round_name(round_number, num_rounds),
        )
        for match_number in range(1, get_matches_in_round(total_slots, round_number) + 1):
            row = rows.get((round_number, match_number))
            bracket_round.matches.append(
                _match_from_row(round_number, match_number, row, participants)
            )
        bracket.rounds.append(bracket_round)

    final = bracket.final
    if final is not None and final.status == "completed":
        bracket.champion = final.winner
    return bracket


def get_bracket_summary(session: Session, tournament_id: str) -> BracketSummary:
    """Bracket, progress stats and playable matches in one call."""
    bracket = load_bracket(session, tournament_id)
    return BracketSummary(
        bracket=bracket,
        stats=get_tournament_stats(bracket),
        available_matches=get_available_matches(bracket),
        champion_id=bracket.champion.user_id if bracket.champion else None,
    )


# =============================================================================
# Record
# =============================================================================

def _write_match(
    session: Session,
    tournament_id: str,
    match: BracketMatch,
    rows: dict[tuple[int, int], Match],
) -> None:
    row = rows.get((match.round, match.match_number))
    if row is None:
        row = Match(
            tournament_id=tournament_id,
            round=match.round,
            match_number=match.match_number,
        )
        session.add(row)
        rows[(match.round, match.match_number)] = row

    row.player1_id, row.player2_id = match.player_ids()
    row.winner_id = match.winner.user_id if match.winner else None
    row.player1_score = match.player1_score
    row.player2_score = match.player2_score
    row.status = match.status
    row.is_bye = match.is_bye
    if match.status == "completed" and row.completed_at is None:
        row.completed_at = datetime.utcnow()


def _sync_changes(
    session: Session,
    tournament_id: str,
    before: TournamentBracket,
    after: TournamentBracket,
    rows: dict[tuple[int, int], Match],
) -> int:
    """Write back every match that differs between two brackets."""
    changed = 0
    for old, new in zip(iter_matches(before), iter_matches(after)):
        if old != new:
            _write_match(session, tournament_id, new, rows)
            changed += 1
    return changed


def record_match_result(
    session: Session,
    tournament_id: str,
    round_number: int,
    match_number: int,
    winner_id: str,
    player1_score: int,
    player2_score: int,
) -> TournamentBracket:
    """
    Store a match result and advance the winner.

    Args:
        session: SQLAlchemy database session
        tournament_id: Tournament the match belongs to
        round_number: 1-based round
        match_number: 1-based match number within the round
        winner_id: user_id of the winner
        player1_score: Final score for player1
        player2_score: Final score for player2

    Returns:
        The updated bracket

    Raises:
        TournamentStateError: Tournament missing or not in progress, or the
            match is already completed or still waiting for a player
        NotFoundError: No such round or match
        InvalidWinnerError: winner_id is neither player of the match
        MatchStateError: The next match is already under way
    """
    tournament = get_tournament(session, tournament_id)
    require_in_progress(tournament)

    before = load_bracket(session, tournament_id)
    try:
        _require_playable(before, round_number, match_number)
        after = update_match_result(
            before, round_number, match_number, winner_id, player1_score, player2_score
        )
    except (BracketError, TournamentStateError) as e:
        logger.warning(
            "Rejected result for tournament %s R%d M%d: %s",
            tournament_id, round_number, match_number, e,
        )
        raise

    rows = load_matches(session, tournament_id)
    changed = _sync_changes(session, tournament_id, before, after, rows)

    if after.champion is not None:
        tournament.winner_id = after.champion.user_id
        tournament.status = "completed"
        logger.info("Tournament %s complete, champion %s", tournament_id, tournament.winner_id)

    session.flush()
    logger.info(
        "Recorded R%d M%d for tournament %s: winner %s (%d-%d), %d rows written",
        round_number, match_number, tournament_id, winner_id,
        player1_score, player2_score, changed,
    )
    return after


def _require_playable(bracket: TournamentBracket, round_number: int, match_number: int) -> BracketMatch:
    match = find_match(bracket, round_number, match_number)
    if match.status == "completed":
        raise TournamentStateError(
            f"Round {round_number} match {match_number} is already completed"
        )
    if not match.has_both_players:
        raise TournamentStateError(
            f"Round {round_number} match {match_number} is still waiting for a player"
        )
    return match


def record_battles(
    session: Session,
    tournament_id: str,
    round_number: int,
    match_number: int,
    battles: Iterable[BattleResult],
) -> TournamentBracket:
    """
    Score a match from its battles, then store the result.

    Raises:
        ScoringError: Battles cannot be scored (empty, tied, stray winner)
        TournamentStateError: The match is not ready to be scored
    """
    bracket = load_bracket(session, tournament_id)
    match = _require_playable(bracket, round_number, match_number)
    player1_id, player2_id = match.player_ids()

    outcome = determine_match_winner(battles, player1_id, player2_id)
    return record_match_result(
        session,
        tournament_id,
        round_number,
        match_number,
        outcome.winner_id,
        outcome.player1_score,
        outcome.player2_score,
    )


def update_live_score(
    session: Session,
    tournament_id: str,
    round_number: int,
    match_number: int,
    player1_score: int,
    player2_score: int,
    *,
    points_to_win: Optional[int] = None,
) -> Optional[str]:
    """
    Apply a running scoreboard update.

    The match moves to 'in_progress' while neither side has reached
    ``points_to_win`` (settings.points_to_win by default). Once one side
    reaches it the result is recorded and the winner advances.

    Returns:
        The winner's user_id once the match is decided, else None
    """
    tournament = get_tournament(session, tournament_id)
    require_in_progress(tournament)

    bracket = load_bracket(session, tournament_id)
    match = _require_playable(bracket, round_number, match_number)
    player1_id, player2_id = match.player_ids()

    target = points_to_win if points_to_win is not None else settings.points_to_win
    winner_id = first_to_winner(player1_score, player2_score, player1_id, player2_id, target)
    if winner_id is not None:
        record_match_result(
            session, tournament_id, round_number, match_number,
            winner_id, player1_score, player2_score,
        )
        return winner_id

    match.player1_score = player1_score
    match.player2_score = player2_score
    match.status = "in_progress"
    _write_match(session, tournament_id, match, load_matches(session, tournament_id))
    session.flush()
    logger.debug(
        "Live score R%d M%d for tournament %s: %d-%d",
        round_number, match_number, tournament_id, player1_score, player2_score,
    )
    return None
