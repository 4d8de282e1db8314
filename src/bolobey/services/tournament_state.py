"""Tournament lookups and lifecycle checks shared by the services."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bolobey.bracket.models import BracketParticipant
from bolobey.db.models import Match, Tournament, TournamentParticipant


class TournamentStateError(Exception):
    """Raised when an operation does not fit the tournament's persisted state."""
    pass


def get_tournament(session: Session, tournament_id: str) -> Tournament:
    """Load a tournament or raise TournamentStateError if it does not exist."""
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        raise TournamentStateError(f"Tournament {tournament_id} does not exist")
    return tournament


def require_format(tournament: Tournament, expected: str) -> None:
    if tournament.format != expected:
        raise TournamentStateError(
            f"Tournament {tournament.id} is {tournament.format}, not {expected}"
        )


def require_not_started(session: Session, tournament: Tournament) -> None:
    """Refuse to generate matches twice for the same tournament."""
    if tournament.is_started:
        raise TournamentStateError(
            f"Tournament {tournament.id} has already started (status={tournament.status})"
        )

    existing = session.scalar(
        select(func.count()).select_from(Match).where(Match.tournament_id == tournament.id)
    )
    if existing:
        raise TournamentStateError(
            f"Tournament {tournament.id} already has {existing} matches"
        )


def require_in_progress(tournament: Tournament) -> None:
    if tournament.status != "in_progress":
        raise TournamentStateError(
            f"Tournament {tournament.id} is not in progress (status={tournament.status})"
        )


def load_participants(session: Session, tournament_id: str) -> list[BracketParticipant]:
    """Participants in registration order, as bracket entrants."""
    rows = session.scalars(
        select(TournamentParticipant)
        .where(TournamentParticipant.tournament_id == tournament_id)
        .order_by(TournamentParticipant.joined_at, TournamentParticipant.id)
    ).all()
    return [
        BracketParticipant(user_id=row.user_id, seed=row.seed, display_name=row.display_name)
        for row in rows
    ]


def load_matches(session: Session, tournament_id: str) -> dict[tuple[int, int], Match]:
    """All match rows for a tournament keyed by (round, match_number)."""
    rows = session.scalars(
        select(Match)
        .where(Match.tournament_id == tournament_id)
        .order_by(Match.round, Match.match_number)
    ).all()
    return {(row.round, row.match_number): row for row in rows}
