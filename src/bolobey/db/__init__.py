"""
Database module for Bolobey.

Provides SQLAlchemy ORM models and session management.

Usage:
    from bolobey.db import get_session, Tournament, Match

    with get_session() as session:
        tournament = session.get(Tournament, tournament_id)
"""

from bolobey.db.models import (
    Base,
    Match,
    Tournament,
    TournamentParticipant,
)
from bolobey.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "Tournament",
    "TournamentParticipant",
    "Match",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
