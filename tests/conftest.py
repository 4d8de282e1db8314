"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bolobey.bracket import BracketParticipant
from bolobey.db.models import Base, Tournament, TournamentParticipant


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory; the schema has no PostgreSQL-specific features.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection, autoflush=False)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def make_participants():
    """Factory fixture: participants p1..pN, seeded 1..N unless ``seeded=False``."""
    def _make(count: int, seeded: bool = True) -> list[BracketParticipant]:
        return [
            BracketParticipant(user_id=f"p{i}", seed=i if seeded else None)
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def make_tournament(db_session):
    """
    Factory fixture: create a tournament with registered participants.

    Participants are user ids p1..pN joined one minute apart, seeded 1..N
    unless ``seeded=False``.
    """
    def _make(count: int, *, seeded: bool = True, format: str = "single_elimination") -> Tournament:
        tournament = Tournament(name=f"Test Cup ({count})", format=format, status="open")
        db_session.add(tournament)
        db_session.flush()

        base_time = datetime(2026, 10, 1, 12, 0, 0)
        for i in range(1, count + 1):
            db_session.add(
                TournamentParticipant(
                    tournament_id=tournament.id,
                    user_id=f"p{i}",
                    display_name=f"Player {i}",
                    seed=i if seeded else None,
                    joined_at=base_time + timedelta(minutes=i),
                )
            )
        db_session.flush()
        return tournament

    return _make
