"""
Database session management for Bolobey.

Provides the SQLAlchemy engine and session factory. Uses the settings from
config.py.

Usage:
    from bolobey.db import get_session

    with get_session() as session:
        start_tournament(session, tournament_id)
        # Commits automatically on exit, rolls back on exception
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bolobey.config import settings


def get_engine() -> Engine:
    """
    Create the SQLAlchemy engine.

    Pool sizing only applies to server databases; SQLite uses SQLAlchemy's
    default pool. SQL is echoed when LOG_LEVEL=DEBUG.
    """
    engine_kwargs = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,  # Verify connection is alive before using
        )
    return create_engine(settings.database_url, **engine_kwargs)


# Created lazily so importing models never opens a connection pool
_engine = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


SessionLocal = sessionmaker(autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = SessionLocal(bind=_get_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
