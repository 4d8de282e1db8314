"""
Bolobey - Beyblade Tournament Engine

Bracket generation and progression for Beyblade-style tournaments, with
battle scoring, round-robin scheduling and database persistence.

Main components:
- bracket: Single-elimination bracket engine (pure, no I/O)
- scoring: Beyblade X finish types and match scoring
- round_robin: Circle-method schedules and standings
- db: SQLAlchemy models and session management
- services: Persistence of brackets, schedules and results
"""

__version__ = "1.0.0"
