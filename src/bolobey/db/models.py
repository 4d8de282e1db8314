"""
SQLAlchemy ORM models for Bolobey.

Only the tables the tournament engine reads and writes live here. Users,
bets, points and prizes belong to other services and are referenced by id
only.

Key design decisions:
- Tournament and user ids are opaque strings (UUIDs issued upstream)
- A single matches table covers both single-elimination and round-robin
  matches; (tournament_id, round, match_number) identifies a match
- Bracket rows are only written through bolobey.services, which route
  every bracket through the bracket engine

Tables:
- tournaments: Tournament master data and lifecycle status
- tournament_participants: Registered entrants with optional seeds
- matches: All matches (pending, in progress and completed)
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


TOURNAMENT_STATUSES = ("open", "closed", "in_progress", "completed")
TOURNAMENT_FORMATS = ("single_elimination", "round_robin")
MATCH_STATUSES = ("pending", "in_progress", "completed")


def _in_clause(column: str, values: tuple[str, ...]) -> str:
    return f"{column} IN (" + ", ".join(f"'{v}'" for v in values) + ")"


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Tournament Models
# =============================================================================

class Tournament(Base):
    """
    A single tournament.

    Status lifecycle:
    - 'open': Registration open
    - 'closed': Registration closed, bracket not generated yet
    - 'in_progress': Matches generated and being played
    - 'completed': Champion decided (winner_id set)
    """
    __tablename__ = "tournaments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    format: Mapped[str] = mapped_column(
        String(30), nullable=False, default="single_elimination"
    )
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=16)

    winner_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    participants: Mapped[list["TournamentParticipant"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="TournamentParticipant.joined_at",
    )
    matches: Mapped[list["Match"]] = relationship(
        back_populates="tournament", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            _in_clause("status", TOURNAMENT_STATUSES),
            name="ck_tournaments_status",
        ),
        CheckConstraint(
            _in_clause("format", TOURNAMENT_FORMATS),
            name="ck_tournaments_format",
        ),
    )

    @property
    def is_started(self) -> bool:
        return self.status in ("in_progress", "completed")

    def __repr__(self) -> str:
        return f"<Tournament(id='{self.id}', name='{self.name}', status='{self.status}')>"


class TournamentParticipant(Base):
    """
    A user registered for a tournament.

    Seeds are optional; a bracket is seeded only when every participant has
    one. Rows are immutable once the bracket has been generated.
    """
    __tablename__ = "tournament_participants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    tournament_id: Mapped[str] = mapped_column(
        ForeignKey("tournaments.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    seed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    tournament: Mapped["Tournament"] = relationship(back_populates="participants")

    __table_args__ = (
        UniqueConstraint("tournament_id", "user_id", name="uq_participant_tournament_user"),
    )

    def __repr__(self) -> str:
        return f"<TournamentParticipant(user_id='{self.user_id}', seed={self.seed})>"


# =============================================================================
# Match Models
# =============================================================================

class Match(Base):
    """
    One match in a tournament.

    Single-elimination rows are created by the bracket service: first-round
    rows (including auto-completed byes) when the tournament starts, later
    rows as winners advance into them. Round-robin rows are all created up
    front.

    Match status lifecycle:
    - 'pending': Waiting to be played (or waiting for a player to advance in)
    - 'in_progress': Being scored live
    - 'completed': Winner decided
    """
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    tournament_id: Mapped[str] = mapped_column(
        ForeignKey("tournaments.id"), nullable=False
    )

    round: Mapped[int] = mapped_column(Integer, nullable=False)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Null means the slot is a bye (round 1) or not decided yet (later rounds)
    player1_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    player2_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    winner_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    player1_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    player2_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    is_bye: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    tournament: Mapped["Tournament"] = relationship(back_populates="matches")

    __table_args__ = (
        UniqueConstraint(
            "tournament_id", "round", "match_number", name="uq_match_tournament_round_number"
        ),
        CheckConstraint(
            _in_clause("status", MATCH_STATUSES),
            name="ck_matches_status",
        ),
        Index("idx_matches_tournament", "tournament_id"),
        Index("idx_matches_status", "status"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def __repr__(self) -> str:
        return (
            f"<Match(R{self.round} M{self.match_number}: "
            f"{self.player1_id} vs {self.player2_id}, status='{self.status}')>"
        )
