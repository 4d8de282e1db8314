"""
In-memory bracket data structures.

These are plain dataclasses with no behaviour beyond small helpers, so the
structure handed back to callers is a nested value that can be copied,
compared and serialised without surprises.

Hierarchy:
    TournamentBracket 1 -> N BracketRound 1 -> N BracketMatch 0..2 -> 1 BracketParticipant

A participant may appear in several matches as it advances, but never in
more than one match of the same round.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Optional

MatchStatus = Literal["pending", "in_progress", "completed"]


@dataclass(frozen=True)
class BracketParticipant:
    """
    A tournament entrant.

    Attributes:
        user_id: Unique user identifier
        seed: Optional seed, lower is higher priority (1 = top seed)
        display_name: Optional name for rendering
    """
    user_id: str
    seed: Optional[int] = None
    display_name: Optional[str] = None


@dataclass
class BracketMatch:
    """
    One game within one round.

    A match with only one side populated at generation time is a bye: it is
    created completed with the present participant as winner.
    """
    round: int
    match_number: int
    player1: Optional[BracketParticipant] = None
    player2: Optional[BracketParticipant] = None
    winner: Optional[BracketParticipant] = None
    player1_score: int = 0
    player2_score: int = 0
    status: MatchStatus = "pending"
    is_bye: bool = False

    @property
    def has_both_players(self) -> bool:
        return self.player1 is not None and self.player2 is not None

    @property
    def is_playable(self) -> bool:
        """Pending, not a bye, and both players known."""
        return self.status == "pending" and not self.is_bye and self.has_both_players

    def player_ids(self) -> tuple[Optional[str], Optional[str]]:
        return (
            self.player1.user_id if self.player1 else None,
            self.player2.user_id if self.player2 else None,
        )

    def __repr__(self) -> str:
        p1, p2 = self.player_ids()
        return (
            f"<BracketMatch(R{self.round} M{self.match_number}: {p1} vs {p2}, "
            f"status={self.status}{', bye' if self.is_bye else ''})>"
        )


@dataclass
class BracketRound:
    """An ordered collection of matches sharing a round number."""
    round_number: int
    name: str
    matches: list[BracketMatch] = field(default_factory=list)


@dataclass
class TournamentBracket:
    """
    The whole single-elimination bracket.

    ``rounds[0]`` is the first round, ``rounds[-1]`` the final. ``champion``
    stays unset until the final match completes.
    """
    rounds: list[BracketRound] = field(default_factory=list)
    champion: Optional[BracketParticipant] = None

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def final(self) -> Optional[BracketMatch]:
        if not self.rounds or not self.rounds[-1].matches:
            return None
        return self.rounds[-1].matches[0]

    def to_dict(self) -> dict[str, Any]:
        """Plain nested structure for re-rendering or JSON output."""
        return asdict(self)


@dataclass
class CreateMatchRecord:
    """A persistable match row produced at bracket generation time."""
    tournament_id: str
    round: int
    match_number: int
    player1_id: Optional[str] = None
    player2_id: Optional[str] = None
    winner_id: Optional[str] = None
    status: MatchStatus = "pending"
    is_bye: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class GeneratedBracket:
    """Result of bracket generation: the bracket plus rows to insert."""
    bracket: TournamentBracket
    matches: list[CreateMatchRecord] = field(default_factory=list)


@dataclass
class TournamentStats:
    """Aggregate progress over non-bye matches."""
    total_matches: int = 0
    completed_matches: int = 0
    pending_matches: int = 0
    progress: float = 0.0

    def summary(self) -> str:
        return (
            f"{self.completed_matches}/{self.total_matches} matches completed "
            f"({self.progress:.0f}%), {self.pending_matches} ready to play"
        )
