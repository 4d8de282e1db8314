"""
Beyblade X battle scoring.

A match is played as a series of battles. Each battle ends in one of three
finish types, and the battle winner is awarded points by finish type:

- Burst:    3 points
- Ring-out: 2 points
- Spin-out: 1 point

The match winner is the player with more total points. Ties are rejected
rather than resolved arbitrarily, since a silently picked winner would
corrupt the bracket.

Live scoring (one point at a time on a scoreboard) uses a first-to-N rule
instead; see ``first_to_winner``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union


class ScoringError(ValueError):
    """Raised when battle results cannot be scored."""
    pass


class FinishType(str, Enum):
    BURST = "burst"
    RINGOUT = "ringout"
    SPINOUT = "spinout"


FINISH_POINTS: dict[FinishType, int] = {
    FinishType.BURST: 3,
    FinishType.RINGOUT: 2,
    FinishType.SPINOUT: 1,
}


@dataclass(frozen=True)
class BattleResult:
    """One battle within a match."""
    winner_id: str
    finish_type: FinishType


@dataclass(frozen=True)
class MatchOutcome:
    """Scored match: winner plus the point totals for each side."""
    winner_id: str
    player1_score: int
    player2_score: int


def _coerce_finish_type(finish_type: Union[FinishType, str]) -> FinishType:
    try:
        return FinishType(finish_type)
    except ValueError:
        raise ScoringError(f"Unknown finish type: {finish_type!r}") from None


def calculate_battle_points(finish_type: Union[FinishType, str]) -> int:
    """
    Points awarded to the winner of a single battle.

    Examples:
        >>> calculate_battle_points("burst")
        3
        >>> calculate_battle_points(FinishType.SPINOUT)
        1
    """
    return FINISH_POINTS[_coerce_finish_type(finish_type)]


def tally_battles(
    battles: Iterable[BattleResult],
    player1_id: str,
    player2_id: str,
) -> tuple[int, int]:
    """
    Sum battle points for each side of a match.

    Raises:
        ScoringError: A battle winner is not one of the two players
    """
    player1_points = 0
    player2_points = 0

    for battle in battles:
        points = calculate_battle_points(battle.finish_type)
        if battle.winner_id == player1_id:
            player1_points += points
        elif battle.winner_id == player2_id:
            player2_points += points
        else:
            raise ScoringError(
                f"Battle winner {battle.winner_id!r} is not in this match"
            )

    return player1_points, player2_points


def determine_match_winner(
    battles: Iterable[BattleResult],
    player1_id: str,
    player2_id: str,
) -> MatchOutcome:
    """
    Score a match from its battles.

    Args:
        battles: Battles in the order they were played
        player1_id: user_id in the player1 slot
        player2_id: user_id in the player2 slot

    Returns:
        MatchOutcome with the winner and each side's total points

    Raises:
        ScoringError: No battles, a tied total, or a stray battle winner
    """
    battles = list(battles)
    if not battles:
        raise ScoringError("Cannot score a match with no battles")

    player1_points, player2_points = tally_battles(battles, player1_id, player2_id)
    if player1_points == player2_points:
        raise ScoringError(
            f"Match is tied at {player1_points}-{player2_points}; play another battle"
        )

    winner_id = player1_id if player1_points > player2_points else player2_id
    return MatchOutcome(
        winner_id=winner_id,
        player1_score=player1_points,
        player2_score=player2_points,
    )


def first_to_winner(
    player1_score: int,
    player2_score: int,
    player1_id: str,
    player2_id: str,
    points_to_win: int,
) -> Optional[str]:
    """
    Winner under a first-to-N rule, or None while the match is still live.

    Player1 is checked first, matching how the scoreboard applies points.
    """
    if player1_score >= points_to_win:
        return player1_id
    if player2_score >= points_to_win:
        return player2_id
    return None
