"""
Round-robin scheduling and standings.

Pairings use the circle method: with an even number of entrants (a BYE
placeholder is added for odd counts), entrant 0 stays fixed and the others
rotate one position each round. After n-1 rounds every pair has met exactly
once. Pairings against the BYE are dropped.

Standings rank by total points, then win percentage, then matches won.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from bolobey.bracket.errors import InvalidInputError

BYE = None


@dataclass(frozen=True)
class RoundRobinPairing:
    tournament_id: str
    round: int
    player1_id: str
    player2_id: str


@dataclass(frozen=True)
class ParticipantRecord:
    """Aggregated results for one entrant, as read from completed matches."""
    user_id: str
    display_name: str
    total_points: int = 0
    matches_played: int = 0
    matches_won: int = 0


@dataclass(frozen=True)
class Standing:
    user_id: str
    display_name: str
    total_points: int
    matches_played: int
    matches_won: int
    win_percentage: float
    rank: int = 0


def generate_round_robin_matches(
    participant_ids: Sequence[str],
    tournament_id: str,
) -> list[RoundRobinPairing]:
    """
    Schedule every entrant against every other entrant once.

    Args:
        participant_ids: Entrant user ids; their order fixes the rotation
        tournament_id: Copied onto every pairing

    Returns:
        Pairings ordered by round

    Raises:
        InvalidInputError: Fewer than 2 entrants, or a repeated id
    """
    if len(participant_ids) < 2:
        raise InvalidInputError("need at least 2 participants")
    if len(set(participant_ids)) != len(participant_ids):
        raise InvalidInputError("participant user ids must be unique")

    players: list[Optional[str]] = list(participant_ids)
    if len(players) % 2:
        players.append(BYE)

    n = len(players)
    pairings: list[RoundRobinPairing] = []

    for round_index in range(n - 1):
        for i in range(n // 2):
            player1 = players[i]
            player2 = players[n - 1 - i]
            if player1 is BYE or player2 is BYE:
                continue
            pairings.append(
                RoundRobinPairing(
                    tournament_id=tournament_id,
                    round=round_index + 1,
                    player1_id=player1,
                    player2_id=player2,
                )
            )

        # Keep players[0] fixed, rotate the rest one step clockwise
        players = [players[0], players[-1], *players[1:-1]]

    return pairings


def win_percentage(matches_won: int, matches_played: int) -> float:
    """Percentage rounded to 2 places, 0 when nothing has been played."""
    if matches_played <= 0:
        return 0.0
    return round(matches_won / matches_played * 100, 2)


def calculate_round_robin_standings(
    records: Iterable[ParticipantRecord],
) -> list[Standing]:
    """
    Rank entrants for the round-robin table.

    Sort order: total points desc, win percentage desc, matches won desc.
    Entrants still tied keep their input order. Ranks start at 1.
    """
    standings = [
        Standing(
            user_id=record.user_id,
            display_name=record.display_name,
            total_points=record.total_points,
            matches_played=record.matches_played,
            matches_won=record.matches_won,
            win_percentage=win_percentage(record.matches_won, record.matches_played),
        )
        for record in records
    ]
    standings.sort(
        key=lambda s: (s.total_points, s.win_percentage, s.matches_won),
        reverse=True,
    )
    return [replace(standing, rank=index + 1) for index, standing in enumerate(standings)]
