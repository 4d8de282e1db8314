"""
Bracket positional math and round naming.

Match numbers are 1-indexed within each round and follow standard
single-elimination progression:

    Round N, match m  ->  Round N+1, match ceil(m/2)

So matches 1 and 2 in round 1 feed into match 1 of round 2, matches 3 and 4
feed into match 2, etc. The winner of an odd-numbered match takes the
player1 slot of the next match, the winner of an even-numbered match takes
player2.
"""

import math
from typing import Literal

Slot = Literal["player1", "player2"]

# Names for the last rounds of a bracket, counted back from the final
ROUND_NAMES_FROM_FINAL = [
    "Final",
    "Semifinal",
    "Quarterfinal",
    "Round of 16",
    "Round of 32",
]


def get_round_count(participant_count: int) -> int:
    """
    Number of rounds needed for a single-elimination bracket.

    Examples:
        >>> get_round_count(2)
        1
        >>> get_round_count(5)
        3
        >>> get_round_count(8)
        3
    """
    return math.ceil(math.log2(participant_count))


def get_total_slots(participant_count: int) -> int:
    """
    First-round slot count: the next power of two >= participant_count.

    Examples:
        >>> get_total_slots(3)
        4
        >>> get_total_slots(16)
        16
    """
    return 2 ** get_round_count(participant_count)


def get_matches_in_round(total_slots: int, round_number: int) -> int:
    """
    Expected number of matches in a round.

    Round k holds ceil(total_slots / 2^k) matches.

    Examples:
        >>> get_matches_in_round(8, 1)
        4
        >>> get_matches_in_round(8, 3)
        1
    """
    return math.ceil(total_slots / 2 ** round_number)


def get_round_name(round_number: int, total_rounds: int) -> str:
    """
    Human-readable name for a round.

    Examples:
        >>> get_round_name(3, 3)
        'Final'
        >>> get_round_name(1, 3)
        'Quarterfinal'
        >>> get_round_name(1, 7)
        'Round 1'
    """
    from_final = total_rounds - round_number
    if 0 <= from_final < len(ROUND_NAMES_FROM_FINAL):
        return ROUND_NAMES_FROM_FINAL[from_final]
    return f"Round {round_number}"


def get_next_match_number(match_number: int) -> int:
    """
    Compute the match number the winner advances to in the next round.

    Examples:
        >>> get_next_match_number(1)
        1
        >>> get_next_match_number(2)
        1
        >>> get_next_match_number(3)
        2
    """
    return math.ceil(match_number / 2)


def get_next_slot(match_number: int) -> Slot:
    """Slot the winner of ``match_number`` takes in the next match."""
    return "player1" if match_number % 2 == 1 else "player2"

