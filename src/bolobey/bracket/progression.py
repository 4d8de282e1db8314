"""
Recording results and querying bracket progress.

``update_match_result`` never touches the bracket it is given. It works on a
deep copy and returns that copy, so anyone still holding the old bracket
(UI state, a persisted snapshot) keeps an unchanged value.

Usage:
    bracket = update_match_result(bracket, 1, 1, "user-a", 3, 1)
    for match in get_available_matches(bracket):
        print(match)
"""

import copy
from typing import Iterator

from bolobey.bracket.errors import InvalidWinnerError, MatchStateError, NotFoundError
from bolobey.bracket.models import BracketMatch, TournamentBracket, TournamentStats
from bolobey.bracket.rounds import get_next_match_number, get_next_slot


def iter_matches(bracket: TournamentBracket) -> Iterator[BracketMatch]:
    """Yield every match, round 1 first, in match-number order."""
    for bracket_round in bracket.rounds:
        yield from bracket_round.matches


def find_match(
    bracket: TournamentBracket,
    round_number: int,
    match_number: int,
) -> BracketMatch:
    """
    Locate a match by round and match number.

    Raises:
        NotFoundError: The round or the match within it does not exist
    """
    bracket_round = next(
        (r for r in bracket.rounds if r.round_number == round_number), None
    )
    if bracket_round is None:
        raise NotFoundError(round_number)

    match = next(
        (m for m in bracket_round.matches if m.match_number == match_number), None
    )
    if match is None:
        raise NotFoundError(round_number, match_number)
    return match


def update_match_result(
    bracket: TournamentBracket,
    round_number: int,
    match_number: int,
    winner_id: str,
    player1_score: int,
    player2_score: int,
) -> TournamentBracket:
    """
    Record a match result and advance the winner.

    The winner moves to match ceil(match_number / 2) of the next round, into
    player1 when match_number is odd and player2 when it is even. When that
    next match has both players it is pending (ready to play); byes are never
    resolved here. Completing the final crowns the champion.

    A result can be re-recorded only while the next match is still pending;
    once that match is under way the earlier rounds are locked.

    Args:
        bracket: Current bracket (left unmodified)
        round_number: 1-based round of the match
        match_number: 1-based match number within the round
        winner_id: user_id of the winning player
        player1_score: Final score for player1
        player2_score: Final score for player2

    Returns:
        A new TournamentBracket reflecting the result

    Raises:
        NotFoundError: No such round or match
        InvalidWinnerError: winner_id is neither player of the match
        MatchStateError: The match is missing a player (including byes), or
            the next match is already in progress or completed
    """
    updated = copy.deepcopy(bracket)
    match = find_match(updated, round_number, match_number)

    if not match.has_both_players:
        raise MatchStateError(round_number, match_number, "is still waiting for a player")

    if match.player1.user_id == winner_id:
        winner = match.player1
    elif match.player2.user_id == winner_id:
        winner = match.player2
    else:
        raise InvalidWinnerError(winner_id, round_number, match_number)

    is_final = round_number == updated.rounds[-1].round_number
    next_match = None
    if not is_final:
        next_match = find_match(updated, round_number + 1, get_next_match_number(match_number))
        if next_match.status != "pending":
            raise MatchStateError(
                round_number, match_number,
                f"feeds round {next_match.round} match {next_match.match_number}, "
                f"which is already {next_match.status}",
            )

    match.player1_score = player1_score
    match.player2_score = player2_score
    match.winner = winner
    match.status = "completed"

    if is_final:
        updated.champion = winner
        return updated

    setattr(next_match, get_next_slot(match_number), winner)
    if next_match.has_both_players:
        next_match.status = "pending"

    return updated


def get_available_matches(bracket: TournamentBracket) -> list[BracketMatch]:
    """Matches ready to be played now: pending, not byes, both players set."""
    return [match for match in iter_matches(bracket) if match.is_playable]


def is_tournament_complete(bracket: TournamentBracket) -> bool:
    """True once the final is completed with a winner."""
    final = bracket.final
    return final is not None and final.status == "completed" and final.winner is not None


def get_tournament_stats(bracket: TournamentBracket) -> TournamentStats:
    """
    Count progress across all non-bye matches.

    ``pending_matches`` only counts matches that can be played right now.
    ``progress`` is a percentage, 0 when there are no matches.
    """
    stats = TournamentStats()
    for match in iter_matches(bracket):
        if match.is_bye:
            continue
        stats.total_matches += 1
        if match.status == "completed":
            stats.completed_matches += 1
        elif match.is_playable:
            stats.pending_matches += 1

    if stats.total_matches > 0:
        stats.progress = stats.completed_matches / stats.total_matches * 100
    return stats
