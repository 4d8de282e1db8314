"""
Unit tests for Beyblade X battle scoring.

Tests the finish-type point values, battle tallies, match winner
determination and the first-to-N live scoring rule.
"""

import pytest

from bolobey.scoring import (
    BattleResult,
    FinishType,
    ScoringError,
    calculate_battle_points,
    determine_match_winner,
    first_to_winner,
    tally_battles,
)


class TestBattlePoints:
    @pytest.mark.parametrize(
        "finish_type, points",
        [("burst", 3), ("ringout", 2), ("spinout", 1), (FinishType.BURST, 3)],
    )
    def test_points_by_finish_type(self, finish_type, points):
        assert calculate_battle_points(finish_type) == points

    def test_unknown_finish_type(self):
        with pytest.raises(ScoringError):
            calculate_battle_points("knockout")


class TestDetermineMatchWinner:
    def test_higher_total_wins(self):
        """Two spin-outs lose to one burst."""
        battles = [
            BattleResult("a", FinishType.SPINOUT),
            BattleResult("a", FinishType.SPINOUT),
            BattleResult("b", FinishType.BURST),
        ]
        outcome = determine_match_winner(battles, "a", "b")

        assert outcome.winner_id == "b"
        assert outcome.player1_score == 2
        assert outcome.player2_score == 3

    def test_player1_wins(self):
        battles = [
            BattleResult("a", FinishType.RINGOUT),
            BattleResult("b", FinishType.SPINOUT),
        ]
        outcome = determine_match_winner(battles, "a", "b")
        assert outcome.winner_id == "a"
        assert (outcome.player1_score, outcome.player2_score) == (2, 1)

    def test_tie_is_rejected(self):
        """A tie must not silently award the match to either player."""
        battles = [
            BattleResult("a", FinishType.RINGOUT),
            BattleResult("b", FinishType.RINGOUT),
        ]
        with pytest.raises(ScoringError, match="tied"):
            determine_match_winner(battles, "a", "b")

    def test_no_battles(self):
        with pytest.raises(ScoringError):
            determine_match_winner([], "a", "b")

    def test_stray_battle_winner(self):
        with pytest.raises(ScoringError):
            tally_battles([BattleResult("c", FinishType.BURST)], "a", "b")

    def test_accepts_generator(self):
        battles = (BattleResult("b", FinishType.BURST) for _ in range(2))
        outcome = determine_match_winner(battles, "a", "b")
        assert outcome.player2_score == 6


class TestFirstToWinner:
    def test_undecided(self):
        assert first_to_winner(2, 2, "a", "b", 3) is None

    def test_player1_reaches_target(self):
        assert first_to_winner(3, 1, "a", "b", 3) == "a"

    def test_player2_reaches_target(self):
        assert first_to_winner(0, 4, "a", "b", 4) == "b"
