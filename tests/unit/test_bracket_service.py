"""
Unit tests for the bracket service.

Uses the in-memory SQLite session from conftest.py. Tests that:
- Starting a tournament stores exactly the records the engine emits
- Results are written back and winners advance into new rows
- Finishing the final completes the tournament
- Lifecycle violations raise TournamentStateError
"""

import pytest
from sqlalchemy import select

from bolobey.bracket import InvalidInputError, InvalidWinnerError, NotFoundError, is_tournament_complete
from bolobey.db.models import Match
from bolobey.scoring import BattleResult, FinishType, ScoringError
from bolobey.services import (
    TournamentStateError,
    get_bracket_summary,
    load_bracket,
    preview_bracket,
    record_battles,
    record_match_result,
    start_tournament,
    update_live_score,
)


def _rows(session, tournament_id):
    return {
        (m.round, m.match_number): m
        for m in session.scalars(select(Match).where(Match.tournament_id == tournament_id))
    }


class TestStartTournament:

    def test_persists_emitted_records(self, db_session, make_tournament):
        tournament = make_tournament(5)

        result = start_tournament(db_session, tournament.id)

        rows = _rows(db_session, tournament.id)
        assert set(rows) == {(r.round, r.match_number) for r in result.matches}
        for record in result.matches:
            row = rows[(record.round, record.match_number)]
            assert row.player1_id == record.player1_id
            assert row.player2_id == record.player2_id
            assert row.winner_id == record.winner_id
            assert row.status == record.status
            assert row.is_bye == record.is_bye
        assert tournament.status == "in_progress"

    def test_bye_rows_completed(self, db_session, make_tournament):
        tournament = make_tournament(3)
        start_tournament(db_session, tournament.id)

        bye = _rows(db_session, tournament.id)[(1, 2)]
        assert bye.is_bye
        assert bye.status == "completed"
        assert bye.winner_id == "p3"
        assert bye.completed_at is not None

    def test_cannot_start_twice(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)

        with pytest.raises(TournamentStateError):
            start_tournament(db_session, tournament.id)

    def test_unknown_tournament(self, db_session, tables):
        with pytest.raises(TournamentStateError):
            start_tournament(db_session, "missing")

    def test_round_robin_format_rejected(self, db_session, make_tournament):
        tournament = make_tournament(4, format="round_robin")
        with pytest.raises(TournamentStateError):
            start_tournament(db_session, tournament.id)

    def test_not_enough_participants(self, db_session, make_tournament):
        tournament = make_tournament(1)
        with pytest.raises(InvalidInputError):
            start_tournament(db_session, tournament.id)
        assert tournament.status == "open"

    def test_min_participants_override(self, db_session, make_tournament):
        tournament = make_tournament(3)
        with pytest.raises(InvalidInputError, match="need at least 4"):
            start_tournament(db_session, tournament.id, min_participants=4)


class TestPreviewBracket:

    def test_preview_writes_nothing(self, db_session, make_tournament):
        tournament = make_tournament(5)

        result = preview_bracket(db_session, tournament.id)

        assert result.bracket.total_rounds == 3
        assert _rows(db_session, tournament.id) == {}
        assert tournament.status == "open"

    def test_preview_matches_start(self, db_session, make_tournament):
        tournament = make_tournament(6)

        preview = preview_bracket(db_session, tournament.id)
        started = start_tournament(db_session, tournament.id)

        assert preview.matches == started.matches

    def test_preview_of_started_tournament(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)

        with pytest.raises(TournamentStateError):
            preview_bracket(db_session, tournament.id)

    def test_preview_round_robin_rejected(self, db_session, make_tournament):
        tournament = make_tournament(4, format="round_robin")
        with pytest.raises(TournamentStateError):
            preview_bracket(db_session, tournament.id)

    def test_preview_enforces_min_participants(self, db_session, make_tournament):
        tournament = make_tournament(3)
        with pytest.raises(InvalidInputError, match="need at least 4"):
            preview_bracket(db_session, tournament.id, min_participants=4)


class TestRecordMatchResult:

    def test_winner_advances_into_new_row(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)
        assert (2, 1) not in _rows(db_session, tournament.id)

        record_match_result(db_session, tournament.id, 1, 1, "p2", 1, 3)

        rows = _rows(db_session, tournament.id)
        assert rows[(1, 1)].status == "completed"
        assert rows[(1, 1)].winner_id == "p2"
        assert rows[(1, 1)].completed_at is not None
        assert rows[(2, 1)].player1_id == "p2"
        assert rows[(2, 1)].player2_id is None
        assert rows[(2, 1)].status == "pending"

    def test_full_tournament_sets_winner(self, db_session, make_tournament):
        tournament = make_tournament(3)
        start_tournament(db_session, tournament.id)

        record_match_result(db_session, tournament.id, 1, 1, "p1", 3, 0)
        bracket = record_match_result(db_session, tournament.id, 2, 1, "p3", 2, 3)

        assert is_tournament_complete(bracket)
        assert tournament.status == "completed"
        assert tournament.winner_id == "p3"

        reloaded = load_bracket(db_session, tournament.id)
        assert reloaded.champion.user_id == "p3"
        assert reloaded == bracket

    def test_invalid_winner_writes_nothing(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)

        with pytest.raises(InvalidWinnerError):
            record_match_result(db_session, tournament.id, 1, 1, "p4", 3, 0)

        row = _rows(db_session, tournament.id)[(1, 1)]
        assert row.status == "pending"
        assert row.winner_id is None

    def test_unknown_match(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)

        with pytest.raises(NotFoundError):
            record_match_result(db_session, tournament.id, 1, 9, "p1", 3, 0)

    def test_completed_match_cannot_be_rerecorded(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)
        record_match_result(db_session, tournament.id, 1, 1, "p1", 3, 0)

        with pytest.raises(TournamentStateError):
            record_match_result(db_session, tournament.id, 1, 1, "p2", 0, 3)

    def test_half_filled_final_rejected(self, db_session, make_tournament):
        """The bye holder cannot be crowned before round 1 is played."""
        tournament = make_tournament(3)
        start_tournament(db_session, tournament.id)
        before = {
            key: (row.player1_id, row.player2_id, row.winner_id, row.status)
            for key, row in _rows(db_session, tournament.id).items()
        }

        with pytest.raises(TournamentStateError, match="waiting for a player"):
            record_match_result(db_session, tournament.id, 2, 1, "p3", 3, 0)

        after = {
            key: (row.player1_id, row.player2_id, row.winner_id, row.status)
            for key, row in _rows(db_session, tournament.id).items()
        }
        assert after == before
        assert tournament.status == "in_progress"
        assert tournament.winner_id is None

    def test_feeder_locked_while_next_match_live(self, db_session, make_tournament):
        tournament = make_tournament(4)
        start_tournament(db_session, tournament.id)
        record_match_result(db_session, tournament.id, 1, 1, "p1", 3, 0)
        record_match_result(db_session, tournament.id, 1, 2, "p3", 3, 0)
        update_live_score(db_session, tournament.id, 2, 1, 1, 0)

        with pytest.raises(TournamentStateError):
            record_match_result(db_session, tournament.id, 1, 2, "p4", 0, 3)

        assert _rows(db_session, tournament.id)[(2, 1)].player2_id == "p3"

    def test_not_started(self, db_session, make_tournament):
        tournament = make_tournament(4)
        with pytest.raises(TournamentStateError):
            record_match_result(db_session, tournament.id, 1, 1, "p1", 3, 0)


class TestScoringPaths:

    def test_record_battles(self, db_session, make_tournament):
        tournament = make_tournament(2)
        start_tournament(db_session, tournament.id)

        bracket = record_battles(
            db_session,
            tournament.id,
            1,
            1,
            [
                BattleResult("p1", FinishType.SPINOUT),
                BattleResult("p2", FinishType.BURST),
            ],
        )

        assert bracket.champion.user_id == "p2"
        row = _rows(db_session, tournament.id)[(1, 1)]
        assert (row.player1_score, row.player2_score) == (1, 3)

    def test_record_battles_tie(self, db_session, make_tournament):
        tournament = make_tournament(2)
        start_tournament(db_session, tournament.id)

        with pytest.raises(ScoringError):
            record_battles(
                db_session, tournament.id, 1, 1,
                [BattleResult("p1", "burst"), BattleResult("p2", "burst")],
            )

    def test_record_battles_on_bye(self, db_session, make_tournament):
        tournament = make_tournament(3)
        start_tournament(db_session, tournament.id)

        with pytest.raises(TournamentStateError):
            record_battles(db_session, tournament.id, 1, 2, [BattleResult("p3", "burst")])

    def test_live_score_until_decided(self, db_session, make_tournament):
        tournament = make_tournament(2)
        start_tournament(db_session, tournament.id)

        assert update_live_score(db_session, tournament.id, 1, 1, 1, 2, points_to_win=3) is None
        row = _rows(db_session, tournament.id)[(1, 1)]
        assert row.status == "in_progress"
        assert (row.player1_score, row.player2_score) == (1, 2)

        winner = update_live_score(db_session, tournament.id, 1, 1, 1, 3, points_to_win=3)
        assert winner == "p2"
        assert tournament.winner_id == "p2"


class TestSummary:

    def test_summary_of_fresh_bracket(self, db_session, make_tournament):
        tournament = make_tournament(8)
        start_tournament(db_session, tournament.id)

        summary = get_bracket_summary(db_session, tournament.id)

        assert summary.stats.total_matches == 7
        assert summary.stats.completed_matches == 0
        assert summary.stats.progress == 0
        assert len(summary.available_matches) == 4
        assert summary.champion_id is None

    def test_load_bracket_matches_generated_structure(self, db_session, make_tournament):
        tournament = make_tournament(5)
        generated = start_tournament(db_session, tournament.id)

        assert load_bracket(db_session, tournament.id) == generated.bracket
