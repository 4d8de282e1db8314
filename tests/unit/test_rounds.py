"""Unit tests for bracket positional math and round naming."""

import pytest

from bolobey.bracket.rounds import (
    get_matches_in_round,
    get_next_match_number,
    get_next_slot,
    get_round_count,
    get_round_name,
    get_total_slots,
)


@pytest.mark.parametrize(
    "count, rounds, slots",
    [(2, 1, 2), (3, 2, 4), (4, 2, 4), (5, 3, 8), (8, 3, 8), (9, 4, 16), (33, 6, 64)],
)
def test_round_count_and_slots(count, rounds, slots):
    assert get_round_count(count) == rounds
    assert get_total_slots(count) == slots


def test_matches_in_round():
    assert [get_matches_in_round(16, k) for k in range(1, 5)] == [8, 4, 2, 1]


@pytest.mark.parametrize(
    "round_number, total_rounds, name",
    [
        (1, 1, "Final"),
        (1, 2, "Semifinal"),
        (2, 4, "Quarterfinal"),
        (1, 4, "Round of 16"),
        (2, 6, "Round of 32"),
        (1, 6, "Round 1"),
        (3, 8, "Round 3"),
    ],
)
def test_round_names(round_number, total_rounds, name):
    assert get_round_name(round_number, total_rounds) == name


def test_next_match_number():
    assert [get_next_match_number(m) for m in range(1, 9)] == [1, 1, 2, 2, 3, 3, 4, 4]


def test_next_slot_alternates():
    assert get_next_slot(1) == "player1"
    assert get_next_slot(2) == "player2"
    assert get_next_slot(7) == "player1"
