"""
Single-elimination bracket generation.

Builds every round from the first round to the final in one pass:

1. Order participants: ascending by seed when every participant is seeded,
   otherwise shuffled.
2. Pad the ordered list with byes (None) up to the next power of two. Byes
   go to the entrants at the end of the order, one per pair, so no first
   round pair is ever empty.
3. Pair consecutive slots (2i, 2i+1) into match i+1 of the round. In round 1
   a pair with exactly one participant is a bye and resolves immediately; a
   full pair is pending. The winners (or None for undecided matches) become
   the slot list of the next round, so byes can fill later-round slots at
   generation time. A None in a later round means "not decided yet", never
   a bye.
4. Emit a persistable record for every match that has at least one
   participant.

Pairing is consecutive (1v2, 3v4, ...) in sorted order, not fold seeding
(1vN, 2vN-1, ...).

Usage:
    from bolobey.bracket import BracketParticipant, generate_single_elimination_bracket

    result = generate_single_elimination_bracket(
        [BracketParticipant("u1", seed=1), BracketParticipant("u2", seed=2)],
        tournament_id="t-123",
    )
    session.add_all(Match(**record.to_dict()) for record in result.matches)
"""

import random
from typing import Optional, Sequence

from bolobey.bracket.errors import InvalidInputError
from bolobey.bracket.models import (
    BracketMatch,
    BracketParticipant,
    BracketRound,
    CreateMatchRecord,
    GeneratedBracket,
    TournamentBracket,
)
from bolobey.bracket.rounds import get_round_count, get_round_name, get_total_slots

MIN_PARTICIPANTS = 2


def order_participants(
    participants: Sequence[BracketParticipant],
    rng: Optional[random.Random] = None,
) -> list[BracketParticipant]:
    """
    Order participants for slotting into the first round.

    If every participant has a seed the list is sorted ascending by seed
    (ties keep their registration order). If any seed is missing the whole
    list is shuffled; callers must not depend on the resulting order.

    Args:
        participants: Entrants in registration order
        rng: Random source for the unseeded shuffle (defaults to ``random``)

    Returns:
        New list in slot order
    """
    if all(p.seed is not None for p in participants):
        return sorted(participants, key=lambda p: p.seed)

    ordered = list(participants)
    (rng or random).shuffle(ordered)
    return ordered


def pad_with_byes(
    ordered: Sequence[BracketParticipant],
    total_slots: int,
) -> list[Optional[BracketParticipant]]:
    """
    Lay ordered participants into first-round slots, filling the rest with byes.

    The first entrants are paired consecutively; once only as many entrants
    remain as there are unfilled pairs, each remaining entrant is paired
    with a bye.

    Examples:
        3 entrants, 4 slots -> [a, b, c, None]
        5 entrants, 8 slots -> [a, b, c, None, d, None, e, None]
    """
    byes = total_slots - len(ordered)
    full_pair_entrants = len(ordered) - byes

    slots: list[Optional[BracketParticipant]] = list(ordered[:full_pair_entrants])
    for participant in ordered[full_pair_entrants:]:
        slots.extend([participant, None])
    return slots


def _build_match(
    round_number: int,
    match_number: int,
    player1: Optional[BracketParticipant],
    player2: Optional[BracketParticipant],
) -> BracketMatch:
    match = BracketMatch(
        round=round_number,
        match_number=match_number,
        player1=player1,
        player2=player2,
    )
    # First round only: exactly one side present means a bye, resolved on the spot
    if round_number == 1 and (player1 is None) != (player2 is None):
        match.is_bye = True
        match.status = "completed"
        match.winner = player1 or player2
    return match


def _to_record(match: BracketMatch, tournament_id: str) -> CreateMatchRecord:
    player1_id, player2_id = match.player_ids()
    return CreateMatchRecord(
        tournament_id=tournament_id,
        round=match.round,
        match_number=match.match_number,
        player1_id=player1_id,
        player2_id=player2_id,
        winner_id=match.winner.user_id if match.winner else None,
        status=match.status,
        is_bye=match.is_bye,
    )


def generate_single_elimination_bracket(
    participants: Sequence[BracketParticipant],
    tournament_id: str,
    rng: Optional[random.Random] = None,
) -> GeneratedBracket:
    """
    Generate a complete single-elimination bracket.

    Args:
        participants: Entrants (each optionally seeded)
        tournament_id: Passed through unchanged into every emitted record
        rng: Optional random source for ordering unseeded entrants

    Returns:
        GeneratedBracket with the full bracket and the match records to insert

    Raises:
        InvalidInputError: Fewer than 2 participants, or a user id repeats
    """
    if len(participants) < MIN_PARTICIPANTS:
        raise InvalidInputError("need at least 2 participants")

    user_ids = [p.user_id for p in participants]
    if len(set(user_ids)) != len(user_ids):
        raise InvalidInputError("participant user ids must be unique")

    num_rounds = get_round_count(len(participants))
    total_slots = get_total_slots(len(participants))

    slots = pad_with_byes(order_participants(participants, rng), total_slots)

    bracket = TournamentBracket()
    records: list[CreateMatchRecord] = []

    for round_index in range(num_rounds):
        round_number = round_index + 1
        bracket_round = BracketRound(
            round_number=round_number,
            name=get_round_name(round_number, num_rounds),
        )
        next_slots: list[Optional[BracketParticipant]] = []

        for i in range(len(slots) // 2):
            match = _build_match(round_number, i + 1, slots[2 * i], slots[2 * i + 1])
            bracket_round.matches.append(match)
            next_slots.append(match.winner)

            if match.player1 is not None or match.player2 is not None:
                records.append(_to_record(match, tournament_id))

        bracket.rounds.append(bracket_round)
        slots = next_slots

    final = bracket.final
    if final is not None and final.status == "completed" and final.winner is not None:
        bracket.champion = final.winner

    return GeneratedBracket(bracket=bracket, matches=records)
