"""
Bolobey services — persistence around the tournament engines.

Single elimination:
1. start_tournament: Generate the bracket and store its first matches
   (preview_bracket runs the same checks without writing)
2. record_match_result / record_battles / update_live_score: Store results
   and advance winners
3. load_bracket / get_bracket_summary: Rebuild the bracket for display

Round robin:
1. start_round_robin: Store the full schedule
2. record_round_robin_result: Store a result
3. get_round_robin_standings: Current table

Usage:
    from bolobey.services import start_tournament, record_match_result
"""

from bolobey.services.bracket_service import (
    BracketSummary,
    get_bracket_summary,
    load_bracket,
    preview_bracket,
    record_battles,
    record_match_result,
    start_tournament,
    update_live_score,
)
from bolobey.services.round_robin_service import (
    get_round_robin_standings,
    record_round_robin_result,
    start_round_robin,
)
from bolobey.services.tournament_state import TournamentStateError

__all__ = [
    # Single elimination
    "preview_bracket",
    "start_tournament",
    "load_bracket",
    "get_bracket_summary",
    "record_match_result",
    "record_battles",
    "update_live_score",
    "BracketSummary",
    # Round robin
    "start_round_robin",
    "record_round_robin_result",
    "get_round_robin_standings",
    # Errors
    "TournamentStateError",
]
