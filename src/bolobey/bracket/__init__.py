"""
Single-elimination bracket engine.

Pure, synchronous functions over an in-memory bracket:
- Generation with seeding and first-round byes
- Recording results and advancing winners (returns a new bracket)
- Progress queries: playable matches, completion, statistics

Nothing here performs I/O or reads configuration. Persistence lives in
bolobey.services.bracket_service.
"""

from bolobey.bracket.errors import (
    BracketError,
    InvalidInputError,
    InvalidWinnerError,
    MatchStateError,
    NotFoundError,
)
from bolobey.bracket.generator import generate_single_elimination_bracket
from bolobey.bracket.models import (
    BracketMatch,
    BracketParticipant,
    BracketRound,
    CreateMatchRecord,
    GeneratedBracket,
    TournamentBracket,
    TournamentStats,
)
from bolobey.bracket.progression import (
    find_match,
    get_available_matches,
    get_tournament_stats,
    is_tournament_complete,
    iter_matches,
    update_match_result,
)

__all__ = [
    # Errors
    "BracketError",
    "InvalidInputError",
    "InvalidWinnerError",
    "MatchStateError",
    "NotFoundError",
    # Models
    "BracketMatch",
    "BracketParticipant",
    "BracketRound",
    "CreateMatchRecord",
    "GeneratedBracket",
    "TournamentBracket",
    "TournamentStats",
    # Operations
    "generate_single_elimination_bracket",
    "update_match_result",
    "find_match",
    "iter_matches",
    "get_available_matches",
    "is_tournament_complete",
    "get_tournament_stats",
]
