"""Exceptions raised by the bracket engine.

Callers react to these differently: ``NotFoundError`` points at bad data or a
programming error, while ``InvalidWinnerError`` usually means a bad pick in a
UI. Keep them distinct.
"""


class BracketError(Exception):
    """Base class for all bracket engine failures."""
    pass


class InvalidInputError(BracketError, ValueError):
    """Raised when bracket generation is given unusable participants."""
    pass


class NotFoundError(BracketError, LookupError):
    """Raised when a round or match number does not exist in the bracket."""

    def __init__(self, round_number: int, match_number: int | None = None):
        self.round_number = round_number
        self.match_number = match_number
        if match_number is None:
            message = f"Round {round_number} does not exist"
        else:
            message = f"Match {match_number} does not exist in round {round_number}"
        super().__init__(message)


class InvalidWinnerError(BracketError, ValueError):
    """Raised when a winner id matches neither player of the targeted match."""

    def __init__(self, winner_id: str, round_number: int, match_number: int):
        self.winner_id = winner_id
        self.round_number = round_number
        self.match_number = match_number
        super().__init__(
            f"{winner_id!r} is not a player in round {round_number} match {match_number}"
        )


class MatchStateError(BracketError, ValueError):
    """
    Raised when a match cannot take a result in its current state.

    Either the match is still waiting on a feeder (one or both players
    missing), or the match its winner feeds into is already under way.
    """

    def __init__(self, round_number: int, match_number: int, reason: str):
        self.round_number = round_number
        self.match_number = match_number
        self.reason = reason
        super().__init__(f"Round {round_number} match {match_number} {reason}")
