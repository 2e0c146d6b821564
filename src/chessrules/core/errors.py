"""Exception hierarchy for the rules engine.

Everything a player can get wrong derives from :class:`MoveError`; the game
layer turns those into result values. :class:`MissingKingError` signals a
caller bug and is never converted.
"""

from __future__ import annotations


class ChessError(ValueError):
    """Base class for all rules-engine errors."""


class MoveError(ChessError):
    """A move that was rejected without touching the game state."""

    def __init__(self, message: str, notation: str = "") -> None:
        super().__init__(message)
        self.notation = notation


class InvalidMoveError(MoveError):
    """Malformed notation, or no piece of the implied kind could make the move."""


class IllegalMoveError(MoveError):
    """A candidate exists but the rules (check, blocking, castling) forbid it."""


class AmbiguousMoveError(MoveError):
    """More than one piece matches the notation."""


class PromotionRequiredError(MoveError):
    """A pawn reaching the last rank without a promotion piece."""


class IncompatibleNotationError(ChessError):
    """Movetext that cannot be replayed from the starting position."""

    def __init__(self, message: str, move_number: int, notation: str) -> None:
        super().__init__(message)
        self.move_number = move_number
        self.notation = notation


class MissingKingError(ChessError):
    """A position was queried for a king that is not on the board."""
