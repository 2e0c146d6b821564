"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import IntEnum, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def forward(self) -> int:
        """Rank direction pawns of this color advance in."""
        return 1 if self == Color.WHITE else -1

    @property
    def back_rank(self) -> int:
        """Rank index of this color's own back rank."""
        return 0 if self == Color.WHITE else 7

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


class CastleSide(IntEnum):
    KINGSIDE = auto()
    QUEENSIDE = auto()


class DrawReason(IntEnum):
    """Why a game ended, or may be ended, in a draw."""

    STALEMATE = auto()
    DEAD_POSITION = auto()
    SEVENTY_FIVE_MOVES = auto()
    FIVEFOLD_REPETITION = auto()
    FIFTY_MOVES = auto()
    THREEFOLD_REPETITION = auto()


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
