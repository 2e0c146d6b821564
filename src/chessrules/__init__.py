"""chessrules: a chess rules engine driven by algebraic notation."""

from chessrules.core import Color, DrawPolicy, DrawReason, GameResult, PieceType
from chessrules.game import Chessboard, MoveRecord, MoveResult

__all__ = [
    "Chessboard",
    "Color",
    "DrawPolicy",
    "DrawReason",
    "GameResult",
    "MoveRecord",
    "MoveResult",
    "PieceType",
]

__version__ = "0.1.0"
