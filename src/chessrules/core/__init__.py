"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import Board, MoveGenerator, notation_to_square

    board = Board.initial()
    gen = MoveGenerator(board)
    print(gen.legal_moves(notation_to_square("g1")))
"""

from chessrules.core.board import Board
from chessrules.core.enums import CastleSide, Color, DrawReason, GameResult, PieceType
from chessrules.core.errors import (
    AmbiguousMoveError,
    ChessError,
    IllegalMoveError,
    IncompatibleNotationError,
    InvalidMoveError,
    MissingKingError,
    MoveError,
    PromotionRequiredError,
)
from chessrules.core.move_generator import (
    LastMove,
    MoveGenerator,
    pseudo_legal_destinations,
)
from chessrules.core.piece import Piece
from chessrules.core.position import PositionSnapshot
from chessrules.core.rules import DrawPolicy, Rules
from chessrules.core.types import (
    Square,
    notation_to_square,
    square_name,
    square_to_notation,
)

__all__ = [
    # Enums
    "CastleSide",
    "Color",
    "DrawReason",
    "GameResult",
    "PieceType",
    # Types / helpers
    "Square",
    "notation_to_square",
    "square_name",
    "square_to_notation",
    # Errors
    "AmbiguousMoveError",
    "ChessError",
    "IllegalMoveError",
    "IncompatibleNotationError",
    "InvalidMoveError",
    "MissingKingError",
    "MoveError",
    "PromotionRequiredError",
    # Domain objects
    "Board",
    "DrawPolicy",
    "LastMove",
    "MoveGenerator",
    "Piece",
    "PositionSnapshot",
    "Rules",
    "pseudo_legal_destinations",
]
