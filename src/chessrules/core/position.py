"""Position snapshots used for repetition detection."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board, Layout
from chessrules.core.enums import CastleSide, Color
from chessrules.core.move_generator import LastMove, MoveGenerator
from chessrules.core.types import Square


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """Comparable record of a position right after a move.

    Two snapshots are equal only when the piece layout, the side that just
    moved, the remaining castling rights and the en-passant captures on
    offer all match.
    """

    layout: Layout
    mover: Color
    castling: frozenset[tuple[Color, CastleSide]]
    en_passant: frozenset[tuple[Color, Square]]

    @classmethod
    def capture(
        cls, board: Board, mover: Color, last_move: LastMove | None = None
    ) -> PositionSnapshot:
        gen = MoveGenerator(board, last_move)
        castling = frozenset(
            (color, side)
            for color in Color
            for side in CastleSide
            if gen.castling_right(color, side)
        )
        to_move = mover.opposite
        en_passant = frozenset(
            (to_move, sq) for sq in gen.en_passant_captures(to_move)
        )
        return cls(board.layout(), mover, castling, en_passant)
