"""Tests for Board."""

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import MissingKingError
from chessrules.core.piece import Piece
from chessrules.core.types import A1, D1, D8, E1, E2, E4, E8, H8, Square


class TestInitialBoard:
    def test_piece_count(self) -> None:
        board = Board.initial()
        assert len(board.all_pieces(Color.WHITE)) == 16
        assert len(board.all_pieces(Color.BLACK)) == 16

    def test_back_ranks(self) -> None:
        board = Board.initial()
        assert board[A1] == Piece(Color.WHITE, PieceType.ROOK)
        assert board[D1] == Piece(Color.WHITE, PieceType.QUEEN)
        assert board[D8] == Piece(Color.BLACK, PieceType.QUEEN)
        assert board[H8] == Piece(Color.BLACK, PieceType.ROOK)

    def test_pawn_ranks(self) -> None:
        board = Board.initial()
        assert len(board.pieces(Color.WHITE, PieceType.PAWN)) == 8
        assert all(sq.rank == 6 for sq in board.pieces(Color.BLACK, PieceType.PAWN))

    def test_middle_is_empty(self) -> None:
        board = Board.initial()
        middle = [Square(rank, f) for rank in range(2, 6) for f in range(8)]
        assert all(board.is_empty(sq) for sq in middle)

    def test_home_squares_recorded(self) -> None:
        board = Board.initial()
        king = board[E1]
        assert king is not None
        assert king.starting_square == E1
        assert not king.moved


class TestKingSquare:
    def test_initial(self) -> None:
        board = Board.initial()
        assert board.king_square(Color.WHITE) == E1
        assert board.king_square(Color.BLACK) == E8

    def test_missing_king(self) -> None:
        with pytest.raises(MissingKingError):
            Board().king_square(Color.WHITE)


class TestMovePiece:
    def test_relocates_and_marks_moved(self) -> None:
        board = Board.initial()
        captured = board.move_piece(E2, E4)
        assert captured is None
        assert board.is_empty(E2)
        pawn = board[E4]
        assert pawn is not None
        assert pawn.moved

    def test_returns_captured_piece(self) -> None:
        board = Board.initial()
        captured = board.move_piece(D1, D8)
        assert captured == Piece(Color.BLACK, PieceType.QUEEN)

    def test_empty_source(self) -> None:
        with pytest.raises(ValueError, match="No piece on e4"):
            Board.initial().move_piece(E4, E2)


class TestCopy:
    def test_copy_is_independent(self) -> None:
        board = Board.initial()
        clone = board.copy()
        clone.move_piece(E2, E4)
        assert board[E2] is not None
        assert board.is_empty(E4)
        assert board != clone

    def test_copy_preserves_flags(self) -> None:
        board = Board.initial()
        board.move_piece(E2, E4)
        clone = board.copy()
        pawn = clone[E4]
        assert pawn is not None
        assert pawn.moved
        assert pawn.starting_square == E2

    def test_equality_by_layout(self) -> None:
        assert Board.initial() == Board.initial().copy()

    def test_clear(self) -> None:
        board = Board.initial()
        board.clear()
        assert list(board.squares()) == []
