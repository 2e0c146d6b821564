"""Tests for Rules: checkmate, stalemate and draw detection."""

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import Color, DrawReason, PieceType
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation.fen import parse_fen
from chessrules.core.piece import Piece
from chessrules.core.position import PositionSnapshot
from chessrules.core.rules import DrawPolicy, Rules
from chessrules.core.types import A1, C3, E1, E8, H8


def _kings_and(*extra: tuple[Color, PieceType]) -> Board:
    board = Board()
    board[E1] = Piece(Color.WHITE, PieceType.KING)
    board[E8] = Piece(Color.BLACK, PieceType.KING)
    for square, (color, piece_type) in zip((A1, C3, H8), extra):
        board[square] = Piece(color, piece_type)
    return board


class TestCheckmate:
    def test_fools_mate(self) -> None:
        setup = parse_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        gen = MoveGenerator(setup.board, setup.last_move)
        assert gen.is_in_check(Color.WHITE)
        assert Rules.is_checkmate(gen, Color.WHITE)
        assert not Rules.is_stalemate(gen, Color.WHITE)

    def test_back_rank_mate(self) -> None:
        setup = parse_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Rules.is_checkmate(MoveGenerator(setup.board), Color.BLACK)

    def test_escape_is_not_mate(self) -> None:
        setup = parse_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        gen = MoveGenerator(setup.board)
        assert gen.is_in_check(Color.WHITE)
        assert not Rules.is_checkmate(gen, Color.WHITE)


class TestStalemate:
    def test_king_trapped(self) -> None:
        setup = parse_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        gen = MoveGenerator(setup.board)
        assert Rules.is_stalemate(gen, Color.BLACK)
        assert not Rules.is_checkmate(gen, Color.BLACK)

    def test_starting_position(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert not Rules.is_stalemate(gen, Color.WHITE)


class TestDeadPosition:
    def test_bare_kings(self) -> None:
        assert Rules.is_dead_position(_kings_and())

    @pytest.mark.parametrize("piece_type", [PieceType.BISHOP, PieceType.KNIGHT])
    def test_single_minor_piece(self, piece_type: PieceType) -> None:
        assert Rules.is_dead_position(_kings_and((Color.WHITE, piece_type)))
        assert Rules.is_dead_position(_kings_and((Color.BLACK, piece_type)))

    @pytest.mark.parametrize(
        "piece_type", [PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN]
    )
    def test_mating_material(self, piece_type: PieceType) -> None:
        assert not Rules.is_dead_position(_kings_and((Color.WHITE, piece_type)))

    def test_two_knights_not_detected(self) -> None:
        board = _kings_and(
            (Color.WHITE, PieceType.KNIGHT), (Color.WHITE, PieceType.KNIGHT)
        )
        assert not Rules.is_dead_position(board)

    def test_minor_piece_each(self) -> None:
        board = _kings_and(
            (Color.WHITE, PieceType.BISHOP), (Color.BLACK, PieceType.KNIGHT)
        )
        assert not Rules.is_dead_position(board)


class TestMoveCounters:
    def test_minimum_of_both_sides(self) -> None:
        assert Rules.moves_since_capture_or_pawn_move([12, 11]) == 11
        assert Rules.moves_since_capture_or_pawn_move([0, 0]) == 0


class TestRepetition:
    def _snapshot(self, mover: Color = Color.WHITE) -> PositionSnapshot:
        return PositionSnapshot.capture(Board.initial(), mover)

    def test_empty_history(self) -> None:
        assert not Rules.nfold_repetition([], 3)

    def test_single_position_is_onefold(self) -> None:
        assert Rules.nfold_repetition([self._snapshot()], 1)
        assert not Rules.nfold_repetition([self._snapshot()], 2)

    def test_threefold(self) -> None:
        other = self._snapshot(Color.BLACK)
        snaps = [self._snapshot(), other, self._snapshot(), other, self._snapshot()]
        assert Rules.nfold_repetition(snaps, 3)
        assert not Rules.nfold_repetition(snaps, 4)

    def test_mover_matters(self) -> None:
        assert self._snapshot(Color.WHITE) != self._snapshot(Color.BLACK)

    @pytest.mark.parametrize("n", [0, -2])
    def test_non_positive_count(self, n: int) -> None:
        with pytest.raises(ValueError, match="Repetition count must be positive"):
            Rules.nfold_repetition([self._snapshot()], n)


class TestDrawPolicy:
    def test_defaults(self) -> None:
        policy = DrawPolicy.fide()
        assert (policy.claim_move_limit, policy.automatic_move_limit) == (50, 75)
        assert (policy.claim_repetitions, policy.automatic_repetitions) == (3, 5)

    def test_claim_above_automatic_rejected(self) -> None:
        with pytest.raises(ValueError, match="claim_move_limit"):
            DrawPolicy(claim_move_limit=80)

    def test_repetition_order_rejected(self) -> None:
        with pytest.raises(ValueError, match="claim_repetitions"):
            DrawPolicy(claim_repetitions=6)

    def test_single_repetition_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 2"):
            DrawPolicy(claim_repetitions=1)

    def test_claimable_draw(self) -> None:
        policy = DrawPolicy.fide()
        snaps = [PositionSnapshot.capture(Board.initial(), Color.BLACK)]
        assert Rules.claimable_draw(policy, 49, snaps) is None
        assert Rules.claimable_draw(policy, 50, snaps) == DrawReason.FIFTY_MOVES

    def test_automatic_draw(self) -> None:
        policy = DrawPolicy.fide()
        board = Board.initial()
        snaps = [PositionSnapshot.capture(board, Color.BLACK)]
        assert Rules.automatic_draw(policy, board, 74, snaps) is None
        assert (
            Rules.automatic_draw(policy, board, 75, snaps)
            == DrawReason.SEVENTY_FIVE_MOVES
        )
        assert Rules.automatic_draw(policy, _kings_and(), 0, snaps) == (
            DrawReason.DEAD_POSITION
        )

    def test_claims_only_never_ends_on_counts(self) -> None:
        policy = DrawPolicy.claims_only()
        board = Board.initial()
        snaps = [PositionSnapshot.capture(board, Color.BLACK)]
        assert Rules.automatic_draw(policy, board, 500, snaps) is None
        assert Rules.claimable_draw(policy, 500, snaps) == DrawReason.FIFTY_MOVES
