"""Tests for move tokens, PGN movetext and FEN."""

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.errors import InvalidMoveError, PromotionRequiredError
from chessrules.core.notation.fen import (
    STARTING_FEN,
    board_to_fen_placement,
    parse_fen,
    to_fen,
)
from chessrules.core.notation.pgn import (
    movetext_from_moves,
    parse_movetext,
    strip_spans,
    strip_tags,
)
from chessrules.core.notation.san import (
    CastleIntent,
    PawnIntent,
    PieceIntent,
    PromotionIntent,
    clean_token,
    disambiguation_candidates,
    parse_move,
    render_move,
    with_check_suffix,
)
from chessrules.core.types import A1, A3, D2, D5, D6, D7, E1, E3, E4, E5, E8, F3


# ── Move tokens ─────────────────────────────────────────────────────────────


class TestParseMove:
    @pytest.mark.parametrize(
        ("token", "side"),
        [
            ("0-0", CastleSide.KINGSIDE),
            ("O-O", CastleSide.KINGSIDE),
            ("0-0-0", CastleSide.QUEENSIDE),
            ("O-O-O+", CastleSide.QUEENSIDE),
        ],
    )
    def test_castles(self, token: str, side: CastleSide) -> None:
        assert parse_move(token, Color.WHITE) == CastleIntent(side)

    def test_pawn_push(self) -> None:
        assert parse_move("e4", Color.WHITE) == PawnIntent(E4)

    def test_pawn_capture(self) -> None:
        assert parse_move("exd5", Color.WHITE) == PawnIntent(D5, from_file=4)

    def test_promotion(self) -> None:
        assert parse_move("e8Q", Color.WHITE) == PromotionIntent(E8, PieceType.QUEEN)

    def test_promotion_with_equals_and_capture(self) -> None:
        assert parse_move("dxe8=N+", Color.WHITE) == PromotionIntent(
            E8, PieceType.KNIGHT, from_file=3
        )

    def test_black_promotes_on_first_rank(self) -> None:
        assert parse_move("e1R", Color.BLACK) == PromotionIntent(E1, PieceType.ROOK)

    def test_promotion_piece_required(self) -> None:
        with pytest.raises(PromotionRequiredError, match="e.g. e8Q"):
            parse_move("e8", Color.WHITE)

    def test_promotion_piece_required_on_capture(self) -> None:
        with pytest.raises(PromotionRequiredError, match="e.g. dxe1Q"):
            parse_move("dxe1", Color.BLACK)

    def test_piece_move(self) -> None:
        assert parse_move("Nf3", Color.WHITE) == PieceIntent(PieceType.KNIGHT, F3)

    def test_piece_capture_with_check(self) -> None:
        assert parse_move("Bxf3+", Color.BLACK) == PieceIntent(PieceType.BISHOP, F3)

    def test_file_disambiguation(self) -> None:
        assert parse_move("Nbd2", Color.WHITE) == PieceIntent(
            PieceType.KNIGHT, D2, from_file=1
        )

    def test_rank_disambiguation(self) -> None:
        assert parse_move("R1a3", Color.WHITE) == PieceIntent(
            PieceType.ROOK, A3, from_rank=0
        )

    def test_square_disambiguation(self) -> None:
        assert parse_move("Nb1d2", Color.WHITE) == PieceIntent(
            PieceType.KNIGHT, D2, from_file=1, from_rank=0
        )

    @pytest.mark.parametrize(
        "token", ["", "   ", "e9", "Zf3", "Nd9", "N", "Qk4", "xyz"]
    )
    def test_invalid(self, token: str) -> None:
        with pytest.raises(InvalidMoveError, match="Invalid move"):
            parse_move(token, Color.WHITE)

    def test_clean_token_strips_annotations(self) -> None:
        assert clean_token(" Qxf7#! ") == "Qxf7"
        assert clean_token("exd6+ e.p.") == "exd6"


class TestRenderMove:
    def test_pawn_push(self) -> None:
        assert render_move(PieceType.PAWN, E3, E4) == "e4"

    def test_pawn_capture_promotion(self) -> None:
        notation = render_move(
            PieceType.PAWN, D7, E8, capture=True, promotion=PieceType.QUEEN
        )
        assert notation == "dxe8Q"

    def test_en_passant(self) -> None:
        notation = render_move(PieceType.PAWN, E5, D6, capture=True, en_passant=True)
        assert notation == "exd6 e.p."

    def test_piece_with_disambiguation(self) -> None:
        notation = render_move(PieceType.ROOK, A3, D2, disambiguation="a")
        assert notation == "Rad2"

    def test_disambiguation_candidates_skip_rank_only(self) -> None:
        assert list(disambiguation_candidates(A1)) == ["", "a", "a1"]

    def test_check_suffix_before_en_passant(self) -> None:
        assert with_check_suffix("exd6 e.p.", "+") == "exd6+ e.p."
        assert with_check_suffix("Qh4", "#") == "Qh4#"


# ── PGN movetext ────────────────────────────────────────────────────────────


class TestStripping:
    def test_strip_tags(self) -> None:
        text = '[Event "Casual"]\n[White "A"]\n\n1.e4 e5'
        assert strip_tags(text).split() == ["1.e4", "e5"]

    def test_nested_spans(self) -> None:
        assert strip_spans("a {b {c} d} e", "{", "}").split() == ["a", "e"]

    def test_span_positions_preserved(self) -> None:
        text = "a (b) c"
        assert len(strip_spans(text, "(", ")")) == len(text)

    def test_unbalanced_delimiters_kept(self) -> None:
        assert strip_spans("a } b { c", "{", "}") == "a } b { c"


class TestParseMovetext:
    def test_plain(self) -> None:
        assert parse_movetext("1.e4 e5 2.Nf3") == [["e4", "e5"], ["Nf3"]]

    def test_full_game_markup(self) -> None:
        text = (
            '[Event "Casual"]\n'
            '[Site "?"]\n'
            "\n"
            "1. e4 {best by test} e5 2. Nf3 (2. f4 exf4 {gambit}) Nc6\n"
            "3. Bb5 a6 ; the Ruy Lopez\n"
            "% escaped line\n"
            "4. O-O $1 Nf6 5. d4!? exd4 1-0\n"
        )
        assert parse_movetext(text) == [
            ["e4", "e5"],
            ["Nf3", "Nc6"],
            ["Bb5", "a6"],
            ["0-0", "Nf6"],
            ["d4!?", "exd4"],
        ]

    def test_continuation_numbers(self) -> None:
        text = "1. e4 {main} 1... e5 2. Nf3 2... Nc6"
        assert parse_movetext(text) == [["e4", "e5"], ["Nf3", "Nc6"]]

    def test_promotion_equals_removed(self) -> None:
        assert parse_movetext("1. e8=Q+ O-O-O") == [["e8Q+", "0-0-0"]]

    def test_empty(self) -> None:
        assert parse_movetext("") == []


class TestMovetextFromMoves:
    def test_pairs(self) -> None:
        assert movetext_from_moves([["e4", "e5"], ["Nf3"]]) == "1.e4 e5 2.Nf3"

    def test_translation(self) -> None:
        moves = [["0-0", "0-0-0+"], ["dxe8Q#"], ["exd6 e.p."]]
        assert movetext_from_moves(moves) == "1.O-O O-O-O+ 2.dxe8=Q# 3.exd6"

    def test_piece_moves_untouched(self) -> None:
        assert movetext_from_moves([["Rh8", "Nb1d2"]]) == "1.Rh8 Nb1d2"

    def test_empty(self) -> None:
        assert movetext_from_moves([]) == ""


# ── FEN ─────────────────────────────────────────────────────────────────────


class TestFen:
    def test_starting_position(self) -> None:
        setup = parse_fen(STARTING_FEN)
        assert setup.board == Board.initial()
        assert setup.side_to_move == Color.WHITE
        assert len(setup.castling) == 4
        assert setup.last_move is None
        assert (setup.halfmove_clock, setup.fullmove_number) == (0, 1)

    def test_round_trip(self) -> None:
        for fen in (
            STARTING_FEN,
            "r3k2r/8/8/8/8/8/8/R3K2R b Kq - 12 40",
            "rnbqkbnr/ppp1pppp/8/8/3pP3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 3",
        ):
            assert to_fen(parse_fen(fen)) == fen

    def test_en_passant_becomes_last_move(self) -> None:
        setup = parse_fen(
            "rnbqkbnr/ppp1pppp/8/8/3pP3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 3"
        )
        assert setup.last_move is not None
        assert setup.last_move.to_sq == E4
        assert setup.last_move.is_double_step

    def test_optional_clocks(self) -> None:
        setup = parse_fen("4k3/8/8/8/8/8/8/4K3 w - -")
        assert (setup.halfmove_clock, setup.fullmove_number) == (0, 1)

    def test_placement(self) -> None:
        placement = board_to_fen_placement(Board.initial())
        assert placement == STARTING_FEN.split()[0]

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/8/8/8/8/8 w - - 0 1",
            "4k3/8/8/8/8/8/8/8 w - - 0 1",
            "4k3/8/8/8/8/8/8/4K3 x - - 0 1",
            "4k3/8/8/8/8/8/8/4K3 w K - 0 1",
            "4k3/8/8/8/8/8/8/4K3 w - e4 0 1",
            "4k3/8/8/8/8/8/8/4K3 w - - -1 1",
            "4k3/8/8/8/8/8/8/4K3 w - - 0 0",
            "4k3/8/8/8/8/8/8/4K2X w - - 0 1",
            "4k3/9/8/8/8/8/8/4K3 w - - 0 1",
            "4k3",
        ],
    )
    def test_invalid(self, fen: str) -> None:
        with pytest.raises(ValueError):
            parse_fen(fen)
