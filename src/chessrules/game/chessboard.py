"""The Chessboard game aggregate: move application, history and draws."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastleSide, Color, DrawReason, GameResult, PieceType
from chessrules.core.errors import (
    AmbiguousMoveError,
    IllegalMoveError,
    IncompatibleNotationError,
    InvalidMoveError,
    MoveError,
)
from chessrules.core.move_generator import (
    KING_FILE,
    LastMove,
    MoveGenerator,
    castle_side_of,
    is_en_passant,
    simulate,
)
from chessrules.core.notation.fen import FenSetup, parse_fen, to_fen
from chessrules.core.notation.pgn import movetext_from_moves, parse_movetext
from chessrules.core.notation.san import (
    CastleIntent,
    MoveIntent,
    PawnIntent,
    PieceIntent,
    PromotionIntent,
    check_suffix,
    disambiguation_candidates,
    intent_from_disambiguation,
    parse_move,
    render_castle,
    render_move,
    with_check_suffix,
)
from chessrules.core.piece import Piece
from chessrules.core.position import PositionSnapshot
from chessrules.core.rules import DrawPolicy, Rules
from chessrules.core.types import Square, as_square, square_name
from chessrules.game.records import MoveRecord, MoveResult

_LOGGER = logging.getLogger(__name__)

# Placeholder for White's half of a move pair when Black moved first.
_SKIPPED_MOVE = "..."


@dataclass(frozen=True, slots=True)
class _ResolvedMove:
    """A move pinned down to concrete squares, not yet applied."""

    piece_type: PieceType
    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None
    castle: CastleSide | None = None


class Chessboard:
    """A game of chess driven by algebraic notation.

    The board, the move pairs, the clocks and the position snapshots are
    owned here and change only through :meth:`move` / :meth:`apply`.
    """

    __slots__ = (
        "_board",
        "_policy",
        "_side_to_move",
        "_fullmove",
        "_moves",
        "_history",
        "_clocks",
        "_captured_last_turn",
        "_last_move",
        "_snapshots",
    )

    def __init__(self, policy: DrawPolicy | None = None) -> None:
        self._board = Board.initial()
        self._policy = policy if policy is not None else DrawPolicy.fide()
        self._side_to_move = Color.WHITE
        self._fullmove = 1
        self._moves: list[list[str]] = []
        self._history: list[MoveRecord] = []
        # [color] -> own moves since the last capture or pawn move
        self._clocks: list[int] = [0, 0]
        self._captured_last_turn: list[bool] = [False, False]
        self._last_move: LastMove | None = None
        self._snapshots: list[PositionSnapshot] = [
            PositionSnapshot.capture(self._board, self._side_to_move.opposite)
        ]

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_movetext(cls, text: str, policy: DrawPolicy | None = None) -> Chessboard:
        """Replay PGN movetext from the starting position.

        Raises :class:`IncompatibleNotationError` on the first move that
        cannot be played; no partially replayed game escapes.
        """
        game = cls(policy)
        for number, pair in enumerate(parse_movetext(text), start=1):
            for color, token in zip(Color, pair):
                try:
                    game.apply(token, color)
                except MoveError as exc:
                    _LOGGER.warning(
                        "Movetext replay stopped at move %d (%s) %r: %s",
                        number,
                        color,
                        token,
                        exc,
                    )
                    raise IncompatibleNotationError(
                        f"Incompatible notation at move {number} ({color}) "
                        f"{token!r}: {exc}",
                        number,
                        token,
                    ) from exc
        return game

    @classmethod
    def from_fen(cls, fen: str, policy: DrawPolicy | None = None) -> Chessboard:
        """Start a game from an arbitrary FEN position."""
        setup = parse_fen(fen)
        game = cls(policy)
        game._board = setup.board
        game._side_to_move = setup.side_to_move
        game._fullmove = setup.fullmove_number
        mover = setup.side_to_move.opposite
        game._clocks[mover] = (setup.halfmove_clock + 1) // 2
        game._clocks[setup.side_to_move] = setup.halfmove_clock // 2
        game._last_move = setup.last_move
        game._snapshots = [
            PositionSnapshot.capture(game._board, mover, game._last_move)
        ]
        return game

    # ── Move application ─────────────────────────────────────────────────

    def move(self, notation: str, color: Color) -> MoveResult:
        """Try to play *notation* for *color*.

        Never raises for bad input: a rejected move comes back as a falsy
        :class:`MoveResult` carrying a descriptive message.
        """
        try:
            record = self.apply(notation, color)
        except MoveError as exc:
            _LOGGER.info("Rejected %r for %s: %s", notation, color, exc)
            return MoveResult.rejected(exc)

        stalemate = self.stalemate(self._side_to_move)
        draw = DrawReason.STALEMATE if stalemate else self._automatic_draw()
        return MoveResult(success=True, record=record, stalemate=stalemate, draw=draw)

    def apply(self, notation: str, color: Color) -> MoveRecord:
        """Play *notation* for *color* and return the record.

        Raises a :class:`MoveError` subclass and leaves the game untouched
        when the move cannot be played.
        """
        if color != self._side_to_move:
            raise IllegalMoveError(
                f"Illegal move: it is {self._side_to_move}'s turn.", notation
            )
        intent = parse_move(notation, color)
        resolved = self._resolve(intent, color, notation)
        return self._execute(resolved, color)

    # ── Resolution ───────────────────────────────────────────────────────

    def _generator(self) -> MoveGenerator:
        return MoveGenerator(self._board, self._last_move)

    def _resolve(self, intent: MoveIntent, color: Color, token: str) -> _ResolvedMove:
        if isinstance(intent, CastleIntent):
            return self._resolve_castle(intent.side, color, token)
        if isinstance(intent, PromotionIntent):
            src = self._pawn_source(intent.target, intent.from_file, color, token)
            return _ResolvedMove(
                PieceType.PAWN, src, intent.target, promotion=intent.promotion
            )
        if isinstance(intent, PawnIntent):
            src = self._pawn_source(intent.target, intent.from_file, color, token)
            return _ResolvedMove(PieceType.PAWN, src, intent.target)
        return self._resolve_piece(intent, color, token)

    def _resolve_castle(
        self, side: CastleSide, color: Color, token: str
    ) -> _ResolvedMove:
        dest = self._generator().castling_destination(color, side)
        if dest is None:
            raise IllegalMoveError(
                f"Illegal move: {color} cannot castle {side.name.lower()} now.", token
            )
        king_sq = Square(color.back_rank, KING_FILE)
        return _ResolvedMove(PieceType.KING, king_sq, dest, castle=side)

    def _pawn_source(
        self, target: Square, from_file: int | None, color: Color, token: str
    ) -> Square:
        """Square of the pawn that *token* moves, checked for legality."""
        board = self._board
        behind = -color.forward

        def own_pawn(sq: Square | None) -> bool:
            piece = None if sq is None else board[sq]
            return piece is not None and piece.kind == (color, PieceType.PAWN)

        src: Square | None
        if from_file is None:
            src = target.offset(behind, 0)
            if not own_pawn(src) and src is not None and board.is_empty(src):
                src = target.offset(2 * behind, 0)
        else:
            src = None
            if abs(from_file - target.file) == 1:
                src = target.offset(behind, from_file - target.file)

        if src is None or not own_pawn(src):
            raise InvalidMoveError(
                f"Invalid move: no {color} pawn can move to {square_name(target)}.",
                token,
            )
        if target not in self._generator().legal_moves(src):
            raise IllegalMoveError(f"Illegal move: {token.strip()}.", token)
        return src

    def _matching_pieces(self, intent: PieceIntent, color: Color) -> list[Square]:
        """Squares of *color*'s pieces that fit *intent* and may legally move."""
        gen = self._generator()
        matches: list[Square] = []
        for sq in self._board.pieces(color, intent.piece_type):
            if intent.from_file is not None and sq.file != intent.from_file:
                continue
            if intent.from_rank is not None and sq.rank != intent.from_rank:
                continue
            if intent.target in gen.legal_moves(sq):
                matches.append(sq)
        return matches

    def _resolve_piece(
        self, intent: PieceIntent, color: Color, token: str
    ) -> _ResolvedMove:
        matches = self._matching_pieces(intent, color)
        if not matches:
            raise IllegalMoveError(f"Illegal move: {token.strip()}.", token)
        if len(matches) > 1:
            raise AmbiguousMoveError(
                f"Ambiguous move: more than one {intent.piece_type} can move to "
                f"{square_name(intent.target)}. Specify the file, rank or square "
                f"it moves from.",
                token,
            )
        src = matches[0]
        castle = castle_side_of(self._board, src, intent.target)
        return _ResolvedMove(intent.piece_type, src, intent.target, castle=castle)

    def _minimal_disambiguation(self, resolved: _ResolvedMove, color: Color) -> str:
        """Shortest source hint that still singles out the moving piece."""
        for hint in disambiguation_candidates(resolved.from_sq):
            intent = intent_from_disambiguation(
                resolved.piece_type, resolved.to_sq, hint
            )
            if self._matching_pieces(intent, color) == [resolved.from_sq]:
                return hint
        return square_name(resolved.from_sq)

    # ── Execution ────────────────────────────────────────────────────────

    def _render(self, resolved: _ResolvedMove, color: Color, capture: bool) -> str:
        if resolved.castle is not None:
            return render_castle(resolved.castle)
        disambiguation = ""
        if resolved.piece_type != PieceType.PAWN:
            disambiguation = self._minimal_disambiguation(resolved, color)
        return render_move(
            resolved.piece_type,
            resolved.from_sq,
            resolved.to_sq,
            capture=capture,
            disambiguation=disambiguation,
            promotion=resolved.promotion,
            en_passant=is_en_passant(self._board, resolved.from_sq, resolved.to_sq),
        )

    def _execute(self, resolved: _ResolvedMove, color: Color) -> MoveRecord:
        board = self._board
        src, dst = resolved.from_sq, resolved.to_sq
        en_passant = is_en_passant(board, src, dst)
        capture = en_passant or board[dst] is not None
        base_notation = self._render(resolved, color, capture)

        captured = simulate(board, src, dst)
        if resolved.promotion is not None:
            board[dst] = Piece(color, resolved.promotion, moved=True)

        self._last_move = LastMove(color, resolved.piece_type, src, dst)
        opponent = color.opposite
        gen = self._generator()
        in_check = gen.is_in_check(opponent)
        mated = in_check and not gen.has_moves(opponent)
        notation = with_check_suffix(base_notation, check_suffix(in_check, mated))

        record = MoveRecord(
            number=self._fullmove,
            color=color,
            notation=notation,
            piece_type=resolved.piece_type,
            from_sq=src,
            to_sq=dst,
            captured=None if captured is None else captured.piece_type,
            promotion=resolved.promotion,
            castle=resolved.castle,
            en_passant=en_passant,
            check=in_check,
            checkmate=mated,
        )
        self._record(record)
        self._tick_clocks(color, resolved.piece_type == PieceType.PAWN, captured)
        if color == Color.BLACK:
            self._fullmove += 1
        self._side_to_move = opponent
        self._snapshots.append(PositionSnapshot.capture(board, color, self._last_move))
        _LOGGER.debug("Applied %s for %s", notation, color)
        return record

    def _record(self, record: MoveRecord) -> None:
        if record.color == Color.WHITE:
            self._moves.append([record.notation])
        elif self._moves and len(self._moves[-1]) == 1:
            self._moves[-1].append(record.notation)
        else:
            self._moves.append([_SKIPPED_MOVE, record.notation])
        self._history.append(record)

    def _tick_clocks(
        self, color: Color, pawn_move: bool, captured: Piece | None
    ) -> None:
        self._captured_last_turn[color] = captured is not None
        if pawn_move or captured is not None:
            self._clocks = [0, 0]
        else:
            self._clocks[color] += 1

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        """Independent copy of the current board."""
        return self._board.copy()

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def policy(self) -> DrawPolicy:
        return self._policy

    @property
    def moves(self) -> tuple[tuple[str, ...], ...]:
        """Recorded notation as (white, black) pairs, one per move number."""
        return tuple(tuple(pair) for pair in self._moves)

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._history)

    @property
    def snapshots(self) -> tuple[PositionSnapshot, ...]:
        return tuple(self._snapshots)

    def piece_at(self, square: Square | str) -> Piece | None:
        piece = self._board[as_square(square)]
        return None if piece is None else piece.copy()

    def legal_moves(self, square: Square | str) -> set[Square]:
        """Legal destinations of the piece on *square* (empty set if none)."""
        return self._generator().legal_moves(as_square(square))

    def under_check(self, color: Color) -> bool:
        return self._generator().is_in_check(color)

    def has_moves(self, color: Color) -> bool:
        return self._generator().has_moves(color)

    def checkmate(self, color: Color) -> bool:
        return Rules.is_checkmate(self._generator(), color)

    def stalemate(self, color: Color) -> bool:
        return Rules.is_stalemate(self._generator(), color)

    def captured_last_turn(self, color: Color) -> bool:
        """Whether *color*'s most recent move captured a piece."""
        return self._captured_last_turn[color]

    @property
    def moves_since_capture_or_pawn_move(self) -> int:
        return Rules.moves_since_capture_or_pawn_move(self._clocks)

    def nfold_repetition(self, n: int) -> bool:
        return Rules.nfold_repetition(self._snapshots, n)

    def dead_position(self) -> bool:
        return Rules.is_dead_position(self._board)

    def claimable_draw(self) -> DrawReason | None:
        """Draw the side to move may claim now, if any."""
        return Rules.claimable_draw(
            self._policy, self.moves_since_capture_or_pawn_move, self._snapshots
        )

    def _automatic_draw(self) -> DrawReason | None:
        return Rules.automatic_draw(
            self._policy,
            self._board,
            self.moves_since_capture_or_pawn_move,
            self._snapshots,
        )

    def automatic_draw(self) -> DrawReason | None:
        """Draw that ends the game without a claim, stalemate included."""
        if self.stalemate(self._side_to_move):
            return DrawReason.STALEMATE
        return self._automatic_draw()

    def result(self) -> GameResult:
        """Current game result from the side to move's point of view."""
        color = self._side_to_move
        if self.checkmate(color):
            if color == Color.WHITE:
                return GameResult.BLACK_WINS
            return GameResult.WHITE_WINS
        if self.automatic_draw() is not None:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    # ── Export ───────────────────────────────────────────────────────────

    def to_movetext(self) -> str:
        return movetext_from_moves(self._moves)

    def to_fen(self) -> str:
        gen = self._generator()
        castling = frozenset(
            (color, side)
            for color in Color
            for side in CastleSide
            if gen.castling_right(color, side)
        )
        setup = FenSetup(
            board=self._board,
            side_to_move=self._side_to_move,
            castling=castling,
            last_move=self._last_move,
            halfmove_clock=sum(self._clocks),
            fullmove_number=self._fullmove,
        )
        return to_fen(setup)

    def copy(self) -> Chessboard:
        """Independent game with the same position, history and clocks."""
        clone = Chessboard(self._policy)
        clone._board = self._board.copy()
        clone._side_to_move = self._side_to_move
        clone._fullmove = self._fullmove
        clone._moves = [list(pair) for pair in self._moves]
        clone._history = list(self._history)
        clone._clocks = list(self._clocks)
        clone._captured_last_turn = list(self._captured_last_turn)
        clone._last_move = self._last_move
        clone._snapshots = list(self._snapshots)
        return clone

    def __repr__(self) -> str:
        return f"Chessboard({self._side_to_move} to move)\n{self._board!r}"
