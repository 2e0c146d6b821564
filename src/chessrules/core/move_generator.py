"""Pseudo-legal and legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

KING_FILE = 4
# side -> (rook file, files that must be empty, king transit file, king target file)
CASTLING_FILES: dict[CastleSide, tuple[int, tuple[int, ...], int, int]] = {
    CastleSide.KINGSIDE: (7, (5, 6), 5, 6),
    CastleSide.QUEENSIDE: (0, (1, 2, 3), 3, 2),
}


@dataclass(frozen=True, slots=True)
class LastMove:
    """The half-move played just before the position being examined."""

    color: Color
    piece_type: PieceType
    from_sq: Square
    to_sq: Square

    @property
    def is_double_step(self) -> bool:
        return (
            self.piece_type == PieceType.PAWN
            and abs(self.to_sq.rank - self.from_sq.rank) == 2
        )


# -- Per-piece pseudo-legal generators -------------------------------------


def _on_start(piece: Piece, sq: Square) -> bool:
    """Whether *piece* stands on its home square and never left it."""
    return piece.starting_square == sq and not piece.moved


def _pawn_attacks(sq: Square, color: Color) -> list[Square]:
    targets = (sq.offset(color.forward, -1), sq.offset(color.forward, 1))
    return [t for t in targets if t is not None]


def _en_passant_target(
    board: Board, sq: Square, piece: Piece, last_move: LastMove | None
) -> Square | None:
    if last_move is None or last_move.color == piece.color:
        return None
    if not last_move.is_double_step:
        return None
    landed = last_move.to_sq
    if landed.rank != sq.rank or abs(landed.file - sq.file) != 1:
        return None
    victim = board[landed]
    if victim is None or victim.piece_type != PieceType.PAWN:
        return None
    target = Square(sq.rank + piece.color.forward, landed.file)
    if not board.is_empty(target):
        return None
    return target


def _gen_pawn(
    board: Board, sq: Square, piece: Piece, last_move: LastMove | None
) -> set[Square]:
    moves: set[Square] = set()
    step = piece.color.forward

    one_step = sq.offset(step, 0)
    if one_step is not None and board.is_empty(one_step):
        moves.add(one_step)
        two_step = sq.offset(2 * step, 0)
        if two_step is not None and _on_start(piece, sq) and board.is_empty(two_step):
            moves.add(two_step)

    for cap_sq in _pawn_attacks(sq, piece.color):
        target = board[cap_sq]
        if target is not None and target.color != piece.color:
            moves.add(cap_sq)

    ep_sq = _en_passant_target(board, sq, piece, last_move)
    if ep_sq is not None:
        moves.add(ep_sq)
    return moves


def _gen_steps(
    board: Board, sq: Square, piece: Piece, offsets: tuple[tuple[int, int], ...]
) -> set[Square]:
    moves: set[Square] = set()
    for dr, df in offsets:
        to_sq = sq.offset(dr, df)
        if to_sq is None:
            continue
        target = board[to_sq]
        if target is None or target.color != piece.color:
            moves.add(to_sq)
    return moves


def _gen_sliding(
    board: Board, sq: Square, piece: Piece, directions: tuple[tuple[int, int], ...]
) -> set[Square]:
    moves: set[Square] = set()
    for dr, df in directions:
        to_sq = sq.offset(dr, df)
        while to_sq is not None:
            target = board[to_sq]
            if target is None:
                moves.add(to_sq)
                to_sq = to_sq.offset(dr, df)
                continue
            if target.color != piece.color:
                moves.add(to_sq)
            break
    return moves


_Generator = Callable[[Board, Square, Piece, LastMove | None], set[Square]]

_GENERATORS: dict[PieceType, _Generator] = {
    PieceType.PAWN: _gen_pawn,
    PieceType.KNIGHT: lambda b, sq, p, _: _gen_steps(b, sq, p, KNIGHT_OFFSETS),
    PieceType.BISHOP: lambda b, sq, p, _: _gen_sliding(b, sq, p, BISHOP_DIRS),
    PieceType.ROOK: lambda b, sq, p, _: _gen_sliding(b, sq, p, ROOK_DIRS),
    PieceType.QUEEN: lambda b, sq, p, _: _gen_sliding(b, sq, p, QUEEN_DIRS),
    PieceType.KING: lambda b, sq, p, _: _gen_steps(b, sq, p, KING_OFFSETS),
}


def pseudo_legal_destinations(
    board: Board, sq: Square, last_move: LastMove | None = None
) -> set[Square]:
    """Destinations the piece on *sq* reaches by its movement pattern alone.

    Own-king safety is not considered, and castling is left to
    :meth:`MoveGenerator.castling_destination`.
    """
    piece = board[sq]
    if piece is None:
        return set()
    return _GENERATORS[piece.piece_type](board, sq, piece, last_move)


# -- Move simulation -------------------------------------------------------


def is_en_passant(board: Board, src: Square, dst: Square) -> bool:
    piece = board[src]
    return (
        piece is not None
        and piece.piece_type == PieceType.PAWN
        and src.file != dst.file
        and board.is_empty(dst)
    )


def castle_side_of(board: Board, src: Square, dst: Square) -> CastleSide | None:
    """Castling side when the move is a king's two-file hop, else ``None``."""
    piece = board[src]
    if piece is None or piece.piece_type != PieceType.KING:
        return None
    if src.rank != dst.rank or abs(dst.file - src.file) != 2:
        return None
    return CastleSide.KINGSIDE if dst.file > src.file else CastleSide.QUEENSIDE


def simulate(board: Board, src: Square, dst: Square) -> Piece | None:
    """Play the move *src* → *dst* on *board* and return the captured piece.

    Handles en passant (the victim stands beside the mover, not on *dst*) and
    castling (the rook hops over the king). Promotion is the caller's job.
    """
    captured: Piece | None
    side = castle_side_of(board, src, dst)
    if is_en_passant(board, src, dst):
        victim_sq = Square(src.rank, dst.file)
        captured = board[victim_sq]
        board[victim_sq] = None
        board.move_piece(src, dst)
    else:
        captured = board.move_piece(src, dst)

    if side is not None:
        rook_file, _, transit_file, _ = CASTLING_FILES[side]
        board.move_piece(Square(src.rank, rook_file), Square(src.rank, transit_file))
    return captured


class MoveGenerator:
    """Legal move generation for one board snapshot.

    Legality is decided by playing each candidate on a copy of the board and
    asking whether the mover's king is attacked afterwards; the board handed
    in is never modified.
    """

    __slots__ = ("_board", "_last_move")

    def __init__(self, board: Board, last_move: LastMove | None = None) -> None:
        self._board = board
        self._last_move = last_move

    # -- Public API ---------------------------------------------------------

    def pseudo_legal_moves(self, sq: Square) -> set[Square]:
        return pseudo_legal_destinations(self._board, sq, self._last_move)

    def legal_moves(self, sq: Square) -> set[Square]:
        """Destinations of the piece on *sq* that keep its own king safe."""
        piece = self._board[sq]
        if piece is None:
            return set()

        legal: set[Square] = set()
        for to_sq in self.pseudo_legal_moves(sq):
            trial = self._board.copy()
            simulate(trial, sq, to_sq)
            if not MoveGenerator(trial).is_in_check(piece.color):
                legal.add(to_sq)

        if piece.piece_type == PieceType.KING:
            for side in CastleSide:
                dest = self.castling_destination(piece.color, side)
                if dest is not None:
                    legal.add(dest)
        return legal

    def all_legal_moves(self, color: Color) -> dict[Square, set[Square]]:
        """Legal destinations for every piece of *color* that has any."""
        result: dict[Square, set[Square]] = {}
        for sq in self._board.all_pieces(color):
            moves = self.legal_moves(sq)
            if moves:
                result[sq] = moves
        return result

    def has_moves(self, color: Color) -> bool:
        return any(self.legal_moves(sq) for sq in self._board.all_pieces(color))

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Uses pseudo-legal patterns only, so it never recurses into the
        legality filter. Pawns attack diagonally whether or not *sq* is
        occupied.
        """
        board = self._board
        for from_sq, piece in board.squares():
            if piece.color != by_color:
                continue
            if piece.piece_type == PieceType.PAWN:
                if sq in _pawn_attacks(from_sq, by_color):
                    return True
                continue
            if sq in _GENERATORS[piece.piece_type](board, from_sq, piece, None):
                return True
        return False

    # -- Castling -----------------------------------------------------------

    def castling_destination(self, color: Color, side: CastleSide) -> Square | None:
        """King destination when castling on *side* is legal, else ``None``."""
        board = self._board
        king_sq = self._king_home(color)
        _, empty_files, transit_file, target_file = CASTLING_FILES[side]

        if not self.castling_right(color, side):
            return None
        if any(not board.is_empty(Square(king_sq.rank, f)) for f in empty_files):
            return None
        if self.is_in_check(color):
            return None

        opponent = color.opposite
        transit = Square(king_sq.rank, transit_file)
        target = Square(king_sq.rank, target_file)
        if self.is_square_attacked(transit, opponent):
            return None
        if self.is_square_attacked(target, opponent):
            return None
        return target

    def castling_right(self, color: Color, side: CastleSide) -> bool:
        """King and the *side* rook are both unmoved on their home squares."""
        board = self._board
        king_sq = self._king_home(color)
        rook_sq = Square(king_sq.rank, CASTLING_FILES[side][0])
        king = board[king_sq]
        rook = board[rook_sq]
        return (
            king is not None
            and king.color == color
            and king.piece_type == PieceType.KING
            and _on_start(king, king_sq)
            and rook is not None
            and rook.color == color
            and rook.piece_type == PieceType.ROOK
            and _on_start(rook, rook_sq)
        )

    def en_passant_captures(self, color: Color) -> set[Square]:
        """En-passant destinations *color* could legally play right now."""
        captures: set[Square] = set()
        for sq, piece in self._board.squares():
            if piece.kind != (color, PieceType.PAWN):
                continue
            target = _en_passant_target(self._board, sq, piece, self._last_move)
            if target is not None and target in self.legal_moves(sq):
                captures.add(target)
        return captures

    @staticmethod
    def _king_home(color: Color) -> Square:
        return Square(color.back_rank, KING_FILE)
