"""FEN parsing and serialization."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.move_generator import CASTLING_FILES, KING_FILE, LastMove
from chessrules.core.piece import Piece
from chessrules.core.types import Square, notation_to_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_LETTERS: dict[str, tuple[Color, CastleSide]] = {
    "K": (Color.WHITE, CastleSide.KINGSIDE),
    "Q": (Color.WHITE, CastleSide.QUEENSIDE),
    "k": (Color.BLACK, CastleSide.KINGSIDE),
    "q": (Color.BLACK, CastleSide.QUEENSIDE),
}
_LETTER_FOR_RIGHT = {v: k for k, v in _CASTLING_LETTERS.items()}


@dataclass(slots=True)
class FenSetup:
    """Everything a FEN record says about a position."""

    board: Board
    side_to_move: Color
    castling: frozenset[tuple[Color, CastleSide]]
    last_move: LastMove | None
    halfmove_clock: int
    fullmove_number: int


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[Square(rank, file)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    for color in Color:
        if len(board.pieces(color, PieceType.KING)) != 1:
            raise ValueError(
                f"Invalid FEN: {color} must have exactly one king: {fen!r}"
            )
    return board


def _mark_home_squares(
    board: Board, castling: frozenset[tuple[Color, CastleSide]]
) -> None:
    """Give pieces their starting squares and moved flags.

    Pawns on their initial rank are treated as unmoved. Kings and rooks are
    unmoved only where the castling field keeps a right alive.
    """
    for sq, piece in board.squares():
        if piece.piece_type == PieceType.PAWN:
            if sq.rank == piece.color.back_rank + piece.color.forward:
                piece.placed_at(sq)

    for color in Color:
        king_sq = Square(color.back_rank, KING_FILE)
        king = board[king_sq]
        sides = [side for side in CastleSide if (color, side) in castling]
        if not sides:
            continue
        if king is None or king.kind != (color, PieceType.KING):
            raise ValueError(
                f"Invalid FEN castling field: no {color} king on {king_sq}"
            )
        king.placed_at(king_sq)
        for side in sides:
            rook_sq = Square(color.back_rank, CASTLING_FILES[side][0])
            rook = board[rook_sq]
            if rook is None or rook.kind != (color, PieceType.ROOK):
                raise ValueError(
                    f"Invalid FEN castling field: no {color} rook on {rook_sq}"
                )
            rook.placed_at(rook_sq)


def parse_fen(fen: str) -> FenSetup:
    """Parse a FEN string into a :class:`FenSetup`."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    board = _parse_placement(placement, fen)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    rights: set[tuple[Color, CastleSide]] = set()
    if castling_part != "-":
        for ch in castling_part:
            right = _CASTLING_LETTERS.get(ch)
            if right is None or right in rights:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            rights.add(right)
    castling = frozenset(rights)
    _mark_home_squares(board, castling)

    # 4. En passant, rebuilt as the double step that allowed it
    last_move: LastMove | None = None
    if ep_part != "-":
        try:
            ep = notation_to_square(ep_part)
        except ValueError:
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}") from None
        mover = side.opposite
        if ep.rank != mover.back_rank + 2 * mover.forward:
            raise ValueError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )
        from_sq = Square(ep.rank - mover.forward, ep.file)
        to_sq = Square(ep.rank + mover.forward, ep.file)
        pawn = board[to_sq]
        if pawn is None or pawn.kind != (mover, PieceType.PAWN):
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}")
        pawn.starting_square = from_sq
        pawn.moved = True
        last_move = LastMove(mover, PieceType.PAWN, from_sq, to_sq)

    # 5–6. Clocks (optional)
    try:
        halfmove = int(parts[4]) if len(parts) > 4 else 0
        fullmove = int(parts[5]) if len(parts) > 5 else 1
    except ValueError:
        raise ValueError(f"Invalid FEN clock fields: {fen!r}") from None
    if halfmove < 0:
        raise ValueError(f"Invalid FEN halfmove clock: {parts[4]!r}")
    if fullmove < 1:
        raise ValueError(f"Invalid FEN fullmove number: {parts[5]!r}")

    return FenSetup(board, side, castling, last_move, halfmove, fullmove)


def board_to_fen_placement(board: Board) -> str:
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[Square(rank, file)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def to_fen(setup: FenSetup) -> str:
    """Serialise a :class:`FenSetup` to FEN."""
    board_str = board_to_fen_placement(setup.board)
    side_str = "w" if setup.side_to_move == Color.WHITE else "b"

    castling_str = "".join(
        _LETTER_FOR_RIGHT[right]
        for right in sorted(setup.castling)
    ) or "-"

    ep_str = "-"
    last = setup.last_move
    if last is not None and last.is_double_step:
        ep_str = square_name(
            Square((last.from_sq.rank + last.to_sq.rank) // 2, last.from_sq.file)
        )

    return (
        f"{board_str} {side_str} {castling_str} {ep_str} "
        f"{setup.halfmove_clock} {setup.fullmove_number}"
    )
