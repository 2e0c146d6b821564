"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import MissingKingError
from chessrules.core.piece import Piece
from chessrules.core.types import Square

Layout = tuple[tuple[Color, PieceType] | None, ...]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 8x8 grid of optional pieces, indexed by :class:`Square`.

    The grid is the single source of truth for where a piece stands.
    """

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._grid[sq[0]][sq[1]]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._grid[sq[0]][sq[1]] = piece

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def squares(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares with their pieces, a1 first, rank by rank."""
        for rank, row in enumerate(self._grid):
            for file, piece in enumerate(row):
                if piece is not None:
                    yield Square(rank, file), piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq
            for sq, piece in self.squares()
            if piece.color == color and piece.piece_type == piece_type
        ]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.squares() if piece.color == color]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        kings = self.pieces(color, PieceType.KING)
        if not kings:
            raise MissingKingError(f"No {color.name} king on board")
        return kings[0]

    def layout(self) -> Layout:
        """Hashable content of every square, a1..h8."""
        return tuple(
            None if piece is None else piece.kind for row in self._grid for piece in row
        )

    # -- Mutation / copying -------------------------------------------------

    def move_piece(self, src: Square, dst: Square) -> Piece | None:
        """Relocate the piece on *src* to *dst*; return what stood on *dst*."""
        piece = self[src]
        if piece is None:
            raise ValueError(f"No piece on {src}")
        captured = self[dst]
        self[dst] = piece
        self[src] = None
        if piece.starting_square is not None and dst != piece.starting_square:
            piece.moved = True
        return captured

    def copy(self) -> Board:
        """Deep copy: every piece is duplicated, history flags included."""
        b = Board()
        b._grid = [[None if p is None else p.copy() for p in row] for row in self._grid]
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            for color, rank in ((Color.WHITE, 1), (Color.BLACK, 6)):
                sq = Square(rank, f)
                b[sq] = Piece(color, PieceType.PAWN).placed_at(sq)

        for f, pt in enumerate(_BACK_RANK):
            for color in Color:
                sq = Square(color.back_rank, f)
                b[sq] = Piece(color, pt).placed_at(sq)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.layout() == other.layout()

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[Square(rank, file)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
