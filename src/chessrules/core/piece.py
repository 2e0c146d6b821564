"""Piece model."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessrules.core.enums import Color, PieceType
from chessrules.core.types import Square

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}

SAN_LETTERS: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
SAN_PIECES: dict[str, PieceType] = {v: k for k, v in SAN_LETTERS.items()}

# Piece kinds whose first move changes what they may do later.
TRACKS_START: frozenset[PieceType] = frozenset(
    {PieceType.PAWN, PieceType.ROOK, PieceType.KING}
)


@dataclass(slots=True)
class Piece:
    """A chess piece owned by exactly one board square.

    Only pawns, rooks and kings carry a *starting_square*; ``moved`` records
    whether the piece ever left it (double steps and castling rights depend
    on it). Equality looks at color and kind only.
    """

    color: Color
    piece_type: PieceType
    starting_square: Square | None = field(default=None, compare=False)
    moved: bool = field(default=False, compare=False)

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.piece_type)]

    @property
    def letter(self) -> str:
        """SAN piece letter; empty for pawns."""
        return SAN_LETTERS.get(self.piece_type, "")

    @property
    def kind(self) -> tuple[Color, PieceType]:
        return (self.color, self.piece_type)

    # ── Movement bookkeeping ─────────────────────────────────────────────

    def placed_at(self, square: Square) -> Piece:
        """Mark *square* as the home square for kinds that track one."""
        if self.piece_type in TRACKS_START:
            self.starting_square = square
        return self

    def copy(self) -> Piece:
        return Piece(self.color, self.piece_type, self.starting_square, self.moved)
