"""Value objects returned by the game layer."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import CastleSide, Color, DrawReason, PieceType
from chessrules.core.errors import MoveError
from chessrules.core.types import Square


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single applied half-move."""

    number: int
    color: Color
    notation: str
    piece_type: PieceType
    from_sq: Square
    to_sq: Square
    captured: PieceType | None = None
    promotion: PieceType | None = None
    castle: CastleSide | None = None
    en_passant: bool = False
    check: bool = False
    checkmate: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of :meth:`Chessboard.move`.

    Truthy when the move was applied. A rejected move carries the error and
    its message and left the game untouched.
    """

    success: bool
    record: MoveRecord | None = None
    message: str = ""
    error: MoveError | None = None
    stalemate: bool = False
    draw: DrawReason | None = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def notation(self) -> str | None:
        return None if self.record is None else self.record.notation

    @property
    def check(self) -> bool:
        return self.record is not None and self.record.check

    @property
    def checkmate(self) -> bool:
        return self.record is not None and self.record.checkmate

    @classmethod
    def rejected(cls, error: MoveError) -> MoveResult:
        return cls(success=False, message=str(error), error=error)
