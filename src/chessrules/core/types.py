"""Square type and coordinate helpers.

Squares are ``(rank, file)`` pairs, both 0-7:
    rank 0 is row "1", file 0 is column "a" (a1 = (0, 0), h8 = (7, 7)).
"""

from __future__ import annotations

from typing import NamedTuple

FILES = "abcdefgh"
RANKS = "12345678"


class Square(NamedTuple):
    rank: int
    file: int

    def __str__(self) -> str:
        return square_to_notation(self.rank, self.file)

    def offset(self, d_rank: int, d_file: int) -> Square | None:
        """Square shifted by the given deltas, or ``None`` when off the board."""
        rank = self.rank + d_rank
        file = self.file + d_file
        if is_on_board(rank, file):
            return Square(rank, file)
        return None


def is_on_board(rank: int, file: int) -> bool:
    return 0 <= rank < 8 and 0 <= file < 8


def square_to_notation(rank: int, file: int) -> str:
    """Two-character name, e.g. ``(3, 4)`` -> ``'e4'``."""
    if not is_on_board(rank, file):
        raise ValueError(f"Invalid indices for chessboard square: [{rank}, {file}]")
    return FILES[file] + RANKS[rank]


def notation_to_square(name: str) -> Square:
    """Parse square name, e.g. ``'e4'`` -> ``Square(3, 4)``."""
    if len(name) != 2:
        raise ValueError(f"Invalid notation for chessboard square: {name}")
    file = FILES.find(name[0].lower())
    if file < 0 or name[1] not in RANKS:
        raise ValueError(f"Invalid notation for chessboard square: {name}")
    return Square(RANKS.index(name[1]), file)


def square_name(sq: Square) -> str:
    return square_to_notation(sq.rank, sq.file)


def as_square(value: Square | str) -> Square:
    """Accept either a :class:`Square` or its two-character name."""
    if isinstance(value, str):
        return notation_to_square(value)
    return Square(*value)


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = (Square(0, f) for f in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Square(1, f) for f in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Square(2, f) for f in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Square(3, f) for f in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Square(4, f) for f in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Square(5, f) for f in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Square(6, f) for f in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = (Square(7, f) for f in range(8))
