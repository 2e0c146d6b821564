"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import Color, DrawReason, PieceType
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import PositionSnapshot

_MINOR_PIECES: frozenset[PieceType] = frozenset({PieceType.BISHOP, PieceType.KNIGHT})


@dataclass(frozen=True, slots=True)
class DrawPolicy:
    """Thresholds for move-count and repetition draws.

    Move limits count full moves by each side since the last capture or pawn
    move.

    Args:
        claim_move_limit: A player may claim a draw from this count on.
        automatic_move_limit: The game is drawn without a claim.
        claim_repetitions: Occurrences of one position that allow a claim.
        automatic_repetitions: Occurrences that end the game outright.
    """

    claim_move_limit: int = 50
    automatic_move_limit: int = 75
    claim_repetitions: int = 3
    automatic_repetitions: int = 5

    def __post_init__(self) -> None:
        if self.claim_move_limit > self.automatic_move_limit:
            raise ValueError("claim_move_limit must not exceed automatic_move_limit")
        if self.claim_repetitions > self.automatic_repetitions:
            raise ValueError(
                "claim_repetitions must not exceed automatic_repetitions"
            )
        if self.claim_repetitions < 2:
            raise ValueError("claim_repetitions must be at least 2")

    @classmethod
    def fide(cls) -> DrawPolicy:
        return cls()

    @classmethod
    def claims_only(cls) -> DrawPolicy:
        """Never end a game automatically on counts; players must claim."""
        return cls(automatic_move_limit=10**9, automatic_repetitions=10**9)


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # Product policy (see DrawPolicy for the thresholds):
    # - Claim-based draws: 50-move rule, threefold repetition.
    # - Automatic draws: dead position, 75-move rule, fivefold repetition.

    @staticmethod
    def is_checkmate(gen: MoveGenerator, color: Color) -> bool:
        return gen.is_in_check(color) and not gen.has_moves(color)

    @staticmethod
    def is_stalemate(gen: MoveGenerator, color: Color) -> bool:
        return not gen.is_in_check(color) and not gen.has_moves(color)

    @staticmethod
    def is_dead_position(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K.

        Deliberately partial: K+B vs K+B on same-colored squares, blocked
        pawn chains and other fortresses are not detected.
        """
        material: dict[Color, list[PieceType]] = {color: [] for color in Color}
        for _, piece in board.squares():
            if piece.piece_type != PieceType.KING:
                material[piece.color].append(piece.piece_type)

        white, black = material[Color.WHITE], material[Color.BLACK]
        if not white and not black:
            return True
        for lone, other in ((white, black), (black, white)):
            if not lone and len(other) == 1 and other[0] in _MINOR_PIECES:
                return True
        return False

    @staticmethod
    def moves_since_capture_or_pawn_move(counters: Sequence[int]) -> int:
        return min(counters)

    @staticmethod
    def nfold_repetition(snapshots: Sequence[PositionSnapshot], n: int) -> bool:
        """The latest snapshot equals at least ``n - 1`` earlier ones."""
        if n < 1:
            raise ValueError(f"Repetition count must be positive, got {n}")
        if not snapshots:
            return False
        latest = snapshots[-1]
        earlier = sum(1 for snap in snapshots[:-1] if snap == latest)
        return earlier >= n - 1

    @staticmethod
    def claimable_draw(
        policy: DrawPolicy,
        move_count: int,
        snapshots: Sequence[PositionSnapshot],
    ) -> DrawReason | None:
        """Draw a player may claim, if any."""
        if move_count >= policy.claim_move_limit:
            return DrawReason.FIFTY_MOVES
        if Rules.nfold_repetition(snapshots, policy.claim_repetitions):
            return DrawReason.THREEFOLD_REPETITION
        return None

    @staticmethod
    def automatic_draw(
        policy: DrawPolicy,
        board: Board,
        move_count: int,
        snapshots: Sequence[PositionSnapshot],
    ) -> DrawReason | None:
        """Draw that ends the game without a claim, if any (stalemate aside)."""
        if Rules.is_dead_position(board):
            return DrawReason.DEAD_POSITION
        if move_count >= policy.automatic_move_limit:
            return DrawReason.SEVENTY_FIVE_MOVES
        if Rules.nfold_repetition(snapshots, policy.automatic_repetitions):
            return DrawReason.FIVEFOLD_REPETITION
        return None
