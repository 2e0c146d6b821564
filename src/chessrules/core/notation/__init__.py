"""Notation package: move tokens, PGN movetext and FEN."""

from chessrules.core.notation.fen import (
    STARTING_FEN,
    FenSetup,
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
    MoveIntent,
    PawnIntent,
    PieceIntent,
    PromotionIntent,
    parse_move,
    render_move,
)

__all__ = [
    "STARTING_FEN",
    "FenSetup",
    "board_to_fen_placement",
    "parse_fen",
    "to_fen",
    "movetext_from_moves",
    "parse_movetext",
    "strip_spans",
    "strip_tags",
    "CastleIntent",
    "MoveIntent",
    "PawnIntent",
    "PieceIntent",
    "PromotionIntent",
    "parse_move",
    "render_move",
]
