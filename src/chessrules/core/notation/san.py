"""Algebraic move notation: token parsing and rendering.

Internal notation differs from PGN in three places: castles use zeros
(``0-0``), promotions carry no ``=`` (``e8Q``) and en passant captures are
annotated (``exd6 e.p.``). :mod:`chessrules.core.notation.pgn` translates at
the movetext boundary.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.errors import InvalidMoveError, PromotionRequiredError
from chessrules.core.piece import SAN_LETTERS, SAN_PIECES
from chessrules.core.types import FILES, RANKS, Square, notation_to_square, square_name

CASTLE_TOKENS: dict[str, CastleSide] = {
    "0-0": CastleSide.KINGSIDE,
    "O-O": CastleSide.KINGSIDE,
    "0-0-0": CastleSide.QUEENSIDE,
    "O-O-O": CastleSide.QUEENSIDE,
}
CASTLE_NOTATION: dict[CastleSide, str] = {
    CastleSide.KINGSIDE: "0-0",
    CastleSide.QUEENSIDE: "0-0-0",
}
PROMOTION_PIECES: dict[str, PieceType] = {
    letter: SAN_PIECES[letter] for letter in "QRBN"
}
EN_PASSANT_SUFFIX = " e.p."

_PROMOTION_RE = re.compile(r"^(?:([a-h])x?)?([a-h][18])=?([QRBN])?$")
_PAWN_RE = re.compile(r"^(?:([a-h])x)?([a-h][1-8])$")
_ANNOTATION_CHARS = "+#!?"


# ── Parsed intents ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CastleIntent:
    side: CastleSide


@dataclass(frozen=True, slots=True)
class PawnIntent:
    target: Square
    from_file: int | None = None


@dataclass(frozen=True, slots=True)
class PromotionIntent:
    target: Square
    promotion: PieceType
    from_file: int | None = None


@dataclass(frozen=True, slots=True)
class PieceIntent:
    piece_type: PieceType
    target: Square
    from_file: int | None = None
    from_rank: int | None = None


MoveIntent = CastleIntent | PawnIntent | PromotionIntent | PieceIntent


# ── Parsing ─────────────────────────────────────────────────────────────────


def clean_token(token: str) -> str:
    """Trim whitespace, check/mate marks and annotation glyphs."""
    clean = token.strip().rstrip(_ANNOTATION_CHARS)
    if clean.endswith(EN_PASSANT_SUFFIX):
        clean = clean[: -len(EN_PASSANT_SUFFIX)].rstrip()
    return clean.rstrip(_ANNOTATION_CHARS)


def _square(text: str, token: str) -> Square:
    try:
        return notation_to_square(text)
    except ValueError:
        raise InvalidMoveError(f"Invalid move: {token!r}.", token) from None


def _file_index(letter: str | None) -> int | None:
    return None if letter is None else FILES.index(letter)


def parse_move(token: str, color: Color) -> MoveIntent:
    """Interpret the shape of a move *token* played by *color*.

    Raises :class:`InvalidMoveError` for unrecognised shapes and
    :class:`PromotionRequiredError` for a pawn reaching the last rank
    without a promotion letter.
    """
    clean = clean_token(token)
    if not clean:
        raise InvalidMoveError("Invalid move: empty input.", token)

    side = CASTLE_TOKENS.get(clean)
    if side is not None:
        return CastleIntent(side)

    match = _PROMOTION_RE.match(clean)
    if match is not None:
        from_file, target_text, letter = match.groups()
        target = _square(target_text, token)
        if target.rank == color.opposite.back_rank:
            if letter is None:
                example = (from_file + "x" if from_file else "") + target_text
                raise PromotionRequiredError(
                    f"Specify a promotion piece, e.g. {example}Q "
                    f"(Q, R, B or N).",
                    token,
                )
            return PromotionIntent(
                target, PROMOTION_PIECES[letter], _file_index(from_file)
            )

    match = _PAWN_RE.match(clean)
    if match is not None:
        from_file, target_text = match.groups()
        return PawnIntent(_square(target_text, token), _file_index(from_file))

    if clean[0] in SAN_PIECES:
        return _parse_piece_move(clean, token)

    raise InvalidMoveError(f"Invalid move: {token!r}.", token)


def _parse_piece_move(clean: str, token: str) -> PieceIntent:
    piece_type = SAN_PIECES[clean[0]]
    rest = clean[1:].replace("x", "")
    if not 2 <= len(rest) <= 4:
        raise InvalidMoveError(f"Invalid move: {token!r}.", token)

    target = _square(rest[-2:], token)
    hint = rest[:-2]
    from_file: int | None = None
    from_rank: int | None = None
    if len(hint) == 2:
        source = _square(hint, token)
        from_file, from_rank = source.file, source.rank
    elif len(hint) == 1:
        if hint in FILES:
            from_file = FILES.index(hint)
        elif hint in RANKS:
            from_rank = RANKS.index(hint)
        else:
            raise InvalidMoveError(f"Invalid move: {token!r}.", token)
    return PieceIntent(piece_type, target, from_file, from_rank)


# ── Rendering ───────────────────────────────────────────────────────────────


def disambiguation_candidates(from_sq: Square) -> Iterator[str]:
    """Disambiguation strings from least to most specific."""
    yield ""
    yield FILES[from_sq.file]
    yield square_name(from_sq)


def intent_from_disambiguation(
    piece_type: PieceType, target: Square, hint: str
) -> PieceIntent:
    """Inverse of :func:`disambiguation_candidates` for one candidate."""
    if not hint:
        return PieceIntent(piece_type, target)
    if len(hint) == 2:
        source = notation_to_square(hint)
        return PieceIntent(piece_type, target, source.file, source.rank)
    if hint in FILES:
        return PieceIntent(piece_type, target, from_file=FILES.index(hint))
    if hint in RANKS:
        return PieceIntent(piece_type, target, from_rank=RANKS.index(hint))
    return PieceIntent(piece_type, target)


def render_move(
    piece_type: PieceType,
    from_sq: Square,
    to_sq: Square,
    *,
    capture: bool = False,
    disambiguation: str = "",
    promotion: PieceType | None = None,
    en_passant: bool = False,
) -> str:
    """Internal notation for a resolved, non-castling move."""
    target = square_name(to_sq)
    if piece_type == PieceType.PAWN:
        text = FILES[from_sq.file] + "x" + target if capture else target
        if promotion is not None:
            text += SAN_LETTERS[promotion]
        if en_passant:
            text += EN_PASSANT_SUFFIX
        return text

    text = SAN_LETTERS[piece_type] + disambiguation
    if capture:
        text += "x"
    return text + target


def render_castle(side: CastleSide) -> str:
    return CASTLE_NOTATION[side]


def check_suffix(in_check: bool, mated: bool) -> str:
    if mated:
        return "#"
    if in_check:
        return "+"
    return ""


def with_check_suffix(notation: str, suffix: str) -> str:
    """Insert ``+``/``#`` before a trailing en-passant annotation."""
    if notation.endswith(EN_PASSANT_SUFFIX):
        base = notation[: -len(EN_PASSANT_SUFFIX)]
        return base + suffix + EN_PASSANT_SUFFIX
    return notation + suffix
