"""PGN movetext parsing and serialisation.

Only movetext matters here: tag pairs, comments, variations, NAGs and
result tokens are read past and never produced.
"""

from __future__ import annotations

import re

from chessrules.core.notation.san import EN_PASSANT_SUFFIX

_TAG_LINE_RE = re.compile(r"^\s*\[[^\]]*\]\s*$")
_MOVE_NUMBER_RE = re.compile(r"(?<![\w.\-/])(\d+)\.+")
_PGN_RESULT_TOKENS = {"1-0", "0-1", "1/2-1/2", "*"}
_PROMOTION_RE = re.compile(r"^((?:[a-h]x?)?[a-h][18])=?([QRBN])")
_CASTLE_RE = re.compile(r"^[0O]-[0O](?:-[0O])?(?=$|[+#!?])")


def strip_tags(text: str) -> str:
    """Drop ``[Key "Value"]`` tag-pair lines."""
    return "\n".join(
        line for line in text.splitlines() if not _TAG_LINE_RE.match(line)
    )


def strip_spans(text: str, opening: str, closing: str) -> str:
    """Erase every balanced ``opening ... closing`` range, nesting included.

    Start offsets are kept on a stack; a closing delimiter with no pending
    start, or a start that is never closed, is left in the text untouched.
    """
    starts: list[int] = []
    ranges: list[tuple[int, int]] = []
    for idx, ch in enumerate(text):
        if ch == opening:
            starts.append(idx)
        elif ch == closing and starts:
            ranges.append((starts.pop(), idx + 1))

    if not ranges:
        return text

    erased = [False] * len(text)
    for start, end in ranges:
        for idx in range(start, end):
            erased[idx] = True
    return "".join(" " if gone else ch for ch, gone in zip(text, erased))


def _to_internal(token: str) -> str:
    if _CASTLE_RE.match(token):
        token = token.replace("O", "0")
    return token.replace("=", "")


def _is_move_token(token: str) -> bool:
    if token in _PGN_RESULT_TOKENS or token == "e.p.":
        return False
    if token.startswith("$"):
        return False
    return bool(token.strip("."))


def parse_movetext(text: str) -> list[list[str]]:
    """Split PGN text into move pairs in internal notation.

    Each pair holds the white and (if played) black half-move of one move
    number. ``3...`` continuations are folded into the pair of move 3.
    """
    body = strip_tags(text)
    body = strip_spans(body, "{", "}")
    body = strip_spans(body, "(", ")")
    body = "\n".join(
        line.split(";", 1)[0] for line in body.splitlines() if not line.startswith("%")
    )

    pairs: list[list[str]] = []
    numbers: list[int] = []
    markers = list(_MOVE_NUMBER_RE.finditer(body))
    for idx, marker in enumerate(markers):
        end = markers[idx + 1].start() if idx + 1 < len(markers) else len(body)
        tokens = [
            _to_internal(tok)
            for tok in body[marker.end() : end].split()
            if _is_move_token(tok)
        ]
        if not tokens:
            continue

        number = int(marker.group(1))
        if numbers and numbers[-1] == number and len(pairs[-1]) == 1:
            pairs[-1].extend(tokens[:1])
            continue
        pairs.append(tokens[:2])
        numbers.append(number)
    return pairs


def _to_pgn(notation: str) -> str:
    if notation.endswith(EN_PASSANT_SUFFIX):
        notation = notation[: -len(EN_PASSANT_SUFFIX)]
    if _CASTLE_RE.match(notation):
        return notation.replace("0", "O")
    return _PROMOTION_RE.sub(r"\1=\2", notation, count=1)


def movetext_from_moves(moves: list[list[str]] | tuple[tuple[str, ...], ...]) -> str:
    """Render move pairs as ``1.e4 e5 2.Nf3 ...`` movetext."""
    parts: list[str] = []
    for number, pair in enumerate(moves, start=1):
        half_moves = [_to_pgn(notation) for notation in pair]
        parts.append(f"{number}.{' '.join(half_moves)}")
    return " ".join(parts)
