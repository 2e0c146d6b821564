"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chessrules.game import Chessboard, MoveRecord


@pytest.fixture
def game() -> Chessboard:
    """A fresh game from the standard starting position."""
    return Chessboard()


@pytest.fixture
def play() -> Callable[..., list[MoveRecord]]:
    """Play alternating half-moves on a game, side to move first."""

    def _play(board: Chessboard, *tokens: str) -> list[MoveRecord]:
        records: list[MoveRecord] = []
        for token in tokens:
            records.append(board.apply(token, board.side_to_move))
        return records

    return _play

