"""Game layer: the :class:`Chessboard` aggregate and its records.

Quick start::

    from chessrules.game import Chessboard
    from chessrules.core import Color

    game = Chessboard()
    game.move("e4", Color.WHITE)
    game.move("e5", Color.BLACK)
    print(game.to_movetext())  # 1.e4 e5
"""

from chessrules.game.chessboard import Chessboard
from chessrules.game.records import MoveRecord, MoveResult

__all__ = [
    "Chessboard",
    "MoveRecord",
    "MoveResult",
]
