"""
History reducers over the append-only sequence of board snapshots.
Notes:
- history[0] is always the empty board; history[i] is the board after move i.
- Reducers never mutate; they return either the same tuple or a new one.
"""
from typing import Tuple

from .board import Board, O, X, click_square, empty_board

History = Tuple[Board, ...]


def initial_history() -> History:
    return (empty_board(),)


def next_move_player(history: History) -> str:
    return X if len(history) % 2 == 1 else O


def append_move(history: History, square: int) -> History:
    board = history[-1]
    new_board = click_square(board, next_move_player(history), square)
    if new_board is board:
        return history
    return history + (new_board,)


def truncate_to_move(history: History, move: int) -> History:
    """Rewind to ``move``, keeping snapshots 0..move inclusive."""
    if isinstance(move, bool) or not isinstance(move, int):
        raise ValueError(f"Move index must be an integer, got {move!r}")
    if not 0 <= move < len(history):
        raise ValueError(f"Move index out of range [0, {len(history) - 1}]: {move}")
    return history[:move + 1]
