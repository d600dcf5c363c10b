"""tictactoe_vm package.

Pure board/history reducers and the reactive view-model (built on
reactivex) that folds click events into GameState snapshots.

Convenience imports are exposed for common workflows.
"""

from .board import calculate_winner, click_square, empty_board
from .history import append_move, next_move_player, truncate_to_move
from .streams import ClickSubject, first_value, last_value
from .viewmodel import GameState, GameViewModel, game_view_model, replay_events

__all__ = [
    "calculate_winner",
    "click_square",
    "empty_board",
    "append_move",
    "next_move_player",
    "truncate_to_move",
    "ClickSubject",
    "first_value",
    "last_value",
    "GameState",
    "GameViewModel",
    "game_view_model",
    "replay_events",
]
