"""Text rendering of GameState for terminal drivers."""
from __future__ import annotations

from typing import List

from .board import Board
from .viewmodel import GameState


def status_line(state: GameState) -> str:
    if state.winner is not None:
        return f"Winner: {state.winner}"
    return f"Next player: {state.next_player}"


def move_label(move: int) -> str:
    return f"Move #{move}" if move else "Game start"


def move_labels(state: GameState) -> List[str]:
    return [move_label(i) for i in range(len(state.history))]


def render_board(board: Board) -> str:
    """Three rows; empty cells show their index so they can be typed."""
    cells = [cell if cell is not None else str(i) for i, cell in enumerate(board)]
    rows = [" | ".join(cells[r:r + 3]) for r in range(0, 9, 3)]
    return "\n---------\n".join(rows)


def render_state(state: GameState) -> str:
    lines = [render_board(state.current_board), "", status_line(state)]
    lines.extend(f"  m{i}: {label}" for i, label in enumerate(move_labels(state)))
    return "\n".join(lines)
