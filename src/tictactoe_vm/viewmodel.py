"""
Reactive view-model: turns square-click and move-click event streams into a
stream of GameState snapshots.

Pipeline (per subscription):
    click_square -> append_move reducers --+
                                           +-- merge -> observe_on(trampoline)
    click_move   -> truncate reducers -----+      -> start_with(identity)
                                                  -> scan(initial_history)
                                                  -> map(derive_game_state)

Every reducer produces exactly one GameState, including no-op clicks.
Events delivered at the same instant are applied in delivery order; events
pushed while a state is being delivered wait on the current-thread
trampoline and are applied FIFO afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import reactivex
from reactivex import Observable
from reactivex import operators as ops
from reactivex.scheduler import CurrentThreadScheduler
from reactivex.subject import Subject

from .board import Board, calculate_winner
from .history import History, append_move, initial_history, next_move_player, truncate_to_move
from .streams import ClickSubject

Reducer = Callable[[History], History]


@dataclass(frozen=True)
class GameState:
    history: History
    current_board: Board
    winner: Optional[str]
    next_player: str


def derive_game_state(history: History) -> GameState:
    current_board = history[-1]
    return GameState(
        history=history,
        current_board=current_board,
        winner=calculate_winner(current_board),
        next_player=next_move_player(history),
    )


def make_click_square_reducer(square: int) -> Reducer:
    def click_square_reducer(history: History) -> History:
        return append_move(history, square)
    return click_square_reducer


def make_click_move_reducer(move: int) -> Reducer:
    def click_move_reducer(history: History) -> History:
        return truncate_to_move(history, move)
    return click_move_reducer


def identity_reducer(history: History) -> History:
    return history


def _apply(history: History, reducer: Reducer) -> History:
    new_history = reducer(history)
    logging.debug("%s: history %d -> %d", reducer.__name__, len(history), len(new_history))
    return new_history


def game_view_model(click_square: Observable[int], click_move: Observable[int]) -> Observable[GameState]:
    """Build the GameState stream for the given input streams.

    Each subscription folds independently from the empty board.
    """
    click_square_reducers = click_square.pipe(ops.map(make_click_square_reducer))
    click_move_reducers = click_move.pipe(ops.map(make_click_move_reducer))

    return reactivex.merge(click_square_reducers, click_move_reducers).pipe(
        ops.observe_on(CurrentThreadScheduler.singleton()),
        ops.start_with(identity_reducer),
        ops.scan(_apply, initial_history()),
        ops.map(derive_game_state),
    )


SQUARE = "square"
MOVE = "move"


def replay_events(events: Iterable[Tuple[str, int]]) -> List[GameState]:
    """Feed ``(kind, index)`` events through a fresh view-model.

    Returns every emitted GameState, the initial one included. A reducer
    error (out-of-range index) is re-raised after the session ends.
    """
    vm = GameViewModel()
    states: List[GameState] = []
    errors: List[BaseException] = []
    vm.state.subscribe(states.append, errors.append)
    for kind, index in events:
        if kind == SQUARE:
            vm.click_square.on_next(index)
        elif kind == MOVE:
            vm.click_move.on_next(index)
        else:
            raise ValueError(f"Unknown event kind: {kind!r}")
    vm.close()
    if errors:
        raise errors[0]
    return states


class GameViewModel:
    """Bundles the two input subjects with the derived state stream.

    Drivers push events with ``click_square.on_next(i)`` and
    ``click_move.on_next(i)`` and subscribe to ``state``.
    """

    def __init__(
        self,
        click_square: Optional[Subject[int]] = None,
        click_move: Optional[Subject[int]] = None,
    ) -> None:
        self.click_square = click_square if click_square is not None else ClickSubject()
        self.click_move = click_move if click_move is not None else ClickSubject()
        self.state = game_view_model(self.click_square, self.click_move)

    def close(self) -> None:
        """Complete both inputs; the state stream completes with them."""
        self.click_square.on_completed()
        self.click_move.on_completed()
