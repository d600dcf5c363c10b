import reactivex
from reactivex.testing import ReactiveTest, TestScheduler
from reactivex.testing.marbles import marbles_testing

from tictactoe_vm.board import O, X, calculate_winner, empty_board
from tictactoe_vm.viewmodel import GameState, game_view_model

on_next = ReactiveTest.on_next
on_completed = ReactiveTest.on_completed
subscribe = ReactiveTest.subscribe

EMPTY = empty_board()


def board_with(**cells):
    b = list(EMPTY)
    for k, v in cells.items():
        b[int(k[1:])] = v
    return tuple(b)


def state(*history):
    board = history[-1]
    return GameState(
        history=tuple(history),
        current_board=board,
        winner=calculate_winner(board),
        next_player=X if len(history) % 2 == 1 else O,
    )


INITIAL = state(EMPTY)


def values(results):
    return [m.value.value for m in results.messages if m.value.kind == "N"]


def test_starts_with_empty_board_no_winner_and_x_next():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable()
    click_move = scheduler.create_hot_observable()

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    assert results.messages == [on_next(200, INITIAL)]


def test_places_x_on_first_square_clicked():
    with marbles_testing() as (start, cold, hot, exp):
        click_square = hot("--f", lookup={"f": 5})
        expected = exp("a-b", lookup={"a": INITIAL, "b": state(EMPTY, board_with(c5=X))})
        results = start(game_view_model(click_square, reactivex.never()))
        assert results == expected


def test_every_event_emits_even_when_ignored():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(on_next(210, 4), on_next(230, 4))
    click_move = scheduler.create_hot_observable(on_next(250, 1), on_next(270, 0))

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    after = state(EMPTY, board_with(c4=X))
    assert results.messages == [
        on_next(200, INITIAL),
        on_next(210, after),
        on_next(230, after),
        on_next(250, after),
        on_next(270, INITIAL),
    ]


def test_detects_winner_in_virtual_time():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(
        on_next(210, 0), on_next(220, 3), on_next(230, 1),
        on_next(240, 4), on_next(250, 2), on_next(260, 8),
    )

    results = scheduler.start(lambda: game_view_model(click_square, reactivex.never()))
    assert [s.winner for s in values(results)] == [None, None, None, None, None, X, X]


def test_same_frame_square_source_created_first_wins():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(on_next(210, 0))
    click_move = scheduler.create_hot_observable(on_next(210, 0))

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    clicked = state(EMPTY, board_with(c0=X))
    assert results.messages == [
        on_next(200, INITIAL),
        on_next(210, clicked),
        on_next(210, INITIAL),
    ]


def test_same_frame_move_source_created_first_wins():
    scheduler = TestScheduler()
    click_move = scheduler.create_hot_observable(on_next(210, 0))
    click_square = scheduler.create_hot_observable(on_next(210, 0))

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    clicked = state(EMPTY, board_with(c0=X))
    assert results.messages == [
        on_next(200, INITIAL),
        on_next(210, INITIAL),
        on_next(210, clicked),
    ]


def test_completes_when_both_inputs_complete():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(on_next(210, 5), on_completed(230))
    click_move = scheduler.create_hot_observable(on_completed(220))

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    assert results.messages == [
        on_next(200, INITIAL),
        on_next(210, state(EMPTY, board_with(c5=X))),
        on_completed(230),
    ]


def test_unsubscribed_observer_sees_no_later_states():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(on_next(210, 5), on_next(230, 3))
    click_move = scheduler.create_hot_observable()

    results = scheduler.start(lambda: game_view_model(click_square, click_move), disposed=220)
    assert results.messages == [
        on_next(200, INITIAL),
        on_next(210, state(EMPTY, board_with(c5=X))),
    ]
    assert click_square.subscriptions == [subscribe(200, 220)]
    assert click_move.subscriptions == [subscribe(200, 220)]


def test_late_subscription_starts_fresh_fold():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable(on_next(210, 0), on_next(230, 4))

    results = scheduler.start(
        lambda: game_view_model(click_square, reactivex.never()), subscribed=220
    )
    assert results.messages == [
        on_next(220, INITIAL),
        on_next(230, state(EMPTY, board_with(c4=X))),
    ]


def test_out_of_range_move_errors_the_state_stream():
    scheduler = TestScheduler()
    click_square = scheduler.create_hot_observable()
    click_move = scheduler.create_hot_observable(on_next(210, 9))

    results = scheduler.start(lambda: game_view_model(click_square, click_move))
    assert results.messages[0] == on_next(200, INITIAL)

    error = results.messages[1]
    assert error.time == 210
    assert error.value.kind == "E"
    assert isinstance(error.value.exception, ValueError)
    assert str(error.value.exception) == "Move index out of range [0, 0]: 9"
    assert click_move.subscriptions == [subscribe(200, 210)]
