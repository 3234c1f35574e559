from __future__ import annotations

import time

import pytest
from statemachine.exceptions import TransitionNotAllowed

from tty_pong import physics
from tty_pong.activities import InputActivity
from tty_pong.config import AI_STYLE, BALL_STYLE, PADDLE_STYLE, TITLE_STYLE
from tty_pong.controller import RenderController, RoundMachine
from tty_pong.state import AI, PLAYER, Event, GameState

from conftest import FakeSurface


@pytest.fixture()
def controller(surface: FakeSurface, state: GameState) -> RenderController:
    return RenderController(surface, state)


def test_machine_follows_round_lifecycle() -> None:
    machine = RoundMachine()
    assert machine.current_state.id == "menu"

    machine.start_round()
    machine.end_round()
    assert machine.current_state.id == "round_end"
    machine.back_to_menu()
    machine.shut_down()
    assert machine.current_state.id == "terminated"


def test_machine_rejects_skipping_the_round() -> None:
    machine = RoundMachine()
    with pytest.raises(TransitionNotAllowed):
        machine.end_round()


def test_player_move_erases_old_cells_and_draws_new(controller: RenderController, surface: FakeSurface,
                                                    state: GameState) -> None:
    controller.draw_field()
    surface.flush()

    with state.lock:
        physics.move_player(state, -1)
    controller.render(Event.INPUT_MOVED)

    assert surface.styled_rows(19, PADDLE_STYLE) == [7, 8, 9, 10, 11]
    assert surface.cells[(12, 19)] == (" ", None)


def test_ball_move_leaves_no_trail(controller: RenderController, surface: FakeSurface, state: GameState) -> None:
    controller.draw_field()
    with state.lock:
        physics.step_ball(state)
    controller.render(Event.BALL_MOVED)

    old = (state.ball.old_row, state.ball.old_col)
    assert surface.cells[old] == (" ", None)
    assert surface.cells[(state.ball.row, state.ball.col)] == ("o", BALL_STYLE)


def test_begin_round_draws_the_field_and_spawns_activities(controller: RenderController, surface: FakeSurface,
                                                           state: GameState) -> None:
    controller.begin_round()
    try:
        assert len(controller.activities) == 3
        assert surface.clears == 1
        assert surface.styled_rows(1, AI_STYLE) == [8, 9, 10, 11, 12]
        assert surface.styled_rows(19, PADDLE_STYLE) == [8, 9, 10, 11, 12]
        assert surface.cells[(10, 18)] == ("o", BALL_STYLE)
    finally:
        state.round_terminating.set()
        controller.join()


def test_missed_ball_ends_round_and_joins_within_a_poll(controller: RenderController, surface: FakeSurface,
                                                        state: GameState) -> None:
    ball = state.ball
    ball.row, ball.col, ball.dir_row, ball.dir_col = 10, 16, 1, 1
    state.player.row = 2

    controller.machine.start_round()
    controller.spawn()
    controller.pump()
    controller.machine.end_round()

    started = time.monotonic()
    controller.finish_round()
    elapsed = time.monotonic() - started

    assert controller.phase == "round_end"
    assert not state.playing
    assert state.winner == AI
    assert controller.activities == []
    assert elapsed < 1.0
    assert controller.banner[0] == "GAME LOST"
    assert surface.cells[(10, 6)] == ("GAME LOST", TITLE_STYLE)


def test_wait_for_start_quits_on_q(controller: RenderController, surface: FakeSurface, state: GameState) -> None:
    surface.keys.put("x")
    surface.keys.put("q")

    assert controller.wait_for_start() is False
    assert state.exiting


def test_wait_for_start_honours_space(controller: RenderController, surface: FakeSurface) -> None:
    surface.keys.put(" ")

    assert controller.wait_for_start() is True


def test_space_between_rounds_starts_the_next_one(controller: RenderController, state: GameState) -> None:
    state.end_round(AI)
    InputActivity(state, FakeSurface()).handle_key(" ")

    assert controller.wait_for_start() is True


def test_space_during_a_rally_does_not_skip_the_round_banner(controller: RenderController, surface: FakeSurface,
                                                             state: GameState) -> None:
    InputActivity(state, FakeSurface()).handle_key(" ")
    state.end_round(AI)
    controller.finish_round()
    surface.keys.put("q")

    assert controller.wait_for_start() is False
    assert state.exiting
    assert surface.cells[(10, 6)] == ("GAME LOST", TITLE_STYLE)


def test_finish_round_drops_a_stale_play_request(controller: RenderController, state: GameState) -> None:
    state.end_round(PLAYER)
    state.play_requested = True

    controller.finish_round()

    assert not state.play_requested
    assert controller.banner[0] == "GAME WON"


def test_quit_mid_round_leaves_no_banner(controller: RenderController, surface: FakeSurface,
                                         state: GameState) -> None:
    state.request_exit()

    controller.finish_round()

    assert controller.banner[0] == "PONG"
    assert surface.flushes == 0


def test_resize_in_menu_redraws_banner(controller: RenderController, surface: FakeSurface,
                                       state: GameState) -> None:
    state.events.put(Event.RESIZED)
    surface.keys.put(" ")

    controller.wait_for_start()

    assert surface.clears == 1
    assert surface.size_refreshes == 1
    assert surface.cells[(10, 8)] == ("PONG", TITLE_STYLE)


def test_resize_during_play_repaints_field(controller: RenderController, surface: FakeSurface,
                                           state: GameState) -> None:
    surface.height = 11
    state.resize(*surface.dimensions())
    controller.render(Event.RESIZED)

    assert surface.clears == 1
    assert surface.size_refreshes == 1
    assert state.player.row == 8
    assert surface.styled_rows(19, PADDLE_STYLE) == [6, 7, 8, 9, 10]


def test_run_plays_a_round_and_quits() -> None:
    surface = FakeSurface(keys=[" ", "q"])
    state = GameState(21, 20)
    controller = RenderController(surface, state)

    assert controller.run() == 0

    assert controller.phase == "terminated"
    assert state.exiting
    assert controller.activities == []
    assert surface.clears >= 1
