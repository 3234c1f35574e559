from __future__ import annotations

import logging

from statemachine import State, StateMachine

from .activities import AiActivity, BallActivity, InputActivity
from .config import (
    AI_STYLE,
    BALL_GLYPH,
    BALL_STYLE,
    PADDLE_GLYPH,
    PADDLE_STYLE,
    PLAY_KEY,
    QUIT_KEY,
    TITLE_STYLE,
)
from .state import PLAYER, Event, GameState

logger = logging.getLogger(__name__)

INTRO_LINES = (
    "PONG",
    "use up and down arrow keys to control the pad",
    "press space to start, q to quit",
)
RESTART_HINT = "press space to restart, q to quit"


class RoundMachine(StateMachine):
    """Outer lifecycle of the game, one trip through `playing` per round."""

    menu = State(initial=True)
    playing = State()
    round_end = State()
    terminated = State(final=True)

    start_round = menu.to(playing)
    end_round = playing.to(round_end)
    back_to_menu = round_end.to(menu)
    shut_down = menu.to(terminated) | round_end.to(terminated)


class RenderController:
    """Sole consumer of the event channel and sole user of the surface."""

    def __init__(self, surface, state: GameState):
        self.surface = surface
        self.state = state
        self.machine = RoundMachine()
        self.activities = []
        self.banner = INTRO_LINES

    @property
    def phase(self) -> str:
        return self.machine.current_state.id

    # ── Drawing ──────────────────────────────────────────────

    def _paddle_cells(self, paddle, row):
        half = self.state.config.half_paddle
        for offset in range(-half, half + 1):
            yield row + offset, paddle.col

    def erase_paddle(self, paddle):
        for row, col in self._paddle_cells(paddle, paddle.old_row):
            self.surface.put(row, col, " ")

    def draw_paddle(self, paddle):
        style = PADDLE_STYLE if paddle is self.state.player else AI_STYLE
        for row, col in self._paddle_cells(paddle, paddle.row):
            self.surface.put(row, col, PADDLE_GLYPH, style)

    def erase_ball(self):
        ball = self.state.ball
        self.surface.put(ball.old_row, ball.old_col, " ")

    def draw_ball(self):
        ball = self.state.ball
        self.surface.put(ball.row, ball.col, BALL_GLYPH, BALL_STYLE)

    def draw_field(self):
        self.surface.clear()
        self.draw_paddle(self.state.player)
        self.draw_paddle(self.state.ai)
        self.draw_ball()

    def draw_banner(self, lines):
        height, width = self.surface.dimensions()
        row = height // 2
        for i, line in enumerate(lines):
            self.surface.put(row + i, max(width // 2 - len(line) // 2, 0), line, TITLE_STYLE)

    def render(self, event):
        """Erase and redraw whatever `event` reports as moved."""
        state = self.state
        with state.lock:
            if event is Event.INPUT_MOVED:
                self.erase_paddle(state.player)
                self.draw_paddle(state.player)
            elif event is Event.AI_MOVED:
                self.erase_paddle(state.ai)
                self.draw_paddle(state.ai)
            elif event is Event.BALL_MOVED:
                self.erase_ball()
                self.draw_ball()
            elif event is Event.RESIZED:
                self.surface.refresh_size()
                self.draw_field()
            self.surface.flush()

    # ── Menu ─────────────────────────────────────────────────

    def show_menu(self):
        with self.state.lock:
            self.draw_banner(self.banner)
            self.surface.flush()

    def wait_for_start(self) -> bool:
        """Poll until space (start) or q (quit). Returns True to play."""
        state = self.state
        while not state.exiting:
            for event in state.events.drain():
                if event is Event.RESIZED:
                    with state.lock:
                        self.surface.refresh_size()
                        self.surface.clear()
                    self.show_menu()
            if state.play_requested:
                return True
            try:
                key = self.surface.read_key(timeout=state.config.input_poll)
            except OSError as exc:
                logger.debug("key read failed: %s", exc)
                continue
            if key == PLAY_KEY:
                return True
            if key == QUIT_KEY:
                state.request_exit()
        return False

    # ── Round ────────────────────────────────────────────────

    def begin_round(self):
        state = self.state
        state.reset_round()
        state.events.drain()
        with state.lock:
            self.draw_field()
            self.surface.flush()
        self.spawn()

    def spawn(self):
        self.activities = [
            InputActivity(self.state, self.surface),
            AiActivity(self.state),
            BallActivity(self.state),
        ]
        for activity in self.activities:
            activity.start()

    def pump(self):
        """Render events until the round is lost, won or abandoned."""
        state = self.state
        while not state.exiting and state.playing:
            event = state.events.get()
            if event in (Event.ROUND_OVER, Event.QUIT):
                break
            self.render(event)

    def finish_round(self):
        state = self.state
        state.round_terminating.set()
        self.join()
        state.play_requested = False
        if not state.round_over:
            return
        self.banner = ("GAME WON" if state.winner == PLAYER else "GAME LOST", RESTART_HINT)
        logger.info("round over: %s", self.banner[0])
        self.show_menu()

    def join(self):
        for activity in self.activities:
            activity.join()
        self.activities = []

    # ── Lifecycle ────────────────────────────────────────────

    def run(self) -> int:
        machine = self.machine
        self.show_menu()
        while self.phase != "terminated":
            if self.phase == "menu":
                if self.wait_for_start():
                    machine.start_round()
                    self.begin_round()
                else:
                    machine.shut_down()
            elif self.phase == "playing":
                self.pump()
                machine.end_round()
            elif self.phase == "round_end":
                self.finish_round()
                if self.state.exiting:
                    machine.shut_down()
                else:
                    machine.back_to_menu()

        self.state.round_terminating.set()
        self.join()
        logger.info("controller terminated")
        return 0
