from __future__ import annotations

import logging
import threading

from . import physics
from .config import DOWN_KEYS, PLAY_KEY, QUIT_KEY, UP_KEYS
from .errors import ActivitySpawnError
from .state import Event, GameState

logger = logging.getLogger(__name__)


class Activity:
    """A round-scoped producer running on its own daemon thread."""

    name = "activity"

    def __init__(self, state: GameState):
        self.state = state
        self.thread = None

    def start(self):
        self.thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        try:
            self.thread.start()
        except RuntimeError as exc:
            raise ActivitySpawnError(f"cannot start {self.name} thread: {exc}") from exc

    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)

    def is_alive(self):
        return self.thread is not None and self.thread.is_alive()

    def _run(self):
        logger.info("%s started", self.name)
        try:
            self.loop()
        finally:
            logger.info("%s stopped", self.name)

    def loop(self):
        raise NotImplementedError

    def emit(self, event):
        logger.debug("%s -> %s", self.name, event.name)
        self.state.events.put(event)


class InputActivity(Activity):
    name = "input"

    def __init__(self, state, surface):
        super().__init__(state)
        self.surface = surface

    def read_key(self):
        try:
            return self.surface.read_key(timeout=self.state.config.input_poll)
        except OSError as exc:
            logger.debug("key read failed: %s", exc)
            return None

    def handle_key(self, key):
        state = self.state
        if key in UP_KEYS or key in DOWN_KEYS:
            with state.lock:
                event = physics.move_player(state, -1 if key in UP_KEYS else 1)
            self.emit(event)
        elif key == QUIT_KEY:
            state.request_exit()
            self.emit(Event.QUIT)
        elif key == PLAY_KEY and not state.playing:
            state.play_requested = True

    def loop(self):
        stop = self.state.round_terminating
        while not stop.is_set():
            key = self.read_key()
            if key is not None:
                self.handle_key(key)


class BallActivity(Activity):
    """Moves the ball every tick and ends the round itself on a miss."""

    name = "ball"

    def loop(self):
        state = self.state
        stop = state.round_terminating
        while not stop.is_set():
            with state.lock:
                event = physics.step_ball(state)
            self.emit(event)
            if event is Event.ROUND_OVER:
                logger.info("ball missed, winner %d", state.winner)
                return
            stop.wait(state.config.ball_interval)


class AiActivity(Activity):
    name = "ai"

    def loop(self):
        state = self.state
        stop = state.round_terminating
        while not stop.is_set():
            with state.lock:
                event = physics.step_ai(state)
            self.emit(event)
            stop.wait(state.config.ai_interval)
