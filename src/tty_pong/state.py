from __future__ import annotations

import logging
import queue
import random
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .config import AI_COL, FIELD_TOP, GameConfig

logger = logging.getLogger(__name__)

PLAYER = 0
AI = 1


class Event(Enum):
    INPUT_MOVED = auto()
    AI_MOVED = auto()
    BALL_MOVED = auto()
    ROUND_OVER = auto()
    QUIT = auto()
    RESIZED = auto()


class EventChannel:
    """Unbounded FIFO of event tags.

    Producers never block. The single consumer blocks in `get` until a tag
    arrives (or the optional timeout expires, returning None).
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[Event]" = queue.SimpleQueue()

    def put(self, event: Event) -> None:
        self._queue.put(event)

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[Event]:
        drained = []
        while True:
            try:
                drained.append(self._queue.get_nowait())
            except queue.Empty:
                return drained

    def __len__(self):
        return self._queue.qsize()


@dataclass
class Paddle:
    row: int
    col: int
    old_row: int = 0

    def __post_init__(self):
        self.old_row = self.row


@dataclass
class Ball:
    row: int
    col: int
    dir_row: int = 1
    dir_col: int = -1
    old_row: int = 0
    old_col: int = 0

    def __post_init__(self):
        self.old_row = self.row
        self.old_col = self.col


class GameState:
    """Mutable record shared by every activity and the render controller.

    Any multi-field read-modify-write, and any read-erase-draw sequence,
    happens while holding `lock`.
    """

    def __init__(self, height: int, width: int, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.lock = threading.RLock()
        self.events = EventChannel()

        self.height = height
        self.width = width
        self.bottom = FIELD_TOP

        # Lifecycle
        self.playing = False
        self.exiting = False
        self.play_requested = False
        self.winner: Optional[int] = None
        self.round_terminating = threading.Event()

        self._set_bounds(height, width)
        center = self.center_row
        self.player = Paddle(row=center, col=self.width - 1)
        self.ai = Paddle(row=center, col=AI_COL)
        self.ball = Ball(row=center, col=self.player.col - 1)

    # ── Geometry ─────────────────────────────────────────────

    @property
    def top_reach(self) -> int:
        return FIELD_TOP + self.config.half_paddle

    @property
    def bottom_reach(self) -> int:
        return self.bottom - self.config.half_paddle

    @property
    def center_row(self) -> int:
        return (self.top_reach + self.bottom_reach) // 2

    def reachable(self, row: int) -> bool:
        return self.top_reach <= row <= self.bottom_reach

    def _set_bounds(self, height, width):
        self.height = height
        self.width = max(width, self.config.min_width)
        self.bottom = max(height - 1, self.config.paddle_width - 1)

    # ── Lifecycle ────────────────────────────────────────────

    def reset_round(self) -> None:
        with self.lock:
            center = self.center_row
            self.player = Paddle(row=center, col=self.width - 1)
            self.ai = Paddle(row=center, col=AI_COL)
            self.ball = Ball(
                row=center,
                col=self.player.col - 1,
                dir_row=self.rng.choice((-1, 1)),
                dir_col=-1,
            )
            self.winner = None
            self.play_requested = False
            self.round_terminating.clear()
            self.playing = True
        logger.info("round reset: field %dx%d, paddles at row %d", self.bottom + 1, self.width, center)

    def end_round(self, winner: int) -> None:
        self.playing = False
        self.winner = winner

    def request_exit(self) -> None:
        self.exiting = True

    def resize(self, height: int, width: int) -> None:
        """Recompute bounds and pull every entity back inside them."""
        with self.lock:
            self._set_bounds(height, width)
            for paddle in (self.player, self.ai):
                if paddle.row < self.top_reach:
                    paddle.row = self.top_reach
                elif paddle.row > self.bottom_reach:
                    paddle.row = self.bottom_reach
                paddle.old_row = paddle.row
            self.player.col = self.width - 1

            ball = self.ball
            ball.row = min(max(ball.row, FIELD_TOP), self.bottom)
            ball.col = min(max(ball.col, self.ai.col + 1), self.player.col - 1)
            ball.old_row, ball.old_col = ball.row, ball.col
        logger.info("field resized to %dx%d", self.bottom + 1, self.width)

    @property
    def round_over(self) -> bool:
        return not self.playing and not self.exiting and self.winner is not None
