from __future__ import annotations

import queue
import random

import pytest

from tty_pong.config import GameConfig
from tty_pong.state import GameState


class FakeSurface:
    """Records draw calls and serves scripted keys."""

    def __init__(self, height: int = 21, width: int = 20, keys=()):
        self.height = height
        self.width = width
        self.keys: "queue.Queue[str]" = queue.Queue()
        for key in keys:
            self.keys.put(key)
        self.cells: dict[tuple[int, int], tuple[str, str | None]] = {}
        self.pending: list[tuple[int, int, str, str | None]] = []
        self.flushes = 0
        self.clears = 0
        self.opened = False
        self.closed = 0
        self.size_refreshes = 0

    def open(self, min_height=1, min_width=1):
        self.opened = True
        return self

    def clear(self) -> None:
        self.clears += 1
        self.pending.clear()
        self.cells.clear()

    def put(self, row, col, glyph, style=None) -> None:
        self.pending.append((row, col, glyph, style))

    def dimensions(self):
        return self.height, self.width

    def refresh_size(self) -> None:
        self.size_refreshes += 1

    def flush(self) -> None:
        for row, col, glyph, style in self.pending:
            self.cells[(row, col)] = (glyph, style)
        self.pending.clear()
        self.flushes += 1

    def read_key(self, timeout=0):
        try:
            if timeout:
                return self.keys.get(timeout=timeout)
            return self.keys.get_nowait()
        except queue.Empty:
            return None

    def close(self) -> None:
        self.closed += 1

    def styled_rows(self, col: int, style: str) -> list[int]:
        return sorted(r for (r, c), (_, s) in self.cells.items() if c == col and s == style)


@pytest.fixture()
def config() -> GameConfig:
    return GameConfig(ball_interval=0.001, ai_interval=0.001, input_poll=0.001)


@pytest.fixture()
def state(config: GameConfig) -> GameState:
    s = GameState(21, 20, config, rng=random.Random(7))
    s.reset_round()
    return s


@pytest.fixture()
def surface() -> FakeSurface:
    return FakeSurface()
