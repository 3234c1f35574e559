from __future__ import annotations

from dataclasses import dataclass

# Timing (seconds)
BALL_INTERVAL = 0.025  # game speed
AI_INTERVAL = 0.025
INPUT_POLL = 0.01

# Geometry
FIELD_TOP = 0
AI_COL = 1
PADDLE_WIDTH = 5  # must be odd

# Keys
UP_KEYS = ("KEY_UP", "w")
DOWN_KEYS = ("KEY_DOWN", "s")
PLAY_KEY = " "
QUIT_KEY = "q"

# Glyphs and blessed formatter names
BALL_GLYPH = "o"
PADDLE_GLYPH = " "
PADDLE_STYLE = "white_on_blue"
AI_STYLE = "white_on_yellow"
BALL_STYLE = "red_on_black"
TITLE_STYLE = "green_on_black"

# Key repeat applied while the game runs (delay ms, rate per second)
REPEAT_DELAY = 100
REPEAT_RATE = 30

# Logging
LOG_FILE_ENV = "TTY_PONG_LOG"
LOG_LEVEL_ENV = "TTY_PONG_LOG_LEVEL"


@dataclass(frozen=True)
class GameConfig:
    ball_interval: float = BALL_INTERVAL
    ai_interval: float = AI_INTERVAL
    input_poll: float = INPUT_POLL
    paddle_width: int = PADDLE_WIDTH
    repeat_delay: int = REPEAT_DELAY
    repeat_rate: int = REPEAT_RATE

    def __post_init__(self):
        if self.paddle_width < 1 or self.paddle_width % 2 == 0:
            raise ValueError(f"paddle width must be a positive odd number, got {self.paddle_width}")

    @property
    def half_paddle(self) -> int:
        return self.paddle_width // 2

    @property
    def min_height(self) -> int:
        return self.paddle_width

    @property
    def min_width(self) -> int:
        # AI column, a free column for the ball on each side, player column
        return AI_COL + 4
