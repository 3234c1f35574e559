"""Terminal pong against a reactive computer opponent.

Input, ball and AI activities run on their own threads and report moves
through one event channel to the render controller, the only thread that
draws on the terminal.
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "activities",
    "config",
    "controller",
    "errors",
    "game",
    "keyrepeat",
    "physics",
    "signals",
    "state",
    "surface",
]
