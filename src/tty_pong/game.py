from __future__ import annotations

import argparse
import logging
import os
import sys

from .config import LOG_FILE_ENV, LOG_LEVEL_ENV, GameConfig
from .controller import RenderController
from .errors import PongError
from .keyrepeat import KeyRepeatGuard, KeyRepeatProfile, detect_key_repeat
from .signals import SignalListener, block_signals
from .state import Event, GameState
from .surface import BlessedSurface

logger = logging.getLogger("tty_pong")


def configure_logging(environ=None):
    """Log to the file named by TTY_PONG_LOG, otherwise stay silent.

    The terminal belongs to the game, so nothing is ever logged to it.
    """
    environ = os.environ if environ is None else environ
    path = environ.get(LOG_FILE_ENV)
    if not path:
        return
    handler = logging.FileHandler(path)
    handler.setFormatter(logging.Formatter("%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(environ.get(LOG_LEVEL_ENV, "INFO").upper())


class PongGame:
    def __init__(self, config=None, surface=None, key_repeat=None):
        self.config = config or GameConfig()
        self.surface = surface or BlessedSurface()
        self.guard = KeyRepeatGuard(
            key_repeat or detect_key_repeat(),
            KeyRepeatProfile(delay=self.config.repeat_delay, rate=self.config.repeat_rate),
        )
        self.state = None
        self.controller = None
        self.listener = SignalListener()

    def setup(self):
        self.guard.acquire()
        self.surface.open(min_height=self.config.min_height, min_width=self.config.min_width)
        height, width = self.surface.dimensions()
        self.state = GameState(height, width, self.config)
        self.controller = RenderController(self.surface, self.state)

        self.listener.on_resize(self.handle_resize)
        self.listener.on_terminate(self.handle_terminate)
        self.listener.start()

    def handle_resize(self):
        self.state.resize(*self.surface.dimensions())
        self.state.events.put(Event.RESIZED)

    def handle_terminate(self, signum):
        # Runs on the signal thread; does not wait for the others.
        self.cleanup()
        logging.shutdown()
        os._exit(128 + signum)

    def cleanup(self):
        self.surface.close()
        self.guard.restore()

    def run(self) -> int:
        try:
            self.setup()
            return self.controller.run()
        except PongError as exc:
            logger.error("fatal: %s", exc)
            failure = exc
        finally:
            self.cleanup()

        print(f"tty-pong: {failure}", file=sys.stderr)
        return 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="tty-pong",
        description="Terminal pong against the computer. Arrow keys move, space starts, q quits.",
    )
    parser.parse_args(argv)

    configure_logging()
    block_signals()
    return PongGame().run()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
