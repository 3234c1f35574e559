from __future__ import annotations

import logging
import threading
from contextlib import ExitStack
from typing import Optional, Protocol, Tuple

from blessed import Terminal

from .errors import SurfaceUnavailable

logger = logging.getLogger(__name__)


class Surface(Protocol):
    """Rendering sink owned by the render controller thread."""

    def clear(self) -> None: ...

    def put(self, row: int, col: int, glyph: str, style: Optional[str] = None) -> None: ...

    def dimensions(self) -> Tuple[int, int]: ...

    def refresh_size(self) -> None: ...

    def flush(self) -> None: ...

    def read_key(self, timeout: float = 0) -> Optional[str]: ...

    def close(self) -> None: ...


class BlessedSurface:
    """Full-screen surface on top of a blessed Terminal.

    Draw calls are buffered and written in one go by `flush`.
    """

    def __init__(self, term: Optional[Terminal] = None):
        self.term = term or Terminal()
        self._buffer = []
        self._stack: Optional[ExitStack] = None
        self._close_lock = threading.Lock()
        self._size = (0, 0)

    def open(self, min_height=1, min_width=1):
        term = self.term
        if not term.is_a_tty:
            raise SurfaceUnavailable("standard output is not a terminal")
        if term.number_of_colors < 8:
            raise SurfaceUnavailable("Your terminal does not support color.")
        height, width = self.dimensions()
        if height < min_height or width < min_width:
            raise SurfaceUnavailable(
                f"terminal is {width}x{height}, need at least {min_width}x{min_height}"
            )

        stack = ExitStack()
        stack.enter_context(term.fullscreen())
        stack.enter_context(term.cbreak())
        stack.enter_context(term.hidden_cursor())
        self._stack = stack
        logger.info("surface opened: %dx%d, %d colors", width, height, term.number_of_colors)

        self.clear()
        self.flush()
        return self

    def refresh_size(self):
        self._size = (self.term.height, self.term.width)

    def dimensions(self):
        self.refresh_size()
        return self._size

    def clear(self):
        self._buffer.append(self.term.home + self.term.normal + self.term.clear)

    def put(self, row, col, glyph, style=None):
        height, width = self._size
        if not (0 <= row < height and 0 <= col < width):
            return
        text = glyph[: width - col]
        if style:
            text = getattr(self.term, style)(text)
        self._buffer.append(self.term.move_yx(row, col) + text)

    def flush(self):
        if not self._buffer:
            return
        out, self._buffer = "".join(self._buffer), []
        self.term.stream.write(out)
        self.term.stream.flush()

    def read_key(self, timeout=0):
        key = self.term.inkey(timeout=timeout)
        if not key:
            return None
        if key.is_sequence:
            return key.name
        return str(key).lower()

    def close(self):
        with self._close_lock:
            if self._stack is None:
                return
            stack, self._stack = self._stack, None
            self._buffer = []
            stack.close()
        logger.info("surface closed")
