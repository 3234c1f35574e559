from __future__ import annotations


class PongError(Exception):
    """Base class for errors raised by the game."""


class SurfaceUnavailable(PongError):
    """The terminal cannot host the game (no tty, no colour, too small)."""


class ActivitySpawnError(PongError):
    """A round activity thread could not be started."""


class KeyRepeatError(PongError):
    """Reading or applying the keyboard auto-repeat settings failed."""
