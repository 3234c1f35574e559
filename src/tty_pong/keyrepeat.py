from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .errors import KeyRepeatError

logger = logging.getLogger(__name__)

XSET_PATTERN = re.compile(r"auto repeat delay:\s*(\d+)\s+repeat rate:\s*(\d+)")


@dataclass(frozen=True)
class KeyRepeatProfile:
    delay: int  # ms before auto repeat kicks in
    rate: int  # repeats per second


class KeyRepeatControl(Protocol):
    def get(self) -> KeyRepeatProfile: ...

    def set(self, profile: KeyRepeatProfile) -> None: ...


class XsetKeyRepeat:
    """Reads and writes the X server key repeat through the `xset` utility."""

    def __init__(self, run: Optional[Callable[..., subprocess.CompletedProcess]] = None):
        self._run = run or subprocess.run

    def _xset(self, *args):
        try:
            return self._run(["xset", *args], capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise KeyRepeatError(f"xset {' '.join(args)} failed: {exc}") from exc

    def get(self):
        output = self._xset("q").stdout
        match = XSET_PATTERN.search(output)
        if match is None:
            raise KeyRepeatError("no auto repeat settings in `xset q` output")
        return KeyRepeatProfile(delay=int(match.group(1)), rate=int(match.group(2)))

    def set(self, profile):
        self._xset("r", "rate", str(profile.delay), str(profile.rate))


class NullKeyRepeat:
    """Used where there is no X session to talk to."""

    def __init__(self, profile=KeyRepeatProfile(delay=0, rate=0)):
        self.profile = profile

    def get(self):
        return self.profile

    def set(self, profile):
        self.profile = profile


def detect_key_repeat() -> KeyRepeatControl:
    if os.environ.get("DISPLAY") and shutil.which("xset"):
        return XsetKeyRepeat()
    logger.info("no X display or xset, key repeat left untouched")
    return NullKeyRepeat()


class KeyRepeatGuard:
    """Restore-on-exit handle for the keyboard repeat settings.

    `acquire` remembers the current profile and applies the game profile.
    `restore` puts the remembered profile back at most once, whichever
    thread gets there first.
    """

    def __init__(self, control: KeyRepeatControl, game_profile: KeyRepeatProfile):
        self.control = control
        self.game_profile = game_profile
        self.saved: Optional[KeyRepeatProfile] = None
        self._lock = threading.Lock()

    def acquire(self):
        try:
            self.saved = self.control.get()
            self.control.set(self.game_profile)
        except KeyRepeatError as exc:
            logger.warning("key repeat not changed: %s", exc)
            self.saved = None
        else:
            logger.info("key repeat %s saved, %s applied", self.saved, self.game_profile)
        return self

    def restore(self):
        with self._lock:
            saved, self.saved = self.saved, None
        if saved is None:
            return
        try:
            self.control.set(saved)
        except KeyRepeatError as exc:
            logger.error("could not restore key repeat: %s", exc)
        else:
            logger.info("key repeat %s restored", saved)
