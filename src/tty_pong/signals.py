from __future__ import annotations

import logging
import signal
import threading

logger = logging.getLogger(__name__)

TERMINATE_SIGNALS = frozenset({signal.SIGTERM, signal.SIGINT})
RESIZE_SIGNALS = frozenset({signal.SIGWINCH})
HANDLED_SIGNALS = TERMINATE_SIGNALS | RESIZE_SIGNALS


def block_signals():
    """Mask the handled signals for the calling thread.

    Call from the main thread before any other thread starts: new threads
    inherit the mask, so only the listener's sigwait ever sees them.
    """
    signal.pthread_sigmask(signal.SIG_BLOCK, HANDLED_SIGNALS)


class SignalListener:
    def __init__(self):
        self._terminate = []
        self._resize = []
        self.thread = None

    def on_terminate(self, callback):
        self._terminate.append(callback)

    def on_resize(self, callback):
        self._resize.append(callback)

    def start(self):
        self.thread = threading.Thread(target=self._run, name="signals", daemon=True)
        self.thread.start()
        return self

    def _run(self):
        while True:
            self.dispatch(signal.sigwait(HANDLED_SIGNALS))

    def dispatch(self, signum):
        if signum in RESIZE_SIGNALS:
            logger.debug("terminal resized")
            for callback in self._resize:
                callback()
        elif signum in TERMINATE_SIGNALS:
            logger.info("received %s", signal.Signals(signum).name)
            for callback in self._terminate:
                callback(signum)
