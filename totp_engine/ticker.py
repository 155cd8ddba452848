"""
ticker.py — Periodic refresh driving the code display.

Replaces a bare ``while True: ...; time.sleep(1)`` loop with a thread that
the owner can stop at any time. The engine itself never schedules anything.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CodeTicker:
    """Call ``callback()`` every ``interval`` seconds until ``stop()``."""

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.callback = callback
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "CodeTicker":
        if self._thread is not None:
            raise RuntimeError("CodeTicker already started")
        self._thread = threading.Thread(target=self._run, name="code-ticker", daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        # first tick immediately, then one per interval
        while not self._stop.is_set():
            try:
                self.callback()
            except Exception:
                logger.exception("Ticker callback failed; stopping")
                self._stop.set()
                break
            self._stop.wait(self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stopped; True if the ticker has stopped."""
        return self._stop.wait(timeout)
