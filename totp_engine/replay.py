"""
replay.py — Replay prevention for accepted one-time codes.

A code that passes ``hotp.verify`` stays cryptographically valid for the
whole skew window, so a login is only final once the guard has accepted it.

Retention: a code for step k is valid while the current step is within
``k-window .. k+window``, i.e. for ``2*window + 1`` steps. Remembering every
accepted code for that full span is enough to reject any replay, so that is
the default (90 s with 30 s steps and window 1), and anything shorter is
refused.
"""

import logging
import threading
from typing import Optional

from . import timestep
from .errors import InvalidParameterError
from .models import Verdict

logger = logging.getLogger(__name__)


def default_retention(step_seconds: int = timestep.DEFAULT_TIME_STEP,
                      window: int = timestep.DEFAULT_WINDOW) -> int:
    return (2 * window + 1) * step_seconds


class ReplayGuard:
    """
    Tracks consumed codes for one account's store.

    ``check_and_record`` delegates to the store's atomic ``claim_code``, so
    any number of guards (threads, processes, CLI next to the web app) can
    share one account store. The per-guard lock only keeps one guard from
    queueing on the store against itself.
    """

    def __init__(self, store, step_seconds: int = timestep.DEFAULT_TIME_STEP,
                 window: int = timestep.DEFAULT_WINDOW,
                 retention_seconds: Optional[int] = None):
        timestep.check_step_seconds(step_seconds)
        if window < 0:
            raise InvalidParameterError(f"window must be >= 0, got {window}")
        minimum = default_retention(step_seconds, window)
        if retention_seconds is None:
            retention_seconds = minimum
        if retention_seconds < minimum:
            raise InvalidParameterError(
                f"retention_seconds must cover the skew window ({minimum}s), got {retention_seconds}"
            )
        self.store = store
        self.step_seconds = step_seconds
        self.window = window
        self.retention_seconds = retention_seconds
        self._lock = threading.Lock()

    def purge_expired(self, now: int, retention_seconds: Optional[int] = None) -> int:
        """Drop records at least ``retention_seconds`` old. Returns the number removed."""
        if retention_seconds is None:
            retention_seconds = self.retention_seconds
        removed = self.store.purge_used_codes(int(now) - retention_seconds)
        if removed:
            logger.info("Purged %d expired used-code record(s)", removed)
        return removed

    def check_and_record(self, code: str, now: int) -> Verdict:
        """
        Accept ``code`` once; reject it while an earlier acceptance is retained.

        Store failures propagate as StorageUnavailableError: the guard never
        falls back to "unseen".
        """
        now = int(now)
        with self._lock:
            claimed = self.store.claim_code(code, now, self.retention_seconds)
        if not claimed:
            logger.warning("Rejected replayed code at step %d", timestep.compute_step(now, self.step_seconds))
            return Verdict.REJECTED_REPLAY
        logger.info("Accepted code at step %d", timestep.compute_step(now, self.step_seconds))
        return Verdict.ACCEPTED
