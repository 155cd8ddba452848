"""
timestep.py — Wall-clock time to TOTP time-step counter (RFC 6238 section 4).

    T = floor((unix_time - T0) / X),  T0 = 0, X = step_seconds (default 30)

The step is derived on demand and never stored.
"""

import math
from typing import List

from .errors import InvalidParameterError

DEFAULT_TIME_STEP = 30  # X (seconds)
DEFAULT_WINDOW = 1      # steps accepted on each side of the current one


def check_step_seconds(step_seconds: int) -> None:
    if isinstance(step_seconds, bool) or not isinstance(step_seconds, int):
        raise InvalidParameterError(f"step_seconds must be an integer, got {step_seconds!r}")
    if step_seconds <= 0:
        raise InvalidParameterError(f"step_seconds must be > 0, got {step_seconds}")


def compute_step(unix_time: float, step_seconds: int = DEFAULT_TIME_STEP) -> int:
    """
    Return the time-step index containing ``unix_time``.

    Raises:
        InvalidParameterError: if unix_time < 0 or step_seconds <= 0
    """
    check_step_seconds(step_seconds)
    if unix_time < 0:
        raise InvalidParameterError(f"unix_time must be non-negative, got {unix_time}")
    return int(math.floor(unix_time)) // step_seconds


def candidate_steps(step: int, window: int = DEFAULT_WINDOW) -> List[int]:
    """Steps ``step-window .. step+window`` in ascending order, negatives omitted."""
    if window < 0:
        raise InvalidParameterError(f"window must be >= 0, got {window}")
    return [s for s in range(step - window, step + window + 1) if s >= 0]


def seconds_remaining(unix_time: float, step_seconds: int = DEFAULT_TIME_STEP) -> int:
    """Seconds left before the next step boundary (1..step_seconds)."""
    check_step_seconds(step_seconds)
    if unix_time < 0:
        raise InvalidParameterError(f"unix_time must be non-negative, got {unix_time}")
    return step_seconds - (int(math.floor(unix_time)) % step_seconds)
