"""
hotp.py — HOTP (RFC 4226) and TOTP (RFC 6238) code computation, HMAC-SHA1 only.

Steps of one HOTP computation:
1. Message = counter as an 8-byte big-endian unsigned integer
2. digest = HMAC-SHA1(key=secret, msg=message)            (20 bytes)
3. Dynamic truncation: offset = digest[19] & 0x0F, take 4 bytes from offset,
   clear the top bit of the first one -> 31-bit integer P
4. code = P mod 10^digits, zero-padded to ``digits`` characters

Every function here is pure: same inputs, same output, no stored state.
Safe to call from any number of threads.
"""

import hashlib
import hmac
import logging
import struct
from typing import Optional

from . import timestep
from .errors import InvalidDigitsError, InvalidParameterError, InvalidSecretError
from .models import CodeBreakdown

logger = logging.getLogger(__name__)

DEFAULT_DIGITS = 6
MIN_DIGITS = 6
MAX_DIGITS = 8
MAX_COUNTER = 2 ** 64 - 1


def int_to_bytes(i: int) -> bytes:
    """Counter -> 8-byte big-endian, e.g. 1 -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'."""
    if isinstance(i, bool) or not isinstance(i, int) or not 0 <= i <= MAX_COUNTER:
        raise InvalidParameterError(f"Counter must be in [0, 2**64 - 1], got {i}")
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation of a 20-byte SHA-1 digest.

    offset is in 0..15, so offset + 3 never runs past byte 19.
    """
    offset = hmac_digest[-1] & 0x0F
    return (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )


def _validate(secret: bytes, digits: int) -> None:
    if not secret:
        raise InvalidSecretError("Secret must not be empty")
    if isinstance(digits, bool) or not isinstance(digits, int) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigitsError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits!r}")


def explain(secret: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> CodeBreakdown:
    """
    Run the HOTP computation and return every intermediate value.

    Backs the "algorithm breakdown" view of the demo; ``compute_code`` is
    this function's ``.code``.
    """
    _validate(secret, digits)
    msg = int_to_bytes(counter)
    digest = hmac.new(bytes(secret), msg, hashlib.sha1).digest()
    truncated = dynamic_truncate(digest)
    code = str(truncated % (10 ** digits)).zfill(digits)
    return CodeBreakdown(
        counter=counter,
        counter_bytes=msg.hex(),
        hmac=digest.hex(),
        offset=digest[-1] & 0x0F,
        truncated=truncated,
        code=code,
    )


def compute_code(secret: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    HOTP code for ``counter``.

    Raises:
        InvalidSecretError: empty secret
        InvalidDigitsError: digits outside 6..8
        InvalidParameterError: counter outside the unsigned 64-bit range
    """
    return explain(secret, counter, digits).code


def compute_totp(
    secret: bytes,
    unix_time: float,
    step_seconds: int = timestep.DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """TOTP code: HOTP with counter = floor(unix_time / step_seconds)."""
    return compute_code(secret, timestep.compute_step(unix_time, step_seconds), digits)


def matching_step(
    secret: bytes,
    candidate: str,
    unix_time: float,
    window: int = timestep.DEFAULT_WINDOW,
    step_seconds: int = timestep.DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> Optional[int]:
    """
    Return the step in ``current +/- window`` whose code equals ``candidate``.

    All candidate steps are computed and compared with
    ``hmac.compare_digest``; the loop does not stop at the first match.
    Malformed candidates (non-string, non-ASCII, wrong length) return None.
    """
    _validate(secret, digits)
    current = timestep.compute_step(unix_time, step_seconds)
    steps = timestep.candidate_steps(current, window)

    if not isinstance(candidate, str) or not candidate.isascii() or len(candidate) != digits:
        return None

    matched = None
    for step in steps:
        expected = compute_code(secret, step, digits)
        if hmac.compare_digest(expected, candidate) and matched is None:
            matched = step
    logger.debug("TOTP check: step=%d window=%d matched=%s", current, window, matched is not None)
    return matched


def verify(
    secret: bytes,
    candidate: str,
    unix_time: float,
    window: int = timestep.DEFAULT_WINDOW,
    step_seconds: int = timestep.DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> bool:
    """True if ``candidate`` is the TOTP code of any step in the skew window."""
    return matching_step(secret, candidate, unix_time, window, step_seconds, digits) is not None
