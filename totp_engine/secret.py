"""
secret.py — Shared-secret generation.

The secret is the only source of unpredictability in HOTP/TOTP, so it is
always drawn from the operating system CSPRNG (``os.urandom``).
"""

import logging
import os

from .errors import InvalidLengthError

logger = logging.getLogger(__name__)

DEFAULT_SECRET_BYTES = 20   # 160-bit secret (RFC 4226 recommendation)
MIN_RECOMMENDED_BYTES = 10  # 80 bits, lower bound accepted by most apps


def generate_secret(length: int = 10) -> bytes:
    """
    Generate ``length`` random bytes for use as an HOTP/TOTP key.

    Arguments:
        length: number of bytes (10-20 recommended)

    Raises:
        InvalidLengthError: if length < 1
    """
    if length < 1:
        raise InvalidLengthError(f"Secret length must be at least 1 byte, got {length}")
    if length < MIN_RECOMMENDED_BYTES:
        logger.warning("Generating a %d-bit secret, below the recommended 80 bits", length * 8)
    return os.urandom(length)
