"""
totp_engine package
===================

HOTP / TOTP code engine (RFC 4226 & RFC 6238, HMAC-SHA1) with replay
protection, built for a two-factor-authentication demo.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP: code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits
- TOTP: HOTP with counter = floor(unix_time / step), step = 30 s by default
- Dynamic truncation: 4 bytes of the digest at offset (last byte & 0x0F),
  top bit cleared.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from totp_engine import Authenticator
>>> from database import MemoryStore
>>> auth = Authenticator(MemoryStore())
>>> record = auth.enroll("alice@example.com", "MyApp")
>>> code = auth.snapshot().code
>>> auth.verify(code).accepted
True
>>> auth.verify(code).accepted      # same code again: replay
False
"""

from . import base32
from .authenticator import Authenticator
from .errors import (
    InvalidDigitsError,
    InvalidEncodingError,
    InvalidLengthError,
    InvalidParameterError,
    InvalidSecretError,
    NotEnrolledError,
    OTPError,
    StorageUnavailableError,
)
from .hotp import compute_code, compute_totp, explain, matching_step, verify
from .models import AccountRecord, CodeBreakdown, CodeSnapshot, UsedCodeRecord, Verdict
from .replay import ReplayGuard
from .secret import generate_secret
from .ticker import CodeTicker
from .timestep import candidate_steps, compute_step, seconds_remaining
from .uri import build as build_otpauth_uri

__version__ = "1.0.0"
