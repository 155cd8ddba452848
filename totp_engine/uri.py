"""
uri.py — otpauth:// provisioning URI for authenticator apps.

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

Parameter names and casing are fixed: Google Authenticator, Authy and
friends match them literally.
"""

from urllib.parse import quote

from . import base32, timestep
from .errors import InvalidDigitsError, InvalidParameterError, InvalidSecretError
from .hotp import DEFAULT_DIGITS, MAX_DIGITS, MIN_DIGITS

# same unreserved set as JavaScript's encodeURIComponent
_SAFE = "-_.!~*'()"


def _encode_component(value: str) -> str:
    return quote(value, safe=_SAFE)


def build(
    secret: bytes,
    account: str,
    issuer: str,
    step_seconds: int = timestep.DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """
    Format a TOTP provisioning URI.

    Arguments:
        secret: raw secret bytes (Base32-encoded into the URI)
        account: account label, e.g. 'alice@example.com'
        issuer: service name; empty -> label is the account alone and the
                issuer parameter is left out

    Raises:
        InvalidParameterError: empty account, bad period
        InvalidDigitsError: digits outside 6..8
        InvalidSecretError: empty secret
    """
    if not account:
        raise InvalidParameterError("account must not be empty")
    if not secret:
        raise InvalidSecretError("Secret must not be empty")
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigitsError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}")
    timestep.check_step_seconds(step_seconds)

    if issuer:
        label = f"{_encode_component(issuer)}:{_encode_component(account)}"
        issuer_param = f"&issuer={_encode_component(issuer)}"
    else:
        label = _encode_component(account)
        issuer_param = ""

    return (
        f"otpauth://totp/{label}?secret={base32.encode(secret)}{issuer_param}"
        f"&algorithm=SHA1&digits={digits}&period={step_seconds}"
    )
