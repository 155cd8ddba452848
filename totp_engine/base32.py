"""
base32.py — RFC 4648 Base32 transcoding for secrets.

- Output is uppercase and unpadded: the otpauth scheme does not use ``=``
  padding, and several authenticator apps choke on it.
- Input is case-insensitive and may carry trailing ``=`` padding.
- Decoding accumulates 5 bits per character and emits a byte for every full
  8 bits; the leftover bits of the final group are dropped without checking
  that they are zero. ``base64.b32decode`` rejects unpadded groups of 1, 3 or
  6 characters, hence the explicit loop.
"""

import base64

from .errors import InvalidEncodingError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_VALUES = {char: index for index, char in enumerate(ALPHABET)}
_VALUES.update({char.lower(): index for char, index in list(_VALUES.items())})


def encode(data: bytes) -> str:
    """Encode bytes to unpadded uppercase Base32."""
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode Base32 text back to bytes.

    Arguments:
        text: Base32 string, any case, optional trailing '=' padding

    Raises:
        InvalidEncodingError: on any character outside A-Z / 2-7
    """
    if not isinstance(text, str):
        raise InvalidEncodingError("Base32 input must be a string")

    out = bytearray()
    buffer = 0
    bits = 0
    for position, char in enumerate(text.rstrip("=")):
        value = _VALUES.get(char)
        if value is None:
            raise InvalidEncodingError(f"Invalid Base32 character at position {position}")
        buffer = ((buffer << 5) | value) & 0x1FFF
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
    return bytes(out)
