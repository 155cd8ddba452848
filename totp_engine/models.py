"""Records and result types shared by the engine, the stores and the host."""

import enum
from dataclasses import dataclass, field
from typing import NamedTuple


class Verdict(enum.Enum):
    ACCEPTED = "accepted"
    REJECTED_INVALID = "invalid"
    REJECTED_REPLAY = "replay"

    @property
    def accepted(self) -> bool:
        return self is Verdict.ACCEPTED


@dataclass(frozen=True)
class AccountRecord:
    """Enrollment bundle: one per store. The secret is kept out of repr()."""

    account: str
    issuer: str
    secret: bytes = field(repr=False)


@dataclass(frozen=True)
class UsedCodeRecord:
    # timestamp = Unix time (seconds) at which the code was accepted
    code: str
    timestamp: int


class CodeBreakdown(NamedTuple):
    """Intermediate values of one HOTP computation (for the demo display)."""

    counter: int
    counter_bytes: str   # hex, 8 bytes big-endian
    hmac: str            # hex, 20 bytes
    offset: int
    truncated: int       # 31-bit value before the modulo
    code: str


class CodeSnapshot(NamedTuple):
    code: str
    step: int
    remaining: int
    breakdown: CodeBreakdown
