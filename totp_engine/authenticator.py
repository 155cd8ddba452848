"""
authenticator.py — Enrollment and verification flow over one injected store.

    enroll()   : secret -> AccountRecord -> store, used codes reset
    snapshot() : current code + seconds remaining + algorithm breakdown
    verify()   : skew-window check, then the replay guard

The store's lifetime belongs to the caller; nothing here is process-global.
"""

import logging
import time
from typing import Callable, Optional

from . import hotp, timestep, uri
from .errors import InvalidDigitsError, InvalidParameterError, NotEnrolledError
from .models import AccountRecord, CodeSnapshot, Verdict
from .replay import ReplayGuard
from .secret import DEFAULT_SECRET_BYTES, generate_secret

logger = logging.getLogger(__name__)


class Authenticator:

    def __init__(self, store, step_seconds: int = timestep.DEFAULT_TIME_STEP,
                 digits: int = hotp.DEFAULT_DIGITS, window: int = timestep.DEFAULT_WINDOW,
                 retention_seconds: Optional[int] = None,
                 clock: Callable[[], float] = time.time):
        if not hotp.MIN_DIGITS <= digits <= hotp.MAX_DIGITS:
            raise InvalidDigitsError(f"digits must be between {hotp.MIN_DIGITS} and {hotp.MAX_DIGITS}, got {digits}")
        self.store = store
        self.step_seconds = step_seconds
        self.digits = digits
        self.window = window
        self.clock = clock
        self.guard = ReplayGuard(store, step_seconds=step_seconds, window=window,
                                 retention_seconds=retention_seconds)

    def _now(self, now: Optional[float]) -> int:
        return int(self.clock() if now is None else now)

    def enroll(self, account: str, issuer: str,
               secret_length: int = DEFAULT_SECRET_BYTES) -> AccountRecord:
        if not account:
            raise InvalidParameterError("account must not be empty")
        record = AccountRecord(account=account, issuer=issuer or "",
                               secret=generate_secret(secret_length))
        self.store.save_account_record(record)
        self.store.clear_used_codes()
        logger.info("Enrolled account %r (issuer %r, %d-bit secret)", account, issuer, secret_length * 8)
        return record

    def account(self) -> AccountRecord:
        record = self.store.get_account_record()
        if record is None:
            raise NotEnrolledError("No account enrolled")
        return record

    def provisioning_uri(self) -> str:
        record = self.account()
        return uri.build(record.secret, record.account, record.issuer,
                         step_seconds=self.step_seconds, digits=self.digits)

    def snapshot(self, now: Optional[float] = None) -> CodeSnapshot:
        """What the host renders on every refresh tick."""
        now = self._now(now)
        step = timestep.compute_step(now, self.step_seconds)
        breakdown = hotp.explain(self.account().secret, step, self.digits)
        return CodeSnapshot(
            code=breakdown.code,
            step=step,
            remaining=timestep.seconds_remaining(now, self.step_seconds),
            breakdown=breakdown,
        )

    def verify(self, code: str, now: Optional[float] = None) -> Verdict:
        """
        Full login check. ``hotp.verify`` alone is not enough: a valid code
        stays valid for the whole skew window and must be consumed once.
        """
        now = self._now(now)
        record = self.account()
        if isinstance(code, str):
            code = code.strip()
        step = hotp.matching_step(record.secret, code, now, window=self.window,
                                  step_seconds=self.step_seconds, digits=self.digits)
        if step is None:
            logger.info("Rejected invalid code for %r", record.account)
            return Verdict.REJECTED_INVALID
        return self.guard.check_and_record(code, now)

    def clear_used_codes(self) -> None:
        self.store.clear_used_codes()
        logger.info("Cleared used-code history")
