"""In-process store: lives exactly as long as the object that holds it."""

import threading
from typing import List, Optional

from totp_engine.models import AccountRecord, UsedCodeRecord

from .base import OTPStore


class MemoryStore(OTPStore):

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self._account: Optional[AccountRecord] = None
        self._used: List[UsedCodeRecord] = []

    def get_account_record(self) -> Optional[AccountRecord]:
        with self._lock:
            return self._account

    def save_account_record(self, record: AccountRecord) -> None:
        with self._lock:
            self._account = record

    def list_used_codes(self) -> List[UsedCodeRecord]:
        with self._lock:
            return list(self._used)

    def save_used_code(self, record: UsedCodeRecord) -> None:
        with self._lock:
            if record not in self._used:
                self._used.append(record)

    def clear_used_codes(self) -> None:
        with self._lock:
            self._used.clear()

    def purge_used_codes(self, cutoff: int) -> int:
        with self._lock:
            before = len(self._used)
            self._used = [r for r in self._used if r.timestamp > cutoff]
            return before - len(self._used)

    def claim_code(self, code: str, now: int, retention_seconds: int) -> bool:
        cutoff = now - retention_seconds
        with self._lock:
            self._used = [r for r in self._used if r.timestamp > cutoff]
            if any(r.code == code for r in self._used):
                return False
            self._used.append(UsedCodeRecord(code=code, timestamp=now))
            return True
