"""
base.py — Persistent-store contract consumed by the engine.

Implementations own the AccountRecord and the UsedCodeRecord set. Any I/O
failure or corrupted data must surface as StorageUnavailableError; a store
must never answer "no records" when it could not read them.
"""

import abc
import threading
from typing import List, Optional

from totp_engine.models import AccountRecord, UsedCodeRecord


class OTPStore(abc.ABC):

    def __init__(self):
        self._claim_lock = threading.Lock()

    @abc.abstractmethod
    def get_account_record(self) -> Optional[AccountRecord]:
        """Return the enrolled account, or None before enrollment."""

    @abc.abstractmethod
    def save_account_record(self, record: AccountRecord) -> None:
        """Create or replace the single account record."""

    @abc.abstractmethod
    def list_used_codes(self) -> List[UsedCodeRecord]:
        pass

    @abc.abstractmethod
    def save_used_code(self, record: UsedCodeRecord) -> None:
        pass

    @abc.abstractmethod
    def clear_used_codes(self) -> None:
        pass

    def purge_used_codes(self, cutoff: int) -> int:
        """
        Remove records with ``timestamp <= cutoff``; return how many went away.

        Built on the five operations above. Stores that can delete in place
        should override it.
        """
        records = self.list_used_codes()
        keep = [r for r in records if r.timestamp > cutoff]
        if len(keep) == len(records):
            return 0
        self.clear_used_codes()
        for record in keep:
            self.save_used_code(record)
        return len(records) - len(keep)

    def claim_code(self, code: str, now: int, retention_seconds: int) -> bool:
        """
        Record ``code`` as used at ``now`` unless an unexpired record holds it.

        Returns True when the code was claimed, False for a replay. Purge,
        lookup and insert happen as one step: two callers racing on the same
        code can never both get True. The default serializes on a lock held
        by this store object; stores shared between processes must override
        it with an atomic operation of their backend.
        """
        cutoff = now - retention_seconds
        with self._claim_lock:
            self.purge_used_codes(cutoff)
            if any(r.code == code and r.timestamp > cutoff for r in self.list_used_codes()):
                return False
            self.save_used_code(UsedCodeRecord(code=code, timestamp=now))
            return True
