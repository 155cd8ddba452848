"""
db_manager.py — SQLite implementation of the OTP store.

One connection per operation, so a single SQLiteStore can be shared between
Flask request threads. The secret is stored as Base32 text, the same form
authenticator apps import. The path must name a file: ``:memory:`` would
give every connection its own empty database.
"""

import contextlib
import logging
import sqlite3
from typing import Iterator, List, Optional

from totp_engine import base32
from totp_engine.errors import InvalidEncodingError, StorageUnavailableError
from totp_engine.models import AccountRecord, UsedCodeRecord

from .base import OTPStore
from .setup_database import DATABASE_FILE, setup_database

logger = logging.getLogger(__name__)


class SQLiteStore(OTPStore):

    def __init__(self, path: str = DATABASE_FILE):
        super().__init__()
        self.path = path
        try:
            setup_database(path)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Cannot initialise database %s: %s", path, e)
            raise StorageUnavailableError(f"Cannot open database {path}") from e

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Connection wrapped in a transaction; sqlite errors become StorageUnavailableError."""
        conn = None
        try:
            conn = sqlite3.connect(self.path, timeout=5.0)
            conn.row_factory = sqlite3.Row  # rows behave like dictionaries
            with conn:
                yield conn
        except sqlite3.Error as e:
            logger.warning("Database error on %s: %s", self.path, e)
            raise StorageUnavailableError("OTP store unavailable") from e
        finally:
            if conn is not None:
                conn.close()

    def get_account_record(self) -> Optional[AccountRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT account, issuer, secret_key FROM account WHERE id = 1").fetchone()
        if row is None:
            return None
        try:
            secret = base32.decode(row['secret_key'])
        except InvalidEncodingError as e:
            raise StorageUnavailableError("Stored secret is corrupted") from e
        if not secret:
            raise StorageUnavailableError("Stored secret is corrupted")
        return AccountRecord(account=row['account'], issuer=row['issuer'], secret=secret)

    def save_account_record(self, record: AccountRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO account (id, account, issuer, secret_key) VALUES (1, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET account = excluded.account,
                       issuer = excluded.issuer, secret_key = excluded.secret_key,
                       created_at = CURRENT_TIMESTAMP""",
                (record.account, record.issuer, base32.encode(record.secret)),
            )

    def list_used_codes(self) -> List[UsedCodeRecord]:
        with self._connect() as conn:
            rows = conn.execute("SELECT code, timestamp FROM used_codes ORDER BY timestamp, id").fetchall()
        return [UsedCodeRecord(code=row['code'], timestamp=row['timestamp']) for row in rows]

    def save_used_code(self, record: UsedCodeRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO used_codes (code, timestamp) VALUES (?, ?)",
                (record.code, record.timestamp),
            )

    def clear_used_codes(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM used_codes")

    def purge_used_codes(self, cutoff: int) -> int:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM used_codes WHERE timestamp <= ?", (cutoff,))
            return cursor.rowcount

    def claim_code(self, code: str, now: int, retention_seconds: int) -> bool:
        # BEGIN IMMEDIATE takes the write lock before the lookup, so other
        # connections (other stores, other processes) wait until we commit.
        cutoff = now - retention_seconds
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            conn.execute("DELETE FROM used_codes WHERE timestamp <= ?", (cutoff,))
            seen = conn.execute(
                "SELECT 1 FROM used_codes WHERE code = ? AND timestamp > ?", (code, cutoff)
            ).fetchone()
            if seen is not None:
                return False
            try:
                conn.execute("INSERT INTO used_codes (code, timestamp) VALUES (?, ?)", (code, now))
            except sqlite3.IntegrityError:
                return False
            return True
