"""Storage backends for the TOTP engine: the contract plus memory and SQLite stores."""

from .base import OTPStore
from .db_manager import SQLiteStore
from .memory_store import MemoryStore

__all__ = ['OTPStore', 'SQLiteStore', 'MemoryStore']
