import pytest

from backend import create_app
from database import MemoryStore, SQLiteStore
from totp_engine.errors import StorageUnavailableError

RFC_SECRET = b"12345678901234567890"


@pytest.fixture
def rfc_secret():
    return RFC_SECRET


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteStore(str(tmp_path / "otp.db"))


class BrokenStore(MemoryStore):
    """Store whose used-code table cannot be read or written."""

    def list_used_codes(self):
        raise StorageUnavailableError("disk on fire")

    def save_used_code(self, record):
        raise StorageUnavailableError("disk on fire")

    def purge_used_codes(self, cutoff):
        raise StorageUnavailableError("disk on fire")

    def claim_code(self, code, now, retention_seconds):
        raise StorageUnavailableError("disk on fire")


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def app(tmp_path):
    app = create_app({"TESTING": True, "DB_PATH": str(tmp_path / "api.db")})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
