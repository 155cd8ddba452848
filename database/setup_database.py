import logging
import os
import sqlite3

logger = logging.getLogger(__name__)

DATABASE_FILE = 'database/totp_demo.db'

SCHEMA = '''
CREATE TABLE IF NOT EXISTS account (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    account TEXT NOT NULL,
    issuer TEXT NOT NULL,
    secret_key TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS used_codes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    UNIQUE (code, timestamp)
);

CREATE INDEX IF NOT EXISTS idx_used_codes_timestamp ON used_codes (timestamp);
'''


def setup_database(path: str = DATABASE_FILE) -> None:
    """Create the account and used_codes tables if they do not exist yet."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    logger.debug("Database schema ready at %s", path)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    setup_database()
    logger.info("Database setup completed successfully!")
