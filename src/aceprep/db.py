"""Local key/value storage and connection management."""
import sqlite3
from pathlib import Path
from typing import Optional

from aceprep.config import DEFAULT_DB_PATH

TEMPLATES_KEY = "aceprep_multi_saved_tests"
PERSONAL_BEST_KEY = "aceprep_pb"

SCHEMA = """
CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def get_setting(db_path: str, key: str, default: Optional[str] = None) -> Optional[str]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO user_settings (key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
        (key, value),
    )
    conn.commit()
    conn.close()


class SettingSlot:
    """A single persisted value under a fixed key.

    Components receive a slot rather than a database path so the storage
    backend stays out of their logic. ``load`` returns the raw stored text
    (or ``None``), ``save`` replaces it in one statement.
    """

    def __init__(self, db_path: str, key: str):
        self.db_path = db_path
        self.key = key

    def load(self) -> Optional[str]:
        return get_setting(self.db_path, self.key)

    def save(self, value: str) -> None:
        set_setting(self.db_path, self.key, value)

    def __repr__(self) -> str:
        return f"SettingSlot({self.db_path!r}, {self.key!r})"
