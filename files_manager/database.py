"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from common.constants import MAX_ID
from files_manager.config import DATABASE_PATH


class Database:
    """
    Document store holding users and file metadata.

    Each operation opens its own connection; no connection is shared
    between requests.
    """

    def __init__(self, path: str = DATABASE_PATH):
        self.path = path

    def init_schema(self) -> None:
        """
        Initialize database and create tables if they don't exist.
        """
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS files (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('folder', 'file', 'image')),
                    parent_id INTEGER NOT NULL DEFAULT 0,
                    owner_id INTEGER NOT NULL,
                    is_public INTEGER NOT NULL DEFAULT 0,
                    local_path TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(owner_id) REFERENCES users(id)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_files_owner_parent ON files(owner_id, parent_id, id)
            """)

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def is_alive(self) -> bool:
        try:
            with self.get_connection() as conn:
                conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            return False


def parse_id(value) -> Optional[int]:
    """
    Convert an id received from a caller into a database id.

    Args:
        value: Path or query value (str or int)

    Returns:
        Non-negative integer id, or None when the value is not a valid id
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        candidate = value
    elif isinstance(value, str) and value.strip().isdigit() and value.strip().isascii():
        candidate = int(value.strip())
    else:
        return None

    if candidate < 0 or candidate > MAX_ID:
        return None
    return candidate
