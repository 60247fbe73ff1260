"""
db/connection.py
----------------
Manages access to the on-device SQLite database.
The database path is fixed once by `init_db()`; each repository call opens
its own short-lived connection and releases it when done.
"""

import sqlite3
from typing import Optional

from config import DB_PATH
from utils.logger import get_logger

logger = get_logger(__name__)

_db_path: Optional[str] = None


def init_db(path: Optional[str] = None) -> None:
    """
    Point the connection factory at a database file and verify it opens.

    Args:
        path: Database file path. Defaults to DB_PATH from config.

    Raises:
        sqlite3.OperationalError: If the database file cannot be opened.
    """
    global _db_path
    target = path or DB_PATH
    try:
        conn = sqlite3.connect(target)
        conn.close()
    except sqlite3.OperationalError as e:
        logger.error(f"Failed to open database at {target}: {e}")
        raise
    _db_path = target
    logger.info(f"Database ready at {target}")


def get_connection() -> sqlite3.Connection:
    """
    Open a connection to the configured database.

    Returns:
        A sqlite3 connection with `sqlite3.Row` rows and foreign keys enabled.

    Raises:
        RuntimeError: If `init_db()` has not been called.
    """
    if _db_path is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    conn = sqlite3.connect(_db_path, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def release_connection(conn: sqlite3.Connection) -> None:
    """
    Close a connection obtained from `get_connection()`.

    Args:
        conn: The sqlite3 connection to release.
    """
    conn.close()


def close_db() -> None:
    """Forget the configured database path."""
    global _db_path
    if _db_path is not None:
        logger.info(f"Database at {_db_path} closed.")
        _db_path = None
