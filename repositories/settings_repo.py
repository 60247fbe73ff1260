"""
repositories/settings_repo.py
-----------------------------
Data access layer for user preferences.
Currently holds a single setting: the selected display currency.
"""

import sqlite3
from typing import Optional

from config import DEFAULT_CURRENCY
from db.connection import get_connection, release_connection
from models.errors import PersistenceError
from models.subscription import Currency
from utils.logger import get_logger

logger = get_logger(__name__)

_CURRENCY_KEY = "selected_currency"


class SettingsRepository:
    """Repository for the key/value preferences table."""

    def get_value(self, key: str) -> Optional[str]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT value FROM preferences WHERE key = ?;", (key,)).fetchone()
            return row["value"] if row else None
        finally:
            release_connection(conn)

    def set_value(self, key: str, value: str) -> None:
        """Insert or overwrite a preference."""
        sql = """
            INSERT INTO preferences (key, value) VALUES (?, ?)
            ON CONFLICT (key) DO UPDATE SET value = excluded.value;
        """
        conn = get_connection()
        try:
            conn.execute(sql, (key, value))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Failed to save preference '{key}': {e}")
            raise PersistenceError("save preference", str(e)) from e
        finally:
            release_connection(conn)

    def get_currency(self) -> Currency:
        """
        Get the selected display currency.
        Falls back to DEFAULT_CURRENCY, then USD, when nothing valid is stored.
        """
        for code in (self.get_value(_CURRENCY_KEY), DEFAULT_CURRENCY):
            if code:
                try:
                    return Currency.from_code(code)
                except ValueError:
                    logger.warning(f"Ignoring unsupported display currency {code!r}")
        return Currency.USD

    def set_currency(self, currency: Currency) -> None:
        self.set_value(_CURRENCY_KEY, currency.value)
        logger.info(f"Display currency set to {currency.value}")
