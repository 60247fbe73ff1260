"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Subscriptions table: one row per tracked subscription.
-- seq preserves insertion order; id is the stable public identifier.
CREATE TABLE IF NOT EXISTS subscriptions (
    seq                 INTEGER PRIMARY KEY AUTOINCREMENT,
    id                  TEXT UNIQUE NOT NULL,
    name                TEXT NOT NULL CHECK (length(trim(name)) > 0),
    icon                TEXT NOT NULL,
    price               REAL NOT NULL CHECK (typeof(price) IN ('real', 'integer') AND price >= 0),
    currency            TEXT NOT NULL CHECK (currency IN ('USD', 'EUR', 'GBP', 'TRY')),
    category            TEXT NOT NULL CHECK (category IN (
                            'Entertainment', 'Productivity', 'Cloud Storage', 'Music', 'Gaming',
                            'Fitness', 'News', 'Education', 'Other'
                        )),
    next_payment_date   TEXT NOT NULL,
    accent_red          REAL NOT NULL,
    accent_green        REAL NOT NULL,
    accent_blue         REAL NOT NULL,
    created_at          TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Preferences table: single-value user settings (e.g. selected display currency)
CREATE TABLE IF NOT EXISTS preferences (
    key                 TEXT PRIMARY KEY,
    value               TEXT NOT NULL
);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_db
    init_db()
    create_tables()
    print("✅ Database schema created successfully.")
