"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── Owner ─────────────────────────────────────────────────
# SubLoop is a single-user tracker. 0 means any user is allowed (dev mode).
OWNER_USER_ID: int = int(os.getenv("OWNER_USER_ID", "0"))

# ── SQLite ────────────────────────────────────────────────
DB_PATH: str = os.getenv("DB_PATH", "subloop.db")

# ── Currency ──────────────────────────────────────────────
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD").upper()

# ── Reminders ─────────────────────────────────────────────
REMINDER_HOUR: int = int(os.getenv("REMINDER_HOUR", "9"))
REMINDER_DAYS_BEFORE: int = int(os.getenv("REMINDER_DAYS_BEFORE", "1"))

# ── Add form ──────────────────────────────────────────────
DEFAULT_PAYMENT_OFFSET_DAYS: int = int(os.getenv("DEFAULT_PAYMENT_OFFSET_DAYS", "30"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
