"""
security/auth.py
-----------------
Access guard for the Telegram bot.
SubLoop tracks one person's subscriptions, so only the owner may use it.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import OWNER_USER_ID
from utils.logger import get_logger

logger = get_logger(__name__)


def owner_only(func: Callable):
    """
    Decorator that restricts a handler to the configured owner.

    Usage:
        @owner_only
        async def my_handler(update, context):
            ...

    Behavior:
        - If OWNER_USER_ID is 0, every user is allowed (dev mode).
        - Otherwise other users get a refusal and the attempt is logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if OWNER_USER_ID and user.id != OWNER_USER_ID:
            logger.warning(
                f"🚫 Unauthorized access attempt: user_id={user.id}, username={user.username}"
            )
            await update.message.reply_text("⛔ Sorry, this SubLoop bot is private.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
