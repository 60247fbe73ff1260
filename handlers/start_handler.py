"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
"""

from telegram import Update
from telegram.ext import ContextTypes

from models.subscription import AVAILABLE_ICONS, ACCENT_COLORS, Category
from security.auth import owner_only
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = (
    "🤖 SubLoop keeps track of your subscriptions and reminds you "
    "the day before each payment.\n\n"
    "🔧 Commands:\n"
    "/list - your subscriptions\n"
    "/add - add a subscription (name | price | ...)\n"
    "/edit - change a subscription\n"
    "/delete - remove a subscription\n"
    "/total - total monthly spend\n"
    "/categories - spend per category\n"
    "/chart - category chart\n"
    "/currency - display currency\n"
    "/myid - your Telegram ID\n\n"
    "🏷️ Categories: " + ", ".join(c.value for c in Category) + "\n"
    "🎨 Colors: " + ", ".join(ACCENT_COLORS) + " or #RRGGBB\n"
    "🖼️ Icons: " + ", ".join(key for key, _label in AVAILABLE_ICONS)
)


@owner_only
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show the welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hi {user.first_name}! 👋\n"
        f"I'm SubLoop, your subscription tracker.\n"
        f"Add one with /add Netflix | 15.99\n\n"
        f"Type /help to see every command."
    )


@owner_only
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)


async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the user's Telegram ID so it can be set as owner."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your Telegram ID: {user.id}\n"
        f"Set OWNER_USER_ID={user.id} in your .env file to keep the bot private."
    )
