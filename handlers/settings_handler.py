"""
handlers/settings_handler.py
----------------------------
Handles the display currency preference.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.subscription_handler import get_service
from models.errors import PersistenceError, ValidationError
from models.subscription import Currency
from security.auth import owner_only
from utils.logger import get_logger

logger = get_logger(__name__)


def currency_options(selected: Currency) -> str:
    """List every supported currency, marking the selected one."""
    return "\n".join(
        f"{'✅' if c is selected else '▫️'} {c.value} ({c.symbol}) {c.display_name}"
        for c in Currency
    )


@owner_only
async def currency_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /currency - show or change the display currency.

    Usage:
        /currency        → show the current choice
        /currency EUR    → switch to euros
    Amounts are only re-labelled, never converted.
    """
    service = get_service(context)

    if not context.args:
        selected = service.display_currency()
        await update.message.reply_text(
            f"💱 Display currency\n\n{currency_options(selected)}\n\n"
            "Change it with /currency <code>, e.g. /currency EUR"
        )
        return

    try:
        currency = service.set_display_currency(context.args[0])
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e.message}")
        return
    except PersistenceError as e:
        logger.error(f"Saving display currency failed: {e.message}")
        await update.message.reply_text("❌ Could not save the setting. Please try again.")
        return

    await update.message.reply_text(f"✅ Amounts are now shown in {currency.display_name} ({currency.symbol}).")
