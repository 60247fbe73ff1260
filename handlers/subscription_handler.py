"""
handlers/subscription_handler.py
--------------------------------
Handles adding, editing, listing and deleting subscriptions.
Parses command arguments and delegates everything else to SubscriptionService.
"""

import re
from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from models.errors import PersistenceError, ValidationError
from models.subscription import Currency, Subscription
from security.auth import owner_only
from services.subscription_service import SubscriptionService
from utils.formatting import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

SERVICE_KEY = "subscription_service"

ADD_USAGE = (
    "➕ Add a subscription\n\n"
    "Format:\n"
    "/add name | price | category | date | icon | color | currency\n"
    "Only name and price are required.\n\n"
    "Examples:\n"
    "• /add Netflix | 15.99\n"
    "• /add Spotify | 10,99 | Music | 2026-11-03\n"
    "• /add iCloud | 2.99 | Cloud Storage | 2026-11-10 | icloud.fill | sky | EUR"
)

EDIT_USAGE = (
    "✏️ Edit a subscription\n\n"
    "Format: /edit <number> key:value ...\n"
    "Keys: name, price, category, date, icon, color, currency\n\n"
    "Examples:\n"
    "• /edit 2 price:12.99\n"
    "• /edit 1 name:YouTube Premium category:Entertainment"
)

_EDIT_KEYS = {
    "name": "name",
    "price": "price",
    "category": "category",
    "date": "next_payment_date",
    "icon": "icon",
    "color": "color",
    "currency": "currency",
}
_EDIT_KEY_PATTERN = re.compile(r"(?:^|\s)(" + "|".join(_EDIT_KEYS) + r"):", re.IGNORECASE)

_ADD_FIELDS = ["name", "price", "category", "next_payment_date", "icon", "color", "currency"]


def get_service(context: ContextTypes.DEFAULT_TYPE) -> SubscriptionService:
    """The SubscriptionService wired into the application at startup."""
    return context.application.bot_data[SERVICE_KEY]


def parse_add_args(text: str) -> dict | None:
    """
    Split structured add input into service keyword arguments:
      name | price | category | date | icon | color | currency

    Empty optional parts are left out so the service defaults apply.

    Returns:
        Dict of fields, or None when name or price is missing.
    """
    parts = [p.strip() for p in text.split("|")]
    if len(parts) < 2 or len(parts) > len(_ADD_FIELDS):
        return None

    fields = {key: value for key, value in zip(_ADD_FIELDS, parts) if value}
    if "name" not in fields or "price" not in fields:
        return None
    return fields


def parse_edit_args(text: str) -> dict | None:
    """
    Parse 'key:value' pairs from /edit input. Values may contain spaces
    and run up to the next known key.

    Returns:
        Dict of service keyword arguments, or None if nothing usable was given.
    """
    matches = list(_EDIT_KEY_PATTERN.finditer(text))
    if not matches or text[:matches[0].start()].strip():
        return None

    fields = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        value = text[match.end():end].strip()
        if not value:
            return None
        fields[_EDIT_KEYS[match.group(1).lower()]] = value
    return fields


def format_subscription_line(
    position: int, subscription: Subscription, currency: Currency, today: date
) -> str:
    """Render one subscription for /list, priced in the display currency."""
    days = subscription.days_until_payment(today)
    if days > 1:
        due = f"in {days} days"
    elif days == 1:
        due = "tomorrow"
    elif days == 0:
        due = "today"
    else:
        due = f"{-days} days ago"

    return (
        f"{position}. {subscription.name} - {format_currency(subscription.price, currency)} "
        f"({subscription.category.value})\n"
        f"    📅 {subscription.next_payment_date} ({due}) · #{subscription.id[:8]}"
    )


@owner_only
async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /list - show every subscription in the order it was added."""
    service = get_service(context)
    subscriptions = service.list_subscriptions()
    if not subscriptions:
        await update.message.reply_text("📭 No subscriptions yet. Use /add to track one.")
        return

    currency = service.display_currency()
    today = date.today()
    lines = ["🔁 Your subscriptions:\n"]
    lines += [
        format_subscription_line(i, s, currency, today)
        for i, s in enumerate(subscriptions, start=1)
    ]
    lines.append(f"\n💳 Total monthly spend: {format_currency(service.total_monthly_spend(), currency)}")
    await update.message.reply_text("\n".join(lines))


@owner_only
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add - create a subscription from 'name | price | ...' input."""
    if not context.args:
        await update.message.reply_text(ADD_USAGE)
        return

    fields = parse_add_args(" ".join(context.args))
    if fields is None:
        await update.message.reply_text(f"⚠️ Name and price are required.\n\n{ADD_USAGE}")
        return

    service = get_service(context)
    try:
        saved = service.create_subscription(**fields)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e.message}")
        return
    except PersistenceError as e:
        logger.error(f"Add failed: {e.message}")
        await update.message.reply_text("❌ Could not save the subscription. Please try again.")
        return

    await update.message.reply_text(
        f"✅ Added {saved.name}\n"
        f"  💶 {format_currency(saved.price, saved.currency)} / month\n"
        f"  🏷️ {saved.category.value}\n"
        f"  📅 Next payment: {saved.next_payment_date}"
    )


@owner_only
async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit <number> key:value ... - change fields of a subscription."""
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(EDIT_USAGE)
        return

    service = get_service(context)
    target = service.resolve(context.args[0])
    if target is None:
        await update.message.reply_text(f"⚠️ Subscription {context.args[0]} not found. See /list.")
        return

    fields = parse_edit_args(" ".join(context.args[1:]))
    if fields is None:
        await update.message.reply_text(EDIT_USAGE)
        return

    try:
        updated = service.update_subscription(target.id, **fields)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e.message}")
        return
    except PersistenceError as e:
        logger.error(f"Edit failed: {e.message}")
        await update.message.reply_text("❌ Could not update the subscription. Please try again.")
        return

    if updated is None:
        await update.message.reply_text("⚠️ That subscription no longer exists.")
        return
    await update.message.reply_text(f"✏️ Updated {updated.name}.")


@owner_only
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /delete <number> - delete a subscription.
    Usage: /delete 3
    """
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete <number>\nExample: /delete 3")
        return

    service = get_service(context)
    target = service.resolve(context.args[0])
    if target is None:
        await update.message.reply_text(f"⚠️ Subscription {context.args[0]} not found. See /list.")
        return

    try:
        service.delete_subscription(target.id)
    except PersistenceError as e:
        logger.error(f"Delete failed: {e.message}")
        await update.message.reply_text("❌ Could not delete the subscription. Please try again.")
        return

    await update.message.reply_text(f"🗑️ Deleted {target.name}.")
