"""
handlers/summary_handler.py
---------------------------
Handles spending summaries: monthly total, category breakdown and chart.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.subscription_handler import get_service
from security.auth import owner_only
from services.chart_service import ChartService
from utils.formatting import format_currency, format_share
from utils.logger import get_logger

logger = get_logger(__name__)


@owner_only
async def total_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /total - show the total monthly spend."""
    service = get_service(context)
    subscriptions = service.list_subscriptions()
    currency = service.display_currency()
    total = format_currency(service.total_monthly_spend(), currency)
    await update.message.reply_text(
        f"💳 Total monthly spend: {total}\n"
        f"🔁 Active subscriptions: {len(subscriptions)}"
    )


@owner_only
async def categories_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /categories - show spend per category, largest first."""
    service = get_service(context)
    breakdown = service.category_breakdown()
    if not breakdown:
        await update.message.reply_text("📭 No subscriptions yet. Use /add to track one.")
        return

    currency = service.display_currency()
    lines = ["📊 Spending by category:\n"]
    for row in breakdown:
        lines.append(
            f"• {row.category.value}: {format_currency(row.amount, currency)} "
            f"({format_share(row.share)})"
        )
    await update.message.reply_text("\n".join(lines))


@owner_only
async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chart - send a donut chart of spend by category."""
    await update.message.reply_text("📊 Drawing your chart...")

    buf = ChartService(get_service(context)).generate_category_donut()
    if buf:
        await update.message.reply_photo(photo=buf, caption="📊 Monthly spend by category")
    else:
        await update.message.reply_text("📭 Nothing to chart yet. Add a paid subscription first.")
