"""
main.py
-------
Entry point for the SubLoop Telegram bot.

Responsibilities:
    - Initialize the SQLite database and schema.
    - Wire the subscription service to its store and reminder scheduler.
    - Register all handlers and start polling.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import OWNER_USER_ID, TELEGRAM_BOT_TOKEN
from db.connection import close_db, init_db
from db.init_db import create_tables
from handlers.settings_handler import currency_command
from handlers.start_handler import help_command, myid_command, start_command
from handlers.subscription_handler import (
    SERVICE_KEY,
    add_command,
    delete_command,
    edit_command,
    list_command,
)
from handlers.summary_handler import categories_command, chart_command, total_command
from repositories.subscription_repo import SubscriptionRepository
from services.reminder_service import JobQueueReminderScheduler, NullReminderScheduler
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)


async def authorize_reminders(application: Application) -> None:
    """
    Ask for permission to deliver reminders, then re-create reminder jobs
    for every stored subscription. Runs in the background at startup.
    """
    service: SubscriptionService = application.bot_data[SERVICE_KEY]
    scheduler = service.scheduler
    if not isinstance(scheduler, JobQueueReminderScheduler):
        return

    if await scheduler.request_authorization(application.bot):
        subscriptions = service.list_subscriptions()
        scheduler.restore(subscriptions)
        logger.info(f"Restored reminders for {len(subscriptions)} subscriptions")


async def post_init(application: Application) -> None:
    """Register the bot commands menu and start reminder authorization."""
    commands = [
        BotCommand("start", "🚀 Start the bot"),
        BotCommand("help", "📖 Show help"),
        BotCommand("list", "🔁 Your subscriptions"),
        BotCommand("add", "➕ Add a subscription"),
        BotCommand("edit", "✏️ Edit a subscription"),
        BotCommand("delete", "🗑️ Delete a subscription"),
        BotCommand("total", "💳 Total monthly spend"),
        BotCommand("categories", "📊 Spend per category"),
        BotCommand("chart", "🍩 Category chart"),
        BotCommand("currency", "💱 Display currency"),
        BotCommand("myid", "🆔 Your Telegram ID"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")

    # Fire and forget: no handler waits for the outcome.
    application.create_task(authorize_reminders(application), name="authorize_reminders")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_db()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(post_init).build()

    # ── 3. Wire services ──────────────────────────────────
    if app.job_queue:
        scheduler = JobQueueReminderScheduler(app.job_queue, OWNER_USER_ID)
    else:
        logger.warning("JobQueue unavailable (install python-telegram-bot[job-queue]); reminders disabled.")
        scheduler = NullReminderScheduler()
    app.bot_data[SERVICE_KEY] = SubscriptionService(SubscriptionRepository(), scheduler)

    # ── 4. Register command handlers ──────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("list", list_command))
    app.add_handler(CommandHandler("add", add_command))
    app.add_handler(CommandHandler("edit", edit_command))
    app.add_handler(CommandHandler("delete", delete_command))
    app.add_handler(CommandHandler("total", total_command))
    app.add_handler(CommandHandler("categories", categories_command))
    app.add_handler(CommandHandler("chart", chart_command))
    app.add_handler(CommandHandler("currency", currency_command))

    # ── 5. Start polling ──────────────────────────────────
    logger.info("🚀 SubLoop is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 6. Cleanup on shutdown ────────────────────────────
    close_db()
    logger.info("SubLoop stopped.")


if __name__ == "__main__":
    main()
