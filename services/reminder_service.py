"""
services/reminder_service.py
----------------------------
One-shot payment reminders, delivered through the Telegram bot's JobQueue.

A reminder fires at REMINDER_HOUR local time, REMINDER_DAYS_BEFORE days
before a subscription's next payment date. Jobs are named after the
subscription id, so scheduling the same id twice leaves a single job.
"""

from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Optional, Protocol

from telegram import Bot
from telegram.error import TelegramError
from telegram.ext import ContextTypes, JobQueue

from config import REMINDER_DAYS_BEFORE, REMINDER_HOUR
from models.subscription import Subscription
from utils.formatting import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

REMINDER_TITLE = "Payment Reminder"


class ReminderScheduler(Protocol):
    """What the subscription service needs from a reminder backend."""

    def schedule(self, subscription: Subscription) -> None: ...

    def reschedule(self, subscription: Subscription) -> None: ...

    def cancel(self, subscription_id: str) -> None: ...

    def cancel_all(self) -> None: ...


def reminder_trigger(
    next_payment_date: date,
    now: Optional[datetime] = None,
    hour: int = REMINDER_HOUR,
    days_before: int = REMINDER_DAYS_BEFORE,
) -> Optional[datetime]:
    """
    Compute when the reminder for a payment date should fire.

    Args:
        next_payment_date: The payment date.
        now: Current local time (naive). Defaults to datetime.now().
        hour: Local hour of day for the alert.
        days_before: Days ahead of the payment date.

    Returns:
        A naive local datetime, or None when the instant cannot be
        represented or is not in the future.
    """
    try:
        trigger = datetime.combine(next_payment_date - timedelta(days=days_before), time(hour=hour))
    except (OverflowError, ValueError):
        return None
    if trigger <= (now or datetime.now()):
        return None
    return trigger


def _due_phrase(days_before: int) -> str:
    if days_before == 0:
        return "today"
    if days_before == 1:
        return "tomorrow"
    return f"in {days_before} days"


def reminder_message(subscription: Subscription, days_before: int = REMINDER_DAYS_BEFORE) -> tuple[str, str]:
    """Title and body of the alert for a subscription, worded for the reminder offset."""
    price = format_currency(subscription.price, subscription.currency)
    return REMINDER_TITLE, f"Your {subscription.name} subscription is due {_due_phrase(days_before)} ({price})."


async def send_reminder(context: ContextTypes.DEFAULT_TYPE) -> None:
    """JobQueue callback: deliver one reminder to the owner chat."""
    job = context.job
    title, body = job.data["title"], job.data["body"]
    try:
        await context.bot.send_message(chat_id=job.chat_id, text=f"⏰ {title}\n\n{body}")
        logger.info(f"Sent reminder for subscription {job.name}")
    except TelegramError as e:
        logger.error(f"Failed to send reminder for subscription {job.name}: {e}")


class JobQueueReminderScheduler:
    """
    ReminderScheduler backed by python-telegram-bot's JobQueue.

    Nothing is scheduled until `request_authorization()` has confirmed the
    owner chat is reachable; before that (or if it is denied) every
    `schedule()` call is a silent no-op.
    """

    def __init__(
        self,
        job_queue: JobQueue,
        chat_id: int,
        clock: Callable[[], datetime] = datetime.now,
        days_before: int = REMINDER_DAYS_BEFORE,
    ):
        self.job_queue = job_queue
        self.chat_id = chat_id
        self.authorized = False
        self._clock = clock
        self.days_before = days_before

    async def request_authorization(self, bot: Bot) -> bool:
        """
        Check that reminders can be delivered to the owner chat.

        Returns:
            The new value of `authorized`.
        """
        if not self.chat_id:
            logger.warning("OWNER_USER_ID is not set; payment reminders are disabled.")
            self.authorized = False
            return False
        try:
            await bot.get_chat(self.chat_id)
            self.authorized = True
            logger.info(f"Reminders authorized for chat {self.chat_id}")
        except TelegramError as e:
            self.authorized = False
            logger.warning(f"Reminders not authorized for chat {self.chat_id}: {e}")
        return self.authorized

    def schedule(self, subscription: Subscription) -> None:
        if not self.authorized:
            logger.debug(f"Skipping reminder for {subscription.id}: not authorized")
            return

        trigger = reminder_trigger(subscription.next_payment_date, self._clock(), days_before=self.days_before)
        if trigger is None:
            logger.debug(f"Skipping reminder for {subscription.id}: trigger already passed")
            return

        self._remove_jobs(subscription.id)
        title, body = reminder_message(subscription, self.days_before)
        self.job_queue.run_once(
            send_reminder,
            when=trigger.astimezone(),
            data={"title": title, "body": body},
            name=subscription.id,
            chat_id=self.chat_id,
        )
        logger.info(f"Scheduled reminder for '{subscription.name}' at {trigger:%Y-%m-%d %H:%M}")

    def reschedule(self, subscription: Subscription) -> None:
        self.cancel(subscription.id)
        self.schedule(subscription)

    def cancel(self, subscription_id: str) -> None:
        if self._remove_jobs(subscription_id):
            logger.info(f"Cancelled reminder for subscription {subscription_id}")

    def cancel_all(self) -> None:
        for job in self.job_queue.jobs():
            job.schedule_removal()
        logger.info("Cancelled all pending reminders")

    def restore(self, subscriptions: Iterable[Subscription]) -> None:
        """Re-create jobs for stored subscriptions (JobQueue does not survive restarts)."""
        for subscription in subscriptions:
            self.schedule(subscription)

    def _remove_jobs(self, name: str) -> int:
        jobs = self.job_queue.get_jobs_by_name(name)
        for job in jobs:
            job.schedule_removal()
        return len(jobs)


class NullReminderScheduler:
    """Used when no JobQueue is available: every call does nothing."""

    def schedule(self, subscription: Subscription) -> None:
        pass

    def reschedule(self, subscription: Subscription) -> None:
        pass

    def cancel(self, subscription_id: str) -> None:
        pass

    def cancel_all(self) -> None:
        pass
