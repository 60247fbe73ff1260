"""Tests for reminder trigger computation and the JobQueue-backed scheduler."""

from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.error import BadRequest

from models.subscription import Currency
from services.reminder_service import (
    JobQueueReminderScheduler,
    NullReminderScheduler,
    reminder_message,
    reminder_trigger,
    send_reminder,
)

NOW = datetime(2026, 10, 19, 12, 0)
OWNER = 4242


@pytest.fixture
def job_queue():
    queue = MagicMock()
    queue.get_jobs_by_name.return_value = []
    queue.jobs.return_value = []
    return queue


@pytest.fixture
def reminders(job_queue) -> JobQueueReminderScheduler:
    scheduler = JobQueueReminderScheduler(job_queue, OWNER, clock=lambda: NOW)
    scheduler.authorized = True
    return scheduler


class TestReminderTrigger:
    def test_nine_am_the_day_before(self):
        assert reminder_trigger(date(2026, 11, 3), NOW) == datetime(2026, 11, 2, 9, 0)

    def test_crosses_month_boundary(self):
        assert reminder_trigger(date(2026, 12, 1), NOW) == datetime(2026, 11, 30, 9, 0)

    def test_past_trigger_is_none(self):
        assert reminder_trigger(date(2026, 10, 1), NOW) is None

    def test_trigger_earlier_today_is_none(self):
        # payment tomorrow: reminder was due at 09:00 today, it is now noon
        assert reminder_trigger(date(2026, 10, 20), NOW) is None

    def test_trigger_later_today_is_kept(self):
        morning = datetime(2026, 10, 19, 8, 0)
        assert reminder_trigger(date(2026, 10, 20), morning) == datetime(2026, 10, 19, 9, 0)

    def test_unrepresentable_date_is_none(self):
        assert reminder_trigger(date.min, NOW) is None


class TestReminderMessage:
    def test_uses_name_and_formatted_price(self, make_subscription):
        title, body = reminder_message(make_subscription(name="Netflix", price=15.99))
        assert title == "Payment Reminder"
        assert body == "Your Netflix subscription is due tomorrow ($15.99)."

    def test_uses_the_record_currency(self, make_subscription):
        _title, body = reminder_message(make_subscription(price=99.9, currency=Currency.TRY))
        assert "₺99.90" in body

    @pytest.mark.parametrize("days_before, phrase", [(0, "due today"), (1, "due tomorrow"), (3, "due in 3 days")])
    def test_wording_follows_the_offset(self, make_subscription, days_before, phrase):
        _title, body = reminder_message(make_subscription(name="Netflix"), days_before)
        assert f"Netflix subscription is {phrase} (" in body


class TestJobQueueReminderScheduler:
    def test_schedule_creates_one_named_job(self, reminders, job_queue, make_subscription):
        sub = make_subscription(next_payment_date=date(2026, 11, 3))

        reminders.schedule(sub)

        job_queue.run_once.assert_called_once()
        kwargs = job_queue.run_once.call_args.kwargs
        assert kwargs["name"] == sub.id
        assert kwargs["chat_id"] == OWNER
        assert kwargs["when"].tzinfo is not None
        assert kwargs["when"].replace(tzinfo=None) == datetime(2026, 11, 2, 9, 0)
        assert "Netflix" in kwargs["data"]["body"]

    def test_custom_offset_moves_trigger_and_wording(self, job_queue, make_subscription):
        reminders = JobQueueReminderScheduler(job_queue, OWNER, clock=lambda: NOW, days_before=3)
        reminders.authorized = True

        reminders.schedule(make_subscription(next_payment_date=date(2026, 11, 3)))

        kwargs = job_queue.run_once.call_args.kwargs
        assert kwargs["when"].replace(tzinfo=None) == datetime(2026, 10, 31, 9, 0)
        assert "due in 3 days" in kwargs["data"]["body"]

    def test_schedule_replaces_existing_job_for_same_id(self, reminders, job_queue, make_subscription):
        old_job = MagicMock()
        job_queue.get_jobs_by_name.return_value = [old_job]

        reminders.schedule(make_subscription(next_payment_date=date(2026, 11, 3)))

        old_job.schedule_removal.assert_called_once()
        job_queue.run_once.assert_called_once()

    def test_schedule_is_noop_when_trigger_passed(self, reminders, job_queue, make_subscription):
        reminders.schedule(make_subscription(next_payment_date=date(2026, 10, 20)))
        job_queue.run_once.assert_not_called()

    def test_schedule_is_noop_without_authorization(self, reminders, job_queue, make_subscription):
        reminders.authorized = False
        reminders.schedule(make_subscription(next_payment_date=date(2026, 11, 3)))
        job_queue.run_once.assert_not_called()

    def test_cancel_removes_jobs_by_id(self, reminders, job_queue):
        job = MagicMock()
        job_queue.get_jobs_by_name.return_value = [job]

        reminders.cancel("abc")

        job_queue.get_jobs_by_name.assert_called_with("abc")
        job.schedule_removal.assert_called_once()

    def test_reschedule_cancels_then_schedules(self, reminders, job_queue, make_subscription):
        old_job = MagicMock()
        job_queue.get_jobs_by_name.return_value = [old_job]
        sub = make_subscription(next_payment_date=date(2026, 11, 3))

        reminders.reschedule(sub)

        assert old_job.schedule_removal.called
        assert job_queue.run_once.call_args.kwargs["name"] == sub.id

    def test_cancel_all(self, reminders, job_queue):
        jobs = [MagicMock(), MagicMock()]
        job_queue.jobs.return_value = jobs

        reminders.cancel_all()

        for job in jobs:
            job.schedule_removal.assert_called_once()

    def test_restore_schedules_every_future_payment(self, reminders, job_queue, make_subscription):
        subs = [
            make_subscription(name="Future", next_payment_date=date(2026, 11, 3)),
            make_subscription(name="Past", next_payment_date=date(2026, 10, 1)),
        ]

        reminders.restore(subs)

        assert job_queue.run_once.call_count == 1
        assert job_queue.run_once.call_args.kwargs["name"] == subs[0].id


class TestAuthorization:
    @pytest.mark.asyncio
    async def test_reachable_owner_chat_grants(self, job_queue):
        scheduler = JobQueueReminderScheduler(job_queue, OWNER)
        bot = MagicMock()
        bot.get_chat = AsyncMock()

        assert await scheduler.request_authorization(bot) is True
        assert scheduler.authorized is True
        bot.get_chat.assert_awaited_once_with(OWNER)

    @pytest.mark.asyncio
    async def test_unreachable_chat_denies_silently(self, job_queue):
        scheduler = JobQueueReminderScheduler(job_queue, OWNER)
        bot = MagicMock()
        bot.get_chat = AsyncMock(side_effect=BadRequest("Chat not found"))

        assert await scheduler.request_authorization(bot) is False
        assert scheduler.authorized is False

    @pytest.mark.asyncio
    async def test_missing_owner_denies(self, job_queue):
        scheduler = JobQueueReminderScheduler(job_queue, 0)
        bot = MagicMock()
        bot.get_chat = AsyncMock()

        assert await scheduler.request_authorization(bot) is False
        bot.get_chat.assert_not_awaited()


class TestSendReminder:
    @pytest.mark.asyncio
    async def test_sends_title_and_body_to_job_chat(self):
        context = MagicMock()
        context.job.chat_id = OWNER
        context.job.name = "abc"
        context.job.data = {"title": "Payment Reminder", "body": "Your Netflix subscription is due tomorrow ($15.99)."}
        context.bot.send_message = AsyncMock()

        await send_reminder(context)

        kwargs = context.bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == OWNER
        assert "Payment Reminder" in kwargs["text"]
        assert "Netflix" in kwargs["text"]

    @pytest.mark.asyncio
    async def test_delivery_failure_is_logged_not_raised(self):
        context = MagicMock()
        context.job.data = {"title": "t", "body": "b"}
        context.bot.send_message = AsyncMock(side_effect=BadRequest("blocked"))

        await send_reminder(context)


def test_null_scheduler_accepts_every_call(make_subscription):
    scheduler = NullReminderScheduler()
    sub = make_subscription()
    scheduler.schedule(sub)
    scheduler.reschedule(sub)
    scheduler.cancel(sub.id)
    scheduler.cancel_all()
