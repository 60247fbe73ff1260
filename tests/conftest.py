"""Shared fixtures for the SubLoop test suite."""

from datetime import date, timedelta

import pytest

from db.connection import close_db, init_db
from db.init_db import create_tables
from models.subscription import Category, Currency, Subscription
from repositories.settings_repo import SettingsRepository
from repositories.subscription_repo import SubscriptionRepository
from services.subscription_service import SubscriptionService


class RecordingScheduler:
    """ReminderScheduler double that records every call as (action, subscription_id)."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def schedule(self, subscription):
        self.calls.append(("schedule", subscription.id))

    def reschedule(self, subscription):
        self.calls.append(("reschedule", subscription.id))

    def cancel(self, subscription_id):
        self.calls.append(("cancel", subscription_id))

    def cancel_all(self):
        self.calls.append(("cancel_all", ""))


@pytest.fixture
def db_path(tmp_path):
    """A fresh SQLite database with the schema applied."""
    path = str(tmp_path / "subloop-test.db")
    init_db(path)
    create_tables()
    yield path
    close_db()


@pytest.fixture
def repo(db_path) -> SubscriptionRepository:
    return SubscriptionRepository()


@pytest.fixture
def settings_repo(db_path) -> SettingsRepository:
    return SettingsRepository()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def service(repo, scheduler, settings_repo) -> SubscriptionService:
    return SubscriptionService(repo, scheduler, settings_repo)


@pytest.fixture
def make_subscription():
    """Factory for valid Subscription objects with overridable fields."""
    def _make(**overrides) -> Subscription:
        fields = dict(
            name="Netflix",
            price=15.99,
            currency=Currency.USD,
            category=Category.ENTERTAINMENT,
            next_payment_date=date.today() + timedelta(days=15),
            icon="play.tv.fill",
        )
        fields.update(overrides)
        return Subscription(**fields)
    return _make
