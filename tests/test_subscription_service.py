"""Tests for SubscriptionService: validation, persistence and reminder calls together."""

from datetime import date, datetime, timedelta

import pytest

from config import DEFAULT_PAYMENT_OFFSET_DAYS
from models.errors import PersistenceError, ValidationError
from models.subscription import ACCENT_COLORS, Category, Currency
from services.subscription_service import SubscriptionService


class TestCreate:
    def test_netflix_scenario(self, service, scheduler):
        saved = service.create_subscription(
            name="Netflix",
            price="15.99",
            currency="USD",
            category="Entertainment",
            next_payment_date=date.today() + timedelta(days=15),
        )

        assert len(service.list_subscriptions()) == 1
        assert service.total_monthly_spend() == pytest.approx(15.99)
        assert scheduler.calls == [("schedule", saved.id)]

    def test_two_categories_scenario(self, service):
        service.create_subscription(name="Spotify", price="9.99", category="Music")
        service.create_subscription(name="Netflix", price="15.99", category="Entertainment")

        rows = service.category_breakdown()

        assert [(r.category.value, round(r.amount, 2), round(r.share * 100, 1)) for r in rows] == [
            ("Entertainment", 15.99, 61.5),
            ("Music", 9.99, 38.5),
        ]

    @pytest.mark.parametrize("name, price", [("", "9.99"), ("   ", "9.99"), ("Netflix", "abc"), ("Netflix", "")])
    def test_invalid_input_stores_nothing_and_schedules_nothing(self, service, scheduler, name, price):
        with pytest.raises(ValidationError):
            service.create_subscription(name=name, price=price)

        assert service.list_subscriptions() == []
        assert scheduler.calls == []

    def test_comma_decimal_separator(self, service):
        saved = service.create_subscription(name="Spotify", price="10,99")
        assert saved.price == pytest.approx(10.99)

    def test_defaults(self, service):
        saved = service.create_subscription(name="Gym", price=30)

        assert saved.category is Category.ENTERTAINMENT
        assert saved.icon == "star.fill"
        assert saved.accent_color == ACCENT_COLORS["blue"]
        assert saved.currency is Currency.USD
        assert saved.next_payment_date == date.today() + timedelta(days=DEFAULT_PAYMENT_OFFSET_DAYS)

    def test_record_currency_follows_display_currency(self, service):
        service.set_display_currency("eur")
        saved = service.create_subscription(name="Spotify", price="10.99")
        assert saved.currency is Currency.EUR

    def test_datetime_is_reduced_to_its_date(self, service):
        saved = service.create_subscription(
            name="News", price="4.99", next_payment_date=datetime(2026, 12, 1, 18, 30)
        )
        assert service.list_subscriptions()[0].next_payment_date == date(2026, 12, 1)
        assert saved.next_payment_date == date(2026, 12, 1)

    def test_hex_color_is_stored_as_channels(self, service):
        saved = service.create_subscription(name="Game Pass", price="14.99", color="#FF0000")
        assert saved.accent_color == pytest.approx((1.0, 0.0, 0.0))

    @pytest.mark.parametrize("color", [(1.0, 0.0), (1.0, 0.0, 0.0, 1.0), ("red", "green", "blue")])
    def test_malformed_color_tuple_is_a_color_error(self, service, scheduler, color):
        with pytest.raises(ValidationError) as exc_info:
            service.create_subscription(name="Game Pass", price="14.99", color=color)

        assert exc_info.value.field == "color"
        assert service.list_subscriptions() == []
        assert scheduler.calls == []

    def test_scheduler_failure_does_not_block_create(self, repo, settings_repo):
        class BrokenScheduler:
            def schedule(self, subscription):
                raise RuntimeError("notifications denied")

        service = SubscriptionService(repo, BrokenScheduler(), settings_repo)
        saved = service.create_subscription(name="Netflix", price="15.99")

        assert [s.id for s in service.list_subscriptions()] == [saved.id]

    def test_persistence_failure_skips_the_reminder(self, service, scheduler, monkeypatch):
        def failing_add(subscription):
            raise PersistenceError("create", "disk I/O error")

        monkeypatch.setattr(service.repo, "add", failing_add)

        with pytest.raises(PersistenceError):
            service.create_subscription(name="Netflix", price="15.99")
        assert scheduler.calls == []


class TestUpdate:
    def test_update_changes_fields_and_reschedules(self, service, scheduler):
        saved = service.create_subscription(name="Netflix", price="15.99")
        other = service.create_subscription(name="Spotify", price="10.99", category="Music")
        scheduler.calls.clear()

        updated = service.update_subscription(
            saved.id, price="17.99", category="Gaming", next_payment_date="2026-12-24"
        )

        assert updated.id == saved.id
        assert updated.price == pytest.approx(17.99)
        assert updated.category is Category.GAMING
        assert updated.next_payment_date == date(2026, 12, 24)
        assert updated.name == "Netflix"
        assert scheduler.calls == [("reschedule", saved.id)]

        untouched = {s.id: s for s in service.list_subscriptions()}[other.id]
        assert untouched.price == pytest.approx(10.99)
        assert untouched.category is Category.MUSIC

    def test_update_of_deleted_record_is_a_quiet_failure(self, service, scheduler):
        saved = service.create_subscription(name="Netflix", price="15.99")
        service.delete_subscription(saved.id)
        scheduler.calls.clear()

        assert service.update_subscription(saved.id, price="1.00") is None
        assert scheduler.calls == []

    def test_invalid_update_leaves_record_unchanged(self, service, scheduler):
        saved = service.create_subscription(name="Netflix", price="15.99")
        scheduler.calls.clear()

        with pytest.raises(ValidationError):
            service.update_subscription(saved.id, price="-3")

        assert service.list_subscriptions()[0].price == pytest.approx(15.99)
        assert scheduler.calls == []


class TestDelete:
    def test_create_then_delete_scenario(self, service, scheduler):
        saved = service.create_subscription(name="Netflix", price="15.99")

        assert service.delete_subscription(saved.id) is True

        assert service.list_subscriptions() == []
        assert ("cancel", saved.id) in scheduler.calls

    def test_delete_unknown_id(self, service, scheduler):
        assert service.delete_subscription("missing") is False
        assert scheduler.calls == [("cancel", "missing")]


class TestResolve:
    def test_by_position(self, service):
        first = service.create_subscription(name="Netflix", price="15.99")
        second = service.create_subscription(name="Spotify", price="10.99")

        assert service.resolve("1").id == first.id
        assert service.resolve("2").id == second.id
        assert service.resolve("3") is None
        assert service.resolve("0") is None

    def test_by_id_prefix(self, service):
        saved = service.create_subscription(name="Netflix", price="15.99")

        assert service.resolve(saved.id[:8]).id == saved.id
        assert service.resolve("") is None


class TestDisplayCurrency:
    def test_defaults_to_usd(self, service):
        assert service.display_currency() is Currency.USD

    def test_set_and_read_back(self, service):
        assert service.set_display_currency("GBP") is Currency.GBP
        assert service.display_currency() is Currency.GBP

    def test_unknown_code_is_rejected(self, service):
        with pytest.raises(ValidationError):
            service.set_display_currency("BTC")
        assert service.display_currency() is Currency.USD

    def test_changing_currency_never_changes_amounts(self, service):
        service.create_subscription(name="Netflix", price="15.99")
        service.set_display_currency("TRY")
        assert service.total_monthly_spend() == pytest.approx(15.99)
