"""
services/subscription_service.py
--------------------------------
Business logic for the subscription lifecycle.
Validates form input, persists through SubscriptionRepository and keeps
the reminder scheduler in step with every create, update and delete.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Union

from config import DEFAULT_PAYMENT_OFFSET_DAYS
from models.errors import SubscriptionNotFoundError, ValidationError
from models.subscription import (
    DEFAULT_ACCENT,
    DEFAULT_CATEGORY,
    DEFAULT_ICON,
    Category,
    Currency,
    Subscription,
)
from repositories.settings_repo import SettingsRepository
from repositories.subscription_repo import SubscriptionRepository
from services import aggregation
from services.reminder_service import NullReminderScheduler, ReminderScheduler
from utils.logger import get_logger
from utils.validation import (
    parse_accent_color,
    parse_category,
    parse_currency,
    parse_icon,
    parse_name,
    parse_payment_date,
    parse_price,
)

logger = get_logger(__name__)

Color = Union[str, tuple[float, float, float]]


class SubscriptionService:
    """
    Handles all business logic for subscriptions.

    Responsibilities:
        - Validate form input before anything reaches the store.
        - Persist creates, updates and deletes.
        - Schedule, reschedule and cancel payment reminders.
        - Expose the aggregated spending views.

    ValidationError and PersistenceError propagate to the caller.
    Reminder failures are logged and never block a mutation.
    """

    def __init__(
        self,
        repo: Optional[SubscriptionRepository] = None,
        scheduler: Optional[ReminderScheduler] = None,
        settings_repo: Optional[SettingsRepository] = None,
    ):
        self.repo = repo or SubscriptionRepository()
        self.scheduler = scheduler or NullReminderScheduler()
        self.settings = settings_repo or SettingsRepository()

    # ── LIFECYCLE ─────────────────────────────────────────

    def create_subscription(
        self,
        name: str,
        price: Union[str, float],
        category: Union[Category, str] = DEFAULT_CATEGORY,
        next_payment_date: Union[date, str, None] = None,
        icon: str = DEFAULT_ICON,
        color: Color = DEFAULT_ACCENT,
        currency: Union[Currency, str, None] = None,
    ) -> Subscription:
        """
        Validate add-form input, store the new subscription and schedule its reminder.

        Args:
            name: Subscription name.
            price: Price as typed ("9,99" is accepted) or a number.
            category: Category or its display name.
            next_payment_date: Date, date string, or None for today + DEFAULT_PAYMENT_OFFSET_DAYS.
            icon: Glyph key.
            color: Palette name, '#RRGGBB', or (r, g, b) channels.
            currency: Currency, its code, or None for the selected display currency.

        Returns:
            The stored Subscription.

        Raises:
            ValidationError: If any field is rejected (nothing is stored).
            PersistenceError: If the write fails (nothing is stored).
        """
        if next_payment_date is None:
            next_payment_date = date.today() + timedelta(days=DEFAULT_PAYMENT_OFFSET_DAYS)

        subscription = Subscription(
            name=parse_name(name),
            price=parse_price(price),
            category=self._category(category),
            next_payment_date=self._date(next_payment_date),
            icon=parse_icon(icon),
            currency=self._currency(currency) if currency is not None else self.display_currency(),
        )
        subscription.accent_color = self._color(color)

        saved = self.repo.add(subscription)
        self._notify_scheduler("schedule", saved)
        return saved

    def update_subscription(
        self,
        subscription_id: str,
        name: Optional[str] = None,
        price: Union[str, float, None] = None,
        category: Union[Category, str, None] = None,
        next_payment_date: Union[date, str, None] = None,
        icon: Optional[str] = None,
        color: Optional[Color] = None,
        currency: Union[Currency, str, None] = None,
    ) -> Optional[Subscription]:
        """
        Apply edit-form changes to a stored subscription and reschedule its reminder.
        Fields left as None keep their stored value; the id never changes.

        Returns:
            The updated Subscription, or None if it no longer exists.

        Raises:
            ValidationError: If any changed field is rejected.
            PersistenceError: If the write fails.
        """
        current = self.repo.get_by_id(subscription_id)
        if current is None:
            logger.warning(f"Update skipped: subscription {subscription_id} not found")
            return None

        changes = {}
        if name is not None:
            changes["name"] = parse_name(name)
        if price is not None:
            changes["price"] = parse_price(price)
        if category is not None:
            changes["category"] = self._category(category)
        if next_payment_date is not None:
            changes["next_payment_date"] = self._date(next_payment_date)
        if icon is not None:
            changes["icon"] = parse_icon(icon)
        if currency is not None:
            changes["currency"] = self._currency(currency)

        updated = replace(current, **changes)
        if color is not None:
            updated.accent_color = self._color(color)

        try:
            self.repo.update(updated)
        except SubscriptionNotFoundError as e:
            logger.warning(f"Update skipped: {e.message}")
            return None

        self._notify_scheduler("reschedule", updated)
        return updated

    def delete_subscription(self, subscription_id: str) -> bool:
        """
        Delete a subscription and cancel its reminder.

        Returns:
            True if a record was deleted; False if the id was not stored.
        """
        deleted = self.repo.delete(subscription_id)
        self._notify_scheduler("cancel", subscription_id)
        return deleted

    # ── QUERIES ───────────────────────────────────────────

    def list_subscriptions(self) -> list[Subscription]:
        """All subscriptions in insertion order."""
        return self.repo.get_all()

    def resolve(self, ref: str) -> Optional[Subscription]:
        """
        Find a subscription by its 1-based position in `list_subscriptions()`
        or by a unique prefix of its id.
        """
        ref = ref.strip()
        subscriptions = self.list_subscriptions()
        if ref.isdigit():
            index = int(ref) - 1
            return subscriptions[index] if 0 <= index < len(subscriptions) else None

        matches = [s for s in subscriptions if s.id.startswith(ref)] if ref else []
        return matches[0] if len(matches) == 1 else None

    def total_monthly_spend(self) -> float:
        return aggregation.total_monthly_spend(self.list_subscriptions())

    def category_breakdown(self) -> list[aggregation.CategorySpending]:
        return aggregation.by_category(self.list_subscriptions())

    # ── SETTINGS ──────────────────────────────────────────

    def display_currency(self) -> Currency:
        return self.settings.get_currency()

    def set_display_currency(self, code: Union[Currency, str]) -> Currency:
        """Persist the display currency. Amounts are never converted."""
        currency = self._currency(code)
        self.settings.set_currency(currency)
        return currency

    # ── HELPERS ───────────────────────────────────────────

    def _notify_scheduler(self, action: str, arg) -> None:
        """Call the scheduler, absorbing any failure."""
        try:
            getattr(self.scheduler, action)(arg)
        except Exception as e:
            logger.warning(f"Reminder {action} failed: {e}")

    @staticmethod
    def _category(value: Union[Category, str]) -> Category:
        return value if isinstance(value, Category) else parse_category(value)

    @staticmethod
    def _currency(value: Union[Currency, str]) -> Currency:
        return value if isinstance(value, Currency) else parse_currency(value)

    @staticmethod
    def _date(value: Union[date, str]) -> date:
        # the time of day is dropped; only the calendar date is stored
        if isinstance(value, datetime):
            return value.date()
        return value if isinstance(value, date) else parse_payment_date(value)

    @staticmethod
    def _color(value: Color) -> tuple[float, float, float]:
        if isinstance(value, tuple):
            if len(value) != 3:
                raise ValidationError("color", f"Color needs three channels (r, g, b), got {len(value)}.")
            try:
                return tuple(float(c) for c in value)
            except (TypeError, ValueError):
                raise ValidationError("color", f"Color channels must be numbers: {value!r}") from None
        return parse_accent_color(value)
