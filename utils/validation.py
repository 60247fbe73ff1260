"""
utils/validation.py
-------------------
Form-input parsing and the defensive re-check applied at the store boundary.
Every parser raises `ValidationError` naming the offending field.
"""

import math
import re
from datetime import date, datetime
from typing import Union

from dateutil import parser as date_parser

from models.errors import ValidationError
from models.subscription import ACCENT_COLORS, Category, Currency, Subscription

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_name(text: str) -> str:
    """Strip and require a non-empty subscription name."""
    name = (text or "").strip()
    if not name:
        raise ValidationError("name", "Name must not be empty.")
    return name


def parse_price(value: Union[str, float, int]) -> float:
    """
    Parse a price typed into the form.

    A comma is accepted as the decimal separator ("9,99" -> 9.99).

    Raises:
        ValidationError: If the input is empty, not a number, negative or not finite.
    """
    if isinstance(value, bool):
        raise ValidationError("price", "Price must be a number.")
    if isinstance(value, (int, float)):
        try:
            price = float(value)
        except OverflowError:
            raise ValidationError("price", "Price must be a finite number.") from None
    else:
        text = (value or "").strip().replace(",", ".")
        if not text:
            raise ValidationError("price", "Price must not be empty.")
        try:
            price = float(text)
        except ValueError:
            raise ValidationError("price", f"Price {value!r} is not a number.") from None

    if not math.isfinite(price):
        raise ValidationError("price", "Price must be a finite number.")
    if price < 0:
        raise ValidationError("price", "Price must not be negative.")
    return price


def parse_category(text: str) -> Category:
    try:
        return Category.from_name(text or "")
    except ValueError:
        options = ", ".join(c.value for c in Category)
        raise ValidationError("category", f"Unknown category {text!r}. Choose one of: {options}.") from None


def parse_currency(text: str) -> Currency:
    try:
        return Currency.from_code(text or "")
    except ValueError:
        options = ", ".join(c.value for c in Currency)
        raise ValidationError("currency", f"Unknown currency {text!r}. Choose one of: {options}.") from None


def parse_payment_date(text: str) -> date:
    """
    Parse a next-payment date; ISO 'YYYY-MM-DD' is the documented format.

    Year, month and day must all be present. The input is parsed against two
    different defaults, and any component missing from it shows up as a
    difference between the two results.
    """
    text = (text or "").strip()
    try:
        first = date_parser.parse(text, default=_DATE_DEFAULTS[0]).date()
        second = date_parser.parse(text, default=_DATE_DEFAULTS[1]).date()
    except (ValueError, OverflowError):
        raise ValidationError("date", f"Invalid date {text!r}. Use YYYY-MM-DD.") from None
    if first != second:
        raise ValidationError("date", f"Incomplete date {text!r}. Use YYYY-MM-DD.")
    return first


def parse_icon(text: str) -> str:
    icon = (text or "").strip()
    if not icon:
        raise ValidationError("icon", "Icon must not be empty.")
    return icon


def parse_accent_color(text: str) -> tuple[float, float, float]:
    """
    Resolve a palette name ('red', 'sky', ...) or a '#RRGGBB' hex string
    into normalized (r, g, b) channels.
    """
    key = (text or "").strip().lower()
    if key in ACCENT_COLORS:
        return ACCENT_COLORS[key]

    match = _HEX_COLOR.match(key)
    if not match:
        options = ", ".join(ACCENT_COLORS)
        raise ValidationError("color", f"Unknown color {text!r}. Use #RRGGBB or one of: {options}.")
    hex_digits = match.group(1)
    return tuple(int(hex_digits[i:i + 2], 16) / 255 for i in (0, 2, 4))


def validate_subscription(subscription: Subscription) -> None:
    """
    Re-check a record right before it is persisted.

    The forms already validate their input; this guards the durability
    boundary against records built in code.

    Raises:
        ValidationError: On the first field that breaks an invariant.
    """
    if not isinstance(subscription.name, str) or not subscription.name.strip():
        raise ValidationError("name", "Name must not be empty.")
    if not isinstance(subscription.id, str) or not subscription.id:
        raise ValidationError("id", "Subscription id must be a non-empty string.")

    if not isinstance(subscription.price, (int, float)) or isinstance(subscription.price, bool):
        raise ValidationError("price", f"Price must be stored as a number, got {subscription.price!r}.")
    parse_price(subscription.price)

    if not isinstance(subscription.currency, Currency):
        raise ValidationError("currency", f"Unsupported currency: {subscription.currency!r}")
    if not isinstance(subscription.category, Category):
        raise ValidationError("category", f"Unknown category: {subscription.category!r}")
    if not isinstance(subscription.next_payment_date, date):
        raise ValidationError("date", "Next payment date must be a date.")
    if not isinstance(subscription.icon, str) or not subscription.icon.strip():
        raise ValidationError("icon", "Icon must not be empty.")

    for channel in subscription.accent_color:
        if not isinstance(channel, (int, float)) or not 0.0 <= channel <= 1.0:
            raise ValidationError("color", f"Color channel {channel!r} is outside 0.0-1.0.")
