"""
models/subscription.py
----------------------
Domain model for tracked subscriptions, plus the fixed enumerations
(currencies, categories) and presentation catalogues the forms offer.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    """Supported currencies. Stored by ISO code; never converted between."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    TRY = "TRY"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    @property
    def display_name(self) -> str:
        return _CURRENCY_NAMES[self]

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """
        Look up a currency by its ISO code (case-insensitive).

        Raises:
            ValueError: If the code is not one of the supported currencies.
        """
        try:
            return cls(code.strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported currency: {code!r}") from None


_CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.TRY: "₺",
}

_CURRENCY_NAMES = {
    Currency.USD: "US Dollar",
    Currency.EUR: "Euro",
    Currency.GBP: "British Pound",
    Currency.TRY: "Turkish Lira",
}


class Category(str, Enum):
    """Subscription categories, in the order the add form lists them."""

    ENTERTAINMENT = "Entertainment"
    PRODUCTIVITY = "Productivity"
    CLOUD_STORAGE = "Cloud Storage"
    MUSIC = "Music"
    GAMING = "Gaming"
    FITNESS = "Fitness"
    NEWS = "News"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: str) -> "Category":
        """
        Look up a category by display name, ignoring case and surrounding spaces.
        'cloud_storage' and 'cloudstorage' are accepted for 'Cloud Storage'.

        Raises:
            ValueError: If no category matches.
        """
        wanted = name.strip().lower().replace("_", " ")
        for category in cls:
            label = category.value.lower()
            if wanted in (label, label.replace(" ", "")):
                return category
        raise ValueError(f"Unknown category: {name!r}")


DEFAULT_CATEGORY = Category.ENTERTAINMENT

# Glyph keys offered by the add form: (key, label)
AVAILABLE_ICONS: list[tuple[str, str]] = [
    ("star.fill", "Star"),
    ("play.tv.fill", "TV"),
    ("music.note", "Music"),
    ("icloud.fill", "Cloud"),
    ("gamecontroller.fill", "Gaming"),
    ("book.fill", "Books"),
    ("cart.fill", "Shopping"),
    ("film.fill", "Movies"),
    ("headphones", "Audio"),
    ("dumbbell.fill", "Fitness"),
    ("fork.knife", "Food"),
    ("airplane", "Travel"),
]
DEFAULT_ICON = "star.fill"

# Accent colors offered by the add form, as normalized (r, g, b) channels
ACCENT_COLORS: dict[str, tuple[float, float, float]] = {
    "red": (1.0, 0.231, 0.188),
    "orange": (1.0, 0.584, 0.0),
    "yellow": (1.0, 0.8, 0.0),
    "green": (0.204, 0.78, 0.349),
    "blue": (0.0, 0.478, 1.0),
    "purple": (0.686, 0.322, 0.871),
    "pink": (1.0, 0.176, 0.333),
    "sky": (0.4, 0.7, 1.0),
}
DEFAULT_ACCENT = "blue"


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Subscription:
    """
    Represents a single recurring subscription payment.

    Attributes:
        id: Opaque unique identifier, generated at creation and never reassigned.
        name: Non-empty label (e.g. 'Netflix').
        price: Non-negative amount in `currency`.
        currency: Currency the price is expressed in.
        category: Spending category.
        next_payment_date: Calendar date of the next charge.
        icon: Glyph key for the presentation layer.
        accent_red / accent_green / accent_blue: Accent color channels in [0, 1].
        created_at: Timestamp when the record was first stored.
    """
    name: str
    price: float
    currency: Currency
    category: Category
    next_payment_date: date
    icon: str = DEFAULT_ICON
    accent_red: float = ACCENT_COLORS[DEFAULT_ACCENT][0]
    accent_green: float = ACCENT_COLORS[DEFAULT_ACCENT][1]
    accent_blue: float = ACCENT_COLORS[DEFAULT_ACCENT][2]
    id: str = field(default_factory=_new_id)
    created_at: Optional[datetime] = None

    @property
    def accent_color(self) -> tuple[float, float, float]:
        return (self.accent_red, self.accent_green, self.accent_blue)

    @accent_color.setter
    def accent_color(self, rgb: tuple[float, float, float]) -> None:
        self.accent_red, self.accent_green, self.accent_blue = rgb

    def days_until_payment(self, today: Optional[date] = None) -> int:
        """Days from `today` to the next payment (negative once it has passed)."""
        return (self.next_payment_date - (today or date.today())).days

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.price:.2f} {self.currency.value} "
            f"| {self.category.value} | Next: {self.next_payment_date}"
        )
