"""
services/aggregation.py
-----------------------
Derived views over the subscription collection: monthly total and the
per-category breakdown used by the summary and chart surfaces.

Everything here is a pure function of the records passed in and is
recomputed on every call.

Prices are summed as raw numbers regardless of each record's currency;
the display currency only changes the symbol shown.
"""

import math
import zlib
from dataclasses import dataclass
from typing import Iterable, Union

from models.subscription import Category, Subscription

# Colors the breakdown chart assigns to categories, as (r, g, b) channels
CATEGORY_PALETTE: list[tuple[float, float, float]] = [
    (0.4, 0.7, 1.0),
    (0.6, 0.4, 1.0),
    (0.5, 0.8, 1.0),
    (0.7, 0.3, 1.0),
    (0.3, 0.6, 0.9),
    (0.686, 0.322, 0.871),  # purple
    (1.0, 0.176, 0.333),    # pink
    (0.0, 0.478, 1.0),      # blue
]


@dataclass(frozen=True)
class CategorySpending:
    """
    One row of the category breakdown.

    Attributes:
        category: The category.
        amount: Sum of prices of all subscriptions in the category.
        share: amount / total, in 0..1 (0.0 when the total is zero).
        color: Display color from CATEGORY_PALETTE.
    """
    category: Category
    amount: float
    share: float
    color: tuple[float, float, float]


def total_monthly_spend(subscriptions: Iterable[Subscription]) -> float:
    """
    Sum of `price` across all subscriptions. 0.0 for an empty collection.

    math.fsum keeps the result independent of the input order.
    """
    return math.fsum(s.price for s in subscriptions)


def percentage_share(amount: float, total: float) -> float:
    """
    Fraction of `total` represented by `amount`.

    Raises:
        ValueError: If `total` is not positive.
    """
    if total <= 0:
        raise ValueError("Cannot compute a share of a zero total.")
    return amount / total


def category_color(category: Union[Category, str]) -> tuple[float, float, float]:
    """Map a category to a palette color using a process-stable hash of its name."""
    name = category.value if isinstance(category, Category) else str(category)
    return CATEGORY_PALETTE[zlib.crc32(name.encode("utf-8")) % len(CATEGORY_PALETTE)]


def by_category(subscriptions: Iterable[Subscription]) -> list[CategorySpending]:
    """
    Group subscriptions by category and sum their prices.

    Returns:
        One CategorySpending per category present, sorted by amount
        descending; equal amounts are ordered by category name ascending.
    """
    subscriptions = list(subscriptions)
    grouped: dict[Category, list[float]] = {}
    for s in subscriptions:
        grouped.setdefault(s.category, []).append(s.price)

    total = total_monthly_spend(subscriptions)
    rows = []
    for category, prices in grouped.items():
        amount = math.fsum(prices)
        share = percentage_share(amount, total) if total > 0 else 0.0
        rows.append(CategorySpending(category, amount, share, category_color(category)))

    rows.sort(key=lambda r: (-r.amount, r.category.value))
    return rows
