"""
utils/formatting.py
-------------------
Display helpers: currency amounts, percentage shares and color conversion.
Formatting only; no amount is ever converted between currencies.
"""

from models.subscription import Currency


def format_currency(amount: float, currency: Currency) -> str:
    """Format an amount with the currency symbol and two decimals, e.g. '$1,234.50'."""
    return f"{currency.symbol}{amount:,.2f}"


def format_share(share: float) -> str:
    """Format a 0..1 share as a percentage with one decimal, e.g. '61.5%'."""
    return f"{share * 100:.1f}%"


def rgb_to_hex(rgb: tuple[float, float, float]) -> str:
    """Convert normalized (r, g, b) channels to a '#RRGGBB' string."""
    return "#" + "".join(f"{round(max(0.0, min(1.0, c)) * 255):02X}" for c in rgb)
