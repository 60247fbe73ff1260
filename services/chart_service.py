"""
services/chart_service.py
--------------------------
Renders the category breakdown as a donut chart.
Uses matplotlib and returns the PNG in a BytesIO buffer.
"""

import io
from typing import Optional

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt

from services.subscription_service import SubscriptionService
from utils.formatting import format_currency, rgb_to_hex
from utils.logger import get_logger

logger = get_logger(__name__)

_BACKGROUND = "#0D0D26"

plt.rcParams["font.family"] = "DejaVu Sans"
plt.rcParams["figure.facecolor"] = _BACKGROUND
plt.rcParams["text.color"] = "#e0e0e0"
plt.rcParams["axes.facecolor"] = _BACKGROUND


class ChartService:
    """Generates visual charts for subscription spending."""

    def __init__(self, subscription_service: Optional[SubscriptionService] = None):
        self.subscriptions = subscription_service or SubscriptionService()

    def generate_category_donut(self) -> io.BytesIO | None:
        """
        Generate a donut chart of monthly spend by category.

        Returns:
            BytesIO buffer with PNG image, or None if there is nothing to plot.
        """
        breakdown = self.subscriptions.category_breakdown()
        total = sum(row.amount for row in breakdown)
        if not breakdown or total <= 0:
            return None

        currency = self.subscriptions.display_currency()
        values = [row.amount for row in breakdown]
        colors = [rgb_to_hex(row.color) for row in breakdown]

        fig, ax = plt.subplots(figsize=(8, 6))

        wedges, _texts, autotexts = ax.pie(
            values,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%",
            colors=colors,
            startangle=90,
            pctdistance=0.82,
            wedgeprops=dict(width=0.5, edgecolor=_BACKGROUND, linewidth=2),
        )

        for autotext in autotexts:
            autotext.set_color("white")
            autotext.set_fontsize(10)
            autotext.set_fontweight("bold")

        legend_labels = [
            f"{row.category.value}: {format_currency(row.amount, currency)}" for row in breakdown
        ]
        ax.legend(
            wedges, legend_labels,
            loc="center left",
            bbox_to_anchor=(1, 0, 0.5, 1),
            fontsize=10,
            frameon=False,
        )

        ax.set_title(
            f"Spending by Category\nTotal: {format_currency(total, currency)} / month",
            fontsize=14,
            fontweight="bold",
            pad=20,
        )

        plt.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                    facecolor=fig.get_facecolor())
        buf.seek(0)
        plt.close(fig)

        logger.info(f"Generated category chart with {len(breakdown)} categories")
        return buf
