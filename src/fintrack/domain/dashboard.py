"""Dashboard summary domain service."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import DashboardSummary, PeriodChange
from fintrack.utils.date_parser import previous_window, relative_window

logger = logging.getLogger(__name__)


def calculate_percent_change(current: Decimal, previous: Decimal) -> float:
    """Percent change from previous to current.

    Returns 0.0 when previous is zero.
    """
    if previous == 0:
        return 0.0
    return float((Decimal(current) - Decimal(previous)) / abs(Decimal(previous)) * 100)


class DashboardService:
    """Service for the headline figures of an owner's finances."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def _window_totals(self, owner: str, start: date, end: date) -> dict[str, Decimal]:
        # The store filters on inclusive dates; windows here are half-open.
        return self.db.get_period_totals(owner, start, end - timedelta(days=1))

    def get_dashboard_summary(
        self,
        owner: str,
        time_range: Optional[str] = "month",
        today: Optional[date] = None,
    ) -> DashboardSummary:
        """Summarize balance, income, expenses and savings for a period.

        Args:
            owner: Owner uid
            time_range: week, month or year; anything else means 30 days
            today: Reference day, defaults to the current date

        Returns:
            DashboardSummary with percent changes against the previous period
        """
        current_start, current_end = relative_window(time_range, today)
        previous_start, previous_end = previous_window(time_range, current_start)

        current = self._window_totals(owner, current_start, current_end)
        previous = self._window_totals(owner, previous_start, previous_end)

        total_balance = self.db.get_total_balance(owner)
        prior_balance = total_balance - current["account_change"]

        savings = current["income"] - current["expenses"]
        previous_savings = previous["income"] - previous["expenses"]

        logger.debug(
            "dashboard for %s over %s..%s: balance %s (prior %s)",
            owner,
            current_start,
            current_end,
            total_balance,
            prior_balance,
        )

        return DashboardSummary(
            total_balance=total_balance,
            income=current["income"],
            expenses=current["expenses"],
            savings=savings,
            period_change=PeriodChange(
                balance=calculate_percent_change(total_balance, prior_balance),
                income=calculate_percent_change(current["income"], previous["income"]),
                expenses=calculate_percent_change(current["expenses"], previous["expenses"]),
                savings=calculate_percent_change(savings, previous_savings),
            ),
        )
