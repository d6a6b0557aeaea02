"""
Spending Analyzer for NeuraPay.

Summarizes a batch of transactions over an analysis window: totals,
cash flow, category breakdown and how often the user spends.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, field_serializer

from app.analytics.records import TransactionRecord
from app.core.config import settings

TOP_CATEGORY_LIMIT = 5
MONEY_DECIMALS = 2
NO_DATA_SUMMARY = "No transactions found in the specified period"


def round_money(value: float) -> float:
    return round(value, MONEY_DECIMALS)


class CategoryTotal(BaseModel):
    category: str
    amount: float

    @field_serializer("amount")
    def _display_amount(self, amount: float) -> float:
        return round_money(amount)


class SpendingReport(BaseModel):
    """Result of a spending analysis. Only ``summary`` is set when there is no data."""
    summary: Optional[str] = None
    total_spent: Optional[float] = None
    total_received: Optional[float] = None
    net_cashflow: Optional[float] = None
    spend_count: Optional[int] = None
    receive_count: Optional[int] = None
    avg_daily_spend: Optional[float] = None
    velocity: Optional[str] = None
    top_categories: Optional[List[CategoryTotal]] = None
    insights: Optional[List[str]] = None

    # Serialized amounts use a 2-decimal display; the attributes keep exact sums.
    @field_serializer("total_spent", "total_received", "avg_daily_spend")
    def _display_money(self, value: Optional[float]) -> Optional[float]:
        return None if value is None else round_money(value)

    @field_serializer("net_cashflow")
    def _display_net(self, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        # Derived from the displayed totals so it always equals received - spent.
        return round_money(round_money(self.total_received) - round_money(self.total_spent))


def classify_velocity(spend_count: int, window_days: int) -> str:
    """Classify spending frequency as low (<2/week), moderate (<7/week) or high."""
    tx_per_week = spend_count * 7 / window_days

    if tx_per_week < 2:
        return "low"
    if tx_per_week < 7:
        return "moderate"
    return "high"


class SpendingAnalyzer:
    """
    Aggregates spending behaviour over a fixed window of days.
    """

    def __init__(self, top_n: int = TOP_CATEGORY_LIMIT):
        self.top_n = top_n

    def analyze(
        self,
        records: Sequence[TransactionRecord],
        window_days: int = settings.DEFAULT_ANALYSIS_DAYS,
    ) -> SpendingReport:
        """
        Analyze spending for the given window.

        Args:
            records: Normalized transaction records
            window_days: Number of days the totals are normalized against

        Returns:
            SpendingReport with totals, velocity, top categories and insights
        """
        if not records:
            return SpendingReport(summary=NO_DATA_SUMMARY)

        if not window_days or window_days <= 0:
            window_days = settings.DEFAULT_ANALYSIS_DAYS

        total_spent = 0.0
        total_received = 0.0
        spend_count = 0
        receive_count = 0
        category_spending = {}

        for record in records:
            if record.is_send:
                total_spent += record.amount
                spend_count += 1
                if record.category:
                    category_spending[record.category] = (
                        category_spending.get(record.category, 0.0) + record.amount
                    )
            elif record.is_receive:
                total_received += record.amount
                receive_count += 1

        net_cashflow = total_received - total_spent
        avg_daily_spend = total_spent / window_days

        # sorted() is stable, so equal totals keep first-seen order
        ranked = sorted(category_spending.items(), key=lambda item: item[1], reverse=True)
        top_categories = [
            CategoryTotal(category=category, amount=amount)
            for category, amount in ranked[:self.top_n]
        ]

        return SpendingReport(
            total_spent=total_spent,
            total_received=total_received,
            net_cashflow=net_cashflow,
            spend_count=spend_count,
            receive_count=receive_count,
            avg_daily_spend=avg_daily_spend,
            velocity=classify_velocity(spend_count, window_days),
            top_categories=top_categories,
            insights=[
                f"You made {spend_count} spending transactions over {window_days} days",
                f"Average daily spend: ${avg_daily_spend:.2f}",
                f"Net cash flow: ${net_cashflow:.2f}",
                "Consider setting up savings goals to build financial cushion",
            ],
        )
