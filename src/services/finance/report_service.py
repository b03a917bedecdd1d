"""
Report Service

Aggregates for the dashboard and reports page: period totals, expense
breakdown by category and the monthly income/expense trend. The
aggregation helpers are pure functions over already-loaded lists so
pages that have the data in hand don't fetch it twice.
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from src.models.finance import (
    DEFAULT_CATEGORY_COLOR,
    Category,
    CategoryBreakdown,
    MonthlyTotals,
    PeriodSummary,
    Transaction,
    TransactionType,
)
from src.services.finance.category_service import CategoryService
from src.services.finance.transaction_service import TransactionService
from src.utils.dates import current_month_str, month_bounds, recent_months


UNCATEGORIZED = "Uncategorized"


def summarize(transactions: list[Transaction]) -> PeriodSummary:
    summary = PeriodSummary(transaction_count=len(transactions))
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            summary.income += tx.amount
        else:
            summary.expense += tx.amount
    return summary


def expense_breakdown(
    transactions: list[Transaction],
    categories: Optional[list[Category]] = None,
) -> list[CategoryBreakdown]:
    """Expense totals per category, largest first."""
    by_id = {c.id: c for c in categories or []}
    totals: dict[Optional[int], float] = defaultdict(float)
    names: dict[Optional[int], str] = {}
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        totals[tx.category_id] += tx.amount
        if tx.category_name:
            names[tx.category_id] = tx.category_name

    grand_total = sum(totals.values())
    rows = []
    for category_id, total in totals.items():
        category = by_id.get(category_id)
        rows.append(CategoryBreakdown(
            category_id=category_id,
            category_name=(
                category.name if category
                else names.get(category_id) or UNCATEGORIZED
            ),
            color=category.color if category else DEFAULT_CATEGORY_COLOR,
            total=total,
            share=min(total / grand_total * 100, 100.0) if grand_total > 0 else 0.0,
        ))
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows


def monthly_totals(transactions: list[Transaction], months: list[str]) -> list[MonthlyTotals]:
    """Income and expense per month, one entry per requested month."""
    buckets = {month: MonthlyTotals(month=month) for month in months}
    for tx in transactions:
        bucket = buckets.get(tx.month)
        if bucket is None:
            continue
        if tx.type == TransactionType.INCOME:
            bucket.income += tx.amount
        else:
            bucket.expense += tx.amount
    return [buckets[month] for month in months]


class ReportService:
    """Fetches transactions and categories and aggregates them."""

    def __init__(
        self,
        transaction_service: TransactionService,
        category_service: CategoryService,
    ):
        self._transactions = transaction_service
        self._categories = category_service

    async def get_month_summary(self, month: Optional[str] = None) -> PeriodSummary:
        start, end = month_bounds(month or current_month_str())
        return summarize(await self._transactions.get_by_date_range(start, end))

    async def get_category_breakdown(self, month: Optional[str] = None) -> list[CategoryBreakdown]:
        start, end = month_bounds(month or current_month_str())
        transactions = await self._transactions.get_by_date_range(start, end)
        return expense_breakdown(transactions, await self._categories.get_all())

    async def get_monthly_trend(
        self,
        months: int = 6,
        today: Optional[date] = None,
    ) -> list[MonthlyTotals]:
        window = recent_months(months, today)
        start, _ = month_bounds(window[0])
        _, end = month_bounds(window[-1])
        transactions = await self._transactions.get_by_date_range(start, end)
        return monthly_totals(transactions, window)
