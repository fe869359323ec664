"""Summary and dashboard aggregation."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from fintrack.database.base import Database
from fintrack.domain.entities import (
    CategorySlice,
    DashboardReport,
    MonthlySummary,
    SummaryTotals,
    Transaction,
    TransactionType,
)
from fintrack.domain.errors import ValidationError
from fintrack.domain.transaction import RECENT_LIMIT, validate_currency
from fintrack.utils.date_parser import month_key

# Slice colors for the expense breakdown, assigned in order and cycled
CHART_COLORS = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#FF6384",
    "#C9CBCF",
    "#4BC0C0",
    "#FFCD56",
)

UNCATEGORIZED = "other"


def compute_totals(transactions: Iterable[Transaction]) -> SummaryTotals:
    """Sum income and expenses; balance is income minus expenses."""
    income = Decimal("0")
    expenses = Decimal("0")
    count = 0
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
        count += 1
    return SummaryTotals(income=income, expenses=expenses, count=count)


def split_by_currency(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """Group transactions by currency code, sorted by code."""
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.currency].append(txn)
    return {currency: grouped[currency] for currency in sorted(grouped)}


def totals_by_currency(transactions: Iterable[Transaction]) -> dict[str, SummaryTotals]:
    """Compute totals separately for each currency, sorted by currency code."""
    return {
        currency: compute_totals(group)
        for currency, group in split_by_currency(transactions).items()
    }


def group_by_month(transactions: Iterable[Transaction]) -> list[MonthlySummary]:
    """Group transactions by calendar month, oldest month first."""
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[month_key(txn.date)].append(txn)
    return [MonthlySummary(month=key, totals=compute_totals(grouped[key])) for key in sorted(grouped)]


def expense_breakdown(transactions: Iterable[Transaction]) -> list[CategorySlice]:
    """Split expenses by category label.

    Transactions without a category are grouped under "other". Slices are
    ordered by value (largest first, then by name) and colored from
    CHART_COLORS in that order.
    """
    sums: dict[str, Decimal] = defaultdict(Decimal)
    counts: dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        name = txn.category or UNCATEGORIZED
        sums[name] += txn.amount
        counts[name] += 1

    total = sum(sums.values(), Decimal("0"))
    if total == 0:
        return []

    ordered = sorted(sums.items(), key=lambda item: (-item[1], item[0]))
    return [
        CategorySlice(
            name=name,
            value=value,
            percent=float(value / total * 100),
            color=CHART_COLORS[index % len(CHART_COLORS)],
            count=counts[name],
        )
        for index, (name, value) in enumerate(ordered)
    ]


def format_signed(value: Decimal, kind: str) -> str:
    """Format a summary card value.

    Income gets a '+' prefix and expenses a '-' prefix on the absolute
    value; balance is shown with its own sign.
    """
    if kind == "income":
        return f"+{abs(value):,.2f}"
    if kind == "expense":
        return f"-{abs(value):,.2f}"
    return f"{value:,.2f}"


class SummaryService:
    """Service building the dashboard and summary views."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
    ) -> list[Transaction]:
        """Get a user's transactions matching the summary filters."""
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")
        transactions = self.db.list_transactions(
            user_id=user_id, start_date=start_date, end_date=end_date
        )
        if currency is not None:
            code = validate_currency(currency)
            transactions = [txn for txn in transactions if txn.currency == code]
        return transactions

    def build_dashboard(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
        recent_limit: int = RECENT_LIMIT,
    ) -> DashboardReport:
        """Build the dashboard report for a user.

        Args:
            user_id: Owner user ID
            start_date: Optional start date filter
            end_date: Optional end date filter
            currency: Optional currency filter; when None all currencies are
                summed together and also reported per currency
            recent_limit: Number of recent transactions to include
        """
        transactions = self.get_transactions(user_id, start_date, end_date, currency)
        return self.build_report(
            user_id, transactions, start_date, end_date, currency, recent_limit
        )

    def build_report(
        self,
        user_id: str,
        transactions: Sequence[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
        recent_limit: int = RECENT_LIMIT,
    ) -> DashboardReport:
        """Aggregate already-fetched transactions into a report."""
        by_currency = split_by_currency(transactions)
        return DashboardReport(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            currency=currency.upper() if currency else None,
            totals=compute_totals(transactions),
            totals_by_currency=totals_by_currency(transactions),
            recent=tuple(transactions[:recent_limit]),
            months=tuple(group_by_month(transactions)),
            breakdown=tuple(expense_breakdown(transactions)),
            months_by_currency={
                code: tuple(group_by_month(group)) for code, group in by_currency.items()
            },
            breakdown_by_currency={
                code: tuple(expense_breakdown(group)) for code, group in by_currency.items()
            },
        )
