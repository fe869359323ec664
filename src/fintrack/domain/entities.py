"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
where records are stored. The same entities come back from the local SQLite
store and from the mock REST API, so the services never see storage details.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


DEFAULT_CURRENCY = "VND"
SUPPORTED_CURRENCIES = ("VND", "USD")


@dataclass(frozen=True)
class User:
    """User domain entity."""

    id: str
    username: str
    email: str
    password: str
    created_at: Optional[datetime]


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    Amounts are always positive; the type decides whether a transaction adds
    to or subtracts from the balance.
    """

    id: str
    user_id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: date
    currency: str = DEFAULT_CURRENCY
    category: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def signed_amount(self) -> Decimal:
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: str
    user_id: str
    name: str
    account_number: str
    balance: Decimal
    currency: str = DEFAULT_CURRENCY
    is_active: bool = True
    bank_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SummaryTotals:
    """Income, expense and balance totals for a set of transactions."""

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    count: int = 0

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class MonthlySummary:
    """Totals for a single calendar month (key formatted as YYYY-MM)."""

    month: str
    totals: SummaryTotals


@dataclass(frozen=True)
class CategorySlice:
    """One slice of the expense breakdown."""

    name: str
    value: Decimal
    percent: float
    color: str
    count: int = 0


@dataclass(frozen=True)
class DashboardReport:
    """Everything the dashboard view shows for a user."""

    user_id: str
    start_date: Optional[date]
    end_date: Optional[date]
    currency: Optional[str]
    totals: SummaryTotals
    totals_by_currency: dict[str, SummaryTotals]
    recent: tuple[Transaction, ...]
    months: tuple[MonthlySummary, ...]
    breakdown: tuple[CategorySlice, ...]
    months_by_currency: dict[str, tuple[MonthlySummary, ...]] = field(default_factory=dict)
    breakdown_by_currency: dict[str, tuple[CategorySlice, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ExchangeRate:
    """A single quoted exchange rate from a provider."""

    rank: str
    rate: float
    provider: str
    fee: Optional[float] = None
    final_rate: Optional[float] = None

    @property
    def effective_rate(self) -> float:
        return self.final_rate if self.final_rate else self.rate


@dataclass(frozen=True)
class BankRate:
    """Buy/sell quote from one bank."""

    bank_name: str
    buy_rate: float
    sell_rate: float
    last_updated: datetime


@dataclass(frozen=True)
class CurrencyRates:
    """Aggregated bank quotes for a currency pair."""

    symbol: str
    banks: tuple[BankRate, ...]
    average_buy: float
    average_sell: float
    last_updated: datetime
    is_fallback: bool = False
    error: Optional[str] = None
    base_rate: Optional[float] = field(default=None)
