"""Mapper functions between domain entities and their stored shapes.

Two storage shapes exist: SQLAlchemy rows for the local store and the
camelCase JSON records served by the mock REST backend. Keeping both
conversions here means the stores only deal with I/O.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser

from fintrack.domain import entities as domain
from fintrack.database.models import (
    User as ORMUser,
    Transaction as ORMTransaction,
    BankAccount as ORMBankAccount,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=str(orm_user.id),
        username=orm_user.username,
        email=orm_user.email,
        password=orm_user.password,
        created_at=orm_user.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=str(orm_transaction.id),
        user_id=str(orm_transaction.user_id),
        type=domain.TransactionType(orm_transaction.type),
        amount=Decimal(orm_transaction.amount),
        description=orm_transaction.description,
        date=orm_transaction.date,
        currency=orm_transaction.currency,
        category=orm_transaction.category,
        created_at=orm_transaction.created_at,
    )


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=str(orm_account.id),
        user_id=str(orm_account.user_id),
        name=orm_account.name,
        account_number=orm_account.account_number,
        balance=Decimal(orm_account.balance),
        currency=orm_account.currency,
        is_active=orm_account.is_active,
        bank_code=orm_account.bank_code,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


# JSON (mock API) conversions


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, TypeError):
        return None


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date_parser.parse(str(value)).date()


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def user_from_json(data: dict[str, Any]) -> domain.User:
    """Convert a mock API user record to a domain User entity."""
    return domain.User(
        id=str(data["id"]),
        username=data.get("username", ""),
        email=data.get("email", ""),
        password=data.get("password", ""),
        created_at=_parse_datetime(data.get("createdAt")),
    )


def transaction_from_json(data: dict[str, Any]) -> domain.Transaction:
    """Convert a mock API transaction record to a domain Transaction entity."""
    return domain.Transaction(
        id=str(data["id"]),
        user_id=str(data.get("userId", "")),
        type=domain.TransactionType(data.get("type", "expense")),
        amount=_to_decimal(data.get("amount")),
        description=data.get("description", ""),
        date=_parse_date(data.get("date")),
        currency=data.get("currency") or domain.DEFAULT_CURRENCY,
        category=data.get("category") or None,
        created_at=_parse_datetime(data.get("createdAt")),
    )


def bank_account_from_json(data: dict[str, Any]) -> domain.BankAccount:
    """Convert a mock API bankAccounts record to a domain BankAccount entity."""
    return domain.BankAccount(
        id=str(data["id"]),
        user_id=str(data.get("userId", "")),
        name=data.get("name", ""),
        account_number=str(data.get("accountNumber", "")),
        balance=_to_decimal(data.get("balance")),
        currency=data.get("currency") or domain.DEFAULT_CURRENCY,
        is_active=bool(data.get("isActive", True)),
        bank_code=data.get("bankCode"),
        created_at=_parse_datetime(data.get("createdAt")),
        updated_at=_parse_datetime(data.get("updatedAt")),
    )


def transaction_fields_to_json(
    user_id: Optional[str] = None,
    type: Optional[domain.TransactionType] = None,
    amount: Optional[Decimal] = None,
    description: Optional[str] = None,
    date: Optional[date] = None,
    currency: Optional[str] = None,
    category: Optional[str] = None,
) -> dict[str, Any]:
    """Build a mock API transaction payload from the fields that are set."""
    payload: dict[str, Any] = {}
    if user_id is not None:
        payload["userId"] = user_id
    if type is not None:
        payload["type"] = domain.TransactionType(type).value
    if amount is not None:
        payload["amount"] = float(amount)
    if description is not None:
        payload["description"] = description
    if date is not None:
        payload["date"] = date.isoformat()
    if currency is not None:
        payload["currency"] = currency
    if category is not None:
        payload["category"] = category
    return payload


def bank_account_fields_to_json(
    user_id: Optional[str] = None,
    name: Optional[str] = None,
    account_number: Optional[str] = None,
    balance: Optional[Decimal] = None,
    currency: Optional[str] = None,
    is_active: Optional[bool] = None,
    bank_code: Optional[str] = None,
) -> dict[str, Any]:
    """Build a mock API bank account payload from the fields that are set."""
    payload: dict[str, Any] = {}
    if user_id is not None:
        payload["userId"] = user_id
    if name is not None:
        payload["name"] = name
    if account_number is not None:
        payload["accountNumber"] = account_number
    if balance is not None:
        payload["balance"] = float(balance)
    if currency is not None:
        payload["currency"] = currency
    if is_active is not None:
        payload["isActive"] = is_active
    if bank_code is not None:
        payload["bankCode"] = bank_code
    return payload
