"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date
from decimal import Decimal

from fintrack.database.base import Database
from fintrack.domain.entities import (
    DEFAULT_CURRENCY,
    SUPPORTED_CURRENCIES,
    Transaction as TransactionEntity,
    TransactionType,
)
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    transaction_not_found,
    user_not_found,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5

# Stored amounts keep two decimal places
CENT = Decimal("0.01")


def validate_type(value: TransactionType | str) -> TransactionType:
    """Coerce and validate a transaction type."""
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(f"Invalid transaction type '{value}': expected 'income' or 'expense'")


def validate_amount(amount: Decimal) -> Decimal:
    """Amounts must be positive numbers; direction is carried by the type."""
    if not isinstance(amount, Decimal):
        try:
            amount = Decimal(str(amount))
        except ArithmeticError:
            raise ValidationError(f"Amount must be a number, got '{amount}'")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return validate_precision(amount, "Amount")


def validate_precision(value: Decimal, label: str) -> Decimal:
    """Reject values that would be rounded when stored."""
    try:
        rounded = value.quantize(CENT)
    except ArithmeticError:
        raise ValidationError(f"{label} is too large")
    if rounded != value:
        raise ValidationError(f"{label} must have at most 2 decimal places")
    return value


def validate_currency(currency: str) -> str:
    code = (currency or "").strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValidationError(
            f"Unsupported currency '{currency}'. Supported: {', '.join(SUPPORTED_CURRENCIES)}"
        )
    return code


class TransactionService:
    """Service for managing a user's income and expense transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        user_id: str,
        type: TransactionType | str,
        amount: Decimal,
        description: str,
        date: date,
        currency: str = DEFAULT_CURRENCY,
        category: Optional[str] = None,
    ) -> str:
        """Create a transaction.

        Args:
            user_id: Owner user ID
            type: 'income' or 'expense'
            amount: Positive amount
            description: Non-empty description
            date: Transaction date
            currency: Currency code (VND or USD)
            category: Optional category label

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the user doesn't exist
        """
        txn_type = validate_type(type)
        amount = validate_amount(amount)
        currency = validate_currency(currency)
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")

        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        transaction_id = self.db.create_transaction(
            user_id=user_id,
            type=txn_type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=_clean_category(category),
        )
        logger.info("Created %s transaction %s for user %s", txn_type.value, transaction_id, user_id)
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: str, user_id: Optional[str] = None) -> TransactionEntity:
        """Get a transaction, optionally checking it belongs to user_id.

        Another user's transaction is reported as not found.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None or (user_id is not None and txn.user_id != user_id):
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType | str] = None,
    ) -> list[TransactionEntity]:
        """List a user's transactions, newest first.

        Args:
            user_id: Owner user ID
            start_date: Optional start date filter
            end_date: Optional end date filter
            type: Optional income/expense filter
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")
        txn_type = validate_type(type) if type is not None else None
        return self.db.list_transactions(
            user_id=user_id, start_date=start_date, end_date=end_date, type=txn_type
        )

    def recent_transactions(self, user_id: str, limit: int = RECENT_LIMIT) -> list[TransactionEntity]:
        """Most recent transactions for the dashboard."""
        return self.db.list_transactions(user_id=user_id)[:limit]

    def update_transaction(
        self,
        transaction_id: str,
        user_id: Optional[str] = None,
        type: Optional[TransactionType | str] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        date: Optional[date] = None,
        currency: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        """Update the fields that are provided.

        Pass category="" to clear the category.

        Raises:
            NotFoundError: If transaction doesn't exist (or isn't user_id's)
            ValidationError: If a new value is invalid
        """
        self.require_transaction(transaction_id, user_id)

        txn_type = validate_type(type) if type is not None else None
        if amount is not None:
            amount = validate_amount(amount)
        if currency is not None:
            currency = validate_currency(currency)
        if description is not None:
            description = description.strip()
            if not description:
                raise ValidationError("Description is required")
        if category is not None:
            category = category.strip()

        self.db.update_transaction(
            transaction_id,
            type=txn_type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )

    def delete_transaction(self, transaction_id: str, user_id: Optional[str] = None) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist (or isn't user_id's)
        """
        self.require_transaction(transaction_id, user_id)
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)


def _clean_category(category: Optional[str]) -> Optional[str]:
    if category is None:
        return None
    return category.strip() or None
