"""Bank account domain service."""

from collections import defaultdict
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import DEFAULT_CURRENCY, BankAccount as BankAccountEntity
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    user_not_found,
)
from fintrack.domain.transaction import validate_currency, validate_precision


def _validate_balance(balance: Decimal) -> Decimal:
    if not isinstance(balance, Decimal):
        try:
            balance = Decimal(str(balance))
        except ArithmeticError:
            raise ValidationError(f"Balance must be a number, got '{balance}'")
    if not balance.is_finite() or balance < 0:
        raise ValidationError("Balance must be zero or greater")
    return validate_precision(balance, "Balance")


def _require_text(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def mask_account_number(account_number: str) -> str:
    """Show only the last four characters of an account number."""
    if len(account_number) <= 4:
        return account_number
    return "*" * (len(account_number) - 4) + account_number[-4:]


class BankAccountService:
    """Service for managing a user's bank accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: str,
        name: str,
        account_number: str,
        balance: Decimal = Decimal("0"),
        currency: str = DEFAULT_CURRENCY,
        is_active: bool = True,
        bank_code: Optional[str] = None,
    ) -> str:
        """Create a bank account.

        Args:
            user_id: Owner user ID
            name: Account name (e.g. "Vietcombank", "Momo")
            account_number: Account number
            balance: Current balance (zero or greater)
            currency: Currency code
            is_active: Whether the account is in use
            bank_code: Optional bank code

        Returns:
            Bank account ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the user doesn't exist
        """
        name = _require_text(name, "Account name")
        account_number = _require_text(account_number, "Account number")
        balance = _validate_balance(balance)
        currency = validate_currency(currency)

        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        return self.db.create_bank_account(
            user_id=user_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code or None,
        )

    def get_account(self, account_id: str) -> Optional[BankAccountEntity]:
        """Get bank account by ID, or None if not found."""
        return self.db.get_bank_account(account_id)

    def require_account(self, account_id: str, user_id: Optional[str] = None) -> BankAccountEntity:
        """Get a bank account, optionally checking it belongs to user_id.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        account = self.db.get_bank_account(account_id)
        if account is None or (user_id is not None and account.user_id != user_id):
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def list_accounts(self, user_id: str, active_only: bool = False) -> list[BankAccountEntity]:
        """List a user's bank accounts."""
        accounts = self.db.list_bank_accounts(user_id=user_id)
        if active_only:
            accounts = [acc for acc in accounts if acc.is_active]
        return accounts

    def update_account(
        self,
        account_id: str,
        user_id: Optional[str] = None,
        name: Optional[str] = None,
        account_number: Optional[str] = None,
        balance: Optional[Decimal] = None,
        currency: Optional[str] = None,
        is_active: Optional[bool] = None,
        bank_code: Optional[str] = None,
    ) -> None:
        """Update the fields that are provided.

        Raises:
            NotFoundError: If account doesn't exist (or isn't user_id's)
            ValidationError: If a new value is invalid
        """
        self.require_account(account_id, user_id)

        if name is not None:
            name = _require_text(name, "Account name")
        if account_number is not None:
            account_number = _require_text(account_number, "Account number")
        if balance is not None:
            balance = _validate_balance(balance)
        if currency is not None:
            currency = validate_currency(currency)

        self.db.update_bank_account(
            account_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )

    def set_active(self, account_id: str, is_active: bool, user_id: Optional[str] = None) -> None:
        """Activate or deactivate an account."""
        self.update_account(account_id, user_id=user_id, is_active=is_active)

    def delete_account(self, account_id: str, user_id: Optional[str] = None) -> None:
        """Delete a bank account.

        Raises:
            NotFoundError: If account doesn't exist (or isn't user_id's)
        """
        self.require_account(account_id, user_id)
        self.db.delete_bank_account(account_id)

    def total_balance(self, user_id: str, active_only: bool = True) -> dict[str, Decimal]:
        """Sum balances per currency.

        Args:
            user_id: Owner user ID
            active_only: Skip inactive accounts

        Returns:
            Mapping of currency code to total balance, sorted by currency
        """
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for account in self.list_accounts(user_id, active_only=active_only):
            totals[account.currency] += account.balance
        return dict(sorted(totals.items()))
