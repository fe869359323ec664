"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    BankAccount,
    Transaction,
    TransactionType,
    User,
)


class Database(ABC):
    """Abstract storage interface for fintrack.

    Implementations return domain entities and use string IDs.
    """

    # True while operations are served by a fallback store instead of the
    # store the session was created against
    offline: bool = False

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str, email: str, password: str) -> str:
        """Create a new user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by exact username."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    @abstractmethod
    def update_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """Update user fields that are not None."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        """Delete a user."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: str,
        type: TransactionType,
        amount: Decimal,
        description: str,
        date: date,
        currency: str,
        category: Optional[str] = None,
    ) -> str:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest date first.

        Args:
            user_id: Optional owner filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            type: Optional income/expense filter
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: str,
        type: Optional[TransactionType] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        date: Optional[date] = None,
        currency: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        """Update transaction fields that are not None."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        user_id: str,
        name: str,
        account_number: str,
        balance: Decimal,
        currency: str,
        is_active: bool = True,
        bank_code: Optional[str] = None,
    ) -> str:
        """Create a bank account. Returns bank account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: str) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self, user_id: Optional[str] = None) -> list[BankAccount]:
        """List bank accounts, optionally filtered by owner."""
        pass

    @abstractmethod
    def update_bank_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        account_number: Optional[str] = None,
        balance: Optional[Decimal] = None,
        currency: Optional[str] = None,
        is_active: Optional[bool] = None,
        bank_code: Optional[str] = None,
    ) -> None:
        """Update bank account fields that are not None and refresh updated_at."""
        pass

    @abstractmethod
    def delete_bank_account(self, account_id: str) -> None:
        """Delete a bank account."""
        pass

    # Key-value settings (session, language preference)
    @abstractmethod
    def get_setting(self, key: str) -> Optional[str]:
        """Get a stored setting value."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: str) -> None:
        """Store a setting value, replacing any previous value."""
        pass

    @abstractmethod
    def delete_setting(self, key: str) -> None:
        """Remove a setting. Missing keys are ignored."""
        pass
