"""Remote-first database with a local fallback store."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import requests

from fintrack.database.base import Database
from fintrack.domain.entities import (
    BankAccount,
    Transaction,
    TransactionType,
    User,
)

logger = logging.getLogger(__name__)


class FallbackDatabase(Database):
    """Forward operations to a remote store, falling back to a local one.

    The first network failure switches the instance to the local store for
    the rest of its lifetime, so a slow or missing backend is only waited
    on once. Settings are always kept in the local store.
    """

    def __init__(self, remote: Database, local: Database):
        """Initialize fallback database.

        Args:
            remote: Primary store (usually MockApiDatabase)
            local: Store used when the remote one is unreachable
        """
        self.remote = remote
        self.local = local
        self.offline = False
        self.last_error: Optional[Exception] = None

    @property
    def active(self) -> Database:
        """The store currently receiving operations."""
        return self.local if self.offline else self.remote

    def _call(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        if not self.offline:
            try:
                return getattr(self.remote, operation)(*args, **kwargs)
            except requests.RequestException as e:
                logger.warning(
                    "Remote store unavailable during %s, using local store: %s", operation, e
                )
                self.offline = True
                self.last_error = e
        return getattr(self.local, operation)(*args, **kwargs)

    def connect(self) -> None:
        """Connect both stores."""
        self.local.connect()
        self.remote.connect()

    def disconnect(self) -> None:
        """Disconnect both stores."""
        self.remote.disconnect()
        self.local.disconnect()

    def initialize_schema(self) -> None:
        """Initialize both schemas."""
        self.local.initialize_schema()
        self.remote.initialize_schema()

    # User operations
    def create_user(self, username: str, email: str, password: str) -> str:
        return self._call("create_user", username=username, email=email, password=password)

    def get_user(self, user_id: str) -> Optional[User]:
        return self._call("get_user", user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._call("get_user_by_username", username)

    def list_users(self) -> list[User]:
        return self._call("list_users")

    def update_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        self._call("update_user", user_id, username=username, email=email, password=password)

    def delete_user(self, user_id: str) -> None:
        self._call("delete_user", user_id)

    # Transaction operations
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
        return self._call(
            "create_transaction",
            user_id=user_id,
            type=type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._call("get_transaction", transaction_id)

    def list_transactions(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        return self._call(
            "list_transactions",
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            type=type,
        )

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
        self._call(
            "update_transaction",
            transaction_id,
            type=type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )

    def delete_transaction(self, transaction_id: str) -> None:
        self._call("delete_transaction", transaction_id)

    # Bank account operations
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
        return self._call(
            "create_bank_account",
            user_id=user_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )

    def get_bank_account(self, account_id: str) -> Optional[BankAccount]:
        return self._call("get_bank_account", account_id)

    def list_bank_accounts(self, user_id: Optional[str] = None) -> list[BankAccount]:
        return self._call("list_bank_accounts", user_id=user_id)

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
        self._call(
            "update_bank_account",
            account_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )

    def delete_bank_account(self, account_id: str) -> None:
        self._call("delete_bank_account", account_id)

    # Settings always live locally
    def get_setting(self, key: str) -> Optional[str]:
        return self.local.get_setting(key)

    def set_setting(self, key: str, value: str) -> None:
        self.local.set_setting(key, value)

    def delete_setting(self, key: str) -> None:
        self.local.delete_setting(key)
