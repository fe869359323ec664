"""Mock REST API database implementation.

Talks to a hosted stand-in backend exposing ``/users``, ``/transactions`` and
``/bankAccounts`` collections with plain ``GET/POST/PUT/DELETE`` semantics.
Records use camelCase field names; conversion lives in ``mappers``.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Optional

import requests

from fintrack.database.base import Database
from fintrack.database.mappers import (
    bank_account_fields_to_json,
    bank_account_from_json,
    transaction_fields_to_json,
    transaction_from_json,
    user_from_json,
)
from fintrack.domain.entities import (
    BankAccount,
    Transaction,
    TransactionType,
    User,
)
from fintrack.domain.errors import (
    NotFoundError,
    bank_account_not_found,
    transaction_not_found,
    user_not_found,
)

logger = logging.getLogger(__name__)

USERS = "users"
TRANSACTIONS = "transactions"
BANK_ACCOUNTS = "bankAccounts"

DEFAULT_TIMEOUT = 10.0


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class MockApiDatabase(Database):
    """Database interface backed by a mock REST API.

    Settings are not part of the remote API and are kept in process memory.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Base URL of the mock backend (e.g.
                'https://<project>.mockapi.io')
            timeout: Per-request timeout in seconds
            session: Optional requests session (useful for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session
        self._settings: dict[str, str] = {}

    def _get_http(self) -> requests.Session:
        if self._http is None:
            self._http = requests.Session()
            self._http.headers.update({"Content-Type": "application/json"})
        return self._http

    def _url(self, resource: str, record_id: Optional[str] = None) -> str:
        if record_id is None:
            return f"{self.base_url}/{resource}"
        return f"{self.base_url}/{resource}/{record_id}"

    def _request(
        self,
        method: str,
        resource: str,
        record_id: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> Optional[Any]:
        """Send a request and decode the JSON body.

        Returns:
            Decoded JSON, or None when the backend answers 404

        Raises:
            requests.RequestException: On connection failure or any other
                non-success status
        """
        url = self._url(resource, record_id)
        try:
            response = self._get_http().request(
                method, url, params=params, json=payload, timeout=self.timeout
            )
            if response.status_code == 404:
                logger.debug("%s %s -> 404", method, url)
                return None
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Error calling %s %s: %s", method, url, e)
            raise
        if not response.content:
            return {}
        return response.json()

    def _list(self, resource: str, params: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        data = self._request("GET", resource, params=params)
        # Filtered queries with no matches come back as 404
        if not data:
            return []
        return list(data)

    def connect(self) -> None:
        """Connect to the API (sessions are created lazily)."""
        pass

    def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._http is not None:
            self._http.close()
            self._http = None

    def initialize_schema(self) -> None:
        """Remote collections are provisioned on the backend."""
        pass

    # User operations
    def create_user(self, username: str, email: str, password: str) -> str:
        """Create a new user. Returns user ID."""
        data = self._request(
            "POST",
            USERS,
            payload={
                "username": username,
                "email": email,
                "password": password,
                "createdAt": _now_iso(),
            },
        )
        return str(data["id"])

    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        data = self._request("GET", USERS, record_id=user_id)
        if not data:
            return None
        return user_from_json(data)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by exact username."""
        # The backend's filter is a substring match, so re-check exactly
        for record in self._list(USERS, params={"username": username}):
            if record.get("username") == username:
                return user_from_json(record)
        return None

    def list_users(self) -> list[User]:
        """List all users."""
        return [user_from_json(record) for record in self._list(USERS)]

    def update_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """Update user fields that are not None."""
        payload = {
            key: value
            for key, value in (("username", username), ("email", email), ("password", password))
            if value is not None
        }
        if self._request("PUT", USERS, record_id=user_id, payload=payload) is None:
            raise NotFoundError(user_not_found(user_id))

    def delete_user(self, user_id: str) -> None:
        """Delete a user. Missing users are ignored."""
        self._request("DELETE", USERS, record_id=user_id)

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
        """Create a transaction. Returns transaction ID."""
        payload = transaction_fields_to_json(
            user_id=user_id,
            type=type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )
        payload["createdAt"] = _now_iso()
        data = self._request("POST", TRANSACTIONS, payload=payload)
        return str(data["id"])

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        data = self._request("GET", TRANSACTIONS, record_id=transaction_id)
        if not data:
            return None
        return transaction_from_json(data)

    def list_transactions(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest date first."""
        params = {"userId": user_id} if user_id is not None else None
        transactions = [transaction_from_json(r) for r in self._list(TRANSACTIONS, params=params)]

        if user_id is not None:
            transactions = [t for t in transactions if t.user_id == user_id]
        if start_date is not None:
            transactions = [t for t in transactions if t.date >= start_date]
        if end_date is not None:
            transactions = [t for t in transactions if t.date <= end_date]
        if type is not None:
            transactions = [t for t in transactions if t.type == TransactionType(type)]

        transactions.sort(key=lambda t: (t.date, _sortable_id(t.id)), reverse=True)
        return transactions

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
        payload = transaction_fields_to_json(
            type=type,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )
        if self._request("PUT", TRANSACTIONS, record_id=transaction_id, payload=payload) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        if self._request("DELETE", TRANSACTIONS, record_id=transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

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
        """Create a bank account. Returns bank account ID."""
        payload = bank_account_fields_to_json(
            user_id=user_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )
        now = _now_iso()
        payload["createdAt"] = now
        payload["updatedAt"] = now
        data = self._request("POST", BANK_ACCOUNTS, payload=payload)
        return str(data["id"])

    def get_bank_account(self, account_id: str) -> Optional[BankAccount]:
        """Get bank account by ID."""
        data = self._request("GET", BANK_ACCOUNTS, record_id=account_id)
        if not data:
            return None
        return bank_account_from_json(data)

    def list_bank_accounts(self, user_id: Optional[str] = None) -> list[BankAccount]:
        """List bank accounts, optionally filtered by owner."""
        params = {"userId": user_id} if user_id is not None else None
        accounts = [bank_account_from_json(r) for r in self._list(BANK_ACCOUNTS, params=params)]
        if user_id is not None:
            accounts = [a for a in accounts if a.user_id == user_id]
        accounts.sort(key=lambda a: (a.name, _sortable_id(a.id)))
        return accounts

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
        """Update bank account fields that are not None."""
        payload = bank_account_fields_to_json(
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )
        payload["updatedAt"] = _now_iso()
        if self._request("PUT", BANK_ACCOUNTS, record_id=account_id, payload=payload) is None:
            raise NotFoundError(bank_account_not_found(account_id))

    def delete_bank_account(self, account_id: str) -> None:
        """Delete a bank account."""
        if self._request("DELETE", BANK_ACCOUNTS, record_id=account_id) is None:
            raise NotFoundError(bank_account_not_found(account_id))

    # Settings
    def get_setting(self, key: str) -> Optional[str]:
        """Get an in-memory setting value."""
        return self._settings.get(key)

    def set_setting(self, key: str, value: str) -> None:
        """Store an in-memory setting value."""
        self._settings[key] = value

    def delete_setting(self, key: str) -> None:
        """Remove an in-memory setting."""
        self._settings.pop(key, None)


def _sortable_id(record_id: str) -> tuple[int, str]:
    """Sort numeric IDs numerically and anything else lexically after them."""
    if record_id.isdigit():
        return (int(record_id), "")
    return (0, record_id)
