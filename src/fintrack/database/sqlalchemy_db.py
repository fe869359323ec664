"""Generic SQLAlchemy database implementation (the local store)."""

import logging
from typing import Optional
from datetime import date, datetime, UTC
from decimal import Decimal
from sqlalchemy.orm import Session

from fintrack.database.base import Database
from fintrack.database.models import (
    User,
    Transaction,
    BankAccount,
    Setting,
    create_session_factory,
)
from fintrack.database.mappers import (
    user_to_domain,
    transaction_to_domain,
    bank_account_to_domain,
)
from fintrack.domain.entities import (
    User as DomainUser,
    Transaction as DomainTransaction,
    BankAccount as DomainBankAccount,
    TransactionType,
)
from fintrack.domain.errors import (
    NotFoundError,
    bank_account_not_found,
    transaction_not_found,
    user_not_found,
)

logger = logging.getLogger(__name__)


def _to_int_id(value: str | int) -> Optional[int]:
    """Convert a domain string ID to the local integer key."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def _get_row(self, model, row_id: str):
        key = _to_int_id(row_id)
        if key is None:
            return None
        return self._get_session().query(model).filter(model.id == key).first()

    # User operations
    def create_user(self, username: str, email: str, password: str) -> str:
        """Create a new user. Returns user ID."""
        session = self._get_session()
        user = User(username=username, email=email, password=password)
        session.add(user)
        session.commit()
        logger.debug("Created local user %s", user.id)
        return str(user.id)

    def get_user(self, user_id: str) -> Optional[DomainUser]:
        """Get user by ID."""
        user = self._get_row(User, user_id)
        if user is None:
            return None
        return user_to_domain(user)

    def get_user_by_username(self, username: str) -> Optional[DomainUser]:
        """Get user by exact username."""
        session = self._get_session()
        user = session.query(User).filter(User.username == username).first()
        if user is None:
            return None
        return user_to_domain(user)

    def list_users(self) -> list[DomainUser]:
        """List all users."""
        session = self._get_session()
        users = session.query(User).order_by(User.id).all()
        return [user_to_domain(u) for u in users]

    def update_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """Update user fields that are not None."""
        user = self._get_row(User, user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        if username is not None:
            user.username = username
        if email is not None:
            user.email = email
        if password is not None:
            user.password = password
        self._get_session().commit()

    def delete_user(self, user_id: str) -> None:
        """Delete a user together with their transactions and bank accounts."""
        user = self._get_row(User, user_id)
        if user is None:
            return
        session = self._get_session()
        session.delete(user)
        session.commit()

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
        owner_id = _to_int_id(user_id)
        if owner_id is None:
            raise NotFoundError(user_not_found(user_id))
        session = self._get_session()
        transaction = Transaction(
            user_id=owner_id,
            type=TransactionType(type).value,
            amount=amount,
            description=description,
            date=date,
            currency=currency,
            category=category,
        )
        session.add(transaction)
        session.commit()
        return str(transaction.id)

    def get_transaction(self, transaction_id: str) -> Optional[DomainTransaction]:
        """Get transaction by ID."""
        txn = self._get_row(Transaction, transaction_id)
        if txn is None:
            return None
        return transaction_to_domain(txn)

    def list_transactions(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
    ) -> list[DomainTransaction]:
        """List transactions with optional filters."""
        session = self._get_session()
        query = session.query(Transaction)

        if user_id is not None:
            owner_id = _to_int_id(user_id)
            if owner_id is None:
                return []
            query = query.filter(Transaction.user_id == owner_id)
        if start_date is not None:
            query = query.filter(Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.date <= end_date)
        if type is not None:
            query = query.filter(Transaction.type == TransactionType(type).value)

        transactions = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
        return [transaction_to_domain(txn) for txn in transactions]

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
        transaction = self._get_row(Transaction, transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        if type is not None:
            transaction.type = TransactionType(type).value
        if amount is not None:
            transaction.amount = amount
        if description is not None:
            transaction.description = description
        if date is not None:
            transaction.date = date
        if currency is not None:
            transaction.currency = currency
        if category is not None:
            # Empty string clears the category
            transaction.category = category or None

        self._get_session().commit()

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        transaction = self._get_row(Transaction, transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        session = self._get_session()
        session.delete(transaction)
        session.commit()

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
        owner_id = _to_int_id(user_id)
        if owner_id is None:
            raise NotFoundError(user_not_found(user_id))
        session = self._get_session()
        account = BankAccount(
            user_id=owner_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            is_active=is_active,
            bank_code=bank_code,
        )
        session.add(account)
        session.commit()
        return str(account.id)

    def get_bank_account(self, account_id: str) -> Optional[DomainBankAccount]:
        """Get bank account by ID."""
        account = self._get_row(BankAccount, account_id)
        if account is None:
            return None
        return bank_account_to_domain(account)

    def list_bank_accounts(self, user_id: Optional[str] = None) -> list[DomainBankAccount]:
        """List bank accounts, optionally filtered by owner."""
        session = self._get_session()
        query = session.query(BankAccount)
        if user_id is not None:
            owner_id = _to_int_id(user_id)
            if owner_id is None:
                return []
            query = query.filter(BankAccount.user_id == owner_id)
        accounts = query.order_by(BankAccount.name, BankAccount.id).all()
        return [bank_account_to_domain(acc) for acc in accounts]

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
        account = self._get_row(BankAccount, account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))

        if name is not None:
            account.name = name
        if account_number is not None:
            account.account_number = account_number
        if balance is not None:
            account.balance = balance
        if currency is not None:
            account.currency = currency
        if is_active is not None:
            account.is_active = is_active
        if bank_code is not None:
            account.bank_code = bank_code or None
        account.updated_at = datetime.now(UTC)

        self._get_session().commit()

    def delete_bank_account(self, account_id: str) -> None:
        """Delete a bank account."""
        account = self._get_row(BankAccount, account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))
        session = self._get_session()
        session.delete(account)
        session.commit()

    # Settings
    def get_setting(self, key: str) -> Optional[str]:
        """Get a stored setting value."""
        session = self._get_session()
        setting = session.query(Setting).filter(Setting.key == key).first()
        return setting.value if setting is not None else None

    def set_setting(self, key: str, value: str) -> None:
        """Store a setting value, replacing any previous value."""
        session = self._get_session()
        setting = session.query(Setting).filter(Setting.key == key).first()
        if setting is None:
            session.add(Setting(key=key, value=value))
        else:
            setting.value = value
        session.commit()

    def delete_setting(self, key: str) -> None:
        """Remove a setting. Missing keys are ignored."""
        session = self._get_session()
        session.query(Setting).filter(Setting.key == key).delete()
        session.commit()
