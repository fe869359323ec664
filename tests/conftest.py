"""Shared pytest fixtures for fintrack tests."""

import json
import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest
import requests

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.auth import AuthService
from fintrack.domain.bank_account import BankAccountService
from fintrack.domain.summary import SummaryService
from fintrack.domain.transaction import TransactionService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of CLI tests."""
    for name in ("FINTRACK_DB_PATH", "FINTRACK_API_URL", "FINTRACK_LANG", "FINTRACK_RATES_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def auth_service(temp_db):
    """Create an AuthService with a temporary database."""
    return AuthService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def bank_account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_user(auth_service):
    """Register a user; registering also logs them in."""
    return auth_service.register("lan", "lan@example.com", "secret1", "secret1")


@pytest.fixture
def sample_transactions(transaction_service, sample_user):
    """A small January/February ledger for sample_user."""
    rows = [
        ("income", Decimal("2500000"), "Salary", date(2025, 1, 15), None),
        ("expense", Decimal("150000"), "Lunch", date(2025, 1, 16), "food"),
        ("expense", Decimal("400000"), "Fuel", date(2025, 1, 17), "transport"),
        ("expense", Decimal("50000"), "Coffee", date(2025, 2, 1), "food"),
        ("income", Decimal("500000"), "Bonus", date(2025, 2, 3), None),
    ]
    ids = []
    for txn_type, amount, description, txn_date, category in rows:
        ids.append(
            transaction_service.create_transaction(
                user_id=sample_user.id,
                type=txn_type,
                amount=amount,
                description=description,
                date=txn_date,
                category=category,
            )
        )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None else json.dumps(payload).encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeApiSession:
    """In-memory REST collections behaving like the mock backend.

    Records get sequential string IDs per collection. GET with params does a
    substring match and answers 404 when nothing matches, like the hosted
    backend does.
    """

    def __init__(self):
        self.collections = {"users": {}, "transactions": {}, "bankAccounts": {}}
        self.next_ids = {name: 1 for name in self.collections}
        self.calls = []
        self.fail_with = None
        self.headers = {}

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append((method, url))
        if self.fail_with is not None:
            raise self.fail_with
        parts = url.rstrip("/").split("/")
        if parts[-1] in self.collections:
            resource, record_id = parts[-1], None
        else:
            resource, record_id = parts[-2], parts[-1]
        records = self.collections[resource]

        if method == "GET" and record_id is None:
            found = list(records.values())
            for key, value in (params or {}).items():
                found = [r for r in found if str(value) in str(r.get(key, ""))]
            if params and not found:
                return FakeResponse(404, "Not found")
            return FakeResponse(200, found)
        if method == "POST":
            new_id = str(self.next_ids[resource])
            self.next_ids[resource] += 1
            records[new_id] = dict(json, id=new_id)
            return FakeResponse(201, records[new_id])
        if record_id not in records:
            return FakeResponse(404, "Not found")
        if method == "GET":
            return FakeResponse(200, records[record_id])
        if method == "PUT":
            records[record_id].update(json)
            return FakeResponse(200, records[record_id])
        if method == "DELETE":
            return FakeResponse(200, records.pop(record_id))
        raise AssertionError(f"Unexpected method {method}")

    def get(self, url, timeout=None):
        return self.request("GET", url, timeout=timeout)

    def close(self):
        pass


@pytest.fixture
def fake_api_session():
    """In-memory mock backend session."""
    return FakeApiSession()


@pytest.fixture
def api_db(fake_api_session):
    """MockApiDatabase wired to the in-memory backend."""
    from fintrack.database.mock_api import MockApiDatabase

    return MockApiDatabase("https://example.mockapi.io/api/v1", session=fake_api_session)


@pytest.fixture
def fake_response():
    """Factory for canned HTTP responses."""
    return FakeResponse
