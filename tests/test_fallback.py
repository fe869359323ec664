"""Tests for the remote-first database with local fallback."""

from datetime import date
from decimal import Decimal

import pytest
import requests

from fintrack.database.factories import create_database
from fintrack.database.fallback import FallbackDatabase
from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase
from fintrack.domain.auth import SESSION_KEY, AuthService
from fintrack.domain.errors import AuthenticationError, NotFoundError
from fintrack.domain.transaction import TransactionService


@pytest.fixture
def fallback_db(api_db, temp_db):
    db = FallbackDatabase(remote=api_db, local=temp_db)
    db.connect()
    db.initialize_schema()
    return db


def test_uses_remote_when_available(fallback_db, fake_api_session, temp_db):
    user_id = fallback_db.create_user("lan", "lan@example.com", "pw")

    assert fallback_db.offline is False
    assert fallback_db.active is fallback_db.remote
    assert "1" in fake_api_session.collections["users"]
    assert fallback_db.get_user(user_id).username == "lan"
    assert temp_db.list_users() == []


def test_switches_to_local_on_network_error(fallback_db, fake_api_session, temp_db):
    fake_api_session.fail_with = requests.ConnectionError("offline")

    user_id = fallback_db.create_user("lan", "lan@example.com", "pw")

    assert fallback_db.offline is True
    assert isinstance(fallback_db.last_error, requests.ConnectionError)
    assert fallback_db.active is temp_db
    assert temp_db.get_user(user_id).username == "lan"


def test_stays_local_after_first_failure(fallback_db, fake_api_session):
    fake_api_session.fail_with = requests.Timeout("slow")
    fallback_db.list_users()
    calls_after_failure = len(fake_api_session.calls)

    fake_api_session.fail_with = None
    fallback_db.list_users()
    fallback_db.list_transactions()

    assert len(fake_api_session.calls) == calls_after_failure


def test_domain_errors_are_not_swallowed(fallback_db):
    with pytest.raises(NotFoundError):
        fallback_db.delete_transaction("12345")
    assert fallback_db.offline is False


def test_settings_always_local(fallback_db, fake_api_session, temp_db):
    fallback_db.set_setting("language", "vi")

    assert temp_db.get_setting("language") == "vi"
    assert fallback_db.get_setting("language") == "vi"
    assert fake_api_session.calls == []


def test_services_work_through_fallback(fallback_db, fake_api_session):
    auth = AuthService(fallback_db)
    user = auth.register("lan", "lan@example.com", "pw")

    fake_api_session.fail_with = requests.ConnectionError("offline")
    # The remote user is unknown locally, so it has to be recreated offline
    local_user = auth.register("lan", "lan@example.com", "pw")
    txn_id = TransactionService(fallback_db).create_transaction(
        local_user.id, "income", Decimal("1000"), "Offline income", date(2025, 1, 1)
    )

    assert user.id == "1"
    assert fallback_db.get_transaction(txn_id).description == "Offline income"
    assert auth.current_user().id == local_user.id


def test_session_does_not_resolve_to_another_local_user(fallback_db, fake_api_session, temp_db):
    bob_id = temp_db.create_user("bob", "bob@example.com", "pw")
    auth = AuthService(fallback_db)
    lan = auth.register("lan", "lan@example.com", "pw")
    assert lan.id == bob_id

    fake_api_session.fail_with = requests.ConnectionError("offline")

    assert auth.current_user() is None
    with pytest.raises(AuthenticationError):
        auth.require_user()


def test_outage_keeps_session_for_recovery(fallback_db, fake_api_session, api_db, temp_db):
    lan = AuthService(fallback_db).register("lan", "lan@example.com", "pw")

    fake_api_session.fail_with = requests.ConnectionError("offline")
    assert AuthService(fallback_db).current_user() is None
    assert temp_db.get_setting(SESSION_KEY) == lan.id

    # A later run with the backend reachable again
    fake_api_session.fail_with = None
    recovered = FallbackDatabase(remote=api_db, local=temp_db)
    assert AuthService(recovered).current_user() == lan

def test_create_database_without_url_is_local(tmp_path):
    db = create_database(database_path=str(tmp_path / "local.db"))
    assert isinstance(db, SQLAlchemyDatabase)


def test_create_database_with_url_is_fallback(tmp_path):
    db = create_database(
        database_path=str(tmp_path / "local.db"), api_url="https://example.mockapi.io/api/v1"
    )

    assert isinstance(db, FallbackDatabase)
    assert isinstance(db.local, SQLAlchemyDatabase)
    assert db.remote.base_url == "https://example.mockapi.io/api/v1"
