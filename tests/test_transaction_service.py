"""Tests for TransactionService."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.entities import Transaction, TransactionType
from fintrack.domain.errors import NotFoundError, ValidationError


def test_create_and_get_transaction(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        user_id=sample_user.id,
        type="expense",
        amount=Decimal("150000"),
        description="  Lunch  ",
        date=date(2025, 1, 16),
        category="food",
    )

    txn = transaction_service.get_transaction(txn_id)
    assert isinstance(txn, Transaction)
    assert txn.user_id == sample_user.id
    assert txn.type == TransactionType.EXPENSE
    assert txn.amount == Decimal("150000")
    assert txn.description == "Lunch"
    assert txn.currency == "VND"
    assert txn.category == "food"
    assert txn.signed_amount == Decimal("-150000")


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), "abc", Decimal("NaN")])
def test_create_rejects_invalid_amount(transaction_service, sample_user, amount):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            user_id=sample_user.id,
            type="income",
            amount=amount,
            description="Salary",
            date=date(2025, 1, 15),
        )



@pytest.mark.parametrize("amount", [Decimal("0.004"), Decimal("12.505")])
def test_create_rejects_amounts_finer_than_cents(transaction_service, sample_user, amount):
    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        transaction_service.create_transaction(
            sample_user.id, "expense", amount, "Coffee", date(2025, 1, 1), currency="USD"
        )


def test_create_keeps_cent_amounts(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.id, "expense", Decimal("12.50"), "Coffee", date(2025, 1, 1), currency="USD"
    )

    assert transaction_service.get_transaction(txn_id).amount == Decimal("12.50")

def test_create_rejects_invalid_fields(transaction_service, sample_user):
    with pytest.raises(ValidationError, match="Invalid transaction type"):
        transaction_service.create_transaction(
            sample_user.id, "transfer", Decimal("1"), "x", date(2025, 1, 1)
        )
    with pytest.raises(ValidationError, match="Description is required"):
        transaction_service.create_transaction(
            sample_user.id, "income", Decimal("1"), "   ", date(2025, 1, 1)
        )
    with pytest.raises(ValidationError, match="Unsupported currency"):
        transaction_service.create_transaction(
            sample_user.id, "income", Decimal("1"), "x", date(2025, 1, 1), currency="EUR"
        )


def test_create_accepts_lowercase_currency(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.id, "income", Decimal("10"), "Gift", date(2025, 1, 1), currency="usd"
    )
    assert transaction_service.get_transaction(txn_id).currency == "USD"


def test_create_for_unknown_user(transaction_service):
    with pytest.raises(NotFoundError, match="User 999 not found"):
        transaction_service.create_transaction(
            "999", "income", Decimal("1"), "x", date(2025, 1, 1)
        )


def test_list_is_newest_first_and_filtered(transaction_service, sample_user, sample_transactions):
    transactions = transaction_service.list_transactions(sample_user.id)
    assert [t.description for t in transactions] == ["Bonus", "Coffee", "Fuel", "Lunch", "Salary"]

    january = transaction_service.list_transactions(
        sample_user.id, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
    )
    assert len(january) == 3

    income = transaction_service.list_transactions(sample_user.id, type="income")
    assert {t.description for t in income} == {"Salary", "Bonus"}


def test_list_rejects_inverted_range(transaction_service, sample_user):
    with pytest.raises(ValidationError, match="Start date"):
        transaction_service.list_transactions(
            sample_user.id, start_date=date(2025, 2, 1), end_date=date(2025, 1, 1)
        )


def test_list_only_returns_own_transactions(
    transaction_service, auth_service, sample_user, sample_transactions
):
    other = auth_service.register("binh", "binh@example.com", "pw")
    transaction_service.create_transaction(
        other.id, "income", Decimal("1"), "Other user's", date(2025, 1, 1)
    )

    assert len(transaction_service.list_transactions(sample_user.id)) == 5
    assert len(transaction_service.list_transactions(other.id)) == 1


def test_recent_transactions(transaction_service, sample_user, sample_transactions):
    recent = transaction_service.recent_transactions(sample_user.id, limit=2)
    assert [t.description for t in recent] == ["Bonus", "Coffee"]


def test_update_transaction(transaction_service, sample_user, sample_transactions):
    txn_id = sample_transactions[1]

    transaction_service.update_transaction(
        txn_id,
        user_id=sample_user.id,
        type="income",
        amount=Decimal("175000"),
        description="Refund",
        currency="USD",
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.type == TransactionType.INCOME
    assert txn.amount == Decimal("175000")
    assert txn.description == "Refund"
    assert txn.currency == "USD"
    assert txn.date == date(2025, 1, 16)
    assert txn.category == "food"


def test_update_clears_category(transaction_service, sample_user, sample_transactions):
    txn_id = sample_transactions[1]
    transaction_service.update_transaction(txn_id, user_id=sample_user.id, category="")
    assert transaction_service.get_transaction(txn_id).category is None


def test_update_validates(transaction_service, sample_user, sample_transactions):
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(sample_transactions[0], amount=Decimal("0"))
    with pytest.raises(ValidationError):
        transaction_service.update_transaction(sample_transactions[0], description=" ")


def test_other_users_transaction_is_not_found(
    transaction_service, auth_service, sample_user, sample_transactions
):
    other = auth_service.register("binh", "binh@example.com", "pw")

    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(
            sample_transactions[0], user_id=other.id, amount=Decimal("1")
        )
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(sample_transactions[0], user_id=other.id)
    assert transaction_service.get_transaction(sample_transactions[0]) is not None


def test_delete_removes_from_list(transaction_service, sample_user, sample_transactions):
    txn_id = sample_transactions[0]
    transaction_service.delete_transaction(txn_id, user_id=sample_user.id)

    assert transaction_service.get_transaction(txn_id) is None
    assert txn_id not in [t.id for t in transaction_service.list_transactions(sample_user.id)]


def test_delete_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError, match="Transaction 42 not found"):
        transaction_service.delete_transaction("42")
