"""Tests for TransactionService and balance consistency."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase
from fintrack.domain.entities import (
    TransactionFilters,
    TransactionStatus,
    TransactionType,
)
from fintrack.domain.errors import (
    AtomicWriteFailure,
    NotFoundError,
    OwnerMismatchError,
    ValidationError,
)
from fintrack.domain.transaction import TransactionService


def balance_of(account_service, account, owner):
    return account_service.require_account(account.id, owner).balance


def test_balance_follows_create_and_delete(
    transaction_service, account_service, sample_account, make_input, owner
):
    """Expense, delete, then income moves the balance 1000 -> 800 -> 1000 -> 1200."""
    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")

    expense = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )
    assert balance_of(account_service, sample_account, owner) == Decimal("800.00")

    transaction_service.delete_transaction(expense.id, owner)
    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")

    transaction_service.create_transaction(
        make_input(
            description="Paycheck",
            amount=Decimal("200.00"),
            transaction_type=TransactionType.INCOME,
            account_id=sample_account.id,
        )
    )
    assert balance_of(account_service, sample_account, owner) == Decimal("1200.00")


def test_create_returns_persisted_transaction(transaction_service, make_input, owner):
    """Created transactions get an id and are readable by their owner."""
    created = transaction_service.create_transaction(make_input(description="  Coffee  "))

    assert created.id is not None
    assert created.description == "Coffee"
    assert created.amount == Decimal("50.00")
    assert created.status is TransactionStatus.COMPLETED
    assert transaction_service.get_transaction(created.id, owner) == created


def test_transaction_without_account_leaves_balances_alone(
    transaction_service, account_service, sample_account, make_input, owner
):
    """Transactions not attached to an account have no balance effect."""
    transaction_service.create_transaction(make_input(amount=Decimal("75.00")))

    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")


def test_update_amount_adjusts_balance(
    transaction_service, account_service, sample_account, make_input, owner
):
    """Changing the amount replaces the old effect with the new one."""
    data = make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    txn = transaction_service.create_transaction(data)

    transaction_service.update_transaction(
        txn.id, make_input(amount=Decimal("300.00"), account_id=sample_account.id), owner
    )

    assert balance_of(account_service, sample_account, owner) == Decimal("700.00")
    assert transaction_service.get_transaction(txn.id, owner).amount == Decimal("300.00")


def test_update_type_flips_balance_effect(
    transaction_service, account_service, sample_account, make_input, owner
):
    """Turning an expense into income swings the balance by twice the amount."""
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    transaction_service.update_transaction(
        txn.id,
        make_input(
            amount=Decimal("200.00"),
            transaction_type=TransactionType.INCOME,
            account_id=sample_account.id,
        ),
        owner,
    )

    assert balance_of(account_service, sample_account, owner) == Decimal("1200.00")


def test_update_account_moves_balance_effect(
    transaction_service, account_service, sample_account, make_input, owner
):
    """Moving a transaction reverses it on the old account and applies it to the new one."""
    savings = account_service.create_account(
        owner=owner, name="Savings", account_type="savings", balance=Decimal("500.00")
    )
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    transaction_service.update_transaction(
        txn.id, make_input(amount=Decimal("200.00"), account_id=savings.id), owner
    )

    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")
    assert balance_of(account_service, savings, owner) == Decimal("300.00")


def test_update_amount_type_and_account_together(
    transaction_service, account_service, sample_account, make_input, owner
):
    """All three balance-relevant fields may change in one update."""
    savings = account_service.create_account(
        owner=owner, name="Savings", account_type="savings", balance=Decimal("500.00")
    )
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    transaction_service.update_transaction(
        txn.id,
        make_input(
            description="Refund",
            amount=Decimal("50.00"),
            transaction_type=TransactionType.INCOME,
            account_id=savings.id,
        ),
        owner,
    )

    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")
    assert balance_of(account_service, savings, owner) == Decimal("550.00")


def test_update_detaching_account_reverses_effect(
    transaction_service, account_service, sample_account, make_input, owner
):
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    transaction_service.update_transaction(
        txn.id, make_input(amount=Decimal("200.00"), account_id=None), owner
    )

    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")
    assert transaction_service.get_transaction(txn.id, owner).account_id is None


def test_update_description_only_keeps_balance(
    transaction_service, account_service, sample_account, make_input, owner
):
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    updated = transaction_service.update_transaction(
        txn.id,
        make_input(description="Farmers market", amount=Decimal("200.00"), account_id=sample_account.id),
        owner,
    )

    assert updated.description == "Farmers market"
    assert balance_of(account_service, sample_account, owner) == Decimal("800.00")


def test_update_rejects_payload_for_other_owner(
    transaction_service, make_input, owner, other_owner
):
    """A payload naming a different owner is refused before anything is written."""
    txn = transaction_service.create_transaction(make_input())

    with pytest.raises(OwnerMismatchError):
        transaction_service.update_transaction(txn.id, make_input(owner=other_owner), owner)


def test_create_rolls_back_when_balance_write_fails(
    transaction_service, account_service, sample_account, make_input, owner, monkeypatch
):
    """A failed balance write leaves neither the row nor a balance change behind."""

    def failing_delta(self, session, account_id, owner, delta):
        raise RuntimeError("disk full")

    monkeypatch.setattr(SQLAlchemyDatabase, "_apply_balance_delta", failing_delta)

    with pytest.raises(AtomicWriteFailure) as exc_info:
        transaction_service.create_transaction(
            make_input(amount=Decimal("200.00"), account_id=sample_account.id)
        )

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert transaction_service.list_transactions(owner) == []
    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")


def test_update_rolls_back_when_second_balance_write_fails(
    transaction_service, account_service, sample_account, make_input, owner, monkeypatch
):
    """The reversal on the old account is undone if applying the new effect fails."""
    savings = account_service.create_account(
        owner=owner, name="Savings", account_type="savings", balance=Decimal("500.00")
    )
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    original = SQLAlchemyDatabase._apply_balance_delta
    calls = []

    def flaky_delta(self, session, account_id, owner, delta):
        calls.append(account_id)
        if len(calls) == 2:
            raise RuntimeError("connection lost")
        return original(self, session, account_id, owner, delta)

    monkeypatch.setattr(SQLAlchemyDatabase, "_apply_balance_delta", flaky_delta)

    with pytest.raises(AtomicWriteFailure):
        transaction_service.update_transaction(
            txn.id, make_input(amount=Decimal("300.00"), account_id=savings.id), owner
        )

    assert calls == [sample_account.id, savings.id]
    assert balance_of(account_service, sample_account, owner) == Decimal("800.00")
    assert balance_of(account_service, savings, owner) == Decimal("500.00")
    stored = transaction_service.get_transaction(txn.id, owner)
    assert stored.amount == Decimal("200.00")
    assert stored.account_id == sample_account.id


def test_delete_rolls_back_when_balance_write_fails(
    transaction_service, account_service, sample_account, make_input, owner, monkeypatch
):
    txn = transaction_service.create_transaction(
        make_input(amount=Decimal("200.00"), account_id=sample_account.id)
    )

    def failing_delta(self, session, account_id, owner, delta):
        raise RuntimeError("disk full")

    monkeypatch.setattr(SQLAlchemyDatabase, "_apply_balance_delta", failing_delta)

    with pytest.raises(AtomicWriteFailure):
        transaction_service.delete_transaction(txn.id, owner)

    assert transaction_service.get_transaction(txn.id, owner).id == txn.id
    assert balance_of(account_service, sample_account, owner) == Decimal("800.00")


def test_other_owner_cannot_see_or_change_transaction(
    transaction_service, make_input, owner, other_owner, category_service
):
    """Transactions of another owner behave as if they did not exist."""
    txn = transaction_service.create_transaction(make_input())
    other_food = category_service.get_category_by_name(other_owner, "Food")

    with pytest.raises(NotFoundError):
        transaction_service.get_transaction(txn.id, other_owner)
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(txn.id, other_owner)
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(
            txn.id, make_input(owner=other_owner, category_id=other_food.id), other_owner
        )
    assert transaction_service.list_transactions(other_owner) == []


def test_create_against_foreign_account_is_rejected(
    transaction_service, account_service, make_input, owner, other_owner
):
    foreign = account_service.create_account(
        owner=other_owner, name="Theirs", balance=Decimal("100.00")
    )

    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(make_input(account_id=foreign.id))

    assert balance_of(account_service, foreign, other_owner) == Decimal("100.00")


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": Decimal("0")},
        {"amount": Decimal("-5.00")},
        {"amount": 12.5},
        {"description": "   "},
        {"date": "2024-03-10"},
        {"transaction_type": "transfer"},
        {"status": "reversed"},
    ],
)
def test_create_rejects_malformed_input(transaction_service, make_input, owner, overrides):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(make_input(**overrides))
    assert transaction_service.list_transactions(owner) == []


def test_create_rejects_unknown_category(transaction_service, make_input):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(make_input(category_id=9999))


def test_category_type_enforcement_is_opt_in(temp_db, make_input, categories):
    """Category type mismatches are allowed unless enforcement is switched on."""
    mismatched = make_input(category_id=categories["Salary"].id)

    TransactionService(temp_db).create_transaction(mismatched)
    with pytest.raises(ValidationError):
        TransactionService(temp_db, enforce_category_type=True).create_transaction(mismatched)


def test_list_transactions_newest_first_with_filters(
    transaction_service, make_input, owner, categories
):
    transaction_service.create_transaction(
        make_input(description="Whole Foods", amount=Decimal("54.20"), date=date(2024, 3, 10))
    )
    transaction_service.create_transaction(
        make_input(
            description="Payroll",
            amount=Decimal("2500.00"),
            date=date(2024, 3, 1),
            transaction_type=TransactionType.INCOME,
        )
    )
    transaction_service.create_transaction(
        make_input(
            description="Uber ride",
            amount=Decimal("18.00"),
            date=date(2024, 2, 20),
            category_id=categories["Transportation"].id,
            status=TransactionStatus.PENDING,
        )
    )

    everything = transaction_service.list_transactions(owner)
    assert [t.description for t in everything] == ["Whole Foods", "Payroll", "Uber ride"]

    def descriptions(**kwargs):
        return [t.description for t in transaction_service.list_transactions(owner, TransactionFilters(**kwargs))]

    assert descriptions(search="whole") == ["Whole Foods"]
    assert descriptions(transaction_type=TransactionType.INCOME) == ["Payroll"]
    assert descriptions(category_id=categories["Transportation"].id) == ["Uber ride"]
    assert descriptions(min_amount=Decimal("20"), max_amount=Decimal("100")) == ["Whole Foods"]
    assert descriptions(status=TransactionStatus.PENDING) == ["Uber ride"]
    assert descriptions(
        date_range="custom", start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)
    ) == ["Whole Foods", "Payroll"]
    assert descriptions(start_date=date(2024, 3, 5)) == ["Whole Foods"]


def test_list_transactions_named_range(transaction_service, make_input, owner):
    today = date.today()
    transaction_service.create_transaction(make_input(description="Recent", date=today))
    transaction_service.create_transaction(
        make_input(description="Old", date=today - timedelta(days=800))
    )

    result = transaction_service.list_transactions(
        owner, TransactionFilters(date_range="this-year")
    )

    assert [t.description for t in result] == ["Recent"]


def test_list_transactions_unknown_range(transaction_service, owner):
    with pytest.raises(ValidationError, match="Unknown date range"):
        transaction_service.list_transactions(owner, TransactionFilters(date_range="fortnight"))


def test_list_recent_transactions_uses_window_and_limit(transaction_service, make_input, owner):
    for day in (10, 9, 5, 1):
        transaction_service.create_transaction(
            make_input(description=f"March {day}", date=date(2024, 3, day))
        )
    today = date(2024, 3, 10)

    recent = transaction_service.list_recent_transactions(owner, "week", limit=2, today=today)
    assert [t.description for t in recent] == ["March 10", "March 9"]

    week = transaction_service.list_recent_transactions(owner, "week", limit=10, today=today)
    assert [t.description for t in week] == ["March 10", "March 9", "March 5"]

    default = transaction_service.list_recent_transactions(owner, limit=10, today=today)
    assert len(default) == 4


def test_transaction_stats(transaction_service, make_input, owner, categories):
    today = date(2024, 3, 10)
    transaction_service.create_transaction(
        make_input(amount=Decimal("40.00"), date=date(2024, 3, 2))
    )
    transaction_service.create_transaction(
        make_input(
            amount=Decimal("60.00"),
            date=date(2024, 3, 3),
            category_id=categories["Utilities"].id,
        )
    )
    transaction_service.create_transaction(
        make_input(
            amount=Decimal("1000.00"),
            date=date(2024, 3, 1),
            transaction_type=TransactionType.INCOME,
        )
    )
    transaction_service.create_transaction(
        make_input(amount=Decimal("999.00"), date=date(2023, 12, 1))
    )

    stats = transaction_service.get_transaction_stats(owner, "month", today=today)

    assert stats.income == Decimal("1000.00")
    assert stats.expenses == Decimal("100.00")
    assert stats.savings == Decimal("900.00")
    assert stats.expenses_by_category == {
        categories["Food"].id: Decimal("40.00"),
        categories["Utilities"].id: Decimal("60.00"),
    }


@pytest.mark.parametrize("amount", [Decimal("0.004"), Decimal("10.005")])
def test_create_rejects_fractions_of_a_cent(
    transaction_service, account_service, sample_account, make_input, owner, amount
):
    """Amounts the ledger cannot store exactly are refused instead of rounded away."""
    with pytest.raises(ValidationError, match="two decimal places"):
        transaction_service.create_transaction(
            make_input(
                amount=amount,
                transaction_type=TransactionType.INCOME,
                account_id=sample_account.id,
            )
        )

    assert transaction_service.list_transactions(owner) == []
    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00")


def test_balance_matches_stored_amounts(
    transaction_service, account_service, sample_account, make_input, owner
):
    for amount in (Decimal("0.01"), Decimal("54.200"), Decimal("3.5")):
        transaction_service.create_transaction(
            make_input(
                amount=amount,
                transaction_type=TransactionType.INCOME,
                account_id=sample_account.id,
            )
        )

    stored = sum(t.amount for t in transaction_service.list_transactions(owner))
    assert stored == Decimal("57.71")
    assert balance_of(account_service, sample_account, owner) == Decimal("1000.00") + stored


def test_single_explicit_bound_narrows_named_range(transaction_service, make_input, owner):
    today = date.today()
    transaction_service.create_transaction(
        make_input(description="New year", date=today.replace(month=1, day=1))
    )
    transaction_service.create_transaction(make_input(description="Today", date=today))
    if today.month == 1 and today.day == 1:
        pytest.skip("both transactions fall on the same day")

    result = transaction_service.list_transactions(
        owner, TransactionFilters(date_range="this-year", start_date=today)
    )

    assert [t.description for t in result] == ["Today"]


def test_search_treats_wildcards_literally(transaction_service, make_input, owner):
    transaction_service.create_transaction(make_input(description="100% cotton shirt"))
    transaction_service.create_transaction(make_input(description="1000 cotton balls"))
    transaction_service.create_transaction(make_input(description="gift_card"))
    transaction_service.create_transaction(make_input(description="giftXcard"))

    def search(text):
        return [
            t.description
            for t in transaction_service.list_transactions(owner, TransactionFilters(search=text))
        ]

    assert search("100%") == ["100% cotton shirt"]
    assert search("gift_") == ["gift_card"]
