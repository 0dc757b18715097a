"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from fintrack.database.models import (
    Account as ORMAccount,
    Import as ORMImport,
    Transaction as ORMTransaction,
)
from fintrack.database.mappers import (
    account_to_domain,
    import_to_domain,
    transaction_to_domain,
)
from fintrack.domain.entities import (
    AccountType,
    ImportMetadata,
    ImportStatus,
    ImportType,
    TransactionStatus,
    TransactionType,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Balances come back as two-place Decimals."""
        orm_account = ORMAccount(
            id=1, name="Checking", account_type="checking", balance=1000.5, owner="u1"
        )

        account = account_to_domain(orm_account)

        assert account.account_type is AccountType.CHECKING
        assert account.balance == Decimal("1000.50")
        assert str(account.balance) == "1000.50"


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        orm_txn = ORMTransaction(
            id=7,
            description="Rent",
            amount=Decimal("950"),
            date=date(2024, 3, 1),
            transaction_type="expense",
            category_id=5,
            account_id=None,
            notes=None,
            receipt_url=None,
            status="pending",
            owner="u1",
        )

        txn = transaction_to_domain(orm_txn)

        assert txn.amount == Decimal("950.00")
        assert txn.transaction_type is TransactionType.EXPENSE
        assert txn.status is TransactionStatus.PENDING
        assert txn.signed_amount == Decimal("-950.00")


class TestImportMapper:
    """Tests for Import mapper and metadata serialization."""

    def test_import_to_domain(self):
        orm_import = ORMImport(
            id=3,
            filename="march.csv",
            filesize=120,
            import_type="credit_card",
            date_imported=datetime(2024, 3, 15, 12, 0, tzinfo=UTC),
            transaction_count=2,
            status="completed_with_errors",
            owner="u1",
            metadata_={
                "institution": "amex",
                "transaction_ids": [4, 5],
                "errors": ["Error processing transaction: X: bad date"],
                "duplicates_skipped": 1,
            },
        )

        record = import_to_domain(orm_import)

        assert record.import_type is ImportType.CREDIT_CARD
        assert record.status is ImportStatus.COMPLETED_WITH_ERRORS
        assert record.metadata == ImportMetadata(
            institution="amex",
            transaction_ids=(4, 5),
            errors=("Error processing transaction: X: bad date",),
            duplicates_skipped=1,
        )

    def test_metadata_to_dict_omits_unset_fields(self):
        data = ImportMetadata(transaction_ids=(1,), error="boom").to_dict()

        assert data == {
            "transaction_ids": [1],
            "errors": [],
            "duplicates_skipped": 0,
            "error": "boom",
        }

    @pytest.mark.parametrize("stored", [None, {}])
    def test_metadata_from_empty(self, stored):
        assert ImportMetadata.from_dict(stored) == ImportMetadata()


@pytest.mark.parametrize(
    "status,terminal",
    [
        (ImportStatus.PROCESSING, False),
        (ImportStatus.COMPLETED, True),
        (ImportStatus.COMPLETED_WITH_ERRORS, True),
        (ImportStatus.FAILED, True),
    ],
)
def test_import_status_terminal(status, terminal):
    assert status.is_terminal is terminal
