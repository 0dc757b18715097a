"""Transaction domain service."""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import (
    Transaction,
    TransactionFilters,
    TransactionInput,
    TransactionStats,
    TransactionStatus,
    TransactionType,
)
from fintrack.domain.errors import (
    NotFoundError,
    OwnerMismatchError,
    ValidationError,
    category_not_found,
    transaction_not_found,
)
from fintrack.utils.amount_parser import to_cents
from fintrack.utils.date_parser import relative_window, resolve_date_range

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions.

    All balance bookkeeping happens in the database layer inside one atomic
    unit; this service validates input before anything is written.
    """

    def __init__(self, db: Database, enforce_category_type: bool = False):
        """Initialize transaction service.

        Args:
            db: Database instance
            enforce_category_type: If True, reject transactions whose category
                type differs from the transaction type
        """
        self.db = db
        self.enforce_category_type = enforce_category_type

    def validate_input(self, data: TransactionInput) -> TransactionInput:
        """Check the shape of a transaction payload and normalize enums.

        Returns:
            The payload with enum fields coerced to their enum types

        Raises:
            ValidationError: If any field is malformed
            NotFoundError: If the category does not exist for the owner
        """
        if not data.owner:
            raise ValidationError("Transaction owner is required")
        if not data.description or not data.description.strip():
            raise ValidationError("Transaction description is required")
        if not isinstance(data.amount, Decimal):
            raise ValidationError(f"Transaction amount must be a Decimal, got {data.amount!r}")
        if not data.amount.is_finite() or data.amount <= 0:
            raise ValidationError(f"Transaction amount must be positive, got {data.amount}")
        if data.amount != to_cents(data.amount):
            raise ValidationError(
                f"Transaction amount must have at most two decimal places, got {data.amount}"
            )
        if not isinstance(data.date, date):
            raise ValidationError(f"Transaction date must be a date, got {data.date!r}")

        try:
            transaction_type = TransactionType(data.transaction_type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type '{data.transaction_type}'")
        try:
            status = TransactionStatus(data.status)
        except ValueError:
            raise ValidationError(f"Invalid transaction status '{data.status}'")

        category = self.db.get_category(data.category_id, data.owner)
        if category is None:
            raise NotFoundError(category_not_found(data.category_id))
        if self.enforce_category_type and category.category_type is not transaction_type:
            raise ValidationError(
                f"Category '{category.name}' is for {category.category_type.value} "
                f"transactions, not {transaction_type.value}"
            )

        return TransactionInput(
            description=data.description.strip(),
            amount=to_cents(data.amount),
            date=data.date,
            transaction_type=transaction_type,
            category_id=data.category_id,
            owner=data.owner,
            account_id=data.account_id,
            notes=data.notes,
            receipt_url=data.receipt_url,
            status=status,
        )

    def create_transaction(self, data: TransactionInput) -> Transaction:
        """Create a transaction and apply it to its account balance.

        Args:
            data: Full transaction payload, including the owner

        Returns:
            The persisted transaction with its assigned ID

        Raises:
            ValidationError: If the payload is malformed
            NotFoundError: If the category or account does not exist for the owner
            AtomicWriteFailure: If the paired write could not commit
        """
        data = self.validate_input(data)
        transaction = self.db.create_transaction(data)
        logger.debug(
            "created transaction %s (%s %s) for %s",
            transaction.id,
            transaction.transaction_type.value,
            transaction.amount,
            transaction.owner,
        )
        return transaction

    def get_transaction(self, transaction_id: int, owner: str) -> Transaction:
        """Get transaction by ID.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        transaction = self.db.get_transaction(transaction_id, owner)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def update_transaction(
        self, transaction_id: int, data: TransactionInput, owner: str
    ) -> Transaction:
        """Replace every field of a transaction.

        If amount, type or account changed, the old balance effect is
        reversed on the old account and the new effect applied to the new
        account in the same unit as the row update.

        Raises:
            OwnerMismatchError: If the payload names a different owner
            ValidationError: If the payload is malformed
            NotFoundError: If the transaction, category or account is missing
        """
        if data.owner != owner:
            raise OwnerMismatchError("Transaction owner does not match the requesting user")
        data = self.validate_input(data)
        transaction = self.db.update_transaction(transaction_id, data, owner)
        logger.debug("updated transaction %s for %s", transaction_id, owner)
        return transaction

    def delete_transaction(self, transaction_id: int, owner: str) -> None:
        """Delete a transaction and reverse its balance effect.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        self.db.delete_transaction(transaction_id, owner)
        logger.debug("deleted transaction %s for %s", transaction_id, owner)

    def list_transactions(
        self, owner: str, filters: Optional[TransactionFilters] = None
    ) -> list[Transaction]:
        """List an owner's transactions newest first.

        Raises:
            ValidationError: If the named date range is unknown
        """
        filters = filters or TransactionFilters()
        try:
            start_date, end_date = resolve_date_range(
                filters.date_range, filters.start_date, filters.end_date
            )
        except ValueError as e:
            raise ValidationError(str(e))

        return self.db.list_transactions(
            owner,
            start_date=start_date,
            end_date=end_date,
            search=filters.search,
            category_id=filters.category_id,
            transaction_type=filters.transaction_type,
            min_amount=filters.min_amount,
            max_amount=filters.max_amount,
            status=filters.status,
        )

    def list_recent_transactions(
        self,
        owner: str,
        time_range: Optional[str] = None,
        limit: int = 5,
        today: Optional[date] = None,
    ) -> list[Transaction]:
        """List the newest transactions within a relative window.

        Args:
            owner: Owner uid
            time_range: "week", "month" or "year"; anything else means 30 days
            limit: Maximum number of transactions
            today: Reference day, defaults to the current date
        """
        start, end = relative_window(time_range, today)
        return self.db.list_transactions(
            owner,
            start_date=start,
            end_date=end - timedelta(days=1),
            limit=limit,
        )

    def get_transaction_stats(
        self, owner: str, time_range: Optional[str] = None, today: Optional[date] = None
    ) -> TransactionStats:
        """Summarize income, expenses and expenses per category for a window."""
        start, end = relative_window(time_range, today)
        transactions = self.db.list_transactions(
            owner, start_date=start, end_date=end - timedelta(days=1)
        )

        income = Decimal("0")
        expenses = Decimal("0")
        by_category: dict[int, Decimal] = defaultdict(lambda: Decimal("0"))
        for txn in transactions:
            if txn.transaction_type is TransactionType.INCOME:
                income += txn.amount
            else:
                expenses += txn.amount
                by_category[txn.category_id] += txn.amount

        return TransactionStats(
            income=income,
            expenses=expenses,
            savings=income - expenses,
            expenses_by_category=dict(by_category),
        )
