"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from fintrack.domain.entities import (
    Account,
    AccountType,
    Category,
    Import,
    ImportMetadata,
    ImportStatus,
    ImportType,
    Transaction,
    TransactionInput,
    TransactionStatus,
    TransactionType,
    User,
)


class Database(ABC):
    """Abstract database interface for fintrack.

    Every owner-scoped operation takes the owner string and never reads or
    writes rows belonging to another owner; rows of other owners behave as
    if they did not exist.
    """

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
    def create_user(
        self,
        uid: str,
        username: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Create a user record."""
        pass

    @abstractmethod
    def get_user_by_uid(self, uid: str) -> Optional[User]:
        """Get user by owner uid."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, owner: str, name: str, account_type: AccountType, balance: Decimal = Decimal("0")
    ) -> Account:
        """Create a new account with its initial balance."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, owner: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner: str) -> list[Account]:
        """List all accounts of an owner."""
        pass

    @abstractmethod
    def update_account(
        self, account_id: int, owner: str, name: str, account_type: AccountType
    ) -> Account:
        """Update account name and type. The balance is never touched here."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int, owner: str) -> None:
        """Delete an account that no transaction references."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int, owner: str) -> int:
        """Count transactions referencing an account."""
        pass

    @abstractmethod
    def get_total_balance(self, owner: str) -> Decimal:
        """Sum of all account balances of an owner."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        owner: str,
        name: str,
        category_type: TransactionType,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Create a category."""
        pass

    @abstractmethod
    def get_category(self, category_id: int, owner: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, owner: str, category_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories, optionally filtered by type."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        owner: str,
        name: str,
        category_type: TransactionType,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Replace category fields."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int, owner: str) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def get_category_transaction_count(self, category_id: int, owner: str) -> int:
        """Count transactions filed under a category."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, data: TransactionInput) -> Transaction:
        """Insert a transaction and apply its balance effect as one atomic unit."""
        pass

    @abstractmethod
    def update_transaction(
        self, transaction_id: int, data: TransactionInput, owner: str
    ) -> Transaction:
        """Replace a transaction, moving its balance effect as one atomic unit."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int, owner: str) -> Transaction:
        """Delete a transaction and reverse its balance effect as one atomic unit.

        Returns the deleted transaction.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, owner: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        status: Optional[TransactionStatus] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions newest first.

        Args:
            owner: Owner uid
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            search: Case-insensitive substring of description or notes
            category_id: Optional category ID filter
            transaction_type: Optional income/expense filter
            min_amount: Optional inclusive lower amount bound
            max_amount: Optional inclusive upper amount bound
            status: Optional status filter
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def get_period_totals(
        self, owner: str, start_date: date, end_date: date
    ) -> dict[str, Decimal]:
        """Aggregate transactions dated within [start_date, end_date].

        Returns a dict with keys "income", "expenses" (both positive) and
        "account_change", the signed sum of transactions attached to an
        account.
        """
        pass

    # Import operations
    @abstractmethod
    def create_import(
        self,
        owner: str,
        filename: str,
        import_type: ImportType,
        filesize: Optional[int] = None,
        metadata: Optional[ImportMetadata] = None,
    ) -> Import:
        """Create an import record in processing state."""
        pass

    @abstractmethod
    def get_import(self, import_id: int, owner: str) -> Optional[Import]:
        """Get import by ID."""
        pass

    @abstractmethod
    def list_imports(self, owner: str) -> list[Import]:
        """List imports, newest first."""
        pass

    @abstractmethod
    def finish_import(
        self,
        import_id: int,
        owner: str,
        status: ImportStatus,
        transaction_count: int,
        metadata: ImportMetadata,
    ) -> Import:
        """Move a processing import into a terminal state.

        Raises ConflictError if the import already left the processing state.
        """
        pass

    @abstractmethod
    def delete_import(self, import_id: int, owner: str) -> int:
        """Delete an import and every transaction it created.

        Balance effects of the removed transactions are reversed in the same
        atomic unit. Returns the number of transactions removed.
        """
        pass
