"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. The database layer converts its ORM rows into these through
the mapper functions, so services never see SQLAlchemy objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a transaction. The amount itself is always positive."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    CASH = "cash"
    BANK = "bank"


class ImportType(str, Enum):
    BANK_STATEMENT = "bank_statement"
    CREDIT_CARD = "credit_card"


class ImportStatus(str, Enum):
    """Lifecycle of an import attempt.

    An import starts in PROCESSING and moves to exactly one of the other
    states, which are terminal.
    """

    PROCESSING = "processing"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ImportStatus.PROCESSING


@dataclass(frozen=True)
class User:
    """User domain entity. The uid is the opaque owner identifier."""

    id: int
    uid: str
    username: str
    display_name: Optional[str]
    email: Optional[str]


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    account_type: AccountType
    balance: Decimal
    owner: str


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    category_type: TransactionType
    icon: Optional[str]
    color: Optional[str]
    owner: str


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    description: str
    amount: Decimal
    date: date
    transaction_type: TransactionType
    category_id: int
    account_id: Optional[int]
    notes: Optional[str]
    receipt_url: Optional[str]
    status: TransactionStatus
    owner: str

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this transaction on its account balance."""
        return signed_delta(self.transaction_type, self.amount)


def signed_delta(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """Return +amount for income and -amount for expense."""
    if TransactionType(transaction_type) is TransactionType.INCOME:
        return amount
    return -amount


@dataclass(frozen=True)
class TransactionInput:
    """Full set of writable transaction fields.

    Updates replace every field, so callers send the complete record.
    """

    description: str
    amount: Decimal
    date: date
    transaction_type: TransactionType
    category_id: int
    owner: str
    account_id: Optional[int] = None
    notes: Optional[str] = None
    receipt_url: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED


@dataclass(frozen=True)
class TransactionFilters:
    """Optional filters for listing transactions.

    start_date and end_date are inclusive calendar days. When both are given
    they override date_range.
    """

    search: Optional[str] = None
    category_id: Optional[int] = None
    transaction_type: Optional[TransactionType] = None
    date_range: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    status: Optional[TransactionStatus] = None


@dataclass(frozen=True)
class ImportMetadata:
    """Structured metadata stored alongside an import record."""

    institution: Optional[str] = None
    account_id: Optional[int] = None
    transaction_ids: tuple[int, ...] = ()
    errors: tuple[str, ...] = ()
    duplicates_skipped: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        data: dict[str, Any] = {
            "transaction_ids": list(self.transaction_ids),
            "errors": list(self.errors),
            "duplicates_skipped": self.duplicates_skipped,
        }
        if self.institution is not None:
            data["institution"] = self.institution
        if self.account_id is not None:
            data["account_id"] = self.account_id
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ImportMetadata":
        """Build metadata from a stored dict, tolerating missing keys."""
        if not data:
            return cls()
        return cls(
            institution=data.get("institution"),
            account_id=data.get("account_id"),
            transaction_ids=tuple(data.get("transaction_ids") or ()),
            errors=tuple(data.get("errors") or ()),
            duplicates_skipped=int(data.get("duplicates_skipped") or 0),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class Import:
    """Import domain entity."""

    id: int
    filename: str
    filesize: Optional[int]
    import_type: ImportType
    date_imported: datetime
    transaction_count: int
    status: ImportStatus
    owner: str
    metadata: ImportMetadata = field(default_factory=ImportMetadata)


@dataclass(frozen=True)
class ImportRequest:
    """Everything the boundary layer supplies to start an import.

    source is the resolved location of the uploaded file: an http(s) URL,
    a file:// URL or a local path.
    """

    source: str
    import_type: ImportType
    institution: str = "other"
    filename: Optional[str] = None
    filesize: Optional[int] = None
    account_id: Optional[int] = None


@dataclass(frozen=True)
class ImportResult:
    """Summary returned from processing an import."""

    import_id: int
    transactions_imported: int
    duplicates_skipped: int
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedTransaction:
    """Candidate transaction produced from one statement row."""

    description: str
    amount: Decimal
    date: date
    transaction_type: TransactionType
    category_id: Optional[int] = None
    notes: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED


@dataclass(frozen=True)
class ParsedRow:
    """Outcome of parsing one statement row.

    Exactly one of transaction and error is set.
    """

    row_num: int
    description: str
    transaction: Optional[ParsedTransaction] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PeriodChange:
    """Percent change against the previous period for each dashboard figure."""

    balance: float
    income: float
    expenses: float
    savings: float


@dataclass(frozen=True)
class DashboardSummary:
    total_balance: Decimal
    income: Decimal
    expenses: Decimal
    savings: Decimal
    period_change: PeriodChange


@dataclass(frozen=True)
class TransactionStats:
    income: Decimal
    expenses: Decimal
    savings: Decimal
    expenses_by_category: dict[int, Decimal]
