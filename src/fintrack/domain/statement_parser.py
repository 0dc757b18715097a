"""Statement parsing: delimited bank and card exports to candidate transactions.

Each institution exports different column names and encodes direction
differently, so every supported institution gets a StatementFormat subclass.
Unknown institutions fall back to a generic format for the statement type.
"""

import csv
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

from fintrack.domain.categorizer import CategoryClassifier
from fintrack.domain.entities import (
    ImportType,
    ParsedRow,
    ParsedTransaction,
    TransactionStatus,
    TransactionType,
)
from fintrack.domain.errors import ParseError, RowProcessingError
from fintrack.utils.amount_parser import parse_statement_amount, to_cents
from fintrack.utils.date_parser import parse_statement_date

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown transaction"
SNIFF_DELIMITERS = ",;\t|"
SNIFF_SAMPLE_SIZE = 1024


class Institution(str, Enum):
    CHASE = "chase"
    BANK_OF_AMERICA = "bank-of-america"
    AMEX = "amex"
    VISA = "visa"
    MASTERCARD = "mastercard"
    OTHER = "other"

    @classmethod
    def from_hint(cls, hint: Optional[str]) -> "Institution":
        """Normalize a free-form hint; anything unrecognized is OTHER."""
        if not hint:
            return cls.OTHER
        normalized = hint.strip().lower().replace("_", "-").replace(" ", "-")
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


def first_value(record: dict, columns: tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty value among candidate columns."""
    for column in columns:
        value = record.get(column)
        if value is not None and value.strip():
            return value.strip()
    return None


class StatementFormat(ABC):
    """Column layout and direction rules for one kind of statement.

    Subclasses override the candidate column tuples and must implement
    direction().
    """

    label = "statement"
    description_columns: tuple[str, ...] = ("Description", "Payee", "Merchant")
    amount_columns: tuple[str, ...] = ("Amount", "Sum")
    date_columns: tuple[str, ...] = ("Date", "Transaction Date", "TransactionDate")
    detail_column: Optional[str] = None

    def description(self, record: dict) -> str:
        return first_value(record, self.description_columns) or UNKNOWN_DESCRIPTION

    def raw_amount(self, record: dict) -> Decimal:
        """Signed amount as written in the statement."""
        raw = first_value(record, self.amount_columns)
        amount = parse_statement_amount(raw)
        if amount is None:
            raise RowProcessingError(f"Missing or invalid amount {raw!r}")
        return amount

    @abstractmethod
    def direction(self, record: dict, raw_amount: Decimal) -> TransactionType:
        """Decide income or expense from the record and its signed amount."""

    def notes(self, record: dict) -> str:
        if self.detail_column is None:
            return f"Imported from {self.label}"
        detail = (record.get(self.detail_column) or "").strip()
        return f"Imported from {self.label} - {detail}"

    def parse_record(self, record: dict) -> ParsedTransaction:
        """Convert one statement record into a candidate transaction.

        Raises:
            RowProcessingError: If the amount or date cannot be read
        """
        raw_amount = self.raw_amount(record)

        raw_date = first_value(record, self.date_columns)
        txn_date = parse_statement_date(raw_date)
        if txn_date is None:
            raise RowProcessingError(f"Missing or invalid date {raw_date!r}")

        return ParsedTransaction(
            description=self.description(record),
            amount=to_cents(abs(raw_amount)),
            date=txn_date,
            transaction_type=self.direction(record, raw_amount),
            notes=self.notes(record),
            status=TransactionStatus.COMPLETED,
        )


class ChaseFormat(StatementFormat):
    label = "Chase"
    description_columns = ("Description", "Merchant")
    amount_columns = ("Amount",)
    date_columns = ("Date", "Transaction Date")
    detail_column = "Category"

    def direction(self, record: dict, raw_amount: Decimal) -> TransactionType:
        if (record.get("Type") or "").strip() == "Credit":
            return TransactionType.INCOME
        return TransactionType.EXPENSE


class BankOfAmericaFormat(StatementFormat):
    label = "Bank of America"
    description_columns = ("Description", "Payee")
    amount_columns = ("Amount",)
    date_columns = ("Date", "Transaction Date")
    detail_column = "Type"

    def direction(self, record: dict, raw_amount: Decimal) -> TransactionType:
        return TransactionType.INCOME if raw_amount > 0 else TransactionType.EXPENSE


class GenericBankFormat(StatementFormat):
    """Fallback for bank statements from unrecognized institutions."""

    label = "bank statement"

    def raw_amount(self, record: dict) -> Decimal:
        if first_value(record, self.amount_columns) is not None:
            return super().raw_amount(record)

        # Some exports split money in and out into separate columns
        credit = parse_statement_amount(first_value(record, ("Credit",)))
        if credit is not None and credit != 0:
            return abs(credit)
        debit = parse_statement_amount(first_value(record, ("Debit",)))
        if debit is not None and debit != 0:
            return -abs(debit)
        raise RowProcessingError("Missing amount")

    def direction(self, record: dict, raw_amount: Decimal) -> TransactionType:
        kind = (record.get("Type") or "").lower()
        if "credit" in kind or "deposit" in kind:
            return TransactionType.INCOME
        if "debit" in kind or "withdrawal" in kind:
            return TransactionType.EXPENSE
        return TransactionType.INCOME if raw_amount >= 0 else TransactionType.EXPENSE


class CardFormat(StatementFormat):
    """Credit card statements list charges, so every row is an expense."""

    def direction(self, record: dict, raw_amount: Decimal) -> TransactionType:
        return TransactionType.EXPENSE


class AmexFormat(CardFormat):
    label = "American Express"
    description_columns = ("Description", "Merchant")
    amount_columns = ("Amount",)
    date_columns = ("Date",)
    detail_column = "Category"


class VisaFormat(CardFormat):
    label = "visa"
    description_columns = ("Description", "Merchant")
    amount_columns = ("Amount",)
    date_columns = ("Date", "Transaction Date")
    detail_column = "Category"


class MastercardFormat(VisaFormat):
    label = "mastercard"


class GenericCardFormat(CardFormat):
    """Fallback for card statements from unrecognized issuers."""

    label = "credit card statement"


BANK_FORMATS: dict[Institution, StatementFormat] = {
    Institution.CHASE: ChaseFormat(),
    Institution.BANK_OF_AMERICA: BankOfAmericaFormat(),
}

CARD_FORMATS: dict[Institution, StatementFormat] = {
    Institution.AMEX: AmexFormat(),
    Institution.VISA: VisaFormat(),
    Institution.MASTERCARD: MastercardFormat(),
}


def get_statement_format(
    import_type: ImportType, institution: Optional[str]
) -> StatementFormat:
    """Pick the format for a statement type and institution hint."""
    institution = Institution.from_hint(institution)
    if ImportType(import_type) is ImportType.CREDIT_CARD:
        return CARD_FORMATS.get(institution, GenericCardFormat())
    return BANK_FORMATS.get(institution, GenericBankFormat())


def _detect_delimiter(content: str) -> str:
    sample = content[:SNIFF_SAMPLE_SIZE]
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


class StatementParser:
    """Reads statement text into ParsedRow results, one per data row."""

    def __init__(
        self,
        import_type: ImportType = ImportType.BANK_STATEMENT,
        institution: Optional[str] = None,
        classifier: Optional[CategoryClassifier] = None,
    ):
        """Initialize parser.

        Args:
            import_type: bank_statement or credit_card
            institution: Institution hint such as "chase" or "amex"
            classifier: Optional classifier used to suggest categories
        """
        self.import_type = ImportType(import_type)
        self.institution = Institution.from_hint(institution)
        self.statement_format = get_statement_format(self.import_type, institution)
        self.classifier = classifier

    def parse(self, content: str) -> Iterator[ParsedRow]:
        """Parse statement content.

        The header is read immediately; data rows are produced lazily.
        A row that cannot be converted yields a ParsedRow with an error
        instead of stopping the iteration.

        Raises:
            ParseError: If the content has no header row or is not valid
                delimited text
        """
        if content is None or not content.strip():
            raise ParseError("Statement is empty")
        content = content.lstrip("\ufeff")

        reader = csv.DictReader(io.StringIO(content), delimiter=_detect_delimiter(content))
        try:
            fieldnames = reader.fieldnames
        except csv.Error as e:
            raise ParseError(f"Could not read statement header: {e}")
        if not fieldnames:
            raise ParseError("Statement has no header row")
        reader.fieldnames = [name.strip() if name else name for name in fieldnames]

        logger.debug(
            "parsing %s statement (%s) with columns %s",
            self.import_type.value,
            self.institution.value,
            reader.fieldnames,
        )
        return self._iter_rows(reader)

    def _iter_rows(self, reader: csv.DictReader) -> Iterator[ParsedRow]:
        row_num = 1
        while True:
            try:
                record = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                raise ParseError(f"Malformed statement near line {reader.line_num}: {e}")

            row_num += 1
            yield self.parse_row(row_num, record)

    def parse_row(self, row_num: int, record: dict) -> ParsedRow:
        """Convert one raw record into a ParsedRow."""
        description = self.statement_format.description(record)

        if record.get(None):
            return ParsedRow(
                row_num=row_num,
                description=description,
                error=f"Row {row_num} has more fields than the header",
            )

        try:
            transaction = self.statement_format.parse_record(record)
        except RowProcessingError as e:
            logger.debug("row %d rejected: %s", row_num, e)
            return ParsedRow(row_num=row_num, description=description, error=str(e))

        if self.classifier is not None and transaction.category_id is None:
            transaction = replace(
                transaction, category_id=self.classifier.classify(transaction.description)
            )

        return ParsedRow(row_num=row_num, description=description, transaction=transaction)
