"""Statement import domain service."""

import logging
from dataclasses import replace
from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

from fintrack.database.base import Database
from fintrack.domain.categorizer import CategoryClassifier
from fintrack.domain.dedupe import find_same_day_transactions, is_duplicate
from fintrack.domain.entities import (
    Import,
    ImportMetadata,
    ImportRequest,
    ImportResult,
    ImportStatus,
    ParsedRow,
    TransactionInput,
)
from fintrack.domain.errors import (
    AtomicWriteFailure,
    DomainError,
    ImportFailure,
    NotFoundError,
    RowProcessingError,
    ValidationError,
    account_not_found,
    import_not_found,
)
from fintrack.domain.statement_parser import Institution, StatementParser
from fintrack.domain.transaction import TransactionService
from fintrack.utils.fetcher import fetch_statement

logger = logging.getLogger(__name__)


def _filename_for(source: str) -> str:
    path = urlparse(source).path or source
    return PurePosixPath(path).name or source


class StatementImportService:
    """Service for importing bank and credit card statements.

    Rows are processed one at a time in file order. A row that fails is
    recorded and skipped; only a failure to fetch or read the file as a
    whole marks the import as failed.
    """

    def __init__(
        self,
        db: Database,
        fetcher: Callable[[str], str] = fetch_statement,
        transaction_service: Optional[TransactionService] = None,
    ):
        """Initialize statement import service.

        Args:
            db: Database instance
            fetcher: Callable returning the text content for a source location
            transaction_service: Service used to persist rows
        """
        self.db = db
        self.fetcher = fetcher
        self.transaction_service = transaction_service or TransactionService(db)

    def process_import(self, owner: str, request: ImportRequest) -> ImportResult:
        """Import a statement for an owner.

        Args:
            owner: Authenticated owner uid
            request: Source location, statement type and institution hint

        Returns:
            ImportResult with the import id and row counts

        Raises:
            ValidationError: If the request is malformed
            NotFoundError: If the target account does not exist for the owner
            ImportFailure: If the file could not be fetched or parsed
        """
        if not request.source:
            raise ValidationError("Import source is required")
        if request.account_id is not None and self.db.get_account(request.account_id, owner) is None:
            raise NotFoundError(account_not_found(request.account_id))

        institution = Institution.from_hint(request.institution)
        metadata = ImportMetadata(institution=institution.value, account_id=request.account_id)
        record = self.db.create_import(
            owner=owner,
            filename=request.filename or _filename_for(request.source),
            import_type=request.import_type,
            filesize=request.filesize,
            metadata=metadata,
        )
        logger.info(
            "import %s started for %s (%s, %s)",
            record.id,
            owner,
            record.import_type.value,
            institution.value,
        )

        transaction_ids: list[int] = []
        errors: list[str] = []
        duplicates_skipped = 0

        try:
            content = self.fetcher(request.source)
            parser = StatementParser(request.import_type, request.institution)
            classifier = CategoryClassifier.for_categories(self.db.list_categories(owner))

            for row in parser.parse(content):
                try:
                    if self._process_row(owner, request, row, classifier, transaction_ids):
                        continue
                    duplicates_skipped += 1
                except (DomainError, AtomicWriteFailure) as e:
                    message = f"Error processing transaction: {row.description}: {e}"
                    logger.warning("import %s row %d: %s", record.id, row.row_num, e)
                    errors.append(message)
        except Exception as e:
            logger.exception("import %s failed", record.id)
            self.db.finish_import(
                record.id,
                owner,
                ImportStatus.FAILED,
                transaction_count=len(transaction_ids),
                metadata=replace(
                    metadata,
                    transaction_ids=tuple(transaction_ids),
                    errors=tuple(errors),
                    duplicates_skipped=duplicates_skipped,
                    error=str(e),
                ),
            )
            raise ImportFailure(f"Failed to process import: {e}") from e

        status = ImportStatus.COMPLETED_WITH_ERRORS if errors else ImportStatus.COMPLETED
        self.db.finish_import(
            record.id,
            owner,
            status,
            transaction_count=len(transaction_ids),
            metadata=replace(
                metadata,
                transaction_ids=tuple(transaction_ids),
                errors=tuple(errors),
                duplicates_skipped=duplicates_skipped,
            ),
        )
        logger.info(
            "import %s %s: %d imported, %d duplicates, %d errors",
            record.id,
            status.value,
            len(transaction_ids),
            duplicates_skipped,
            len(errors),
        )

        return ImportResult(
            import_id=record.id,
            transactions_imported=len(transaction_ids),
            duplicates_skipped=duplicates_skipped,
            errors=tuple(errors),
        )

    def _process_row(
        self,
        owner: str,
        request: ImportRequest,
        row: ParsedRow,
        classifier: CategoryClassifier,
        transaction_ids: list[int],
    ) -> bool:
        """Persist one parsed row.

        Returns:
            True if a transaction was created, False if the row was a duplicate

        Raises:
            DomainError: If the row cannot be imported
        """
        if row.error is not None:
            raise RowProcessingError(row.error)
        candidate = row.transaction

        category_id = candidate.category_id
        if category_id is None:
            category_id = classifier.classify(candidate.description)
        if category_id is None:
            raise RowProcessingError("No category available")

        existing = find_same_day_transactions(self.db, owner, candidate)
        if is_duplicate(candidate, existing):
            logger.debug("row %d duplicates an existing transaction", row.row_num)
            return False

        transaction = self.transaction_service.create_transaction(
            TransactionInput(
                description=candidate.description,
                amount=candidate.amount,
                date=candidate.date,
                transaction_type=candidate.transaction_type,
                category_id=category_id,
                owner=owner,
                account_id=request.account_id,
                notes=candidate.notes,
                status=candidate.status,
            )
        )
        transaction_ids.append(transaction.id)
        return True

    def list_imports(self, owner: str) -> list[Import]:
        """List an owner's imports, newest first."""
        return self.db.list_imports(owner)

    def get_import(self, import_id: int, owner: str) -> Import:
        """Get an import record.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        record = self.db.get_import(import_id, owner)
        if record is None:
            raise NotFoundError(import_not_found(import_id))
        return record

    def delete_import(self, import_id: int, owner: str) -> int:
        """Delete an import along with the transactions it created.

        Returns:
            Number of transactions removed
        """
        removed = self.db.delete_import(import_id, owner)
        logger.info("deleted import %s and %d transactions for %s", import_id, removed, owner)
        return removed
