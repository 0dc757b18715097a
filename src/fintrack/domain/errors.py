"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or belongs to another owner."""


class ConflictError(DomainError):
    """Operation would violate a structural invariant."""


class OwnerMismatchError(DomainError):
    """Payload owner differs from the authenticated owner."""


class ParseError(DomainError):
    """Statement content cannot be read as delimited text."""


class RowProcessingError(DomainError):
    """A single statement row could not be turned into a transaction."""


class AtomicWriteFailure(RuntimeError):
    """A paired transaction/balance write was rolled back."""


class ImportFailure(RuntimeError):
    """An import aborted before its rows could be processed."""


_STATUS_CODES = (
    (NotFoundError, 404),
    (OwnerMismatchError, 403),
    (ConflictError, 409),
    (ValidationError, 400),
    (ParseError, 400),
    (RowProcessingError, 400),
)


def http_status_for(error: BaseException) -> int:
    """Return the transport status code for an error raised by the core."""
    for error_type, status in _STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def import_not_found(import_id: int) -> str:
    """Return message for missing import record."""
    return f"Import {import_id} not found"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account has dependent transactions."""
    return (
        f"Cannot delete account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


def category_delete_blocked(category_id: int, transaction_count: int) -> str:
    """Return message when category is still referenced by transactions."""
    return (
        f"Cannot delete category {category_id}: it is used by {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}."
    )
