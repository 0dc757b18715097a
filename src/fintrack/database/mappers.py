"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so column renames or type changes
in the schema stay out of the services.
"""

from decimal import Decimal

from fintrack.domain import entities as domain
from fintrack.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Import as ORMImport,
    Transaction as ORMTransaction,
    User as ORMUser,
)

_CENT = Decimal("0.01")


def _money(value) -> Decimal:
    """Normalize a stored numeric to a two-place Decimal."""
    return Decimal(str(value if value is not None else 0)).quantize(_CENT)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        uid=orm_user.uid,
        username=orm_user.username,
        display_name=orm_user.display_name,
        email=orm_user.email,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        balance=_money(orm_account.balance),
        owner=orm_account.owner,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        category_type=domain.TransactionType(orm_category.category_type),
        icon=orm_category.icon,
        color=orm_category.color,
        owner=orm_category.owner,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        description=orm_transaction.description,
        amount=_money(orm_transaction.amount),
        date=orm_transaction.date,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        category_id=orm_transaction.category_id,
        account_id=orm_transaction.account_id,
        notes=orm_transaction.notes,
        receipt_url=orm_transaction.receipt_url,
        status=domain.TransactionStatus(orm_transaction.status),
        owner=orm_transaction.owner,
    )


def import_to_domain(orm_import: ORMImport) -> domain.Import:
    """Convert SQLAlchemy Import model to domain Import entity."""
    return domain.Import(
        id=orm_import.id,
        filename=orm_import.filename,
        filesize=orm_import.filesize,
        import_type=domain.ImportType(orm_import.import_type),
        date_imported=orm_import.date_imported,
        transaction_count=orm_import.transaction_count or 0,
        status=domain.ImportStatus(orm_import.status),
        owner=orm_import.owner,
        metadata=domain.ImportMetadata.from_dict(orm_import.metadata_),
    )
