"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest
from click.testing import CliRunner

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.dashboard import DashboardService
from fintrack.domain.entities import TransactionInput, TransactionType
from fintrack.domain.statement_import import StatementImportService
from fintrack.domain.transaction import TransactionService
from fintrack.domain.user import UserService

OWNER = "user-1"
OTHER_OWNER = "user-2"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner(temp_db):
    """Register the main test owner with default categories."""
    UserService(temp_db).ensure_user(OWNER)
    return OWNER


@pytest.fixture
def other_owner(temp_db):
    """Register a second owner for isolation tests."""
    UserService(temp_db).ensure_user(OTHER_OWNER)
    return OTHER_OWNER


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def dashboard_service(temp_db):
    """Create a DashboardService with a temporary database."""
    return DashboardService(temp_db)


@pytest.fixture
def categories(owner, category_service):
    """Default categories of the main owner, by name."""
    return {cat.name: cat for cat in category_service.list_categories(owner)}


@pytest.fixture
def sample_account(owner, account_service):
    """Create a checking account holding 1000.00."""
    return account_service.create_account(
        owner=owner, name="Checking", balance=Decimal("1000.00")
    )


@pytest.fixture
def make_input(owner, categories):
    """Build TransactionInput values with sensible defaults."""

    def _make(**overrides):
        transaction_type = overrides.pop("transaction_type", TransactionType.EXPENSE)
        default_category = "Salary" if transaction_type is TransactionType.INCOME else "Food"
        values = {
            "description": "Groceries",
            "amount": Decimal("50.00"),
            "date": date(2024, 3, 10),
            "transaction_type": transaction_type,
            "category_id": categories[default_category].id,
            "owner": owner,
        }
        values.update(overrides)
        return TransactionInput(**values)

    return _make


@pytest.fixture
def fake_fetcher():
    """A fetcher serving statement text from an in-memory dict."""
    contents = {}

    def _fetch(source):
        if source not in contents:
            raise FileNotFoundError(source)
        return contents[source]

    _fetch.contents = contents
    return _fetch


@pytest.fixture
def import_service(temp_db, fake_fetcher):
    """Create a StatementImportService reading from the fake fetcher."""
    return StatementImportService(temp_db, fetcher=fake_fetcher)


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()
