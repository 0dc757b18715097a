"""Account domain service."""

from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Account, AccountType
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
)


class AccountService:
    """Service for managing accounts.

    Balances are set once at creation; afterwards only transaction writes
    change them.
    """

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate(self, name: str, account_type: AccountType | str) -> AccountType:
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        try:
            return AccountType(account_type)
        except ValueError:
            valid = ", ".join(t.value for t in AccountType)
            raise ValidationError(f"Invalid account type '{account_type}'. Valid types: {valid}")

    def create_account(
        self,
        owner: str,
        name: str,
        account_type: AccountType | str = AccountType.CHECKING,
        balance: Decimal = Decimal("0"),
    ) -> Account:
        """Create a new account.

        Args:
            owner: Owner uid
            name: Account name
            account_type: One of checking, savings, credit_card, cash, bank
            balance: Initial balance

        Returns:
            The created account

        Raises:
            ValidationError: If name or type is invalid
        """
        account_type = self._validate(name, account_type)
        return self.db.create_account(
            owner=owner, name=name.strip(), account_type=account_type, balance=balance
        )

    def get_account(self, account_id: int, owner: str) -> Optional[Account]:
        """Get account by ID, or None if not found."""
        return self.db.get_account(account_id, owner)

    def require_account(self, account_id: int, owner: str) -> Account:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id, owner)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, owner: str) -> list[Account]:
        """List all accounts of an owner."""
        return self.db.list_accounts(owner)

    def update_account(
        self, account_id: int, owner: str, name: str, account_type: AccountType | str
    ) -> Account:
        """Update account name and type.

        Raises:
            ValidationError: If name or type is invalid
            NotFoundError: If the account does not exist for the owner
        """
        account_type = self._validate(name, account_type)
        self.require_account(account_id, owner)
        return self.db.update_account(account_id, owner, name.strip(), account_type)

    def delete_account(self, account_id: int, owner: str) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If the account does not exist for the owner
            ConflictError: If any transaction references the account
        """
        self.require_account(account_id, owner)

        transaction_count = self.db.get_account_transaction_count(account_id, owner)
        if transaction_count > 0:
            raise ConflictError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_account(account_id, owner)

    def get_total_balance(self, owner: str) -> Decimal:
        """Sum of all account balances of an owner."""
        return self.db.get_total_balance(owner)
