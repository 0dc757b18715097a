"""Category domain service."""

import logging
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Category, TransactionType
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_not_found,
)

logger = logging.getLogger(__name__)

# (name, icon, color, type) created for every new owner
DEFAULT_CATEGORIES = [
    ("Salary", "briefcase", "#10b981", TransactionType.INCOME),
    ("Investments", "trending-up", "#10b981", TransactionType.INCOME),
    ("Freelance", "code", "#10b981", TransactionType.INCOME),
    ("Gifts", "gift", "#10b981", TransactionType.INCOME),
    ("Housing", "home", "#3b82f6", TransactionType.EXPENSE),
    ("Food", "utensils", "#f59e0b", TransactionType.EXPENSE),
    ("Transportation", "car", "#f59e0b", TransactionType.EXPENSE),
    ("Entertainment", "film", "#8b5cf6", TransactionType.EXPENSE),
    ("Utilities", "zap", "#ef4444", TransactionType.EXPENSE),
    ("Health", "activity", "#ef4444", TransactionType.EXPENSE),
    ("Debt", "credit-card", "#ef4444", TransactionType.EXPENSE),
]


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate(self, name: str, category_type: TransactionType | str) -> TransactionType:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        try:
            return TransactionType(category_type)
        except ValueError:
            raise ValidationError(
                f"Invalid category type '{category_type}'. Valid types: income, expense"
            )

    def create_category(
        self,
        owner: str,
        name: str,
        category_type: TransactionType | str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Create a category.

        Raises:
            ValidationError: If name or type is invalid
        """
        category_type = self._validate(name, category_type)
        return self.db.create_category(
            owner=owner, name=name.strip(), category_type=category_type, icon=icon, color=color
        )

    def get_category(self, category_id: int, owner: str) -> Optional[Category]:
        """Get category by ID, or None if not found."""
        return self.db.get_category(category_id, owner)

    def require_category(self, category_id: int, owner: str) -> Category:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id, owner)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, owner: str, name: str) -> Optional[Category]:
        """Find a category by case-insensitive name."""
        wanted = name.strip().lower()
        for category in self.db.list_categories(owner):
            if category.name.lower() == wanted:
                return category
        return None

    def list_categories(
        self, owner: str, category_type: Optional[TransactionType | str] = None
    ) -> list[Category]:
        """List an owner's categories, optionally only one type."""
        if category_type is not None:
            category_type = TransactionType(category_type)
        return self.db.list_categories(owner, category_type=category_type)

    def update_category(
        self,
        category_id: int,
        owner: str,
        name: str,
        category_type: TransactionType | str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Replace a category's fields."""
        category_type = self._validate(name, category_type)
        return self.db.update_category(
            category_id, owner, name.strip(), category_type, icon=icon, color=color
        )

    def delete_category(self, category_id: int, owner: str) -> None:
        """Delete a category no transaction uses.

        Raises:
            NotFoundError: If the category does not exist for the owner
            ConflictError: If transactions are filed under it
        """
        self.require_category(category_id, owner)
        count = self.db.get_category_transaction_count(category_id, owner)
        if count > 0:
            raise ConflictError(category_delete_blocked(category_id, count))
        self.db.delete_category(category_id, owner)

    def seed_default_categories(self, owner: str) -> list[Category]:
        """Create the default categories for an owner who has none.

        Returns:
            The owner's categories after seeding
        """
        existing = self.db.list_categories(owner)
        if existing:
            return existing

        for name, icon, color, category_type in DEFAULT_CATEGORIES:
            self.db.create_category(
                owner=owner, name=name, category_type=category_type, icon=icon, color=color
            )
        logger.info("seeded %d default categories for %s", len(DEFAULT_CATEGORIES), owner)
        return self.db.list_categories(owner)
