"""Keyword-based category suggestions for imported transactions."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from fintrack.domain.entities import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordRule:
    """Maps any of a set of keywords to a category name."""

    keywords: tuple[str, ...]
    category_name: str

    def matches(self, description: str) -> bool:
        lowered = description.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Checked in order; the first matching rule wins.
DEFAULT_RULES = (
    KeywordRule(("salary", "payroll", "deposit"), "Salary"),
    KeywordRule(("dividend", "interest"), "Investments"),
    KeywordRule(("rent", "mortgage"), "Housing"),
    KeywordRule(("grocery", "food", "restaurant"), "Food"),
    KeywordRule(("uber", "lyft", "gas", "transport"), "Transportation"),
    KeywordRule(("movie", "entertainment", "game"), "Entertainment"),
    KeywordRule(("electric", "water", "internet"), "Utilities"),
    KeywordRule(("doctor", "pharmacy", "health"), "Health"),
    KeywordRule(("credit card", "loan", "payment"), "Debt"),
)

DEFAULT_CATEGORY_NAME = "Food"


class CategoryClassifier:
    """Suggests a category id from a transaction description.

    The suggestion is a heuristic; users re-categorize after import.
    """

    def __init__(
        self,
        category_ids: dict[str, int],
        rules: Iterable[KeywordRule] = DEFAULT_RULES,
        default_category: str = DEFAULT_CATEGORY_NAME,
    ):
        """Initialize classifier.

        Args:
            category_ids: Category id per lower-cased category name
            rules: Ordered keyword rules
            default_category: Category name used when no rule matches
        """
        self.category_ids = {name.lower(): cid for name, cid in category_ids.items()}
        self.rules = tuple(rules)
        self.default_category = default_category

    @classmethod
    def for_categories(cls, categories: Iterable[Category], **kwargs) -> "CategoryClassifier":
        """Build a classifier bound to an owner's categories.

        When names repeat, the first category with that name is used.
        """
        category_ids: dict[str, int] = {}
        for category in categories:
            category_ids.setdefault(category.name.lower(), category.id)
        return cls(category_ids, **kwargs)

    def classify(self, description: Optional[str]) -> Optional[int]:
        """Return the suggested category id for a description.

        Rules whose category the owner does not have are skipped. Returns
        None only when the default category is missing too.
        """
        description = description or ""
        for rule in self.rules:
            category_id = self.category_ids.get(rule.category_name.lower())
            if category_id is not None and rule.matches(description):
                logger.debug("%r matched %s", description, rule.category_name)
                return category_id
        return self.category_ids.get(self.default_category.lower())
