"""Duplicate detection for imported transactions."""

from typing import Iterable

from fintrack.database.base import Database
from fintrack.domain.entities import ParsedTransaction, Transaction


def find_same_day_transactions(
    db: Database, owner: str, candidate: ParsedTransaction
) -> list[Transaction]:
    """Return the owner's transactions dated on the candidate's calendar day."""
    return db.list_transactions(owner, start_date=candidate.date, end_date=candidate.date)


def is_duplicate(candidate: ParsedTransaction, existing: Iterable[Transaction]) -> bool:
    """Check whether a candidate repeats an existing transaction.

    A duplicate has exactly the same description and amount on the same
    calendar day. Type, category and account are not compared.
    """
    return any(
        txn.description == candidate.description
        and txn.amount == candidate.amount
        and txn.date == candidate.date
        for txn in existing
    )
