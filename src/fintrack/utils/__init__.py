"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date, parse_statement_date
from fintrack.utils.amount_parser import parse_amount, parse_statement_amount
from fintrack.utils.fetcher import fetch_statement

__all__ = [
    "parse_date",
    "parse_statement_date",
    "parse_amount",
    "parse_statement_amount",
    "fetch_statement",
]
