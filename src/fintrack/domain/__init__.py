"""Domain layer for fintrack application.

Services live in their own modules (fintrack.domain.transaction,
fintrack.domain.statement_import, ...) and are imported from there.
"""
