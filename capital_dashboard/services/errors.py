"""
Caller-boundary errors.

The engine raises nothing of its own; these are raised by the services
that validate input and resolve references before calling it.
"""

from typing import Optional

from capital_dashboard.models.validation import ValidationResult


class DashboardError(Exception):
    """Base exception for service-level failures."""
    pass


class InvalidInputError(DashboardError):
    """User input failed validation; `result` holds the issues."""

    def __init__(self, message: str, result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.result = result or ValidationResult()


class CategoryNotFoundError(DashboardError):
    """Referenced category name does not exist."""
    pass


class MonthNotFoundError(DashboardError):
    """Referenced month ID does not exist."""
    pass


class ExpenseNotFoundError(DashboardError):
    """Referenced expense ID does not exist in the month."""
    pass


class DuplicateMonthError(DashboardError):
    """A month with the same (month, year) is already in the ledger."""
    pass
