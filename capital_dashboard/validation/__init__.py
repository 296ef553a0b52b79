"""Input validation package."""

from capital_dashboard.validation.validator import EntryValidator, parse_amount

__all__ = ["EntryValidator", "parse_amount"]
