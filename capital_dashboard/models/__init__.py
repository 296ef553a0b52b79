"""
Data Models Package

This package contains all Pydantic models used in the Personal Capital Dashboard.
All data flowing between the engine, the services and storage conforms to these schemas.
"""

from capital_dashboard.models.ledger import (
    CashFlowData,
    Category,
    DEFAULT_CATEGORY_SPECS,
    Expense,
    MonthEntry,
    UserProfile,
    default_categories,
)
from capital_dashboard.models.investment import (
    DEFAULT_INVESTMENT_PLAN,
    GlobalMonth,
    InvestmentPlan,
    InvestmentSummary,
    ProjectedMonth,
    WealthAlignment,
    WealthSummary,
)
from capital_dashboard.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Ledger models
    "CashFlowData",
    "Category",
    "DEFAULT_CATEGORY_SPECS",
    "Expense",
    "MonthEntry",
    "UserProfile",
    "default_categories",
    # Investment models
    "DEFAULT_INVESTMENT_PLAN",
    "GlobalMonth",
    "InvestmentPlan",
    "InvestmentSummary",
    "ProjectedMonth",
    "WealthAlignment",
    "WealthSummary",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
