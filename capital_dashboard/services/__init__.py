"""Services package."""

from capital_dashboard.services.cash_flow import CashFlowService, next_period
from capital_dashboard.services.categories import CategoryService
from capital_dashboard.services.errors import (
    CategoryNotFoundError,
    DashboardError,
    DuplicateMonthError,
    ExpenseNotFoundError,
    InvalidInputError,
    MonthNotFoundError,
)
from capital_dashboard.services.investments import InvestmentService
from capital_dashboard.services.storage import (
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    NotFoundError,
    StorageError,
    Subscription,
)

__all__ = [
    # Domain services
    "CashFlowService",
    "CategoryService",
    "InvestmentService",
    "next_period",
    # Service errors
    "CategoryNotFoundError",
    "DashboardError",
    "DuplicateMonthError",
    "ExpenseNotFoundError",
    "InvalidInputError",
    "MonthNotFoundError",
    # Storage services
    "ConnectionError",
    "DocumentStoreInterface",
    "DuplicateError",
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "NotFoundError",
    "StorageError",
    "Subscription",
]
