"""
Financial projection engine.

Pure, synchronous functions over plain models: no I/O, no shared state.
"""

from capital_dashboard.engine.demo import DemoConfig, generate_demo_cash_flow
from capital_dashboard.engine.investment import monthly_rate, project, summarize_projection
from capital_dashboard.engine.ledger import (
    expenses_by_category,
    monthly_balance,
    recalculate,
    sort_chronologically,
    total_expenses,
)
from capital_dashboard.engine.wealth import combine, summarize_wealth

__all__ = [
    "DemoConfig",
    "combine",
    "expenses_by_category",
    "generate_demo_cash_flow",
    "monthly_balance",
    "monthly_rate",
    "project",
    "recalculate",
    "sort_chronologically",
    "summarize_projection",
    "summarize_wealth",
    "total_expenses",
]
