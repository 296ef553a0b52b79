"""
Ledger Recalculation

Turns an unordered collection of month entries into a chronological
ledger annotated with a running cumulative balance.

DESIGN DECISION: The running balance is always recomputed from scratch.
It is a pure function of the full month set and the starting capital;
the previous `cumulative_capital` values are never read, so calling
`recalculate` on its own output gives the same numbers.

No rounding happens here. Values are carried at full float precision
and rounded only when formatted for display.
"""

from typing import Iterable

from capital_dashboard.models.ledger import MonthEntry


def total_expenses(entry: MonthEntry) -> float:
    """Sum of all expense amounts in a month."""
    return sum(expense.amount for expense in entry.expenses)


def monthly_balance(entry: MonthEntry) -> float:
    """Net salary minus expenses for a single month (may be negative)."""
    return entry.net_salary - total_expenses(entry)


def expenses_by_category(entry: MonthEntry) -> dict[str, float]:
    """
    Total expense amount per category name, in first-seen order.

    Several expenses with the same category are added together.
    """
    totals: dict[str, float] = {}
    for expense in entry.expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def sort_chronologically(entries: Iterable[MonthEntry]) -> list[MonthEntry]:
    """Stable sort by (year, month); entries with the same key keep input order."""
    return sorted(entries, key=lambda entry: entry.period)


def recalculate(
    entries: Iterable[MonthEntry],
    initial_capital: float,
) -> list[MonthEntry]:
    """
    Sort entries chronologically and annotate each with its running balance.

    Args:
        entries: Month entries in any order
        initial_capital: Balance before the first month

    Returns:
        New MonthEntry objects in (year, month) order, one per input entry,
        with `cumulative_capital` set. The input objects are not modified.
    """
    running = initial_capital
    recalculated = []

    for entry in sort_chronologically(entries):
        running = running + entry.net_salary - total_expenses(entry)
        recalculated.append(entry.model_copy(update={"cumulative_capital": running}))

    return recalculated
