"""
Tests for ledger recalculation.

The running balance must be a pure function of the month set and the
initial capital: order of input, previous cumulative values and
repeated calls must not change it.
"""

import pytest

from capital_dashboard.engine.ledger import (
    expenses_by_category,
    monthly_balance,
    recalculate,
    sort_chronologically,
    total_expenses,
)
from capital_dashboard.models.ledger import Expense, MonthEntry


def _month(month, year, net=0.0, expenses=(), cumulative=0.0):
    return MonthEntry(
        month=month,
        year=year,
        net_salary=net,
        expenses=[Expense(category=c, amount=a) for c, a in expenses],
        cumulative_capital=cumulative,
    )


class TestMonthHelpers:
    """Tests for per-month totals."""

    def test_total_expenses(self):
        entry = _month(0, 2025, expenses=[("Cibo", 120.5), ("Affitto", 850)])
        assert total_expenses(entry) == pytest.approx(970.5)

    def test_total_expenses_empty_month(self):
        assert total_expenses(_month(0, 2025)) == 0

    def test_monthly_balance_can_be_negative(self):
        entry = _month(3, 2025, net=1000, expenses=[("Affitto", 1500)])
        assert monthly_balance(entry) == -500

    def test_expenses_by_category_sums_and_keeps_order(self):
        """Expenses sharing a category are added; first-seen order is kept."""
        entry = _month(0, 2025, expenses=[
            ("Cibo", 100), ("Affitto", 850), ("Cibo", 50),
        ])
        totals = expenses_by_category(entry)
        assert list(totals) == ["Cibo", "Affitto"]
        assert totals["Cibo"] == 150


class TestRecalculate:
    """Tests for the running balance."""

    def test_empty_ledger(self):
        assert recalculate([], 1000) == []
        assert recalculate([], -250) == []

    def test_single_month(self):
        """1000 + 2000 - 500 = 2500."""
        entries = [_month(0, 2025, net=2000, expenses=[("Affitto", 500)])]
        result = recalculate(entries, 1000)
        assert result[0].cumulative_capital == 2500

    def test_year_boundary_ordering(self):
        """(2025, 11) comes before (2026, 0) even when inserted the other way round."""
        january = _month(0, 2026, net=100)
        december = _month(11, 2025, net=200)

        result = recalculate([january, december], 0)

        assert [(m.year, m.month) for m in result] == [(2025, 11), (2026, 0)]
        assert result[0].cumulative_capital == 200
        assert result[1].cumulative_capital == 300

    def test_output_sorted_regardless_of_input_order(self):
        entries = [
            _month(5, 2025), _month(0, 2026), _month(1, 2025), _month(11, 2024),
        ]
        result = recalculate(entries, 0)
        periods = [(m.year, m.month) for m in result]
        assert periods == sorted(periods)

    def test_running_balance(self):
        entries = [
            _month(0, 2025, net=2000, expenses=[("Affitto", 850), ("Cibo", 400)]),
            _month(1, 2025, net=2000, expenses=[("Affitto", 850), ("Vacanze", 1500)]),
            _month(2, 2025, net=0),
        ]
        result = recalculate(entries, 500)
        assert [m.cumulative_capital for m in result] == [1250, 900, 900]

    def test_negative_initial_capital(self):
        result = recalculate([_month(0, 2025, net=300)], -1000)
        assert result[0].cumulative_capital == -700

    def test_idempotent(self):
        """Running it again on its own output gives the same numbers."""
        entries = [
            _month(2, 2025, net=1800, expenses=[("Cibo", 333.33)]),
            _month(0, 2025, net=2100, expenses=[("Affitto", 850)]),
            _month(1, 2025, net=2100, expenses=[("Bollette", 190.1)]),
        ]
        first = recalculate(entries, 1000)
        second = recalculate(first, 1000)
        assert [m.cumulative_capital for m in second] == [m.cumulative_capital for m in first]

    def test_ignores_stale_cumulative_capital(self):
        entries = [_month(0, 2025, net=100, cumulative=99999)]
        assert recalculate(entries, 0)[0].cumulative_capital == 100

    def test_does_not_modify_input(self):
        entry = _month(0, 2025, net=100, cumulative=7)
        recalculate([entry], 0)
        assert entry.cumulative_capital == 7

    def test_one_output_per_input(self):
        """Duplicate (year, month) entries are kept, in input order."""
        first = _month(4, 2025, net=10)
        second = _month(4, 2025, net=20)
        result = recalculate([first, second], 0)
        assert [m.id for m in result] == [first.id, second.id]
        assert [m.cumulative_capital for m in result] == [10, 30]


class TestSortChronologically:
    """Tests for the stable chronological sort."""

    def test_stable_for_equal_periods(self):
        a, b, c = _month(3, 2025), _month(3, 2025), _month(1, 2025)
        assert [m.id for m in sort_chronologically([a, b, c])] == [c.id, a.id, b.id]
