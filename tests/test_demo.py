"""
Tests for the demo ledger generator.
"""

from capital_dashboard.engine.demo import DemoConfig, generate_demo_cash_flow
from capital_dashboard.engine.ledger import recalculate


def _shape(data):
    """Everything except the random IDs."""
    return [
        (m.month, m.year, m.net_salary, [(e.category, e.amount) for e in m.expenses])
        for m in data.months
    ]


def _categories(entry):
    return {e.category for e in entry.expenses}


class TestDemoGenerator:
    """Tests for generated demo data."""

    def test_defaults(self):
        data = generate_demo_cash_flow(seed=1)
        assert data.initial_capital == 5000
        assert len(data.months) == 12
        assert (data.months[0].month, data.months[0].year) == (0, 2025)

    def test_seed_is_deterministic(self):
        assert _shape(generate_demo_cash_flow(seed=42)) == _shape(generate_demo_cash_flow(seed=42))

    def test_already_recalculated(self):
        data = generate_demo_cash_flow(seed=7)
        expected = recalculate(data.months, data.initial_capital)
        assert [m.cumulative_capital for m in data.months] == [
            m.cumulative_capital for m in expected
        ]

    def test_salary_pattern(self):
        months = generate_demo_cash_flow(seed=3).months
        assert months[0].net_salary == 2200
        assert months[5].net_salary == 3000
        assert months[5].gross_salary == 4200
        assert months[11].net_salary == 4200
        assert months[11].gross_salary == 5900

    def test_fixed_expenses_every_month(self):
        for entry in generate_demo_cash_flow(seed=5).months:
            assert {"Affitto", "Cibo", "Bollette", "Trasporti", "Svago"} <= _categories(entry)
            rent = next(e for e in entry.expenses if e.category == "Affitto")
            assert rent.amount == 850

    def test_seasonal_expenses(self):
        months = generate_demo_cash_flow(seed=9).months
        vacation = [m.month for m in months if "Vacanze" in _categories(m)]
        gifts = [m.month for m in months if "Regali" in _categories(m)]
        health = [m.month for m in months if "Salute" in _categories(m)]
        assert vacation == [6, 7]
        assert gifts == [11]
        assert health == [1, 4, 9]

    def test_winter_bills_are_higher(self):
        for entry in generate_demo_cash_flow(seed=11).months:
            bills = next(e.amount for e in entry.expenses if e.category == "Bollette")
            if entry.month in (0, 1, 11):
                assert 180 <= bills <= 250
            else:
                assert 120 <= bills <= 170

    def test_whole_number_amounts(self):
        for entry in generate_demo_cash_flow(seed=13).months:
            for expense in entry.expenses:
                assert expense.amount == int(expense.amount)

    def test_spans_years(self):
        data = generate_demo_cash_flow(DemoConfig(months_to_generate=15, start_year=2024), seed=2)
        last = data.months[-1]
        assert (last.month, last.year) == (2, 2025)

    def test_no_months(self):
        data = generate_demo_cash_flow(DemoConfig(months_to_generate=0), seed=2)
        assert data.months == []
        assert data.final_capital == 5000
