"""
Tests for the services layer (categories, cash flow, investments).

All tests run against the in-memory store.
"""

import asyncio

import pytest

from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.models.ledger import CashFlowData, Expense, MonthEntry
from capital_dashboard.services import (
    CashFlowService,
    CategoryNotFoundError,
    CategoryService,
    DuplicateMonthError,
    ExpenseNotFoundError,
    InMemoryDocumentStore,
    InvalidInputError,
    InvestmentService,
    MonthNotFoundError,
    StorageError,
    next_period,
)
from capital_dashboard.validation import EntryValidator


USER = "user-1"


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def categories(store):
    return CategoryService(store, USER)


@pytest.fixture
def cash_flow(store, categories):
    return CashFlowService(store, USER, categories=categories)


@pytest.fixture
def investments(store):
    return InvestmentService(store, USER)


class FailingStore(InMemoryDocumentStore):
    """Every write fails."""

    async def add_category(self, user_id, category):
        raise StorageError("quota exceeded")

    async def save_investment_plan(self, user_id, plan):
        raise StorageError("quota exceeded")

    async def add_month(self, user_id, entry):
        raise StorageError("quota exceeded")


# =============================================================================
# CATEGORIES
# =============================================================================

class TestCategoryService:
    """Tests for category management."""

    def test_defaults_created_once(self, categories, store):
        first = asyncio.run(categories.list_categories())
        second = asyncio.run(categories.list_categories())
        assert len(first) == 10
        assert [c.id for c in first] == [c.id for c in second]
        assert len(asyncio.run(store.list_categories(USER))) == 10

    def test_add_category(self, categories):
        assert asyncio.run(categories.add_category("  Palestra "))
        names = [c.name for c in asyncio.run(categories.list_categories())]
        assert names[-1] == "Palestra"

    @pytest.mark.parametrize("name", ["", "   ", "cibo", "AFFITTO"])
    def test_add_rejects_blank_and_duplicates(self, categories, name):
        assert not asyncio.run(categories.add_category(name))
        assert len(asyncio.run(categories.list_categories())) == 10

    def test_get_by_name_ignores_case(self, categories):
        assert asyncio.run(categories.get_by_name(" bollette ")).name == "Bollette"
        assert asyncio.run(categories.get_by_name("Palestra")) is None

    def test_rename(self, categories):
        asyncio.run(categories.add_category("Palestra"))
        palestra = asyncio.run(categories.get_by_name("Palestra"))

        assert asyncio.run(categories.rename_category(palestra.id, "Sport"))
        assert asyncio.run(categories.get_by_name("Sport")).id == palestra.id

    def test_rename_to_own_name_with_different_case(self, categories):
        cibo = asyncio.run(categories.get_by_name("Cibo"))
        assert asyncio.run(categories.rename_category(cibo.id, "CIBO"))

    def test_rename_rejections(self, categories):
        cibo = asyncio.run(categories.get_by_name("Cibo"))
        assert not asyncio.run(categories.rename_category(cibo.id, "affitto"))
        assert not asyncio.run(categories.rename_category(cibo.id, "  "))
        assert not asyncio.run(categories.rename_category("missing", "Nuovo"))

    def test_long_names_rejected(self, categories):
        cibo = asyncio.run(categories.get_by_name("Cibo"))

        assert not asyncio.run(categories.add_category("x" * 101))
        assert not asyncio.run(categories.rename_category(cibo.id, "y" * 500))

        names = [c.name for c in asyncio.run(categories.list_categories())]
        assert len(names) == 10
        assert "Cibo" in names

    def test_name_at_length_limit_accepted(self, categories):
        assert asyncio.run(categories.add_category("z" * 100))

    def test_update_color(self, categories):
        cibo = asyncio.run(categories.get_by_name("Cibo"))
        assert asyncio.run(categories.update_color(cibo.id, "#000000"))
        assert asyncio.run(categories.get_by_name("Cibo")).color == "#000000"
        assert not asyncio.run(categories.update_color("missing", "#000000"))

    def test_remove_custom_only(self, categories):
        asyncio.run(categories.add_category("Palestra"))
        palestra = asyncio.run(categories.get_by_name("Palestra"))
        cibo = asyncio.run(categories.get_by_name("Cibo"))

        assert not asyncio.run(categories.remove_category(cibo.id))
        assert not asyncio.run(categories.remove_category("missing"))
        assert asyncio.run(categories.remove_category(palestra.id))
        assert asyncio.run(categories.get_by_name("Palestra")) is None

    def test_storage_failure_is_raised(self):
        store = FailingStore()
        service = CategoryService(store, USER)
        with pytest.raises(StorageError):
            asyncio.run(service.add_category("Palestra"))

    def test_subscribe(self, categories):
        received = []
        asyncio.run(categories.list_categories())
        subscription = asyncio.run(categories.subscribe(received.append))
        asyncio.run(categories.add_category("Palestra"))
        subscription.unsubscribe()

        assert len(received) == 2
        assert received[-1][-1].name == "Palestra"


# =============================================================================
# CASH FLOW
# =============================================================================

class TestNextPeriod:

    def test_same_year(self):
        assert next_period(4, 2025) == (5, 2025)

    def test_year_rollover(self):
        assert next_period(11, 2025) == (0, 2026)


class TestCashFlowMonths:
    """Tests for adding and removing months."""

    def test_add_month_and_load(self, cash_flow):
        asyncio.run(cash_flow.set_initial_capital(1000))
        asyncio.run(cash_flow.add_month(0, 2025, net_salary="2.000,00"))

        data = asyncio.run(cash_flow.load())

        assert data.initial_capital == 1000
        assert data.months[0].net_salary == 2000
        assert data.final_capital == 3000

    def test_duplicate_month_rejected(self, cash_flow):
        asyncio.run(cash_flow.add_month(3, 2025))
        with pytest.raises(DuplicateMonthError):
            asyncio.run(cash_flow.add_month(3, 2025))

    @pytest.mark.parametrize("month, year, net", [(12, 2025, 0), (0, 2025, -1), (0, 2025, "abc")])
    def test_invalid_month_input(self, cash_flow, month, year, net):
        with pytest.raises(InvalidInputError) as exc_info:
            asyncio.run(cash_flow.add_month(month, year, net_salary=net))
        assert exc_info.value.result.has_errors

    def test_invalid_input_summary_lists_errors(self, cash_flow):
        with pytest.raises(InvalidInputError) as exc_info:
            asyncio.run(cash_flow.add_month(0, 2025, net_salary=-1))

        result = exc_info.value.result
        summary = EntryValidator().get_user_friendly_summary(result)
        assert result.error_count == 1
        for message in result.error_messages():
            assert f"❌ {message}" in summary

    def test_append_next_month_copies_last(self, cash_flow):
        first = asyncio.run(cash_flow.add_month(11, 2025, net_salary=1800, gross_salary=2500))
        asyncio.run(cash_flow.add_expense(first.id, "Affitto", 850))

        appended = asyncio.run(cash_flow.append_next_month())

        assert (appended.month, appended.year) == (0, 2026)
        assert appended.net_salary == 1800
        assert appended.gross_salary == 2500
        assert [e.category for e in appended.expenses] == ["Affitto"]
        stored = asyncio.run(cash_flow.load()).months
        assert appended.expenses[0].id != stored[0].expenses[0].id

    def test_append_next_month_uses_latest_period(self, cash_flow):
        asyncio.run(cash_flow.add_month(5, 2025))
        asyncio.run(cash_flow.add_month(1, 2025))
        appended = asyncio.run(cash_flow.append_next_month())
        assert (appended.month, appended.year) == (6, 2025)

    def test_append_on_empty_ledger(self, cash_flow):
        appended = asyncio.run(cash_flow.append_next_month())
        assert appended.expenses == []
        assert len(asyncio.run(cash_flow.load()).months) == 1

    def test_remove_last_month(self, cash_flow):
        asyncio.run(cash_flow.add_month(0, 2025))
        assert not asyncio.run(cash_flow.remove_last_month())

        asyncio.run(cash_flow.add_month(1, 2025))
        assert asyncio.run(cash_flow.remove_last_month())
        months = asyncio.run(cash_flow.load()).months
        assert [(m.month, m.year) for m in months] == [(0, 2025)]

    def test_delete_unknown_month(self, cash_flow):
        with pytest.raises(MonthNotFoundError):
            asyncio.run(cash_flow.delete_month("missing"))

    def test_update_salary(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025, net_salary=1000))
        updated = asyncio.run(cash_flow.update_salary(entry.id, net_salary="1.500,00"))
        assert updated.net_salary == 1500
        assert updated.gross_salary == 0

    def test_update_salary_rejects_negative(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        with pytest.raises(InvalidInputError):
            asyncio.run(cash_flow.update_salary(entry.id, gross_salary=-5))

    def test_storage_failure_is_raised(self):
        service = CashFlowService(FailingStore(), USER)
        with pytest.raises(StorageError):
            asyncio.run(service.add_month(0, 2025))


class TestCashFlowExpenses:
    """Tests for expense edits."""

    def test_add_expense_snapshots_category(self, cash_flow, categories):
        entry = asyncio.run(cash_flow.add_month(0, 2025, net_salary=2000))
        cibo = asyncio.run(categories.get_by_name("Cibo"))

        expense = asyncio.run(cash_flow.add_expense(entry.id, "cibo", "120,50"))

        assert expense.category == "Cibo"
        assert expense.color == cibo.color
        assert expense.amount == 120.5
        assert asyncio.run(cash_flow.load()).final_capital == pytest.approx(1879.5)

    def test_renaming_category_keeps_old_expense_name(self, cash_flow, categories):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        asyncio.run(cash_flow.add_expense(entry.id, "Cibo", 10))
        cibo = asyncio.run(categories.get_by_name("Cibo"))
        asyncio.run(categories.rename_category(cibo.id, "Spesa"))

        months = asyncio.run(cash_flow.load()).months
        assert months[0].expenses[0].category == "Cibo"

    @pytest.mark.parametrize("amount", [0, -10, "abc"])
    def test_add_expense_rejects_bad_amount(self, cash_flow, amount):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        with pytest.raises(InvalidInputError):
            asyncio.run(cash_flow.add_expense(entry.id, "Cibo", amount))

    def test_add_expense_unknown_category(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        with pytest.raises(CategoryNotFoundError):
            asyncio.run(cash_flow.add_expense(entry.id, "Palestra", 40))

    def test_add_expense_unknown_month(self, cash_flow):
        with pytest.raises(MonthNotFoundError):
            asyncio.run(cash_flow.add_expense("missing", "Cibo", 40))

    def test_update_and_remove_expense(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025, net_salary=1000))
        expense = asyncio.run(cash_flow.add_expense(entry.id, "Svago", 100))

        updated = asyncio.run(cash_flow.update_expense_amount(entry.id, expense.id, 250))
        assert updated.amount == 250
        assert asyncio.run(cash_flow.load()).final_capital == 750

        assert asyncio.run(cash_flow.remove_expense(entry.id, expense.id))
        assert asyncio.run(cash_flow.load()).final_capital == 1000

    def test_update_expense_rejects_zero(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        expense = asyncio.run(cash_flow.add_expense(entry.id, "Svago", 100))
        with pytest.raises(InvalidInputError):
            asyncio.run(cash_flow.update_expense_amount(entry.id, expense.id, 0))

    def test_unknown_expense(self, cash_flow):
        entry = asyncio.run(cash_flow.add_month(0, 2025))
        with pytest.raises(ExpenseNotFoundError):
            asyncio.run(cash_flow.remove_expense(entry.id, "missing"))
        with pytest.raises(ExpenseNotFoundError):
            asyncio.run(cash_flow.update_expense_amount(entry.id, "missing", 10))


class TestCashFlowCapital:
    """Tests for initial capital, subscriptions and seeding."""

    def test_ensure_profile(self, cash_flow):
        profile = asyncio.run(cash_flow.ensure_profile(email="a@b.it", display_name="Anna"))
        again = asyncio.run(cash_flow.ensure_profile(email="other@b.it"))
        assert profile.initial_capital == 0
        assert again.email == "a@b.it"

    def test_negative_initial_capital(self, cash_flow):
        data = asyncio.run(cash_flow.set_initial_capital("-1.000,00"))
        assert data.initial_capital == -1000
        assert data.final_capital == -1000

    def test_initial_capital_must_be_number(self, cash_flow):
        with pytest.raises(InvalidInputError):
            asyncio.run(cash_flow.set_initial_capital("abc"))

    def test_changing_initial_capital_shifts_every_month(self, cash_flow):
        asyncio.run(cash_flow.add_month(0, 2025, net_salary=100))
        asyncio.run(cash_flow.add_month(1, 2025, net_salary=100))
        before = asyncio.run(cash_flow.load())
        after = asyncio.run(cash_flow.set_initial_capital(500))
        assert [m.cumulative_capital for m in after.months] == [
            m.cumulative_capital + 500 for m in before.months
        ]

    def test_subscribe_receives_recalculated_ledger(self, cash_flow):
        asyncio.run(cash_flow.set_initial_capital(100))
        received = []
        subscription = asyncio.run(cash_flow.subscribe(received.append))
        asyncio.run(cash_flow.add_month(1, 2025, net_salary=50))
        asyncio.run(cash_flow.add_month(0, 2025, net_salary=20))
        subscription.unsubscribe()
        asyncio.run(cash_flow.add_month(2, 2025, net_salary=20))

        assert len(received) == 3
        assert received[0].months == []
        assert [m.cumulative_capital for m in received[-1].months] == [120, 170]

    def test_save_recalculated_writes_stale_values(self, cash_flow, store):
        asyncio.run(cash_flow.add_month(0, 2025, net_salary=300))
        asyncio.run(cash_flow.save_recalculated())
        assert asyncio.run(store.list_months(USER))[0].cumulative_capital == 300

    def test_seed(self, cash_flow, store):
        data = CashFlowData(
            initial_capital=42,
            months=[MonthEntry(month=0, year=2025, net_salary=10,
                               expenses=[Expense(category="Cibo", amount=2)])],
        )
        asyncio.run(cash_flow.seed(data))
        loaded = asyncio.run(cash_flow.load())
        assert loaded.initial_capital == 42
        assert loaded.final_capital == 50


# =============================================================================
# INVESTMENTS
# =============================================================================

class TestInvestmentService:
    """Tests for the investment plan service."""

    def test_default_plan_saved_on_first_read(self, investments, store):
        plan = asyncio.run(investments.get_plan())
        assert plan.monthly_investment == 200
        assert asyncio.run(store.get_investment_plan(USER)) == plan

    def test_update_plan(self, investments):
        asyncio.run(investments.update_plan(InvestmentPlan(monthly_investment=500, years_to_simulate=10)))
        plan = asyncio.run(investments.get_plan())
        assert plan.monthly_investment == 500
        assert len(asyncio.run(investments.projections(2025))) == 120

    @pytest.mark.parametrize("years", [0, 150])
    def test_update_plan_rejects_bad_horizon(self, investments, years):
        with pytest.raises(InvalidInputError):
            asyncio.run(investments.update_plan(InvestmentPlan(years_to_simulate=years)))

    def test_extreme_roi_is_saved(self, investments):
        asyncio.run(investments.update_plan(InvestmentPlan(annual_roi=90)))
        assert asyncio.run(investments.get_plan()).annual_roi == 90

    def test_summary(self, investments):
        asyncio.run(investments.update_plan(InvestmentPlan(
            initial_balance=0, monthly_investment=100, annual_roi=0, years_to_simulate=1
        )))
        summary = asyncio.run(investments.summary(2025))
        assert summary.total_invested == 1200
        assert summary.returns == 0

    def test_storage_failure_is_raised(self):
        service = InvestmentService(FailingStore(), USER)
        with pytest.raises(StorageError):
            asyncio.run(service.update_plan(InvestmentPlan()))
