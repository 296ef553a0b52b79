"""
Cash Flow Service

The caller layer around the ledger recalculator:
validates user input, resolves categories and months, persists
changes through the injected document store, and returns the
recalculated ledger.

FLOW for every edit:
1. Validate input (EntryValidator) -> InvalidInputError
2. Resolve references (month ID, category name) -> *NotFoundError
3. Write the changed MonthEntry through the store
4. Subscribers receive the new month set and recalculate from scratch

DESIGN DECISION: cumulative capital is never patched incrementally.
Every read goes through `recalculate()` over the full month set.
"""

from datetime import date, datetime
from typing import Awaitable, Callable, Optional

from capital_dashboard.engine.ledger import recalculate, sort_chronologically
from capital_dashboard.log import get_logger
from capital_dashboard.models.ledger import CashFlowData, Expense, MonthEntry, UserProfile
from capital_dashboard.services.categories import CategoryService
from capital_dashboard.services.errors import (
    CategoryNotFoundError,
    DuplicateMonthError,
    ExpenseNotFoundError,
    InvalidInputError,
    MonthNotFoundError,
)
from capital_dashboard.services.storage import (
    DocumentStoreInterface,
    StorageError,
    Subscription,
)
from capital_dashboard.validation import EntryValidator, parse_amount
from capital_dashboard.validation.validator import RawAmount


CashFlowCallback = Callable[[CashFlowData], None]


def next_period(month: int, year: int) -> tuple[int, int]:
    """(month, year) of the calendar month after the given one."""
    if month == 11:
        return 0, year + 1
    return month + 1, year


class CashFlowService:
    """Per-user ledger operations."""

    def __init__(
        self,
        store: DocumentStoreInterface,
        user_id: str,
        categories: Optional[CategoryService] = None,
        validator: Optional[EntryValidator] = None,
    ):
        self._store = store
        self._user_id = user_id
        self._categories = categories or CategoryService(store, user_id)
        self._validator = validator or EntryValidator()
        self._logger = get_logger(__name__).bind(user_id=user_id)

    async def _write(self, event: str, operation: Awaitable, **fields) -> None:
        """Await a store write; log success, or log the failure and re-raise."""
        try:
            await operation
        except StorageError as e:
            self._logger.error(f"{event}_failed", error=str(e), **fields)
            raise
        self._logger.info(event, **fields)

    @staticmethod
    def _raise_if_invalid(result, message: str) -> None:
        if not result.is_valid:
            raise InvalidInputError(
                f"{message}: {'; '.join(result.error_messages())}", result
            )

    # -------------------------------------------------------------------------
    # Profile / initial capital
    # -------------------------------------------------------------------------

    async def ensure_profile(self, email: str = "", display_name: Optional[str] = None) -> UserProfile:
        """Create the user's profile with zero initial capital if it doesn't exist yet."""
        profile = await self._store.get_profile(self._user_id)
        if profile is not None:
            return profile

        profile = UserProfile(email=email, display_name=display_name, initial_capital=0.0)
        await self._write("profile_created", self._store.save_profile(self._user_id, profile))
        return profile

    async def get_initial_capital(self) -> float:
        profile = await self._store.get_profile(self._user_id)
        return profile.initial_capital if profile else 0.0

    async def set_initial_capital(self, raw_amount: RawAmount) -> CashFlowData:
        """Set the starting capital (may be zero or negative) and return the new ledger."""
        value = parse_amount(raw_amount)
        if value is None:
            raise InvalidInputError("Initial capital must be a number")

        profile = await self._store.get_profile(self._user_id) or UserProfile()
        profile = profile.model_copy(
            update={"initial_capital": value, "updated_at": datetime.utcnow()}
        )
        await self._write(
            "initial_capital_set",
            self._store.save_profile(self._user_id, profile),
            initial_capital=value,
        )
        return await self.load()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def load(self) -> CashFlowData:
        """Fetch all months and return them recalculated."""
        initial_capital = await self.get_initial_capital()
        months = await self._store.list_months(self._user_id)
        return CashFlowData(
            initial_capital=initial_capital,
            months=recalculate(months, initial_capital),
        )

    async def _get_month(self, month_id: str) -> MonthEntry:
        entry = await self._store.get_month(self._user_id, month_id)
        if entry is None:
            raise MonthNotFoundError(f"Month not found: {month_id}")
        return entry

    async def subscribe(self, callback: CashFlowCallback) -> Subscription:
        """
        Get the recalculated ledger now and after every month change.

        The initial capital is read once, when subscribing.
        """
        initial_capital = await self.get_initial_capital()

        def on_months(months: list[MonthEntry]) -> None:
            callback(CashFlowData(
                initial_capital=initial_capital,
                months=recalculate(months, initial_capital),
            ))

        return await self._store.subscribe_months(self._user_id, on_months)

    async def save_recalculated(self) -> CashFlowData:
        """Write the recalculated cumulative capital back for months whose stored value is stale."""
        data = await self.load()
        stored = {m.id: m.cumulative_capital for m in await self._store.list_months(self._user_id)}
        for entry in data.months:
            if stored.get(entry.id) != entry.cumulative_capital:
                await self._write(
                    "cumulative_capital_saved",
                    self._store.update_month(self._user_id, entry),
                    month_id=entry.id,
                )
        return data

    # -------------------------------------------------------------------------
    # Months
    # -------------------------------------------------------------------------

    async def add_month(
        self,
        month: int,
        year: int,
        net_salary: RawAmount = 0.0,
        gross_salary: RawAmount = 0.0,
        expenses: Optional[list[Expense]] = None,
    ) -> MonthEntry:
        """
        Add a month to the ledger.

        Raises:
            InvalidInputError: Bad month/year or salary
            DuplicateMonthError: The ledger already has this (month, year)
        """
        self._raise_if_invalid(self._validator.validate_month(month, year), "Invalid month")
        self._raise_if_invalid(self._validator.validate_salary("net_salary", net_salary), "Invalid salary")
        self._raise_if_invalid(self._validator.validate_salary("gross_salary", gross_salary), "Invalid salary")

        existing = await self._store.list_months(self._user_id)
        if any(m.month == month and m.year == year for m in existing):
            raise DuplicateMonthError(f"Month {month + 1}/{year} is already in the ledger")

        entry = MonthEntry(
            month=month,
            year=year,
            net_salary=parse_amount(net_salary),
            gross_salary=parse_amount(gross_salary),
            expenses=list(expenses or []),
        )
        await self._write(
            "month_added",
            self._store.add_month(self._user_id, entry),
            month_id=entry.id,
            month=month,
            year=year,
        )
        return entry

    async def append_next_month(self) -> MonthEntry:
        """
        Add the calendar month after the latest one, copying its salaries
        and expenses (with fresh expense IDs).

        On an empty ledger this adds the current month with no data.
        """
        existing = sort_chronologically(await self._store.list_months(self._user_id))
        if not existing:
            today = date.today()
            return await self.add_month(today.month - 1, today.year)

        last = existing[-1]
        month, year = next_period(last.month, last.year)
        copied = [
            Expense(category=e.category, amount=e.amount, color=e.color)
            for e in last.expenses
        ]
        return await self.add_month(
            month,
            year,
            net_salary=last.net_salary,
            gross_salary=last.gross_salary,
            expenses=copied,
        )

    async def delete_month(self, month_id: str) -> bool:
        """
        Raises:
            MonthNotFoundError: If the month doesn't exist
        """
        await self._get_month(month_id)
        await self._write(
            "month_deleted",
            self._store.delete_month(self._user_id, month_id),
            month_id=month_id,
        )
        return True

    async def remove_last_month(self) -> bool:
        """Delete the chronologically last month; False if it is the only one."""
        existing = sort_chronologically(await self._store.list_months(self._user_id))
        if len(existing) <= 1:
            return False
        return await self.delete_month(existing[-1].id)

    async def update_salary(
        self,
        month_id: str,
        net_salary: RawAmount = None,
        gross_salary: RawAmount = None,
    ) -> MonthEntry:
        """Update net and/or gross salary of a month (None leaves a value unchanged)."""
        entry = await self._get_month(month_id)
        changes = {}
        if net_salary is not None:
            self._raise_if_invalid(self._validator.validate_salary("net_salary", net_salary), "Invalid salary")
            changes["net_salary"] = parse_amount(net_salary)
        if gross_salary is not None:
            self._raise_if_invalid(self._validator.validate_salary("gross_salary", gross_salary), "Invalid salary")
            changes["gross_salary"] = parse_amount(gross_salary)
        if not changes:
            return entry

        updated = entry.model_copy(update=changes)
        await self._write(
            "salary_updated",
            self._store.update_month(self._user_id, updated),
            month_id=month_id,
            **changes,
        )
        return updated

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    async def add_expense(
        self,
        month_id: str,
        category_name: str,
        amount: RawAmount,
    ) -> Expense:
        """
        Add an expense to a month.

        The category's current name and color are copied into the expense.

        Raises:
            InvalidInputError: Blank category or amount not > 0
            CategoryNotFoundError: No category with that name (case-insensitive)
            MonthNotFoundError: Unknown month ID
        """
        self._raise_if_invalid(
            self._validator.validate_expense(category_name, amount), "Invalid expense"
        )

        category = await self._categories.get_by_name(category_name)
        if category is None:
            raise CategoryNotFoundError(
                f"Category '{category_name.strip()}' not found. Create it in the Categories page first."
            )

        entry = await self._get_month(month_id)
        expense = Expense(
            category=category.name,
            amount=parse_amount(amount),
            color=category.color,
        )
        updated = entry.model_copy(update={"expenses": [*entry.expenses, expense]})
        await self._write(
            "expense_added",
            self._store.update_month(self._user_id, updated),
            month_id=month_id,
            expense_id=expense.id,
            category=expense.category,
            amount=expense.amount,
        )
        return expense

    async def update_expense_amount(
        self,
        month_id: str,
        expense_id: str,
        amount: RawAmount,
    ) -> Expense:
        """
        Raises:
            InvalidInputError: Amount not > 0
            MonthNotFoundError / ExpenseNotFoundError: Unknown IDs
        """
        self._raise_if_invalid(self._validator.validate_expense_amount(amount), "Invalid expense")

        entry = await self._get_month(month_id)
        if not any(e.id == expense_id for e in entry.expenses):
            raise ExpenseNotFoundError(f"Expense not found: {expense_id}")

        value = parse_amount(amount)
        expenses = [
            e.model_copy(update={"amount": value}) if e.id == expense_id else e
            for e in entry.expenses
        ]
        await self._write(
            "expense_updated",
            self._store.update_month(self._user_id, entry.model_copy(update={"expenses": expenses})),
            month_id=month_id,
            expense_id=expense_id,
            amount=value,
        )
        return next(e for e in expenses if e.id == expense_id)

    async def remove_expense(self, month_id: str, expense_id: str) -> bool:
        """
        Raises:
            MonthNotFoundError / ExpenseNotFoundError: Unknown IDs
        """
        entry = await self._get_month(month_id)
        remaining = [e for e in entry.expenses if e.id != expense_id]
        if len(remaining) == len(entry.expenses):
            raise ExpenseNotFoundError(f"Expense not found: {expense_id}")

        await self._write(
            "expense_removed",
            self._store.update_month(self._user_id, entry.model_copy(update={"expenses": remaining})),
            month_id=month_id,
            expense_id=expense_id,
        )
        return True

    async def seed(self, data: CashFlowData) -> None:
        """Load a prepared ledger (e.g. demo data) into an empty store."""
        profile = await self._store.get_profile(self._user_id) or UserProfile()
        await self._store.save_profile(
            self._user_id, profile.model_copy(update={"initial_capital": data.initial_capital})
        )
        for entry in data.months:
            await self._store.add_month(self._user_id, entry)
        self._logger.info("ledger_seeded", months=len(data.months))
