"""
In-Memory Document Store

The local fallback: used for anonymous visitors (demo data that lives
only as long as the session) and for tests.

Records are copied on the way in and on the way out, so callers can
never mutate stored state by holding on to a returned object.
"""

from typing import Optional

from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.models.ledger import Category, MonthEntry, UserProfile
from capital_dashboard.services.storage.interface import (
    DocumentStoreInterface,
    DuplicateError,
    NotFoundError,
)


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dict-backed implementation of the document store."""

    def __init__(self):
        super().__init__()
        # user_id -> {record_id -> record}; dicts keep insertion order
        self._months: dict[str, dict[str, MonthEntry]] = {}
        self._categories: dict[str, dict[str, Category]] = {}
        self._profiles: dict[str, UserProfile] = {}
        self._plans: dict[str, InvestmentPlan] = {}

    async def list_months(self, user_id: str) -> list[MonthEntry]:
        return [m.model_copy(deep=True) for m in self._months.get(user_id, {}).values()]

    async def add_month(self, user_id: str, entry: MonthEntry) -> bool:
        months = self._months.setdefault(user_id, {})
        if entry.id in months:
            raise DuplicateError(f"Month already exists: {entry.id}")
        months[entry.id] = entry.model_copy(deep=True)
        await self._publish_months(user_id)
        return True

    async def update_month(self, user_id: str, entry: MonthEntry) -> bool:
        months = self._months.get(user_id, {})
        if entry.id not in months:
            raise NotFoundError(f"Month not found: {entry.id}")
        months[entry.id] = entry.model_copy(deep=True)
        await self._publish_months(user_id)
        return True

    async def delete_month(self, user_id: str, month_id: str) -> bool:
        months = self._months.get(user_id, {})
        if months.pop(month_id, None) is None:
            return False
        await self._publish_months(user_id)
        return True

    async def list_categories(self, user_id: str) -> list[Category]:
        return [c.model_copy() for c in self._categories.get(user_id, {}).values()]

    async def add_category(self, user_id: str, category: Category) -> bool:
        categories = self._categories.setdefault(user_id, {})
        if category.id in categories:
            raise DuplicateError(f"Category already exists: {category.id}")
        categories[category.id] = category.model_copy()
        await self._publish_categories(user_id)
        return True

    async def update_category(self, user_id: str, category: Category) -> bool:
        categories = self._categories.get(user_id, {})
        if category.id not in categories:
            raise NotFoundError(f"Category not found: {category.id}")
        categories[category.id] = category.model_copy()
        await self._publish_categories(user_id)
        return True

    async def delete_category(self, user_id: str, category_id: str) -> bool:
        categories = self._categories.get(user_id, {})
        if categories.pop(category_id, None) is None:
            return False
        await self._publish_categories(user_id)
        return True

    async def replace_categories(self, user_id: str, categories: list[Category]) -> bool:
        self._categories[user_id] = {c.id: c.model_copy() for c in categories}
        await self._publish_categories(user_id)
        return True

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        profile = self._profiles.get(user_id)
        return profile.model_copy() if profile else None

    async def save_profile(self, user_id: str, profile: UserProfile) -> bool:
        self._profiles[user_id] = profile.model_copy()
        return True

    async def get_investment_plan(self, user_id: str) -> Optional[InvestmentPlan]:
        plan = self._plans.get(user_id)
        return plan.model_copy() if plan else None

    async def save_investment_plan(self, user_id: str, plan: InvestmentPlan) -> bool:
        self._plans[user_id] = plan.model_copy()
        return True
