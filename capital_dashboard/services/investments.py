"""
Investment Plan Service

Loads and saves the per-user investment plan and runs the projector on it.
A user without a saved plan gets the default plan, which is saved on first read.
"""

from typing import Optional

from capital_dashboard.engine.investment import project, summarize_projection
from capital_dashboard.log import get_logger
from capital_dashboard.models.investment import (
    DEFAULT_INVESTMENT_PLAN,
    InvestmentPlan,
    InvestmentSummary,
    ProjectedMonth,
)
from capital_dashboard.services.errors import InvalidInputError
from capital_dashboard.services.storage import DocumentStoreInterface, StorageError
from capital_dashboard.validation import EntryValidator


class InvestmentService:
    """Per-user investment plan operations."""

    def __init__(
        self,
        store: DocumentStoreInterface,
        user_id: str,
        validator: Optional[EntryValidator] = None,
    ):
        self._store = store
        self._user_id = user_id
        self._validator = validator or EntryValidator()
        self._logger = get_logger(__name__).bind(user_id=user_id)

    async def get_plan(self) -> InvestmentPlan:
        """Stored plan, or the default plan (saved for next time)."""
        plan = await self._store.get_investment_plan(self._user_id)
        if plan is not None:
            return plan

        plan = DEFAULT_INVESTMENT_PLAN.model_copy()
        try:
            await self._store.save_investment_plan(self._user_id, plan)
        except StorageError as e:
            self._logger.error("default_plan_failed", error=str(e))
            raise
        self._logger.info("default_plan_created")
        return plan

    async def update_plan(self, plan: InvestmentPlan) -> InvestmentPlan:
        """
        Replace the plan wholesale.

        Raises:
            InvalidInputError: Horizon not between 1 and 100 years
            StorageError: The save failed (logged first)
        """
        result = self._validator.validate_plan(plan)
        if not result.is_valid:
            raise InvalidInputError(
                f"Invalid investment plan: {'; '.join(result.error_messages())}", result
            )
        for warning in result.warnings:
            self._logger.warning("plan_warning", message=warning)

        try:
            await self._store.save_investment_plan(self._user_id, plan)
        except StorageError as e:
            self._logger.error("plan_save_failed", error=str(e))
            raise
        self._logger.info("plan_saved", **plan.model_dump())
        return plan

    async def projections(self, start_year: int, locale: str = "it") -> list[ProjectedMonth]:
        """Month-by-month projection of the current plan."""
        return project(await self.get_plan(), start_year, locale)

    async def summary(self, start_year: int) -> InvestmentSummary:
        return summarize_projection(await self.projections(start_year))
