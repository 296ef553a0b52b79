"""
Investment and Wealth Models

Schemas for the recurring investment plan, its month-by-month
projection and the combined liquid + invested wealth timeline.

Projection rows are ephemeral: they are recomputed on every read
and never persisted.
"""

from enum import Enum

from pydantic import BaseModel, Field


class WealthAlignment(str, Enum):
    """
    How ledger rows and projection rows are paired in the global view.

    POSITIONAL pairs row i with row i, regardless of calendar month.
    CALENDAR pairs rows that share the same (year, month).
    """
    POSITIONAL = "positional"
    CALENDAR = "calendar"


class InvestmentPlan(BaseModel):
    """
    Recurring-contribution plan; one per user, replaced wholesale on edit.

    `annual_roi` is a percentage (7 means 7% per year) and may be negative.
    """

    initial_balance: float = Field(
        default=0.0,
        ge=0,
        description="Portfolio value before the first contribution"
    )
    monthly_investment: float = Field(
        default=200.0,
        ge=0,
        description="Contribution added every month"
    )
    annual_roi: float = Field(
        default=7.0,
        description="Annual rate of return in percent"
    )
    years_to_simulate: int = Field(
        default=30,
        description="Projection horizon in years"
    )


DEFAULT_INVESTMENT_PLAN = InvestmentPlan()


class ProjectedMonth(BaseModel):
    """One simulated month of the investment projection."""

    month: str = Field(..., description="Display label, e.g. 'Gen'")
    month_index: int = Field(..., ge=0, le=11, description="0 = January")
    year: int
    total_invested: float = Field(
        ...,
        description="Contributions so far, including the initial balance"
    )
    portfolio_value: float = Field(
        ...,
        description="Compounded value, rounded to two decimals"
    )
    returns: float = Field(
        ...,
        description="portfolio_value - total_invested, rounded to two decimals"
    )


class InvestmentSummary(BaseModel):
    """Headline numbers of a projection (its final month)."""

    total_invested: float = 0.0
    portfolio_value: float = 0.0
    returns: float = 0.0
    return_percentage: float = 0.0


class GlobalMonth(BaseModel):
    """One row of the combined wealth timeline."""

    month: str
    year: int
    liquid_capital: float = 0.0
    invested_capital: float = 0.0
    total_wealth: float = 0.0


class WealthSummary(BaseModel):
    """Final position of the wealth timeline and its liquid/invested split."""

    liquid_capital: float = 0.0
    invested_capital: float = 0.0
    total_wealth: float = 0.0
    liquid_percentage: float = 0.0
    invested_percentage: float = 0.0
