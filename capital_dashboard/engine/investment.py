"""
Investment Projection

Simulates a recurring-contribution plan with flat monthly compounding.

Order of operations for every simulated month:
1. Add the monthly contribution to both accumulators
2. Apply one month of growth to the portfolio

Growth is applied AFTER the contribution, so each new contribution
earns a full month of return in the month it is made.

DESIGN DECISION: Only the output fields are rounded.
`portfolio_value` and `returns` are rounded to two decimals when a row
is recorded; the accumulators carry full precision into the next month.
Re-rounding every iteration would drift measurably over multi-decade
horizons.
"""

from capital_dashboard.models.investment import (
    InvestmentPlan,
    InvestmentSummary,
    ProjectedMonth,
)
from capital_dashboard.utils.formatting import month_label, round2


def monthly_rate(annual_roi: float) -> float:
    """Convert an annual percentage to a flat monthly rate (7 -> 0.005833...)."""
    return annual_roi / 12 / 100


def project(
    plan: InvestmentPlan,
    start_year: int,
    locale: str = "it",
) -> list[ProjectedMonth]:
    """
    Project a plan month by month, starting in January of `start_year`.

    Returns exactly `years_to_simulate * 12` rows; an empty list when
    the horizon is zero or negative. Negative ROI is allowed and
    simply decays the portfolio.
    """
    rate = monthly_rate(plan.annual_roi)
    total_months = plan.years_to_simulate * 12

    portfolio_value = plan.initial_balance
    total_invested = plan.initial_balance
    projections = []

    for i in range(total_months):
        total_invested += plan.monthly_investment
        portfolio_value += plan.monthly_investment

        portfolio_value = portfolio_value * (1 + rate)

        month_index = i % 12
        projections.append(ProjectedMonth(
            month=month_label(month_index, locale),
            month_index=month_index,
            year=start_year + i // 12,
            total_invested=total_invested,
            portfolio_value=round2(portfolio_value),
            returns=round2(portfolio_value - total_invested),
        ))

    return projections


def summarize_projection(projections: list[ProjectedMonth]) -> InvestmentSummary:
    """Final contributed capital, value and returns of a projection."""
    if not projections:
        return InvestmentSummary()

    final = projections[-1]
    return_percentage = (
        final.returns / final.total_invested * 100 if final.total_invested > 0 else 0.0
    )
    return InvestmentSummary(
        total_invested=final.total_invested,
        portfolio_value=final.portfolio_value,
        returns=final.returns,
        return_percentage=return_percentage,
    )
