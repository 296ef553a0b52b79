"""
Wealth Aggregation

Merges the recalculated ledger (liquid capital) and the investment
projection (invested capital) into one timeline.

DESIGN DECISION: Positional alignment is the default.
Row i pairs ledger entry i with projection row i, whatever their
calendar months are. When the ledger and the projection start in
different months the pairing is off; CALENDAR alignment pairs rows by
(year, month) instead and must be requested explicitly.
"""

from capital_dashboard.models.investment import (
    GlobalMonth,
    ProjectedMonth,
    WealthAlignment,
    WealthSummary,
)
from capital_dashboard.models.ledger import MonthEntry
from capital_dashboard.utils.formatting import month_label


def _combine_positional(
    ledger: list[MonthEntry],
    projection: list[ProjectedMonth],
    locale: str,
) -> list[GlobalMonth]:
    rows = []
    for i in range(max(len(ledger), len(projection))):
        entry = ledger[i] if i < len(ledger) else None
        projected = projection[i] if i < len(projection) else None

        liquid = entry.cumulative_capital if entry else 0.0
        invested = projected.portfolio_value if projected else 0.0

        if entry is not None:
            label, year = month_label(entry.month, locale), entry.year
        else:
            label, year = projected.month, projected.year

        rows.append(GlobalMonth(
            month=label,
            year=year,
            liquid_capital=liquid,
            invested_capital=invested,
            total_wealth=liquid + invested,
        ))
    return rows


def _combine_calendar(
    ledger: list[MonthEntry],
    projection: list[ProjectedMonth],
    locale: str,
) -> list[GlobalMonth]:
    liquid_by_period = {(entry.year, entry.month): entry.cumulative_capital for entry in ledger}
    invested_by_period = {(row.year, row.month_index): row.portfolio_value for row in projection}

    rows = []
    for year, month in sorted(set(liquid_by_period) | set(invested_by_period)):
        liquid = liquid_by_period.get((year, month), 0.0)
        invested = invested_by_period.get((year, month), 0.0)
        rows.append(GlobalMonth(
            month=month_label(month, locale),
            year=year,
            liquid_capital=liquid,
            invested_capital=invested,
            total_wealth=liquid + invested,
        ))
    return rows


def combine(
    ledger: list[MonthEntry],
    projection: list[ProjectedMonth],
    alignment: WealthAlignment = WealthAlignment.POSITIONAL,
    locale: str = "it",
) -> list[GlobalMonth]:
    """
    Build the combined liquid + invested wealth timeline.

    Args:
        ledger: Recalculated ledger (already in chronological order)
        projection: Output of the investment projector
        alignment: POSITIONAL (default) or CALENDAR pairing
        locale: Locale for month labels of ledger-derived rows

    Returns:
        One GlobalMonth per row. A side with no row contributes 0, and
        total_wealth is always liquid_capital + invested_capital.
    """
    if alignment == WealthAlignment.CALENDAR:
        return _combine_calendar(ledger, projection, locale)
    return _combine_positional(ledger, projection, locale)


def summarize_wealth(rows: list[GlobalMonth]) -> WealthSummary:
    """Final position and liquid/invested percentages (0 when total is not positive)."""
    if not rows:
        return WealthSummary()

    final = rows[-1]
    if final.total_wealth > 0:
        liquid_pct = final.liquid_capital / final.total_wealth * 100
        invested_pct = final.invested_capital / final.total_wealth * 100
    else:
        liquid_pct = invested_pct = 0.0

    return WealthSummary(
        liquid_capital=final.liquid_capital,
        invested_capital=final.invested_capital,
        total_wealth=final.total_wealth,
        liquid_percentage=liquid_pct,
        invested_percentage=invested_pct,
    )
