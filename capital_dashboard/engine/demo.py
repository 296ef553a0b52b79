"""
Demo Ledger Generator

Anonymous visitors get a locally generated ledger so every page has
something to show. Nothing generated here is ever persisted remotely.

The generator follows a simple household pattern:
- fixed rent, variable food, bills that are higher in winter
- a summer bonus in June and a 13th-month salary in December
- vacations in July/August, gifts in December, occasional extras

Pass a seed to get the same ledger every time (used by tests).
"""

import math
import random
from typing import Optional

from pydantic import BaseModel, Field

from capital_dashboard.engine.ledger import recalculate
from capital_dashboard.models.ledger import CashFlowData, Expense, MonthEntry
from capital_dashboard.utils.formatting import CATEGORY_COLORS


class DemoConfig(BaseModel):
    """Knobs for the generated ledger."""

    initial_capital: float = 5000.0
    base_net_salary: float = Field(default=2200.0, ge=0)
    base_gross_salary: float = Field(default=3100.0, ge=0)
    months_to_generate: int = Field(default=12, ge=0)
    start_year: int = 2025


WINTER_MONTHS = {0, 1, 11}
HEALTHCARE_MONTHS = {1, 4, 9}
SHOPPING_MONTHS = {2, 3, 8, 9}
VACATION_MONTHS = {6, 7}
JUNE, DECEMBER = 5, 11


def _draw(rng: random.Random, low: float, spread: float) -> float:
    """Whole-number amount in [low, low + spread]."""
    return float(math.floor(low + rng.random() * spread + 0.5))


def _expense(category: str, amount: float, color_index: int) -> Expense:
    return Expense(category=category, amount=amount, color=CATEGORY_COLORS[color_index])


def _demo_month(
    index: int,
    config: DemoConfig,
    rng: random.Random,
) -> MonthEntry:
    month = index % 12
    year = config.start_year + index // 12

    net_salary = config.base_net_salary
    gross_salary = config.base_gross_salary
    if month == DECEMBER:
        net_salary += 2000
        gross_salary += 2800
    elif month == JUNE:
        net_salary += 800
        gross_salary += 1100

    bills = _draw(rng, 180, 70) if month in WINTER_MONTHS else _draw(rng, 120, 50)
    expenses = [
        _expense("Affitto", 850.0, 0),
        _expense("Cibo", _draw(rng, 380, 140), 1),
        _expense("Bollette", bills, 2),
        _expense("Trasporti", _draw(rng, 90, 60), 3),
        _expense("Svago", _draw(rng, 150, 150), 4),
    ]

    if month in VACATION_MONTHS:
        expenses.append(_expense("Vacanze", _draw(rng, 600, 400), 5))
    if month == DECEMBER:
        expenses.append(_expense("Regali", _draw(rng, 300, 300), 6))
    if month in HEALTHCARE_MONTHS:
        expenses.append(_expense("Salute", _draw(rng, 80, 120), 7))
    if month in SHOPPING_MONTHS:
        expenses.append(_expense("Abbigliamento", _draw(rng, 100, 200), 5))
    if rng.random() > 0.4:
        expenses.append(_expense("Ristoranti", _draw(rng, 80, 120), 6))

    return MonthEntry(
        month=month,
        year=year,
        net_salary=net_salary,
        gross_salary=gross_salary,
        expenses=expenses,
    )


def generate_demo_cash_flow(
    config: Optional[DemoConfig] = None,
    seed: Optional[int] = None,
) -> CashFlowData:
    """
    Generate a recalculated demo ledger.

    Args:
        config: Generator settings (defaults if None)
        seed: Random seed; None gives a different ledger every call

    Returns:
        CashFlowData with `months_to_generate` consecutive months
    """
    config = config or DemoConfig()
    rng = random.Random(seed)

    months = [_demo_month(i, config, rng) for i in range(config.months_to_generate)]

    return CashFlowData(
        initial_capital=config.initial_capital,
        months=recalculate(months, config.initial_capital),
    )
