"""
Cash Flow Ledger Models

These models define the schemas for the monthly ledger:
salary, categorized expenses and the derived running balance.

DESIGN DECISION: Amounts are plain floats.
The dashboard makes no precision guarantees beyond standard
floating-point arithmetic rounded to two decimals for display.

DESIGN DECISION: Expenses keep a COPY of their category's name and color.
There is no foreign key to the category; renaming or recoloring a category
later does not touch expenses that were already recorded.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from capital_dashboard.utils.formatting import CATEGORY_COLORS, generate_id, month_label


# =============================================================================
# CATEGORIES
# =============================================================================

class Category(BaseModel):
    """An expense category the user can pick when recording an expense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=generate_id,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (unique per user, case-insensitive)"
    )
    color: str = Field(
        ...,
        description="Display color, e.g. #ef4444"
    )
    is_default: bool = Field(
        default=False,
        description="Default categories cannot be removed"
    )


# (name, index into CATEGORY_COLORS)
DEFAULT_CATEGORY_SPECS = [
    ("Affitto", 0),
    ("Cibo", 1),
    ("Bollette", 2),
    ("Trasporti", 3),
    ("Svago", 4),
    ("Vacanze", 5),
    ("Regali", 6),
    ("Salute", 7),
    ("Abbigliamento", 5),
    ("Ristoranti", 6),
]


def default_categories() -> list[Category]:
    """Fresh default categories, each with a new ID."""
    return [
        Category(name=name, color=CATEGORY_COLORS[color_index], is_default=True)
        for name, color_index in DEFAULT_CATEGORY_SPECS
    ]


# =============================================================================
# LEDGER
# =============================================================================

class Expense(BaseModel):
    """
    A single expense line inside a month.

    `category` and `color` are snapshots taken when the expense was created.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=generate_id,
        description="Unique expense ID, never reused"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name at creation time"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Expense amount"
    )
    color: str = Field(
        default="#6b7280",
        description="Category color at creation time"
    )


class MonthEntry(BaseModel):
    """
    One month of the ledger.

    CRITICAL: `cumulative_capital` is DERIVED.
    It is overwritten every time the ledger is recalculated and must
    never be edited directly.
    """

    id: str = Field(
        default_factory=generate_id,
        description="Unique month ID"
    )
    month: int = Field(
        ...,
        ge=0,
        le=11,
        description="Month index, 0 = January"
    )
    year: int = Field(
        ...,
        ge=1,
        le=9999,
        description="Calendar year"
    )
    net_salary: float = Field(
        default=0.0,
        description="Net salary (the only income used in the balance)"
    )
    gross_salary: float = Field(
        default=0.0,
        description="Gross salary (informational only)"
    )
    expenses: list[Expense] = Field(default_factory=list)
    cumulative_capital: float = Field(
        default=0.0,
        description="Running balance up to and including this month"
    )

    @property
    def period(self) -> tuple[int, int]:
        """(year, month) key used for chronological ordering."""
        return (self.year, self.month)

    def label(self, locale: str = "it") -> str:
        """Human-readable month label, e.g. 'Gen 2025'."""
        return f"{month_label(self.month, locale)} {self.year}"


class UserProfile(BaseModel):
    """Per-user profile; holds the starting capital of the ledger."""
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(default="")
    display_name: Optional[str] = None
    initial_capital: float = Field(
        default=0.0,
        description="Capital before the first ledger month"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class CashFlowData(BaseModel):
    """The recalculated ledger as shown to the user."""

    initial_capital: float = 0.0
    months: list[MonthEntry] = Field(default_factory=list)

    @property
    def final_capital(self) -> float:
        """Cumulative capital of the last month (or the initial capital)."""
        if not self.months:
            return self.initial_capital
        return self.months[-1].cumulative_capital
