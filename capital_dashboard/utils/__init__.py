"""Formatting and identifier helpers."""

from capital_dashboard.utils.formatting import (
    CATEGORY_COLORS,
    MONTH_LABELS,
    format_currency,
    format_percentage,
    generate_id,
    month_label,
    round2,
)

__all__ = [
    "CATEGORY_COLORS",
    "MONTH_LABELS",
    "format_currency",
    "format_percentage",
    "generate_id",
    "month_label",
    "round2",
]
