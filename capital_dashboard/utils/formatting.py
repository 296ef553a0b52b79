"""
Display Formatting Helpers

Purely presentational helpers: month labels, currency and percentage
strings, display rounding and opaque identifiers.

DESIGN DECISION: Rounding lives here and nowhere else.
The engine carries full float precision and only rounds when a value
is turned into an output field or a display string.
"""

import math
from uuid import uuid4


# Predefined colors for expense categories
CATEGORY_COLORS = [
    "#ef4444",  # red
    "#f59e0b",  # amber
    "#10b981",  # emerald
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#f97316",  # orange
]

MONTH_LABELS = {
    "it": ["Gen", "Feb", "Mar", "Apr", "Mag", "Giu", "Lug", "Ago", "Set", "Ott", "Nov", "Dic"],
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}

DEFAULT_LOCALE = "it"


def month_label(index: int, locale: str = DEFAULT_LOCALE) -> str:
    """Short month name for a 0-based month index (wraps modulo 12)."""
    labels = MONTH_LABELS.get(locale, MONTH_LABELS[DEFAULT_LOCALE])
    return labels[index % 12]


def round2(value: float) -> float:
    """
    Round to two decimals, halves rounded up.

    Matches round(x * 100) / 100 with half-up semantics rather than
    Python's banker's rounding, so 0.125 becomes 0.13.
    """
    return math.floor(value * 100 + 0.5) / 100


def format_currency(amount: float, decimals: int = 0, symbol: str = "€") -> str:
    """
    Format an amount the Italian way: dot thousands, comma decimals.

    >>> format_currency(1234.5)
    '1.235\\xa0€'
    """
    scale = 10 ** decimals
    rounded = math.floor(abs(amount) * scale + 0.5) / scale
    formatted = f"{rounded:,.{decimals}f}"
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 and formatted.strip("0,.") else ""
    return f"{sign}{formatted}\u00a0{symbol}"


def format_percentage(value: float) -> str:
    """Fixed two-decimal percentage, e.g. 7 -> '7.00%'."""
    return f"{value:.2f}%"


def generate_id() -> str:
    """Generate an opaque unique identifier."""
    return str(uuid4())
