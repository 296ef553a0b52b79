"""
Input Validation

DESIGN DECISION: Validation happens BEFORE the engine.
The ledger recalculator and the projector assume well-formed input;
everything the user types goes through here first.

Amounts may arrive as numbers or as raw strings from a form.
Strings accept both "1234.5" and the Italian "1.234,50".

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the input.
"""

from typing import Optional, Union

from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.models.validation import ValidationIssue, ValidationResult


RawAmount = Union[str, int, float, None]

# Above this a single expense is probably a typo (extra zero)
SUSPICIOUS_EXPENSE_AMOUNT = 100_000.0
MAX_YEARS_TO_SIMULATE = 100


def parse_amount(raw: RawAmount) -> Optional[float]:
    """
    Parse a user-entered amount; None if it is not a number.

    When both "," and "." appear, the last one is the decimal separator
    and the other may only group thousands before it. A lone comma is a
    decimal comma. Any other mix is rejected.

    >>> parse_amount("1.234,50")
    1234.5
    >>> parse_amount("1,234.50")
    1234.5
    >>> parse_amount("1.234,5.6") is None
    True
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = raw.strip().replace("€", "").replace(" ", "")
        if not text:
            return None
        if "," in text and "." in text:
            decimal = "," if text.rfind(",") > text.rfind(".") else "."
            thousands = "." if decimal == "," else ","
            whole, _, fraction = text.rpartition(decimal)
            if decimal in whole or thousands in fraction:
                return None
            text = whole.replace(thousands, "") + "." + fraction
        elif "," in text:
            # Italian decimal comma; more than one fails float()
            text = text.replace(",", ".")
        try:
            value = float(text)
        except ValueError:
            return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


class EntryValidator:
    """Validates expenses, salaries, categories and investment plans."""

    def _check_amount(
        self,
        field: str,
        raw: RawAmount,
        issues: list[ValidationIssue],
        allow_zero: bool = False,
    ) -> Optional[float]:
        value = parse_amount(raw)
        if value is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"{field.replace('_', ' ').capitalize()} must be a number",
                severity="error",
                suggested_fix="Enter a number such as 120 or 120,50",
            ))
            return None
        if value < 0 or (value == 0 and not allow_zero):
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=(
                    f"{field.replace('_', ' ').capitalize()} must be "
                    + ("zero or more" if allow_zero else "greater than zero")
                ),
                severity="error",
            ))
        return value

    def validate_expense(self, category_name: str, raw_amount: RawAmount) -> ValidationResult:
        """
        Check a new expense before it is added to a month.

        Checks:
        - Category name is not blank
        - Amount is a number greater than zero
        - Amount is not absurdly large (warning only)
        """
        issues = []

        if not category_name or not category_name.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please choose a category",
                severity="error",
            ))

        issues.extend(self.validate_expense_amount(raw_amount).issues)
        return ValidationResult(issues=issues)

    def validate_expense_amount(self, raw_amount: RawAmount) -> ValidationResult:
        """Amount must be a number greater than zero; very large amounts get a warning."""
        issues = []
        amount = self._check_amount("amount", raw_amount, issues)
        if amount is not None and amount > SUSPICIOUS_EXPENSE_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))
        return ValidationResult(issues=issues)

    def validate_salary(self, field: str, raw_amount: RawAmount) -> ValidationResult:
        """Salaries may be zero (unpaid month) but never negative."""
        issues = []
        self._check_amount(field, raw_amount, issues, allow_zero=True)
        return ValidationResult(issues=issues)

    def validate_category_name(self, name: str) -> ValidationResult:
        issues = []
        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Category name cannot be empty",
                severity="error",
            ))
        elif len(name.strip()) > 100:
            issues.append(ValidationIssue(
                field="name",
                issue_type="invalid_value",
                message="Category name is too long (max 100 characters)",
                severity="error",
            ))
        return ValidationResult(issues=issues)

    def validate_month(self, month: int, year: int) -> ValidationResult:
        issues = []
        if not 0 <= month <= 11:
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_value",
                message=f"Month index must be between 0 and 11, got {month}",
                severity="error",
            ))
        if not 1 <= year <= 9999:
            issues.append(ValidationIssue(
                field="year",
                issue_type="invalid_value",
                message=f"Year {year} is not a valid calendar year",
                severity="error",
            ))
        return ValidationResult(issues=issues)

    def validate_plan(self, plan: InvestmentPlan) -> ValidationResult:
        """
        Check an investment plan before it is saved.

        Negative ROI is allowed (it models a losing portfolio),
        but very large values in either direction get a warning.
        """
        issues = []

        if plan.years_to_simulate <= 0:
            issues.append(ValidationIssue(
                field="years_to_simulate",
                issue_type="invalid_value",
                message="Years to simulate must be at least 1",
                severity="error",
            ))
        elif plan.years_to_simulate > MAX_YEARS_TO_SIMULATE:
            issues.append(ValidationIssue(
                field="years_to_simulate",
                issue_type="invalid_value",
                message=f"Years to simulate cannot exceed {MAX_YEARS_TO_SIMULATE}",
                severity="error",
            ))

        if abs(plan.annual_roi) > 50:
            issues.append(ValidationIssue(
                field="annual_roi",
                issue_type="suspicious_value",
                message=f"Annual return of {plan.annual_roi}% is unusual",
                severity="warning",
                suggested_fix="Long-run market returns are usually between 2% and 10%",
            ))

        return ValidationResult(issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text for the UI listing errors first, then warnings."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"❌ {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"   💡 {issue.suggested_fix}")
        for warning in result.warnings:
            lines.append(f"⚠️ {warning}")
        return "\n".join(lines)
