"""
Tests for input validation.

Validation never fixes input; it only reports issues.
"""

import pytest

from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.validation import EntryValidator, parse_amount


@pytest.fixture
def validator():
    return EntryValidator()


class TestParseAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("1.234,50", 1234.5),
        ("1,234.50", 1234.5),
        ("12,5", 12.5),
        ("12.5", 12.5),
        ("€ 100", 100.0),
        (" 45 ", 45.0),
        (42, 42.0),
        (19.99, 19.99),
        ("-30", -30.0),
    ])
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, float("nan"), "inf"])
    def test_invalid(self, raw):
        assert parse_amount(raw) is None

    @pytest.mark.parametrize("raw", ["1.234,5.6", "1,2.3,4", "1,2,3", "1.234.567,8,9"])
    def test_mixed_separators_rejected(self, raw):
        assert parse_amount(raw) is None

    def test_mixed_separators_reported_as_invalid_format(self, validator):
        result = validator.validate_expense("Cibo", "1.234,5.6")
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_format"


class TestExpenseValidation:
    """Tests for expense checks."""

    def test_valid_expense(self, validator):
        result = validator.validate_expense("Cibo", "50")
        assert result.is_valid
        assert result.issues == []

    def test_blank_category(self, validator):
        result = validator.validate_expense("  ", 50)
        assert not result.is_valid
        assert result.issues[0].field == "category"

    @pytest.mark.parametrize("amount", [0, -5, "0,00"])
    def test_amount_must_be_positive(self, validator, amount):
        result = validator.validate_expense("Cibo", amount)
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_value"

    def test_non_numeric_amount(self, validator):
        result = validator.validate_expense("Cibo", "abc")
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_format"
        assert result.issues[0].suggested_fix

    def test_large_amount_is_only_a_warning(self, validator):
        result = validator.validate_expense("Affitto", 250_000)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_both_problems_reported(self, validator):
        result = validator.validate_expense("", "abc")
        assert result.error_count == 2


class TestOtherValidation:

    def test_zero_salary_allowed(self, validator):
        assert validator.validate_salary("net_salary", 0).is_valid

    def test_negative_salary_rejected(self, validator):
        result = validator.validate_salary("net_salary", -1)
        assert not result.is_valid
        assert "Net salary" in result.error_messages()[0]

    def test_category_name(self, validator):
        assert validator.validate_category_name("Palestra").is_valid
        assert not validator.validate_category_name("   ").is_valid
        assert not validator.validate_category_name("x" * 101).is_valid

    def test_month(self, validator):
        assert validator.validate_month(11, 2025).is_valid
        assert not validator.validate_month(12, 2025).is_valid
        assert not validator.validate_month(0, 0).is_valid


class TestPlanValidation:

    def test_default_plan_valid(self, validator):
        result = validator.validate_plan(InvestmentPlan())
        assert result.is_valid
        assert result.warnings == []

    @pytest.mark.parametrize("years", [0, -1, 101])
    def test_horizon_out_of_range(self, validator, years):
        result = validator.validate_plan(InvestmentPlan(years_to_simulate=years))
        assert not result.is_valid

    def test_negative_roi_allowed(self, validator):
        assert validator.validate_plan(InvestmentPlan(annual_roi=-3)).is_valid

    def test_extreme_roi_warns(self, validator):
        result = validator.validate_plan(InvestmentPlan(annual_roi=80))
        assert result.is_valid
        assert result.warnings


class TestSummary:

    def test_all_passed(self, validator):
        result = validator.validate_expense("Cibo", 10)
        assert "All checks passed" in validator.get_user_friendly_summary(result)

    def test_lists_errors_and_warnings(self, validator):
        result = validator.validate_expense("", 250_000)
        summary = validator.get_user_friendly_summary(result)
        assert "Please choose a category" in summary
        assert "unusually high" in summary
