"""Tests for deduction comparison, suggestions, and what-if scenarios."""

from decimal import Decimal

import pytest

from src.tax.models import Dependent
from src.tax.optimizer import (
    DeductionComparison,
    compare_deductions,
    format_dollars,
    generate_optimization_suggestions,
    generate_scenarios,
)


# =============================================================================
# Helpers
# =============================================================================


class TestFormatDollars:
    """Tests for dollar formatting in suggestion text."""

    def test_whole_dollars_drop_cents(self) -> None:
        assert format_dollars(Decimal("1188.00")) == "1,188"

    def test_fractional_amount_keeps_cents(self) -> None:
        assert format_dollars(Decimal("1234.5")) == "1,234.50"


# =============================================================================
# Comparison
# =============================================================================


class TestCompareDeductions:
    """Tests for compare_deductions."""

    def test_standard_wins_for_small_itemized(self) -> None:
        """SINGLE $75,000 with $8,000 itemized keeps the standard deduction."""
        result = compare_deductions(Decimal("75000"), "SINGLE", Decimal("8000"), tax_year=2024)

        assert result.recommended_method == "standard"
        assert result.standard_deduction == Decimal("14600")
        assert result.standard_tax_liability == Decimal("8341.00")

    def test_itemized_wins_when_larger(self) -> None:
        """$20,000 itemized beats the $14,600 standard deduction."""
        result = compare_deductions(Decimal("100000"), "SINGLE", Decimal("20000"), tax_year=2024)

        assert result.recommended_method == "itemized"
        assert result.itemized_tax_liability == Decimal("12653.00")
        assert result.standard_tax_liability == Decimal("13841.00")
        assert result.tax_savings == Decimal("1188.00")
        assert result.recommended_liability == Decimal("12653.00")

    def test_mfj_200000_standard_wins(self) -> None:
        """MFJ $200,000 with $25,000 itemized: standard $29,200 wins."""
        result = compare_deductions(
            Decimal("200000"), "MARRIED_FILING_JOINTLY", Decimal("25000"), tax_year=2024
        )

        assert result.recommended_method == "standard"
        assert result.standard_tax_liability == Decimal("27682.00")
        assert result.itemized_tax_liability == Decimal("28606.00")
        assert result.tax_savings == Decimal("924.00")

    def test_tie_recommends_standard(self) -> None:
        """Equal liabilities go to the standard deduction with zero savings."""
        result = compare_deductions(Decimal("75000"), "SINGLE", Decimal("14600"), tax_year=2024)

        assert result.recommended_method == "standard"
        assert result.tax_savings == Decimal("0")

    def test_effective_rates_are_fractions(self) -> None:
        """Effective rates are liability over AGI, four places."""
        result = compare_deductions(Decimal("75000"), "SINGLE", Decimal("8000"), tax_year=2024)
        assert result.effective_standard_rate == Decimal("0.1112")

    def test_zero_agi(self) -> None:
        """Zero AGI has zero liability and zero rates for both methods."""
        result = compare_deductions(Decimal("0"), "SINGLE", Decimal("0"), tax_year=2024)

        assert result.standard_tax_liability == Decimal("0")
        assert result.effective_standard_rate == Decimal("0")
        assert result.effective_itemized_rate == Decimal("0")

    def test_negative_itemized_treated_as_zero(self) -> None:
        """A negative itemized total is clamped to zero."""
        result = compare_deductions(Decimal("50000"), "SINGLE", Decimal("-100"), tax_year=2024)
        assert result.itemized_deduction == Decimal("0")


# =============================================================================
# Suggestions
# =============================================================================


def _suggest(agi: str, status: str, itemized: str, dependents=()) -> list[str]:
    comparison = compare_deductions(Decimal(agi), status, Decimal(itemized), dependents, 2024)
    return generate_optimization_suggestions(comparison, Decimal(agi), status, dependents, 2024)


class TestOptimizationSuggestions:
    """Tests for generate_optimization_suggestions."""

    def test_itemizing_saves(self) -> None:
        """Itemized win is reported with the savings amount and nothing else applies."""
        assert _suggest("100000", "SINGLE", "20000") == [
            "Itemizing deductions saves you $1,188 compared to the standard deduction"
        ]

    def test_close_to_itemizing(self) -> None:
        """A gap under $5,000 produces the exact amount still needed."""
        suggestions = _suggest("75000", "SINGLE", "12000")

        assert suggestions == [
            "The standard deduction saves you $572 compared to itemizing",
            "You're close to benefiting from itemizing! "
            "You need $2,600 more in deductions to break even",
        ]

    def test_gap_at_threshold_not_close(self) -> None:
        """A gap of exactly $5,000 is not close."""
        suggestions = _suggest("75000", "SINGLE", "9600")
        assert not any("close to benefiting" in s for s in suggestions)

    def test_tie_and_low_income(self) -> None:
        """Tied methods and AGI under $50,000 each produce a suggestion."""
        assert _suggest("5000", "SINGLE", "5000") == [
            "Both deduction methods result in the same tax liability",
            "Look into the Earned Income Tax Credit and other low-income tax benefits",
        ]

    def test_married_filing_separately(self) -> None:
        """MFS filers are pointed at joint filing."""
        assert _suggest("60000", "MARRIED_FILING_SEPARATELY", "0") == [
            "The standard deduction saves you $3,037 compared to itemizing",
            "Consider whether filing jointly with your spouse would result in lower combined taxes",
        ]

    def test_dependents_and_high_income(self) -> None:
        """Dependent and retirement rules fire together, in order."""
        dependents = [
            Dependent(qualifies_for_ctc=True, qualifies_for_eitc=True),
            Dependent(qualifies_for_ctc=True),
        ]
        suggestions = _suggest("150000", "MARRIED_FILING_JOINTLY", "0", dependents)

        assert suggestions[1:] == [
            "You may qualify for up to $4,000 in Child Tax Credits",
            "You may qualify for Earned Income Credit with 1 qualifying children",
            "Consider maximizing retirement contributions to reduce taxable income",
        ]

    def test_agi_exactly_100000_has_no_income_rule(self) -> None:
        """Thresholds are strict: $100,000 is not above $100,000."""
        suggestions = _suggest("100000", "SINGLE", "0")
        assert not any("retirement" in s for s in suggestions)

    def test_accepts_prebuilt_comparison(self) -> None:
        """Suggestions read only the comparison fields."""
        comparison = DeductionComparison(
            standard_deduction=Decimal("14600"),
            itemized_deduction=Decimal("14000"),
            standard_tax_liability=Decimal("1000"),
            itemized_tax_liability=Decimal("1100"),
            recommended_method="standard",
            tax_savings=Decimal("100"),
            effective_standard_rate=Decimal("0"),
            effective_itemized_rate=Decimal("0"),
        )
        suggestions = generate_optimization_suggestions(
            comparison, Decimal("60000"), "SINGLE", tax_year=2024
        )
        assert "You need $600 more in deductions to break even" in suggestions[1]


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """Tests for generate_scenarios."""

    @pytest.fixture
    def scenarios(self):
        return generate_scenarios(Decimal("75000"), "SINGLE", Decimal("8000"), tax_year=2024)

    def test_ladder_labels(self, scenarios) -> None:
        """Baseline plus one row per configured increment."""
        assert [s.label for s in scenarios] == [
            "Current",
            "+$1,000",
            "+$2,500",
            "+$5,000",
            "+$10,000",
        ]
        assert scenarios[0].description == "Your current deductions"
        assert scenarios[1].description == "With $1,000 more in deductions"

    def test_baseline_has_zero_savings(self, scenarios) -> None:
        """The current row is the recommended liability with no savings."""
        assert scenarios[0].tax_liability == Decimal("8341.00")
        assert scenarios[0].savings == Decimal("0")
        assert scenarios[0].itemized_deductions == Decimal("8000")

    def test_savings_only_once_itemizing_wins(self, scenarios) -> None:
        """Increments below the standard deduction save nothing."""
        assert [s.savings for s in scenarios[1:4]] == [Decimal("0")] * 3
        assert scenarios[4].itemized_deductions == Decimal("18000")
        assert scenarios[4].tax_liability == Decimal("7593.00")
        assert scenarios[4].savings == Decimal("748.00")

    def test_savings_never_negative(self, scenarios) -> None:
        """More deductions never cost more tax."""
        assert all(s.savings >= 0 for s in scenarios)
