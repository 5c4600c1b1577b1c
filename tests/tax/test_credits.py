"""Tests for Child Tax Credit and simplified Earned Income Credit."""

from decimal import Decimal

import pytest

from src.tax.credits import (
    CreditsResult,
    child_tax_credit,
    earned_income_credit,
    evaluate_credits,
)
from src.tax.models import Dependent


def _children(count: int, ctc: bool = True, eitc: bool = True) -> list[Dependent]:
    return [Dependent(qualifies_for_ctc=ctc, qualifies_for_eitc=eitc) for _ in range(count)]


# =============================================================================
# Child Tax Credit
# =============================================================================


class TestChildTaxCredit:
    """Tests for child_tax_credit."""

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 5])
    def test_linear_in_qualifying_children(self, count: int) -> None:
        """$2,000 per qualifying child, no phase-out."""
        assert child_tax_credit(_children(count), 2024) == Decimal("2000") * count

    def test_non_qualifying_dependents_ignored(self) -> None:
        """Only dependents flagged for CTC count."""
        dependents = _children(2) + [Dependent(name="Parent", qualifies_for_ctc=False)]
        assert child_tax_credit(dependents, 2024) == Decimal("4000")

    def test_camel_case_flags_accepted(self) -> None:
        """Dependents built from UI payloads use camelCase flags."""
        dependents = [Dependent.model_validate({"qualifiesForCTC": True})]
        assert child_tax_credit(dependents, 2024) == Decimal("2000")


# =============================================================================
# Earned Income Credit
# =============================================================================


class TestEarnedIncomeCredit:
    """Tests for earned_income_credit."""

    def test_no_children_phase_in(self) -> None:
        """7.65% phase-in, rounded half-up to whole dollars."""
        assert earned_income_credit(Decimal("5000"), [], 2024) == Decimal("383")

    def test_no_children_capped_at_max(self) -> None:
        """Credit never exceeds the tier maximum."""
        assert earned_income_credit(Decimal("15000"), [], 2024) == Decimal("632")

    def test_income_at_limit_still_qualifies(self) -> None:
        """Income equal to the limit keeps the credit."""
        assert earned_income_credit(Decimal("18591"), [], 2024) == Decimal("632")

    def test_cliff_above_limit(self) -> None:
        """One dollar over the limit drops the credit to zero."""
        assert earned_income_credit(Decimal("18592"), [], 2024) == Decimal("0")
        assert earned_income_credit(Decimal("49085"), _children(1), 2024) == Decimal("0")

    @pytest.mark.parametrize(
        "children,income,expected",
        [
            (1, "10000", "3400"),
            (2, "10000", "4000"),
            (3, "10000", "4000"),
            (1, "20000", "4213"),
            (2, "30000", "6960"),
            (3, "30000", "7830"),
        ],
    )
    def test_tiers(self, children: int, income: str, expected: str) -> None:
        """Phase-in rate and maximum follow the child count."""
        assert earned_income_credit(Decimal(income), _children(children), 2024) == Decimal(
            expected
        )

    def test_child_count_capped_at_three(self) -> None:
        """Four or more children use the three-child tier."""
        assert earned_income_credit(Decimal("30000"), _children(5), 2024) == Decimal("7830")

    def test_zero_income(self) -> None:
        """No income, no credit."""
        assert earned_income_credit(Decimal("0"), _children(2), 2024) == Decimal("0")

    def test_only_eitc_flagged_children_count(self) -> None:
        """CTC-only dependents do not raise the EITC tier."""
        dependents = _children(2, eitc=False)
        assert earned_income_credit(Decimal("5000"), dependents, 2024) == Decimal("383")

    def test_2025_table(self) -> None:
        """The 2025 table carries its own maximums."""
        assert earned_income_credit(Decimal("15000"), [], 2025) == Decimal("649")


# =============================================================================
# Evaluation
# =============================================================================


class TestEvaluateCredits:
    """Tests for evaluate_credits."""

    def test_both_credits(self) -> None:
        """CTC and EITC are summed into total_credits."""
        result = evaluate_credits(Decimal("30000"), _children(2), 2024)

        assert isinstance(result, CreditsResult)
        assert result.child_tax_credit == Decimal("4000")
        assert result.earned_income_credit == Decimal("6960")
        assert result.total_credits == Decimal("10960")
        assert [c.name for c in result.credits] == ["Child Tax Credit", "Earned Income Credit"]
        assert result.credits[1].refundable is True

    def test_no_credits(self) -> None:
        """High income without children yields no credit items."""
        result = evaluate_credits(Decimal("150000"), [], 2024)
        assert result.credits == []
        assert result.total_credits == Decimal("0")
