"""Tests for advice prompt context assembly."""

from decimal import Decimal

import orjson

from src.tax.advice import build_advice_context
from src.tax.calculator import compute_enhanced_return, compute_return
from src.tax.models import DeductionCategory, DeductionEntry, Dependent, TaxReturnFacts


def _facts(**overrides) -> TaxReturnFacts:
    values = {
        "gross_income": Decimal("100000"),
        "filing_status": "SINGLE",
        "itemized_deductions": Decimal("20000"),
        "tax_year": 2024,
        "age": 38,
    }
    values.update(overrides)
    return TaxReturnFacts(**values)


class TestBuildAdviceContext:
    """Tests for build_advice_context."""

    def test_profile_only(self) -> None:
        context = build_advice_context(_facts())

        assert context.tax_year == 2024
        assert context.profile["adjusted_gross_income"] == "100000"
        assert context.profile["filing_status"] == "SINGLE"
        assert context.profile["dependent_count"] == 0
        assert context.profile["has_qualifying_children"] is False
        assert context.profile["age"] == 38
        assert context.tax_summary == {}
        assert context.deduction_comparison is None

    def test_enhanced_result_adds_comparison_and_suggestions(self) -> None:
        facts = _facts()
        context = build_advice_context(facts, compute_enhanced_return(facts))

        assert context.tax_summary["deduction_method"] == "itemized"
        assert "deduction_comparison" not in context.tax_summary
        assert context.deduction_comparison["recommended_method"] == "itemized"
        assert context.suggestions == [
            "Itemizing deductions saves you $1,188 compared to the standard deduction"
        ]

    def test_basic_result_has_no_suggestions(self) -> None:
        facts = _facts()
        context = build_advice_context(facts, compute_return(facts))

        assert context.tax_summary["tax_liability"] == 12653.0
        assert context.suggestions == []

    def test_default_year_filled_in(self) -> None:
        context = build_advice_context(_facts(tax_year=None))
        assert context.tax_year == 2024

    def test_prompt_context_is_json_safe(self) -> None:
        facts = _facts(dependents=[Dependent(qualifies_for_ctc=True)])
        entries = [
            DeductionEntry(category=DeductionCategory.MORTGAGE_INTEREST, amount=Decimal("12000")),
            DeductionEntry(category=DeductionCategory.CHARITABLE_CONTRIBUTIONS, amount=8000),
        ]
        context = build_advice_context(facts, compute_enhanced_return(facts), entries)

        payload = orjson.loads(orjson.dumps(context.to_prompt_context()))
        assert payload["profile"]["has_qualifying_children"] is True
        assert payload["deduction_breakdown"] == [
            {"category": "MORTGAGE_INTEREST", "amount": "12000"},
            {"category": "CHARITABLE_CONTRIBUTIONS", "amount": "8000"},
        ]

    def test_profile_lines(self) -> None:
        entries = [DeductionEntry(category=DeductionCategory.STATE_LOCAL_TAXES, amount=10000)]
        lines = build_advice_context(_facts(), deduction_entries=entries).profile_lines()

        assert lines == [
            "- Adjusted Gross Income: $100,000",
            "- Filing Status: Single",
            "- Current Itemized Deductions: $20,000",
            "- Number of Dependents: 0",
            "- Has Qualifying Children: No",
            "- State Local Taxes: $10,000",
        ]

    def test_profile_lines_without_entries(self) -> None:
        lines = build_advice_context(_facts()).profile_lines()
        assert lines[-1] == "- No itemized deductions entered yet"
