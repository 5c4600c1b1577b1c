"""Prompt context for the narrative tax-advice generator.

The advice generator is an external text-completion call. This module only
assembles what it is told: the taxpayer profile, the computed return, the
deduction comparison, and any deduction entries, flattened into JSON-safe
primitives. Profile amounts are decimal strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from src.core.serialization import to_jsonable
from src.tax.calculator import EnhancedTaxCalculationResult, TaxCalculationResult
from src.tax.credits import count_ctc_children
from src.tax.models import DeductionEntry, TaxReturnFacts
from src.tax.optimizer import format_dollars
from src.tax.year_config import get_tax_year_config


@dataclass
class AdviceContext:
    """Everything the advice generator needs about one return."""

    tax_year: int
    profile: dict[str, Any]
    tax_summary: dict[str, Any] = field(default_factory=dict)
    deduction_comparison: dict[str, Any] | None = None
    suggestions: list[str] = field(default_factory=list)
    deduction_breakdown: list[dict[str, Any]] = field(default_factory=list)

    def to_prompt_context(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for prompt injection.

        Returns:
            Dictionary with all context formatted for prompt construction
        """
        return {
            "tax_year": self.tax_year,
            "profile": self.profile,
            "tax_summary": self.tax_summary,
            "deduction_comparison": self.deduction_comparison,
            "suggestions": self.suggestions,
            "deduction_breakdown": self.deduction_breakdown,
        }

    def profile_lines(self) -> list[str]:
        """Human-readable taxpayer profile lines for a prompt body."""
        profile = self.profile
        lines = [
            f"- Adjusted Gross Income: ${format_dollars(Decimal(profile['adjusted_gross_income']))}",
            f"- Filing Status: {profile['filing_status'].replace('_', ' ').title()}",
            "- Current Itemized Deductions: "
            f"${format_dollars(Decimal(profile['itemized_deductions']))}",
            f"- Number of Dependents: {profile['dependent_count']}",
            f"- Has Qualifying Children: {'Yes' if profile['has_qualifying_children'] else 'No'}",
        ]
        if not self.deduction_breakdown:
            lines.append("- No itemized deductions entered yet")
        for entry in self.deduction_breakdown:
            label = entry["category"].replace("_", " ").title()
            lines.append(f"- {label}: ${format_dollars(Decimal(entry['amount']))}")
        return lines


def build_advice_context(
    facts: TaxReturnFacts,
    result: TaxCalculationResult | None = None,
    deduction_entries: list[DeductionEntry] | None = None,
) -> AdviceContext:
    """Assemble advice prompt context from a return's facts and computed result.

    Args:
        facts: Taxpayer facts for the return.
        result: Computed return, basic or enhanced. Enhanced results also
            contribute the deduction comparison and suggestions.
        deduction_entries: Itemized deduction entries for the breakdown.

    Returns:
        AdviceContext whose to_prompt_context() is JSON-safe.
    """
    tax_year = facts.tax_year or get_tax_year_config().tax_year
    profile = {
        "adjusted_gross_income": str(facts.gross_income),
        "filing_status": facts.filing_status.value,
        "itemized_deductions": str(facts.itemized_deductions),
        "dependent_count": len(facts.dependents),
        "has_qualifying_children": count_ctc_children(facts.dependents) > 0,
        "age": facts.age,
        "employment_type": facts.employment_type.value if facts.employment_type else None,
        "has_business_income": facts.has_business_income,
        "has_investment_income": facts.has_investment_income,
        "has_retirement_accounts": facts.has_retirement_accounts,
    }

    context = AdviceContext(tax_year=tax_year, profile=profile)

    if result is not None:
        summary = to_jsonable(result)
        summary.pop("deduction_comparison", None)
        summary.pop("optimization_suggestions", None)
        context.tax_summary = summary

    if isinstance(result, EnhancedTaxCalculationResult):
        if result.deduction_comparison is not None:
            context.deduction_comparison = to_jsonable(result.deduction_comparison)
        context.suggestions = list(result.optimization_suggestions)

    for entry in deduction_entries or []:
        context.deduction_breakdown.append(
            {"category": entry.category.value, "amount": str(entry.amount)}
        )

    return context
