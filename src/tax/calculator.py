"""Tax return aggregation.

Combines the bracket calculator, deduction selection, and credits into a full
return result: taxable income, liability, credits, refund or amount owed, and
effective and marginal rates.

Two entry points:
- compute_return: deduction = max(standard, itemized)
- compute_enhanced_return: deduction chosen by comparing final liabilities,
  with the comparison and optimization suggestions attached

All monetary values use Decimal for precision.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from src.core.logging import get_logger
from src.tax.brackets import (
    compute_liability,
    get_marginal_rate,
    get_standard_deduction,
    round_currency,
    round_rate,
)
from src.tax.credits import evaluate_credits
from src.tax.models import DeductionEntry, Dependent, IncomeEntry, TaxReturnFacts
from src.tax.optimizer import (
    ITEMIZED,
    STANDARD,
    DeductionComparison,
    compare_deductions,
    generate_optimization_suggestions,
)

logger = get_logger(__name__)

ZERO = Decimal("0")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class EntryTotals:
    """Totals of a return's income and deduction entries.

    Attributes:
        gross_income: Sum of income entry amounts.
        total_withholdings: Sum of federal tax withheld on income entries.
        itemized_deductions: Sum of deduction entry amounts.
    """

    gross_income: Decimal
    total_withholdings: Decimal
    itemized_deductions: Decimal


@dataclass
class TaxCalculationResult:
    """Computed tax return.

    Exactly one of refund_amount and amount_owed is nonzero, unless
    final_tax is zero, in which case both are zero.

    Attributes:
        gross_income: Total income.
        adjusted_gross_income: AGI (equal to gross income; no adjustments).
        standard_deduction: Standard deduction for the filing status.
        itemized_deduction: Itemized deductions supplied.
        deduction_method: "standard" or "itemized", whichever was applied.
        taxable_income: AGI minus the applied deduction, floored at 0.
        tax_liability: Bracket tax on taxable income.
        child_tax_credit: Child Tax Credit.
        earned_income_credit: Earned Income Credit.
        total_credits: Sum of credits.
        total_withholdings: Federal tax already withheld.
        final_tax: Liability minus credits minus withholdings (may be negative).
        refund_amount: -final_tax when negative, else 0.
        amount_owed: final_tax when positive, else 0.
        effective_rate: max(0, liability - credits) / gross income (fraction).
        marginal_rate: Rate of the highest bracket reached (fraction).
    """

    gross_income: Decimal
    adjusted_gross_income: Decimal
    standard_deduction: Decimal
    itemized_deduction: Decimal
    deduction_method: str
    taxable_income: Decimal
    tax_liability: Decimal
    child_tax_credit: Decimal
    earned_income_credit: Decimal
    total_credits: Decimal
    total_withholdings: Decimal
    final_tax: Decimal
    refund_amount: Decimal
    amount_owed: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal


@dataclass
class EnhancedTaxCalculationResult(TaxCalculationResult):
    """Computed return with the deduction comparison and suggestions attached."""

    deduction_comparison: DeductionComparison | None = None
    optimization_suggestions: list[str] = field(default_factory=list)


# =============================================================================
# Entry Aggregation
# =============================================================================


def aggregate_entries(
    income_entries: Iterable[IncomeEntry | dict[str, Any]] = (),
    deduction_entries: Iterable[DeductionEntry | dict[str, Any]] = (),
) -> EntryTotals:
    """Sum income and deduction entries into the return's monetary inputs.

    Entries may be models or plain dicts (validated on the way in, so negative
    or blank amounts count as 0).

    Example:
        >>> totals = aggregate_entries([{"amount": "50000", "federalTaxWithheld": "4000"}])
        >>> totals.gross_income, totals.total_withholdings
        (Decimal('50000'), Decimal('4000'))
    """
    gross_income = ZERO
    withholdings = ZERO
    itemized = ZERO

    for entry in income_entries:
        income = entry if isinstance(entry, IncomeEntry) else IncomeEntry.model_validate(entry)
        gross_income += income.amount
        withholdings += income.federal_tax_withheld

    for entry in deduction_entries:
        deduction = (
            entry if isinstance(entry, DeductionEntry) else DeductionEntry.model_validate(entry)
        )
        itemized += deduction.amount

    return EntryTotals(
        gross_income=gross_income,
        total_withholdings=withholdings,
        itemized_deductions=itemized,
    )


def build_tax_return_facts(
    filing_status: str,
    income_entries: Iterable[IncomeEntry | dict[str, Any]] = (),
    deduction_entries: Iterable[DeductionEntry | dict[str, Any]] = (),
    dependents: Iterable[Dependent | dict[str, Any]] = (),
    tax_year: int | None = None,
    **profile: Any,
) -> TaxReturnFacts:
    """Build TaxReturnFacts from a return's raw entry lists.

    Args:
        filing_status: Filing status in any accepted spelling.
        income_entries: Income entries (models or dicts).
        deduction_entries: Itemized deduction entries (models or dicts).
        dependents: Dependents (models or dicts with camelCase flags).
        tax_year: Tax year; None uses the configured default.
        **profile: Optional profile fields (age, employment_type, has_* flags).

    Returns:
        Frozen TaxReturnFacts ready for compute_return.
    """
    totals = aggregate_entries(income_entries, deduction_entries)
    return TaxReturnFacts(
        gross_income=totals.gross_income,
        filing_status=filing_status,
        itemized_deductions=totals.itemized_deductions,
        total_withholdings=totals.total_withholdings,
        dependents=tuple(dependents),
        tax_year=tax_year,
        **profile,
    )


# =============================================================================
# Return Computation
# =============================================================================


def _assemble(
    facts: TaxReturnFacts,
    standard: Decimal,
    deduction_method: str,
) -> dict[str, Any]:
    """Compute every result field for a chosen deduction method."""
    gross = facts.gross_income
    agi = gross
    itemized = facts.itemized_deductions
    deduction = itemized if deduction_method == ITEMIZED else standard

    taxable_income = max(agi - deduction, ZERO)
    liability = compute_liability(taxable_income, facts.filing_status, facts.tax_year)

    credits = evaluate_credits(gross, facts.dependents, facts.tax_year)
    withholdings = facts.total_withholdings

    final_tax = round_currency(liability - credits.total_credits - withholdings)
    refund = -final_tax if final_tax < 0 else ZERO
    owed = final_tax if final_tax > 0 else ZERO

    tax_after_credits = max(liability - credits.total_credits, ZERO)
    effective_rate = round_rate(tax_after_credits / gross) if gross > 0 else ZERO

    return {
        "gross_income": gross,
        "adjusted_gross_income": agi,
        "standard_deduction": standard,
        "itemized_deduction": itemized,
        "deduction_method": deduction_method,
        "taxable_income": taxable_income,
        "tax_liability": liability,
        "child_tax_credit": credits.child_tax_credit,
        "earned_income_credit": credits.earned_income_credit,
        "total_credits": credits.total_credits,
        "total_withholdings": withholdings,
        "final_tax": final_tax,
        "refund_amount": refund,
        "amount_owed": owed,
        "effective_rate": effective_rate,
        "marginal_rate": get_marginal_rate(taxable_income, facts.filing_status, facts.tax_year),
    }


def compute_return(facts: TaxReturnFacts) -> TaxCalculationResult:
    """Compute a tax return using the larger of the two deductions.

    Args:
        facts: Taxpayer facts for one return.

    Returns:
        TaxCalculationResult.

    Raises:
        UnknownTaxYearError: If no table exists for facts.tax_year.

    Example:
        >>> facts = TaxReturnFacts(gross_income=Decimal("75000"), filing_status="SINGLE",
        ...                        itemized_deductions=Decimal("8000"), tax_year=2024)
        >>> compute_return(facts).tax_liability
        Decimal('8341.00')
    """
    standard = get_standard_deduction(facts.filing_status, facts.tax_year)
    method = ITEMIZED if facts.itemized_deductions > standard else STANDARD

    result = TaxCalculationResult(**_assemble(facts, standard, method))
    logger.info(
        "tax_return_computed",
        mode="basic",
        filing_status=facts.filing_status.value,
        tax_year=facts.tax_year,
        deduction_method=method,
        taxable_income=str(result.taxable_income),
        final_tax=str(result.final_tax),
    )
    return result


def compute_enhanced_return(facts: TaxReturnFacts) -> EnhancedTaxCalculationResult:
    """Compute a tax return with the liability-minimizing deduction method.

    The deduction comparison decides the method; every dependent field
    (taxable income, liability, final tax, refund/owed, rates) is recomputed
    for that method, withholdings included.

    Args:
        facts: Taxpayer facts for one return.

    Returns:
        EnhancedTaxCalculationResult with comparison and suggestions.
    """
    comparison = compare_deductions(
        facts.gross_income,
        facts.filing_status,
        facts.itemized_deductions,
        facts.dependents,
        facts.tax_year,
    )
    suggestions = generate_optimization_suggestions(
        comparison,
        facts.gross_income,
        facts.filing_status,
        facts.dependents,
        facts.tax_year,
    )

    result = EnhancedTaxCalculationResult(
        **_assemble(facts, comparison.standard_deduction, comparison.recommended_method),
        deduction_comparison=comparison,
        optimization_suggestions=suggestions,
    )
    logger.info(
        "tax_return_computed",
        mode="enhanced",
        filing_status=facts.filing_status.value,
        tax_year=facts.tax_year,
        deduction_method=comparison.recommended_method,
        tax_savings=str(comparison.tax_savings),
        suggestion_count=len(suggestions),
        final_tax=str(result.final_tax),
    )
    return result
