"""Standard vs itemized deduction comparison, suggestions, and what-if scenarios.

Both deduction methods are computed in full and compared on final bracket
liability. The lower liability wins; a tie goes to the standard deduction.
Thresholds for the suggestion rules and the scenario ladder come from the
tax-year tables.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from src.tax.brackets import compute_liability, get_standard_deduction, round_rate
from src.tax.credits import count_ctc_children, count_eitc_children
from src.tax.filing_status import FilingStatus
from src.tax.models import Dependent
from src.tax.year_config import get_tax_year_config

ZERO = Decimal("0")

STANDARD = "standard"
ITEMIZED = "itemized"


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class DeductionComparison:
    """Side-by-side liability under each deduction method.

    Attributes:
        standard_deduction: Standard deduction for the filing status.
        itemized_deduction: Itemized deduction total supplied by the caller.
        standard_tax_liability: Bracket liability using the standard deduction.
        itemized_tax_liability: Bracket liability using itemized deductions.
        recommended_method: "standard" or "itemized".
        tax_savings: Absolute difference between the two liabilities.
        effective_standard_rate: Standard liability / AGI (fraction, 4 places).
        effective_itemized_rate: Itemized liability / AGI (fraction, 4 places).
    """

    standard_deduction: Decimal
    itemized_deduction: Decimal
    standard_tax_liability: Decimal
    itemized_tax_liability: Decimal
    recommended_method: str
    tax_savings: Decimal
    effective_standard_rate: Decimal
    effective_itemized_rate: Decimal

    @property
    def recommended_deduction(self) -> Decimal:
        if self.recommended_method == ITEMIZED:
            return self.itemized_deduction
        return self.standard_deduction

    @property
    def recommended_liability(self) -> Decimal:
        if self.recommended_method == ITEMIZED:
            return self.itemized_tax_liability
        return self.standard_tax_liability


@dataclass
class DeductionScenario:
    """One row of the what-if deduction ladder.

    Attributes:
        label: Short label ("Current", "+$1,000", ...).
        description: Human-readable description of the scenario.
        itemized_deductions: Itemized total assumed by the scenario.
        tax_liability: Liability under the recommended method for that total.
        savings: Baseline liability minus this scenario's liability.
    """

    label: str
    description: str
    itemized_deductions: Decimal
    tax_liability: Decimal
    savings: Decimal


def format_dollars(amount: Decimal) -> str:
    """Format an amount with thousands separators, dropping zero cents.

    Example:
        >>> format_dollars(Decimal("6600.00"))
        '6,600'
        >>> format_dollars(Decimal("1234.5"))
        '1,234.50'
    """
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"


# =============================================================================
# Comparison
# =============================================================================


def compare_deductions(
    agi: Decimal,
    filing_status: FilingStatus | str,
    itemized_total: Decimal,
    dependents: Iterable[Dependent] = (),
    tax_year: int | None = None,
) -> DeductionComparison:
    """Compare bracket liability under the standard and itemized deductions.

    Args:
        agi: Adjusted gross income.
        filing_status: Filing status member or any accepted spelling.
        itemized_total: Total itemized deductions. None or negative means 0.
        dependents: Dependents on the return. Accepted for call symmetry with
            the suggestion rules; credits do not change which method wins.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        DeductionComparison; ties recommend the standard deduction.

    Example:
        >>> result = compare_deductions(Decimal("75000"), "single", Decimal("8000"), tax_year=2024)
        >>> result.recommended_method
        'standard'
    """
    agi = Decimal(agi)
    status = FilingStatus.parse(filing_status)
    standard = get_standard_deduction(status, tax_year)
    itemized = max(Decimal(itemized_total or 0), ZERO)

    standard_liability = compute_liability(max(agi - standard, ZERO), status, tax_year)
    itemized_liability = compute_liability(max(agi - itemized, ZERO), status, tax_year)

    recommended = ITEMIZED if itemized_liability < standard_liability else STANDARD

    if agi > 0:
        standard_rate = round_rate(standard_liability / agi)
        itemized_rate = round_rate(itemized_liability / agi)
    else:
        standard_rate = itemized_rate = ZERO

    return DeductionComparison(
        standard_deduction=standard,
        itemized_deduction=itemized,
        standard_tax_liability=standard_liability,
        itemized_tax_liability=itemized_liability,
        recommended_method=recommended,
        tax_savings=abs(standard_liability - itemized_liability),
        effective_standard_rate=standard_rate,
        effective_itemized_rate=itemized_rate,
    )


# =============================================================================
# Suggestions
# =============================================================================


def generate_optimization_suggestions(
    comparison: DeductionComparison,
    agi: Decimal,
    filing_status: FilingStatus | str,
    dependents: Iterable[Dependent] = (),
    tax_year: int | None = None,
) -> list[str]:
    """Plain-language suggestions derived from a deduction comparison.

    Each rule is evaluated independently and in a fixed order, so several
    suggestions can apply at once.

    Args:
        comparison: Result of compare_deductions for the same return.
        agi: Adjusted gross income.
        filing_status: Filing status member or any accepted spelling.
        dependents: Dependents on the return.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        Ordered list of suggestion strings.
    """
    config = get_tax_year_config(tax_year)
    thresholds = config.optimizer
    status = FilingStatus.parse(filing_status)
    dependents = tuple(dependents)
    agi = Decimal(agi)
    suggestions: list[str] = []

    if comparison.recommended_method == ITEMIZED:
        suggestions.append(
            f"Itemizing deductions saves you ${format_dollars(comparison.tax_savings)} "
            "compared to the standard deduction"
        )
    elif comparison.tax_savings > 0:
        suggestions.append(
            f"The standard deduction saves you ${format_dollars(comparison.tax_savings)} "
            "compared to itemizing"
        )
    else:
        suggestions.append("Both deduction methods result in the same tax liability")

    gap = comparison.standard_deduction - comparison.itemized_deduction
    if comparison.recommended_method == STANDARD and 0 < gap < thresholds.close_to_itemizing_gap:
        suggestions.append(
            "You're close to benefiting from itemizing! "
            f"You need ${format_dollars(gap)} more in deductions to break even"
        )

    if status == FilingStatus.MARRIED_FILING_SEPARATELY:
        suggestions.append(
            "Consider whether filing jointly with your spouse would result in lower combined taxes"
        )

    ctc_children = count_ctc_children(dependents)
    if ctc_children > 0:
        potential = config.child_tax_credit_per_child * ctc_children
        suggestions.append(
            f"You may qualify for up to ${format_dollars(potential)} in Child Tax Credits"
        )

    eitc_children = count_eitc_children(dependents)
    if eitc_children > 0:
        suggestions.append(
            f"You may qualify for Earned Income Credit with {eitc_children} qualifying children"
        )

    if agi > thresholds.retirement_suggestion_agi:
        suggestions.append(
            "Consider maximizing retirement contributions to reduce taxable income"
        )
    if agi < thresholds.low_income_suggestion_agi:
        suggestions.append(
            "Look into the Earned Income Tax Credit and other low-income tax benefits"
        )

    return suggestions


# =============================================================================
# Scenarios
# =============================================================================


def generate_scenarios(
    agi: Decimal,
    filing_status: FilingStatus | str,
    current_itemized: Decimal,
    dependents: Iterable[Dependent] = (),
    tax_year: int | None = None,
) -> list[DeductionScenario]:
    """What-if ladder: liability if itemized deductions grew by fixed steps.

    The first scenario is the current return (savings 0). Each following
    scenario adds one increment from the tax-year table to the current
    itemized total and is compared independently against the baseline.

    Example:
        >>> rows = generate_scenarios(Decimal("75000"), "single", Decimal("8000"), tax_year=2024)
        >>> [row.label for row in rows]
        ['Current', '+$1,000', '+$2,500', '+$5,000', '+$10,000']
    """
    dependents = tuple(dependents)
    current = max(Decimal(current_itemized or 0), ZERO)
    increments = get_tax_year_config(tax_year).optimizer.scenario_increments

    baseline = compare_deductions(agi, filing_status, current, dependents, tax_year)
    base_liability = baseline.recommended_liability

    scenarios = [
        DeductionScenario(
            label="Current",
            description="Your current deductions",
            itemized_deductions=current,
            tax_liability=base_liability,
            savings=ZERO,
        )
    ]

    for increment in increments:
        itemized = current + increment
        comparison = compare_deductions(agi, filing_status, itemized, dependents, tax_year)
        amount = format_dollars(increment)
        scenarios.append(
            DeductionScenario(
                label=f"+${amount}",
                description=f"With ${amount} more in deductions",
                itemized_deductions=itemized,
                tax_liability=comparison.recommended_liability,
                savings=base_liability - comparison.recommended_liability,
            )
        )

    return scenarios
