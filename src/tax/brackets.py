"""Progressive bracket tax computation.

Pure functions over the tax-year tables in `src/tax/tables/`:
- Federal tax liability using marginal brackets
- Per-bracket breakdown and effective rate
- Standard deduction and marginal rate lookups
- The shared rounding convention for monetary outputs

All monetary values use Decimal for precision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from src.tax.filing_status import FilingStatus
from src.tax.year_config import TaxBracket, get_tax_year_config

ZERO = Decimal("0")
CENT = Decimal("0.01")
DOLLAR = Decimal("1")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class BracketSlice:
    """Tax owed on the portion of income falling into one bracket.

    Attributes:
        lower_bound: Bracket floor.
        upper_bound: Bracket ceiling, or None for the top bracket.
        rate: Marginal rate as a fraction (e.g. Decimal("0.22")).
        taxed_amount: Portion of taxable income inside this bracket.
        tax_in_bracket: Tax on that portion, unrounded.
    """

    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal
    taxed_amount: Decimal
    tax_in_bracket: Decimal


@dataclass
class TaxResult:
    """Result of a bracket tax calculation.

    Attributes:
        taxable_income: Income the brackets were applied to (never negative).
        gross_tax: Tax before credits, rounded to cents.
        bracket_breakdown: One slice per bracket the income reached.
        effective_rate: Gross tax divided by taxable income, 4 places.
        marginal_rate: Rate of the highest bracket reached.
    """

    taxable_income: Decimal
    gross_tax: Decimal
    bracket_breakdown: list[BracketSlice] = field(default_factory=list)
    effective_rate: Decimal = ZERO
    marginal_rate: Decimal = ZERO


# =============================================================================
# Rounding
# =============================================================================


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents, half-up.

    Example:
        >>> round_currency(Decimal("10.005"))
        Decimal('10.01')
    """
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole_dollars(amount: Decimal) -> Decimal:
    """Round to whole dollars, half-up."""
    return Decimal(amount).quantize(DOLLAR, rounding=ROUND_HALF_UP)


def round_rate(rate: Decimal) -> Decimal:
    """Round a rate (fraction) to 4 decimal places, half-up."""
    return Decimal(rate).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)


# =============================================================================
# Lookups
# =============================================================================


def _brackets(filing_status: FilingStatus | str, tax_year: int | None) -> tuple[TaxBracket, ...]:
    status = FilingStatus.parse(filing_status)
    return get_tax_year_config(tax_year).brackets_for(status)


def get_standard_deduction(
    filing_status: FilingStatus | str, tax_year: int | None = None
) -> Decimal:
    """Get the standard deduction for a filing status and year.

    Args:
        filing_status: Filing status member or any accepted spelling.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        Standard deduction amount.

    Raises:
        UnknownFilingStatusError: If the filing status is not recognized.
        UnknownTaxYearError: If no table exists for the year.

    Example:
        >>> get_standard_deduction("single", 2024)
        Decimal('14600')
    """
    status = FilingStatus.parse(filing_status)
    return get_tax_year_config(tax_year).standard_deduction(status)


def get_marginal_rate(
    taxable_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int | None = None,
) -> Decimal:
    """Rate of the highest bracket the income reaches; 0 when income is 0."""
    income = max(Decimal(taxable_income), ZERO)
    rate = ZERO
    for bracket in _brackets(filing_status, tax_year):
        if income <= bracket.lower_bound:
            break
        rate = bracket.rate
    return rate


# =============================================================================
# Tax Calculation
# =============================================================================


def calculate_tax(
    taxable_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int | None = None,
) -> TaxResult:
    """Calculate federal income tax using marginal brackets.

    Brackets are walked in ascending order. Each bracket taxes the slice of
    income between its lower bound and min(income, upper bound); the walk
    stops at the first bracket whose lower bound the income does not exceed.

    Args:
        taxable_income: Income after deductions. Negative values are treated as 0.
        filing_status: Filing status member or any accepted spelling.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        TaxResult with gross tax, bracket breakdown, and rates.

    Raises:
        UnknownFilingStatusError: If the filing status is not recognized.
        UnknownTaxYearError: If no table exists for the year.

    Example:
        >>> result = calculate_tax(Decimal("60400"), "single", 2024)
        >>> result.gross_tax
        Decimal('8341.00')
    """
    income = max(Decimal(taxable_income), ZERO)
    total = ZERO
    breakdown: list[BracketSlice] = []

    for bracket in _brackets(filing_status, tax_year):
        if income <= bracket.lower_bound:
            break

        top = income if bracket.upper_bound is None else min(income, bracket.upper_bound)
        taxed_amount = top - bracket.lower_bound
        tax_in_bracket = taxed_amount * bracket.rate
        total += tax_in_bracket
        breakdown.append(
            BracketSlice(
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                taxed_amount=taxed_amount,
                tax_in_bracket=tax_in_bracket,
            )
        )

    gross_tax = round_currency(total)
    effective_rate = round_rate(gross_tax / income) if income > 0 else ZERO
    marginal_rate = breakdown[-1].rate if breakdown else ZERO

    return TaxResult(
        taxable_income=income,
        gross_tax=gross_tax,
        bracket_breakdown=breakdown,
        effective_rate=effective_rate,
        marginal_rate=marginal_rate,
    )


def compute_liability(
    taxable_income: Decimal,
    filing_status: FilingStatus | str,
    tax_year: int | None = None,
) -> Decimal:
    """Federal tax liability on taxable income, rounded to cents.

    Example:
        >>> compute_liability(Decimal("0"), "single", 2024)
        Decimal('0.00')
    """
    return calculate_tax(taxable_income, filing_status, tax_year).gross_tax
