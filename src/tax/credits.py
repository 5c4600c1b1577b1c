"""Child Tax Credit and simplified Earned Income Credit.

The Earned Income Credit here is deliberately simplified: the credit phases in
at the table rate up to its maximum and drops to zero above the income limit.
There is no phase-out range.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from src.tax.brackets import round_whole_dollars
from src.tax.models import Dependent
from src.tax.year_config import get_tax_year_config

ZERO = Decimal("0")


@dataclass
class CreditItem:
    """Individual tax credit.

    Attributes:
        name: Name of the credit (e.g., "Child Tax Credit").
        amount: Credit amount in dollars.
        refundable: Whether the credit is refundable (can exceed tax liability).
        form: IRS form for claiming this credit.
    """

    name: str
    amount: Decimal
    refundable: bool
    form: str


@dataclass
class CreditsResult:
    """Result of credits evaluation.

    Attributes:
        child_tax_credit: Child Tax Credit amount.
        earned_income_credit: Earned Income Credit amount.
        credits: Credit items with a nonzero amount.
        total_credits: Sum of both credits.
    """

    child_tax_credit: Decimal
    earned_income_credit: Decimal
    credits: list[CreditItem]
    total_credits: Decimal


def count_ctc_children(dependents: Iterable[Dependent]) -> int:
    return sum(1 for dependent in dependents if dependent.qualifies_for_ctc)


def count_eitc_children(dependents: Iterable[Dependent]) -> int:
    return sum(1 for dependent in dependents if dependent.qualifies_for_eitc)


def child_tax_credit(dependents: Iterable[Dependent], tax_year: int | None = None) -> Decimal:
    """Flat per-child credit times the number of CTC-qualifying dependents.

    Example:
        >>> child_tax_credit([Dependent(qualifies_for_ctc=True)] * 2, 2024)
        Decimal('4000')
    """
    per_child = get_tax_year_config(tax_year).child_tax_credit_per_child
    return per_child * count_ctc_children(dependents)


def earned_income_credit(
    income: Decimal, dependents: Iterable[Dependent], tax_year: int | None = None
) -> Decimal:
    """Simplified Earned Income Credit.

    The qualifying-child count selects a table tier (capped at 3). Income above
    the tier's limit gets nothing; otherwise the credit is income times the
    phase-in rate, capped at the tier maximum and rounded to whole dollars.

    Args:
        income: Earned income (gross income is used as the proxy).
        dependents: Dependents on the return.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        Credit amount in whole dollars.

    Example:
        >>> earned_income_credit(Decimal("15000"), [], 2024)
        Decimal('632')
    """
    income = Decimal(income)
    if income <= 0:
        return ZERO

    tier = get_tax_year_config(tax_year).eitc_tier(count_eitc_children(dependents))
    if income > tier.income_limit:
        return ZERO

    return round_whole_dollars(min(income * tier.phase_in_rate, tier.max_credit))


def evaluate_credits(
    income: Decimal, dependents: Iterable[Dependent], tax_year: int | None = None
) -> CreditsResult:
    """Evaluate the Child Tax Credit and Earned Income Credit.

    Args:
        income: Gross income used for the Earned Income Credit.
        dependents: Dependents on the return.
        tax_year: Tax year (e.g., 2024). Defaults to the configured year.

    Returns:
        CreditsResult with both credits, their items, and the total.
    """
    dependents = tuple(dependents)
    ctc = child_tax_credit(dependents, tax_year)
    eitc = earned_income_credit(income, dependents, tax_year)

    credits: list[CreditItem] = []
    if ctc > 0:
        credits.append(
            CreditItem(
                name="Child Tax Credit",
                amount=ctc,
                refundable=False,
                form="Schedule 8812",
            )
        )
    if eitc > 0:
        credits.append(
            CreditItem(
                name="Earned Income Credit",
                amount=eitc,
                refundable=True,
                form="Schedule EIC",
            )
        )

    return CreditsResult(
        child_tax_credit=ctc,
        earned_income_credit=eitc,
        credits=credits,
        total_credits=ctc + eitc,
    )
