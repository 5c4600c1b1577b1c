"""Input models for tax return computation.

Callers hand the calculators a TaxReturnFacts built fresh per request. Monetary
inputs are clamped at this boundary: upstream forms may submit partial data,
so negative or blank amounts become zero instead of failing the request.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.tax.filing_status import FilingStatus

ZERO = Decimal("0")


class IncomeCategory(str, Enum):
    """Category of an income entry or mapped document."""

    W2_WAGES = "W2_WAGES"
    INTEREST = "INTEREST"
    DIVIDENDS = "DIVIDENDS"
    BUSINESS_INCOME = "BUSINESS_INCOME"
    CAPITAL_GAINS = "CAPITAL_GAINS"
    OTHER_INCOME = "OTHER_INCOME"
    UNEMPLOYMENT = "UNEMPLOYMENT"
    RETIREMENT_DISTRIBUTIONS = "RETIREMENT_DISTRIBUTIONS"
    SOCIAL_SECURITY = "SOCIAL_SECURITY"


class DeductionCategory(str, Enum):
    """Category of an itemized deduction entry."""

    MORTGAGE_INTEREST = "MORTGAGE_INTEREST"
    STATE_LOCAL_TAXES = "STATE_LOCAL_TAXES"
    CHARITABLE_CONTRIBUTIONS = "CHARITABLE_CONTRIBUTIONS"
    MEDICAL_EXPENSES = "MEDICAL_EXPENSES"
    BUSINESS_EXPENSES = "BUSINESS_EXPENSES"
    STUDENT_LOAN_INTEREST = "STUDENT_LOAN_INTEREST"
    IRA_CONTRIBUTIONS = "IRA_CONTRIBUTIONS"
    OTHER_DEDUCTIONS = "OTHER_DEDUCTIONS"


class EmploymentType(str, Enum):
    """How the taxpayer earns income."""

    W2 = "W2"
    SELF_EMPLOYED = "SELF_EMPLOYED"
    BOTH = "BOTH"
    RETIRED = "RETIRED"


def clamp_amount(value: object) -> object:
    """Clamp a raw monetary input to a non-negative Decimal.

    None and blank strings become zero; negative numbers become zero.
    Anything that is not numeric is passed through for pydantic to reject.
    """
    if value is None:
        return ZERO
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            value = Decimal(text)
        except InvalidOperation:
            return text
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if not amount.is_finite():
            return value
        return amount if amount > 0 else ZERO
    return value


class Dependent(BaseModel):
    """A dependent on the return, used only as input to credit calculation.

    Accepts the camelCase flags sent by the filing UI.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = None
    relationship: str | None = None
    qualifies_for_ctc: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "qualifies_for_ctc", "qualifiesForCTC", "qualifiesForChildTaxCredit"
        ),
    )
    qualifies_for_eitc: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "qualifies_for_eitc", "qualifiesForEITC", "qualifiesForEarnedIncomeCredit"
        ),
    )


class IncomeEntry(BaseModel):
    """One income line on a return, entered manually or accepted from a document."""

    model_config = ConfigDict(populate_by_name=True)

    category: IncomeCategory = Field(
        default=IncomeCategory.OTHER_INCOME,
        validation_alias=AliasChoices("category", "incomeType"),
    )
    amount: Decimal = ZERO
    federal_tax_withheld: Decimal = Field(
        default=ZERO,
        validation_alias=AliasChoices("federal_tax_withheld", "federalTaxWithheld"),
    )
    description: str | None = None

    @field_validator("amount", "federal_tax_withheld", mode="before")
    @classmethod
    def clamp_amounts(cls, value: object) -> object:
        """Negative or blank amounts are clamped to zero."""
        return clamp_amount(value)


class DeductionEntry(BaseModel):
    """One itemized deduction line on a return."""

    model_config = ConfigDict(populate_by_name=True)

    category: DeductionCategory = Field(
        default=DeductionCategory.OTHER_DEDUCTIONS,
        validation_alias=AliasChoices("category", "deductionType"),
    )
    amount: Decimal = ZERO
    description: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def clamp_amount_input(cls, value: object) -> object:
        return clamp_amount(value)


class TaxReturnFacts(BaseModel):
    """Everything the aggregator needs to compute one return.

    Attributes:
        gross_income: Total income before deductions.
        filing_status: Filing status (any spelling accepted by FilingStatus.parse).
        itemized_deductions: Total of itemized deduction entries.
        dependents: Dependents claimed on the return.
        total_withholdings: Federal income tax already withheld.
        tax_year: Tax year; None uses the configured default.
        age: Taxpayer age, passed through to advice context.
        employment_type: Employment type, passed through to advice context.
        has_business_income: Taxpayer reports business income.
        has_investment_income: Taxpayer reports investment income.
        has_retirement_accounts: Taxpayer holds retirement accounts.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    gross_income: Decimal = Field(
        default=ZERO, validation_alias=AliasChoices("gross_income", "grossIncome", "totalIncome")
    )
    filing_status: FilingStatus = Field(
        validation_alias=AliasChoices("filing_status", "filingStatus")
    )
    itemized_deductions: Decimal = Field(
        default=ZERO,
        validation_alias=AliasChoices("itemized_deductions", "itemizedDeductions"),
    )
    dependents: tuple[Dependent, ...] = ()
    total_withholdings: Decimal = Field(
        default=ZERO,
        validation_alias=AliasChoices("total_withholdings", "totalWithholdings"),
    )
    tax_year: int | None = Field(
        default=None, validation_alias=AliasChoices("tax_year", "taxYear")
    )
    age: int | None = Field(default=None, ge=0)
    employment_type: EmploymentType | None = Field(
        default=None, validation_alias=AliasChoices("employment_type", "employmentType")
    )
    has_business_income: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_business_income", "hasBusinessIncome"),
    )
    has_investment_income: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_investment_income", "hasInvestmentIncome"),
    )
    has_retirement_accounts: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_retirement_accounts", "hasRetirementAccounts"),
    )

    @field_validator("gross_income", "itemized_deductions", "total_withholdings", mode="before")
    @classmethod
    def clamp_monetary_inputs(cls, value: object) -> object:
        """Negative or blank amounts are clamped to zero."""
        return clamp_amount(value)

    @field_validator("filing_status", mode="before")
    @classmethod
    def normalize_filing_status(cls, value: object) -> FilingStatus:
        """Accept any spelling of a filing status; unknown values are fatal."""
        return FilingStatus.parse(value)  # type: ignore[arg-type]

    @field_validator("dependents", mode="before")
    @classmethod
    def default_dependents(cls, value: object) -> object:
        """A missing dependents list means no dependents."""
        return () if value is None else value
