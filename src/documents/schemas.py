"""Field schemas for each supported tax document type.

A schema lists, in output order, the fields a document type can contribute:
where each value comes from on the form, which Form 1040 line it feeds, and
the field names the recognition service may use for it. Supporting a new
document type means adding a schema to DOCUMENT_SCHEMAS.

Field name lookup ignores case, spaces, dots, hyphens, and underscores, so
"Box 1", "box1", and "BOX_1" are the same alias.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.documents.models import DocumentType
from src.tax.models import IncomeCategory


class FieldKind(str, Enum):
    """Whether a field holds an amount or free text."""

    MONEY = "money"
    TEXT = "text"


@dataclass(frozen=True)
class FieldSpec:
    """One mappable field of a document type.

    Attributes:
        id: Stable field id used in FormField.id.
        label: Display label.
        source: Location on the source document.
        form_line: Form 1040 line (or schedule) fed by the value; None for
            informational fields.
        aliases: Field names the recognition service may use, in priority order.
        kind: MONEY fields are emitted only when positive; TEXT when non-blank.
        ocr_fallback: Recover the value from raw text when the structured
            value is missing.
    """

    id: str
    label: str
    source: str
    form_line: str | None
    aliases: tuple[str, ...]
    kind: FieldKind = FieldKind.MONEY
    ocr_fallback: bool = False


@dataclass(frozen=True)
class DocumentSchema:
    """Mapping rules for one document type.

    Attributes:
        document_type: Document type the schema applies to.
        income_category: Category of the resulting TaxDocumentMapping.
        fields: Field specs in output order.
        signature_fields: Field ids whose presence identifies this type when
            a generic 1099 does not name its subtype.
    """

    document_type: DocumentType
    income_category: IncomeCategory
    fields: tuple[FieldSpec, ...]
    signature_fields: tuple[str, ...] = ()

    def field(self, field_id: str) -> FieldSpec:
        for spec in self.fields:
            if spec.id == field_id:
                return spec
        raise KeyError(field_id)


def normalize_key(name: str) -> str:
    """Collapse a field name for alias comparison."""
    return re.sub(r"[\s._\-]", "", name).lower()


def lookup_field(fields: dict[str, Any], aliases: tuple[str, ...]) -> Any:
    """Value of the first alias present with a non-blank value, else None."""
    index = {normalize_key(key): value for key, value in fields.items()}
    for alias in aliases:
        value = index.get(normalize_key(alias))
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def _federal_withholding(box: str, form_line: str) -> FieldSpec:
    return FieldSpec(
        id="federal_tax_withheld",
        label=f"Federal Tax Withheld ({box})",
        source=f"{box} - Federal income tax withheld",
        form_line=form_line,
        aliases=(
            "federalTaxWithheld",
            "federalIncomeTaxWithheld",
            f"box{box.split()[-1]}",
        ),
    )


_PAYER_NAME = FieldSpec(
    id="payer_name",
    label="Payer Name",
    source="Payer information",
    form_line=None,
    aliases=("payerName", "Payer.Name"),
    kind=FieldKind.TEXT,
)


# =============================================================================
# Schemas
# =============================================================================

W2_SCHEMA = DocumentSchema(
    document_type=DocumentType.W2,
    income_category=IncomeCategory.W2_WAGES,
    fields=(
        FieldSpec(
            id="wages",
            label="Wages (Box 1)",
            source="Box 1 - Wages, tips, other compensation",
            form_line="Form 1040 Line 1",
            aliases=(
                "wages",
                "wagesAndTips",
                "wagesTipsOtherCompensation",
                "box1",
            ),
            ocr_fallback=True,
        ),
        FieldSpec(
            id="federal_tax_withheld",
            label="Federal Tax Withheld (Box 2)",
            source="Box 2 - Federal income tax withheld",
            form_line="Form 1040 Line 25a",
            aliases=(
                "federalTaxWithheld",
                "federalIncomeTaxWithheld",
                "box2",
            ),
        ),
        FieldSpec(
            id="social_security_wages",
            label="Social Security Wages (Box 3)",
            source="Box 3 - Social security wages",
            form_line=None,
            aliases=("socialSecurityWages", "box3"),
        ),
        FieldSpec(
            id="medicare_wages",
            label="Medicare Wages (Box 5)",
            source="Box 5 - Medicare wages and tips",
            form_line=None,
            aliases=("medicareWages", "medicareWagesAndTips", "box5"),
        ),
        FieldSpec(
            id="employer_name",
            label="Employer Name",
            source="Employer information",
            form_line=None,
            aliases=("employerName", "Employer.Name"),
            kind=FieldKind.TEXT,
        ),
        FieldSpec(
            id="employer_ein",
            label="Employer EIN",
            source="Employer identification number",
            form_line=None,
            aliases=("employerEIN", "Employer.IdNumber"),
            kind=FieldKind.TEXT,
        ),
    ),
)

FORM_1099_INT_SCHEMA = DocumentSchema(
    document_type=DocumentType.FORM_1099_INT,
    income_category=IncomeCategory.INTEREST,
    fields=(
        FieldSpec(
            id="interest_income",
            label="Interest Income (Box 1)",
            source="Box 1 - Interest income",
            form_line="Form 1040 Line 2b",
            aliases=("interestIncome",),
        ),
        _federal_withholding("Box 4", "Form 1040 Line 25b"),
        _PAYER_NAME,
        FieldSpec(
            id="payer_tin",
            label="Payer TIN",
            source="Payer identification number",
            form_line=None,
            aliases=("payerTIN", "Payer.TIN"),
            kind=FieldKind.TEXT,
        ),
    ),
    signature_fields=("interest_income",),
)

FORM_1099_DIV_SCHEMA = DocumentSchema(
    document_type=DocumentType.FORM_1099_DIV,
    income_category=IncomeCategory.DIVIDENDS,
    fields=(
        FieldSpec(
            id="ordinary_dividends",
            label="Ordinary Dividends (Box 1a)",
            source="Box 1a - Ordinary dividends",
            form_line="Form 1040 Line 3b",
            aliases=("ordinaryDividends", "totalOrdinaryDividends"),
        ),
        FieldSpec(
            id="qualified_dividends",
            label="Qualified Dividends (Box 1b)",
            source="Box 1b - Qualified dividends",
            form_line="Form 1040 Line 3a",
            aliases=("qualifiedDividends",),
        ),
        FieldSpec(
            id="capital_gain_distributions",
            label="Capital Gain Distributions (Box 2a)",
            source="Box 2a - Total capital gain distributions",
            form_line="Form 1040 Line 7",
            aliases=("totalCapitalGain", "capitalGainDistributions"),
        ),
        _federal_withholding("Box 4", "Form 1040 Line 25b"),
        _PAYER_NAME,
    ),
    signature_fields=("ordinary_dividends", "qualified_dividends", "capital_gain_distributions"),
)

FORM_1099_MISC_SCHEMA = DocumentSchema(
    document_type=DocumentType.FORM_1099_MISC,
    income_category=IncomeCategory.OTHER_INCOME,
    fields=(
        FieldSpec(
            id="rents",
            label="Rents (Box 1)",
            source="Box 1 - Rents",
            form_line="Schedule E",
            aliases=("rents",),
        ),
        FieldSpec(
            id="royalties",
            label="Royalties (Box 2)",
            source="Box 2 - Royalties",
            form_line="Schedule E",
            aliases=("royalties",),
        ),
        FieldSpec(
            id="other_income",
            label="Other Income (Box 3)",
            source="Box 3 - Other income",
            form_line="Form 1040 Line 8",
            aliases=("otherIncome",),
        ),
        _federal_withholding("Box 4", "Form 1040 Line 25b"),
        _PAYER_NAME,
    ),
    signature_fields=("rents", "royalties", "other_income"),
)

FORM_1099_NEC_SCHEMA = DocumentSchema(
    document_type=DocumentType.FORM_1099_NEC,
    income_category=IncomeCategory.BUSINESS_INCOME,
    fields=(
        FieldSpec(
            id="nonemployee_compensation",
            label="Nonemployee Compensation (Box 1)",
            source="Box 1 - Nonemployee compensation",
            form_line="Schedule C",
            aliases=("nonemployeeCompensation",),
        ),
        _federal_withholding("Box 4", "Form 1040 Line 25b"),
        _PAYER_NAME,
    ),
    signature_fields=("nonemployee_compensation",),
)

DOCUMENT_SCHEMAS: dict[DocumentType, DocumentSchema] = {
    schema.document_type: schema
    for schema in (
        W2_SCHEMA,
        FORM_1099_INT_SCHEMA,
        FORM_1099_DIV_SCHEMA,
        FORM_1099_MISC_SCHEMA,
        FORM_1099_NEC_SCHEMA,
    )
}

# Order in which a generic 1099 is matched against concrete subtypes
GENERIC_1099_CANDIDATES: tuple[DocumentType, ...] = (
    DocumentType.FORM_1099_INT,
    DocumentType.FORM_1099_DIV,
    DocumentType.FORM_1099_NEC,
    DocumentType.FORM_1099_MISC,
)

# Field ids counted as income in summaries and sanity checks
INCOME_FIELD_IDS: frozenset[str] = frozenset(
    {
        "wages",
        "interest_income",
        "ordinary_dividends",
        "capital_gain_distributions",
        "rents",
        "royalties",
        "other_income",
        "nonemployee_compensation",
    }
)


def get_schema(document_type: DocumentType) -> DocumentSchema | None:
    """Schema for a document type, or None when the type is not mappable."""
    return DOCUMENT_SCHEMAS.get(document_type)
