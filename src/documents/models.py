"""Pydantic models for document extraction and field mapping.

This module defines:
- DocumentType: supported tax document types and upstream spellings
- ExtractedDocumentPayload: what the document-recognition service hands us
- FormField / TaxDocumentMapping: confidence-scored fields tied to 1040 lines
- ExtractionSummary: totals for the review screen

All monetary field values use Decimal for precision.
"""

from __future__ import annotations

import re
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from src.tax.models import IncomeCategory


class DocumentType(str, Enum):
    """Type of tax document."""

    W2 = "W2"
    FORM_1099_INT = "1099-INT"
    FORM_1099_DIV = "1099-DIV"
    FORM_1099_MISC = "1099-MISC"
    FORM_1099_NEC = "1099-NEC"
    FORM_1099 = "1099"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> "DocumentType":
        """Resolve an upstream document type spelling.

        Accepts the enum values ("1099-INT") as well as the recognition
        service's names ("FORM_1099_INT", "FORM_1099_GENERIC", "W-2").
        Anything unrecognized is UNKNOWN.

        Example:
            >>> DocumentType.parse("FORM_1099_DIV")
            <DocumentType.FORM_1099_DIV: '1099-DIV'>
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        return _DOCUMENT_TYPE_LOOKUP.get(_document_key(value), cls.UNKNOWN)

    @property
    def is_1099(self) -> bool:
        return self.value.startswith("1099")

    @property
    def label(self) -> str:
        """Display name, e.g. "W-2" or "1099-INT"."""
        return "W-2" if self is DocumentType.W2 else self.value


def _document_key(value: str) -> str:
    key = re.sub(r"[\s_\-]", "", value).upper()
    return key.removeprefix("FORM")


_DOCUMENT_TYPE_LOOKUP: dict[str, DocumentType] = {
    _document_key(doc_type.value): doc_type for doc_type in DocumentType
}
_DOCUMENT_TYPE_LOOKUP["1099GENERIC"] = DocumentType.FORM_1099


# Appended to FormField.source for values recovered from raw text.
OCR_FALLBACK_SUFFIX = "(ocr_fallback)"


class ExtractionMethod(str, Enum):
    """How the structured fields were produced."""

    DOCUMENT_AI = "document_ai"
    LLM = "llm"
    MANUAL = "manual"


# Keys of the upstream payload envelope; everything else is a structured field.
_ENVELOPE_KEYS = frozenset(
    {
        "documentType",
        "document_type",
        "extractedData",
        "structured_fields",
        "structuredFields",
        "fullText",
        "raw_text",
        "rawText",
        "confidence",
    }
)


class ExtractedDocumentPayload(BaseModel):
    """Output of the document-recognition service for one document.

    Accepts both the flat shape (fields alongside documentType) and the
    upstream shape where fields are nested under `extractedData` and the
    recognized text is under `fullText`.

    Attributes:
        document_type: Declared document type.
        structured_fields: Field name to raw value, as recognized.
        raw_text: Full recognized text, used for OCR fallback.
        confidence: Service confidence in [0, 1], or None when not reported.
    """

    model_config = ConfigDict(populate_by_name=True)

    document_type: DocumentType = Field(
        default=DocumentType.UNKNOWN,
        validation_alias=AliasChoices("document_type", "documentType"),
    )
    structured_fields: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("structured_fields", "structuredFields", "extractedData"),
    )
    raw_text: str | None = Field(
        default=None, validation_alias=AliasChoices("raw_text", "rawText", "fullText")
    )
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="before")
    @classmethod
    def unwrap_upstream_shape(cls, data: Any) -> Any:
        """Lift fields out of a flat payload and text out of extractedData."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        nested = data.get("extractedData")
        if isinstance(nested, dict):
            if not (data.get("fullText") or data.get("raw_text") or data.get("rawText")):
                if nested.get("fullText"):
                    data["fullText"] = nested["fullText"]
            data["extractedData"] = {k: v for k, v in nested.items() if k != "fullText"}
        elif not any(key in data for key in ("structured_fields", "structuredFields")):
            data["structured_fields"] = {
                k: v for k, v in data.items() if k not in _ENVELOPE_KEYS
            }
        return data

    @field_validator("document_type", mode="before")
    @classmethod
    def parse_document_type(cls, value: object) -> DocumentType:
        return DocumentType.parse(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def blank_confidence(cls, value: object) -> object:
        """A missing or zero confidence means the service reported none."""
        if value in (None, "", 0):
            return None
        return value


class FormField(BaseModel):
    """One extracted value proposed for a form field.

    Attributes:
        id: Stable field id (e.g. "wages", "payer_name").
        label: Display label, e.g. "Wages (Box 1)".
        value: Decimal for money fields, str for text fields.
        is_auto_populated: True when filled from a document rather than typed.
        confidence: Confidence of the mapping that produced this field.
        document_type: Source document type.
        source: Where on the document the value came from.
        form_line: Form 1040 line (or schedule) the value feeds, if any.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    value: Decimal | str
    is_auto_populated: bool = True
    confidence: float = Field(ge=0.0, le=1.0)
    document_type: DocumentType
    source: str
    form_line: str | None = None

    @property
    def amount(self) -> Decimal | None:
        """The value as a Decimal, or None for text fields."""
        return self.value if isinstance(self.value, Decimal) else None

    @property
    def recovered_from_text(self) -> bool:
        return self.source.endswith(OCR_FALLBACK_SUFFIX)


class MappingMetadata(BaseModel):
    """Provenance of a TaxDocumentMapping."""

    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    confidence: float = Field(ge=0.0, le=1.0)
    extraction_method: ExtractionMethod


class TaxDocumentMapping(BaseModel):
    """All fields mapped from one document, grouped under an income category."""

    model_config = ConfigDict(frozen=True)

    income_category: IncomeCategory
    fields: list[FormField]
    metadata: MappingMetadata

    def get(self, field_id: str) -> FormField | None:
        """First field with the given id, or None."""
        for form_field in self.fields:
            if form_field.id == field_id:
                return form_field
        return None

    def has(self, field_id: str) -> bool:
        return self.get(field_id) is not None


class ExtractionSummary(BaseModel):
    """Totals across a batch of mappings, for the review screen.

    Attributes:
        total_amount: Sum of income field amounts.
        document_types: Distinct document types, in first-seen order.
        field_count: Total number of mapped fields.
        average_confidence: Mean mapping confidence (0 with no mappings).
    """

    total_amount: Decimal = Decimal("0")
    document_types: list[DocumentType] = Field(default_factory=list)
    field_count: int = 0
    average_confidence: float = 0.0
