"""Map recognized document data to confidence-scored form fields.

The recognition service returns loosely-structured fields (and optionally the
full recognized text) for one document. This module turns that payload into
TaxDocumentMapping objects using the per-type schemas in
`src.documents.schemas`:

- money fields are emitted only when they parse to a positive amount
- text fields are emitted only when non-blank
- W-2 wages missing from the structured fields are recovered from raw text
- a generic 1099 is resolved to its concrete subtype and mapped as that type

Example:
    >>> payload = {"documentType": "W2", "extractedData": {"wages": "$52,000.00"}}
    >>> [field.id for field in map_to_fields(payload)[0].fields]
    ['wages']
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from src.core.config import settings
from src.core.logging import get_logger
from src.documents.amounts import clean_amount
from src.documents.models import (
    OCR_FALLBACK_SUFFIX,
    DocumentType,
    ExtractedDocumentPayload,
    ExtractionMethod,
    ExtractionSummary,
    FormField,
    MappingMetadata,
    TaxDocumentMapping,
)
from src.documents.ocr_fallback import match_wages
from src.documents.schemas import (
    GENERIC_1099_CANDIDATES,
    INCOME_FIELD_IDS,
    DocumentSchema,
    FieldKind,
    FieldSpec,
    get_schema,
    lookup_field,
)

logger = get_logger(__name__)

# Keys a generic 1099 may use to name its concrete subtype
_SUBTYPE_KEYS = ("documentType", "formType")


def resolve_1099_subtype(fields: dict[str, Any]) -> DocumentType:
    """Pick the concrete 1099 subtype for a generic 1099.

    Resolution order:
    1. an explicit subtype named in the structured fields
    2. the first candidate schema (INT, DIV, NEC, MISC) with a signature
       field carrying a usable amount
    3. 1099-MISC

    Args:
        fields: Structured fields of the generic 1099.

    Returns:
        A concrete 1099 DocumentType (never the generic FORM_1099).
    """
    named = lookup_field(fields, _SUBTYPE_KEYS)
    if named is not None:
        subtype = DocumentType.parse(named)
        if subtype.is_1099 and subtype is not DocumentType.FORM_1099:
            return subtype

    for candidate in GENERIC_1099_CANDIDATES:
        schema = get_schema(candidate)
        if schema is None:
            continue
        for field_id in schema.signature_fields:
            amount = clean_amount(lookup_field(fields, schema.field(field_id).aliases))
            if amount is not None and amount > 0:
                return candidate

    return DocumentType.FORM_1099_MISC


def _map_field(
    spec: FieldSpec,
    payload: ExtractedDocumentPayload,
    document_type: DocumentType,
    confidence: float,
) -> FormField | None:
    """Build one FormField, or None when the value is missing or unusable."""
    raw = lookup_field(payload.structured_fields, spec.aliases)
    source = spec.source

    if spec.kind is FieldKind.TEXT:
        if raw is None:
            return None
        value: Decimal | str = str(raw).strip()
        if not value:
            return None
    else:
        amount = clean_amount(raw)
        if (amount is None or amount <= 0) and spec.ocr_fallback:
            recovered = match_wages(payload.raw_text)
            if recovered is not None:
                logger.info(
                    "wages_recovered_from_text",
                    document_type=document_type.value,
                    field_id=spec.id,
                    pattern=recovered.pattern_name,
                )
                amount = recovered.amount
                source = f"{spec.source} {OCR_FALLBACK_SUFFIX}"
        if amount is None or amount <= 0:
            return None
        value = amount

    return FormField(
        id=spec.id,
        label=spec.label,
        value=value,
        is_auto_populated=True,
        confidence=confidence,
        document_type=document_type,
        source=source,
        form_line=spec.form_line,
    )


def _map_schema(
    schema: DocumentSchema, payload: ExtractedDocumentPayload
) -> TaxDocumentMapping | None:
    if payload.confidence is not None:
        confidence = payload.confidence
        method = ExtractionMethod.DOCUMENT_AI
    else:
        confidence = settings.default_extraction_confidence
        method = ExtractionMethod.LLM

    fields = [
        form_field
        for spec in schema.fields
        if (form_field := _map_field(spec, payload, schema.document_type, confidence))
        is not None
    ]
    if not fields:
        return None

    return TaxDocumentMapping(
        income_category=schema.income_category,
        fields=fields,
        metadata=MappingMetadata(
            document_type=schema.document_type,
            confidence=confidence,
            extraction_method=method,
        ),
    )


def map_to_fields(
    payload: ExtractedDocumentPayload | dict[str, Any],
) -> list[TaxDocumentMapping]:
    """Map one recognized document to form fields.

    Args:
        payload: Recognition output, as a model or in the upstream dict shape.

    Returns:
        Zero or one mappings. Unknown document types and documents with no
        usable fields yield an empty list.

    Raises:
        pydantic.ValidationError: If the payload itself is malformed (for
            example a confidence outside [0, 1]).
    """
    if not isinstance(payload, ExtractedDocumentPayload):
        payload = ExtractedDocumentPayload.model_validate(payload)

    document_type = payload.document_type
    if document_type is DocumentType.FORM_1099:
        document_type = resolve_1099_subtype(payload.structured_fields)
        logger.info("generic_1099_resolved", document_type=document_type.value)
        payload = payload.model_copy(update={"document_type": document_type})

    schema = get_schema(document_type)
    if schema is None:
        logger.warning("document_type_unsupported", document_type=document_type.value)
        return []

    mapping = _map_schema(schema, payload)
    if mapping is None:
        logger.warning("document_has_no_fields", document_type=document_type.value)
        return []

    logger.info(
        "document_mapped",
        document_type=document_type.value,
        field_count=len(mapping.fields),
        confidence=mapping.metadata.confidence,
        extraction_method=mapping.metadata.extraction_method.value,
    )
    return [mapping]


def summarize(mappings: Iterable[TaxDocumentMapping]) -> ExtractionSummary:
    """Totals across mappings for the review screen.

    Only fields listed in INCOME_FIELD_IDS count toward total_amount, so
    withholding and informational wage boxes are never added to income.

    Example:
        >>> summarize([]).average_confidence
        0.0
    """
    mappings = list(mappings)
    total = Decimal("0")
    document_types: list[DocumentType] = []
    field_count = 0

    for mapping in mappings:
        if mapping.metadata.document_type not in document_types:
            document_types.append(mapping.metadata.document_type)
        field_count += len(mapping.fields)
        for form_field in mapping.fields:
            if form_field.id in INCOME_FIELD_IDS and form_field.amount is not None:
                total += form_field.amount

    average = (
        sum(mapping.metadata.confidence for mapping in mappings) / len(mappings)
        if mappings
        else 0.0
    )

    return ExtractionSummary(
        total_amount=total,
        document_types=document_types,
        field_count=field_count,
        average_confidence=average,
    )
