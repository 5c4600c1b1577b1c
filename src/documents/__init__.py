"""Document field mapping and extraction validation.

This module provides:
- Pydantic models for recognized documents and mapped form fields
- Per-type field schemas (W-2, 1099-INT, 1099-DIV, 1099-MISC, 1099-NEC)
- Monetary value cleaning and W-2 wage recovery from raw text
- Mapping of recognized data to confidence-scored form fields
- Validation and the auto-accept gate for mapped fields
- Matching document names against the names on the return
"""

from src.documents.amounts import clean_amount
from src.documents.mapper import map_to_fields, resolve_1099_subtype, summarize
from src.documents.models import (
    DocumentType,
    ExtractedDocumentPayload,
    ExtractionMethod,
    ExtractionSummary,
    FormField,
    MappingMetadata,
    TaxDocumentMapping,
)
from src.documents.names import (
    ExtractedNames,
    NameMismatch,
    NameSeverity,
    NameValidationResult,
    ProfileNames,
    extract_names,
    name_similarity,
    validate_names,
)
from src.documents.ocr_fallback import WAGE_PATTERNS, extract_wages_from_text
from src.documents.schemas import (
    DOCUMENT_SCHEMAS,
    INCOME_FIELD_IDS,
    DocumentSchema,
    FieldKind,
    FieldSpec,
    get_schema,
)
from src.documents.validation import (
    ExtractionValidator,
    ValidationResult,
    auto_accept_fields,
    validate_mappings,
)

__all__ = [
    # Models
    "DocumentType",
    "ExtractedDocumentPayload",
    "ExtractionMethod",
    "ExtractionSummary",
    "FormField",
    "MappingMetadata",
    "TaxDocumentMapping",
    # Schemas
    "DOCUMENT_SCHEMAS",
    "INCOME_FIELD_IDS",
    "DocumentSchema",
    "FieldKind",
    "FieldSpec",
    "get_schema",
    # Mapping
    "WAGE_PATTERNS",
    "clean_amount",
    "extract_wages_from_text",
    "map_to_fields",
    "resolve_1099_subtype",
    "summarize",
    # Validation
    "ExtractionValidator",
    "ValidationResult",
    "auto_accept_fields",
    "validate_mappings",
    # Names
    "ExtractedNames",
    "NameMismatch",
    "NameSeverity",
    "NameValidationResult",
    "ProfileNames",
    "extract_names",
    "name_similarity",
    "validate_names",
]
