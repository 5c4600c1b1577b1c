"""Validation of mapped document data before it reaches a return.

Checks a batch of TaxDocumentMapping objects for low confidence, missing
critical W-2 fields, and implausible income amounts. Problems are reported as
data (errors, warnings, suggestions); nothing here raises for data quality.

Example:
    >>> from src.documents.validation import ExtractionValidator
    >>> validator = ExtractionValidator()
    >>> result = validator.validate(mappings)
    >>> if not result.is_valid:
    ...     print(f"Errors: {result.errors}")
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from src.core.config import settings
from src.core.logging import get_logger
from src.documents.models import FormField, TaxDocumentMapping
from src.documents.schemas import INCOME_FIELD_IDS
from src.tax.models import IncomeCategory
from src.tax.optimizer import format_dollars

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of extraction validation.

    Attributes:
        is_valid: True if no errors were found.
        errors: Critical problems that block automatic acceptance.
        warnings: Potential issues that should be reviewed.
        suggestions: Advice for getting a better extraction.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


class ExtractionValidator:
    """Validate mapped document data for completeness and plausibility.

    Thresholds default to the application settings.

    Example:
        >>> validator = ExtractionValidator(low_confidence_threshold=0.6)
        >>> result = validator.validate(mappings)
        >>> if result.warnings:
        ...     print(f"Review these issues: {result.warnings}")
    """

    def __init__(
        self,
        low_confidence_threshold: float | None = None,
        rescan_confidence_threshold: float | None = None,
        income_sanity_ceiling: Decimal | None = None,
    ) -> None:
        self.low_confidence_threshold = (
            settings.low_confidence_threshold
            if low_confidence_threshold is None
            else low_confidence_threshold
        )
        self.rescan_confidence_threshold = (
            settings.rescan_confidence_threshold
            if rescan_confidence_threshold is None
            else rescan_confidence_threshold
        )
        self.income_sanity_ceiling = (
            settings.income_sanity_ceiling
            if income_sanity_ceiling is None
            else income_sanity_ceiling
        )

    def validate(self, mappings: Iterable[TaxDocumentMapping]) -> ValidationResult:
        """Validate a batch of mappings.

        Checks:
        - Mapping confidence below the low-confidence threshold
        - W-2 without wages (error) or without employer name (warning)
        - Income amounts above the sanity ceiling (warning) or negative (error)
        - No mappings at all, or low average confidence (suggestions)

        Args:
            mappings: Mappings produced by map_to_fields.

        Returns:
            ValidationResult with errors, warnings, and suggestions.
        """
        mappings = list(mappings)
        errors: list[str] = []
        warnings: list[str] = []
        suggestions: list[str] = []

        for mapping in mappings:
            confidence = mapping.metadata.confidence
            if confidence < self.low_confidence_threshold:
                warnings.append(
                    f"Low confidence ({_whole_percent(confidence)}%) for "
                    f"{mapping.metadata.document_type.label}. "
                    "Please review the extracted data carefully."
                )

            if mapping.income_category is IncomeCategory.W2_WAGES:
                if not mapping.has("wages"):
                    errors.append(
                        "W-2 wage amount not found. "
                        "Please verify the document and re-upload if necessary."
                    )
                if not mapping.has("employer_name"):
                    warnings.append(
                        "Employer name not detected in W-2. "
                        "You may need to enter this manually."
                    )

            for form_field in mapping.fields:
                self._check_amount(form_field, errors, warnings)

        if not mappings:
            suggestions.append(
                "No income data was extracted. Ensure the document is clear "
                "and in a supported format (PDF, PNG, JPG)."
            )
        else:
            average = sum(m.metadata.confidence for m in mappings) / len(mappings)
            if average < self.rescan_confidence_threshold:
                suggestions.append(
                    "Consider re-uploading a higher quality scan or photo of your "
                    "tax document for better accuracy."
                )

        result = ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
        )
        logger.info(
            "extraction_validated",
            mapping_count=len(mappings),
            is_valid=result.is_valid,
            error_count=len(errors),
            warning_count=len(warnings),
        )
        return result

    def _check_amount(
        self, form_field: FormField, errors: list[str], warnings: list[str]
    ) -> None:
        """Sanity-check one income field."""
        amount = form_field.amount
        if form_field.id not in INCOME_FIELD_IDS or amount is None:
            return

        if amount > self.income_sanity_ceiling:
            warnings.append(
                f"Very high income amount detected (${format_dollars(amount)}). "
                "Please verify this is correct."
            )
        if amount < 0:
            errors.append(
                f"Negative income amount detected (${format_dollars(amount)}). "
                "This may indicate an extraction error."
            )

    def auto_accept(
        self, mappings: Iterable[TaxDocumentMapping], result: ValidationResult
    ) -> list[FormField]:
        """Fields that may be accepted onto a return without review.

        Nothing is accepted while the result carries errors. Otherwise every
        auto-populated field from a mapping at or above the low-confidence
        threshold is accepted. Manually entered data never passes through here.
        """
        if result.errors:
            return []

        accepted: list[FormField] = []
        for mapping in mappings:
            if mapping.metadata.confidence < self.low_confidence_threshold:
                continue
            accepted.extend(f for f in mapping.fields if f.is_auto_populated)
        return accepted


def _whole_percent(confidence: float) -> int:
    """Confidence as a whole percentage, half-up."""
    return int(confidence * 100 + 0.5)


def validate_mappings(mappings: Iterable[TaxDocumentMapping]) -> ValidationResult:
    """Validate mappings with the configured thresholds."""
    return ExtractionValidator().validate(mappings)


def auto_accept_fields(
    mappings: Iterable[TaxDocumentMapping], result: ValidationResult
) -> list[FormField]:
    """Fields eligible for automatic acceptance; none when result has errors."""
    return ExtractionValidator().auto_accept(mappings, result)
