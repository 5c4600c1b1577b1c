"""Tests for extraction validation and the auto-accept gate.

Tests cover:
- Low-confidence warnings
- Missing W-2 wages (error) and employer name (warning)
- Income sanity ceiling and negative amounts
- Empty batch and re-scan suggestions
- auto_accept blocking on errors
"""

from decimal import Decimal

import pytest

from src.documents.mapper import map_to_fields
from src.documents.models import (
    DocumentType,
    ExtractionMethod,
    FormField,
    MappingMetadata,
    TaxDocumentMapping,
)
from src.documents.validation import (
    ExtractionValidator,
    ValidationResult,
    auto_accept_fields,
    validate_mappings,
)
from src.tax.models import IncomeCategory


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def validator() -> ExtractionValidator:
    """Return an ExtractionValidator with the default thresholds."""
    return ExtractionValidator()


def _w2(confidence: float = 0.95, **fields) -> TaxDocumentMapping:
    data = {"wages": "75000", "employerName": "Acme Corporation"}
    data.update(fields)
    return map_to_fields({"documentType": "W2", "extractedData": data, "confidence": confidence})[0]


def _mapping(field_id: str, value: Decimal, confidence: float = 0.95) -> TaxDocumentMapping:
    return TaxDocumentMapping(
        income_category=IncomeCategory.OTHER_INCOME,
        fields=[
            FormField(
                id=field_id,
                label=field_id,
                value=value,
                confidence=confidence,
                document_type=DocumentType.FORM_1099_MISC,
                source="Box 3 - Other income",
            )
        ],
        metadata=MappingMetadata(
            document_type=DocumentType.FORM_1099_MISC,
            confidence=confidence,
            extraction_method=ExtractionMethod.DOCUMENT_AI,
        ),
    )


# =============================================================================
# Validation rules
# =============================================================================


class TestValidate:
    """Tests for ExtractionValidator.validate."""

    def test_clean_w2(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_w2()])

        assert result == ValidationResult(is_valid=True)

    def test_low_confidence_warning(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_w2(confidence=0.65)])

        assert result.is_valid
        assert result.warnings == [
            "Low confidence (65%) for W-2. Please review the extracted data carefully."
        ]
        assert result.suggestions == [
            "Consider re-uploading a higher quality scan or photo of your "
            "tax document for better accuracy."
        ]

    def test_confidence_at_threshold_not_low(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_w2(confidence=0.7)])
        assert result.warnings == []

    def test_missing_wages_is_error(self, validator: ExtractionValidator) -> None:
        mapping = _w2(wages="", federalTaxWithheld="5000")
        result = validator.validate([mapping])

        assert not result.is_valid
        assert result.errors == [
            "W-2 wage amount not found. Please verify the document and re-upload if necessary."
        ]

    def test_missing_employer_is_warning(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_w2(employerName=None)])

        assert result.is_valid
        assert result.warnings == [
            "Employer name not detected in W-2. You may need to enter this manually."
        ]

    def test_high_income_warning(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_w2(wages="1500000")])

        assert result.is_valid
        assert result.warnings == [
            "Very high income amount detected ($1,500,000). Please verify this is correct."
        ]

    def test_ceiling_is_exclusive(self, validator: ExtractionValidator) -> None:
        assert validator.validate([_w2(wages="1000000")]).warnings == []

    def test_withholding_not_sanity_checked(self, validator: ExtractionValidator) -> None:
        """Only income fields are compared to the ceiling."""
        result = validator.validate([_w2(federalTaxWithheld="2000000")])
        assert result.warnings == []

    def test_negative_income_is_error(self, validator: ExtractionValidator) -> None:
        result = validator.validate([_mapping("other_income", Decimal("-250.50"))])

        assert result.errors == [
            "Negative income amount detected ($-250.50). This may indicate an extraction error."
        ]

    def test_empty_batch(self, validator: ExtractionValidator) -> None:
        result = validator.validate([])

        assert result.is_valid
        assert result.suggestions == [
            "No income data was extracted. Ensure the document is clear "
            "and in a supported format (PDF, PNG, JPG)."
        ]

    def test_wages_recovered_from_text_validate(self, validator: ExtractionValidator) -> None:
        mappings = map_to_fields(
            {
                "documentType": "W2",
                "employerName": "Acme Corporation",
                "confidence": 0.95,
                "fullText": (
                    "1 Wages, tips, other compensation 2 Federal income tax withheld\n"
                    "161130.48 25000.00"
                ),
            }
        )
        result = validator.validate(mappings)

        assert mappings[0].get("wages").value == Decimal("161130.48")
        assert result == ValidationResult(is_valid=True)

    def test_custom_thresholds(self) -> None:
        validator = ExtractionValidator(
            low_confidence_threshold=0.5,
            rescan_confidence_threshold=0.5,
            income_sanity_ceiling=Decimal("50000"),
        )
        result = validator.validate([_w2(confidence=0.65)])

        assert result.suggestions == []
        assert result.warnings == [
            "Very high income amount detected ($75,000). Please verify this is correct."
        ]

    def test_module_helper_uses_settings(self) -> None:
        assert validate_mappings([_w2(confidence=0.6)]).warnings[0].startswith(
            "Low confidence (60%)"
        )


# =============================================================================
# Auto-accept
# =============================================================================


class TestAutoAccept:
    """Tests for the auto-accept gate."""

    def test_accepts_all_fields_without_errors(self, validator: ExtractionValidator) -> None:
        mappings = [_w2(), _mapping("other_income", Decimal("600"))]
        result = validator.validate(mappings)

        accepted = validator.auto_accept(mappings, result)
        assert [f.id for f in accepted] == ["wages", "employer_name", "other_income"]

    def test_nothing_accepted_with_errors(self, validator: ExtractionValidator) -> None:
        mappings = [_w2(), _w2(wages="0", federalTaxWithheld="100")]
        result = validator.validate(mappings)

        assert not result.is_valid
        assert validator.auto_accept(mappings, result) == []

    def test_low_confidence_mapping_held_back(self, validator: ExtractionValidator) -> None:
        mappings = [_w2(confidence=0.6), _mapping("other_income", Decimal("600"))]
        result = validator.validate(mappings)

        assert result.is_valid
        assert [f.id for f in validator.auto_accept(mappings, result)] == ["other_income"]

    def test_module_helper(self) -> None:
        mappings = [_w2()]
        assert len(auto_accept_fields(mappings, validate_mappings(mappings))) == 2
