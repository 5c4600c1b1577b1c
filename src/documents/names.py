"""Comparison of names on a tax document with the names on the return.

A W-2 or 1099 is matched to the taxpayer (and spouse, on a joint return) by
comparing first and last names. Common nicknames count as close matches and
everything else is scored by edit distance. Mismatches are reported as data
with a severity; nothing here raises.

Example:
    >>> from src.documents.names import ProfileNames, extract_names, validate_names
    >>> profile = ProfileNames(first_name="Robert", last_name="Smith")
    >>> result = validate_names(profile, extract_names({"employeeName": "Bob Smith"}))
    >>> result.is_valid
    True
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.core.logging import get_logger
from src.documents.models import ExtractedDocumentPayload
from src.documents.schemas import lookup_field

logger = get_logger(__name__)

MATCH_THRESHOLD = 0.8
SUGGESTION_THRESHOLD = 0.5

NICKNAMES: dict[str, tuple[str, ...]] = {
    "robert": ("bob", "rob", "bobby"),
    "william": ("bill", "will", "billy"),
    "richard": ("rick", "dick", "rich"),
    "michael": ("mike", "mick"),
    "elizabeth": ("liz", "beth", "betty"),
    "katherine": ("kate", "kathy", "katie"),
    "jennifer": ("jen", "jenny"),
    "christopher": ("chris",),
    "matthew": ("matt",),
    "benjamin": ("ben",),
    "joseph": ("joe", "joey"),
    "daniel": ("dan", "danny"),
    "anthony": ("tony",),
    "patricia": ("pat", "patty"),
    "susan": ("sue", "susie"),
    "margaret": ("maggie", "meg", "peggy"),
}

NICKNAME_SIMILARITY = 0.9


# =============================================================================
# Models
# =============================================================================


class NameSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class NameMismatch:
    """One name part that does not match the return.

    Attributes:
        field: Which name part: first_name, last_name, spouse_first_name or
            spouse_last_name.
        profile_name: The name as entered on the return.
        document_name: The name part read from the document.
        similarity: Score in [0, 1] that fell below the match threshold.
        severity: How far apart the names are.
    """

    field: str
    profile_name: str
    document_name: str
    similarity: float
    severity: NameSeverity


@dataclass
class NameValidationResult:
    """Result of comparing document names with the return.

    Attributes:
        is_valid: True if there are no mismatches or all of them are low severity.
        confidence: Overall confidence in [0.1, 1.0] that the document belongs
            to this taxpayer.
        mismatches: Name parts that did not match.
        suggestions: Corrections to offer for near misses on the primary name.
    """

    is_valid: bool
    confidence: float = 1.0
    mismatches: list[NameMismatch] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


class ProfileNames(BaseModel):
    """Names entered on the return."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_name: str = Field(
        default="", validation_alias=AliasChoices("first_name", "firstName")
    )
    last_name: str = Field(default="", validation_alias=AliasChoices("last_name", "lastName"))
    spouse_first_name: str | None = Field(
        default=None, validation_alias=AliasChoices("spouse_first_name", "spouseFirstName")
    )
    spouse_last_name: str | None = Field(
        default=None, validation_alias=AliasChoices("spouse_last_name", "spouseLastName")
    )

    @property
    def has_spouse(self) -> bool:
        return bool(self.spouse_first_name or self.spouse_last_name)


class ExtractedNames(BaseModel):
    """Person names read from a document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    employee_name: str | None = Field(
        default=None, validation_alias=AliasChoices("employee_name", "employeeName")
    )
    recipient_name: str | None = Field(
        default=None, validation_alias=AliasChoices("recipient_name", "recipientName")
    )
    spouse_name: str | None = Field(
        default=None, validation_alias=AliasChoices("spouse_name", "spouseName")
    )

    @property
    def primary_name(self) -> str | None:
        """Employee name on a W-2, recipient name on a 1099."""
        return self.employee_name or self.recipient_name


# =============================================================================
# Similarity
# =============================================================================


def normalize_name(name: str | None) -> str:
    """Lowercase letters and spaces only."""
    if not name:
        return ""
    return re.sub(r"[^a-z\s]", "", name.lower()).strip()


def split_name(full_name: str) -> tuple[str, str]:
    """First and last word of a full name. Middle names are ignored."""
    parts = full_name.split()
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[-1]


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning a into b."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def _is_nickname_pair(a: str, b: str) -> bool:
    for full, nicknames in NICKNAMES.items():
        if (a == full and b in nicknames) or (b == full and a in nicknames):
            return True
        if a in nicknames and b in nicknames:
            return True
    return False


def name_similarity(a: str | None, b: str | None) -> float:
    """Similarity of two names in [0, 1].

    Names are normalized first. Identical names score 1.0, a name and one of
    its common nicknames (or two nicknames of the same name) score 0.9, and
    anything else scores one minus the edit distance over the longer length.

    Example:
        >>> name_similarity("Robert", "Bob")
        0.9
        >>> name_similarity("Jon", "John")
        0.75
    """
    if not a or not b:
        return 0.0

    first, second = normalize_name(a), normalize_name(b)
    if first == second:
        return 1.0
    if _is_nickname_pair(first, second):
        return NICKNAME_SIMILARITY

    longest = max(len(first), len(second))
    return 1.0 - levenshtein_distance(first, second) / longest


def _severity(similarity: float) -> NameSeverity:
    if similarity < 0.5:
        return NameSeverity.HIGH
    if similarity < 0.7:
        return NameSeverity.MEDIUM
    return NameSeverity.LOW


def _compare(field_name: str, profile_name: str, document_name: str) -> NameMismatch | None:
    similarity = name_similarity(profile_name, document_name)
    if similarity >= MATCH_THRESHOLD:
        return None
    return NameMismatch(
        field=field_name,
        profile_name=profile_name,
        document_name=document_name,
        similarity=similarity,
        severity=_severity(similarity),
    )


def _confidence(mismatches: list[NameMismatch]) -> float:
    high = sum(1 for m in mismatches if m.severity is NameSeverity.HIGH)
    medium = sum(1 for m in mismatches if m.severity is NameSeverity.MEDIUM)

    if high:
        confidence = max(0.1, 1.0 - high * 0.4 - medium * 0.2)
    elif medium:
        confidence = max(0.6, 1.0 - medium * 0.2)
    elif mismatches:
        confidence = max(0.8, 1.0 - len(mismatches) * 0.1)
    else:
        confidence = 1.0
    return round(confidence, 2)


# =============================================================================
# Validation
# =============================================================================


def validate_names(profile: ProfileNames, extracted: ExtractedNames) -> NameValidationResult:
    """Compare the names read from a document with the names on the return.

    The primary name is checked when the document carries an employee or
    recipient name. The spouse name is checked only when the return has a
    spouse and the document carries a spouse name; only the spouse name
    parts present on the return are compared.

    Args:
        profile: Names on the return.
        extracted: Names read from the document.

    Returns:
        NameValidationResult with the mismatches, an overall confidence, and
        "Did you mean" suggestions for near misses on the primary name.
    """
    mismatches: list[NameMismatch] = []
    suggestions: list[str] = []

    primary = extracted.primary_name
    if primary:
        doc_first, doc_last = split_name(primary)
        for field_name, profile_name, document_name in (
            ("first_name", profile.first_name, doc_first),
            ("last_name", profile.last_name, doc_last),
        ):
            mismatch = _compare(field_name, profile_name, document_name)
            if mismatch is None:
                continue
            mismatches.append(mismatch)
            if mismatch.similarity > SUGGESTION_THRESHOLD:
                suggestions.append(f'Did you mean "{document_name}" instead of "{profile_name}"?')

    if profile.has_spouse and extracted.spouse_name:
        doc_first, doc_last = split_name(extracted.spouse_name)
        for field_name, profile_name, document_name in (
            ("spouse_first_name", profile.spouse_first_name, doc_first),
            ("spouse_last_name", profile.spouse_last_name, doc_last),
        ):
            if not profile_name:
                continue
            mismatch = _compare(field_name, profile_name, document_name)
            if mismatch is not None:
                mismatches.append(mismatch)

    is_valid = all(m.severity is NameSeverity.LOW for m in mismatches)
    result = NameValidationResult(
        is_valid=is_valid,
        confidence=_confidence(mismatches),
        mismatches=mismatches,
        suggestions=suggestions,
    )

    logger.info(
        "names_validated",
        is_valid=result.is_valid,
        confidence=result.confidence,
        mismatch_count=len(mismatches),
    )
    return result


def extract_names(payload: ExtractedDocumentPayload | Mapping[str, Any]) -> ExtractedNames:
    """Person names from a recognized document, in either payload shape."""
    if not isinstance(payload, ExtractedDocumentPayload):
        payload = ExtractedDocumentPayload.model_validate(dict(payload))

    fields = payload.structured_fields
    return ExtractedNames(
        employee_name=lookup_field(fields, ("employeeName",)),
        recipient_name=lookup_field(fields, ("recipientName",)),
        spouse_name=lookup_field(fields, ("spouseName",)),
    )
