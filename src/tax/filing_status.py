"""Filing status enumeration and input normalization."""

from __future__ import annotations

import re
from enum import Enum

from src.tax.errors import UnknownFilingStatusError


class FilingStatus(str, Enum):
    """IRS filing status. Selects a bracket table and standard deduction."""

    SINGLE = "SINGLE"
    MARRIED_FILING_JOINTLY = "MARRIED_FILING_JOINTLY"
    MARRIED_FILING_SEPARATELY = "MARRIED_FILING_SEPARATELY"
    HEAD_OF_HOUSEHOLD = "HEAD_OF_HOUSEHOLD"
    QUALIFYING_SURVIVING_SPOUSE = "QUALIFYING_SURVIVING_SPOUSE"

    @classmethod
    def parse(cls, value: "FilingStatus | str") -> "FilingStatus":
        """Resolve any spelling of a filing status to its member.

        Case, spaces, hyphens, and underscores are ignored, so
        "married filing jointly", "marriedFilingJointly", and
        "MARRIED_FILING_JOINTLY" all resolve to the same status. Short codes
        (mfj, mfs, hoh, qss, qw) are accepted as well.

        Args:
            value: Filing status member or string.

        Returns:
            The matching FilingStatus.

        Raises:
            UnknownFilingStatusError: If the value matches no status.

        Example:
            >>> FilingStatus.parse("head of household")
            <FilingStatus.HEAD_OF_HOUSEHOLD: 'HEAD_OF_HOUSEHOLD'>
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownFilingStatusError(value)

        key = _lookup_key(value)
        status = _LOOKUP.get(key)
        if status is None:
            raise UnknownFilingStatusError(value)
        return status


def _lookup_key(value: str) -> str:
    """Collapse a filing status string to its canonical lookup key."""
    return re.sub(r"[\s_\-]", "", value).lower()


_LOOKUP: dict[str, FilingStatus] = {
    _lookup_key(status.value): status for status in FilingStatus
}
_LOOKUP.update(
    {
        "mfj": FilingStatus.MARRIED_FILING_JOINTLY,
        "mfs": FilingStatus.MARRIED_FILING_SEPARATELY,
        "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
        "qss": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
        "qw": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
        "qualifyingwidower": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    }
)
