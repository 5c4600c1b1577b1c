"""Configuration errors raised by the tax calculators.

These are fatal: a calculation that cannot find its tax table or filing status
must fail loudly rather than fall back to a guessed value.
"""

from __future__ import annotations

from pathlib import Path


class ConfigurationError(Exception):
    """Base class for missing or malformed tax configuration."""


class UnknownFilingStatusError(ConfigurationError):
    """Raised when a filing status does not match any known status."""

    def __init__(self, value: object) -> None:
        """Initialize with the rejected value.

        Args:
            value: The filing status as supplied by the caller.
        """
        self.value = value
        super().__init__(f"Invalid filing status: {value!r}")


class UnknownTaxYearError(ConfigurationError):
    """Raised when no tax table exists for the requested year."""

    def __init__(self, year: int, available: list[int]) -> None:
        self.year = year
        self.available = available
        super().__init__(
            f"No tax configuration for year {year}. Available years: {available}"
        )


class TaxTableError(ConfigurationError):
    """Raised when a tax table file cannot be read or fails validation."""

    def __init__(self, message: str, path: Path | None = None, errors: list[str] | None = None):
        """Initialize TaxTableError.

        Args:
            message: Human-readable error message
            path: Path to the table file that failed to load
            errors: List of specific validation errors
        """
        self.path = path
        self.errors = errors or []
        super().__init__(message)
