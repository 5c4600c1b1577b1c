"""Application configuration using Pydantic Settings."""

from decimal import Decimal
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Tax tables
    default_tax_year: int = 2024
    """Tax year used when a computation does not name one."""

    tax_tables_dir: Path | None = None
    """Directory holding `<year>.yaml` tax tables. Defaults to the packaged tables."""

    # Extraction review thresholds
    low_confidence_threshold: float = 0.7
    """Mappings below this confidence get a review warning."""

    rescan_confidence_threshold: float = 0.8
    """Average confidence below this suggests a higher-quality re-scan."""

    income_sanity_ceiling: Decimal = Decimal("1000000")
    """Income amounts above this are flagged for re-verification."""

    default_extraction_confidence: float = 0.85
    """Confidence assumed when the recognition service reports none."""

    @field_validator(
        "low_confidence_threshold",
        "rescan_confidence_threshold",
        "default_extraction_confidence",
    )
    @classmethod
    def validate_unit_interval(cls, value: float) -> float:
        """Confidence thresholds live in [0, 1]."""
        if not 0.0 <= value <= 1.0:
            raise ValueError("confidence thresholds must be between 0 and 1")
        return value

    @field_validator("tax_tables_dir", mode="before")
    @classmethod
    def parse_tax_tables_dir(cls, value: object) -> object:
        """Treat an empty TAX_TABLES_DIR as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Ensure DEFAULT_TAX_YEAR is an integer year with a packaged tax table.",
        "Confidence thresholds (LOW_CONFIDENCE_THRESHOLD, RESCAN_CONFIDENCE_THRESHOLD,",
        "DEFAULT_EXTRACTION_CONFIDENCE) must be numbers between 0 and 1.",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc
