"""Configuration parsing tests."""

from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.core.config import Settings


def test_defaults(monkeypatch) -> None:
    """Defaults match the documented thresholds."""
    for name in (
        "DEFAULT_TAX_YEAR",
        "TAX_TABLES_DIR",
        "LOW_CONFIDENCE_THRESHOLD",
        "RESCAN_CONFIDENCE_THRESHOLD",
        "INCOME_SANITY_CEILING",
        "DEFAULT_EXTRACTION_CONFIDENCE",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = Settings(_env_file=None)
    assert cfg.default_tax_year == 2024
    assert cfg.tax_tables_dir is None
    assert cfg.low_confidence_threshold == 0.7
    assert cfg.rescan_confidence_threshold == 0.8
    assert cfg.income_sanity_ceiling == Decimal("1000000")
    assert cfg.default_extraction_confidence == 0.85


def test_thresholds_read_from_env(monkeypatch) -> None:
    """Environment variables override thresholds, case-insensitively."""
    monkeypatch.setenv("low_confidence_threshold", "0.5")
    monkeypatch.setenv("INCOME_SANITY_CEILING", "250000.50")
    monkeypatch.setenv("DEFAULT_TAX_YEAR", "2025")

    cfg = Settings(_env_file=None)
    assert cfg.low_confidence_threshold == 0.5
    assert cfg.income_sanity_ceiling == Decimal("250000.50")
    assert cfg.default_tax_year == 2025


def test_confidence_threshold_outside_unit_interval_rejected(monkeypatch) -> None:
    """Thresholds above 1 fail with a clear validation error."""
    monkeypatch.setenv("RESCAN_CONFIDENCE_THRESHOLD", "80")
    with pytest.raises(ValidationError, match="between 0 and 1"):
        Settings(_env_file=None)


def test_blank_tax_tables_dir_is_unset(monkeypatch) -> None:
    """An empty TAX_TABLES_DIR falls back to the packaged tables."""
    monkeypatch.setenv("TAX_TABLES_DIR", "  ")
    assert Settings(_env_file=None).tax_tables_dir is None


def test_tax_tables_dir_parsed_as_path(monkeypatch, tmp_path) -> None:
    """TAX_TABLES_DIR becomes a Path."""
    monkeypatch.setenv("TAX_TABLES_DIR", str(tmp_path))
    assert Settings(_env_file=None).tax_tables_dir == Path(tmp_path)
