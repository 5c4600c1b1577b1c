"""Pytest configuration and shared fixtures for tests."""

from pathlib import Path

import pytest

from src.core.config import settings
from src.tax.year_config import PACKAGED_TABLES_DIR, _cached_config


@pytest.fixture(autouse=True)
def packaged_tax_tables():
    """Pin tests to the packaged tax tables and the 2024 default year.

    Yields:
        Directory holding the packaged YAML tables.
    """
    original_dir = settings.tax_tables_dir
    original_year = settings.default_tax_year
    settings.tax_tables_dir = None
    settings.default_tax_year = 2024
    _cached_config.cache_clear()
    try:
        yield PACKAGED_TABLES_DIR
    finally:
        settings.tax_tables_dir = original_dir
        settings.default_tax_year = original_year
        _cached_config.cache_clear()


@pytest.fixture
def tables_copy(tmp_path: Path) -> Path:
    """Copy the packaged tables into a temporary directory.

    Returns:
        Path to the temporary tables directory.
    """
    for table in PACKAGED_TABLES_DIR.glob("*.yaml"):
        (tmp_path / table.name).write_text(table.read_text(encoding="utf-8"), encoding="utf-8")
    return tmp_path
