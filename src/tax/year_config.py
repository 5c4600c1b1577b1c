"""Tax year-specific tables and thresholds.

Brackets, standard deductions, credit tables, and optimizer thresholds live in
versioned YAML files (`src/tax/tables/<year>.yaml`) so several tax years can be
supported side by side without code changes. Each file is validated into a
frozen TaxYearConfig and cached per year.

Example:
    >>> from src.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2024)
    >>> config.standard_deduction(FilingStatus.SINGLE)
    Decimal('14600')
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from ruamel.yaml import YAML

from src.core.config import settings
from src.tax.errors import TaxTableError, UnknownTaxYearError
from src.tax.filing_status import FilingStatus

PACKAGED_TABLES_DIR = Path(__file__).parent / "tables"

# EITC lookups cap the qualifying-child count here
EITC_MAX_CHILDREN = 3


class TaxBracket(BaseModel):
    """One marginal bracket: income in [lower_bound, upper_bound) taxed at rate.

    An upper_bound of None means the bracket is unbounded.
    """

    model_config = ConfigDict(frozen=True)

    lower_bound: Decimal = Field(ge=0)
    upper_bound: Decimal | None = None
    rate: Decimal = Field(ge=0, le=1)


class EarnedIncomeCreditTier(BaseModel):
    """Simplified EITC parameters for one qualifying-child count."""

    model_config = ConfigDict(frozen=True)

    max_credit: Decimal = Field(ge=0)
    income_limit: Decimal = Field(ge=0)
    phase_in_rate: Decimal = Field(ge=0, le=1)


class OptimizerThresholds(BaseModel):
    """Dollar thresholds driving deduction suggestions and scenarios."""

    model_config = ConfigDict(frozen=True)

    close_to_itemizing_gap: Decimal = Field(ge=0)
    retirement_suggestion_agi: Decimal = Field(ge=0)
    low_income_suggestion_agi: Decimal = Field(ge=0)
    scenario_increments: tuple[Decimal, ...]


class TaxYearConfig(BaseModel):
    """Tax year-specific constants and thresholds.

    All monetary values are Decimal for precision in tax calculations.
    The model is frozen to prevent accidental modification.

    Attributes:
        tax_year: The tax year these values apply to.
        brackets: Ordered, gapless brackets per filing status.
        standard_deductions: Standard deduction per filing status.
        child_tax_credit_per_child: Flat Child Tax Credit per qualifying child.
        earned_income_credit: EITC tiers keyed by qualifying-child count (0-3).
        optimizer: Suggestion thresholds and the what-if scenario ladder.
    """

    model_config = ConfigDict(frozen=True)

    tax_year: int
    brackets: dict[FilingStatus, tuple[TaxBracket, ...]]
    standard_deductions: dict[FilingStatus, Decimal]
    child_tax_credit_per_child: Decimal = Field(ge=0)
    earned_income_credit: dict[int, EarnedIncomeCreditTier]
    optimizer: OptimizerThresholds

    @model_validator(mode="after")
    def check_tables(self) -> "TaxYearConfig":
        """Every filing status has a gapless bracket table and a deduction."""
        for status in FilingStatus:
            if status not in self.brackets:
                raise ValueError(f"missing brackets for {status.value}")
            if status not in self.standard_deductions:
                raise ValueError(f"missing standard deduction for {status.value}")
            _check_brackets(status, self.brackets[status])

        for count in range(EITC_MAX_CHILDREN + 1):
            if count not in self.earned_income_credit:
                raise ValueError(f"missing earned income credit tier for {count} children")
        return self

    def brackets_for(self, filing_status: FilingStatus) -> tuple[TaxBracket, ...]:
        """Bracket table for a filing status."""
        return self.brackets[filing_status]

    def standard_deduction(self, filing_status: FilingStatus) -> Decimal:
        """Standard deduction for a filing status."""
        return self.standard_deductions[filing_status]

    def eitc_tier(self, qualifying_children: int) -> EarnedIncomeCreditTier:
        """EITC tier for a child count, capped at the table maximum."""
        return self.earned_income_credit[min(max(qualifying_children, 0), EITC_MAX_CHILDREN)]


def _check_brackets(status: FilingStatus, brackets: tuple[TaxBracket, ...]) -> None:
    """Brackets start at 0, are contiguous, end unbounded, and rise in rate."""
    if not brackets:
        raise ValueError(f"{status.value}: bracket table is empty")
    if brackets[0].lower_bound != 0:
        raise ValueError(f"{status.value}: first bracket must start at 0")
    if brackets[-1].upper_bound is not None:
        raise ValueError(f"{status.value}: last bracket must be unbounded")

    for previous, current in zip(brackets, brackets[1:]):
        if previous.upper_bound is None:
            raise ValueError(f"{status.value}: only the last bracket may be unbounded")
        if previous.upper_bound <= previous.lower_bound:
            raise ValueError(f"{status.value}: bracket at {previous.lower_bound} is empty")
        if current.lower_bound != previous.upper_bound:
            raise ValueError(
                f"{status.value}: gap or overlap between {previous.upper_bound} "
                f"and {current.lower_bound}"
            )
        if current.rate <= previous.rate:
            raise ValueError(f"{status.value}: rates must strictly increase")


def _tables_dir() -> Path:
    return settings.tax_tables_dir or PACKAGED_TABLES_DIR


def _parse_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML table file and return its contents as a dictionary.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary containing the parsed YAML content

    Raises:
        TaxTableError: If the file cannot be read or parsed
    """
    yaml = YAML(typ="safe")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except FileNotFoundError:
        raise TaxTableError(f"Tax table not found: {path}", path=path)
    except Exception as e:
        raise TaxTableError(f"Failed to parse YAML: {e}", path=path)

    if not isinstance(data, dict):
        raise TaxTableError(
            f"Tax table must be a YAML mapping, got {type(data).__name__}",
            path=path,
        )

    return data


def load_tax_year_config(path: str | Path) -> TaxYearConfig:
    """Load and validate one tax table file.

    Args:
        path: Path to a `<year>.yaml` table.

    Returns:
        Validated, frozen TaxYearConfig.

    Raises:
        TaxTableError: If the file is missing, unparsable, or invalid.
    """
    path = Path(path)
    data = _parse_yaml(path)
    try:
        return TaxYearConfig.model_validate(data)
    except ValidationError as e:
        errors = [err["msg"] for err in e.errors()]
        raise TaxTableError(
            f"Invalid tax table {path.name}: {errors[0]}",
            path=path,
            errors=errors,
        )


def available_tax_years() -> list[int]:
    """Tax years with a table file in the configured directory."""
    years: list[int] = []
    for table in _tables_dir().glob("*.yaml"):
        if table.stem.isdigit():
            years.append(int(table.stem))
    return sorted(years)


@lru_cache(maxsize=None)
def _cached_config(year: int, tables_dir: Path) -> TaxYearConfig:
    path = tables_dir / f"{year}.yaml"
    if not path.exists():
        raise UnknownTaxYearError(year, available_tax_years())
    config = load_tax_year_config(path)
    if config.tax_year != year:
        raise TaxTableError(
            f"Table {path.name} declares tax_year {config.tax_year}",
            path=path,
        )
    return config


def get_tax_year_config(year: int | None = None) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2024). Defaults to settings.default_tax_year.

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        UnknownTaxYearError: If no table exists for the requested year.
        TaxTableError: If the table exists but is malformed.

    Example:
        >>> config = get_tax_year_config(2024)
        >>> config.child_tax_credit_per_child
        Decimal('2000')
    """
    return _cached_config(year or settings.default_tax_year, _tables_dir())
