"""Tax computation: brackets, deductions, credits, and return aggregation.

This module provides:
- Versioned tax-year tables loaded from YAML
- Bracket tax liability with breakdown and marginal rate
- Standard vs itemized comparison, suggestions, and what-if scenarios
- Child Tax Credit and simplified Earned Income Credit
- Full return computation (basic and enhanced)
"""

from src.tax.brackets import (
    BracketSlice,
    TaxResult,
    calculate_tax,
    compute_liability,
    get_marginal_rate,
    get_standard_deduction,
    round_currency,
    round_whole_dollars,
)
from src.tax.calculator import (
    EnhancedTaxCalculationResult,
    EntryTotals,
    TaxCalculationResult,
    aggregate_entries,
    build_tax_return_facts,
    compute_enhanced_return,
    compute_return,
)
from src.tax.credits import (
    CreditItem,
    CreditsResult,
    child_tax_credit,
    earned_income_credit,
    evaluate_credits,
)
from src.tax.errors import (
    ConfigurationError,
    TaxTableError,
    UnknownFilingStatusError,
    UnknownTaxYearError,
)
from src.tax.filing_status import FilingStatus
from src.tax.models import (
    DeductionCategory,
    DeductionEntry,
    Dependent,
    EmploymentType,
    IncomeCategory,
    IncomeEntry,
    TaxReturnFacts,
)
from src.tax.optimizer import (
    DeductionComparison,
    DeductionScenario,
    compare_deductions,
    generate_optimization_suggestions,
    generate_scenarios,
)
from src.tax.year_config import (
    TaxBracket,
    TaxYearConfig,
    available_tax_years,
    get_tax_year_config,
    load_tax_year_config,
)

__all__ = [
    # Configuration
    "TaxBracket",
    "TaxYearConfig",
    "available_tax_years",
    "get_tax_year_config",
    "load_tax_year_config",
    # Errors
    "ConfigurationError",
    "TaxTableError",
    "UnknownFilingStatusError",
    "UnknownTaxYearError",
    # Models
    "DeductionCategory",
    "DeductionEntry",
    "Dependent",
    "EmploymentType",
    "FilingStatus",
    "IncomeCategory",
    "IncomeEntry",
    "TaxReturnFacts",
    # Brackets
    "BracketSlice",
    "TaxResult",
    "calculate_tax",
    "compute_liability",
    "get_marginal_rate",
    "get_standard_deduction",
    "round_currency",
    "round_whole_dollars",
    # Deductions
    "DeductionComparison",
    "DeductionScenario",
    "compare_deductions",
    "generate_optimization_suggestions",
    "generate_scenarios",
    # Credits
    "CreditItem",
    "CreditsResult",
    "child_tax_credit",
    "earned_income_credit",
    "evaluate_credits",
    # Returns
    "EnhancedTaxCalculationResult",
    "EntryTotals",
    "TaxCalculationResult",
    "aggregate_entries",
    "build_tax_return_facts",
    "compute_enhanced_return",
    "compute_return",
]
