"""taxes - Income tax calculation engine.

Scope:
- Tax tables: federal brackets, standard deductions, child tax credit,
  FICA rates, contribution limits and state rules for a year
- Progressive bracket tax (federal and state)
- Full tax calculation pipeline (FICA through refund/owed)
- 401(k)/HSA savings estimates ("genie tips")

Constraints:
- Pure calculation - no settings, no I/O beyond loading tax data once
- Tables are immutable and passed explicitly to every calculation
- Year-specific data loaded from taxes/data/{year}.yaml

Modules:
- tables: load/validate/freeze tax data (TaxTables, DataFormatError)
- brackets: compute_progressive_tax, bracket_breakdown
- pipeline: compute_taxes
- savings: estimate_potential_savings, calculate_tax_savings
- schemas: TaxInput, TaxResult, PotentialSavings and the data schemas

Usage:
    from taxgenie.sdk.taxes import TaxInput, compute_taxes, load_tax_data

    tables = load_tax_data()
    result = compute_taxes(TaxInput(gross_income=100000, state="CA"), tables)
"""

from .schemas import (
    FILING_STATUSES,
    ItemizedDeductions,
    PotentialSavings,
    TaxInput,
    TaxResult,
)

from .tables import (
    UNBOUNDED,
    Bracket,
    ContributionLimits,
    DataFormatError,
    FicaRates,
    FlatStateTax,
    NoStateTax,
    ProgressiveStateTax,
    TaxTables,
    TaxYearTable,
    get_available_years,
    load_tax_data,
    load_tax_tables,
    load_tax_tables_file,
)

from .brackets import (
    BracketSlice,
    bracket_breakdown,
    compute_progressive_tax,
    marginal_rate,
)

from .pipeline import compute_taxes

from .savings import (
    calculate_tax_savings,
    estimate_potential_savings,
)

__all__ = [
    # Schemas
    "FILING_STATUSES",
    "ItemizedDeductions",
    "PotentialSavings",
    "TaxInput",
    "TaxResult",
    # Tables
    "UNBOUNDED",
    "Bracket",
    "ContributionLimits",
    "DataFormatError",
    "FicaRates",
    "FlatStateTax",
    "NoStateTax",
    "ProgressiveStateTax",
    "TaxTables",
    "TaxYearTable",
    "get_available_years",
    "load_tax_data",
    "load_tax_tables",
    "load_tax_tables_file",
    # Brackets
    "BracketSlice",
    "bracket_breakdown",
    "compute_progressive_tax",
    "marginal_rate",
    # Pipeline
    "compute_taxes",
    # Savings
    "calculate_tax_savings",
    "estimate_potential_savings",
]
