"""Tax Genie SDK - Core functionality for tax estimates."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    KNOWN_SETTINGS,
)

from .taxes import (
    FILING_STATUSES,
    DataFormatError,
    ItemizedDeductions,
    PotentialSavings,
    TaxInput,
    TaxResult,
    TaxTables,
    compute_taxes,
    estimate_potential_savings,
    load_tax_data,
    load_tax_tables,
)

from .validation import (
    InputOutOfRange,
    validate_tax_input,
    MAX_GROSS_INCOME,
)

from .w2 import (
    W2Form,
    W2ImportError,
    build_w2_input,
    load_w2_file,
)

from .explain import (
    ExplanationItem,
    GenieTip,
    explain_result,
    format_currency,
    format_rate,
    genie_tips,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "KNOWN_SETTINGS",
    # Tax engine
    "FILING_STATUSES",
    "DataFormatError",
    "ItemizedDeductions",
    "PotentialSavings",
    "TaxInput",
    "TaxResult",
    "TaxTables",
    "compute_taxes",
    "estimate_potential_savings",
    "load_tax_data",
    "load_tax_tables",
    # Validation
    "InputOutOfRange",
    "validate_tax_input",
    "MAX_GROSS_INCOME",
    # W-2 import
    "W2Form",
    "W2ImportError",
    "build_w2_input",
    "load_w2_file",
    # Explanation
    "ExplanationItem",
    "GenieTip",
    "explain_result",
    "format_currency",
    "format_rate",
    "genie_tips",
]
