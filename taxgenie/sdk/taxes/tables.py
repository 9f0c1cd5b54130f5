"""Tax table store.

Loads the yearly tax data (taxes/data/YYYY.yaml, or a file configured via
the tax_data_path setting), validates it, and freezes it into a TaxTables
bundle that every calculation receives explicitly. Nothing here is
mutated after load.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from .schemas import (
    FILING_STATUSES,
    FlatStateRules,
    NoStateRules,
    ProgressiveStateRules,
    TaxBracketRules,
    TaxDataRules,
)

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


class DataFormatError(ValueError):
    """Raised when tax data is missing required keys or is malformed."""
    pass


class _Unbounded:
    """Upper bound of the open-ended top bracket."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNBOUNDED"

    def __reduce__(self):
        return (_Unbounded, ())


UNBOUNDED = _Unbounded()


@dataclass(frozen=True)
class Bracket:
    """A band of income taxed at a single marginal rate."""

    rate: float
    min: float
    max: Union[float, _Unbounded]

    @property
    def is_unbounded(self) -> bool:
        return self.max is UNBOUNDED

    @property
    def width(self) -> Optional[float]:
        """Dollars this bracket can hold, or None for the top bracket."""
        if self.is_unbounded:
            return None
        return self.max - max(self.min - 1, 0)


@dataclass(frozen=True)
class TaxYearTable:
    year: int
    federal_brackets: Mapping[str, tuple]
    standard_deductions: Mapping[str, float]
    child_tax_credit: float


@dataclass(frozen=True)
class FicaRates:
    social_security_rate: float
    medicare_rate: float
    additional_medicare_rate: float
    social_security_wage_base: float
    additional_medicare_threshold: Mapping[str, float]


@dataclass(frozen=True)
class ContributionLimits:
    max_401k: float
    hsa_family_max: float

    def max_401k_per_earner(self, incomes) -> list:
        """Per-person 401(k) ceilings: the lesser of wages and the limit.

        The first earner always gets a slot; later earners only count
        when they have wages.
        """
        maxima = []
        for index, income in enumerate(incomes):
            if index > 0 and income <= 0:
                maxima.append(0.0)
                continue
            maxima.append(max(0.0, min(income, self.max_401k)))
        return maxima


@dataclass(frozen=True)
class ProgressiveStateTax:
    brackets: tuple

    kind = "progressive"


@dataclass(frozen=True)
class FlatStateTax:
    rate: float

    kind = "flat"


@dataclass(frozen=True)
class NoStateTax:
    kind = "none"


StateTaxRule = Union[ProgressiveStateTax, FlatStateTax, NoStateTax]

NO_STATE_TAX = NoStateTax()


@dataclass(frozen=True)
class TaxTables:
    """Everything a calculation needs for one tax year."""

    year_table: TaxYearTable
    fica: FicaRates
    limits: ContributionLimits
    states: Mapping[str, StateTaxRule]

    @property
    def year(self) -> int:
        return self.year_table.year

    def federal_brackets(self, filing_status: str) -> tuple:
        return self.year_table.federal_brackets[filing_status]

    def standard_deduction(self, filing_status: str) -> float:
        return self.year_table.standard_deductions[filing_status]

    def state_rule(self, state: str) -> StateTaxRule:
        """Look up a state's rule. Unknown states owe no state tax."""
        rule = self.states.get((state or "").upper())
        if rule is None:
            logger.debug(f"no state tax data for '{state}', treating as no income tax")
            return NO_STATE_TAX
        return rule


def _freeze_brackets(brackets: list[TaxBracketRules], where: str) -> tuple:
    """Check bracket ordering and convert the null top bound to UNBOUNDED."""
    if not brackets:
        raise DataFormatError(f"{where}: bracket list is empty")

    if brackets[0].min != 0:
        raise DataFormatError(f"{where}: first bracket must start at 0, got {brackets[0].min}")

    frozen = []
    last = len(brackets) - 1
    for index, bracket in enumerate(brackets):
        if bracket.max is None:
            if index != last:
                raise DataFormatError(f"{where}: only the top bracket may have no upper limit (bracket {index})")
            frozen.append(Bracket(rate=bracket.rate, min=bracket.min, max=UNBOUNDED))
            continue

        if bracket.max < bracket.min:
            raise DataFormatError(f"{where}: bracket {index} max {bracket.max} is below min {bracket.min}")
        if index < last and brackets[index + 1].min != bracket.max + 1:
            raise DataFormatError(
                f"{where}: bracket {index + 1} must start at {bracket.max + 1:g}, "
                f"got {brackets[index + 1].min:g}"
            )
        frozen.append(Bracket(rate=bracket.rate, min=bracket.min, max=bracket.max))

    if not frozen[-1].is_unbounded:
        raise DataFormatError(f"{where}: top bracket must have no upper limit (max: null)")

    return tuple(frozen)


def _require_statuses(mapping: dict, key: str, year: int) -> None:
    missing = [status for status in FILING_STATUSES if status not in mapping]
    if missing:
        raise DataFormatError(f"{key} for {year} is missing filing status(es): {', '.join(missing)}")


def _freeze_state(code: str, rules) -> StateTaxRule:
    if isinstance(rules, ProgressiveStateRules):
        return ProgressiveStateTax(brackets=_freeze_brackets(rules.brackets, f"state_tax_data.{code}"))
    if isinstance(rules, FlatStateRules):
        return FlatStateTax(rate=rules.rate)
    if isinstance(rules, NoStateRules):
        return NO_STATE_TAX
    raise DataFormatError(f"state_tax_data.{code}: unknown rule {rules!r}")


def load_tax_tables(dataset: dict) -> TaxTables:
    """Validate a tax dataset and freeze it into TaxTables.

    Args:
        dataset: Parsed tax data (see taxes/data/2025.yaml for the layout)

    Returns:
        Immutable TaxTables for the dataset's current_year

    Raises:
        DataFormatError: If required keys are missing or brackets are malformed
    """
    if not isinstance(dataset, dict):
        raise DataFormatError("Tax data must be a mapping")
    if "current_year" not in dataset:
        raise DataFormatError("Tax data is missing 'current_year'")

    year = dataset["current_year"]
    try:
        rules = TaxDataRules.model_validate(dataset)
    except ValidationError as e:
        raise DataFormatError(f"Tax data for {year} is invalid:\n{e}") from e

    _require_statuses(rules.federal_tax_brackets, "federal_tax_brackets", rules.current_year)
    _require_statuses(rules.standard_deductions, "standard_deductions", rules.current_year)
    _require_statuses(
        rules.fica_rates.additional_medicare_threshold,
        "fica_rates.additional_medicare_threshold",
        rules.current_year,
    )

    federal = {
        status: _freeze_brackets(rules.federal_tax_brackets[status], f"federal_tax_brackets.{status}")
        for status in FILING_STATUSES
    }
    states = {
        code.upper(): _freeze_state(code, state_rules)
        for code, state_rules in rules.state_tax_data.items()
    }

    tables = TaxTables(
        year_table=TaxYearTable(
            year=rules.current_year,
            federal_brackets=MappingProxyType(federal),
            standard_deductions=MappingProxyType(dict(rules.standard_deductions)),
            child_tax_credit=rules.child_tax_credit,
        ),
        fica=FicaRates(
            social_security_rate=rules.fica_rates.social_security,
            medicare_rate=rules.fica_rates.medicare,
            additional_medicare_rate=rules.fica_rates.additional_medicare,
            social_security_wage_base=rules.fica_rates.social_security_wage_base,
            additional_medicare_threshold=MappingProxyType(dict(rules.fica_rates.additional_medicare_threshold)),
        ),
        limits=ContributionLimits(
            max_401k=rules.contribution_limits.contribution_401k,
            hsa_family_max=rules.contribution_limits.hsa_family,
        ),
        states=MappingProxyType(states),
    )
    logger.debug(f"loaded tax tables for {tables.year}: {len(states)} state(s)")
    return tables


def get_available_years() -> list[int]:
    """Get sorted list of bundled tax data years (descending)."""
    years = [int(p.stem) for p in DATA_DIR.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def get_tax_data_path(year: Optional[int] = None) -> Path:
    """Resolve the tax data file to load.

    Resolution order:
    1. tax_data_path setting (settings.json)
    2. Bundled taxes/data/{year}.yaml (latest available year if year is None)

    Raises:
        FileNotFoundError: If the resolved file does not exist
    """
    from ..config import get_tax_data_override

    override = get_tax_data_override()
    if override is not None:
        if not override.exists():
            raise FileNotFoundError(
                f"Tax data not found at configured path: {override}\n\n"
                f"Update with: tax-genie settings set tax_data_path /path/to/tax-data.yaml"
            )
        return override

    if year is None:
        available = get_available_years()
        if not available:
            raise FileNotFoundError(f"No tax data files found in {DATA_DIR}")
        year = available[0]

    data_file = DATA_DIR / f"{year}.yaml"
    if not data_file.exists():
        raise FileNotFoundError(f"Tax data file not found for year {year}: {data_file}")
    return data_file


def load_tax_tables_file(path: Union[str, Path]) -> TaxTables:
    """Load and freeze tax tables from a YAML (or JSON) file."""
    path = Path(path)
    with open(path, "r") as f:
        try:
            dataset = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DataFormatError(f"{path.name}: not valid YAML: {e}") from e

    logger.debug(f"loading tax data from {path}")
    return load_tax_tables(dataset)


@lru_cache(maxsize=None)
def _load_cached(path: str) -> TaxTables:
    return load_tax_tables_file(path)


def load_tax_data(year: Optional[int] = None) -> TaxTables:
    """Load tax tables once per file and share them for the process lifetime.

    Args:
        year: Tax year to load (latest bundled year if None)

    Raises:
        FileNotFoundError: If no data file exists for the year
        DataFormatError: If the file is malformed, or its current_year
            does not match the requested year
    """
    path = get_tax_data_path(year)
    tables = _load_cached(str(path.resolve()))
    if year is not None and tables.year != int(year):
        raise DataFormatError(f"{path.name} declares current_year {tables.year}, expected {year}")
    return tables
