"""Pydantic schemas for tax data and tax calculations.

The *Rules schemas validate the taxes/data/*.yaml files before they are
frozen into TaxTables. TaxInput, TaxResult and PotentialSavings are the
request/response records of the calculation pipeline; they are frozen so
a result handed to a caller cannot drift from what was computed.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


FilingStatus = Literal["single", "head_of_household", "married_jointly", "married_separately"]
DeductionType = Literal["standard", "itemized"]

FILING_STATUSES = ("single", "head_of_household", "married_jointly", "married_separately")


# =============================================================================
# Tax data (YAML) schemas
# =============================================================================


class TaxBracketRules(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid")

    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")
    min: float = Field(..., ge=0, description="First dollar taxed at this rate")
    max: Optional[float] = Field(default=None, description="Last dollar taxed at this rate (null = no limit)")


class FicaRules(BaseModel):
    """Social Security and Medicare payroll tax rules."""
    model_config = ConfigDict(extra="forbid")

    social_security: float = Field(..., ge=0, le=1, description="SS tax rate (employee portion)")
    medicare: float = Field(..., ge=0, le=1, description="Medicare tax rate (employee portion)")
    additional_medicare: float = Field(..., ge=0, le=1, description="Additional Medicare surtax rate")
    social_security_wage_base: float = Field(..., gt=0, description="SS wage base (max taxable)")
    additional_medicare_threshold: dict[FilingStatus, float] = Field(
        ..., description="Wages above this are subject to the surtax, per filing status",
    )


class ContributionLimitRules(BaseModel):
    """Pre-tax contribution ceilings, per person."""
    model_config = ConfigDict(extra="forbid")

    contribution_401k: float = Field(..., ge=0, description="401(k) employee elective limit")
    hsa_family: float = Field(..., ge=0, description="HSA family coverage limit")


class ProgressiveStateRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["progressive"]
    brackets: list[TaxBracketRules]


class FlatStateRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["flat"]
    rate: float = Field(..., ge=0, le=1)


class NoStateRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["none"]


StateRules = Annotated[
    Union[ProgressiveStateRules, FlatStateRules, NoStateRules],
    Field(discriminator="type"),
]


class TaxDataRules(BaseModel):
    """Complete tax data for a year."""
    model_config = ConfigDict(extra="ignore")  # Allow unknown fields for forward compat

    current_year: int
    federal_tax_brackets: dict[FilingStatus, list[TaxBracketRules]]
    standard_deductions: dict[FilingStatus, float]
    child_tax_credit: float = Field(..., ge=0, description="Credit per dependent")
    fica_rates: FicaRules
    contribution_limits: ContributionLimitRules
    state_tax_data: dict[str, StateRules] = Field(default_factory=dict)


# =============================================================================
# Calculation request / response
# =============================================================================


class ItemizedDeductions(BaseModel):
    """Schedule A amounts entered by the user."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    mortgage_interest: float = 0
    property_taxes: float = 0
    charitable_donations: float = 0
    medical_expenses: float = Field(
        default=0,
        description="Total medical expenses; only the part above 7.5% of AGI is deductible",
    )


class TaxInput(BaseModel):
    """One tax calculation request.

    Amounts are expected to be validated by the caller (see
    taxgenie.sdk.validation). The engine does not re-check ranges.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income: float = Field(..., description="Combined wages of up to two earners")
    filing_status: FilingStatus = "single"
    state: str = Field(default="CA", description="Two-letter state code")
    contribution_401k: float = 0
    contribution_hsa: float = 0
    capital_loss: float = 0
    dependents: int = 0
    deduction_type: DeductionType = "standard"
    itemized: ItemizedDeductions = Field(default_factory=ItemizedDeductions)
    federal_withheld: float = 0
    state_withheld: float = 0
    social_security_withheld: float = 0
    medicare_withheld: float = 0
    earner_incomes: tuple[float, ...] = Field(
        default=(),
        description="Per-earner wages; sets the per-person 401(k) ceiling (empty = one earner)",
    )


class TaxResult(BaseModel):
    """Outcome of compute_taxes(). Rates are fractions of gross income."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int

    # Echoed inputs
    gross_income: float
    filing_status: FilingStatus
    state: str
    contribution_401k: float
    contribution_hsa: float
    capital_loss: float
    dependents: int
    itemized: ItemizedDeductions
    earner_incomes: tuple[float, ...] = ()

    # FICA
    social_security_tax: float
    medicare_tax: float
    additional_medicare_tax: float
    total_fica_tax: float

    # Income and deductions
    capital_loss_deduction: float
    capital_loss_carryforward: float
    adjusted_gross_income: float
    standard_deduction: float
    itemized_total: float
    deduction: float
    deduction_type: DeductionType
    taxable_income: float

    # Income tax
    federal_tax_before_credit: float
    child_credit: float = Field(..., description="Child tax credit actually applied (capped at the tax before credits)")
    federal_tax: float
    state_tax: float
    total_tax: float
    total_tax_owed: float = Field(..., description="Income tax plus FICA")

    # Withholding reconciliation
    federal_withheld: float
    state_withheld: float
    social_security_withheld: float
    medicare_withheld: float
    total_withheld: float
    refund_or_owed: float = Field(..., description="Positive = refund, negative = amount owed")
    is_refund: bool

    effective_rate: float
    effective_rate_with_fica: float
    tax_savings: float = Field(..., description="Federal + state tax avoided by the 401(k)/HSA contributions made")


class PotentialSavings(BaseModel):
    """Extra tax that maxing out 401(k) and HSA contributions would save."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    potential_401k_savings: float = 0
    potential_hsa_savings: float = 0
    total: float = 0
