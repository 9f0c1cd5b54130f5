"""W-2 import: turn one or two W-2 forms into a tax calculation request."""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .taxes.schemas import DeductionType, FilingStatus, ItemizedDeductions, TaxInput

logger = logging.getLogger(__name__)

# Box 12 codes for elective deferrals (401k, 403b, 408k6, 457b, SIMPLE)
RETIREMENT_CODES = frozenset({"D", "E", "F", "G", "S"})
# Box 12 code for employer + employee HSA contributions
HSA_CODE = "W"


class W2ImportError(ValueError):
    """Raised when a W-2 form cannot be imported."""
    pass


class W2Form(BaseModel):
    """The W-2 boxes used for a tax estimate.

    Accepts either descriptive field names or box numbers (box1, box2, ...).
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    wages: float = Field(default=0, ge=0, alias="box1", description="Box 1: wages, tips, other compensation")
    federal_withheld: float = Field(default=0, ge=0, alias="box2", description="Box 2: federal income tax withheld")
    social_security_wages: float = Field(default=0, ge=0, alias="box3", description="Box 3: social security wages")
    social_security_withheld: float = Field(default=0, ge=0, alias="box4", description="Box 4: social security tax withheld")
    medicare_wages: float = Field(default=0, ge=0, alias="box5", description="Box 5: Medicare wages and tips")
    medicare_withheld: float = Field(default=0, ge=0, alias="box6", description="Box 6: Medicare tax withheld")
    box12_code: Optional[str] = Field(default=None, description="Box 12 code (D, E, F, G, S = 401k; W = HSA)")
    box12_amount: float = Field(default=0, ge=0, description="Box 12 amount")
    state_withheld: float = Field(default=0, ge=0, alias="box17", description="Box 17: state income tax")

    @property
    def contribution_401k(self) -> float:
        if self.box12_amount > 0 and self.box12_code and self.box12_code.upper() in RETIREMENT_CODES:
            return self.box12_amount
        return 0.0

    @property
    def contribution_hsa(self) -> float:
        if self.box12_amount > 0 and self.box12_code and self.box12_code.upper() == HSA_CODE:
            return self.box12_amount
        return 0.0


def load_w2_file(path: Union[str, Path]) -> W2Form:
    """Load a W-2 form from a YAML or JSON file.

    Raises:
        W2ImportError: If the file is not a mapping or has invalid boxes
    """
    path = Path(path)
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise W2ImportError(f"{path.name}: not valid YAML/JSON: {e}") from e

    if not isinstance(data, dict):
        raise W2ImportError(f"{path.name}: expected a mapping of W-2 boxes")

    try:
        return W2Form.model_validate(data)
    except ValidationError as e:
        raise W2ImportError(f"{path.name}: invalid W-2 data:\n{e}") from e


def build_w2_input(
    person1: W2Form,
    person2: Optional[W2Form] = None,
    *,
    filing_status: FilingStatus = "single",
    state: str = "CA",
    capital_loss: float = 0,
    dependents: int = 0,
    deduction_type: DeductionType = "standard",
    itemized: Optional[ItemizedDeductions] = None,
) -> TaxInput:
    """Combine up to two W-2 forms into a TaxInput.

    Wages, box 12 contributions and withholding are summed across forms.
    The second form may be all zeros (a non-working spouse).

    Raises:
        W2ImportError: If the first form reports no wages
    """
    if person1.wages <= 0:
        raise W2ImportError("Please enter a value for Box 1 (Wages)")

    forms = [person1] if person2 is None else [person1, person2]
    logger.debug(f"building W-2 input from {len(forms)} form(s)")

    return TaxInput(
        gross_income=sum(form.wages for form in forms),
        filing_status=filing_status,
        state=state,
        contribution_401k=sum(form.contribution_401k for form in forms),
        contribution_hsa=sum(form.contribution_hsa for form in forms),
        capital_loss=capital_loss,
        dependents=dependents,
        deduction_type=deduction_type,
        itemized=itemized or ItemizedDeductions(),
        federal_withheld=sum(form.federal_withheld for form in forms),
        state_withheld=sum(form.state_withheld for form in forms),
        social_security_withheld=sum(form.social_security_withheld for form in forms),
        medicare_withheld=sum(form.medicare_withheld for form in forms),
        earner_incomes=tuple(form.wages for form in forms),
    )
