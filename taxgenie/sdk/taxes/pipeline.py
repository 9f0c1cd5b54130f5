"""Income tax calculation pipeline.

compute_taxes() runs the full calculation for one TaxInput, in order:

1. FICA on gross wages (before any pre-tax deduction)
2. Capital loss deduction and carryforward
3. Adjusted gross income
4. Standard vs itemized deduction
5. Taxable income
6. Federal tax less child tax credit
7. State tax on AGI
8. Totals, effective rates and withholding reconciliation

Every step clamps at zero where a negative amount would be meaningless,
so out-of-range input produces numbers rather than errors. Range checks
belong to the caller (taxgenie.sdk.validation).
"""

import logging
from dataclasses import dataclass

from .brackets import compute_progressive_tax
from .savings import calculate_tax_savings
from .schemas import ItemizedDeductions, TaxInput, TaxResult
from .tables import FicaRates, FlatStateTax, ProgressiveStateTax, StateTaxRule, TaxTables

logger = logging.getLogger(__name__)

# IRS Topic 409: net capital loss deductible against ordinary income per year
CAPITAL_LOSS_LIMIT = 3000
CAPITAL_LOSS_LIMIT_MFS = 1500

# Schedule A: only medical expenses above 7.5% of AGI are deductible
MEDICAL_EXPENSE_AGI_FLOOR = 0.075


@dataclass(frozen=True)
class FicaTaxes:
    social_security: float
    medicare: float
    additional_medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare + self.additional_medicare


@dataclass(frozen=True)
class DeductionChoice:
    amount: float
    deduction_type: str  # "standard" or "itemized"
    itemized_total: float


def calculate_fica(gross_income: float, filing_status: str, fica: FicaRates) -> FicaTaxes:
    """Calculate Social Security, Medicare and Additional Medicare tax on wages."""
    social_security_wages = min(gross_income, fica.social_security_wage_base)
    threshold = fica.additional_medicare_threshold[filing_status]

    return FicaTaxes(
        social_security=social_security_wages * fica.social_security_rate,
        medicare=gross_income * fica.medicare_rate,
        additional_medicare=max(0, gross_income - threshold) * fica.additional_medicare_rate,
    )


def calculate_capital_loss(capital_loss: float, filing_status: str) -> tuple[float, float]:
    """Split a net capital loss into this year's deduction and the carryforward.

    Returns:
        Tuple of (deduction, carryforward)
    """
    limit = CAPITAL_LOSS_LIMIT_MFS if filing_status == "married_separately" else CAPITAL_LOSS_LIMIT
    deduction = min(capital_loss, limit)
    carryforward = max(0, capital_loss - limit)
    return deduction, carryforward


def calculate_itemized_total(itemized: ItemizedDeductions, adjusted_gross_income: float) -> float:
    """Sum Schedule A deductions, keeping only medical expenses above the AGI floor."""
    medical_floor = adjusted_gross_income * MEDICAL_EXPENSE_AGI_FLOOR
    deductible_medical = max(0, itemized.medical_expenses - medical_floor)
    return (
        itemized.mortgage_interest
        + itemized.property_taxes
        + itemized.charitable_donations
        + deductible_medical
    )


def select_deduction(
    deduction_type: str,
    itemized: ItemizedDeductions,
    adjusted_gross_income: float,
    standard_deduction: float,
) -> DeductionChoice:
    """Pick itemized only when requested and strictly larger than standard."""
    if deduction_type != "itemized":
        return DeductionChoice(amount=standard_deduction, deduction_type="standard", itemized_total=0.0)

    itemized_total = calculate_itemized_total(itemized, adjusted_gross_income)
    if itemized_total > standard_deduction:
        return DeductionChoice(amount=itemized_total, deduction_type="itemized", itemized_total=itemized_total)
    return DeductionChoice(amount=standard_deduction, deduction_type="standard", itemized_total=itemized_total)


def calculate_state_tax(adjusted_gross_income: float, rule: StateTaxRule) -> float:
    """State income tax on AGI. No state-specific deductions are modeled."""
    if isinstance(rule, ProgressiveStateTax):
        return compute_progressive_tax(adjusted_gross_income, rule.brackets)
    if isinstance(rule, FlatStateTax):
        return adjusted_gross_income * rule.rate
    return 0.0


def compute_taxes(tax_input: TaxInput, tables: TaxTables) -> TaxResult:
    """Compute federal, state and FICA taxes for one request.

    Pure function of its arguments: the same input and tables always give
    an identical result.

    Args:
        tax_input: Validated calculation request
        tables: Tax tables from load_tax_data() / load_tax_tables()

    Returns:
        Immutable TaxResult
    """
    status = tax_input.filing_status
    gross_income = tax_input.gross_income

    # 1. FICA on gross wages
    fica = calculate_fica(gross_income, status, tables.fica)

    # 2. Capital loss
    capital_loss_deduction, capital_loss_carryforward = calculate_capital_loss(tax_input.capital_loss, status)

    # 3. AGI
    adjusted_gross_income = max(
        0,
        gross_income - tax_input.contribution_401k - tax_input.contribution_hsa - capital_loss_deduction,
    )

    # 4. Deduction
    standard_deduction = tables.standard_deduction(status)
    deduction = select_deduction(
        tax_input.deduction_type, tax_input.itemized, adjusted_gross_income, standard_deduction,
    )

    # 5. Taxable income
    taxable_income = max(0, adjusted_gross_income - deduction.amount)

    # 6. Federal tax less child tax credit
    federal_brackets = tables.federal_brackets(status)
    federal_tax_before_credit = compute_progressive_tax(taxable_income, federal_brackets)
    child_credit_available = tables.year_table.child_tax_credit * tax_input.dependents
    child_credit = min(child_credit_available, federal_tax_before_credit)
    federal_tax = federal_tax_before_credit - child_credit

    # 7. State tax
    state_rule = tables.state_rule(tax_input.state)
    state_tax = calculate_state_tax(adjusted_gross_income, state_rule)

    logger.debug(
        f"{status}/{tax_input.state}: AGI {adjusted_gross_income:.2f}, "
        f"{deduction.deduction_type} deduction {deduction.amount:.2f}, taxable {taxable_income:.2f}, "
        f"federal {federal_tax:.2f}, state {state_tax:.2f} ({state_rule.kind}), FICA {fica.total:.2f}"
    )

    # 8. Totals and withholding reconciliation
    total_tax = federal_tax + state_tax
    total_tax_owed = total_tax + fica.total
    total_withheld = (
        tax_input.federal_withheld
        + tax_input.state_withheld
        + tax_input.social_security_withheld
        + tax_input.medicare_withheld
    )
    refund_or_owed = total_withheld - total_tax_owed

    pretax_contributions = tax_input.contribution_401k + tax_input.contribution_hsa
    if pretax_contributions > 0:
        tax_savings = calculate_tax_savings(
            gross_income, pretax_contributions, standard_deduction, federal_brackets, state_rule,
        )
    else:
        tax_savings = 0.0

    return TaxResult(
        year=tables.year,
        gross_income=gross_income,
        filing_status=status,
        state=tax_input.state,
        contribution_401k=tax_input.contribution_401k,
        contribution_hsa=tax_input.contribution_hsa,
        capital_loss=tax_input.capital_loss,
        dependents=tax_input.dependents,
        itemized=tax_input.itemized,
        earner_incomes=tax_input.earner_incomes,
        social_security_tax=fica.social_security,
        medicare_tax=fica.medicare,
        additional_medicare_tax=fica.additional_medicare,
        total_fica_tax=fica.total,
        capital_loss_deduction=capital_loss_deduction,
        capital_loss_carryforward=capital_loss_carryforward,
        adjusted_gross_income=adjusted_gross_income,
        standard_deduction=standard_deduction,
        itemized_total=deduction.itemized_total,
        deduction=deduction.amount,
        deduction_type=deduction.deduction_type,
        taxable_income=taxable_income,
        federal_tax_before_credit=federal_tax_before_credit,
        child_credit=child_credit,
        federal_tax=federal_tax,
        state_tax=state_tax,
        total_tax=total_tax,
        total_tax_owed=total_tax_owed,
        federal_withheld=tax_input.federal_withheld,
        state_withheld=tax_input.state_withheld,
        social_security_withheld=tax_input.social_security_withheld,
        medicare_withheld=tax_input.medicare_withheld,
        total_withheld=total_withheld,
        refund_or_owed=refund_or_owed,
        is_refund=refund_or_owed > 0,
        effective_rate=total_tax / gross_income if gross_income > 0 else 0.0,
        effective_rate_with_fica=total_tax_owed / gross_income if gross_income > 0 else 0.0,
        tax_savings=tax_savings,
    )
