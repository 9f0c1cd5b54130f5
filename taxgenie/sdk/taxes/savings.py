"""Pre-tax contribution savings ("genie tips").

Estimates how much federal + state income tax a larger 401(k) or HSA
contribution would save. This is a partial re-run of the pipeline: only
federal progressive tax (with the standard deduction) and state tax are
recomputed. FICA, the itemized-vs-standard choice and credits are held
constant, and the 401(k) and HSA estimates are independent, so the total
has no interaction term. Treat it as an approximation.
"""

import logging
from typing import Sequence

from .brackets import compute_progressive_tax
from .schemas import PotentialSavings, TaxInput, TaxResult
from .tables import Bracket, FlatStateTax, ProgressiveStateTax, StateTaxRule, TaxTables

logger = logging.getLogger(__name__)


def calculate_tax_savings(
    base_income: float,
    extra_contribution: float,
    standard_deduction: float,
    federal_brackets: Sequence[Bracket],
    state_rule: StateTaxRule,
) -> float:
    """Federal + state tax avoided by moving extra_contribution pre-tax.

    Args:
        base_income: Income before the extra contribution (AGI basis)
        extra_contribution: Additional pre-tax contribution
        standard_deduction: Deduction applied on both sides of the comparison
        federal_brackets: Brackets for the filing status
        state_rule: State rule for the taxpayer's state

    Returns:
        Tax saved (federal delta + state delta)
    """
    reduced_income = max(0, base_income - extra_contribution)

    taxable_without = max(0, base_income - standard_deduction)
    taxable_with = max(0, reduced_income - standard_deduction)
    federal_savings = (
        compute_progressive_tax(taxable_without, federal_brackets)
        - compute_progressive_tax(taxable_with, federal_brackets)
    )

    state_savings = 0.0
    if isinstance(state_rule, ProgressiveStateTax):
        state_savings = (
            compute_progressive_tax(base_income, state_rule.brackets)
            - compute_progressive_tax(reduced_income, state_rule.brackets)
        )
    elif isinstance(state_rule, FlatStateTax):
        state_savings = extra_contribution * state_rule.rate

    return federal_savings + state_savings


def remaining_401k_room(tax_input: TaxInput, tables: TaxTables) -> float:
    """401(k) room left under the per-earner ceilings."""
    incomes = tax_input.earner_incomes or (tax_input.gross_income,)
    ceiling = sum(tables.limits.max_401k_per_earner(incomes))
    return ceiling - tax_input.contribution_401k


def remaining_hsa_room(tax_input: TaxInput, tables: TaxTables) -> float:
    return tables.limits.hsa_family_max - tax_input.contribution_hsa


def estimate_potential_savings(result: TaxResult, tax_input: TaxInput, tables: TaxTables) -> PotentialSavings:
    """Estimate extra savings from maxing out 401(k) and HSA contributions.

    Args:
        result: Result of compute_taxes() for tax_input
        tax_input: The request that produced result
        tables: Tax tables used for the calculation

    Returns:
        PotentialSavings with per-account savings and their sum
    """
    federal_brackets = tables.federal_brackets(tax_input.filing_status)
    state_rule = tables.state_rule(tax_input.state)

    def _savings_for(room: float) -> float:
        if room <= 0:
            return 0.0
        return calculate_tax_savings(
            result.adjusted_gross_income,
            room,
            result.standard_deduction,
            federal_brackets,
            state_rule,
        )

    room_401k = remaining_401k_room(tax_input, tables)
    room_hsa = remaining_hsa_room(tax_input, tables)
    potential_401k = _savings_for(room_401k)
    potential_hsa = _savings_for(room_hsa)

    logger.debug(
        f"genie: 401k room {room_401k:.2f} saves {potential_401k:.2f}, "
        f"HSA room {room_hsa:.2f} saves {potential_hsa:.2f}"
    )

    return PotentialSavings(
        potential_401k_savings=potential_401k,
        potential_hsa_savings=potential_hsa,
        total=potential_401k + potential_hsa,
    )
