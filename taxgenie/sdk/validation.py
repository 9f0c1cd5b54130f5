"""Input validation for tax calculation requests.

The calculation engine trusts its input. This module holds the range
checks a caller runs first, with the messages shown to the user.
"""

from typing import Optional, Sequence

from .taxes.schemas import TaxInput
from .taxes.tables import TaxTables


MAX_GROSS_INCOME = 10_000_000


class InputOutOfRange(ValueError):
    """Raised when a calculation request is outside the supported range."""
    pass


def _fmt(amount: float) -> str:
    return f"${amount:,.2f}"


def validate_tax_input(
    tax_input: TaxInput,
    tables: TaxTables,
    incomes: Optional[Sequence[float]] = None,
) -> None:
    """Check a request before handing it to compute_taxes().

    Args:
        tax_input: Request to check
        tables: Tax tables (for contribution limits)
        incomes: Per-earner wages; defaults to tax_input.earner_incomes,
            then to a single earner with the full gross income

    Raises:
        InputOutOfRange: On the first failed check
    """
    gross_income = tax_input.gross_income

    if gross_income <= 0:
        raise InputOutOfRange("Please enter a valid positive income.")

    if gross_income > MAX_GROSS_INCOME:
        raise InputOutOfRange("Income amount is too large. Please enter a reasonable amount.")

    if tax_input.dependents < 0:
        raise InputOutOfRange("Number of dependents cannot be negative.")

    if tax_input.contribution_401k < 0:
        raise InputOutOfRange("401(k) contribution cannot be negative.")

    if tax_input.contribution_401k > gross_income:
        raise InputOutOfRange("401(k) contribution cannot exceed your total income.")

    if incomes is None:
        incomes = tax_input.earner_incomes or (gross_income,)
    maxima = tables.limits.max_401k_per_earner(incomes)
    max_401k = sum(maxima)
    if tax_input.contribution_401k > max_401k:
        message = f"401(k) contribution cannot exceed {_fmt(max_401k)}. "
        if len(maxima) > 1 and maxima[1] > 0:
            message += f"(Person 1: max {_fmt(maxima[0])}, Person 2: max {_fmt(maxima[1])})"
        else:
            message += (
                f"Each person can contribute up to the lesser of their income "
                f"or {_fmt(tables.limits.max_401k)}."
            )
        raise InputOutOfRange(message)

    if tax_input.contribution_hsa < 0:
        raise InputOutOfRange("HSA contribution cannot be negative.")

    if tax_input.contribution_hsa > tables.limits.hsa_family_max:
        raise InputOutOfRange(
            f"HSA contribution cannot exceed {_fmt(tables.limits.hsa_family_max)} for family coverage."
        )

    if tax_input.capital_loss < 0:
        raise InputOutOfRange("Capital loss cannot be negative.")

    itemized = tax_input.itemized
    for name, value in (
        ("Mortgage interest", itemized.mortgage_interest),
        ("Property taxes", itemized.property_taxes),
        ("Charitable donations", itemized.charitable_donations),
        ("Medical expenses", itemized.medical_expenses),
    ):
        if value < 0:
            raise InputOutOfRange(f"{name} cannot be negative.")
