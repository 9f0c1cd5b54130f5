"""Progressive (bracketed) tax calculation.

Used for both federal income tax and progressive state income tax; only
the bracket table differs.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .tables import Bracket


@dataclass(frozen=True)
class BracketSlice:
    """The part of an income that fell into one bracket."""

    rate: float
    lower: float
    upper: Optional[float]  # None for the open-ended top bracket
    amount: float
    tax: float


def _slice_amount(remaining: float, bracket: Bracket) -> float:
    if bracket.is_unbounded:
        return remaining
    return min(remaining, bracket.width)


def compute_progressive_tax(income: float, brackets: Sequence[Bracket]) -> float:
    """Calculate tax owed on income across ordered brackets.

    Each bracket taxes at most its own width; whatever is left flows into
    the next bracket. The open-ended top bracket absorbs everything that
    remains.

    Args:
        income: Amount to tax (0 or negative yields 0)
        brackets: Brackets in ascending order

    Returns:
        Tax owed (never negative)
    """
    tax = 0.0
    remaining = income

    for bracket in brackets:
        if remaining <= 0:
            break

        taxable_in_bracket = _slice_amount(remaining, bracket)
        tax += taxable_in_bracket * bracket.rate
        remaining -= taxable_in_bracket

    return tax


def bracket_breakdown(income: float, brackets: Sequence[Bracket]) -> list[BracketSlice]:
    """Split income across brackets, one BracketSlice per bracket reached.

    The slice taxes sum to compute_progressive_tax(income, brackets).
    """
    slices = []
    remaining = income

    for bracket in brackets:
        if remaining <= 0:
            break

        amount = _slice_amount(remaining, bracket)
        slices.append(BracketSlice(
            rate=bracket.rate,
            lower=bracket.min,
            upper=None if bracket.is_unbounded else bracket.max,
            amount=amount,
            tax=amount * bracket.rate,
        ))
        remaining -= amount

    return slices


def marginal_rate(income: float, brackets: Sequence[Bracket]) -> float:
    """Rate applied to the last dollar of income (0 when there is no income)."""
    slices = bracket_breakdown(income, brackets)
    return slices[-1].rate if slices else 0.0
