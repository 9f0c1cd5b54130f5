"""Step-by-step explanation of a tax result and the genie savings tips.

Produces plain data (label/amount/kind rows) that renderers turn into
text, tables or JSON.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from .taxes.schemas import PotentialSavings, TaxResult


@dataclass(frozen=True)
class ExplanationItem:
    """One line of the explanation."""

    label: str
    amount: Optional[float]
    kind: str  # base, deduction, detail, tax, credit, total, refund, owed
    subtract: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GenieTip:
    label: str
    amount: float


def format_currency(amount: float) -> str:
    """Format as US dollars with cents: 1234.5 -> $1,234.50, -3 -> -$3.00."""
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def format_rate(rate: float) -> str:
    """Format a fractional rate as a percentage: 0.1234 -> 12.34%."""
    return f"{rate * 100:.2f}%"


def explain_result(result: TaxResult) -> list[ExplanationItem]:
    """Build the explanation lines for a tax result, in calculation order."""
    items = [ExplanationItem("Annual Gross Income", result.gross_income, "base")]

    if result.contribution_401k > 0:
        items.append(ExplanationItem("401(k) Contribution (Pre-tax)", result.contribution_401k, "deduction", True))
    if result.contribution_hsa > 0:
        items.append(ExplanationItem("HSA Contribution (Pre-tax)", result.contribution_hsa, "deduction", True))
    if result.capital_loss_deduction > 0:
        items.append(ExplanationItem("Capital Loss Deduction", result.capital_loss_deduction, "deduction", True))
    if result.capital_loss_carryforward > 0:
        items.append(ExplanationItem("Capital Loss Carryforward (next year)", result.capital_loss_carryforward, "detail"))

    if result.adjusted_gross_income != result.gross_income:
        items.append(ExplanationItem("Adjusted Gross Income", result.adjusted_gross_income, "base"))

    if result.deduction_type == "itemized":
        items.append(ExplanationItem("Itemized Deductions", result.itemized_total, "deduction", True))
        itemized = result.itemized
        medical_deductible = result.itemized_total - (
            itemized.mortgage_interest + itemized.property_taxes + itemized.charitable_donations
        )
        for label, amount in (
            ("Mortgage Interest", itemized.mortgage_interest),
            ("Property Taxes", itemized.property_taxes),
            ("Charitable Donations", itemized.charitable_donations),
            ("Medical Expenses (above 7.5% of AGI)", medical_deductible),
        ):
            if amount > 0:
                items.append(ExplanationItem(f"  {label}", amount, "detail"))
    else:
        items.append(ExplanationItem("Standard Deduction", result.deduction, "deduction", True))

    items.append(ExplanationItem("Taxable Income", result.taxable_income, "base"))
    items.append(ExplanationItem("Federal Tax (before credits)", result.federal_tax_before_credit, "tax"))

    if result.child_credit > 0:
        label = f"Child Tax Credit ({result.dependents} dependent{'s' if result.dependents != 1 else ''})"
        items.append(ExplanationItem(label, result.child_credit, "credit", True))

    items.append(ExplanationItem("Federal Income Tax", result.federal_tax, "tax"))
    items.append(ExplanationItem(f"State Income Tax ({result.state})", result.state_tax, "tax"))
    items.append(ExplanationItem("Social Security Tax", result.social_security_tax, "tax"))
    items.append(ExplanationItem("Medicare Tax", result.medicare_tax, "tax"))
    if result.additional_medicare_tax > 0:
        items.append(ExplanationItem("Additional Medicare Tax", result.additional_medicare_tax, "tax"))

    items.append(ExplanationItem("Total Tax (incl. FICA)", result.total_tax_owed, "total"))

    if result.total_withheld > 0:
        items.append(ExplanationItem("Total Withheld", result.total_withheld, "base"))
        if result.is_refund:
            items.append(ExplanationItem("Estimated Refund", result.refund_or_owed, "refund"))
        else:
            items.append(ExplanationItem("Estimated Amount Owed", -result.refund_or_owed, "owed"))

    if result.tax_savings > 0:
        items.append(ExplanationItem("Tax Saved by Pre-tax Contributions", result.tax_savings, "credit"))

    return items


def genie_tips(savings: PotentialSavings) -> list[GenieTip]:
    """Tips for every account that still has room to save tax."""
    tips = []
    if savings.potential_401k_savings > 0:
        tips.append(GenieTip("Max out your 401(k) contribution", savings.potential_401k_savings))
    if savings.potential_hsa_savings > 0:
        tips.append(GenieTip("Max out your HSA contribution", savings.potential_hsa_savings))
    return tips
