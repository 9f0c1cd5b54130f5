"""Tests for result explanations and genie tips."""

import pytest

from taxgenie.sdk import explain_result, format_currency, format_rate, genie_tips
from taxgenie.sdk.taxes import ItemizedDeductions, PotentialSavings, TaxInput, compute_taxes
from taxgenie.sdk.taxes.tables import DATA_DIR, load_tax_tables_file


@pytest.fixture(scope="module")
def tables():
    return load_tax_tables_file(DATA_DIR / "2025.yaml")


def labels(items):
    return [item.label for item in items]


class TestFormatting:

    @pytest.mark.parametrize("amount,expected", [
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        (1000000, "$1,000,000.00"),
        (-3, "-$3.00"),
    ])
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_format_rate(self):
        assert format_rate(0.1234) == "12.34%"
        assert format_rate(0) == "0.00%"


class TestExplainResult:

    def test_basic_order(self, tables):
        result = compute_taxes(TaxInput(gross_income=100000, state="CA"), tables)
        items = explain_result(result)

        assert labels(items) == [
            "Annual Gross Income",
            "Standard Deduction",
            "Taxable Income",
            "Federal Tax (before credits)",
            "Federal Income Tax",
            "State Income Tax (CA)",
            "Social Security Tax",
            "Medicare Tax",
            "Total Tax (incl. FICA)",
        ]
        assert items[-1].amount == pytest.approx(result.total_tax_owed)

    def test_pretax_lines_and_agi(self, tables):
        result = compute_taxes(
            TaxInput(gross_income=100000, contribution_401k=10000, contribution_hsa=2000, capital_loss=5000),
            tables,
        )
        by_label = {item.label: item for item in explain_result(result)}

        assert by_label["401(k) Contribution (Pre-tax)"].subtract
        assert by_label["HSA Contribution (Pre-tax)"].amount == 2000
        assert by_label["Capital Loss Deduction"].amount == 3000
        assert by_label["Capital Loss Carryforward (next year)"].amount == 2000
        assert by_label["Adjusted Gross Income"].amount == 85000
        assert by_label["Tax Saved by Pre-tax Contributions"].amount == pytest.approx(result.tax_savings)

    def test_itemized_details(self, tables):
        itemized = ItemizedDeductions(mortgage_interest=14000, medical_expenses=10000)
        result = compute_taxes(
            TaxInput(gross_income=100000, deduction_type="itemized", itemized=itemized), tables,
        )
        by_label = {item.label: item for item in explain_result(result)}

        assert by_label["Itemized Deductions"].amount == pytest.approx(16500)
        assert by_label["  Mortgage Interest"].kind == "detail"
        assert by_label["  Medical Expenses (above 7.5% of AGI)"].amount == pytest.approx(2500)
        assert "Standard Deduction" not in by_label

    def test_child_credit_shows_applied_amount(self, tables):
        result = compute_taxes(TaxInput(gross_income=30000, dependents=3), tables)
        by_label = {item.label: item for item in explain_result(result)}

        item = by_label["Child Tax Credit (3 dependents)"]
        assert item.kind == "credit"
        assert item.amount == pytest.approx(result.federal_tax_before_credit)

    def test_single_dependent_label(self, tables):
        result = compute_taxes(TaxInput(gross_income=80000, dependents=1), tables)
        assert "Child Tax Credit (1 dependent)" in labels(explain_result(result))

    def test_refund_line(self, tables):
        result = compute_taxes(TaxInput(gross_income=60000, state="TX", federal_withheld=20000), tables)
        items = explain_result(result)

        assert items[-1].label == "Estimated Refund"
        assert items[-1].kind == "refund"
        assert items[-1].amount == pytest.approx(result.refund_or_owed)

    def test_owed_line_is_positive(self, tables):
        result = compute_taxes(TaxInput(gross_income=60000, federal_withheld=100), tables)
        items = explain_result(result)

        assert items[-1].label == "Estimated Amount Owed"
        assert items[-1].amount == pytest.approx(-result.refund_or_owed)
        assert items[-1].amount > 0

    def test_no_withholding_no_refund_line(self, tables):
        result = compute_taxes(TaxInput(gross_income=60000), tables)
        assert "Total Withheld" not in labels(explain_result(result))

    def test_additional_medicare_line(self, tables):
        result = compute_taxes(TaxInput(gross_income=250000), tables)
        assert "Additional Medicare Tax" in labels(explain_result(result))

    def test_to_dict(self, tables):
        result = compute_taxes(TaxInput(gross_income=50000), tables)
        first = explain_result(result)[0].to_dict()

        assert first == {"label": "Annual Gross Income", "amount": 50000, "kind": "base", "subtract": False}


class TestGenieTips:

    def test_tips_for_each_account_with_room(self):
        tips = genie_tips(PotentialSavings(potential_401k_savings=1200, potential_hsa_savings=400, total=1600))

        assert [tip.label for tip in tips] == [
            "Max out your 401(k) contribution",
            "Max out your HSA contribution",
        ]
        assert tips[0].amount == 1200

    def test_no_tips_when_maxed(self):
        assert genie_tips(PotentialSavings(potential_401k_savings=0, potential_hsa_savings=0, total=0)) == []
