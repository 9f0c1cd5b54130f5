"""Unit tests for progressive bracket tax.

Uses the bundled 2025 federal brackets plus small hand-built bracket
lists for the bounded-table cases.
"""

import pytest

from taxgenie.sdk.taxes import (
    UNBOUNDED,
    Bracket,
    bracket_breakdown,
    compute_progressive_tax,
    marginal_rate,
)
from taxgenie.sdk.taxes.tables import DATA_DIR, load_tax_tables_file


@pytest.fixture(scope="module")
def single_brackets():
    """2025 federal brackets for single filers."""
    tables = load_tax_tables_file(DATA_DIR / "2025.yaml")
    return tables.federal_brackets("single")


@pytest.fixture
def bounded_brackets():
    """Two brackets with a finite top: $0-$100 at 10%, $101-$200 at 20%."""
    return (
        Bracket(rate=0.10, min=0, max=100),
        Bracket(rate=0.20, min=101, max=200),
    )


class TestComputeProgressiveTax:
    """Tax owed across federal brackets."""

    def test_zero_income_is_zero_tax(self, single_brackets):
        assert compute_progressive_tax(0, single_brackets) == 0

    def test_zero_income_with_any_brackets(self, bounded_brackets):
        assert compute_progressive_tax(0, bounded_brackets) == 0
        assert compute_progressive_tax(0, ()) == 0

    def test_negative_income_is_zero_tax(self, single_brackets):
        assert compute_progressive_tax(-5000, single_brackets) == 0

    def test_within_first_bracket(self, single_brackets):
        assert compute_progressive_tax(10000, single_brackets) == pytest.approx(1000.0)

    def test_first_bracket_exactly_full(self, single_brackets):
        assert compute_progressive_tax(11925, single_brackets) == pytest.approx(1192.5)

    def test_spans_three_brackets(self, single_brackets):
        # 11,925 @ 10% + 36,550 @ 12% + 1,525 @ 22%
        assert compute_progressive_tax(50000, single_brackets) == pytest.approx(5914.0)

    def test_top_bracket_absorbs_remaining_income(self, single_brackets):
        # Every finite bracket full, 373,650 @ 37% on top
        assert compute_progressive_tax(1_000_000, single_brackets) == pytest.approx(327020.25)

    def test_monotonically_non_decreasing(self, single_brackets):
        previous = 0.0
        for income in range(0, 800001, 2500):
            tax = compute_progressive_tax(income, single_brackets)
            assert tax >= previous
            previous = tax

    def test_linear_within_a_bracket(self, single_brackets):
        """One extra dollar inside the 12% bracket costs 12 cents."""
        low = compute_progressive_tax(30000, single_brackets)
        high = compute_progressive_tax(31000, single_brackets)
        assert high - low == pytest.approx(120.0)

    def test_bounded_table_ignores_income_above_top(self, bounded_brackets):
        # 100 @ 10% + 100 @ 20%; the remaining 300 has no bracket
        assert compute_progressive_tax(500, bounded_brackets) == pytest.approx(30.0)


class TestBracketBreakdown:
    """Per-bracket slices."""

    def test_slices_sum_to_income_when_unbounded(self, single_brackets):
        slices = bracket_breakdown(250000, single_brackets)
        assert sum(s.amount for s in slices) == pytest.approx(250000)

    def test_slices_sum_to_top_max_when_bounded(self, bounded_brackets):
        slices = bracket_breakdown(500, bounded_brackets)
        assert sum(s.amount for s in slices) == pytest.approx(200)

    def test_slice_taxes_match_total(self, single_brackets):
        slices = bracket_breakdown(187654.32, single_brackets)
        assert sum(s.tax for s in slices) == pytest.approx(
            compute_progressive_tax(187654.32, single_brackets)
        )

    def test_only_reached_brackets_reported(self, single_brackets):
        slices = bracket_breakdown(20000, single_brackets)
        assert [s.rate for s in slices] == [0.10, 0.12]
        assert slices[1].amount == pytest.approx(8075)

    def test_top_slice_has_no_upper(self, single_brackets):
        slices = bracket_breakdown(700000, single_brackets)
        assert slices[-1].upper is None
        assert slices[-1].rate == 0.37

    def test_no_income_no_slices(self, single_brackets):
        assert bracket_breakdown(0, single_brackets) == []


class TestMarginalRate:

    def test_marginal_rate(self, single_brackets):
        assert marginal_rate(50000, single_brackets) == 0.22

    def test_marginal_rate_no_income(self, single_brackets):
        assert marginal_rate(0, single_brackets) == 0.0


class TestBracket:

    def test_width_uses_previous_max(self):
        assert Bracket(rate=0.12, min=11926, max=48475).width == 36550

    def test_first_bracket_width(self):
        assert Bracket(rate=0.10, min=0, max=11925).width == 11925

    def test_unbounded_has_no_width(self):
        bracket = Bracket(rate=0.37, min=626351, max=UNBOUNDED)
        assert bracket.is_unbounded
        assert bracket.width is None
