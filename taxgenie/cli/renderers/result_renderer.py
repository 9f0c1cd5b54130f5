"""Rich renderer for tax results.

Transforms SDK results into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from taxgenie.sdk import (
    ExplanationItem,
    GenieTip,
    TaxResult,
    format_currency,
    format_rate,
)
from taxgenie.sdk.taxes import BracketSlice


_KIND_STYLES = {
    "base": "bold",
    "deduction": "cyan",
    "detail": "dim",
    "tax": "",
    "credit": "green",
    "total": "bold magenta",
    "refund": "bold green",
    "owed": "bold red",
}


def render_result(
    console: Console,
    result: TaxResult,
    items: list[ExplanationItem],
    tips: list[GenieTip],
    brackets: list[BracketSlice],
) -> None:
    """Render a tax result as Rich tables.

    Args:
        console: Rich Console instance
        result: Output of compute_taxes()
        items: Output of explain_result(result)
        tips: Output of genie_tips() for the result
        brackets: Federal bracket_breakdown() of the taxable income
    """
    _render_summary(console, result)
    _render_explanation(console, items)
    if brackets:
        _render_brackets(console, brackets)
    if tips:
        _render_tips(console, tips)


def _render_summary(console: Console, result: TaxResult) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    table.add_row("Federal tax", format_currency(result.federal_tax))
    table.add_row(f"State tax ({result.state})", format_currency(result.state_tax))
    table.add_row("Social Security", format_currency(result.social_security_tax))
    table.add_row("Medicare", format_currency(result.medicare_tax + result.additional_medicare_tax))
    table.add_row("Total tax", f"[bold]{format_currency(result.total_tax_owed)}[/bold]")
    table.add_row("Effective rate", format_rate(result.effective_rate_with_fica))

    title = f"{result.year} Tax Estimate ({result.filing_status.replace('_', ' ')})"
    console.print(Panel(table, title=title, border_style="magenta"))


def _render_explanation(console: Console, items: list[ExplanationItem]) -> None:
    table = Table(title="How we calculated it", box=box.SIMPLE, show_header=False)
    table.add_column("Step")
    table.add_column("Amount", justify="right")

    for item in items:
        style = _KIND_STYLES.get(item.kind, "")
        amount = "" if item.amount is None else format_currency(item.amount)
        if item.subtract and amount:
            amount = f"- {amount}"
        table.add_row(item.label, amount, style=style)

    console.print(table)


def _render_brackets(console: Console, brackets: list[BracketSlice]) -> None:
    table = Table(title="Federal brackets", box=box.SIMPLE)
    table.add_column("Rate", justify="right")
    table.add_column("Earnings Above", justify="right")
    table.add_column("Taxed Here", justify="right")
    table.add_column("Tax", justify="right")

    for bracket in brackets:
        table.add_row(
            f"{bracket.rate:.0%}",
            format_currency(max(bracket.lower - 1, 0)),
            format_currency(bracket.amount),
            format_currency(bracket.tax),
        )

    console.print(table)


def _render_tips(console: Console, tips: list[GenieTip]) -> None:
    lines = [
        f"{tip.label}: save an additional [bold green]{format_currency(tip.amount)}[/bold green] in taxes!"
        for tip in tips
    ]
    total = sum(tip.amount for tip in tips)
    lines.append("")
    lines.append(f"Total potential savings: [bold green]{format_currency(total)}[/bold green]")
    console.print(Panel("\n".join(lines), title="Genie Tips", border_style="green"))
