"""Tax Genie CLI - Command-line interface for tax estimates."""

import json

import click
from pydantic import ValidationError
from rich.console import Console

from taxgenie import __version__
from taxgenie.sdk import (
    FILING_STATUSES,
    DataFormatError,
    InputOutOfRange,
    ItemizedDeductions,
    TaxInput,
    W2ImportError,
    build_w2_input,
    compute_taxes,
    estimate_potential_savings,
    explain_result,
    format_currency,
    genie_tips,
    get_setting,
    load_tax_data,
    load_w2_file,
    validate_tax_input,
)
from taxgenie.sdk.taxes import FlatStateTax, ProgressiveStateTax, bracket_breakdown

from .renderers.result_renderer import render_result
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="tax-genie")
def cli():
    """Tax Genie - Estimate income tax and find pre-tax savings.

    Tax data is loaded from (in order):

    \b
    1. settings.json 'tax_data_path' key (if set)
    2. Bundled tax data for the latest supported year

    Settings live in TAX_GENIE_CONFIG_PATH or ~/.config/tax-genie/.
    """
    pass


cli.add_command(settings_group)


def _load_tables():
    try:
        return load_tax_data()
    except (FileNotFoundError, DataFormatError) as e:
        raise click.ClickException(str(e))


def _itemized_options(f):
    """Attach the deduction options shared by calc and w2."""
    options = [
        click.option("--itemized", is_flag=True, help="Itemize deductions (used only if larger than standard)."),
        click.option("--mortgage-interest", type=float, default=0, help="Mortgage interest paid."),
        click.option("--property-taxes", type=float, default=0, help="Property taxes paid."),
        click.option("--charitable", type=float, default=0, help="Charitable donations."),
        click.option("--medical", type=float, default=0, help="Medical expenses (deductible above 7.5% of AGI)."),
        click.option("--capital-loss", type=float, default=0, help="Net capital loss for the year."),
        click.option("--dependents", type=int, default=0, help="Number of qualifying children."),
        click.option("--state", default=None, help="Two-letter state code (default: settings default_state)."),
        click.option("--status", type=click.Choice(FILING_STATUSES), default=None,
                     help="Filing status (default: settings default_filing_status)."),
        click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
                     help="Output format (default: text)"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_itemized(mortgage_interest, property_taxes, charitable, medical) -> ItemizedDeductions:
    return ItemizedDeductions(
        mortgage_interest=mortgage_interest,
        property_taxes=property_taxes,
        charitable_donations=charitable,
        medical_expenses=medical,
    )


def _run_calculation(tax_input: TaxInput, tables, output_format: str) -> None:
    """Validate, compute and print a result with its genie tips."""
    try:
        validate_tax_input(tax_input, tables)
    except InputOutOfRange as e:
        raise click.ClickException(str(e))

    result = compute_taxes(tax_input, tables)
    savings = estimate_potential_savings(result, tax_input, tables)
    items = explain_result(result)
    tips = genie_tips(savings)

    if output_format == "json":
        output = {
            "result": result.model_dump(),
            "explanation": [item.to_dict() for item in items],
            "potential_savings": savings.model_dump(),
        }
        click.echo(json.dumps(output, indent=2))
        return

    breakdown = bracket_breakdown(result.taxable_income, tables.federal_brackets(result.filing_status))
    render_result(Console(), result, items, tips, breakdown)


@cli.command("calc")
@click.option("--income", type=float, required=True, help="Annual wages (person 1).")
@click.option("--income2", type=float, default=0, help="Annual wages (person 2, if any).")
@click.option("--401k", "contribution_401k", type=float, default=0, help="Pre-tax 401(k) contributions (combined).")
@click.option("--hsa", "contribution_hsa", type=float, default=0, help="HSA contributions.")
@click.option("--federal-withheld", type=float, default=0, help="Federal income tax withheld.")
@click.option("--state-withheld", type=float, default=0, help="State income tax withheld.")
@click.option("--ss-withheld", type=float, default=0, help="Social Security tax withheld.")
@click.option("--medicare-withheld", type=float, default=0, help="Medicare tax withheld.")
@_itemized_options
def calc(income, income2, contribution_401k, contribution_hsa, federal_withheld, state_withheld,
         ss_withheld, medicare_withheld, itemized, mortgage_interest, property_taxes, charitable,
         medical, capital_loss, dependents, state, status, output_format):
    """Estimate federal, state and FICA taxes from entered amounts.

    \b
    Examples:
      tax-genie calc --income 100000 --state CA
      tax-genie calc --income 90000 --income2 90000 --status married_jointly --401k 20000
      tax-genie calc --income 150000 --itemized --mortgage-interest 18000 --property-taxes 9000
    """
    tables = _load_tables()

    try:
        tax_input = TaxInput(
            gross_income=income + income2,
            filing_status=status or get_setting("default_filing_status"),
            state=(state or get_setting("default_state")).upper(),
            contribution_401k=contribution_401k,
            contribution_hsa=contribution_hsa,
            capital_loss=capital_loss,
            dependents=dependents,
            deduction_type="itemized" if itemized else "standard",
            itemized=_build_itemized(mortgage_interest, property_taxes, charitable, medical),
            federal_withheld=federal_withheld,
            state_withheld=state_withheld,
            social_security_withheld=ss_withheld,
            medicare_withheld=medicare_withheld,
            earner_incomes=(income, income2) if income2 > 0 else (income,),
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid calculation input (check settings.json defaults):\n{e}")

    _run_calculation(tax_input, tables, output_format)


@cli.command("w2")
@click.argument("w2_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("spouse_w2_file", type=click.Path(exists=True, dir_okay=False), required=False)
@_itemized_options
def w2(w2_file, spouse_w2_file, itemized, mortgage_interest, property_taxes, charitable,
       medical, capital_loss, dependents, state, status, output_format):
    """Estimate taxes and refund/owed from one or two W-2 files.

    W2_FILE and SPOUSE_W2_FILE are YAML or JSON mappings of W-2 boxes,
    e.g. {box1: 85000, box2: 9000, box4: 5270, box6: 1232.5,
    box12_code: D, box12_amount: 10000, box17: 4100}.
    """
    tables = _load_tables()

    try:
        person1 = load_w2_file(w2_file)
        person2 = load_w2_file(spouse_w2_file) if spouse_w2_file else None
        tax_input = build_w2_input(
            person1,
            person2,
            filing_status=status or get_setting("default_filing_status"),
            state=(state or get_setting("default_state")).upper(),
            capital_loss=capital_loss,
            dependents=dependents,
            deduction_type="itemized" if itemized else "standard",
            itemized=_build_itemized(mortgage_interest, property_taxes, charitable, medical),
        )
    except W2ImportError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid calculation input (check settings.json defaults):\n{e}")

    _run_calculation(tax_input, tables, output_format)


@cli.group("tables")
def tables_group():
    """Inspect the loaded tax data."""
    pass


@tables_group.command("show")
@click.option("--status", type=click.Choice(FILING_STATUSES), default="single", help="Filing status for brackets.")
def tables_show(status):
    """Show deductions, FICA, limits and federal brackets."""
    tables = _load_tables()

    click.echo(f"Tax year: {tables.year}")
    click.echo(f"Standard deduction ({status}): {format_currency(tables.standard_deduction(status))}")
    click.echo(f"Child tax credit: {format_currency(tables.year_table.child_tax_credit)} per dependent")
    click.echo()
    click.echo("FICA:")
    click.echo(f"  Social Security: {tables.fica.social_security_rate:.2%} up to "
               f"{format_currency(tables.fica.social_security_wage_base)}")
    click.echo(f"  Medicare: {tables.fica.medicare_rate:.2%}")
    click.echo(f"  Additional Medicare: {tables.fica.additional_medicare_rate:.2%} over "
               f"{format_currency(tables.fica.additional_medicare_threshold[status])}")
    click.echo()
    click.echo("Contribution limits (per person):")
    click.echo(f"  401(k): {format_currency(tables.limits.max_401k)}")
    click.echo(f"  HSA (family): {format_currency(tables.limits.hsa_family_max)}")
    click.echo()
    click.echo(f"Federal brackets ({status}):")
    for bracket in tables.federal_brackets(status):
        upper = "and up" if bracket.is_unbounded else f"to {format_currency(bracket.max)}"
        click.echo(f"  {bracket.rate:>6.1%}  {format_currency(bracket.min)} {upper}")


@tables_group.command("state")
@click.argument("code")
def tables_state(code):
    """Show the income tax rule for a state."""
    tables = _load_tables()
    rule = tables.state_rule(code)

    click.echo(f"{code.upper()}: {rule.kind}")
    if isinstance(rule, FlatStateTax):
        click.echo(f"  Rate: {rule.rate:.3%} of AGI")
    elif isinstance(rule, ProgressiveStateTax):
        for bracket in rule.brackets:
            upper = "and up" if bracket.is_unbounded else f"to {format_currency(bracket.max)}"
            click.echo(f"  {bracket.rate:>7.2%}  {format_currency(bracket.min)} {upper}")
    else:
        click.echo("  No state income tax")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
