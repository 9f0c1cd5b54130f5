"""Settings CLI commands for Tax Genie.

Manages settings.json - tax data path and calculation defaults.
"""

import click
from pathlib import Path

from taxgenie.sdk import (
    FILING_STATUSES,
    KNOWN_SETTINGS,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_data_path: custom tax data YAML file
    - default_state: state code used when --state is omitted
    - default_filing_status: filing status used when --status is omitted
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their effective values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    for key in KNOWN_SETTINGS:
        value = get_setting(key)
        suffix = "" if key in current else " (default)"
        click.echo(f"  {key}: {value if value is not None else '(bundled)'}{suffix}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set a setting value.

    Examples:
        tax-genie settings set default_state NY
        tax-genie settings set default_filing_status married_jointly
        tax-genie settings set tax_data_path ~/tax-data/2025.yaml
    """
    if key == "default_filing_status" and value not in FILING_STATUSES:
        raise click.BadParameter(
            f"Invalid filing status '{value}'. Must be one of: {', '.join(FILING_STATUSES)}",
            param_hint="VALUE",
        )

    if key == "default_state":
        value = value.upper()
        if len(value) != 2 or not value.isalpha():
            raise click.BadParameter(f"Invalid state code '{value}'. Must be 2 letters.", param_hint="VALUE")

    if key == "tax_data_path":
        data_path = Path(value).expanduser().resolve()
        if not data_path.is_file():
            raise click.ClickException(f"Tax data file not found: {data_path}")
        value = str(data_path)

    saved_to = set_setting(key, value)
    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {saved_to}")


@settings.command("unset")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_unset(key):
    """Clear a setting, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key} setting.")
    else:
        click.echo(f"{key} was not set.")
