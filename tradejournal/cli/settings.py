"""Settings commands for TradeJournal CLI."""

from typing import Any

import click
from rich.table import Table

from tradejournal.cli.context import console, get_config_file, get_settings, print_error
from tradejournal.config import Settings, reset_settings, save_settings, update_settings
from tradejournal.errors import ConfigError

LIST_KEYS = {name for name, field in Settings.model_fields.items() if field.annotation == list[str]}


def parse_setting_value(key: str, raw: str) -> Any:
    """Turn a command-line value into what the setting expects.

    List settings take a comma separated value; everything else is left
    as a string for pydantic to coerce.
    """
    if key in LIST_KEYS:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


@click.group()
def settings() -> None:
    """View and change journal settings."""


@settings.command("show")
@click.pass_context
def show_settings(ctx: click.Context) -> None:
    """Show the current settings."""
    try:
        current = get_settings(ctx)
    except ConfigError as e:
        print_error(str(e), title="Config Error")
        raise SystemExit(1)

    table = Table(
        title="Settings",
        caption=str(get_config_file(ctx)),
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Key", style="bold")
    table.add_column("Value")

    for key, value in current.model_dump().items():
        display = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(key, display)

    console.print(table)


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_setting(ctx: click.Context, key: str, value: str) -> None:
    """Change one setting.

    \b
    Examples:
      tradejournal settings set risk_per_trade 1.5
      tradejournal settings set default_account_size 25000
      tradejournal settings set strategies "Breakout, Scalping"
      tradejournal settings set timezone Europe/London
      tradejournal settings set date_format YYYY-MM-DD
    """
    path = get_config_file(ctx)
    try:
        updated = update_settings(get_settings(ctx), **{key: parse_setting_value(key, value)})
        save_settings(updated, path)
    except ConfigError as e:
        print_error(str(e), title="Config Error")
        raise SystemExit(1)

    console.print(f"[green]✓[/green] {key} = {getattr(updated, key)}")


@settings.command("reset")
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Restore the default settings."""
    if not yes and not click.confirm("Reset all settings to defaults?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    reset_settings(get_config_file(ctx))
    console.print("[green]✓[/green] Settings reset to defaults")
