"""Shared helpers for TradeJournal CLI commands."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tradejournal.config import Settings, get_config_path, get_db_path, load_settings

console = Console()

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S"]

# settings.date_format -> strftime
DISPLAY_DATE_FORMATS = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
}
DISPLAY_TIME_FORMATS = {"12h": "%I:%M %p", "24h": "%H:%M"}


def get_home(ctx: click.Context) -> Optional[Path]:
    obj = ctx.find_root().obj or {}
    return obj.get("home")


def get_config_file(ctx: click.Context) -> Path:
    return get_config_path(get_home(ctx))


def get_settings(ctx: click.Context) -> Settings:
    """Load settings for the current invocation (raises ConfigError)."""
    return load_settings(get_config_file(ctx))


def get_journal(ctx: click.Context):
    """Build a TradeJournal for the configured home directory."""
    from tradejournal.db.store import TradeStore
    from tradejournal.journal import TradeJournal

    store = TradeStore(get_db_path(get_home(ctx)))
    return TradeJournal(store, get_settings(ctx))


def print_error(message: str, title: str = "Error") -> None:
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def print_messages(messages: list[str], title: str) -> None:
    """Show a list of violations in one error panel."""
    body = "\n".join(f"• {escape(m)}" for m in messages)
    console.print(Panel(
        body,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def format_money(amount: float, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_pnl(amount: float, currency: str = "USD") -> str:
    """Money with a sign and green/red markup."""
    color = "green" if amount >= 0 else "red"
    sign = "+" if amount > 0 else ""
    return f"[{color}]{sign}{format_money(amount, currency)}[/{color}]"


def format_timestamp(moment: datetime, settings: Settings, with_time: bool = True) -> str:
    """Render a stored (naive UTC) timestamp in the user's timezone and format."""
    from tradejournal.analytics.aggregation import to_local

    pattern = DISPLAY_DATE_FORMATS[settings.date_format]
    if with_time:
        pattern += " " + DISPLAY_TIME_FORMATS[settings.time_format]
    return to_local(moment, settings.zone).strftime(pattern)


def warn_unknown_labels(fields: dict, settings: Settings) -> None:
    """Point out labels that are not among the configured choices."""
    known = {
        "strategy": ("strategy", settings.strategies),
        "emotional_state": ("emotional state", settings.emotional_states),
        "market_conditions": ("market condition", settings.market_conditions),
    }
    for field, (label, choices) in known.items():
        value = fields.get(field)
        if value and value not in choices:
            console.print(
                f"[yellow]Note:[/yellow] '{escape(value)}' is not a configured {label} "
                f"(see 'tradejournal settings show')."
            )
