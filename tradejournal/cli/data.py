"""Data commands for TradeJournal CLI.

CSV backup and restore, sample data and wiping the journal.
"""

from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from tradejournal.cli.context import console, get_journal, print_error, print_messages
from tradejournal.errors import ImportValidationError, JournalError, TradeValidationError

SAMPLE_ACCOUNT_SIZE = 25000

SAMPLE_TRADES = [
    {
        "asset_type": "stocks",
        "symbol": "AAPL",
        "direction": "long",
        "status": "closed",
        "position_size": 100,
        "entry_price": 150.25,
        "entry_date": "2024-01-15T09:30:00Z",
        "exit_price": 155.5,
        "exit_date": "2024-01-16T14:25:00Z",
        "commission": 5.0,
        "stop_loss": 148.0,
        "take_profit": 155.0,
        "account_size": SAMPLE_ACCOUNT_SIZE,
        "strategy": "Momentum Breakout",
        "rationale": "Strong volume breakout above resistance level",
        "emotional_state": "calm",
        "market_conditions": "trending",
        "rating": 4,
    },
    {
        "asset_type": "crypto",
        "symbol": "BTC/USD",
        "direction": "long",
        "status": "closed",
        "position_size": 0.5,
        "entry_price": 42150,
        "entry_date": "2024-01-14T10:15:00Z",
        "exit_price": 42800,
        "exit_date": "2024-01-15T16:30:00Z",
        "commission": 25.0,
        "stop_loss": 41000,
        "take_profit": 43000,
        "account_size": SAMPLE_ACCOUNT_SIZE,
        "strategy": "Trend Following",
        "rationale": "Breakout above key resistance",
        "emotional_state": "calm",
        "market_conditions": "trending",
        "rating": 5,
    },
    {
        "asset_type": "forex",
        "symbol": "EUR/USD",
        "direction": "short",
        "status": "closed",
        "position_size": 10000,
        "entry_price": 1.085,
        "entry_date": "2024-01-13T08:00:00Z",
        "exit_price": 1.089,
        "exit_date": "2024-01-13T14:30:00Z",
        "commission": 7.0,
        "stop_loss": 1.087,
        "take_profit": 1.082,
        "account_size": SAMPLE_ACCOUNT_SIZE,
        "strategy": "Mean Reversion",
        "rationale": "Overbought conditions at resistance",
        "emotional_state": "anxious",
        "market_conditions": "ranging",
        "rating": 2,
    },
]


def default_export_name(today: Optional[date] = None) -> str:
    return f"trading-journal-backup-{(today or date.today()).isoformat()}.csv"


@click.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--stdout", "to_stdout", is_flag=True, default=False, help="Print CSV instead of writing a file.")
@click.pass_context
def export(ctx: click.Context, path: Optional[Path], to_stdout: bool) -> None:
    """Export every trade to CSV.

    PATH defaults to trading-journal-backup-YYYY-MM-DD.csv in the current
    directory.
    """
    try:
        journal = get_journal(ctx)
        trades = journal.list_trades()
        text = journal.export_csv(trades)
    except JournalError as e:
        print_error(str(e), title="Export Failed")
        raise SystemExit(1)

    if to_stdout:
        click.echo(text, nl=False)
        return

    path = path or Path(default_export_name())
    path.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Exported {len(trades)} trades to [bold]{path}[/bold]")


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_(ctx: click.Context, path: Path) -> None:
    """Import trades from a CSV file.

    Every row is validated first; if any row is invalid nothing is imported.
    """
    text = path.read_text(encoding="utf-8-sig")

    try:
        imported = get_journal(ctx).import_csv(text)
    except ImportValidationError as e:
        print_messages(e.row_errors, "Import Rejected")
        raise SystemExit(1)
    except JournalError as e:
        print_error(str(e), title="Import Failed")
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Imported {len(imported)} trades from [bold]{path}[/bold]")


@click.command()
@click.pass_context
def sample(ctx: click.Context) -> None:
    """Add three example trades (stocks, crypto, forex)."""
    try:
        journal = get_journal(ctx)
        added = [journal.add_trade(data) for data in SAMPLE_TRADES]
    except TradeValidationError as e:
        print_messages(e.messages, "Invalid Trade")
        raise SystemExit(1)
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    for trade in added:
        console.print(f"[green]✓[/green] Added {trade.symbol} [dim]({trade.id})[/dim]")
    console.print(Panel(
        "Try [bold]tradejournal stats[/bold] or [bold]tradejournal report[/bold]",
        title="[bold green]Sample data added[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every trade in the journal.

    Export a backup first; this cannot be undone.
    """
    if not yes:
        answer = click.prompt("Type DELETE to remove all trades", default="", show_default=False)
        if answer != "DELETE":
            console.print("[dim]Cancelled.[/dim]")
            return

    try:
        removed = get_journal(ctx).clear()
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Deleted {removed} trades")
