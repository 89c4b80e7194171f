"""Trade commands for TradeJournal CLI.

Handles adding, editing, deleting, showing and listing trades.
"""

from typing import Any, Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.context import (
    DATE_FORMATS,
    console,
    format_money,
    format_pnl,
    format_timestamp,
    get_journal,
    print_error,
    print_messages,
    warn_unknown_labels,
)
from tradejournal.config import Settings
from tradejournal.errors import JournalError, TradeNotFoundError, TradeValidationError
from tradejournal.models import AssetType, Direction, Trade, TradeStatus
from tradejournal.models.trade import SOURCE_FIELDS

ASSET_CHOICES = [a.value for a in AssetType]
DIRECTION_CHOICES = [d.value for d in Direction]
STATUS_CHOICES = [s.value for s in TradeStatus]

# CLI option name -> trade field
OPTION_FIELDS = {
    "asset_type": "asset_type",
    "direction": "direction",
    "status": "status",
    "size": "position_size",
    "entry": "entry_price",
    "entry_date": "entry_date",
    "exit_price": "exit_price",
    "exit_date": "exit_date",
    "commission": "commission",
    "stop": "stop_loss",
    "target": "take_profit",
    "account_size": "account_size",
    "strategy": "strategy",
    "emotion": "emotional_state",
    "market": "market_conditions",
    "rationale": "rationale",
    "lessons": "lessons_learned",
    "tags": "tags",
    "rating": "rating",
}


def trade_options(func):
    """Attach the shared trade field options to a command."""
    options = [
        click.option("-a", "--asset-type", type=click.Choice(ASSET_CHOICES), help="Asset class."),
        click.option("-d", "--direction", type=click.Choice(DIRECTION_CHOICES), help="Long or short."),
        click.option("--status", type=click.Choice(STATUS_CHOICES),
                     help="Trade status (default: closed if an exit price is given)."),
        click.option("-n", "--size", type=float, help="Position size (units)."),
        click.option("-e", "--entry", type=float, help="Entry price."),
        click.option("--entry-date", type=click.DateTime(DATE_FORMATS), help="Entry date/time."),
        click.option("-x", "--exit", "exit_price", type=float, help="Exit price."),
        click.option("--exit-date", type=click.DateTime(DATE_FORMATS), help="Exit date/time."),
        click.option("-c", "--commission", type=float, help="Total commission paid."),
        click.option("-s", "--stop", type=float, help="Stop-loss price."),
        click.option("-t", "--target", type=float, help="Take-profit price."),
        click.option("--account-size", type=float, help="Account size for risk %."),
        click.option("--strategy", help="Strategy label."),
        click.option("--emotion", help="Emotional state label."),
        click.option("--market", help="Market conditions label."),
        click.option("--rationale", help="Why the trade was taken."),
        click.option("--lessons", help="Lessons learned."),
        click.option("--tags", help="Comma separated tags."),
        click.option("-r", "--rating", type=click.IntRange(0, 5), help="Self rating 0-5."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _collect_fields(options: dict[str, Any]) -> dict[str, Any]:
    """Map supplied CLI options onto trade fields, skipping unset ones."""
    return {
        OPTION_FIELDS[name]: value
        for name, value in options.items()
        if name in OPTION_FIELDS and value is not None
    }


def _localize_dates(
    fields: dict[str, Any],
    settings: Settings,
    names: tuple[str, ...] = ("entry_date", "exit_date"),
) -> dict[str, Any]:
    """Read naive command line dates as wall-clock time in the configured zone."""
    for name in names:
        value = fields.get(name)
        if value is not None and value.tzinfo is None:
            fields[name] = settings.zone.localize(value)
    return fields


def render_trade(trade: Trade, settings: Settings) -> Panel:
    """Detailed single-trade panel."""
    currency = settings.default_currency
    direction_color = "green" if trade.direction == Direction.LONG else "red"
    lines = [
        f"[bold]{trade.symbol}[/bold] ({trade.asset_type.value}) "
        f"[{direction_color}]{trade.direction.value.upper()}[/{direction_color}] "
        f"- {trade.status.value}\n",
        f"Entry:       {trade.entry_price:g} x {trade.position_size:g} "
        f"on {format_timestamp(trade.entry_date, settings)}",
    ]
    if trade.exit_price is not None:
        exit_when = f" on {format_timestamp(trade.exit_date, settings)}" if trade.exit_date else ""
        lines.append(f"Exit:        {trade.exit_price:g}{exit_when}")
    if trade.stop_loss is not None:
        lines.append(f"Stop Loss:   {trade.stop_loss:g}")
    if trade.take_profit is not None:
        lines.append(f"Take Profit: {trade.take_profit:g}")
    if trade.commission:
        lines.append(f"Commission:  {format_money(trade.commission, currency)}")

    lines += [
        "",
        f"P&L:         {format_pnl(trade.profit_loss, currency)} ({trade.profit_loss_percent:+.2f}%)",
        f"Risk:        {format_money(trade.risk_amount, currency)} ({trade.risk_percent:.2f}% of account)",
        f"Reward:      {format_money(trade.reward_amount, currency)}",
        f"R:R:         {trade.risk_reward_ratio:.2f}",
    ]

    labels = [
        ("Strategy", trade.strategy),
        ("Emotion", trade.emotional_state),
        ("Market", trade.market_conditions),
        ("Tags", ", ".join(trade.tags) if trade.tags else None),
        ("Rating", "★" * trade.rating + "☆" * (5 - trade.rating) if trade.rating is not None else None),
    ]
    journal_lines = [f"{label + ':':<12} {value}" for label, value in labels if value]
    if journal_lines:
        lines += [""] + journal_lines
    if trade.rationale:
        lines += ["", f"[bold]Rationale:[/bold] {trade.rationale}"]
    if trade.lessons_learned:
        lines += [f"[bold]Lessons:[/bold] {trade.lessons_learned}"]

    return Panel(
        "\n".join(lines),
        title=f"[bold cyan]{trade.id}[/bold cyan]",
        border_style="cyan",
    )


@click.command()
@click.argument("symbol")
@trade_options
@click.pass_context
def add(ctx: click.Context, symbol: str, **options: Any) -> None:
    """Record a new trade.

    SYMBOL is the instrument (e.g., AAPL, EUR/USD, BTC/USD).

    \b
    Examples:
      tradejournal add AAPL -a stocks -d long -n 100 -e 150.25 \\
          --entry-date 2024-01-15 -x 155.5 --exit-date 2024-01-16 -s 148 -t 155
      tradejournal add EUR/USD -a forex -d short -n 10000 -e 1.085 \\
          --entry-date "2024-01-13 08:00"
    """
    data = _collect_fields(options)
    data["symbol"] = symbol.upper()

    try:
        journal = get_journal(ctx)
        trade = journal.add_trade(_localize_dates(data, journal.settings))
    except TradeValidationError as e:
        print_messages(e.messages, "Invalid Trade")
        raise SystemExit(1)
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Added trade [bold]{trade.id}[/bold]")
    warn_unknown_labels(data, journal.settings)
    console.print(render_trade(trade, journal.settings))


@click.command()
@click.argument("trade_id")
@click.option("--symbol", help="New symbol.")
@trade_options
@click.option(
    "--unset",
    "unset_fields",
    multiple=True,
    type=click.Choice([f for f in SOURCE_FIELDS if f not in
                       ("asset_type", "symbol", "direction", "position_size",
                        "entry_price", "entry_date")]),
    help="Clear an optional field (repeatable).",
)
@click.pass_context
def edit(ctx: click.Context, trade_id: str, symbol: Optional[str],
         unset_fields: tuple[str, ...], **options: Any) -> None:
    """Update fields of an existing trade.

    Derived values (P&L, risk, R:R) are recalculated automatically.

    \b
    Examples:
      tradejournal edit trade_ab12 -x 155.5 --exit-date 2024-01-16
      tradejournal edit trade_ab12 --unset stop_loss
    """
    updates = _collect_fields(options)
    if symbol:
        updates["symbol"] = symbol.upper()
    for name in unset_fields:
        updates[name] = [] if name == "tags" else None

    if not updates:
        console.print("[yellow]Nothing to update.[/yellow]")
        return

    try:
        journal = get_journal(ctx)
        trade = journal.update_trade(trade_id, _localize_dates(updates, journal.settings))
    except TradeValidationError as e:
        print_messages(e.messages, "Invalid Trade")
        raise SystemExit(1)
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Updated trade [bold]{trade.id}[/bold]")
    warn_unknown_labels(updates, journal.settings)
    console.print(render_trade(trade, journal.settings))


@click.command()
@click.argument("trade_id")
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def delete(ctx: click.Context, trade_id: str, yes: bool) -> None:
    """Delete a trade from the journal."""
    if not yes and not click.confirm(f"Delete trade {trade_id}?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    try:
        get_journal(ctx).delete_trade(trade_id)
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    console.print(f"[green]✓[/green] Deleted trade [bold]{trade_id}[/bold]")


@click.command()
@click.argument("trade_id")
@click.pass_context
def show(ctx: click.Context, trade_id: str) -> None:
    """Show every detail of one trade."""
    try:
        journal = get_journal(ctx)
        trade = journal.get_trade(trade_id)
    except TradeNotFoundError as e:
        print_error(str(e), title="Not Found")
        raise SystemExit(1)
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    console.print(render_trade(trade, journal.settings))


@click.command("list")
@click.option("-a", "--asset-type", type=click.Choice(ASSET_CHOICES), help="Only this asset class.")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only this status.")
@click.option("--from", "start_date", type=click.DateTime(DATE_FORMATS), help="Entered on or after.")
@click.option("--to", "end_date", type=click.DateTime(DATE_FORMATS), help="Entered on or before.")
@click.option("--profitability", type=click.Choice(["profitable", "losing"]), help="Winners or losers.")
@click.option("--strategy", help="Only this strategy.")
@click.option("-q", "--search", help="Search symbol, rationale and lessons.")
@click.option("--sort", "sort_by", type=click.Choice(["date", "symbol", "pnl", "rr"]),
              default="date", show_default=True, help="Sort order.")
@click.option("--range", "time_range", type=click.Choice(["1M", "3M", "6M", "1Y", "ALL"]),
              default="ALL", show_default=True, help="Entry date window.")
@click.pass_context
def list_trades(ctx: click.Context, time_range: str, **filters: Any) -> None:
    """List trades with optional filters.

    \b
    Examples:
      tradejournal list
      tradejournal list --status closed --sort pnl
      tradejournal list -a crypto --range 3M
      tradejournal list -q breakout
    """
    from tradejournal.analytics.filters import TradeFilter, filter_by_time_range

    try:
        journal = get_journal(ctx)
        _localize_dates(filters, journal.settings, ("start_date", "end_date"))
        trades = journal.list_trades(TradeFilter(**filters))
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    trades = filter_by_time_range(trades, time_range)
    settings = journal.settings
    currency = settings.default_currency

    if not trades:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trades[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Trades",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Entry Date")
    table.add_column("Symbol", style="bold")
    table.add_column("Asset")
    table.add_column("Dir", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Size", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("R:R", justify="right")

    total_pnl = 0.0
    for trade in trades:
        direction_color = "green" if trade.direction == Direction.LONG else "red"
        total_pnl += trade.profit_loss
        table.add_row(
            trade.id,
            format_timestamp(trade.entry_date, settings),
            trade.symbol,
            trade.asset_type.value,
            f"[{direction_color}]{trade.direction.value}[/{direction_color}]",
            trade.status.value,
            f"{trade.position_size:g}",
            f"{trade.entry_price:g}",
            f"{trade.exit_price:g}" if trade.exit_price is not None else "-",
            format_pnl(trade.profit_loss, currency) if trade.is_closed else "-",
            f"{trade.risk_reward_ratio:.2f}" if trade.risk_reward_ratio else "-",
        )

    console.print(table)
    console.print(f"\n[bold]Trades:[/bold] {len(trades)}")
    console.print(f"[bold]Total P&L:[/bold] {format_pnl(total_pnl, currency)}")
