"""Analytics commands for TradeJournal CLI.

Summary statistics, category breakdowns, monthly results, the equity
curve, trading frequency, position sizing and the full report.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.context import (
    console,
    format_money,
    format_pnl,
    format_timestamp,
    get_journal,
    print_error,
)
from tradejournal.config import Settings
from tradejournal.errors import JournalError
from tradejournal.models import GroupPerformance, PerformanceSummary, Trade

RANGE_CHOICES = ["1M", "3M", "6M", "1Y", "ALL"]

range_option = click.option(
    "--range",
    "time_range",
    type=click.Choice(RANGE_CHOICES),
    default="ALL",
    show_default=True,
    help="Only trades entered within this window.",
)


def _load(ctx: click.Context, time_range: str):
    """Return (journal, trades in range) or exit with an error panel."""
    from tradejournal.analytics.filters import filter_by_time_range

    try:
        journal = get_journal(ctx)
        trades = journal.list_trades()
    except JournalError as e:
        print_error(str(e))
        raise SystemExit(1)
    return journal, filter_by_time_range(trades, time_range)


def _no_trades(title: str) -> None:
    console.print(Panel(
        "[dim]No closed trades yet. Add some with 'tradejournal add' "
        "or load examples with 'tradejournal sample'.[/dim]",
        title=f"[bold]{title}[/bold]",
        border_style="dim",
    ))


def render_summary(summary: PerformanceSummary, currency: str) -> Panel:
    """Headline statistics panel."""
    pf = f"{summary.profit_factor:.2f}"
    streak_color = "green" if summary.current_streak > 0 else "red" if summary.current_streak < 0 else "dim"

    lines = [
        f"Trades:          {summary.total_trades} "
        f"({summary.closed_trades} closed, {summary.open_trades} open)",
        f"Won / Lost:      [green]{summary.winning_trades}[/green] / "
        f"[red]{summary.losing_trades}[/red]"
        + (f" / {summary.breakeven_trades} breakeven" if summary.breakeven_trades else ""),
        f"Win Rate:        {summary.win_rate:.2f}%",
        "",
        f"Net P&L:         {format_pnl(summary.net_profit, currency)}",
        f"Gross Profit:    {format_money(summary.total_profit, currency)}",
        f"Gross Loss:      {format_money(summary.total_loss, currency)}",
        f"Profit Factor:   {pf}",
        f"Avg Win:         {format_pnl(summary.average_win, currency)}",
        f"Avg Loss:        {format_pnl(summary.average_loss, currency)}",
        f"Largest Win:     {format_pnl(summary.largest_win, currency)}",
        f"Largest Loss:    {format_pnl(summary.largest_loss, currency)}",
        "",
        f"Avg R:R:         {summary.average_risk_reward:.2f}",
        f"Expectancy:      {format_pnl(summary.expectancy, currency)} per trade",
        f"Expectancy (R):  {summary.expectancy_ratio:.2f}",
        f"Sharpe Ratio:    {summary.sharpe_ratio:.2f}",
        f"Max Drawdown:    {format_money(summary.max_drawdown, currency)} "
        f"({summary.max_drawdown_percent:.2f}%)",
        "",
        f"Current Streak:  [{streak_color}]{summary.current_streak:+d}[/{streak_color}]",
        f"Best / Worst:    [green]{summary.best_streak}[/green] / [red]{summary.worst_streak}[/red]",
    ]
    return Panel(
        "\n".join(lines),
        title="[bold cyan]Performance Summary[/bold cyan]",
        border_style="cyan",
    )


def render_groups(title: str, groups: dict[str, GroupPerformance], currency: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("W / L", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("PF", justify="right")
    table.add_column("Avg R:R", justify="right")

    for key, group in groups.items():
        table.add_row(
            key,
            str(group.total_trades),
            f"{group.winning_trades} / {group.losing_trades}",
            f"{group.win_rate:.1f}%",
            format_pnl(group.total_pl, currency),
            f"{group.profit_factor:.2f}",
            f"{group.average_rr:.2f}",
        )
    return table


@click.command()
@range_option
@click.pass_context
def stats(ctx: click.Context, time_range: str) -> None:
    """Show headline performance statistics.

    \b
    Examples:
      tradejournal stats
      tradejournal stats --range 3M
    """
    journal, trades = _load(ctx, time_range)
    summary = journal.summary(trades)
    console.print(render_summary(summary, journal.settings.default_currency))


@click.command()
@click.option(
    "--by",
    "group_by",
    type=click.Choice(["asset", "strategy", "emotion"]),
    default="asset",
    show_default=True,
    help="Category to group closed trades by.",
)
@range_option
@click.pass_context
def breakdown(ctx: click.Context, group_by: str, time_range: str) -> None:
    """Break performance down by asset type, strategy or emotional state."""
    from tradejournal.analytics import (
        performance_by_asset_type,
        performance_by_emotional_state,
        performance_by_strategy,
    )

    journal, trades = _load(ctx, time_range)
    grouping = {
        "asset": ("Performance by Asset Type", performance_by_asset_type),
        "strategy": ("Performance by Strategy", performance_by_strategy),
        "emotion": ("Performance by Emotional State", performance_by_emotional_state),
    }
    title, calculate = grouping[group_by]
    groups = calculate(trades)

    if not groups:
        _no_trades(title)
        return

    console.print(render_groups(title, groups, journal.settings.default_currency))


@click.command()
@range_option
@click.pass_context
def monthly(ctx: click.Context, time_range: str) -> None:
    """Show results per calendar month of exit."""
    from tradejournal.analytics import monthly_performance

    journal, trades = _load(ctx, time_range)
    months = monthly_performance(trades, journal.settings.zone)
    if not months:
        _no_trades("Monthly Performance")
        return

    currency = journal.settings.default_currency
    table = Table(title="Monthly Performance", show_header=True, header_style="bold cyan")
    table.add_column("Month", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("W / L", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("PF", justify="right")

    for month in months.values():
        table.add_row(
            month.month,
            str(month.trade_count),
            f"{month.winning_trades} / {month.losing_trades}",
            f"{month.win_rate:.1f}%",
            format_pnl(month.total_pl, currency),
            f"{month.profit_factor:.2f}",
        )
    console.print(table)


@click.command()
@range_option
@click.pass_context
def equity(ctx: click.Context, time_range: str) -> None:
    """Show the equity curve, one point per closed trade."""
    from tradejournal.analytics import equity_curve

    journal, trades = _load(ctx, time_range)
    settings = journal.settings
    points = equity_curve(trades, settings.initial_capital)
    currency = settings.default_currency

    table = Table(
        title=f"Equity Curve (start {format_money(settings.initial_capital, currency)})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Date")
    table.add_column("Symbol", style="bold")
    table.add_column("P&L", justify="right")
    table.add_column("Equity", justify="right")

    for point in points:
        table.add_row(
            format_timestamp(point.date, settings),
            point.symbol or "-",
            format_pnl(point.pl, currency) if point.trade_id else "-",
            format_money(point.equity, currency),
        )
    console.print(table)

    change = points[-1].equity - settings.initial_capital
    console.print(f"\n[bold]Change:[/bold] {format_pnl(change, currency)}")


@click.command()
@range_option
@click.pass_context
def frequency(ctx: click.Context, time_range: str) -> None:
    """Show how often, and on which weekdays, you trade."""
    from tradejournal.analytics import trade_frequency_analysis

    journal, trades = _load(ctx, time_range)
    analysis = trade_frequency_analysis(trades, journal.settings.zone)
    if analysis.most_active_day is None:
        _no_trades("Trading Frequency")
        return

    console.print(Panel(
        f"Trades per week:   {analysis.average_trades_per_week:.2f}\n"
        f"Trades per month:  {analysis.average_trades_per_month:.2f}\n"
        f"Days per week:     {analysis.trading_days_per_week:.2f}\n"
        f"Span:              {analysis.span_days} days\n"
        f"Most active:       [green]{analysis.most_active_day}[/green]\n"
        f"Least active:      [yellow]{analysis.least_active_day}[/yellow]",
        title="[bold cyan]Trading Frequency[/bold cyan]",
        border_style="cyan",
    ))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Day")
    table.add_column("Trades", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("")
    for day in analysis.day_of_week_distribution:
        table.add_row(day.day, str(day.count), f"{day.percentage:.1f}%", "█" * round(day.percentage / 5))
    console.print(table)


@click.command()
@click.option("--account-size", type=float, default=None,
              help="Account size for the recommendation (default: from settings).")
@click.option("--risk", "risk_per_trade", type=float, default=None,
              help="Percent risked per trade (default: from settings).")
@range_option
@click.pass_context
def sizing(ctx: click.Context, account_size: Optional[float],
           risk_per_trade: Optional[float], time_range: str) -> None:
    """Analyse position size consistency."""
    from tradejournal.analytics import position_sizing_analysis

    journal, trades = _load(ctx, time_range)
    settings = journal.settings
    analysis = position_sizing_analysis(
        trades,
        account_size if account_size is not None else settings.default_account_size,
        risk_per_trade if risk_per_trade is not None else settings.risk_per_trade,
    )
    if not analysis.position_sizes:
        _no_trades("Position Sizing")
        return

    score_color = "green" if analysis.consistency_score >= 70 else "yellow" if analysis.consistency_score >= 40 else "red"
    console.print(Panel(
        f"Average size:      {analysis.average_position_size:,.4g}\n"
        f"Std deviation:     {analysis.position_size_std_dev:,.4g}\n"
        f"Consistency:       [{score_color}]{analysis.consistency_score:.1f}/100[/{score_color}]\n"
        f"Recommended size:  {analysis.recommended_position_size:,.4g}",
        title="[bold cyan]Position Sizing[/bold cyan]",
        border_style="cyan",
    ))


def _render_recent(trades: list[Trade], settings: Settings) -> Optional[Table]:
    closed = [t for t in trades if t.is_closed]
    if not closed:
        return None
    closed.sort(key=lambda t: t.exit_date or t.entry_date, reverse=True)

    table = Table(title="Recent Trades", show_header=True, header_style="bold cyan")
    table.add_column("Exit Date")
    table.add_column("Symbol", style="bold")
    table.add_column("Dir")
    table.add_column("P&L", justify="right")
    for trade in closed[:5]:
        table.add_row(
            format_timestamp(trade.exit_date or trade.entry_date, settings, with_time=False),
            trade.symbol,
            trade.direction.value,
            format_pnl(trade.profit_loss, settings.default_currency),
        )
    return table


@click.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the report as JSON.")
@range_option
@click.pass_context
def report(ctx: click.Context, as_json: bool, time_range: str) -> None:
    """Generate the full performance report.

    \b
    Examples:
      tradejournal report
      tradejournal report --json > report.json
    """
    journal, trades = _load(ctx, time_range)
    result = journal.report(trades)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    currency = journal.settings.default_currency
    console.print(render_summary(result.summary, currency))

    for title, groups in (
        ("Performance by Asset Type", result.asset_performance),
        ("Performance by Strategy", result.strategy_performance),
        ("Performance by Emotional State", result.emotional_performance),
    ):
        if groups:
            console.print(render_groups(title, groups, currency))

    if result.monthly_performance:
        table = Table(title="Monthly Performance", show_header=True, header_style="bold cyan")
        table.add_column("Month", style="bold")
        table.add_column("Trades", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("P&L", justify="right")
        for month in result.monthly_performance.values():
            table.add_row(
                month.month,
                str(month.trade_count),
                f"{month.win_rate:.1f}%",
                format_pnl(month.total_pl, currency),
            )
        console.print(table)

    recent = _render_recent(trades, journal.settings)
    if recent is not None:
        console.print(recent)

    console.print(f"\n[dim]Generated {result.generated_at:%Y-%m-%d %H:%M}[/dim]")
