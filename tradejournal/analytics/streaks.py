"""Streak and drawdown tracking over closed trades.

Both scans work on a sorted copy of the closed trades in ascending exit
order; the caller's list is never reordered.
"""

from datetime import datetime
from typing import Iterable

from tradejournal.analytics.derived import profit_loss
from tradejournal.models.performance import DrawdownStats, StreakStats
from tradejournal.models.trade import Trade


def _exit_key(trade: Trade) -> datetime:
    # A closed trade without an exit date sorts by its entry date.
    return trade.exit_date or trade.entry_date


def closed_by_exit(trades: Iterable[Trade]) -> list[Trade]:
    """Closed trades sorted by exit date, oldest first (stable on ties)."""
    return sorted((t for t in trades if t.is_closed), key=_exit_key)


def calculate_streaks(trades: Iterable[Trade]) -> StreakStats:
    """Scan closed trades chronologically and track win/loss runs.

    A positive counter grows on consecutive winners and a negative one on
    consecutive losers. A zero P&L trade leaves the counter untouched.
    """
    running = 0
    best = 0
    worst = 0

    for trade in closed_by_exit(trades):
        pl = profit_loss(trade)
        if pl > 0:
            running = running + 1 if running >= 0 else 1
        elif pl < 0:
            running = running - 1 if running <= 0 else -1

        best = max(best, running)
        worst = min(worst, running)

    return StreakStats(current=running, best=best, worst=worst)


def calculate_drawdown(trades: Iterable[Trade]) -> DrawdownStats:
    """Largest peak-to-trough fall of cumulative P&L, starting from 0."""
    peak = 0.0
    running_total = 0.0
    max_drawdown = 0.0
    max_drawdown_percent = 0.0

    for trade in closed_by_exit(trades):
        running_total += profit_loss(trade)
        peak = max(peak, running_total)

        drawdown = peak - running_total
        max_drawdown = max(max_drawdown, drawdown)
        if peak > 0:
            max_drawdown_percent = max(max_drawdown_percent, drawdown / peak * 100)

    return DrawdownStats(
        max_drawdown=max_drawdown,
        max_drawdown_percent=max_drawdown_percent,
    )
