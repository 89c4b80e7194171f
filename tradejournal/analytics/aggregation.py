"""Aggregate performance metrics over a trade collection.

Every function here takes the trades it should look at as an argument,
recomputes P&L and risk/reward from the source fields, and returns a fresh
value. Nothing is cached and the input list is never reordered.

Division-by-zero shaped cases (no closed trades, no losers, empty groups)
resolve to 0 rather than raising or returning infinity.
"""

import math
from collections import defaultdict
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional, Sequence

from tradejournal.analytics.derived import profit_loss, profit_loss_percent, risk_reward_ratio
from tradejournal.analytics.streaks import calculate_drawdown, calculate_streaks, closed_by_exit
from tradejournal.config import Settings
from tradejournal.models.performance import (
    DayOfWeekCount,
    EquityPoint,
    FrequencyAnalysis,
    GroupPerformance,
    MonthlyPerformance,
    PerformanceReport,
    PerformanceSummary,
    PositionSizingAnalysis,
)
from tradejournal.models.trade import AssetType, Trade, TradeStatus

DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30.44


def closed_trades(trades: Sequence[Trade]) -> list[Trade]:
    return [t for t in trades if t.is_closed]


def _closed_pnls(trades: Sequence[Trade]) -> list[float]:
    return [profit_loss(t) for t in closed_trades(trades)]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def to_local(moment: datetime, zone: Optional[tzinfo] = None) -> datetime:
    """View a stored naive-UTC timestamp on ``zone``'s wall clock (UTC if none)."""
    if zone is None:
        return moment
    return moment.replace(tzinfo=timezone.utc).astimezone(zone).replace(tzinfo=None)


# ==================== Headline metrics ====================

def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of closed trades with P&L strictly above zero.

    Breakeven trades count in the denominator but not as wins.
    """
    pnls = _closed_pnls(trades)
    winners = [p for p in pnls if p > 0]
    return _ratio(len(winners), len(pnls)) * 100


def profit_factor(trades: Sequence[Trade]) -> float:
    """Gross profit divided by gross absolute loss; 0 without losers."""
    pnls = _closed_pnls(trades)
    total_profit = sum(p for p in pnls if p > 0)
    total_loss = abs(sum(p for p in pnls if p < 0))
    return _ratio(total_profit, total_loss)


def average_win(trades: Sequence[Trade]) -> float:
    return _mean([p for p in _closed_pnls(trades) if p > 0])


def average_loss(trades: Sequence[Trade]) -> float:
    """Mean P&L of losing trades, reported as a negative number."""
    return _mean([p for p in _closed_pnls(trades) if p < 0])


def largest_win(trades: Sequence[Trade]) -> float:
    winners = [p for p in _closed_pnls(trades) if p > 0]
    return max(winners) if winners else 0.0


def largest_loss(trades: Sequence[Trade]) -> float:
    losers = [p for p in _closed_pnls(trades) if p < 0]
    return min(losers) if losers else 0.0


def average_risk_reward(trades: Sequence[Trade]) -> float:
    """Mean R:R over all closed trades, including those without a stop."""
    return _mean([risk_reward_ratio(t) for t in closed_trades(trades)])


def expectancy(trades: Sequence[Trade]) -> float:
    return _mean(_closed_pnls(trades))


def expectancy_ratio(trades: Sequence[Trade]) -> float:
    """Expected result per trade measured in average losses."""
    avg_win = average_win(trades)
    avg_loss = abs(average_loss(trades))
    rate = win_rate(trades) / 100

    if avg_loss == 0:
        return 0.0
    return (rate * avg_win - (1 - rate) * avg_loss) / avg_loss


def sharpe_ratio(trades: Sequence[Trade], risk_free_rate: float = 0.02) -> float:
    """Simplified Sharpe ratio over per-trade percentage returns.

    Args:
        trades: Trades to evaluate; only closed ones are used.
        risk_free_rate: Per-trade risk-free return as a fraction.

    Returns:
        0 when fewer than two closed trades or when returns do not vary.
    """
    returns = [profit_loss_percent(t) / 100 for t in closed_trades(trades)]
    if len(returns) < 2:
        return 0.0

    avg_return = _mean(returns)
    variance = _mean([(r - avg_return) ** 2 for r in returns])
    std_dev = math.sqrt(variance)
    return _ratio(avg_return - risk_free_rate, std_dev)


def calculate_performance_summary(trades: Sequence[Trade]) -> PerformanceSummary:
    """Compute the headline statistics for ``trades``.

    Args:
        trades: Any collection of trades; open and cancelled trades only
            contribute to the trade counts.

    Returns:
        A frozen PerformanceSummary.
    """
    if not trades:
        return PerformanceSummary()

    closed = closed_trades(trades)
    pnls = [profit_loss(t) for t in closed]
    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]

    total_profit = sum(winners)
    total_loss = abs(sum(losers))

    streaks = calculate_streaks(closed)
    drawdown = calculate_drawdown(closed)

    return PerformanceSummary(
        total_trades=len(trades),
        closed_trades=len(closed),
        open_trades=sum(1 for t in trades if t.status == TradeStatus.OPEN),
        winning_trades=len(winners),
        losing_trades=len(losers),
        breakeven_trades=len(pnls) - len(winners) - len(losers),
        win_rate=_ratio(len(winners), len(closed)) * 100,
        total_profit=total_profit,
        total_loss=total_loss,
        net_profit=total_profit - total_loss,
        profit_factor=_ratio(total_profit, total_loss),
        average_win=_mean(winners),
        average_loss=_mean(losers),
        largest_win=max(winners) if winners else 0.0,
        largest_loss=min(losers) if losers else 0.0,
        average_risk_reward=average_risk_reward(closed),
        expectancy=_mean(pnls),
        expectancy_ratio=expectancy_ratio(closed),
        sharpe_ratio=sharpe_ratio(closed),
        max_drawdown=drawdown.max_drawdown,
        max_drawdown_percent=drawdown.max_drawdown_percent,
        current_streak=streaks.current,
        best_streak=streaks.best,
        worst_streak=streaks.worst,
    )


# ==================== Grouping ====================

def _group_summary(key: str, trades: Sequence[Trade]) -> GroupPerformance:
    pnls = [profit_loss(t) for t in trades]
    return GroupPerformance(
        key=key,
        total_trades=len(trades),
        winning_trades=sum(1 for p in pnls if p > 0),
        losing_trades=sum(1 for p in pnls if p < 0),
        win_rate=win_rate(trades),
        total_pl=sum(pnls),
        profit_factor=profit_factor(trades),
        average_rr=average_risk_reward(trades),
    )


def _group_by_label(
    trades: Sequence[Trade], label: Callable[[Trade], Optional[str]]
) -> dict[str, GroupPerformance]:
    """Group on an open label set, in order of first appearance."""
    groups: dict[str, list[Trade]] = {}
    for trade in trades:
        value = label(trade)
        if value is None or value.strip() == "":
            continue
        groups.setdefault(value, []).append(trade)
    return {key: _group_summary(key, members) for key, members in groups.items()}


def performance_by_asset_type(trades: Sequence[Trade]) -> dict[str, GroupPerformance]:
    """Per asset type summary; every asset type is reported, even if empty."""
    return {
        asset.value: _group_summary(
            asset.value, [t for t in trades if t.asset_type == asset]
        )
        for asset in AssetType
    }


def performance_by_strategy(trades: Sequence[Trade]) -> dict[str, GroupPerformance]:
    return _group_by_label(trades, lambda t: t.strategy)


def performance_by_emotional_state(trades: Sequence[Trade]) -> dict[str, GroupPerformance]:
    return _group_by_label(trades, lambda t: t.emotional_state)


def monthly_performance(
    trades: Sequence[Trade],
    zone: Optional[tzinfo] = None,
) -> dict[str, MonthlyPerformance]:
    """Closed trades grouped by exit month, keyed ``YYYY-MM`` in calendar order."""
    months: dict[str, list[Trade]] = defaultdict(list)
    for trade in closed_trades(trades):
        exit_date = trade.exit_date or trade.entry_date
        months[to_local(exit_date, zone).strftime("%Y-%m")].append(trade)

    result = {}
    for month in sorted(months):
        members = months[month]
        pnls = [profit_loss(t) for t in members]
        winners = sum(1 for p in pnls if p > 0)
        result[month] = MonthlyPerformance(
            month=month,
            trade_count=len(members),
            total_pl=sum(pnls),
            winning_trades=winners,
            losing_trades=sum(1 for p in pnls if p < 0),
            win_rate=_ratio(winners, len(members)) * 100,
            profit_factor=profit_factor(members),
            trade_ids=[t.id for t in members],
        )
    return result


# ==================== Time series ====================

def equity_curve(
    trades: Sequence[Trade],
    initial_capital: float,
    now: Optional[datetime] = None,
) -> list[EquityPoint]:
    """Running account equity after each closed trade, oldest exit first.

    With no closed trades a single point at ``now`` holding the initial
    capital is returned, so a chart always has something to draw.
    """
    ordered = closed_by_exit(trades)
    if not ordered:
        moment = now or datetime.now(timezone.utc).replace(tzinfo=None)
        return [EquityPoint(date=moment, equity=initial_capital)]

    points = []
    equity = initial_capital
    for trade in ordered:
        pl = profit_loss(trade)
        equity += pl
        points.append(
            EquityPoint(
                date=trade.exit_date or trade.entry_date,
                equity=equity,
                trade_id=trade.id,
                symbol=trade.symbol,
                pl=pl,
            )
        )
    return points


def _day_index(moment: datetime) -> int:
    # datetime.weekday() is Monday=0; the distribution uses Sunday=0.
    return (moment.weekday() + 1) % 7


def trade_frequency_analysis(
    trades: Sequence[Trade],
    zone: Optional[tzinfo] = None,
) -> FrequencyAnalysis:
    """Trading cadence over closed trades, measured on entry dates."""
    ordered = sorted(closed_trades(trades), key=lambda t: t.entry_date)
    counts = [0] * DAYS_PER_WEEK

    if not ordered:
        return FrequencyAnalysis(
            day_of_week_distribution=[
                DayOfWeekCount(day=name, index=i) for i, name in enumerate(DAY_NAMES)
            ]
        )

    span = ordered[-1].entry_date - ordered[0].entry_date
    span_days = math.ceil(span.total_seconds() / 86400)
    weeks = span_days / DAYS_PER_WEEK
    months = span_days / DAYS_PER_MONTH

    for trade in ordered:
        counts[_day_index(to_local(trade.entry_date, zone))] += 1

    # Ties go to the lowest day index.
    most_active = 0
    least_active = 0
    for index in range(1, DAYS_PER_WEEK):
        if counts[index] > counts[most_active]:
            most_active = index
        if counts[index] < counts[least_active]:
            least_active = index

    unique_days = len({to_local(t.entry_date, zone).date() for t in ordered})
    total = len(ordered)

    return FrequencyAnalysis(
        average_trades_per_week=_ratio(total, weeks),
        average_trades_per_month=_ratio(total, months),
        most_active_day=DAY_NAMES[most_active],
        least_active_day=DAY_NAMES[least_active],
        trading_days_per_week=_ratio(unique_days, weeks),
        span_days=span_days,
        day_of_week_distribution=[
            DayOfWeekCount(
                day=name,
                index=i,
                count=counts[i],
                percentage=_ratio(counts[i], total) * 100,
            )
            for i, name in enumerate(DAY_NAMES)
        ],
    )


def position_sizing_analysis(
    trades: Sequence[Trade],
    account_size: float,
    risk_per_trade: float,
) -> PositionSizingAnalysis:
    """Mean, spread and consistency of position sizes over closed trades.

    Args:
        trades: Trades to evaluate; only closed ones are used.
        account_size: Account size for the recommendation.
        risk_per_trade: Percent of the account to risk per trade.
    """
    sizes = [t.position_size for t in closed_trades(trades)]
    if not sizes:
        return PositionSizingAnalysis()

    avg_size = _mean(sizes)
    std_dev = math.sqrt(_mean([(s - avg_size) ** 2 for s in sizes]))

    consistency = max(0.0, 100 - std_dev / avg_size * 100) if avg_size > 0 else 0.0
    recommended = _ratio(account_size * risk_per_trade / 100, avg_size)

    return PositionSizingAnalysis(
        average_position_size=avg_size,
        position_size_std_dev=std_dev,
        consistency_score=consistency,
        recommended_position_size=recommended,
        position_sizes=sizes,
    )


def generate_performance_report(
    trades: Sequence[Trade],
    settings: Settings,
    now: Optional[datetime] = None,
) -> PerformanceReport:
    """Build the full dashboard report in one call."""
    generated_at = now or datetime.now()
    return PerformanceReport(
        summary=calculate_performance_summary(trades),
        asset_performance=performance_by_asset_type(trades),
        strategy_performance=performance_by_strategy(trades),
        emotional_performance=performance_by_emotional_state(trades),
        monthly_performance=monthly_performance(trades, settings.zone),
        equity_curve=equity_curve(trades, settings.initial_capital, now=generated_at),
        frequency_analysis=trade_frequency_analysis(trades, settings.zone),
        position_analysis=position_sizing_analysis(
            trades, settings.default_account_size, settings.risk_per_trade
        ),
        generated_at=generated_at,
    )
