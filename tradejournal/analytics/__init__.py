"""Performance analytics over trade collections."""

from tradejournal.analytics.aggregation import (
    average_loss,
    average_risk_reward,
    average_win,
    calculate_performance_summary,
    closed_trades,
    equity_curve,
    expectancy,
    expectancy_ratio,
    generate_performance_report,
    largest_loss,
    largest_win,
    monthly_performance,
    performance_by_asset_type,
    performance_by_emotional_state,
    performance_by_strategy,
    position_sizing_analysis,
    profit_factor,
    sharpe_ratio,
    to_local,
    trade_frequency_analysis,
    win_rate,
)
from tradejournal.analytics.derived import (
    DerivedFields,
    apply_derived_fields,
    compute_derived_fields,
    profit_loss,
    profit_loss_percent,
    reward_amount,
    risk_amount,
    risk_percent,
    risk_reward_ratio,
)
from tradejournal.analytics.filters import TradeFilter, filter_by_time_range, filter_trades
from tradejournal.analytics.streaks import calculate_drawdown, calculate_streaks

__all__ = [
    "DerivedFields",
    "apply_derived_fields",
    "compute_derived_fields",
    "profit_loss",
    "profit_loss_percent",
    "risk_amount",
    "reward_amount",
    "risk_reward_ratio",
    "risk_percent",
    "closed_trades",
    "win_rate",
    "profit_factor",
    "average_win",
    "average_loss",
    "largest_win",
    "largest_loss",
    "average_risk_reward",
    "expectancy",
    "expectancy_ratio",
    "sharpe_ratio",
    "calculate_performance_summary",
    "performance_by_asset_type",
    "performance_by_strategy",
    "performance_by_emotional_state",
    "monthly_performance",
    "equity_curve",
    "trade_frequency_analysis",
    "to_local",
    "position_sizing_analysis",
    "generate_performance_report",
    "calculate_streaks",
    "calculate_drawdown",
    "TradeFilter",
    "filter_trades",
    "filter_by_time_range",
]
