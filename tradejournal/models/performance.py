"""Performance summary models.

These are read-only snapshots computed on demand from a trade collection.
They are never persisted.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StreakStats(BaseModel):
    """Win/loss streaks over closed trades in exit-date order."""

    current: int = Field(default=0, description="Streak ending at the latest exit")
    best: int = Field(default=0, ge=0, description="Longest winning streak")
    worst: int = Field(default=0, le=0, description="Longest losing streak (negative)")

    model_config = {"frozen": True}


class DrawdownStats(BaseModel):
    """Peak-to-trough decline of cumulative closed P&L."""

    max_drawdown: float = Field(default=0.0, ge=0, description="Largest absolute drawdown")
    max_drawdown_percent: float = Field(
        default=0.0, ge=0, description="Largest drawdown as % of the running peak"
    )

    model_config = {"frozen": True}


class PerformanceSummary(BaseModel):
    """Headline statistics for a trade collection."""

    total_trades: int = Field(default=0, ge=0, description="All trades in the collection")
    closed_trades: int = Field(default=0, ge=0, description="Trades with status closed")
    open_trades: int = Field(default=0, ge=0, description="Trades with status open")
    winning_trades: int = Field(default=0, ge=0, description="Closed trades with P&L > 0")
    losing_trades: int = Field(default=0, ge=0, description="Closed trades with P&L < 0")
    breakeven_trades: int = Field(default=0, ge=0, description="Closed trades with P&L == 0")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    total_profit: float = Field(default=0.0, ge=0, description="Gross profit of winners")
    total_loss: float = Field(default=0.0, ge=0, description="Gross absolute loss of losers")
    net_profit: float = Field(default=0.0, description="Total profit minus total loss")
    profit_factor: float = Field(default=0.0, ge=0, description="Gross profit / gross loss")
    average_win: float = Field(default=0.0, description="Mean P&L of winners")
    average_loss: float = Field(default=0.0, description="Mean P&L of losers (negative)")
    largest_win: float = Field(default=0.0, description="Best single P&L")
    largest_loss: float = Field(default=0.0, description="Worst single P&L")
    average_risk_reward: float = Field(default=0.0, description="Mean R:R over closed trades")
    expectancy: float = Field(default=0.0, description="Mean P&L per closed trade")
    expectancy_ratio: float = Field(default=0.0, description="Expectancy in units of average loss")
    sharpe_ratio: float = Field(default=0.0, description="Simplified per-trade Sharpe ratio")
    max_drawdown: float = Field(default=0.0, ge=0, description="Largest absolute drawdown")
    max_drawdown_percent: float = Field(default=0.0, ge=0, description="Largest drawdown %")
    current_streak: int = Field(default=0, description="Streak ending at the latest exit")
    best_streak: int = Field(default=0, ge=0, description="Longest winning streak")
    worst_streak: int = Field(default=0, le=0, description="Longest losing streak")

    model_config = {"frozen": True}


class GroupPerformance(BaseModel):
    """Summary restricted to trades sharing one category value."""

    key: str = Field(..., description="Category value")
    total_trades: int = Field(default=0, ge=0)
    winning_trades: int = Field(default=0, ge=0)
    losing_trades: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)
    total_pl: float = Field(default=0.0)
    profit_factor: float = Field(default=0.0, ge=0)
    average_rr: float = Field(default=0.0)

    model_config = {"frozen": True}


class MonthlyPerformance(BaseModel):
    """Closed-trade results for one exit month."""

    month: str = Field(..., description="Year-month key, e.g. 2024-01")
    trade_count: int = Field(default=0, ge=0)
    total_pl: float = Field(default=0.0)
    winning_trades: int = Field(default=0, ge=0)
    losing_trades: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)
    profit_factor: float = Field(default=0.0, ge=0)
    trade_ids: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    """One point of the equity curve."""

    date: datetime = Field(..., description="Exit date of the trade")
    equity: float = Field(..., description="Cumulative equity after the trade")
    trade_id: Optional[str] = Field(default=None)
    symbol: Optional[str] = Field(default=None)
    pl: float = Field(default=0.0, description="P&L of this trade")

    model_config = {"frozen": True}


class DayOfWeekCount(BaseModel):
    day: str
    index: int = Field(..., ge=0, le=6, description="0=Sunday .. 6=Saturday")
    count: int = Field(default=0, ge=0)
    percentage: float = Field(default=0.0, ge=0, le=100)

    model_config = {"frozen": True}


class FrequencyAnalysis(BaseModel):
    """How often and on which weekdays trades are entered."""

    average_trades_per_week: float = Field(default=0.0, ge=0)
    average_trades_per_month: float = Field(default=0.0, ge=0)
    most_active_day: Optional[str] = Field(default=None)
    least_active_day: Optional[str] = Field(default=None)
    trading_days_per_week: float = Field(default=0.0, ge=0)
    span_days: int = Field(default=0, ge=0)
    day_of_week_distribution: list[DayOfWeekCount] = Field(default_factory=list)

    model_config = {"frozen": True}


class PositionSizingAnalysis(BaseModel):
    """Consistency of position sizes across closed trades."""

    average_position_size: float = Field(default=0.0)
    position_size_std_dev: float = Field(default=0.0, ge=0)
    consistency_score: float = Field(default=0.0, ge=0, le=100)
    recommended_position_size: float = Field(default=0.0)
    position_sizes: list[float] = Field(default_factory=list)

    model_config = {"frozen": True}


class PerformanceReport(BaseModel):
    """Everything the dashboard shows, computed in one pass."""

    summary: PerformanceSummary
    asset_performance: dict[str, GroupPerformance]
    strategy_performance: dict[str, GroupPerformance]
    emotional_performance: dict[str, GroupPerformance]
    monthly_performance: dict[str, MonthlyPerformance]
    equity_curve: list[EquityPoint]
    frequency_analysis: FrequencyAnalysis
    position_analysis: PositionSizingAnalysis
    generated_at: datetime

    model_config = {"frozen": True}
