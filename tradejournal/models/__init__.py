"""Data models for TradeJournal."""

from tradejournal.models.trade import (
    AssetType,
    Direction,
    Trade,
    TradeDraft,
    TradeStatus,
)
from tradejournal.models.performance import (
    DayOfWeekCount,
    DrawdownStats,
    EquityPoint,
    FrequencyAnalysis,
    GroupPerformance,
    MonthlyPerformance,
    PerformanceReport,
    PerformanceSummary,
    PositionSizingAnalysis,
    StreakStats,
)

__all__ = [
    "AssetType",
    "Direction",
    "TradeStatus",
    "Trade",
    "TradeDraft",
    "PerformanceSummary",
    "GroupPerformance",
    "MonthlyPerformance",
    "EquityPoint",
    "DayOfWeekCount",
    "FrequencyAnalysis",
    "PositionSizingAnalysis",
    "StreakStats",
    "DrawdownStats",
    "PerformanceReport",
]
