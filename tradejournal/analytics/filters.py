"""Trade list filtering and sorting."""

import calendar
from datetime import datetime
from typing import Literal, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from tradejournal.analytics.derived import profit_loss, risk_reward_ratio
from tradejournal.models.trade import AssetType, Trade, TradeStatus, normalize_timestamp

TIME_RANGES = {"1M": 1, "3M": 3, "6M": 6, "1Y": 12}


class TradeFilter(BaseModel):
    """Criteria for narrowing a trade list. Unset fields match everything."""

    asset_type: Optional[AssetType] = Field(default=None)
    status: Optional[TradeStatus] = Field(default=None)
    start_date: Optional[datetime] = Field(default=None, description="Earliest entry date")
    end_date: Optional[datetime] = Field(default=None, description="Latest entry date")
    profitability: Optional[Literal["profitable", "losing"]] = Field(default=None)
    strategy: Optional[str] = Field(default=None)
    search: Optional[str] = Field(
        default=None, description="Case-insensitive match on symbol, rationale or lessons"
    )
    sort_by: Optional[Literal["date", "symbol", "pnl", "rr"]] = Field(default=None)

    model_config = {"frozen": True}

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value)


def _matches_search(trade: Trade, term: str) -> bool:
    term = term.lower()
    return (
        term in trade.symbol.lower()
        or term in trade.rationale.lower()
        or term in trade.lessons_learned.lower()
    )


def sort_trades(trades: Sequence[Trade], sort_by: str) -> list[Trade]:
    """Sort a copy: date newest first, symbol A-Z, pnl and rr highest first."""
    if sort_by == "symbol":
        return sorted(trades, key=lambda t: t.symbol.lower())
    if sort_by == "pnl":
        return sorted(trades, key=profit_loss, reverse=True)
    if sort_by == "rr":
        return sorted(trades, key=risk_reward_ratio, reverse=True)
    return sorted(trades, key=lambda t: t.entry_date, reverse=True)


def filter_trades(trades: Sequence[Trade], trade_filter: TradeFilter) -> list[Trade]:
    """Return the trades matching every set criterion, as a new list."""
    result = list(trades)
    f = trade_filter

    if f.asset_type is not None:
        result = [t for t in result if t.asset_type == f.asset_type]
    if f.status is not None:
        result = [t for t in result if t.status == f.status]
    if f.start_date is not None:
        result = [t for t in result if t.entry_date >= f.start_date]
    if f.end_date is not None:
        result = [t for t in result if t.entry_date <= f.end_date]
    if f.profitability == "profitable":
        result = [t for t in result if profit_loss(t) > 0]
    elif f.profitability == "losing":
        result = [t for t in result if profit_loss(t) < 0]
    if f.strategy:
        result = [t for t in result if t.strategy == f.strategy]
    if f.search:
        result = [t for t in result if _matches_search(t, f.search)]

    if f.sort_by:
        result = sort_trades(result, f.sort_by)
    return result


def months_before(moment: datetime, months: int) -> datetime:
    """Same day and time ``months`` earlier, clamped to the month's last day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def filter_by_time_range(
    trades: Sequence[Trade],
    time_range: str,
    now: Optional[datetime] = None,
) -> list[Trade]:
    """Keep trades entered within the last 1M, 3M, 6M or 1Y.

    ``ALL`` and unrecognised ranges keep every trade.
    """
    months = TIME_RANGES.get(time_range.upper())
    if months is None:
        return list(trades)

    start = months_before(now or datetime.now(), months)
    start = start.replace(hour=0, minute=0, second=0, microsecond=0)
    return [t for t in trades if t.entry_date >= start]
