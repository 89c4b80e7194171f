"""Per-trade derived fields.

Pure functions over a single trade. They accept either a stored ``Trade``
or an unvalidated ``TradeDraft``; missing numbers count as zero so a
malformed draft never raises here.

Profit/loss quantities are exactly 0 until a trade is closed with an exit
price. Risk and reward are signed distances times position size and are not
clamped when a stop or target sits on the wrong side of the entry.
"""

from typing import Union

from pydantic import BaseModel

from tradejournal.models.trade import Direction, Trade, TradeDraft, TradeStatus

TradeLike = Union[Trade, TradeDraft]


class DerivedFields(BaseModel):
    """The six fields recomputed together on every write."""

    profit_loss: float = 0.0
    profit_loss_percent: float = 0.0
    risk_amount: float = 0.0
    reward_amount: float = 0.0
    risk_reward_ratio: float = 0.0
    risk_percent: float = 0.0

    model_config = {"frozen": True}


def _is_closed(trade: TradeLike) -> bool:
    if isinstance(trade, TradeDraft):
        status = trade.resolved_status()
    else:
        status = trade.status
    return status == TradeStatus.CLOSED and bool(trade.exit_price)


def _size(trade: TradeLike) -> float:
    return trade.position_size or 0.0


def _entry(trade: TradeLike) -> float:
    return trade.entry_price or 0.0


def profit_loss(trade: TradeLike) -> float:
    """Net P&L: directional price move times size, less commission."""
    if not _is_closed(trade):
        return 0.0

    if trade.direction == Direction.LONG:
        price_diff = trade.exit_price - _entry(trade)
    else:
        price_diff = _entry(trade) - trade.exit_price

    gross = price_diff * _size(trade)
    return gross - (trade.commission or 0.0)


def profit_loss_percent(trade: TradeLike) -> float:
    """Net P&L as a percentage of the entry value."""
    if not _is_closed(trade):
        return 0.0

    entry_value = _entry(trade) * _size(trade)
    if entry_value == 0:
        return 0.0
    return profit_loss(trade) / entry_value * 100


def risk_amount(trade: TradeLike) -> float:
    """Amount lost if the stop-loss is hit; 0 without a stop."""
    if not trade.stop_loss:
        return 0.0

    if trade.direction == Direction.LONG:
        price_risk = _entry(trade) - trade.stop_loss
    else:
        price_risk = trade.stop_loss - _entry(trade)
    return price_risk * _size(trade)


def reward_amount(trade: TradeLike) -> float:
    """Amount gained if the take-profit is hit; 0 without a target."""
    if not trade.take_profit:
        return 0.0

    if trade.direction == Direction.LONG:
        price_reward = trade.take_profit - _entry(trade)
    else:
        price_reward = _entry(trade) - trade.take_profit
    return price_reward * _size(trade)


def risk_reward_ratio(trade: TradeLike) -> float:
    risk = risk_amount(trade)
    if risk == 0:
        return 0.0
    return reward_amount(trade) / risk


def risk_percent(trade: TradeLike, default_account_size: float) -> float:
    """Risk amount as a percentage of the account.

    Args:
        trade: Trade to evaluate.
        default_account_size: Used when the trade has no (or a zero)
            account size.
    """
    account_size = trade.account_size or default_account_size
    if not account_size:
        return 0.0
    return risk_amount(trade) / account_size * 100


def compute_derived_fields(trade: TradeLike, default_account_size: float) -> DerivedFields:
    return DerivedFields(
        profit_loss=profit_loss(trade),
        profit_loss_percent=profit_loss_percent(trade),
        risk_amount=risk_amount(trade),
        reward_amount=reward_amount(trade),
        risk_reward_ratio=risk_reward_ratio(trade),
        risk_percent=risk_percent(trade, default_account_size),
    )


def apply_derived_fields(trade: Trade, default_account_size: float) -> Trade:
    """Return a copy of ``trade`` with all six derived fields replaced."""
    derived = compute_derived_fields(trade, default_account_size)
    return trade.model_copy(update=derived.model_dump())
