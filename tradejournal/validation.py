"""Validation rules applied before a trade is created or updated.

Rules are independent: every violation is collected and returned, an empty
list meaning the trade is acceptable.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from tradejournal.analytics.derived import risk_amount
from tradejournal.errors import TradeValidationError
from tradejournal.models.trade import Direction, TradeDraft

FIELD_LABELS = {
    "asset_type": "Asset type",
    "symbol": "Symbol",
    "direction": "Direction",
    "status": "Status",
    "position_size": "Position size",
    "entry_price": "Entry price",
    "entry_date": "Entry date",
    "exit_price": "Exit price",
    "exit_date": "Exit date",
    "commission": "Commission",
    "stop_loss": "Stop loss",
    "take_profit": "Take profit",
    "account_size": "Account size",
    "strategy": "Strategy",
    "emotional_state": "Emotional state",
    "market_conditions": "Market conditions",
    "rationale": "Rationale",
    "lessons_learned": "Lessons learned",
    "tags": "Tags",
    "rating": "Rating",
}


def _required(draft: TradeDraft) -> list[str]:
    errors = []
    if draft.asset_type is None:
        errors.append("Asset type is required")
    if not draft.symbol:
        errors.append("Symbol is required")
    if draft.direction is None:
        errors.append("Direction is required")
    if draft.position_size is None or draft.position_size <= 0:
        errors.append("Position size must be greater than 0")
    if draft.entry_price is None or draft.entry_price <= 0:
        errors.append("Entry price must be greater than 0")
    if draft.entry_date is None:
        errors.append("Entry date is required")
    return errors


def _optional_numbers(draft: TradeDraft) -> list[str]:
    errors = []
    for name in ("exit_price", "stop_loss", "take_profit", "account_size"):
        value = getattr(draft, name)
        if value is not None and value <= 0:
            errors.append(f"{FIELD_LABELS[name]} must be greater than 0")
    if draft.commission is not None and draft.commission < 0:
        errors.append("Commission cannot be negative")
    if draft.rating is not None and not 0 <= draft.rating <= 5:
        errors.append("Rating must be between 0 and 5")
    return errors


def _dates(draft: TradeDraft) -> list[str]:
    if draft.exit_date and draft.entry_date and draft.exit_date < draft.entry_date:
        return ["Exit date cannot be before entry date"]
    return []


def _price_levels(draft: TradeDraft) -> list[str]:
    """Stop and target must sit on the loss and profit side of the entry."""
    entry = draft.entry_price
    if draft.direction is None or entry is None or entry <= 0:
        return []

    errors = []
    is_long = draft.direction == Direction.LONG
    side = "long" if is_long else "short"

    if draft.stop_loss is not None and draft.stop_loss > 0:
        if (is_long and draft.stop_loss >= entry) or (not is_long and draft.stop_loss <= entry):
            where = "below" if is_long else "above"
            errors.append(f"Stop loss must be {where} entry price for {side} trades")

    if draft.take_profit is not None and draft.take_profit > 0:
        if (is_long and draft.take_profit <= entry) or (not is_long and draft.take_profit >= entry):
            where = "above" if is_long else "below"
            errors.append(f"Take profit must be {where} entry price for {side} trades")

    return errors


def _account_limits(draft: TradeDraft) -> list[str]:
    if not draft.account_size:
        return []

    errors = []
    if risk_amount(draft) > draft.account_size:
        errors.append("Risk amount cannot exceed account size")
    if draft.position_size and draft.entry_price:
        if draft.position_size * draft.entry_price > draft.account_size:
            errors.append("Position value cannot exceed account size")
    return errors


def validate_trade(draft: TradeDraft) -> list[str]:
    """Check a draft against every rule.

    Args:
        draft: Trade input to check.

    Returns:
        Human-readable violations; empty when the draft is valid.
    """
    return (
        _required(draft)
        + _optional_numbers(draft)
        + _dates(draft)
        + _price_levels(draft)
        + _account_limits(draft)
    )


def parse_draft(data: Mapping[str, Any]) -> TradeDraft:
    """Parse raw field values (CLI options, CSV cells) into a draft.

    Raises:
        TradeValidationError: If a value cannot be parsed into its field type.
    """
    try:
        return TradeDraft.model_validate(dict(data))
    except ValidationError as e:
        raise TradeValidationError(_parse_messages(e)) from e


def _parse_messages(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        name = str(err["loc"][0]) if err["loc"] else "value"
        label = FIELD_LABELS.get(name, name)
        messages.append(f"{label} is invalid: {err['msg']}")
    return messages


def ensure_valid(draft: TradeDraft) -> TradeDraft:
    """Return the draft unchanged, or raise with every violation."""
    errors = validate_trade(draft)
    if errors:
        raise TradeValidationError(errors)
    return draft
