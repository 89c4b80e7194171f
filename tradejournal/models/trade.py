"""Trade data models.

A trade is one discrete position, open or closed. Input from the command
line or a CSV row is first parsed into a loose ``TradeDraft``; only after the
validation rules accept it is it turned into a frozen ``Trade`` carrying the
derived profit/loss and risk fields.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class AssetType(str, Enum):
    STOCKS = "stocks"
    FOREX = "forex"
    CRYPTO = "crypto"
    OPTIONS = "options"


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


# Fields a user supplies; everything else on a Trade is derived or stamped.
SOURCE_FIELDS = (
    "asset_type",
    "symbol",
    "direction",
    "status",
    "position_size",
    "entry_price",
    "entry_date",
    "exit_price",
    "exit_date",
    "commission",
    "stop_loss",
    "take_profit",
    "account_size",
    "strategy",
    "emotional_state",
    "market_conditions",
    "rationale",
    "lessons_learned",
    "tags",
    "rating",
)

DERIVED_FIELDS = (
    "profit_loss",
    "profit_loss_percent",
    "risk_amount",
    "reward_amount",
    "risk_reward_ratio",
    "risk_percent",
)

_OPTIONAL_NUMBERS = (
    "position_size",
    "entry_price",
    "exit_price",
    "commission",
    "stop_loss",
    "take_profit",
    "account_size",
    "rating",
)


def normalize_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    """Convert aware timestamps to naive UTC so all stored values compare."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def normalize_tags(value: Any) -> list[str]:
    """Accept a comma separated string or an iterable; drop blanks and repeats."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    tags: list[str] = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class TradeDraft(BaseModel):
    """Unvalidated trade input.

    Every field is optional so that the validation rules can report all
    missing or inconsistent values at once instead of failing on the first.
    """

    asset_type: Optional[AssetType] = None
    symbol: Optional[str] = None
    direction: Optional[Direction] = None
    status: Optional[TradeStatus] = None
    position_size: Optional[float] = None
    entry_price: Optional[float] = None
    entry_date: Optional[datetime] = None
    exit_price: Optional[float] = None
    exit_date: Optional[datetime] = None
    commission: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    account_size: Optional[float] = None
    strategy: Optional[str] = None
    emotional_state: Optional[str] = None
    market_conditions: Optional[str] = None
    rationale: str = ""
    lessons_learned: str = ""
    tags: list[str] = Field(default_factory=list)
    rating: Optional[int] = None

    model_config = {"frozen": True}

    @field_validator(*_OPTIONAL_NUMBERS, "entry_date", "exit_date", "asset_type",
                     "direction", "status", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("symbol", "strategy", "emotional_state", "market_conditions")
    @classmethod
    def _strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("rationale", "lessons_learned", mode="before")
    @classmethod
    def _text_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("entry_date", "exit_date")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)

    def resolved_status(self) -> TradeStatus:
        """Status to store; inferred from the exit price when not given."""
        if self.status is not None:
            return self.status
        return TradeStatus.CLOSED if self.exit_price else TradeStatus.OPEN


class Trade(BaseModel):
    """A stored trade with its derived fields."""

    id: str = Field(..., min_length=1, description="Opaque trade identifier")
    asset_type: AssetType = Field(..., description="Asset class")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    direction: Direction = Field(..., description="Long or short")
    status: TradeStatus = Field(..., description="Open, closed or cancelled")
    position_size: float = Field(..., gt=0, description="Units traded")
    entry_price: float = Field(..., gt=0, description="Entry price")
    entry_date: datetime = Field(..., description="Entry timestamp")
    exit_price: Optional[float] = Field(default=None, gt=0, description="Exit price")
    exit_date: Optional[datetime] = Field(default=None, description="Exit timestamp")
    commission: Optional[float] = Field(default=None, ge=0, description="Total fees")
    stop_loss: Optional[float] = Field(default=None, gt=0, description="Stop-loss price")
    take_profit: Optional[float] = Field(default=None, gt=0, description="Target price")
    account_size: Optional[float] = Field(
        default=None, gt=0, description="Account size used for risk percentage"
    )
    strategy: Optional[str] = Field(default=None, description="Strategy label")
    emotional_state: Optional[str] = Field(default=None, description="Emotional state label")
    market_conditions: Optional[str] = Field(default=None, description="Market conditions label")
    rationale: str = Field(default="", description="Why the trade was taken")
    lessons_learned: str = Field(default="", description="Post-trade notes")
    tags: list[str] = Field(default_factory=list, description="Display-ordered tags")
    rating: Optional[int] = Field(default=None, ge=0, le=5, description="Self rating 0-5")

    profit_loss: float = Field(default=0.0, description="Net P&L")
    profit_loss_percent: float = Field(default=0.0, description="Net P&L as % of entry value")
    risk_amount: float = Field(default=0.0, description="Amount at risk to the stop")
    reward_amount: float = Field(default=0.0, description="Amount to the target")
    risk_reward_ratio: float = Field(default=0.0, description="Reward / risk")
    risk_percent: float = Field(default=0.0, description="Risk as % of account")

    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    model_config = {"frozen": True}

    @field_validator("entry_date", "exit_date", "created_at", "updated_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)

    @property
    def is_closed(self) -> bool:
        """Closed with a recorded exit price."""
        return self.status == TradeStatus.CLOSED and self.exit_price is not None

    def source_fields(self) -> dict[str, Any]:
        """User-supplied fields, suitable for building a ``TradeDraft``."""
        return {name: getattr(self, name) for name in SOURCE_FIELDS}
