"""Trade journal service.

Ties the record store to validation and the derived field calculator.
Every write loads the full collection, changes a copy and saves the whole
collection back, so a rejected write never leaves partial changes behind.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from tradejournal.analytics.aggregation import (
    calculate_performance_summary,
    generate_performance_report,
)
from tradejournal.analytics.derived import apply_derived_fields
from tradejournal.analytics.filters import TradeFilter, filter_trades
from tradejournal.config import Settings
from tradejournal.db.store import TradeStore
from tradejournal.errors import TradeNotFoundError, TradeValidationError
from tradejournal.io.csv_io import export_to_csv, parse_trades_csv
from tradejournal.models import (
    PerformanceReport,
    PerformanceSummary,
    Trade,
    TradeDraft,
    TradeStatus,
)
from tradejournal.models.trade import SOURCE_FIELDS
from tradejournal.validation import ensure_valid, parse_draft

logger = logging.getLogger(__name__)


def generate_trade_id() -> str:
    return f"trade_{uuid.uuid4().hex}"


class TradeJournal:
    """Create, update, delete and analyse trades held in a ``TradeStore``."""

    def __init__(self, store: TradeStore, settings: Settings):
        """Initialize the journal.

        Args:
            store: Record store holding the trade collection.
            settings: Active settings; supplies the default account size.
        """
        self.store = store
        self.settings = settings

    def _build_trade(
        self,
        draft: TradeDraft,
        trade_id: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> Trade:
        data = draft.model_dump()
        data["status"] = draft.resolved_status()
        trade = Trade.model_validate(
            {**data, "id": trade_id, "created_at": created_at, "updated_at": updated_at}
        )
        return apply_derived_fields(trade, self.settings.default_account_size)

    def _find(self, trades: Sequence[Trade], trade_id: str) -> int:
        for index, trade in enumerate(trades):
            if trade.id == trade_id:
                return index
        raise TradeNotFoundError(trade_id)

    # ==================== Writes ====================

    def add_trade(self, data: Union[TradeDraft, Mapping[str, Any]]) -> Trade:
        """Validate and store a new trade.

        Args:
            data: A draft or raw source field values to parse into one.

        Returns:
            The stored trade with its id and derived fields.

        Raises:
            TradeValidationError: If any rule is violated.
        """
        draft = data if isinstance(data, TradeDraft) else parse_draft(data)
        ensure_valid(draft)

        now = datetime.now()
        trade = self._build_trade(draft, generate_trade_id(), now, now)

        trades = self.store.load()
        trades.append(trade)
        self.store.save(trades)
        logger.info("Added trade %s (%s)", trade.id, trade.symbol)
        return trade

    def update_trade(self, trade_id: str, updates: Mapping[str, Any]) -> Trade:
        """Apply field updates, re-validate and recompute derived fields.

        Raises:
            TradeNotFoundError: If no trade has ``trade_id``.
            TradeValidationError: If the updated trade violates a rule.
        """
        unknown = sorted(set(updates) - set(SOURCE_FIELDS))
        if unknown:
            raise TradeValidationError([f"Unknown field: {name}" for name in unknown])

        trades = self.store.load()
        index = self._find(trades, trade_id)
        existing = trades[index]

        merged = {**existing.source_fields(), **updates}
        # Open/closed follows the exit price unless the update sets a status.
        if (
            "exit_price" in updates
            and "status" not in updates
            and existing.status != TradeStatus.CANCELLED
        ):
            merged["status"] = None

        draft = parse_draft(merged)
        ensure_valid(draft)

        trades[index] = self._build_trade(draft, existing.id, existing.created_at, datetime.now())
        self.store.save(trades)
        logger.info("Updated trade %s", trade_id)
        return trades[index]

    def delete_trade(self, trade_id: str) -> None:
        """Remove a trade.

        Raises:
            TradeNotFoundError: If no trade has ``trade_id``.
        """
        trades = self.store.load()
        remaining = [t for t in trades if t.id != trade_id]
        if len(remaining) == len(trades):
            raise TradeNotFoundError(trade_id)
        self.store.save(remaining)
        logger.info("Deleted trade %s", trade_id)

    def clear(self) -> int:
        """Delete every trade and return how many were removed."""
        count = self.store.count()
        self.store.clear()
        logger.info("Cleared %d trades", count)
        return count

    # ==================== Reads ====================

    def get_trade(self, trade_id: str) -> Trade:
        trades = self.store.load()
        return trades[self._find(trades, trade_id)]

    def list_trades(self, trade_filter: Optional[TradeFilter] = None) -> list[Trade]:
        trades = self.store.load()
        if trade_filter is None:
            return trades
        return filter_trades(trades, trade_filter)

    def summary(self, trades: Optional[Sequence[Trade]] = None) -> PerformanceSummary:
        return calculate_performance_summary(self.store.load() if trades is None else trades)

    def report(
        self,
        trades: Optional[Sequence[Trade]] = None,
        now: Optional[datetime] = None,
    ) -> PerformanceReport:
        trades = self.store.load() if trades is None else trades
        return generate_performance_report(trades, self.settings, now=now)

    # ==================== Import / export ====================

    def export_csv(self, trades: Optional[Sequence[Trade]] = None) -> str:
        """Export trades (all stored trades by default) as CSV text.

        Raises:
            ExportError: If there is nothing to export.
        """
        trades = self.store.load() if trades is None else trades
        return export_to_csv(trades, self.settings.default_account_size)

    def import_csv(self, text: str) -> list[Trade]:
        """Append every row of a CSV document as a new trade.

        Imported trades get fresh ids, timestamps and derived fields.

        Raises:
            ImportValidationError: If any row is invalid; nothing is stored.
        """
        drafts = parse_trades_csv(text)

        now = datetime.now()
        imported = [
            self._build_trade(draft, generate_trade_id(), now, now) for draft in drafts
        ]

        trades = self.store.load()
        self.store.save(trades + imported)
        logger.info("Imported %d trades", len(imported))
        return imported
