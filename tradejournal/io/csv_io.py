"""CSV export and batch import of trades.

Export always writes freshly computed derived fields. Import is
all-or-nothing: if any row fails to parse or validate, the whole batch is
rejected with one message per failing row.
"""

import csv
import io
import logging
from typing import Any, Optional, Sequence

from tradejournal.analytics.derived import compute_derived_fields
from tradejournal.errors import ExportError, ImportValidationError, TradeValidationError
from tradejournal.models.trade import SOURCE_FIELDS, Trade, TradeDraft
from tradejournal.validation import parse_draft, validate_trade

logger = logging.getLogger(__name__)

# (field name, column header) in export order
CSV_COLUMNS = [
    ("id", "ID"),
    ("asset_type", "Asset Type"),
    ("symbol", "Symbol"),
    ("direction", "Direction"),
    ("status", "Status"),
    ("position_size", "Position Size"),
    ("entry_price", "Entry Price"),
    ("entry_date", "Entry Date"),
    ("exit_price", "Exit Price"),
    ("exit_date", "Exit Date"),
    ("commission", "Commission"),
    ("stop_loss", "Stop Loss"),
    ("take_profit", "Take Profit"),
    ("account_size", "Account Size"),
    ("profit_loss", "Profit/Loss"),
    ("profit_loss_percent", "P&L %"),
    ("risk_amount", "Risk Amount"),
    ("reward_amount", "Reward Amount"),
    ("risk_reward_ratio", "R:R Ratio"),
    ("risk_percent", "Risk %"),
    ("strategy", "Strategy"),
    ("emotional_state", "Emotional State"),
    ("market_conditions", "Market Conditions"),
    ("rationale", "Rationale"),
    ("lessons_learned", "Lessons Learned"),
    ("tags", "Tags"),
    ("rating", "Rating"),
    ("created_at", "Created At"),
    ("updated_at", "Updated At"),
]

_HEADER_TO_FIELD = {}
for _field, _header in CSV_COLUMNS:
    _HEADER_TO_FIELD[_header.lower()] = _field
    _HEADER_TO_FIELD[_field] = _field
    _HEADER_TO_FIELD[_field.replace("_", "")] = _field


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def export_to_csv(trades: Sequence[Trade], default_account_size: float) -> str:
    """Render trades as CSV text with a header row.

    Args:
        trades: Trades to export.
        default_account_size: Fallback account size for the risk percentage.

    Raises:
        ExportError: If there are no trades.
    """
    if not trades:
        raise ExportError("No trades to export")

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for _, header in CSV_COLUMNS])

    for trade in trades:
        row = trade.model_dump()
        row.update(compute_derived_fields(trade, default_account_size).model_dump())
        writer.writerow([_cell(row.get(name)) for name, _ in CSV_COLUMNS])

    logger.info("Exported %d trades to CSV", len(trades))
    return buf.getvalue()


def _field_for(header: str) -> Optional[str]:
    key = header.strip().lower()
    return _HEADER_TO_FIELD.get(key) or _HEADER_TO_FIELD.get(key.replace(" ", ""))


def parse_trades_csv(text: str) -> list[TradeDraft]:
    """Parse and validate every row of a CSV document.

    Columns are matched by export header ("Entry Price") or field name
    ("entry_price"). Identifier, timestamp and derived columns are ignored.

    Returns:
        One validated draft per non-blank data row.

    Raises:
        ImportValidationError: If the document is empty or any row is invalid.
    """
    reader = csv.reader(io.StringIO(text))
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if len(rows) < 2:
        raise ImportValidationError(["CSV file is empty or invalid"])

    fields = [_field_for(header) for header in rows[0]]

    drafts: list[TradeDraft] = []
    row_errors: list[str] = []
    for number, row in enumerate(rows[1:], start=1):
        data = {
            field: value
            for field, value in zip(fields, row)
            if field in SOURCE_FIELDS
        }
        try:
            draft = parse_draft(data)
        except TradeValidationError as e:
            row_errors.append(f"Row {number}: {', '.join(e.messages)}")
            continue

        errors = validate_trade(draft)
        if errors:
            row_errors.append(f"Row {number}: {', '.join(errors)}")
        else:
            drafts.append(draft)

    if row_errors:
        logger.warning("Rejected CSV import: %d invalid rows", len(row_errors))
        raise ImportValidationError(row_errors)

    return drafts
