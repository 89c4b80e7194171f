"""Exception hierarchy for TradeJournal."""


class JournalError(Exception):
    """Base exception for all journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or unreadable configuration."""


# --- Trades ---
class TradeValidationError(JournalError):
    """A trade failed one or more validation rules."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))


class TradeNotFoundError(JournalError):
    """No trade with the given identifier exists."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


# --- Import / export ---
class ImportValidationError(JournalError):
    """A CSV batch was rejected; nothing was imported."""

    def __init__(self, row_errors: list[str]):
        self.row_errors = list(row_errors)
        super().__init__(f"Validation errors: {'; '.join(self.row_errors)}")


class ExportError(JournalError):
    """Nothing to export or the export could not be produced."""


# --- Storage ---
class StorageError(JournalError):
    """The record store could not be read or written."""
