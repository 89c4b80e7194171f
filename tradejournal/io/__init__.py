"""Text import and export for TradeJournal."""
