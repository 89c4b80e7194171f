"""Persistence for TradeJournal."""
