"""TradeJournal - personal trade journaling and performance analytics."""

__version__ = "0.1.0"
