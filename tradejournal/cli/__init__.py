"""CLI commands for TradeJournal.

This package provides the command-line interface for recording
trades, browsing the journal and viewing performance analytics.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
