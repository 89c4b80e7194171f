"""Main CLI entry point for TradeJournal.

This module provides the main click group and lazy loading
for command modules to keep startup fast.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from tradejournal.config import HOME_ENV_VAR


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their
    commands is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        # Commands whose name is a Python keyword or builtin live under another attribute
        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command) or cmd.name != cmd_name:
            cmd = None
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, click.Command) and attr.name == cmd_name:
                    cmd = attr
                    break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Trades
    "add": "tradejournal.cli.trades",
    "edit": "tradejournal.cli.trades",
    "delete": "tradejournal.cli.trades",
    "show": "tradejournal.cli.trades",
    "list": "tradejournal.cli.trades",
    # Analytics
    "stats": "tradejournal.cli.stats",
    "breakdown": "tradejournal.cli.stats",
    "monthly": "tradejournal.cli.stats",
    "equity": "tradejournal.cli.stats",
    "frequency": "tradejournal.cli.stats",
    "sizing": "tradejournal.cli.stats",
    "report": "tradejournal.cli.stats",
    # Data
    "export": "tradejournal.cli.data",
    "import": "tradejournal.cli.data",
    "sample": "tradejournal.cli.data",
    "clear": "tradejournal.cli.data",
    # Settings
    "settings": "tradejournal.cli.settings",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=HOME_ENV_VAR,
    default=None,
    help="Journal directory holding config.toml and journal.db.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, home: Optional[Path], verbose: bool) -> None:
    """TradeJournal - record trades and analyse your performance.

    \b
    Quick Start:
      tradejournal sample       # Load three example trades
      tradejournal list         # Browse the journal
      tradejournal stats        # Win rate, profit factor, drawdown
      tradejournal report       # Full performance report
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["home"] = home


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
