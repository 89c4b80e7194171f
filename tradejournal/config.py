"""Configuration for TradeJournal.

Settings live in a TOML file under the journal home directory
(``~/.config/tradejournal`` unless overridden).
"""

import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import pytz
import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tradejournal.errors import ConfigError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TRADEJOURNAL_HOME"
DEFAULT_HOME = Path.home() / ".config" / "tradejournal"
CONFIG_FILENAME = "config.toml"
DB_FILENAME = "journal.db"


class Settings(BaseModel):
    """User settings consumed by the analytics core and the CLI."""

    default_currency: str = Field(default="USD", min_length=1)
    risk_per_trade: float = Field(
        default=2.0, gt=0, le=100, description="Percent of account risked per trade"
    )
    default_account_size: float = Field(
        default=10000.0, gt=0, description="Fallback when a trade has no account size"
    )
    initial_capital: float = Field(
        default=10000.0, gt=0, description="Starting equity for the equity curve"
    )
    timezone: str = Field(
        default="America/New_York", description="Calendar used for months, weekdays and display"
    )
    date_format: Literal["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD"] = "MM/DD/YYYY"
    time_format: Literal["12h", "24h"] = "12h"
    strategies: list[str] = Field(
        default_factory=lambda: ["Momentum", "Mean Reversion", "Breakout", "Scalping"]
    )
    emotional_states: list[str] = Field(
        default_factory=lambda: ["Calm", "Anxious", "Greedy", "Fearful", "Neutral"]
    )
    market_conditions: list[str] = Field(
        default_factory=lambda: ["Trending", "Ranging", "Volatile", "Quiet"]
    )

    model_config = {"frozen": True}

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def zone(self):
        """The configured timezone as a pytz zone."""
        return pytz.timezone(self.timezone)


def get_home(home: Optional[Path] = None) -> Path:
    """Resolve the journal home directory.

    Args:
        home: Explicit directory. Falls back to ``$TRADEJOURNAL_HOME``
            and then ``~/.config/tradejournal``.
    """
    if home is not None:
        return Path(home)
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home)
    return DEFAULT_HOME


def get_config_path(home: Optional[Path] = None) -> Path:
    return get_home(home) / CONFIG_FILENAME


def get_db_path(home: Optional[Path] = None) -> Path:
    return get_home(home) / DB_FILENAME


def load_settings(config_path: Path) -> Settings:
    """Load settings from a TOML file.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return Settings()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e


def save_settings(settings: Settings, config_path: Path) -> None:
    """Write settings to a TOML file, creating the directory if needed."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        toml.dump(settings.model_dump(), f)
    logger.info("Saved settings to %s", config_path)


def update_settings(settings: Settings, **changes: Any) -> Settings:
    """Return new settings with ``changes`` applied and re-validated.

    Raises:
        ConfigError: If a key is unknown or a value is out of range.
    """
    unknown = set(changes) - set(Settings.model_fields)
    if unknown:
        raise ConfigError(f"Unknown setting: {', '.join(sorted(unknown))}")

    data = settings.model_dump()
    data.update(changes)
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigError("; ".join(messages)) from e


def reset_settings(config_path: Path) -> Settings:
    """Overwrite the config file with defaults and return them."""
    settings = Settings()
    save_settings(settings, config_path)
    return settings
