"""Application settings loaded from config.yaml."""
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

import yaml

from expenses.errors import ConfigError

CONFIG_ENV_VAR = "EXPENSES_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


@dataclass(frozen=True)
class Settings:
    """Dashboard settings."""

    title: str
    seed_path: Path
    currency: str
    daily_goal: Decimal
    log_level: str

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "Settings":
        """Load settings from a YAML file.

        Falls back to $EXPENSES_CONFIG, then to config.yaml in the project root.
        ``data.seed_path`` is resolved relative to the config file.
        """
        if config_path is None:
            config_path = os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        try:
            seed_path = Path(config["data"]["seed_path"])
            display = config.get("display", {})
            settings = cls(
                title=config.get("app", {}).get("title", "Expense Overview"),
                seed_path=seed_path if seed_path.is_absolute() else config_path.parent / seed_path,
                currency=display.get("currency", "USD"),
                daily_goal=Decimal(str(display.get("daily_goal", 50))),
                log_level=str(config.get("logging", {}).get("level", "INFO")).upper(),
            )
        except (KeyError, TypeError, ArithmeticError) as e:
            raise ConfigError(f"Malformed configuration in {config_path}: {e}") from e

        return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
