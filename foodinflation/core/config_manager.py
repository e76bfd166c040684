from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from foodinflation import config
from ..common.exceptions import ConfigurationError
from ..logging_cfg import get_logger

logger = get_logger(__name__)


class ConfigManager:
    """User settings stored as JSON, merged over the package defaults."""

    def __init__(self, config_file: Path | str = config.DEFAULT_SETTINGS_FILE):
        self.config_path = Path(config_file)
        self.values: dict[str, Any] = {}
        self.load()

    @staticmethod
    def defaults() -> dict[str, Any]:
        return {
            "data_file": config.DEFAULT_DATA_FILE,
            "table": config.DEFAULT_TABLE,
            "top_n": config.DEFAULT_TOP_N,
            "spike_threshold": config.SPIKE_THRESHOLD,
            "deflation_threshold": config.DEFLATION_THRESHOLD,
            "run_length": config.RUN_LENGTH,
            "focus_country": config.FOCUS_COUNTRY,
            "compare_countries": list(config.COMPARE_COUNTRIES),
            "log_format": "auto",
        }

    def load(self) -> None:
        """Load settings from disk on top of the defaults."""
        self.values = self.defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable settings file %s: %s", self.config_path, e)
                return
            if not isinstance(stored, dict):
                logger.warning("Ignoring settings file %s: top level is not an object", self.config_path)
                return
            self.values.update(stored)

    def save(self) -> bool:
        """Write the current settings to disk."""
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self.values, f, indent=4, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error("Could not save settings to %s: %s", self.config_path, e)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Change one setting in memory.

        Raises:
            ConfigurationError: If ``key`` is not a known setting
        """
        if key not in self.defaults():
            raise ConfigurationError(f"Unknown setting: {key}", {"allowed": "|".join(self.defaults())})
        self.values[key] = value
