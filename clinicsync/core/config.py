"""Configuration management for ClinicSync.

This module handles loading and saving application configuration to/from
a JSON file. The config directory can be customized by the caller.

CRITICAL: This module must have NO Qt/PySide6 dependencies.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

__all__ = ["Config", "DEFAULT_CONFIG_DIR"]

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "clinicsync"

DEFAULT_KEY_PREFIX = "clinicsync_v3"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_STEP_SECONDS = 2


class Config:
    """Manages application configuration stored in JSON format.

    Attributes:
        config_dir: Path to the configuration directory
        config_file: Path to config.json inside config_dir
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Custom config directory path. If None, uses ~/.config/clinicsync/
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file = self.config_dir / "config.json"
        self.config_data = self.load_config()

    def _defaults(self) -> Dict[str, Any]:
        return {
            "database_file": str(self.config_dir / "replica.db"),
            "remote_url": "",
            "key_prefix": DEFAULT_KEY_PREFIX,
            "request_timeout_seconds": DEFAULT_REQUEST_TIMEOUT_SECONDS,
            "max_attempts": DEFAULT_MAX_ATTEMPTS,
            "backoff_step_seconds": DEFAULT_BACKOFF_STEP_SECONDS,
        }

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file, creating it with defaults if missing.

        Returns:
            Configuration dict with defaults filled in for missing keys
        """
        config = self._defaults()
        if not self.config_file.exists():
            self.save_config(config)
            return config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {self.config_file}: {e}. Using defaults.")
            return config

        if not isinstance(stored, dict):
            logger.warning(f"Ignoring malformed config file {self.config_file}")
            return config

        config.update(stored)
        return config

    def save_config(self, config: Dict[str, Any]) -> None:
        """Write configuration to file."""
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        value = self.config_data.get(key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value and save to file."""
        self.config_data[key] = value
        self.save_config(self.config_data)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self.config_dir

    # ===== Sync Configuration Methods =====

    def get_database_file(self) -> Path:
        """Get the path of the local replica database."""
        return Path(self.get("database_file", self.config_dir / "replica.db"))

    def get_remote_url(self) -> str:
        """Get the URL of the shared remote document ("" if unset)."""
        return str(self.get("remote_url", ""))

    def set_remote_url(self, url: str) -> None:
        """Set the URL of the shared remote document."""
        self.set("remote_url", url)

    def is_sync_enabled(self) -> bool:
        """Sync is enabled when a remote URL is configured."""
        return bool(self.get_remote_url())

    def get_key_prefix(self) -> str:
        """Get the versioned prefix for local storage keys."""
        return str(self.get("key_prefix", DEFAULT_KEY_PREFIX))

    def get_sync_config(self) -> Dict[str, Any]:
        """Get sync configuration with typed values."""
        return {
            "remote_url": self.get_remote_url(),
            "request_timeout_seconds": float(
                self.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS)
            ),
            "max_attempts": int(self.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
            "backoff_step_seconds": float(
                self.get("backoff_step_seconds", DEFAULT_BACKOFF_STEP_SECONDS)
            ),
        }
