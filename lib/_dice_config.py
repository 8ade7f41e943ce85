#!/usr/bin/env python3
"""
Centralized configuration for the dice trigger system.

Loads settings from {base}/dice_settings.json with sensible defaults.
Supports hot-reload on file change via mtime checking, and reloads
immediately when the base directory itself changes (CC_DICE_BASE).
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional

from _dice_persistence import base_dir

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "dice_settings.json"

# =============================================================================
# ENUMERATIONS (avoid magic strings scattered across modules)
# =============================================================================

TARGET_MODES = ("exact", "gte", "lte")
SLOT_KINDS = ("accumulator", "fixed", "single")
COOLDOWN_POLICIES = ("per-session", "none")

# =============================================================================
# DEFAULT VALUES (used when config file missing or key not found)
# =============================================================================

DEFAULTS = {
    "slot_defaults": {
        "targetMode": "exact",
        "type": "accumulator",
        "accumulationRate": 7,
        "maxDice": 100,
        "fixedCount": 1,
        "cooldown": "per-session",
        "clearOnSessionStart": True,
        "resetOnTrigger": True,
        "flavor": True,
    },
    "hooks": {
        "stop_report_rolls": True,
    },
}

# =============================================================================
# CONFIG LOADER WITH HOT-RELOAD
# =============================================================================


class DiceConfig:
    """Configuration loader with mtime-based hot-reload."""

    def __init__(self, check_interval: float = 5.0):
        self._config: dict = {}
        self._path: Optional[Path] = None
        self._mtime: float = 0
        self._last_check: float = 0
        self._check_interval = check_interval

    def _settings_file(self) -> Path:
        return base_dir() / SETTINGS_FILENAME

    def _should_reload(self) -> bool:
        """Check if the settings file moved or changed since last load."""
        path = self._settings_file()
        if path != self._path:
            return True

        now = time.time()
        if now - self._last_check < self._check_interval:
            return False
        self._last_check = now

        try:
            return path.stat().st_mtime != self._mtime
        except OSError:
            return bool(self._config)

    def _load(self) -> None:
        """Load config from file."""
        path = self._settings_file()
        self._path = path
        self._last_check = time.time()
        try:
            self._mtime = path.stat().st_mtime
            data = json.loads(path.read_text())
        except FileNotFoundError:
            self._mtime = 0
            self._config = {}
            return
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("dice config: ignoring unreadable %s: %s", path, e)
            self._config = {}
            return
        self._config = data if isinstance(data, dict) else {}

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to defaults."""
        if self._should_reload():
            self._load()

        stored = self._config.get(section)
        if isinstance(stored, dict) and key in stored:
            return stored[key]

        if section in DEFAULTS and key in DEFAULTS[section]:
            return DEFAULTS[section][key]

        return default

    def get_section(self, section: str) -> dict:
        """Get an entire config section."""
        if self._should_reload():
            self._load()

        result = dict(DEFAULTS.get(section, {}))
        stored = self._config.get(section)
        if isinstance(stored, dict):
            result.update(stored)
        return result

    def reload(self) -> None:
        """Force reload config from disk."""
        self._load()


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

config = DiceConfig()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def get_slot_defaults() -> dict:
    """Registry defaults merged under every registered slot (camelCase keys)."""
    return config.get_section("slot_defaults")


def get_hook_setting(name: str, default: Any = None) -> Any:
    return config.get("hooks", name, default)
