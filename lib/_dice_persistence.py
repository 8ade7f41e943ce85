#!/usr/bin/env python3
"""
Dice Persistence - Base directory resolution and atomic JSON/text files.

Every durable piece of dice state (slot registry, per-session accumulator
state, cooldown markers) goes through this module, so the stores above it
only deal in keys and records.

Layout:
  {base}/slots.json                          slot registry
  {base}/dice_settings.json                  optional settings overrides
  {base}/state/{session}/{slot}.json         accumulator state
  {base}/state/{session}/triggered-{slot}    cooldown marker

{base} is $CC_DICE_BASE, else ~/.claude/dice. It is resolved on every call.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

BASE_ENV_VAR = "CC_DICE_BASE"


class DiceError(Exception):
    """Base exception for dice trigger errors."""


class InvalidNameError(DiceError, ValueError):
    """Raised when a slot name or session id is unsafe to use as a file key."""


# =============================================================================
# PATHS
# =============================================================================


def base_dir() -> Path:
    """Resolve the dice data directory (not created)."""
    override = os.environ.get(BASE_ENV_VAR)
    if override:
        return Path(override)
    home = os.environ.get("HOME")
    if not home:
        raise DiceError(f"Cannot resolve base dir: set {BASE_ENV_VAR} or HOME")
    return Path(home) / ".claude" / "dice"


def ensure_base_dir() -> Path:
    base = base_dir()
    base.mkdir(parents=True, exist_ok=True)
    return base


def state_dir() -> Path:
    """Get the per-session state directory, creating it if needed."""
    path = base_dir() / "state"
    path.mkdir(parents=True, exist_ok=True)
    return path


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# =============================================================================
# READ / WRITE
# =============================================================================


def read_json(path: Path) -> Optional[Any]:
    """Read a JSON document, or None when missing or unreadable.

    Corrupt files are logged and treated as absent; persisted dice state is
    advisory and callers always have a default to fall back on.
    """
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning("dice persistence: unreadable file %s: %s", path, e)
        return None


def write_text(path: Path, text: str) -> None:
    """Atomically replace `path` with `text` (temp file + os.replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def write_json(path: Path, data: Any) -> None:
    write_text(path, json.dumps(data, indent=2))


def remove(path: Path) -> bool:
    """Delete a file if present. Returns whether it existed."""
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
