#!/usr/bin/env python3
"""
Dice Cooldown - Per-session "already fired" markers.

Marker files: {base}/state/{session}/triggered-{slot}
Presence of the file = cooldown active. The content is the ISO timestamp of
the trigger, kept for diagnostics only.
"""

from pathlib import Path
from typing import Optional

from _dice_persistence import remove, state_dir, utc_now_iso, write_text
from _dice_registry import validate_name


def get_marker_file(slot_name: str, session_id: str) -> Path:
    validate_name(slot_name, "slot name")
    validate_name(session_id, "session ID")
    return state_dir() / session_id / f"triggered-{slot_name}"


def has_cooldown(slot_name: str, session_id: str) -> bool:
    """Check if a slot has already triggered this session."""
    return get_marker_file(slot_name, session_id).exists()


def mark_triggered(slot_name: str, session_id: str) -> None:
    write_text(get_marker_file(slot_name, session_id), utc_now_iso())


def clear_cooldown(slot_name: str, session_id: str) -> bool:
    """Remove the marker if present. Returns whether one existed."""
    return remove(get_marker_file(slot_name, session_id))


def cooldown_since(slot_name: str, session_id: str) -> Optional[str]:
    """Timestamp recorded when the cooldown started, or None."""
    try:
        return get_marker_file(slot_name, session_id).read_text().strip() or None
    except (FileNotFoundError, UnicodeDecodeError):
        return None
