#!/usr/bin/env python3
"""
Dice State - Per-slot, per-session accumulator state.

State files: {base}/state/{session}/{slot}.json
  {"depth_at_last_trigger": 14, "last_reset": "2026-01-01T00:00:00Z"}

depth_at_last_trigger == -1 is the "uncalibrated" sentinel: a reset ran
without access to the conversation depth, so the next check that does know
the depth adopts it as the new baseline.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from _dice_persistence import read_json, state_dir, utc_now_iso, write_json
from _dice_registry import validate_name

logger = logging.getLogger(__name__)

SENTINEL_DEPTH = -1


@dataclass
class DiceState:
    depth_at_last_trigger: int = 0
    last_reset: str = field(default_factory=utc_now_iso)

    @property
    def is_calibrated(self) -> bool:
        return self.depth_at_last_trigger >= 0


def get_state_file(slot_name: str, session_id: str) -> Path:
    validate_name(slot_name, "slot name")
    validate_name(session_id, "session ID")
    return state_dir() / session_id / f"{slot_name}.json"


def load_state(slot_name: str, session_id: str) -> DiceState:
    """Load state for a slot + session, defaulting when absent or corrupt."""
    state_file = get_state_file(slot_name, session_id)
    data = read_json(state_file)
    if data is None:
        return DiceState()
    try:
        return DiceState(
            depth_at_last_trigger=int(data["depth_at_last_trigger"]),
            last_reset=str(data.get("last_reset") or utc_now_iso()),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("dice state: corrupt %s, using default: %s", state_file, e)
        return DiceState()


def save_state(slot_name: str, session_id: str, state: DiceState) -> None:
    write_json(get_state_file(slot_name, session_id), asdict(state))


def reset_state(slot_name: str, session_id: str, current_depth: int) -> DiceState:
    """Re-baseline at `current_depth` (SENTINEL_DEPTH when depth is unknown)."""
    state = DiceState(depth_at_last_trigger=current_depth)
    save_state(slot_name, session_id, state)
    return state


def clear_state(slot_name: str, session_id: str) -> DiceState:
    """Full reset: baseline back to depth 0."""
    state = DiceState(depth_at_last_trigger=0)
    save_state(slot_name, session_id, state)
    return state
