#!/usr/bin/env python3
"""
Dice - Probabilistic trigger slots for Claude Code hooks.

Named slots accumulate conversation turns and periodically roll dice to
decide whether to fire. Hooks and ops scripts import from here.

This file is a thin re-export layer. Implementation is in _dice_*.py modules
and dice_engine.py.
"""

# =============================================================================
# TYPES
# =============================================================================

from _dice_types import CheckContext, DiceCount, DiceResult, SlotStatus

# =============================================================================
# PERSISTENCE + CONFIG
# =============================================================================

from _dice_persistence import DiceError, InvalidNameError, base_dir
from _dice_config import DEFAULTS, config, get_slot_defaults, get_hook_setting

# =============================================================================
# REGISTRY
# =============================================================================

from _dice_registry import (
    SlotConfig,
    validate_name,
    register_slot,
    unregister_slot,
    get_slot,
    list_slots,
)

# =============================================================================
# STATE + COOLDOWN
# =============================================================================

from _dice_state import (
    SENTINEL_DEPTH,
    DiceState,
    load_state,
    save_state,
    reset_state,
    clear_state,
)
from _dice_cooldown import has_cooldown, mark_triggered, clear_cooldown, cooldown_since

# =============================================================================
# ROLLING
# =============================================================================

from _dice_roll import roll_dice, check_target, calculate_probability
from _dice_accumulator import get_accumulator_dice_count, resolve_dice_count

# =============================================================================
# SESSION + TRANSCRIPT
# =============================================================================

from _dice_session import (
    get_claude_session_id,
    get_session_id,
    get_project_hash,
    extract_session_from_path,
    resolve_session_id,
)
from _dice_transcript import get_transcript_path, count_exchanges

# =============================================================================
# ENGINE
# =============================================================================

from dice_engine import (
    check_slot,
    check_all_slots,
    dry_roll,
    get_slot_status,
    reset_slot,
    clear_slot,
    session_start,
)

__all__ = [
    "CheckContext",
    "DiceCount",
    "DiceResult",
    "SlotStatus",
    "DiceError",
    "InvalidNameError",
    "base_dir",
    "DEFAULTS",
    "config",
    "get_slot_defaults",
    "get_hook_setting",
    "SlotConfig",
    "validate_name",
    "register_slot",
    "unregister_slot",
    "get_slot",
    "list_slots",
    "SENTINEL_DEPTH",
    "DiceState",
    "load_state",
    "save_state",
    "reset_state",
    "clear_state",
    "has_cooldown",
    "mark_triggered",
    "clear_cooldown",
    "cooldown_since",
    "roll_dice",
    "check_target",
    "calculate_probability",
    "get_accumulator_dice_count",
    "resolve_dice_count",
    "get_claude_session_id",
    "get_session_id",
    "get_project_hash",
    "extract_session_from_path",
    "resolve_session_id",
    "get_transcript_path",
    "count_exchanges",
    "check_slot",
    "check_all_slots",
    "dry_roll",
    "get_slot_status",
    "reset_slot",
    "clear_slot",
    "session_start",
]
