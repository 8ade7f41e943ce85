#!/usr/bin/env python3
"""
Dice Slot Registry - File-based registration of slot configurations.

Stored at {base}/slots.json as one document mapping slot name to config.
The on-disk keys are camelCase (shared with other tools reading slots.json);
SlotConfig exposes them as snake_case attributes.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from _dice_config import get_slot_defaults
from _dice_persistence import InvalidNameError, ensure_base_dir, read_json, write_json

logger = logging.getLogger(__name__)

SLOTS_FILENAME = "slots.json"

_SAFE_NAME = re.compile(r"[A-Za-z0-9_.-]+")

# Runtime-only depth sources, keyed by slot name (callables can't go to JSON)
_DEPTH_PROVIDERS: dict[str, Callable[[Any], int]] = {}

# attribute name -> slots.json key (onTrigger.message handled separately)
_FIELD_KEYS = {
    "name": "name",
    "die": "die",
    "target": "target",
    "target_mode": "targetMode",
    "kind": "type",
    "accumulation_rate": "accumulationRate",
    "max_dice": "maxDice",
    "fixed_count": "fixedCount",
    "cooldown": "cooldown",
    "clear_on_session_start": "clearOnSessionStart",
    "reset_on_trigger": "resetOnTrigger",
    "flavor": "flavor",
}

_INT_FIELDS = ("die", "target", "accumulation_rate", "max_dice", "fixed_count")


def validate_name(value: str, label: str = "slot name") -> str:
    """Reject names that are unsafe as a path segment.

    Slot names and session ids are both spliced into state file names.
    """
    if not isinstance(value, str) or not value:
        raise InvalidNameError(f"Invalid {label}: must be a non-empty string")
    if value.startswith(".") or not _SAFE_NAME.fullmatch(value):
        raise InvalidNameError(f"Invalid {label}: {value!r}")
    return value


# =============================================================================
# SLOT CONFIG
# =============================================================================


@dataclass
class SlotConfig:
    """One trigger definition.

    Attributes:
        name: unique slot identifier
        die: die size (20 for d20, 6 for d6, ...)
        target: value compared against rolls
        target_mode: "exact" | "gte" | "lte"
        kind: "accumulator" | "fixed" | "single" (persisted as "type")
        accumulation_rate: turns per +1 die (accumulator)
        max_dice: dice cap (accumulator)
        fixed_count: dice rolled every check (fixed)
        cooldown: "per-session" | "none"
        clear_on_session_start: wipe state + cooldown on SessionStart
        reset_on_trigger: re-baseline the accumulator when it fires
        message: trigger message template ({rolls} {best} {diceCount} {slotName})
        flavor: prepend the dice roll line to the message
        depth_provider: runtime-only depth source, never persisted
    """

    name: str
    die: int
    target: int
    target_mode: str = "exact"
    kind: str = "accumulator"
    accumulation_rate: int = 7
    max_dice: int = 100
    fixed_count: int = 1
    cooldown: str = "per-session"
    clear_on_session_start: bool = True
    reset_on_trigger: bool = True
    message: str = ""
    flavor: bool = True
    depth_provider: Optional[Callable[[Any], int]] = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def from_dict(cls, data: dict) -> "SlotConfig":
        """Build from a slots.json entry (camelCase keys)."""
        kwargs: dict = {}
        for attr, key in _FIELD_KEYS.items():
            if key in data:
                kwargs[attr] = data[key]
        for attr in _INT_FIELDS:
            if attr in kwargs:
                kwargs[attr] = int(kwargs[attr])
        on_trigger = data.get("onTrigger")
        if isinstance(on_trigger, dict):
            kwargs["message"] = str(on_trigger.get("message", ""))
        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Serializable form for slots.json (drops depth_provider)."""
        data = {key: getattr(self, attr) for attr, key in _FIELD_KEYS.items()}
        data["onTrigger"] = {"message": self.message}
        return data


# =============================================================================
# REGISTRY FILE
# =============================================================================


def _slots_file():
    return ensure_base_dir() / SLOTS_FILENAME


def load_slots() -> dict[str, SlotConfig]:
    """Load all registered slots. Corrupt file or entries are skipped."""
    raw = read_json(_slots_file())
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("dice registry: slots.json is not an object, ignoring")
        return {}

    slots: dict[str, SlotConfig] = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict):
            logger.warning("dice registry: skipping malformed slot %r", name)
            continue
        try:
            validate_name(name)
            config = SlotConfig.from_dict({**entry, "name": name})
        except (TypeError, ValueError) as e:
            logger.warning("dice registry: skipping malformed slot %r: %s", name, e)
            continue
        config.depth_provider = _DEPTH_PROVIDERS.get(name)
        slots[name] = config
    return slots


def _save_slots(slots: dict[str, SlotConfig]) -> None:
    write_json(_slots_file(), {name: cfg.to_dict() for name, cfg in slots.items()})


# =============================================================================
# CRUD
# =============================================================================


def register_slot(
    name: str,
    die: int,
    target: int,
    message: str = "",
    depth_provider: Optional[Callable[[Any], int]] = None,
    **fields: Any,
) -> SlotConfig:
    """Register (or replace) a slot, merging supplied fields over defaults.

    `fields` are SlotConfig attribute names (target_mode, kind, ...).
    Returns the full config, including any runtime-only depth_provider.
    """
    validate_name(name)
    unknown = set(fields) - set(_FIELD_KEYS)
    if unknown:
        raise TypeError(f"Unknown slot fields: {', '.join(sorted(unknown))}")

    data = dict(get_slot_defaults())
    for attr, value in fields.items():
        data[_FIELD_KEYS[attr]] = value
    data.update({"name": name, "die": die, "target": target})
    data["onTrigger"] = {"message": message or f"Dice trigger: {name}"}

    config = SlotConfig.from_dict(data)
    slots = load_slots()
    slots[name] = config
    _save_slots(slots)
    logger.debug("dice registry: registered %s", name)

    if depth_provider is not None:
        _DEPTH_PROVIDERS[name] = depth_provider
    else:
        _DEPTH_PROVIDERS.pop(name, None)
    config.depth_provider = depth_provider
    return config


def unregister_slot(name: str) -> bool:
    """Remove a slot. Returns whether it existed."""
    _DEPTH_PROVIDERS.pop(name, None)
    slots = load_slots()
    if name not in slots:
        return False
    del slots[name]
    _save_slots(slots)
    return True


def clear_depth_providers() -> None:
    """Forget all runtime depth providers (intended for tests)."""
    _DEPTH_PROVIDERS.clear()


def get_slot(name: str) -> Optional[SlotConfig]:
    return load_slots().get(name)


def list_slots() -> list[SlotConfig]:
    return list(load_slots().values())
