#!/usr/bin/env python3
"""
Dice Engine - Decide which slots fire this turn.

check_slot() evaluates one slot on its own dice. check_all_slots() is what the
Stop hook runs: slots sharing a die size share one base roll per pass, the
way several outcomes can be read off the face of one physical die.

    d20 group: base roll 17 -> slot A (single, exact 20) sees [17]
                            -> slot B (accumulator, 3 dice) sees [17, 4, 20]

So two single-die slots claiming different exact faces of the same die can
never both fire in one pass, while overlapping gte/lte ranges can.

Trigger side effects are applied per slot even when the base roll is shared:
- accumulator + reset_on_trigger: re-baseline at the current depth (or the -1
  sentinel when the depth is unknown)
- per-session cooldown: write the cooldown marker
"""

import logging
import random
from typing import Optional

from _dice_accumulator import resolve_current_depth, resolve_dice_count
from _dice_cooldown import clear_cooldown, has_cooldown, mark_triggered
from _dice_registry import SlotConfig, get_slot, list_slots
from _dice_roll import calculate_probability, check_target, roll_dice
from _dice_session import resolve_session_id
from _dice_state import SENTINEL_DEPTH, clear_state, load_state, reset_state
from _dice_types import CheckContext, DiceCount, DiceResult, SlotStatus

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================


def _on_cooldown(config: SlotConfig, session_id: str) -> bool:
    return config.cooldown == "per-session" and has_cooldown(config.name, session_id)


def _evaluate(
    config: SlotConfig, dice: DiceCount, rolls: list[int], session_id: str
) -> DiceResult:
    """Score a roll set and apply trigger side effects."""
    triggered = check_target(rolls, config.target, config.target_mode)
    result = DiceResult(
        triggered=triggered,
        rolls=rolls,
        best=max(rolls),
        dice_count=dice.dice_count,
        probability=calculate_probability(
            dice.dice_count, config.die, config.target, config.target_mode
        ),
        slot_name=config.name,
    )
    if triggered:
        _apply_trigger_effects(config, dice, session_id)
    return result


def _apply_trigger_effects(config: SlotConfig, dice: DiceCount, session_id: str) -> None:
    if config.kind == "accumulator" and config.reset_on_trigger:
        depth = dice.current_depth if dice.depth_available else SENTINEL_DEPTH
        reset_state(config.name, session_id, depth)
    if config.cooldown == "per-session":
        mark_triggered(config.name, session_id)
    logger.debug("dice engine: %s triggered for %s", config.name, session_id)


# =============================================================================
# CHECKS
# =============================================================================


def check_slot(
    name: str, ctx: Optional[CheckContext] = None, rng: Optional[random.Random] = None
) -> DiceResult:
    """Roll a single slot on its own dice.

    Unregistered slots and slots on cooldown are inert: no dice, no trigger.
    """
    ctx = ctx or CheckContext()
    config = get_slot(name)
    if config is None:
        return DiceResult.inert(name)

    session_id = resolve_session_id(ctx)
    if _on_cooldown(config, session_id):
        return DiceResult.inert(name)

    dice = resolve_dice_count(config, session_id, ctx)
    if dice.dice_count <= 0:
        return DiceResult.inert(name)

    rolls = roll_dice(dice.dice_count, config.die, rng)
    if not rolls:
        return DiceResult.inert(name)
    return _evaluate(config, dice, rolls, session_id)


def check_all_slots(
    ctx: Optional[CheckContext] = None, rng: Optional[random.Random] = None
) -> list[DiceResult]:
    """Check every registered slot with shared dice pools.

    Returns one result per registered slot. Cooled-down slots come first, then
    active slots grouped by die size.
    """
    ctx = ctx or CheckContext()
    slots = list_slots()
    if not slots:
        return []

    session_id = resolve_session_id(ctx)
    results: list[DiceResult] = []

    # Group active slots by die size; cooled-down slots never count dice
    groups: dict[int, list[tuple[SlotConfig, DiceCount]]] = {}
    for config in slots:
        if _on_cooldown(config, session_id):
            results.append(DiceResult.inert(config.name))
            continue
        dice = resolve_dice_count(config, session_id, ctx)
        groups.setdefault(config.die, []).append((config, dice))

    for die_size, members in groups.items():
        # One base die per group, only if someone in the group rolls at all
        base_rolls = []
        if any(dice.dice_count > 0 for _, dice in members):
            base_rolls = roll_dice(1, die_size, rng)

        for config, dice in members:
            if dice.dice_count <= 0 or not base_rolls:
                results.append(DiceResult.inert(config.name))
                continue
            rolls = base_rolls + roll_dice(dice.dice_count - 1, die_size, rng)
            results.append(_evaluate(config, dice, rolls, session_id))

    return results


def dry_roll(
    name: str, ctx: Optional[CheckContext] = None, rng: Optional[random.Random] = None
) -> Optional[DiceResult]:
    """Roll a slot's current dice without touching cooldown or state.

    Returns None for unregistered slots. Sentinel calibration may still be
    persisted while counting dice.
    """
    ctx = ctx or CheckContext()
    config = get_slot(name)
    if config is None:
        return None

    session_id = resolve_session_id(ctx)
    dice = resolve_dice_count(config, session_id, ctx)
    rolls = roll_dice(dice.dice_count, config.die, rng)
    if not rolls:
        return DiceResult.inert(name)
    return DiceResult(
        triggered=check_target(rolls, config.target, config.target_mode),
        rolls=rolls,
        best=max(rolls),
        dice_count=dice.dice_count,
        probability=calculate_probability(
            dice.dice_count, config.die, config.target, config.target_mode
        ),
        slot_name=name,
    )


# =============================================================================
# SLOT LIFECYCLE
# =============================================================================


def get_slot_status(name: str, ctx: Optional[CheckContext] = None) -> Optional[SlotStatus]:
    """Current dice count and odds for a slot, without rolling."""
    ctx = ctx or CheckContext()
    config = get_slot(name)
    if config is None:
        return None

    session_id = resolve_session_id(ctx)
    dice = resolve_dice_count(config, session_id, ctx)

    # Uncalibrated baselines have no meaningful next die yet
    next_dice_at = 0
    if config.kind == "accumulator":
        state = load_state(name, session_id)
        if state.is_calibrated:
            next_dice_at = (
                state.depth_at_last_trigger
                + (dice.dice_count + 1) * config.accumulation_rate
            )

    return SlotStatus(
        name=config.name,
        kind=config.kind,
        dice_count=dice.dice_count,
        current_depth=dice.current_depth,
        depth_since_trigger=dice.depth_since_trigger,
        probability=calculate_probability(
            dice.dice_count, config.die, config.target, config.target_mode
        ),
        next_dice_at=next_dice_at,
        session_id=session_id,
        on_cooldown=_on_cooldown(config, session_id),
    )


def reset_slot(name: str, ctx: Optional[CheckContext] = None) -> bool:
    """Re-baseline a slot's accumulator at the current depth.

    Without any depth source the -1 sentinel is stored and the next check
    with a known depth calibrates it. Returns False for unregistered slots.
    """
    ctx = ctx or CheckContext()
    config = get_slot(name)
    if config is None:
        return False

    session_id = resolve_session_id(ctx)
    depth = resolve_current_depth(config, ctx)
    reset_state(name, session_id, depth if depth is not None else SENTINEL_DEPTH)
    return True


def clear_slot(name: str, ctx: Optional[CheckContext] = None) -> bool:
    """Clear a slot's state completely (depth 0, no cooldown)."""
    ctx = ctx or CheckContext()
    config = get_slot(name)
    if config is None:
        return False

    session_id = resolve_session_id(ctx)
    clear_state(name, session_id)
    clear_cooldown(name, session_id)
    return True


def session_start(ctx: Optional[CheckContext] = None) -> list[str]:
    """Clear every slot flagged clear_on_session_start. Returns cleared names."""
    ctx = ctx or CheckContext()
    session_id = resolve_session_id(ctx)
    cleared: list[str] = []

    for config in list_slots():
        if not config.clear_on_session_start:
            continue
        clear_state(config.name, session_id)
        clear_cooldown(config.name, session_id)
        cleared.append(config.name)

    return cleared
