#!/usr/bin/env python3
"""
Dice Accumulator - How many dice a slot rolls right now.

Accumulator slots earn one die per `accumulation_rate` turns since their last
trigger:

    dice = min((depth - depth_at_last_trigger) // accumulation_rate, max_dice)

Fixed slots always roll `fixed_count`, single slots always roll one die.
Unknown slot types roll nothing, so a corrupt or newer registry entry never
blocks the hook.
"""

import logging
from typing import Callable, Optional

from _dice_registry import SlotConfig
from _dice_state import load_state, save_state
from _dice_transcript import count_exchanges
from _dice_types import CheckContext, DiceCount

logger = logging.getLogger(__name__)


def resolve_current_depth(config: SlotConfig, ctx: CheckContext) -> Optional[int]:
    """Current conversation depth, or None when nothing can supply it.

    Order: slot depth_provider, ctx.depth, transcript exchange count. An
    unreadable transcript counts as no depth, not depth 0.
    """
    if config.depth_provider is not None:
        return int(config.depth_provider(ctx))
    if ctx.depth is not None:
        return int(ctx.depth)
    if ctx.transcript_path:
        return count_exchanges(ctx.transcript_path)
    return None


def get_accumulator_dice_count(
    config: SlotConfig, session_id: str, ctx: CheckContext
) -> DiceCount:
    """Dice count for an accumulator slot.

    Calibrates the -1 sentinel to the current depth (and persists it) before
    counting, so a reset made without depth access never accumulates against
    a stale zero baseline. With no depth available the sentinel is left in
    place and the slot rolls nothing until a real depth shows up.
    """
    depth = resolve_current_depth(config, ctx)
    current_depth = depth if depth is not None else 0

    state = load_state(config.name, session_id)

    if not state.is_calibrated:
        if depth is None:
            logger.debug(
                "dice accumulator: %s/%s uncalibrated, no depth yet",
                config.name,
                session_id,
            )
            return DiceCount(dice_count=0, current_depth=0, depth_available=False)
        state.depth_at_last_trigger = depth
        save_state(config.name, session_id, state)
        logger.debug(
            "dice accumulator: calibrated %s/%s at depth %d",
            config.name,
            session_id,
            depth,
        )

    depth_since_trigger = max(0, current_depth - state.depth_at_last_trigger)
    if config.accumulation_rate <= 0:
        dice_count = 0
    else:
        dice_count = min(depth_since_trigger // config.accumulation_rate, config.max_dice)

    return DiceCount(
        dice_count=max(0, dice_count),
        current_depth=current_depth,
        depth_since_trigger=depth_since_trigger,
        depth_available=depth is not None,
    )


# =============================================================================
# DICE COUNT BY SLOT TYPE
# =============================================================================


def _fixed_dice_count(config: SlotConfig, session_id: str, ctx: CheckContext) -> DiceCount:
    return DiceCount(dice_count=config.fixed_count)


def _single_dice_count(config: SlotConfig, session_id: str, ctx: CheckContext) -> DiceCount:
    return DiceCount(dice_count=1)


DICE_COUNTERS: dict[str, Callable[[SlotConfig, str, CheckContext], DiceCount]] = {
    "accumulator": get_accumulator_dice_count,
    "fixed": _fixed_dice_count,
    "single": _single_dice_count,
}


def resolve_dice_count(config: SlotConfig, session_id: str, ctx: CheckContext) -> DiceCount:
    counter = DICE_COUNTERS.get(config.kind)
    if counter is None:
        logger.debug("dice accumulator: unknown slot type %r for %s", config.kind, config.name)
        return DiceCount(dice_count=0)
    return counter(config, session_id, ctx)
