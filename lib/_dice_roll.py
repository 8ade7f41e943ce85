#!/usr/bin/env python3
"""
Dice Roll - Core rolling mechanics.

Pure functions for dice rolling, target checking and hit probability.
No state, no side effects. Randomness comes from an injectable source
(anything with randint(a, b)); the module-level `random` is the default.
"""

import random
from typing import Optional, Sequence


def roll_dice(count: int, die_size: int, rng: Optional[random.Random] = None) -> list[int]:
    """Roll `count` dice with `die_size` sides each (values 1..die_size).

    Non-positive count or die size yields no rolls rather than an error.
    """
    if count <= 0 or die_size <= 0:
        return []
    source = rng if rng is not None else random
    return [source.randint(1, die_size) for _ in range(count)]


def check_target(rolls: Sequence[int], target: int, mode: str) -> bool:
    """Check if any roll matches the target according to `mode`."""
    if not rolls:
        return False
    if mode == "exact":
        return target in rolls
    if mode == "gte":
        return any(r >= target for r in rolls)
    if mode == "lte":
        return any(r <= target for r in rolls)
    return False


def calculate_probability(count: int, die_size: int, target: int, mode: str) -> float:
    """Chance of at least one hit across `count` dice, as a 0-100 percentage.

    Per-die miss probability:
      exact: (die_size - 1) / die_size
      gte:   (target - 1) / die_size
      lte:   (die_size - target) / die_size

    P(hit) = 1 - P(miss) ** count, rounded to 2 decimal places.
    """
    if count <= 0 or die_size <= 0:
        return 0.0
    if mode == "exact":
        p_miss = (die_size - 1) / die_size
    elif mode == "gte":
        p_miss = (target - 1) / die_size
    elif mode == "lte":
        p_miss = (die_size - target) / die_size
    else:
        return 0.0

    # Targets outside the die's faces make p_miss leave [0, 1]
    p_miss = min(1.0, max(0.0, p_miss))
    return round((1 - p_miss**count) * 100, 2)
