#!/usr/bin/env python3
"""
Dice Types - Context and result records passed between engine and hooks.

This module exists to break circular import dependencies between the
accumulator, the engine and the hook helpers.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CheckContext:
    """What a caller knows about the current session.

    depth: conversation depth supplied directly (wins over the transcript)
    """

    session_id: Optional[str] = None
    transcript_path: Optional[str] = None
    depth: Optional[int] = None

    @staticmethod
    def from_hook_input(data: dict) -> "CheckContext":
        """Build from Claude Code hook stdin JSON."""
        return CheckContext(
            session_id=data.get("session_id") or None,
            transcript_path=data.get("transcript_path") or None,
        )


@dataclass
class DiceCount:
    dice_count: int
    current_depth: int = 0
    depth_since_trigger: int = 0
    depth_available: bool = False


@dataclass
class DiceResult:
    triggered: bool
    rolls: list = field(default_factory=list)
    best: int = 0
    dice_count: int = 0
    probability: float = 0.0
    slot_name: str = ""

    @staticmethod
    def inert(slot_name: str) -> "DiceResult":
        """Non-triggered, zero-dice outcome (cooldown, unregistered, no dice)."""
        return DiceResult(triggered=False, slot_name=slot_name)

    def to_dict(self) -> dict:
        return {
            "triggered": self.triggered,
            "rolls": list(self.rolls),
            "best": self.best,
            "diceCount": self.dice_count,
            "probability": self.probability,
            "slotName": self.slot_name,
        }


@dataclass
class SlotStatus:
    name: str
    kind: str
    dice_count: int
    current_depth: int
    depth_since_trigger: int
    probability: float
    next_dice_at: int
    session_id: Optional[str] = None
    on_cooldown: bool = False
