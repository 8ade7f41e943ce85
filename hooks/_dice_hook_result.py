"""
Hook output for dice checks.

Claude Code Stop hook exit codes:
  0 - silent pass (stdout visible to the user only)
  2 - stderr is shown to Claude and the conversation continues
"""

import _lib_path  # noqa: F401
from dataclasses import dataclass

from dice import DiceResult, SlotConfig

EXIT_SILENT = 0
EXIT_SHOW_CLAUDE = 2


# =============================================================================
# MESSAGE RENDERING
# =============================================================================


def format_rolls(rolls: list) -> str:
    return ", ".join(str(r) for r in rolls)


def format_roll_line(config: SlotConfig, result: DiceResult) -> str:
    """One-line roll summary, e.g. 'insight: 3d20 = [4, 17, 9] (best: 17)'."""
    return (
        f"{config.name}: {result.dice_count}d{config.die} = "
        f"[{format_rolls(result.rolls)}] (best: {result.best})"
    )


def format_trigger_message(config: SlotConfig, result: DiceResult) -> str:
    """Fill {rolls} {best} {diceCount} {slotName} in the slot's message."""
    message = (
        config.message.replace("{rolls}", format_rolls(result.rolls))
        .replace("{best}", str(result.best))
        .replace("{diceCount}", str(result.dice_count))
        .replace("{slotName}", result.slot_name)
    )
    if config.flavor:
        return f"🎲 {format_roll_line(config, result)}\n{message}"
    return message


# =============================================================================
# HOOK RESULT TYPE
# =============================================================================


@dataclass
class DiceHookResult:
    """What the hook process writes and how it exits."""

    exit_code: int = EXIT_SILENT
    stderr: str = ""
    stdout: str = ""

    @staticmethod
    def trigger(message: str) -> "DiceHookResult":
        """Show the message to Claude and keep the conversation going."""
        return DiceHookResult(exit_code=EXIT_SHOW_CLAUDE, stderr=message)

    @staticmethod
    def silent(stdout: str = "") -> "DiceHookResult":
        return DiceHookResult(exit_code=EXIT_SILENT, stdout=stdout)
