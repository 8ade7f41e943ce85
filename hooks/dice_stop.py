#!/usr/bin/env python3
"""
Dice Stop Hook: roll every registered slot once per assistant turn.

All slots are checked in one shared-pool pass (check_all_slots), so slots on
the same die size read the same base roll.

OUTPUT:
  - First triggered slot: its message on stderr, exit 2 (shown to Claude,
    conversation continues)
  - No trigger: roll summaries on stdout, exit 0 (shown to the user only)

Never blocks Claude Code: any failure exits 0. DEBUG=1 reports it on stderr.
Set CC_DICE_DISABLE=1 to skip the hook entirely.

Installation: register in settings.json under hooks.Stop:
  {"type": "command", "command": "python3 ~/.claude/hooks/dice_stop.py"}
"""

import _lib_path  # noqa: F401
import json
import os
import random
import sys
from typing import Optional

from _dice_hook_result import (
    DiceHookResult,
    format_roll_line,
    format_trigger_message,
)
from _dice_logging import configure_hook_logging, log_debug
from dice import CheckContext, check_all_slots, get_hook_setting, list_slots


def run_stop_hook(data: dict, rng: Optional[random.Random] = None) -> DiceHookResult:
    """Evaluate all slots for the session described by the hook payload."""
    ctx = CheckContext.from_hook_input(data)
    configs = {config.name: config for config in list_slots()}
    results = check_all_slots(ctx, rng=rng)

    for result in results:
        if result.triggered and result.slot_name in configs:
            return DiceHookResult.trigger(
                format_trigger_message(configs[result.slot_name], result)
            )

    if not get_hook_setting("stop_report_rolls", True):
        return DiceHookResult.silent()

    lines = [
        format_roll_line(configs[r.slot_name], r)
        for r in results
        if r.dice_count > 0 and r.slot_name in configs
    ]
    return DiceHookResult.silent("\n".join(lines))


def main():
    """Stop hook entry point."""
    configure_hook_logging()
    if os.environ.get("CC_DICE_DISABLE") == "1":
        sys.exit(0)

    try:
        data = json.load(sys.stdin)
    except (json.JSONDecodeError, ValueError):
        data = {}
    if not isinstance(data, dict):
        data = {}

    try:
        result = run_stop_hook(data)
    except Exception as e:
        log_debug("dice_stop", f"check failed: {type(e).__name__}: {e}")
        sys.exit(0)

    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print(result.stderr, file=sys.stderr)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
