#!/usr/bin/env python3
"""
Dice SessionStart Hook: export the session id and clear per-session slots.

CLAUDE_ENV_FILE is only available in SessionStart hooks. Appending
`export CC_DICE_SESSION_ID="..."` to it makes the session id visible to every
later hook and ops script in the session, which is how ops/dice_cli.py finds the
same state namespace the Stop hook uses.

Then every slot with clearOnSessionStart gets its accumulator and cooldown
wiped for this session. Running it twice clears the same slots twice.

Silent, and never fails session start.
"""

import _lib_path  # noqa: F401
import json
import os
import re
import sys
from typing import Optional

from _dice_logging import configure_hook_logging, log_debug
from dice import CheckContext, session_start

SESSION_ENV_VAR = "CC_DICE_SESSION_ID"

_SAFE_SESSION_ID = re.compile(r"[A-Za-z0-9-]{1,128}")


def export_session_id(session_id: Optional[str], env_file: Optional[str]) -> bool:
    """Append the export line to CLAUDE_ENV_FILE. Returns whether it was written."""
    if not env_file or not session_id or not _SAFE_SESSION_ID.fullmatch(session_id):
        return False
    with open(env_file, "a") as f:
        f.write(f'export {SESSION_ENV_VAR}="{session_id}"\n')
    return True


def run_session_start_hook(data: dict, env_file: Optional[str] = None) -> list[str]:
    """Export the session id and clear flagged slots. Returns cleared slot names."""
    session_id = data.get("session_id") or None
    try:
        export_session_id(session_id, env_file)
    except OSError as e:
        log_debug("dice_session_start", f"env export failed: {e}")

    return session_start(CheckContext.from_hook_input(data))


def main():
    """SessionStart hook entry point."""
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
        cleared = run_session_start_hook(data, os.environ.get("CLAUDE_ENV_FILE"))
        log_debug("dice_session_start", f"cleared slots: {', '.join(cleared) or '-'}")
    except Exception as e:
        log_debug("dice_session_start", f"failed: {type(e).__name__}: {e}")

    sys.exit(0)


if __name__ == "__main__":
    main()
