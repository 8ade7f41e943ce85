#!/usr/bin/env python3
"""
Dice Transcript - Conversation depth from Claude Code transcripts.

Provides:
- Transcript path resolution (session ID -> file path)
- Exchange counting (conversation depth)

Transcripts live at ~/.claude/projects/<slug>/<session-id>.jsonl where the
slug is the working directory with "/" and "_" replaced by "-".
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from _dice_session import get_claude_session_id

logger = logging.getLogger(__name__)


def path_to_slug(path: str) -> str:
    return path.replace("/", "-").replace("_", "-")


def _project_dir() -> Optional[Path]:
    home = os.environ.get("HOME")
    if not home:
        return None
    cwd = os.environ.get("PWD") or os.getcwd()
    return Path(home) / ".claude" / "projects" / path_to_slug(cwd)


def _find_most_recent_transcript(project_dir: Path) -> Optional[str]:
    """Most recently modified main-session transcript (agent-* excluded)."""
    try:
        candidates = [
            p
            for p in project_dir.glob("*.jsonl")
            if "agent-" not in p.name and p.is_file()
        ]
        if not candidates:
            return None
        return str(max(candidates, key=lambda p: p.stat().st_mtime))
    except OSError as e:
        logger.debug("dice transcript: scan of %s failed: %s", project_dir, e)
        return None


def get_transcript_path(session_id: Optional[str] = None) -> Optional[str]:
    """Get the transcript file for a Claude Code session.

    Resolution order:
    1. Explicit session_id
    2. CC_DICE_SESSION_ID
    3. Most recently modified transcript in the project dir (no session known)

    A known session whose transcript doesn't exist yet returns None; falling
    back to another session's transcript would mutate the wrong state.
    """
    project_dir = _project_dir()
    if project_dir is None:
        return None

    session = session_id or get_claude_session_id()
    if session:
        transcript = project_dir / f"{session}.jsonl"
        return str(transcript) if transcript.exists() else None

    return _find_most_recent_transcript(project_dir)


def count_exchanges(transcript_path: str) -> Optional[int]:
    """Count human turns in a JSONL transcript.

    Only "user" entries without a toolUseResult count; tool results are also
    typed "user" in the transcript. Malformed lines are skipped. Returns None
    when the file cannot be read, so callers treat the depth as unknown.
    """
    count = 0
    try:
        with open(transcript_path) as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if (
                    isinstance(entry, dict)
                    and entry.get("type") == "user"
                    and not entry.get("toolUseResult")
                ):
                    count += 1
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("dice transcript: cannot read %s: %s", transcript_path, e)
        return None
    return count
