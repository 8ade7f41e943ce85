#!/usr/bin/env python3
"""
Dice Session - Session identity resolution for state namespacing.

Priority (resolve_session_id):
1. Explicit session id from the hook payload
2. Session id embedded in the transcript path
3. CC_DICE_SESSION_ID (exported by the SessionStart hook)
4. Project hash (12-char md5 of the working directory)
"""

import hashlib
import os
import re
from typing import Optional

SESSION_ENV_VAR = "CC_DICE_SESSION_ID"

_TRANSCRIPT_SESSION = re.compile(r"([a-f0-9-]+)\.jsonl$")


def get_project_hash() -> str:
    """Fallback identity for the current directory.

    PWD (logical path) is preferred over os.getcwd() (physical path) so that
    symlinked dirs like /tmp -> /private/tmp hash the same as the shell sees.
    """
    cwd = os.environ.get("PWD") or os.getcwd()
    return hashlib.md5(cwd.encode()).hexdigest()[:12]


def get_claude_session_id() -> Optional[str]:
    return os.environ.get(SESSION_ENV_VAR) or None


def extract_session_from_path(transcript_path: str) -> Optional[str]:
    """~/.claude/projects/<slug>/<session-id>.jsonl -> <session-id>"""
    match = _TRANSCRIPT_SESSION.search(transcript_path)
    return match.group(1) if match else None


def get_session_id() -> str:
    return get_claude_session_id() or get_project_hash()


def resolve_session_id(ctx) -> str:
    """Resolve the session for a CheckContext-like object."""
    session_id = getattr(ctx, "session_id", None)
    if session_id:
        return session_id
    transcript_path = getattr(ctx, "transcript_path", None)
    if transcript_path:
        extracted = extract_session_from_path(transcript_path)
        if extracted:
            return extracted
    return get_session_id()
