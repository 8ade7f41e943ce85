#!/usr/bin/env python3
"""Debug logging for dice hooks.

Hooks must stay silent on stderr unless asked: on a Stop hook stderr is
shown to Claude when the exit code is 2. Set DEBUG=1 to see swallowed errors.
"""

import logging
import os
import sys

_logger = logging.getLogger("dice.hooks")


def debug_enabled() -> bool:
    return os.environ.get("DEBUG") == "1"


def configure_hook_logging() -> None:
    """Route library logging to stderr at DEBUG when DEBUG=1, else WARNING+ is dropped."""
    root = logging.getLogger()
    if debug_enabled():
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
    else:
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.CRITICAL)


def log_debug(component: str, message: str) -> None:
    if debug_enabled():
        _logger.debug("%s: %s", component, message)
