#!/usr/bin/env python3
"""Put the dice library (../lib) on sys.path. Import this first in hooks.

Hooks run as standalone scripts from ~/.claude/hooks, so lib/ is not an
installed package there. Imported for side effects only.
"""

import sys
from pathlib import Path

_lib_dir = str(Path(__file__).resolve().parent.parent / "lib")
if _lib_dir not in sys.path:
    sys.path.insert(0, _lib_dir)
