"""Shared fixtures for dice tests."""

import sys
from pathlib import Path

# Add lib, hooks and ops to path the way the scripts themselves do
_root = Path(__file__).parent.parent.parent
for _dir in (_root / "lib", _root / "hooks", _root / "ops"):
    if str(_dir) not in sys.path:
        sys.path.insert(0, str(_dir))

import pytest  # noqa: E402


class ScriptedRandom:
    """Deterministic stand-in for random.Random: hands out queued values.

    randint(a, b) returns the next queued value (asserted to be in range).
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        value = self.values.pop(0)
        assert a <= value <= b, f"scripted roll {value} outside [{a}, {b}]"
        self.calls.append((a, b))
        return value


@pytest.fixture(autouse=True)
def dice_base(tmp_path, monkeypatch):
    """Point CC_DICE_BASE at a fresh directory for every test."""
    base = tmp_path / "dice"
    monkeypatch.setenv("CC_DICE_BASE", str(base))
    monkeypatch.delenv("CC_DICE_SESSION_ID", raising=False)
    monkeypatch.delenv("CC_DICE_DISABLE", raising=False)

    from _dice_registry import clear_depth_providers

    clear_depth_providers()
    yield base
    clear_depth_providers()


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
