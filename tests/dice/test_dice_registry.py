#!/usr/bin/env python3
"""Tests for _dice_registry module.

Tests cover:
- Name validation
- Register/unregister/get/list round trips through slots.json
- Defaults merging (built-in and dice_settings.json)
- Corrupt registry handling
- Runtime-only depth providers
"""

import json

import pytest

from _dice_config import config
from _dice_persistence import InvalidNameError
from _dice_registry import (
    SlotConfig,
    get_slot,
    list_slots,
    register_slot,
    unregister_slot,
    validate_name,
)


class TestValidateName:
    """Tests for validate_name."""

    @pytest.mark.parametrize("name", ["insight", "d20-check", "slot_1", "a.b", "A9"])
    def test_accepts_safe_names(self, name):
        assert validate_name(name) == name

    @pytest.mark.parametrize(
        "name", ["", ".", "..", ".hidden", "../escape", "a/b", "a\\b", "sp ace", "nul\x00"]
    )
    def test_rejects_unsafe_names(self, name):
        with pytest.raises(InvalidNameError):
            validate_name(name)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_name("../x", "session ID")


class TestRegisterSlot:
    """Tests for register_slot and lookups."""

    def test_register_applies_defaults(self):
        """Unspecified fields come from the built-in slot defaults."""
        config_ = register_slot("insight", die=20, target=20, message="hi")

        assert config_.target_mode == "exact"
        assert config_.kind == "accumulator"
        assert config_.accumulation_rate == 7
        assert config_.max_dice == 100
        assert config_.fixed_count == 1
        assert config_.cooldown == "per-session"
        assert config_.clear_on_session_start is True
        assert config_.reset_on_trigger is True
        assert config_.flavor is True

    def test_register_persists_camel_case(self, dice_base):
        register_slot("insight", die=6, target=3, message="m", target_mode="lte", kind="fixed")

        data = json.loads((dice_base / "slots.json").read_text())
        entry = data["insight"]
        assert entry["die"] == 6
        assert entry["targetMode"] == "lte"
        assert entry["type"] == "fixed"
        assert entry["onTrigger"] == {"message": "m"}
        assert "depth_provider" not in entry
        assert "depthProvider" not in entry

    def test_register_upserts(self):
        register_slot("insight", die=20, target=20)
        register_slot("insight", die=6, target=1)

        slots = list_slots()
        assert len(slots) == 1
        assert slots[0].die == 6

    def test_default_message(self):
        assert register_slot("insight", die=20, target=20).message == "Dice trigger: insight"

    def test_get_round_trip(self):
        register_slot("insight", die=12, target=4, message="x", kind="single", cooldown="none")

        loaded = get_slot("insight")
        assert loaded == SlotConfig(
            name="insight",
            die=12,
            target=4,
            kind="single",
            cooldown="none",
            message="x",
        )

    def test_get_missing_returns_none(self):
        assert get_slot("nope") is None

    def test_list_preserves_registration_order(self):
        for name in ("c", "a", "b"):
            register_slot(name, die=20, target=20)
        assert [s.name for s in list_slots()] == ["c", "a", "b"]

    def test_rejects_invalid_name(self):
        with pytest.raises(InvalidNameError):
            register_slot("../etc", die=20, target=20)

    def test_rejects_unknown_field(self):
        with pytest.raises(TypeError):
            register_slot("insight", die=20, target=20, colour="red")

    def test_settings_file_overrides_defaults(self, dice_base):
        dice_base.mkdir(parents=True, exist_ok=True)
        (dice_base / "dice_settings.json").write_text(
            json.dumps({"slot_defaults": {"accumulationRate": 3, "cooldown": "none"}})
        )
        config.reload()

        config_ = register_slot("insight", die=20, target=20)
        assert config_.accumulation_rate == 3
        assert config_.cooldown == "none"
        assert config_.max_dice == 100


class TestUnregisterSlot:
    """Tests for unregister_slot."""

    def test_unregister_existing(self):
        register_slot("insight", die=20, target=20)
        assert unregister_slot("insight") is True
        assert get_slot("insight") is None

    def test_unregister_missing(self):
        assert unregister_slot("insight") is False


class TestCorruptRegistry:
    """Corrupt slots.json is treated as an empty registry."""

    def test_invalid_json(self, dice_base):
        dice_base.mkdir(parents=True, exist_ok=True)
        (dice_base / "slots.json").write_text("{not json")
        assert list_slots() == []

    def test_non_object_document(self, dice_base):
        dice_base.mkdir(parents=True, exist_ok=True)
        (dice_base / "slots.json").write_text("[1, 2, 3]")
        assert list_slots() == []

    def test_malformed_entry_skipped(self, dice_base):
        dice_base.mkdir(parents=True, exist_ok=True)
        (dice_base / "slots.json").write_text(
            json.dumps(
                {
                    "good": {"die": 20, "target": 20},
                    "no_die": {"target": 20},
                    "bad_die": {"die": "many", "target": 20},
                    "not_a_dict": 5,
                }
            )
        )
        assert [s.name for s in list_slots()] == ["good"]

    def test_register_recovers_from_corrupt_file(self, dice_base):
        dice_base.mkdir(parents=True, exist_ok=True)
        (dice_base / "slots.json").write_text("garbage")
        register_slot("insight", die=20, target=20)
        assert [s.name for s in list_slots()] == ["insight"]


class TestDepthProvider:
    """Runtime-only depth providers survive reloads within the process."""

    def test_provider_attached_on_reload(self):
        provider = lambda ctx: 42  # noqa: E731
        returned = register_slot("insight", die=20, target=20, depth_provider=provider)

        assert returned.depth_provider is provider
        assert get_slot("insight").depth_provider is provider

    def test_reregister_without_provider_drops_it(self):
        register_slot("insight", die=20, target=20, depth_provider=lambda ctx: 1)
        register_slot("insight", die=20, target=20)
        assert get_slot("insight").depth_provider is None

    def test_unregister_drops_provider(self):
        register_slot("insight", die=20, target=20, depth_provider=lambda ctx: 1)
        unregister_slot("insight")
        register_slot("insight", die=20, target=20)
        assert get_slot("insight").depth_provider is None
