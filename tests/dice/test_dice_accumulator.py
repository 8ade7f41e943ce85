#!/usr/bin/env python3
"""Tests for _dice_accumulator module.

Tests cover:
- Dice earned per accumulation_rate turns, capped by max_dice
- -1 sentinel calibration (and deferral when depth is unknown)
- Depth source priority: provider > ctx.depth > transcript
- Dice count for fixed, single and unknown slot types
"""

import json

import pytest

from _dice_accumulator import (
    get_accumulator_dice_count,
    resolve_current_depth,
    resolve_dice_count,
)
from _dice_registry import SlotConfig
from _dice_state import SENTINEL_DEPTH, load_state, reset_state
from _dice_types import CheckContext

SESSION = "sess-1"


def _slot(**overrides):
    fields = dict(name="insight", die=20, target=20, accumulation_rate=7, max_dice=100)
    fields.update(overrides)
    return SlotConfig(**fields)


def _write_transcript(path, user_turns, tool_results=0):
    lines = [json.dumps({"type": "user", "message": "hi"}) for _ in range(user_turns)]
    lines += [
        json.dumps({"type": "user", "toolUseResult": {"ok": True}})
        for _ in range(tool_results)
    ]
    lines.append(json.dumps({"type": "assistant"}))
    path.write_text("\n".join(lines) + "\n")
    return str(path)


class TestAccumulatorDiceCount:
    """Tests for get_accumulator_dice_count."""

    @pytest.mark.parametrize("depth,expected", [(0, 0), (5, 0), (7, 1), (13, 1), (14, 2), (21, 3)])
    def test_one_die_per_rate(self, depth, expected):
        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=depth))
        assert dice.dice_count == expected
        assert dice.current_depth == depth
        assert dice.depth_since_trigger == depth
        assert dice.depth_available is True

    def test_counts_from_last_trigger(self):
        reset_state("insight", SESSION, 10)
        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=24))
        assert dice.depth_since_trigger == 14
        assert dice.dice_count == 2

    def test_capped_by_max_dice(self):
        dice = get_accumulator_dice_count(_slot(max_dice=5), SESSION, CheckContext(depth=100))
        assert dice.dice_count == 5

    def test_depth_behind_baseline_is_zero(self):
        """A baseline ahead of the transcript (e.g. after compaction) never goes negative."""
        reset_state("insight", SESSION, 30)
        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=10))
        assert dice.depth_since_trigger == 0
        assert dice.dice_count == 0

    @pytest.mark.parametrize("rate", [0, -3])
    def test_non_positive_rate_rolls_nothing(self, rate):
        dice = get_accumulator_dice_count(
            _slot(accumulation_rate=rate), SESSION, CheckContext(depth=50)
        )
        assert dice.dice_count == 0

    def test_no_depth_means_no_dice(self):
        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext())
        assert dice.dice_count == 0
        assert dice.depth_available is False


class TestSentinelCalibration:
    """The -1 baseline adopts the first known depth."""

    def test_calibrates_and_persists(self):
        reset_state("insight", SESSION, SENTINEL_DEPTH)

        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=21))

        assert dice.dice_count == 0
        assert dice.depth_since_trigger == 0
        assert load_state("insight", SESSION).depth_at_last_trigger == 21

    def test_counts_from_calibrated_baseline(self):
        reset_state("insight", SESSION, SENTINEL_DEPTH)
        get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=21))

        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=28))
        assert dice.dice_count == 1

    def test_deferred_without_depth(self):
        reset_state("insight", SESSION, SENTINEL_DEPTH)

        dice = get_accumulator_dice_count(_slot(), SESSION, CheckContext())

        assert dice.dice_count == 0
        assert load_state("insight", SESSION).depth_at_last_trigger == SENTINEL_DEPTH

    def test_missing_transcript_keeps_sentinel(self, tmp_path):
        """A transcript that can't be read must not calibrate the baseline to 0."""
        reset_state("insight", SESSION, SENTINEL_DEPTH)
        ctx = CheckContext(transcript_path=str(tmp_path / "gone.jsonl"))

        dice = get_accumulator_dice_count(_slot(), SESSION, ctx)

        assert dice.dice_count == 0
        assert dice.depth_available is False
        assert load_state("insight", SESSION).depth_at_last_trigger == SENTINEL_DEPTH

        later = get_accumulator_dice_count(_slot(), SESSION, CheckContext(depth=35))
        assert later.dice_count == 0
        assert load_state("insight", SESSION).depth_at_last_trigger == 35


class TestResolveCurrentDepth:
    """Depth source priority."""

    def test_none_without_sources(self):
        assert resolve_current_depth(_slot(), CheckContext()) is None

    def test_ctx_depth(self):
        assert resolve_current_depth(_slot(), CheckContext(depth=9)) == 9

    def test_transcript(self, tmp_path):
        path = _write_transcript(tmp_path / "abc.jsonl", user_turns=4, tool_results=3)
        assert resolve_current_depth(_slot(), CheckContext(transcript_path=path)) == 4

    def test_ctx_depth_beats_transcript(self, tmp_path):
        path = _write_transcript(tmp_path / "abc.jsonl", user_turns=4)
        ctx = CheckContext(transcript_path=path, depth=11)
        assert resolve_current_depth(_slot(), ctx) == 11

    def test_provider_beats_everything(self, tmp_path):
        path = _write_transcript(tmp_path / "abc.jsonl", user_turns=4)
        seen = []

        def provider(ctx):
            seen.append(ctx)
            return 33

        ctx = CheckContext(transcript_path=path, depth=11)
        assert resolve_current_depth(_slot(depth_provider=provider), ctx) == 33
        assert seen == [ctx]

    def test_missing_transcript_is_unknown_depth(self, tmp_path):
        ctx = CheckContext(transcript_path=str(tmp_path / "gone.jsonl"))
        assert resolve_current_depth(_slot(), ctx) is None


class TestResolveDiceCount:
    """Dispatch by slot type."""

    def test_fixed(self):
        dice = resolve_dice_count(_slot(kind="fixed", fixed_count=4), SESSION, CheckContext())
        assert dice.dice_count == 4

    def test_single(self):
        dice = resolve_dice_count(_slot(kind="single"), SESSION, CheckContext())
        assert dice.dice_count == 1

    def test_accumulator(self):
        dice = resolve_dice_count(_slot(), SESSION, CheckContext(depth=14))
        assert dice.dice_count == 2

    def test_unknown_type_rolls_nothing(self):
        dice = resolve_dice_count(_slot(kind="mystery"), SESSION, CheckContext(depth=70))
        assert dice.dice_count == 0

    def test_fixed_and_single_ignore_state(self):
        reset_state("insight", SESSION, SENTINEL_DEPTH)
        resolve_dice_count(_slot(kind="single"), SESSION, CheckContext(depth=5))
        assert load_state("insight", SESSION).depth_at_last_trigger == SENTINEL_DEPTH
