"""
Unit tests for contrast enforcement, palette signatures, ordering and the
visual-progression sort.
"""

import random

import pytest

from chromalab.services.colors.conversions import create_color_record, hex_to_hsl
from chromalab.services.colors.harmony import HslColor
from chromalab.services.colors.harmony.contrast import (
    DULL, FLAT, WASHED_OUT, classify_palette, enforce_contrast_and_vibrancy,
)
from chromalab.services.colors.harmony.ordering import apply_ordering, sort_by_visual_progression
from chromalab.services.colors.harmony.policy import GenerationPolicy
from chromalab.services.colors.harmony.registry import ORDER_PRESERVE, ORDER_SHUFFLE, ORDER_STRICT
from chromalab.services.colors.harmony.signature import ROLES, classify_role, palette_signature

WASHED = [HslColor(h, 30, 85) for h in (10, 80, 150, 220, 290)]
DULL_PALETTE = [HslColor(h, 8, l) for h, l in ((0, 20), (60, 40), (120, 55), (180, 70), (240, 90))]
FLAT_PALETTE = [HslColor(h, 90, l) for h, l in ((0, 40), (72, 45), (144, 50), (216, 55), (288, 60))]


class TestClassification:

    def test_washed_out(self):
        assert WASHED_OUT in classify_palette(WASHED)

    def test_dull(self):
        assert classify_palette(DULL_PALETTE) == [DULL]

    def test_flat(self):
        assert classify_palette(FLAT_PALETTE) == [FLAT]

    def test_healthy_palette(self):
        healthy = [HslColor(0, 90, 20), HslColor(120, 80, 50), HslColor(240, 70, 85)]
        assert classify_palette(healthy) == []

    def test_empty(self):
        assert classify_palette([]) == []


class TestEnforcement:

    def test_input_is_not_mutated(self):
        original = list(WASHED)
        enforce_contrast_and_vibrancy(WASHED, random.Random(1))
        assert WASHED == original

    def test_washed_out_gets_dark_anchor_and_pop(self):
        fixed, tokens = enforce_contrast_and_vibrancy(WASHED, random.Random(1))
        assert tokens[0] == WASHED_OUT
        assert "dark-anchor" in tokens and "vivid-pop" in tokens
        assert min(c.l for c in fixed) <= 22
        assert max(c.chroma for c in fixed) > 40

    def test_fixes_preserve_hue(self):
        for palette in (WASHED, DULL_PALETTE, FLAT_PALETTE):
            fixed, _ = enforce_contrast_and_vibrancy(palette, random.Random(2))
            assert [c.h for c in fixed] == [c.h for c in palette]

    def test_at_most_two_entries_change(self):
        for palette in (WASHED, DULL_PALETTE, FLAT_PALETTE):
            fixed, _ = enforce_contrast_and_vibrancy(palette, random.Random(3))
            changed = sum(1 for a, b in zip(palette, fixed) if a != b)
            assert 1 <= changed <= 2

    def test_flat_stretches_extremes(self):
        fixed, tokens = enforce_contrast_and_vibrancy(FLAT_PALETTE, random.Random(4))
        assert tokens == [FLAT, "stretch-extremes"]
        lightness = [c.l for c in fixed]
        assert max(lightness) - min(lightness) >= 60

    def test_flat_with_equal_lightness_stretches_both_ends(self):
        even = [HslColor(h, 90, 50) for h in (0, 72, 144, 216, 288)]
        fixed, tokens = enforce_contrast_and_vibrancy(even, random.Random(6))
        assert tokens == [FLAT, "stretch-extremes"]
        lightness = [c.l for c in fixed]
        assert min(lightness) <= 20
        assert max(lightness) >= 82
        assert sum(1 for a, b in zip(even, fixed) if a != b) == 2

    def test_short_palettes_are_left_alone(self):
        pair = WASHED[:2]
        fixed, tokens = enforce_contrast_and_vibrancy(pair, random.Random(5))
        assert fixed == pair and tokens == []

    def test_policy_thresholds_are_tunable(self):
        strict = GenerationPolicy(flat_lightness_range=0)
        assert FLAT not in classify_palette(FLAT_PALETTE, strict)


class TestSignature:

    def test_roles(self):
        assert classify_role(HslColor(0, 5, 10)) == "neutral-dark"
        assert classify_role(HslColor(0, 5, 90)) == "neutral-light"
        assert classify_role(HslColor(0, 5, 50)) == "neutral-mid"
        assert classify_role(HslColor(0, 90, 15)) == "dark"
        assert classify_role(HslColor(0, 90, 85)) == "light"
        assert classify_role(HslColor(0, 90, 50)) == "vivid"
        assert classify_role(HslColor(0, 40, 50)) == "mid"
        assert set(ROLES) == {
            "vivid", "dark", "light", "mid", "neutral-dark", "neutral-light", "neutral-mid"
        }

    def test_order_independent(self):
        palette = [HslColor(10, 80, 50), HslColor(200, 40, 20), HslColor(0, 5, 90)]
        assert palette_signature(palette) == palette_signature(list(reversed(palette)))

    def test_coarse_buckets_match_near_palettes(self):
        a = [HslColor(10, 80, 50), HslColor(200, 40, 22)]
        b = [HslColor(12, 82, 52), HslColor(205, 42, 24)]
        assert palette_signature(a) == palette_signature(b)

    def test_structure_changes_signature(self):
        a = [HslColor(10, 80, 50), HslColor(200, 40, 22)]
        b = [HslColor(10, 80, 50), HslColor(200, 5, 22)]
        assert palette_signature(a) != palette_signature(b)

    def test_neutral_count_and_contrast_encoded(self):
        signature = palette_signature([HslColor(0, 0, 10), HslColor(0, 0, 90), HslColor(30, 90, 50)])
        assert signature.endswith("#n2#c4")

    def test_empty(self):
        assert palette_signature([]) == ""


class TestOrdering:

    def test_preserve_keeps_order(self):
        items = list(range(10))
        assert apply_ordering(items, ORDER_PRESERVE, random.Random(1)) == items

    def test_shuffle_permutes(self):
        items = list(range(20))
        shuffled = apply_ordering(items, ORDER_SHUFFLE, random.Random(1))
        assert sorted(shuffled) == items
        assert shuffled != items
        assert items == list(range(20))

    def test_strict_shuffles_sometimes(self):
        rng = random.Random(9)
        items = list(range(6))
        outcomes = [apply_ordering(items, ORDER_STRICT, rng) != items for _ in range(400)]
        ratio = sum(outcomes) / len(outcomes)
        assert 0.15 < ratio < 0.45

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            apply_ordering([1, 2], "sideways", random.Random(1))


class TestVisualProgression:

    def _sorted_hexes(self, hexes):
        return [r.hex for r in sort_by_visual_progression([create_color_record(h) for h in hexes])]

    def test_achromatic_first_by_lightness(self):
        result = self._sorted_hexes(["#FF0000", "#FFFFFF", "#000000", "#808080"])
        assert result == ["#000000", "#808080", "#FFFFFF", "#FF0000"]

    def test_seam_after_largest_gap(self):
        # hues 300, 330, 0, 30: the largest gap is 30 -> 300
        result = self._sorted_hexes(["#FF0000", "#FF8000", "#FF00FF", "#FF0080"])
        hues = [round(hex_to_hsl(h)[0]) for h in result]
        assert hues == [300, 330, 0, 30]

    def test_plain_hue_order_when_gap_wraps(self):
        result = self._sorted_hexes(["#00FF00", "#FF0000", "#FFFF00"])
        assert result == ["#FF0000", "#FFFF00", "#00FF00"]

    def test_deterministic_and_stable(self):
        records = [create_color_record(h) for h in ["#123456", "#654321", "#ABCDEF", "#777777"]]
        assert sort_by_visual_progression(records) == sort_by_visual_progression(list(records))

    def test_locked_flags_survive(self):
        records = [create_color_record("#FF0000", locked=True), create_color_record("#000000")]
        result = sort_by_visual_progression(records)
        assert result[1].locked and result[1].hex == "#FF0000"

    def test_empty(self):
        assert sort_by_visual_progression([]) == []
