"""
Tests for the palette generation engine: invariants, seeded scenarios,
strategy registry and lock-aware regeneration.
"""

import itertools
import random

import pytest

from chromalab.services.colors.conversions import create_color_record, hex_to_hsl, hex_to_rgb
from chromalab.services.colors.harmony import GenerationMode, HslColor
from chromalab.services.colors.harmony.builder import (
    PaletteBuilder, nudge_until_unique, too_similar,
)
from chromalab.services.colors.harmony.engine import (
    PaletteGenerator, generate_palette, regenerate_palette,
)
from chromalab.services.colors.harmony.policy import GenerationPolicy
from chromalab.services.colors.harmony.registry import (
    ORDER_PRESERVE, StrategyContext, get_mode, get_random_strategy, list_modes, list_random_strategies, resolve,
)
from chromalab.services.colors.harmony.vibes import VIBE_TABLE, VIBES, pick_vibe, seeded_vibe
from chromalab.services.colors.memory import AntiRepetitionMemory, circular_hue_distance
from chromalab.services.colors.perceptual import oklab_distance, rgb_to_oklab

ALL_MODES = [m.value for m in GenerationMode]


def _hues(result):
    return [hex_to_hsl(h)[0] for h in result.hexes]


class TestRegistry:

    def test_every_mode_is_registered(self):
        assert sorted(ALL_MODES) == list_modes()

    def test_random_has_many_sub_strategies(self):
        assert len(list_random_strategies()) >= 15

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            get_mode("plaid")
        with pytest.raises(ValueError):
            get_random_strategy("plaid")

    def test_mode_lookup_accepts_enum_and_underscores(self):
        assert get_mode(GenerationMode.MODERN_UI).name == "modern-ui"
        assert get_mode("split_complementary").name == "split-complementary"

    def test_random_resolves_to_sub_strategy(self):
        rng = random.Random(0)
        names = {resolve("random", rng).name for _ in range(200)}
        assert names <= set(list_random_strategies())
        assert len(names) > 10

    def test_random_marker_defers_to_resolve(self, memory, rng):
        spec = resolve("random", rng)
        assert spec.name != "random"
        builder = PaletteBuilder(5, memory, rng)
        ctx = StrategyContext(base=HslColor(200, 70, 50), vibe=VIBES["vivid"], count=5,
                              rng=rng, builder=builder)
        get_mode("random").func(ctx)
        assert len(builder) == 0

    def test_check_worthy_modes(self):
        assert get_mode("random").check_signature
        assert get_mode("warm-earth").check_signature
        assert get_mode("hyper-warm").check_signature
        assert not get_mode("complementary").check_signature

    def test_gradients_preserve_order(self):
        assert get_random_strategy("smooth-gradient").ordering == ORDER_PRESERVE
        assert not get_random_strategy("smooth-gradient").enforce_contrast
        assert not get_mode("monochromatic").enforce_contrast


class TestVibes:

    def test_weights_sum_to_one(self):
        assert sum(w for _, w in VIBE_TABLE) == pytest.approx(1.0)

    def test_pick_is_skewed_toward_vivid(self):
        rng = random.Random(11)
        picks = [pick_vibe(rng).name for _ in range(2000)]
        assert picks.count("vivid") > picks.count("muted") * 3

    def test_seeded_vibe_is_clamped(self):
        vibe = seeded_vibe(100, 50)
        assert vibe.s_max == 100 and vibe.s_min == 90
        assert vibe.l_min == 40 and vibe.l_max == 60


class TestBuilder:

    def test_too_similar(self):
        assert too_similar(HslColor(0, 100, 50), HslColor(2, 100, 51))
        assert not too_similar(HslColor(0, 100, 50), HslColor(180, 100, 50))
        # grays compare on lightness regardless of hue
        assert too_similar(HslColor(0, 3, 50), HslColor(200, 3, 50))
        assert not too_similar(HslColor(0, 3, 20), HslColor(200, 3, 80))

    def test_try_add_rejects_similar(self, memory, rng):
        builder = PaletteBuilder(5, memory, rng)
        assert builder.try_add(10, 80, 50) is not None
        assert builder.try_add(11, 80, 50) is None
        assert len(builder) == 1

    def test_try_add_normalizes_and_clamps(self, memory, rng):
        builder = PaletteBuilder(3, memory, rng)
        color = builder.try_add(-30, 150, 120)
        assert color.h == pytest.approx(330)
        assert color.s == 100
        assert color.l == 98

    def test_accepted_hex_is_registered(self, memory, rng):
        builder = PaletteBuilder(3, memory, rng)
        color = builder.try_add(120, 60, 40)
        assert memory.contains_hex(color.hex)

    def test_history_collision_nudges_lightness(self, memory, rng):
        seen = HslColor(200, 70, 40)
        memory.register_hex(seen.hex)
        builder = PaletteBuilder(3, memory, rng)
        color = builder.try_add(*seen)
        assert color.hex != seen.hex
        assert color.l > seen.l

    def test_safe_add_always_progresses(self, memory, rng):
        builder = PaletteBuilder(12, memory, rng)
        for _ in range(12):
            builder.safe_add(0, 0, 50)
        assert len(builder) == 12
        assert len(set(builder.hexes)) == 12
        assert builder.forced_count > 0

    def test_nudge_until_unique(self, rng):
        color = HslColor(0, 0, 50)
        taken = {color.hex}
        unique = nudge_until_unique(color, taken, rng)
        assert unique.hex not in taken

    def test_preload_blocks_similar_without_touching_memory(self, memory, rng):
        builder = PaletteBuilder(3, memory, rng)
        builder.preload([HslColor(30, 95, 50)])
        assert len(builder) == 1
        assert not memory.contains_hex(HslColor(30, 95, 50).hex)
        assert builder.try_add(30, 93, 51) is None
        assert builder.try_add(210, 60, 50) is not None


class TestGenerateInvariants:

    @pytest.mark.parametrize("mode", ALL_MODES)
    @pytest.mark.parametrize("count", [1, 2, 3, 5, 8])
    def test_exact_count_and_unique_hexes(self, mode, count):
        generator = PaletteGenerator(memory=AntiRepetitionMemory(), rng=random.Random(count * 31 + len(mode)))
        for _ in range(3):
            result = generator.generate(mode, count)
            assert len(result.colors) == count
            assert len(set(result.hexes)) == count
            assert all(c.hex == c.hex.upper() and c.hex.startswith("#") for c in result.colors)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_long_palettes_terminate(self, mode, generator):
        result = generator.generate(mode, 30)
        assert len(result.colors) == 30
        assert len(set(result.hexes)) == 30

    @pytest.mark.parametrize("mode", ALL_MODES)
    @pytest.mark.parametrize("seed", range(40))
    def test_unforced_palettes_have_no_similar_pair(self, mode, seed):
        policy = GenerationPolicy()
        result = PaletteGenerator(memory=AntiRepetitionMemory(), rng=seed).generate(mode, 5)
        if result.forced:
            pytest.skip("forced insertions only guarantee distinct hex values")
        labs = [rgb_to_oklab(*hex_to_rgb(h)) for h in result.hexes]
        for i, j in itertools.combinations(range(len(labs)), 2):
            assert oklab_distance(labs[i], labs[j]) >= policy.min_perceptual_distance, \
                (result.strategy, result.adjustments, result.hexes[i], result.hexes[j])

    def test_repairs_sharing_a_hue_are_pulled_apart(self, generator):
        untouched = [HslColor(200, 70, 20), HslColor(120, 60, 85), HslColor(280, 50, 40)]
        before = untouched + [HslColor(30, 5, 30), HslColor(30, 6, 60)]
        after = untouched + [HslColor(30, 95, 50), HslColor(30, 93, 51)]
        assert too_similar(after[3], after[4])

        settled, forced = generator._settle_repairs(before, after)
        assert forced == 0
        assert settled[:3] == untouched
        assert settled[3] == after[3]
        assert settled[4].hex != after[4].hex
        for a, b in itertools.combinations(settled, 2):
            assert not too_similar(a, b)

    def test_zero_and_negative_count(self, generator):
        assert generator.generate("random", 0).colors == []
        assert generator.generate("triadic", -3).colors == []

    def test_unknown_mode(self, generator):
        with pytest.raises(ValueError):
            generator.generate("plaid", 5)

    def test_locked_flag_never_set_by_engine(self, generator):
        assert not any(c.locked for c in generator.generate("analogous", 5).colors)

    def test_same_seed_same_palette(self):
        a = PaletteGenerator(memory=AntiRepetitionMemory(), rng=99).generate("random", 6)
        b = PaletteGenerator(memory=AntiRepetitionMemory(), rng=99).generate("random", 6)
        assert a.hexes == b.hexes
        assert a.strategy == b.strategy

    def test_module_wrapper(self, memory):
        colors = generate_palette("compound", 4, memory=memory, rng=5)
        assert len(colors) == 4


class TestSeededScenarios:

    def test_complementary_red_cyan(self, generator):
        for _ in range(10):
            result = generator.generate("complementary", 2, "#FF0000")
            hues = _hues(result)
            assert result.seeded
            assert circular_hue_distance(hues[0], hues[1]) == pytest.approx(180, abs=12)
            assert min(circular_hue_distance(h, 0) for h in hues) <= 6
            for hex_color in result.hexes:
                _, s, l = hex_to_hsl(hex_color)
                assert s >= 85
                assert 25 <= l <= 75

    def test_triadic_blue(self, generator):
        for _ in range(10):
            hues = _hues(generator.generate("triadic", 3, "#0000FF"))
            for target in (240, 0, 120):
                assert min(circular_hue_distance(h, target) for h in hues) <= 15

    @pytest.mark.parametrize("seed", ["#3366CC", "#FF0000", "#2F17E8", "#88AA22"])
    def test_monochromatic_hue_and_lightness(self, generator, seed):
        seed_h = hex_to_hsl(seed)[0]
        for count in (3, 5, 8):
            result = generator.generate("monochromatic", count, seed)
            hsl = [hex_to_hsl(h) for h in result.hexes]
            for h, s, l in hsl:
                if s > 5:
                    assert circular_hue_distance(h, seed_h) <= 15
            lightness = [round(l, 3) for _, _, l in hsl]
            assert len(set(lightness)) == count

    def test_seeded_calls_do_not_touch_hue_history(self, memory):
        generator = PaletteGenerator(memory=memory, rng=1)
        generator.generate("analogous", 5, "#123456")
        assert memory.recent_hues() == []

    def test_malformed_seed_is_ignored(self, generator):
        result = generator.generate("triadic", 3, "#XYZ")
        assert not result.seeded
        assert len(result.colors) == 3


class TestAntiRepetition:

    def test_base_hue_avoids_recent_hues(self):
        memory = AntiRepetitionMemory(hue_capacity=2)
        generator = PaletteGenerator(memory=memory, rng=3)
        for _ in range(20):
            previous = memory.recent_hues()
            result = generator.generate("complementary", 3)
            assert all(circular_hue_distance(result.base_hue, h) >= 30 for h in previous)
            assert memory.recent_hues()[-1] == pytest.approx(result.base_hue)

    def test_hue_history_is_bounded(self, memory):
        generator = PaletteGenerator(memory=memory, rng=4)
        for _ in range(10):
            generator.generate("triadic", 3)
        assert len(memory.recent_hues()) == 5

    def test_signatures_registered_for_check_worthy_modes(self, memory):
        generator = PaletteGenerator(memory=memory, rng=8)
        result = generator.generate("warm-earth", 5)
        assert memory.contains_signature(result.signature)
        generator.generate("complementary", 5)
        assert len(memory.recent_signatures()) == 1

    def test_signature_repeat_triggers_single_retry(self, memory):
        generator = PaletteGenerator(memory=memory, rng=21)
        first = generator.generate("hyper-warm", 1)
        retried = 0
        for _ in range(30):
            result = generator.generate("hyper-warm", 1)
            retried += result.retried
        assert first.signature
        assert retried > 0

    def test_random_mode_rarely_repeats_consecutively(self):
        generator = PaletteGenerator(memory=AntiRepetitionMemory(), rng=2024)
        signatures = [generator.generate("random", 5).signature for _ in range(40)]
        repeats = sum(1 for a, b in zip(signatures, signatures[1:]) if a == b)
        assert repeats <= 2


class TestThemes:

    def test_modern_ui_recipe(self, generator):
        for _ in range(5):
            result = generator.generate("modern-ui", 5)
            lightness = sorted(hex_to_hsl(h)[2] for h in result.hexes)
            assert lightness[-1] >= 90  # surface
            assert lightness[0] <= 15  # ink

    def test_warm_earth_is_warm(self, generator):
        for _ in range(5):
            for hex_color in generator.generate("warm-earth", 5).hexes:
                h, s, _ = hex_to_hsl(hex_color)
                if s > 10:
                    assert h <= 100 or h >= 340

    def test_hyper_warm_hues(self, generator):
        for _ in range(5):
            for hex_color in generator.generate("hyper-warm", 5).hexes:
                h, s, _ = hex_to_hsl(hex_color)
                if s > 10:
                    assert h <= 75 or h >= 320


class TestRegenerate:

    def test_locked_colors_keep_their_slot(self, generator):
        previous = generator.generate("triadic", 5).colors
        previous = [c.with_lock() if i in (0, 3) else c for i, c in enumerate(previous)]
        result = generator.regenerate(previous, "analogous")
        assert len(result.colors) == 5
        assert result.colors[0] == previous[0]
        assert result.colors[3] == previous[3]
        assert result.colors[0].locked and result.colors[3].locked
        assert len(set(result.hexes)) == 5

    def test_all_locked_is_unchanged(self, generator):
        previous = [create_color_record(h, locked=True) for h in ["#111111", "#EEEEEE", "#FF0000"]]
        assert generator.regenerate(previous, "random").colors == previous

    def test_without_mode_draws_default_mode(self, memory):
        previous = [create_color_record("#336699"), create_color_record("#993366")]
        colors = regenerate_palette(previous, memory=memory, rng=7)
        assert len(colors) == 2

    def test_empty_palette(self, generator):
        assert generator.regenerate([], "random").colors == []
