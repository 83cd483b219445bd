"""
Unit tests for the image color extraction pipeline.
"""

import numpy as np
import pytest

from chromalab.services.colors.conversions import create_color_record
from chromalab.services.colors.extraction import (
    ExtractionPolicy, analyze_pixels, clamp_active_count, extract_palette, select_active_palette,
)
from chromalab.services.colors.perceptual import oklab_distance, rgb_to_oklab


def solid(rgb, width=10, height=10, alpha=255):
    """Create a solid-color RGBA test image."""
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[:, :, :3] = rgb
    img[:, :, 3] = alpha
    return img


def stripes(colors, width=30, height=10):
    """Create vertical stripes of equal width, one per color."""
    img = np.zeros((height, width, 4), dtype=np.uint8)
    step = width // len(colors)
    for i, rgb in enumerate(colors):
        img[:, i * step:(i + 1) * step, :3] = rgb
    img[:, :, 3] = 255
    return img


def mix(parts, height=10):
    """Columns of colors; parts is a list of (rgb, column count)."""
    width = sum(n for _, n in parts)
    img = np.zeros((height, width, 4), dtype=np.uint8)
    x = 0
    for rgb, n in parts:
        img[:, x:x + n, :3] = rgb
        x += n
    img[:, :, 3] = 255
    return img


class TestBasicExtraction:

    def test_solid_color(self):
        candidates = analyze_pixels(solid((255, 0, 0)), 10, 10)
        assert len(candidates) == 1
        assert candidates[0].hex == "#FF0000"
        assert candidates[0].frequency == pytest.approx(1.0)

    def test_fewer_colors_than_requested(self):
        img = stripes([(255, 0, 0), (0, 255, 0), (0, 0, 255)])
        records = extract_palette(img, 30, 10, max_outputs=20)
        assert {r.hex for r in records} == {"#FF0000", "#00FF00", "#0000FF"}

    def test_dominant_color_first(self):
        img = mix([((255, 0, 0), 7), ((0, 0, 255), 3)])
        candidates = analyze_pixels(img, 10, 10)
        assert candidates[0].hex == "#FF0000"
        assert candidates[0].score > candidates[1].score

    def test_colorfulness_outweighs_slight_dominance(self):
        img = mix([((128, 128, 128), 55), ((255, 0, 0), 45)])
        candidates = analyze_pixels(img, 100, 10)
        assert candidates[0].hex == "#FF0000"

    def test_near_duplicates_merge(self):
        img = mix([((200, 30, 30), 6), ((202, 33, 28), 4)])
        candidates = analyze_pixels(img, 10, 10)
        assert len(candidates) == 1
        assert candidates[0].count == 100

    def test_outputs_are_perceptually_distinct(self):
        rng = np.random.default_rng(3)
        img = np.concatenate(
            [rng.integers(0, 256, size=(40, 40, 3), dtype=np.uint8),
             np.full((40, 40, 1), 255, dtype=np.uint8)],
            axis=2,
        )
        candidates = analyze_pixels(img, 40, 40, max_outputs=20)
        assert 0 < len(candidates) <= 20
        labs = [rgb_to_oklab(*c.rgb) for c in candidates]
        for i in range(len(labs)):
            for j in range(i + 1, len(labs)):
                assert oklab_distance(labs[i], labs[j]) > 0.08

    def test_max_outputs_limit(self):
        colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0), (0, 0, 0), (255, 255, 255)]
        img = stripes(colors, width=60)
        assert len(analyze_pixels(img, 60, 10, max_outputs=2)) == 2
        assert analyze_pixels(img, 60, 10, max_outputs=0) == []

    def test_deterministic(self):
        rng = np.random.default_rng(11)
        img = rng.integers(0, 256, size=(20, 20, 4), dtype=np.uint8)
        first = [c.to_dict() for c in analyze_pixels(img, 20, 20)]
        second = [c.to_dict() for c in analyze_pixels(img.copy(), 20, 20)]
        assert first == second


class TestAlphaAndInputs:

    def test_fully_transparent_is_empty(self):
        assert analyze_pixels(solid((255, 0, 0), alpha=0), 10, 10) == []

    def test_translucent_pixels_are_ignored(self):
        img = mix([((255, 0, 0), 5), ((0, 0, 255), 5)])
        img[:, :5, 3] = 100
        candidates = analyze_pixels(img, 10, 10)
        assert [c.hex for c in candidates] == ["#0000FF"]

    def test_custom_alpha_threshold(self):
        img = solid((0, 255, 0), alpha=100)
        policy = ExtractionPolicy(alpha_threshold=50)
        assert len(analyze_pixels(img, 10, 10, policy=policy)) == 1

    def test_flat_bytes_match_array(self):
        img = stripes([(10, 120, 200), (240, 200, 10)], width=20)
        from_array = analyze_pixels(img, 20, 10)
        from_bytes = analyze_pixels(img.tobytes(), 20, 10)
        assert [c.to_dict() for c in from_array] == [c.to_dict() for c in from_bytes]

    def test_rgb_array_is_opaque(self):
        img = np.zeros((4, 5, 3), dtype=np.uint8)
        img[:] = (0, 128, 255)
        candidates = analyze_pixels(img, 5, 4)
        assert [c.hex for c in candidates] == ["#0080FF"]

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            analyze_pixels(bytes(10 * 10 * 4 - 1), 10, 10)
        with pytest.raises(ValueError):
            analyze_pixels(np.zeros((5, 5, 4), dtype=np.uint8), 10, 10)

    def test_zero_size_image(self):
        assert analyze_pixels(b"", 0, 0) == []


class TestActivePalette:

    @pytest.mark.parametrize("requested,available,expected", [
        (5, 20, 5), (1, 20, 2), (15, 20, 10), (5, 3, 3), (5, 1, 1), (5, 0, 0), (0, 2, 2),
    ])
    def test_clamp_active_count(self, requested, available, expected):
        assert clamp_active_count(requested, available) == expected

    def test_select_is_leading_slice(self):
        records = [create_color_record(h) for h in ["#111111", "#222222", "#333333", "#444444"]]
        assert select_active_palette(records, 3) == records[:3]
        assert select_active_palette(records, 99) == records
        assert select_active_palette([], 5) == []
