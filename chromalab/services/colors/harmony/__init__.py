"""
Chromalab Palette Harmony Engine

Shared primitives for the generation strategies: the HSL working value
and the enumeration of generation modes.
"""

from enum import Enum
from typing import NamedTuple

from ..conversions import clamp, hsl_to_hex, normalize_hue


class GenerationMode(str, Enum):
    """Selectable generation modes."""
    MONOCHROMATIC = "monochromatic"
    ANALOGOUS = "analogous"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    COMPLEMENTARY = "complementary"
    SPLIT_COMPLEMENTARY = "split-complementary"
    COMPOUND = "compound"
    SHADES = "shades"
    CYBERPUNK = "cyberpunk"
    MODERN_UI = "modern-ui"
    RETRO_FUTURE = "retro-future"
    WARM_EARTH = "warm-earth"
    HYPER_WARM = "hyper-warm"
    RANDOM = "random"


class HslColor(NamedTuple):
    """Internal working color: h in [0, 360), s and l in [0, 100]."""
    h: float
    s: float
    l: float

    @property
    def hex(self) -> str:
        return hsl_to_hex(self.h, self.s, self.l)

    @property
    def chroma(self) -> float:
        """HSL chroma in percent: s scaled by distance from the L extremes."""
        return self.s * (1.0 - abs(2.0 * self.l / 100.0 - 1.0))

    def normalized(self) -> "HslColor":
        return HslColor(normalize_hue(self.h), clamp(self.s, 0.0, 100.0), clamp(self.l, 0.0, 100.0))


__all__ = [
    "GenerationMode",
    "HslColor",
]
