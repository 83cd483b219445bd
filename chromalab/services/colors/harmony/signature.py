"""
Structural palette signatures.

A signature is a coarse, order-independent fingerprint of a palette: per
color hue/saturation/lightness buckets and a role, plus the neutral count
and an overall contrast bucket. Two palettes with the same signature look
alike at a glance even when no hex value is shared.
"""

from typing import Sequence

from . import HslColor
from .policy import GenerationPolicy, DEFAULT_POLICY

HUE_BUCKET = 30
SATURATION_BUCKET = 25
LIGHTNESS_BUCKET = 20
CONTRAST_BUCKET = 20

ROLES = ("vivid", "dark", "light", "mid", "neutral-dark", "neutral-light", "neutral-mid")


def classify_role(color: HslColor, policy: GenerationPolicy = DEFAULT_POLICY) -> str:
    if color.s < policy.neutral_saturation:
        if color.l < 30:
            return "neutral-dark"
        if color.l > 75:
            return "neutral-light"
        return "neutral-mid"
    if color.l < 30:
        return "dark"
    if color.l > 75:
        return "light"
    if color.s >= 70 and 35 <= color.l <= 65:
        return "vivid"
    return "mid"


def _color_token(color: HslColor, policy: GenerationPolicy) -> str:
    neutral = color.s < policy.neutral_saturation
    hue = "n" if neutral else str(int(color.h // HUE_BUCKET) % (360 // HUE_BUCKET))
    sat = min(int(color.s // SATURATION_BUCKET), 3)
    light = min(int(color.l // LIGHTNESS_BUCKET), 4)
    return f"{hue}.{sat}.{light}.{classify_role(color, policy)}"


def palette_signature(colors: Sequence[HslColor], policy: GenerationPolicy = DEFAULT_POLICY) -> str:
    """Canonical signature string; empty palettes map to an empty string."""
    if not colors:
        return ""
    tokens = sorted(_color_token(c, policy) for c in colors)
    neutrals = sum(1 for c in colors if c.s < policy.neutral_saturation)
    lightness = [c.l for c in colors]
    contrast = int((max(lightness) - min(lightness)) // CONTRAST_BUCKET)
    return "|".join(tokens) + f"#n{neutrals}#c{contrast}"
