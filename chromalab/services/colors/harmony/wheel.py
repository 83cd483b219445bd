"""
Strict color-wheel harmonies and wheel pointer geometry.

Unlike the generation engine these harmonies are fully deterministic: the
selected color comes first, followed by a fixed number of companions at
fixed offsets with the same saturation and lightness.
"""

import math
from typing import Dict, List, Tuple

from ..conversions import ColorRecord, clamp, create_color_record, hsl_to_hex, normalize_hue

WHEEL_MODES = ("complementary", "monochromatic", "analogous", "triadic", "tetradic")

# hue offsets of the companions for each mode
_OFFSETS: Dict[str, Tuple[float, ...]] = {
    "complementary": (180,),
    "analogous": (30, 60),
    "triadic": (120, 240),
    "tetradic": (90, 180, 270),
}


def wheel_harmony(h: float, s: float, l: float, mode: str = "complementary") -> List[ColorRecord]:
    """
    Build the strict harmony for a wheel selection.

    Args:
        h, s, l: Selected color in HSL
        mode: One of WHEEL_MODES; anything else falls back to complementary

    Returns:
        Base record followed by its companions
    """
    palette = [create_color_record(hsl_to_hex(h, s, l))]

    if mode == "monochromatic":
        # step toward the middle so light selections don't wash out
        mono_l = l - 15 if l > 75 else l + 15
        palette.append(create_color_record(hsl_to_hex(h, s, clamp(mono_l, 5, 95))))
        return palette

    for offset in _OFFSETS.get(mode, _OFFSETS["complementary"]):
        palette.append(create_color_record(hsl_to_hex(h + offset, s, l)))
    return palette


def wheel_point_to_hs(dx: float, dy: float, radius: float) -> Tuple[int, int]:
    """
    Map a pointer offset from the wheel centre to (hue, saturation).

    Hue 0 sits at the top of the wheel and increases clockwise (screen y
    grows downward); saturation is the distance from the centre as a
    percentage of the radius.
    """
    angle = normalize_hue(math.degrees(math.atan2(dy, dx)) + 90)
    saturation = clamp(math.hypot(dx, dy) / radius * 100, 0, 100) if radius > 0 else 0.0
    return int(round(angle)) % 360, int(round(saturation))


def hs_to_wheel_point(h: float, s: float) -> Tuple[float, float]:
    """Inverse of wheel_point_to_hs as (left, top) percentages of the wheel box."""
    angle = math.radians(h - 90)
    distance = clamp(s, 0, 100) / 2
    return 50 + distance * math.cos(angle), 50 + distance * math.sin(angle)
