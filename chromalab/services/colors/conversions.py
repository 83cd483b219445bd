"""
Color model and conversion layer.

Pure, total conversions between hex, RGB, HSL and CMYK plus the display
record built from a hex string. Malformed input degrades to black instead
of raising so that live hex parsing never interrupts generation.
"""

import colorsys
import random
import re
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, Optional, Tuple

HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

RGB = Tuple[int, int, int]
HSL = Tuple[float, float, float]


@dataclass(frozen=True)
class ColorRecord:
    """Display form of a color; hex is the single source of truth."""
    hex: str  # Canonical "#RRGGBB", uppercase
    rgb: RGB
    hsl: str  # "H°, S%, L%"
    cmyk: str  # "C% M% Y% K%"
    locked: bool = False
    name: Optional[str] = None

    @property
    def rgb_string(self) -> str:
        r, g, b = self.rgb
        return f"{r}, {g}, {b}"

    def with_lock(self, locked: bool = True) -> "ColorRecord":
        """Return a copy with the caller-owned lock flag set."""
        return replace(self, locked=locked)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["rgb"] = list(self.rgb)
        return data


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def normalize_hue(h: float) -> float:
    """Wrap any hue angle (negative or >= 360) into [0, 360)."""
    h = h % 360.0
    # float modulo can return 360.0 for tiny negative inputs
    return 0.0 if h >= 360.0 else h


def is_valid_hex(hex_color: str) -> bool:
    """True when the string is a 6-digit hex color with optional '#'."""
    return isinstance(hex_color, str) and HEX_PATTERN.match(hex_color.strip()) is not None


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Parse a 6-digit hex color.

    Args:
        hex_color: "#RRGGBB" or "RRGGBB", any case

    Returns:
        (r, g, b) in 0..255, or (0, 0, 0) when the input is malformed
    """
    if not isinstance(hex_color, str):
        return (0, 0, 0)
    match = HEX_PATTERN.match(hex_color.strip())
    if match is None:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to "#RRGGBB"; channels are rounded and clamped."""
    r_int = int(clamp(round(r), 0, 255))
    g_int = int(clamp(round(g), 0, 255))
    b_int = int(clamp(round(b), 0, 255))
    return f"#{r_int:02X}{g_int:02X}{b_int:02X}"


def normalize_hex(hex_color: str) -> str:
    """Canonical uppercase "#RRGGBB" form; malformed input becomes "#000000"."""
    return rgb_to_hex(*hex_to_rgb(hex_color))


def rgb_to_hsl(r: float, g: float, b: float) -> HSL:
    """
    Convert RGB to HSL.

    Args:
        r, g, b: Channels in 0..255

    Returns:
        (h, s, l) with h in [0, 360) and s, l in [0, 100], unrounded
    """
    h, l, s = colorsys.rgb_to_hls(
        clamp(r, 0, 255) / 255.0,
        clamp(g, 0, 255) / 255.0,
        clamp(b, 0, 255) / 255.0,
    )
    return normalize_hue(h * 360.0), s * 100.0, l * 100.0


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """
    Convert HSL to RGB.

    Hue may be negative or beyond 360 and is wrapped first; saturation and
    lightness are clamped into [0, 100].

    Returns:
        (r, g, b) integers in 0..255
    """
    h = normalize_hue(h)
    s = clamp(s, 0.0, 100.0)
    l = clamp(l, 0.0, 100.0)
    r, g, b = colorsys.hls_to_rgb(h / 360.0, l / 100.0, s / 100.0)
    return (
        int(clamp(round(r * 255), 0, 255)),
        int(clamp(round(g * 255), 0, 255)),
        int(clamp(round(b * 255), 0, 255)),
    )


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def hex_to_hsl(hex_color: str) -> HSL:
    return rgb_to_hsl(*hex_to_rgb(hex_color))


def rgb_to_cmyk(r: float, g: float, b: float) -> str:
    """
    Subtractive CMYK as a formatted string, e.g. "0% 100% 100% 0%".

    Pure black short-circuits c/m/y to zero instead of dividing by zero.
    """
    r_n = clamp(r, 0, 255) / 255.0
    g_n = clamp(g, 0, 255) / 255.0
    b_n = clamp(b, 0, 255) / 255.0
    k = min(1 - r_n, 1 - g_n, 1 - b_n)
    c = m = y = 0.0
    if k < 1.0:
        c = (1 - r_n - k) / (1 - k)
        m = (1 - g_n - k) / (1 - k)
        y = (1 - b_n - k) / (1 - k)
    return f"{round(c * 100)}% {round(m * 100)}% {round(y * 100)}% {round(k * 100)}%"


def format_hsl(h: float, s: float, l: float) -> str:
    return f"{round(normalize_hue(h)) % 360}°, {round(s)}%, {round(l)}%"


def create_color_record(hex_color: str, locked: bool = False, name: Optional[str] = None) -> ColorRecord:
    """
    Build the full display record for a hex color.

    Args:
        hex_color: Hex string, with or without '#'
        locked: Caller-owned lock flag, carried through untouched
        name: Optional human label

    Returns:
        ColorRecord whose hex is canonical uppercase "#RRGGBB"
    """
    r, g, b = hex_to_rgb(hex_color)
    h, s, l = rgb_to_hsl(r, g, b)
    return ColorRecord(
        hex=rgb_to_hex(r, g, b),
        rgb=(r, g, b),
        hsl=format_hsl(h, s, l),
        cmyk=rgb_to_cmyk(r, g, b),
        locked=locked,
        name=name,
    )


def generate_random_color(rng: Optional[random.Random] = None) -> str:
    """Uniformly random "#RRGGBB" color."""
    rng = rng or random.Random()
    return f"#{rng.randint(0, 0xFFFFFF):06X}"
