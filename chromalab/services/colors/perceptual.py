"""
Perceptual color space helpers (Oklab / Oklch).

Euclidean distance in Oklab tracks perceived difference far better than
HSL distance, in particular near the achromatic axis where HSL hue is
meaningless. Scalar helpers serve the generation engine; the numpy
variants serve bulk pixel work in the extraction pipeline.
"""

import math
from typing import Tuple

import numpy as np

from .conversions import hsl_to_rgb

Oklab = Tuple[float, float, float]
Oklch = Tuple[float, float, float]

# Linear sRGB -> LMS and LMS' -> Oklab (Ottosson)
_RGB_TO_LMS = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])
_LMS_TO_OKLAB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])


def _srgb_to_linear(c: float) -> float:
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _linear_to_srgb(c: float) -> float:
    return c * 12.92 if c <= 0.0031308 else 1.055 * (c ** (1 / 2.4)) - 0.055


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1 / 3), x)


def rgb_to_oklab(r: float, g: float, b: float) -> Oklab:
    """Convert 0..255 sRGB to Oklab (L in 0..1)."""
    lr = _srgb_to_linear(r / 255.0)
    lg = _srgb_to_linear(g / 255.0)
    lb = _srgb_to_linear(b / 255.0)

    l_ = 0.4122214708 * lr + 0.5363325363 * lg + 0.0514459929 * lb
    m_ = 0.2119034982 * lr + 0.6806995451 * lg + 0.1073969566 * lb
    s_ = 0.0883024619 * lr + 0.2817188376 * lg + 0.6299787005 * lb

    l_, m_, s_ = _cbrt(l_), _cbrt(m_), _cbrt(s_)

    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def oklab_to_rgb(L: float, a: float, b: float) -> Tuple[int, int, int]:
    """Convert Oklab back to 0..255 sRGB, clipping out-of-gamut values."""
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b
    l_, m_, s_ = l_ ** 3, m_ ** 3, s_ ** 3

    lr = 4.0767416621 * l_ - 3.3077115913 * m_ + 0.2309699292 * s_
    lg = -1.2684380046 * l_ + 2.6097574011 * m_ - 0.3413193965 * s_
    lb = -0.0041960863 * l_ - 0.7034186147 * m_ + 1.7076147010 * s_

    channels = []
    for c in (lr, lg, lb):
        c = min(1.0, max(0.0, c))
        channels.append(int(round(_linear_to_srgb(c) * 255)))
    return tuple(channels)


def oklab_to_oklch(L: float, a: float, b: float) -> Oklch:
    """Polar form: (lightness, chroma, hue degrees)."""
    chroma = math.hypot(a, b)
    hue = math.degrees(math.atan2(b, a)) % 360.0
    return L, chroma, hue


def oklch_to_oklab(L: float, C: float, h: float) -> Oklab:
    rad = math.radians(h)
    return L, C * math.cos(rad), C * math.sin(rad)


def hsl_to_oklab(h: float, s: float, l: float) -> Oklab:
    return rgb_to_oklab(*hsl_to_rgb(h, s, l))


def hsl_to_oklch(h: float, s: float, l: float) -> Oklch:
    return oklab_to_oklch(*hsl_to_oklab(h, s, l))


def oklab_distance(c1: Oklab, c2: Oklab) -> float:
    """Euclidean distance in Oklab (black to white is 1.0)."""
    return math.sqrt((c1[0] - c2[0]) ** 2 + (c1[1] - c2[1]) ** 2 + (c1[2] - c2[2]) ** 2)


def rgb_array_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """
    Vectorised sRGB -> Oklab.

    Args:
        rgb: (N, 3) array of 0..255 values (any numeric dtype)

    Returns:
        (N, 3) float64 array of (L, a, b)
    """
    rgb_norm = np.asarray(rgb, dtype=np.float64).reshape(-1, 3) / 255.0
    linear = np.where(rgb_norm <= 0.04045, rgb_norm / 12.92, ((rgb_norm + 0.055) / 1.055) ** 2.4)
    lms = linear @ _RGB_TO_LMS.T
    return np.cbrt(lms) @ _LMS_TO_OKLAB.T


def oklab_array_chroma(oklab: np.ndarray) -> np.ndarray:
    """Chroma column (sqrt(a^2 + b^2)) of an (N, 3) Oklab array."""
    return np.hypot(oklab[:, 1], oklab[:, 2])
