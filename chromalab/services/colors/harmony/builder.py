"""
Palette assembly: similarity predicate and the color insertion protocol.

Strategies never append colors directly; they go through
PaletteBuilder.try_add / safe_add, which normalise, reject near-duplicates,
steer around recently emitted hex values and guarantee forward progress.
"""

import random
from typing import List, Optional, Sequence, Set

from loguru import logger

from . import HslColor
from .policy import GenerationPolicy, DEFAULT_POLICY
from ..conversions import clamp, hex_to_hsl, generate_random_color, normalize_hue
from ..memory import AntiRepetitionMemory
from ..perceptual import Oklab, hsl_to_oklab, oklab_distance

# Lightness sweep width per hue ring in the uniqueness search
_RING_SIZE = 20
_RING_HUE_STEP = 7.0
_MAX_UNIQUE_STEPS = 2000


def too_similar(c1: HslColor, c2: HslColor, policy: GenerationPolicy = DEFAULT_POLICY) -> bool:
    """
    Judge whether two colors read as the same swatch.

    Uses Oklab distance, so near-achromatic colors are effectively compared
    on lightness alone and equal hues need a real lightness/chroma gap.
    """
    return oklab_distance(hsl_to_oklab(*c1), hsl_to_oklab(*c2)) < policy.min_perceptual_distance


def nudge_until_unique(color: HslColor, taken: Set[str], rng: random.Random,
                       policy: GenerationPolicy = DEFAULT_POLICY) -> HslColor:
    """
    Move a color until its hex is not in `taken`.

    Sweeps lightness around the original value, rotating hue a few degrees
    per ring; a random color is the last resort (e.g. large gray palettes).
    """
    candidate = color
    for step in range(1, _MAX_UNIQUE_STEPS):
        if candidate.hex not in taken:
            return candidate
        ring, offset = divmod(step, _RING_SIZE)
        delta = ((offset + 1) // 2) * (1 if offset % 2 else -1)
        candidate = HslColor(
            normalize_hue(color.h + _RING_HUE_STEP * ring),
            color.s,
            clamp(color.l + delta, policy.min_lightness, policy.max_lightness),
        )
    while candidate.hex in taken:
        candidate = HslColor(*hex_to_hsl(generate_random_color(rng)))
    return candidate


class PaletteBuilder:
    """Accumulates accepted colors for one palette."""

    def __init__(self, capacity: int, memory: AntiRepetitionMemory, rng: random.Random,
                 policy: GenerationPolicy = DEFAULT_POLICY):
        self.capacity = capacity
        self.memory = memory
        self.rng = rng
        self.policy = policy
        self.colors: List[HslColor] = []
        self.forced_count = 0
        self._oklab: List[Oklab] = []
        self._hexes: Set[str] = set()

    def __len__(self) -> int:
        return len(self.colors)

    @property
    def is_full(self) -> bool:
        return len(self.colors) >= self.capacity

    @property
    def hexes(self) -> List[str]:
        return [c.hex for c in self.colors]

    def _clamped(self, h: float, s: float, l: float) -> HslColor:
        return HslColor(
            normalize_hue(h),
            clamp(s, 0.0, 100.0),
            clamp(l, self.policy.min_lightness, self.policy.max_lightness),
        )

    def _avoid_recent(self, candidate: HslColor) -> HslColor:
        """Nudge lightness away from hex values burned into memory."""
        for _ in range(self.policy.history_nudge_attempts):
            if not self.memory.contains_hex(candidate.hex):
                break
            direction = 1.0 if candidate.l < 50 else -1.0
            candidate = candidate._replace(
                l=clamp(candidate.l + direction * self.policy.history_nudge,
                        self.policy.min_lightness, self.policy.max_lightness)
            )
        return candidate

    def _accept(self, candidate: HslColor) -> HslColor:
        self.colors.append(candidate)
        self._oklab.append(hsl_to_oklab(*candidate))
        self._hexes.add(candidate.hex)
        self.memory.register_hex(candidate.hex)
        return candidate

    def preload(self, colors: Sequence[HslColor]) -> None:
        """Seed already-accepted colors; they are not re-registered in memory."""
        for color in colors:
            self.colors.append(color)
            self._oklab.append(hsl_to_oklab(*color))
            self._hexes.add(color.hex)

    def conflicts(self, candidate: HslColor) -> bool:
        lab = hsl_to_oklab(*candidate)
        threshold = self.policy.min_perceptual_distance
        return any(oklab_distance(lab, other) < threshold for other in self._oklab)

    def try_add(self, h: float, s: float, l: float) -> Optional[HslColor]:
        """
        Attempt to accept one color.

        Args:
            h, s, l: Candidate in HSL; hue is wrapped, s/l clamped

        Returns:
            The accepted color, or None when the palette is full or the
            candidate is too similar to an accepted color
        """
        if self.is_full:
            return None
        candidate = self._avoid_recent(self._clamped(h, s, l))
        if candidate.hex in self._hexes or self.conflicts(candidate):
            return None
        return self._accept(candidate)

    def safe_add(self, h: float, s: float, l: float,
                 hue_shift: Optional[float] = None,
                 light_shift: Optional[float] = None) -> Optional[HslColor]:
        """
        Insert a color, always making progress.

        Tries the candidate, then a lightness shift either way, then a hue
        shift either way; finally forces acceptance with a unique hex.
        Pass hue_shift=0 for strategies whose hue must not drift.
        """
        if self.is_full:
            return None
        hue_shift = self.policy.fallback_hue_shift if hue_shift is None else hue_shift
        light_shift = self.policy.fallback_light_shift if light_shift is None else light_shift

        direction = 1.0 if l < 50 else -1.0
        attempts = [
            (h, s, l),
            (h, s, l + direction * light_shift),
            (h, s, l - direction * light_shift),
        ]
        if hue_shift:
            attempts.append((h + hue_shift, s, l))
            attempts.append((h - hue_shift, s, l))

        for attempt in attempts:
            accepted = self.try_add(*attempt)
            if accepted is not None:
                return accepted

        return self.force_add(h, s, l)

    def force_add(self, h: float, s: float, l: float) -> Optional[HslColor]:
        """Accept a best-effort candidate; only hex uniqueness is enforced."""
        if self.is_full:
            return None
        candidate = nudge_until_unique(self._clamped(h, s, l), self._hexes, self.rng, self.policy)
        self.forced_count += 1
        logger.debug(f"Forced insertion {candidate.hex} after similarity rejections")
        return self._accept(candidate)
