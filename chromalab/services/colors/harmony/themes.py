"""
Thematic preset strategies.

Presets use hardcoded hue/saturation/lightness recipes rather than
angular rules; the base hue only steers where a recipe has a free choice
(brand hue, starting recipe slot).
"""

from typing import List, Tuple

from .registry import StrategyContext, mode, ORDER_STRICT, ORDER_SHUFFLE
from ..conversions import normalize_hue

Range = Tuple[float, float]

NEON_HUES = [300, 180, 60, 330, 270, 120, 200, 20]
MEMPHIS_HUES = [0, 50, 120, 180, 280, 320]

# (hue, saturation, lightness) ranges
EARTH_RECIPES: List[Tuple[Range, Range, Range]] = [
    ((12, 22), (45, 65), (38, 50)),   # terracotta
    ((24, 32), (50, 70), (28, 40)),   # rust
    ((36, 46), (55, 75), (48, 60)),   # ochre
    ((32, 42), (25, 45), (78, 88)),   # sand
    ((65, 85), (20, 40), (30, 45)),   # olive
    ((18, 30), (25, 45), (12, 22)),   # umber
    ((25, 40), (10, 25), (60, 72)),   # clay
]

HYPER_WARM_HUES: Range = (-15, 50)


@mode("cyberpunk", ordering=ORDER_SHUFFLE)
def cyberpunk(ctx: StrategyContext) -> None:
    roll = ctx.rng.random()

    if roll < 0.34:
        # neon on a dark cool base
        ctx.add(ctx.uniform(220, 280), ctx.uniform(30, 50), ctx.uniform(5, 12))
        start = ctx.randint(0, len(NEON_HUES) - 1)
        for i in range(1, ctx.count):
            hue = NEON_HUES[(start + i) % len(NEON_HUES)] + ctx.jitter(10)
            ctx.add(hue, ctx.uniform(90, 100), ctx.uniform(50, 62))

    elif roll < 0.67:
        # terminal green on black
        ctx.add(ctx.uniform(100, 140), ctx.uniform(0, 15), ctx.uniform(4, 8))
        lightness_step = 50.0 / max(ctx.count - 1, 1)
        for i in range(1, ctx.count):
            ctx.add(120 + ctx.jitter(40), ctx.uniform(80, 100), 30 + i * lightness_step + ctx.jitter(4))

    else:
        # synthwave sunset: violet through magenta into orange
        start = 260 + ctx.jitter(20)
        end = 400 + ctx.jitter(10)
        step = (end - start) / max(ctx.count - 1, 1)
        for i in range(ctx.count):
            ctx.add(start + i * step, ctx.uniform(80, 100), ctx.uniform(40, 70))


@mode("modern-ui", ordering=ORDER_SHUFFLE, enforce_contrast=False)
def modern_ui(ctx: StrategyContext) -> None:
    brand = ctx.base.h
    ctx.add(brand, ctx.uniform(70, 90), ctx.uniform(45, 58))                    # brand
    ctx.add(brand, ctx.uniform(5, 12), ctx.uniform(95, 98), hue_shift=0)        # surface
    ctx.add(brand, ctx.uniform(10, 22), ctx.uniform(8, 13), hue_shift=0)        # ink
    ctx.add(brand + 180 + ctx.jitter(15), ctx.uniform(75, 95), ctx.uniform(50, 62))  # accent
    while not ctx.full:
        # muted fills
        ctx.add(brand + ctx.jitter(40), ctx.uniform(12, 35), ctx.uniform(35, 85))


@mode("retro-future", ordering=ORDER_SHUFFLE)
def retro_future(ctx: StrategyContext) -> None:
    if ctx.chance(0.5):
        # Memphis: loud primaries with black and white punctuation
        for _ in range(ctx.count):
            if ctx.chance(0.15):
                ctx.add(0, 0, 10)
            elif ctx.chance(0.15):
                ctx.add(0, 0, 95)
            else:
                hue = MEMPHIS_HUES[ctx.randint(0, len(MEMPHIS_HUES) - 1)] + ctx.jitter(10)
                ctx.add(hue, ctx.uniform(70, 90), ctx.uniform(50, 70))
    else:
        # Y2K chrome: cool silvers with holographic accents
        for _ in range(ctx.count):
            if ctx.chance(0.6):
                ctx.add(210 + ctx.jitter(10), ctx.uniform(5, 20), ctx.uniform(55, 95))
            else:
                ctx.add(ctx.uniform(0, 360), ctx.uniform(50, 80), ctx.uniform(70, 90))


@mode("warm-earth", ordering=ORDER_STRICT, check_signature=True)
def warm_earth(ctx: StrategyContext) -> None:
    start = int(ctx.base.h) % len(EARTH_RECIPES)
    picks = []
    for i in range(ctx.count):
        (h0, h1), (s0, s1), (l0, l1) = EARTH_RECIPES[(start + i) % len(EARTH_RECIPES)]
        # later laps around the recipe list drift lighter so repeats stay apart
        lap = i // len(EARTH_RECIPES)
        picks.append((ctx.uniform(h0, h1), ctx.uniform(s0, s1), ctx.uniform(l0, l1) + 8 * lap))
    # dark-to-light progression
    for h, s, l in sorted(picks, key=lambda p: p[2]):
        ctx.add(h, s, l, hue_shift=12)


@mode("hyper-warm", ordering=ORDER_STRICT, check_signature=True)
def hyper_warm(ctx: StrategyContext) -> None:
    picks = []
    if ctx.count >= 4:
        picks.append((ctx.uniform(345, 365), ctx.uniform(70, 90), ctx.uniform(15, 25)))  # deep burgundy
    if ctx.count >= 5:
        picks.append((ctx.uniform(35, 50), ctx.uniform(80, 100), ctx.uniform(85, 92)))   # cream
    slots = ctx.count - len(picks)
    low, high = HYPER_WARM_HUES
    step = (high - low) / max(slots, 1)
    for i in range(slots):
        picks.append((low + (i + 0.5) * step + ctx.jitter(step / 3), ctx.uniform(80, 100), ctx.uniform(40, 65)))
    # hue progression from crimson through orange to amber
    for h, s, l in sorted(picks, key=lambda p: normalize_hue(p[0] + 30)):
        ctx.add(h, s, l, hue_shift=8)
