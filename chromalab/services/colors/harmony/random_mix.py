"""
Sub-strategies of the "random" meta-mode.

Each call of the meta-mode picks one of these uniformly, which keeps every
individual palette internally coherent while successive palettes differ in
structure, not just in hue.
"""

from .registry import (
    StrategyContext, mode, random_strategy,
    ORDER_PRESERVE, ORDER_STRICT, ORDER_SHUFFLE,
)
from ..conversions import clamp, rgb_to_hsl
from ..perceptual import hsl_to_oklab, oklab_to_rgb

GOLDEN_ANGLE = 137.50776405
RHYTHM_STEPS = [GOLDEN_ANGLE, 97.0, 131.0, 151.0, 173.0, 211.0]


@mode("random", check_signature=True)
def random_mode(ctx: StrategyContext) -> None:
    """Registry marker only; resolve() swaps in one of the sub-strategies below."""


@random_strategy("golden-angle")
def golden_angle(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        ctx.add(ctx.base.h + i * GOLDEN_ANGLE, ctx.vibe_s(), ctx.vibe_l())


@random_strategy("analogous-walk", ordering=ORDER_STRICT)
def analogous_walk(ctx: StrategyContext) -> None:
    step = ctx.uniform(20, 45) * (1 if ctx.chance(0.5) else -1)
    hue = ctx.base.h
    for _ in range(ctx.count):
        ctx.add(
            hue,
            clamp(ctx.base.s + ctx.jitter(10), 30, 100),
            clamp(ctx.base.l + ctx.jitter(15), 20, 90),
        )
        hue += step


@random_strategy("triadic-scatter")
def triadic_scatter(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        offset = (i % 3) * 120 + ctx.jitter(20)
        ctx.add(ctx.base.h + offset, ctx.uniform(60, 95), ctx.uniform(30, 80))


@random_strategy("neutral-pop")
def neutral_pop(ctx: StrategyContext) -> None:
    pop_count = 1 if ctx.count <= 3 else 2
    pops = set(ctx.rng.sample(range(ctx.count), min(pop_count, ctx.count)))
    neutral_slots = ctx.count - len(pops)
    neutral_step = 77.0 / max(neutral_slots - 1, 1)
    neutral_index = 0
    for i in range(ctx.count):
        if i in pops:
            ctx.add(ctx.uniform(0, 360), ctx.uniform(80, 100), ctx.uniform(48, 62))
        else:
            lightness = 15 + neutral_index * neutral_step + ctx.jitter(3)
            ctx.add(ctx.base.h + ctx.jitter(30), ctx.uniform(0, 12), lightness)
            neutral_index += 1


@random_strategy("contrast-clash")
def contrast_clash(ctx: StrategyContext) -> None:
    hue = ctx.base.h
    for i in range(ctx.count):
        lightness = ctx.uniform(10, 25) if i % 2 == 0 else ctx.uniform(80, 95)
        ctx.add(hue, ctx.uniform(70, 100), lightness)
        hue += ctx.uniform(90, 180)


@random_strategy("cluster-split")
def cluster_split(ctx: StrategyContext) -> None:
    clusters = 3 if ctx.count >= 5 and ctx.chance(0.5) else 2
    anchors = [ctx.base.h + j * (360.0 / clusters) + ctx.jitter(20) for j in range(clusters)]
    per_cluster = -(-ctx.count // clusters)
    light_step = 50.0 / max(per_cluster - 1, 1)
    for i in range(ctx.count):
        member = i // clusters
        ctx.add(
            anchors[i % clusters] + ctx.jitter(12),
            ctx.uniform(45, 90),
            25 + member * light_step + ctx.jitter(5),
        )


@random_strategy("anchor-accent")
def anchor_accent(ctx: StrategyContext) -> None:
    ctx.add(ctx.base.h, ctx.base.s, ctx.base.l)
    ctx.add(ctx.base.h + 180 + ctx.jitter(30), ctx.uniform(85, 100), ctx.uniform(50, 60))
    remaining = ctx.count - 2
    step = 75.0 / max(remaining - 1, 1)
    for i in range(remaining):
        ctx.add(
            ctx.base.h + ctx.jitter(8),
            clamp(ctx.base.s - ctx.uniform(10, 40), 5, 100),
            15 + i * step,
        )


@random_strategy("polychrome")
def polychrome(ctx: StrategyContext) -> None:
    spacing = 360.0 / ctx.count
    for i in range(ctx.count):
        ctx.add(ctx.base.h + i * spacing + ctx.jitter(spacing / 4), ctx.uniform(65, 95), ctx.uniform(45, 65))


@random_strategy("divergent-split", ordering=ORDER_PRESERVE, enforce_contrast=False)
def divergent_split(ctx: StrategyContext) -> None:
    first = ctx.base.h
    second = ctx.base.h + ctx.uniform(150, 210)
    for i in range(ctx.count):
        t = i / (ctx.count - 1) if ctx.count > 1 else 0.0
        edge = abs(2 * t - 1)  # 1 at the ends, 0 in the middle
        hue = first if t < 0.5 else second
        ctx.add(hue, 25 + 65 * edge, 90 - 62 * edge, hue_shift=0)


@random_strategy("complex-rhythm")
def complex_rhythm(ctx: StrategyContext) -> None:
    step = ctx.rng.choice(RHYTHM_STEPS)
    for i in range(ctx.count):
        lightness = 30 + (i * 37) % 55
        ctx.add(ctx.base.h + i * step, ctx.vibe_s(), lightness)


@random_strategy("cinematic")
def cinematic(ctx: StrategyContext) -> None:
    warm = ctx.uniform(18, 40)
    cool = ctx.uniform(180, 210)
    for i in range(ctx.count):
        if i % 2 == 0:
            ctx.add(cool + ctx.jitter(10), ctx.uniform(35, 70), ctx.uniform(12, 35))
        else:
            ctx.add(warm + ctx.jitter(8), ctx.uniform(55, 90), ctx.uniform(55, 80))


@random_strategy("smooth-gradient", ordering=ORDER_PRESERVE, enforce_contrast=False)
def smooth_gradient(ctx: StrategyContext) -> None:
    direction = 1 if ctx.chance(0.5) else -1
    start = hsl_to_oklab(ctx.base.h, ctx.uniform(60, 95), ctx.uniform(20, 35))
    end = hsl_to_oklab(ctx.base.h + direction * ctx.uniform(60, 160), ctx.uniform(60, 95), ctx.uniform(70, 88))
    for i in range(ctx.count):
        t = i / (ctx.count - 1) if ctx.count > 1 else 0.0
        lab = tuple(a + (b - a) * t for a, b in zip(start, end))
        h, s, l = rgb_to_hsl(*oklab_to_rgb(*lab))
        ctx.add(h, s, l, hue_shift=0, light_shift=4)


@random_strategy("iridescent", ordering=ORDER_STRICT)
def iridescent(ctx: StrategyContext) -> None:
    step = ctx.uniform(25, 45)
    for i in range(ctx.count):
        ctx.add(ctx.base.h + i * step, ctx.uniform(15, 35), ctx.uniform(70, 90))


@random_strategy("neon-spread", enforce_contrast=False)
def neon_spread(ctx: StrategyContext) -> None:
    spacing = 360.0 / ctx.count
    for i in range(ctx.count):
        ctx.add(ctx.base.h + i * spacing + ctx.jitter(spacing / 5), 100, ctx.uniform(50, 58))


@random_strategy("neutral-contrast")
def neutral_contrast(ctx: StrategyContext) -> None:
    warm_neutral = ctx.chance(0.5)
    ctx.add(ctx.uniform(200, 260), ctx.uniform(5, 20), ctx.uniform(5, 12))        # dark base
    ctx.add(ctx.uniform(10, 40), ctx.uniform(85, 100), ctx.uniform(50, 65))       # warm accent
    ctx.add(ctx.uniform(180, 220), ctx.uniform(20, 50), ctx.uniform(80, 95))      # cool light accent
    soft_hue = ctx.uniform(320, 360) if warm_neutral else ctx.uniform(200, 220)
    ctx.add(soft_hue, ctx.uniform(5, 20), ctx.uniform(92, 98))                    # soft neutral
    ctx.add(ctx.uniform(200, 240), ctx.uniform(5, 15), ctx.uniform(40, 55))       # mid gray
    while not ctx.full:
        ctx.add(ctx.base.h + ctx.jitter(20), ctx.uniform(50, 80), ctx.uniform(40, 60))


@random_strategy("pastel-dream", ordering=ORDER_SHUFFLE)
def pastel_dream(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        ctx.add(ctx.base.h + i * GOLDEN_ANGLE + ctx.jitter(15), ctx.uniform(30, 70), ctx.uniform(82, 94))


@random_strategy("monochrome-texture")
def monochrome_texture(ctx: StrategyContext) -> None:
    step = 80.0 / max(ctx.count - 1, 1)
    for i in range(ctx.count):
        ctx.add(ctx.base.h + ctx.jitter(10), ctx.uniform(20, 90), 10 + i * step + ctx.jitter(step / 3))
