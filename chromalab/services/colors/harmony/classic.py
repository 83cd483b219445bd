"""
Classical harmony schemes.

Canonical rules, one per mode:
    monochromatic        base hue ±4°, evenly stepped lightness
    analogous            20-35° steps centred on the base hue
    triadic              base + 0/120/240° (±8° jitter)
    tetradic             square: base + 0/90/180/270° (±8° jitter)
    complementary        base + 0/180° (±5° jitter)
    split-complementary  base, base+180±spread with spread 20-40°
    compound             base + 0/180/30/210/150° (±10° jitter)
    shades               base hue ±5°, lightness spread across the range
"""

from .registry import StrategyContext, mode, ORDER_STRICT, ORDER_SHUFFLE
from ..conversions import clamp


def _spread_lightness(ctx: StrategyContext, low: float, high: float):
    """Evenly spaced lightness values from low to high, one per slot."""
    step = (high - low) / max(ctx.count - 1, 1)
    return [low + i * step for i in range(ctx.count)], step


@mode("monochromatic", ordering=ORDER_STRICT, enforce_contrast=False)
def monochromatic(ctx: StrategyContext) -> None:
    start_l = ctx.uniform(12, 28)
    end_l = ctx.uniform(80, 94)
    lightness, step = _spread_lightness(ctx, start_l, end_l)
    for l in lightness:
        ctx.add(
            ctx.base.h + ctx.jitter(4),
            clamp(ctx.base.s + ctx.jitter(12), 0, 100),
            l,
            hue_shift=0,
            light_shift=max(step / 2, 1.0),
        )


@mode("analogous", ordering=ORDER_STRICT)
def analogous(ctx: StrategyContext) -> None:
    spread = ctx.uniform(20, 35)
    if ctx.count > 1:
        # keep the whole fan inside the wheel for long palettes
        spread = min(spread, 300.0 / (ctx.count - 1))
    start = ctx.base.h - (ctx.count - 1) * spread / 2
    for i in range(ctx.count):
        ctx.add(start + i * spread, ctx.vibe_s(), ctx.vibe_l(), hue_shift=spread / 3)


@mode("triadic")
def triadic(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        ctx.add(ctx.base.h + (i % 3) * 120 + ctx.jitter(8), ctx.vibe_s(), ctx.vibe_l(), hue_shift=10)


@mode("tetradic")
def tetradic(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        ctx.add(ctx.base.h + (i % 4) * 90 + ctx.jitter(8), ctx.vibe_s(), ctx.vibe_l(), hue_shift=10)


@mode("complementary")
def complementary(ctx: StrategyContext) -> None:
    for i in range(ctx.count):
        ctx.add(ctx.base.h + (i % 2) * 180 + ctx.jitter(5), ctx.vibe_s(), ctx.vibe_l(), hue_shift=10)


@mode("split-complementary")
def split_complementary(ctx: StrategyContext) -> None:
    spread = ctx.uniform(20, 40)
    anchors = [ctx.base.h, ctx.base.h + 180 - spread, ctx.base.h + 180 + spread]
    for i in range(ctx.count):
        ctx.add(anchors[i % 3] + ctx.jitter(5), ctx.vibe_s(), ctx.vibe_l(), hue_shift=10)


@mode("compound", ordering=ORDER_SHUFFLE)
def compound(ctx: StrategyContext) -> None:
    offsets = [0, 180, 30, 210, 150]
    for i in range(ctx.count):
        ctx.add(ctx.base.h + offsets[i % len(offsets)] + ctx.jitter(10), ctx.vibe_s(), ctx.vibe_l())


@mode("shades", ordering=ORDER_SHUFFLE, enforce_contrast=False)
def shades(ctx: StrategyContext) -> None:
    lightness, step = _spread_lightness(ctx, ctx.uniform(10, 20), ctx.uniform(85, 95))
    for l in lightness:
        ctx.add(
            ctx.base.h + ctx.jitter(5),
            ctx.uniform(20, 100),
            l + ctx.jitter(step / 4),
            hue_shift=0,
            light_shift=max(step / 2, 1.0),
        )
