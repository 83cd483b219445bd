"""
Contrast and vibrancy enforcement.

Classifies a finished palette as washed out, dull or flat and repairs the
worst problem by rewriting one or two entries. Pure: the input sequence is
never modified, a new list is returned alongside rationale tokens.
"""

import random
from typing import List, Sequence, Tuple

from . import HslColor
from .policy import GenerationPolicy, DEFAULT_POLICY

WASHED_OUT = "washed_out"
DULL = "dull"
FLAT = "flat"


def classify_palette(colors: Sequence[HslColor], policy: GenerationPolicy = DEFAULT_POLICY) -> List[str]:
    """
    Detect perceptual problems in a palette.

    Returns:
        Issue tags in repair priority order (may be empty)
    """
    if not colors:
        return []
    n = len(colors)
    issues = []

    washed = sum(
        1 for c in colors
        if c.l >= policy.washed_out_lightness and c.chroma < policy.washed_out_chroma
    )
    if washed / n >= policy.washed_out_ratio:
        issues.append(WASHED_OUT)

    dull = sum(1 for c in colors if c.chroma < policy.dull_chroma)
    if dull / n >= policy.dull_ratio:
        issues.append(DULL)

    lightness = [c.l for c in colors]
    if max(lightness) - min(lightness) < policy.flat_lightness_range:
        issues.append(FLAT)

    return issues


def _vivid_pop(color: HslColor, rng: random.Random) -> HslColor:
    return HslColor(color.h, rng.uniform(85, 100), rng.uniform(45, 56))


def _fix_washed_out(colors: List[HslColor], rng: random.Random) -> List[str]:
    lightest = max(range(len(colors)), key=lambda i: colors[i].l)
    anchor = colors[lightest]
    colors[lightest] = HslColor(anchor.h, max(anchor.s, rng.uniform(40, 70)), rng.uniform(12, 22))
    tokens = ["dark-anchor"]
    if len(colors) >= 4:
        candidates = [i for i in range(len(colors)) if i != lightest]
        target = min(candidates, key=lambda i: colors[i].chroma)
        colors[target] = _vivid_pop(colors[target], rng)
        tokens.append("vivid-pop")
    return tokens


def _fix_dull(colors: List[HslColor], rng: random.Random) -> List[str]:
    pops = 2 if len(colors) >= 5 else 1
    order = sorted(range(len(colors)), key=lambda i: colors[i].chroma)
    for i in order[:pops]:
        colors[i] = _vivid_pop(colors[i], rng)
    return ["vivid-pop"] * pops


def _fix_flat(colors: List[HslColor], rng: random.Random) -> List[str]:
    darkest = min(range(len(colors)), key=lambda i: colors[i].l)
    lightest = max((i for i in range(len(colors)) if i != darkest), key=lambda i: colors[i].l)
    colors[darkest] = colors[darkest]._replace(l=rng.uniform(10, 20))
    colors[lightest] = colors[lightest]._replace(l=rng.uniform(82, 92))
    return ["stretch-extremes"]


_FIXES = {
    WASHED_OUT: _fix_washed_out,
    DULL: _fix_dull,
    FLAT: _fix_flat,
}


def enforce_contrast_and_vibrancy(colors: Sequence[HslColor], rng: random.Random,
                                  policy: GenerationPolicy = DEFAULT_POLICY) -> Tuple[List[HslColor], List[str]]:
    """
    Repair the highest-priority issue of a palette.

    Only one repair category is applied per call and hues are preserved.
    Palettes shorter than policy.enforcement_min_count are returned as is.

    Returns:
        (new palette, rationale tokens)
    """
    result = list(colors)
    if len(result) < policy.enforcement_min_count:
        return result, []
    issues = classify_palette(result, policy)
    if not issues:
        return result, []
    issue = issues[0]
    tokens = _FIXES[issue](result, rng)
    return result, [issue] + tokens
