"""
Palette ordering: per-strategy ordering policy and the visual-progression sort.
"""

import random
from typing import List, Sequence, TypeVar

from .policy import GenerationPolicy, DEFAULT_POLICY
from .registry import ORDER_PRESERVE, ORDER_STRICT, ORDER_SHUFFLE
from ..conversions import ColorRecord, hex_to_hsl

T = TypeVar("T")


def apply_ordering(colors: Sequence[T], ordering: str, rng: random.Random,
                   policy: GenerationPolicy = DEFAULT_POLICY) -> List[T]:
    """
    Return a new list arranged according to an ordering policy.

    preserve: generated order kept (gradients)
    strict:   kept, but shuffled with policy.strict_shuffle_probability
    shuffle:  uniform random permutation
    """
    result = list(colors)
    if ordering == ORDER_PRESERVE:
        return result
    if ordering == ORDER_STRICT:
        if rng.random() < policy.strict_shuffle_probability:
            rng.shuffle(result)
        return result
    if ordering == ORDER_SHUFFLE:
        rng.shuffle(result)
        return result
    raise ValueError(f"Unknown ordering policy: {ordering}")


def sort_by_visual_progression(records: Sequence[ColorRecord],
                               achromatic_threshold: float = DEFAULT_POLICY.achromatic_saturation) -> List[ColorRecord]:
    """
    Reorder colors into a smooth visual progression.

    Achromatic colors (saturation below the threshold) come first, dark to
    light. Chromatic colors follow in hue order, rotated so the sequence
    starts right after the largest circular hue gap; the wrap-around seam
    then sits where it is least visible. Deterministic and stable.
    """
    achromatic = []
    chromatic = []
    for record in records:
        h, s, l = hex_to_hsl(record.hex)
        if s < achromatic_threshold:
            achromatic.append((l, record))
        else:
            chromatic.append((h, record))

    achromatic.sort(key=lambda item: item[0])
    chromatic.sort(key=lambda item: item[0])

    if len(chromatic) > 1:
        hues = [h for h, _ in chromatic]
        # gap i sits between hue i and hue i+1; the last one wraps around
        gaps = [hues[i + 1] - hues[i] for i in range(len(hues) - 1)]
        gaps.append(hues[0] + 360.0 - hues[-1])
        widest = max(range(len(gaps)), key=lambda i: gaps[i])
        start = (widest + 1) % len(chromatic)
        chromatic = chromatic[start:] + chromatic[:start]

    return [r for _, r in achromatic] + [r for _, r in chromatic]
