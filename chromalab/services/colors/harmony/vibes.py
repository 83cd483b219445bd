"""
Vibes: named saturation/lightness envelopes biasing a palette's mood.

The weight table leans toward vivid and bright so unseeded output is
rarely washed out.
"""

import random
from dataclasses import dataclass
from typing import List, Tuple

from ..conversions import clamp


@dataclass(frozen=True)
class Vibe:
    name: str
    s_min: float
    s_max: float
    l_min: float
    l_max: float

    def saturation(self, rng: random.Random) -> float:
        return rng.uniform(self.s_min, self.s_max)

    def lightness(self, rng: random.Random) -> float:
        return rng.uniform(self.l_min, self.l_max)


VIBE_TABLE: List[Tuple[Vibe, float]] = [
    (Vibe("vivid", 65, 100, 45, 60), 0.32),
    (Vibe("bright", 50, 90, 62, 82), 0.22),
    (Vibe("dynamic", 40, 95, 25, 80), 0.16),
    (Vibe("deep", 50, 90, 15, 38), 0.14),
    (Vibe("pastel", 30, 70, 78, 92), 0.10),
    (Vibe("muted", 10, 35, 35, 65), 0.06),
]

VIBES = {vibe.name: vibe for vibe, _ in VIBE_TABLE}


def pick_vibe(rng: random.Random) -> Vibe:
    """Weighted draw from VIBE_TABLE."""
    roll = rng.random()
    cumulative = 0.0
    for vibe, weight in VIBE_TABLE:
        cumulative += weight
        if roll < cumulative:
            return vibe
    return VIBE_TABLE[-1][0]


def seeded_vibe(s: float, l: float, spread: float = 10.0) -> Vibe:
    """Envelope centred on a caller-supplied seed color."""
    return Vibe(
        "seeded",
        clamp(s - spread, 0.0, 100.0),
        clamp(s + spread, 0.0, 100.0),
        clamp(l - spread, 0.0, 100.0),
        clamp(l + spread, 0.0, 100.0),
    )
