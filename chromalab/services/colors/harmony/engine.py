"""
Chromalab Palette Generation Engine

Coordinates one generation: base-point selection against the hue history,
strategy dispatch through the registry, gap filling, contrast enforcement,
ordering and the structural-signature retry. State that must outlive a call
lives in an injected AntiRepetitionMemory; randomness comes from an
injected random.Random so tests can replay a generation exactly.
"""

import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple, Union

from loguru import logger

from . import GenerationMode, HslColor
from .builder import PaletteBuilder, nudge_until_unique
from .contrast import enforce_contrast_and_vibrancy
from .ordering import apply_ordering
from .policy import GenerationPolicy, DEFAULT_POLICY
from .random_mix import GOLDEN_ANGLE
from .registry import StrategyContext, StrategySpec, get_mode, resolve
from .signature import palette_signature
from .vibes import Vibe, pick_vibe, seeded_vibe
from ..conversions import ColorRecord, create_color_record, hex_to_hsl, is_valid_hex
from ..memory import AntiRepetitionMemory, get_default_memory

# Modes drawn from when a regeneration does not name one
REGENERATE_MODES = (
    GenerationMode.COMPLEMENTARY,
    GenerationMode.MONOCHROMATIC,
    GenerationMode.ANALOGOUS,
    GenerationMode.RANDOM,
)

ModeLike = Union[str, GenerationMode]
RngLike = Union[None, int, random.Random]


@dataclass
class GenerationResult:
    """A finished palette plus how it was produced."""
    colors: List[ColorRecord]
    mode: str
    strategy: str = ""
    vibe: str = ""
    base_hue: Optional[float] = None
    seeded: bool = False
    signature: str = ""
    retried: bool = False
    adjustments: List[str] = field(default_factory=list)
    forced: int = 0

    @property
    def hexes(self) -> List[str]:
        return [c.hex for c in self.colors]


class PaletteGenerator:
    """
    Palette generator bound to one memory, one random source and one policy.

    Args:
        memory: Anti-repetition memory; the process-wide instance by default
        rng: random.Random, an int seed, or None for OS entropy
        policy: Tunable thresholds
    """

    def __init__(self, memory: Optional[AntiRepetitionMemory] = None, rng: RngLike = None,
                 policy: Optional[GenerationPolicy] = None):
        self.memory = memory if memory is not None else get_default_memory()
        self.rng = rng if isinstance(rng, random.Random) else random.Random(rng)
        self.policy = policy or DEFAULT_POLICY

    def _choose_base(self, seed_hex: Optional[str]) -> Tuple[HslColor, Vibe, bool]:
        if seed_hex is not None:
            if is_valid_hex(seed_hex):
                base = HslColor(*hex_to_hsl(seed_hex))
                return base, seeded_vibe(base.s, base.l), True
            logger.warning(f"Ignoring malformed seed color {seed_hex!r}")

        hue = self.rng.uniform(0, 360)
        for _ in range(self.policy.hue_resample_attempts):
            if not self.memory.hue_recently_used(hue, self.policy.hue_exclusion_zone):
                break
            hue = self.rng.uniform(0, 360)
        self.memory.register_hue(hue)

        vibe = pick_vibe(self.rng)
        base = HslColor(hue, vibe.saturation(self.rng), vibe.lightness(self.rng))
        return base, vibe, False

    def _run_once(self, mode: str, count: int, base: HslColor, vibe: Vibe,
                  seeded: bool) -> Tuple[GenerationResult, StrategySpec]:
        spec = resolve(mode, self.rng)
        builder = PaletteBuilder(count, self.memory, self.rng, self.policy)
        ctx = StrategyContext(base=base, vibe=vibe, count=count, rng=self.rng,
                              builder=builder, seeded=seeded)
        spec.func(ctx)

        # strategies that under-deliver are topped up along the golden angle
        step = len(builder)
        while not builder.is_full:
            builder.safe_add(base.h + step * GOLDEN_ANGLE, vibe.saturation(self.rng), vibe.lightness(self.rng))
            step += 1

        colors = list(builder.colors)
        forced = builder.forced_count
        adjustments: List[str] = []
        if spec.enforce_contrast:
            repaired, adjustments = enforce_contrast_and_vibrancy(colors, self.rng, self.policy)
            if adjustments:
                colors, settle_forced = self._settle_repairs(colors, repaired)
                forced += settle_forced

        ordered = apply_ordering(colors, spec.ordering, self.rng, self.policy)
        result = GenerationResult(
            colors=[create_color_record(c.hex) for c in ordered],
            mode=mode,
            strategy=spec.name,
            vibe=vibe.name,
            base_hue=base.h,
            seeded=seeded,
            signature=palette_signature(ordered, self.policy),
            adjustments=adjustments,
            forced=forced,
        )
        return result, spec

    def _settle_repairs(self, before: Sequence[HslColor],
                        after: Sequence[HslColor]) -> Tuple[List[HslColor], int]:
        """
        Re-insert contrast repairs through the similarity check.

        Untouched entries are preloaded; each rewritten entry goes through
        safe_add so a repair that lands on top of another color is shifted
        in lightness or hue instead of producing a near-duplicate pair.

        Returns:
            (settled palette in the original positions, forced insertions)
        """
        changed = [i for i, (old, new) in enumerate(zip(before, after)) if old != new]
        builder = PaletteBuilder(len(after), self.memory, self.rng, self.policy)
        builder.preload([c for i, c in enumerate(after) if i not in changed])

        settled = list(after)
        for i in changed:
            repair = after[i]
            settled[i] = builder.safe_add(repair.h, repair.s, repair.l)
        return settled, builder.forced_count

    def generate(self, mode: ModeLike, count: int, seed_hex: Optional[str] = None) -> GenerationResult:
        """
        Generate a palette of exactly `count` distinct colors.

        Args:
            mode: Generation mode name or GenerationMode
            count: Number of colors; values <= 0 yield an empty palette
            seed_hex: Optional seed color, authoritative for the base point

        Raises:
            ValueError: If the mode is unknown
        """
        mode_name = get_mode(mode).name
        if count <= 0:
            return GenerationResult(colors=[], mode=mode_name, seeded=seed_hex is not None)

        base, vibe, seeded = self._choose_base(seed_hex)
        result, spec = self._run_once(mode_name, count, base, vibe, seeded)

        if spec.check_signature:
            retries = 0
            while (not seeded and retries < self.policy.signature_retries
                   and self.memory.contains_signature(result.signature)):
                retries += 1
                logger.debug(f"Signature repeat for {mode_name}/{result.strategy}, regenerating")
                base, vibe, _ = self._choose_base(None)
                result, spec = self._run_once(mode_name, count, base, vibe, seeded)
                result.retried = True
            self.memory.register_signature(result.signature)

        logger.debug(
            f"Generated {count} colors mode={mode_name} strategy={result.strategy} "
            f"vibe={result.vibe} base_hue={result.base_hue:.1f} adjustments={result.adjustments}"
        )
        return result

    def regenerate(self, previous: Sequence[ColorRecord], mode: Optional[ModeLike] = None,
                   seed_hex: Optional[str] = None) -> GenerationResult:
        """
        Replace every unlocked color of an existing palette.

        Locked records keep their position untouched; each unlocked slot takes
        the fresh color at the same position, nudged when its hex collides with
        a locked one. Without a mode one of REGENERATE_MODES is drawn.
        """
        if mode is None:
            mode = self.rng.choice(REGENERATE_MODES)
        fresh = self.generate(mode, len(previous), seed_hex)
        if not previous:
            return fresh

        taken = {r.hex for r in previous if r.locked}
        colors: List[ColorRecord] = []
        for old, new in zip(previous, fresh.colors):
            if old.locked:
                colors.append(old)
                continue
            record = new
            if record.hex in taken:
                unique = nudge_until_unique(HslColor(*hex_to_hsl(record.hex)), taken, self.rng, self.policy)
                record = create_color_record(unique.hex)
            taken.add(record.hex)
            colors.append(record)

        return replace(fresh, colors=colors)


def generate_palette(mode: ModeLike, count: int, seed_hex: Optional[str] = None,
                     memory: Optional[AntiRepetitionMemory] = None, rng: RngLike = None,
                     policy: Optional[GenerationPolicy] = None) -> List[ColorRecord]:
    """Generate a palette and return only its color records."""
    return PaletteGenerator(memory, rng, policy).generate(mode, count, seed_hex).colors


def regenerate_palette(previous: Sequence[ColorRecord], mode: Optional[ModeLike] = None,
                       seed_hex: Optional[str] = None, memory: Optional[AntiRepetitionMemory] = None,
                       rng: RngLike = None) -> List[ColorRecord]:
    return PaletteGenerator(memory, rng).regenerate(previous, mode, seed_hex).colors
