"""
Strategy registry for the generation engine.

Modes and "random" sub-strategies register themselves with decorators;
the engine resolves a mode name to a StrategySpec instead of walking a
conditional chain.
"""

import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from . import GenerationMode, HslColor
from .builder import PaletteBuilder
from .vibes import Vibe

# Ordering policies
ORDER_PRESERVE = "preserve"  # gradient-like, never shuffled
ORDER_STRICT = "strict"      # kept in order, shuffled with a small probability
ORDER_SHUFFLE = "shuffle"    # always shuffled


@dataclass
class StrategyContext:
    """Everything a strategy may read while filling a palette."""
    base: HslColor
    vibe: Vibe
    count: int
    rng: random.Random
    builder: PaletteBuilder
    seeded: bool = False

    @property
    def full(self) -> bool:
        return self.builder.is_full

    @property
    def remaining(self) -> int:
        return max(0, self.count - len(self.builder))

    def randint(self, low: int, high: int) -> int:
        """Inclusive integer draw."""
        return self.rng.randint(low, high)

    def uniform(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def jitter(self, amount: float) -> float:
        return self.rng.uniform(-amount, amount)

    def chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def vibe_s(self) -> float:
        return self.vibe.saturation(self.rng)

    def vibe_l(self) -> float:
        return self.vibe.lightness(self.rng)

    def add(self, h: float, s: float, l: float, **kwargs) -> Optional[HslColor]:
        return self.builder.safe_add(h, s, l, **kwargs)


StrategyFn = Callable[[StrategyContext], None]


@dataclass(frozen=True)
class StrategySpec:
    name: str
    func: StrategyFn
    ordering: str = ORDER_SHUFFLE
    enforce_contrast: bool = True
    check_signature: bool = False


_MODES: Dict[str, StrategySpec] = {}
_RANDOM_STRATEGIES: Dict[str, StrategySpec] = {}


def _normalize_key(name: str) -> str:
    return name.replace("_", "-").lower()


def mode(name: str, ordering: str = ORDER_SHUFFLE, enforce_contrast: bool = True,
         check_signature: bool = False):
    """Register a function as the strategy for a generation mode."""
    def _register(func: StrategyFn) -> StrategyFn:
        key = _normalize_key(name)
        _MODES[key] = StrategySpec(key, func, ordering, enforce_contrast, check_signature)
        return func
    return _register


def random_strategy(name: str, ordering: str = ORDER_SHUFFLE, enforce_contrast: bool = True):
    """Register a sub-strategy of the "random" meta-mode."""
    def _register(func: StrategyFn) -> StrategyFn:
        key = _normalize_key(name)
        _RANDOM_STRATEGIES[key] = StrategySpec(key, func, ordering, enforce_contrast, True)
        return func
    return _register


def _load_strategies() -> None:
    # strategy modules register on import
    from . import classic, themes, random_mix  # noqa: F401


def get_mode(name: str) -> StrategySpec:
    _load_strategies()
    key = _normalize_key(name.value if isinstance(name, GenerationMode) else name)
    if key not in _MODES:
        raise ValueError(f"Unknown generation mode: {name}")
    return _MODES[key]


def get_random_strategy(name: str) -> StrategySpec:
    _load_strategies()
    key = _normalize_key(name)
    if key not in _RANDOM_STRATEGIES:
        raise ValueError(f"Unknown random sub-strategy: {name}")
    return _RANDOM_STRATEGIES[key]


def resolve(name: str, rng: random.Random) -> StrategySpec:
    """
    Resolve a mode to the concrete strategy to run.

    The "random" meta-mode draws one sub-strategy uniformly per call; the
    returned spec carries the sub-strategy's ordering and contrast flags.
    """
    spec = get_mode(name)
    if spec.name != GenerationMode.RANDOM.value:
        return spec
    choice = rng.choice(sorted(_RANDOM_STRATEGIES))
    return replace(_RANDOM_STRATEGIES[choice], check_signature=spec.check_signature)


def list_modes() -> List[str]:
    _load_strategies()
    return sorted(_MODES)


def list_random_strategies() -> List[str]:
    _load_strategies()
    return sorted(_RANDOM_STRATEGIES)
