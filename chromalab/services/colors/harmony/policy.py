"""
Tunable constants for the palette generation engine.

The thresholds are empirical; they shape qualitative behavior (reject
near-duplicates, rescue low-contrast palettes) rather than define exact
contracts.
"""

from dataclasses import dataclass


@dataclass
class GenerationPolicy:
    """Centralized policy constants for palette generation."""

    # Similarity: Oklab distance below which two colors read as the same
    min_perceptual_distance: float = 0.055

    # Insertion clamps (avoid pure black/white by default)
    min_lightness: float = 5.0
    max_lightness: float = 98.0

    # Cross-call duplicate nudge
    history_nudge: float = 3.0
    history_nudge_attempts: int = 3

    # safe_add fallbacks
    fallback_light_shift: float = 12.0
    fallback_hue_shift: float = 25.0

    # Base hue selection
    hue_exclusion_zone: float = 30.0
    hue_resample_attempts: int = 10

    # Contrast / vibrancy enforcement
    washed_out_ratio: float = 0.70
    washed_out_lightness: float = 70.0
    washed_out_chroma: float = 45.0
    dull_ratio: float = 0.80
    dull_chroma: float = 20.0
    flat_lightness_range: float = 25.0
    enforcement_min_count: int = 3

    # Ordering
    strict_shuffle_probability: float = 0.3

    # Achromatic boundary for sorting and signatures (HSL saturation %)
    achromatic_saturation: float = 10.0
    neutral_saturation: float = 15.0

    # Signature retry
    signature_retries: int = 1


DEFAULT_POLICY = GenerationPolicy()
