"""
Chromalab - palette generation and image color extraction.

Core entry points re-exported for library use; the HTTP service lives in
main.py at the repository root.
"""

__version__ = "1.0.0"

from chromalab.services.colors.conversions import (  # noqa: E402
    ColorRecord,
    create_color_record,
    generate_random_color,
    hex_to_rgb,
    hsl_to_rgb,
    rgb_to_cmyk,
    rgb_to_hex,
    rgb_to_hsl,
)
from chromalab.services.colors.extraction import (  # noqa: E402
    ExtractionPolicy,
    clamp_active_count,
    extract_palette,
)
from chromalab.services.colors.export import palette_to_css  # noqa: E402
from chromalab.services.colors.harmony import GenerationMode  # noqa: E402
from chromalab.services.colors.harmony.engine import (  # noqa: E402
    GenerationResult,
    PaletteGenerator,
    generate_palette,
    regenerate_palette,
)
from chromalab.services.colors.harmony.ordering import sort_by_visual_progression  # noqa: E402
from chromalab.services.colors.harmony.policy import GenerationPolicy  # noqa: E402
from chromalab.services.colors.harmony.wheel import wheel_harmony  # noqa: E402
from chromalab.services.colors.memory import AntiRepetitionMemory  # noqa: E402

__all__ = [
    "AntiRepetitionMemory",
    "ColorRecord",
    "ExtractionPolicy",
    "GenerationMode",
    "GenerationPolicy",
    "GenerationResult",
    "PaletteGenerator",
    "clamp_active_count",
    "create_color_record",
    "extract_palette",
    "generate_palette",
    "generate_random_color",
    "hex_to_rgb",
    "hsl_to_rgb",
    "palette_to_css",
    "regenerate_palette",
    "rgb_to_cmyk",
    "rgb_to_hex",
    "rgb_to_hsl",
    "sort_by_visual_progression",
    "wheel_harmony",
]
