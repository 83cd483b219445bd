"""
Palette Generation API Orchestrator

Bridges HTTP requests to the generation engine: builds a generator around
the shared anti-repetition memory, runs it under performance monitoring and
feeds the in-process metrics.
"""

import time
from typing import List, Optional

from chromalab.schemas import (
    GenerateRequest, GenerateResponse, GenerationMeta, RegenerateRequest, SortResponse,
)
from chromalab.services.observability import performance_monitor, performance_tracked
from chromalab.services.colors.conversions import ColorRecord, create_color_record
from chromalab.services.colors.export import palette_to_css
from chromalab.services.colors.harmony.engine import GenerationResult, PaletteGenerator
from chromalab.services.colors.harmony.ordering import sort_by_visual_progression
from chromalab.services.colors.memory import AntiRepetitionMemory
from chromalab.utils.ids import generate_request_id
from chromalab.utils.logging import get_logger
from chromalab.utils.metrics import get_metrics

logger = get_logger()


def _record_metrics(result: GenerationResult) -> None:
    metrics = get_metrics()
    metrics.increment_generation_count(result.mode, result.strategy or result.mode)
    metrics.record_palette_size(len(result.colors))
    if result.retried:
        metrics.increment_signature_retry()
    if result.forced:
        metrics.increment("palette_forced_insertions_total", result.forced)
    if result.adjustments:
        metrics.increment("palette_contrast_adjustments_total")


def _build_response(request_id: str, result: GenerationResult, start_time: float) -> GenerateResponse:
    return GenerateResponse(
        request_id=request_id,
        colors=[c.to_dict() for c in result.colors],
        css=palette_to_css(result.colors),
        meta=GenerationMeta(
            mode=result.mode,
            strategy=result.strategy,
            vibe=result.vibe,
            base_hue=result.base_hue,
            seeded=result.seeded,
            signature=result.signature,
            retried=result.retried,
            adjustments=result.adjustments,
            forced=result.forced,
        ),
        processing_ms=(time.time() - start_time) * 1000,
    )


def handle_generate(request: GenerateRequest,
                    memory: Optional[AntiRepetitionMemory] = None) -> GenerateResponse:
    """
    Generate a palette for an API request.

    Raises:
        ValueError: If the mode is unknown
    """
    request_id = generate_request_id("gen")
    start_time = time.time()
    generator = PaletteGenerator(memory, rng=request.rng_seed)

    with performance_monitor("palette_generation", color_count=request.count):
        result = generator.generate(request.mode, request.count, request.seed_hex)

    _record_metrics(result)
    logger.info(
        "Palette generated",
        extra={
            "request_id": request_id,
            "mode": result.mode,
            "strategy": result.strategy,
            "count": len(result.colors),
            "retried": result.retried,
        }
    )
    return _build_response(request_id, result, start_time)


def handle_regenerate(request: RegenerateRequest,
                      memory: Optional[AntiRepetitionMemory] = None) -> GenerateResponse:
    """Regenerate every unlocked color of a submitted palette."""
    request_id = generate_request_id("regen")
    start_time = time.time()
    previous = [create_color_record(c.hex, locked=c.locked, name=c.name) for c in request.colors]
    generator = PaletteGenerator(memory, rng=request.rng_seed)

    with performance_monitor("palette_regeneration", color_count=len(previous)):
        result = generator.regenerate(previous, request.mode, request.seed_hex)

    _record_metrics(result)
    logger.info(
        "Palette regenerated",
        extra={
            "request_id": request_id,
            "mode": result.mode,
            "locked": sum(1 for c in previous if c.locked),
        }
    )
    return _build_response(request_id, result, start_time)


@performance_tracked("palette_sort")
def handle_sort(colors: List[str]) -> SortResponse:
    """Sort hex colors into a visual progression."""
    records: List[ColorRecord] = [create_color_record(h) for h in colors]
    ordered = sort_by_visual_progression(records)
    return SortResponse(colors=[r.to_dict() for r in ordered])
