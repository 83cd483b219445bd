"""
Color Extraction API Orchestrator

Coordinates an extraction request: upload validation and decoding, the
downscale to the configured long edge, the pixel pipeline and the active
palette slice.
"""

import time
from typing import Optional

from fastapi import UploadFile

from chromalab.config import config
from chromalab.schemas import ExtractResponse
from chromalab.services.imaging import (
    validate_file_upload, read_image_rgba, resize_long_edge, get_image_dimensions
)
from chromalab.services.observability import performance_monitor
from chromalab.services.colors.extraction import (
    analyze_pixels, select_active_palette
)
from chromalab.services.colors.conversions import create_color_record
from chromalab.utils.ids import generate_request_id
from chromalab.utils.logging import get_logger
from chromalab.utils.metrics import get_metrics

logger = get_logger()


async def handle_extract(
    file: UploadFile,
    max_outputs: Optional[int] = None,
    active_count: Optional[int] = None,
) -> ExtractResponse:
    """
    Extract a palette from an uploaded image.

    Args:
        file: Uploaded image
        max_outputs: Candidate limit (default from config)
        active_count: Requested active palette size (default from config)

    Returns:
        ExtractResponse with every candidate and the active slice

    Raises:
        HTTPException: For upload validation and decode failures
        ValueError: For out-of-range parameters
    """
    request_id = generate_request_id("ext")
    start_time = time.time()
    metrics = get_metrics()

    max_outputs = config.EXTRACT_MAX_OUTPUTS if max_outputs is None else max_outputs
    active_count = config.EXTRACT_DEFAULT_ACTIVE if active_count is None else active_count
    if not config.validate_max_outputs(max_outputs):
        raise ValueError(f"max_outputs must be between 1 and 64, got {max_outputs}")

    logger.info("Starting color extraction", extra={"request_id": request_id})

    validate_file_upload(file)
    rgba = await read_image_rgba(file)
    original_width, original_height = get_image_dimensions(rgba)

    small = resize_long_edge(rgba, config.EXTRACT_MAX_EDGE)
    width, height = get_image_dimensions(small)

    with performance_monitor("color_extraction", pixel_count=width * height):
        candidates = analyze_pixels(small, width, height, max_outputs=max_outputs)

    records = [create_color_record(c.hex) for c in candidates]
    active = select_active_palette(records, active_count)

    metrics.increment_extraction_count(empty=not records)
    processing_ms = (time.time() - start_time) * 1000
    logger.info(
        "Color extraction complete",
        extra={
            "request_id": request_id,
            "candidates": len(records),
            "active_count": len(active),
            "ms_total": round(processing_ms, 1),
        }
    )

    return ExtractResponse(
        request_id=request_id,
        width=original_width,
        height=original_height,
        analyzed_width=width,
        analyzed_height=height,
        candidates=[r.to_dict() for r in records],
        scores=[c.score for c in candidates],
        active_count=len(active),
        active=[r.to_dict() for r in active],
        processing_ms=processing_ms,
    )
