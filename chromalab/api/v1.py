"""
Chromalab v1 API Routes
Palette generation, regeneration, sorting, image extraction and color-wheel endpoints.
"""
from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from chromalab.config import config
from chromalab.schemas import (
    ColorRecordModel, ErrorResponse, ExtractResponse, GenerateRequest, GenerateResponse, ModesResponse,
    RegenerateRequest, SortRequest, SortResponse, WheelResponse,
)
from chromalab.services.colors.conversions import create_color_record, is_valid_hex
from chromalab.services.colors.export import palette_to_css
from chromalab.services.colors.extract_api import handle_extract
from chromalab.services.colors.generate_api import handle_generate, handle_regenerate, handle_sort
from chromalab.services.colors.harmony.registry import list_modes, list_random_strategies
from chromalab.services.colors.harmony.wheel import WHEEL_MODES, hs_to_wheel_point, wheel_harmony
from chromalab.utils.metrics import get_metrics

router = APIRouter(
    prefix="/v1",
    tags=["Palettes"],
    responses={400: {"model": ErrorResponse}},
)


@router.get("/modes", response_model=ModesResponse)
def get_modes():
    """List generation modes, random sub-strategies and wheel harmonies."""
    return ModesResponse(
        modes=list_modes(),
        random_strategies=list_random_strategies(),
        wheel_modes=list(WHEEL_MODES),
    )


@router.post("/palettes/generate", response_model=GenerateResponse)
def generate(request: GenerateRequest):
    """
    Generate a palette.

    - **mode**: one of the generation modes (see /v1/modes)
    - **count**: number of colors (0 returns an empty palette)
    - **seed_hex**: optional seed color, used directly as the base point
    - **rng_seed**: optional seed for reproducible output
    """
    try:
        return handle_generate(request)
    except ValueError as e:
        get_metrics().increment_failure_count("generate")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/palettes/regenerate", response_model=GenerateResponse)
def regenerate(request: RegenerateRequest):
    """Replace every unlocked color; locked colors keep their slot."""
    try:
        return handle_regenerate(request)
    except ValueError as e:
        get_metrics().increment_failure_count("regenerate")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/palettes/sort", response_model=SortResponse)
def sort_palette(request: SortRequest):
    """Reorder colors into a visual progression (neutrals first, then hue order)."""
    invalid = [h for h in request.colors if not is_valid_hex(h)]
    if invalid:
        raise HTTPException(status_code=400, detail=f"Invalid hex colors: {', '.join(invalid)}")
    return handle_sort(request.colors)


@router.post("/palettes/extract", response_model=ExtractResponse)
async def extract(
    file: UploadFile = File(..., description="JPEG, PNG or WebP image"),
    max_outputs: int = Query(config.EXTRACT_MAX_OUTPUTS, ge=1, le=64, description="Maximum candidates"),
    active_count: int = Query(config.EXTRACT_DEFAULT_ACTIVE, ge=0, le=64, description="Requested active palette size"),
):
    """
    Extract a palette from an image.

    The image is downscaled so its long edge is at most the configured size,
    then reduced to scored candidates. The active palette is the leading
    slice of the candidates, clamped to [2, min(10, candidates)].
    """
    try:
        return await handle_extract(file, max_outputs=max_outputs, active_count=active_count)
    except ValueError as e:
        get_metrics().increment_failure_count("extract")
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/colors/{hex_value}", response_model=ColorRecordModel)
def get_color(hex_value: str):
    """Display record for one color (hex without or with a URL-encoded '#')."""
    if not is_valid_hex(hex_value):
        raise HTTPException(status_code=400, detail=f"Invalid hex color: {hex_value}")
    return create_color_record(hex_value).to_dict()


@router.get("/wheel", response_model=WheelResponse)
def wheel(
    h: float = Query(..., ge=0, le=360, description="Hue in degrees"),
    s: float = Query(100, ge=0, le=100, description="Saturation percent"),
    l: float = Query(50, ge=0, le=100, description="Lightness percent"),
    mode: str = Query("complementary", description="Wheel harmony; unknown values fall back to complementary"),
):
    """Strict color-wheel harmony for a selected color."""
    records = wheel_harmony(h, s, l, mode)
    left, top = hs_to_wheel_point(h, s)
    return WheelResponse(
        mode=mode if mode in WHEEL_MODES else "complementary",
        base=records[0].to_dict(),
        colors=[r.to_dict() for r in records],
        css=palette_to_css(records),
        handle={"left": left, "top": top},
    )
