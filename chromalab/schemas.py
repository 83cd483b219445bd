"""
Chromalab API Schemas
Pydantic models for palette generation, sorting, extraction and wheel request/response validation.
"""
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from chromalab.config import config
from chromalab.services.colors.harmony import GenerationMode

HEX_FIELD_PATTERN = r"^#?[0-9A-Fa-f]{6}$"


class ColorRecordModel(BaseModel):
    """Display form of one palette color."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Canonical uppercase hex color code #RRGGBB"
    )
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="RGB channels 0-255")
    hsl: str = Field(..., description="Formatted HSL string 'H°, S%, L%'")
    cmyk: str = Field(..., description="Formatted CMYK string 'C% M% Y% K%'")
    locked: bool = Field(False, description="Caller-owned lock flag; never changed by the engine")
    name: Optional[str] = Field(None, description="Optional display name")


class PaletteColorInput(BaseModel):
    """A color submitted back to the service, e.g. for regeneration."""
    hex: str = Field(..., pattern=HEX_FIELD_PATTERN, description="Hex color code")
    locked: bool = Field(False, description="Keep this color in place")
    name: Optional[str] = Field(None, max_length=64)


class GenerateRequest(BaseModel):
    """Request body for palette generation."""
    mode: GenerationMode = Field(GenerationMode.RANDOM, description="Generation mode")
    count: int = Field(
        config.DEFAULT_COUNT,
        ge=0,
        le=config.MAX_COUNT,
        description="Number of colors; 0 returns an empty palette"
    )
    seed_hex: Optional[str] = Field(
        None,
        pattern=HEX_FIELD_PATTERN,
        description="Optional seed color; authoritative for the base point"
    )
    rng_seed: Optional[int] = Field(None, description="Seed for reproducible output")


class RegenerateRequest(BaseModel):
    """Request body for lock-aware regeneration."""
    colors: List[PaletteColorInput] = Field(..., max_length=config.MAX_COUNT)
    mode: Optional[GenerationMode] = Field(
        None,
        description="Generation mode; drawn from a small default set when omitted"
    )
    seed_hex: Optional[str] = Field(None, pattern=HEX_FIELD_PATTERN)
    rng_seed: Optional[int] = Field(None, description="Seed for reproducible output")


class GenerationMeta(BaseModel):
    """How a palette was produced."""
    mode: str
    strategy: str = Field(..., description="Concrete strategy (random sub-strategy name for 'random')")
    vibe: str
    base_hue: Optional[float] = None
    seeded: bool
    signature: str
    retried: bool = Field(..., description="Whether a repeated signature triggered a regeneration")
    adjustments: List[str] = Field(default_factory=list, description="Contrast/vibrancy rationale tokens")
    forced: int = Field(0, description="Colors accepted through the forced fallback")


class GenerateResponse(BaseModel):
    """Palette generation response."""
    request_id: str
    colors: List[ColorRecordModel]
    css: str = Field(..., description="CSS custom properties for the palette")
    meta: GenerationMeta
    processing_ms: float


class SortRequest(BaseModel):
    """Request body for visual-progression sorting."""
    colors: List[str] = Field(..., description="Hex color codes")


class SortResponse(BaseModel):
    colors: List[ColorRecordModel]


class ExtractResponse(BaseModel):
    """Image extraction response."""
    request_id: str
    width: int = Field(..., description="Uploaded image width in pixels")
    height: int = Field(..., description="Uploaded image height in pixels")
    analyzed_width: int = Field(..., description="Width after downscaling")
    analyzed_height: int = Field(..., description="Height after downscaling")
    candidates: List[ColorRecordModel] = Field(..., description="Candidates in descending score order")
    scores: List[float]
    active_count: int = Field(..., description="Size of the active palette after clamping")
    active: List[ColorRecordModel]
    processing_ms: float


class WheelResponse(BaseModel):
    """Strict color-wheel harmony response."""
    mode: str
    base: ColorRecordModel
    colors: List[ColorRecordModel]
    css: str
    handle: Dict[str, float] = Field(..., description="Wheel handle position as left/top percentages")


class ModesResponse(BaseModel):
    modes: List[str]
    random_strategies: List[str]
    wheel_modes: List[str]


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("chromalab", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class MetricsResponse(BaseModel):
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    palette_size_stats: Dict[str, float]
    memory: Dict[str, Any]
    operations: Dict[str, Dict[str, Any]] = Field(default_factory=dict, description="Monitored operation stats")
    recent_operations: List[Dict[str, Any]] = Field(default_factory=list)
