"""
Chromalab Configuration
Manages environment variables and defaults for the palette services.
"""
import os


class Config:
    """Configuration class for Chromalab services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("CHROMALAB_LOG_LEVEL", "INFO")

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("CHROMALAB_MAX_FILE_MB", "10"))

    # Image extraction
    EXTRACT_MAX_EDGE: int = int(os.environ.get("CHROMALAB_EXTRACT_MAX_EDGE", "150"))
    EXTRACT_MAX_OUTPUTS: int = int(os.environ.get("CHROMALAB_EXTRACT_MAX_OUTPUTS", "20"))
    EXTRACT_DEFAULT_ACTIVE: int = int(os.environ.get("CHROMALAB_EXTRACT_DEFAULT_ACTIVE", "5"))

    # Palette generation
    DEFAULT_COUNT: int = int(os.environ.get("CHROMALAB_DEFAULT_COUNT", "5"))
    MAX_COUNT: int = int(os.environ.get("CHROMALAB_MAX_COUNT", "64"))

    # Anti-repetition memory capacities
    HEX_HISTORY: int = int(os.environ.get("CHROMALAB_HEX_HISTORY", "60"))
    HUE_HISTORY: int = int(os.environ.get("CHROMALAB_HUE_HISTORY", "5"))
    SIGNATURE_HISTORY: int = int(os.environ.get("CHROMALAB_SIGNATURE_HISTORY", "30"))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("CHROMALAB_ALLOWED_ORIGINS", "")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("CHROMALAB_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}

    @classmethod
    def allowed_origins(cls) -> list:
        """Parsed CORS origin list."""
        return [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]

    @classmethod
    def validate_max_outputs(cls, max_outputs: int) -> bool:
        """Validate extraction candidate limit."""
        return 1 <= max_outputs <= 64

    @classmethod
    def history_sizes(cls) -> dict:
        """Capacities for AntiRepetitionMemory keyed by its constructor args."""
        return {
            "hex_capacity": cls.HEX_HISTORY,
            "hue_capacity": cls.HUE_HISTORY,
            "signature_capacity": cls.SIGNATURE_HISTORY,
        }


# Global config instance
config = Config()
