from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before the config class reads them
load_dotenv()

from chromalab import __version__  # noqa: E402
from chromalab.api.v1 import router as v1_router  # noqa: E402
from chromalab.config import config  # noqa: E402
from chromalab.schemas import HealthResponse, MetricsResponse  # noqa: E402
from chromalab.services.colors.memory import get_default_memory  # noqa: E402
from chromalab.services.observability import get_performance_history  # noqa: E402
from chromalab.utils.logging import get_logger  # noqa: E402
from chromalab.utils.metrics import get_metrics  # noqa: E402

logger = get_logger()

app = FastAPI(
    title="Chromalab Palette Service",
    description="Palette generation with anti-repetition memory and image color extraction",
    version=__version__
)

# CORS: explicit origins from CHROMALAB_ALLOWED_ORIGINS, local dev servers otherwise
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins() or [
        "http://localhost:3000", "http://localhost:5173"
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Chromalab Palette API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/metrics", response_model=MetricsResponse)
def metrics():
    """In-process counters, timings and anti-repetition memory occupancy."""
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    summary = get_metrics().get_summary()
    summary["memory"] = get_default_memory().snapshot()
    history = get_performance_history()
    summary["operations"] = history.get_all_stats()
    summary["recent_operations"] = history.get_recent_metrics()
    return summary


logger.info("Chromalab service initialised", extra={"version": __version__})
