"""
Test configuration and fixtures for the Chromalab palette services.
"""
import random

import pytest
from fastapi.testclient import TestClient

from main import app
from chromalab.services.colors.harmony.engine import PaletteGenerator
from chromalab.services.colors.memory import AntiRepetitionMemory, get_default_memory
from chromalab.services.observability import get_performance_history
from chromalab.utils.metrics import reset_metrics as _reset_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def memory():
    """Fresh, isolated anti-repetition memory."""
    return AntiRepetitionMemory()


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def generator(memory, rng):
    """Generator bound to a fresh memory and a seeded random source."""
    return PaletteGenerator(memory=memory, rng=rng)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics and the shared memory before each test."""
    _reset_metrics()
    get_performance_history().clear()
    get_default_memory().clear()
