"""
Observability module for the Chromalab palette services.

Performance monitoring shared by the generation engine API layer and the
image extraction pipeline.
"""

from .metrics import (
    PerformanceMetrics,
    PerformanceHistory,
    get_performance_history,
    performance_monitor,
    performance_tracked,
)

__all__ = [
    'PerformanceMetrics',
    'PerformanceHistory',
    'get_performance_history',
    'performance_monitor',
    'performance_tracked',
]
