"""
Performance monitoring for the palette generation and extraction pipelines.

Wraps pipeline stages with timing and memory sampling, feeding the
in-process MetricsCollector and the loguru log stream.
"""

import time
import psutil
from typing import Dict, Any, Optional, List
from functools import wraps
from dataclasses import dataclass, asdict
from contextlib import contextmanager
import threading
from collections import defaultdict, deque
from loguru import logger

from chromalab.utils.metrics import get_metrics


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single monitored operation."""
    operation_name: str
    duration_ms: float
    memory_usage_mb: float
    color_count: int
    pixel_count: int
    timestamp: float
    error: Optional[str] = None


class PerformanceHistory:
    """Bounded history of monitored operations."""

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self._history: deque = deque(maxlen=max_history)
        self._by_operation: Dict[str, deque] = defaultdict(lambda: deque(maxlen=100))
        self._lock = threading.Lock()

    def record_performance(self, metrics: PerformanceMetrics) -> None:
        """Record performance metrics for an operation."""
        with self._lock:
            self._history.append(metrics)
            self._by_operation[metrics.operation_name].append(metrics)

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """Get aggregate statistics for one operation."""
        with self._lock:
            entries = list(self._by_operation.get(operation_name, []))

        if not entries:
            return {}

        durations = [m.duration_ms for m in entries]
        return {
            "count": len(entries),
            "avg_duration_ms": sum(durations) / len(durations),
            "max_duration_ms": max(durations),
            "min_duration_ms": min(durations),
            "error_count": sum(1 for m in entries if m.error),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Aggregate statistics keyed by operation name."""
        with self._lock:
            names = list(self._by_operation)
        return {name: self.get_operation_stats(name) for name in names}

    def get_recent_metrics(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Get the most recent monitored operations."""
        with self._lock:
            recent = list(self._history)[-limit:]
        return [asdict(m) for m in recent]

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
            self._by_operation.clear()


_performance_history = PerformanceHistory()


def get_performance_history() -> PerformanceHistory:
    """Get the global performance history."""
    return _performance_history


@contextmanager
def performance_monitor(operation_name: str, color_count: int = 0, pixel_count: int = 0):
    """Context manager for monitoring performance of operations."""
    start_time = time.time()
    start_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB

    error_msg = None

    try:
        yield
    except Exception as e:
        error_msg = str(e)
        raise
    finally:
        end_time = time.time()
        end_memory = psutil.Process().memory_info().rss / 1024 / 1024  # MB

        metrics = PerformanceMetrics(
            operation_name=operation_name,
            duration_ms=(end_time - start_time) * 1000,
            memory_usage_mb=max(end_memory, start_memory),
            color_count=color_count,
            pixel_count=pixel_count,
            timestamp=end_time,
            error=error_msg
        )

        _performance_history.record_performance(metrics)
        get_metrics().record_timing(operation_name, metrics.duration_ms)

        if error_msg:
            logger.error(f"Operation {operation_name} failed after {metrics.duration_ms:.1f}ms: {error_msg}")
        else:
            logger.debug(f"Operation {operation_name} completed in {metrics.duration_ms:.1f}ms "
                         f"(memory: {metrics.memory_usage_mb:.1f}MB)")


def performance_tracked(operation_name: str):
    """Decorator for automatically tracking function performance."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            color_count = kwargs.get("count", 0) or 0
            with performance_monitor(operation_name, color_count=color_count):
                return func(*args, **kwargs)
        return wrapper
    return decorator
