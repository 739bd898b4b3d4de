"""
Metrics Collection
Prometheus metrics for editor config evaluations
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator

from prometheus_client import Counter, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the runtime.
    """

    def __init__(self) -> None:
        self.evaluations_total = Counter(
            "editor_config_evaluations_total",
            "Total number of editor config evaluations",
            ["operation", "status"],
        )
        self.evaluation_duration = Histogram(
            "editor_config_evaluation_duration_seconds",
            "Editor config evaluation duration in seconds",
            ["operation"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0],
        )
        self.errors_total = Counter(
            "editor_config_errors_total",
            "Total number of evaluation errors",
            ["error_type", "stage"],
        )
        self.probes_total = Counter(
            "editor_config_probes_total",
            "Contract function probes",
            ["function", "present"],
        )

    def record_evaluation(self, operation: str, status: str, duration: float) -> None:
        """Record a finished evaluation."""
        self.evaluations_total.labels(operation=operation, status=status).inc()
        self.evaluation_duration.labels(operation=operation).observe(duration)

    def record_error(self, error_type: str, stage: str | None) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, stage=stage or "unknown").inc()

    def record_probe(self, function: str, present: bool) -> None:
        """Record a contract function probe."""
        self.probes_total.labels(function=function, present=str(present).lower()).inc()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
