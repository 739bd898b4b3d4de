"""
Performance Monitoring
Prometheus-based metrics collection for the editor config runtime
"""

from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
]
