"""
Performance Monitoring
Prometheus-based metrics collection and operation tracing
"""

from .metrics import MetricsCollector, metrics_collector
from .tracer import trace_operation

__all__ = [
    "MetricsCollector",
    "metrics_collector",
    "trace_operation",
]
