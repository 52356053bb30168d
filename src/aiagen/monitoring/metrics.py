"""
Metrics Collection
Prometheus metrics for archive generation.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, Summary, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the generator service.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        self.generation_requests_total = Counter(
            "aia_generation_requests_total",
            "Total number of archive generation requests",
            ["status"],
            registry=self.registry,
        )
        self.generation_duration = Histogram(
            "aia_generation_duration_seconds",
            "Archive generation duration in seconds",
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=self.registry,
        )
        self.archive_bytes = Summary(
            "aia_archive_bytes",
            "Size of generated archives in bytes",
            registry=self.registry,
        )
        self.cleanup_failures_total = Counter(
            "aia_workspace_cleanup_failures_total",
            "Scratch workspaces that could not be removed",
            registry=self.registry,
        )

    def record_generation(self, status: str, duration: float) -> None:
        """Record one generation attempt."""
        self.generation_requests_total.labels(status=status).inc()
        self.generation_duration.observe(duration)

    def record_archive(self, size: int) -> None:
        self.archive_bytes.observe(size)

    def record_cleanup_failure(self) -> None:
        self.cleanup_failures_total.inc()

    def export(self) -> bytes:
        """Render metrics in Prometheus text format."""
        return generate_latest(self.registry)


# Global instance
metrics_collector = MetricsCollector()
