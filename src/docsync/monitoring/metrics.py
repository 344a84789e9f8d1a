"""Prometheus metrics collection for docsync."""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class MetricsCollector:
    """Collects Prometheus metrics for schema synchronization."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """Initialize metrics collector."""
        self.registry = registry or CollectorRegistry()
        self._init_metrics()

    def _init_metrics(self):
        """Initialize Prometheus metrics."""
        self.schema_changes_total = Counter(
            'docsync_schema_changes_total',
            'Total number of classified schema changes applied',
            ['document_type', 'change_type'],
            registry=self.registry
        )

        self.sync_runs_total = Counter(
            'docsync_sync_runs_total',
            'Total number of sync calls',
            ['status'],
            registry=self.registry
        )

        self.sync_duration = Histogram(
            'docsync_sync_duration_seconds',
            'Time spent in a sync call',
            registry=self.registry
        )

    def record_changes(self, document_type: str, change_type: str, count: int):
        """Record applied changes of one kind for a document type."""
        if count:
            self.schema_changes_total.labels(
                document_type=document_type, change_type=change_type
            ).inc(count)

    def record_sync(self, status: str, duration_seconds: float):
        """Record the outcome of a sync call."""
        self.sync_runs_total.labels(status=status).inc()
        self.sync_duration.observe(duration_seconds)

    def get_sample_value(self, name: str, labels: Optional[dict] = None) -> Optional[float]:
        return self.registry.get_sample_value(name, labels or {})

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)
