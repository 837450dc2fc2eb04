"""
Shared metrics configuration for the Pulse news cache.
"""

from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class MetricsCollector:
    """Centralized metrics collector for the news cache."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # A private registry keeps several collectors in one process from clashing
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache metrics."""
        self._metrics["news_cache_lookups_total"] = Counter(
            "news_cache_lookups_total",
            "Total cache lookups by tier and outcome",
            ["tier", "result"],
            registry=self.registry
        )

        self._metrics["news_cache_writes_total"] = Counter(
            "news_cache_writes_total",
            "Total cache writes by tier",
            ["tier"],
            registry=self.registry
        )

        self._metrics["news_fetch_duration_seconds"] = Histogram(
            "news_fetch_duration_seconds",
            "Inner news service fetch duration in seconds",
            ["operation"],
            registry=self.registry
        )

    def record_lookup(self, tier: str, result: str):
        """Record a cache lookup (result is hit, miss or stale)."""
        self.increment_counter("news_cache_lookups_total", tier=tier, result=result)

    def record_write(self, tier: str):
        """Record a cache write."""
        self.increment_counter("news_cache_writes_total", tier=tier)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).observe(value)

    def sample(self, metric_name: str, **labels) -> Optional[float]:
        """Read back the current value of a labelled sample."""
        return self.registry.get_sample_value(metric_name, labels)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
