"""
Prometheus metrics for monitoring the content feed aggregator.

Defines and exposes metrics for:
- Adapter fetch outcomes and latency
- Refresh cycles (success, error, discarded)
- Bucket sizes of the last published bundle

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging
from typing import TYPE_CHECKING

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from src.config.settings import get_settings

if TYPE_CHECKING:
    from src.feed.schemas import FeedBundle

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the feed pipeline.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_adapter_fetch("catalog", outcome="ok", records=20, latency=0.3)
        metrics.record_refresh("success", latency=1.2)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        # Adapter metrics
        self.adapter_fetches = Counter(
            "content_feed_adapter_fetches_total",
            "Total adapter fetches",
            ["adapter", "outcome"],  # outcome: ok, error, timeout
        )

        self.adapter_latency = Histogram(
            "content_feed_adapter_latency_seconds",
            "Time to fetch records from an upstream source",
            ["adapter"],
            buckets=LATENCY_BUCKETS,
        )

        self.adapter_records = Gauge(
            "content_feed_adapter_records",
            "Records returned by the last fetch of an adapter",
            ["adapter"],
        )

        # Refresh metrics
        self.refreshes = Counter(
            "content_feed_refresh_total",
            "Total feed refresh cycles",
            ["status"],  # status: success, error, discarded, cancelled
        )

        self.refresh_latency = Histogram(
            "content_feed_refresh_latency_seconds",
            "Time to aggregate one feed bundle",
            buckets=LATENCY_BUCKETS,
        )

        # Bundle metrics
        self.bucket_size = Gauge(
            "content_feed_bucket_size",
            "Number of items in each bucket of the last published bundle",
            ["bucket"],
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_adapter_fetch(
        self,
        adapter: str,
        outcome: str,
        records: int = 0,
        latency: float | None = None,
    ) -> None:
        """
        Record one adapter fetch.

        Args:
            adapter: Adapter name
            outcome: ok, error or timeout
            records: Number of records returned
            latency: Optional fetch latency in seconds
        """
        self.adapter_fetches.labels(adapter=adapter, outcome=outcome).inc()
        self.adapter_records.labels(adapter=adapter).set(records)

        if latency is not None:
            self.adapter_latency.labels(adapter=adapter).observe(latency)

    def record_refresh(self, status: str, latency: float | None = None) -> None:
        """
        Record a refresh cycle.

        Args:
            status: success, error, discarded or cancelled
            latency: Optional aggregation latency in seconds
        """
        self.refreshes.labels(status=status).inc()

        if latency is not None:
            self.refresh_latency.observe(latency)

    def record_bundle(self, bundle: "FeedBundle") -> None:
        """Set bucket size gauges from a published bundle."""
        for bucket, size in bundle.bucket_sizes().items():
            self.bucket_size.labels(bucket=bucket).set(size)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
