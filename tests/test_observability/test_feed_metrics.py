"""Tests for Prometheus metrics recording."""

import pytest
from prometheus_client import REGISTRY

from src.feed.aggregator import CATALOG_TYPES, FeedAggregator
from src.feed.mock_adapter import MockCatalogAdapter, create_mock_adapters
from src.feed.schemas import FeedBundle
from src.observability.metrics import get_metrics


def _sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsCollector:
    """Tests for the global MetricsCollector."""

    def test_get_metrics_is_singleton(self):
        assert get_metrics() is get_metrics()

    def test_record_adapter_fetch(self):
        metrics = get_metrics()
        before = _sample("content_feed_adapter_fetches_total", adapter="scratch", outcome="timeout")

        metrics.record_adapter_fetch("scratch", outcome="timeout", records=0, latency=0.5)

        after = _sample("content_feed_adapter_fetches_total", adapter="scratch", outcome="timeout")
        assert after == before + 1
        assert _sample("content_feed_adapter_records", adapter="scratch") == 0

    def test_record_refresh(self):
        metrics = get_metrics()
        before = _sample("content_feed_refresh_total", status="discarded")

        metrics.record_refresh("discarded", latency=0.1)

        assert _sample("content_feed_refresh_total", status="discarded") == before + 1

    def test_record_bundle_sets_bucket_gauges(self, make_item):
        bundle = FeedBundle(music=(make_item("a"), make_item("b")), ads=(make_item("c"),))

        get_metrics().record_bundle(bundle)

        assert _sample("content_feed_bucket_size", bucket="music") == 2
        assert _sample("content_feed_bucket_size", bucket="ads") == 1
        assert _sample("content_feed_bucket_size", bucket="live") == 0


class TestAggregatorMetrics:
    """Guarded fetch failures are labelled by adapter name."""

    @pytest.mark.asyncio
    async def test_timeouts_use_adapter_name(self):
        adapters = create_mock_adapters()
        adapters["catalog"] = MockCatalogAdapter(delay_seconds=5.0)
        before = _sample("content_feed_adapter_fetches_total", adapter="catalog", outcome="timeout")

        await FeedAggregator(**adapters, timeout_seconds=0.05).aggregate()

        after = _sample("content_feed_adapter_fetches_total", adapter="catalog", outcome="timeout")
        # One unfiltered query plus one per content type
        assert after == before + 1 + len(CATALOG_TYPES)
        assert (
            REGISTRY.get_sample_value(
                "content_feed_adapter_fetches_total",
                {"adapter": "catalog[audio]", "outcome": "timeout"},
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_raising_adapter_uses_adapter_name(self, stub_adapter):
        before = _sample("content_feed_adapter_fetches_total", adapter="ranking", outcome="error")

        await FeedAggregator(
            catalog=stub_adapter("catalog"),
            external_video=stub_adapter("youtube"),
            ranking=stub_adapter("ranking", error=RuntimeError("down")),
            timeout_seconds=1.0,
        ).aggregate()

        after = _sample("content_feed_adapter_fetches_total", adapter="ranking", outcome="error")
        assert after == before + 1
