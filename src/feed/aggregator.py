"""
Feed aggregator - fans out to every source and assembles one FeedBundle.

One aggregate() call is one best-effort snapshot:
1. Nine fetches run concurrently (catalog unfiltered, catalog per type,
   external videos, ranking), each guarded by a deadline
2. Results are normalized into FeedCardItem
3. Pools are merged with "earlier wins" precedence and sliced into buckets

Upstream failures never escape: a failed, raising or timed-out source
simply contributes nothing. There are no retries.
"""

import asyncio
import time

import structlog

from src.config.settings import Settings, get_settings
from src.feed.base_adapter import BaseAdapter
from src.feed.catalog_adapter import CatalogAdapter
from src.feed.deduplication import dedupe, exclude_ids, merge
from src.feed.mock_adapter import create_mock_adapters
from src.feed.normalizer import normalize_all
from src.feed.ranking_adapter import RankingAdapter
from src.feed.results import FetchResult
from src.feed.schemas import (
    BUCKET_CAPACITIES,
    TOP_CATEGORIES,
    ContentType,
    FeedBundle,
    FeedCardItem,
)
from src.feed.youtube_adapter import YouTubeAdapter
from src.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)

# Catalog types fetched with their own filtered query
CATALOG_TYPES: tuple[ContentType, ...] = (
    ContentType.AUDIO,
    ContentType.VIDEO,
    ContentType.PLAYLIST,
    ContentType.LIVE,
    ContentType.AD,
    ContentType.ANNOUNCEMENT,
)


def create_adapters(settings: Settings | None = None) -> dict[str, BaseAdapter]:
    """Create the real source adapters from configuration."""
    settings = settings or get_settings()

    if not settings.youtube_configured:
        logger.warning("YouTube credentials not configured, external videos will be empty")

    return {
        "catalog": CatalogAdapter(
            base_url=settings.api_base_url,
            page_limit=settings.catalog_page_limit,
        ),
        "external_video": YouTubeAdapter(
            api_key=settings.youtube_api_key,
            channel_id=settings.youtube_channel_id,
            max_results=settings.youtube_max_results,
        ),
        "ranking": RankingAdapter(
            base_url=settings.api_base_url,
            limit=settings.ranking_limit,
        ),
    }


def _take(items: list[FeedCardItem], bucket: str) -> tuple[FeedCardItem, ...]:
    return tuple(dedupe(items)[: BUCKET_CAPACITIES[bucket]])


def build_bundle(
    catalog_all: list[FeedCardItem],
    catalog_by_type: dict[ContentType, list[FeedCardItem]],
    external: list[FeedCardItem],
    ranking: list[FeedCardItem],
) -> FeedBundle:
    """
    Assemble a bundle from normalized source pools.

    Pure: the same pools always produce the same bundle. External items
    precede catalog items in every merged pool, so the external copy of a
    shared id wins. An id claimed by the live pool never appears in videos.

    Args:
        catalog_all: Unfiltered catalog query
        catalog_by_type: Per-type catalog queries (missing types are empty)
        external: External video feed, live and non-live mixed
        ranking: Most-played list in upstream order
    """

    def by_type(content_type: ContentType) -> list[FeedCardItem]:
        return catalog_by_type.get(content_type, [])

    external_live = [item for item in external if item.is_live]
    external_vod = [item for item in external if not item.is_live]

    merged_live = merge(external_live, by_type(ContentType.LIVE))
    live_ids = {item.id for item in merged_live}
    merged_videos = exclude_ids(merge(external_vod, by_type(ContentType.VIDEO)), live_ids)
    merged_all = merge(external_vod, external_live, catalog_all)

    # Identifier order stands in for recency; sort is stable and ids are unique
    recent = sorted(merged_all, key=lambda item: item.id, reverse=True)

    priority_pool = merge(
        merged_live,
        merged_videos,
        by_type(ContentType.AUDIO),
        by_type(ContentType.PLAYLIST),
        by_type(ContentType.ANNOUNCEMENT),
        by_type(ContentType.AD),
        merged_all,
    )

    return FeedBundle(
        featured=priority_pool[0] if priority_pool else None,
        music=_take(by_type(ContentType.AUDIO), "music"),
        videos=_take(merged_videos, "videos"),
        playlists=_take(by_type(ContentType.PLAYLIST), "playlists"),
        live=_take(merged_live, "live"),
        ads=_take(by_type(ContentType.AD), "ads"),
        announcements=_take(by_type(ContentType.ANNOUNCEMENT), "announcements"),
        most_played=_take(ranking, "most_played"),
        recent=_take(recent, "recent"),
        top_categories=TOP_CATEGORIES,
    )


class FeedAggregator:
    """
    Produces one FeedBundle per aggregate() call.

    Adapters are injected so tests can substitute stubs; any object with an
    async ``fetch(content_type=None) -> FetchResult`` and a ``name`` works.

    Usage:
        aggregator = FeedAggregator.from_settings()
        bundle = await aggregator.aggregate()
    """

    def __init__(
        self,
        catalog: BaseAdapter,
        external_video: BaseAdapter,
        ranking: BaseAdapter,
        timeout_seconds: float | None = None,
    ):
        """
        Initialize aggregator.

        Args:
            catalog: Catalog adapter (queried unfiltered and once per type)
            external_video: External video platform adapter
            ranking: Most-played ranking adapter
            timeout_seconds: Per-fetch deadline (default from settings)
        """
        self._catalog = catalog
        self._external_video = external_video
        self._ranking = ranking
        if timeout_seconds is None:
            timeout_seconds = get_settings().adapter_timeout_seconds
        self._timeout = timeout_seconds
        self._metrics = get_metrics()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        use_mock: bool = False,
    ) -> "FeedAggregator":
        """Build an aggregator over the configured (or mock) sources."""
        settings = settings or get_settings()
        adapters = create_mock_adapters() if use_mock else create_adapters(settings)
        return cls(**adapters, timeout_seconds=settings.adapter_timeout_seconds)

    @property
    def adapters(self) -> dict[str, BaseAdapter]:
        return {
            "catalog": self._catalog,
            "external_video": self._external_video,
            "ranking": self._ranking,
        }

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def aggregate(self) -> FeedBundle:
        """
        Fetch every source concurrently and assemble a bundle.

        Waits for all fetches to settle; never raises on upstream failure.
        """
        start_time = time.monotonic()

        results = await asyncio.gather(
            self._guarded(self._catalog),
            *(self._guarded(self._catalog, t) for t in CATALOG_TYPES),
            self._guarded(self._external_video),
            self._guarded(self._ranking),
        )

        catalog_all, *typed, external, ranking = results

        bundle = build_bundle(
            catalog_all=normalize_all(catalog_all.records),
            catalog_by_type={
                content_type: normalize_all(result.records)
                for content_type, result in zip(CATALOG_TYPES, typed)
            },
            external=normalize_all(external.records),
            ranking=normalize_all(ranking.records),
        )

        logger.info(
            "Feed aggregated",
            degraded=[label for label, r in self._labelled(results) if not r.is_ok],
            buckets=bundle.bucket_sizes(),
            featured=bundle.featured.id if bundle.featured else None,
            elapsed=round(time.monotonic() - start_time, 3),
        )
        return bundle

    def _labelled(self, results: list[FetchResult]) -> list[tuple[str, FetchResult]]:
        labels = [
            _fetch_label(self._catalog),
            *(_fetch_label(self._catalog, t) for t in CATALOG_TYPES),
            _fetch_label(self._external_video),
            _fetch_label(self._ranking),
        ]
        return list(zip(labels, results))

    async def _guarded(
        self,
        adapter: BaseAdapter,
        content_type: ContentType | None = None,
    ) -> FetchResult:
        """
        Apply the per-fetch deadline and absorb anything the adapter lets escape.

        Metrics are labelled by adapter name only; the type filter appears
        in the log event.
        """
        label = _fetch_label(adapter, content_type)
        try:
            fetch = adapter.fetch(content_type) if content_type else adapter.fetch()
            return await asyncio.wait_for(fetch, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Adapter timed out", adapter=label, timeout=self._timeout)
            self._metrics.record_adapter_fetch(adapter.name, outcome="timeout")
            return FetchResult.empty(f"timed out after {self._timeout}s")
        except Exception as e:
            logger.warning("Adapter raised", adapter=label, error=str(e))
            self._metrics.record_adapter_fetch(adapter.name, outcome="error")
            return FetchResult.empty(f"{type(e).__name__}: {e}")


def _fetch_label(adapter: BaseAdapter, content_type: ContentType | None = None) -> str:
    return f"{adapter.name}[{content_type.value}]" if content_type else adapter.name
