"""
Mock adapters for testing and development.

Each mock subclasses the real adapter and replaces only the upstream I/O,
so sample payloads still go through the real validation and filtering
(published-only catalog, ranking type coercion). Useful for:
- Running the aggregator without a backend or YouTube credentials
- Deterministic tests
- Simulating slow sources (``delay_seconds``)
"""

import asyncio
import copy
from typing import Any

from src.feed.base_adapter import BaseAdapter
from src.feed.catalog_adapter import CatalogAdapter
from src.feed.ranking_adapter import RankingAdapter
from src.feed.schemas import ContentType
from src.feed.youtube_adapter import YouTubeAdapter

SAMPLE_CATALOG_RECORDS: list[dict[str, Any]] = [
    {
        "id": "c-1001",
        "title": "Grace Upon Grace",
        "type": "audio",
        "status": "published",
        "channelName": "ClaudyGod Music",
        "duration": "04:12",
        "tags": ["worship", "live band"],
        "mediaUrl": "https://cdn.example.com/audio/grace.mp3",
    },
    {
        "id": "c-1002",
        "title": "Morning Devotion",
        "type": "audio",
        "status": "published",
        "tags": ["devotion", "prayer", "morning"],
    },
    {
        "id": "c-1003",
        "title": "Sunday Service Highlights",
        "type": "video",
        "status": "published",
        "thumbnailUrl": "https://cdn.example.com/img/sunday.jpg",
        "externalUrl": "https://cdn.example.com/video/sunday.mp4",
    },
    {
        "id": "c-1004",
        "title": "Praise Essentials",
        "type": "playlist",
        "status": "published",
        "author": {"displayName": "Editorial Team"},
    },
    {
        "id": "c-1005",
        "title": "Midweek Prayer Live",
        "type": "live",
        "status": "published",
        "liveViewerCount": 87,
    },
    {
        "id": "c-1006",
        "title": "Conference Tickets",
        "type": "ad",
        "status": "published",
    },
    {
        "id": "c-1007",
        "title": "Choir Auditions Open",
        "type": "announcement",
        "status": "published",
        "description": "Auditions run every Saturday this month.",
    },
    {
        "id": "c-1008",
        "title": "Unreleased Demo",
        "type": "audio",
        "status": "draft",
    },
]

SAMPLE_VIDEO_RECORDS: list[dict[str, Any]] = [
    {
        "video_id": "dQw4w9WgXcQ",
        "title": "Night of Worship (Full Concert)",
        "channel_title": "ClaudyGod",
        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "duration": "01:32:10",
        "is_live": False,
    },
    {
        "video_id": "L1v3Str3am0",
        "title": "Friday Vigil",
        "channel_title": "ClaudyGod",
        "url": "https://www.youtube.com/watch?v=L1v3Str3am0",
        "duration": "LIVE",
        "is_live": True,
        "live_viewer_count": 1204,
    },
]

SAMPLE_RANKING_RECORDS: list[dict[str, Any]] = [
    {"id": "c-1001", "title": "Grace Upon Grace", "type": "audio", "playCount": 412},
    {"id": "c-1003", "title": "Sunday Service Highlights", "type": "video", "playCount": 230},
    {"id": "c-0990", "title": "Old Hymn Medley", "type": "medley", "playCount": 95},
]


async def _maybe_delay(delay_seconds: float) -> None:
    if delay_seconds > 0:
        await asyncio.sleep(delay_seconds)


class MockCatalogAdapter(CatalogAdapter):
    """Catalog adapter serving in-memory records, filtered by type like the backend."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        delay_seconds: float = 0.0,
    ):
        super().__init__()
        self._records = SAMPLE_CATALOG_RECORDS if records is None else records
        self._delay_seconds = delay_seconds
        self.calls: list[ContentType | None] = []

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        self.calls.append(content_type)
        await _maybe_delay(self._delay_seconds)

        records = copy.deepcopy(self._records)
        if content_type is None:
            return records
        return [r for r in records if r.get("type") == content_type.value]


class MockYouTubeAdapter(YouTubeAdapter):
    """External video adapter serving in-memory records."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        delay_seconds: float = 0.0,
    ):
        super().__init__(api_key="mock", channel_id="mock")
        self._records = SAMPLE_VIDEO_RECORDS if records is None else records
        self._delay_seconds = delay_seconds

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        await _maybe_delay(self._delay_seconds)
        return copy.deepcopy(self._records)


class MockRankingAdapter(RankingAdapter):
    """Ranking adapter serving in-memory records in the given order."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        delay_seconds: float = 0.0,
    ):
        super().__init__()
        self._records = SAMPLE_RANKING_RECORDS if records is None else records
        self._delay_seconds = delay_seconds

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        await _maybe_delay(self._delay_seconds)
        return copy.deepcopy(self._records[: self._limit])


def create_mock_adapters(
    catalog: list[dict[str, Any]] | None = None,
    videos: list[dict[str, Any]] | None = None,
    ranking: list[dict[str, Any]] | None = None,
    delay_seconds: float = 0.0,
) -> dict[str, BaseAdapter]:
    """
    Create mock adapters for all three sources.

    Args:
        catalog: Catalog payloads (default: sample records)
        videos: External video payloads (default: sample records)
        ranking: Ranking payloads (default: sample records)
        delay_seconds: Simulated latency applied to every fetch

    Returns:
        Keyword arguments for FeedAggregator
    """
    return {
        "catalog": MockCatalogAdapter(records=catalog, delay_seconds=delay_seconds),
        "external_video": MockYouTubeAdapter(records=videos, delay_seconds=delay_seconds),
        "ranking": MockRankingAdapter(records=ranking, delay_seconds=delay_seconds),
    }
