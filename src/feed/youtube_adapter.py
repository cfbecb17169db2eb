"""
External video adapter backed by the YouTube Data API v3.

Fetches a channel's latest uploads in two requests:
1. search (part=snippet, type=video, order=date) for video ids and snippets
2. videos (part=contentDetails,liveStreamingDetails,snippet) for durations,
   live status and concurrent viewer counts

The source only contains video-like items, so no type filter is supported.
Without an API key and channel id the adapter degrades to an empty result
without touching the network.
"""

import logging
import re
from typing import Any

from src.config.settings import get_settings
from src.feed.base_adapter import BaseAdapter, clamp
from src.feed.http_client import HTTPClient
from src.feed.normalizer import LIVE_DURATION
from src.feed.schemas import ContentType, ExternalVideoRecord

logger = logging.getLogger(__name__)

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
MAX_RESULTS_LIMIT = 50

_ISO_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


class YouTubeNotConfiguredError(RuntimeError):
    """Raised when the channel feed is fetched without credentials."""


def format_iso_duration(value: str | None) -> str | None:
    """
    Format an ISO-8601 duration for display.

    Examples:
        PT4M13S  -> "04:13"
        PT1H2M3S -> "01:02:03"

    Returns:
        Display string, or None if the value is missing or unparseable
    """
    if not value:
        return None

    match = _ISO_DURATION_RE.match(value)
    if not match or not any(match.groups()):
        return None

    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def pick_thumbnail(thumbnails: dict[str, Any] | None) -> str | None:
    """Pick the best available thumbnail: high, then medium, then default."""
    if not thumbnails:
        return None
    for size in ("high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def _parse_viewer_count(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class YouTubeAdapter(BaseAdapter):
    """
    Adapter for a YouTube channel's recent uploads and live streams.

    Each record carries the raw video id; the normalizer namespaces it
    (``yt:<videoId>``) so it cannot collide with catalog ids by accident.
    """

    def __init__(
        self,
        api_key: str | None = None,
        channel_id: str | None = None,
        max_results: int | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize YouTube adapter.

        Args:
            api_key: YouTube Data API key (default from settings)
            channel_id: Channel to list (default from settings)
            max_results: Result-count hint, clamped to 1..50
            timeout: HTTP timeout in seconds (default from settings)
        """
        super().__init__()
        settings = get_settings()

        self._api_key = api_key or settings.youtube_api_key
        self._channel_id = (channel_id or settings.youtube_channel_id or "").strip()
        self._max_results = clamp(
            max_results or settings.youtube_max_results, 1, MAX_RESULTS_LIMIT
        )
        self._timeout = timeout or settings.http_timeout_seconds

    @property
    def name(self) -> str:
        return "youtube"

    @property
    def configured(self) -> bool:
        return bool(self._api_key) and bool(self._channel_id)

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        if not self.configured:
            raise YouTubeNotConfiguredError("YouTube API key or channel id is not configured")

        async with HTTPClient(timeout=self._timeout) as client:
            search = await client.get_json(
                YOUTUBE_SEARCH_URL,
                params={
                    "key": self._api_key,
                    "part": "snippet",
                    "channelId": self._channel_id,
                    "type": "video",
                    "order": "date",
                    "maxResults": self._max_results,
                },
            )

            search_items = [
                item
                for item in search.get("items") or []
                if (item.get("id") or {}).get("videoId") and item.get("snippet")
            ]
            if not search_items:
                logger.info(f"No videos found for channel {self._channel_id}")
                return []

            video_ids = [item["id"]["videoId"] for item in search_items]
            videos = await client.get_json(
                YOUTUBE_VIDEOS_URL,
                params={
                    "key": self._api_key,
                    "part": "contentDetails,liveStreamingDetails,snippet",
                    "id": ",".join(video_ids),
                },
            )

        details_by_id = {
            item.get("id"): item for item in videos.get("items") or [] if item.get("id")
        }

        return [
            self._merge(item, details_by_id.get(item["id"]["videoId"]))
            for item in search_items
        ]

    def _merge(
        self,
        search_item: dict[str, Any],
        details: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """Combine a search hit with its video details into one flat payload."""
        video_id = search_item["id"]["videoId"]
        snippet = search_item["snippet"]
        details = details or {}

        is_live = (details.get("snippet") or {}).get("liveBroadcastContent") == "live"
        duration = (
            LIVE_DURATION
            if is_live
            else format_iso_duration((details.get("contentDetails") or {}).get("duration"))
        )
        viewers = (details.get("liveStreamingDetails") or {}).get("concurrentViewers")

        return {
            "video_id": video_id,
            "title": snippet.get("title") or "Untitled YouTube Video",
            "description": snippet.get("description") or "",
            "channel_title": snippet.get("channelTitle"),
            "published_at": snippet.get("publishedAt"),
            "thumbnail_url": pick_thumbnail(snippet.get("thumbnails")),
            "url": YOUTUBE_WATCH_URL.format(video_id=video_id),
            "duration": duration,
            "is_live": is_live,
            "live_viewer_count": _parse_viewer_count(viewers),
        }

    def _transform(self, raw: dict[str, Any]) -> ExternalVideoRecord | None:
        return ExternalVideoRecord.model_validate(raw)
