"""
Ranking adapter for the analytics-derived "most played" list.

    GET {api_base_url}/v1/analytics/most-played?limit=N

The upstream returns records already ranked by play count; their order is
kept exactly as received.
"""

from typing import Any

from src.config.settings import get_settings
from src.feed.base_adapter import BaseAdapter, clamp, extract_items
from src.feed.http_client import HTTPClient
from src.feed.schemas import CatalogRecord, ContentType

RANKING_PATH = "/v1/analytics/most-played"
MAX_RANKING_LIMIT = 50

_KNOWN_TYPES = {t.value for t in ContentType}


class RankingAdapter(BaseAdapter):
    """Adapter for the most-played ranking query."""

    def __init__(
        self,
        base_url: str | None = None,
        limit: int | None = None,
        timeout: float | None = None,
    ):
        super().__init__()
        settings = get_settings()

        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._limit = clamp(limit or settings.ranking_limit, 1, MAX_RANKING_LIMIT)
        self._timeout = timeout or settings.http_timeout_seconds

    @property
    def name(self) -> str:
        return "ranking"

    @property
    def url(self) -> str:
        return f"{self._base_url}{RANKING_PATH}"

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        async with HTTPClient(timeout=self._timeout) as client:
            payload = await client.get_json(self.url, params={"limit": self._limit})
        return extract_items(payload)

    def _transform(self, raw: dict[str, Any]) -> CatalogRecord | None:
        # Play events may reference types the catalog no longer knows
        if raw.get("type") not in _KNOWN_TYPES:
            raw = {**raw, "type": ContentType.AUDIO.value}
        return CatalogRecord.model_validate(raw)
