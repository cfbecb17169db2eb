"""
Catalog adapter for internally published media.

Queries the content backend's public listing:

    GET {api_base_url}/v1/content?status=published&limit=N[&type=T]

Only published records are ever returned. The status filter is sent with
every query and re-checked on each record, so a draft that leaks through
the backend is still dropped here. Listing responses may omit
``status`` entirely; such records are kept, since the query itself only
selects published content.
"""

import logging
from typing import Any

from src.config.settings import get_settings
from src.feed.base_adapter import BaseAdapter, extract_items
from src.feed.http_client import HTTPClient
from src.feed.schemas import CatalogRecord, ContentType

logger = logging.getLogger(__name__)

CATALOG_PATH = "/v1/content"
PUBLISHED_STATUS = "published"


class CatalogAdapter(BaseAdapter):
    """
    Adapter for the internal content catalog.

    Supports an optional content-type filter; without one it returns every
    published record.
    """

    supports_type_filter = True

    def __init__(
        self,
        base_url: str | None = None,
        page_limit: int | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize catalog adapter.

        Args:
            base_url: Content backend base URL (default from settings)
            page_limit: Records requested per query (default from settings)
            timeout: HTTP timeout in seconds (default from settings)
        """
        super().__init__()
        settings = get_settings()

        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._page_limit = page_limit or settings.catalog_page_limit
        self._timeout = timeout or settings.http_timeout_seconds

    @property
    def name(self) -> str:
        return "catalog"

    @property
    def url(self) -> str:
        return f"{self._base_url}{CATALOG_PATH}"

    def build_params(self, content_type: ContentType | None) -> dict[str, Any]:
        """Query parameters for one catalog request."""
        params: dict[str, Any] = {
            "status": PUBLISHED_STATUS,
            "limit": self._page_limit,
        }
        if content_type is not None:
            params["type"] = content_type.value
        return params

    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        async with HTTPClient(timeout=self._timeout) as client:
            payload = await client.get_json(self.url, params=self.build_params(content_type))
        return extract_items(payload)

    def _transform(self, raw: dict[str, Any]) -> CatalogRecord | None:
        record = CatalogRecord.model_validate(raw)

        # No status means the record came back under the status=published filter
        if record.status is not None and record.status != PUBLISHED_STATUS:
            logger.debug(f"Skipping unpublished catalog record {record.id} ({record.status})")
            return None

        return record
