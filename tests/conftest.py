"""Pytest fixtures for content-feed tests."""

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config.settings import Settings
from src.feed.results import FetchResult
from src.feed.schemas import (
    CatalogRecord,
    ContentType,
    ExternalVideoRecord,
    FeedCardItem,
)


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        api_base_url="http://backend.test",
        youtube_api_key="test-key",
        youtube_channel_id="UC_test_channel",
        adapter_timeout_seconds=0.5,
    )


@pytest.fixture
def make_catalog_record() -> Callable[..., CatalogRecord]:
    """Factory for published catalog records."""

    def _make(id: str, type: str = "audio", title: str | None = None, **fields: Any) -> CatalogRecord:
        payload = {
            "id": id,
            "title": title if title is not None else f"Title {id}",
            "type": type,
            "status": "published",
            **fields,
        }
        return CatalogRecord.model_validate(payload)

    return _make


@pytest.fixture
def make_video_record() -> Callable[..., ExternalVideoRecord]:
    """Factory for external video records."""

    def _make(video_id: str, title: str | None = None, is_live: bool = False, **fields: Any) -> ExternalVideoRecord:
        return ExternalVideoRecord(
            video_id=video_id,
            title=title if title is not None else f"Video {video_id}",
            is_live=is_live,
            **fields,
        )

    return _make


@pytest.fixture
def make_item() -> Callable[..., FeedCardItem]:
    """Factory for canonical feed items."""

    def _make(id: str, title: str | None = None, type: ContentType = ContentType.AUDIO, **fields: Any) -> FeedCardItem:
        defaults = {
            "subtitle": "ClaudyGod Channel",
            "description": "Published content from your channel feed.",
            "duration": "--:--",
            "image_url": "https://img.example.com/fallback.jpg",
        }
        return FeedCardItem(
            id=id,
            title=title if title is not None else f"Item {id}",
            type=type,
            **{**defaults, **fields},
        )

    return _make


@pytest.fixture
def stub_adapter() -> Callable[..., MagicMock]:
    """
    Factory for stub adapters with an AsyncMock ``fetch``.

    ``records`` is returned for unfiltered fetches; ``by_type`` maps a
    ContentType to the records returned for that filter. ``error`` makes
    every fetch raise instead.
    """

    def _make(
        name: str,
        records: list | None = None,
        by_type: dict[ContentType, list] | None = None,
        error: BaseException | None = None,
    ) -> MagicMock:
        adapter = MagicMock()
        adapter.name = name

        async def fetch(content_type: ContentType | None = None) -> FetchResult:
            if error is not None:
                raise error
            if content_type is None:
                return FetchResult.ok(records or [])
            return FetchResult.ok((by_type or {}).get(content_type, []))

        adapter.fetch = AsyncMock(side_effect=fetch)
        return adapter

    return _make
