"""Tests for the in-memory mock adapters."""

import pytest

from src.feed.mock_adapter import (
    SAMPLE_CATALOG_RECORDS,
    MockCatalogAdapter,
    MockRankingAdapter,
    MockYouTubeAdapter,
    create_mock_adapters,
)
from src.feed.schemas import ContentType


class TestMockAdapters:
    """Mocks go through the real validation and filtering."""

    @pytest.mark.asyncio
    async def test_catalog_excludes_drafts(self):
        result = await MockCatalogAdapter().fetch()

        ids = [r.id for r in result.records]
        assert "c-1008" not in ids
        assert len(ids) == len(SAMPLE_CATALOG_RECORDS) - 1

    @pytest.mark.asyncio
    async def test_catalog_type_filter(self):
        adapter = MockCatalogAdapter()

        result = await adapter.fetch(ContentType.AUDIO)

        assert [r.id for r in result.records] == ["c-1001", "c-1002"]
        assert adapter.calls == [ContentType.AUDIO]

    @pytest.mark.asyncio
    async def test_injected_records(self):
        adapter = MockCatalogAdapter(records=[{"id": "x1", "type": "ad", "status": "published"}])

        result = await adapter.fetch(ContentType.AD)

        assert [r.id for r in result.records] == ["x1"]

    @pytest.mark.asyncio
    async def test_youtube_has_live_and_vod(self):
        result = await MockYouTubeAdapter().fetch()

        assert sorted(r.is_live for r in result.records) == [False, True]

    @pytest.mark.asyncio
    async def test_ranking_coerces_unknown_types(self):
        result = await MockRankingAdapter().fetch()

        assert [r.id for r in result.records] == ["c-1001", "c-1003", "c-0990"]
        assert result.records[2].type == ContentType.AUDIO


def test_create_mock_adapters_keys():
    adapters = create_mock_adapters()

    assert set(adapters) == {"catalog", "external_video", "ranking"}
    assert isinstance(adapters["catalog"], MockCatalogAdapter)
    assert isinstance(adapters["external_video"], MockYouTubeAdapter)
    assert isinstance(adapters["ranking"], MockRankingAdapter)
