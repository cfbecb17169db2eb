"""Tests for record normalization."""

from src.feed.normalizer import (
    DEFAULT_CHANNEL_LABEL,
    DEFAULT_DESCRIPTION,
    FALLBACK_IMAGE,
    LIVE_DESCRIPTION,
    LIVE_DURATION,
    SPONSORED_LABEL,
    UNKNOWN_DURATION,
    normalize,
    normalize_all,
)
from src.feed.schemas import CatalogAuthor, ContentType


class TestCatalogNormalization:
    """Tests for catalog and ranking records."""

    def test_missing_fields_get_defaults(self, make_catalog_record):
        item = normalize(make_catalog_record("c1", title="Grace"))

        assert item.id == "c1"
        assert item.title == "Grace"
        assert item.image_url == FALLBACK_IMAGE
        assert item.description == DEFAULT_DESCRIPTION
        assert item.duration == UNKNOWN_DURATION
        assert item.subtitle == DEFAULT_CHANNEL_LABEL
        assert item.type == ContentType.AUDIO
        assert item.is_live is False

    def test_blank_strings_get_defaults(self, make_catalog_record):
        item = normalize(
            make_catalog_record("c1", description="   ", duration="", thumbnailUrl="")
        )

        assert item.description == DEFAULT_DESCRIPTION
        assert item.duration == UNKNOWN_DURATION
        assert item.image_url == FALLBACK_IMAGE

    def test_source_values_win(self, make_catalog_record):
        item = normalize(
            make_catalog_record(
                "c1",
                description="Recorded live in Lagos.",
                duration="03:45",
                thumbnailUrl="https://img.example.com/c1.jpg",
                channelName="Choir",
            )
        )

        assert item.description == "Recorded live in Lagos."
        assert item.duration == "03:45"
        assert item.image_url == "https://img.example.com/c1.jpg"
        assert item.subtitle == "Choir"

    def test_subtitle_falls_back_to_author(self, make_catalog_record):
        record = make_catalog_record("c1", author=CatalogAuthor(display_name="Jane"))
        assert normalize(record).subtitle == "Jane"

    def test_subtitle_uses_first_two_tags(self, make_catalog_record):
        item = normalize(make_catalog_record("c1", tags=["worship", "", "choir", "live"]))
        assert item.subtitle == "worship • choir"

    def test_ad_without_source_is_sponsored(self, make_catalog_record):
        assert normalize(make_catalog_record("a1", type="ad")).subtitle == SPONSORED_LABEL

    def test_live_type_is_live(self, make_catalog_record):
        item = normalize(make_catalog_record("l1", type="live"))

        assert item.is_live is True
        assert item.duration == LIVE_DURATION
        assert item.description == LIVE_DESCRIPTION

    def test_live_flag_on_non_live_type(self, make_catalog_record):
        item = normalize(make_catalog_record("v1", type="video", isLive=True))

        assert item.is_live is True
        assert item.duration == LIVE_DURATION
        assert item.description == DEFAULT_DESCRIPTION

    def test_media_url_precedence(self, make_catalog_record):
        both = make_catalog_record("c1", externalUrl="https://ext", url="https://url")
        only_url = make_catalog_record("c2", url="https://url")
        media = make_catalog_record("c3", mediaUrl="https://media", url="https://url")

        assert normalize(both).media_url == "https://ext"
        assert normalize(only_url).media_url == "https://url"
        assert normalize(media).media_url == "https://media"


class TestExternalNormalization:
    """Tests for external video records."""

    def test_id_is_namespaced(self, make_video_record):
        item = normalize(make_video_record("abc123"))

        assert item.id == "yt:abc123"
        assert item.type == ContentType.VIDEO
        assert item.is_live is False
        assert item.duration == UNKNOWN_DURATION

    def test_live_video(self, make_video_record):
        item = normalize(
            make_video_record("v1", title="New Live", is_live=True, live_viewer_count=12)
        )

        assert item.type == ContentType.LIVE
        assert item.is_live is True
        assert item.duration == LIVE_DURATION
        assert item.description == LIVE_DESCRIPTION
        assert item.live_viewer_count == 12

    def test_channel_title_and_url(self, make_video_record):
        item = normalize(
            make_video_record(
                "v1",
                channel_title="ClaudyGod",
                url="https://www.youtube.com/watch?v=v1",
                thumbnail_url="https://i.ytimg.com/v1.jpg",
            )
        )

        assert item.subtitle == "ClaudyGod"
        assert item.media_url == "https://www.youtube.com/watch?v=v1"
        assert item.image_url == "https://i.ytimg.com/v1.jpg"


def test_normalize_all_preserves_order(make_catalog_record, make_video_record):
    records = [
        make_catalog_record("c2"),
        make_video_record("v1"),
        make_catalog_record("c1"),
    ]

    assert [item.id for item in normalize_all(records)] == ["c2", "yt:v1", "c1"]
