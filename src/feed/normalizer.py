"""
Normalization of raw source records into FeedCardItem.

normalize() is total and pure: every validated record maps to a card with
non-empty display fields. Field derivation, first match wins:

- subtitle:    channel/author name -> first two tags -> "Sponsored" (ads)
               -> generic channel label
- description: source description -> generic live / default sentence
- duration:    source duration -> "LIVE" for live items -> "--:--"
- imageUrl:    source thumbnail -> fixed fallback image
- isLive:      source live flag OR type == live

External records are namespaced (``yt:<videoId>``) so they never collide
with catalog ids by coincidence.
"""

from collections.abc import Iterable

from src.feed.schemas import (
    CatalogRecord,
    ContentType,
    ExternalVideoRecord,
    FeedCardItem,
    RawContentRecord,
)

FALLBACK_IMAGE = (
    "https://images.unsplash.com/photo-1516280440614-37939bbacd81"
    "?auto=format&fit=crop&w=1200&q=80"
)
DEFAULT_CHANNEL_LABEL = "ClaudyGod Channel"
SPONSORED_LABEL = "Sponsored"
TAG_SEPARATOR = " • "
UNKNOWN_DURATION = "--:--"
LIVE_DURATION = "LIVE"
LIVE_DESCRIPTION = "Live session from your subscribed channel."
DEFAULT_DESCRIPTION = "Published content from your channel feed."
EXTERNAL_ID_PREFIX = "yt:"


def external_id(video_id: str) -> str:
    """Namespaced id for an external video."""
    return f"{EXTERNAL_ID_PREFIX}{video_id}"


def _first_non_blank(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value
    return None


def _subtitle(
    source_name: str | None,
    tags: list[str],
    content_type: ContentType,
) -> str:
    if name := _first_non_blank(source_name):
        return name

    tag_labels = [tag for tag in tags if tag and tag.strip()][:2]
    if tag_labels:
        return TAG_SEPARATOR.join(tag_labels)

    if content_type == ContentType.AD:
        return SPONSORED_LABEL
    return DEFAULT_CHANNEL_LABEL


def _description(description: str | None, content_type: ContentType) -> str:
    if text := _first_non_blank(description):
        return text
    return LIVE_DESCRIPTION if content_type == ContentType.LIVE else DEFAULT_DESCRIPTION


def _duration(duration: str | None, is_live: bool) -> str:
    if value := _first_non_blank(duration):
        return value
    return LIVE_DURATION if is_live else UNKNOWN_DURATION


def _normalize_catalog(record: CatalogRecord) -> FeedCardItem:
    is_live = record.is_live or record.type == ContentType.LIVE
    source_name = _first_non_blank(
        record.channel_name,
        record.author.display_name if record.author else None,
    )

    return FeedCardItem(
        id=record.id,
        title=record.title,
        subtitle=_subtitle(source_name, record.tags, record.type),
        description=_description(record.description, record.type),
        duration=_duration(record.duration, is_live),
        image_url=_first_non_blank(record.thumbnail_url) or FALLBACK_IMAGE,
        media_url=_first_non_blank(record.media_url, record.external_url, record.url),
        type=record.type,
        is_live=is_live,
        live_viewer_count=record.live_viewer_count,
    )


def _normalize_external(record: ExternalVideoRecord) -> FeedCardItem:
    content_type = ContentType.LIVE if record.is_live else ContentType.VIDEO

    return FeedCardItem(
        id=external_id(record.video_id),
        title=record.title,
        subtitle=_subtitle(record.channel_title, [], content_type),
        description=_description(record.description, content_type),
        duration=_duration(record.duration, record.is_live),
        image_url=_first_non_blank(record.thumbnail_url) or FALLBACK_IMAGE,
        media_url=_first_non_blank(record.url),
        type=content_type,
        is_live=record.is_live,
        live_viewer_count=record.live_viewer_count,
    )


def normalize(record: RawContentRecord) -> FeedCardItem:
    """Map one raw record of any source to the canonical card model."""
    if isinstance(record, ExternalVideoRecord):
        return _normalize_external(record)
    return _normalize_catalog(record)


def normalize_all(records: Iterable[RawContentRecord]) -> list[FeedCardItem]:
    """Normalize a list of records, preserving order."""
    return [normalize(record) for record in records]
