"""
Canonical feed schemas for the content-feed aggregator.

CRITICAL: FeedCardItem and FeedBundle are the only shapes consumers (screens)
see. Raw record models never leave the adapters and the normalizer; every
source MUST be mapped to FeedCardItem before it reaches the aggregator.
"""

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContentType(str, Enum):
    """Content categories that drive bucket placement."""

    AUDIO = "audio"
    VIDEO = "video"
    PLAYLIST = "playlist"
    ANNOUNCEMENT = "announcement"
    LIVE = "live"
    AD = "ad"


# Fixed bucket capacities surfaced to consumers
BUCKET_CAPACITIES: dict[str, int] = {
    "music": 14,
    "videos": 14,
    "playlists": 12,
    "live": 10,
    "ads": 8,
    "announcements": 8,
    "most_played": 12,
    "recent": 12,
}

TOP_CATEGORIES: tuple[str, ...] = ("All", "Music", "Videos", "Live", "Playlists", "Ads")


# Raw records (adapter output, normalizer input)


class CatalogAuthor(BaseModel):
    """Author block embedded in catalog records."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    display_name: str | None = Field(default=None, alias="displayName")


class CatalogRecord(BaseModel):
    """
    Raw record from the internal catalog or the most-played ranking.

    Field names mirror the backend's camelCase JSON; unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    title: str = ""
    description: str | None = None
    type: ContentType
    status: str | None = None
    source_kind: str | None = Field(default=None, alias="sourceKind")
    media_url: str | None = Field(default=None, alias="mediaUrl")
    external_url: str | None = Field(default=None, alias="externalUrl")
    url: str | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    tags: list[str] = Field(default_factory=list)
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    channel_name: str | None = Field(default=None, alias="channelName")
    author: CatalogAuthor | None = None
    duration: str | None = None
    live_viewer_count: int | None = Field(default=None, ge=0, alias="liveViewerCount")
    is_live: bool = Field(default=False, alias="isLive")
    play_count: int | None = Field(default=None, alias="playCount")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Numeric ids from the backend are treated as strings."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @field_validator("is_live", mode="before")
    @classmethod
    def coerce_is_live(cls, v: Any) -> Any:
        if v is None:
            return False
        return v


class ExternalVideoRecord(BaseModel):
    """Raw record from the external video platform (YouTube channel feed)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    video_id: str = Field(..., min_length=1)
    title: str = "Untitled YouTube Video"
    description: str = ""
    channel_title: str | None = None
    published_at: str | None = None
    thumbnail_url: str | None = None
    url: str | None = None
    duration: str | None = None
    is_live: bool = False
    live_viewer_count: int | None = Field(default=None, ge=0)


RawContentRecord = Union[CatalogRecord, ExternalVideoRecord]


# Canonical output


class FeedCardItem(BaseModel):
    """
    CANONICAL FEED ITEM

    Immutable value object produced by the normalizer. Display fields are
    never empty; the normalizer fills defaults for anything a source omits.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(..., min_length=1, description="Unique within the aggregator namespace")
    title: str
    subtitle: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1, description="Display-ready duration")
    image_url: str = Field(..., min_length=1)
    media_url: str | None = None
    type: ContentType
    is_live: bool = False
    live_viewer_count: int | None = None


class FeedBundle(BaseModel):
    """
    Complete aggregation result for one refresh cycle.

    Built wholly by one aggregator run and replaced in full by the next.
    Buckets are tuples so a published bundle cannot be mutated in place.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    featured: FeedCardItem | None = None
    music: tuple[FeedCardItem, ...] = ()
    videos: tuple[FeedCardItem, ...] = ()
    playlists: tuple[FeedCardItem, ...] = ()
    live: tuple[FeedCardItem, ...] = ()
    ads: tuple[FeedCardItem, ...] = ()
    announcements: tuple[FeedCardItem, ...] = ()
    most_played: tuple[FeedCardItem, ...] = ()
    recent: tuple[FeedCardItem, ...] = ()
    top_categories: tuple[str, ...] = TOP_CATEGORIES

    @classmethod
    def empty(cls) -> "FeedBundle":
        """Zero value: every bucket empty and no featured item."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.featured is None and not any(self.bucket_sizes().values())

    def bucket_sizes(self) -> dict[str, int]:
        """Item count per bucket, keyed by field name."""
        return {bucket: len(getattr(self, bucket)) for bucket in BUCKET_CAPACITIES}

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for consumers."""
        return self.model_dump(mode="json", by_alias=True)
