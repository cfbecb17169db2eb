"""Content feed module - source adapters, normalization, and aggregation."""

from src.feed.results import FetchResult
from src.feed.schemas import (
    BUCKET_CAPACITIES,
    TOP_CATEGORIES,
    ContentType,
    FeedBundle,
    FeedCardItem,
)

__all__ = [
    "BUCKET_CAPACITIES",
    "TOP_CATEGORIES",
    "ContentType",
    "FeedBundle",
    "FeedCardItem",
    "FetchResult",
]
