"""Services that hold feed state and drive refreshes."""

from src.services.feed_service import FeedService, FeedState

__all__ = ["FeedService", "FeedState"]
