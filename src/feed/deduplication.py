"""
Identity-based deduplication of feed items.

Items are duplicates when they share an ``id``. The first occurrence wins
and relative order is preserved, so callers express merge precedence
purely by the order in which they concatenate their inputs:

    merge(external_live, catalog_live)  # external copy wins on collision
"""

from collections.abc import Iterable

from src.feed.schemas import FeedCardItem


def dedupe(items: Iterable[FeedCardItem]) -> list[FeedCardItem]:
    """
    Keep the first occurrence of each id, in input order.

    Pure and stable: dedupe(dedupe(x)) == dedupe(x).
    """
    seen: set[str] = set()
    result: list[FeedCardItem] = []

    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        result.append(item)

    return result


def merge(*pools: Iterable[FeedCardItem]) -> list[FeedCardItem]:
    """Concatenate pools and dedupe; earlier pools take precedence."""
    return dedupe(item for pool in pools for item in pool)


def exclude_ids(items: Iterable[FeedCardItem], ids: set[str]) -> list[FeedCardItem]:
    """Drop items whose id is already claimed elsewhere."""
    return [item for item in items if item.id not in ids]
