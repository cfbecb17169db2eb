"""Result type returned by every source adapter."""

from collections.abc import Iterable
from dataclasses import dataclass

from src.feed.schemas import RawContentRecord


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one adapter fetch: ``Ok(records)`` or ``Empty(reason)``.

    Adapters never raise to their caller. A degraded upstream is reported
    as an Empty result carrying the reason, so callers can treat both
    variants uniformly through ``records``.
    """

    records: tuple[RawContentRecord, ...] = ()
    reason: str | None = None

    @classmethod
    def ok(cls, records: Iterable[RawContentRecord]) -> "FetchResult":
        return cls(records=tuple(records))

    @classmethod
    def empty(cls, reason: str) -> "FetchResult":
        return cls(records=(), reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.reason is None

    def __len__(self) -> int:
        return len(self.records)
