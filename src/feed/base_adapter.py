"""
Base adapter interface and shared functionality for source adapters.

Each source adapter implements _fetch_raw() (upstream I/O) and _transform()
(one raw payload -> one validated record). The base class provides:
- The fail-to-empty contract: fetch() never raises to its caller
- Per-record error isolation
- Metrics tracking
- Logging
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from src.feed.results import FetchResult
from src.feed.schemas import ContentType, RawContentRecord
from src.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


@dataclass
class AdapterStats:
    """Statistics for an adapter run."""

    records_fetched: int = 0
    records_filtered: int = 0
    errors: int = 0
    start_time: float = field(default_factory=time.monotonic)
    end_time: float | None = None

    @property
    def elapsed_seconds(self) -> float:
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time


class BaseAdapter(ABC):
    """
    Abstract base class for source adapters.

    Subclasses must implement:
        - name: Adapter name used in logs and metrics
        - _fetch_raw(): Fetch raw payloads from the upstream source
        - _transform(): Convert one raw payload to a record model

    Subclasses that accept a content-type filter set
    ``supports_type_filter = True``.
    """

    supports_type_filter: bool = False

    def __init__(self) -> None:
        self._stats = AdapterStats()

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter name (e.g. "catalog")."""
        ...

    @abstractmethod
    async def _fetch_raw(self, content_type: ContentType | None) -> list[dict[str, Any]]:
        """
        Fetch raw payloads from the upstream source.

        May raise; fetch() converts any exception into an empty result.
        """
        ...

    @abstractmethod
    def _transform(self, raw: dict[str, Any]) -> RawContentRecord | None:
        """
        Validate one raw payload.

        Returns:
            A record model, or None if the payload should be filtered
        """
        ...

    async def fetch(self, content_type: ContentType | None = None) -> FetchResult:
        """
        Fetch and validate records from the source.

        This is the main entry point called by the aggregator. Never raises
        (cancellation excepted): upstream failures yield FetchResult.empty().

        Args:
            content_type: Optional filter, only for adapters that support it

        Returns:
            FetchResult with the validated records
        """
        stats = AdapterStats()
        label = f"{self.name}[{content_type.value}]" if content_type else self.name

        logger.debug(f"Starting fetch for {label}")

        if content_type is not None and not self.supports_type_filter:
            result = FetchResult.empty(f"{self.name} does not support a type filter")
        else:
            result = await self._fetch_records(content_type, stats)

        stats.end_time = time.monotonic()
        self._stats = stats

        get_metrics().record_adapter_fetch(
            self.name,
            outcome="ok" if result.is_ok else "error",
            records=len(result),
            latency=stats.elapsed_seconds,
        )

        if result.is_ok:
            logger.info(
                f"{label} completed: "
                f"fetched={stats.records_fetched}, "
                f"filtered={stats.records_filtered}, "
                f"errors={stats.errors}, "
                f"elapsed={stats.elapsed_seconds:.2f}s"
            )
        else:
            logger.warning(f"{label} degraded to empty: {result.reason}")

        return result

    async def _fetch_records(
        self,
        content_type: ContentType | None,
        stats: AdapterStats,
    ) -> FetchResult:
        try:
            raw_items = await self._fetch_raw(content_type)
        except Exception as e:
            stats.errors += 1
            return FetchResult.empty(f"{type(e).__name__}: {e}")

        records: list[RawContentRecord] = []
        for raw in raw_items:
            try:
                record = self._transform(raw)
            except Exception as e:
                stats.errors += 1
                logger.debug(f"Dropping malformed record in {self.name}: {e}")
                continue

            if record is None:
                stats.records_filtered += 1
                continue

            records.append(record)
            stats.records_fetched += 1

        return FetchResult.ok(records)

    @property
    def stats(self) -> AdapterStats:
        """Get statistics of the last fetch."""
        return self._stats


def extract_items(payload: Any) -> list[dict[str, Any]]:
    """
    Pull the ``items`` list out of a backend response body.

    Raises:
        ValueError: If the payload does not carry an items list
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise ValueError("Malformed response: expected an object with an 'items' list")
    return [item for item in payload["items"] if isinstance(item, dict)]


def clamp(value: int, low: int, high: int) -> int:
    """Clamp an integer into [low, high]."""
    return max(low, min(value, high))
