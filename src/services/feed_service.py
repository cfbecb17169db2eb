"""
Feed service - the long-lived state holder screens read from.

Exposes the current bundle, a loading flag and the last error, and runs
refreshes through the aggregator. Overlapping refreshes are resolved by a
monotonic generation counter: only the most recently *started* refresh still
in flight may publish its result, regardless of which one finishes last.

State machine:
    Idle(empty) -> Loading -> Ready(bundle)
    Ready -> Loading -> Ready | Stale-Error (previous bundle kept)
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from src.feed.aggregator import FeedAggregator
from src.feed.schemas import FeedBundle
from src.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Unable to load feed"


@dataclass(frozen=True)
class FeedState:
    """Immutable snapshot of the service state handed to consumers."""

    bundle: FeedBundle
    is_loading: bool
    error: str | None


StateListener = Callable[[FeedState], None]


class FeedService:
    """
    Owns the feed state for one consumer.

    Usage:
        service = FeedService(FeedAggregator.from_settings())
        service.start()               # schedules the initial refresh
        ...
        await service.refresh()       # pull-to-refresh
        state = service.state
        await service.aclose()
    """

    def __init__(self, aggregator: FeedAggregator | None = None):
        """
        Initialize feed service.

        Args:
            aggregator: Aggregator to refresh through (or build from config)
        """
        self._aggregator = aggregator or FeedAggregator.from_settings()
        self._bundle = FeedBundle.empty()
        self._is_loading = True
        self._error: str | None = None
        self._generation = 0
        self._published = 0
        self._in_flight: set[int] = set()
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._metrics = get_metrics()

    @property
    def current_bundle(self) -> FeedBundle:
        return self._bundle

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> str | None:
        return self._error

    @property
    def generation(self) -> int:
        """Generation of the most recently started refresh."""
        return self._generation

    @property
    def state(self) -> FeedState:
        return FeedState(bundle=self._bundle, is_loading=self._is_loading, error=self._error)

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a callback invoked with the new state after every change.

        Returns:
            A function that unregisters the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def start(self) -> asyncio.Task:
        """Schedule the initial refresh. Must be called from a running loop."""
        task = asyncio.create_task(self.refresh(), name="feed_refresh")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def aclose(self) -> None:
        """Cancel any scheduled refresh and wait for it to settle."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()

    async def refresh(self) -> None:
        """
        Run one aggregation and publish its result.

        Never raises on aggregation failure: the error message is stored in
        ``last_error`` and the previous bundle stays in place. A result is
        discarded when a newer refresh is still in flight or has already
        published. Cancellation is re-raised after the loading flag is
        recomputed, so a cancelled refresh never leaves the service loading
        and never blocks an older in-flight refresh from publishing.
        """
        self._generation += 1
        generation = self._generation
        self._in_flight.add(generation)
        self._is_loading = True
        self._error = None
        self._notify()

        logger.info("Refreshing feed", generation=generation)
        start_time = time.monotonic()

        try:
            bundle = await self._aggregator.aggregate()
        except asyncio.CancelledError:
            self._in_flight.discard(generation)
            self._is_loading = self._has_pending()
            logger.info("Refresh cancelled", generation=generation)
            self._metrics.record_refresh("cancelled", latency=time.monotonic() - start_time)
            self._notify()
            raise
        except Exception as e:
            latency = time.monotonic() - start_time
            if not self._claim(generation):
                logger.info("Discarding failed stale refresh", generation=generation)
                self._metrics.record_refresh("discarded", latency=latency)
                return

            logger.exception("Feed refresh failed", generation=generation, error=str(e))
            self._metrics.record_refresh("error", latency=latency)
            self._error = str(e) or DEFAULT_ERROR_MESSAGE
            self._notify()
            return

        latency = time.monotonic() - start_time

        if not self._claim(generation):
            logger.info(
                "Discarding stale refresh",
                generation=generation,
                latest=self._generation,
            )
            self._metrics.record_refresh("discarded", latency=latency)
            return

        self._bundle = bundle
        self._metrics.record_refresh("success", latency=latency)
        self._metrics.record_bundle(bundle)

        logger.info(
            "Feed refreshed",
            generation=generation,
            buckets=bundle.bucket_sizes(),
            elapsed=round(latency, 3),
        )
        self._notify()

    def _claim(self, generation: int) -> bool:
        """
        Retire a settled refresh.

        Returns:
            True if its outcome should be published: nothing newer has
            published and no newer refresh is still in flight
        """
        self._in_flight.discard(generation)
        current = generation > self._published and not any(
            g > generation for g in self._in_flight
        )
        if current:
            self._published = generation
        self._is_loading = self._has_pending()
        return current

    def _has_pending(self) -> bool:
        return any(g > self._published for g in self._in_flight)

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.warning("Feed listener failed", error=str(e))
